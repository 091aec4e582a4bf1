from fastapi import APIRouter, Depends, HTTPException
from jwt import PyJWTError
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.db import get_session
from app.auth.deps import get_current_user_id
from app.auth.jwt import mint_access, mint_refresh, decode_token
from app.auth.passwords import hash_pw, verify_pw
from app.models.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


class SignupIn(BaseModel):
    name: str = Field(..., max_length=200)
    password: str


class LoginIn(BaseModel):
    name: str
    password: str


class UserOut(BaseModel):
    id: str
    name: str


class TokenOut(BaseModel):
    access: str
    refresh: str
    user: UserOut | None = None


class RefreshIn(BaseModel):
    refresh: str


def _name_key(name: str) -> str:
    return name.strip().lower()


def _tokens(user: User) -> TokenOut:
    return TokenOut(
        access=mint_access(str(user.id), user.name),
        refresh=mint_refresh(str(user.id)),
        user=UserOut(id=str(user.id), name=user.name),
    )


@router.post("/signup", response_model=TokenOut, status_code=201)
async def signup(body: SignupIn, session: AsyncSession = Depends(get_session)):
    name = body.name.strip()
    if len(name) < 2:
        raise HTTPException(status_code=400, detail="name_too_short")
    if len(body.password) < 4:
        raise HTTPException(status_code=400, detail="password_too_short")
    existing = await session.execute(select(User).where(User.name_key == _name_key(name)))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="name_taken")
    user = User(name=name, name_key=_name_key(name), password_hash=hash_pw(body.password))
    session.add(user)
    await session.commit()
    return _tokens(user)


@router.post("/login", response_model=TokenOut)
async def login(body: LoginIn, session: AsyncSession = Depends(get_session)):
    res = await session.execute(select(User).where(User.name_key == _name_key(body.name)))
    user = res.scalar_one_or_none()
    if not user or not verify_pw(user.password_hash, body.password):
        raise HTTPException(status_code=401, detail="invalid_credentials")
    return _tokens(user)


@router.post("/refresh", response_model=TokenOut)
async def refresh_token(body: RefreshIn):
    try:
        data = decode_token(body.refresh)
    except PyJWTError:
        raise HTTPException(status_code=401, detail="invalid_refresh")
    if data.get("typ") != "refresh":
        raise HTTPException(status_code=401, detail="invalid_refresh")
    uid = data["sub"]
    return TokenOut(access=mint_access(uid), refresh=mint_refresh(uid))


@router.get("/me", response_model=UserOut)
async def me(session: AsyncSession = Depends(get_session), user_id: str = Depends(get_current_user_id)):
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="user_not_found")
    return UserOut(id=str(user.id), name=user.name)
