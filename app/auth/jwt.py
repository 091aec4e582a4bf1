import time
import jwt
from typing import Any, Dict

from app.core.config import settings


def _mint(user_id: str, typ: str, ttl: int, **claims: Any) -> str:
    now = int(time.time())
    payload = {"sub": user_id, "iat": now, "exp": now + ttl, "typ": typ, **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def mint_access(user_id: str, name: str | None = None) -> str:
    extra = {"name": name} if name else {}
    return _mint(user_id, "access", settings.JWT_ACCESS_TTL_SECONDS, **extra)


def mint_refresh(user_id: str) -> str:
    return _mint(user_id, "refresh", settings.JWT_REFRESH_TTL_SECONDS)


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
