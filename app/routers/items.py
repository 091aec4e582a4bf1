from typing import Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.db import get_session
from app.core.taxonomy import normalize_color
from app.auth.deps import get_current_user_id
from app.models.models import WardrobeItem
from app.routers.items_helpers import _apply_updates, _build_item_out, _parse_worn_date
from app.schemas.items import Category, ItemCreate, ItemOut, ItemUpdate, Occasion, WearLogIn
from app.wardrobe.deps import get_item_pool
from app.wardrobe.providers.sql import SqlItemPool

router = APIRouter(prefix="/items", tags=["items"])
# Use uvicorn logger so INFO messages show up in container logs
logger = logging.getLogger("uvicorn.error")


async def _owned_item(session: AsyncSession, item_id: str, user_id: str) -> WardrobeItem:
    item = await session.get(WardrobeItem, item_id)
    if not item or str(item.user_id) != str(user_id):
        raise HTTPException(status_code=404, detail="item_not_found")
    return item


@router.get("", response_model=list[ItemOut])
async def list_items(
    occasion: Optional[Occasion] = Query(None),
    category: Optional[Category] = Query(None),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    q = select(WardrobeItem).where(WardrobeItem.user_id == user_id).order_by(WardrobeItem.created_at.desc())
    if occasion:
        q = q.where(WardrobeItem.occasion == occasion)
    if category:
        q = q.where(WardrobeItem.category == category)
    res = await session.execute(q)
    return [_build_item_out(i) for i in res.scalars().all()]


@router.post("", response_model=ItemOut, status_code=201)
async def create_item(
    payload: ItemCreate,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    item = WardrobeItem(
        user_id=user_id,
        name=payload.name,
        category=payload.category,
        sub_category=payload.sub_category,
        color=normalize_color(payload.color),
        image_url=payload.image_url,
        occasion=payload.occasion,
        wear_count=0,
    )
    session.add(item)
    await session.commit()
    await session.refresh(item)
    logger.info("item created id=%s category=%s occasion=%s", item.id, item.category, item.occasion)
    return _build_item_out(item)


@router.get("/{item_id}", response_model=ItemOut)
async def get_item(
    item_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    return _build_item_out(await _owned_item(session, item_id, user_id))


@router.patch("/{item_id}", response_model=ItemOut)
async def update_item(
    item_id: str,
    payload: ItemUpdate,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    item = await _owned_item(session, item_id, user_id)
    _apply_updates(item, payload.model_dump(exclude_unset=True))
    await session.commit()
    await session.refresh(item)
    return _build_item_out(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    item = await _owned_item(session, item_id, user_id)
    await session.delete(item)
    await session.commit()
    return None


@router.post("/{item_id}/wear", response_model=ItemOut)
async def log_item_wear(
    item_id: str,
    payload: Optional[WearLogIn] = None,
    pool: SqlItemPool = Depends(get_item_pool),
    user_id: str = Depends(get_current_user_id),
):
    """Increment the wear count and stamp the last-worn date (today unless given)."""
    worn_on = _parse_worn_date(payload.worn_date if payload else None)
    item = await pool.record_wear(user_id, item_id, worn_on=worn_on)
    return _build_item_out(item)


@router.post("/{item_id}/unwear", response_model=ItemOut)
async def undo_item_wear(
    item_id: str,
    pool: SqlItemPool = Depends(get_item_pool),
    user_id: str = Depends(get_current_user_id),
):
    """Undo one wear; the count never drops below zero."""
    item = await pool.undo_wear(user_id, item_id)
    return _build_item_out(item)
