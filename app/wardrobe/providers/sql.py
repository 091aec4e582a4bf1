from datetime import date
from typing import Optional
import logging

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import today_local
from app.core.errors import NotFoundError, StorageError
from app.models.models import WardrobeItem
from app.recs.types import PoolItem

logger = logging.getLogger("app.wardrobe")


def to_pool_item(row: WardrobeItem) -> PoolItem:
    return PoolItem(
        id=str(row.id),
        owner_id=str(row.user_id),
        name=row.name,
        category=row.category,
        sub_category=row.sub_category,
        color=row.color,
        image_url=row.image_url,
        occasion=row.occasion,
        wear_count=row.wear_count or 0,
        last_worn_date=row.last_worn_date,
        created_at=row.created_at,
    )


class SqlItemPool:
    """Item pool backed by the ``wardrobe_item`` table.

    Wear counters are changed with a single UPDATE using column arithmetic, so
    two sessions accepting outfits at once cannot lose an increment.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_items(self, owner_id: str, occasion: Optional[str] = None) -> list[PoolItem]:
        q = select(WardrobeItem).where(WardrobeItem.user_id == owner_id).order_by(WardrobeItem.created_at.asc())
        if occasion:
            q = q.where(WardrobeItem.occasion == occasion)
        try:
            res = await self.session.execute(q)
        except SQLAlchemyError as e:
            logger.exception("list_items failed owner=%s", owner_id)
            raise StorageError("could not load wardrobe items") from e
        return [to_pool_item(row) for row in res.scalars().all()]

    async def record_wear(self, owner_id: str, item_id: str, worn_on: Optional[date] = None) -> PoolItem:
        stmt = (
            update(WardrobeItem)
            .where(WardrobeItem.id == item_id, WardrobeItem.user_id == owner_id)
            .values(wear_count=WardrobeItem.wear_count + 1, last_worn_date=worn_on or today_local())
        )
        return await self._apply(stmt, owner_id, item_id)

    async def undo_wear(self, owner_id: str, item_id: str) -> PoolItem:
        stmt = (
            update(WardrobeItem)
            .where(WardrobeItem.id == item_id, WardrobeItem.user_id == owner_id)
            .values(wear_count=case((WardrobeItem.wear_count > 0, WardrobeItem.wear_count - 1), else_=0))
        )
        return await self._apply(stmt, owner_id, item_id)

    async def _apply(self, stmt, owner_id: str, item_id: str) -> PoolItem:
        try:
            res = await self.session.execute(stmt.execution_options(synchronize_session=False))
            if res.rowcount == 0:
                await self.session.rollback()
                raise NotFoundError(item_id)
            await self.session.commit()
            row = await self.session.get(WardrobeItem, item_id, populate_existing=True)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("wear update failed owner=%s item=%s", owner_id, item_id)
            raise StorageError("could not update wear statistics") from e
        if row is None:
            raise NotFoundError(item_id)
        return to_pool_item(row)
