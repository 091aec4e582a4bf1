from datetime import date
from typing import Optional, Protocol
from app.recs.types import PoolItem


class ItemPool(Protocol):
    async def list_items(self, owner_id: str, occasion: Optional[str] = None) -> list[PoolItem]:
        ...

    async def record_wear(self, owner_id: str, item_id: str, worn_on: Optional[date] = None) -> PoolItem:
        ...

    async def undo_wear(self, owner_id: str, item_id: str) -> PoolItem:
        ...
