from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from app.core.dates import today_local
from app.core.errors import NotFoundError
from app.recs.types import PoolItem


class InMemoryItemPool:
    def __init__(self, items: Iterable[PoolItem] = ()) -> None:
        self._items: dict[str, PoolItem] = {}
        for it in items:
            self.put(it)

    def put(self, item: PoolItem) -> None:
        self._items[item.id] = item

    def get(self, item_id: str) -> Optional[PoolItem]:
        return self._items.get(item_id)

    def remove(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def _owned(self, owner_id: str, item_id: str) -> PoolItem:
        item = self._items.get(item_id)
        if item is None or item.owner_id != owner_id:
            raise NotFoundError(item_id)
        return item

    async def list_items(self, owner_id: str, occasion: Optional[str] = None) -> list[PoolItem]:
        return [
            it
            for it in self._items.values()
            if it.owner_id == owner_id and (not occasion or it.occasion == occasion)
        ]

    async def record_wear(self, owner_id: str, item_id: str, worn_on: Optional[date] = None) -> PoolItem:
        item = self._owned(owner_id, item_id)
        updated = replace(item, wear_count=item.wear_count + 1, last_worn_date=worn_on or today_local())
        self._items[item_id] = updated
        return updated

    async def undo_wear(self, owner_id: str, item_id: str) -> PoolItem:
        item = self._owned(owner_id, item_id)
        updated = replace(item, wear_count=max(0, item.wear_count - 1))
        self._items[item_id] = updated
        return updated
