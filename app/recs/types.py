from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Literal, Optional, Tuple
import itertools
import time

Direction = Literal["prev", "next"]


@dataclass(frozen=True)
class PoolItem:
    """Read-only snapshot of a wardrobe item as seen by the recommender."""
    id: str
    owner_id: str
    name: str
    category: str
    sub_category: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None
    occasion: Optional[str] = None
    wear_count: int = 0
    last_worn_date: Optional[date] = None
    created_at: Optional[datetime] = None


_outfit_seq = itertools.count()


def new_outfit_id() -> str:
    # epoch millis, then a process-wide counter, so ids sort by creation order
    return f"{int(time.time() * 1000):013d}-{next(_outfit_seq) % 16**8:08x}"


@dataclass(frozen=True)
class Outfit:
    items: Tuple[PoolItem, ...]
    occasion: Optional[str] = None
    id: str = field(default_factory=new_outfit_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def item_ids(self) -> List[str]:
        return [it.id for it in self.items]


@dataclass(frozen=True)
class HistoryView:
    outfit: Outfit
    index: int
    total: int


@dataclass(frozen=True)
class AcceptResult:
    view: HistoryView
    worn: List[PoolItem]
    failed: List[str]
