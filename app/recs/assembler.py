from datetime import date
from typing import Dict, Iterable, List, Optional
import logging
import random

from app.core.dates import today_local
from app.core.errors import InsufficientWardrobeError
from app.core.taxonomy import OUTFIT_SLOTS, slot_for_category
from app.recs.config import RecsConfig
from app.recs.sampler import pick_weighted
from app.recs.types import Outfit, PoolItem
from app.wardrobe.providers.base import ItemPool

logger = logging.getLogger("app.recs")


def filter_by_occasion(items: Iterable[PoolItem], occasion: Optional[str]) -> List[PoolItem]:
    # exact match, same spelling the item was tagged with
    if not occasion:
        return list(items)
    return [it for it in items if it.occasion == occasion]


def partition_by_slot(items: Iterable[PoolItem]) -> Dict[str, List[PoolItem]]:
    slots: Dict[str, List[PoolItem]] = {s: [] for s in OUTFIT_SLOTS}
    for it in items:
        slot = slot_for_category(it.category)
        if slot is not None:
            slots[slot].append(it)
    return slots


def missing_slots(slots: Dict[str, List[PoolItem]]) -> List[str]:
    return [s for s in OUTFIT_SLOTS if not slots.get(s)]


def assemble_outfit(
    items: Iterable[PoolItem],
    occasion: Optional[str] = None,
    *,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
    config: RecsConfig = RecsConfig(),
) -> Outfit:
    """Pick one top, one bottom and one pair of shoes from ``items``.

    Raises InsufficientWardrobeError listing every empty slot; nothing is
    sampled in that case.
    """
    slots = partition_by_slot(filter_by_occasion(items, occasion))
    missing = missing_slots(slots)
    if missing:
        raise InsufficientWardrobeError(missing, occasion=occasion)

    rng = rng or random.Random()
    today = today or today_local()
    picked = tuple(pick_weighted(slots[s], rng, today=today, config=config) for s in OUTFIT_SLOTS)
    outfit = Outfit(items=picked, occasion=occasion)
    logger.info("outfit generated id=%s occasion=%s items=%s", outfit.id, occasion, outfit.item_ids)
    return outfit


async def assemble_from_pool(
    pool: ItemPool,
    owner_id: str,
    occasion: Optional[str] = None,
    *,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
    config: RecsConfig = RecsConfig(),
) -> Outfit:
    items = await pool.list_items(owner_id, occasion)
    return assemble_outfit(items, occasion, rng=rng, today=today, config=config)


def count_outfits(items: Iterable[PoolItem], occasion: Optional[str] = None) -> int:
    slots = partition_by_slot(filter_by_occasion(items, occasion))
    total = 1
    for s in OUTFIT_SLOTS:
        total *= len(slots[s])
    return total
