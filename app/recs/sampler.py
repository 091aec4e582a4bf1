"""Recency-weighted random pick of one item from a slot's candidates.

Items that have gone longer without being worn weigh more; items with a high
total wear count are damped regardless of recency so a long-idle favourite
does not dominate every draw.
"""
from datetime import date
from typing import Optional, Sequence
import logging
import random

from app.core.dates import today_local
from app.core.errors import EmptyPoolError
from app.recs.config import RecsConfig
from app.recs.types import PoolItem

logger = logging.getLogger("app.recs")

_DEFAULT_CONFIG = RecsConfig()


def days_since_worn(item: PoolItem, today: date, config: RecsConfig = _DEFAULT_CONFIG) -> int:
    if item.last_worn_date is None:
        return config.never_worn_days
    return max(config.min_days, (today - item.last_worn_date).days)


def item_weight(item: PoolItem, today: date, config: RecsConfig = _DEFAULT_CONFIG) -> float:
    days = days_since_worn(item, today, config)
    return max(1, days) / (1 + item.wear_count * config.wear_penalty)


def pick_weighted(
    items: Sequence[PoolItem],
    rng: Optional[random.Random] = None,
    *,
    today: Optional[date] = None,
    config: RecsConfig = _DEFAULT_CONFIG,
) -> PoolItem:
    if not items:
        raise EmptyPoolError("weighted pick called with no candidates")
    rng = rng or random.Random()
    today = today or today_local()

    weights = [item_weight(it, today, config) for it in items]
    total = sum(weights)
    r = rng.random() * total
    for item, weight in zip(items, weights):
        r -= weight
        if r <= 0:
            logger.debug("pick item=%s weight=%.3f total=%.3f", item.id, weight, total)
            return item
    # float drift can leave r a hair above zero after the last subtraction
    return items[-1]
