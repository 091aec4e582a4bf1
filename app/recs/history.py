"""Per-session outfit history with prev/next paging.

``prev`` only ever replays; ``next`` replays while there is history ahead of
the cursor and generates a fresh outfit once the cursor sits on the last
entry. Accepting an outfit logs a wear for each of its items and always
generates, discarding anything that was ahead of the cursor: those outfits
were sampled with wear statistics that are now out of date. If the wears are
logged but no new outfit can be generated, the accepted outfit stays current
and accepting it again only retries the generation.
"""
from datetime import date
from typing import Callable, List, Optional, Tuple
import logging
import random

from app.core.dates import today_local
from app.core.errors import (
    AcceptedNotAdvancedError,
    InsufficientWardrobeError,
    NoCurrentOutfitError,
    NotFoundError,
    StorageError,
    WearLoggingError,
)
from app.recs.assembler import assemble_from_pool
from app.recs.config import RecsConfig
from app.recs.types import AcceptResult, Direction, HistoryView, Outfit, PoolItem
from app.wardrobe.providers.base import ItemPool

logger = logging.getLogger("app.recs")


class OutfitNavigator:
    def __init__(
        self,
        owner_id: str,
        *,
        rng: Optional[random.Random] = None,
        config: RecsConfig = RecsConfig(),
        clock: Callable[[], date] = today_local,
    ) -> None:
        self.owner_id = owner_id
        self.occasion: Optional[str] = None
        self.history: List[Outfit] = []
        self.cursor = 0
        self._rng = rng or random.Random()
        self._config = config
        self._clock = clock
        # (outfit id, worn, failed) of an accept still waiting for its next outfit
        self._accepted: Optional[Tuple[str, List[PoolItem], List[str]]] = None

    @property
    def current(self) -> Optional[Outfit]:
        if not self.history:
            return None
        return self.history[self.cursor]

    def view(self) -> Optional[HistoryView]:
        if not self.history:
            return None
        return HistoryView(outfit=self.history[self.cursor], index=self.cursor, total=len(self.history))

    def reset(self) -> None:
        self.occasion = None
        self.history = []
        self.cursor = 0
        self._accepted = None

    async def select_occasion(self, pool: ItemPool, occasion: Optional[str]) -> HistoryView:
        self.reset()
        self.occasion = occasion
        return await self.request_new(pool)

    async def request_new(self, pool: ItemPool) -> HistoryView:
        outfit = await self._generate(pool)
        self.history.append(outfit)
        self._accepted = None
        self.cursor = len(self.history) - 1
        return self.view()

    async def navigate(self, pool: ItemPool, direction: Direction) -> Optional[HistoryView]:
        if direction == "prev":
            if self.cursor > 0:
                self.cursor -= 1
            return self.view()
        if direction != "next":
            raise ValueError(f"unknown direction {direction!r}")
        if self.cursor < len(self.history) - 1:
            self.cursor += 1
            return self.view()
        return await self.request_new(pool)

    async def accept_current(self, pool: ItemPool) -> AcceptResult:
        outfit = self.current
        if outfit is None:
            raise NoCurrentOutfitError("no outfit to accept")

        if self._accepted is not None and self._accepted[0] == outfit.id:
            # wears were logged by an earlier accept whose generation failed
            _, worn, failed = self._accepted
        else:
            worn, failed = await self._log_wears(pool, outfit)
            self.history = self.history[: self.cursor + 1]
            self._accepted = (outfit.id, worn, failed)

        try:
            new_outfit = await self._generate(pool)
        except (InsufficientWardrobeError, StorageError) as e:
            logger.warning("outfit accepted but not advanced id=%s reason=%s", outfit.id, e)
            raise AcceptedNotAdvancedError(outfit.id, [it.id for it in worn], failed, e) from e
        self._accepted = None
        self.history.append(new_outfit)
        self.cursor = len(self.history) - 1
        logger.info("outfit accepted id=%s worn=%d failed=%d", outfit.id, len(worn), len(failed))
        return AcceptResult(view=self.view(), worn=worn, failed=failed)

    async def _log_wears(self, pool: ItemPool, outfit: Outfit) -> Tuple[List[PoolItem], List[str]]:
        today = self._clock()
        worn: List[PoolItem] = []
        failed: List[str] = []
        for item in outfit.items:
            try:
                worn.append(await pool.record_wear(self.owner_id, item.id, worn_on=today))
            except (NotFoundError, StorageError) as e:
                logger.warning("wear log failed outfit=%s item=%s reason=%s", outfit.id, item.id, e)
                failed.append(item.id)
        if not worn:
            raise WearLoggingError(failed)
        return worn, failed

    async def _generate(self, pool: ItemPool) -> Outfit:
        return await assemble_from_pool(
            pool,
            self.owner_id,
            self.occasion,
            rng=self._rng,
            today=self._clock(),
            config=self._config,
        )
