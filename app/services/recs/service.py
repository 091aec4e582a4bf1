from typing import Dict, Optional
import logging
import random

from app.core.taxonomy import OCCASIONS
from app.recs.assembler import assemble_from_pool, count_outfits
from app.recs.config import RecsConfig
from app.recs.history import OutfitNavigator
from app.recs.sessions import BrowseSession, SessionStore
from app.recs.types import AcceptResult, Direction, HistoryView, Outfit
from app.wardrobe.providers.base import ItemPool

logger = logging.getLogger("app.recs")


class RecommendationService:
    def __init__(
        self,
        pool: ItemPool,
        sessions: SessionStore,
        config: RecsConfig | None = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.pool = pool
        self.sessions = sessions
        self.config = config or RecsConfig()
        self.rng = rng or random.Random()

    async def generate_recommendation(self, owner_id: str, occasion: Optional[str] = None) -> Outfit:
        return await assemble_from_pool(self.pool, owner_id, occasion, rng=self.rng, config=self.config)

    def open_session(self, owner_id: str) -> BrowseSession:
        sess = self.sessions.create(owner_id, OutfitNavigator(owner_id, rng=self.rng, config=self.config))
        logger.info("browse session opened id=%s", sess.id)
        return sess

    async def select_occasion(self, owner_id: str, session_id: str, occasion: Optional[str]) -> HistoryView:
        """Restart the session's history for ``occasion`` and generate its first outfit.

        A failed generation leaves the session open with empty history, so the
        client can retry with ``navigate("next")`` once items are added.
        """
        sess = self.sessions.get(owner_id, session_id)
        return await sess.navigator.select_occasion(self.pool, occasion)

    def session_state(self, owner_id: str, session_id: str) -> BrowseSession:
        return self.sessions.get(owner_id, session_id)

    async def navigate_history(self, owner_id: str, session_id: str, direction: Direction) -> Optional[HistoryView]:
        sess = self.sessions.get(owner_id, session_id)
        return await sess.navigator.navigate(self.pool, direction)

    async def accept_outfit(self, owner_id: str, session_id: str) -> AcceptResult:
        sess = self.sessions.get(owner_id, session_id)
        return await sess.navigator.accept_current(self.pool)

    def end_session(self, owner_id: str, session_id: str) -> None:
        sess = self.sessions.get(owner_id, session_id)
        sess.navigator.reset()
        self.sessions.drop(owner_id, session_id)

    async def wardrobe_analysis(self, owner_id: str) -> Dict[str, int]:
        items = await self.pool.list_items(owner_id)
        return {occ: count_outfits(items, occ) for occ in OCCASIONS}
