from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4
import logging

from app.core.errors import SessionExpiredError, SessionNotFoundError
from app.recs.config import RecsConfig
from app.recs.history import OutfitNavigator

logger = logging.getLogger("app.recs")


@dataclass
class BrowseSession:
    id: str
    owner_id: str
    navigator: OutfitNavigator
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Browsing sessions kept in process memory; nothing here is persisted.

    Every ``create`` sweeps expired sessions of all owners and evicts the
    owner's least recently used live session once ``max_per_owner`` is reached.
    """

    def __init__(
        self,
        ttl_s: int = 7200,
        now: Callable[[], datetime] = _utcnow,
        max_per_owner: int = 5,
    ) -> None:
        self.ttl = timedelta(seconds=ttl_s)
        self.max_per_owner = max_per_owner
        self._now = now
        self._sessions: dict[str, BrowseSession] = {}

    @classmethod
    def from_config(cls, config: RecsConfig) -> "SessionStore":
        return cls(ttl_s=config.session_ttl_s, max_per_owner=config.max_sessions_per_owner)

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, owner_id: str, navigator: Optional[OutfitNavigator] = None) -> BrowseSession:
        self.purge_expired()
        live = sorted(
            (s for s in self._sessions.values() if s.owner_id == owner_id),
            key=lambda s: s.expires_at,
        )
        for old in live[: max(0, len(live) - self.max_per_owner + 1)]:
            del self._sessions[old.id]
            logger.info("browse session evicted id=%s owner=%s", old.id, owner_id)
        sess = BrowseSession(
            id=str(uuid4()),
            owner_id=owner_id,
            navigator=navigator or OutfitNavigator(owner_id),
            expires_at=self._now() + self.ttl,
        )
        self._sessions[sess.id] = sess
        return sess

    def get(self, owner_id: str, session_id: str) -> BrowseSession:
        sess = self._sessions.get(session_id)
        if sess is None or sess.owner_id != owner_id:
            raise SessionNotFoundError(session_id)
        now = self._now()
        if sess.expires_at < now:
            self._sessions.pop(session_id, None)
            raise SessionExpiredError(session_id)
        sess.expires_at = now + self.ttl
        return sess

    def drop(self, owner_id: str, session_id: str) -> None:
        sess = self._sessions.get(session_id)
        if sess is None or sess.owner_id != owner_id:
            raise SessionNotFoundError(session_id)
        del self._sessions[session_id]

    def purge_expired(self, owner_id: Optional[str] = None) -> int:
        now = self._now()
        stale = [
            sid
            for sid, s in self._sessions.items()
            if s.expires_at < now and (owner_id is None or s.owner_id == owner_id)
        ]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)
