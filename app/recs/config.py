from dataclasses import dataclass

from app.core.config import settings


@dataclass(frozen=True)
class RecsConfig:
    never_worn_days: int = 30
    min_days: int = 1
    wear_penalty: float = 0.1
    session_ttl_s: int = 7200
    max_sessions_per_owner: int = 5

    @classmethod
    def from_settings(cls) -> "RecsConfig":
        return cls(
            never_worn_days=settings.RECS_NEVER_WORN_DAYS,
            wear_penalty=settings.RECS_WEAR_PENALTY,
            session_ttl_s=settings.RECS_SESSION_TTL_S,
            max_sessions_per_owner=settings.RECS_MAX_SESSIONS_PER_USER,
        )
