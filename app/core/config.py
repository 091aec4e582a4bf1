from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    APP_NAME: str = "Wardrobe Rotation API"
    APP_ENV: str = "dev"
    API_PREFIX: str = "/v1"
    SECRET_KEY: str = "change-me"
    DATABASE_URL: str = "sqlite+aiosqlite:///./wardrobe.db"
    CORS_ORIGINS: str = "*"
    # Auth
    JWT_ALG: str = "HS256"
    JWT_ACCESS_TTL_SECONDS: int = 3600
    JWT_REFRESH_TTL_SECONDS: int = 2592000
    # Wear logging; "today" is computed in this zone
    WEAR_TIMEZONE: str = "UTC"
    # Recommender knobs
    RECS_NEVER_WORN_DAYS: int = 30
    RECS_WEAR_PENALTY: float = 0.1
    RECS_SESSION_TTL_S: int = 7200
    RECS_MAX_SESSIONS_PER_USER: int = 5

    @property
    def cors_origin_list(self) -> List[str]:
        val = self.CORS_ORIGINS
        if not val: return []
        if val == "*": return ["*"]
        return [v.strip() for v in val.split(",")]

settings = Settings()
