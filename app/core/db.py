"""Database engine and session management."""

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.core.config import settings


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    # aiosqlite connections are bound to the loop that opened them
    return {"poolclass": NullPool}


engine = create_async_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))
AsyncSessionFactory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session():
    """Yield a managed asynchronous SQLAlchemy session."""
    async with AsyncSessionFactory() as session:
        yield session


async def init_db() -> None:
    """Create database tables if they do not exist."""
    from app.models import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
