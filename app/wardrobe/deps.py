from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.wardrobe.providers.sql import SqlItemPool


def get_item_pool(session: AsyncSession = Depends(get_session)) -> SqlItemPool:
    return SqlItemPool(session)
