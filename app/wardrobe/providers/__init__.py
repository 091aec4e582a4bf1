from app.wardrobe.providers.base import ItemPool
from app.wardrobe.providers.in_memory import InMemoryItemPool
from app.wardrobe.providers.sql import SqlItemPool

__all__ = ["ItemPool", "InMemoryItemPool", "SqlItemPool"]
