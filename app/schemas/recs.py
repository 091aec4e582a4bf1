from typing import Dict, List, Literal, Optional
from pydantic import BaseModel

from app.schemas.items import ItemOut, Occasion


class OutfitOut(BaseModel):
    id: str
    occasion: Optional[str] = None
    items: List[ItemOut]
    created_at: str


class SessionStartIn(BaseModel):
    occasion: Optional[Occasion] = None


class NavigateIn(BaseModel):
    direction: Literal["prev", "next"]


class HistoryOut(BaseModel):
    session_id: str
    occasion: Optional[str] = None
    outfit: Optional[OutfitOut] = None
    index: int = 0
    total: int = 0


class AcceptOut(HistoryOut):
    worn: List[ItemOut]
    failed: List[str] = []


class WardrobeAnalysisOut(BaseModel):
    counts: Dict[str, int]
