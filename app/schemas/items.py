from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal

Category = Literal["top", "bottom", "shoes", "accessory"]
Occasion = Literal["formal", "casual", "sport", "family", "informal"]


def _strip_or_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: Category
    sub_category: Optional[str] = Field(None, max_length=64)
    color: Optional[str] = Field(None, max_length=64)
    image_url: Optional[str] = None
    occasion: Optional[Occasion] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name_required")
        return v

    @field_validator("sub_category", "color")
    @classmethod
    def _optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[Category] = None
    sub_category: Optional[str] = Field(None, max_length=64)
    color: Optional[str] = Field(None, max_length=64)
    image_url: Optional[str] = None
    occasion: Optional[Occasion] = None


class ItemOut(BaseModel):
    id: str
    name: str
    category: str
    sub_category: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None
    occasion: Optional[str] = None
    wear_count: int = 0
    last_worn_date: Optional[str] = None
    created_at: Optional[str] = None


class WearLogIn(BaseModel):
    worn_date: Optional[str] = None
