from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Union

from fastapi import HTTPException

from app.core.taxonomy import normalize_color
from app.models.models import WardrobeItem
from app.recs.types import Outfit, PoolItem
from app.schemas.items import ItemOut
from app.schemas.recs import OutfitOut

EDITABLE_FIELDS = ("name", "category", "sub_category", "color", "image_url", "occasion")


def _apply_updates(item: WardrobeItem, data: Dict[str, Any]) -> None:
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == "name":
            value = (value or "").strip()
            if not value:
                raise HTTPException(status_code=422, detail="name_required")
        elif field == "category" and value is None:
            raise HTTPException(status_code=422, detail="category_required")
        elif field == "color":
            value = normalize_color(value)
        elif field == "sub_category" and value is not None:
            value = value.strip() or None
        setattr(item, field, value)


def _parse_worn_date(worn_date_str: Optional[str]) -> Optional[date]:
    if not worn_date_str:
        return None
    try:
        return date.fromisoformat(worn_date_str)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid_worn_date") from e


def _build_item_out(item: Union[WardrobeItem, PoolItem]) -> ItemOut:
    last_worn = item.last_worn_date
    created = item.created_at
    return ItemOut(
        id=str(item.id),
        name=item.name,
        category=item.category,
        sub_category=item.sub_category,
        color=item.color,
        image_url=item.image_url,
        occasion=item.occasion,
        wear_count=item.wear_count or 0,
        last_worn_date=last_worn.isoformat() if last_worn else None,
        created_at=created.isoformat() if created else None,
    )


def _build_outfit_out(outfit: Outfit) -> OutfitOut:
    return OutfitOut(
        id=outfit.id,
        occasion=outfit.occasion,
        items=[_build_item_out(it) for it in outfit.items],
        created_at=outfit.created_at.isoformat(),
    )
