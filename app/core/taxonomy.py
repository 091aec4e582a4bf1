from typing import Dict, List, Optional

OCCASIONS: List[str] = ["formal", "casual", "sport", "family", "informal"]

# Slots filled by a generated outfit, in display order
OUTFIT_SLOTS: List[str] = ["top", "bottom", "shoes"]

# Category -> slot; accessories never take part in a generated outfit
CATEGORY_TO_SLOT: Dict[str, str] = {
    "top": "top",
    "bottom": "bottom",
    "shoes": "shoes",
}


def slot_for_category(category: str) -> Optional[str]:
    return CATEGORY_TO_SLOT.get(category)


def normalize_color(color: Optional[str]) -> Optional[str]:
    if color is None:
        return None
    cleaned = color.strip()
    return cleaned.lower() if cleaned else None
