from .wardrobe_fixtures import TODAY, FlakyItemPool, basic_wardrobe, make_item, roomy_wardrobe

__all__ = [
    "TODAY",
    "FlakyItemPool",
    "basic_wardrobe",
    "make_item",
    "roomy_wardrobe",
]
