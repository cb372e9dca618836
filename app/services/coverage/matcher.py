from typing import Iterable, List, Optional

from app.core.taxonomy import (
    ItemCategory,
    Season,
    SCENARIO_AGNOSTIC_CATEGORIES,
    normalize_season,
)
from .types import WardrobeItem

_CATEGORY_ALIASES = {
    "one-piece": ItemCategory.ONE_PIECE,
    "onepiece": ItemCategory.ONE_PIECE,
    "one piece": ItemCategory.ONE_PIECE,
    "dress": ItemCategory.ONE_PIECE,
    "tops": ItemCategory.TOP,
    "bottoms": ItemCategory.BOTTOM,
    "shoes": ItemCategory.FOOTWEAR,
    "accessories": ItemCategory.ACCESSORY,
}

# One-pieces cover the top and the bottom of an outfit at once
INTERCHANGEABLE = {
    ItemCategory.TOP: {ItemCategory.TOP, ItemCategory.ONE_PIECE},
    ItemCategory.BOTTOM: {ItemCategory.BOTTOM, ItemCategory.ONE_PIECE},
}


def normalize_category(value: Optional[str]) -> Optional[ItemCategory]:
    if value is None:
        return None
    if isinstance(value, ItemCategory):
        return value
    key = value.strip().lower()
    try:
        return ItemCategory(key)
    except ValueError:
        return _CATEGORY_ALIASES.get(key)


def is_owned(item: WardrobeItem) -> bool:
    return not item.wishlist


def matches_category(item: WardrobeItem, category: ItemCategory) -> bool:
    item_category = normalize_category(item.category)
    if item_category is None:
        return False
    return item_category in INTERCHANGEABLE.get(category, {category})


def matches_season(item: WardrobeItem, season: str) -> bool:
    if not item.season:
        return True
    wanted = normalize_season(season)
    if wanted == Season.ALL_SEASONS:
        return True
    return any(normalize_season(s) == wanted for s in item.season)


def matches_scenario(item: WardrobeItem, scenario_id: Optional[str]) -> bool:
    if scenario_id is None:
        return False
    return scenario_id in (item.scenarios or [])


def match_items(
    items: Iterable[WardrobeItem],
    category: ItemCategory,
    season: str,
    scenario_id: Optional[str] = None,
) -> List[WardrobeItem]:
    """Owned items counting toward (category, season, scenario) demand."""
    category = ItemCategory(category)
    ignore_scenario = category in SCENARIO_AGNOSTIC_CATEGORIES
    return [
        item
        for item in items
        if is_owned(item)
        and matches_category(item, category)
        and matches_season(item, season)
        and (ignore_scenario or matches_scenario(item, scenario_id))
    ]
