from enum import Enum
from typing import Optional


class ItemCategory(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    ONE_PIECE = "one_piece"
    OUTERWEAR = "outerwear"
    FOOTWEAR = "footwear"
    ACCESSORY = "accessory"
    OTHER = "other"


class Season(str, Enum):
    SUMMER = "summer"
    WINTER = "winter"
    TRANSITIONAL = "spring/fall"
    # Non-seasonal accessory records are stored under this marker
    ALL_SEASONS = "all_seasons"


ALL_CATEGORIES: list[ItemCategory] = [
    ItemCategory.TOP,
    ItemCategory.BOTTOM,
    ItemCategory.ONE_PIECE,
    ItemCategory.OUTERWEAR,
    ItemCategory.FOOTWEAR,
    ItemCategory.ACCESSORY,
    ItemCategory.OTHER,
]

# Real seasons a coverage matrix is built for
ALL_SEASONS: list[Season] = [Season.SUMMER, Season.WINTER, Season.TRANSITIONAL]

# Categories usable across every activity
SCENARIO_AGNOSTIC_CATEGORIES = {ItemCategory.OUTERWEAR, ItemCategory.ACCESSORY}

ALL_SCENARIOS_NAME = "All scenarios"

ACCESSORY_SUBCATEGORIES = [
    "Jewelry",
    "Bag",
    "Belt",
    "Scarf",
    "Hat",
    "Sunglasses",
    "Watch",
    "Socks",
    "Tights",
]
SEASONAL_ACCESSORY_SUBCATEGORIES = {"Scarf", "Hat", "Tights", "Socks"}
NON_SEASONAL_ACCESSORY_SUBCATEGORIES = {"Bag", "Belt", "Jewelry", "Watch", "Sunglasses"}
BAG_TYPES = {"Handbag", "Backpack", "Tote", "Clutch", "Wallet", "Purse"}
DEFAULT_ACCESSORY_SUBCATEGORY = "Jewelry"

_SEASON_ALIASES = {
    "spring": Season.TRANSITIONAL,
    "fall": Season.TRANSITIONAL,
    "autumn": Season.TRANSITIONAL,
    "spring/fall": Season.TRANSITIONAL,
    "summer": Season.SUMMER,
    "winter": Season.WINTER,
    "all_seasons": Season.ALL_SEASONS,
}


def normalize_season(value: Optional[str]) -> Optional[Season]:
    """Map a free-form season tag onto the coverage seasons, or None."""
    if value is None:
        return None
    if isinstance(value, Season):
        return value
    return _SEASON_ALIASES.get(value.strip().lower())


def is_seasonal_accessory(subcategory: str) -> bool:
    return subcategory in SEASONAL_ACCESSORY_SUBCATEGORIES
