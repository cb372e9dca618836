from typing import Tuple

from app.core.taxonomy import ItemCategory
from .types import CategoryTarget, GapType

SATISFIED_GAP_TYPES = {GapType.SATISFIED, GapType.OVERSATURATED}


def coverage_percent(current_items: int, ideal: int) -> int:
    if ideal <= 0:
        return 100
    return round(min(100.0, current_items / ideal * 100))


def classify_gap(current_items: int, target: CategoryTarget) -> Tuple[GapType, int]:
    """Five-tier gap classification; returns (gap type, items missing)."""
    if current_items == 0:
        return GapType.CRITICAL, target.ideal
    if current_items < target.min:
        return GapType.CRITICAL, target.min - current_items
    if current_items < target.ideal:
        return GapType.IMPROVEMENT, target.ideal - current_items
    if current_items < target.max:
        return GapType.EXPANSION, target.max - current_items
    if current_items == target.max:
        return GapType.SATISFIED, 0
    return GapType.OVERSATURATED, 0


def classify_accessory_gap(current_items: int, target: CategoryTarget) -> Tuple[GapType, int]:
    """Accessories are optional: an empty drawer is an improvement, never critical."""
    gap_type, gap = classify_gap(current_items, target)
    if gap_type == GapType.CRITICAL:
        return GapType.IMPROVEMENT, max(gap, target.ideal - current_items)
    return gap_type, gap


def determine_priority(
    category: ItemCategory,
    current_items: int,
    gap_count: int,
    gap_type: GapType,
) -> int:
    if category == ItemCategory.ACCESSORY:
        return 4 if current_items == 0 else 5
    if gap_type == GapType.CRITICAL:
        return 1
    if category == ItemCategory.FOOTWEAR and current_items < 2:
        return 2
    if category in (ItemCategory.TOP, ItemCategory.BOTTOM) and gap_count > 3:
        return 2
    if gap_count > 0:
        return 3
    return 4
