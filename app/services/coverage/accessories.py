"""
Accessory coverage, one record per subcategory.

Bags take fixed lifestyle targets. Every other subcategory scales a share of
the outfit count by the lifestyle accessory multiplier and clamps the ideal
into a hand-tuned range. Scarves, hats, tights and socks are evaluated for
the requested season; the rest are stored under the "all seasons" marker.
No subcategory depends on the scenario.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from app.core.taxonomy import (
    ACCESSORY_SUBCATEGORIES,
    ALL_SCENARIOS_NAME,
    BAG_TYPES,
    DEFAULT_ACCESSORY_SUBCATEGORY,
    ItemCategory,
    Season,
    is_seasonal_accessory,
)
from .evaluator import classify_accessory_gap, coverage_percent, determine_priority
from .frequency import DEFAULT_USES_PER_SEASON, calculate_outfit_needs
from .lifestyle import get_lifestyle_multiplier, get_lifestyle_targets
from .matcher import matches_season
from .types import CategoryCoverage, CategoryTarget, GapType, LifestyleAnalysis, WardrobeItem

logger = logging.getLogger(__name__)

# Bag targets when no lifestyle analysis is available
DEFAULT_BAG_TARGET = CategoryTarget(3, 4, 6)
UNCAPPED_MAX = 999


@dataclass(frozen=True)
class SubcategoryRule:
    coefficient: float
    ideal_floor: int
    ideal_ceiling: int
    max: int
    scale_by_lifestyle: bool = True

    def target(self, outfits_needed: int, multiplier: float) -> CategoryTarget:
        factor = multiplier if self.scale_by_lifestyle else 1.0
        raw = math.ceil(outfits_needed * self.coefficient * factor)
        ideal = min(self.ideal_ceiling, max(self.ideal_floor, raw))
        return CategoryTarget(min=0, ideal=ideal, max=self.max)


SUBCATEGORY_RULES: Dict[str, SubcategoryRule] = {
    # Jewelry is collected rather than needed, so there is no real maximum
    "Jewelry": SubcategoryRule(0.4, 3, 12, UNCAPPED_MAX),
    "Belt": SubcategoryRule(0.2, 2, 5, 8),
    "Scarf": SubcategoryRule(0.15, 2, 6, 10),
    "Hat": SubcategoryRule(0.08, 1, 3, 5),
    "Sunglasses": SubcategoryRule(0.05, 1, 3, 4),
    "Watch": SubcategoryRule(0.03, 1, 2, 3, scale_by_lifestyle=False),
    "Socks": SubcategoryRule(0.3, 3, 8, 12, scale_by_lifestyle=False),
    "Tights": SubcategoryRule(0.1, 2, 4, 6, scale_by_lifestyle=False),
}


def accessory_subcategory_targets(
    outfits_needed: int,
    lifestyle: Optional[LifestyleAnalysis] = None,
) -> Dict[str, CategoryTarget]:
    if lifestyle is not None:
        bag_target = get_lifestyle_targets("bags", lifestyle.type)
        multiplier = get_lifestyle_multiplier(lifestyle.type)
    else:
        bag_target = DEFAULT_BAG_TARGET
        multiplier = 1.0

    targets: Dict[str, CategoryTarget] = {}
    for name in ACCESSORY_SUBCATEGORIES:
        if name == "Bag":
            targets[name] = bag_target
        else:
            targets[name] = SUBCATEGORY_RULES[name].target(outfits_needed, multiplier)
    return targets


def resolve_subcategory(item: WardrobeItem) -> str:
    """Canonical accessory subcategory; bag styles fold into "Bag", unknowns into Jewelry."""
    subcategory = (item.subcategory or "").strip()
    if not subcategory:
        logger.warning(
            "accessory %r has no subcategory, defaulting to %s", item.name, DEFAULT_ACCESSORY_SUBCATEGORY
        )
        return DEFAULT_ACCESSORY_SUBCATEGORY
    for candidate in (subcategory, subcategory.title()):
        if candidate in BAG_TYPES:
            return "Bag"
        if candidate in ACCESSORY_SUBCATEGORIES:
            return candidate
    logger.warning(
        "accessory %r has unknown subcategory %r, defaulting to %s",
        item.name,
        item.subcategory,
        DEFAULT_ACCESSORY_SUBCATEGORY,
    )
    return DEFAULT_ACCESSORY_SUBCATEGORY


def group_by_subcategory(items: Iterable[WardrobeItem]) -> Dict[str, List[WardrobeItem]]:
    groups: Dict[str, List[WardrobeItem]] = {}
    for item in items:
        groups.setdefault(resolve_subcategory(item), []).append(item)
    return groups


def _expansion_gap(name: str, current: int, gap_type: GapType, gap_count: int) -> int:
    rule = SUBCATEGORY_RULES.get(name)
    if gap_type != GapType.EXPANSION or rule is None or rule.max != UNCAPPED_MAX:
        return gap_count
    # growth room for collectibles is measured to the ideal ceiling, not to 999
    return max(1, rule.ideal_ceiling - current)


def calculate_accessory_coverage(
    user_id: str,
    season: str,
    accessory_items: Iterable[WardrobeItem],
    lifestyle: Optional[LifestyleAnalysis] = None,
) -> List[CategoryCoverage]:
    """
    Build one coverage record per accessory subcategory.

    `accessory_items` must already be restricted to owned accessories; season
    filtering happens here because it depends on the subcategory. Accessories
    ignore scenarios, so every record is stored under "All scenarios".
    """
    outfits_needed = calculate_outfit_needs(DEFAULT_USES_PER_SEASON)
    targets = accessory_subcategory_targets(outfits_needed, lifestyle)
    groups = group_by_subcategory(accessory_items)
    season_value = season.value if isinstance(season, Season) else season

    records: List[CategoryCoverage] = []
    for name, target in targets.items():
        seasonal = is_seasonal_accessory(name)
        members = groups.get(name, [])
        if seasonal:
            members = [item for item in members if matches_season(item, season_value)]

        current = len(members)
        gap_type, gap_count = classify_accessory_gap(current, target)
        gap_count = _expansion_gap(name, current, gap_type, gap_count)
        record = CategoryCoverage(
            user_id=user_id,
            scenario_id=None,
            scenario_name=ALL_SCENARIOS_NAME,
            scenario_frequency=None,
            season=season_value if seasonal else Season.ALL_SEASONS.value,
            category=ItemCategory.ACCESSORY.value,
            subcategory=name,
            current_items=current,
            needed_items_min=target.min,
            needed_items_ideal=target.ideal,
            needed_items_max=target.max,
            coverage_percent=coverage_percent(current, target.ideal),
            gap_count=gap_count,
            gap_type=gap_type,
            priority_level=determine_priority(ItemCategory.ACCESSORY, current, gap_count, gap_type),
        )
        logger.debug(
            "accessory:%s season=%s current=%d ideal=%d gap=%s",
            name,
            record.season,
            current,
            target.ideal,
            gap_type.value,
        )
        records.append(record)
    return records
