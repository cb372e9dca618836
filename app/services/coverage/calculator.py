import logging
from typing import Optional, Sequence

from app.core.taxonomy import (
    ALL_SCENARIOS_NAME,
    ItemCategory,
    Season,
    SCENARIO_AGNOSTIC_CATEGORIES,
)
from .accessories import calculate_accessory_coverage
from .evaluator import classify_gap, coverage_percent, determine_priority
from .frequency import (
    DEFAULT_USES_PER_SEASON,
    calculate_outfit_needs,
    get_variety_multiplier,
    parse_frequency,
)
from .lifestyle import LifestyleCache
from .matcher import match_items
from .targets import category_targets
from .types import (
    CategoryCoverage,
    CoverageResult,
    LifestyleAnalysis,
    Scenario,
    SingleCoverage,
    SubcategoryCoverageList,
    WardrobeItem,
)

logger = logging.getLogger(__name__)


class CoverageCalculator:
    """Pure coverage computation for one (scenario, season, category)."""

    def __init__(self, lifestyle_cache: Optional[LifestyleCache] = None):
        self.lifestyle_cache = lifestyle_cache or LifestyleCache()

    def lifestyle_for(self, scenarios: Optional[Sequence[Scenario]]) -> Optional[LifestyleAnalysis]:
        if not scenarios:
            return None
        return self.lifestyle_cache.get(scenarios)

    def outfits_needed(self, category: ItemCategory, scenario: Optional[Scenario]) -> int:
        # Outerwear follows the weather, not how often an activity happens
        if category == ItemCategory.OUTERWEAR or scenario is None:
            return calculate_outfit_needs(DEFAULT_USES_PER_SEASON)
        uses = parse_frequency(scenario.frequency)
        multiplier = get_variety_multiplier(scenario.name, scenario.description)
        return calculate_outfit_needs(uses, multiplier)

    def calculate(
        self,
        user_id: str,
        scenario: Optional[Scenario],
        season: str,
        category: ItemCategory,
        items: Sequence[WardrobeItem],
        scenarios: Optional[Sequence[Scenario]] = None,
    ) -> CoverageResult:
        category = ItemCategory(category)
        season_value = season.value if isinstance(season, Season) else season
        lifestyle = self.lifestyle_for(scenarios)

        if category == ItemCategory.ACCESSORY:
            owned = match_items(items, category, Season.ALL_SEASONS.value)
            records = calculate_accessory_coverage(user_id, season_value, owned, lifestyle)
            return SubcategoryCoverageList(records)

        target = category_targets(category, self.outfits_needed(category, scenario), season_value, lifestyle)
        scenario_id = scenario.id if scenario else None
        current = len(match_items(items, category, season_value, scenario_id))
        gap_type, gap_count = classify_gap(current, target)

        agnostic = category in SCENARIO_AGNOSTIC_CATEGORIES or scenario is None
        record = CategoryCoverage(
            user_id=user_id,
            scenario_id=None if agnostic else scenario_id,
            scenario_name=ALL_SCENARIOS_NAME if agnostic else scenario.name,
            scenario_frequency=None if agnostic else scenario.frequency,
            season=season_value,
            category=category.value,
            current_items=current,
            needed_items_min=target.min,
            needed_items_ideal=target.ideal,
            needed_items_max=target.max,
            coverage_percent=coverage_percent(current, target.ideal),
            gap_count=gap_count,
            gap_type=gap_type,
            priority_level=determine_priority(category, current, gap_count, gap_type),
        )
        logger.debug(
            "coverage:%s scenario=%s season=%s current=%d target=%d/%d/%d gap=%s",
            category.value,
            record.scenario_name,
            season_value,
            current,
            target.min,
            target.ideal,
            target.max,
            gap_type.value,
        )
        return SingleCoverage(record)
