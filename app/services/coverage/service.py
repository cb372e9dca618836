import asyncio
import logging
from typing import Awaitable, Dict, Iterable, List, Optional, Sequence, Set

from app.core.config import settings
from app.core.taxonomy import (
    ALL_CATEGORIES,
    ALL_SCENARIOS_NAME,
    ALL_SEASONS,
    ItemCategory,
    SCENARIO_AGNOSTIC_CATEGORIES,
    Season,
    normalize_season,
)
from .calculator import CoverageCalculator
from .matcher import INTERCHANGEABLE, normalize_category
from .store import CoverageStore
from .types import (
    CategoryCoverage,
    CoverageCombination,
    CoverageResult,
    GapType,
    Scenario,
    WardrobeItem,
)

logger = logging.getLogger(__name__)


def _season_value(season) -> Optional[str]:
    if season is None:
        return None
    normalized = normalize_season(season)
    if normalized is None:
        raise ValueError(f"Unknown season: {season!r}")
    return normalized.value


def _by_priority(records: Iterable[CategoryCoverage]) -> List[CategoryCoverage]:
    return sorted(records, key=lambda r: r.priority_level)


class CoverageService:
    """
    Persistence flows and read surface on top of the pure calculator.

    Every write goes through `CoverageStore.upsert`, so recomputing a
    combination is always safe.
    """

    def __init__(
        self,
        store: CoverageStore,
        calculator: Optional[CoverageCalculator] = None,
        *,
        bulk_concurrency: Optional[int] = None,
    ):
        self.store = store
        self.calculator = calculator or CoverageCalculator()
        self.bulk_concurrency = bulk_concurrency or settings.COVERAGE_BULK_CONCURRENCY

    async def _gather_bounded(self, jobs: Sequence[Awaitable[List[CategoryCoverage]]]) -> List[CategoryCoverage]:
        sem = asyncio.Semaphore(self.bulk_concurrency)

        async def run(job):
            async with sem:
                return await job

        results = await asyncio.gather(*(run(j) for j in jobs))
        return [record for batch in results for record in batch]

    # ---- writes ----

    async def calculate_and_store(
        self,
        user_id: str,
        scenario: Optional[Scenario],
        season,
        category: ItemCategory,
        items: Sequence[WardrobeItem],
        scenarios: Optional[Sequence[Scenario]] = None,
    ) -> CoverageResult:
        """Compute and persist one (scenario, season, category); accessories write one row per subcategory."""
        result = self.calculator.calculate(
            user_id, scenario, _season_value(season), ItemCategory(category), items, scenarios
        )
        for record in result.records:
            await self.store.upsert(record)
        return result

    async def update_category_coverage(
        self,
        user_id: str,
        scenario: Optional[Scenario],
        season,
        category: ItemCategory,
        items: Sequence[WardrobeItem],
        scenarios: Optional[Sequence[Scenario]] = None,
    ) -> List[CategoryCoverage]:
        result = await self.calculate_and_store(user_id, scenario, season, category, items, scenarios)
        return result.records

    async def update_all_categories_for_scenario(
        self,
        user_id: str,
        scenario: Scenario,
        season,
        items: Sequence[WardrobeItem],
        scenarios: Optional[Sequence[Scenario]] = None,
    ) -> List[CategoryCoverage]:
        jobs = [
            self.update_category_coverage(user_id, scenario, season, category, items, scenarios)
            for category in ALL_CATEGORIES
        ]
        return await self._gather_bounded(jobs)

    async def initialize_new_scenario_coverage(
        self,
        user_id: str,
        scenario: Scenario,
        current_season,
        items: Sequence[WardrobeItem],
        scenarios: Optional[Sequence[Scenario]] = None,
    ) -> List[CategoryCoverage]:
        records = await self.update_all_categories_for_scenario(
            user_id, scenario, current_season, items, scenarios
        )
        logger.info(
            "coverage:init_scenario user=%s scenario=%s season=%s records=%d",
            user_id,
            scenario.name,
            _season_value(current_season),
            len(records),
        )
        return records

    async def initialize_complete_coverage_matrix(
        self,
        user_id: str,
        scenarios: Sequence[Scenario],
        items: Sequence[WardrobeItem],
    ) -> List[CategoryCoverage]:
        """Every scenario x season x category, fanned out with bounded concurrency."""
        jobs = [
            self.update_category_coverage(user_id, scenario, season, category, items, scenarios)
            for scenario in scenarios
            for season in ALL_SEASONS
            for category in ALL_CATEGORIES
        ]
        records = await self._gather_bounded(jobs)
        logger.info(
            "coverage:init_matrix user=%s combinations=%d records=%d",
            user_id,
            len(jobs),
            len(records),
        )
        return records

    # ---- item changes ----

    @staticmethod
    def affected_combinations(
        old_item: Optional[WardrobeItem],
        new_item: Optional[WardrobeItem],
        scenarios: Sequence[Scenario],
    ) -> Set[CoverageCombination]:
        """
        (scenario, season, category) triples whose counts an item add, edit
        or delete can change. Pass old_item=None for an add and new_item=None
        for a delete.
        """
        all_scenario_ids = [s.id for s in scenarios]
        combos: Set[CoverageCombination] = set()
        for item in (old_item, new_item):
            if item is None:
                continue
            item_category = normalize_category(item.category)
            if item_category is None:
                continue
            categories = {item_category} | {
                demand for demand, supply in INTERCHANGEABLE.items() if item_category in supply
            }

            seasons = {normalize_season(s) for s in (item.season or [])}
            seasons = {s for s in seasons if s in ALL_SEASONS} or set(ALL_SEASONS)

            for category in categories:
                if category in SCENARIO_AGNOSTIC_CATEGORIES:
                    scenario_ids: List[Optional[str]] = [None]
                else:
                    scenario_ids = [s for s in (item.scenarios or []) if s in all_scenario_ids] or list(
                        all_scenario_ids
                    )
                for scenario_id in scenario_ids:
                    for season in seasons:
                        combos.add(CoverageCombination(scenario_id, season, category))
        return combos

    async def recalculate_for_item_change(
        self,
        user_id: str,
        old_item: Optional[WardrobeItem],
        new_item: Optional[WardrobeItem],
        scenarios: Sequence[Scenario],
        items: Sequence[WardrobeItem],
    ) -> List[CategoryCoverage]:
        """`items` is the wardrobe after the change."""
        by_id: Dict[str, Scenario] = {s.id: s for s in scenarios}
        combos = self.affected_combinations(old_item, new_item, scenarios)
        jobs = [
            self.update_category_coverage(
                user_id,
                by_id.get(combo.scenario_id) if combo.scenario_id else None,
                combo.season,
                combo.category,
                items,
                scenarios,
            )
            for combo in combos
        ]
        records = await self._gather_bounded(jobs)
        logger.info(
            "coverage:item_change user=%s combinations=%d records=%d",
            user_id,
            len(combos),
            len(records),
        )
        return records

    # ---- reads ----

    async def get_category_coverage(
        self,
        user_id: str,
        category,
        season=None,
        scenarios: Optional[Sequence[Scenario]] = None,
        items: Optional[Sequence[WardrobeItem]] = None,
    ) -> List[CategoryCoverage]:
        """
        Stored coverage for one category, most urgent first.

        When both `scenarios` and `items` are supplied, any (scenario, season)
        combination with no stored record is computed, persisted and included.
        """
        category = ItemCategory(category)
        if category == ItemCategory.ACCESSORY:
            raise ValueError("Accessory coverage is per subcategory; use get_accessory_seasonal_coverage")
        season_value = _season_value(season)

        existing = await self.store.query(user_id, category=category.value, season=season_value)
        if scenarios is None or items is None:
            return existing

        seasons_to_check = [season_value] if season_value else [s.value for s in ALL_SEASONS]
        existing_keys = {(r.scenario_id, r.season) for r in existing}
        wanted: List[Optional[Scenario]] = (
            [None] if category == ItemCategory.OUTERWEAR else list(scenarios)
        )

        computed: List[CategoryCoverage] = []
        for scenario in wanted:
            scenario_id = scenario.id if scenario else None
            for season_to_check in seasons_to_check:
                if (scenario_id, season_to_check) in existing_keys:
                    continue
                logger.info(
                    "coverage:backfill user=%s scenario=%s season=%s category=%s",
                    user_id,
                    scenario.name if scenario else ALL_SCENARIOS_NAME,
                    season_to_check,
                    category.value,
                )
                computed.extend(
                    await self.update_category_coverage(
                        user_id, scenario, season_to_check, category, items, scenarios
                    )
                )
        return _by_priority(list(existing) + computed)

    async def get_outerwear_seasonal_coverage(self, user_id: str, season=None) -> List[CategoryCoverage]:
        return await self.store.query(
            user_id,
            category=ItemCategory.OUTERWEAR.value,
            season=_season_value(season),
            scenario_name=ALL_SCENARIOS_NAME,
        )

    async def get_accessory_seasonal_coverage(self, user_id: str, season=None) -> List[CategoryCoverage]:
        """Scenario-agnostic accessory rows; a season filter also keeps the all-seasons rows."""
        season_value = _season_value(season)
        records = await self.store.query(
            user_id,
            category=ItemCategory.ACCESSORY.value,
            season=season_value,
            scenario_name=ALL_SCENARIOS_NAME,
        )
        if season_value is not None and season_value != Season.ALL_SEASONS.value:
            records = records + await self.store.query(
                user_id,
                category=ItemCategory.ACCESSORY.value,
                season=Season.ALL_SEASONS.value,
                scenario_name=ALL_SCENARIOS_NAME,
            )
        return _by_priority(records)

    async def get_critical_gaps(self, user_id: str, limit: Optional[int] = None) -> List[CategoryCoverage]:
        return await self.store.query(
            user_id,
            gap_type=GapType.CRITICAL,
            limit=limit or settings.COVERAGE_CRITICAL_LIMIT,
        )
