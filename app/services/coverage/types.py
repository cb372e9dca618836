from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple, Union

from app.core.taxonomy import ItemCategory, Season


class LifestyleType(str, Enum):
    INDOOR_FOCUSED = "indoor_focused"
    OUTDOOR_FOCUSED = "outdoor_focused"


class GapType(str, Enum):
    CRITICAL = "critical"
    IMPROVEMENT = "improvement"
    EXPANSION = "expansion"
    SATISFIED = "satisfied"
    OVERSATURATED = "oversaturated"


@dataclass(frozen=True)
class Scenario:
    """A recurring activity the user declared, e.g. "Office Work" 5 times per week."""
    id: str
    name: str
    frequency: str = ""
    user_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class WardrobeItem:
    """Closet entry as supplied by the item-management subsystem."""
    id: str
    category: str
    name: str = ""
    subcategory: Optional[str] = None
    season: Optional[List[str]] = None  # None or [] = all seasons
    scenarios: Optional[List[str]] = None
    wishlist: Optional[bool] = None  # True = not owned


@dataclass(frozen=True)
class LifestyleAnalysis:
    type: LifestyleType
    confidence: float  # 0.5 for the no-scenario default, else 0.9
    factors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryTarget:
    min: int
    ideal: int
    max: int

    def scaled(self, factor: float, floors: Tuple[int, int, int]) -> "CategoryTarget":
        """Multiply and floor each bound, then enforce per-bound minimums."""
        return CategoryTarget(
            min=max(floors[0], int(self.min * factor)),
            ideal=max(floors[1], int(self.ideal * factor)),
            max=max(floors[2], int(self.max * factor)),
        )


@dataclass
class CategoryCoverage:
    """Persisted coverage record for one (scenario, season, category, subcategory)."""
    user_id: str
    scenario_id: Optional[str]
    scenario_name: str
    season: str
    category: str
    current_items: int
    needed_items_min: int
    needed_items_ideal: int
    needed_items_max: int
    coverage_percent: int
    gap_count: int
    gap_type: GapType
    priority_level: int  # 1 = most urgent, 5 = least
    subcategory: Optional[str] = None
    scenario_frequency: Optional[str] = None
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> Tuple[str, Optional[str], str, str, Optional[str]]:
        return (self.user_id, self.scenario_id, self.season, self.category, self.subcategory)


@dataclass(frozen=True)
class SingleCoverage:
    record: CategoryCoverage

    @property
    def records(self) -> List[CategoryCoverage]:
        return [self.record]


@dataclass(frozen=True)
class SubcategoryCoverageList:
    """Accessory result: one record per accessory subcategory."""
    items: List[CategoryCoverage]

    @property
    def records(self) -> List[CategoryCoverage]:
        return list(self.items)


CoverageResult = Union[SingleCoverage, SubcategoryCoverageList]


@dataclass(frozen=True)
class CoverageCombination:
    """One (scenario, season, category) triple to recompute."""
    scenario_id: Optional[str]
    season: Season
    category: ItemCategory
