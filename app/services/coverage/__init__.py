from .calculator import CoverageCalculator
from .frequency import calculate_outfit_needs, get_variety_multiplier, parse_frequency
from .lifestyle import (
    LifestyleCache,
    describe_lifestyle,
    detect_lifestyle_type,
    get_lifestyle_multiplier,
    get_lifestyle_targets,
    get_outerwear_targets,
)
from .service import CoverageService
from .store import CoverageStore, InMemoryCoverageStore, SqlAlchemyCoverageStore
from .types import (
    CategoryCoverage,
    CategoryTarget,
    CoverageCombination,
    CoverageResult,
    GapType,
    LifestyleAnalysis,
    LifestyleType,
    Scenario,
    SingleCoverage,
    SubcategoryCoverageList,
    WardrobeItem,
)

__all__ = [
    "CoverageCalculator",
    "CoverageService",
    "CoverageStore",
    "InMemoryCoverageStore",
    "SqlAlchemyCoverageStore",
    "LifestyleCache",
    "parse_frequency",
    "get_variety_multiplier",
    "calculate_outfit_needs",
    "detect_lifestyle_type",
    "describe_lifestyle",
    "get_outerwear_targets",
    "get_lifestyle_targets",
    "get_lifestyle_multiplier",
    "CategoryCoverage",
    "CategoryTarget",
    "CoverageCombination",
    "CoverageResult",
    "GapType",
    "LifestyleAnalysis",
    "LifestyleType",
    "Scenario",
    "SingleCoverage",
    "SubcategoryCoverageList",
    "WardrobeItem",
]
