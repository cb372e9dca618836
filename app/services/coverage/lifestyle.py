"""
Lifestyle classification and the lifestyle-driven target tables.

Two archetypes only: people who mostly stay in (remote workers, home
keepers without outdoor errands) and everyone else. Unknown or mixed
activity sets are classified outdoor so targets err on the generous side.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from app.core.taxonomy import Season
from .types import CategoryTarget, LifestyleAnalysis, LifestyleType, Scenario

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
DETECTED_CONFIDENCE = 0.9

REMOTE_WORK_KEYWORDS = ("remote work",)
HOME_KEYWORDS = ("housekeeping", "staying at home")
OUTDOOR_KEYWORDS = ("driving", "playground", "school", "outdoor activities", "social outings")

# (keywords, reason) pairs reported for outdoor lifestyles, in report order
OUTDOOR_REASONS: List[Tuple[Tuple[str, ...], str]] = [
    (("office work",), "office commute"),
    (("driving",), "driving kids around"),
    (("playground",), "playground activities"),
    (OUTDOOR_KEYWORDS, "regular outdoor activities"),
]

SEASONAL_OUTERWEAR_TARGETS: Dict[str, CategoryTarget] = {
    Season.SUMMER.value: CategoryTarget(1, 2, 3),
    Season.WINTER.value: CategoryTarget(2, 3, 4),
    Season.TRANSITIONAL.value: CategoryTarget(3, 4, 5),
    "default": CategoryTarget(2, 3, 4),
}
INDOOR_OUTERWEAR_FACTOR = 0.7
INDOOR_OUTERWEAR_FLOORS = (1, 1, 2)

# Same minimum for both archetypes; outdoor lifestyles get more headroom
LIFESTYLE_TARGETS: Dict[str, Dict[LifestyleType, CategoryTarget]] = {
    "bags": {
        LifestyleType.INDOOR_FOCUSED: CategoryTarget(3, 4, 5),
        LifestyleType.OUTDOOR_FOCUSED: CategoryTarget(3, 5, 7),
    },
    "footwear": {
        LifestyleType.INDOOR_FOCUSED: CategoryTarget(3, 4, 5),
        LifestyleType.OUTDOOR_FOCUSED: CategoryTarget(3, 6, 8),
    },
}

ACCESSORY_MULTIPLIERS: Dict[LifestyleType, float] = {
    LifestyleType.INDOOR_FOCUSED: 0.8,
    LifestyleType.OUTDOOR_FOCUSED: 1.0,
}


def _any_name_contains(names: Sequence[str], keywords: Sequence[str]) -> bool:
    return any(keyword in name for name in names for keyword in keywords)


def _has_remote_work(names: Sequence[str]) -> bool:
    return _any_name_contains(names, REMOTE_WORK_KEYWORDS)


def _is_home_without_outdoor(names: Sequence[str]) -> bool:
    return _any_name_contains(names, HOME_KEYWORDS) and not _any_name_contains(names, OUTDOOR_KEYWORDS)


def _outdoor_factor(names: Sequence[str]) -> str:
    reasons = [reason for keywords, reason in OUTDOOR_REASONS if _any_name_contains(names, keywords)]
    if reasons:
        return f"Outdoor lifestyle: {', '.join(reasons)} - needs outerwear variety"
    return "Mixed or unclear activities, defaulting to outdoor for safety"


@dataclass(frozen=True)
class LifestyleRule:
    name: str
    matches: Callable[[Sequence[str]], bool]
    lifestyle: LifestyleType
    factor: Callable[[Sequence[str]], str]


# Evaluated in order; the first match wins
LIFESTYLE_RULES: List[LifestyleRule] = [
    LifestyleRule(
        "remote_work",
        _has_remote_work,
        LifestyleType.INDOOR_FOCUSED,
        lambda _names: "Works from home - minimal outerwear needs",
    ),
    LifestyleRule(
        "home_without_outdoor",
        _is_home_without_outdoor,
        LifestyleType.INDOOR_FOCUSED,
        lambda _names: "Home-focused lifestyle without outdoor activities - minimal outerwear needs",
    ),
]

OUTDOOR_DEFAULT_RULE = LifestyleRule(
    "outdoor_default",
    lambda _names: True,
    LifestyleType.OUTDOOR_FOCUSED,
    _outdoor_factor,
)


def detect_lifestyle_type(scenarios: Optional[Sequence[Scenario]]) -> LifestyleAnalysis:
    if not scenarios:
        return LifestyleAnalysis(
            type=LifestyleType.OUTDOOR_FOCUSED,
            confidence=DEFAULT_CONFIDENCE,
            factors=["No scenarios available - defaulting to outdoor lifestyle for safety"],
        )

    names = [(s.name or "").lower() for s in scenarios]
    rule = next((r for r in LIFESTYLE_RULES if r.matches(names)), OUTDOOR_DEFAULT_RULE)
    return LifestyleAnalysis(
        type=rule.lifestyle,
        confidence=DETECTED_CONFIDENCE,
        factors=[rule.factor(names)],
    )


def scenario_fingerprint(scenarios: Optional[Sequence[Scenario]]) -> str:
    return "|".join(sorted(f"{s.name}:{s.frequency or ''}" for s in scenarios or []))


class LifestyleCache:
    """
    Single-slot memo for the lifestyle classification.

    Holds only the most recent scenario set. Concurrent callers with
    different sets simply overwrite each other; every entry is a valid,
    recomputable classification.
    """

    def __init__(self) -> None:
        self._slot: Optional[Tuple[str, LifestyleAnalysis]] = None
        self.hits = 0
        self.misses = 0

    def get(self, scenarios: Optional[Sequence[Scenario]]) -> LifestyleAnalysis:
        key = scenario_fingerprint(scenarios)
        slot = self._slot
        if slot is not None and slot[0] == key:
            self.hits += 1
            return slot[1]
        self.misses += 1
        analysis = detect_lifestyle_type(scenarios)
        self._slot = (key, analysis)
        logger.debug("lifestyle:classified type=%s factors=%s", analysis.type.value, analysis.factors)
        return analysis

    def clear(self) -> None:
        self._slot = None


def get_outerwear_targets(season: str, lifestyle_type: LifestyleType) -> CategoryTarget:
    season_key = season.value if isinstance(season, Season) else season
    base = SEASONAL_OUTERWEAR_TARGETS.get(season_key, SEASONAL_OUTERWEAR_TARGETS["default"])
    if lifestyle_type == LifestyleType.INDOOR_FOCUSED:
        return base.scaled(INDOOR_OUTERWEAR_FACTOR, INDOOR_OUTERWEAR_FLOORS)
    return base


def get_lifestyle_targets(category: str, lifestyle_type: LifestyleType) -> CategoryTarget:
    """Fixed targets for bags and footwear. Other categories are a caller error."""
    if category not in LIFESTYLE_TARGETS:
        raise ValueError(f"no lifestyle targets defined for category {category!r}")
    return LIFESTYLE_TARGETS[category][lifestyle_type]


def get_lifestyle_multiplier(lifestyle_type: LifestyleType) -> float:
    return ACCESSORY_MULTIPLIERS[lifestyle_type]


def describe_lifestyle(scenarios: Optional[Sequence[Scenario]]) -> Dict[str, object]:
    """Lifestyle analysis plus a couple of example targets, for debugging."""
    analysis = detect_lifestyle_type(scenarios)
    outerwear = get_outerwear_targets(Season.TRANSITIONAL.value, analysis.type)
    bags = get_lifestyle_targets("bags", analysis.type)
    logger.info(
        "lifestyle:analysis type=%s confidence=%d%% spring_fall_outerwear=%s bags=%s",
        analysis.type.value,
        round(analysis.confidence * 100),
        outerwear.ideal,
        bags.ideal,
    )
    return {
        "analysis": analysis,
        "example_targets": {"spring_fall_outerwear": outerwear, "bags": bags},
    }
