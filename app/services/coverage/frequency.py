"""
Frequency parsing and outfit-need arithmetic.

A season is modelled as 13 weeks. Frequencies are free text entered during
onboarding ("5 times per week", "daily", "2 times per month"); anything we
cannot read falls back to a small default rather than failing.
"""
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional

WEEKS_PER_SEASON = 13
MONTHS_PER_SEASON = 3
DAILY_USES_PER_SEASON = 90
DEFAULT_USES_PER_SEASON = 5

_PER_WEEK_RE = re.compile(r"(\d+)\s*times?\s*per\s*week")
_PER_MONTH_RE = re.compile(r"(\d+)\s*times?\s*per\s*month")


def parse_frequency(frequency: Optional[str]) -> int:
    """Convert a frequency description into uses per season."""
    if not frequency or not isinstance(frequency, str):
        return DEFAULT_USES_PER_SEASON

    freq = frequency.lower()
    if "daily" in freq:
        return DAILY_USES_PER_SEASON
    if "per week" in freq:
        match = _PER_WEEK_RE.search(freq)
        times = int(match.group(1)) if match else 1
        return max(1, times) * WEEKS_PER_SEASON
    if "per month" in freq:
        match = _PER_MONTH_RE.search(freq)
        times = int(match.group(1)) if match else 1
        return max(1, times) * MONTHS_PER_SEASON
    return DEFAULT_USES_PER_SEASON


def calculate_outfit_needs(uses_per_season: float, variety_multiplier: float = 1.0) -> int:
    """
    Distinct outfits needed for a season.

    Low-frequency activities can repeat an outfit every 4 uses; anything used
    more than once a week needs twice its weekly count in variety.
    """
    adjusted = max(0.0, uses_per_season * variety_multiplier)
    per_week = adjusted / WEEKS_PER_SEASON
    if per_week <= 1:
        return max(1, math.ceil(adjusted / 4))
    return max(1, math.ceil(per_week * 2))


# Variety multipliers -------------------------------------------------------

HOME_MULTIPLIER = 0.6
UNIFORM_MULTIPLIER = 0.4
HIGH_VARIETY_MULTIPLIER = 1.0
MODERATE_VARIETY_MULTIPLIER = 0.7
LOW_VARIETY_MULTIPLIER = 0.4

HOME_KEYWORDS = ("home", "remote work", "staying at home", "housekeeping")
HIGH_VARIETY_NAMES = {"Office Work", "Creative Work", "School/University"}
STUDENT_SCENARIO = "School/University"


@dataclass(frozen=True)
class VarietyRule:
    name: str
    matches: Callable[[str, str], bool]
    multiplier: float


def _is_home(name: str, _description: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in HOME_KEYWORDS)


def _is_uniform_student(name: str, description: str) -> bool:
    return name == STUDENT_SCENARIO and "uniform" in description.lower()


def _is_high_variety(name: str, _description: str) -> bool:
    return name in HIGH_VARIETY_NAMES


def _is_social(name: str, _description: str) -> bool:
    # Case-sensitive on purpose: "Social gatherings" stays low variety
    return "social" in name or "dating" in name or "Social Outings" in name


# Evaluated top to bottom, first match wins
VARIETY_RULES = [
    VarietyRule("home", _is_home, HOME_MULTIPLIER),
    VarietyRule("uniform_student", _is_uniform_student, UNIFORM_MULTIPLIER),
    VarietyRule("high_variety", _is_high_variety, HIGH_VARIETY_MULTIPLIER),
    VarietyRule("social", _is_social, MODERATE_VARIETY_MULTIPLIER),
]


def resolve_variety_rule(name: Optional[str], description: Optional[str] = None) -> Optional[VarietyRule]:
    name = name or ""
    description = description or ""
    for rule in VARIETY_RULES:
        if rule.matches(name, description):
            return rule
    return None


def get_variety_multiplier(name: Optional[str], description: Optional[str] = None) -> float:
    rule = resolve_variety_rule(name, description)
    return rule.multiplier if rule else LOW_VARIETY_MULTIPLIER
