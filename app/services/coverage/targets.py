"""
Min/ideal/max item targets per category.

Tops, bottoms and one-pieces scale with the number of distinct outfits an
activity needs. Spring/fall gets larger coefficients and floors than summer
or winter because layering multiplies the useful variety. Outerwear and
footwear come from the lifestyle tables instead of the outfit count.
"""
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from app.core.taxonomy import ItemCategory, Season
from .lifestyle import get_lifestyle_targets, get_outerwear_targets
from .types import CategoryTarget, LifestyleAnalysis, LifestyleType

# Category-level baseline only; real accessory targets are per subcategory
ACCESSORY_FALLBACK_TARGET = CategoryTarget(3, 5, 8)
OTHER_TARGET = CategoryTarget(0, 2, 4)


@dataclass(frozen=True)
class ClothingFormula:
    """Coefficients of outfits-needed per bound, each with a floor."""
    coefficients: Tuple[float, float, float]
    floors: Tuple[int, int, int]

    def apply(self, outfits_needed: int) -> CategoryTarget:
        lo, mid, hi = (
            max(floor, math.ceil(outfits_needed * coef)) if coef else floor
            for coef, floor in zip(self.coefficients, self.floors)
        )
        return CategoryTarget(min=lo, ideal=mid, max=hi)


CLOTHING_FORMULAS: Dict[ItemCategory, Dict[bool, ClothingFormula]] = {
    # keyed by "is transitional season"
    ItemCategory.TOP: {
        True: ClothingFormula((0.5, 0.7, 1.2), (4, 8, 12)),
        False: ClothingFormula((0.4, 0.6, 1.0), (3, 5, 8)),
    },
    ItemCategory.BOTTOM: {
        True: ClothingFormula((0.3, 0.5, 0.8), (3, 5, 8)),
        False: ClothingFormula((0.25, 0.4, 0.6), (2, 3, 5)),
    },
    ItemCategory.ONE_PIECE: {
        True: ClothingFormula((0.0, 0.3, 0.6), (0, 2, 4)),
        False: ClothingFormula((0.0, 0.25, 0.5), (0, 1, 3)),
    },
}


def is_transitional(season: str) -> bool:
    season_key = season.value if isinstance(season, Season) else season
    return season_key == Season.TRANSITIONAL.value


def clothing_targets(category: ItemCategory, outfits_needed: int, season: str) -> CategoryTarget:
    formula = CLOTHING_FORMULAS[category][is_transitional(season)]
    return formula.apply(outfits_needed)


def _lifestyle_type(lifestyle: Optional[LifestyleAnalysis]) -> LifestyleType:
    # No analysis means nothing to go on; outdoor yields the larger targets
    return lifestyle.type if lifestyle else LifestyleType.OUTDOOR_FOCUSED


def category_targets(
    category: ItemCategory,
    outfits_needed: int,
    season: str,
    lifestyle: Optional[LifestyleAnalysis] = None,
) -> CategoryTarget:
    """Targets for one category. Accessories are broken down further in accessories.py."""
    category = ItemCategory(category)
    if category in CLOTHING_FORMULAS:
        return clothing_targets(category, outfits_needed, season)
    if category == ItemCategory.OUTERWEAR:
        return get_outerwear_targets(season, _lifestyle_type(lifestyle))
    if category == ItemCategory.FOOTWEAR:
        return get_lifestyle_targets("footwear", _lifestyle_type(lifestyle))
    if category == ItemCategory.ACCESSORY:
        return ACCESSORY_FALLBACK_TARGET
    return OTHER_TARGET
