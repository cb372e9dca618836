from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.core.taxonomy import ItemCategory
from app.services.coverage.types import (
    CategoryCoverage,
    CategoryTarget,
    GapType,
    LifestyleType,
    Scenario,
    WardrobeItem,
)


class ScenarioIn(BaseModel):
    id: str
    name: str
    frequency: str = ""
    description: Optional[str] = None

    def to_domain(self, user_id: str) -> Scenario:
        return Scenario(
            id=self.id,
            name=self.name,
            frequency=self.frequency,
            user_id=user_id,
            description=self.description,
        )


class WardrobeItemIn(BaseModel):
    id: str
    category: str
    name: str = ""
    subcategory: Optional[str] = None
    season: Optional[List[str]] = None
    scenarios: Optional[List[str]] = None
    wishlist: Optional[bool] = None

    def to_domain(self) -> WardrobeItem:
        return WardrobeItem(
            id=self.id,
            category=self.category,
            name=self.name,
            subcategory=self.subcategory,
            season=self.season,
            scenarios=self.scenarios,
            wishlist=self.wishlist,
        )


class WardrobeSnapshot(BaseModel):
    """Scenarios and items as the caller currently sees them."""
    scenarios: List[ScenarioIn] = Field(default_factory=list)
    items: List[WardrobeItemIn] = Field(default_factory=list)

    def domain_scenarios(self, user_id: str) -> List[Scenario]:
        return [s.to_domain(user_id) for s in self.scenarios]

    def domain_items(self) -> List[WardrobeItem]:
        return [i.to_domain() for i in self.items]


class CalculateCoverageIn(WardrobeSnapshot):
    season: str
    category: ItemCategory
    scenario_id: Optional[str] = Field(default=None, description="Omit for the scenario-agnostic view")


class CategoryCoverageOut(BaseModel):
    scenario_id: Optional[str]
    scenario_name: str
    scenario_frequency: Optional[str] = None
    season: str
    category: str
    subcategory: Optional[str] = None
    current_items: int
    needed_items_min: int
    needed_items_ideal: int
    needed_items_max: int
    coverage_percent: int = Field(..., ge=0, le=100)
    gap_count: int
    gap_type: GapType
    priority_level: int = Field(..., ge=1, le=5)
    last_updated: datetime

    @classmethod
    def from_record(cls, record: CategoryCoverage) -> "CategoryCoverageOut":
        return cls(
            scenario_id=record.scenario_id,
            scenario_name=record.scenario_name,
            scenario_frequency=record.scenario_frequency,
            season=record.season,
            category=record.category,
            subcategory=record.subcategory,
            current_items=record.current_items,
            needed_items_min=record.needed_items_min,
            needed_items_ideal=record.needed_items_ideal,
            needed_items_max=record.needed_items_max,
            coverage_percent=record.coverage_percent,
            gap_count=record.gap_count,
            gap_type=record.gap_type,
            priority_level=record.priority_level,
            last_updated=record.last_updated,
        )


class CoverageResultOut(BaseModel):
    kind: Literal["single", "subcategories"]
    records: List[CategoryCoverageOut]


class CoverageListOut(BaseModel):
    records: List[CategoryCoverageOut]
    count: int


class ScenariosIn(BaseModel):
    scenarios: List[ScenarioIn] = Field(default_factory=list)


class TargetOut(BaseModel):
    min: int
    ideal: int
    max: int

    @classmethod
    def from_target(cls, target: CategoryTarget) -> "TargetOut":
        return cls(min=target.min, ideal=target.ideal, max=target.max)


class LifestyleOut(BaseModel):
    type: LifestyleType
    confidence: float = Field(..., gt=0, le=1)
    factors: List[str]
    spring_fall_outerwear: TargetOut
    bags: TargetOut
