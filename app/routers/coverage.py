from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import get_current_user_id
from app.core.config import settings
from app.core.db import get_session
from app.schemas.coverage import (
    CalculateCoverageIn,
    CategoryCoverageOut,
    CoverageListOut,
    CoverageResultOut,
    LifestyleOut,
    ScenariosIn,
    TargetOut,
    WardrobeSnapshot,
)
from app.services.coverage import (
    CoverageCalculator,
    CoverageService,
    CoverageStore,
    InMemoryCoverageStore,
    SqlAlchemyCoverageStore,
    SubcategoryCoverageList,
    describe_lifestyle,
)
from app.services.coverage.types import CategoryCoverage

router = APIRouter(prefix="/coverage", tags=["coverage"])

# Shared so the lifestyle cache survives across requests
calculator = CoverageCalculator()
memory_store = InMemoryCoverageStore()


async def get_coverage_store(session: AsyncSession = Depends(get_session)) -> AsyncIterator[CoverageStore]:
    if settings.COVERAGE_STORE == "memory":
        yield memory_store
    else:
        yield SqlAlchemyCoverageStore(session)


def get_coverage_service(store: CoverageStore = Depends(get_coverage_store)) -> CoverageService:
    return CoverageService(store, calculator)


def _list_out(records: List[CategoryCoverage]) -> CoverageListOut:
    return CoverageListOut(records=[CategoryCoverageOut.from_record(r) for r in records], count=len(records))


@router.post("/calculate", response_model=CoverageResultOut)
async def calculate_coverage(
    body: CalculateCoverageIn,
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    scenarios = body.domain_scenarios(user_id)
    scenario = None
    if body.scenario_id is not None:
        scenario = next((s for s in scenarios if s.id == body.scenario_id), None)
        if scenario is None:
            raise HTTPException(status_code=400, detail="scenario_not_in_snapshot")
    try:
        result = await service.calculate_and_store(
            user_id, scenario, body.season, body.category, body.domain_items(), scenarios
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    kind = "subcategories" if isinstance(result, SubcategoryCoverageList) else "single"
    return CoverageResultOut(kind=kind, records=[CategoryCoverageOut.from_record(r) for r in result.records])


@router.post("/initialize", response_model=CoverageListOut)
async def initialize_coverage(
    body: WardrobeSnapshot,
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    records = await service.initialize_complete_coverage_matrix(
        user_id, body.domain_scenarios(user_id), body.domain_items()
    )
    return _list_out(records)


@router.get("/categories/{category}", response_model=CoverageListOut)
async def get_category_coverage(
    category: str,
    season: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    try:
        records = await service.get_category_coverage(user_id, category, season)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _list_out(records)


@router.post("/categories/{category}/query", response_model=CoverageListOut)
async def query_category_coverage(
    category: str,
    body: WardrobeSnapshot,
    season: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    try:
        records = await service.get_category_coverage(
            user_id, category, season, body.domain_scenarios(user_id), body.domain_items()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _list_out(records)


@router.get("/outerwear", response_model=CoverageListOut)
async def get_outerwear_coverage(
    season: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    try:
        records = await service.get_outerwear_seasonal_coverage(user_id, season)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _list_out(records)


@router.get("/accessories", response_model=CoverageListOut)
async def get_accessory_coverage(
    season: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    try:
        records = await service.get_accessory_seasonal_coverage(user_id, season)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _list_out(records)


@router.get("/critical", response_model=CoverageListOut)
async def get_critical_gaps(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: CoverageService = Depends(get_coverage_service),
):
    return _list_out(await service.get_critical_gaps(user_id, limit))


@router.post("/lifestyle", response_model=LifestyleOut)
async def analyze_lifestyle(
    body: ScenariosIn,
    user_id: str = Depends(get_current_user_id),
):
    described = describe_lifestyle([s.to_domain(user_id) for s in body.scenarios])
    analysis = described["analysis"]
    targets = described["example_targets"]
    return LifestyleOut(
        type=analysis.type,
        confidence=analysis.confidence,
        factors=analysis.factors,
        spring_fall_outerwear=TargetOut.from_target(targets["spring_fall_outerwear"]),
        bags=TargetOut.from_target(targets["bags"]),
    )
