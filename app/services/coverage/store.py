"""
Coverage record store.

Records are keyed by (user, scenario, season, category, subcategory) where a
missing scenario or subcategory is a key value of its own: NULL matches only
NULL. Writes are upserts on that key.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.models import WardrobeCoverage
from .types import CategoryCoverage, GapType

CoverageKey = tuple


class CoverageStore(Protocol):
    async def exists(self, key: CoverageKey) -> bool:
        ...

    async def upsert(self, record: CategoryCoverage) -> CategoryCoverage:
        ...

    async def query(
        self,
        user_id: str,
        *,
        category: Optional[str] = None,
        season: Optional[str] = None,
        scenario_name: Optional[str] = None,
        gap_type: Optional[GapType] = None,
        limit: Optional[int] = None,
    ) -> List[CategoryCoverage]:
        ...


def _matches(
    record: CategoryCoverage,
    category: Optional[str],
    season: Optional[str],
    scenario_name: Optional[str],
    gap_type: Optional[GapType],
) -> bool:
    if category is not None and record.category != category:
        return False
    if season is not None and record.season != season:
        return False
    if scenario_name is not None and record.scenario_name != scenario_name:
        return False
    if gap_type is not None and record.gap_type != gap_type:
        return False
    return True


class InMemoryCoverageStore:
    def __init__(self) -> None:
        self._records: Dict[CoverageKey, CategoryCoverage] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def exists(self, key: CoverageKey) -> bool:
        return key in self._records

    async def upsert(self, record: CategoryCoverage) -> CategoryCoverage:
        record.last_updated = datetime.now(timezone.utc)
        self._records[record.key] = record
        return record

    async def query(
        self,
        user_id: str,
        *,
        category: Optional[str] = None,
        season: Optional[str] = None,
        scenario_name: Optional[str] = None,
        gap_type: Optional[GapType] = None,
        limit: Optional[int] = None,
    ) -> List[CategoryCoverage]:
        found = [
            r
            for r in self._records.values()
            if r.user_id == user_id and _matches(r, category, season, scenario_name, gap_type)
        ]
        found.sort(key=lambda r: r.priority_level)
        return found[:limit] if limit is not None else found

    def clear(self) -> None:
        self._records.clear()


def _row_to_coverage(row: WardrobeCoverage) -> CategoryCoverage:
    return CategoryCoverage(
        user_id=row.user_id,
        scenario_id=row.scenario_id,
        scenario_name=row.scenario_name,
        scenario_frequency=row.scenario_frequency,
        season=row.season,
        category=row.category,
        subcategory=row.subcategory,
        current_items=row.current_items,
        needed_items_min=row.needed_items_min,
        needed_items_ideal=row.needed_items_ideal,
        needed_items_max=row.needed_items_max,
        coverage_percent=row.coverage_percent,
        gap_count=row.gap_count,
        gap_type=GapType(row.gap_type),
        priority_level=row.priority_level,
        last_updated=row.last_updated,
    )


def _key_clause(key: CoverageKey):
    user_id, scenario_id, season, category, subcategory = key
    scenario_cond = (
        WardrobeCoverage.scenario_id.is_(None)
        if scenario_id is None
        else WardrobeCoverage.scenario_id == scenario_id
    )
    subcategory_cond = (
        WardrobeCoverage.subcategory.is_(None)
        if subcategory is None
        else WardrobeCoverage.subcategory == subcategory
    )
    return (
        WardrobeCoverage.user_id == user_id,
        scenario_cond,
        WardrobeCoverage.season == season,
        WardrobeCoverage.category == category,
        subcategory_cond,
    )


class SqlAlchemyCoverageStore:
    """
    Postgres-backed store. Relies on the NULLS NOT DISTINCT unique index on the
    coverage key so concurrent writers to one key are serialized by the database.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        # One AsyncSession cannot run statements concurrently
        self._lock = asyncio.Lock()

    async def exists(self, key: CoverageKey) -> bool:
        async with self._lock:
            res = await self.session.execute(select(WardrobeCoverage.id).where(*_key_clause(key)).limit(1))
            return res.first() is not None

    async def upsert(self, record: CategoryCoverage) -> CategoryCoverage:
        values = {
            "user_id": record.user_id,
            "scenario_id": record.scenario_id,
            "scenario_name": record.scenario_name,
            "scenario_frequency": record.scenario_frequency,
            "season": record.season,
            "category": record.category,
            "subcategory": record.subcategory,
            "current_items": record.current_items,
            "needed_items_min": record.needed_items_min,
            "needed_items_ideal": record.needed_items_ideal,
            "needed_items_max": record.needed_items_max,
            "coverage_percent": record.coverage_percent,
            "gap_count": record.gap_count,
            "gap_type": GapType(record.gap_type).value,
            "priority_level": record.priority_level,
            "last_updated": datetime.now(timezone.utc),
        }
        key_columns = ("user_id", "scenario_id", "season", "category", "subcategory")
        stmt = (
            insert(WardrobeCoverage)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[getattr(WardrobeCoverage, c) for c in key_columns],
                set_={k: v for k, v in values.items() if k not in key_columns},
            )
        )
        async with self._lock:
            await self.session.execute(stmt)
            await self.session.commit()
        record.last_updated = values["last_updated"]
        return record

    async def query(
        self,
        user_id: str,
        *,
        category: Optional[str] = None,
        season: Optional[str] = None,
        scenario_name: Optional[str] = None,
        gap_type: Optional[GapType] = None,
        limit: Optional[int] = None,
    ) -> List[CategoryCoverage]:
        stmt = select(WardrobeCoverage).where(WardrobeCoverage.user_id == user_id)
        if category is not None:
            stmt = stmt.where(WardrobeCoverage.category == category)
        if season is not None:
            stmt = stmt.where(WardrobeCoverage.season == season)
        if scenario_name is not None:
            stmt = stmt.where(WardrobeCoverage.scenario_name == scenario_name)
        if gap_type is not None:
            stmt = stmt.where(WardrobeCoverage.gap_type == GapType(gap_type).value)
        stmt = stmt.order_by(WardrobeCoverage.priority_level, WardrobeCoverage.last_updated.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._lock:
            res = await self.session.execute(stmt)
            return [_row_to_coverage(row) for row in res.scalars().all()]
