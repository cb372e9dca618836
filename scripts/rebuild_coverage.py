from __future__ import annotations

import asyncio
import json
import sys

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.core.config import settings
from app.schemas.coverage import WardrobeSnapshot
from app.services.coverage import CoverageService, InMemoryCoverageStore, SqlAlchemyCoverageStore


def _load_snapshot(path: str) -> WardrobeSnapshot:
    with open(path, "r", encoding="utf-8") as fh:
        return WardrobeSnapshot.model_validate(json.load(fh))


async def _run(user_id: str, path: str, dry_run: bool) -> None:
    snapshot = _load_snapshot(path)
    scenarios = snapshot.domain_scenarios(user_id)
    items = snapshot.domain_items()

    if dry_run:
        service = CoverageService(InMemoryCoverageStore())
        records = await service.initialize_complete_coverage_matrix(user_id, scenarios, items)
    else:
        engine = create_async_engine(settings.DATABASE_URL, echo=False)
        Session = async_sessionmaker(engine, expire_on_commit=False)
        async with Session() as session:
            service = CoverageService(SqlAlchemyCoverageStore(session))
            records = await service.initialize_complete_coverage_matrix(user_id, scenarios, items)
        await engine.dispose()

    for r in sorted(records, key=lambda r: (r.priority_level, r.category, r.season)):
        sub = f"/{r.subcategory}" if r.subcategory else ""
        print(
            f"p{r.priority_level} {r.gap_type.value:<13} {r.category}{sub} "
            f"[{r.scenario_name} / {r.season}] {r.current_items}/{r.needed_items_ideal}"
        )
    print(f"{len(records)} coverage records {'computed' if dry_run else 'written'}")


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if a != "--dry-run"]
    if len(args) != 2:
        print("usage: python3 scripts/rebuild_coverage.py <user_id> <snapshot.json> [--dry-run]")
        raise SystemExit(1)
    asyncio.run(_run(args[0], args[1], "--dry-run" in sys.argv))
