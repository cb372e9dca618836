from .celery_app import celery
import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.core.config import settings
from app.schemas.coverage import WardrobeItemIn, WardrobeSnapshot
from app.services.coverage import CoverageService, SqlAlchemyCoverageStore

logger = logging.getLogger(__name__)


@celery.task(name="tasks.refresh_user_coverage")
def refresh_user_coverage(user_id: str, snapshot: dict) -> dict:
    """Rebuild the full coverage matrix for one user from a scenarios/items snapshot."""
    parsed = WardrobeSnapshot.model_validate(snapshot)

    async def _run() -> dict:
        engine = create_async_engine(settings.DATABASE_URL, echo=False)
        Session = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with Session() as session:
                service = CoverageService(SqlAlchemyCoverageStore(session))
                try:
                    records = await service.initialize_complete_coverage_matrix(
                        user_id, parsed.domain_scenarios(user_id), parsed.domain_items()
                    )
                except Exception as e:
                    logger.exception("coverage refresh failed for user %s", user_id)
                    return {"ok": False, "user_id": user_id, "error": str(e)}
                critical = sum(1 for r in records if r.gap_type == "critical")
                return {"ok": True, "user_id": user_id, "records": len(records), "critical": critical}
        finally:
            await engine.dispose()

    return asyncio.run(_run())


@celery.task(name="tasks.recalculate_item_coverage")
def recalculate_item_coverage(
    user_id: str,
    snapshot: dict,
    old_item: Optional[dict] = None,
    new_item: Optional[dict] = None,
) -> dict:
    """Recompute only the combinations an item add/edit/delete touches. `snapshot` is post-change."""
    parsed = WardrobeSnapshot.model_validate(snapshot)
    old = WardrobeItemIn.model_validate(old_item).to_domain() if old_item else None
    new = WardrobeItemIn.model_validate(new_item).to_domain() if new_item else None

    async def _run() -> dict:
        engine = create_async_engine(settings.DATABASE_URL, echo=False)
        Session = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with Session() as session:
                service = CoverageService(SqlAlchemyCoverageStore(session))
                try:
                    records = await service.recalculate_for_item_change(
                        user_id, old, new, parsed.domain_scenarios(user_id), parsed.domain_items()
                    )
                except Exception as e:
                    logger.exception("item coverage recalculation failed for user %s", user_id)
                    return {"ok": False, "user_id": user_id, "error": str(e)}
                return {"ok": True, "user_id": user_id, "records": len(records)}
        finally:
            await engine.dispose()

    return asyncio.run(_run())
