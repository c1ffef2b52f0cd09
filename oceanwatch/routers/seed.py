"""Seed router: POST /api/seed to populate in-memory state with synthetic reports."""
from fastapi import APIRouter, Query

from oceanwatch.pipelines.refresher import refresher
from oceanwatch.report_store import report_store
from oceanwatch.seed_data import seed_all
from oceanwatch.utils.audit import log_action

router = APIRouter(prefix="/api", tags=["seed"])


@router.post("/seed")
async def seed_mock_data(count: int = Query(default=40, ge=0, le=5000)):
    """Replace all reports with mock + generated data. Idempotent in shape, not in ids."""
    counts = seed_all(report_store, count=count)
    refresher.refresh()
    log_action("system", "seeded", None, f"{counts['reports']} reports")
    return {"status": "seeded", **counts}
