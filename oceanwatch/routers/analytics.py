"""Analytics router: cached and on-demand aggregate statistics."""
from fastapi import APIRouter

from oceanwatch.models.analytics import AnalyticsSummary
from oceanwatch.pipelines.refresher import refresher

router = APIRouter(prefix="/api", tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsSummary)
async def get_analytics():
    """Latest refreshed analytics (computed now if nothing is cached yet)."""
    return refresher.current().analytics


@router.get("/analytics/live", response_model=AnalyticsSummary)
async def get_live_analytics():
    """Recompute analytics over the current store snapshot."""
    return refresher.refresh().analytics
