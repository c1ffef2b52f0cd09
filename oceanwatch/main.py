"""INCOIS Ocean Hazard Reporting core — FastAPI app."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oceanwatch.config import settings
from oceanwatch.event_bus import start_event_bus, stop_event_bus
from oceanwatch.pipelines.refresher import refresher
from oceanwatch.report_store import connection_manager, report_store
from oceanwatch.routers import analytics, reports, seed, ws
from oceanwatch.seed_data import seed_all

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start event bus and analytics refresher; seed mock data; stop on shutdown."""
    await start_event_bus()
    if settings.seed_on_startup and len(report_store) == 0:
        counts = seed_all(report_store)
        logger.info("Seeded %d mock reports", counts["reports"])
    refresher.start()
    logger.info(
        "Ocean hazard backend started (refresh every %.1fs, simulation %s)",
        settings.refresh_interval_seconds,
        "on" if settings.simulate_activity else "off",
    )
    yield
    await refresher.stop()
    await stop_event_bus()
    logger.info("Ocean hazard backend stopped")


app = FastAPI(
    title="INCOIS Ocean Hazard Reporting Platform",
    description="Hazard report store, filtering and analytics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports.router)
app.include_router(analytics.router)
app.include_router(seed.router)
app.include_router(ws.router)


@app.get("/health")
async def health():
    """Health check."""
    return {
        "status": "ok",
        "reports": len(report_store),
        "refresher_running": refresher.running,
        "live_connections": connection_manager.connection_count,
    }
