"""Periodic analytics refresh over fresh store snapshots, with optional simulated submissions."""
import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from oceanwatch.config import settings
from oceanwatch.event_bus import REPORT_EVENTS, ReportEvent, emit_report_event, on
from oceanwatch.models.analytics import AnalyticsSummary
from oceanwatch.models.report import AuditAction
from oceanwatch.pipelines.analytics import compute_analytics
from oceanwatch.report_store import ReportStore, connection_manager, report_store
from oceanwatch.seed_data import simulated_draft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    """Derived results for one store snapshot. Replaced whole, never mutated."""

    report_count: int
    analytics: AnalyticsSummary


class AnalyticsRefresher:
    """Re-derives analytics from scratch on a timer and after store mutations."""

    def __init__(
        self,
        store: ReportStore,
        interval_seconds: float = 30.0,
        simulate_activity: bool = False,
        simulation_probability: float = 0.2,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._interval = interval_seconds
        self._simulate = simulate_activity
        self._probability = simulation_probability
        self._rng = rng or random.Random()
        self._latest: DashboardSnapshot | None = None
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def latest(self) -> DashboardSnapshot | None:
        return self._latest

    @property
    def running(self) -> bool:
        return self._running

    def refresh(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Compute analytics over a fresh snapshot and swap it in."""
        reports = self._store.snapshot()
        snapshot = DashboardSnapshot(
            report_count=len(reports),
            analytics=compute_analytics(reports, now=now),
        )
        self._latest = snapshot
        return snapshot

    def current(self) -> DashboardSnapshot:
        return self._latest or self.refresh()

    async def tick(self) -> DashboardSnapshot:
        """One timer step: maybe simulate a submission, then refresh and broadcast."""
        if self._simulate and self._rng.random() < self._probability:
            report = self._store.add_report(simulated_draft(self._rng))
            logger.info("Simulated report %s at %s", report.id, report.location.name)
            await emit_report_event(AuditAction.CREATED, report.id, report.reporter)
        snapshot = self.refresh()
        await connection_manager.broadcast({
            "type": "analytics_update",
            "payload": snapshot.analytics.model_dump(mode="json"),
        })
        return snapshot

    async def run(self) -> None:
        self._running = True
        logger.info("Analytics refresher started (every %.1fs)", self._interval)
        while self._running:
            try:
                await self.tick()
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception("Refresher tick failed: %s", e)
                await asyncio.sleep(self._interval)
        logger.info("Analytics refresher stopped")

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


refresher = AnalyticsRefresher(
    report_store,
    interval_seconds=settings.refresh_interval_seconds,
    simulate_activity=settings.simulate_activity,
    simulation_probability=settings.simulation_probability,
)


@on(*REPORT_EVENTS)
async def _push_report_change(event: ReportEvent) -> None:
    """Push the changed report to live clients and refresh cached analytics."""
    if event.report_id in report_store:
        report = report_store.get(event.report_id)
        await connection_manager.broadcast({
            "type": "report_update",
            "action": event.action.value,
            "payload": report.model_dump(mode="json"),
        })
    snapshot = refresher.refresh()
    await connection_manager.broadcast({
        "type": "analytics_update",
        "payload": snapshot.analytics.model_dump(mode="json"),
    })
