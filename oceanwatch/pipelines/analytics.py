"""Analytics over the full report collection: frequencies, rollups, daily trend, rates."""
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from oceanwatch.config import settings
from oceanwatch.models.analytics import (
    AnalyticsSummary,
    AreaStats,
    LocationStats,
    RegionStats,
    ResponseTimeStats,
    TrendPoint,
)
from oceanwatch.models.report import Report, ReportStatus, Severity, ensure_utc
from oceanwatch.utils.audit import utcnow

logger = logging.getLogger(__name__)

UNKNOWN_REGION = "unknown"
CRORE = 10_000_000
FAST_RESPONSE_MINUTES = 60
SLOW_RESPONSE_MINUTES = 240


def resolve_timezone(name: str) -> tzinfo:
    """Local zone used for calendar-day trend buckets."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def percentage(part: int, total: int) -> float:
    """Percent to one decimal place; 0.0 when there is nothing to divide by."""
    if total <= 0:
        return 0.0
    return round(100.0 * part / total, 1)


def format_minutes(minutes: float) -> str:
    """120.4 -> '2h 0m'."""
    hours, mins = divmod(int(round(minutes)), 60)
    return f"{hours}h {mins}m"


def format_crore(amount: float) -> str:
    return f"₹{amount / CRORE:.1f} Cr"


def _accumulate(stats: AreaStats, report: Report) -> None:
    stats.count += 1
    stats.severity[report.severity.value] = stats.severity.get(report.severity.value, 0) + 1
    stats.types[report.type] = stats.types.get(report.type, 0) + 1
    stats.total_response_time += report.response_time or 0
    stats.economic_impact += report.economic_impact or 0


def _finish_averages(groups: Iterable[AreaStats]) -> None:
    for stats in groups:
        stats.avg_response_time = stats.total_response_time / stats.count if stats.count else 0.0


def region_rollup(reports: Iterable[Report]) -> dict[str, RegionStats]:
    regions: dict[str, RegionStats] = {}
    for r in reports:
        key = r.location.region or UNKNOWN_REGION
        _accumulate(regions.setdefault(key, RegionStats()), r)
    _finish_averages(regions.values())
    return regions


def location_rollup(reports: Iterable[Report]) -> dict[str, LocationStats]:
    locations: dict[str, LocationStats] = {}
    for r in reports:
        stats = locations.setdefault(r.location.name, LocationStats())
        _accumulate(stats, r)
        stats.affected_population += r.affected_population or 0
    _finish_averages(locations.values())
    return locations


def daily_trend(
    reports: Iterable[Report],
    now: datetime,
    tz: tzinfo,
    days: int = 30,
) -> list[TrendPoint]:
    """Fixed-length series of the last `days` local calendar days, oldest first."""
    today = ensure_utc(now).astimezone(tz).date()
    points = [
        TrendPoint(day=d, label=d.strftime("%b %d"))
        for d in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]
    by_day = {p.day: p for p in points}
    for r in reports:
        point = by_day.get(r.timestamp.astimezone(tz).date())
        if point is None:
            continue
        point.reports += 1
        setattr(point, r.severity.value, getattr(point, r.severity.value) + 1)
        if r.status == ReportStatus.VERIFIED:
            point.verified += 1
        elif r.status == ReportStatus.RESOLVED:
            point.resolved += 1
    return points


def response_time_stats(reports: Iterable[Report]) -> ResponseTimeStats:
    stats = ResponseTimeStats()
    for r in reports:
        if r.response_time is None:
            continue
        stats.total_minutes += r.response_time
        stats.count += 1
        if r.response_time < FAST_RESPONSE_MINUTES:
            stats.fast += 1
        elif r.response_time < SLOW_RESPONSE_MINUTES:
            stats.moderate += 1
        else:
            stats.slow += 1
    stats.average_minutes = stats.total_minutes / stats.count if stats.count else 0.0
    stats.average_display = format_minutes(stats.average_minutes)
    return stats


def compute_analytics(
    reports: Iterable[Report],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    trend_days: Optional[int] = None,
) -> AnalyticsSummary:
    """Aggregate statistics over the whole collection. Never raises on empty input."""
    reports = list(reports)
    now = ensure_utc(now) if now else utcnow()
    tz = tz or resolve_timezone(settings.timezone)
    trend_days = trend_days if trend_days is not None else settings.trend_days
    total = len(reports)

    by_status = Counter(r.status.value for r in reports)
    day_ago = now - timedelta(hours=24)
    total_economic = sum(r.economic_impact or 0 for r in reports)

    return AnalyticsSummary(
        generated_at=now,
        total_reports=total,
        active_hazards=sum(1 for r in reports if r.status != ReportStatus.RESOLVED),
        high_severity_count=sum(1 for r in reports if r.severity == Severity.HIGH),
        critical_count=sum(1 for r in reports if r.severity == Severity.CRITICAL),
        reports_last_24h=sum(1 for r in reports if r.timestamp > day_ago),
        by_type=dict(Counter(r.type for r in reports)),
        by_severity=dict(Counter(r.severity.value for r in reports)),
        by_status=dict(by_status),
        regions=region_rollup(reports),
        locations=location_rollup(reports),
        trend=daily_trend(reports, now, tz, trend_days),
        response_time=response_time_stats(reports),
        verification_rate=percentage(by_status.get(ReportStatus.VERIFIED.value, 0), total),
        resolution_rate=percentage(by_status.get(ReportStatus.RESOLVED.value, 0), total),
        total_affected_population=sum(r.affected_population or 0 for r in reports),
        total_economic_impact=total_economic,
        economic_impact_display=format_crore(total_economic),
    )
