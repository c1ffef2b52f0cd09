"""Report filtering: conjunctive type/severity/status/date/proximity/region predicates."""
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from oceanwatch.models.filters import ALL, DateRange, FilterSpec, GeoPoint
from oceanwatch.models.report import Report, ensure_utc
from oceanwatch.utils.audit import utcnow
from oceanwatch.utils.geo import haversine_km

logger = logging.getLogger(__name__)

DATE_RANGE_WINDOWS = {
    DateRange.LAST_HOUR.value: timedelta(hours=1),
    DateRange.LAST_24H.value: timedelta(hours=24),
    DateRange.LAST_7D.value: timedelta(days=7),
    DateRange.LAST_30D.value: timedelta(days=30),
    DateRange.LAST_90D.value: timedelta(days=90),
}
DEFAULT_WINDOW = DATE_RANGE_WINDOWS[DateRange.LAST_24H.value]


def _value(field: object) -> str:
    return getattr(field, "value", field)


def _in_date_range(report: Report, spec: FilterSpec, now: datetime) -> bool:
    custom = spec.custom_date_range
    if spec.date_range == DateRange.CUSTOM.value and custom.start and custom.end:
        return ensure_utc(custom.start) <= report.timestamp <= ensure_utc(custom.end)
    # Custom without both bounds, and unknown values, use the 24h window
    window = DATE_RANGE_WINDOWS.get(spec.date_range, DEFAULT_WINDOW)
    return report.timestamp >= now - window


def _within_radius(report: Report, spec: FilterSpec, user_location: Optional[GeoPoint]) -> bool:
    proximity = spec.proximity
    # Enabled without a user location or center is a no-op, not an exclusion
    if not proximity.enabled or user_location is None or proximity.center is None:
        return True
    center = proximity.center
    distance = haversine_km(center.lat, center.lng, report.location.lat, report.location.lng)
    return distance <= proximity.radius_km


def matches(
    report: Report,
    spec: FilterSpec,
    user_location: Optional[GeoPoint] = None,
    now: Optional[datetime] = None,
) -> bool:
    """True when the report passes every active predicate of `spec`."""
    now = ensure_utc(now) if now else utcnow()
    if spec.type != ALL and report.type != spec.type:
        return False
    if spec.severity != ALL and _value(report.severity) != spec.severity:
        return False
    if spec.status != ALL and _value(report.status) != spec.status:
        return False
    if not _in_date_range(report, spec, now):
        return False
    if not _within_radius(report, spec, user_location):
        return False
    if spec.region != ALL and spec.region.lower() not in report.location.name.lower():
        return False
    return True


def filter_reports(
    reports: Iterable[Report],
    spec: FilterSpec,
    user_location: Optional[GeoPoint] = None,
    now: Optional[datetime] = None,
) -> list[Report]:
    """Reports passing `spec`, in input order."""
    now = ensure_utc(now) if now else utcnow()
    if spec.date_range not in DATE_RANGE_WINDOWS and spec.date_range != DateRange.CUSTOM.value:
        logger.debug("Unknown date_range %r, using 24h window", spec.date_range)
    return [r for r in reports if matches(r, spec, user_location, now)]
