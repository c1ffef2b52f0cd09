"""Reports router: submit, filtered list, status/comment/update mutations, audit trail."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from oceanwatch.config import settings
from oceanwatch.event_bus import emit_report_event
from oceanwatch.models.filters import (
    ALL,
    CustomDateRange,
    DateRange,
    FilterSpec,
    GeoPoint,
    ProximitySpec,
)
from oceanwatch.models.report import (
    AuditAction,
    AuditEntry,
    CommentCreate,
    Report,
    ReportCreate,
    ReportUpdate,
    StatusUpdate,
)
from oceanwatch.pipelines.filtering import filter_reports
from oceanwatch.report_store import ReportNotFoundError, report_store
from oceanwatch.services.location import LocationProvider, location_provider_from_settings
from oceanwatch.utils.audit import filter_trail, get_activity_log

router = APIRouter(prefix="/api", tags=["reports"])
logger = logging.getLogger(__name__)

location_provider: LocationProvider = location_provider_from_settings()


def set_location_provider(provider: LocationProvider) -> None:
    global location_provider
    location_provider = provider


def _not_found(e: ReportNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _point(lat: Optional[float], lng: Optional[float]) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


@router.post("/reports", response_model=Report, status_code=201)
async def submit_report(body: ReportCreate):
    """Submit a hazard report. Stored as pending."""
    report = report_store.add_report(body)
    await emit_report_event(AuditAction.CREATED, report.id, report.reporter)
    return report


@router.get("/reports")
async def list_reports(
    type: str = ALL,
    severity: str = ALL,
    status: str = ALL,
    date_range: str = DateRange.LAST_24H.value,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    proximity: bool = False,
    center_lat: Optional[float] = None,
    center_lng: Optional[float] = None,
    radius_km: float = Query(default=settings.default_radius_km, ge=0),
    region: str = ALL,
    user_lat: Optional[float] = None,
    user_lng: Optional[float] = None,
):
    """Filtered reports, newest first. Query params mirror FilterSpec."""
    user_location = _point(user_lat, user_lng) or location_provider.current_location()
    # Center defaults to the user's location, as the proximity toggle does
    center = _point(center_lat, center_lng) or (user_location if proximity else None)
    spec = FilterSpec(
        type=type,
        severity=severity,
        status=status,
        date_range=date_range,
        custom_date_range=CustomDateRange(start=start, end=end),
        proximity=ProximitySpec(enabled=proximity, center=center, radius_km=radius_km),
        region=region,
    )
    reports = report_store.snapshot()
    filtered = filter_reports(reports, spec, user_location=user_location)
    return {
        "total": len(reports),
        "count": len(filtered),
        "reports": [r.model_dump(mode="json") for r in filtered],
    }


@router.get("/reports/{report_id}", response_model=Report)
async def get_report(report_id: str):
    try:
        return report_store.get(report_id)
    except ReportNotFoundError as e:
        raise _not_found(e)


@router.patch("/reports/{report_id}/status", response_model=Report)
async def update_status(report_id: str, body: StatusUpdate):
    """Change report status; appends a status_changed audit entry."""
    try:
        report = report_store.update_status(report_id, body.status, body.user)
    except ReportNotFoundError as e:
        raise _not_found(e)
    await emit_report_event(AuditAction.STATUS_CHANGED, report_id, body.user)
    return report


@router.post("/reports/{report_id}/comments", response_model=Report, status_code=201)
async def add_comment(report_id: str, body: CommentCreate):
    try:
        report = report_store.add_comment(report_id, body.content, body.author, body.role)
    except ReportNotFoundError as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await emit_report_event(AuditAction.COMMENT_ADDED, report_id, body.author)
    return report


@router.patch("/reports/{report_id}", response_model=Report)
async def update_report(report_id: str, body: ReportUpdate):
    """Generic shallow update of report fields."""
    try:
        report = report_store.update_report(report_id, body.fields, body.user)
    except ReportNotFoundError as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await emit_report_event(AuditAction.UPDATED, report_id, body.user)
    return report


@router.get("/reports/{report_id}/audit", response_model=list[AuditEntry])
async def get_audit_trail(report_id: str, action: Optional[str] = None):
    """Report history, newest first, optionally for one action type."""
    try:
        report = report_store.get(report_id)
    except ReportNotFoundError as e:
        raise _not_found(e)
    return filter_trail(report.audit_trail, action)


@router.get("/audit")
async def recent_activity(limit: int = Query(default=100, ge=1, le=1000)):
    """Recent mutations across all reports, newest first."""
    return [
        {
            "actor": a.actor,
            "action": a.action,
            "report_id": a.report_id,
            "details": a.details,
            "timestamp": a.timestamp.isoformat(),
        }
        for a in get_activity_log(limit)
    ]
