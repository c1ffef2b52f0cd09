"""Hazard report models: stored reports, audit entries, comments, and mutation inputs."""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator


class HazardType(str, Enum):
    TSUNAMI = "tsunami"
    STORM_SURGE = "storm_surge"
    HIGH_WAVES = "high_waves"
    SWELL_SURGE = "swell_surge"
    COASTAL_EROSION = "coastal_erosion"
    ABNORMAL_TIDE = "abnormal_tide"
    RIP_CURRENT = "rip_current"
    MARINE_DEBRIS = "marine_debris"
    OIL_SPILL = "oil_spill"
    ALGAL_BLOOM = "algal_bloom"
    SEISMIC_ACTIVITY = "seismic_activity"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordering for risk ranking: low=0 .. critical=3."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class ReportStatus(str, Enum):
    PENDING = "pending"
    INVESTIGATING = "investigating"
    VERIFIED = "verified"
    CONFIRMED = "confirmed"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Priority(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditAction(str, Enum):
    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    COMMENT_ADDED = "comment_added"
    UPDATED = "updated"


class Location(BaseModel):
    lat: float
    lng: float
    name: str = ""
    region: Optional[str] = None
    address: Optional[str] = None
    landmark: Optional[str] = None


class Comment(BaseModel):
    author: str
    content: str
    timestamp: datetime
    role: str = "citizen"


class AuditEntry(BaseModel):
    action: AuditAction
    user: str
    timestamp: datetime
    details: str = ""


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_hazard_type(value: str) -> str:
    # Known types or any free-text custom type
    value = (value or "").strip()
    if not value:
        raise ValueError("type must not be empty")
    return value


HazardTypeName = Annotated[str, AfterValidator(_check_hazard_type)]


class ReportCreate(BaseModel):
    """Draft payload from a submission form or generator. Missing fields default."""

    type: HazardTypeName = HazardType.HIGH_WAVES.value
    severity: Severity = Severity.MEDIUM
    location: Location
    description: str = ""
    reporter: str = "Anonymous"
    affected_population: Optional[int] = None
    economic_impact: Optional[float] = None
    environmental_impact: Optional[str] = None
    response_time: Optional[int] = None  # minutes
    tags: list[str] = Field(default_factory=list)
    media: list[str] = Field(default_factory=list)

    @field_validator("reporter")
    @classmethod
    def default_reporter(cls, value: str) -> str:
        return value.strip() or "Anonymous"


class Report(BaseModel):
    id: str
    type: HazardTypeName
    severity: Severity
    status: ReportStatus = ReportStatus.PENDING
    priority: Priority = Priority.MEDIUM
    location: Location
    description: str = ""
    timestamp: datetime
    reporter: str = "Anonymous"
    comments: list[Comment] = Field(default_factory=list)
    audit_trail: list[AuditEntry] = Field(default_factory=list)
    affected_population: Optional[int] = None
    economic_impact: Optional[float] = None
    environmental_impact: Optional[str] = None
    response_time: Optional[int] = None  # minutes
    tags: list[str] = Field(default_factory=list)
    media: list[str] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_aware(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class StatusUpdate(BaseModel):
    status: ReportStatus
    user: str = "system"


class CommentCreate(BaseModel):
    content: str
    author: str = "Anonymous"
    role: str = "citizen"


class ReportUpdate(BaseModel):
    fields: dict[str, Any]
    user: str = "system"
