"""Analytics summary models returned to dashboard clients."""
from datetime import date, datetime

from pydantic import BaseModel, Field


def _severity_buckets() -> dict[str, int]:
    return {"low": 0, "medium": 0, "high": 0, "critical": 0}


class AreaStats(BaseModel):
    count: int = 0
    severity: dict[str, int] = Field(default_factory=_severity_buckets)
    types: dict[str, int] = Field(default_factory=dict)
    total_response_time: float = 0.0
    avg_response_time: float = 0.0
    economic_impact: float = 0.0


class RegionStats(AreaStats):
    pass


class LocationStats(AreaStats):
    affected_population: int = 0


class TrendPoint(BaseModel):
    day: date
    label: str
    reports: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    verified: int = 0
    resolved: int = 0


class ResponseTimeStats(BaseModel):
    total_minutes: float = 0.0
    count: int = 0
    fast: int = 0       # < 60 min
    moderate: int = 0   # 60-239 min
    slow: int = 0       # >= 240 min
    average_minutes: float = 0.0
    average_display: str = "0h 0m"


class AnalyticsSummary(BaseModel):
    generated_at: datetime
    total_reports: int = 0
    active_hazards: int = 0
    high_severity_count: int = 0
    critical_count: int = 0
    reports_last_24h: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    regions: dict[str, RegionStats] = Field(default_factory=dict)
    locations: dict[str, LocationStats] = Field(default_factory=dict)
    trend: list[TrendPoint] = Field(default_factory=list)
    response_time: ResponseTimeStats = Field(default_factory=ResponseTimeStats)
    verification_rate: float = 0.0
    resolution_rate: float = 0.0
    total_affected_population: int = 0
    total_economic_impact: float = 0.0
    economic_impact_display: str = "₹0.0 Cr"
