"""Synthetic hazard reports for the dashboard: fixed mock set plus random generator."""
import random
from datetime import datetime, timedelta
from typing import Any, Optional

from oceanwatch.models.report import (
    AuditAction,
    HazardType,
    Location,
    Report,
    ReportCreate,
    ReportStatus,
    Severity,
)
from oceanwatch.report_store import ReportStore, derive_priority
from oceanwatch.utils.audit import new_entry, utcnow
from oceanwatch.utils.ids import generate_report_id

# ============================================================================
# Coastal sites (name, lat, lng, region)
# ============================================================================
COASTAL_SITES = [
    ("Chennai, Tamil Nadu", 13.0827, 80.2707, "Tamil Nadu"),
    ("Puducherry", 11.9416, 79.8083, "Puducherry"),
    ("Goa", 15.2993, 74.1240, "Goa"),
    ("Kozhikode, Kerala", 11.2588, 75.7804, "Kerala"),
    ("Kochi, Kerala", 9.9312, 76.2673, "Kerala"),
    ("Mumbai, Maharashtra", 19.0760, 72.8777, "Maharashtra"),
    ("Visakhapatnam, Andhra Pradesh", 17.6868, 83.2185, "Andhra Pradesh"),
    ("Mangaluru, Karnataka", 12.9141, 74.8560, "Karnataka"),
    ("Puri, Odisha", 19.8135, 85.8312, "Odisha"),
    ("Port Blair, Andaman", 11.6234, 92.7265, "Andaman and Nicobar"),
]

REPORTERS = ["Citizen Reporter", "Local Official", "Fisherman", "Coast Guard", "Anonymous"]

DESCRIPTIONS = {
    HazardType.TSUNAMI: "Unusual wave behavior and sudden water recession observed",
    HazardType.STORM_SURGE: "Coastal flooding in low-lying areas",
    HazardType.HIGH_WAVES: "Wave height exceeding 3 meters",
    HazardType.SWELL_SURGE: "Long-period swell surging over the seawall",
    HazardType.COASTAL_EROSION: "Shoreline receding near fishing hamlet",
    HazardType.ABNORMAL_TIDE: "Tide level well above forecast",
    HazardType.RIP_CURRENT: "Strong rip current pulling swimmers offshore",
    HazardType.MARINE_DEBRIS: "Large debris field washed ashore",
    HazardType.OIL_SPILL: "Oil sheen visible along the beach",
    HazardType.ALGAL_BLOOM: "Discolored water and dead fish reported",
    HazardType.SEISMIC_ACTIVITY: "Tremors felt by residents near the coast",
}

# ============================================================================
# Mock reports from the original dashboard
# ============================================================================
MOCK_REPORTS: list[dict[str, Any]] = [
    {
        "type": HazardType.TSUNAMI.value,
        "location": {"lat": 13.0827, "lng": 80.2707, "name": "Chennai, Tamil Nadu", "region": "Tamil Nadu"},
        "severity": Severity.HIGH.value,
        "description": "Unusual wave behavior observed near Marina Beach",
        "minutes_ago": 30,
        "reporter": "Citizen Reporter",
        "status": ReportStatus.VERIFIED.value,
        "media": ["https://images.pexels.com/photos/1001682/pexels-photo-1001682.jpeg"],
        "affected_population": 12000,
        "economic_impact": 25_000_000,
        "response_time": 45,
    },
    {
        "type": HazardType.STORM_SURGE.value,
        "location": {"lat": 15.2993, "lng": 74.1240, "name": "Goa", "region": "Goa"},
        "severity": Severity.MEDIUM.value,
        "description": "Coastal flooding in low-lying areas",
        "minutes_ago": 120,
        "reporter": "Local Official",
        "status": ReportStatus.INVESTIGATING.value,
        "media": ["https://images.pexels.com/photos/1118873/pexels-photo-1118873.jpeg"],
        "affected_population": 3500,
        "economic_impact": 8_000_000,
        "response_time": 150,
    },
    {
        "type": HazardType.HIGH_WAVES.value,
        "location": {"lat": 11.2588, "lng": 75.7804, "name": "Kozhikode, Kerala", "region": "Kerala"},
        "severity": Severity.LOW.value,
        "description": "Wave height exceeding 3 meters",
        "minutes_ago": 45,
        "reporter": "Fisherman",
        "status": ReportStatus.CONFIRMED.value,
        "media": [],
    },
]


def build_report(
    fields: dict[str, Any],
    timestamp: datetime,
    status: ReportStatus = ReportStatus.PENDING,
) -> Report:
    """Build a stored report as if submitted at `timestamp` and later moved to `status`."""
    draft = ReportCreate.model_validate(fields)
    trail = [new_entry(AuditAction.CREATED, draft.reporter, "Report submitted", timestamp)]
    if status != ReportStatus.PENDING:
        trail.append(new_entry(
            AuditAction.STATUS_CHANGED,
            "system",
            f"Status changed to {status.value}",
            timestamp + timedelta(minutes=5),
        ))
    return Report(
        id=generate_report_id(),
        status=status,
        priority=derive_priority(draft.severity),
        timestamp=timestamp,
        audit_trail=trail,
        **draft.model_dump(),
    )


def random_draft(rng: random.Random, hazard_types: Optional[list[HazardType]] = None) -> dict[str, Any]:
    """Random report draft at one of the coastal sites."""
    hazard = rng.choice(hazard_types or list(HazardType))
    name, lat, lng, region = rng.choice(COASTAL_SITES)
    severity = rng.choices(list(Severity), weights=[4, 4, 3, 1])[0]
    return {
        "type": hazard.value,
        "severity": severity.value,
        "location": Location(
            lat=round(lat + rng.uniform(-0.05, 0.05), 4),
            lng=round(lng + rng.uniform(-0.05, 0.05), 4),
            name=name,
            region=region,
        ).model_dump(),
        "description": DESCRIPTIONS[hazard],
        "reporter": rng.choice(REPORTERS),
        "affected_population": rng.choice([None, rng.randint(50, 20000)]),
        "economic_impact": rng.choice([None, float(rng.randint(1, 500)) * 100_000]),
        "environmental_impact": rng.choice([None, "low", "medium", "high"]),
        "response_time": rng.choice([None, rng.randint(10, 480)]),
        "tags": [hazard.value, region.lower().replace(" ", "_")],
    }


def generate_reports(
    count: int,
    now: Optional[datetime] = None,
    days: int = 30,
    seed: Optional[int] = None,
) -> list[Report]:
    """`count` random reports spread over the last `days` days."""
    rng = random.Random(seed)
    now = now or utcnow()
    reports = []
    for _ in range(count):
        ts = now - timedelta(minutes=rng.randint(0, days * 24 * 60))
        status = rng.choice(list(ReportStatus))
        reports.append(build_report(random_draft(rng), ts, status))
    return reports


def mock_reports(now: Optional[datetime] = None) -> list[Report]:
    now = now or utcnow()
    out = []
    for item in MOCK_REPORTS:
        fields = {k: v for k, v in item.items() if k not in ("minutes_ago", "status")}
        ts = now - timedelta(minutes=item["minutes_ago"])
        out.append(build_report(fields, ts, ReportStatus(item["status"])))
    return out


def seed_all(store: ReportStore, count: int = 40, seed: Optional[int] = None) -> dict[str, int]:
    """Replace the store contents with mock + generated reports."""
    now = utcnow()
    store.clear()
    loaded = store.load([*mock_reports(now), *generate_reports(count, now=now, seed=seed)])
    return {"reports": loaded}


def simulated_draft(rng: random.Random) -> ReportCreate:
    """Live-feed style submission, as the dashboard's periodic simulator produced."""
    fields = random_draft(
        rng,
        hazard_types=[HazardType.TSUNAMI, HazardType.STORM_SURGE, HazardType.HIGH_WAVES],
    )
    fields["reporter"] = "Citizen"
    fields["description"] = "New hazard observation reported"
    return ReportCreate.model_validate(fields)
