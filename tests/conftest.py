from datetime import datetime, timedelta, timezone

import pytest

from oceanwatch.models.report import ReportStatus
from oceanwatch.report_store import ReportStore
from oceanwatch.seed_data import build_report

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return ReportStore()


@pytest.fixture
def make_report():
    """Build a stored-shape report `minutes_ago` before NOW."""

    def _make(
        minutes_ago=0,
        type="tsunami",
        severity="medium",
        status=ReportStatus.PENDING,
        lat=13.0827,
        lng=80.2707,
        name="Chennai, Tamil Nadu",
        region="Tamil Nadu",
        **extra,
    ):
        fields = {
            "type": type,
            "severity": severity,
            "location": {"lat": lat, "lng": lng, "name": name, "region": region},
            "description": "test report",
            **extra,
        }
        return build_report(fields, NOW - timedelta(minutes=minutes_ago), ReportStatus(status))

    return _make
