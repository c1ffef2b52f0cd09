from datetime import timedelta, timezone

import pytest

from oceanwatch.pipelines.analytics import (
    compute_analytics,
    daily_trend,
    format_crore,
    format_minutes,
    percentage,
)
UTC = timezone.utc


def test_empty_collection_is_safe(now):
    summary = compute_analytics([], now=now, tz=UTC)

    assert summary.total_reports == 0
    assert summary.verification_rate == 0
    assert summary.resolution_rate == 0
    assert summary.by_type == {}
    assert summary.regions == {}
    assert summary.response_time.average_minutes == 0
    assert summary.response_time.average_display == "0h 0m"
    assert summary.economic_impact_display == "₹0.0 Cr"
    assert len(summary.trend) == 30
    assert all(p.reports == 0 for p in summary.trend)


def test_zero_trend_days_gives_empty_trend(make_report, now):
    summary = compute_analytics([make_report()], now=now, tz=UTC, trend_days=0)
    assert summary.trend == []
    assert summary.total_reports == 1


def test_frequency_tables_conserve_totals(make_report, now):
    reports = [
        make_report(type="tsunami", severity="high"),
        make_report(type="tsunami", severity="low"),
        make_report(type="oil_spill", severity="critical"),
        make_report(type="jellyfish_swarm", severity="low", status="verified"),
    ]
    summary = compute_analytics(reports, now=now, tz=UTC)

    assert summary.by_type == {"tsunami": 2, "oil_spill": 1, "jellyfish_swarm": 1}
    assert summary.by_severity == {"high": 1, "low": 2, "critical": 1}
    assert "medium" not in summary.by_severity
    assert sum(summary.by_type.values()) == len(reports)
    assert sum(summary.by_severity.values()) == len(reports)
    assert sum(summary.by_status.values()) == len(reports)
    assert summary.critical_count == 1
    assert summary.high_severity_count == 1


def test_rates_one_decimal(make_report, now):
    reports = [make_report(status="verified")] + [make_report() for _ in range(2)]
    reports.append(make_report(status="resolved"))
    reports += [make_report() for _ in range(2)]
    summary = compute_analytics(reports, now=now, tz=UTC)

    assert summary.verification_rate == 16.7
    assert summary.resolution_rate == 16.7
    assert summary.active_hazards == 5


def test_region_rollup(make_report, now):
    reports = [
        make_report(region="Kerala", severity="high", type="high_waves", response_time=30, economic_impact=1_000_000),
        make_report(region="Kerala", severity="low", type="high_waves", response_time=90),
        make_report(region=None, severity="critical", type="tsunami", economic_impact=500.0),
    ]
    regions = compute_analytics(reports, now=now, tz=UTC).regions

    kerala = regions["Kerala"]
    assert kerala.count == 2
    assert kerala.severity == {"low": 1, "medium": 0, "high": 1, "critical": 0}
    assert kerala.types == {"high_waves": 2}
    assert kerala.total_response_time == 120
    assert kerala.avg_response_time == 60
    assert kerala.economic_impact == 1_000_000
    assert regions["unknown"].count == 1
    assert regions["unknown"].avg_response_time == 0


def test_location_rollup_sums_affected(make_report, now):
    reports = [
        make_report(name="Goa", affected_population=100),
        make_report(name="Goa", affected_population=250),
        make_report(name="Puri, Odisha"),
    ]
    summary = compute_analytics(reports, now=now, tz=UTC)

    assert summary.locations["Goa"].count == 2
    assert summary.locations["Goa"].affected_population == 350
    assert summary.locations["Puri, Odisha"].affected_population == 0
    assert summary.total_affected_population == 350


def test_same_day_reports_share_one_bucket(make_report, now):
    reports = [make_report(minutes_ago=m) for m in (10, 60, 120)]
    trend = compute_analytics(reports, now=now, tz=UTC).trend

    assert len(trend) == 30
    assert trend[-1].day == now.date()
    assert trend[-1].reports == 3
    assert sum(p.reports for p in trend) == 3


def test_trend_is_oldest_first_and_drops_old_reports(make_report, now):
    reports = [
        make_report(minutes_ago=24 * 60, severity="critical", status="verified"),
        make_report(minutes_ago=29 * 24 * 60, severity="low", status="resolved"),
        make_report(minutes_ago=40 * 24 * 60),
    ]
    trend = daily_trend(reports, now, UTC, days=30)

    assert trend[0].day == (now - timedelta(days=29)).date()
    assert [p.day for p in trend] == sorted(p.day for p in trend)
    assert trend[0].reports == 1 and trend[0].low == 1 and trend[0].resolved == 1
    assert trend[-2].critical == 1 and trend[-2].verified == 1
    assert sum(p.reports for p in trend) == 2


def test_trend_uses_local_calendar_day(make_report, now):
    # 20:00 UTC on the 18th is already the 19th in IST (+05:30)
    ist = timezone(timedelta(hours=5, minutes=30))
    report = make_report(minutes_ago=16 * 60)
    trend = daily_trend([report], now, ist, days=30)
    assert trend[-1].reports == 1


def test_response_time_bands(make_report, now):
    reports = [
        make_report(response_time=30),
        make_report(response_time=59),
        make_report(response_time=60),
        make_report(response_time=239),
        make_report(response_time=240),
        make_report(),
    ]
    stats = compute_analytics(reports, now=now, tz=UTC).response_time

    assert (stats.fast, stats.moderate, stats.slow) == (2, 2, 1)
    assert stats.count == 5
    assert stats.total_minutes == 628
    assert stats.average_display == "2h 6m"


def test_totals_and_crore_display(make_report, now):
    reports = [
        make_report(economic_impact=25_000_000),
        make_report(economic_impact=8_000_000),
        make_report(minutes_ago=25 * 60),
    ]
    summary = compute_analytics(reports, now=now, tz=UTC)

    assert summary.total_economic_impact == 33_000_000
    assert summary.economic_impact_display == "₹3.3 Cr"
    assert summary.reports_last_24h == 2


@pytest.mark.parametrize("minutes,text", [(0, "0h 0m"), (45, "0h 45m"), (150, "2h 30m"), (59.6, "1h 0m")])
def test_format_minutes(minutes, text):
    assert format_minutes(minutes) == text


def test_percentage_zero_denominator():
    assert percentage(3, 0) == 0.0


def test_format_crore():
    assert format_crore(12_345_678) == "₹1.2 Cr"
