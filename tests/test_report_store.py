import pytest

from oceanwatch.models.report import (
    AuditAction,
    Priority,
    ReportCreate,
    ReportStatus,
    Severity,
)
from oceanwatch.report_store import ReportNotFoundError, derive_priority
from oceanwatch.utils.audit import clear_activity_log, get_activity_log


def _draft(**overrides):
    fields = {
        "type": "storm_surge",
        "severity": "high",
        "location": {"lat": 15.2993, "lng": 74.1240, "name": "Goa", "region": "Goa"},
        "description": "Coastal flooding in low-lying areas",
        "reporter": "Local Official",
    }
    fields.update(overrides)
    return ReportCreate.model_validate(fields)


def test_add_report_starts_pending_with_created_entry(store, now):
    report = store.add_report(_draft(), now=now)

    assert report.status == ReportStatus.PENDING
    assert report.timestamp == now
    assert report.comments == []
    assert len(report.audit_trail) == 1
    created = report.audit_trail[0]
    assert created.action == AuditAction.CREATED
    assert created.user == "Local Official"
    assert created.details == "Report submitted"
    assert store.get(report.id) == report


def test_ids_are_unique_and_increasing(store):
    ids = [store.add_report(_draft()).id for _ in range(50)]
    assert len(set(ids)) == 50
    numbers = [int(i.split("-")[1]) for i in ids]
    assert numbers == sorted(numbers)


def test_new_reports_come_first(store):
    first = store.add_report(_draft())
    second = store.add_report(_draft())
    assert [r.id for r in store.snapshot()] == [second.id, first.id]


def test_blank_reporter_becomes_anonymous(store):
    report = store.add_report(_draft(reporter="   "))
    assert report.reporter == "Anonymous"
    assert report.audit_trail[0].user == "Anonymous"


@pytest.mark.parametrize("severity,priority", [
    (Severity.LOW, Priority.MEDIUM),
    (Severity.MEDIUM, Priority.HIGH),
    (Severity.HIGH, Priority.CRITICAL),
    (Severity.CRITICAL, Priority.MEDIUM),
])
def test_priority_mapping(severity, priority):
    assert derive_priority(severity) == priority


def test_custom_hazard_type_is_kept(store):
    report = store.add_report(_draft(type="jellyfish_swarm"))
    assert report.type == "jellyfish_swarm"


def test_update_status_appends_entry(store):
    report = store.add_report(_draft())
    updated = store.update_status(report.id, ReportStatus.VERIFIED, "alice")

    assert updated.status == ReportStatus.VERIFIED
    assert len(updated.audit_trail) == 2
    entry = updated.audit_trail[1]
    assert entry.action == AuditAction.STATUS_CHANGED
    assert entry.user == "alice"
    assert entry.details == "Status changed to verified"


def test_same_status_is_still_logged(store):
    report = store.add_report(_draft())
    store.update_status(report.id, "pending", "bob")
    updated = store.update_status(report.id, "pending", "bob")
    assert updated.status == ReportStatus.PENDING
    assert [e.action for e in updated.audit_trail] == [
        AuditAction.CREATED,
        AuditAction.STATUS_CHANGED,
        AuditAction.STATUS_CHANGED,
    ]


def test_unknown_id_raises_not_found(store):
    with pytest.raises(ReportNotFoundError):
        store.update_status("RPT-0", ReportStatus.RESOLVED, "alice")
    with pytest.raises(ReportNotFoundError):
        store.add_comment("RPT-0", "hello", "alice")
    with pytest.raises(ReportNotFoundError):
        store.update_report("RPT-0", {"description": "x"}, "alice")
    assert len(store) == 0


def test_add_comment(store):
    report = store.add_report(_draft())
    updated = store.add_comment(report.id, "  Confirmed from the pier  ", "carol", role="official")

    assert len(updated.comments) == 1
    comment = updated.comments[0]
    assert comment.content == "Confirmed from the pier"
    assert comment.author == "carol"
    assert comment.role == "official"
    assert updated.audit_trail[-1].action == AuditAction.COMMENT_ADDED


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
def test_blank_comment_rejected(store, content):
    report = store.add_report(_draft())
    with pytest.raises(ValueError):
        store.add_comment(report.id, content, "carol")
    assert len(store.get(report.id).audit_trail) == 1


def test_update_report_lists_fields_in_order(store):
    report = store.add_report(_draft())
    updated = store.update_report(
        report.id,
        {"severity": "critical", "description": "Flooding spreading inland", "response_time": 90},
        "dave",
    )

    assert updated.severity == Severity.CRITICAL
    assert updated.description == "Flooding spreading inland"
    assert updated.response_time == 90
    assert updated.location.name == "Goa"
    entry = updated.audit_trail[-1]
    assert entry.action == AuditAction.UPDATED
    assert entry.user == "dave"
    assert entry.details == "severity, description, response_time"


@pytest.mark.parametrize("fields", [
    {},
    {"id": "RPT-1"},
    {"timestamp": "2020-01-01T00:00:00Z"},
    {"audit_trail": []},
    {"comments": []},
    {"not_a_field": 1},
    {"severity": "apocalyptic"},
    {"status": "bogus"},
])
def test_update_report_rejects_bad_fields(store, fields):
    report = store.add_report(_draft())
    with pytest.raises(ValueError):
        store.update_report(report.id, fields, "dave")
    assert store.get(report.id) == report


def test_audit_trail_counts_operations(store):
    report = store.add_report(_draft())
    store.update_status(report.id, "investigating", "alice")
    store.add_comment(report.id, "On my way", "bob")
    store.update_report(report.id, {"affected_population": 200}, "carol")
    store.update_status(report.id, "resolved", "alice")

    trail = store.get(report.id).audit_trail
    assert len(trail) == 5
    assert trail[0].action == AuditAction.CREATED


def test_snapshot_is_not_affected_by_later_mutations(store):
    report = store.add_report(_draft())
    before = store.snapshot()

    store.update_status(report.id, "verified", "alice")
    store.add_comment(report.id, "noted", "bob")

    assert before[0].status == ReportStatus.PENDING
    assert before[0].comments == []
    assert len(before[0].audit_trail) == 1


def test_other_reports_untouched(store):
    a = store.add_report(_draft())
    b = store.add_report(_draft(type="high_waves"))
    store.update_status(a.id, "rejected", "alice")
    assert store.get(b.id) is b


def test_insert_rejects_reused_id(store, make_report):
    report = make_report()
    store.insert(report)
    store.clear()
    with pytest.raises(ValueError):
        store.insert(report)


def test_mutations_reach_activity_log(store):
    clear_activity_log()
    report = store.add_report(_draft())
    store.update_status(report.id, "verified", "alice")

    log = get_activity_log(10)
    assert [a.action for a in log] == ["status_changed", "created"]
    assert log[0].report_id == report.id


def test_status_through_update_report_is_logged_as_transition(store):
    clear_activity_log()
    report = store.add_report(_draft())
    updated = store.update_report(report.id, {"status": "resolved", "response_time": 45}, "eve")

    assert updated.status == ReportStatus.RESOLVED
    assert [e.action for e in updated.audit_trail] == [
        AuditAction.CREATED,
        AuditAction.UPDATED,
        AuditAction.STATUS_CHANGED,
    ]
    transition = updated.audit_trail[-1]
    assert transition.details == "Status changed to resolved"
    assert transition.user == "eve"
    assert [a.action for a in get_activity_log(2)] == ["status_changed", "updated"]


def test_load_orders_newest_first(store, make_report):
    old, mid, new = make_report(minutes_ago=60), make_report(minutes_ago=30), make_report()
    assert store.load([mid, new, old]) == 3
    assert [r.id for r in store.snapshot()] == [new.id, mid.id, old.id]
    assert store.get(old.id) is old
    assert store.get(new.id) is new


def test_load_rejects_whole_batch_on_bad_report(store, make_report):
    good = make_report(minutes_ago=10)
    reused = make_report()
    store.insert(reused)

    with pytest.raises(ValueError):
        store.load([good, reused])
    assert len(store) == 1
    assert good.id not in store
    # Rejected ids are not reserved
    store.insert(good)
    assert store.snapshot()[0] is good
