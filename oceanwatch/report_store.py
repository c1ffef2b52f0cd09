"""In-memory report store + WebSocket ConnectionManager."""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from oceanwatch.models.report import (
    AuditAction,
    Comment,
    Priority,
    Report,
    ReportCreate,
    ReportStatus,
    Severity,
)
from oceanwatch.utils.audit import log_action, new_entry, utcnow
from oceanwatch.utils.ids import generate_report_id

logger = logging.getLogger(__name__)

# Fields that only the store itself may set
IMMUTABLE_FIELDS = frozenset({"id", "timestamp", "comments", "audit_trail"})


class ReportNotFoundError(ValueError):
    """A mutation or lookup referenced an unknown report id."""

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Report {report_id} not found")
        self.report_id = report_id


def derive_priority(severity: Severity) -> Priority:
    """Initial priority from submitted severity.

    Mapping kept as-is from the original dashboard: high -> critical,
    medium -> high, anything else -> medium. Unreviewed business rule.
    """
    if severity == Severity.HIGH:
        return Priority.CRITICAL
    if severity == Severity.MEDIUM:
        return Priority.HIGH
    return Priority.MEDIUM


class ReportStore:
    """Authoritative report collection, newest first.

    Mutations are copy-on-write: the stored report is replaced by a new model
    with new comment/audit lists, so snapshots handed out earlier never change.
    """

    def __init__(self) -> None:
        self._reports: list[Report] = []
        self._index: dict[str, int] = {}
        self._known_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._reports)

    def __contains__(self, report_id: object) -> bool:
        return report_id in self._index

    def snapshot(self) -> tuple[Report, ...]:
        """Immutable view of the collection at this moment (newest first)."""
        return tuple(self._reports)

    def get(self, report_id: str) -> Report:
        idx = self._index.get(report_id)
        if idx is None:
            raise ReportNotFoundError(report_id)
        return self._reports[idx]

    def _check_insertable(self, report: Report) -> None:
        if report.id in self._known_ids:
            raise ValueError(f"Report id {report.id} already used")
        if not report.audit_trail or report.audit_trail[0].action != AuditAction.CREATED:
            raise ValueError(f"Report {report.id} must start with a 'created' audit entry")

    def insert(self, report: Report) -> Report:
        """Store a pre-built report (seeding). Ids are never reused."""
        self._check_insertable(report)
        self._reports.insert(0, report)
        self._known_ids.add(report.id)
        self._reindex()
        return report

    def add_report(self, draft: ReportCreate, now: Optional[datetime] = None) -> Report:
        """Create a pending report from a submitted draft."""
        ts = now or utcnow()
        report_id = generate_report_id()
        while report_id in self._known_ids:
            report_id = generate_report_id()
        report = Report(
            id=report_id,
            status=ReportStatus.PENDING,
            priority=derive_priority(draft.severity),
            timestamp=ts,
            comments=[],
            audit_trail=[
                new_entry(AuditAction.CREATED, draft.reporter, "Report submitted", ts),
            ],
            **draft.model_dump(),
        )
        self.insert(report)
        log_action(draft.reporter, AuditAction.CREATED.value, report_id, "Report submitted")
        logger.info("Report %s created (%s, %s)", report_id, report.type, report.severity.value)
        return report

    def update_status(
        self,
        report_id: str,
        status: ReportStatus,
        user: str,
        now: Optional[datetime] = None,
    ) -> Report:
        """Set status and log it. Same-status transitions are allowed and still logged."""
        current = self.get(report_id)
        status = ReportStatus(status)
        details = f"Status changed to {status.value}"
        entry = new_entry(AuditAction.STATUS_CHANGED, user, details, now)
        updated = current.model_copy(update={
            "status": status,
            "audit_trail": [*current.audit_trail, entry],
        })
        self._replace(updated)
        log_action(user, AuditAction.STATUS_CHANGED.value, report_id, details)
        logger.info("Report %s status -> %s by %s", report_id, status.value, user)
        return updated

    def add_comment(
        self,
        report_id: str,
        content: str,
        author: str,
        role: str = "citizen",
        now: Optional[datetime] = None,
    ) -> Report:
        current = self.get(report_id)
        if not content or not content.strip():
            raise ValueError("Comment content must not be empty")
        ts = now or utcnow()
        comment = Comment(author=author, content=content.strip(), timestamp=ts, role=role)
        entry = new_entry(AuditAction.COMMENT_ADDED, author, f"Comment added by {author}", ts)
        updated = current.model_copy(update={
            "comments": [*current.comments, comment],
            "audit_trail": [*current.audit_trail, entry],
        })
        self._replace(updated)
        log_action(author, AuditAction.COMMENT_ADDED.value, report_id, None)
        return updated

    def update_report(
        self,
        report_id: str,
        fields: dict[str, Any],
        user: str,
        now: Optional[datetime] = None,
    ) -> Report:
        """Shallow-merge `fields` into the report; details list field names in given order."""
        current = self.get(report_id)
        if not fields:
            raise ValueError("No fields to update")
        blocked = [name for name in fields if name in IMMUTABLE_FIELDS]
        if blocked:
            raise ValueError(f"Fields cannot be updated: {', '.join(blocked)}")
        unknown = [name for name in fields if name not in Report.model_fields]
        if unknown:
            raise ValueError(f"Unknown report fields: {', '.join(unknown)}")
        details = ", ".join(fields)
        entry = new_entry(AuditAction.UPDATED, user, details, now)
        entries = [entry]
        status_details = None
        if "status" in fields:
            # A status set through a generic update is still a logged transition
            status = ReportStatus(fields["status"])
            status_details = f"Status changed to {status.value}"
            entries.append(new_entry(AuditAction.STATUS_CHANGED, user, status_details, entry.timestamp))
        merged = current.model_dump()
        merged.update(fields)
        merged["audit_trail"] = [*current.audit_trail, *entries]
        # Re-validate so merged values get the same coercion as submissions
        updated = Report.model_validate(merged)
        self._replace(updated)
        log_action(user, AuditAction.UPDATED.value, report_id, details)
        if status_details:
            log_action(user, AuditAction.STATUS_CHANGED.value, report_id, status_details)
        logger.info("Report %s updated by %s: %s", report_id, user, details)
        return updated

    def load(self, reports: Iterable[Report]) -> int:
        """Bulk insert. Ends up as if inserted one by one, oldest first.

        All-or-nothing: one bad report rejects the whole batch.
        """
        batch = list(reversed(sorted(reports, key=lambda r: r.timestamp)))
        batch_ids: set[str] = set()
        for report in batch:
            self._check_insertable(report)
            if report.id in batch_ids:
                raise ValueError(f"Report id {report.id} already used")
            batch_ids.add(report.id)
        self._reports[:0] = batch
        self._known_ids.update(batch_ids)
        self._reindex()
        return len(batch)

    def clear(self) -> None:
        """Drop all reports. Used by the seed endpoint; ids stay reserved."""
        self._reports.clear()
        self._index.clear()

    def _replace(self, report: Report) -> None:
        self._reports[self._index[report.id]] = report

    def _reindex(self) -> None:
        self._index = {r.id: i for i, r in enumerate(self._reports)}


report_store = ReportStore()


@dataclass
class ConnectionManager:
    """Manages WebSocket connections for the live report feed."""

    connections: set[Any] = field(default_factory=set)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def connect(self, websocket: Any) -> None:
        async with self._lock:
            self.connections.add(websocket)

    async def disconnect(self, websocket: Any) -> None:
        async with self._lock:
            self.connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        dead: set[Any] = set()
        async with self._lock:
            conns = set(self.connections)
        for ws in conns:
            try:
                await ws.send_json(message)
            except Exception:
                dead.add(ws)
        for ws in dead:
            async with self._lock:
                self.connections.discard(ws)

    @property
    def connection_count(self) -> int:
        return len(self.connections)


connection_manager = ConnectionManager()

