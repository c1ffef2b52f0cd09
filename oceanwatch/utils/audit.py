"""Audit entries for report trails, plus an in-memory activity log across reports."""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from oceanwatch.config import settings
from oceanwatch.models.report import AuditAction, AuditEntry


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_entry(
    action: AuditAction,
    user: str,
    details: str,
    timestamp: Optional[datetime] = None,
) -> AuditEntry:
    """Build one audit-trail entry for a report mutation."""
    return AuditEntry(
        action=action,
        user=user,
        timestamp=timestamp or utcnow(),
        details=details,
    )


def filter_trail(trail: Iterable[AuditEntry], action: Optional[str] = None) -> list[AuditEntry]:
    """Entries newest first, optionally restricted to one action."""
    entries = [e for e in trail if action in (None, "", "all") or e.action == action]
    # Position breaks timestamp ties so later appends still come first
    ordered = sorted(enumerate(entries), key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
    return [e for _, e in ordered]


@dataclass
class ActivityRecord:
    actor: str
    action: str
    report_id: Optional[str]
    details: Optional[str]
    timestamp: datetime = field(default_factory=utcnow)


_activity_log: deque[ActivityRecord] = deque(maxlen=settings.audit_log_size)


def log_action(
    actor: str,
    action: str,
    report_id: Optional[str] = None,
    details: Optional[str] = None,
) -> None:
    """Record an action to the in-memory activity log."""
    _activity_log.append(
        ActivityRecord(actor=actor, action=action, report_id=report_id, details=details)
    )


def get_activity_log(limit: int = 100) -> list[ActivityRecord]:
    """Retrieve recent activity (most recent first)."""
    if limit <= 0:
        return []
    entries = list(_activity_log)
    return list(reversed(entries[-limit:]))


def clear_activity_log() -> None:
    _activity_log.clear()
