"""Async report event bus using asyncio.Queue.

Every store mutation made through the API (or the simulator) is announced as a
ReportEvent. Handlers subscribe by event name and run on a single dispatcher
task, in emission order.
"""
import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Coroutine

from oceanwatch.models.report import AuditAction
from oceanwatch.utils.audit import utcnow

logger = logging.getLogger(__name__)

REPORT_CREATED = "ReportCreated"
REPORT_STATUS_CHANGED = "ReportStatusChanged"
REPORT_COMMENTED = "ReportCommented"
REPORT_UPDATED = "ReportUpdated"
REPORT_EVENTS = (REPORT_CREATED, REPORT_STATUS_CHANGED, REPORT_COMMENTED, REPORT_UPDATED)

_EVENT_FOR_ACTION = {
    AuditAction.CREATED: REPORT_CREATED,
    AuditAction.STATUS_CHANGED: REPORT_STATUS_CHANGED,
    AuditAction.COMMENT_ADDED: REPORT_COMMENTED,
    AuditAction.UPDATED: REPORT_UPDATED,
}


@dataclass(frozen=True)
class ReportEvent:
    name: str
    report_id: str
    action: AuditAction
    actor: str
    emitted_at: datetime = field(default_factory=utcnow)

    @classmethod
    def for_action(cls, action: AuditAction, report_id: str, actor: str) -> "ReportEvent":
        """Event announcing a mutation that appended `action` to a report's trail."""
        action = AuditAction(action)
        return cls(name=_EVENT_FOR_ACTION[action], report_id=report_id, action=action, actor=actor)


EventHandler = Callable[[ReportEvent], Coroutine[Any, Any, None]]

_handlers: dict[str, list[EventHandler]] = defaultdict(list)
_queue: asyncio.Queue[ReportEvent] | None = None
_dispatcher_task: asyncio.Task | None = None


def on(*event_names: str) -> Callable[[EventHandler], EventHandler]:
    """Decorator to register an event handler for one or more events."""

    def decorator(handler: EventHandler) -> EventHandler:
        for name in event_names:
            if handler not in _handlers[name]:
                _handlers[name].append(handler)
        return handler

    return decorator


def unsubscribe(handler: EventHandler) -> None:
    for handlers in _handlers.values():
        if handler in handlers:
            handlers.remove(handler)


def is_running() -> bool:
    return _queue is not None


async def emit(event: ReportEvent) -> None:
    """Queue an event. No-op when the bus is not running."""
    if _queue is not None:
        await _queue.put(event)


async def emit_report_event(action: AuditAction, report_id: str, actor: str) -> ReportEvent:
    event = ReportEvent.for_action(action, report_id, actor)
    await emit(event)
    return event


async def _dispatch_loop() -> None:
    """Process events from queue and invoke handlers."""
    assert _queue is not None
    queue = _queue
    while True:
        try:
            event = await queue.get()
        except asyncio.CancelledError:
            break
        try:
            for h in list(_handlers.get(event.name, [])):
                try:
                    await h(event)
                except Exception as e:
                    logger.exception("Event handler %s failed for %s: %s", h.__name__, event.name, e)
        except asyncio.CancelledError:
            queue.task_done()
            break
        queue.task_done()


async def drain(timeout: float = 5.0) -> bool:
    """Wait until every queued event has been handled. False on timeout."""
    if _queue is None:
        return True
    try:
        await asyncio.wait_for(_queue.join(), timeout)
    except asyncio.TimeoutError:
        logger.warning("Event bus drain timed out with %d events pending", _queue.qsize())
        return False
    return True


async def start_event_bus() -> None:
    """Start the event bus dispatcher."""
    global _queue, _dispatcher_task
    _queue = asyncio.Queue()
    _dispatcher_task = asyncio.create_task(_dispatch_loop())
    logger.info("Event bus started")


async def stop_event_bus(drain_timeout: float = 5.0) -> None:
    """Handle pending events, then stop the dispatcher."""
    global _queue, _dispatcher_task
    if _dispatcher_task:
        await drain(drain_timeout)
        _dispatcher_task.cancel()
        try:
            await _dispatcher_task
        except asyncio.CancelledError:
            pass
        _dispatcher_task = None
    _queue = None
    logger.info("Event bus stopped")
