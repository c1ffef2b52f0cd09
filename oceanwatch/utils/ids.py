"""Report ID generation."""
import threading
import time

_lock = threading.Lock()
_last_value = 0


def _next_value() -> int:
    global _last_value
    with _lock:
        now_ms = int(time.time() * 1000)
        _last_value = max(now_ms, _last_value + 1)
        return _last_value


def generate_report_id() -> str:
    """Generate a unique, strictly increasing time-based report ID: RPT-{millis}."""
    return f"RPT-{_next_value()}"
