"""
Observability for kindql.

Query events are written as one JSON object per line through stdlib
logging; counters and latencies are kept in a process-wide QueryMetrics.

JSON encoding is skipped entirely when the target logger has the level
disabled, so debug events cost one ``isEnabledFor`` check in production.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol


# =============================================================================
# Structured Logging
# =============================================================================


class StructuredLogger(Protocol):
    """Sink for named events carrying key-value fields."""

    def emit(self, level: int, event: str, **fields: Any) -> None: ...


class JSONLogger:
    """
    Emits events as JSON lines on a stdlib logger.

    Example:
        JSONLogger("kindql.query").emit(logging.INFO, "Query completed", errors=0)

        {"ts": "2026-10-19T10:30:00+00:00", "level": "info",
         "event": "Query completed", "errors": 0}
    """

    def __init__(self, name: str = "kindql"):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def emit(self, level: int, event: str, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return

        payload = {
            "ts": datetime.now(UTC).isoformat(),
            "level": logging.getLevelName(level).lower(),
            "event": event,
            **fields,
        }
        self._logger.log(level, json.dumps(payload, default=str))


# =============================================================================
# Query Logger
# =============================================================================


@dataclass
class QueryLogger:
    """
    Logger for query lifecycle events, tagged with the request id.

    Example:
        log = QueryLogger(request_id="abc-123")
        log.query_started(operation_name=None, kinds=3)
        log.field_error(path=["animals", 2], code="KIND_NOT_FOUND", message="...")
        log.query_completed(success=False, duration_ms=1.2, error_count=1)
    """

    request_id: str
    inner: StructuredLogger | None = None

    def __post_init__(self) -> None:
        if self.inner is None:
            self.inner = JSONLogger("kindql.query")

    def query_started(self, operation_name: str | None, kinds: int) -> None:
        self._emit(logging.DEBUG, "Query started", operation_name=operation_name, kinds=kinds)

    def field_error(self, path: list[str | int] | None, code: str | None, message: str) -> None:
        self._emit(logging.WARNING, "Field resolution error", path=path, code=code, error=message)

    def query_completed(self, success: bool, duration_ms: float, error_count: int) -> None:
        if success:
            self._emit(logging.INFO, "Query completed", duration_ms=round(duration_ms, 2))
        else:
            self._emit(
                logging.WARNING,
                "Query completed with errors",
                duration_ms=round(duration_ms, 2),
                error_count=error_count,
            )

    def _emit(self, level: int, event: str, **fields: Any) -> None:
        self.inner.emit(level, event, request_id=self.request_id, **fields)


# =============================================================================
# Metrics
# =============================================================================


def _percentile(samples: list[float], p: float) -> float | None:
    """Linear-interpolated percentile, None for no samples."""
    if not samples:
        return None
    ordered = sorted(samples)
    rank = (len(ordered) - 1) * p
    low = int(rank)
    high = min(low + 1, len(ordered) - 1)
    return ordered[low] + (rank - low) * (ordered[high] - ordered[low])


@dataclass
class QueryMetrics:
    """
    Query execution metrics.

    Tracks execution counts, per-code field error counts, schema builds
    and a bounded duration histogram. Updated concurrently from request
    worker threads; every mutation holds the instance lock.
    """

    executions_total: int = 0
    executions_success: int = 0
    executions_failed: int = 0
    schema_builds: int = 0
    field_errors: dict[str, int] = field(default_factory=dict)

    execution_durations_ms: list[float] = field(default_factory=list)
    max_histogram_entries: int = 1000

    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def record_execution(self, success: bool, duration_ms: float) -> None:
        with self._lock:
            self.executions_total += 1
            if success:
                self.executions_success += 1
            else:
                self.executions_failed += 1

            self.execution_durations_ms.append(duration_ms)
            overflow = len(self.execution_durations_ms) - self.max_histogram_entries
            if overflow > 0:
                del self.execution_durations_ms[:overflow]

    def record_field_error(self, code: str | None) -> None:
        key = code or "UNKNOWN"
        with self._lock:
            self.field_errors[key] = self.field_errors.get(key, 0) + 1

    def record_schema_build(self) -> None:
        with self._lock:
            self.schema_builds += 1

    def get_stats(self) -> dict[str, Any]:
        """Consistent copy of all counters."""
        with self._lock:
            durations = list(self.execution_durations_ms)
            return {
                "executions": {
                    "total": self.executions_total,
                    "success": self.executions_success,
                    "failed": self.executions_failed,
                },
                "duration_ms": {
                    "p50": _percentile(durations, 0.5),
                    "p95": _percentile(durations, 0.95),
                    "p99": _percentile(durations, 0.99),
                },
                "field_errors": dict(self.field_errors),
                "schema_builds": self.schema_builds,
            }

    def reset(self) -> None:
        with self._lock:
            self.executions_total = 0
            self.executions_success = 0
            self.executions_failed = 0
            self.schema_builds = 0
            self.field_errors.clear()
            self.execution_durations_ms.clear()


_global_metrics = QueryMetrics()


def get_metrics() -> QueryMetrics:
    """Process-wide metrics instance."""
    return _global_metrics


def reset_metrics() -> None:
    """Zero the process-wide metrics (used between tests)."""
    _global_metrics.reset()


__all__ = [
    "JSONLogger",
    "QueryLogger",
    "QueryMetrics",
    "StructuredLogger",
    "get_metrics",
    "reset_metrics",
]
