"""Performance monitor: per-operation timing metrics and threshold alerts.

Advisory only; recording never blocks or fails the operation being timed.
Thread-safe via a single lock, like the event log it is modelled on.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from epic_progression.config import ProgressionConfig
from epic_progression.core.enums import AlertLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Alert:
    """A metric sample that crossed its warning or critical threshold."""

    metric: str
    level: AlertLevel
    duration_ms: float
    threshold_ms: float
    timestamp: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric,
            "level": self.level.name.lower(),
            "duration_ms": round(self.duration_ms, 3),
            "threshold_ms": self.threshold_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class OperationRecord:
    operation: str
    duration_ms: float
    success: bool
    timestamp: float
    error: str = ""


@dataclass(slots=True)
class MetricStats:
    """Running statistics for one metric."""

    count: int = 0
    last: float = 0.0
    total: float = 0.0
    minimum: float = math.inf
    maximum: float = 0.0
    history: deque = field(default_factory=deque)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, duration_ms: float, history_size: int) -> None:
        self.count += 1
        self.last = duration_ms
        self.total += duration_ms
        self.minimum = min(self.minimum, duration_ms)
        self.maximum = max(self.maximum, duration_ms)
        self.history.append(duration_ms)
        while len(self.history) > history_size:
            self.history.popleft()

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "last_ms": round(self.last, 3),
            "average_ms": round(self.average, 3),
            "min_ms": round(self.minimum, 3) if self.count else 0.0,
            "max_ms": round(self.maximum, 3),
        }


class PerformanceMonitor:
    """Collects duration metrics, raises threshold alerts, and scores health."""

    __slots__ = (
        "_config", "_thresholds", "_metrics", "_alerts", "_operations",
        "_total", "_successful", "_failed", "_lock",
    )

    def __init__(self, config: ProgressionConfig | None = None) -> None:
        self._config = config or ProgressionConfig()
        self._thresholds: dict[str, tuple[float, float]] = {
            name: (warning, critical) for name, warning, critical in self._config.monitor_thresholds
        }
        self._metrics: dict[str, MetricStats] = {}
        self._alerts: deque[Alert] = deque(maxlen=self._config.monitor_alert_limit)
        self._operations: deque[OperationRecord] = deque(maxlen=self._config.monitor_operation_limit)
        self._total = 0
        self._successful = 0
        self._failed = 0
        self._lock = threading.Lock()

    # -- recording --

    def record(self, metric: str, duration_ms: float) -> Alert | None:
        """Record one sample; return the alert it triggered, if any."""
        with self._lock:
            stats = self._metrics.get(metric)
            if stats is None:
                stats = MetricStats()
                self._metrics[metric] = stats
            stats.add(duration_ms, self._config.monitor_history_size)
            alert = self._check_threshold(metric, duration_ms)
            if alert is not None:
                self._alerts.append(alert)
        if alert is not None:
            logger.warning(
                "%s alert: %s took %.2fms (threshold %.1fms)",
                alert.level.name, metric, duration_ms, alert.threshold_ms,
            )
        return alert

    def _check_threshold(self, metric: str, duration_ms: float) -> Alert | None:
        limits = self._thresholds.get(metric)
        if limits is None:
            return None
        warning, critical = limits
        if duration_ms > critical:
            return Alert(metric, AlertLevel.CRITICAL, duration_ms, critical, time.time())
        if duration_ms > warning:
            return Alert(metric, AlertLevel.WARNING, duration_ms, warning, time.time())
        return None

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Time the enclosed block as *operation*; failures are counted and re-raised."""
        start = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self._finish(operation, start, False, type(exc).__name__)
            raise
        self._finish(operation, start, True, "")

    def _finish(self, operation: str, start: float, success: bool, error: str) -> None:
        duration_ms = (time.perf_counter() - start) * 1000.0
        with self._lock:
            self._total += 1
            if success:
                self._successful += 1
            else:
                self._failed += 1
            self._operations.append(OperationRecord(operation, duration_ms, success, time.time(), error))
        self.record(operation, duration_ms)

    # -- reporting --

    def metrics(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            return {name: stats.to_dict() for name, stats in self._metrics.items()}

    def alerts(self, count: int | None = None) -> list[Alert]:
        with self._lock:
            items = list(self._alerts)
        return items if count is None else items[-count:]

    def operations(self, count: int = 50) -> list[OperationRecord]:
        with self._lock:
            items = list(self._operations)
        return items[-count:]

    def operation_counts(self) -> dict[str, int]:
        with self._lock:
            return {"total": self._total, "successful": self._successful, "failed": self._failed}

    def health(self) -> dict[str, Any]:
        """Score 0-100: -20 per critical alert, -5 per warning, -10 if 10%+ of operations failed."""
        alerts = self.alerts()
        counts = self.operation_counts()
        critical = sum(1 for a in alerts if a.level == AlertLevel.CRITICAL)
        warning = len(alerts) - critical
        failure_rate = counts["failed"] / counts["total"] if counts["total"] else 0.0

        score = 100 - 20 * critical - 5 * warning
        if failure_rate >= 0.1:
            score -= 10
        score = max(0, score)

        if score >= 80:
            status = "healthy"
        elif score >= 60:
            status = "warning"
        else:
            status = "critical"
        return {
            "score": score,
            "status": status,
            "critical_alerts": critical,
            "warning_alerts": warning,
            "failure_rate": round(failure_rate, 4),
        }

    def recommendations(self) -> list[str]:
        recs: list[str] = []
        with self._lock:
            snapshot = {name: (s.average, s.count) for name, s in self._metrics.items()}
            failed, total = self._failed, self._total
        for name, (average, count) in sorted(snapshot.items()):
            limits = self._thresholds.get(name)
            if limits is None or count == 0:
                continue
            if average > limits[0]:
                recs.append(f"{name}: average {average:.2f}ms exceeds the {limits[0]:.1f}ms warning threshold")
        if total and failed / total >= 0.1:
            recs.append(f"{failed} of {total} operations failed; inspect rejected requests")
        return recs

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._alerts.clear()
            self._operations.clear()
            self._total = 0
            self._successful = 0
            self._failed = 0
