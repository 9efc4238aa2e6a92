from __future__ import annotations
import time
from collections import defaultdict, deque
from threading import RLock
from typing import Any, Deque, Dict, Optional

Labels = Optional[Dict[str, str]]


def _series_key(name: str, labels: Labels) -> str:
    if not labels:
        return name
    rendered = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
    return f"{name}{{{rendered}}}"


class RuntimeMetrics:
    """In-process counters and duration samples behind ``GET /metrics``."""

    def __init__(self, max_samples: int = 500):
        self._lock = RLock()
        self._counters: Dict[str, float] = defaultdict(float)
        self._durations: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=max_samples))
        self._started_at = time.time()

    def increment(self, name: str, labels: Labels = None, value: float = 1.0) -> None:
        with self._lock:
            self._counters[_series_key(name, labels)] += value

    def observe(self, name: str, duration_ms: float, labels: Labels = None) -> None:
        with self._lock:
            self._durations[_series_key(name, labels)].append(duration_ms)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._durations.clear()

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "durations_ms": {
                    key: self._summarize(samples)
                    for key, samples in self._durations.items() if samples
                },
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "timestamp": time.time(),
            }

    @staticmethod
    def _summarize(samples: Deque[float]) -> Dict[str, float]:
        ordered = sorted(samples)
        n = len(ordered)
        return {
            "count": n,
            "mean": round(sum(ordered) / n, 3),
            "max": round(ordered[-1], 3),
            "p50": round(ordered[n // 2], 3),
            "p95": round(ordered[min(n - 1, int(n * 0.95))], 3),
        }


runtime_metrics = RuntimeMetrics()


def inc_counter(name: str, labels: Labels = None, value: float = 1.0) -> None:
    runtime_metrics.increment(name, labels, value)


def record_duration(name: str, duration_ms: float, labels: Labels = None) -> None:
    runtime_metrics.observe(name, duration_ms, labels)
