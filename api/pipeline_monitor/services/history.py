from __future__ import annotations
import math
import random
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from cachetools import TTLCache
from pipeline_monitor.config import HISTORY_CACHE_TTL
from pipeline_monitor.models.schemas import HistoricalMetrics, HistorySummary, MetricPoint, MetricsPeriod
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.utils.rounding import round_half_up

logger = get_logger(__name__)

# period -> (number of points, step between points)
PERIOD_LAYOUT: Dict[MetricsPeriod, Tuple[int, timedelta]] = {
    MetricsPeriod.LAST_24H: (24, timedelta(hours=1)),
    MetricsPeriod.LAST_7D: (7, timedelta(days=1)),
    MetricsPeriod.LAST_30D: (30, timedelta(days=1)),
}


class HistoryProvider(ABC):
    """Source of the historical series behind the trend charts."""

    @abstractmethod
    def get_history(self, period: MetricsPeriod, now: Optional[datetime] = None) -> HistoricalMetrics:
        """Return the three aligned series for ``period`` ending at ``now``."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


def _series_anchor(step: timedelta, now: datetime) -> datetime:
    now = now.astimezone(timezone.utc)
    if step >= timedelta(days=1):
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    return now.replace(minute=0, second=0, microsecond=0)


class SyntheticHistoryProvider(HistoryProvider):
    """Generates plausible history until a metrics store is available.

    Output is deterministic for a given period and anchor bucket, so repeated
    requests within the same hour/day draw the same chart.
    """

    def __init__(self, hourly_documents: int = 2000, daily_documents: int = 45000):
        self.hourly_documents = hourly_documents
        self.daily_documents = daily_documents

    @property
    def name(self) -> str:
        return "synthetic"

    def get_history(self, period: MetricsPeriod, now: Optional[datetime] = None) -> HistoricalMetrics:
        count, step = PERIOD_LAYOUT[period]
        end = _series_anchor(step, now or datetime.now(timezone.utc))
        rng = random.Random(f"{period.value}:{end.isoformat()}")

        hourly = step < timedelta(days=1)
        base = self.hourly_documents if hourly else self.daily_documents
        minutes_per_step = step.total_seconds() / 60

        documents: List[MetricPoint] = []
        errors: List[MetricPoint] = []
        throughput: List[MetricPoint] = []
        for i in range(count):
            timestamp = end - step * (count - 1 - i)
            # daily cycle for hourly series, weekly-ish swell for daily ones
            phase = 2 * math.pi * (timestamp.hour / 24 if hourly else i / 7)
            processed = max(0, int(base * (1 + 0.3 * math.sin(phase)) * rng.uniform(0.8, 1.2)))
            failed = rng.randint(0, 5) if hourly else rng.randint(0, 40)

            documents.append(MetricPoint(timestamp=timestamp, value=processed))
            errors.append(MetricPoint(timestamp=timestamp, value=failed))
            throughput.append(MetricPoint(timestamp=timestamp, value=round_half_up(processed / minutes_per_step)))

        return HistoricalMetrics(
            period=period,
            documents_processed=documents,
            errors_over_time=errors,
            throughput_over_time=throughput,
        )


def series_total(points: Sequence[MetricPoint]) -> int:
    return sum(point.value for point in points)


def series_trend(values: Sequence[float]) -> int:
    """Percentage change of the second half over the first half.

    The first half is the first ``len // 2`` values; 0 when it sums to 0.
    """
    half = len(values) // 2
    first_half = sum(values[:half])
    second_half = sum(values[half:])
    if first_half <= 0:
        return 0
    return round_half_up((second_half - first_half) / first_half * 100)


def series_average(points: Sequence[MetricPoint]) -> int:
    if not points:
        return 0
    return round_half_up(series_total(points) / len(points))


def summarize_history(metrics: HistoricalMetrics) -> HistorySummary:
    return HistorySummary(
        total_documents=series_total(metrics.documents_processed),
        total_errors=series_total(metrics.errors_over_time),
        trend_percent=series_trend([p.value for p in metrics.documents_processed]),
        avg_throughput=series_average(metrics.throughput_over_time),
    )


class HistoryCache:
    """TTL cache in front of a history provider, keyed by period."""

    def __init__(self, provider: HistoryProvider, maxsize: int = 8, ttl: int = HISTORY_CACHE_TTL):
        self.provider = provider
        self.cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self.hit_count = 0
        self.miss_count = 0

    def get(self, period: MetricsPeriod) -> HistoricalMetrics:
        if period in self.cache:
            self.hit_count += 1
            return self.cache[period]

        self.miss_count += 1
        metrics = self.provider.get_history(period)
        self.cache[period] = metrics
        logger.debug("History generated", period=period.value, provider=self.provider.name)
        return metrics

    def clear(self) -> None:
        self.cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.name,
            "size": len(self.cache),
            "hits": self.hit_count,
            "misses": self.miss_count,
        }


history_cache = HistoryCache(SyntheticHistoryProvider())
