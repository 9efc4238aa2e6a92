from __future__ import annotations
from typing import TYPE_CHECKING
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, Info, generate_latest
from pipeline_monitor import __version__
from pipeline_monitor.config import ENVIRONMENT
from pipeline_monitor.obs.logging_setup import get_logger

if TYPE_CHECKING:
    from pipeline_monitor.models.schemas import DashboardSnapshot

logger = get_logger(__name__)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

POLL_CYCLES = Counter(
    "dashboard_poll_cycles_total",
    "Poll cycles by data origin",
    ["origin"],  # live | fallback | mock
)

UPSTREAM_FETCH_DURATION = Histogram(
    "pipeline_api_fetch_duration_seconds",
    "Duration of requests to the pipeline API",
    ["endpoint", "outcome"],
)

DEMO_MODE = Gauge(
    "dashboard_demo_mode",
    "1 while the dashboard is serving mock data",
)

SYNC_JOBS = Gauge(
    "pipeline_sync_jobs",
    "Sync jobs in the latest snapshot",
    ["status"],
)

SOURCE_COVERAGE = Gauge(
    "pipeline_source_coverage_percent",
    "Year coverage per source",
    ["source"],
)

ACTIVE_ERRORS = Gauge(
    "pipeline_active_errors",
    "Unresolved pipeline errors in the latest snapshot",
)

SERVICE_INFO = Info(
    "service_info",
    "Service information",
)


class PrometheusMetrics:
    """Prometheus collectors with dashboard-specific helpers."""

    def __init__(self):
        SERVICE_INFO.info({
            "version": __version__,
            "service": "pipeline-monitor",
            "environment": ENVIRONMENT,
        })

    def record_request(self, method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=str(status_code)).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration_seconds)

    def record_fetch(self, endpoint: str, outcome: str, duration_seconds: float) -> None:
        UPSTREAM_FETCH_DURATION.labels(endpoint=endpoint, outcome=outcome).observe(duration_seconds)

    def record_poll(self, origin: str) -> None:
        POLL_CYCLES.labels(origin=origin).inc()

    def update_snapshot(self, snapshot: "DashboardSnapshot") -> None:
        """Refresh the gauges that mirror the latest snapshot."""
        DEMO_MODE.set(1 if snapshot.demo_mode else 0)
        for status, count in snapshot.status_counts.model_dump().items():
            SYNC_JOBS.labels(status=status).set(count)
        SOURCE_COVERAGE.clear()
        for entry in snapshot.coverage:
            SOURCE_COVERAGE.labels(source=entry.source_id).set(entry.coverage_percent)
        ACTIVE_ERRORS.set(sum(1 for error in snapshot.errors if not error.is_resolved))

    def get_prometheus_metrics(self) -> bytes:
        return generate_latest()

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
