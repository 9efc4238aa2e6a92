"""
Observability module - Tracing, metrics, and logging.

Provides:
- OpenTelemetry distributed tracing
- Runtime metrics (JSON) and Prometheus collectors
- Structured logging with trace correlation
- Tracing and timing decorators
"""

from .otel import setup_tracing, shutdown_tracing
from .metrics import runtime_metrics, inc_counter, record_duration
from .prometheus_metrics import prometheus_metrics
from .logging_setup import setup_logging, get_logger
from .decorators import traced, timed

__all__ = [
    "setup_tracing",
    "shutdown_tracing",
    "runtime_metrics",
    "inc_counter",
    "record_duration",
    "prometheus_metrics",
    "setup_logging",
    "get_logger",
    "traced",
    "timed",
]
