"""
API routers module.

Provides:
- Dashboard views (overview, jobs, pipeline, coverage, errors, history, stream)
- Health, readiness and liveness probes
- JSON and Prometheus metrics
"""

from . import dashboard, health, metrics, readiness

__all__ = [
    "dashboard",
    "health",
    "metrics",
    "readiness",
]
