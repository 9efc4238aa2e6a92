from __future__ import annotations
import time
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pipeline_monitor import __version__
from pipeline_monitor.config import POLL_INTERVAL_SECONDS
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.services.dashboard_state import dashboard_state
from pipeline_monitor.services.poller import dashboard_poller

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """
    Kubernetes-style readiness probe.
    Ready once a snapshot has been published and the poller is running.
    """
    snapshot = dashboard_state.snapshot
    last_poll_at = dashboard_poller.last_poll_at
    poll_age = round(time.time() - last_poll_at, 1) if last_poll_at else None

    checks = {
        "snapshot": {
            "status": "healthy" if snapshot is not None else "unhealthy",
            "demo_mode": snapshot.demo_mode if snapshot else None,
            "error": dashboard_state.error,
        },
        "poller": {
            "status": "healthy" if dashboard_poller.running else "unhealthy",
            "data_source": dashboard_poller.source.name,
            "interval_seconds": dashboard_poller.interval,
            "last_poll_age_seconds": poll_age,
            # several missed ticks in a row
            "stale": poll_age is not None and poll_age > POLL_INTERVAL_SECONDS * 3,
        },
    }
    ready = snapshot is not None and dashboard_poller.running

    if not ready:
        logger.warning("Readiness check failed", checks=checks)

    return JSONResponse(
        {"status": "ready" if ready else "not_ready", "timestamp": time.time(), "checks": checks},
        status_code=200 if ready else 503,
    )


@router.get("/live")
async def liveness_check() -> JSONResponse:
    """Kubernetes-style liveness probe."""
    return JSONResponse({
        "status": "alive",
        "timestamp": time.time(),
        "service": "pipeline-monitor",
        "version": __version__,
    })
