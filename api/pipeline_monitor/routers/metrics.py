from __future__ import annotations
import os
import psutil
from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.obs.metrics import runtime_metrics
from pipeline_monitor.obs.prometheus_metrics import prometheus_metrics
from pipeline_monitor.services.dashboard_state import dashboard_state
from pipeline_monitor.services.history import history_cache

logger = get_logger(__name__)

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def get_metrics() -> JSONResponse:
    """Runtime metrics in JSON, with process stats."""
    process = psutil.Process(os.getpid())
    return JSONResponse({
        **runtime_metrics.snapshot(),
        "dashboard": {
            "has_snapshot": dashboard_state.snapshot is not None,
            "stream_subscribers": dashboard_state.subscriber_count,
            "history_cache": history_cache.get_stats(),
        },
        "system": {
            "cpu_percent": psutil.cpu_percent(),
            "memory_percent": psutil.virtual_memory().percent,
            "process_memory_mb": round(process.memory_info().rss / 1024 / 1024, 2),
        },
    })


@router.get("/metrics/prometheus")
async def get_prometheus_metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_prometheus_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
