from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pipeline_monitor import __version__
from pipeline_monitor.config import CORS_ORIGINS, LOG_LEVEL, LOG_STRUCTURED, POLLER_AUTOSTART

# Import observability setup
from pipeline_monitor.obs.otel import setup_tracing, shutdown_tracing
from pipeline_monitor.obs.logging_setup import get_logger, setup_logging
from pipeline_monitor.obs.middleware import MetricsMiddleware

# Import services
from pipeline_monitor.services.poller import dashboard_poller

# Import routers
from pipeline_monitor.routers import dashboard, health, metrics, readiness

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the poll loop on startup, tear it down on shutdown."""
    setup_logging(level=LOG_LEVEL, structured=LOG_STRUCTURED)
    setup_tracing()
    logger.info("Pipeline monitor starting", version=__version__)

    if POLLER_AUTOSTART:
        # first snapshot before serving, so the dashboard never opens empty
        await dashboard_poller.poll_or_fail()
        dashboard_poller.start()

    yield

    await dashboard_poller.stop()
    shutdown_tracing()
    logger.info("Pipeline monitor stopped")


app = FastAPI(
    title="Pipeline Monitor",
    version=__version__,
    description="Monitoring API for the harvest → sync → ingest → index document pipeline",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

FastAPIInstrumentor.instrument_app(
    app,
    excluded_urls="/health,/ready,/live,/metrics,/metrics/prometheus,/dashboard/stream",
)

app.include_router(health.router)
app.include_router(readiness.router)
app.include_router(metrics.router)
app.include_router(dashboard.router)


@app.get("/")
async def root():
    """Service information and endpoint index."""
    return {
        "service": "Pipeline Monitor",
        "version": __version__,
        "data_source": dashboard_poller.source.name,
        "poll_interval_seconds": dashboard_poller.interval,
        "endpoints": {
            "health": "/health - Basic health check",
            "ready": "/ready - Readiness probe (snapshot published, poller running)",
            "live": "/live - Liveness probe",
            "overview": "/dashboard/overview - Metric and stage cards",
            "jobs": "/dashboard/jobs - Enriched sync jobs (sort_by, status)",
            "pipeline": "/dashboard/pipeline - Stage stats",
            "coverage": "/dashboard/coverage - Year coverage per source",
            "errors": "/dashboard/errors - Active pipeline errors",
            "history": "/dashboard/history - Historical trends (period=24h|7d|30d)",
            "refresh": "/dashboard/refresh - Poll now (POST)",
            "stream": "/dashboard/stream - Snapshot events (SSE)",
            "metrics": "/metrics - JSON metrics",
            "prometheus": "/metrics/prometheus - Prometheus metrics",
        },
    }
