from __future__ import annotations
import asyncio
from typing import Any, AsyncGenerator, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from pipeline_monitor.config import STREAM_HEARTBEAT_SECONDS
from pipeline_monitor.models.schemas import (
    DashboardSnapshot,
    EnrichedJob,
    ErrorEntry,
    HistoryResponse,
    JobsListResponse,
    JobStatus,
    MetricsPeriod,
    OverviewResponse,
    PipelineStageId,
    RefreshResponse,
    SourceCoverage,
)
from pipeline_monitor.models.stages import PIPELINE_STAGES
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.services.dashboard_state import dashboard_state
from pipeline_monitor.services.error_extractor import active_errors
from pipeline_monitor.services.history import history_cache, summarize_history
from pipeline_monitor.services.job_views import SortKey, filter_jobs, jobs_in_stage, sort_jobs
from pipeline_monitor.services.poller import dashboard_poller
from pipeline_monitor.utils.sse import create_sse_heartbeat, create_sse_message

logger = get_logger(__name__)
router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def current_snapshot() -> DashboardSnapshot:
    """The latest snapshot, or 503 while loading / in the fatal state."""
    if dashboard_state.error:
        raise HTTPException(status_code=503, detail={"status": "error", "error": dashboard_state.error})
    snapshot = dashboard_state.snapshot
    if snapshot is None:
        raise HTTPException(status_code=503, detail={"status": "loading"})
    return snapshot


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(snapshot: DashboardSnapshot = Depends(current_snapshot)) -> OverviewResponse:
    return OverviewResponse(
        metric_cards=snapshot.metric_cards,
        stage_cards=snapshot.stage_cards,
        sources=snapshot.stats.sources,
        elasticsearch_available=snapshot.stats.elasticsearch_available,
        demo_mode=snapshot.demo_mode,
        last_updated=snapshot.last_updated,
    )


@router.get("/jobs", response_model=JobsListResponse)
async def list_jobs(
    sort_by: SortKey = "date",
    status: Optional[JobStatus] = None,
    snapshot: DashboardSnapshot = Depends(current_snapshot),
) -> JobsListResponse:
    """Enriched jobs, sorted and optionally filtered by status."""
    jobs = filter_jobs(sort_jobs(snapshot.enriched_jobs, sort_by), status)
    return JobsListResponse(
        jobs=jobs,
        status_counts=snapshot.status_counts,
        shown=len(jobs),
        total=len(snapshot.enriched_jobs),
    )


@router.get("/pipeline")
async def get_pipeline(snapshot: DashboardSnapshot = Depends(current_snapshot)) -> Dict[str, Any]:
    """Stage configuration alongside per-stage job stats."""
    stats_by_stage = {item.stage: item for item in snapshot.stage_stats}
    return {
        "stages": [
            {
                **stage.model_dump(mode="json"),
                "stats": stats_by_stage[stage.id].model_dump(mode="json"),
            }
            for stage in PIPELINE_STAGES
        ],
        "demo_mode": snapshot.demo_mode,
    }


@router.get("/pipeline/{stage}/jobs", response_model=List[EnrichedJob])
async def list_stage_jobs(
    stage: PipelineStageId,
    snapshot: DashboardSnapshot = Depends(current_snapshot),
) -> List[EnrichedJob]:
    return jobs_in_stage(snapshot.enriched_jobs, stage)


@router.get("/coverage", response_model=List[SourceCoverage])
async def get_coverage(snapshot: DashboardSnapshot = Depends(current_snapshot)) -> List[SourceCoverage]:
    return snapshot.coverage


@router.get("/errors", response_model=List[ErrorEntry])
async def get_errors(snapshot: DashboardSnapshot = Depends(current_snapshot)) -> List[ErrorEntry]:
    return active_errors(snapshot.errors)


@router.get("/history", response_model=HistoryResponse)
async def get_history(period: MetricsPeriod = Query(MetricsPeriod.LAST_7D)) -> HistoryResponse:
    metrics = history_cache.get(period)
    return HistoryResponse(metrics=metrics, summary=summarize_history(metrics))


@router.post("/refresh", response_model=RefreshResponse)
async def refresh() -> RefreshResponse:
    """Run one poll cycle now instead of waiting for the next tick."""
    try:
        snapshot = await dashboard_poller.poll_once()
    except Exception as e:
        logger.error("Manual refresh failed", error=str(e))
        raise HTTPException(status_code=502, detail=f"Refresh failed: {e}")

    return RefreshResponse(
        status="success",
        demo_mode=snapshot.demo_mode,
        jobs=len(snapshot.enriched_jobs),
        last_updated=snapshot.last_updated,
    )


def _snapshot_event(snapshot: DashboardSnapshot) -> Dict[str, Any]:
    return {
        "type": "snapshot",
        "last_updated": snapshot.last_updated.isoformat(),
        "demo_mode": snapshot.demo_mode,
        "status_counts": snapshot.status_counts.model_dump(),
        "stage_stats": [item.model_dump(mode="json") for item in snapshot.stage_stats],
        "coverage": [item.model_dump(mode="json", by_alias=True) for item in snapshot.coverage],
        "errors": [item.model_dump(mode="json", by_alias=True) for item in active_errors(snapshot.errors)],
    }


@router.get("/stream")
async def stream_snapshots(request: Request) -> StreamingResponse:
    """Push a ``snapshot`` event after every poll, ``heartbeat`` while idle."""
    queue = dashboard_state.subscribe()
    logger.info("Dashboard stream opened", subscribers=dashboard_state.subscriber_count)

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            if dashboard_state.snapshot is not None:
                yield create_sse_message(_snapshot_event(dashboard_state.snapshot), event_type="snapshot")
            while not await request.is_disconnected():
                try:
                    snapshot = await asyncio.wait_for(queue.get(), timeout=STREAM_HEARTBEAT_SECONDS)
                except asyncio.TimeoutError:
                    yield create_sse_heartbeat()
                    continue
                yield create_sse_message(
                    _snapshot_event(snapshot),
                    event_type="snapshot",
                    event_id=snapshot.last_updated.isoformat(),
                )
        finally:
            dashboard_state.unsubscribe(queue)
            logger.info("Dashboard stream closed", subscribers=dashboard_state.subscriber_count)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
