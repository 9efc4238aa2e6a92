from __future__ import annotations
from typing import Iterable, List, NamedTuple, Optional, assert_never
from pipeline_monitor.models.schemas import EnrichedJob, JobStatus, PipelineStageId, SyncJob
from pipeline_monitor.models.stages import get_next_stage
from pipeline_monitor.utils.rounding import percent

# Progress assumed for a syncing job whose document totals are unknown
SYNCING_FALLBACK_PROGRESS = 50
FAILED_FALLBACK_PROGRESS = 0


class StageClassification(NamedTuple):
    current_stage: PipelineStageId
    progress: int
    next_stage: Optional[PipelineStageId]


def _document_progress(job: SyncJob, fallback: int) -> int:
    if not job.documents_total:
        return fallback
    processed = job.documents_processed or 0
    return max(0, min(100, percent(processed, job.documents_total)))


def classify_job(job: SyncJob) -> StageClassification:
    """Map a job's raw status to its pipeline stage and progress.

    Failures are always attributed to the sync stage; upstream does not
    report which stage actually failed.
    """
    status = job.status
    if status is JobStatus.PENDING or status is JobStatus.QUEUED:
        stage, progress = PipelineStageId.HARVEST, 0
    elif status is JobStatus.SYNCING:
        stage, progress = PipelineStageId.SYNC, _document_progress(job, SYNCING_FALLBACK_PROGRESS)
    elif status is JobStatus.SYNCED:
        stage, progress = PipelineStageId.INDEX, 100
    elif status is JobStatus.FAILED:
        stage, progress = PipelineStageId.SYNC, _document_progress(job, FAILED_FALLBACK_PROGRESS)
    else:
        assert_never(status)

    next_stage = None if progress == 100 else get_next_stage(stage)
    return StageClassification(stage, progress, next_stage)


def enrich_job(job: SyncJob) -> EnrichedJob:
    classification = classify_job(job)
    return EnrichedJob(
        **job.model_dump(),
        current_stage=classification.current_stage,
        progress=classification.progress,
        next_stage=classification.next_stage,
    )


def enrich_jobs(jobs: Iterable[SyncJob]) -> List[EnrichedJob]:
    """Enrich every job, preserving input order."""
    return [enrich_job(job) for job in jobs]
