from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Sequence
from pipeline_monitor.models.schemas import (
    EnrichedJob,
    JobsResponse,
    JobStatus,
    MetricCard,
    PipelineStageId,
    StageCard,
    StageStats,
    StatsResponse,
    StatusCounts,
)
from pipeline_monitor.models.stages import PIPELINE_STAGES

SortKey = Literal["date", "source", "status"]

_WAITING = (JobStatus.PENDING, JobStatus.QUEUED)
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def count_statuses(jobs: Sequence[EnrichedJob]) -> StatusCounts:
    """Per-status totals; queued jobs count as pending."""
    counts = StatusCounts()
    for job in jobs:
        if job.status is JobStatus.SYNCED:
            counts.synced += 1
        elif job.status is JobStatus.SYNCING:
            counts.syncing += 1
        elif job.status is JobStatus.FAILED:
            counts.failed += 1
        else:
            counts.pending += 1
    return counts


def sort_jobs(jobs: Sequence[EnrichedJob], sort_by: SortKey = "date") -> List[EnrichedJob]:
    if sort_by == "date":
        # newest first, undated jobs last
        return sorted(jobs, key=lambda job: job.updated_at or _EPOCH, reverse=True)
    if sort_by == "source":
        return sorted(jobs, key=lambda job: job.source.casefold())
    if sort_by == "status":
        return sorted(jobs, key=lambda job: job.status.value)
    return list(jobs)


def filter_jobs(jobs: Sequence[EnrichedJob], status: Optional[JobStatus] = None) -> List[EnrichedJob]:
    if status is None:
        return list(jobs)
    return [job for job in jobs if job.status is status]


def jobs_in_stage(jobs: Sequence[EnrichedJob], stage: PipelineStageId) -> List[EnrichedJob]:
    """Jobs displayed under one stage of the pipeline timeline."""
    if stage is PipelineStageId.HARVEST:
        return [job for job in jobs if job.status in _WAITING]
    if stage is PipelineStageId.SYNC:
        return [job for job in jobs if job.status in (JobStatus.SYNCING, JobStatus.FAILED)]
    if stage is PipelineStageId.INGEST:
        return [job for job in jobs if job.current_stage is PipelineStageId.INGEST]
    return [job for job in jobs if job.status is JobStatus.SYNCED]


def stage_stats(jobs: Sequence[EnrichedJob]) -> List[StageStats]:
    result = []
    for stage in PIPELINE_STAGES:
        bucket = jobs_in_stage(jobs, stage.id)
        result.append(StageStats(
            stage=stage.id,
            total=len(bucket),
            active=sum(1 for job in bucket if job.status is JobStatus.SYNCING),
            failed=sum(1 for job in bucket if job.status is JobStatus.FAILED),
            completed=sum(1 for job in bucket if job.status is JobStatus.SYNCED),
            pending=sum(1 for job in bucket if job.status in _WAITING),
        ))
    return result


def _card_status(stats: StageStats) -> str:
    if stats.failed:
        return "failed"
    if stats.active or stats.pending:
        return "in_progress"
    if stats.completed:
        return "completed"
    return "pending"


def stage_cards(stats: StatsResponse, jobs: JobsResponse, per_stage: Sequence[StageStats]) -> List[StageCard]:
    values: Dict[PipelineStageId, tuple] = {
        PipelineStageId.HARVEST: (len(jobs.sync_jobs), "sync states"),
        PipelineStageId.SYNC: (stats.total_documents, "documents in PostgreSQL"),
        PipelineStageId.INGEST: (stats.total_documents, "documents ingested"),
        PipelineStageId.INDEX: (jobs.total_elastic_docs, "documents indexed"),
    }
    by_stage = {item.stage: item for item in per_stage}

    cards = []
    for stage in PIPELINE_STAGES:
        value, subtitle = values[stage.id]
        cards.append(StageCard(
            id=stage.id,
            label=stage.label,
            description=stage.description,
            value=value,
            subtitle=subtitle,
            status=_card_status(by_stage.get(stage.id, StageStats(stage=stage.id))),
        ))
    return cards


def metric_cards(stats: StatsResponse, jobs: JobsResponse) -> List[MetricCard]:
    return [
        MetricCard(title="Total Documents", value=stats.total_documents),
        MetricCard(title="Indexed Documents", value=jobs.total_elastic_docs),
        MetricCard(title="Data Sources", value=len(stats.sources)),
        MetricCard(title="Sync Jobs", value=len(jobs.sync_jobs)),
    ]
