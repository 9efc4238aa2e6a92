from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    SYNCED = "synced"
    SYNCING = "syncing"
    PENDING = "pending"
    QUEUED = "queued"
    FAILED = "failed"


class PipelineStageId(str, Enum):
    HARVEST = "harvest"
    SYNC = "sync"
    INGEST = "ingest"
    INDEX = "index"


class MetricsPeriod(str, Enum):
    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"


class CamelModel(BaseModel):
    """Derived view models are serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Upstream payloads (GET /stats, GET /jobs)

class Source(BaseModel):
    id: str
    description: str = ""
    source_type: str = ""
    enabled: bool = True
    document_count: int = 0


class StatsResponse(BaseModel):
    sources: List[Source] = Field(default_factory=list)
    total_documents: int = 0
    elasticsearch_available: bool = False


class SyncJob(BaseModel):
    source: str
    year: int
    status: JobStatus
    updated_at: Optional[datetime] = None
    error_message: Optional[str] = None
    documents_processed: Optional[int] = None
    documents_total: Optional[int] = None
    retry_count: Optional[int] = None

    @field_validator("updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # upstream emits naive ISO timestamps; keep every value comparable
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class JobsResponse(BaseModel):
    sync_jobs: List[SyncJob] = Field(default_factory=list)
    elastic_indexes: Dict[str, int] = Field(default_factory=dict)
    total_elastic_docs: int = 0


# Derived views

class EnrichedJob(SyncJob):
    model_config = ConfigDict(populate_by_name=True)

    current_stage: PipelineStageId = Field(alias="currentStage")
    progress: int = Field(ge=0, le=100)
    next_stage: Optional[PipelineStageId] = Field(default=None, alias="nextStage")


class SourceCoverage(CamelModel):
    source_id: str
    source_name: str
    years_available: List[int] = Field(default_factory=list)
    years_synced: List[int] = Field(default_factory=list)
    years_with_errors: List[int] = Field(default_factory=list)
    coverage_percent: int = Field(0, ge=0, le=100)
    last_sync_date: Optional[datetime] = None
    total_documents: int = 0
    synced_documents: int = 0


class ErrorEntry(CamelModel):
    id: str
    source: str
    year: int
    stage: PipelineStageId
    message: str
    timestamp: datetime
    retry_count: int = 0
    is_resolved: bool = False


class StatusCounts(BaseModel):
    synced: int = 0
    syncing: int = 0
    failed: int = 0
    pending: int = 0


class StageStats(BaseModel):
    stage: PipelineStageId
    total: int = 0
    active: int = 0
    failed: int = 0
    completed: int = 0
    pending: int = 0


class StageCard(BaseModel):
    id: PipelineStageId
    label: str
    description: str
    value: int
    subtitle: str
    status: Literal["completed", "in_progress", "pending", "failed"]


class MetricCard(BaseModel):
    title: str
    value: int


class MetricPoint(BaseModel):
    timestamp: datetime
    value: int


class HistoricalMetrics(CamelModel):
    period: MetricsPeriod
    documents_processed: List[MetricPoint]
    errors_over_time: List[MetricPoint]
    throughput_over_time: List[MetricPoint]


class HistorySummary(CamelModel):
    total_documents: int
    total_errors: int
    trend_percent: int
    avg_throughput: int


class DashboardSnapshot(BaseModel):
    """Everything the dashboard renders, derived from one poll."""
    model_config = ConfigDict(frozen=True)

    stats: StatsResponse
    jobs: JobsResponse
    enriched_jobs: List[EnrichedJob]
    coverage: List[SourceCoverage]
    errors: List[ErrorEntry]
    status_counts: StatusCounts
    stage_stats: List[StageStats]
    stage_cards: List[StageCard]
    metric_cards: List[MetricCard]
    demo_mode: bool
    last_updated: datetime


# API responses

class OverviewResponse(BaseModel):
    metric_cards: List[MetricCard]
    stage_cards: List[StageCard]
    sources: List[Source]
    elasticsearch_available: bool
    demo_mode: bool
    last_updated: datetime


class JobsListResponse(BaseModel):
    jobs: List[EnrichedJob]
    status_counts: StatusCounts
    shown: int
    total: int


class HistoryResponse(BaseModel):
    metrics: HistoricalMetrics
    summary: HistorySummary


class RefreshResponse(BaseModel):
    status: Literal["success"]
    demo_mode: bool
    jobs: int
    last_updated: datetime
