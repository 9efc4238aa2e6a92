"""
Data models and schemas.

Provides:
- Pydantic models for the upstream /stats and /jobs payloads
- Derived dashboard views (enriched jobs, coverage, errors, history)
- Static pipeline stage configuration
"""

from .schemas import (
    JobStatus,
    PipelineStageId,
    MetricsPeriod,
    Source,
    StatsResponse,
    SyncJob,
    JobsResponse,
    EnrichedJob,
    SourceCoverage,
    ErrorEntry,
    StatusCounts,
    StageStats,
    StageCard,
    MetricCard,
    MetricPoint,
    HistoricalMetrics,
    HistorySummary,
    DashboardSnapshot,
)
from .stages import PIPELINE_STAGES, PipelineStageConfig, get_stage_config, get_next_stage

__all__ = [
    "JobStatus",
    "PipelineStageId",
    "MetricsPeriod",
    "Source",
    "StatsResponse",
    "SyncJob",
    "JobsResponse",
    "EnrichedJob",
    "SourceCoverage",
    "ErrorEntry",
    "StatusCounts",
    "StageStats",
    "StageCard",
    "MetricCard",
    "MetricPoint",
    "HistoricalMetrics",
    "HistorySummary",
    "DashboardSnapshot",
    "PIPELINE_STAGES",
    "PipelineStageConfig",
    "get_stage_config",
    "get_next_stage",
]
