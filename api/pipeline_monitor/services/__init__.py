"""
Dashboard services.

Provides:
- Stage classification and job enrichment
- Per-source coverage aggregation
- Error extraction from failed jobs
- Historical metrics synthesis and summaries
- Job views (status counts, sorting, stage buckets, cards)
- Snapshot state holder and the polling loop
"""

from .stage_classifier import classify_job, enrich_job, enrich_jobs, StageClassification
from .coverage import aggregate_coverage
from .error_extractor import extract_errors, active_errors
from .history import (
    HistoryProvider,
    SyntheticHistoryProvider,
    summarize_history,
    series_trend,
    history_cache,
)
from .dashboard_service import build_snapshot
from .dashboard_state import DashboardState, dashboard_state
from .poller import DashboardPoller, dashboard_poller

__all__ = [
    "classify_job",
    "enrich_job",
    "enrich_jobs",
    "StageClassification",
    "aggregate_coverage",
    "extract_errors",
    "active_errors",
    "HistoryProvider",
    "SyntheticHistoryProvider",
    "summarize_history",
    "series_trend",
    "history_cache",
    "build_snapshot",
    "DashboardState",
    "dashboard_state",
    "DashboardPoller",
    "dashboard_poller",
]
