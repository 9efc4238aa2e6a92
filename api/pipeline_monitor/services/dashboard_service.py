from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from pipeline_monitor.models.schemas import DashboardSnapshot, JobsResponse, StatsResponse
from pipeline_monitor.services.coverage import aggregate_coverage
from pipeline_monitor.services.error_extractor import extract_errors
from pipeline_monitor.services.job_views import count_statuses, metric_cards, stage_cards, stage_stats
from pipeline_monitor.services.stage_classifier import enrich_jobs


def build_snapshot(
    stats: StatsResponse,
    jobs: JobsResponse,
    demo_mode: bool = False,
    now: Optional[datetime] = None,
) -> DashboardSnapshot:
    """Run every derivation over one poll's payloads.

    All views are recomputed from scratch; nothing carries over from the
    previous snapshot.
    """
    now = now or datetime.now(timezone.utc)
    sync_jobs = jobs.sync_jobs
    enriched = enrich_jobs(sync_jobs)
    per_stage = stage_stats(enriched)

    return DashboardSnapshot(
        stats=stats,
        jobs=jobs,
        enriched_jobs=enriched,
        coverage=aggregate_coverage(sync_jobs, stats.sources),
        errors=extract_errors(sync_jobs, now=now),
        status_counts=count_statuses(enriched),
        stage_stats=per_stage,
        stage_cards=stage_cards(stats, jobs, per_stage),
        metric_cards=metric_cards(stats, jobs),
        demo_mode=demo_mode,
        last_updated=now,
    )
