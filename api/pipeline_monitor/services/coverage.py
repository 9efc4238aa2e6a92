from __future__ import annotations
from collections import defaultdict
from typing import Dict, List, Sequence
from pipeline_monitor.models.schemas import JobStatus, Source, SourceCoverage, SyncJob
from pipeline_monitor.utils.rounding import percent


def _coverage_for(source: Source, jobs: Sequence[SyncJob]) -> SourceCoverage:
    years_available = sorted({job.year for job in jobs}, reverse=True)
    years_synced = sorted({job.year for job in jobs if job.status is JobStatus.SYNCED}, reverse=True)
    years_with_errors = sorted({job.year for job in jobs if job.status is JobStatus.FAILED}, reverse=True)

    dated = [job.updated_at for job in jobs if job.updated_at is not None]

    return SourceCoverage(
        source_id=source.id,
        source_name=source.description or source.id,
        years_available=years_available,
        years_synced=years_synced,
        years_with_errors=years_with_errors,
        coverage_percent=percent(len(years_synced), len(years_available)),
        last_sync_date=max(dated) if dated else None,
        total_documents=sum(job.documents_total or 0 for job in jobs),
        synced_documents=sum(job.documents_processed or 0 for job in jobs),
    )


def aggregate_coverage(jobs: Sequence[SyncJob], sources: Sequence[Source]) -> List[SourceCoverage]:
    """One coverage entry per configured source, in source order.

    Sources without jobs report 0% with empty year lists. Jobs for sources
    missing from ``sources`` are not reported.
    """
    by_source: Dict[str, List[SyncJob]] = defaultdict(list)
    for job in jobs:
        by_source[job.source].append(job)

    return [_coverage_for(source, by_source.get(source.id, [])) for source in sources]
