from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set
from pipeline_monitor.models.schemas import ErrorEntry, JobStatus, PipelineStageId, SyncJob


def _new_error_id(taken: Set[str]) -> str:
    while True:
        error_id = f"err_{uuid.uuid4().hex[:8]}"
        if error_id not in taken:
            taken.add(error_id)
            return error_id


def extract_errors(jobs: Sequence[SyncJob], now: Optional[datetime] = None) -> List[ErrorEntry]:
    """Turn failed jobs that carry a message into error entries.

    Output keeps the input job order. Every entry is attributed to the sync
    stage and starts unresolved; nothing tracks resolution yet.
    """
    now = now or datetime.now(timezone.utc)
    taken: Set[str] = set()
    entries: List[ErrorEntry] = []
    for job in jobs:
        if job.status is not JobStatus.FAILED or not job.error_message:
            continue
        entries.append(ErrorEntry(
            id=_new_error_id(taken),
            source=job.source,
            year=job.year,
            stage=PipelineStageId.SYNC,
            message=job.error_message,
            timestamp=job.updated_at or now,
            retry_count=job.retry_count or 0,
            is_resolved=False,
        ))
    return entries


def active_errors(errors: Sequence[ErrorEntry]) -> List[ErrorEntry]:
    return [error for error in errors if not error.is_resolved]
