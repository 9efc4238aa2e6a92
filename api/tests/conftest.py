from __future__ import annotations
import os

# Keep the suite off the network: the poller reads these at import time
os.environ.setdefault("DATA_SOURCE_MODE", "mock")
os.environ.setdefault("POLLER_AUTOSTART", "false")
os.environ.setdefault("LOG_STRUCTURED", "false")

from datetime import datetime, timezone

import pytest

from pipeline_monitor.models.schemas import JobsResponse, StatsResponse, SyncJob
from pipeline_monitor.services.dashboard_state import dashboard_state
from pipeline_monitor.services.history import history_cache


def _make_job(source: str = "A", year: int = 2024, status: str = "synced", **fields) -> SyncJob:
    return SyncJob.model_validate({"source": source, "year": year, "status": status, **fields})


@pytest.fixture
def make_job():
    return _make_job


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 1, 20, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def stats() -> StatsResponse:
    return StatsResponse.model_validate({
        "sources": [
            {"id": "acordaos", "description": "Acórdãos", "source_type": "csv_http", "enabled": True, "document_count": 1000},
            {"id": "decisoes", "description": "Decisões", "source_type": "csv_http", "enabled": True, "document_count": 200},
            {"id": "sumulas", "description": "", "source_type": "csv_http", "enabled": False, "document_count": 0},
        ],
        "total_documents": 1200,
        "elasticsearch_available": True,
    })


@pytest.fixture
def jobs() -> JobsResponse:
    return JobsResponse.model_validate({
        "sync_jobs": [
            {"source": "acordaos", "year": 2024, "status": "synced", "updated_at": "2025-01-19T10:30:00",
             "documents_processed": 600, "documents_total": 600},
            {"source": "acordaos", "year": 2023, "status": "failed", "updated_at": "2025-01-19T10:28:00",
             "error_message": "CSV download timed out", "retry_count": 2,
             "documents_processed": 10, "documents_total": 400},
            {"source": "decisoes", "year": 2024, "status": "syncing", "updated_at": "2025-01-19T09:45:00",
             "documents_processed": 50, "documents_total": 200},
            {"source": "decisoes", "year": 2023, "status": "queued", "updated_at": None},
            {"source": "decisoes", "year": 2022, "status": "pending"},
        ],
        "elastic_indexes": {"acordaos": 600},
        "total_elastic_docs": 600,
    })


@pytest.fixture(autouse=True)
def clean_state():
    dashboard_state.reset()
    history_cache.clear()
    yield
    dashboard_state.reset()
