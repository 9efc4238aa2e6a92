from __future__ import annotations
from pipeline_monitor.models.schemas import JobsResponse, StatsResponse
from .interfaces import DataSource, Payloads

# Fixture served when the pipeline API is unreachable (demo mode)
MOCK_STATS = StatsResponse.model_validate({
    "sources": [
        {
            "id": "tcu_acordaos",
            "description": "Acórdãos do TCU",
            "source_type": "csv_http",
            "enabled": True,
            "document_count": 497566,
        },
        {
            "id": "tcu_decisoes",
            "description": "Decisões Normativas",
            "source_type": "csv_http",
            "enabled": True,
            "document_count": 12340,
        },
        {
            "id": "tcu_sumulas",
            "description": "Súmulas do TCU",
            "source_type": "csv_http",
            "enabled": False,
            "document_count": 287,
        },
    ],
    "total_documents": 510193,
    "elasticsearch_available": True,
})

MOCK_JOBS = JobsResponse.model_validate({
    "sync_jobs": [
        {"source": "tcu_acordaos", "year": 2024, "status": "synced", "updated_at": "2025-01-19T10:30:00"},
        {"source": "tcu_acordaos", "year": 2023, "status": "synced", "updated_at": "2025-01-19T10:28:00"},
        {"source": "tcu_acordaos", "year": 2022, "status": "synced", "updated_at": "2025-01-19T10:25:00"},
        {"source": "tcu_acordaos", "year": 2021, "status": "synced", "updated_at": "2025-01-19T10:22:00"},
        {"source": "tcu_acordaos", "year": 2020, "status": "synced", "updated_at": "2025-01-19T10:20:00"},
        {"source": "tcu_decisoes", "year": 2024, "status": "synced", "updated_at": "2025-01-19T09:45:00"},
        {"source": "tcu_decisoes", "year": 2023, "status": "syncing", "updated_at": "2025-01-19T09:40:00"},
    ],
    "elastic_indexes": {
        "tcu_acordaos": 497566,
        "tcu_decisoes": 12340,
    },
    "total_elastic_docs": 509906,
})


class MockDataSource(DataSource):
    """Static fixture; never fails."""

    def __init__(self, stats: StatsResponse = MOCK_STATS, jobs: JobsResponse = MOCK_JOBS):
        self.stats = stats
        self.jobs = jobs

    @property
    def name(self) -> str:
        return "mock"

    @property
    def is_demo(self) -> bool:
        return True

    async def fetch(self) -> Payloads:
        return self.stats.model_copy(deep=True), self.jobs.model_copy(deep=True)
