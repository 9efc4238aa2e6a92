from __future__ import annotations
from datetime import datetime, timezone
from pipeline_monitor.models.schemas import Source
from pipeline_monitor.services.coverage import aggregate_coverage


def _source(source_id: str, description: str = "") -> Source:
    return Source(id=source_id, description=description, source_type="csv_http")


def test_synced_and_failed_years(make_job):
    jobs = [make_job(source="A", year=2023, status="synced"), make_job(source="A", year=2022, status="failed")]
    [coverage] = aggregate_coverage(jobs, [_source("A", "Source A")])

    assert coverage.source_id == "A"
    assert coverage.source_name == "Source A"
    assert coverage.years_available == [2023, 2022]
    assert coverage.years_synced == [2023]
    assert coverage.years_with_errors == [2022]
    assert coverage.coverage_percent == 50


def test_source_without_jobs_still_reported(make_job):
    jobs = [make_job(source="A", year=2024)]
    result = aggregate_coverage(jobs, [_source("A"), _source("B")])

    assert [c.source_id for c in result] == ["A", "B"]
    empty = result[1]
    assert empty.coverage_percent == 0
    assert empty.years_available == []
    assert empty.years_synced == []
    assert empty.last_sync_date is None
    assert empty.source_name == "B"


def test_years_descending_and_deduplicated(make_job):
    jobs = [
        make_job(source="A", year=2020, status="synced"),
        make_job(source="A", year=2024, status="pending"),
        make_job(source="A", year=2022, status="synced"),
        make_job(source="A", year=2022, status="syncing"),
    ]
    [coverage] = aggregate_coverage(jobs, [_source("A")])
    assert coverage.years_available == [2024, 2022, 2020]
    assert coverage.years_synced == [2022, 2020]
    assert coverage.coverage_percent == 67


def test_last_sync_date_and_document_sums(make_job):
    jobs = [
        make_job(source="A", year=2024, updated_at="2025-01-19T10:30:00", documents_total=100, documents_processed=100),
        make_job(source="A", year=2023, updated_at="2025-01-19T11:00:00+00:00", documents_total=50),
        make_job(source="A", year=2022, status="pending"),
    ]
    [coverage] = aggregate_coverage(jobs, [_source("A")])

    assert coverage.last_sync_date == datetime(2025, 1, 19, 11, 0, tzinfo=timezone.utc)
    assert coverage.total_documents == 150
    assert coverage.synced_documents == 100


def test_jobs_for_unknown_sources_ignored(make_job):
    result = aggregate_coverage([make_job(source="ghost")], [_source("A")])
    assert len(result) == 1
    assert result[0].years_available == []


def test_aggregation_is_repeatable(jobs, stats):
    first = aggregate_coverage(jobs.sync_jobs, stats.sources)
    second = aggregate_coverage(jobs.sync_jobs, stats.sources)
    assert first == second


def test_serialized_keys_are_camel_case(make_job):
    [coverage] = aggregate_coverage([make_job(source="A")], [_source("A")])
    dumped = coverage.model_dump(by_alias=True)
    assert {"sourceId", "sourceName", "yearsAvailable", "yearsSynced", "yearsWithErrors",
            "coveragePercent", "lastSyncDate", "totalDocuments", "syncedDocuments"} == set(dumped)
