from __future__ import annotations
from fastapi.testclient import TestClient
from pipeline_monitor.datasources import DataSource, DataSourceError
from pipeline_monitor.main import app
from pipeline_monitor.services.dashboard_service import build_snapshot
from pipeline_monitor.services.dashboard_state import dashboard_state
from pipeline_monitor.services.poller import dashboard_poller

client = TestClient(app)


class UnreachableSource(DataSource):
    @property
    def name(self) -> str:
        return "unreachable"

    async def fetch(self):
        raise DataSourceError("pipeline API unreachable")


def _publish(stats, jobs, now, demo_mode=False):
    dashboard_state.publish(build_snapshot(stats, jobs, demo_mode=demo_mode, now=now))


def test_health():
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Pipeline Monitor"
    assert data["data_source"] == "mock"
    assert "endpoints" in data


def test_live():
    response = client.get("/live")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"


def test_dashboard_loading_before_first_snapshot():
    response = client.get("/dashboard/overview")
    assert response.status_code == 503
    assert response.json()["detail"]["status"] == "loading"


def test_dashboard_fatal_state():
    dashboard_state.fail("Failed to load dashboard data: boom")
    response = client.get("/dashboard/coverage")
    assert response.status_code == 503
    assert response.json()["detail"]["error"].endswith("boom")


def test_overview(stats, jobs, now):
    _publish(stats, jobs, now)
    response = client.get("/dashboard/overview")
    assert response.status_code == 200

    data = response.json()
    assert data["demo_mode"] is False
    assert data["elasticsearch_available"] is True
    assert [card["title"] for card in data["metric_cards"]] == [
        "Total Documents", "Indexed Documents", "Data Sources", "Sync Jobs",
    ]
    assert [card["id"] for card in data["stage_cards"]] == ["harvest", "sync", "ingest", "index"]
    assert len(data["sources"]) == 3


def test_jobs_sorted_and_filtered(stats, jobs, now):
    _publish(stats, jobs, now)

    response = client.get("/dashboard/jobs", params={"sort_by": "source"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert data["shown"] == 5
    assert data["status_counts"] == {"synced": 1, "syncing": 1, "failed": 1, "pending": 2}
    assert data["jobs"][0]["source"] == "acordaos"

    syncing = client.get("/dashboard/jobs", params={"status": "syncing"}).json()
    assert syncing["shown"] == 1
    job = syncing["jobs"][0]
    assert job["currentStage"] == "sync"
    assert job["progress"] == 25
    assert job["nextStage"] == "ingest"


def test_jobs_rejects_unknown_status(stats, jobs, now):
    _publish(stats, jobs, now)
    response = client.get("/dashboard/jobs", params={"status": "exploded"})
    assert response.status_code == 422


def test_pipeline_stats(stats, jobs, now):
    _publish(stats, jobs, now)
    data = client.get("/dashboard/pipeline").json()
    stages = {stage["id"]: stage for stage in data["stages"]}
    assert stages["harvest"]["stats"]["pending"] == 2
    assert stages["sync"]["stats"]["failed"] == 1
    assert stages["index"]["label"] == "Index"

    harvest_jobs = client.get("/dashboard/pipeline/harvest/jobs").json()
    assert {job["year"] for job in harvest_jobs} == {2023, 2022}
    assert client.get("/dashboard/pipeline/archive/jobs").status_code == 422


def test_coverage(stats, jobs, now):
    _publish(stats, jobs, now)
    data = client.get("/dashboard/coverage").json()

    assert [entry["sourceId"] for entry in data] == ["acordaos", "decisoes", "sumulas"]
    acordaos = data[0]
    assert acordaos["yearsAvailable"] == [2024, 2023]
    assert acordaos["yearsWithErrors"] == [2023]
    assert acordaos["coveragePercent"] == 50
    assert data[2]["coveragePercent"] == 0
    assert data[2]["sourceName"] == "sumulas"


def test_errors(stats, jobs, now):
    _publish(stats, jobs, now)
    data = client.get("/dashboard/errors").json()
    assert len(data) == 1
    error = data[0]
    assert error["source"] == "acordaos"
    assert error["stage"] == "sync"
    assert error["retryCount"] == 2
    assert error["isResolved"] is False


def test_history_periods():
    for period, count in (("24h", 24), ("7d", 7), ("30d", 30)):
        response = client.get("/dashboard/history", params={"period": period})
        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["period"] == period
        assert len(data["metrics"]["documentsProcessed"]) == count
        assert len(data["metrics"]["errorsOverTime"]) == count
        assert len(data["metrics"]["throughputOverTime"]) == count
        assert set(data["summary"]) == {"totalDocuments", "totalErrors", "trendPercent", "avgThroughput"}

    assert client.get("/dashboard/history", params={"period": "1y"}).status_code == 422


def test_refresh_uses_demo_data():
    """With the mock source configured the refresh publishes demo data."""
    response = client.post("/dashboard/refresh")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["demo_mode"] is True
    assert data["jobs"] == 7

    overview = client.get("/dashboard/overview").json()
    assert overview["demo_mode"] is True


def test_ready_requires_running_poller(stats, jobs, now):
    _publish(stats, jobs, now)
    response = client.get("/ready")
    # the poller only runs inside the app lifespan
    assert response.status_code == 503
    assert response.json()["checks"]["snapshot"]["status"] == "healthy"
    assert response.json()["checks"]["poller"]["status"] == "unhealthy"


def test_startup_publishes_first_snapshot_and_starts_poller(monkeypatch):
    monkeypatch.setattr("pipeline_monitor.main.POLLER_AUTOSTART", True)
    with TestClient(app) as live_client:
        response = live_client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert live_client.get("/dashboard/overview").json()["demo_mode"] is True

    assert not dashboard_poller.running


def test_startup_survives_unreachable_pipeline_without_fallback(monkeypatch):
    monkeypatch.setattr("pipeline_monitor.main.POLLER_AUTOSTART", True)
    monkeypatch.setattr(dashboard_poller, "source", UnreachableSource())
    monkeypatch.setattr(dashboard_poller, "fallback", None)

    with TestClient(app) as live_client:
        response = live_client.get("/dashboard/overview")
        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["status"] == "error"
        assert "pipeline API unreachable" in detail["error"]
        assert dashboard_poller.running


def test_metrics_endpoints(stats, jobs, now):
    _publish(stats, jobs, now)
    client.get("/dashboard/coverage")

    data = client.get("/metrics").json()
    assert "counters" in data
    assert "system" in data
    assert data["dashboard"]["has_snapshot"] is True

    prometheus = client.get("/metrics/prometheus")
    assert prometheus.status_code == 200
    assert "http_requests_total" in prometheus.text


def test_stream_event_payload(stats, jobs, now):
    from pipeline_monitor.routers.dashboard import _snapshot_event
    from pipeline_monitor.utils.sse import create_sse_message

    event = _snapshot_event(build_snapshot(stats, jobs, now=now))
    assert event["type"] == "snapshot"
    assert event["status_counts"]["failed"] == 1
    assert event["coverage"][0]["sourceId"] == "acordaos"
    assert event["errors"][0]["isResolved"] is False

    message = create_sse_message(event, event_type="snapshot", event_id="1")
    assert message.startswith("id: 1\nevent: snapshot\ndata: {")
    assert message.endswith("\n\n")
