from __future__ import annotations
import json
import pytest
from pipeline_monitor.routers.dashboard import stream_snapshots
from pipeline_monitor.services.dashboard_service import build_snapshot
from pipeline_monitor.services.dashboard_state import dashboard_state


class ClientConnection:
    """Stands in for the Starlette request; only disconnect polling is used."""

    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self) -> bool:
        return self.disconnected


def _parse(frame: str):
    fields = dict(line.split(": ", 1) for line in frame.strip().split("\n"))
    return fields, json.loads(fields["data"])


@pytest.mark.asyncio
async def test_stream_sends_current_snapshot_then_publishes_and_heartbeats(monkeypatch, stats, jobs, now):
    monkeypatch.setattr("pipeline_monitor.routers.dashboard.STREAM_HEARTBEAT_SECONDS", 0.05)
    dashboard_state.publish(build_snapshot(stats, jobs, now=now))

    response = await stream_snapshots(ClientConnection())
    assert response.media_type == "text/event-stream"
    assert dashboard_state.subscriber_count == 1
    frames = response.body_iterator

    fields, event = _parse(await frames.__anext__())
    assert fields["event"] == "snapshot"
    assert "id" not in fields
    assert event["demo_mode"] is False
    assert event["status_counts"]["failed"] == 1

    published = build_snapshot(stats, jobs, demo_mode=True, now=now)
    dashboard_state.publish(published)
    fields, event = _parse(await frames.__anext__())
    assert fields["event"] == "snapshot"
    assert fields["id"] == published.last_updated.isoformat()
    assert event["demo_mode"] is True

    fields, event = _parse(await frames.__anext__())
    assert fields["event"] == "heartbeat"
    assert event["type"] == "heartbeat"

    await frames.aclose()
    assert dashboard_state.subscriber_count == 0


@pytest.mark.asyncio
async def test_stream_without_snapshot_waits_for_first_publish(monkeypatch, stats, jobs, now):
    monkeypatch.setattr("pipeline_monitor.routers.dashboard.STREAM_HEARTBEAT_SECONDS", 0.05)

    response = await stream_snapshots(ClientConnection())
    frames = response.body_iterator

    fields, _ = _parse(await frames.__anext__())
    assert fields["event"] == "heartbeat"

    dashboard_state.publish(build_snapshot(stats, jobs, now=now))
    fields, event = _parse(await frames.__anext__())
    assert fields["event"] == "snapshot"
    assert event["coverage"][0]["sourceId"] == "acordaos"

    await frames.aclose()
    assert dashboard_state.subscriber_count == 0


@pytest.mark.asyncio
async def test_stream_ends_and_unsubscribes_when_client_disconnects(stats, jobs, now):
    dashboard_state.publish(build_snapshot(stats, jobs, now=now))
    connection = ClientConnection()

    response = await stream_snapshots(connection)
    frames = response.body_iterator
    await frames.__anext__()

    connection.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await frames.__anext__()
    assert dashboard_state.subscriber_count == 0
