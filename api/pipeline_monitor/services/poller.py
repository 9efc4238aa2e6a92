from __future__ import annotations
import asyncio
import time
from typing import Optional
from pipeline_monitor.config import MOCK_FALLBACK_ENABLED, POLL_INTERVAL_SECONDS
from pipeline_monitor.datasources import DataSource, DataSourceError, MockDataSource, create_data_source
from pipeline_monitor.models.schemas import DashboardSnapshot
from pipeline_monitor.obs.decorators import timed, traced
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.obs.metrics import inc_counter
from pipeline_monitor.obs.prometheus_metrics import prometheus_metrics
from pipeline_monitor.services.dashboard_service import build_snapshot
from pipeline_monitor.services.dashboard_state import DashboardState, dashboard_state

logger = get_logger(__name__)


class DashboardPoller:
    """Fetches pipeline payloads on a fixed interval and publishes snapshots.

    When the primary source fails, the fallback source (the demo fixture)
    fills in and the snapshot is flagged as demo mode. The next tick is the
    only retry.
    """

    def __init__(
        self,
        source: DataSource,
        state: DashboardState,
        fallback: Optional[DataSource] = None,
        interval: float = POLL_INTERVAL_SECONDS,
    ):
        self.source = source
        self.state = state
        self.fallback = fallback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.last_poll_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @traced(operation_name="poll_cycle")
    @timed("poll_cycle_duration_ms")
    async def poll_once(self) -> DashboardSnapshot:
        origin = self.source.name
        try:
            stats, jobs = await self.source.fetch()
            demo_mode = self.source.is_demo
        except DataSourceError as e:
            if self.fallback is None:
                raise
            logger.warning("Pipeline API not available, using mock data",
                           error=str(e),
                           data_source=self.source.name)
            stats, jobs = await self.fallback.fetch()
            demo_mode = True
            origin = "fallback"

        snapshot = build_snapshot(stats, jobs, demo_mode=demo_mode)
        self.state.publish(snapshot)
        self.last_poll_at = time.time()

        inc_counter("poll_cycles_total", {"origin": origin})
        prometheus_metrics.record_poll(origin)
        prometheus_metrics.update_snapshot(snapshot)
        logger.debug("Snapshot published",
                     origin=origin,
                     sync_jobs=len(snapshot.enriched_jobs),
                     errors=len(snapshot.errors),
                     demo_mode=demo_mode)
        return snapshot

    async def poll_or_fail(self) -> Optional[DashboardSnapshot]:
        """Run one cycle; a failure before any snapshot becomes the fatal state."""
        try:
            return await self.poll_once()
        except Exception as e:
            logger.exception("Poll cycle failed", error=str(e))
            self.state.fail(f"Failed to load dashboard data: {e}")
            return None

    async def _run(self) -> None:
        while True:
            started = time.monotonic()
            await self.poll_or_fail()
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="dashboard-poller")
        logger.info("Dashboard poller started",
                     interval_seconds=self.interval,
                     data_source=self.source.name,
                     fallback=self.fallback.name if self.fallback else None)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Dashboard poller stopped")
        await self.source.aclose()


def build_poller(state: DashboardState = dashboard_state) -> DashboardPoller:
    source = create_data_source()
    fallback = None
    if MOCK_FALLBACK_ENABLED and not source.is_demo:
        fallback = MockDataSource()
    return DashboardPoller(source, state, fallback=fallback)


dashboard_poller = build_poller()
