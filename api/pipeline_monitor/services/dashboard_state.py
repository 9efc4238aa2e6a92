from __future__ import annotations
import asyncio
from typing import Optional, Set
from pipeline_monitor.models.schemas import DashboardSnapshot
from pipeline_monitor.obs.logging_setup import get_logger

logger = get_logger(__name__)


class DashboardState:
    """Holds the latest snapshot; the poller is its only writer.

    Readers get the whole snapshot object, which is never mutated after
    publication, so one request always sees one consistent poll.
    """

    def __init__(self, subscriber_queue_size: int = 4):
        self._snapshot: Optional[DashboardSnapshot] = None
        self._error: Optional[str] = None
        self._subscribers: Set[asyncio.Queue] = set()
        self._queue_size = subscriber_queue_size

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self._snapshot is None and self._error is None

    @property
    def error(self) -> Optional[str]:
        """Fatal state: set only when no snapshot could ever be produced."""
        return self._error

    def publish(self, snapshot: DashboardSnapshot) -> None:
        self._snapshot = snapshot
        self._error = None
        for queue in list(self._subscribers):
            if queue.full():
                # slow consumer: drop its oldest pending snapshot
                queue.get_nowait()
            queue.put_nowait(snapshot)

    def fail(self, message: str) -> None:
        if self._snapshot is None:
            self._error = message

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def reset(self) -> None:
        self._snapshot = None
        self._error = None


dashboard_state = DashboardState()
