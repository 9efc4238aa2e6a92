from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Tuple
from pipeline_monitor.models.schemas import JobsResponse, StatsResponse

Payloads = Tuple[StatsResponse, JobsResponse]


class DataSourceError(Exception):
    """Raised when a data source cannot produce a valid snapshot."""


class DataSource(ABC):
    """Supplier of the raw /stats and /jobs payloads."""

    @abstractmethod
    async def fetch(self) -> Payloads:
        """Fetch stats and jobs; raise DataSourceError on failure."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def is_demo(self) -> bool:
        """True when the payloads are fixture data rather than live."""
        return False

    async def aclose(self) -> None:
        pass
