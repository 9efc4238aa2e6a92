"""
Data sources for the dashboard poller.

Provides:
- DataSource interface and DataSourceError
- LiveDataSource (pipeline HTTP API)
- MockDataSource (built-in demo fixture)
"""

from pipeline_monitor.config import DATA_SOURCE_MODE
from .interfaces import DataSource, DataSourceError, Payloads
from .live_source import LiveDataSource
from .mock_source import MockDataSource, MOCK_STATS, MOCK_JOBS


def create_data_source(mode: str = DATA_SOURCE_MODE) -> DataSource:
    """Build the primary data source for a configured mode."""
    mode = mode.lower()
    if mode == "live":
        return LiveDataSource()
    if mode == "mock":
        return MockDataSource()
    raise ValueError(f"Unknown data source mode: {mode}")


__all__ = [
    "DataSource",
    "DataSourceError",
    "Payloads",
    "LiveDataSource",
    "MockDataSource",
    "MOCK_STATS",
    "MOCK_JOBS",
    "create_data_source",
]
