"""
Pipeline Monitor - dashboard backend for the document-ingestion pipeline.

Polls the pipeline API (harvest → sync → ingest → index) and serves
view-ready aggregates:
- Job stage classification and progress
- Per-source year coverage
- Error lists from failed jobs
- Historical trend series
- Demo mode on a built-in fixture when the API is unreachable
"""

__version__ = "1.0.0"

# Export main application
from .main import app

__all__ = ["app"]
