from __future__ import annotations
import os

# Upstream pipeline API
PIPELINE_API_BASE: str = os.getenv("PIPELINE_API_BASE", "http://localhost:8000").rstrip("/")
FETCH_TIMEOUT_SECONDS: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))

# Data source selection: "live" polls the API, "mock" serves the built-in fixture
DATA_SOURCE_MODE: str = os.getenv("DATA_SOURCE_MODE", "live").lower()
MOCK_FALLBACK_ENABLED: bool = os.getenv("MOCK_FALLBACK_ENABLED", "true").lower() == "true"

# Polling
POLL_INTERVAL_SECONDS: float = float(os.getenv("POLL_INTERVAL_SECONDS", "5"))
POLLER_AUTOSTART: bool = os.getenv("POLLER_AUTOSTART", "true").lower() == "true"

# Streaming and history
STREAM_HEARTBEAT_SECONDS: float = float(os.getenv("STREAM_HEARTBEAT_SECONDS", "15"))
HISTORY_CACHE_TTL: int = int(os.getenv("HISTORY_CACHE_TTL", "60"))

# OpenTelemetry Configuration
OTEL_EXPORTER_OTLP_ENDPOINT: str | None = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "pipeline-monitor")

# Logging
LOG_STRUCTURED: bool = os.getenv("LOG_STRUCTURED", "true").lower() == "true"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# HTTP
CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
