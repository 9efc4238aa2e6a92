from __future__ import annotations
import asyncio
import time
from typing import Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError
from pipeline_monitor.config import FETCH_TIMEOUT_SECONDS, PIPELINE_API_BASE
from pipeline_monitor.models.schemas import JobsResponse, StatsResponse
from pipeline_monitor.obs.decorators import traced
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.obs.prometheus_metrics import prometheus_metrics
from .interfaces import DataSource, DataSourceError, Payloads

logger = get_logger(__name__)
M = TypeVar("M", bound=BaseModel)


class LiveDataSource(DataSource):
    """Reads /stats and /jobs from the pipeline API."""

    def __init__(
        self,
        base_url: str = PIPELINE_API_BASE,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return "live"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=4),
                transport=self._transport,
            )
        return self._client

    async def _get(self, endpoint: str, model: Type[M]) -> M:
        start_time = time.time()
        outcome = "error"
        try:
            response = await self._get_client().get(endpoint)
            response.raise_for_status()
            payload = model.model_validate(response.json())
            outcome = "success"
            return payload
        except httpx.HTTPStatusError as e:
            raise DataSourceError(f"{endpoint} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DataSourceError(f"{endpoint} request failed: {e}") from e
        except (ValidationError, ValueError) as e:
            raise DataSourceError(f"{endpoint} returned an invalid payload: {e}") from e
        finally:
            prometheus_metrics.record_fetch(endpoint, outcome, time.time() - start_time)

    @traced(operation_name="fetch_pipeline_payloads")
    async def fetch(self) -> Payloads:
        stats, jobs = await asyncio.gather(
            self._get("/stats", StatsResponse),
            self._get("/jobs", JobsResponse),
        )
        logger.debug("Fetched pipeline payloads",
                     base_url=self.base_url,
                     sources=len(stats.sources),
                     sync_jobs=len(jobs.sync_jobs))
        return stats, jobs

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
