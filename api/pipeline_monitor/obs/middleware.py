from __future__ import annotations
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from pipeline_monitor.obs.metrics import inc_counter, record_duration
from pipeline_monitor.obs.prometheus_metrics import prometheus_metrics


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts requests and latency per route template."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        status_code = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.time() - start_time
            # route template keeps label cardinality bounded (/dashboard/pipeline/{stage}/jobs)
            route = request.scope.get("route")
            endpoint = getattr(route, "path", request.url.path)
            labels = {"method": request.method, "path": endpoint, "status": str(status_code)}

            inc_counter("http_requests_total", labels)
            record_duration("http_request_duration_ms", duration * 1000, labels)
            if status_code >= 500:
                inc_counter("http_requests_errors_total", labels)
            prometheus_metrics.record_request(request.method, endpoint, status_code, duration)
