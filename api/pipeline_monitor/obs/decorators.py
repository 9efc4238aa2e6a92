from __future__ import annotations
import functools
import inspect
import time
from typing import Any, Callable, Dict, Optional
from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from pipeline_monitor.obs.logging_setup import get_logger
from pipeline_monitor.obs.metrics import record_duration

logger = get_logger(__name__)


def traced(operation_name: Optional[str] = None, include_args: bool = False):
    """Run the wrapped callable inside an OpenTelemetry span.

    Failures are recorded on the span and re-raised; the duration lands in
    the runtime metrics as ``function_duration_ms``.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(func.__module__)
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"
        labels = {"function": func.__name__}

        def _start(span: Span, args: tuple, kwargs: Dict[str, Any]) -> float:
            span.set_attribute("function.name", func.__name__)
            if include_args:
                span.set_attribute("function.args", repr(args)[:500])
                span.set_attribute("function.kwargs", repr(kwargs)[:500])
            return time.time()

        def _fail(span: Span, error: Exception) -> None:
            span.record_exception(error)
            span.set_status(Status(StatusCode.ERROR, str(error)))
            logger.error(f"{span_name} failed", error=str(error), function=func.__name__)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with tracer.start_as_current_span(span_name) as span:
                    start_time = _start(span, args, kwargs)
                    try:
                        return await func(*args, **kwargs)
                    except Exception as e:
                        _fail(span, e)
                        raise
                    finally:
                        record_duration("function_duration_ms", (time.time() - start_time) * 1000, labels)
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with tracer.start_as_current_span(span_name) as span:
                start_time = _start(span, args, kwargs)
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                finally:
                    record_duration("function_duration_ms", (time.time() - start_time) * 1000, labels)
        return sync_wrapper

    return decorator


def timed(metric_name: Optional[str] = None, labels: Optional[Dict[str, str]] = None):
    """Record the wall time of each call in the runtime metrics."""

    def decorator(func: Callable) -> Callable:
        name = metric_name or f"{func.__name__}_duration_ms"

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return await func(*args, **kwargs)
                finally:
                    record_duration(name, (time.time() - start_time) * 1000, labels)
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                record_duration(name, (time.time() - start_time) * 1000, labels)
        return sync_wrapper

    return decorator
