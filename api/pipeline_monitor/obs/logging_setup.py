from __future__ import annotations
import json
import logging
import sys
from typing import Any, Dict, Optional
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, correlated with the active span."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            entry["trace_id"] = format_trace_id(span_context.trace_id)
            entry["span_id"] = format_span_id(span_context.span_id)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        context = {
            key: value for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("otel")
        }
        if context:
            entry["context"] = context

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str | int = logging.INFO, structured: bool = True) -> None:
    """Configure root logging for the service."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class ContextLogger:
    """Logger accepting keyword context: ``logger.info("Poll completed", jobs=7)``."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _context(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        context = dict(extra or {})
        span = trace.get_current_span()
        if span.is_recording() and hasattr(span, "name"):
            context["span_name"] = span.name
        return context

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(msg, extra=self._context(kwargs))

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(msg, extra=self._context(kwargs))

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(msg, extra=self._context(kwargs))

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.error(msg, extra=self._context(kwargs))

    def exception(self, msg: str, **kwargs: Any) -> None:
        self.logger.exception(msg, extra=self._context(kwargs))


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(name)
