from __future__ import annotations
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.b3 import B3MultiFormat
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pipeline_monitor import __version__
from pipeline_monitor.config import ENVIRONMENT, OTEL_EXPORTER_OTLP_ENDPOINT, OTEL_SERVICE_NAME
from pipeline_monitor.obs.logging_setup import get_logger

logger = get_logger(__name__)


def setup_tracing() -> None:
    """Install the tracer provider; spans are exported only when an OTLP endpoint is set."""
    set_global_textmap(B3MultiFormat())

    tracer_provider = TracerProvider(resource=Resource.create({
        "service.name": OTEL_SERVICE_NAME,
        "service.version": __version__,
        "deployment.environment": ENVIRONMENT,
    }))

    if OTEL_EXPORTER_OTLP_ENDPOINT:
        exporter = OTLPSpanExporter(endpoint=f"{OTEL_EXPORTER_OTLP_ENDPOINT}/v1/traces", timeout=10)
        tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("OTLP exporter configured", endpoint=OTEL_EXPORTER_OTLP_ENDPOINT)
    else:
        logger.info("No OTLP endpoint configured, spans are not exported")

    trace.set_tracer_provider(tracer_provider)
    HTTPXClientInstrumentor().instrument()
    LoggingInstrumentor().instrument(set_logging_format=False)


def shutdown_tracing() -> None:
    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()
