"""
OpenTelemetry tracing.

``setup_tracing`` installs a tracer provider and auto-instruments Django and
outgoing ``requests`` calls. Spans are exported to the console exporter unless
an OTLP endpoint is configured through the standard ``OTEL_EXPORTER_OTLP_*``
environment variables.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

_initialized = False


def setup_tracing(service_name: str = "codemart-backend", enable: bool = True) -> None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Name reported on every span
        enable: When False only the no-op global tracer is used
    """
    global _initialized

    if _initialized or not enable:
        return

    tracer_provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    tracer_provider.add_span_processor(BatchSpanProcessor(_build_exporter()))
    trace.set_tracer_provider(tracer_provider)

    DjangoInstrumentor().instrument()
    RequestsInstrumentor().instrument()

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")


def _build_exporter():
    if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter()
    return ConsoleSpanExporter()


def get_tracer(name: str) -> trace.Tracer:
    """
    Get a tracer for creating custom spans.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("payment_execute"):
            ...
    """
    return trace.get_tracer(name)


def add_span_attributes(span: trace.Span, **attributes) -> None:
    for key, value in attributes.items():
        span.set_attribute(key, str(value))
