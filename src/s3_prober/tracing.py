"""OpenTelemetry tracing support for the S3 Prober."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

from . import __version__
from .constants import SERVICE_NAME

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: Tracer | None = None


def initialize_tracing(service_name: str = SERVICE_NAME) -> None:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing

    Environment Variables:
        OTEL_TRACES_ENABLED: Enable tracing (default: false)
        OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint URL (default: http://localhost:4317)
        OTEL_SERVICE_NAME: Service name (default: s3-prober)
    """
    global _tracer

    if os.getenv("OTEL_TRACES_ENABLED", "false").lower() != "true":
        return

    try:
        service_name = os.getenv("OTEL_SERVICE_NAME", service_name)
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")

        resource = Resource.create({
            "service.name": service_name,
            "service.version": __version__,
        })

        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)

        _tracer = trace.get_tracer(service_name)
    except Exception as e:
        # Tracing is optional; the prober keeps running without it
        logger.warning(f"Failed to initialize tracing: {e}")


def get_tracer() -> Tracer | None:
    """Get the global tracer instance.

    Returns:
        Tracer instance or None if tracing is not initialized
    """
    return _tracer


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Iterator[Span | None]:
    """Context manager for creating a trace span.

    Args:
        name: Name of the span
        attributes: Span attributes

    Yields:
        Span object or None if tracing is not initialized
    """
    tracer = get_tracer()
    if tracer is None:
        yield None
        return

    with tracer.start_as_current_span(name, attributes=attributes or {}) as span:
        yield span


def set_span_status(span: Span | None, ok: bool, description: str | None = None) -> None:
    """Set the status of a span.

    Args:
        span: Span returned by trace_span, or None
        ok: Whether the operation succeeded
        description: Optional status description
    """
    if span is None or not span.is_recording():
        return

    span.set_status(
        trace.Status(
            trace.StatusCode.OK if ok else trace.StatusCode.ERROR,
            None if ok else description,
        )
    )
