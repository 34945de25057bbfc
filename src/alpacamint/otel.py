# src/alpacamint/otel.py
from __future__ import annotations

import socket
from urllib.parse import urlsplit

from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanProcessor,
)

from .settings import Settings, get_settings

_initialized = False


def _collector_reachable(endpoint: str, timeout: float = 0.3) -> bool:
    """TCP probe of the OTLP collector behind ``endpoint``."""
    parts = urlsplit(endpoint)
    address = (parts.hostname or "localhost", parts.port or (443 if parts.scheme == "https" else 80))
    try:
        socket.create_connection(address, timeout=timeout).close()
    except OSError:
        return False
    return True


def span_processor_for(settings: Settings) -> SpanProcessor | None:
    """Pick where spans go: OTLP collector, console, or nowhere (``none``)."""
    mode = settings.otel_exporter
    if mode == "none":
        return None
    if mode == "otlp" or (mode == "auto" and _collector_reachable(settings.otel_endpoint)):
        exporter = OTLPSpanExporter(
            endpoint=f"{settings.otel_endpoint.rstrip('/')}/v1/traces",
            headers=settings.otel_header_map,
        )
        return BatchSpanProcessor(exporter)
    if mode == "auto":
        logger.debug("OTLP endpoint {} unreachable, falling back to console", settings.otel_endpoint)
    return SimpleSpanProcessor(ConsoleSpanExporter())


def setup_otel(settings: Settings | None = None) -> None:
    """Initialise OpenTelemetry tracing. Safe to call repeatedly."""
    global _initialized
    if _initialized:
        return

    settings = settings or get_settings()
    if settings.otel_disabled:
        _initialized = True
        return

    HTTPXClientInstrumentor().instrument()
    provider = TracerProvider(resource=Resource.create({"service.name": settings.otel_service_name}))
    processor = span_processor_for(settings)
    if processor is not None:
        provider.add_span_processor(processor)

    trace.set_tracer_provider(provider)
    _initialized = True
