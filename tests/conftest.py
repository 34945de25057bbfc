from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from alpacamint.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(ALPACA_KEY="key-id", ALPACA_SECRET="secret-key", _env_file=None)


@pytest.fixture
def account_api() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Build a mock Alpaca account endpoint that records incoming requests."""

    def _factory(payload: Any = None, status: int = 200) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(status, json=payload)

        return httpx.MockTransport(handler), seen

    return _factory


@pytest.fixture(scope="session")
def _span_exporter() -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return exporter


@pytest.fixture
def spans(_span_exporter: InMemorySpanExporter) -> InMemorySpanExporter:
    """In-memory span exporter, emptied before each test."""

    _span_exporter.clear()
    return _span_exporter
