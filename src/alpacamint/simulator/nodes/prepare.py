"""Validate the request and load the inline source."""

from __future__ import annotations

import inspect
from typing import Any

from loguru import logger

from ...errors import ErrorKind
from ...models import CodeLanguage, Location
from ..state import SimulationState

SOURCE_FILENAME = "<inline-source>"
ENTRYPOINT = "main"


def _fail(message: str, kind: ErrorKind | None = None) -> dict[str, Any]:
    logger.debug("Source rejected: {}", message)
    return {"error": message, "error_kind": kind, "route": "finalize"}


def prepare_source(state: SimulationState) -> dict[str, Any]:
    """Compile the source text and resolve its ``async def main`` entrypoint."""

    config = state["config"]
    if config.code_location is not Location.INLINE:
        return _fail("Only inline sources can be simulated", ErrorKind.CONFIG)
    if config.code_language is not CodeLanguage.PYTHON:
        return _fail(f"Unsupported code language: {config.code_language!r}", ErrorKind.CONFIG)

    namespace: dict[str, Any] = {"__name__": "alpacamint_inline_source"}
    try:
        exec(compile(config.source, SOURCE_FILENAME, "exec"), namespace)  # noqa: S102
    except Exception as exc:
        return _fail(f"Failed to load source: {type(exc).__name__}: {exc}")

    handler = namespace.get(ENTRYPOINT)
    if not inspect.iscoroutinefunction(handler):
        return _fail("Source must define `async def main(request, functions)`")

    return {"handler": handler, "route": "execute"}


def route_after_prepare(state: SimulationState) -> str:
    route = state.get("route", "finalize")
    logger.debug("Routing after prepare: {}", route)
    return route
