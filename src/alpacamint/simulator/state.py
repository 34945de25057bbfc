"""Typed state passed between simulator nodes."""

from typing import Any, Callable, Literal, TypedDict

import httpx

from ..errors import ErrorKind
from ..models import RequestConfig
from ..settings import Settings

Route = Literal["execute", "finalize"]


class SimulationState(TypedDict, total=False):
    """Represents one simulated execution as it moves through the graph."""

    config: RequestConfig
    settings: Settings
    transport: httpx.AsyncBaseTransport | None
    handler: Callable[..., Any]
    result: Any
    response_hex: str | None
    error: str | None
    error_kind: ErrorKind | None
    output: list[str]
    route: Route
    scratch: dict[str, Any]
