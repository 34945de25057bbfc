"""Assemble the LangGraph workflow that simulates a functions request."""

from __future__ import annotations

import inspect
from typing import Any, Callable

import httpx
from langgraph.graph import END, START, StateGraph
from loguru import logger
from opentelemetry import trace

from ..models import RequestConfig, SimulationResult
from ..settings import Settings, get_settings
from .nodes.execute import execute_source
from .nodes.finalize import finalize_response
from .nodes.prepare import prepare_source, route_after_prepare
from .nodes.telemetry import telemetry_node
from .state import SimulationState

tracer = trace.get_tracer(__name__)


def _wrap_traced(node_name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
    """Record the visited node in ``scratch['path']`` around ``fn``.

    Whatever scratch the node returns is merged over the incoming one; the
    trace fields always come from the wrapper.
    """

    def _enter(state: dict[str, Any]) -> dict[str, Any]:
        scratch = dict(state.get("scratch", {}) or {})
        path = list(scratch.get("path", []))
        path.append(node_name)
        scratch["path"] = path
        scratch["current_node"] = node_name
        return scratch

    def _merge(scratch: dict[str, Any], out: dict[str, Any] | None) -> dict[str, Any]:
        out = out or {}
        merged = dict(scratch)
        merged.update(out.get("scratch", {}) or {})
        merged["path"] = scratch["path"]
        merged["current_node"] = node_name
        out["scratch"] = merged
        return out

    if inspect.iscoroutinefunction(fn):

        async def _ainner(state: dict[str, Any]) -> dict[str, Any]:
            scratch = _enter(state)
            return _merge(scratch, await fn({**state, "scratch": scratch}))

        return _ainner

    def _inner(state: dict[str, Any]) -> dict[str, Any]:
        scratch = _enter(state)
        return _merge(scratch, fn({**state, "scratch": scratch}))

    return _inner


def build_graph() -> StateGraph:
    builder = StateGraph(SimulationState)

    # Register nodes
    builder.add_node("prepare", _wrap_traced("prepare", prepare_source))
    builder.add_node("execute", _wrap_traced("execute", execute_source))
    builder.add_node("finalize", _wrap_traced("finalize", finalize_response))
    builder.add_node("telemetry", _wrap_traced("telemetry", telemetry_node))

    builder.add_edge(START, "prepare")

    # A source that fails to load skips execution
    builder.add_conditional_edges(
        "prepare",
        route_after_prepare,
        {
            "execute": "execute",
            "finalize": "finalize",
        },
    )

    builder.add_edge("execute", "finalize")
    builder.add_edge("finalize", "telemetry")
    builder.add_edge("telemetry", END)

    return builder


# Compile the executable graph
workflow = build_graph().compile()


async def simulate_script(
    config: RequestConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    settings: Settings | None = None,
) -> SimulationResult:
    """Run ``config`` locally and report what the hosted runtime would return.

    Failures inside the source are reported through ``error_string``; only a
    wrong argument type raises.
    """

    if not isinstance(config, RequestConfig):
        raise TypeError(f"simulate_script expects a RequestConfig, got {type(config).__name__}")

    state: SimulationState = {
        "config": config,
        "settings": settings or get_settings(),
        "transport": transport,
        "output": [],
        "scratch": {},
    }
    with tracer.start_as_current_span("functions.simulate"):
        out = await workflow.ainvoke(state)

    logger.debug("Simulation path: {}", out.get("scratch", {}).get("path"))
    return SimulationResult(
        response_hex_string=out.get("response_hex"),
        error_string=out.get("error"),
        error_kind=out.get("error_kind"),
        captured_terminal_output="\n".join(out.get("output", [])),
    )
