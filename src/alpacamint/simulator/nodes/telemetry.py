from typing import Any

from opentelemetry import trace

from ..state import SimulationState

tracer = trace.get_tracer(__name__)

# One span per simulated run with the outcome attached


def telemetry_node(state: SimulationState) -> dict[str, Any]:
    with tracer.start_as_current_span("simulator.telemetry") as span:
        config = state.get("config")
        if config is not None:
            span.set_attribute("functions.return_type", config.expected_return_type.value)
            span.set_attribute("functions.args", len(config.args))
        span.set_attribute("functions.ok", not state.get("error"))
        kind = state.get("error_kind")
        if kind is not None:
            span.set_attribute("functions.error_kind", kind.value)
        scratch = state.get("scratch", {}) or {}
        span.set_attribute("functions.path", ",".join(scratch.get("path", [])))
    return {}
