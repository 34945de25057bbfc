"""Turn the source's return value into a response hex string."""

from __future__ import annotations

from typing import Any

from ..state import SimulationState


def finalize_response(state: SimulationState) -> dict[str, Any]:
    if state.get("error"):
        return {"response_hex": None}

    result = state.get("result")
    if not isinstance(result, (bytes, bytearray)):
        return {"error": f"Source must return bytes, got {type(result).__name__}"}

    limit = state["settings"].max_onchain_response_bytes
    if len(result) > limit:
        return {"error": f"Response of {len(result)} bytes exceeds the {limit}-byte on-chain limit"}

    return {"response_hex": "0x" + bytes(result).hex()}
