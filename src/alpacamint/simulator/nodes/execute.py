"""Run the source coroutine with explicit secrets and host helpers.

Captured terminal output interleaves the source's loguru records (INFO and
above) with anything it writes to stdout, one entry per line.
"""

from __future__ import annotations

import asyncio
import io
from contextlib import redirect_stdout
from typing import Any
from uuid import uuid4

import httpx
from loguru import logger

from ...errors import FunctionError
from ...functions import FunctionsHost
from ...models import FunctionRequest
from ..state import SimulationState


class _LineWriter(io.TextIOBase):
    """Stdout replacement that appends complete lines to a shared list."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self._pending = ""

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        *complete, self._pending = (self._pending + text).split("\n")
        self._lines.extend(complete)
        return len(text)

    def flush_pending(self) -> None:
        if self._pending:
            self._lines.append(self._pending)
            self._pending = ""


async def execute_source(state: SimulationState) -> dict[str, Any]:
    """Await the source once, capturing its console output.

    Errors raised by the source end up in ``error``/``error_kind``; they are
    reported, not retried.
    """

    config = state["config"]
    settings = state["settings"]
    request = FunctionRequest(secrets=config.secrets, args=config.args)

    run_id = uuid4().hex
    lines: list[str] = []
    stdout = _LineWriter(lines)

    def _sink(message) -> None:
        stdout.flush_pending()
        lines.append(message.record["message"])

    sink_id = logger.add(
        _sink,
        level="INFO",
        format="{message}",
        filter=lambda record: record["extra"].get("run_id") == run_id,
    )
    update: dict[str, Any] = {}
    try:
        async with httpx.AsyncClient(transport=state.get("transport")) as client:
            host = FunctionsHost(client, settings)
            with logger.contextualize(run_id=run_id), redirect_stdout(stdout):
                update["result"] = await asyncio.wait_for(
                    state["handler"](request, host),
                    timeout=settings.max_execution_ms / 1000,
                )
    except asyncio.TimeoutError:
        update["error"] = f"Execution exceeded {settings.max_execution_ms} ms"
    except FunctionError as exc:
        update["error"] = str(exc)
        update["error_kind"] = exc.kind
    except Exception as exc:
        logger.opt(exception=exc).debug("Source raised an unexpected error")
        update["error"] = str(exc) or type(exc).__name__
    finally:
        logger.remove(sink_id)
        stdout.flush_pending()

    update["output"] = lines
    return update
