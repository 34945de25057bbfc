"""Command line driver: build the request, simulate it, print the outcome."""

from __future__ import annotations

import asyncio
import sys

import typer
from dotenv import load_dotenv
from loguru import logger

from .encoding import decode_result
from .errors import FunctionError
from .models import ReturnType
from .otel import setup_otel
from .request_config import DEFAULT_SOURCE, build_request_config
from .settings import get_settings
from .simulator.workflow import simulate_script

app = typer.Typer(help="Simulate the Alpaca balance function locally.")


def _configure_logging(verbose: bool) -> None:
    # Source output is printed from the captured buffer, not the console sink
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        filter=lambda record: "run_id" not in record["extra"],
    )


@app.command()
def simulate(
    source: str = typer.Option(DEFAULT_SOURCE, "--source", help="Packaged source to run."),
    arg: list[str] = typer.Option([], "--arg", help="Positional argument for the source."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the request through the local simulator and print the result."""

    load_dotenv()
    _configure_logging(verbose)
    settings = get_settings()
    setup_otel(settings)

    try:
        config = build_request_config(settings, source=source, args=arg)
        result = asyncio.run(simulate_script(config, settings=settings))
        typer.echo(f"{result.captured_terminal_output}\n")
        if result.response_hex_string:
            decoded = decode_result(config.expected_return_type, result.response_hex_string)
            typer.echo(f"Result: {decoded}")
        if result.error_string:
            typer.echo(f"Error: {result.error_string}", err=True)
    except FunctionError as exc:
        logger.error("{} error: {}", exc.kind.value, exc)
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        logger.exception("Simulation failed")
        raise typer.Exit(code=1) from exc


@app.command()
def decode(
    return_type: ReturnType = typer.Argument(..., help="Expected return type."),
    hex_string: str = typer.Argument(..., help="0x-prefixed response hex string."),
) -> None:
    """Decode a response hex string into a readable value."""

    _configure_logging(False)
    try:
        typer.echo(decode_result(return_type, hex_string))
    except ValueError as exc:
        logger.error("Cannot decode response: {}", exc)
        raise typer.Exit(code=1) from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
