# ruff: noqa: S101
import pytest
from typer.testing import CliRunner

from alpacamint import main as cli
from alpacamint.encoding import encode_uint256
from alpacamint.errors import ErrorKind
from alpacamint.models import SimulationResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def _env(monkeypatch) -> None:
    monkeypatch.setenv("OTEL_SDK_DISABLED", "true")
    monkeypatch.setenv("ALPACA_KEY", "key-id")
    monkeypatch.setenv("ALPACA_SECRET", "secret-key")


def _fake_simulation(result: SimulationResult):
    async def _simulate(config, *, transport=None, settings=None) -> SimulationResult:
        return result

    return _simulate


def test_simulate_prints_decoded_result(monkeypatch) -> None:
    result = SimulationResult(
        response_hex_string="0x" + encode_uint256(100000 * 10**18).hex(),
        captured_terminal_output="Alpaca Portfolio Balance: $100000.00",
    )
    monkeypatch.setattr(cli, "simulate_script", _fake_simulation(result))

    out = runner.invoke(cli.app, ["simulate"])

    assert out.exit_code == 0
    assert "Alpaca Portfolio Balance: $100000.00" in out.output
    assert "Result: 100000000000000000000000" in out.output


def test_simulate_prints_error_string(monkeypatch) -> None:
    result = SimulationResult(error_string="HTTP request failed", error_kind=ErrorKind.NETWORK)
    monkeypatch.setattr(cli, "simulate_script", _fake_simulation(result))

    out = runner.invoke(cli.app, ["simulate"])

    assert out.exit_code == 0
    assert "Error: HTTP request failed" in out.output
    assert "Result:" not in out.output


def test_simulate_without_secrets_exits_nonzero(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ALPACA_KEY")
    monkeypatch.delenv("ALPACA_SECRET")

    out = runner.invoke(cli.app, ["simulate"])

    assert out.exit_code == 1


def test_decode_command() -> None:
    out = runner.invoke(cli.app, ["decode", "uint256", "0x" + encode_uint256(7).hex()])
    assert out.exit_code == 0
    assert out.output.strip() == "7"


def test_decode_command_bad_hex() -> None:
    out = runner.invoke(cli.app, ["decode", "uint256", "0x12"])
    assert out.exit_code == 1
