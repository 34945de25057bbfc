"""Build the request configuration for the Alpaca balance function."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .errors import ConfigError
from .models import CodeLanguage, Location, RequestConfig, ReturnType
from .settings import Settings, get_settings

SOURCES_DIR = Path(__file__).resolve().parent / "sources"
DEFAULT_SOURCE = "alpaca_balance"


def load_source(name: str = DEFAULT_SOURCE) -> str:
    """Return the text of a packaged function source."""

    path = SOURCES_DIR / f"{name}.py"
    if not path.is_file():
        raise ConfigError(f"Function source not found: {name}")
    return path.read_text(encoding="utf-8")


def build_request_config(
    settings: Settings | None = None,
    source: str = DEFAULT_SOURCE,
    args: list[str] | None = None,
) -> RequestConfig:
    """Assemble an inline request with DON-hosted Alpaca secrets.

    Both secrets must be present when the config is built; there is no point
    shipping a request that can only fail remotely.
    """

    settings = settings or get_settings()
    if not settings.alpaca_key or not settings.alpaca_secret:
        raise ConfigError("ALPACA_KEY and ALPACA_SECRET must be set in the environment")

    config = RequestConfig(
        source=load_source(source),
        code_location=Location.INLINE,
        secrets={
            "alpacaKey": settings.alpaca_key,
            "alpacaSecret": settings.alpaca_secret,
        },
        secrets_location=Location.DON_HOSTED,
        args=list(args or []),
        code_language=CodeLanguage.PYTHON,
        expected_return_type=ReturnType.UINT256,
    )
    logger.debug("Built request config for source {} with {} args", source, len(config.args))
    return config
