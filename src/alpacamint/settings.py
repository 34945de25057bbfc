"""Application settings loaded from environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Secrets, host limits and telemetry options.

    Limits default to the values the hosted functions runtime enforces, so a
    script that passes locally also fits the remote sandbox.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Alpaca
    alpaca_key: str = Field(default="", alias="ALPACA_KEY")
    alpaca_secret: str = Field(default="", alias="ALPACA_SECRET")

    # Host limits
    max_execution_ms: int = Field(default=10_000, alias="FUNCTIONS_MAX_EXECUTION_MS")
    max_http_requests: int = Field(default=5, alias="FUNCTIONS_MAX_HTTP_REQUESTS")
    http_timeout_ms: int = Field(default=3_000, alias="FUNCTIONS_HTTP_TIMEOUT_MS")
    max_http_timeout_ms: int = Field(default=9_000, alias="FUNCTIONS_MAX_HTTP_TIMEOUT_MS")
    max_response_bytes: int = Field(default=2_097_152, alias="FUNCTIONS_MAX_RESPONSE_BYTES")
    max_onchain_response_bytes: int = Field(
        default=256, alias="FUNCTIONS_MAX_ONCHAIN_RESPONSE_BYTES"
    )

    # OpenTelemetry
    otel_service_name: str = Field(default="alpacamint", alias="OTEL_SERVICE_NAME")
    otel_endpoint: str = Field(default="http://localhost:4318", alias="OTEL_EXPORTER_OTLP_ENDPOINT")
    otel_headers: str | None = Field(default=None, alias="OTEL_EXPORTER_OTLP_HEADERS")
    otel_exporter: Literal["auto", "otlp", "console", "none"] = Field(default="auto", alias="OTEL_EXPORTER")
    otel_disabled: bool = Field(default=False, alias="OTEL_SDK_DISABLED")

    @property
    def otel_header_map(self) -> dict[str, str]:
        """``OTEL_EXPORTER_OTLP_HEADERS`` (``k=v,k2=v2``) as a dict; malformed parts are skipped."""

        pairs = (part.split("=", 1) for part in (self.otel_headers or "").split(",") if "=" in part)
        return {key.strip(): value.strip() for key, value in pairs}


def get_settings() -> Settings:
    """Build a fresh settings object from the current environment."""

    return Settings()

