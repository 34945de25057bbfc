"""Typed request, response and result models."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .errors import ConfigError, ErrorKind, ParseError


class Location(IntEnum):
    """Where the source code or the secrets live."""

    INLINE = 0
    REMOTE = 1
    DON_HOSTED = 2


class CodeLanguage(IntEnum):
    PYTHON = 0


class ReturnType(str, Enum):
    UINT256 = "uint256"
    INT256 = "int256"
    STRING = "string"
    BYTES = "bytes"


class Credentials(BaseModel):
    """API key pair. Values are hidden from reprs and logs."""

    api_key: SecretStr
    api_secret: SecretStr

    @classmethod
    def require(cls, api_key: str | None, api_secret: str | None) -> Credentials:
        """Build credentials, failing fast when either value is empty or absent."""

        if not api_key or not api_secret:
            raise ConfigError("Alpaca API key and secret are required")
        return cls(api_key=api_key, api_secret=api_secret)


class AccountInfo(BaseModel):
    """Subset of the Alpaca ``/v2/account`` payload we rely on."""

    model_config = ConfigDict(extra="ignore")

    portfolio_value: Decimal | None = None

    @field_validator("portfolio_value", mode="before")
    @classmethod
    def _float_as_text(cls, value: object) -> object:
        # JSON numbers arrive as floats; go through their shortest repr
        if isinstance(value, float):
            return str(value)
        return value

    def require_portfolio_value(self) -> Decimal:
        if self.portfolio_value is None:
            raise ParseError("Account response has no portfolio_value field")
        return self.portfolio_value


class RequestConfig(BaseModel):
    """Everything needed to run (or simulate) one functions request."""

    source: str
    code_location: Location = Location.INLINE
    secrets: dict[str, str] = Field(default_factory=dict, repr=False)
    secrets_location: Location = Location.DON_HOSTED
    args: list[str] = Field(default_factory=list)
    code_language: CodeLanguage = CodeLanguage.PYTHON
    expected_return_type: ReturnType = ReturnType.UINT256


class FunctionRequest(BaseModel):
    """Inputs handed to a source's ``main`` coroutine."""

    secrets: dict[str, str] = Field(default_factory=dict, repr=False)
    args: list[str] = Field(default_factory=list)


class SimulationResult(BaseModel):
    response_hex_string: str | None = None
    error_string: str | None = None
    error_kind: ErrorKind | None = None
    captured_terminal_output: str = ""
