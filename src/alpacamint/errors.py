"""Error kinds raised by function sources and the host helpers."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    NETWORK = "network"
    PARSE = "parse"


class FunctionError(Exception):
    """Base error carrying a kind so callers can branch without parsing text."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(FunctionError):
    """Missing or invalid configuration, raised before any I/O."""

    kind = ErrorKind.CONFIG


class NetworkError(FunctionError):
    """Transport failure, timeout, non-2xx status or exceeded request limits."""

    kind = ErrorKind.NETWORK


class ParseError(FunctionError):
    """Response body or value that cannot be turned into the expected result."""

    kind = ErrorKind.PARSE
