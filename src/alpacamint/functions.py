"""Host helpers handed to a function source at execution time."""

from __future__ import annotations

from typing import Any, Literal

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from . import encoding
from .errors import NetworkError, ParseError
from .settings import Settings


class HttpResponse(BaseModel):
    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None


class FunctionsHost:
    """The explicit counterpart of the hosted runtime's ``Functions`` global.

    One instance serves one execution: it owns the request budget and the
    timeout/size limits taken from ``Settings``.
    """

    encode_uint256 = staticmethod(encoding.encode_uint256)
    encode_int256 = staticmethod(encoding.encode_int256)
    encode_string = staticmethod(encoding.encode_string)
    to_fixed_point = staticmethod(encoding.to_fixed_point)

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self.requests_made = 0

    async def make_http_request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        data: Any = None,
        timeout_ms: int | None = None,
        response_type: Literal["json", "text"] = "json",
    ) -> HttpResponse:
        """Perform a single HTTP request; no retries.

        Raises ``NetworkError`` on transport failures, timeouts, non-2xx
        statuses and exceeded limits, ``ParseError`` on an undecodable body.
        """

        limits = self._settings
        if self.requests_made >= limits.max_http_requests:
            raise NetworkError(
                f"HTTP request limit of {limits.max_http_requests} per execution reached"
            )
        timeout_ms = timeout_ms or limits.http_timeout_ms
        if timeout_ms > limits.max_http_timeout_ms:
            raise NetworkError(
                f"HTTP timeout {timeout_ms} ms exceeds the {limits.max_http_timeout_ms} ms maximum"
            )
        self.requests_made += 1

        logger.debug("HTTP {} {}", method, url)
        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=data,
                timeout=timeout_ms / 1000,
            )
        except httpx.TimeoutException as exc:
            raise NetworkError(f"HTTP request to {url} timed out after {timeout_ms} ms") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"HTTP request to {url} failed: {exc}") from exc

        if len(response.content) > limits.max_response_bytes:
            raise NetworkError(
                f"HTTP response from {url} exceeds {limits.max_response_bytes} bytes"
            )
        if response.is_error:
            raise NetworkError(f"HTTP request to {url} returned status {response.status_code}")

        if response_type == "json":
            try:
                body = response.json()
            except ValueError as exc:
                raise ParseError(f"HTTP response from {url} is not valid JSON") from exc
        else:
            body = response.text

        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers),
            data=body,
        )
