# ruff: noqa: S101
import asyncio

import httpx
import pytest

from alpacamint.errors import NetworkError, ParseError
from alpacamint.functions import FunctionsHost
from alpacamint.settings import Settings


def _request(transport: httpx.MockTransport, settings: Settings, times: int = 1, **kwargs):
    async def _go():
        async with httpx.AsyncClient(transport=transport) as client:
            host = FunctionsHost(client, settings)
            response = None
            for _ in range(times):
                response = await host.make_http_request("https://example.test/data", **kwargs)
            return response

    return asyncio.run(_go())


def test_json_response(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"a": 1}))
    response = _request(transport, settings)
    assert response.status == 200
    assert response.data == {"a": 1}


def test_text_response(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="plain"))
    assert _request(transport, settings, response_type="text").data == "plain"


def test_invalid_json(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(ParseError):
        _request(transport, settings)


def test_request_limit(settings) -> None:
    limited = settings.model_copy(update={"max_http_requests": 2})
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    _request(transport, limited, times=2)
    with pytest.raises(NetworkError, match="limit of 2"):
        _request(transport, limited, times=3)


def test_timeout_above_maximum(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    with pytest.raises(NetworkError, match="exceeds"):
        _request(transport, settings, timeout_ms=settings.max_http_timeout_ms + 1)


def test_response_size_limit(settings) -> None:
    small = settings.model_copy(update={"max_response_bytes": 8})
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"payload": "x" * 32}))
    with pytest.raises(NetworkError, match="exceeds 8 bytes"):
        _request(transport, small)


def test_timeout_is_reported(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkError, match="timed out after 3000 ms"):
        _request(httpx.MockTransport(handler), settings)


def test_encoding_passthroughs() -> None:
    assert FunctionsHost.encode_uint256(FunctionsHost.to_fixed_point("1")) == (10**18).to_bytes(32, "big")
    assert FunctionsHost.encode_string("ok") == b"ok"
