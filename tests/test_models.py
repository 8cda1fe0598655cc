from __future__ import annotations

import httpx
import pytest

from esapi_client.models import Response, WireRequest


async def _chunks():
    yield b'{"acknowledged":'
    yield b"true}"


@pytest.mark.asyncio
async def test_response_reads_stream_once_and_closes_once() -> None:
    closed: list[bool] = []

    async def close() -> None:
        closed.append(True)

    response = Response(200, httpx.Headers({"content-type": "application/json"}), _chunks(), close)

    async with response:
        assert await response.aread() == b'{"acknowledged":true}'
        assert await response.aread() == b'{"acknowledged":true}'
        assert [chunk async for chunk in response.aiter_bytes()] == [b'{"acknowledged":true}']
    await response.aclose()

    assert closed == [True]
    assert not response.is_error
    assert response.reason_phrase == "OK"


def test_server_errors_are_flagged_not_raised() -> None:
    response = Response.from_httpx(httpx.Response(503, text="unavailable"))

    assert response.is_error
    assert response.status_code == 503
    assert repr(response) == "<Response [503 Service Unavailable]>"


def test_wire_request_url_includes_query_only_when_present() -> None:
    assert WireRequest(method="GET", path="/_search").url == "/_search"
    assert WireRequest(method="GET", path="/_search", query="size=1").url == "/_search?size=1"
