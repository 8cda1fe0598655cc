from __future__ import annotations

import asyncio
import io
import json

import anyio
import httpx
import pytest

from esapi_client.context import CallContext
from esapi_client.endpoint import new_endpoint
from esapi_client.errors import CallCancelledError, DeadlineExceededError, TransportError
from esapi_client.models import Response, WireRequest
from esapi_client.options import with_context, with_header, with_pretty
from esapi_client.transport import HTTPXTransport


class RecordingTransport:
    def __init__(self, status: int = 200, payload: object | None = None) -> None:
        self.requests: list[WireRequest] = []
        self._status = status
        self._payload = payload if payload is not None else {}

    async def perform(self, request: WireRequest) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self._status, json=self._payload)


def _mock_transport(handler) -> HTTPXTransport:
    return HTTPXTransport("http://es.test:9200", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_forcemerge_renders_path_and_query() -> None:
    transport = RecordingTransport()
    forcemerge = new_endpoint(transport, "indices.forcemerge")

    response = await forcemerge(forcemerge.with_index("a", "b"), forcemerge.with_max_num_segments(5))
    await response.aclose()

    request = transport.requests[0]
    assert request.method == "POST"
    assert request.path == "/a,b/_forcemerge"
    assert request.query == "max_num_segments=5"


@pytest.mark.asyncio
async def test_forcemerge_without_indices_omits_index_segment() -> None:
    transport = RecordingTransport()
    forcemerge = new_endpoint(transport, "indices.forcemerge")

    await forcemerge(forcemerge.with_index())
    await forcemerge()

    assert [request.url for request in transport.requests] == ["/_forcemerge", "/_forcemerge"]


@pytest.mark.asyncio
async def test_transport_failure_raises_without_envelope() -> None:
    class FailingTransport:
        async def perform(self, request: WireRequest) -> httpx.Response:
            raise TransportError("connection refused", method=request.method, url=request.url)

    search = new_endpoint(FailingTransport(), "search")

    with pytest.raises(TransportError, match="connection refused"):
        await search()


@pytest.mark.asyncio
async def test_httpx_errors_are_mapped_to_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = _mock_transport(handler)
    search = new_endpoint(transport, "search")

    with pytest.raises(TransportError) as excinfo:
        await search(search.with_index("logs"))
    await transport.close()

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert excinfo.value.method == "GET"
    assert excinfo.value.url == "http://es.test:9200/logs/_search"


@pytest.mark.asyncio
async def test_error_status_is_returned_as_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"type": "index_not_found_exception"}, "status": 404})

    transport = _mock_transport(handler)
    get = new_endpoint(transport, "get")

    response = await get("missing", "1")
    async with response:
        payload = json.loads(await response.aread())
    await transport.close()

    assert isinstance(response, Response)
    assert response.status_code == 404
    assert response.is_error
    assert response.headers["content-type"] == "application/json"
    assert payload["error"]["type"] == "index_not_found_exception"
    assert repr(response) == "<Response [404 Not Found]>"


@pytest.mark.asyncio
async def test_wire_request_reaches_server_with_body_headers_and_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"result": "created"})

    transport = _mock_transport(handler)
    index = new_endpoint(transport, "index")

    response = await index(
        "docs",
        {"title": "hello"},
        index.with_id("1"),
        index.with_refresh("true"),
        with_pretty(),
        with_header({"X-Opaque-Id": "req-1"}),
    )
    await response.aclose()
    await transport.close()

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/docs/_doc/1"
    assert request.url.query == b"pretty=true&refresh=true"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["x-opaque-id"] == "req-1"
    assert json.loads(request.content) == {"title": "hello"}
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_request_without_body_has_no_content_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    transport = _mock_transport(handler)
    await new_endpoint(transport, "ping")()
    await transport.close()

    assert seen[0].method == "HEAD"
    assert seen[0].url.path == "/"
    assert "content-type" not in seen[0].headers


@pytest.mark.asyncio
async def test_base_url_path_prefix_is_kept() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={})

    transport = HTTPXTransport("http://proxy.test/elastic", transport=httpx.MockTransport(handler))
    search = new_endpoint(transport, "search")
    await search(search.with_index("logs"))
    await transport.close()

    assert seen == ["/elastic/logs/_search"]


@pytest.mark.asyncio
async def test_missing_required_argument_is_a_type_error() -> None:
    get = new_endpoint(RecordingTransport(), "get")

    with pytest.raises(TypeError, match="takes 2 required argument"):
        await get("docs")


@pytest.mark.asyncio
async def test_option_in_place_of_required_argument_is_a_type_error() -> None:
    transport = RecordingTransport()
    delete = new_endpoint(transport, "delete")

    with pytest.raises(TypeError, match="missing required argument 'id'"):
        await delete("docs", delete.with_refresh("true"))
    assert transport.requests == []


@pytest.mark.asyncio
async def test_document_ids_stay_inside_their_path_segment() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path)
        return httpx.Response(200, json={"found": True})

    transport = _mock_transport(handler)
    get = new_endpoint(transport, "get")
    for document_id in ("a#b", "x?y", "100%"):
        await get("docs", document_id, with_pretty())
    await transport.close()

    assert seen == [
        b"/docs/_doc/a%23b?pretty=true",
        b"/docs/_doc/x%3Fy?pretty=true",
        b"/docs/_doc/100%25?pretty=true",
    ]


@pytest.mark.asyncio
async def test_file_body_is_read_and_sent() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200, json={"errors": False})

    transport = _mock_transport(handler)
    bulk = new_endpoint(transport, "bulk")
    payload = b'{"index":{"_index":"docs"}}\n{"title":"hello"}\n'
    await bulk(io.BytesIO(payload))
    await transport.close()

    assert seen == [payload]


@pytest.mark.asyncio
async def test_cancelled_context_aborts_before_dispatch() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request should not be sent")

    transport = _mock_transport(handler)
    search = new_endpoint(transport, "search")
    context = CallContext()
    context.cancel()

    with pytest.raises(CallCancelledError):
        await search(with_context(context))
    await transport.close()


@pytest.mark.asyncio
async def test_cancelling_context_aborts_in_flight_call() -> None:
    started = anyio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await anyio.sleep(5)
        return httpx.Response(200)

    transport = _mock_transport(handler)
    search = new_endpoint(transport, "search")
    context = CallContext()
    errors: list[Exception] = []

    async def call() -> None:
        try:
            await search(with_context(context))
        except CallCancelledError as exc:
            errors.append(exc)

    with anyio.fail_after(2):
        async with anyio.create_task_group() as tg:
            tg.start_soon(call)
            await started.wait()
            context.cancel()
    await transport.close()

    assert len(errors) == 1


@pytest.mark.asyncio
async def test_context_deadline_aborts_slow_call() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await anyio.sleep(5)
        return httpx.Response(200)

    transport = _mock_transport(handler)
    search = new_endpoint(transport, "search")

    with anyio.fail_after(2):
        with pytest.raises(DeadlineExceededError):
            await search(with_context(CallContext(timeout=0.05)))
    await transport.close()


@pytest.mark.asyncio
async def test_concurrent_calls_do_not_share_state() -> None:
    transport = RecordingTransport()
    search = new_endpoint(transport, "search")

    await asyncio.gather(
        search(search.with_index("a"), search.with_size(1), with_header({"X": "a"})),
        search(search.with_index("b"), with_pretty()),
    )

    by_path = {request.path: request for request in transport.requests}
    assert by_path["/a/_search"].query == "size=1"
    assert by_path["/a/_search"].headers["X"] == "a"
    assert by_path["/b/_search"].query == "pretty=true"
    assert "X" not in by_path["/b/_search"].headers
