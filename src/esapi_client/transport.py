from __future__ import annotations

import logging
from typing import Any, Protocol

import anyio.to_thread
import httpx

from .config import TransportConfig
from .errors import TransportError, TransportTimeoutError
from .models import WireRequest


logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Performs a rendered request. Retries, pooling, TLS and auth live here.

    Implementations return the raw response for every HTTP status and
    raise ``TransportError`` when the call could not complete. When the
    request carries a context, the call must run through
    ``request.context.run`` so cancellation reaches it.
    """

    async def perform(self, request: WireRequest) -> httpx.Response:
        ...


class HTTPXTransport:
    def __init__(
        self,
        base_url: str = "http://localhost:9200",
        *,
        timeout_seconds: float | None = 30.0,
        verify_ssl: bool = True,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            verify=verify_ssl,
            headers=headers,
        )

    @classmethod
    def from_config(
        cls, config: TransportConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> HTTPXTransport:
        return cls(
            config.base_url,
            timeout_seconds=config.timeout_seconds,
            verify_ssl=config.verify_ssl,
            headers=dict(config.headers),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HTTPXTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    async def _content(body: Any) -> Any:
        # AsyncClient only streams async iterables; read file objects upfront.
        if hasattr(body, "read"):
            return await anyio.to_thread.run_sync(body.read)
        return body

    async def perform(self, request: WireRequest) -> httpx.Response:
        http_request = self._client.build_request(
            request.method,
            request.url,
            headers=request.headers,
            content=await self._content(request.body),
        )
        if request.context is None:
            return await self._send(http_request)
        return await request.context.run(self._send, http_request)

    async def _send(self, http_request: httpx.Request) -> httpx.Response:
        method = http_request.method
        url = str(http_request.url)
        try:
            return await self._client.send(http_request, stream=True)
        except httpx.TimeoutException as exc:
            logger.debug("Request timed out: %s %s: %s", method, url, exc)
            raise TransportTimeoutError(f"Request timed out: {exc}", method=method, url=url) from exc
        except httpx.HTTPError as exc:
            logger.debug("Transport failure: %s %s: %s", method, url, exc)
            raise TransportError(f"Transport failure: {exc}", method=method, url=url) from exc
