from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from .context import CallContext


@dataclass(slots=True)
class RequestDescriptor:
    """Mutable per-call request state, filled by required args and options.

    ``params`` only holds parameters an option explicitly set, so a key's
    presence is what separates an unset boolean from ``False``.
    """

    action: str
    path_params: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    body: Any = None

    pretty: bool = False
    human: bool = False
    error_trace: bool = False
    filter_path: list[str] = field(default_factory=list)

    headers: httpx.Headers = field(default_factory=httpx.Headers)
    context: CallContext | None = None


@dataclass(frozen=True, slots=True)
class WireRequest:
    method: str
    path: str
    query: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None
    context: CallContext | None = None

    @property
    def url(self) -> str:
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path


class Response:
    """Status, headers and the unread body stream of a completed call.

    The caller owns the body and must release it with :meth:`aclose`
    (or by using the response as an async context manager).
    """

    __slots__ = ("status_code", "headers", "body", "_close", "_content")

    def __init__(
        self,
        status_code: int,
        headers: httpx.Headers,
        body: AsyncIterable[bytes],
        close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self._close = close
        self._content: bytes | None = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> Response:
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            body=response.aiter_bytes(),
            close=response.aclose,
        )

    @property
    def is_error(self) -> bool:
        return self.status_code > 299

    @property
    def reason_phrase(self) -> str:
        return httpx.codes.get_reason_phrase(self.status_code)

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        if self._content is not None:
            yield self._content
            return
        async for chunk in self.body:
            yield chunk

    async def aread(self) -> bytes:
        if self._content is None:
            self._content = b"".join([chunk async for chunk in self.body])
        return self._content

    async def aclose(self) -> None:
        if self._close is not None:
            close, self._close = self._close, None
            await close()

    async def __aenter__(self) -> Response:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<Response [{self.status_code} {self.reason_phrase}]>"
