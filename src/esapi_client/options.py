from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import httpx

from .context import CallContext
from .models import RequestDescriptor


Option = Callable[[RequestDescriptor], None]


def apply_options(descriptor: RequestDescriptor, options: Iterable[Option]) -> RequestDescriptor:
    for option in options:
        if not callable(option):
            raise TypeError(f"Expected an option callable, got {type(option).__name__}.")
        option(descriptor)
    return descriptor


def merge_headers(current: httpx.Headers, extra: Mapping[str, str] | httpx.Headers) -> httpx.Headers:
    """Return a new header set holding ``current`` plus ``extra`` appended."""
    if isinstance(extra, httpx.Headers):
        additions = extra.multi_items()
    else:
        additions = list(extra.items())
    return httpx.Headers([*current.multi_items(), *additions])


def with_context(context: CallContext) -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.context = context

    return option


def with_pretty() -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.pretty = True

    return option


def with_human() -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.human = True

    return option


def with_error_trace() -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.error_trace = True

    return option


def with_filter_path(*paths: str) -> Option:
    values = list(paths)

    def option(descriptor: RequestDescriptor) -> None:
        descriptor.filter_path = list(values)

    return option


def with_header(headers: Mapping[str, str] | httpx.Headers) -> Option:
    snapshot = httpx.Headers(headers)

    def option(descriptor: RequestDescriptor) -> None:
        descriptor.headers = merge_headers(descriptor.headers, snapshot)

    return option


def with_param(name: str, value: Any) -> Option:
    """Set a query parameter. Used by endpoints to build their own options."""

    def option(descriptor: RequestDescriptor) -> None:
        descriptor.params[name] = value

    return option


def with_path_param(name: str, value: Any) -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.path_params[name] = value

    return option


def with_body(body: Any) -> Option:
    def option(descriptor: RequestDescriptor) -> None:
        descriptor.body = body

    return option
