from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from . import params as kinds
from .models import RequestDescriptor, WireRequest
from .params import format_bool, format_path_value, format_value, join_list
from .registry import EndpointSpec


JSON_CONTENT_TYPE = "application/json"


def render_path(template: str, path_params: Mapping[str, Any]) -> str:
    """Fill ``{name}`` segments of ``template``, dropping empty ones.

    Parameter values are percent-encoded; ``,`` and ``*`` stay literal.

    >>> render_path("/{index}/_forcemerge", {"index": ["a", "b"]})
    '/a,b/_forcemerge'
    >>> render_path("/{index}/_forcemerge", {"index": []})
    '/_forcemerge'
    """
    segments: list[str] = []
    for segment in template.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            segment = format_path_value(path_params.get(segment[1:-1]))
            if not segment:
                continue
            segment = quote(segment, safe=",*")
        segments.append(segment)
    return "/" + "/".join(segments)


def collect_query_params(spec: EndpointSpec, descriptor: RequestDescriptor) -> dict[str, str]:
    rendered: dict[str, str] = {}
    for name, value in descriptor.params.items():
        param = spec.params.get(name)
        kind = param.kind if param is not None else kinds.ANY
        text = format_value(kind, value)
        if text is not None:
            rendered[name] = text

    if descriptor.pretty:
        rendered["pretty"] = format_bool(True)
    if descriptor.human:
        rendered["human"] = format_bool(True)
    if descriptor.error_trace:
        rendered["error_trace"] = format_bool(True)
    if descriptor.filter_path:
        rendered["filter_path"] = join_list(descriptor.filter_path)
    return rendered


def render_query(spec: EndpointSpec, descriptor: RequestDescriptor) -> str:
    return urlencode(sorted(collect_query_params(spec, descriptor).items()))


def encode_body(body: Any) -> Any:
    """Mappings and lists become JSON bytes; anything else passes through."""
    if isinstance(body, (Mapping, list)):
        return json.dumps(body, separators=(",", ":")).encode("utf-8")
    return body


def build_headers(descriptor: RequestDescriptor) -> httpx.Headers:
    headers = httpx.Headers(descriptor.headers)
    if descriptor.body is not None and "content-type" not in headers:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


def build_request(spec: EndpointSpec, descriptor: RequestDescriptor) -> WireRequest:
    return WireRequest(
        method=spec.method,
        path=render_path(spec.path, descriptor.path_params),
        query=render_query(spec, descriptor),
        headers=build_headers(descriptor),
        body=encode_body(descriptor.body),
        context=descriptor.context,
    )
