from __future__ import annotations

from typing import Mapping

from .params import ANY, BOOLEAN, DATE, DURATION, ENUM, LIST, NUMBER, STRING
from .registry import BODY, EndpointRegistry, EndpointSpec, ParamSpec


def _specs(kinds: Mapping[str, str]) -> dict[str, ParamSpec]:
    return {name: ParamSpec(name=name, kind=kind) for name, kind in kinds.items()}


def _endpoint(
    name: str,
    method: str,
    path: str,
    *,
    required: tuple[str, ...] = (),
    parts: Mapping[str, str] | None = None,
    params: Mapping[str, str] | None = None,
    body: bool = False,
) -> EndpointSpec:
    return EndpointSpec(
        name=name,
        method=method,
        path=path,
        required=required,
        parts=_specs(parts or {}),
        params=_specs(params or {}),
        body=body or BODY in required,
    )


_WILDCARDS = {
    "allow_no_indices": BOOLEAN,
    "expand_wildcards": ENUM,
    "ignore_unavailable": BOOLEAN,
}

_WRITE = {
    "pipeline": STRING,
    "refresh": ENUM,
    "routing": STRING,
    "timeout": DURATION,
    "wait_for_active_shards": STRING,
}

_SOURCE = {
    "_source": LIST,
    "_source_excludes": LIST,
    "_source_includes": LIST,
}

_QUERY_STRING = {
    "analyze_wildcard": BOOLEAN,
    "analyzer": STRING,
    "default_operator": ENUM,
    "df": STRING,
    "lenient": BOOLEAN,
    "q": STRING,
}

_CAT = {
    "format": STRING,
    "h": LIST,
    "help": BOOLEAN,
    "local": BOOLEAN,
    "master_timeout": DURATION,
    "s": LIST,
    "v": BOOLEAN,
}


_TABLE = [
    _endpoint("info", "GET", "/"),
    _endpoint("ping", "HEAD", "/"),
    _endpoint(
        "search",
        "GET",
        "/{index}/_search",
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            **_SOURCE,
            **_QUERY_STRING,
            "allow_partial_search_results": BOOLEAN,
            "batched_reduce_size": NUMBER,
            "ccs_minimize_roundtrips": BOOLEAN,
            "docvalue_fields": LIST,
            "explain": BOOLEAN,
            "from": NUMBER,
            "ignore_throttled": BOOLEAN,
            "max_concurrent_shard_requests": NUMBER,
            "pre_filter_shard_size": NUMBER,
            "preference": STRING,
            "request_cache": BOOLEAN,
            "rest_total_hits_as_int": BOOLEAN,
            "routing": LIST,
            "scroll": DURATION,
            "search_type": ENUM,
            "seq_no_primary_term": BOOLEAN,
            "size": NUMBER,
            "sort": LIST,
            "stats": LIST,
            "stored_fields": LIST,
            "suggest_field": STRING,
            "suggest_mode": ENUM,
            "suggest_size": NUMBER,
            "suggest_text": STRING,
            "terminate_after": NUMBER,
            "timeout": DURATION,
            "track_scores": BOOLEAN,
            "track_total_hits": ANY,
            "typed_keys": BOOLEAN,
            "version": BOOLEAN,
        },
        body=True,
    ),
    _endpoint(
        "count",
        "POST",
        "/{index}/_count",
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            **_QUERY_STRING,
            "ignore_throttled": BOOLEAN,
            "min_score": NUMBER,
            "preference": STRING,
            "routing": LIST,
            "terminate_after": NUMBER,
        },
        body=True,
    ),
    _endpoint(
        "scroll",
        "POST",
        "/_search/scroll",
        params={
            "rest_total_hits_as_int": BOOLEAN,
            "scroll": DURATION,
            "scroll_id": STRING,
        },
        body=True,
    ),
    _endpoint(
        "clear_scroll",
        "DELETE",
        "/_search/scroll/{scroll_id}",
        parts={"scroll_id": LIST},
        body=True,
    ),
    _endpoint(
        "index",
        "POST",
        "/{index}/_doc/{id}",
        required=("index", BODY),
        parts={"index": STRING, "id": STRING},
        params={
            **_WRITE,
            "if_primary_term": NUMBER,
            "if_seq_no": NUMBER,
            "op_type": ENUM,
            "version": NUMBER,
            "version_type": ENUM,
        },
    ),
    _endpoint(
        "create",
        "PUT",
        "/{index}/_create/{id}",
        required=("index", "id", BODY),
        parts={"index": STRING, "id": STRING},
        params={**_WRITE, "version": NUMBER, "version_type": ENUM},
    ),
    _endpoint(
        "get",
        "GET",
        "/{index}/_doc/{id}",
        required=("index", "id"),
        parts={"index": STRING, "id": STRING},
        params={
            **_SOURCE,
            "preference": STRING,
            "realtime": BOOLEAN,
            "refresh": BOOLEAN,
            "routing": STRING,
            "stored_fields": LIST,
            "version": NUMBER,
            "version_type": ENUM,
        },
    ),
    _endpoint(
        "exists",
        "HEAD",
        "/{index}/_doc/{id}",
        required=("index", "id"),
        parts={"index": STRING, "id": STRING},
        params={
            **_SOURCE,
            "preference": STRING,
            "realtime": BOOLEAN,
            "refresh": BOOLEAN,
            "routing": STRING,
        },
    ),
    _endpoint(
        "delete",
        "DELETE",
        "/{index}/_doc/{id}",
        required=("index", "id"),
        parts={"index": STRING, "id": STRING},
        params={
            "if_primary_term": NUMBER,
            "if_seq_no": NUMBER,
            "refresh": ENUM,
            "routing": STRING,
            "timeout": DURATION,
            "version": NUMBER,
            "version_type": ENUM,
            "wait_for_active_shards": STRING,
        },
    ),
    _endpoint(
        "update",
        "POST",
        "/{index}/_update/{id}",
        required=("index", "id", BODY),
        parts={"index": STRING, "id": STRING},
        params={
            **_SOURCE,
            "if_primary_term": NUMBER,
            "if_seq_no": NUMBER,
            "lang": STRING,
            "refresh": ENUM,
            "retry_on_conflict": NUMBER,
            "routing": STRING,
            "timeout": DURATION,
            "wait_for_active_shards": STRING,
        },
    ),
    _endpoint(
        "bulk",
        "POST",
        "/{index}/_bulk",
        required=(BODY,),
        parts={"index": STRING},
        params={**_WRITE, **_SOURCE},
    ),
    _endpoint(
        "delete_by_query",
        "POST",
        "/{index}/_delete_by_query",
        required=("index", BODY),
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            **_QUERY_STRING,
            "conflicts": ENUM,
            "max_docs": NUMBER,
            "refresh": BOOLEAN,
            "requests_per_second": NUMBER,
            "scroll": DURATION,
            "scroll_size": NUMBER,
            "slices": NUMBER,
            "timeout": DURATION,
            "wait_for_completion": BOOLEAN,
        },
    ),
    _endpoint(
        "indices.create",
        "PUT",
        "/{index}",
        required=("index",),
        parts={"index": STRING},
        params={
            "include_type_name": BOOLEAN,
            "master_timeout": DURATION,
            "timeout": DURATION,
            "wait_for_active_shards": STRING,
        },
        body=True,
    ),
    _endpoint(
        "indices.delete",
        "DELETE",
        "/{index}",
        required=("index",),
        parts={"index": LIST},
        params={**_WILDCARDS, "master_timeout": DURATION, "timeout": DURATION},
    ),
    _endpoint(
        "indices.exists",
        "HEAD",
        "/{index}",
        required=("index",),
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            "flat_settings": BOOLEAN,
            "include_defaults": BOOLEAN,
            "local": BOOLEAN,
        },
    ),
    _endpoint(
        "indices.refresh",
        "POST",
        "/{index}/_refresh",
        parts={"index": LIST},
        params=_WILDCARDS,
    ),
    _endpoint(
        "indices.forcemerge",
        "POST",
        "/{index}/_forcemerge",
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            "flush": BOOLEAN,
            "max_num_segments": NUMBER,
            "only_expunge_deletes": BOOLEAN,
        },
    ),
    _endpoint(
        "indices.put_mapping",
        "PUT",
        "/{index}/_mapping",
        required=(BODY,),
        parts={"index": LIST},
        params={
            **_WILDCARDS,
            "include_type_name": BOOLEAN,
            "master_timeout": DURATION,
            "timeout": DURATION,
        },
    ),
    _endpoint(
        "cluster.health",
        "GET",
        "/_cluster/health/{index}",
        parts={"index": LIST},
        params={
            "expand_wildcards": ENUM,
            "level": ENUM,
            "local": BOOLEAN,
            "master_timeout": DURATION,
            "timeout": DURATION,
            "wait_for_active_shards": STRING,
            "wait_for_events": ENUM,
            "wait_for_no_initializing_shards": BOOLEAN,
            "wait_for_no_relocating_shards": BOOLEAN,
            "wait_for_nodes": STRING,
            "wait_for_status": ENUM,
        },
    ),
    _endpoint(
        "cat.indices",
        "GET",
        "/_cat/indices/{index}",
        parts={"index": LIST},
        params={
            **_CAT,
            "bytes": ENUM,
            "health": ENUM,
            "include_unloaded_segments": BOOLEAN,
            "pri": BOOLEAN,
        },
    ),
    _endpoint(
        "ml.get_buckets",
        "GET",
        "/_ml/anomaly_detectors/{job_id}/results/buckets/{timestamp}",
        required=("job_id",),
        parts={"job_id": STRING, "timestamp": STRING},
        params={
            "anomaly_score": NUMBER,
            "desc": BOOLEAN,
            "end": DATE,
            "exclude_interim": BOOLEAN,
            "expand": BOOLEAN,
            "from": NUMBER,
            "size": NUMBER,
            "sort": STRING,
            "start": DATE,
        },
        body=True,
    ),
]

ENDPOINTS = EndpointRegistry(endpoints={spec.name: spec for spec in _TABLE})
