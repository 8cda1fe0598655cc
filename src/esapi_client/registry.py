from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from . import params as kinds


HTTP_METHODS = {"GET", "POST", "PUT", "DELETE", "HEAD"}
BODY = "body"

_PART_PATTERN = re.compile(r"^\{([^}]+)\}$")

# REST specification type names that differ from ours.
_REST_KIND_ALIASES = {
    "time": kinds.DURATION,
    "int": kinds.NUMBER,
    "long": kinds.NUMBER,
    "double": kinds.NUMBER,
}


@dataclass(frozen=True, slots=True)
class ParamSpec:
    name: str
    kind: str = kinds.ANY
    description: str = ""


@dataclass(frozen=True, slots=True)
class EndpointSpec:
    """Declarative description of one API operation.

    ``path`` is a template such as ``/{index}/_doc/{id}``. ``required``
    lists the positional arguments of the endpoint callable in order; each
    names a path part, a query parameter, or ``"body"``.
    """

    name: str
    method: str
    path: str
    required: tuple[str, ...] = ()
    parts: Mapping[str, ParamSpec] = field(default_factory=dict)
    params: Mapping[str, ParamSpec] = field(default_factory=dict)
    body: bool = False
    description: str = ""

    def template_parts(self) -> list[str]:
        names = []
        for segment in self.path.split("/"):
            match = _PART_PATTERN.match(segment)
            if match:
                names.append(match.group(1))
        return names

    def option_names(self) -> list[str]:
        names = [*self.parts, *self.params]
        if self.body:
            names.append(BODY)
        return sorted(name for name in names if name not in self.required)


@dataclass(slots=True)
class EndpointRegistry:
    endpoints: dict[str, EndpointSpec] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.endpoints

    def __len__(self) -> int:
        return len(self.endpoints)

    def names(self) -> list[str]:
        return sorted(self.endpoints)

    def get(self, name: str) -> EndpointSpec | None:
        return self.endpoints.get(name)

    def add(self, spec: EndpointSpec) -> None:
        self.endpoints[spec.name] = spec


def _rest_kind(raw: Any) -> str:
    kind = str(raw or "").strip().lower()
    kind = _REST_KIND_ALIASES.get(kind, kind)
    return kind if kind in kinds.PARAM_KINDS else kinds.ANY


def _param_specs(raw: Any) -> dict[str, ParamSpec]:
    specs: dict[str, ParamSpec] = {}
    if not isinstance(raw, Mapping):
        return specs
    for name, definition in raw.items():
        definition = definition if isinstance(definition, Mapping) else {}
        specs[str(name)] = ParamSpec(
            name=str(name),
            kind=_rest_kind(definition.get("type")),
            description=str(definition.get("description") or ""),
        )
    return specs


def _path_part_names(path: str) -> set[str]:
    return set(re.findall(r"\{([^}]+)\}", path))


def _collect_paths(url: Mapping[str, Any]) -> tuple[list[str], list[str], dict[str, Any]]:
    """Return (paths, methods, raw parts) for both REST spec layouts."""
    paths: list[str] = []
    methods: list[str] = []
    raw_parts: dict[str, Any] = {}

    def merge_parts(parts: Any) -> None:
        if not isinstance(parts, Mapping):
            return
        for name, definition in parts.items():
            if isinstance(definition, Mapping):
                raw_parts[name] = {**raw_parts.get(name, {}), **definition}

    if url.get("path"):
        paths.append(str(url["path"]))
    for entry in url.get("paths") or []:
        if isinstance(entry, Mapping):
            paths.append(str(entry.get("path") or ""))
            methods.extend(str(method) for method in entry.get("methods") or [])
            merge_parts(entry.get("parts"))
        else:
            paths.append(str(entry))
    merge_parts(url.get("parts"))
    return [path for path in paths if path], methods, raw_parts


def _most_specific_path(paths: Iterable[str]) -> str:
    ordered = sorted(set(paths), key=lambda path: (-len(_path_part_names(path)), -len(path), path))
    return ordered[0] if ordered else "/"


def build_endpoint_from_rest_spec(name: str, document: Mapping[str, Any]) -> EndpointSpec:
    url = document.get("url") or {}
    paths, path_methods, raw_parts = _collect_paths(url)
    path = _most_specific_path(paths)

    methods = [str(method).upper() for method in (document.get("methods") or path_methods)]
    methods = [method for method in methods if method in HTTP_METHODS]
    method = methods[0] if methods else "GET"

    parts = _param_specs(raw_parts)
    params = _param_specs(document.get("params") or url.get("params") or {})

    required = [
        part
        for part in EndpointSpec(name=name, method=method, path=path).template_parts()
        if isinstance(raw_parts.get(part), Mapping) and raw_parts[part].get("required")
    ]

    body_definition = document.get("body")
    body = isinstance(body_definition, Mapping)
    if body and body_definition.get("required"):
        required.append(BODY)

    documentation = document.get("documentation")
    if isinstance(documentation, Mapping):
        description = str(documentation.get("description") or documentation.get("url") or "")
    else:
        description = str(documentation or "")

    return EndpointSpec(
        name=name,
        method=method,
        path=path,
        required=tuple(required),
        parts=parts,
        params=params,
        body=body,
        description=description,
    )


def build_registry_from_documents(documents: Iterable[Mapping[str, Any]]) -> EndpointRegistry:
    registry = EndpointRegistry()
    for document in documents:
        for name, definition in document.items():
            if name.startswith("_") or not isinstance(definition, Mapping):
                continue
            registry.add(build_endpoint_from_rest_spec(name, definition))
    return registry


def load_rest_spec(path: str | Path) -> EndpointRegistry:
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    return build_registry_from_documents([document])


def load_registry(directory: str | Path) -> EndpointRegistry:
    documents = [
        json.loads(path.read_text(encoding="utf-8"))
        for path in sorted(Path(directory).glob("*.json"))
        if not path.name.startswith("_")
    ]
    return build_registry_from_documents(documents)
