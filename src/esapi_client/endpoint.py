from __future__ import annotations

import logging
from typing import Any

from .builder import build_request
from .endpoints import ENDPOINTS
from .models import RequestDescriptor, Response
from .options import Option, apply_options, with_body, with_param, with_path_param
from .params import LIST
from .registry import BODY, EndpointRegistry, EndpointSpec
from .transport import Transport


logger = logging.getLogger(__name__)


class Endpoint:
    """Awaitable wrapper around one API operation.

    ``await endpoint(*required, *options)`` takes the endpoint's required
    arguments positionally, followed by any number of options.
    Endpoint-specific options are created with :meth:`option` or the
    equivalent ``endpoint.with_<name>(...)`` attribute.
    """

    def __init__(self, transport: Transport, spec: EndpointSpec) -> None:
        self._transport = transport
        self.spec = spec

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def method(self) -> str:
        return self.spec.method

    def __repr__(self) -> str:
        return f"<Endpoint {self.spec.name} {self.spec.method} {self.spec.path}>"

    def new_descriptor(self, *required: Any) -> RequestDescriptor:
        if len(required) != len(self.spec.required):
            raise TypeError(
                f"{self.spec.name}() takes {len(self.spec.required)} required argument(s) "
                f"({', '.join(self.spec.required) or 'none'}), got {len(required)}."
            )
        for name, value in zip(self.spec.required, required):
            if callable(value):
                raise TypeError(
                    f"{self.spec.name}() missing required argument '{name}'; got an option in its place."
                )
        descriptor = RequestDescriptor(action=self.spec.name)
        for name, value in zip(self.spec.required, required):
            self._assign(descriptor, name, value)
        return descriptor

    def _assign(self, descriptor: RequestDescriptor, name: str, value: Any) -> None:
        if name == BODY:
            descriptor.body = value
        elif name in self.spec.parts or name in self.spec.template_parts():
            descriptor.path_params[name] = value
        else:
            descriptor.params[name] = value

    def option(self, name: str, *values: Any) -> Option:
        if name == BODY and self.spec.body:
            return with_body(_single(name, values))
        if name in self.spec.parts or name in self.spec.template_parts():
            part = self.spec.parts.get(name)
            if part is not None and part.kind == LIST:
                return with_path_param(name, _many(values))
            return with_path_param(name, _single(name, values))
        param = self.spec.params.get(name)
        if param is None:
            raise ValueError(
                f"Unknown option '{name}' for {self.spec.name}. "
                f"Valid options: {', '.join(self.spec.option_names())}."
            )
        if param.kind == LIST:
            return with_param(name, _many(values))
        return with_param(name, _single(name, values))

    def __getattr__(self, attribute: str) -> Any:
        if not attribute.startswith("with_"):
            raise AttributeError(attribute)
        name = attribute[len("with_"):]
        spec = self.__dict__.get("spec")
        if spec is None or name not in spec.option_names():
            raise AttributeError(f"Endpoint {getattr(spec, 'name', '?')!r} has no option {name!r}")

        def make_option(*values: Any) -> Option:
            return self.option(name, *values)

        make_option.__name__ = attribute
        return make_option

    async def __call__(self, *args: Any) -> Response:
        arity = len(self.spec.required)
        descriptor = self.new_descriptor(*args[:arity])
        apply_options(descriptor, args[arity:])

        request = build_request(self.spec, descriptor)
        logger.debug("Dispatching %s -> %s %s", self.spec.name, request.method, request.url)
        raw = await self._transport.perform(request)
        return Response.from_httpx(raw)


def _single(name: str, values: tuple[Any, ...]) -> Any:
    if len(values) != 1:
        raise TypeError(f"Option '{name}' takes exactly one value, got {len(values)}.")
    return values[0]


def _many(values: tuple[Any, ...]) -> list[Any]:
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        return list(values[0])
    return list(values)


def new_endpoint(
    transport: Transport, endpoint: EndpointSpec | str, registry: EndpointRegistry | None = None
) -> Endpoint:
    if isinstance(endpoint, str):
        spec = (ENDPOINTS if registry is None else registry).get(endpoint)
        if spec is None:
            raise KeyError(f"Unknown endpoint: {endpoint}")
        return Endpoint(transport, spec)
    return Endpoint(transport, endpoint)
