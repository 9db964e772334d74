"""Factories for declaring endpoint registries.

A registry is a plain nested mapping whose leaves are
:class:`~kypi.models.Endpoint` instances::

    from kypi.endpoints import aget, apost, get

    API = {
        "health": get("/health"),
        "users": {
            "list": aget("/users"),
            "get": aget("/users/:id"),
            "create": apost("/users"),
        },
    }

:func:`endpoint` is the general factory; the per-method helpers fix the
method, and the ``a``-prefixed helpers additionally mark the endpoint as
requiring authentication. ``delete`` is also exported as ``del_`` and
``adelete`` as ``adel`` for parity with the short names used elsewhere.
"""

from __future__ import annotations

import importlib
from typing import Iterator, Mapping

from pydantic import ValidationError

from kypi.exceptions import ConfigError, EndpointDefinitionError
from kypi.models import Endpoint, EndpointGroup, HTTPMethod


def endpoint(method: HTTPMethod | str, url: str, auth: bool = False) -> Endpoint:
    """Create an endpoint descriptor.

    Args:
        method: HTTP method, as an :class:`~kypi.models.HTTPMethod` or a
            case-insensitive string.
        url: URL template relative to the client's base URL. ``:name``
            segments are filled from the call's ``params``.
        auth: Whether the endpoint requires an ``Authorization`` header.

    Raises:
        EndpointDefinitionError: If *method* is not a supported HTTP method.
    """
    try:
        return Endpoint(method=method, url=url, auth=auth)
    except ValidationError as exc:
        raise EndpointDefinitionError(f"Invalid endpoint {method!r} {url!r}: {exc}") from exc


def authed(method: HTTPMethod | str, url: str) -> Endpoint:
    """Same as :func:`endpoint` with ``auth=True``."""
    return endpoint(method, url, auth=True)


ep = endpoint
aep = authed


def get(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.GET, url, auth=auth)


def post(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.POST, url, auth=auth)


def put(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.PUT, url, auth=auth)


def patch(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.PATCH, url, auth=auth)


def head(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.HEAD, url, auth=auth)


def delete(url: str, auth: bool = False) -> Endpoint:
    return endpoint(HTTPMethod.DELETE, url, auth=auth)


del_ = delete


def aget(url: str) -> Endpoint:
    return authed(HTTPMethod.GET, url)


def apost(url: str) -> Endpoint:
    return authed(HTTPMethod.POST, url)


def aput(url: str) -> Endpoint:
    return authed(HTTPMethod.PUT, url)


def apatch(url: str) -> Endpoint:
    return authed(HTTPMethod.PATCH, url)


def ahead(url: str) -> Endpoint:
    return authed(HTTPMethod.HEAD, url)


def adelete(url: str) -> Endpoint:
    return authed(HTTPMethod.DELETE, url)


adel = adelete


def iter_endpoints(group: EndpointGroup, prefix: str = "") -> Iterator[tuple[str, Endpoint]]:
    """Yield ``(dotted_name, endpoint)`` pairs for every leaf in *group*.

    Traversal is depth-first in mapping order.

    Raises:
        EndpointDefinitionError: If a value is neither an endpoint nor a
            mapping.
    """
    for key, value in group.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Endpoint):
            yield name, value
        elif isinstance(value, Mapping):
            yield from iter_endpoints(value, name)
        else:
            raise EndpointDefinitionError(
                f"'{name}' is neither an endpoint nor a group (got {type(value).__name__})"
            )


def find_endpoint(group: EndpointGroup, dotted_name: str) -> Endpoint:
    """Look up a leaf by its dotted name (e.g. ``"users.get"``).

    Raises:
        EndpointDefinitionError: If the name does not resolve to an endpoint.
    """
    node: object = group
    for part in dotted_name.split("."):
        if not isinstance(node, Mapping) or part not in node:
            raise EndpointDefinitionError(f"No endpoint named '{dotted_name}'")
        node = node[part]
    if not isinstance(node, Endpoint):
        raise EndpointDefinitionError(f"'{dotted_name}' is a group, not an endpoint")
    return node


def load_registry(import_path: str) -> EndpointGroup:
    """Import an endpoint registry from ``"package.module:ATTRIBUTE"``.

    Dotted paths after the colon are followed through attributes and
    group keys alike (``mod:API.v2``).

    Raises:
        ConfigError: If the path is malformed, the import fails, or the
            target is not a mapping.
    """
    module_name, sep, attr_path = import_path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigError(
            f"Registry must look like 'package.module:ATTRIBUTE', got '{import_path}'"
        )
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import registry module '{module_name}': {exc}") from exc
    for attr in attr_path.split("."):
        if isinstance(target, Mapping) and attr in target:
            target = target[attr]
            continue
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ConfigError(f"Registry '{import_path}' has no attribute '{attr}'") from exc
    if not isinstance(target, Mapping):
        raise ConfigError(f"Registry '{import_path}' is not a mapping of endpoints")
    return target
