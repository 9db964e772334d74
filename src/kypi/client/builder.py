"""Build a client tree from an endpoint registry.

This is the core of kypi. :func:`build_client` walks an
:data:`~kypi.models.EndpointGroup` once and returns a
:class:`ClientNamespace` mirroring it: every group becomes a nested
namespace and every :class:`~kypi.models.Endpoint` becomes a function
``(input=None, options=None)`` returning a deferred
:class:`~kypi.client.handle.ResponseHandle`.

**Per-call pipeline**

1. Tag the input as ``Raw``/``Structured`` and split it into path params,
   query and payload (:mod:`kypi.client.inputs`).
2. Interpolate the endpoint's URL template and join it onto the base URL
   (:mod:`kypi.client.url`). A missing token raises
   :class:`~kypi.exceptions.MissingPathParamError` right away, as does a
   reserved override key (:class:`~kypi.exceptions.InvalidUsageError`).
3. When the handle is first observed: fetch the token (awaiting it when
   pending), build the default options, merge the caller's overrides
   (:mod:`kypi.client.options`) and hand ``(url, options)`` to the
   transport.
4. A transport error is passed to ``on_error`` and re-raised unchanged.

:func:`build_sync_client` produces the same tree with blocking handles.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterator, Mapping, Optional

from kypi.auth.bearer import aresolve_auth_headers, resolve_auth_headers
from kypi.client.handle import ResponseHandle, SyncResponseHandle
from kypi.client.inputs import ResolvedInput, as_call_input, resolve_input
from kypi.client.options import (
    RequestOptions,
    ResolvedRequest,
    check_overrides,
    default_options,
    merge_options,
)
from kypi.client.transport import HttpxTransport, SyncHttpxTransport
from kypi.client.url import interpolate, join_url
from kypi.exceptions import EndpointDefinitionError
from kypi.models import ClientConfig, Endpoint, EndpointGroup
from kypi.output import debug

Overrides = Optional[Mapping[str, Any]]


class ClientNamespace:
    """A group of endpoint functions and nested namespaces.

    Children are reachable as attributes (``api.users.get``) and by item
    (``api["users"]["get"]``) for names that are not valid identifiers.
    Iterating yields the child names.
    """

    def __init__(self, path: str, members: dict[str, Any]) -> None:
        self._path = path
        self._members = members

    def __getattr__(self, name: str) -> Any:
        members = self.__dict__.get("_members", {})
        if name in members:
            return members[name]
        where = self.__dict__.get("_path") or "client"
        raise AttributeError(f"'{where}' has no endpoint or group named '{name}'")

    def __getitem__(self, name: str) -> Any:
        return self._members[name]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._members))

    def __repr__(self) -> str:
        return f"<ClientNamespace {self._path or 'root'}: {', '.join(self._members)}>"


# ---------------------------------------------------------------------------
# Request preparation shared by both clients
# ---------------------------------------------------------------------------


def _prepare(
    endpoint: Endpoint,
    base_url: str,
    input: Any,
    overrides: Overrides,
) -> tuple[str, ResolvedInput]:
    check_overrides(overrides)
    resolved = resolve_input(as_call_input(input), endpoint.method, overrides)
    url = join_url(base_url, interpolate(endpoint.url, resolved.params))
    return url, resolved


def _finalize(
    endpoint: Endpoint,
    url: str,
    resolved: ResolvedInput,
    auth_headers: dict[str, str],
    overrides: Overrides,
) -> ResolvedRequest:
    options = merge_options(default_options(endpoint.method, resolved, auth_headers), overrides)
    return ResolvedRequest(url=url, options=options)


def _observe(config: ClientConfig, request: ResolvedRequest, exc: Exception) -> None:
    debug(f"{request.method} {request.url} failed: {exc!r}")
    if config.on_error is not None:
        config.on_error(exc)


def _describe(fn: Callable[..., Any], name: str, endpoint: Endpoint) -> None:
    fn.__name__ = name.rsplit(".", 1)[-1]
    fn.__qualname__ = name
    fn.__doc__ = f"{endpoint.method.value.upper()} {endpoint.url}" + (" (auth)" if endpoint.auth else "")
    fn.endpoint = endpoint  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Leaf builders
# ---------------------------------------------------------------------------


def _async_leaf(name: str, endpoint: Endpoint, config: ClientConfig, transport: Any) -> Callable[..., ResponseHandle]:
    def call(input: Any = None, options: Overrides = None) -> ResponseHandle:
        url, resolved = _prepare(endpoint, config.base_url, input, options)

        async def make_call() -> Any:
            auth_headers = await aresolve_auth_headers(endpoint, config.get_token)
            request = _finalize(endpoint, url, resolved, auth_headers, options)
            debug(f"{request.method} {request.url}")
            try:
                response = transport(request.url, request.options)
                if inspect.isawaitable(response):
                    response = await response
            except Exception as exc:
                _observe(config, request, exc)
                raise
            return response

        return ResponseHandle(make_call)

    _describe(call, name, endpoint)
    return call


def _sync_leaf(name: str, endpoint: Endpoint, config: ClientConfig, transport: Any) -> Callable[..., SyncResponseHandle]:
    def call(input: Any = None, options: Overrides = None) -> SyncResponseHandle:
        url, resolved = _prepare(endpoint, config.base_url, input, options)

        def make_call() -> Any:
            auth_headers = resolve_auth_headers(endpoint, config.get_token)
            request = _finalize(endpoint, url, resolved, auth_headers, options)
            debug(f"{request.method} {request.url}")
            try:
                return transport(request.url, request.options)
            except Exception as exc:
                _observe(config, request, exc)
                raise

        return SyncResponseHandle(make_call)

    _describe(call, name, endpoint)
    return call


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


def _walk(
    group: EndpointGroup,
    path: str,
    make_leaf: Callable[[str, Endpoint], Callable[..., Any]],
    ancestors: tuple[int, ...],
) -> ClientNamespace:
    if id(group) in ancestors:
        raise EndpointDefinitionError(f"Endpoint group '{path}' contains itself")
    ancestors = (*ancestors, id(group))

    members: dict[str, Any] = {}
    for key, value in group.items():
        name = f"{path}.{key}" if path else str(key)
        if isinstance(value, Endpoint):
            members[key] = make_leaf(name, value)
        elif isinstance(value, Mapping):
            members[key] = _walk(value, name, make_leaf, ancestors)
        else:
            raise EndpointDefinitionError(
                f"'{name}' is neither an endpoint nor a group (got {type(value).__name__})"
            )
    return ClientNamespace(path, members)


def build_client(endpoints: EndpointGroup, config: ClientConfig) -> ClientNamespace:
    """Build an async client for *endpoints*.

    Args:
        endpoints: The endpoint registry.
        config: Base URL, token provider, error observer and transport.
            Without a transport, an :class:`~kypi.client.transport.HttpxTransport`
            is used.

    Returns:
        The root :class:`ClientNamespace`.

    Raises:
        EndpointDefinitionError: If the registry has a cycle or a leaf that
            is not an :class:`~kypi.models.Endpoint`.

    Example::

        api = build_client(API, ClientConfig(base_url="https://api.example.com"))
        user = await api.users.get({"params": {"id": 7}}).json()
    """
    transport = config.transport or HttpxTransport()
    return _walk(endpoints, "", lambda name, ep: _async_leaf(name, ep, config, transport), ())


def build_sync_client(endpoints: EndpointGroup, config: ClientConfig) -> ClientNamespace:
    """Build a blocking client for *endpoints*.

    Same as :func:`build_client`, but leaves return
    :class:`~kypi.client.handle.SyncResponseHandle` objects, the default
    transport is :class:`~kypi.client.transport.SyncHttpxTransport`, and
    ``get_token`` must not return an awaitable.
    """
    transport = config.transport or SyncHttpxTransport()
    return _walk(endpoints, "", lambda name, ep: _sync_leaf(name, ep, config, transport), ())


def create_client(
    endpoints: EndpointGroup,
    base_url: str,
    get_token: Optional[Callable[[], Any]] = None,
    on_error: Optional[Callable[[BaseException], Any]] = None,
    transport: Optional[Callable[..., Any]] = None,
) -> ClientNamespace:
    """Keyword-argument shortcut for :func:`build_client`."""
    config = ClientConfig(
        base_url=base_url,
        get_token=get_token,
        on_error=on_error,
        transport=transport,
    )
    return build_client(endpoints, config)


def create_sync_client(
    endpoints: EndpointGroup,
    base_url: str,
    get_token: Optional[Callable[[], Any]] = None,
    on_error: Optional[Callable[[BaseException], Any]] = None,
    transport: Optional[Callable[..., Any]] = None,
) -> ClientNamespace:
    """Keyword-argument shortcut for :func:`build_sync_client`."""
    config = ClientConfig(
        base_url=base_url,
        get_token=get_token,
        on_error=on_error,
        transport=transport,
    )
    return build_sync_client(endpoints, config)


__all__ = [
    "ClientNamespace",
    "RequestOptions",
    "build_client",
    "build_sync_client",
    "create_client",
    "create_sync_client",
]
