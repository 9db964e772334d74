"""Bearer token resolution for authed endpoints.

For an endpoint declared with ``auth=True`` the client calls the configured
``get_token`` provider on every request (tokens are never cached across
calls) and, when the provider yields a truthy token, injects an
``Authorization: Bearer <token>`` header. Endpoints without ``auth`` never
consult the provider.

Two entry points exist because a provider may return an awaitable:
:func:`aresolve_auth_headers` awaits it, while the blocking
:func:`resolve_auth_headers` refuses it.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional

from kypi.exceptions import ConfigError
from kypi.models import Endpoint

TokenProvider = Callable[[], Any]

AUTHORIZATION = "Authorization"


def bearer_header(token: Any) -> dict[str, str]:
    """Return the ``Authorization`` header for *token*, or ``{}`` when it is falsy."""
    if not token:
        return {}
    return {AUTHORIZATION: f"Bearer {token}"}


async def aresolve_auth_headers(
    endpoint: Endpoint,
    get_token: Optional[TokenProvider],
) -> dict[str, str]:
    """Resolve the auth header for one call, awaiting a pending token."""
    if not endpoint.auth or get_token is None:
        return {}
    token = get_token()
    if inspect.isawaitable(token):
        token = await token
    return bearer_header(token)


def resolve_auth_headers(
    endpoint: Endpoint,
    get_token: Optional[TokenProvider],
) -> dict[str, str]:
    """Blocking variant of :func:`aresolve_auth_headers`.

    Raises:
        ConfigError: If the provider returns an awaitable.
    """
    if not endpoint.auth or get_token is None:
        return {}
    token = get_token()
    if inspect.isawaitable(token):
        if inspect.iscoroutine(token):
            token.close()
        raise ConfigError(
            "get_token returned an awaitable; use the async client for async token providers"
        )
    return bearer_header(token)
