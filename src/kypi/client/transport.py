"""Default httpx-backed transports.

A transport is any callable ``transport(url, options)`` where *options* is a
:class:`~kypi.client.options.RequestOptions`. The async client awaits the
result when it is awaitable; the blocking client expects a response
directly. The client never inspects the response, so any object works.

The transports here translate :class:`RequestOptions` into ``httpx`` request
arguments:

* ``query`` → ``params=`` (mapping, raw string or list of pairs);
* ``json`` → ``json=``;
* ``body`` → ``data=``/``files=`` for a :class:`~kypi.models.Form`,
  ``data=`` for a mapping, ``content=`` otherwise;
* ``extra`` → passed through (``timeout``, ``cookies``,
  ``follow_redirects``, ...); it never replaces the fields above.

They raise :class:`httpx.HTTPStatusError` for non-2xx
responses unless constructed with ``raise_for_status=False``. They do not
retry or cache.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from kypi.client.options import RequestOptions
from kypi.models import Form

DEFAULT_TIMEOUT = 30.0


def to_httpx_kwargs(url: str, options: RequestOptions) -> dict[str, Any]:
    """Translate *options* into keyword arguments for ``httpx.Client.request``."""
    kwargs: dict[str, Any] = {
        **options.extra,
        "method": options.method,
        "url": url,
        "headers": options.headers,
    }
    if options.query is not None:
        kwargs["params"] = options.query

    body = options.body
    if options.json is not None:
        kwargs["json"] = options.json
    elif isinstance(body, Form):
        kwargs["data"] = body.fields
        if body.files:
            kwargs["files"] = body.files
    elif isinstance(body, Mapping):
        kwargs["data"] = body
    elif isinstance(body, (bytearray, memoryview)):
        kwargs["content"] = bytes(body)
    elif body is not None:
        kwargs["content"] = body

    return kwargs


class HttpxTransport:
    """Async transport backed by :class:`httpx.AsyncClient`.

    Args:
        client: Client to send requests with. The caller owns its lifecycle.
            When ``None``, a short-lived client is opened per request.
        raise_for_status: Raise :class:`httpx.HTTPStatusError` on non-2xx.
        timeout: Timeout for per-request clients.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        raise_for_status: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._raise_for_status = raise_for_status
        self._timeout = timeout

    async def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        kwargs = to_httpx_kwargs(url, options)
        if self._client is not None:
            response = await self._client.request(**kwargs)
        else:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.request(**kwargs)
                await response.aread()
        if self._raise_for_status:
            response.raise_for_status()
        return response


class SyncHttpxTransport:
    """Blocking transport backed by :class:`httpx.Client`.

    Same arguments as :class:`HttpxTransport`.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        raise_for_status: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._raise_for_status = raise_for_status
        self._timeout = timeout

    def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        kwargs = to_httpx_kwargs(url, options)
        if self._client is not None:
            response = self._client.request(**kwargs)
        else:
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                response = client.request(**kwargs)
                response.read()
        if self._raise_for_status:
            response.raise_for_status()
        return response
