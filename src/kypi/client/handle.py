"""Deferred, memoized response handles.

Calling a generated endpoint function does not touch the network. It returns
a handle that starts the request the first time it is awaited or one of its
accessors is used, and every later await or accessor resolves against that
same single call::

    handle = api.users.get({"params": {"id": 7}})   # nothing sent yet
    data = await handle.json()                       # request sent here
    status = await handle.status_code()              # same response, no new request

The accessor set is fixed (:data:`RESPONSE_ACCESSORS`). Each accessor is an
async method: it awaits the response, reads the member of the same name, calls
it with the given arguments when it is callable, and awaits the result when
that is awaitable. Non-callable members such as ``status_code`` are returned
as they are, so ``await handle.text()`` works whether the transport's
response exposes ``text`` as a property or as a method.

:class:`SyncResponseHandle` is the blocking twin used by
:func:`~kypi.client.builder.build_sync_client`.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from typing import Any, Awaitable, Callable, Generator, Optional

RESPONSE_ACCESSORS = (
    "json",
    "text",
    "content",
    "read",
    "raise_for_status",
    "status_code",
    "headers",
    "url",
    "reason_phrase",
)
"""Members of the eventual response reachable through a handle."""


def _async_accessor(name: str) -> Callable[..., Awaitable[Any]]:
    async def accessor(self: "ResponseHandle", *args: Any, **kwargs: Any) -> Any:
        response = await self
        member = getattr(response, name)
        if callable(member):
            member = member(*args, **kwargs)
        if inspect.isawaitable(member):
            member = await member
        return member

    accessor.__name__ = name
    accessor.__qualname__ = f"ResponseHandle.{name}"
    accessor.__doc__ = f"Await the response and return its ``{name}``."
    return accessor


def _sync_accessor(name: str) -> Callable[..., Any]:
    def accessor(self: "SyncResponseHandle", *args: Any, **kwargs: Any) -> Any:
        member = getattr(self.result(), name)
        if callable(member):
            member = member(*args, **kwargs)
        return member

    accessor.__name__ = name
    accessor.__qualname__ = f"SyncResponseHandle.{name}"
    accessor.__doc__ = f"Send the request if needed and return the response's ``{name}``."
    return accessor


class ResponseHandle:
    """Awaitable handle around a single lazily-started request.

    Args:
        make_call: Zero-argument coroutine function performing resolution
            and dispatch. It is invoked at most once.
    """

    def __init__(self, make_call: Callable[[], Awaitable[Any]]) -> None:
        self._make_call = make_call
        self._task: Optional[asyncio.Future[Any]] = None

    @property
    def started(self) -> bool:
        """Whether the request has been triggered."""
        return self._task is not None

    def _future(self) -> asyncio.Future[Any]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._make_call())
        return self._task

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future().__await__()

    async def response(self) -> Any:
        """Await and return the transport's response object."""
        return await self

    def __repr__(self) -> str:
        state = "started" if self.started else "pending"
        return f"<ResponseHandle {state}>"


class SyncResponseHandle:
    """Blocking handle around a single lazily-sent request.

    The first call to :meth:`result` or any accessor sends the request;
    later calls return the stored response or re-raise the stored error.
    """

    def __init__(self, make_call: Callable[[], Any]) -> None:
        self._make_call = make_call
        self._lock = threading.Lock()
        self._done = False
        self._response: Any = None
        self._error: Optional[Exception] = None

    @property
    def started(self) -> bool:
        return self._done

    def result(self) -> Any:
        """Send the request if needed and return the transport's response."""
        with self._lock:
            if not self._done:
                try:
                    self._response = self._make_call()
                except Exception as exc:
                    self._error = exc
                self._done = True
        if self._error is not None:
            raise self._error
        return self._response

    response = result

    def __repr__(self) -> str:
        state = "done" if self._done else "pending"
        return f"<SyncResponseHandle {state}>"


for _name in RESPONSE_ACCESSORS:
    setattr(ResponseHandle, _name, _async_accessor(_name))
    setattr(SyncResponseHandle, _name, _sync_accessor(_name))
del _name
