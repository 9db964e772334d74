"""Tests for deferred response handles."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from kypi.client.handle import RESPONSE_ACCESSORS, ResponseHandle, SyncResponseHandle


def _json_response(data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=data,
        request=httpx.Request("GET", "https://api.example.com/test"),
    )


class _Counter:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.calls = 0
        self.result = result
        self.error = error

    async def make_call(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result

    def make_sync_call(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class TestResponseHandle:
    def test_nothing_happens_until_awaited(self) -> None:
        counter = _Counter(result="r")
        handle = ResponseHandle(counter.make_call)
        assert counter.calls == 0
        assert not handle.started

    def test_await_returns_response(self) -> None:
        counter = _Counter(result="r")

        async def run():
            return await ResponseHandle(counter.make_call)

        assert asyncio.run(run()) == "r"

    def test_memoized_across_awaits_and_accessors(self) -> None:
        counter = _Counter(result=_json_response({"a": 1}))

        async def run():
            handle = ResponseHandle(counter.make_call)
            first = await handle
            second = await handle
            data = await handle.json()
            status = await handle.status_code()
            return first, second, data, status

        first, second, data, status = asyncio.run(run())
        assert first is second
        assert data == {"a": 1}
        assert status == 200
        assert counter.calls == 1

    def test_concurrent_awaits_share_one_call(self) -> None:
        counter = _Counter(result=_json_response({"x": 1}))

        async def run():
            handle = ResponseHandle(counter.make_call)
            return await asyncio.gather(handle.response(), handle.response(), handle.text())

        first, second, text = asyncio.run(run())
        assert first is second
        assert '"x"' in text
        assert counter.calls == 1

    def test_error_is_memoized(self) -> None:
        counter = _Counter(error=RuntimeError("boom"))

        async def run():
            handle = ResponseHandle(counter.make_call)
            for _ in range(2):
                with pytest.raises(RuntimeError, match="boom"):
                    await handle

        asyncio.run(run())
        assert counter.calls == 1

    def test_accessor_awaits_async_members(self) -> None:
        class AsyncResponse:
            async def json(self):
                return {"async": True}

        counter = _Counter(result=AsyncResponse())

        async def run():
            return await ResponseHandle(counter.make_call).json()

        assert asyncio.run(run()) == {"async": True}

    def test_accessor_passes_arguments(self) -> None:
        class Response:
            def json(self, **kwargs):
                return kwargs

        counter = _Counter(result=Response())

        async def run():
            return await ResponseHandle(counter.make_call).json(strict=False)

        assert asyncio.run(run()) == {"strict": False}

    def test_accessor_set(self) -> None:
        for name in RESPONSE_ACCESSORS:
            assert callable(getattr(ResponseHandle, name))
            assert callable(getattr(SyncResponseHandle, name))


class TestSyncResponseHandle:
    def test_lazy_and_memoized(self) -> None:
        counter = _Counter(result=_json_response({"a": 1}))
        handle = SyncResponseHandle(counter.make_sync_call)
        assert counter.calls == 0
        assert handle.json() == {"a": 1}
        assert handle.status_code() == 200
        assert handle.result() is handle.response()
        assert counter.calls == 1
        assert handle.started

    def test_error_is_memoized(self) -> None:
        counter = _Counter(error=ValueError("bad"))
        handle = SyncResponseHandle(counter.make_sync_call)
        for _ in range(2):
            with pytest.raises(ValueError, match="bad"):
                handle.result()
        assert counter.calls == 1
