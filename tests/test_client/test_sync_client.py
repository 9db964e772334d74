"""Tests for the blocking client, end to end over httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from kypi.client.builder import build_sync_client, create_sync_client
from kypi.client.handle import SyncResponseHandle
from kypi.client.transport import SyncHttpxTransport
from kypi.endpoints import aget, apost, delete, get, post, put
from kypi.exceptions import ConfigError, MissingPathParamError
from kypi.models import ClientConfig, Form

BASE = "https://api.example.com"

REGISTRY = {
    "health": get("/health"),
    "items": {
        "get": get("/items/:id"),
        "list": get("/items"),
        "create": post("/items"),
        "replace": put("/items/:id"),
        "remove": delete("/items/:id"),
    },
    "me": aget("/me"),
    "upload": apost("/upload"),
}


def _client(handler, **kwargs):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return build_sync_client(
        REGISTRY,
        ClientConfig(base_url=BASE, transport=SyncHttpxTransport(client=http), **kwargs),
    )


# ---------------------------------------------------------------------------
# GET
# ---------------------------------------------------------------------------


class TestGetRequest:
    def test_simple_get(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert str(request.url) == f"{BASE}/health"
            return httpx.Response(200, json={"status": "up"})

        handle = _client(handler).health()
        assert isinstance(handle, SyncResponseHandle)
        assert handle.json() == {"status": "up"}
        assert handle.status_code() == 200

    def test_get_with_query(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["page"] == "2"
            return httpx.Response(200, json=[])

        assert _client(handler).items.list({"page": 2}).json() == []

    def test_get_with_path_param(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/items/42"
            return httpx.Response(200, json={"id": 42})

        assert _client(handler).items.get({"params": {"id": 42}}).json() == {"id": 42}

    def test_missing_path_param(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        with pytest.raises(MissingPathParamError):
            _client(handler).items.get({"query": {"x": 1}})

    def test_lazy_until_observed(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        handle = _client(handler).health()
        assert seen == []
        handle.result()
        handle.result()
        handle.text()
        assert len(seen) == 1


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


class TestPayloads:
    def test_post_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {"name": "test", "active": True}
            assert request.headers["content-type"] == "application/json"
            return httpx.Response(201, json={"id": 1})

        handle = _client(handler).items.create({"name": "test", "active": True})
        assert handle.status_code() == 201

    def test_put_structured(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PUT"
            assert request.url.path == "/items/5"
            assert json.loads(request.content) == {"name": "x"}
            return httpx.Response(200)

        _client(handler).items.replace({"params": {"id": 5}, "body": {"name": "x"}}).result()

    def test_raw_bytes_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.content == b"raw body content"
            return httpx.Response(200)

        _client(handler).items.create(b"raw body content").result()

    def test_form_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["content-type"].startswith("multipart/form-data")
            assert b"hello.txt" in request.content
            assert b'name="title"' in request.content
            return httpx.Response(200)

        form = Form(fields={"title": "doc"}, files={"file": ("hello.txt", b"hi")})
        _client(handler, get_token=lambda: None).upload(form).result()

    def test_delete_without_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            assert request.content == b""
            return httpx.Response(204)

        assert _client(handler).items.remove({"params": {"id": 1}}).status_code() == 204


# ---------------------------------------------------------------------------
# Auth and overrides
# ---------------------------------------------------------------------------


class TestAuth:
    def test_bearer_header(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["authorization"] == "Bearer secret"
            return httpx.Response(200)

        _client(handler, get_token=lambda: "secret").me().result()

    def test_override_wins(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["authorization"] == "Custom"
            return httpx.Response(200)

        _client(handler, get_token=lambda: "secret").me(
            None, {"headers": {"Authorization": "Custom"}}
        ).result()

    def test_lower_case_override_sends_single_header(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers.get_list("authorization") == ["Custom"]
            return httpx.Response(200)

        _client(handler, get_token=lambda: "secret").me(
            None, {"headers": {"authorization": "Custom"}}
        ).result()

    def test_async_token_rejected(self) -> None:
        async def get_token():
            return "tok"

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200)

        with pytest.raises(ConfigError, match="async client"):
            _client(handler, get_token=get_token).me().result()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_http_status_error_reraised(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "not found"})

        handle = _client(handler, on_error=seen.append).items.get({"params": {"id": 9}})
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            handle.result()
        assert seen == [exc_info.value]
        with pytest.raises(httpx.HTTPStatusError):
            handle.json()
        assert len(seen) == 1

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(httpx.ConnectError):
            _client(handler).health().result()

    def test_no_raise_for_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        http = httpx.Client(transport=httpx.MockTransport(handler))
        api = create_sync_client(
            REGISTRY,
            BASE,
            transport=SyncHttpxTransport(client=http, raise_for_status=False),
        )
        assert api.health().status_code() == 500


class TestOverrides:
    def test_params_override_reaches_the_wire(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert dict(request.url.params) == {"page": "1", "q": "z"}
            return httpx.Response(200)

        _client(handler).items.list({"page": 1}, {"params": {"q": "z"}}).result()
