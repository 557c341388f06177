"""Tests for wren.http.request and wren.http.headers."""

import dataclasses

import pytest

from wren.config import Settings
from wren.http.cookies import CookieJar
from wren.http.forms import FormData
from wren.http.headers import Headers
from wren.http.request import Request


def _scope(**overrides) -> dict:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/items",
        "query_string": b"page=2",
        "headers": [
            (b"content-type", b"application/json"),
            (b"accept", b"text/html"),
            (b"accept", b"application/json"),
            (b"cookie", b"theme=dark"),
        ],
        "http_version": "1.1",
        "client": ("10.0.0.2", 4000),
    }
    scope.update(overrides)
    return scope


def _receive_chunks(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]
    calls = iter(messages)

    async def receive() -> dict:
        return next(calls)

    return receive


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"Content-Type", b"text/plain"),))
        assert headers["content-type"] == "text/plain"
        assert headers["CONTENT-TYPE"] == "text/plain"
        assert "Content-Type" in headers

    def test_repeated_values(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"accept", b"b")))
        assert headers["accept"] == "a"
        assert headers.get_list("Accept") == ["a", "b"]
        assert headers.get_list("missing") == []
        assert len(headers) == 1

    def test_get_default(self) -> None:
        assert Headers().get("referer", "") == ""


class TestFromAsgi:
    def test_fields(self) -> None:
        request = Request.from_asgi(_scope(), None, Settings())
        assert request.method == "POST"
        assert request.path == "/items"
        assert request.url == "/items?page=2"
        assert request.content_type == "application/json"
        assert request.remote_addr == "10.0.0.2"
        assert request.referer == ""
        assert request.cookies == {"theme": "dark"}
        assert len(request.fields) == 0

    def test_signed_jar_with_keys(self) -> None:
        request = Request.from_asgi(_scope(), None, Settings(cookie_keys=("k",)))
        assert isinstance(request.cookies, CookieJar)
        assert request.cookies.get("theme", signed=False) == "dark"

    def test_path_taken_from_raw_path(self) -> None:
        scope = _scope(path="/items/a%20b", raw_path=b"/items/a%2520b")
        request = Request.from_asgi(scope, None, Settings())
        assert request.path == "/items/a%2520b"

    def test_raw_path_query_dropped(self) -> None:
        scope = _scope(raw_path=b"/items?page=2")
        request = Request.from_asgi(scope, None, Settings())
        assert request.path == "/items"
        assert request.url == "/items?page=2"

    def test_no_client(self) -> None:
        assert Request.from_asgi(_scope(client=None), None, Settings()).remote_addr == "-"

    def test_frozen(self) -> None:
        request = Request.from_asgi(_scope(), None, Settings())
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/other"  # type: ignore[misc]


class TestBody:
    async def test_body_joins_chunks_and_caches(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"ab", b"cd"), Settings())
        assert await request.body() == b"abcd"
        assert await request.body() == b"abcd"
        assert await request.text() == "abcd"

    async def test_derived_request_shares_body(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"payload"), Settings())
        await request.body()
        derived = request.with_path("/elsewhere")
        assert await derived.body() == b"payload"

    async def test_no_receive_is_empty(self) -> None:
        assert await Request.from_asgi(_scope(), None, Settings()).body() == b""


class TestDerivation:
    def test_with_path_splits_query(self) -> None:
        request = Request.from_asgi(_scope(), None, Settings()).with_path("/new?x=1")
        assert request.path == "/new"
        assert request.query_string == "x=1"
        assert request.method == "POST"

    def test_with_path_clears_query(self) -> None:
        request = Request.from_asgi(_scope(), None, Settings()).with_path("/new")
        assert request.url == "/new"

    def test_with_form(self) -> None:
        form = FormData({"a": ["1"]})
        request = Request.from_asgi(_scope(), None, Settings()).with_form(form)
        assert request.fields["a"] == "1"
        assert request.files == {}
