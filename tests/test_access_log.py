"""Tests for wren.http.access_log: line formatting and the default sink."""

import logging

import pytest

from wren.config import Settings
from wren.http.access_log import default_sink, format_access_line
from wren.http.request import Request


def _request(client=("127.0.0.1", 1234), headers=(), http_version="1.1", query=b"") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/items",
        "query_string": query,
        "headers": list(headers),
        "http_version": http_version,
        "client": client,
    }
    return Request.from_asgi(scope, None, Settings())


class TestFormatAccessLine:
    def test_format(self) -> None:
        line = format_access_line(_request(), 200, timestamp=0)
        assert line == (
            '127.0.0.1 - [Thu, 01 Jan 1970 00:00:00 GMT] - "GET /items HTTP/1.1" - 200 - ""'
        )

    def test_includes_query_and_referer(self) -> None:
        request = _request(headers=[(b"referer", b"http://example.com/")], query=b"page=2")
        line = format_access_line(request, 404, timestamp=0)
        assert '"GET /items?page=2 HTTP/1.1"' in line
        assert line.endswith('- 404 - "http://example.com/"')

    def test_unknown_client(self) -> None:
        assert format_access_line(_request(client=None), 200).startswith("- - [")

    def test_major_only_version(self) -> None:
        assert "HTTP/2.0" in format_access_line(_request(http_version="2"), 200)


class TestDefaultSink:
    def test_logs_to_access_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="wren.access"):
            default_sink()("a line")
        assert [r.getMessage() for r in caplog.records if r.name == "wren.access"] == ["a line"]
