"""Tests for wren.http.writer: the response augmenter."""

from pathlib import Path

from wren.config import Settings
from wren.http.request import Request
from wren.http.writer import ResponseWriter
from wren.templating import TemplateRenderer


def _request(method: str = "GET", path: str = "/x", settings: Settings | None = None) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [],
        "http_version": "1.1",
        "client": ("10.0.0.1", 5000),
    }
    return Request.from_asgi(scope, None, settings or Settings())


def _writer(method: str = "GET", *, settings: Settings | None = None) -> tuple[ResponseWriter, list[str]]:
    lines: list[str] = []
    return ResponseWriter(_request(method, settings=settings), sink=lines.append), lines


class TestSend:
    def test_send_sets_headers_and_body(self) -> None:
        writer, _ = _writer()
        writer.send(200, "héllo", "text/plain")
        response = writer.to_response()
        assert response.status == 200
        assert response.body == "héllo".encode()
        assert response.header("Content-Type") == "text/plain"
        assert response.header("Content-Length") == str(len("héllo".encode()))

    def test_extra_headers_merged(self) -> None:
        writer, _ = _writer()
        writer.send(201, "{}", "application/json", {"Location": "/items/0"})
        assert writer.to_response().header("location") == "/items/0"

    def test_head_suppresses_body_keeps_length(self) -> None:
        writer, _ = _writer("HEAD")
        writer.send(200, "hello", "text/plain")
        response = writer.to_response()
        assert response.body == b""
        assert response.header("Content-Length") == "5"

    def test_non_string_body_is_500(self) -> None:
        writer, _ = _writer()
        writer.send(200, b"bytes", "text/plain")
        response = writer.to_response()
        assert response.status == 500
        assert response.text == "Internal Server Error"

    def test_non_string_content_type_is_500(self) -> None:
        writer, _ = _writer()
        writer.send(200, "ok", None)
        assert writer.status == 500


class TestHelpers:
    def test_not_found(self) -> None:
        writer, _ = _writer()
        writer.not_found()
        response = writer.to_response()
        assert (response.status, response.text) == (404, "Not Found")

    def test_not_found_custom_message(self) -> None:
        writer, _ = _writer()
        writer.not_found("No such item")
        assert writer.to_response().text == "No such item"

    def test_server_error_ignores_non_string_message(self) -> None:
        writer, _ = _writer()
        writer.server_error(42)
        assert writer.to_response().text == "Internal Server Error"

    def test_redirect(self) -> None:
        writer, _ = _writer()
        writer.redirect("/elsewhere")
        response = writer.to_response()
        assert response.status == 302
        assert response.header("Location") == "/elsewhere"
        assert writer.ended

    def test_redirect_without_location(self) -> None:
        writer, _ = _writer()
        writer.redirect(None)
        response = writer.to_response()
        assert (response.status, response.text) == (500, "Redirect Error")

    def test_inner_redirect_records_target(self) -> None:
        writer, _ = _writer()
        writer.inner_redirect("/other")
        assert not writer.ended
        assert writer.take_redirect() == "/other"
        assert writer.take_redirect() is None

    def test_inner_redirect_without_location(self) -> None:
        writer, _ = _writer()
        writer.inner_redirect("")
        assert writer.to_response().text == "Inner Redirect Error"


class TestLowLevel:
    def test_write_head_repeatable_last_status_wins(self) -> None:
        writer, _ = _writer()
        writer.write_head(200, {"X-A": "1"})
        writer.write_head(404, {"X-B": "2"})
        writer.end("gone")
        response = writer.to_response()
        assert response.status == 404
        assert response.header("X-A") == "1"
        assert response.header("X-B") == "2"
        assert response.text == "gone"

    def test_write_accumulates(self) -> None:
        writer, _ = _writer()
        writer.write("a")
        writer.write(b"b")
        writer.end("c")
        assert writer.to_response().body == b"abc"

    def test_write_ignored_for_head(self) -> None:
        writer, _ = _writer("HEAD")
        writer.write("data")
        writer.end()
        assert writer.to_response().body == b""

    def test_reset_discards_buffered_response(self) -> None:
        writer, _ = _writer()
        writer.write_head(302, {"Location": "/x"})
        writer.write("partial")
        writer.reset()
        writer.server_error()
        response = writer.to_response()
        assert response.status == 500
        assert response.header("Location") is None
        assert response.body == b"Internal Server Error"
        assert response.header("Content-Length") == str(len(response.body))

    def test_reset_after_end_is_ignored(self) -> None:
        writer, _ = _writer()
        writer.send(200, "done", "text/plain")
        writer.reset()
        assert writer.to_response().text == "done"

    def test_get_header_case_insensitive(self) -> None:
        writer, _ = _writer()
        writer.set_header("Content-Type", "text/plain")
        assert writer.get_header("content-type") == "text/plain"
        assert writer.get_header("x-missing") is None


class TestAccessLog:
    def test_logged_once_on_end(self) -> None:
        writer, lines = _writer()
        writer.send(200, "ok", "text/plain")
        assert len(lines) == 1
        assert '"GET /x HTTP/1.1" - 200' in lines[0]
        assert lines[0].startswith("10.0.0.1 - [")

    def test_second_end_ignored(self) -> None:
        writer, lines = _writer()
        writer.end("first")
        writer.end("second")
        writer.send(500, "late", "text/plain")
        assert len(lines) == 1
        assert writer.to_response().body == b"first"
        assert writer.status == 200

    def test_not_logged_before_end(self) -> None:
        writer, lines = _writer()
        writer.write_head(200)
        writer.write("partial")
        assert lines == []


class TestRender:
    def test_render_template(self, tmp_path: Path) -> None:
        (tmp_path / "hello.html").write_text("<p>Hello {{ name }}!</p>")
        writer, _ = _writer()
        writer.render(str(tmp_path / "hello.html"), {"name": "World"})
        response = writer.to_response()
        assert response.status == 200
        assert response.content_type == "text/html"
        assert response.text == "<p>Hello World!</p>"

    def test_render_relative_to_template_root(self, tmp_path: Path) -> None:
        (tmp_path / "page.html").write_text("page")
        settings = Settings(template_path=tmp_path)
        writer = ResponseWriter(
            _request(settings=settings),
            sink=lambda line: None,
            renderer=TemplateRenderer(tmp_path),
        )
        writer.render("page.html")
        assert writer.to_response().text == "page"

    def test_render_missing_file_is_404(self, tmp_path: Path) -> None:
        writer, _ = _writer()
        writer.render(str(tmp_path / "missing.html"))
        assert writer.status == 404

    def test_render_broken_template_is_500(self, tmp_path: Path) -> None:
        (tmp_path / "broken.html").write_text("{% endfor %}")
        writer, _ = _writer()
        writer.render(str(tmp_path / "broken.html"))
        response = writer.to_response()
        assert response.status == 500
        assert response.text.startswith("Template Error: ")

    def test_render_escapes_variables(self, tmp_path: Path) -> None:
        (tmp_path / "esc.html").write_text("{{ value }}")
        writer, _ = _writer()
        writer.render(str(tmp_path / "esc.html"), {"value": "<b>"})
        assert "<b>" not in writer.to_response().text
