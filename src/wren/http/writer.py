"""The response writer handed to every route handler.

One ``ResponseWriter`` is built per exchange, before dispatch. Handlers
terminate the exchange through it::

    def show(request, response, id):
        if id not in items:
            response.not_found()
            return
        response.send(200, items[id], "text/plain")

Low-level calls (``write_head``, ``write``, ``end``) mirror a streaming
response; ``send``, ``redirect``, ``render`` and the error helpers are
built on top. The access-log sink fires from ``end()``, exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from wren._internal.types import LogSink
from wren._internal.values import as_object
from wren.config import Settings
from wren.http.access_log import format_access_line
from wren.http.cookies import CookieJar
from wren.http.request import Request
from wren.http.response import Response
from wren.templating import TemplateRenderer

logger = logging.getLogger("wren.server")


class ResponseWriter:
    """Accumulates one response and ends it exactly once."""

    __slots__ = (
        "_chunks",
        "_ended",
        "_headers",
        "_redirect_to",
        "_renderer",
        "_sink",
        "_status",
        "request",
    )

    def __init__(
        self,
        request: Request,
        *,
        sink: LogSink,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.request = request
        self._sink = sink
        self._renderer = renderer or TemplateRenderer(request.settings.template_path)
        self._status = 200
        # lower-cased name -> (name as given, value)
        self._headers: dict[str, tuple[str, str]] = {}
        self._chunks: list[bytes] = []
        self._ended = False
        self._redirect_to: str | None = None

    # -- State --

    @property
    def status(self) -> int:
        """The status code the response will carry (last one set wins)."""
        return self._status

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def settings(self) -> Settings:
        return self.request.settings

    @property
    def cookies(self) -> CookieJar | None:
        """The signed cookie jar shared with the request, if configured."""
        jar = self.request.cookies
        return jar if isinstance(jar, CookieJar) else None

    def get_header(self, name: str) -> str | None:
        entry = self._headers.get(name.lower())
        return entry[1] if entry else None

    # -- Low-level writing --

    def reset(self) -> None:
        """Discard the buffered status, headers and body.

        Queued cookies are kept. Has no effect once the response ended.
        """
        if self._ended:
            return
        self._status = 200
        self._headers.clear()
        self._chunks.clear()

    def set_header(self, name: str, value: str | int) -> None:
        self._headers[name.lower()] = (name, str(value))

    def write_head(self, status: int, headers: Mapping[str, Any] | None = None) -> None:
        """Set the status and merge *headers*. May be called repeatedly."""
        if self._ended:
            logger.warning("write_head(%d) after end for %s", status, self.request.url)
            return
        self._status = status
        for name, value in as_object(headers).items():
            self.set_header(name, value)

    def write(self, chunk: str | bytes) -> None:
        """Append *chunk* to the body. Ignored for HEAD requests."""
        if self._ended:
            logger.warning("write() after end for %s", self.request.url)
            return
        if self.request.method == "HEAD":
            return
        self._chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)

    def end(self, chunk: str | bytes | None = None) -> None:
        """Finish the response and emit the access log line."""
        if self._ended:
            logger.warning("end() called twice for %s", self.request.url)
            return
        if chunk:
            self.write(chunk)
        self._ended = True
        self._sink(format_access_line(self.request, self._status))

    # -- Helpers --

    def send(
        self,
        code: int,
        body: Any,
        content_type: Any,
        headers: Mapping[str, Any] | None = None,
    ) -> None:
        """Send a complete text response.

        A non-string *body* or *content_type* is a handler bug; the
        response becomes a plain-text 500 instead.
        """
        if not isinstance(body, str) or not isinstance(content_type, str):
            logger.error(
                "send() needs str body and content type, got %s and %s",
                type(body).__name__,
                type(content_type).__name__,
            )
            code, body, content_type, headers = 500, "Internal Server Error", "text/plain", None

        merged = as_object(headers)
        merged["Content-Type"] = content_type
        merged["Content-Length"] = str(len(body.encode("utf-8")))
        self.write_head(code, merged)
        if self.request.method != "HEAD":
            self.write(body)
        self.end()

    def not_found(self, message: Any = None) -> None:
        self.send(404, message if isinstance(message, str) else "Not Found", "text/plain")

    def server_error(self, message: Any = None) -> None:
        self.send(
            500,
            message if isinstance(message, str) else "Internal Server Error",
            "text/plain",
        )

    def redirect(self, location: Any) -> None:
        """302 to *location*; a missing location is a 500."""
        if not (isinstance(location, str) and location):
            self.server_error("Redirect Error")
            return
        self.write_head(302, {"Location": location})
        self.end()

    def inner_redirect(self, location: Any) -> None:
        """Re-dispatch this exchange to *location* once the handler returns.

        No new request reaches the transport; the dispatcher runs again
        with the request path replaced.
        """
        if not (isinstance(location, str) and location):
            self.server_error("Inner Redirect Error")
            return
        logger.info("Internal Redirect: %s -> %s", self.request.url, location)
        self._redirect_to = location

    def render(self, filepath: str, variables: Any = None) -> None:
        """Render a template file and send it as ``text/html``.

        Missing file → 404. Rendering failure → 500.
        """
        path = self._renderer.resolve(filepath)
        if path is None:
            self.not_found()
            return
        try:
            html = self._renderer.render_file(path, variables)
        except Exception as exc:
            logger.exception("Template error rendering %s", path)
            self.server_error(f"Template Error: {exc}")
            return
        self.send(200, html, "text/html")

    # -- Exchange plumbing --

    def take_redirect(self) -> str | None:
        """Return and clear the pending internal redirect target."""
        location, self._redirect_to = self._redirect_to, None
        return location

    def retarget(self, request: Request) -> None:
        """Point the writer at the request derived for an internal redirect."""
        self.request = request

    def to_response(self) -> Response:
        """Snapshot the ended response for transmission."""
        jar = self.cookies
        return Response(
            body=b"".join(self._chunks),
            status=self._status,
            headers=tuple(self._headers.values()),
            cookies=jar.pending if jar is not None else (),
        )
