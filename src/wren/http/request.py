"""Immutable HTTP request.

Frozen metadata with async body access. Body acquisition and internal
redirects never mutate a request; they derive a new one with
``with_form()`` or ``with_path()`` that shares the body cache.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from wren._internal.asgi import Receive
from wren.config import Settings
from wren.http.cookies import CookieJar, parse_cookies
from wren.http.forms import FormData, UploadFile
from wren.http.headers import Headers

_EMPTY_FORM = FormData()


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the request target as sent (still percent-encoded), taken
    from the ASGI ``raw_path`` when the server provides one.

    ``cookies`` is the signed ``CookieJar`` when cookie keys are
    configured, otherwise the plain parsed ``Cookie`` header.
    ``fields`` and ``files`` are populated once a form body was parsed.
    """

    method: str
    path: str
    query_string: str
    headers: Headers
    http_version: str
    client: tuple[str, int] | None
    settings: Settings
    cookies: CookieJar | Mapping[str, str]
    form: FormData | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: body cache shared by every request derived from this one
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def url(self) -> str:
        """Request target as sent: path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def referer(self) -> str:
        """The Referer header, or an empty string."""
        return self.headers.get("referer", "")

    @property
    def remote_addr(self) -> str:
        """Client address, or ``-`` when the server did not report one."""
        return self.client[0] if self.client else "-"

    @property
    def fields(self) -> FormData:
        """Parsed form fields (empty until a form body was acquired)."""
        return self.form if self.form is not None else _EMPTY_FORM

    @property
    def files(self) -> Mapping[str, UploadFile]:
        """Uploaded files (empty until a multipart body was acquired)."""
        return self.fields.files

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached, so the ASGI receive channel is drained once
        even across internal redirects.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Derivation --

    def with_path(self, location: str) -> Request:
        """Return a request for *location* (path with optional query)."""
        path, _, query = location.partition("?")
        return replace(self, path=path, query_string=query)

    def with_form(self, form: FormData) -> Request:
        """Return a request carrying parsed form fields and files."""
        return replace(self, form=form)

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Mapping[str, Any],
        receive: Receive | None,
        settings: Settings,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        raw_cookies = parse_cookies(headers.get("cookie", ""))
        cookies: CookieJar | Mapping[str, str] = (
            CookieJar(raw_cookies, settings.cookie_keys) if settings.cookie_keys else raw_cookies
        )
        # Match against the path as sent; captures are unescaped once by the matcher
        raw_path = scope.get("raw_path")
        path = raw_path.decode("latin-1").partition("?")[0] if raw_path else scope["path"]
        return cls(
            method=scope["method"],
            path=path,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=headers,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            settings=settings,
            cookies=cookies,
            _receive=receive,
        )
