"""The finished HTTP response.

A ``Response`` is what an exchange produces once the writer has ended:
status, headers, cookies, and body bytes. The sender transmits it over
ASGI and the test client hands it back to tests.
"""

from __future__ import annotations

from dataclasses import dataclass

from wren.http.cookies import SetCookie


@dataclass(frozen=True, slots=True)
class Response:
    """A completed HTTP response. Immutable."""

    body: bytes = b""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header named *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value, if any."""
        return self.header("content-type")

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")
