"""Cookie parsing, Set-Cookie serialization, and the signed cookie jar.

The jar is created per exchange when ``Settings.cookie_keys`` is set and
is shared by the request (read side) and the response writer (write
side). Values are signed with ``itsdangerous``: the first key signs,
every key verifies, so keys can be rotated by prepending a new one.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadSignature, URLSafeSerializer

from wren.errors import ConfigurationError


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        key, sep, value = pair.strip().partition("=")
        if sep:
            cookies[key.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive queued on the response writer."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)


class CookieJar:
    """Signed cookie access for one exchange.

    Usage::

        def visit(request, response):
            count = int(request.cookies.get("visits") or 0) + 1
            response.cookies.set("visits", str(count))
            response.send(200, f"Visit {count}", "text/plain")
    """

    __slots__ = ("_incoming", "_outgoing", "_serializer")

    def __init__(self, incoming: Mapping[str, str], keys: Sequence[str]) -> None:
        if not keys:
            msg = "CookieJar requires at least one signing key."
            raise ConfigurationError(msg)
        self._incoming = dict(incoming)
        self._outgoing: list[SetCookie] = []
        # itsdangerous signs with the last key and verifies with all of them
        self._serializer = URLSafeSerializer(list(reversed(keys)), salt="wren.cookies")

    def get(self, name: str, default: Any = None, *, signed: bool = True) -> Any:
        """Return the cookie value, or *default* if missing or tampered."""
        raw = self._incoming.get(name)
        if raw is None:
            return default
        if not signed:
            return raw
        try:
            return self._serializer.loads(raw)
        except BadSignature:
            return default

    def set(
        self,
        name: str,
        value: Any,
        *,
        signed: bool = True,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str = "lax",
    ) -> None:
        """Queue a cookie to be sent with the response."""
        encoded = self._serializer.dumps(value) if signed else str(value)
        self._incoming[name] = encoded
        self._outgoing.append(
            SetCookie(
                name=name,
                value=encoded,
                max_age=max_age,
                path=path,
                domain=domain,
                secure=secure,
                httponly=httponly,
                samesite=samesite,
            )
        )

    def delete(self, name: str, *, path: str = "/") -> None:
        """Queue a cookie deletion (``Max-Age=0``)."""
        self._incoming.pop(name, None)
        self._outgoing.append(SetCookie(name=name, value="", max_age=0, path=path))

    @property
    def pending(self) -> tuple[SetCookie, ...]:
        """Cookies queued for the response, in the order they were set."""
        return tuple(self._outgoing)

    def __contains__(self, name: object) -> bool:
        return name in self._incoming
