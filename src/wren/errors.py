"""Wren exception hierarchy.

Shared across Router, App, the dispatcher, and the resource controller
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when registration or settings are invalid.

    Surfaces at setup time, never while serving a request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or by body acquisition. The exchange catches these
    and answers with a plain-text response carrying ``detail``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818: conventional name in web frameworks
    """404: no route, no static file, or no such resource item."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ClientInputError(HTTPError):
    """Missing or unusable request body on create/update.

    Answered with 404 rather than 400, matching the resource routes'
    contract that an empty submission addresses nothing.
    """

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ServerFault(HTTPError):  # noqa: N818
    """500: a handler or collaborator broke its contract."""

    def __init__(self, detail: str = "Internal Server Error") -> None:
        super().__init__(status=500, detail=detail)


class FormParseError(ServerFault):
    """The form collaborator could not parse the request body."""

    def __init__(self, detail: str = "Form Parse Error") -> None:
        super().__init__(detail=detail)
