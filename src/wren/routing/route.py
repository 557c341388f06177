"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from enum import Enum

from wren._internal.types import Handler
from wren.errors import ConfigurationError
from wren.routing.pattern import PathMatcher


class BodyMode(Enum):
    """How the request body is acquired before the handler runs."""

    NONE = "none"
    JSON = "json"
    MULTIPART = "multipart"

    @classmethod
    def coerce(cls, value: "BodyMode | str | None") -> "BodyMode":
        """Accept a BodyMode, its string value, or ``None`` (NONE)."""
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            msg = f"Unknown body mode {value!r}. Use one of: none, json, multipart."
            raise ConfigurationError(msg) from None


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup and appended to the router in
    registration order.
    """

    method: str
    matcher: PathMatcher
    handler: Handler
    body_mode: BodyMode = BodyMode.NONE


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    captures: tuple[str | None, ...]
