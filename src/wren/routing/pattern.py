"""Path pattern compilation and matching.

A pattern is compiled once at registration into a ``PathMatcher``.
Strings may mix regular expression syntax with ``{name}`` placeholders::

    "/items"                -> literal path
    "/items/{id}"           -> one segment        ([^/]+)
    "/items/{id:int}"       -> digits             (\\d+)
    "/files/{rest:path}"    -> remaining segments (.+)
    r"/items/(\\w+)"         -> regular expression, used verbatim

Matching is anchored at both ends: the whole path must be consumed.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from wren.errors import ConfigurationError

# Regex fragment for each placeholder converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::([A-Za-z_]+))?\}")


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a route pattern into a regular expression.

    Compiled patterns pass through untouched. Strings have their
    placeholders expanded into capture groups.

    Raises ``ConfigurationError`` for unknown converters or invalid
    regular expressions.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        msg = f"Route pattern must be a string or compiled regex, got {type(pattern).__name__}"
        raise ConfigurationError(msg)

    def expand(match: re.Match[str]) -> str:
        converter = match.group(2) or "str"
        if converter not in CONVERTERS:
            msg = f"Unknown placeholder converter {converter!r} in pattern {pattern!r}"
            raise ConfigurationError(msg)
        return f"({CONVERTERS[converter]})"

    source = _PLACEHOLDER.sub(expand, pattern)
    try:
        return re.compile(source)
    except re.error as exc:
        msg = f"Invalid route pattern {pattern!r}: {exc}"
        raise ConfigurationError(msg) from exc


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """A compiled, fully-anchored matching rule over a path string."""

    source: str
    regex: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: "str | re.Pattern[str] | PathMatcher") -> "PathMatcher":
        if isinstance(pattern, PathMatcher):
            return pattern
        regex = compile_pattern(pattern)
        return cls(source=regex.pattern, regex=regex)

    @property
    def capture_count(self) -> int:
        """Number of captures every successful match yields."""
        return self.regex.groups

    def match(self, path: str) -> tuple[str | None, ...] | None:
        """Match *path*, returning unescaped captures or ``None``.

        A match that consumes nothing counts as no match. Empty captures
        come back as ``""`` and groups that did not participate as ``None``.
        """
        m = self.regex.fullmatch(path)
        if m is None or m.end() == m.start():
            return None
        return tuple(unquote(part) if part else part for part in m.groups())
