"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: called as handler(request, response, *captures, body?)
Handler: TypeAlias = Callable[..., Any]

# Access-log sink: receives one formatted line per completed response
LogSink: TypeAlias = Callable[[str], Any]

# Resource change callback: receives the id of the mutated item
ChangeCallback: TypeAlias = Callable[[int], Any]
