"""Value kind tagging for loosely-typed inputs.

Decoded request bodies, option mappings, and template variables arrive
as arbitrary Python values. ``kind_of`` classifies a value once, at the
boundary where it enters wren, so call sites branch on a ``ValueKind``
instead of repeating ``isinstance`` ladders.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Structural kind of a decoded value."""

    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    PRIMITIVE = "primitive"


def kind_of(value: Any) -> ValueKind:
    """Classify *value* as null, array, object, or primitive.

    Mappings are objects. Lists and tuples are arrays. Strings and bytes
    are primitives even though they are sequences.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.PRIMITIVE


def as_object(value: Any) -> dict[str, Any]:
    """Return *value* as a dict if it is an object, else an empty dict."""
    if kind_of(value) is ValueKind.OBJECT:
        return dict(value)
    return {}
