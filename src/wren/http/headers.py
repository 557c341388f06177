"""Immutable, case-insensitive request headers."""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Request headers decoded once from the ASGI byte pairs.

    Keys are lower-cased. ``headers["Referer"]`` returns the first value;
    ``get_list`` returns every value sent under that name.
    """

    __slots__ = ("_values",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        object.__setattr__(self, "_values", values)

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        first = {k: v[0] for k, v in self._values.items()}
        return f"Headers({first!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._values.get(key.lower(), ()))

