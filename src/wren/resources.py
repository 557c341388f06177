"""Resource routes: five CRUD handlers over a named collection.

``resource_controller()`` builds the handlers; ``App.resource()`` wires
them to routes::

    store = ResourceStore()
    app.resource("items", app.resource_controller("items", store, on_change=notify))

    GET    /items        -> index
    GET    /items/{id}   -> show
    POST   /items        -> create
    PUT    /items/{id}   -> update
    DELETE /items/{id}   -> destroy

Items live in a ``ResourceStore``: an explicit id → item mapping with a
monotonic id counter. Deleting an item removes it; ids are never reused.
"""

import json
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from wren._internal.types import ChangeCallback
from wren._internal.values import ValueKind, kind_of
from wren.errors import ClientInputError, ConfigurationError
from wren.http.request import Request
from wren.http.writer import ResponseWriter

JSON_CONTENT_TYPE = "application/json"


class ResourceStore:
    """Thread-safe id → item mapping with a monotonic next id.

    Mutations are serialized by a lock so concurrent creates never
    compute the same id.
    """

    __slots__ = ("_items", "_lock", "_next_id")

    def __init__(self, items: Iterable[Any] | Mapping[int, Any] | None = None) -> None:
        self._items: dict[int, Any] = {}
        self._lock = threading.Lock()
        next_id = 0
        if isinstance(items, Mapping):
            self._items.update((int(k), v) for k, v in items.items())
        elif items is not None:
            # Sequence positions become ids; None entries are holes
            seq = list(items)
            self._items.update((i, v) for i, v in enumerate(seq) if v is not None)
            next_id = len(seq)
        self._next_id = max(next_id, max(self._items, default=-1) + 1)

    def append(self, item: Any) -> int:
        """Store *item* under the next id and return that id."""
        with self._lock:
            item_id = self._next_id
            self._items[item_id] = item
            self._next_id += 1
            return item_id

    def put(self, item_id: int, item: Any) -> None:
        """Store *item* under *item_id*, creating the slot if needed."""
        with self._lock:
            self._items[item_id] = item
            self._next_id = max(self._next_id, item_id + 1)

    def remove(self, item_id: int) -> bool:
        """Delete *item_id*. Returns False if it was absent."""
        with self._lock:
            if item_id not in self._items:
                return False
            del self._items[item_id]
            return True

    def get(self, item_id: int, default: Any = None) -> Any:
        return self._items.get(item_id, default)

    def snapshot(self) -> dict[int, Any]:
        """A copy of the current items."""
        with self._lock:
            return dict(self._items)

    @property
    def next_id(self) -> int:
        return self._next_id

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[int]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._items)


def _parse_id(raw: str | None) -> int | None:
    """Convert a captured id segment to an int, or None if it isn't one."""
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


def _extract_item(body: Any) -> Any:
    """``body["content"]`` when present on an object body, else the body."""
    if kind_of(body) is ValueKind.OBJECT:
        content = body.get("content")
        if content is not None:
            return content
        return dict(body)
    return body


@dataclass(frozen=True, slots=True)
class ResourceController:
    """The five handlers for one named collection."""

    name: str
    store: ResourceStore
    on_change: ChangeCallback | None = None

    def _self_url(self, item_id: int | None = None) -> str:
        if item_id is None:
            return f"/{self.name}"
        return f"/{self.name}/{item_id}"

    def _notify(self, item_id: int) -> None:
        if self.on_change is not None:
            self.on_change(item_id)

    def _send_json(
        self,
        response: ResponseWriter,
        status: int,
        payload: Any,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        response.send(status, json.dumps(payload), JSON_CONTENT_TYPE, headers)

    # -- Handlers --

    def index(self, request: Request, response: ResponseWriter) -> None:
        items = {str(k): v for k, v in sorted(self.store.snapshot().items())}
        self._send_json(response, 200, {"content": items, "self": self._self_url()})

    def show(self, request: Request, response: ResponseWriter, id: str | None) -> None:
        item_id = _parse_id(id)
        if item_id is None or item_id not in self.store:
            response.not_found()
            return
        self._send_json(
            response,
            200,
            {"content": self.store.get(item_id), "self": self._self_url(item_id)},
        )

    def create(self, request: Request, response: ResponseWriter, body: Any) -> None:
        item = _extract_item(body)
        if not item:
            raise ClientInputError
        item_id = self.store.append(item)
        self._notify(item_id)
        url = self._self_url(item_id)
        self._send_json(response, 201, {"content": item, "self": url}, {"Location": url})

    def update(self, request: Request, response: ResponseWriter, id: str | None, body: Any) -> None:
        item_id = _parse_id(id)
        item = _extract_item(body)
        if item_id is None or not item:
            raise ClientInputError
        self.store.put(item_id, item)
        self._notify(item_id)
        self._send_json(response, 200, {"content": item, "self": self._self_url(item_id)})

    def destroy(self, request: Request, response: ResponseWriter, id: str | None) -> None:
        item_id = _parse_id(id)
        if item_id is None or not self.store.remove(item_id):
            response.not_found()
            return
        self._notify(item_id)
        response.send(200, "200 Destroyed", "text/plain")


def resource_controller(
    name: str,
    collection: ResourceStore | Iterable[Any] | Mapping[int, Any] | None = None,
    on_change: ChangeCallback | None = None,
) -> ResourceController:
    """Build the controller for *name* over *collection*.

    *collection* may be a ``ResourceStore`` (used as-is, so the caller
    keeps a live reference), an initial sequence, or an id mapping.
    *on_change* is optional; when given it must be callable and runs
    after every create, update, and destroy.
    """
    if not name or "/" in name:
        msg = f"Resource name must be a non-empty path segment, got {name!r}"
        raise ConfigurationError(msg)
    if on_change is not None and not callable(on_change):
        msg = f"on_change must be callable, got {type(on_change).__name__}"
        raise ConfigurationError(msg)
    store = collection if isinstance(collection, ResourceStore) else ResourceStore(collection)
    return ResourceController(name=name, store=store, on_change=on_change)
