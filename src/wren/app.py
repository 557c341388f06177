"""Wren application class.

Mutable during setup (route registration). Frozen at runtime when
``app.run()`` or ``__call__()`` is first invoked.
"""

import re
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import ChangeCallback, Handler, LogSink
from wren.config import Settings
from wren.errors import ConfigurationError
from wren.http.access_log import default_sink
from wren.resources import ResourceController, ResourceStore, resource_controller
from wren.routing.pattern import PathMatcher
from wren.routing.route import BodyMode, Route
from wren.routing.router import Router
from wren.server.handler import handle_request
from wren.static import StaticFiles
from wren.templating import TemplateRenderer

type Pattern = str | re.Pattern[str] | PathMatcher


class App:
    """The wren application.

    Owns its route table and settings; nothing is process-global.
    Handlers are called as ``handler(request, response, *captures, body?)``::

        app = App({"static_path": "public"})

        @app.get("/hello/{name}")
        def hello(request, response, name):
            response.send(200, f"Hello, {name}!", "text/plain")

        app.run()

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the app.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_renderer",
        "_router",
        "_sink",
        "_static",
        "settings",
    )

    def __init__(
        self,
        settings: Settings | Mapping[str, Any] | None = None,
        *,
        logger: LogSink | None = None,
    ) -> None:
        self.settings: Settings = (
            settings if isinstance(settings, Settings) else Settings.from_options(settings)
        )
        self._sink: LogSink = logger if callable(logger) else default_sink()
        self._router = Router()
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._static: StaticFiles | None = (
            StaticFiles(self.settings.static_path) if self.settings.static_path else None
        )
        self._renderer = TemplateRenderer(self.settings.template_path)

    # -- Route registration --

    def add_route(
        self,
        method: str,
        pattern: Pattern,
        handler: Handler,
        body_mode: BodyMode | str | None = None,
    ) -> Route:
        """Append a route. Earlier registrations win on overlap."""
        self._check_not_frozen()
        if not callable(handler):
            msg = f"Handler for {method} {pattern!r} is not callable"
            raise ConfigurationError(msg)
        route = Route(
            method=method.upper(),
            matcher=PathMatcher.compile(pattern),
            handler=handler,
            body_mode=BodyMode.coerce(body_mode),
        )
        self._router.add(route)
        return route

    def _method_route(
        self,
        method: str,
        pattern: Pattern,
        handler: Handler | None,
        body_mode: BodyMode | str | None,
    ) -> Any:
        if handler is not None:
            return self.add_route(method, pattern, handler, body_mode)

        def decorator(func: Handler) -> Handler:
            self.add_route(method, pattern, func, body_mode)
            return func

        return decorator

    def get(
        self,
        pattern: Pattern,
        handler: Handler | None = None,
        body_mode: BodyMode | str | None = None,
    ) -> Any:
        """Register a GET route, directly or as a decorator."""
        return self._method_route("GET", pattern, handler, body_mode)

    def post(
        self,
        pattern: Pattern,
        handler: Handler | None = None,
        body_mode: BodyMode | str | None = None,
    ) -> Any:
        """Register a POST route. Without a body mode the body is parsed as a form."""
        return self._method_route("POST", pattern, handler, body_mode)

    def put(
        self,
        pattern: Pattern,
        handler: Handler | None = None,
        body_mode: BodyMode | str | None = None,
    ) -> Any:
        """Register a PUT route, directly or as a decorator."""
        return self._method_route("PUT", pattern, handler, body_mode)

    def delete(
        self,
        pattern: Pattern,
        handler: Handler | None = None,
        body_mode: BodyMode | str | None = None,
    ) -> Any:
        """Register a DELETE route, directly or as a decorator."""
        return self._method_route("DELETE", pattern, handler, body_mode)

    def head(
        self,
        pattern: Pattern,
        handler: Handler | None = None,
        body_mode: BodyMode | str | None = None,
    ) -> Any:
        """Register a HEAD route, directly or as a decorator."""
        return self._method_route("HEAD", pattern, handler, body_mode)

    # -- Resources --

    def resource_controller(
        self,
        name: str,
        collection: ResourceStore | Iterable[Any] | Mapping[int, Any] | None = None,
        on_change: ChangeCallback | None = None,
    ) -> ResourceController:
        """Build the five CRUD handlers for *name* over *collection*."""
        return resource_controller(name, collection, on_change)

    def resource(
        self,
        name: str,
        controller: ResourceController | Callable[[], ResourceController],
        body_mode: BodyMode | str = BodyMode.JSON,
    ) -> None:
        """Wire a controller's handlers to the five routes under ``/name``.

        *controller* may also be a zero-argument factory returning one.
        *body_mode* applies to create and update and must be JSON or
        MULTIPART.
        """
        if not hasattr(controller, "index") and callable(controller):
            controller = controller()
        mode = BodyMode.coerce(body_mode)
        if mode is BodyMode.NONE:
            msg = f"Resource {name!r} needs a JSON or MULTIPART body mode"
            raise ConfigurationError(msg)

        collection = f"/{re.escape(name)}"
        member = f"{collection}/{{id}}"
        self.get(collection, controller.index)
        self.get(member, controller.show)
        self.post(collection, controller.create, mode)
        self.put(member, controller.update, mode)
        self.delete(member, controller.destroy)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in registration order."""
        return self._router.routes

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving with pounce (HTTPS when TLS files are configured)."""
        from wren.server.run import run_server

        self._ensure_frozen()
        run_server(
            self,
            host or self.settings.host,
            port or self.settings.port,
            ssl_keyfile=self.settings.ssl_keyfile if self.settings.secure else None,
            ssl_certfile=self.settings.ssl_certfile if self.settings.secure else None,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            settings=self.settings,
            sink=self._sink,
            static=self._static,
            renderer=self._renderer,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol, freezing at startup."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.compile()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes before calling app.run()."
            )
            raise RuntimeError(msg)
