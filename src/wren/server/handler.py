"""ASGI handler: one exchange from scope to sent response.

The only component that touches raw ASGI directly. Builds the Request
and its ResponseWriter, runs the dispatcher (again, for each internal
redirect), converts failures into responses, and sends the result.
"""

import logging

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import LogSink
from wren.config import Settings
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.writer import ResponseWriter
from wren.routing.router import Router
from wren.server.body import acquire_body
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.sender import send_response
from wren.static import StaticFiles
from wren.templating import TemplateRenderer

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    settings: Settings,
    sink: LogSink,
    static: StaticFiles | None = None,
    renderer: TemplateRenderer | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, settings)
    # The writer (and its access-log hook) exists before any handler runs
    writer = ResponseWriter(request, sink=sink, renderer=renderer)

    try:
        await dispatch(request, writer, router=router, static=static)
        await _follow_redirects(writer, router=router, static=static)
    except HTTPError as exc:
        handle_http_error(exc, writer)
    except Exception as exc:
        handle_internal_error(exc, writer)

    if not writer.ended:
        logger.warning(
            "Handler for %s %s returned without ending the response",
            writer.request.method,
            writer.request.path,
        )
        writer.reset()
        writer.server_error()

    await send_response(writer.to_response(), send)


async def dispatch(
    request: Request,
    writer: ResponseWriter,
    *,
    router: Router,
    static: StaticFiles | None = None,
) -> None:
    """Route *request* to the first matching handler, or the static fallback."""
    match = router.match(request.method, request.path)

    if match is None:
        if static is not None and await static.serve(request, writer):
            return
        writer.not_found()
        return

    request, body_args = await acquire_body(match.route.body_mode, request)
    writer.retarget(request)
    await invoke(match.route.handler, request, writer, *match.captures, *body_args)


async def _follow_redirects(
    writer: ResponseWriter,
    *,
    router: Router,
    static: StaticFiles | None,
) -> None:
    """Re-dispatch while handlers request internal redirects.

    Stops with a 500 when a path repeats or the depth limit is reached.
    """
    limit = writer.settings.max_redirects
    visited = {writer.request.url}
    depth = 0

    while (location := writer.take_redirect()) is not None:
        if writer.ended:
            logger.warning("Ignoring internal redirect to %s: response already ended", location)
            return
        depth += 1
        if depth > limit or location in visited:
            logger.error("Internal redirect loop at %s (visited %s)", location, sorted(visited))
            writer.reset()
            writer.server_error("Inner Redirect Loop")
            return
        visited.add(location)

        request = writer.request.with_path(location)
        writer.reset()
        writer.retarget(request)
        await dispatch(request, writer, router=router, static=static)
