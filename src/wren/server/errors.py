"""Error handling for an exchange.

Maps HTTPError exceptions and unexpected failures onto the response
writer as plain-text responses. If the handler already ended the
response, the error is logged and the sent response stands.
"""

import logging

from wren.errors import HTTPError
from wren.http.writer import ResponseWriter

logger = logging.getLogger("wren.server")


def handle_http_error(exc: HTTPError, writer: ResponseWriter) -> None:
    """Answer with the exception's status, detail, and headers."""
    request = writer.request
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    if writer.ended:
        logger.warning(
            "%s raised after the response ended for %s %s",
            type(exc).__name__,
            request.method,
            request.path,
        )
        return

    writer.reset()
    writer.send(exc.status, exc.detail or f"Error {exc.status}", "text/plain", dict(exc.headers))


def handle_internal_error(exc: Exception, writer: ResponseWriter) -> None:
    """Handle unexpected exceptions as 500 errors."""
    request = writer.request
    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)

    if not writer.ended:
        writer.reset()
        writer.server_error()
