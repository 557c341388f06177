"""Serving with pounce.

Pounce's ``run()`` takes an import string, but wren has a live ``App``
object, so ``pounce.Server`` is used directly with the ASGI callable.
A single worker keeps every request on one event loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    ssl_keyfile: str | None = None,
    ssl_certfile: str | None = None,
) -> None:
    """Start a pounce server for *app*.

    TLS is enabled only when both the key and certificate files are
    given; pounce owns the secure transport.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    secure = bool(ssl_keyfile and ssl_certfile)
    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        ssl_certfile=ssl_certfile if secure else None,
        ssl_keyfile=ssl_keyfile if secure else None,
    )
    logger.info("Serving on %s://%s:%d", "https" if secure else "http", host, port)
    Server(config, app).run()
