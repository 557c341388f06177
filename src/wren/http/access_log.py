"""Access log line formatting and the default sink.

One line per completed response::

    127.0.0.1 - [Fri, 16 Oct 2026 09:30:00 GMT] - "GET /items HTTP/1.1" - 200 - ""
"""

import logging
from email.utils import formatdate

from wren._internal.types import LogSink
from wren.http.request import Request

access_logger = logging.getLogger("wren.access")


def default_sink() -> LogSink:
    """The sink used when the App is built without one."""
    return access_logger.info


def format_access_line(request: Request, status: int, timestamp: float | None = None) -> str:
    """Format the access log line for *request* answered with *status*."""
    date = formatdate(timestamp, usegmt=True)
    version = request.http_version
    if "." not in version:
        version = f"{version}.0"
    return (
        f'{request.remote_addr} - [{date}] - "{request.method} {request.url} '
        f'HTTP/{version}" - {status} - "{request.referer}"'
    )
