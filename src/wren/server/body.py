"""Body acquisition strategies.

Chosen per matched route from its ``BodyMode`` and the request method:

==========  =========  ===============================================
Mode        Method     Strategy
==========  =========  ===============================================
NONE        POST       parse form; fields/files on the request
NONE        other      nothing; handler runs immediately
JSON        any        buffer, URL-unescape, ``json.loads`` → body arg
MULTIPART   any        parse form; fields/files on the request + body arg
==========  =========  ===============================================

A JSON body that cannot be decoded becomes ``None``; the handler decides
what that means. A form that cannot be parsed raises ``FormParseError``.
"""

import json
import logging
from typing import Any
from urllib.parse import unquote

from wren.errors import FormParseError
from wren.http.forms import FormData, parse_form_data
from wren.http.request import Request
from wren.routing.route import BodyMode

logger = logging.getLogger("wren.server")


async def read_json(request: Request) -> Any:
    """Decode the URL-escaped JSON body, or return ``None``."""
    raw = await request.body()
    try:
        return json.loads(unquote(raw.decode("utf-8")))
    except ValueError:
        logger.debug("Undecodable JSON body for %s %s", request.method, request.path)
        return None


async def read_form(request: Request) -> FormData:
    """Parse the form body, raising ``FormParseError`` on failure."""
    raw = await request.body()
    try:
        return parse_form_data(raw, request.content_type)
    except ValueError as exc:
        logger.warning("Form parse failed for %s %s: %s", request.method, request.path, exc)
        raise FormParseError from exc


async def acquire_body(mode: BodyMode, request: Request) -> tuple[Request, tuple[Any, ...]]:
    """Run the strategy for *mode*.

    Returns the request to hand to the handler (carrying form data when
    a form was parsed) and the trailing handler arguments.
    """
    if mode is BodyMode.JSON:
        return request, (await read_json(request),)

    if mode is BodyMode.MULTIPART:
        form = await read_form(request)
        return request.with_form(form), (form,)

    if request.method == "POST":
        form = await read_form(request)
        return request.with_form(form), ()

    return request, ()
