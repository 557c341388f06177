"""Invoke helper: call sync or async handlers uniformly.

Wren handlers can be ``def`` or ``async def``. Anything that calls a
user-provided callable goes through here so the sync/async check lives
in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    await invoke(handler, request, response, *captures)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        # sync: writes the response before returning
        def show(request, response, id):
            response.send(200, id, "text/plain")

        # async: awaited automatically
        async def show(request, response, id):
            item = await load(id)
            response.send(200, item, "text/plain")
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
