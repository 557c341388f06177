"""Wren: a small HTTP request dispatcher.

Routes are tried in registration order; the first whose method and
path pattern match handles the exchange. Unmatched requests fall back
to static files, then 404.

Basic usage::

    from wren import App

    app = App({"static_path": "public"})

    @app.get("/hello/{name}")
    def hello(request, response, name):
        response.send(200, f"Hello, {name}!", "text/plain")

    app.resource("items", app.resource_controller("items"))
    app.run()
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "BodyMode",
    "ConfigurationError",
    "FormData",
    "HTTPError",
    "NotFound",
    "Request",
    "ResourceController",
    "ResourceStore",
    "Response",
    "ResponseWriter",
    "Settings",
    "UploadFile",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API."""
    if name == "App":
        from wren.app import App

        return App

    if name == "Settings":
        from wren.config import Settings

        return Settings

    if name == "BodyMode":
        from wren.routing.route import BodyMode

        return BodyMode

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name == "ResponseWriter":
        from wren.http.writer import ResponseWriter

        return ResponseWriter

    if name in ("FormData", "UploadFile"):
        from wren.http import forms as _forms

        return getattr(_forms, name)

    if name in ("ResourceController", "ResourceStore"):
        from wren import resources as _resources

        return getattr(_resources, name)

    if name in ("WrenError", "ConfigurationError", "HTTPError", "NotFound"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
