"""Static file fallback.

Used by the dispatcher when no route matches. Maps the request path
onto a directory and writes the file through the response writer.
Reports failure (returns ``False``) instead of answering, so the
dispatcher decides what a miss looks like.
"""

import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote

from wren.http.request import Request

if TYPE_CHECKING:
    from wren.http.writer import ResponseWriter

logger = logging.getLogger("wren.static")


class StaticFiles:
    """Serves files from a directory for GET and HEAD requests.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Usage::

        static = StaticFiles("./public")
        served = await static.serve(request, writer)
    """

    __slots__ = ("_cache_control", "_directory", "_index")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control

    def _resolve(self, relative: str) -> Path:
        if not relative:
            return self._directory
        if "\x00" in relative:
            msg = "embedded null byte in static path"
            raise ValueError(msg)
        return (self._directory / relative).resolve()

    async def serve(self, request: Request, writer: "ResponseWriter") -> bool:
        """Write the file for ``request.path``; return False if there is none."""
        if request.method not in ("GET", "HEAD"):
            return False

        relative = unquote(request.path).lstrip("/")
        try:
            file_path = self._resolve(relative)
        except (OSError, ValueError):
            logger.warning("Unresolvable static path: %r", request.path)
            return False
        if not file_path.is_relative_to(self._directory):
            logger.warning("Rejected path outside static root: %s", request.path)
            return False

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return False
            # Directory without trailing slash: redirect so relative links resolve
            if relative and not request.path.endswith("/"):
                writer.write_head(301, {"Location": request.path + "/"})
                writer.end()
                return True
            file_path = index_path

        if not file_path.is_file():
            return False

        content_type, _ = mimetypes.guess_type(str(file_path))
        body = file_path.read_bytes()
        writer.write_head(
            200,
            {
                "Content-Type": content_type or "application/octet-stream",
                "Content-Length": str(len(body)),
                "Cache-Control": self._cache_control,
            },
        )
        writer.end(body)
        return True
