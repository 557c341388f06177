"""Kida template rendering for ``ResponseWriter.render()``.

One kida Environment is created per App, rooted at
``Settings.template_path`` so ``{% extends %}`` and ``{% include %}``
resolve against the template root. Files are addressed by filesystem
path, not by template name.
"""

import logging
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader

from wren._internal.values import as_object

logger = logging.getLogger("wren.templating")


class TemplateRenderer:
    """Renders template files by path.

    Usage::

        renderer = TemplateRenderer(Path("templates"))
        path = renderer.resolve("index.html")   # None if missing
        html = renderer.render_file(path, {"title": "Home"})
    """

    __slots__ = ("_env", "_root")

    def __init__(self, root: Path | None = None) -> None:
        self._root = root
        if root is not None:
            self._env = Environment(loader=FileSystemLoader(str(root)), autoescape=True)
        else:
            self._env = Environment(autoescape=True)

    def resolve(self, filepath: str | Path) -> Path | None:
        """Locate *filepath*: as given first, then under the template root.

        Without a template root, relative paths resolve against the
        working directory. Returns ``None`` if no file exists.
        """
        candidate = Path(filepath)
        if candidate.is_file():
            return candidate
        candidate = self._root / filepath if self._root is not None else candidate.resolve()
        if candidate.is_file():
            return candidate
        return None

    def render_file(self, path: Path, variables: Any = None) -> str:
        """Render the template at *path* with *variables*.

        Non-mapping variables are replaced by an empty context. Kida
        errors propagate to the caller.
        """
        template = self._env.from_string(path.read_text(encoding="utf-8"))
        logger.debug("Rendering %s", path)
        return template.render(as_object(variables))
