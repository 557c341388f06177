"""Server settings.

Settings is a frozen dataclass: resolved once when the App is built,
then shared read-only by every request.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wren._internal.values import ValueKind, as_object, kind_of

logger = logging.getLogger("wren.config")


@dataclass(frozen=True, slots=True)
class Settings:
    """Server settings. Immutable after creation.

    All fields have defaults. Override what you need::

        settings = Settings(static_path=Path("public"), cookie_keys=("s3cr3t",))
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Filesystem roots
    static_path: Path | None = None
    template_path: Path | None = None

    # TLS: both files must be present to serve HTTPS
    ssl_keyfile: str | None = None
    ssl_certfile: str | None = None

    # Signed cookies: the first key signs, every key verifies
    cookie_keys: tuple[str, ...] = ()

    # Internal redirects allowed per exchange
    max_redirects: int = 10

    @property
    def secure(self) -> bool:
        """True when both TLS key and certificate are configured."""
        return bool(self.ssl_keyfile and self.ssl_certfile)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "Settings":
        """Build settings from a loose option mapping.

        Recognized keys: ``static_path``, ``template_path``, ``ssl_options``
        (a mapping with ``key`` and ``cert``), ``cookie_keys``, ``host``,
        ``port``, ``max_redirects``. Entries of the wrong type are dropped
        rather than rejected. A static root that does not exist is
        disabled with a warning.
        """
        opts = as_object(options)

        static_path = _resolve_dir(opts.get("static_path"))
        if static_path is not None and not static_path.is_dir():
            logger.warning("Static path %s does not exist; static serving disabled", static_path)
            static_path = None

        ssl_options = as_object(opts.get("ssl_options"))
        keyfile = ssl_options.get("key")
        certfile = ssl_options.get("cert")

        cookie_keys: tuple[str, ...] = ()
        raw_keys = opts.get("cookie_keys")
        if kind_of(raw_keys) is ValueKind.ARRAY:
            cookie_keys = tuple(k for k in raw_keys if isinstance(k, str) and k)
        elif isinstance(raw_keys, str) and raw_keys:
            cookie_keys = (raw_keys,)

        defaults = cls()
        host = opts.get("host")
        port = opts.get("port")
        max_redirects = opts.get("max_redirects")
        return cls(
            host=host if isinstance(host, str) and host else defaults.host,
            port=port if isinstance(port, int) and not isinstance(port, bool) else defaults.port,
            static_path=static_path,
            template_path=_resolve_dir(opts.get("template_path")),
            ssl_keyfile=keyfile if isinstance(keyfile, str) and keyfile else None,
            ssl_certfile=certfile if isinstance(certfile, str) and certfile else None,
            cookie_keys=cookie_keys,
            max_redirects=(
                max_redirects
                if isinstance(max_redirects, int) and max_redirects >= 0
                else defaults.max_redirects
            ),
        )


def _resolve_dir(value: Any) -> Path | None:
    """Resolve a string or Path option to an absolute path."""
    if isinstance(value, (str, Path)) and str(value):
        return Path(value).resolve()
    return None
