"""Server configuration.

ServerConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from parvus.server.mime import MimeType


@dataclass(frozen=True, slots=True)
class MiddlewareSpec:
    """A middleware handler paired with the route spec that scopes it."""

    handler: Callable[..., Any]
    route: str = "*"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=3000, directory="public")
    """

    # Server
    host: str = "localhost"
    port: int = 62295
    log_level: str = "info"
    shutdown_timeout: int = 2  # Seconds uvicorn waits for open connections on exit

    # Static files
    directory: str | Path = "site"
    subfolder: str | None = None  # Stripped from both directory and URL before lookup

    # Middleware registered at construction, in order
    middlewares: tuple[MiddlewareSpec, ...] = ()

    # MIME types
    additional_mime_types: tuple[MimeType, ...] = ()
    mime_types_path: str | Path | None = None  # None = bundled table

    # Live reload
    inject_reload: bool = True
    sse_heartbeat_interval: float = 15.0
