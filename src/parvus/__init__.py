"""Parvus: a small static-site development server.

Serves a directory, lets the host application insert route-scoped
middleware, and tells connected browsers to reload on demand.

Basic usage::

    from parvus import ParvusServer, ServerConfig

    server = ParvusServer(ServerConfig(directory="site"))

    async def hello(request, response, next):
        response.set_header("Content-Type", "text/html")
        response.end("<html><body>hello</body></html>")

    server.add_middleware(hello, "/hello")
    server.run()
"""

from parvus.app import ParvusServer
from parvus.config import MiddlewareSpec, ServerConfig
from parvus.errors import (
    ConfigurationError,
    InjectionError,
    InternalServingError,
    MiddlewareExecutionError,
    ParvusError,
    ResponseFinishedError,
    RouteCompilationError,
)
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.middleware.protocol import Middleware, Next
from parvus.server.mime import MimeType

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "InjectionError",
    "InternalServingError",
    "MiddlewareExecutionError",
    "MiddlewareSpec",
    "Middleware",
    "MimeType",
    "Next",
    "ParvusError",
    "ParvusServer",
    "Request",
    "ResponseFinishedError",
    "RouteCompilationError",
    "ServerConfig",
    "ServerResponse",
]
