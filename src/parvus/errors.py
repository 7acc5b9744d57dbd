"""Parvus exception hierarchy.

Shared across the matcher, dispatcher, static resolver and live-reload
channel so every module raises and catches the same types.
"""


class ParvusError(Exception):
    """Base for all parvus-specific errors."""


class ConfigurationError(ParvusError):
    """Raised when server configuration is invalid.

    Typically surfaced from ``ParvusServer.start()`` when the MIME table
    cannot be read.
    """


class RouteCompilationError(ParvusError):
    """A route spec could not be compiled into a matcher.

    Raised synchronously from ``add_middleware()``, never deferred to the
    first request.
    """

    def __init__(self, spec: str, reason: str) -> None:
        self.spec = spec
        self.reason = reason
        super().__init__(f"Invalid route spec {spec!r}: {reason}")


class MiddlewareExecutionError(ParvusError):
    """A middleware handler raised while dispatching a request.

    Never raised to the transport.  The dispatcher builds one for the
    diagnostic log with the original exception chained as ``__cause__``.
    """

    def __init__(self, handler: str, target: str) -> None:
        self.handler = handler
        self.target = target
        super().__init__(f"Middleware {handler} failed for {target}")


class InjectionError(ParvusError):
    """The live-reload markup could not be injected into an HTML document."""


class InternalServingError(ParvusError):
    """Unexpected failure while resolving or serving a static file."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Failed to load requested file at {url}")


class ResponseFinishedError(ParvusError):
    """Raised when writing to a response that has already been ended."""
