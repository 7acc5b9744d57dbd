"""Sequential middleware dispatch.

Each request moves through a small state machine::

    PENDING -> RUNNING -> HANDLED
                       -> FALLTHROUGH

Matching handlers run one at a time, in registration order.  A handler
that does not call ``next()`` takes the request (HANDLED).  A handler
that calls ``next()`` but has already ended the response also takes it:
the written response wins over the continuation.  A handler that raises
is logged and halts the chain; the request is HANDLED with whatever the
handler wrote.  When every matching handler continues, or none matched,
the request falls through to the terminal handler (the static resolver).
If the terminal handler itself raises, the failure is logged and the
client gets a 500 page.
"""

import enum
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from parvus._internal.invoke import invoke
from parvus.errors import MiddlewareExecutionError
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.middleware.protocol import Next
from parvus.middleware.registry import MiddlewareRegistry
from parvus.server.static import error_page
from parvus.server.terminal_errors import log_error


Fallback: TypeAlias = Callable[[Request, ServerResponse], Awaitable[None]]


class DispatchState(enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    HANDLED = "handled"
    FALLTHROUGH = "fallthrough"


def _handler_name(handler: Callable[..., Any]) -> str:
    name = getattr(handler, "__qualname__", None) or type(handler).__qualname__
    module = getattr(handler, "__module__", None)
    return f"{module}.{name}" if module else name


async def dispatch(
    request: Request,
    response: ServerResponse,
    registry: MiddlewareRegistry,
    fallback: Fallback,
) -> DispatchState:
    """Run the middleware chain for *request*; fall back if nobody takes it.

    Never raises for middleware failures.  Returns the final state.
    """
    state = DispatchState.PENDING
    matched = registry.all_matching(request.url)

    if matched:
        state = DispatchState.RUNNING
        next_ = Next()
        for handler in matched:
            next_.reset()
            try:
                await invoke(handler, request, response, next_)
            except Exception as exc:
                failure = MiddlewareExecutionError(_handler_name(handler), request.url)
                failure.__cause__ = exc
                log_error(failure, request)
                state = DispatchState.HANDLED
                break

            if not next_.called or response.finished:
                state = DispatchState.HANDLED
                break

    if state is DispatchState.HANDLED:
        return state

    try:
        await fallback(request, response)
    except Exception as exc:
        log_error(exc, request)
        if not response.finished:
            response.set_header("Content-Type", "text/html")
            response.write_head(500)
            response.end(error_page(request.url, exc))
    return DispatchState.FALLTHROUGH
