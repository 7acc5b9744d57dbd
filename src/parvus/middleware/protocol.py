"""Middleware protocol and the Next continuation.

A middleware is any callable matching::

    async def my_mw(request: Request, response: ServerResponse, next: Next) -> None: ...

No base class required. Plain ``def`` functions and callable objects
work too.  A handler either ends the response (stopping the chain) or
calls ``next()`` to let the following handler, and finally the static
resolver, run.
"""

from collections.abc import Awaitable
from typing import Protocol

from parvus.http.request import Request
from parvus.http.response import ServerResponse


class Next:
    """Continuation handed to each middleware.

    Calling it records "proceed to the next handler".  The dispatcher
    resets it before every handler, so one instance serves a whole
    request.
    """

    __slots__ = ("_called",)

    def __init__(self) -> None:
        self._called = False

    def __call__(self) -> None:
        self._called = True

    def reset(self) -> None:
        self._called = False

    @property
    def called(self) -> bool:
        return self._called

    def __repr__(self) -> str:
        return f"Next(called={self._called})"


class Middleware(Protocol):
    """Protocol for parvus middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def dev_header(request, response, next):
            response.set_header("X-Dev", "1")
            next()

        # Class middleware
        class Maintenance:
            async def __call__(self, request, response, next):
                response.write_head(503)
                response.end("Back soon")
    """

    def __call__(
        self, request: Request, response: ServerResponse, next: Next
    ) -> Awaitable[None] | None: ...
