"""Middleware is Protocol-based, with no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, response: ServerResponse, next: Next) -> None

Registered handlers are scoped by route spec and run in order until
one of them ends the response.
"""

from parvus.middleware.protocol import Middleware, Next
from parvus.middleware.registry import MiddlewareEntry, MiddlewareRegistry

__all__ = [
    "Middleware",
    "MiddlewareEntry",
    "MiddlewareRegistry",
    "Next",
]
