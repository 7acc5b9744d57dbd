"""Invoke helper: call sync or async middleware uniformly.

Middleware handlers can be ``def`` or ``async def``. The dispatcher
awaits whatever comes back only when it is awaitable, so the sync/async
check lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable.

    Both shapes are accepted::

        def add_header(request, response, next):
            response.set_header("X-Dev", "1")
            next()

        async def slow(request, response, next):
            await asyncio.sleep(0.1)
            next()
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
