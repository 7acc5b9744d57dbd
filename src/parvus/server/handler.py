"""ASGI handler: translates ASGI scope/messages to parvus types.

The only component that touches raw ASGI for ordinary requests.
Answers the reserved live-reload paths itself, runs everything else
through middleware dispatch, and sends the resulting response.
"""

import logging

from parvus._internal.asgi import Receive, Scope, Send
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.middleware.registry import MiddlewareRegistry
from parvus.realtime.channel import LiveReloadChannel
from parvus.realtime.client import CLIENT_PATH, EVENTS_PATH, RELOAD_CLIENT_JS
from parvus.realtime.events import EventStream
from parvus.realtime.sse import handle_sse
from parvus.server.dispatcher import DispatchState, Fallback, dispatch
from parvus.server.sender import send_response

logger = logging.getLogger("parvus.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    registry: MiddlewareRegistry,
    fallback: Fallback,
    channel: LiveReloadChannel,
    sse_heartbeat_interval: float = 15.0,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    if request.path == EVENTS_PATH:
        stream = EventStream(channel.stream(), heartbeat_interval=sse_heartbeat_interval)
        await handle_sse(stream, send, receive)
        return

    response = ServerResponse()

    if request.path == CLIENT_PATH:
        response.set_header("Content-Type", "application/javascript; charset=utf-8")
        response.end(RELOAD_CLIENT_JS)
    else:
        state = await dispatch(request, response, registry, fallback)
        if state is DispatchState.HANDLED and not response.finished:
            logger.warning(
                "%s %s: middleware stopped the chain without ending the response",
                request.method,
                request.url,
            )

    await send_response(response, send)
