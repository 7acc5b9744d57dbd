"""Live-reload channel.

Keeps one queue per connected browser.  ``broadcast_reload()`` drops a
``refresh`` event into every queue; each SSE stream drains its own
queue.  The very first connection the channel ever sees triggers a
broadcast by itself, so a page opened before the server was ready ends
up showing fresh content.

All methods run on the event loop thread.  Use
``ParvusServer.refresh_browser()`` to signal from other threads.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from parvus.realtime.client import REFRESH_EVENT
from parvus.realtime.events import SSEEvent

logger = logging.getLogger("parvus.reload")

REFRESH = SSEEvent(event=REFRESH_EVENT)

# Queued to end a stream when the channel closes.
_CLOSE = SSEEvent(event="close")


class LiveReloadChannel:
    """Push channel from the server to every connected browser."""

    __slots__ = ("_clients", "_closed", "_connected_before")

    def __init__(self) -> None:
        self._clients: set[asyncio.Queue[SSEEvent]] = set()
        self._connected_before = False
        self._closed = False

    @property
    def connected_before(self) -> bool:
        """True once any client has connected."""
        return self._connected_before

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def connect(self) -> asyncio.Queue[SSEEvent]:
        """Register a client and return the queue its events arrive on."""
        queue: asyncio.Queue[SSEEvent] = asyncio.Queue()
        if self._closed:
            queue.put_nowait(_CLOSE)
            return queue
        self._clients.add(queue)
        if not self._connected_before:
            self._connected_before = True
            self.broadcast_reload()
        else:
            logger.info("The browser is listening")
        return queue

    def disconnect(self, queue: asyncio.Queue[SSEEvent]) -> None:
        if queue in self._clients:
            self._clients.discard(queue)
            logger.info("The browser disconnected")

    def broadcast_reload(self) -> int:
        """Send a ``refresh`` event to every connected client.

        Returns the number of clients signalled.
        """
        logger.info("Asking browser to refresh")
        for queue in self._clients:
            queue.put_nowait(REFRESH)
        return len(self._clients)

    def close(self) -> None:
        """End every open stream.  Later connections end at once until ``reopen()``."""
        self._closed = True
        for queue in self._clients:
            queue.put_nowait(_CLOSE)
        self._clients.clear()

    def reopen(self) -> None:
        """Accept connections again after ``close()``.

        The first-connection flag survives, so a restart does not count
        as a fresh first connection.
        """
        self._closed = False

    async def stream(self) -> AsyncIterator[SSEEvent]:
        """Connect, then yield events until the channel closes.

        Disconnects in ``finally`` so cancelled streams are cleaned up.
        """
        queue = self.connect()
        try:
            while True:
                event = await queue.get()
                if event is _CLOSE:
                    return
                yield event
        finally:
            self.disconnect(queue)
