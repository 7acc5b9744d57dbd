"""Server-Sent Events transport over ASGI.

Handles the full SSE lifecycle: sends ``text/event-stream`` headers,
relays events from the live-reload channel, monitors for client
disconnect, and sends periodic heartbeat comments to keep the
connection alive.
"""

import asyncio
import contextlib
from typing import Any

from parvus._internal.asgi import Receive, Send
from parvus.realtime.events import EventStream


async def handle_sse(event_stream: EventStream, send: Send, receive: Receive) -> None:
    """Stream Server-Sent Events over an ASGI connection.

    1. Sends ``http.response.start`` with ``text/event-stream`` headers.
    2. Launches two concurrent tasks:
       - **Event producer**: consumes the async generator and sends each
         event as an ASGI body chunk.
       - **Disconnect monitor**: awaits ``http.disconnect`` from the client
         and cancels the producer.
    3. Sends periodic heartbeat comments (``:``) on idle.
    """
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [
                (b"content-type", b"text/event-stream"),
                (b"cache-control", b"no-cache"),
                (b"connection", b"keep-alive"),
                (b"x-accel-buffering", b"no"),
            ],
        }
    )

    disconnected = asyncio.Event()

    async def monitor_disconnect() -> None:
        """Wait for client disconnect."""
        while not disconnected.is_set():
            message = await receive()
            if message.get("type") == "http.disconnect":
                disconnected.set()
                return

    async def produce_events() -> None:
        """Relay events, sending a heartbeat whenever the stream is idle.

        ``asyncio.wait`` does not cancel the pending ``__anext__()`` task
        on timeout, so the same task survives across heartbeat intervals.
        """
        pending_next: asyncio.Task[Any] | None = None
        gen_iter = event_stream.generator.__aiter__()
        try:
            while not disconnected.is_set():
                if pending_next is None:

                    async def _next() -> Any:
                        return await gen_iter.__anext__()

                    pending_next = asyncio.create_task(_next())

                done, _ = await asyncio.wait(
                    {pending_next},
                    timeout=event_stream.heartbeat_interval,
                )

                if not done:
                    if disconnected.is_set():
                        break
                    try:
                        await send(
                            {
                                "type": "http.response.body",
                                "body": b": heartbeat\n\n",
                                "more_body": True,
                            }
                        )
                    except (RuntimeError, OSError):
                        break  # Response already closed (client disconnected)
                    continue

                pending_next = None
                try:
                    event = done.pop().result()
                except StopAsyncIteration:
                    break

                try:
                    await send(
                        {
                            "type": "http.response.body",
                            "body": event.encode().encode("utf-8"),
                            "more_body": True,
                        }
                    )
                except (RuntimeError, OSError):
                    break
        except asyncio.CancelledError:
            pass
        finally:
            # Always clean up the pending __anext__ task, then close the
            # generator so the channel forgets this client.
            if pending_next is not None:
                if not pending_next.done():
                    pending_next.cancel()
                with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
                    await pending_next
            aclose = getattr(gen_iter, "aclose", None)
            if aclose is not None:
                with contextlib.suppress(RuntimeError):
                    await aclose()

    producer_task = asyncio.create_task(produce_events())
    monitor_task = asyncio.create_task(monitor_disconnect())

    try:
        _done, pending = await asyncio.wait(
            {producer_task, monitor_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
    finally:
        with contextlib.suppress(RuntimeError, OSError):
            await send(
                {
                    "type": "http.response.body",
                    "body": b"",
                    "more_body": False,
                }
            )
