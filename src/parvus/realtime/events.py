"""Frames pushed down the live-reload stream.

The channel only sends named events with a short text payload; today
that is ``refresh`` with an empty one.  The browser's ``EventSource``
dispatches on the event name and ignores the data.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SSEEvent:
    """A named message for every listening browser."""

    event: str
    data: str = ""

    def encode(self) -> str:
        """Render as an ``event:``/``data:`` frame closed by a blank line."""
        payload = "".join(f"data: {line}\n" for line in self.data.split("\n"))
        return f"event: {self.event}\n{payload}\n"


@dataclass(frozen=True, slots=True)
class EventStream:
    """One browser's subscription and how often to keep it alive."""

    generator: AsyncIterator[SSEEvent]
    heartbeat_interval: float = 15.0
