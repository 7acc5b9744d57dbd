"""Live reload: SSE push channel from the server to connected browsers."""

from parvus.realtime.channel import LiveReloadChannel
from parvus.realtime.events import EventStream, SSEEvent

__all__ = ["EventStream", "LiveReloadChannel", "SSEEvent"]
