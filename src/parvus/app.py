"""The parvus development server.

Mutable during setup (middleware registration).  ``start()`` loads the
MIME table, builds the static resolver and begins listening; the
middleware list should be complete by then.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

import uvicorn

from parvus._internal.asgi import Receive, Scope, Send
from parvus.config import ServerConfig
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.middleware.registry import MiddlewareRegistry
from parvus.realtime.channel import LiveReloadChannel
from parvus.server.handler import handle_request
from parvus.server.mime import MimeType, load_mime_types, merge_mime_types
from parvus.server.static import StaticResolver

logger = logging.getLogger("parvus.server")


class ParvusServer:
    """A static-site dev server with route-scoped middleware and live reload.

    Usage::

        server = ParvusServer(ServerConfig(directory="public"))

        async def api(request, response, next):
            response.set_header("Content-Type", "application/json")
            response.end('{"ok": true}')

        server.add_middleware(api, "/^\\/api\\//")
        await server.start()
        ...
        server.refresh_browser()   # after rebuilding the site
        ...
        await server.stop()
    """

    __slots__ = (
        "_channel",
        "_loop",
        "_registry",
        "_resolver",
        "_serve_task",
        "_server",
        "config",
    )

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._registry = MiddlewareRegistry()
        self._channel = LiveReloadChannel()
        self._resolver: StaticResolver | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

        for spec in self.config.middlewares:
            self.add_middleware(spec.handler, spec.route)

    # -- Registration --

    def add_middleware(self, handler: Callable[..., Any], route: str = "*") -> None:
        """Register *handler* for request targets matching *route*.

        Raises:
            RouteCompilationError: If *route* is not a valid pattern.
        """
        self._registry.register(handler, route)

    @property
    def middleware(self) -> MiddlewareRegistry:
        return self._registry

    @property
    def channel(self) -> LiveReloadChannel:
        return self._channel

    @property
    def mime_types(self) -> tuple[MimeType, ...]:
        """The merged MIME table (empty until the resolver is built)."""
        return self._resolver.mime_types if self._resolver is not None else ()

    # -- Live reload --

    def refresh_browser(self) -> None:
        """Tell every connected browser to reload.

        Safe to call from any thread; hops onto the server's event loop
        when called from elsewhere.
        """
        loop = self._loop
        if loop is not None and loop.is_running() and not _on_loop(loop):
            loop.call_soon_threadsafe(self._channel.broadcast_reload)
            return
        self._channel.broadcast_reload()

    # -- Static resolution --

    async def prepare(self) -> StaticResolver:
        """Load and merge the MIME table and build the static resolver.

        Called by ``start()``; exposed so tests and embedders can drive the
        ASGI app without opening a socket.

        Raises:
            ConfigurationError: If the MIME table cannot be loaded.
        """
        base = await load_mime_types(self.config.mime_types_path)
        table = merge_mime_types(base, self.config.additional_mime_types)
        self._resolver = StaticResolver(
            self.config.directory,
            mime_types=table,
            subfolder=self.config.subfolder,
            inject=self.config.inject_reload,
        )
        return self._resolver

    async def serve_static(
        self,
        request: Request,
        response: ServerResponse,
        *,
        directory: str | None = None,
        inject: bool | None = None,
    ) -> None:
        """Serve *request* from the site directory (or *directory*).

        The terminal step of every request no middleware took.
        Middleware may call it too, e.g. to serve from another root.
        """
        resolver = self._resolver
        if resolver is None:
            resolver = await self.prepare()
        await resolver(request, response, directory=directory, inject=inject)

    # -- Lifecycle --

    async def start(self) -> None:
        """Load the MIME table, then listen on ``config.host:config.port``.

        Returns once the socket is accepting connections.
        """
        if self._serve_task is not None:
            return

        await self.prepare()
        self._loop = asyncio.get_running_loop()
        self._channel.reopen()

        uvicorn_config = uvicorn.Config(
            self,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level,
            lifespan="off",
            timeout_graceful_shutdown=self.config.shutdown_timeout,
        )
        self._server = uvicorn.Server(uvicorn_config)
        self._serve_task = asyncio.create_task(self._server.serve())

        while not self._server.started:
            if self._serve_task.done():
                # Bind failure and the like: surface uvicorn's error.
                task, self._serve_task, self._server = self._serve_task, None, None
                task.result()
                msg = f"Server on {self.config.host}:{self.config.port} exited during startup"
                raise RuntimeError(msg)
            await asyncio.sleep(0.05)

        logger.info("Server is running on http://%s:%d", self.config.host, self.config.port)

    async def stop(self) -> None:
        """Close open reload streams and the listening socket."""
        if self._server is None or self._serve_task is None:
            return
        self._channel.close()
        self._server.should_exit = True
        try:
            await self._serve_task
        finally:
            self._server = None
            self._serve_task = None

    async def wait_closed(self) -> None:
        """Block until the server stops (``stop()`` or a signal)."""
        if self._serve_task is not None:
            await self._serve_task

    def run(self) -> None:
        """Start the server and serve until interrupted."""

        async def main() -> None:
            await self.start()
            try:
                await self.wait_closed()
            finally:
                self._channel.close()

        # uvicorn re-raises the captured SIGINT once it has shut down.
        with contextlib.suppress(KeyboardInterrupt):
            asyncio.run(main())

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            registry=self._registry,
            fallback=self.serve_static,
            channel=self._channel,
            sse_heartbeat_interval=self.config.sse_heartbeat_interval,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol for servers that send it."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.prepare()
                    self._loop = asyncio.get_running_loop()
                    self._channel.reopen()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                self._channel.close()
                await send({"type": "lifespan.shutdown.complete"})
                return


def _on_loop(loop: asyncio.AbstractEventLoop) -> bool:
    """True if the calling thread is running *loop*."""
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False
