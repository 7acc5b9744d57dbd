"""Startup script showing how a host application wires up a parvus server.

Demonstrates:
- Middleware supplied through ``ServerConfig`` (``/config``)
- A catch-all middleware that adds a header and continues
- A route-scoped middleware that answers on its own (``/mw``)
- Asking browsers to reload a few seconds after start

Run:
    cd examples/startup && python app.py
"""

import asyncio
from pathlib import Path

from parvus import MiddlewareSpec, ParvusServer, ServerConfig

SITE_DIR = Path(__file__).parent / "site"


async def from_config(request, response, next):
    response.set_header("Content-Type", "text/html")
    response.write_head(200)
    response.end(f'<html lang="en"><body>from config. {request.url}</body></html>')


server = ParvusServer(
    ServerConfig(
        directory=SITE_DIR,
        middlewares=(MiddlewareSpec(from_config, "/config"),),
    )
)


async def authorize(request, response, next):
    await asyncio.sleep(0)  # stand-in for real async work
    response.set_header("authorization", "yo")
    next()


async def failing_page(request, response, next):
    response.set_header("Content-Type", "text/html")
    response.write_head(500)
    response.end('<html lang="en"><body><h1>Error</h1>from middleware</body></html>')


server.add_middleware(authorize, "*")
server.add_middleware(failing_page, "/mw")


async def main() -> None:
    await server.start()
    await asyncio.sleep(5)
    server.refresh_browser()
    await server.wait_closed()


if __name__ == "__main__":
    asyncio.run(main())
