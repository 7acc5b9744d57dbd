"""Static file resolution.

Maps a request path onto a file under the site directory, picks its
content type from the MIME table, injects the live-reload client into
HTML, and writes the result into the response.  Missing files get a
quiet 404 page; anything unexpected becomes a 500 page naming the URL.
"""

import html
import logging
import posixpath
from collections.abc import Sequence
from pathlib import Path

import anyio

from parvus.errors import InjectionError, InternalServingError
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.server.inject import inject_reload_client
from parvus.server.mime import DEFAULT_MIME_TYPE, MimeType, lookup_mime_type
from parvus.server.terminal_errors import log_error

logger = logging.getLogger("parvus.server")

INDEX_FILE = "index.html"

NOT_FOUND_PAGE = """
<html lang="en">
  <body style="background-color: #171717;color:white;">
    <h3>Page not found</h3>
  </body>
</html>"""


def error_page(url: str, exc: BaseException) -> str:
    """The 500 page: names the requested URL and the failure."""
    return (
        '<html lang="en"><body style="background-color: #171717;color:white;">'
        "<h1>Error</h1>"
        f"<p>Failed to load requested file at {html.escape(url)}</p>"
        f"<p><pre>{html.escape(str(exc))}</pre></p>"
        "</body></html>"
    )


def normalize_url_path(path: str) -> str:
    """Collapse ``.``/``..`` segments the way a URL parser does.

    Leading ``..`` segments cannot climb above ``/``.  A trailing slash
    is kept so directory requests still resolve to their index file.
    """
    trailing = path.endswith("/")
    normalized = posixpath.normpath("/" + path.lstrip("/"))
    if trailing and not normalized.endswith("/"):
        normalized += "/"
    return normalized


class StaticResolver:
    """Terminal request handler that serves files from a directory.

    Usage::

        resolver = StaticResolver("site", mime_types=table)
        await resolver(request, response)
    """

    __slots__ = ("_directory", "_inject", "_mime_types", "_subfolder")

    def __init__(
        self,
        directory: str | Path,
        *,
        mime_types: Sequence[MimeType],
        subfolder: str | None = None,
        inject: bool = True,
    ) -> None:
        self._directory = str(directory)
        self._mime_types = tuple(mime_types)
        self._subfolder = subfolder
        self._inject = inject

    @property
    def mime_types(self) -> tuple[MimeType, ...]:
        return self._mime_types

    async def __call__(
        self,
        request: Request,
        response: ServerResponse,
        *,
        directory: str | Path | None = None,
        inject: bool | None = None,
    ) -> None:
        """Serve the file for *request* into *response*.

        *directory* and *inject* override the resolver's defaults for
        this one call, letting a middleware serve from another root.
        """
        url = normalize_url_path(request.path)
        if url.endswith("/"):
            url += INDEX_FILE

        root = str(directory) if directory is not None else self._directory
        if self._subfolder:
            root = root.replace(self._subfolder, "", 1)
            url = url.replace(self._subfolder, "", 1)

        should_inject = self._inject if inject is None else inject

        try:
            file_path = anyio.Path(root) / url.lstrip("/")

            if not await file_path.is_file():
                logger.debug("404 %s -> %s", request.url, file_path)
                response.set_header("Content-Type", "text/html")
                response.write_head(404)
                response.end(NOT_FOUND_PAGE)
                return

            body: bytes | str = await file_path.read_bytes()

            extension = posixpath.splitext(url)[1].removeprefix(".")
            mime_type = lookup_mime_type(self._mime_types, extension)
            if mime_type is None:
                mime_type = DEFAULT_MIME_TYPE
                logger.warning(
                    "Couldn't determine mimetype for %r. Defaulting to html",
                    posixpath.splitext(url)[1],
                )

            if mime_type == "text/html" and should_inject:
                try:
                    body = inject_reload_client(body)
                except InjectionError as exc:
                    logger.debug("Serving %s without live reload: %s", url, exc)

            response.set_header("Content-Type", mime_type)
            response.write_head(200)
            response.end(body)
        except Exception as exc:
            failure = InternalServingError(request.url)
            failure.__cause__ = exc
            log_error(failure, request)
            if response.finished:
                return
            response.set_header("Content-Type", "text/html")
            response.write_head(500)
            response.end(error_page(request.url, exc))
