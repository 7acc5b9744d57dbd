"""Mutable HTTP response writer.

Middleware receive a ``ServerResponse`` and write into it: set headers,
choose a status, append body chunks, then ``end()`` it.  An ended
response is terminal: the request pipeline sends it and nothing else
may write to it.
"""

from __future__ import annotations

from collections.abc import Mapping

from parvus.errors import ResponseFinishedError


class ServerResponse:
    """A buffered response under construction.

    Usage::

        async def hello(request, response, next):
            response.set_header("Content-Type", "text/html")
            response.write_head(200)
            response.end("<html><body>hello</body></html>")
    """

    __slots__ = ("_chunks", "_finished", "_headers", "status")

    def __init__(self) -> None:
        self.status: int = 200
        # lower-cased name -> (original name, value)
        self._headers: dict[str, tuple[str, str]] = {}
        self._chunks: list[bytes] = []
        self._finished: bool = False

    # -- Headers --

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any previous value for *name*."""
        self._check_open()
        self._headers[name.lower()] = (name, str(value))

    def get_header(self, name: str) -> str | None:
        """Return the value of *name*, or ``None`` if unset."""
        entry = self._headers.get(name.lower())
        return entry[1] if entry else None

    def has_header(self, name: str) -> bool:
        return name.lower() in self._headers

    def remove_header(self, name: str) -> None:
        self._check_open()
        self._headers.pop(name.lower(), None)

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Headers in the order they were first set."""
        return tuple(self._headers.values())

    @property
    def content_type(self) -> str | None:
        return self.get_header("Content-Type")

    def write_head(self, status: int, headers: Mapping[str, str] | None = None) -> None:
        """Set the status code and, optionally, several headers at once."""
        self._check_open()
        self.status = status
        for name, value in (headers or {}).items():
            self.set_header(name, value)

    # -- Body --

    def write(self, chunk: str | bytes) -> None:
        """Append a chunk to the body."""
        self._check_open()
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self._chunks.append(chunk)

    def end(self, chunk: str | bytes | None = None) -> None:
        """Append an optional final chunk and mark the response finished."""
        if chunk is not None:
            self.write(chunk)
        self._check_open()
        self._finished = True

    @property
    def finished(self) -> bool:
        """True once ``end()`` has been called."""
        return self._finished

    @property
    def body(self) -> bytes:
        """Body written so far."""
        return b"".join(self._chunks)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def _check_open(self) -> None:
        if self._finished:
            raise ResponseFinishedError("Response has already been ended")
