"""Live-reload markup injection.

Parses an HTML document just far enough to find its ``<body>`` element,
then splices in two scripts right before ``</body>``: the reload client
library and an inline script that subscribes to the reload channel.
Everything else in the document is left byte-for-byte as it was.
"""

from html.parser import HTMLParser

from parvus.errors import InjectionError
from parvus.realtime.client import CLIENT_PATH, EVENTS_PATH, REFRESH_EVENT

RELOAD_MARKUP = (
    f'<script type="text/javascript" src="{CLIENT_PATH}"></script>'
    '<script type="text/javascript">'
    f"const channel = parvus.connect('{EVENTS_PATH}');"
    f"channel.addEventListener('{REFRESH_EVENT}', () => document.location.reload());"
    "</script>"
)


class _BodyLocator(HTMLParser):
    """Records where the body element opens and where it first closes."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.body_opened = False
        self.body_close: tuple[int, int] | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "body":
            self.body_opened = True

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "body":
            self.body_opened = True

    def handle_endtag(self, tag: str) -> None:
        if tag == "body" and self.body_opened and self.body_close is None:
            self.body_close = self.getpos()


def _offset(text: str, position: tuple[int, int]) -> int:
    """Convert a ``(line, column)`` parser position into a string offset."""
    line, column = position
    lines = text.split("\n")
    return sum(len(chunk) + 1 for chunk in lines[: line - 1]) + column


def inject_reload_client(html: str | bytes, markup: str = RELOAD_MARKUP) -> str:
    """Return *html* with *markup* inserted at the end of its body.

    Raises:
        InjectionError: If the document cannot be decoded or parsed, or
            has no body element.
    """
    if isinstance(html, bytes):
        try:
            html = html.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InjectionError(f"Document is not valid UTF-8: {exc}") from exc

    locator = _BodyLocator()
    try:
        locator.feed(html)
        locator.close()
    except Exception as exc:
        raise InjectionError(f"Could not parse document: {exc}") from exc

    if not locator.body_opened:
        raise InjectionError("Document has no body element")

    if locator.body_close is None:
        return html + markup

    offset = _offset(html, locator.body_close)
    return html[:offset] + markup + html[offset:]
