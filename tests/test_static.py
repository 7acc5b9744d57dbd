"""Tests for static file resolution through the full ASGI pipeline."""

import logging

import pytest

from parvus import MimeType, ParvusServer, ServerConfig
from parvus.http.request import Request
from parvus.http.response import ServerResponse
from parvus.server.mime import MimeType as _MimeType
from parvus.server.static import NOT_FOUND_PAGE, StaticResolver, normalize_url_path
from parvus.testing import TestClient


@pytest.fixture
def site_dir(tmp_path):
    """Create a temporary site for testing."""
    site = tmp_path / "site"
    site.mkdir()

    (site / "index.html").write_text("<html><body><h1>Home</h1></body></html>")
    (site / "style.css").write_text("body { color: red; }")
    (site / "app.js").write_text("console.log('hello');")
    (site / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (site / "notes.unknownext").write_text("mystery")
    (site / "fragment.html").write_text("<h1>No body here</h1>")

    docs = site / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<html><body><h1>Docs</h1></body></html>")

    return site


def _server(site_dir, **overrides) -> ParvusServer:
    return ParvusServer(ServerConfig(directory=site_dir, **overrides))


class TestStaticFileServing:
    async def test_root_serves_index(self, site_dir) -> None:
        async with TestClient(_server(site_dir, inject_reload=False)) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.content_type == "text/html"
            assert response.text == "<html><body><h1>Home</h1></body></html>"

    async def test_nested_directory_index(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/docs/")
            assert response.status == 200
            assert "<h1>Docs</h1>" in response.text

    async def test_serves_css_file(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/style.css")
            assert response.status == 200
            assert response.content_type == "text/css"
            assert response.text == "body { color: red; }"

    async def test_serves_js_file(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/app.js")
            assert response.content_type == "text/javascript"
            assert "console.log" in response.text

    async def test_serves_binary_file(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/image.png")
            assert response.status == 200
            assert response.content_type == "image/png"
            assert response.body == b"\x89PNG\r\n\x1a\n"
            assert response.header("content-length") == "8"

    async def test_query_string_ignored(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/style.css?v=3#top")
            assert response.status == 200
            assert response.text == "body { color: red; }"


class TestNotFound:
    async def test_missing_file_is_404_html(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/missing.html")
            assert response.status == 404
            assert response.content_type == "text/html"
            assert "Page not found" in response.text

    async def test_404_page_is_not_injected(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/missing.html")
            assert response.text == NOT_FOUND_PAGE

    async def test_directory_without_slash_is_404(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/docs")
            assert response.status == 404

    async def test_missing_not_logged_as_error(self, site_dir, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="parvus.server"):
            async with TestClient(_server(site_dir)) as client:
                await client.get("/missing.html")
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    async def test_dot_segments_stay_inside_root(self, site_dir) -> None:
        (site_dir.parent / "secret.txt").write_text("secret")
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/../secret.txt")
            assert response.status == 404


class TestMimeResolution:
    async def test_unknown_extension_defaults_to_html_with_warning(
        self, site_dir, caplog
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="parvus.server"):
            async with TestClient(_server(site_dir, inject_reload=False)) as client:
                response = await client.get("/notes.unknownext")
        assert response.status == 200
        assert response.content_type == "text/html"
        assert response.text == "mystery"
        assert "Couldn't determine mimetype" in caplog.text

    async def test_additional_mime_types_are_used(self, site_dir) -> None:
        (site_dir / "theme.scss").write_text("$c: red;")
        server = _server(
            site_dir,
            additional_mime_types=(MimeType(type="text/css", extensions=("scss",)),),
        )
        async with TestClient(server) as client:
            response = await client.get("/theme.scss")
            assert response.content_type == "text/css"


class TestInjection:
    async def test_html_gets_reload_client(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/")
            assert '<script type="text/javascript" src="/__parvus/reload.js"></script>' in (
                response.text
            )
            assert "document.location.reload()" in response.text
            assert response.text.endswith("</body></html>")

    async def test_injection_disabled(self, site_dir) -> None:
        async with TestClient(_server(site_dir, inject_reload=False)) as client:
            response = await client.get("/")
            assert "__parvus" not in response.text

    async def test_document_without_body_served_unchanged(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/fragment.html")
            assert response.status == 200
            assert response.text == "<h1>No body here</h1>"

    async def test_css_not_injected(self, site_dir) -> None:
        async with TestClient(_server(site_dir)) as client:
            response = await client.get("/style.css")
            assert "__parvus" not in response.text


class TestSubfolder:
    async def test_subfolder_stripped_from_url_and_directory(self, tmp_path) -> None:
        site = tmp_path / "site"
        site.mkdir()
        (site / "page.html").write_text("<p>page</p>")

        server = ParvusServer(
            ServerConfig(directory=str(site) + "/blog", subfolder="/blog", inject_reload=False)
        )
        async with TestClient(server) as client:
            response = await client.get("/blog/page.html")
            assert response.status == 200
            assert response.text == "<p>page</p>"


class TestInternalError:
    async def test_read_failure_becomes_500(self, site_dir, monkeypatch, caplog) -> None:
        import anyio

        async def broken_read(self):
            raise PermissionError("denied by test")

        monkeypatch.setattr(anyio.Path, "read_bytes", broken_read)

        with caplog.at_level(logging.ERROR, logger="parvus.server"):
            async with TestClient(_server(site_dir)) as client:
                response = await client.get("/style.css")

        assert response.status == 500
        assert response.content_type == "text/html"
        assert "/style.css" in response.text
        assert "denied by test" in response.text
        assert "Failed to load requested file" in caplog.text

    async def test_500_names_the_requested_url(self, site_dir, monkeypatch, caplog) -> None:
        import anyio

        async def broken_read(self):
            raise PermissionError("denied by test")

        monkeypatch.setattr(anyio.Path, "read_bytes", broken_read)

        with caplog.at_level(logging.ERROR, logger="parvus.server"):
            async with TestClient(_server(site_dir)) as client:
                response = await client.get("/docs/?tab=1")

        assert response.status == 500
        assert "Failed to load requested file at /docs/?tab=1" in response.text
        assert "index.html" not in response.text
        assert "Failed to load requested file at /docs/?tab=1" in caplog.text


class TestResolverDirectly:
    async def test_directory_override(self, site_dir, tmp_path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        (other / "index.html").write_text("<p>other</p>")

        async def receive():
            return {"type": "http.request", "body": b""}

        request = Request.from_asgi({"method": "GET", "path": "/"}, receive)
        resolver = StaticResolver(site_dir, mime_types=(_MimeType("text/html", "", ("html",)),))
        response = ServerResponse()
        await resolver(request, response, directory=other, inject=False)
        assert response.finished
        assert response.text == "<p>other</p>"


class TestNormalizeUrlPath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/", "/"),
            ("/a/b.html", "/a/b.html"),
            ("/a/../b.html", "/b.html"),
            ("/../../etc/passwd", "/etc/passwd"),
            ("/docs/./", "/docs/"),
            ("//double", "/double"),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        assert normalize_url_path(raw) == expected
