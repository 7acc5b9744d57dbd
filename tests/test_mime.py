"""Tests for parvus.server.mime: table loading, merging, lookup."""

import json

import pytest

from parvus.errors import ConfigurationError
from parvus.server.mime import (
    MimeType,
    load_mime_types,
    lookup_mime_type,
    merge_mime_types,
)


class TestMergeMimeTypes:
    def test_matching_addition_appends_extensions(self) -> None:
        base = (MimeType(type="text/css", name="CSS", extensions=("css",)),)
        additions = (MimeType(type="text/css", extensions=("scss",)),)

        merged = merge_mime_types(base, additions)

        assert merged == (MimeType(type="text/css", name="CSS", extensions=("css", "scss")),)

    def test_unmatched_addition_is_dropped(self) -> None:
        base = (MimeType(type="text/css", extensions=("css",)),)
        additions = (MimeType(type="text/x-sass", extensions=("sass",)),)

        merged = merge_mime_types(base, additions)

        assert merged == base
        assert all(entry.type != "text/x-sass" for entry in merged)

    def test_untouched_entries_pass_through(self) -> None:
        html = MimeType(type="text/html", extensions=("html",))
        css = MimeType(type="text/css", extensions=("css",))
        merged = merge_mime_types((html, css), (MimeType(type="text/css", extensions=("less",)),))
        assert merged[0] is html
        assert merged[1].extensions == ("css", "less")

    def test_first_matching_addition_wins(self) -> None:
        base = (MimeType(type="text/css", extensions=("css",)),)
        additions = (
            MimeType(type="text/css", extensions=("scss",)),
            MimeType(type="text/css", extensions=("less",)),
        )
        assert merge_mime_types(base, additions)[0].extensions == ("css", "scss")

    def test_no_additions(self) -> None:
        base = (MimeType(type="text/css", extensions=("css",)),)
        assert merge_mime_types(base, ()) == base


class TestLookup:
    def test_first_entry_containing_extension(self) -> None:
        table = (
            MimeType(type="text/plain", extensions=("txt",)),
            MimeType(type="text/markdown", extensions=("md", "txt")),
        )
        assert lookup_mime_type(table, "txt") == "text/plain"
        assert lookup_mime_type(table, "md") == "text/markdown"

    def test_missing_extension(self) -> None:
        assert lookup_mime_type((MimeType(type="text/css", extensions=("css",)),), "png") is None

    def test_lookup_is_case_sensitive(self) -> None:
        assert lookup_mime_type((MimeType(type="text/css", extensions=("css",)),), "CSS") is None


class TestLoadMimeTypes:
    async def test_bundled_table(self) -> None:
        table = await load_mime_types()
        assert lookup_mime_type(table, "html") == "text/html"
        assert lookup_mime_type(table, "css") == "text/css"
        assert lookup_mime_type(table, "png") == "image/png"
        assert all(isinstance(entry.extensions, tuple) for entry in table)

    async def test_custom_file(self, tmp_path) -> None:
        path = tmp_path / "types.json"
        path.write_text(
            json.dumps([{"type": "text/x-custom", "name": "Custom", "extensions": ["cst"]}])
        )
        table = await load_mime_types(path)
        assert table == (MimeType(type="text/x-custom", name="Custom", extensions=("cst",)),)

    async def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            await load_mime_types(tmp_path / "nope.json")

    async def test_malformed_file(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('[{"name": "no type"}]')
        with pytest.raises(ConfigurationError):
            await load_mime_types(path)


class TestMimeTypeFromDict:
    def test_defaults(self) -> None:
        assert MimeType.from_dict({"type": "a/b"}) == MimeType(type="a/b")
