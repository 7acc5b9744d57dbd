"""Tests for parvus.routing.matcher: route spec parsing and compilation."""

import pytest

from parvus.errors import RouteCompilationError
from parvus.routing.matcher import (
    MatchAll,
    PatternRoute,
    compile_route,
    dedupe_flags,
    parse_route_spec,
)


class TestParseRouteSpec:
    def test_wildcard(self) -> None:
        assert parse_route_spec("*") == MatchAll()

    def test_plain_pattern(self) -> None:
        assert parse_route_spec("/config") == PatternRoute(body="/config")

    def test_slash_delimited_with_flags(self) -> None:
        assert parse_route_spec("/^abc$/i") == PatternRoute(body="^abc$", flags="i")

    @pytest.mark.parametrize("delim", ["/", "~", "@", ";", "%", "#", "'"])
    def test_every_delimiter(self, delim: str) -> None:
        parsed = parse_route_spec(f"{delim}api{delim}m")
        assert parsed == PatternRoute(body="api", flags="m")

    def test_duplicate_flags_collapse(self) -> None:
        assert parse_route_spec("/x/gig") == PatternRoute(body="x", flags="gi")

    def test_unknown_flag_makes_plain_pattern(self) -> None:
        """A trailing letter outside gimsuy means the string is not delimited."""
        assert parse_route_spec("/x/q") == PatternRoute(body="/x/q")

    def test_mismatched_delimiters_are_plain(self) -> None:
        assert parse_route_spec("~abc/") == PatternRoute(body="~abc/")


class TestDedupeFlags:
    def test_preserves_first_occurrence_order(self) -> None:
        assert dedupe_flags("mimsm") == "mis"

    def test_empty(self) -> None:
        assert dedupe_flags("") == ""


class TestCompileRoute:
    def test_wildcard_matches_everything(self) -> None:
        matches = compile_route("*")
        assert matches("/")
        assert matches("/a/b/c.html?q=1")
        assert matches("")

    def test_plain_pattern_searches(self) -> None:
        matches = compile_route("/config")
        assert matches("/config")
        assert matches("/config?debug=1")
        assert matches("/nested/config")
        assert not matches("/conf")

    def test_case_insensitive_flag(self) -> None:
        matches = compile_route("/^\\/api/i")
        assert matches("/API/users")
        assert not matches("/v1/api")

    def test_duplicate_flags_behave_like_deduplicated(self) -> None:
        with_dupes = compile_route("/^\\/api/gig")
        deduped = compile_route("/^\\/api/gi")
        for target in ("/API", "/api/x", "/other"):
            assert with_dupes(target) == deduped(target)

    def test_global_flag_is_stateless(self) -> None:
        matches = compile_route("/page/g")
        assert matches("/page")
        assert matches("/page")

    def test_sticky_flag_anchors_at_start(self) -> None:
        matches = compile_route("#/docs#y")
        assert matches("/docs/intro")
        assert not matches("/en/docs")

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(RouteCompilationError) as info:
            compile_route("/([a-z/")
        assert info.value.spec == "/([a-z/"

    def test_invalid_delimited_body_raises(self) -> None:
        with pytest.raises(RouteCompilationError):
            compile_route("/(unclosed/i")

    def test_non_string_spec_raises(self) -> None:
        with pytest.raises(RouteCompilationError):
            compile_route(None)  # type: ignore[arg-type]
