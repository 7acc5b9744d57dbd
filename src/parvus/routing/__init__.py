"""Route specs: compile scoping strings into path predicates."""

from parvus.routing.matcher import MatchAll, PatternRoute, compile_route, parse_route_spec

__all__ = ["MatchAll", "PatternRoute", "compile_route", "parse_route_spec"]
