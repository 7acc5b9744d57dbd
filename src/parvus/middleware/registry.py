"""Ordered middleware registry.

Insertion order is evaluation order.  Entries are never removed or
reordered; the list is meant to be complete before traffic begins.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from parvus.routing.matcher import Predicate, compile_route


@dataclass(frozen=True, slots=True)
class MiddlewareEntry:
    """A compiled route predicate paired with its handler."""

    route: str
    matches: Predicate
    handler: Callable[..., Any]


class MiddlewareRegistry:
    """Append-only list of ``MiddlewareEntry`` objects."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[MiddlewareEntry] = []

    def register(self, handler: Callable[..., Any], route: str = "*") -> None:
        """Compile *route* and append *handler*.

        Raises:
            RouteCompilationError: If *route* is not a valid pattern.
        """
        matches = compile_route(route)
        self._entries.append(MiddlewareEntry(route=route, matches=matches, handler=handler))

    def all_matching(self, target: str) -> list[Callable[..., Any]]:
        """Handlers whose route accepts *target*, in registration order."""
        return [entry.handler for entry in self._entries if entry.matches(target)]

    def __iter__(self) -> Iterator[MiddlewareEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
