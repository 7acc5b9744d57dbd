"""Route spec parsing and compilation.

A route spec is one of three shapes:

``*``
    Matches every request target.

``<delim><body><delim><flags>``
    A delimited pattern.  ``<delim>`` is one of ``/ ~ @ ; % # '`` and
    ``<flags>`` is zero or more of ``g i m s u y`` (duplicates collapse,
    first occurrence order kept).  ``/^\\/api/i`` is an example.

anything else
    The whole string is a regular expression body with no flags.

Parsing produces a tagged result (``MatchAll`` or ``PatternRoute``);
compiling turns it into a predicate.  Both happen once, at registration.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from parvus.errors import RouteCompilationError

WILDCARD = "*"
DELIMITERS = frozenset("/~@;%#'")
FLAG_LETTERS = "gimsuy"

# Delimited form: same delimiter at both ends, trailing flag letters only.
_DELIMITED = re.compile(r"^([/~@;%#'])(.*?)\1([gimsuy]*)$", re.DOTALL)

# Flag letter -> Python re flag.  ``g`` and ``u`` have no effect on a
# stateless Unicode predicate; ``y`` is handled as an anchored match.
_RE_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}

Predicate: TypeAlias = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class MatchAll:
    """Parsed ``*`` spec."""


@dataclass(frozen=True, slots=True)
class PatternRoute:
    """Parsed pattern spec: expression body plus deduplicated flags."""

    body: str
    flags: str = ""

    @property
    def sticky(self) -> bool:
        return "y" in self.flags

    @property
    def re_flags(self) -> re.RegexFlag:
        result = re.NOFLAG
        for letter in self.flags:
            result |= _RE_FLAGS.get(letter, re.NOFLAG)
        return result


ParsedRoute: TypeAlias = MatchAll | PatternRoute


def dedupe_flags(flags: str) -> str:
    """Collapse repeated flag letters, keeping first-occurrence order."""
    return "".join(dict.fromkeys(flags))


def parse_route_spec(spec: str) -> ParsedRoute:
    """Parse a route spec string into its tagged form."""
    if spec == WILDCARD:
        return MatchAll()
    match = _DELIMITED.match(spec)
    if match:
        return PatternRoute(body=match.group(2), flags=dedupe_flags(match.group(3)))
    return PatternRoute(body=spec)


def _match_all(target: str) -> bool:
    return True


def compile_route(spec: str) -> Predicate:
    """Compile *spec* into a predicate over request targets.

    Raises:
        RouteCompilationError: If the pattern body is not a valid
            regular expression.
    """
    if not isinstance(spec, str):
        raise RouteCompilationError(repr(spec), "route spec must be a string")

    parsed = parse_route_spec(spec)
    if isinstance(parsed, MatchAll):
        return _match_all

    try:
        pattern = re.compile(parsed.body, parsed.re_flags)
    except re.error as exc:
        raise RouteCompilationError(spec, str(exc)) from exc

    if parsed.sticky:
        return lambda target: pattern.match(target) is not None
    return lambda target: pattern.search(target) is not None
