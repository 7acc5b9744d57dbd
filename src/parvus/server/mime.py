"""MIME table loading, merging and lookup.

The table is a JSON array of ``{"type", "name", "extensions"}`` records.
A copy ships in ``parvus/data/mime-types.json``; developers extend it
with ``ServerConfig.additional_mime_types``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import anyio

from parvus.errors import ConfigurationError

BUNDLED_MIME_TYPES = Path(__file__).resolve().parent.parent / "data" / "mime-types.json"

DEFAULT_MIME_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class MimeType:
    """A content type and the file extensions that map to it."""

    type: str
    name: str = ""
    extensions: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MimeType:
        """Build from a ``{"type", "name", "extensions"}`` record."""
        return cls(
            type=data["type"],
            name=data.get("name", ""),
            extensions=tuple(data.get("extensions", ())),
        )


async def load_mime_types(path: str | Path | None = None) -> tuple[MimeType, ...]:
    """Read a MIME table file (the bundled one when *path* is ``None``).

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    source = anyio.Path(path if path is not None else BUNDLED_MIME_TYPES)
    try:
        raw = await source.read_text(encoding="utf-8")
        records = json.loads(raw)
        return tuple(MimeType.from_dict(record) for record in records)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        msg = f"Could not load MIME types from {source}: {exc}"
        raise ConfigurationError(msg) from exc


def merge_mime_types(
    base: Iterable[MimeType], additions: Sequence[MimeType]
) -> tuple[MimeType, ...]:
    """Extend *base* entries with the extensions of matching *additions*.

    Each base entry takes the extensions of the first addition with the
    same ``type`` appended after its own.  Additions whose type has no
    base entry are dropped.
    """
    merged: list[MimeType] = []
    for entry in base:
        extra = next((item for item in additions if item.type == entry.type), None)
        if extra is None:
            merged.append(entry)
        else:
            merged.append(replace(entry, extensions=(*entry.extensions, *extra.extensions)))
    return tuple(merged)


def lookup_mime_type(table: Iterable[MimeType], extension: str) -> str | None:
    """Return the type of the first entry listing *extension*, else ``None``."""
    for entry in table:
        if extension in entry.extensions:
            return entry.type
    return None
