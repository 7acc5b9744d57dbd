"""``parvus serve``: serve a directory with no custom middleware."""

import argparse
import sys

from parvus.app import ParvusServer
from parvus.config import ServerConfig
from parvus.server.mime import MimeType


def parse_mime_option(value: str) -> MimeType:
    """Parse ``TYPE=EXT[,EXT...]`` into a ``MimeType`` addition.

    Raises:
        ValueError: If the value has no ``=`` or lists no extensions.
    """
    mime_type, sep, extensions = value.partition("=")
    names = tuple(ext.strip().lstrip(".") for ext in extensions.split(",") if ext.strip())
    if not sep or not mime_type.strip() or not names:
        msg = f"Expected TYPE=EXT[,EXT...], got {value!r}"
        raise ValueError(msg)
    return MimeType(type=mime_type.strip(), extensions=names)


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments into a ``ServerConfig``."""
    overrides: dict[str, object] = {}
    if args.directory is not None:
        overrides["directory"] = args.directory
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.subfolder is not None:
        overrides["subfolder"] = args.subfolder
    if args.mime_types is not None:
        overrides["mime_types_path"] = args.mime_types
    if args.mime:
        overrides["additional_mime_types"] = tuple(parse_mime_option(v) for v in args.mime)
    if args.no_inject:
        overrides["inject_reload"] = False
    return ServerConfig(**overrides)


def serve_directory(args: argparse.Namespace) -> None:
    """Build a server from CLI flags and run it until interrupted."""
    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    ParvusServer(config).run()
