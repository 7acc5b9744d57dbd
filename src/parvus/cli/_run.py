"""``parvus run``: run a server configured in Python.

The target module builds a ``ParvusServer`` (middleware included); the
command only overrides where it listens.
"""

import argparse
import dataclasses
import sys

from parvus.cli._resolve import resolve_server


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.server`` and run it until interrupted."""
    try:
        server = resolve_server(args.server)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if overrides:
        server.config = dataclasses.replace(server.config, **overrides)

    server.run()
