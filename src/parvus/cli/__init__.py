"""Parvus CLI: serve a directory or run a configured server.

Entry point registered as ``parvus`` in ``pyproject.toml``::

    [project.scripts]
    parvus = "parvus.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``parvus`` command."""
    parser = argparse.ArgumentParser(
        prog="parvus",
        description="Parvus, a static-site dev server with live reload.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- parvus serve -----------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Serve a directory")
    serve_parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Site directory (default: site)",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--subfolder",
        default=None,
        help="Prefix stripped from the directory and request paths",
    )
    serve_parser.add_argument(
        "--mime",
        action="append",
        default=[],
        metavar="TYPE=EXT[,EXT...]",
        help="Extra extensions for a known MIME type (repeatable)",
    )
    serve_parser.add_argument(
        "--mime-types",
        default=None,
        metavar="FILE",
        help="JSON MIME table to use instead of the bundled one",
    )
    serve_parser.add_argument(
        "--no-inject",
        action="store_true",
        help="Do not inject the live-reload client into HTML pages",
    )

    # -- parvus run -------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Run a server defined in Python")
    run_parser.add_argument(
        "server",
        help="Import string (e.g. mysite:server)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from parvus.cli._serve import serve_directory

        serve_directory(args)
    elif args.command == "run":
        from parvus.cli._run import run_server

        run_server(args)
