"""muxr CLI — route table inspection.

Entry point registered as ``muxr`` in ``pyproject.toml``::

    [project.scripts]
    muxr = "muxr.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``muxr`` command."""
    parser = argparse.ArgumentParser(
        prog="muxr",
        description="muxr: pattern-matching HTTP request router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- muxr routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from muxr.cli._routes import run_routes

        run_routes(args)
