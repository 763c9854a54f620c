"""Roost CLI: inspect a route table from the command line.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost: session lifecycle and route guarding for single-page apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List declared routes and their access")
    routes_parser.add_argument(
        "table",
        help="Import string of a RouteTable or route mapping (e.g. myapp.routes:table)",
    )

    # -- roost check ------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Classify a path against the route table")
    check_parser.add_argument(
        "table",
        help="Import string of a RouteTable or route mapping (e.g. myapp.routes:table)",
    )
    check_parser.add_argument("path", help="Path or URL to classify (e.g. /users/42)")
    check_parser.add_argument(
        "--base-path",
        default="",
        help="App prefix to strip before matching (e.g. /app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from roost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from roost.cli._check import run_check

        run_check(args)
