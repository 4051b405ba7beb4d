#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command line entry point for ghlens.

Usage:
    ghlens watch                        # TUI, starting on the search screen
    ghlens watch octocat                # TUI, straight to octocat's dashboard
    ghlens watch octocat --summary      # One-shot text summary (no TUI)
    ghlens watch octocat --summary --kind gists --pages 3
"""

import argparse
import asyncio
import sys

from ghlens._version import __version__
from ghlens.filtering import KIND_SPECS
from ghlens.models import ALL_CATEGORIES, EntityKind


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghlens",
        description="ghlens - browse a GitHub user's public activity",
    )
    parser.add_argument(
        "--version", action="version", version=f"ghlens {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    watch_parser = subparsers.add_parser("watch", help="Browse a user's activity")
    watch_parser.add_argument("username", nargs="?", help="GitHub username to open")
    watch_parser.add_argument(
        "--summary", action="store_true", help="One-shot text summary (no TUI)"
    )
    watch_parser.add_argument(
        "--kind", "-k",
        choices=[kind.value for kind in EntityKind],
        default=EntityKind.ACTIVITY.value,
        help="Collection to summarize",
    )
    watch_parser.add_argument("--search", "-s", default="", help="Search text filter")
    watch_parser.add_argument(
        "--category", "-c", default=ALL_CATEGORIES, help="Event type filter"
    )
    watch_parser.add_argument(
        "--pages", "-n", type=int, default=1, help="Number of pages to load for summary"
    )
    return parser


def _run_summary(args: argparse.Namespace) -> int:
    from ghlens.source import GitHubSource, NotFoundError, SourceError
    from ghlens.controller import describe_error
    from ghlens.debug_logger import get_logger
    from ghlens.summary import collect_summary

    async def run():
        async with GitHubSource() as source:
            return await collect_summary(
                source,
                args.username,
                kind=EntityKind(args.kind),
                search=args.search,
                category=args.category,
                pages=args.pages,
            )

    try:
        summary = asyncio.run(run())
    except NotFoundError:
        print(f"Error: user '{args.username}' not found", file=sys.stderr)
        return 1
    except SourceError as e:
        get_logger().error("summary", str(e))
        print(f"Error: {describe_error(e)}", file=sys.stderr)
        return 1
    print(summary.text)
    return 1 if summary.failed else 0


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to watch (TUI) when no subcommand given
    if not args.command:
        args.command = "watch"
        args.username = None
        args.summary = False

    if args.command != "watch":
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    if args.summary:
        if not args.username:
            print("Error: --summary requires a username", file=sys.stderr)
            return 2
        if args.pages < 1:
            print("Error: --pages must be at least 1", file=sys.stderr)
            return 2
        categories = KIND_SPECS[EntityKind(args.kind)].categories
        if args.category != ALL_CATEGORIES and args.category not in categories:
            allowed = ", ".join((ALL_CATEGORIES,) + tuple(categories))
            print(
                f"Error: unknown category '{args.category}' for {args.kind} (choose from: {allowed})",
                file=sys.stderr,
            )
            return 2
        return _run_summary(args)

    try:
        from ghlens.tui.app import run_app
    except ImportError as e:
        print(f"Error: TUI requires textual package: {e}", file=sys.stderr)
        print("Install with: pip install textual", file=sys.stderr)
        return 1
    run_app(username=args.username)
    return 0


if __name__ == "__main__":
    sys.exit(main())
