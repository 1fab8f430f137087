"""CLI entry point for mdboard."""

import argparse
from datetime import date
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mdboard",
        description="Parse, check and auto-sort markdown kanban boards",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Print columns and tasks")
    show.add_argument("board", type=Path, help="Board markdown file")

    sort = commands.add_parser("sort", help="Move cards according to #gather_ column rules")
    sort.add_argument("board", type=Path, help="Board markdown file")
    sort.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Evaluate date rules as if today were YYYY-MM-DD",
    )
    sort.add_argument(
        "--write",
        action="store_true",
        help="Save the sorted board back to the file",
    )

    check = commands.add_parser("check", help="Report parse, include and rule problems")
    check.add_argument("board", type=Path, help="Board markdown file")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    if getattr(args, "today", None):
        settings_kwargs["today"] = args.today

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    from .cli.commands import run_check, run_show, run_sort

    if args.command == "show":
        exit_code = run_show(args.board, settings)
    elif args.command == "sort":
        exit_code = run_sort(args.board, settings, write=args.write)
    else:
        exit_code = run_check(args.board, settings)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
