from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from whollysheet.cli.commands import init_cmd, rows_cmd, tabs_cmd
from whollysheet.cli.context import CLIContext
from whollysheet.core.config import load_paths
from whollysheet.core.errors import WhollySheetError
from whollysheet.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wholly",
        description="Typed row store over spreadsheet-style tabs",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root to use for .wholly data (default: current working directory)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    init_cmd.register(subparsers)
    tabs_cmd.register(subparsers)
    rows_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    paths = load_paths(args.project_root)
    ctx = CLIContext(paths=paths, console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except WhollySheetError as exc:
        logger.error(str(exc))
        return 1
