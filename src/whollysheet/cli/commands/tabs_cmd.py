from __future__ import annotations

import argparse

from rich.table import Table

from whollysheet.application.services.project_service import ProjectService
from whollysheet.application.services.sheet_service import SheetService
from whollysheet.cli.context import CLIContext
from whollysheet.infrastructure.db.tab_repo import TabRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("tabs", help="List tabs")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    ProjectService(ctx.paths).require_initialized()
    tabs = SheetService(TabRepo(ctx.paths.db_path)).list_tabs()

    out = Table(title=f"Tabs ({len(tabs)})")
    out.add_column("Name")
    out.add_column("Columns", overflow="fold")
    out.add_column("Rows", justify="right")
    out.add_column("Created")

    for tab in tabs:
        out.add_row(tab.name, ", ".join(tab.header), str(tab.row_count), tab.created_at)

    ctx.console.print(out)
    return 0
