from __future__ import annotations

import argparse

from whollysheet.application.services.project_service import ProjectService
from whollysheet.application.services.sheet_service import SheetService
from whollysheet.cli.context import CLIContext
from whollysheet.infrastructure.db.tab_repo import TabRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("init", help="Initialize the workspace database and tabs")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = ProjectService(ctx.paths)
    result = service.init_project()

    if result.paths_created:
        for path in result.paths_created:
            ctx.console.print(f"[green]Created[/green] {path}")
    else:
        ctx.console.print("[yellow]Project paths already existed[/yellow]")

    created_tabs = SheetService(TabRepo(result.db_path)).init_tabs()
    for name in created_tabs:
        ctx.console.print(f"[green]Created tab[/green] {name}")

    ctx.console.print(f"[green]Database ready[/green] {result.db_path}")
    return 0
