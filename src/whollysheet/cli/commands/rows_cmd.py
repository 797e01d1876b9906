from __future__ import annotations

import argparse

from rich.panel import Panel
from rich.table import Table

from whollysheet.application.services.project_service import ProjectService
from whollysheet.application.services.sheet_service import SheetService
from whollysheet.cli.context import CLIContext
from whollysheet.core.cells import NIL_CELL, stringer
from whollysheet.core.errors import ValidationError
from whollysheet.domain.row import Row
from whollysheet.infrastructure.db.tab_repo import TabRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("rows", help="Read and write tab rows")
    rows_subparsers = parser.add_subparsers(dest="rows_command", required=True)

    list_parser = rows_subparsers.add_parser("list", help="List rows of a tab")
    list_parser.add_argument("--tab", required=True)
    list_parser.add_argument("--all-columns", action="store_true", help="Include internal columns")
    list_parser.set_defaults(handler=run_list)

    add_parser = rows_subparsers.add_parser("add", help="Append a row")
    add_parser.add_argument("--tab", required=True)
    add_parser.add_argument("--set", action="append", default=[], metavar="COLUMN=VALUE")
    add_parser.set_defaults(handler=run_add)

    set_parser = rows_subparsers.add_parser("set", help="Update columns of a row")
    set_parser.add_argument("--tab", required=True)
    set_parser.add_argument("--key", required=True)
    set_parser.add_argument("--set", action="append", default=[], metavar="COLUMN=VALUE")
    set_parser.set_defaults(handler=run_set)

    delete_parser = rows_subparsers.add_parser("delete", help="Delete a row")
    delete_parser.add_argument("--tab", required=True)
    delete_parser.add_argument("--key", required=True)
    delete_parser.set_defaults(handler=run_delete)


def _service(ctx: CLIContext) -> SheetService:
    ProjectService(ctx.paths).require_initialized()
    return SheetService(TabRepo(ctx.paths.db_path))


def _parse_assignments(pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        column, sep, value = pair.partition("=")
        if not sep or not column.strip():
            raise ValidationError(f"Expected COLUMN=VALUE, got {pair!r}")
        values[column.strip()] = value
    return values


def _cell(value: object) -> str:
    text = stringer(value)
    return "" if text == NIL_CELL else text


def _print_row(ctx: CLIContext, title: str, row: Row) -> None:
    lines = [f"Row: {row.position}"]
    lines.extend(f"{name}: {_cell(getattr(row, name))}" for name in row.header())
    ctx.console.print(Panel.fit("\n".join(lines), title=title))


def run_list(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _service(ctx)
    table = service.table(args.tab)
    rows = service.list_rows(args.tab)
    columns = table.header if args.all_columns else table.display_header

    out = Table(title=f"{args.tab} ({len(rows)})")
    out.add_column("Row", justify="right")
    for column in columns:
        out.add_column(column, overflow="fold")

    for row in rows:
        out.add_row(str(row.position), *[_cell(getattr(row, column)) for column in columns])

    ctx.console.print(out)
    return 0


def run_add(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _service(ctx)
    row = service.add_row(args.tab, _parse_assignments(args.set))
    _print_row(ctx, "Row Created", row)
    return 0


def run_set(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _service(ctx)
    row = service.update_row(args.tab, args.key, _parse_assignments(args.set))
    _print_row(ctx, "Row Updated", row)
    return 0


def run_delete(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _service(ctx)
    service.delete_row(args.tab, args.key)
    ctx.console.print(f"[green]Deleted[/green] {args.key} from {args.tab}")
    return 0
