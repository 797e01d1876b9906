from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from whollysheet.application.table import Table
from whollysheet.core.errors import NotFoundError, TabNotFoundError
from whollysheet.domain.models.judging import Judging
from whollysheet.domain.models.project import Project
from whollysheet.domain.row import POSITION_FIELD, Row
from whollysheet.infrastructure.db.tab_repo import TabRepo, TabSummary

logger = logging.getLogger(__name__)

DEFAULT_SHAPES: dict[str, type[Row]] = {
    "projects": Project,
    "judgings": Judging,
}


class SheetService:
    """Registry of tabs and their row types, with key-addressed row operations."""

    def __init__(self, tab_repo: TabRepo, shapes: Mapping[str, type[Row]] | None = None) -> None:
        self.tab_repo = tab_repo
        self.shapes = dict(DEFAULT_SHAPES if shapes is None else shapes)
        self._tables: dict[str, Table[Row]] = {}

    def init_tabs(self) -> list[str]:
        created: list[str] = []
        for name, row_type in self.shapes.items():
            if self.tab_repo.create_tab(name, row_type.header()):
                created.append(name)
        if created:
            logger.info("Created tabs: %s", ", ".join(created))
        return created

    def list_tabs(self) -> list[TabSummary]:
        return self.tab_repo.list_tabs()

    def table(self, name: str) -> Table[Row]:
        row_type = self.shapes.get(name)
        if row_type is None:
            raise TabNotFoundError(f"No row type registered for tab {name}")
        table = self._tables.get(name)
        if table is None:
            table = Table.load(self.tab_repo, name, row_type)
            self._tables[name] = table
        return table

    def list_rows(self, name: str) -> list[Row]:
        return self.table(name).refresh()

    def get_row(self, name: str, key: str) -> Row:
        table = self.table(name)
        row = table.find(key, table.key_column)
        if row is None:
            raise NotFoundError(f"Row {key} not found in tab {name}")
        return row

    def add_row(self, name: str, values: Mapping[str, object]) -> Row:
        table = self.table(name)
        row = table.row_type()
        row.from_object(_without_position(values))
        return table.save(row)

    def update_row(self, name: str, key: str, values: Mapping[str, object]) -> Row:
        table = self.table(name)
        current = self.get_row(name, key)
        # Edit a copy so a rejected save leaves the mirrored row as it was.
        staged = replace(current)
        staged.from_object(_without_position(values))
        staged.set_update()
        return table.save(staged)

    def delete_row(self, name: str, key: str) -> bool:
        table = self.table(name)
        row = self.get_row(name, key)
        row.set_delete()
        return table.delete(row)


def _without_position(values: Mapping[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if key != POSITION_FIELD}
