from __future__ import annotations

import logging
from dataclasses import replace
from functools import cached_property
from typing import Generic, TypeVar

from whollysheet.core.cells import stringer
from whollysheet.core.errors import (
    ConflictError,
    DuplicateKeyError,
    InvalidStateError,
    MissingKeyError,
    PersistFailureError,
    SchemaMismatchError,
    ValidationError,
)
from whollysheet.domain.row import POSITION_FIELD, Row, displayable
from whollysheet.infrastructure.sheets.backend import Cells, TabBackend, TabSnapshot

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Row)

# Header row plus 1-based numbering.
FIRST_DATA_POSITION = 2


def _index_key(value: object) -> str:
    return value if isinstance(value, str) else stringer(value)


def _is_position(value: object) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


class Table(Generic[R]):
    """In-memory mirror of one backend tab.

    Every write is checked against the backend copy of the row before it is
    sent, and the key index is rebuilt in full after every structural change.
    The check is read-then-compare: a write landing between the check and our
    own write goes undetected because the backend has no conditional update.
    """

    def __init__(
        self,
        backend: TabBackend,
        name: str,
        row_type: type[R],
        snapshot: TabSnapshot,
        key_column: str = "id",
    ) -> None:
        self.backend = backend
        self.name = name
        self.row_type = row_type
        self.key_column = key_column
        self.header: list[str] = list(snapshot.header)
        self.index: dict[str, R] = {}

        self._check_header(self.header)
        self.rows: list[R] = self.type_rows(snapshot.rows)
        self._build_index()

    @classmethod
    def load(
        cls,
        backend: TabBackend,
        name: str,
        row_type: type[R],
        key_column: str = "id",
    ) -> Table[R]:
        return cls(backend, name, row_type, TabSnapshot.from_values(backend.read_tab(name)), key_column)

    @property
    def next_row(self) -> int:
        return len(self.rows) + FIRST_DATA_POSITION

    @cached_property
    def display_header(self) -> list[str]:
        return [column for column in self.header if displayable(column)]

    def displayable(self, column: str) -> bool:
        return displayable(column)

    def type_row(self, cells: Cells, position: int = 0) -> R:
        row = self.row_type()
        row.assign(cells)
        row.position = position
        row.owner = self.name
        return row

    def type_rows(self, values: list[Cells]) -> list[R]:
        return [
            self.type_row(cells, position=offset + FIRST_DATA_POSITION)
            for offset, cells in enumerate(values)
        ]

    def to_object(self) -> list[dict[str, object]]:
        return [row.to_object() for row in self.rows]

    def find(self, value: object, column: str | None = None) -> R | None:
        if not value:
            return None
        if column is None and _is_position(value):
            return self._find_by_position(int(value))
        if column is None or column == self.key_column:
            return self.index.get(_index_key(value))
        if column != POSITION_FIELD and column not in self.header:
            raise ValidationError(f"Unknown column {column!r} for tab {self.name}")
        return next((row for row in self.rows if getattr(row, column) == value), None)

    def _find_by_position(self, position: int) -> R | None:
        offset = position - FIRST_DATA_POSITION
        if 0 <= offset < len(self.rows) and self.rows[offset].position == position:
            return self.rows[offset]
        return next((row for row in self.rows if row.position == position), None)

    def save(self, row: R) -> R:
        errors = row.validate()
        if errors:
            details = "; ".join(f"{key}: {message}" for key, message in errors.items())
            raise ValidationError(f"Invalid row for tab {self.name}: {details}")
        if row.position:
            return self.update(row)
        return self.create(row)

    def create(self, row: R) -> R:
        if row.position > 0:
            raise InvalidStateError(
                f'create needs "{row.id}" position to be < 1, not {row.position}'
            )
        row.prepare()
        self._check_key(row)
        if self._key_of(row) in self.index:
            raise DuplicateKeyError(
                f"{self.key_column} {self._key_of(row)!r} already exists in tab {self.name}"
            )

        next_row = self.next_row
        logger.debug("Appending row to %s at %s", self.name, next_row)
        result = self.backend.append_row(self.name, next_row, row.values())
        if result is None or result.position < 1 or not result.cells:
            raise PersistFailureError(
                f"Could not create row for {self._key_of(row)} in tab {self.name}"
            )

        created = self.type_row(result.cells, position=result.position)
        if result.position == next_row:
            self.rows.append(created)
            self._build_index()
            return created

        logger.warning(
            "Tab %s: expected new row at %s but backend used %s; refreshing",
            self.name,
            next_row,
            result.position,
        )
        self.refresh()
        found = self.index.get(self._key_of(created))
        if found is None:
            raise PersistFailureError(
                f"Created row {self._key_of(created)} missing from tab {self.name} after refresh"
            )
        return found

    def update(self, row: R) -> R:
        self._check_key(row)
        if row.position < FIRST_DATA_POSITION:
            raise InvalidStateError(f'"{row.id}" position must be > 1 to update')
        self._check_member(row)

        self.check_outdated(row)
        # Stamp a copy so a failed write leaves the mirrored row untouched.
        staged = replace(row).prepare()
        logger.debug("Replacing row %s in %s", row.position, self.name)
        result = self.backend.replace_row(self.name, row.position, staged.values())
        if result is None or not result.cells:
            raise PersistFailureError(
                f"Could not update row {row.position} in tab {self.name}"
            )

        current = self.rows[row.position - FIRST_DATA_POSITION]
        current.assign(result.cells)
        current.clear_action()
        if row is not current:
            row.assign(result.cells)
            row.clear_action()
        # The key may have changed.
        self._build_index()
        return current

    def delete(self, row: R) -> bool:
        if row.position < FIRST_DATA_POSITION:
            raise InvalidStateError(f'"{row.id}" position must be > 1 to delete')
        self._check_member(row)

        self.check_outdated(row)
        logger.debug("Deleting row %s from %s", row.position, self.name)
        remaining = TabSnapshot.from_values(self.backend.delete_row(self.name, row.position))
        self.rows = self.type_rows(remaining.rows)
        self._build_index()
        return True

    def row_get(self, position: int) -> R | None:
        cells = self.backend.read_row(self.name, position)
        if not cells:
            return None
        return self.type_row(cells, position=position)

    def check_outdated(self, row: R) -> bool:
        """Raise ConflictError when the backend copy of ``row`` has moved on."""
        if row.position < 1:
            return False
        errors: list[str] = []
        try:
            fetched = self.row_get(row.position)
        except ValidationError as exc:
            raise ConflictError(row.position, [f"Row is unreadable: {exc}"]) from exc
        if fetched is None:
            errors.append("Row not found")
        else:
            if fetched.updated != row.updated:
                errors.append(f"updated is {stringer(fetched.updated)!r} not {stringer(row.updated)!r}")
            fetched_key = getattr(fetched, self.key_column)
            row_key = getattr(row, self.key_column)
            if fetched_key != row_key:
                errors.append(f'{self.key_column} is "{fetched_key}" not "{row_key}"')
        if errors:
            raise ConflictError(row.position, errors)
        return False

    def refresh(self) -> list[R]:
        snapshot = TabSnapshot.from_values(self.backend.read_tab(self.name))
        if snapshot.header and snapshot.header != self.header:
            raise SchemaMismatchError(
                f"Tab {self.name} header changed to {','.join(snapshot.header)}"
            )
        self.rows = self.type_rows(snapshot.rows)
        self._build_index()
        return self.rows

    def _check_header(self, header: list[str]) -> None:
        expected = self.row_type.header()
        if header != expected:
            raise SchemaMismatchError(
                f"Expected {self.name} header to be {','.join(expected)} not {','.join(header)}"
            )
        if self.key_column not in header:
            raise SchemaMismatchError(
                f"Key column {self.key_column!r} is not in the {self.name} header"
            )

    def _check_key(self, row: R) -> None:
        if not getattr(row, self.key_column):
            raise MissingKeyError(
                f'"{self.key_column}" must be assigned for row {row.position}'
            )

    def _check_member(self, row: R) -> None:
        if row.owner and row.owner != self.name:
            raise InvalidStateError(f"Row {row.position} belongs to tab {row.owner}, not {self.name}")
        if row.position - FIRST_DATA_POSITION >= len(self.rows):
            raise InvalidStateError(
                f"Row {row.position} is beyond the {len(self.rows)} rows of tab {self.name}"
            )

    def _key_of(self, row: R) -> str:
        return _index_key(getattr(row, self.key_column))

    def _build_index(self) -> None:
        self.index = {self._key_of(row): row for row in self.rows}
