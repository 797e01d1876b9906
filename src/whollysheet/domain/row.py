from __future__ import annotations

import functools
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum

from whollysheet.core.cells import FieldType, stringer, type_cast
from whollysheet.core.ids import new_uuid
from whollysheet.core.time import NO_DATE, now_utc

COMPUTED = "computed"
POSITION_FIELD = "position"


class RowAction(Enum):
    NONE = "none"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Column:
    name: str
    type: FieldType


def computed(**kwargs: typing.Any) -> typing.Any:
    """Declare a field that lives on the row but is never written to the tab."""
    kwargs.setdefault("compare", False)
    kwargs.setdefault("repr", False)
    return field(metadata={COMPUTED: True}, **kwargs)


def displayable(column: str) -> bool:
    """Internal (``_``) and computed (``$``) columns are hidden from display."""
    return not column.startswith(("_", "$"))


def _field_type(name: str, hint: typing.Any) -> FieldType:
    origin = typing.get_origin(hint) or hint
    if origin is bool:
        return FieldType.BOOLEAN
    if origin in (int, float):
        return FieldType.NUMBER
    if origin is str:
        return FieldType.STRING
    if origin is datetime:
        return FieldType.DATE
    if origin in (list, tuple):
        return FieldType.LIST
    raise TypeError(f"Unsupported type for column {name!r}: {hint!r}")


@functools.cache
def _columns(row_type: type[Row]) -> tuple[Column, ...]:
    hints = typing.get_type_hints(row_type)
    columns: list[Column] = []
    for f in fields(row_type):
        if f.name == POSITION_FIELD or f.metadata.get(COMPUTED):
            continue
        columns.append(Column(name=f.name, type=_field_type(f.name, hints[f.name])))
    return tuple(columns)


@functools.cache
def _column_types(row_type: type[Row]) -> dict[str, FieldType]:
    return {column.name: column.type for column in _columns(row_type)}


@dataclass(slots=True)
class Row:
    """One typed record of a tab.

    Subclasses add dataclass fields, each with a default. The field
    annotation decides how cells are cast: ``str``, ``int``/``float``,
    ``bool``, ``datetime`` or ``list[...]``.
    """

    position: int = 0
    id: str = ""
    updated: datetime = NO_DATE
    owner: str = computed(default="", init=False)
    _action: RowAction = computed(default=RowAction.NONE, init=False)

    @classmethod
    def columns(cls) -> tuple[Column, ...]:
        return _columns(cls)

    @classmethod
    def header(cls) -> list[str]:
        return [column.name for column in _columns(cls)]

    @classmethod
    def display_header(cls) -> list[str]:
        return [name for name in cls.header() if displayable(name)]

    @property
    def action(self) -> RowAction:
        if self._action is RowAction.NONE and self.position == 0:
            return RowAction.CREATE
        return self._action

    def set_create(self) -> bool:
        if self.position:
            return False
        self._action = RowAction.CREATE
        return True

    def set_update(self) -> bool:
        if not self.position:
            return False
        self._action = RowAction.UPDATE
        return True

    def set_delete(self) -> bool:
        if not self.position:
            return False
        self._action = RowAction.DELETE
        return True

    def clear_action(self) -> None:
        self._action = RowAction.NONE

    def prepare(self) -> Row:
        if not self.id:
            self.id = new_uuid()
        self.updated = now_utc()
        return self

    def values(self) -> list[str]:
        return [stringer(getattr(self, name)) for name in self.header()]

    def type_cast(self, key: str, value: object) -> object:
        if key == POSITION_FIELD:
            return int(type_cast(FieldType.NUMBER, value))
        field_type = _column_types(type(self)).get(key)
        if field_type is None:
            raise KeyError(key)
        return type_cast(field_type, value)

    def assign(self, source: Mapping[str, object] | Sequence[object] | None) -> Row:
        """Hydrate by name from a mapping, or by header position from a sequence."""
        if source is None:
            return self
        if isinstance(source, Mapping):
            types = _column_types(type(self))
            for key, value in source.items():
                if key == POSITION_FIELD:
                    self.position = self.type_cast(key, value)
                elif key in types:
                    setattr(self, key, type_cast(types[key], value))
            return self
        if isinstance(source, (str, bytes)):
            raise TypeError("Row cells must be a sequence, not a string")
        for column, value in zip(self.columns(), source):
            if value is None:
                continue
            setattr(self, column.name, type_cast(column.type, value))
        return self

    def validate(self) -> dict[str, str] | None:
        return None

    def to_object(self) -> dict[str, object]:
        result: dict[str, object] = {POSITION_FIELD: self.position}
        for name in self.header():
            value = getattr(self, name)
            result[name] = list(value) if isinstance(value, list) else value
        return result

    def from_object(self, obj: Mapping[str, object]) -> Row:
        if not isinstance(obj, Mapping):
            raise TypeError(f"from_object expects a mapping, not {type(obj).__name__}")
        return self.assign(obj)
