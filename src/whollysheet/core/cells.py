from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from whollysheet.core.errors import ValidationError
from whollysheet.core.time import NO_DATE, as_utc, parse_iso, to_iso

# Written for None so that an absent value and "" stay distinguishable in a cell.
NIL_CELL = "\0"

_INT_PATTERN = re.compile(r"^([+-]?[1-9]\d*|0)$")
_TRUE_WORDS = frozenset({"true", "t", "yes", "y", "1", "on"})
_FALSE_WORDS = frozenset({"false", "f", "no", "n", "0", "off"})


class FieldType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    LIST = "list"


def stringer(value: object) -> str:
    """Convert a value to its cell representation."""
    if value is None:
        return NIL_CELL
    if isinstance(value, datetime):
        if value == NO_DATE:
            return NIL_CELL
        return to_iso(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def parse_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return default


def zero_value(field_type: FieldType) -> object:
    if field_type is FieldType.NUMBER:
        return 0
    if field_type is FieldType.BOOLEAN:
        return False
    if field_type is FieldType.DATE:
        return NO_DATE
    if field_type is FieldType.LIST:
        return []
    return ""


def type_cast(field_type: FieldType, value: object) -> object:
    """Convert a raw cell (or already typed value) to the field's type."""
    if value is None or value == NIL_CELL or value == "":
        return zero_value(field_type)

    if field_type is FieldType.STRING:
        return str(value)

    if field_type is FieldType.NUMBER:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (int, float)):
            return value
        text = str(value).strip()
        if not text:
            return 0
        if _INT_PATTERN.match(text):
            return int(text)
        try:
            return float(text)
        except ValueError as exc:
            raise ValidationError(f"Cannot convert {value!r} to a number") from exc

    if field_type is FieldType.BOOLEAN:
        return parse_bool(value, False)

    if field_type is FieldType.DATE:
        if isinstance(value, datetime):
            return as_utc(value)
        try:
            return parse_iso(str(value))
        except ValueError as exc:
            raise ValidationError(f"Cannot convert {value!r} to a date") from exc

    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, Sequence):
        return list(value)
    return str(value).split(",")
