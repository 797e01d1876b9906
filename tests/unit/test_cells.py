from datetime import datetime, timezone

import pytest

from whollysheet.core.cells import NIL_CELL, FieldType, parse_bool, stringer, type_cast
from whollysheet.core.errors import ValidationError
from whollysheet.core.time import NO_DATE


def test_absent_and_empty_string_serialize_differently() -> None:
    assert stringer(None) == NIL_CELL
    assert stringer("") == ""
    assert stringer(None) != stringer("")


def test_sentinel_casts_to_zero_values() -> None:
    assert type_cast(FieldType.STRING, NIL_CELL) == ""
    assert type_cast(FieldType.NUMBER, NIL_CELL) == 0
    assert type_cast(FieldType.BOOLEAN, NIL_CELL) is False
    assert type_cast(FieldType.DATE, NIL_CELL) == NO_DATE
    assert type_cast(FieldType.LIST, NIL_CELL) == []


def test_number_cast_prefers_integers() -> None:
    assert type_cast(FieldType.NUMBER, "42") == 42
    assert isinstance(type_cast(FieldType.NUMBER, "42"), int)
    assert type_cast(FieldType.NUMBER, "-7") == -7
    assert type_cast(FieldType.NUMBER, "3.25") == 3.25
    assert isinstance(type_cast(FieldType.NUMBER, "007"), float)
    assert type_cast(FieldType.NUMBER, "") == 0
    assert type_cast(FieldType.NUMBER, 1.5) == 1.5


def test_number_cast_rejects_text() -> None:
    with pytest.raises(ValidationError):
        type_cast(FieldType.NUMBER, "twelve")


def test_permissive_bool_parser() -> None:
    assert parse_bool("TRUE") is True
    assert parse_bool("yes") is True
    assert parse_bool("1") is True
    assert parse_bool("off") is False
    assert parse_bool("maybe") is False
    assert parse_bool("maybe", default=True) is True
    assert type_cast(FieldType.BOOLEAN, "true") is True


def test_date_cast_and_serialization() -> None:
    parsed = type_cast(FieldType.DATE, "2024-05-01T12:00:00Z")
    assert parsed == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
    assert stringer(parsed) == "2024-05-01T12:00:00+00:00"
    assert type_cast(FieldType.DATE, "") == NO_DATE
    assert stringer(NO_DATE) == NIL_CELL

    naive = type_cast(FieldType.DATE, datetime(2024, 5, 1))
    assert naive.tzinfo is timezone.utc

    with pytest.raises(ValidationError):
        type_cast(FieldType.DATE, "not a date")


def test_list_cast_splits_comma_text() -> None:
    assert type_cast(FieldType.LIST, "python,sql") == ["python", "sql"]
    assert type_cast(FieldType.LIST, "") == []
    assert type_cast(FieldType.LIST, ("x",)) == ["x"]
    assert stringer(["python", "sql"]) == "python,sql"


def test_stringer_default_forms() -> None:
    assert stringer(True) == "true"
    assert stringer(False) == "false"
    assert stringer(2.5) == "2.5"
    assert stringer(12) == "12"
