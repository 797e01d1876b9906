from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from whollysheet.core.cells import NIL_CELL
from whollysheet.core.time import NO_DATE
from whollysheet.domain.models.judging import Judging
from whollysheet.domain.models.project import Project
from whollysheet.domain.row import Row, RowAction


@dataclass(slots=True)
class Person(Row):
    name: str = ""
    age: int = 0


@dataclass(slots=True)
class Unsupported(Row):
    blob: dict = field(default_factory=dict)


def _project() -> Project:
    return Project(
        position=4,
        id="p-1",
        updated=datetime(2024, 5, 1, 9, 30, 15, 123456, tzinfo=timezone.utc),
        _user_id="u-1",
        date_created=datetime(2024, 4, 30, tzinfo=timezone.utc),
        title="Row store",
        description="",
        contestant=False,
        locked=True,
        technologies=["python", "sqlite"],
    )


def test_header_puts_identity_first_and_skips_computed_fields() -> None:
    assert Person.header() == ["id", "updated", "name", "age"]

    header = Project.header()
    assert header[:2] == ["id", "updated"]
    assert "_user_id" in header
    assert "members" not in header
    assert "position" not in header
    assert "owner" not in header


def test_display_header_hides_internal_columns() -> None:
    display = Project.display_header()
    assert "_user_id" not in display
    assert "_hackathon_id" not in display
    assert "title" in display


def test_unsupported_annotation_is_rejected() -> None:
    with pytest.raises(TypeError):
        Unsupported.header()


def test_prepare_assigns_id_once_and_always_stamps_updated() -> None:
    person = Person(name="Ann")
    assert person.updated == NO_DATE

    person.prepare()
    first_id = person.id
    first_stamp = person.updated
    assert first_id
    assert first_stamp != NO_DATE

    person.prepare()
    assert person.id == first_id
    assert person.updated >= first_stamp


def test_values_follow_header_order() -> None:
    person = Person(id="abc", name="Ann", age=31)
    assert person.values() == ["abc", NIL_CELL, "Ann", "31"]


def test_positional_assign_skips_none_and_extra_cells() -> None:
    person = Person(name="Ann", age=31)
    person.assign(["abc", None, None, "40", "ignored"])
    assert person.id == "abc"
    assert person.name == "Ann"
    assert person.age == 40


def test_named_assign_is_case_sensitive_and_ignores_unknown_keys() -> None:
    person = Person(name="Ann")
    person.assign({"Name": "Bob", "age": "7", "nickname": "x", "position": "3"})
    assert person.name == "Ann"
    assert person.age == 7
    assert person.position == 3


def test_object_round_trip() -> None:
    project = _project()
    restored = Project().from_object(project.to_object())
    assert restored == project


def test_cell_round_trip() -> None:
    project = _project()
    restored = Project().assign(project.values())
    restored.position = project.position
    assert restored.to_object() == project.to_object()

    judging = Judging(id="j-1", _project_id="p-1", execution=7, ambition=5, coolness=9, impact=3)
    judging.calculate_score()
    assert Judging().assign(judging.values()) == judging


def test_from_object_rejects_cells() -> None:
    with pytest.raises(TypeError):
        Person().from_object(["abc"])  # type: ignore[arg-type]


def test_type_cast_uses_declared_column_type() -> None:
    person = Person()
    assert person.type_cast("age", "42") == 42
    assert person.type_cast("name", 42) == "42"
    with pytest.raises(KeyError):
        person.type_cast("nickname", "x")


def test_new_row_defaults_to_create_action() -> None:
    person = Person()
    assert person.action is RowAction.CREATE
    assert person.set_update() is False
    assert person.set_delete() is False
    assert person.action is RowAction.CREATE
    assert person.set_create() is True


def test_persisted_row_action_transitions() -> None:
    person = Person(position=2, id="abc")
    assert person.action is RowAction.NONE
    assert person.set_create() is False
    assert person.action is RowAction.NONE
    assert person.set_update() is True
    assert person.action is RowAction.UPDATE
    assert person.set_delete() is True
    assert person.action is RowAction.DELETE
    person.clear_action()
    assert person.action is RowAction.NONE


def test_validation_hooks() -> None:
    assert Person().validate() is None
    errors = Project(title=" ", project_type="Secret").validate()
    assert errors is not None
    assert set(errors) == {"title", "project_type"}

    judging = Judging(_project_id="p-1", execution=11)
    assert set(judging.validate() or {}) == {"execution"}
