from pathlib import Path

import pytest

from whollysheet.application.services.sheet_service import SheetService
from whollysheet.cli.main import main
from whollysheet.infrastructure.db.tab_repo import TabRepo


@pytest.fixture(autouse=True)
def _cli_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WHOLLY_HOME", raising=False)
    monkeypatch.setenv("COLUMNS", "400")


def _run(tmp_path: Path, *args: str) -> int:
    return main(["--project-root", str(tmp_path), *args])


def test_commands_require_init(tmp_path: Path) -> None:
    assert _run(tmp_path, "tabs") == 1
    assert _run(tmp_path, "rows", "list", "--tab", "projects") == 1


def test_row_lifecycle(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "init") == 0
    assert (tmp_path / ".wholly" / "sheets.db").exists()
    assert _run(tmp_path, "tabs") == 0

    assert _run(tmp_path, "rows", "add", "--tab", "projects", "--set", "title=Demo") == 0
    db_path = tmp_path / ".wholly" / "sheets.db"
    row = SheetService(TabRepo(db_path)).list_rows("projects")[0]

    assert _run(tmp_path, "rows", "set", "--tab", "projects", "--key", row.id, "--set", "locked=true") == 0
    assert SheetService(TabRepo(db_path)).get_row("projects", row.id).locked is True

    capsys.readouterr()
    assert _run(tmp_path, "rows", "list", "--tab", "projects") == 0
    assert "Demo" in capsys.readouterr().out

    assert _run(tmp_path, "rows", "delete", "--tab", "projects", "--key", row.id) == 0
    assert SheetService(TabRepo(db_path)).list_rows("projects") == []


def test_errors_exit_nonzero(tmp_path: Path) -> None:
    assert _run(tmp_path, "init") == 0
    assert _run(tmp_path, "rows", "delete", "--tab", "projects", "--key", "missing") == 1
    assert _run(tmp_path, "rows", "add", "--tab", "projects", "--set", "title") == 1
    assert _run(tmp_path, "rows", "add", "--tab", "projects", "--set", "title=") == 1
    assert _run(tmp_path, "rows", "list", "--tab", "hackers") == 1
