from pathlib import Path

import pytest

from whollysheet.core.config import load_paths


def test_default_paths_live_under_project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WHOLLY_HOME", raising=False)
    paths = load_paths(tmp_path)

    assert paths.project_root == tmp_path.resolve()
    assert paths.sheet_dir == tmp_path.resolve() / ".wholly"
    assert paths.db_path == paths.sheet_dir / "sheets.db"


def test_wholly_home_overrides_sheet_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "elsewhere"
    monkeypatch.setenv("WHOLLY_HOME", str(home))
    paths = load_paths(tmp_path / "project")

    assert paths.sheet_dir == home.resolve()
    assert paths.db_path == home.resolve() / "sheets.db"
