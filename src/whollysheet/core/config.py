from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppPaths:
    project_root: Path
    sheet_dir: Path
    db_path: Path


DEFAULT_SHEET_DIRNAME = ".wholly"


def load_paths(project_root: Path | None = None) -> AppPaths:
    root = (project_root or Path.cwd()).expanduser().resolve()

    wholly_home_raw = os.getenv("WHOLLY_HOME")
    if wholly_home_raw:
        sheet_dir = Path(wholly_home_raw).expanduser().resolve()
    else:
        sheet_dir = root / DEFAULT_SHEET_DIRNAME

    return AppPaths(
        project_root=root,
        sheet_dir=sheet_dir,
        db_path=sheet_dir / "sheets.db",
    )
