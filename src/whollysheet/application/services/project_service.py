from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from whollysheet.core.config import AppPaths
from whollysheet.core.errors import ProjectNotInitializedError
from whollysheet.core.files import ensure_directory
from whollysheet.infrastructure.db.sqlite import initialize_schema


@dataclass(slots=True)
class InitResult:
    paths_created: list[Path]
    db_path: Path


class ProjectService:
    def __init__(self, paths: AppPaths) -> None:
        self.paths = paths

    def init_project(self) -> InitResult:
        paths_created: list[Path] = []

        if not self.paths.sheet_dir.exists():
            paths_created.append(self.paths.sheet_dir)
        ensure_directory(self.paths.sheet_dir)

        initialize_schema(self.paths.db_path)

        return InitResult(paths_created=paths_created, db_path=self.paths.db_path)

    def is_initialized(self) -> bool:
        return self.paths.db_path.exists()

    def require_initialized(self) -> None:
        if not self.is_initialized():
            raise ProjectNotInitializedError(
                f"Project is not initialized. Run 'wholly init' first in {self.paths.project_root}"
            )
