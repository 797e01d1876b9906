from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from whollysheet.core.time import NO_DATE
from whollysheet.domain.row import Row, computed

PROJECT_TYPES = ("Open", "Invite Only", "Closed")


@dataclass(slots=True)
class Project(Row):
    _user_id: str = ""
    _hackathon_id: str = ""
    date_created: datetime = NO_DATE
    title: str = ""
    description: str = ""
    project_type: str = "Open"
    contestant: bool = True
    locked: bool = False
    technologies: list[str] = field(default_factory=list)
    more_info: str = ""
    members: list[str] = computed(default_factory=list)

    def validate(self) -> dict[str, str] | None:
        errors: dict[str, str] = {}
        if not self.title.strip():
            errors["title"] = "title is required"
        if self.project_type not in PROJECT_TYPES:
            errors["project_type"] = f"project_type must be one of {', '.join(PROJECT_TYPES)}"
        return errors or None
