from __future__ import annotations

from dataclasses import dataclass

from whollysheet.domain.row import Row

SCORE_FIELDS = ("execution", "ambition", "coolness", "impact")


@dataclass(slots=True)
class Judging(Row):
    _user_id: str = ""
    _project_id: str = ""
    execution: int = 1
    ambition: int = 1
    coolness: int = 1
    impact: int = 1
    score: float = 0
    notes: str = ""

    def calculate_score(self) -> float:
        self.score = float(sum(getattr(self, name) for name in SCORE_FIELDS)) / len(SCORE_FIELDS)
        return self.score

    def validate(self) -> dict[str, str] | None:
        errors: dict[str, str] = {}
        if not self._project_id:
            errors["_project_id"] = "_project_id is required"
        for name in SCORE_FIELDS:
            value = getattr(self, name)
            if not 1 <= value <= 10:
                errors[name] = f"{name} must be between 1 and 10, not {value}"
        return errors or None
