from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

Cells = list[str]


@dataclass(slots=True)
class TabSnapshot:
    header: list[str]
    rows: list[Cells] = field(default_factory=list)

    @classmethod
    def from_values(cls, values: list[Cells]) -> TabSnapshot:
        """Split raw tab values (header row first) into header and data rows."""
        if not values:
            return cls(header=[], rows=[])
        return cls(header=list(values[0]), rows=[list(row) for row in values[1:]])


@dataclass(slots=True)
class RowWriteResult:
    position: int
    cells: Cells


class TabBackend(Protocol):
    """Per-tab row operations of a remote tabular store.

    Positions are 1-based and count the header row, so the first data row
    of a tab is position 2.
    """

    def read_tab(self, name: str) -> list[Cells]:
        """All rows of the tab, header row first."""
        ...

    def read_row(self, name: str, position: int) -> Cells | None:
        ...

    def append_row(self, name: str, target_position: int, cells: Cells) -> RowWriteResult:
        """Append a row. The returned position is authoritative."""
        ...

    def replace_row(self, name: str, position: int, cells: Cells) -> RowWriteResult:
        ...

    def delete_row(self, name: str, position: int) -> list[Cells]:
        """Delete a row and return the remaining tab, header row first."""
        ...
