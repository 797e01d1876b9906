from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from whollysheet.core.cells import NIL_CELL
from whollysheet.core.errors import TabNotFoundError
from whollysheet.core.time import now_utc_iso
from whollysheet.infrastructure.db.sqlite import get_connection, write_transaction
from whollysheet.infrastructure.sheets.backend import Cells, RowWriteResult

logger = logging.getLogger(__name__)

HEADER_POSITION = 1


@dataclass(slots=True)
class TabSummary:
    name: str
    header: list[str]
    row_count: int
    created_at: str


class TabRepo:
    """SQLite-backed tabs implementing the TabBackend operations."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def create_tab(self, name: str, header: list[str]) -> bool:
        with write_transaction(self.db_path) as conn:
            if self._tab_exists(conn, name):
                return False
            conn.execute(
                "INSERT INTO tabs (name, created_at) VALUES (?, ?)",
                (name, now_utc_iso()),
            )
            conn.execute(
                "INSERT INTO tab_rows (tab_name, position, cells_json) VALUES (?, ?, ?)",
                (name, HEADER_POSITION, json.dumps(list(header))),
            )
        logger.debug("Created tab %s with %d columns", name, len(header))
        return True

    def tab_exists(self, name: str) -> bool:
        with get_connection(self.db_path) as conn:
            return self._tab_exists(conn, name)

    def list_tabs(self) -> list[TabSummary]:
        with get_connection(self.db_path) as conn:
            rows = conn.execute(
                """
                SELECT
                    t.name,
                    t.created_at,
                    h.cells_json AS header_json,
                    (
                        SELECT COUNT(*) FROM tab_rows r
                        WHERE r.tab_name = t.name AND r.position > ?
                    ) AS row_count
                FROM tabs t
                LEFT JOIN tab_rows h ON h.tab_name = t.name AND h.position = ?
                ORDER BY t.name
                """,
                (HEADER_POSITION, HEADER_POSITION),
            ).fetchall()
        return [
            TabSummary(
                name=row["name"],
                header=json.loads(row["header_json"]) if row["header_json"] else [],
                row_count=int(row["row_count"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def read_tab(self, name: str) -> list[Cells]:
        with get_connection(self.db_path) as conn:
            self._require_tab(conn, name)
            return self._read_all(conn, name)

    def read_row(self, name: str, position: int) -> Cells | None:
        with get_connection(self.db_path) as conn:
            self._require_tab(conn, name)
            row = conn.execute(
                "SELECT cells_json FROM tab_rows WHERE tab_name = ? AND position = ?",
                (name, position),
            ).fetchone()
        return json.loads(row["cells_json"]) if row else None

    def append_row(self, name: str, target_position: int, cells: Cells) -> RowWriteResult:
        """Append after the current last row, whatever position was requested."""
        with write_transaction(self.db_path) as conn:
            header = self._header(conn, name)
            last = conn.execute(
                "SELECT COALESCE(MAX(position), 0) AS last FROM tab_rows WHERE tab_name = ?",
                (name,),
            ).fetchone()["last"]
            position = int(last) + 1
            stored = _normalize(cells, len(header))
            conn.execute(
                "INSERT INTO tab_rows (tab_name, position, cells_json) VALUES (?, ?, ?)",
                (name, position, json.dumps(stored)),
            )
        if position != target_position:
            logger.debug("Tab %s: append requested %s, stored at %s", name, target_position, position)
        return RowWriteResult(position=position, cells=stored)

    def replace_row(self, name: str, position: int, cells: Cells) -> RowWriteResult:
        with write_transaction(self.db_path) as conn:
            header = self._header(conn, name)
            self._require_data_row(conn, name, position)
            stored = _normalize(cells, len(header))
            conn.execute(
                "UPDATE tab_rows SET cells_json = ? WHERE tab_name = ? AND position = ?",
                (json.dumps(stored), name, position),
            )
        logger.debug("Tab %s: replaced row %s", name, position)
        return RowWriteResult(position=position, cells=stored)

    def delete_row(self, name: str, position: int) -> list[Cells]:
        with write_transaction(self.db_path) as conn:
            self._require_tab(conn, name)
            self._require_data_row(conn, name, position)
            conn.execute(
                "DELETE FROM tab_rows WHERE tab_name = ? AND position = ?",
                (name, position),
            )
            # Shift later rows up in two steps to keep (tab_name, position) unique.
            conn.execute(
                "UPDATE tab_rows SET position = -position WHERE tab_name = ? AND position > ?",
                (name, position),
            )
            conn.execute(
                "UPDATE tab_rows SET position = -position - 1 WHERE tab_name = ? AND position < 0",
                (name,),
            )
            values = self._read_all(conn, name)
        logger.debug("Tab %s: deleted row %s", name, position)
        return values

    @staticmethod
    def _tab_exists(conn: sqlite3.Connection, name: str) -> bool:
        return conn.execute("SELECT 1 FROM tabs WHERE name = ?", (name,)).fetchone() is not None

    def _require_tab(self, conn: sqlite3.Connection, name: str) -> None:
        if not self._tab_exists(conn, name):
            raise TabNotFoundError(f"Tab not found: {name}")

    def _header(self, conn: sqlite3.Connection, name: str) -> list[str]:
        self._require_tab(conn, name)
        row = conn.execute(
            "SELECT cells_json FROM tab_rows WHERE tab_name = ? AND position = ?",
            (name, HEADER_POSITION),
        ).fetchone()
        return json.loads(row["cells_json"]) if row else []

    @staticmethod
    def _require_data_row(conn: sqlite3.Connection, name: str, position: int) -> None:
        if position <= HEADER_POSITION:
            raise TabNotFoundError(f"Row {position} of tab {name} is not a data row")
        row = conn.execute(
            "SELECT 1 FROM tab_rows WHERE tab_name = ? AND position = ?",
            (name, position),
        ).fetchone()
        if row is None:
            raise TabNotFoundError(f"Row {position} not found in tab {name}")

    @staticmethod
    def _read_all(conn: sqlite3.Connection, name: str) -> list[Cells]:
        rows = conn.execute(
            "SELECT cells_json FROM tab_rows WHERE tab_name = ? ORDER BY position",
            (name,),
        ).fetchall()
        return [json.loads(row["cells_json"]) for row in rows]


def _normalize(cells: Cells, width: int) -> Cells:
    stored = [str(cell) for cell in cells[:width]]
    stored.extend(NIL_CELL for _ in range(width - len(stored)))
    return stored
