from __future__ import annotations

import os
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

N = TypeVar("N", int, float)


@dataclass(frozen=True)
class SqliteSettings:
    connect_timeout_seconds: float = 30.0
    busy_timeout_ms: int = 30_000


def _positive_env(name: str, cast: Callable[[str], N], default: N) -> N:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_sqlite_settings() -> SqliteSettings:
    defaults = SqliteSettings()
    return SqliteSettings(
        connect_timeout_seconds=_positive_env(
            "WHOLLY_SQLITE_CONNECT_TIMEOUT_SECONDS", float, defaults.connect_timeout_seconds
        ),
        busy_timeout_ms=_positive_env("WHOLLY_SQLITE_BUSY_TIMEOUT_MS", int, defaults.busy_timeout_ms),
    )


def _open(db_path: Path) -> sqlite3.Connection:
    settings = load_sqlite_settings()
    conn = sqlite3.connect(db_path, timeout=settings.connect_timeout_seconds)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    conn.execute(f"PRAGMA busy_timeout = {settings.busy_timeout_ms};")
    return conn


@contextmanager
def get_connection(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a configured connection; uncommitted work is rolled back and the connection closed."""
    conn = _open(db_path)
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def write_transaction(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Hold the database write lock for the whole block and commit when it exits cleanly.

    Reads inside the block see a stable tab, so positions computed from them
    stay valid until the commit.
    """
    with get_connection(db_path) as conn:
        conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.commit()


def initialize_schema(db_path: Path, schema_path: Path = SCHEMA_PATH) -> None:
    with get_connection(db_path) as conn:
        conn.executescript(schema_path.read_text(encoding="utf-8"))
        conn.commit()
