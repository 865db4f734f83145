"""SQLite record store adapter."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

from devlog.core.categories import Category
from devlog.core.entries import DailyEntry
from devlog.core.sprints import Sprint

logger = logging.getLogger(__name__)

SCHEMA = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE COLLATE NOCASE,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sprints (
    id TEXT PRIMARY KEY,
    code TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    start_date TEXT NOT NULL,
    end_date TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS entries (
    id TEXT PRIMARY KEY,
    sprint_id TEXT NOT NULL,
    date TEXT NOT NULL,
    category_id TEXT NOT NULL,
    title TEXT NOT NULL,
    details TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (sprint_id) REFERENCES sprints(id) ON DELETE CASCADE,
    FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE RESTRICT
);

CREATE INDEX IF NOT EXISTS idx_entries_sprint_date
    ON entries (sprint_id, date, category_id, created_at);

CREATE TABLE IF NOT EXISTS counters (
    name TEXT PRIMARY KEY,
    value INTEGER NOT NULL
);
"""


def _category_from_row(row: sqlite3.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _sprint_from_row(row: sqlite3.Row) -> Sprint:
    return Sprint(
        id=row["id"],
        code=row["code"],
        name=row["name"],
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]) if row["end_date"] else None,
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _entry_from_row(row: sqlite3.Row) -> DailyEntry:
    return DailyEntry(
        id=row["id"],
        sprint_id=row["sprint_id"],
        date=date.fromisoformat(row["date"]),
        category_id=row["category_id"],
        title=row["title"],
        details=row["details"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SqliteStore:
    """
    Single-file SQLite storage.

    Implements RecordStore protocol. The connection runs in autocommit mode;
    `transaction()` opens an explicit BEGIN/COMMIT around its block and
    nested calls join the outer transaction.
    """

    def __init__(self, db_path: Path | str, timeout: float = 5.0):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), timeout=timeout, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._depth = 0
        self._conn.executescript(SCHEMA)
        logger.debug(f"Opened database {self.db_path}")

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._conn.execute("BEGIN")
        self._depth = 1
        try:
            yield
        except BaseException:
            self._conn.execute("ROLLBACK")
            logger.debug("Rolled back transaction")
            raise
        else:
            self._conn.execute("COMMIT")
        finally:
            self._depth = 0

    def _write(self, sql: str, params: tuple) -> int:
        return self._conn.execute(sql, params).rowcount

    # Categories
    def create_category(self, category: Category) -> None:
        self._write(
            "INSERT INTO categories (id, name, created_at) VALUES (?, ?, ?)",
            (category.id, category.name, category.created_at.isoformat()),
        )

    def list_categories(self) -> list[Category]:
        rows = self._conn.execute("SELECT id, name, created_at FROM categories").fetchall()
        return [_category_from_row(r) for r in rows]

    def update_category(self, category: Category) -> bool:
        affected = self._write(
            "UPDATE categories SET name = ? WHERE id = ?",
            (category.name, category.id),
        )
        return affected > 0

    def delete_category(self, category_id: str) -> bool:
        return self._write("DELETE FROM categories WHERE id = ?", (category_id,)) > 0

    # Sprints
    def create_sprint(self, sprint: Sprint) -> None:
        self._write(
            "INSERT INTO sprints (id, code, name, start_date, end_date, created_at)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                sprint.id,
                sprint.code,
                sprint.name,
                sprint.start_date.isoformat(),
                sprint.end_date.isoformat() if sprint.end_date else None,
                sprint.created_at.isoformat(),
            ),
        )

    def list_sprints(self) -> list[Sprint]:
        rows = self._conn.execute(
            "SELECT id, code, name, start_date, end_date, created_at FROM sprints"
        ).fetchall()
        return [_sprint_from_row(r) for r in rows]

    def update_sprint(self, sprint: Sprint) -> bool:
        # code and created_at are immutable once assigned
        affected = self._write(
            "UPDATE sprints SET name = ?, start_date = ?, end_date = ? WHERE id = ?",
            (
                sprint.name,
                sprint.start_date.isoformat(),
                sprint.end_date.isoformat() if sprint.end_date else None,
                sprint.id,
            ),
        )
        return affected > 0

    def delete_sprint(self, sprint_id: str) -> bool:
        return self._write("DELETE FROM sprints WHERE id = ?", (sprint_id,)) > 0

    # Entries
    def create_entry(self, entry: DailyEntry) -> None:
        self._write(
            "INSERT INTO entries (id, sprint_id, date, category_id, title, details, created_at)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                entry.id,
                entry.sprint_id,
                entry.date.isoformat(),
                entry.category_id,
                entry.title,
                entry.details,
                entry.created_at.isoformat(),
            ),
        )

    def list_entries(self, sprint_id: str | None = None) -> list[DailyEntry]:
        sql = "SELECT id, sprint_id, date, category_id, title, details, created_at FROM entries"
        if sprint_id is None:
            rows = self._conn.execute(sql).fetchall()
        else:
            rows = self._conn.execute(f"{sql} WHERE sprint_id = ?", (sprint_id,)).fetchall()
        return [_entry_from_row(r) for r in rows]

    def update_entry(self, entry: DailyEntry) -> bool:
        affected = self._write(
            "UPDATE entries SET sprint_id = ?, date = ?, category_id = ?, title = ?, details = ?"
            " WHERE id = ?",
            (
                entry.sprint_id,
                entry.date.isoformat(),
                entry.category_id,
                entry.title,
                entry.details,
                entry.id,
            ),
        )
        return affected > 0

    def delete_entry(self, entry_id: str) -> bool:
        return self._write("DELETE FROM entries WHERE id = ?", (entry_id,)) > 0

    # Counters
    def read_counter(self, name: str) -> int:
        row = self._conn.execute("SELECT value FROM counters WHERE name = ?", (name,)).fetchone()
        return row["value"] if row else 0

    def write_counter(self, name: str, value: int) -> None:
        self._write(
            "INSERT INTO counters (name, value) VALUES (?, ?)"
            " ON CONFLICT(name) DO UPDATE SET value = excluded.value",
            (name, value),
        )
