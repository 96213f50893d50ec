"""SQLite storage adapter for tasks and settings."""

import logging
import sqlite3
import uuid
from datetime import date
from pathlib import Path

from dayboard.core.ordering import creation_order
from dayboard.core.tasks import Task
from dayboard.exceptions import TaskNotFoundError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    allocated_date TEXT NOT NULL,
    due_date TEXT,
    completed INTEGER NOT NULL DEFAULT 0,
    "order" REAL NOT NULL DEFAULT 0,
    carry_over INTEGER NOT NULL DEFAULT 0,
    google_calendar_id TEXT NOT NULL DEFAULT ''
);
CREATE INDEX IF NOT EXISTS idx_tasks_allocated_date ON tasks(allocated_date);
CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(completed);
CREATE INDEX IF NOT EXISTS idx_tasks_google_calendar_id ON tasks(google_calendar_id);
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL DEFAULT ''
);
"""

# Columns a caller may write through update()
_WRITABLE = {
    "title",
    "description",
    "allocated_date",
    "due_date",
    "completed",
    "order",
    "carry_over",
    "google_calendar_id",
}


def connect(db_path: Path) -> sqlite3.Connection:
    """Open a connection in autocommit mode; transactions are explicit."""
    conn = sqlite3.connect(str(db_path), timeout=30.0, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def ensure_schema(db_path: Path) -> None:
    """Create tables and indexes if missing."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = connect(db_path)
    try:
        conn.executescript(_SCHEMA)
    finally:
        conn.close()


def _to_db(name: str, value):
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    if name == "completed":
        return int(bool(value))
    if name == "order":
        return float(value)
    return value


class SQLiteTaskStore:
    """
    SQLite task store.

    Implements TaskRepository protocol. Each method opens its own connection,
    and each write is a single statement except create(), which reads the
    day's highest order and inserts inside one IMMEDIATE transaction.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path).expanduser()
        ensure_schema(self.db_path)

    def _query(self, sql: str, params: tuple = ()) -> list[Task]:
        conn = connect(self.db_path)
        try:
            return [Task.from_row(row) for row in conn.execute(sql, params)]
        finally:
            conn.close()

    def get(self, task_id: str) -> Task:
        rows = self._query("SELECT * FROM tasks WHERE id = ?", (task_id,))
        if not rows:
            raise TaskNotFoundError(task_id)
        return rows[0]

    def create(
        self,
        title: str,
        allocated_date: date,
        description: str = "",
        due_date: date | None = None,
        completed: bool = False,
        google_calendar_id: str = "",
    ) -> Task:
        """Insert a task above everything else on its day."""
        if not title or not title.strip():
            raise ValueError("title is required")

        task_id = uuid.uuid4().hex
        conn = connect(self.db_path)
        try:
            # IMMEDIATE takes the write lock before reading the max, so two
            # concurrent creators on the same day never get the same order.
            conn.execute("BEGIN IMMEDIATE")
            try:
                (highest,) = conn.execute(
                    'SELECT MAX("order") FROM tasks WHERE allocated_date = ?',
                    (allocated_date.isoformat(),),
                ).fetchone()
                order = creation_order(highest)
                conn.execute(
                    'INSERT INTO tasks (id, title, description, allocated_date, due_date, completed, "order", '
                    "carry_over, google_calendar_id) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)",
                    (
                        task_id,
                        title,
                        description,
                        allocated_date.isoformat(),
                        _to_db("due_date", due_date),
                        int(completed),
                        order,
                        google_calendar_id,
                    ),
                )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise
        finally:
            conn.close()

        logger.debug("Created task %s on %s with order %s", task_id, allocated_date, order)
        return self.get(task_id)

    def update(self, task_id: str, **fields) -> Task:
        unknown = set(fields) - _WRITABLE
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")
        if not fields:
            return self.get(task_id)

        assignments = ", ".join(f'"{name}" = ?' for name in fields)
        params = tuple(_to_db(name, value) for name, value in fields.items())

        conn = connect(self.db_path)
        try:
            cur = conn.execute(f"UPDATE tasks SET {assignments} WHERE id = ?", params + (task_id,))
            if cur.rowcount == 0:
                raise TaskNotFoundError(task_id)
        finally:
            conn.close()
        return self.get(task_id)

    def delete(self, task_id: str) -> None:
        conn = connect(self.db_path)
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            if cur.rowcount == 0:
                raise TaskNotFoundError(task_id)
        finally:
            conn.close()

    def list_for_date(self, allocated_date: date) -> list[Task]:
        return self._query(
            'SELECT * FROM tasks WHERE allocated_date = ? ORDER BY "order" ASC, id ASC',
            (allocated_date.isoformat(),),
        )

    def list_overdue(self, before: date) -> list[Task]:
        return self._query(
            'SELECT * FROM tasks WHERE completed = 0 AND allocated_date < ? '
            'ORDER BY "order" ASC, allocated_date ASC, id ASC',
            (before.isoformat(),),
        )

    def list_owned(self) -> list[Task]:
        return self._query("SELECT * FROM tasks WHERE google_calendar_id != '' ORDER BY allocated_date, id")

    def find_by_calendar_id(self, google_calendar_id: str) -> Task | None:
        if not google_calendar_id:
            return None
        rows = self._query(
            "SELECT * FROM tasks WHERE google_calendar_id = ? ORDER BY id LIMIT 1",
            (google_calendar_id,),
        )
        return rows[0] if rows else None

    def max_order(self, allocated_date: date) -> float | None:
        conn = connect(self.db_path)
        try:
            (highest,) = conn.execute(
                'SELECT MAX("order") FROM tasks WHERE allocated_date = ?',
                (allocated_date.isoformat(),),
            ).fetchone()
        finally:
            conn.close()
        return highest


class SQLiteSettingsStore:
    """
    SQLite key/value settings.

    Implements SettingsStore protocol.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path).expanduser()
        ensure_schema(self.db_path)

    def get(self, key: str, default: str | None = None) -> str | None:
        conn = connect(self.db_path)
        try:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None or row["value"] == "":
            return default
        return row["value"]

    def set(self, key: str, value: str) -> None:
        conn = connect(self.db_path)
        try:
            conn.execute(
                "INSERT INTO settings (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
        finally:
            conn.close()

    def all(self) -> dict[str, str]:
        conn = connect(self.db_path)
        try:
            return {row["key"]: row["value"] for row in conn.execute("SELECT key, value FROM settings ORDER BY key")}
        finally:
            conn.close()
