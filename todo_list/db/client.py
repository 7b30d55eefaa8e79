"""SQLite database operations for tasks."""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from ..config import get_settings
from ..models import SortKey, TaskPatch, TaskStatus

logger = logging.getLogger(__name__)

DATABASE_PATH = get_settings().database_path

ORDER_BY = {
    SortKey.DATE_ASC: "task_date ASC, task_time ASC, id ASC",
    SortKey.DATE_DESC: "task_date DESC, task_time DESC, id DESC",
    SortKey.STATUS: (
        "CASE status WHEN 'pending' THEN 0 ELSE 1 END, task_date ASC, task_time ASC, id ASC"
    ),
}


def get_connection() -> sqlite3.Connection:
    """Get a database connection with WAL mode enabled."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


@contextmanager
def get_db() -> Iterator[sqlite3.Connection]:
    """Context manager for database connections."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialize the database schema."""
    DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
    with get_db() as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                task_text TEXT NOT NULL,
                task_date TEXT NOT NULL,
                task_time TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending'
                    CHECK (status IN ('pending', 'completed'))
            )
        """)
    logger.info("Task store ready db=%s", DATABASE_PATH)


def create_task(task_text: str, task_date: str, task_time: str) -> int:
    """Insert a pending task and return its new id."""
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO tasks (task_text, task_date, task_time, status)
            VALUES (?, ?, ?, ?)
            """,
            (task_text, task_date, task_time, TaskStatus.PENDING.value),
        )
        task_id = cursor.lastrowid
    if task_id is None:
        raise sqlite3.DatabaseError("SQLite did not return lastrowid for tasks insert")
    logger.debug("Task added id=%s date=%s time=%s", task_id, task_date, task_time)
    return int(task_id)


def get_all_tasks(sort: SortKey = SortKey.DATE_ASC) -> list[dict]:
    """Get all tasks in the order selected by the sort key."""
    with get_db() as conn:
        cursor = conn.execute(f"SELECT * FROM tasks ORDER BY {ORDER_BY[sort]}")
        return [dict(row) for row in cursor.fetchall()]


def get_task_by_id(task_id: int) -> dict | None:
    """Get a task by ID."""
    with get_db() as conn:
        cursor = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def update_task(task_id: int, patch: TaskPatch) -> int:
    """
    Apply the fields present in the patch and return the affected row count.

    Absent fields are bound as NULL and keep their stored value.
    """
    status = patch.status.value if patch.status is not None else None
    with get_db() as conn:
        cursor = conn.execute(
            """
            UPDATE tasks
            SET task_text = COALESCE(?, task_text),
                task_date = COALESCE(?, task_date),
                task_time = COALESCE(?, task_time),
                status = COALESCE(?, status)
            WHERE id = ?
            """,
            (patch.task_text, patch.task_date, patch.task_time, status, task_id),
        )
        affected = cursor.rowcount
    if affected == 0:
        logger.debug("Update matched no task id=%s", task_id)
    else:
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(patch.fields_set()))
    return affected


def delete_task(task_id: int) -> int:
    """Delete a task by ID and return the affected row count."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        affected = cursor.rowcount
    if affected == 0:
        logger.debug("Delete matched no task id=%s", task_id)
    return affected


def count_tasks() -> dict[str, int]:
    """Count tasks per status."""
    counts = {status.value: 0 for status in TaskStatus}
    with get_db() as conn:
        cursor = conn.execute("SELECT status, COUNT(*) AS n FROM tasks GROUP BY status")
        for row in cursor.fetchall():
            counts[row["status"]] = int(row["n"])
    return counts
