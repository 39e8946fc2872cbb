# src/habitui/tasks/completed_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..errors import IOFailure
from .difficulty import decode, encode
from .task_models import SubTask, Task, TaskId

logger = logging.getLogger(__name__)


class CompletedTaskStore:
    """
    SQLite store of completed todos.

    Rows are keyed by the Habitica task id and never change once written:
    re-inserting a known id is a no-op, so replaying a sync is safe.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "habitui.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure(f"cannot create {self._db_path.parent}: {e}") from e
        self._ensure_schema()
        logger.info("CompletedTaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise IOFailure(f"cannot open {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise IOFailure(f"database error on {self._db_path}: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS completed_task (
                    id TEXT PRIMARY KEY,
                    text TEXT NOT NULL,
                    task_type TEXT NOT NULL DEFAULT 'todo',
                    difficulty REAL NOT NULL,
                    notes TEXT,
                    date TEXT,
                    completed_at TEXT,
                    checklist TEXT
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(completed_task)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE completed_task ADD COLUMN {name} {decl}")
                logger.info("CompletedTaskStore migration: added column %s", name)

            add_col("task_type", "TEXT NOT NULL DEFAULT 'todo'")
            add_col("notes", "TEXT")
            add_col("date", "TEXT")
            add_col("completed_at", "TEXT")
            add_col("checklist", "TEXT")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_completed_task_completed_at "
                "ON completed_task(completed_at)"
            )
            conn.commit()

    @staticmethod
    def _checklist_to_str(checklist: list[SubTask] | None) -> str | None:
        if checklist is None:
            return None
        return json.dumps(
            [{"text": s.text, "completed": s.completed} for s in checklist],
            ensure_ascii=False,
        )

    @staticmethod
    def _str_to_checklist(s: str | None) -> list[SubTask] | None:
        if s is None:
            return None
        try:
            val = json.loads(s)
        except json.JSONDecodeError:
            logger.warning("Unreadable checklist column; treating as empty.")
            return None
        if not isinstance(val, list):
            return None
        return [
            SubTask(text=str(i.get("text", "")), completed=bool(i.get("completed", False)))
            for i in val
            if isinstance(i, dict)
        ]

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=TaskId(str(row["id"])),
            text=str(row["text"] or ""),
            task_type=str(row["task_type"] or "todo"),
            difficulty=decode(float(row["difficulty"])),
            notes=row["notes"],
            due_date=date.fromisoformat(row["date"]) if row["date"] else None,
            completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
            checklist=self._str_to_checklist(row["checklist"]),
        )

    def _task_to_params(self, task: Task) -> tuple[Any, ...]:
        return (
            str(task.id),
            task.text,
            task.task_type,
            encode(task.difficulty),
            task.notes,
            task.due_date.isoformat() if task.due_date else None,
            task.completed_at.isoformat() if task.completed_at else None,
            self._checklist_to_str(task.checklist),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._connect() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM completed_task").fetchone()
            return int(n)

    def upsert_many(self, tasks: list[Task]) -> int:
        """Insert tasks, ignoring ids already stored. Returns how many rows were new."""
        inserted = 0
        with self._connect() as conn:
            cur = conn.cursor()
            for task in tasks:
                if not task.id:
                    logger.warning("Skipping completed task without id text=%r", task.text)
                    continue
                cur.execute(
                    """
                    INSERT INTO completed_task(
                        id, text, task_type, difficulty,
                        notes, date, completed_at, checklist
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO NOTHING
                    """,
                    self._task_to_params(task),
                )
                inserted += cur.rowcount
            conn.commit()
        logger.debug("Completed upsert: offered=%d inserted=%d", len(tasks), inserted)
        return inserted

    def list_completed(self) -> list[Task]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM completed_task
                ORDER BY COALESCE(completed_at, '') ASC, id ASC
                """
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
