# tests/test_completed_store.py

from __future__ import annotations

import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path

from habitui.tasks.completed_store import CompletedTaskStore
from habitui.tasks.difficulty import Difficulty
from habitui.tasks.task_models import SubTask, Task, TaskId


def _done(task_id: str, text: str, hour: int) -> Task:
    return Task(
        id=TaskId(task_id),
        text=text,
        difficulty=Difficulty.MEDIUM,
        notes="n",
        due_date=date(2024, 3, 1),
        completed_at=datetime(2024, 3, 2, hour, 0, tzinfo=timezone.utc),
        checklist=[SubTask("step", True)],
    )


def test_upsert_same_id_twice_keeps_one_row(tmp_path: Path) -> None:
    store = CompletedTaskStore(tmp_path / "db.sqlite3")

    assert store.upsert_many([_done("x1", "first", 9)]) == 1
    assert store.upsert_many([_done("x1", "changed text", 10)]) == 0

    assert store.count_tasks() == 1
    (only,) = store.list_completed()
    assert only.text == "first"


def test_round_trip_through_store(tmp_path: Path) -> None:
    store = CompletedTaskStore(tmp_path / "db.sqlite3")
    task = _done("x1", "first", 9)
    store.upsert_many([task])

    assert store.list_completed() == [task]


def test_list_orders_by_completion_time(tmp_path: Path) -> None:
    store = CompletedTaskStore(tmp_path / "db.sqlite3")
    store.upsert_many([_done("late", "late", 11), _done("early", "early", 8)])

    assert [t.id for t in store.list_completed()] == ["early", "late"]


def test_difficulty_is_stored_as_wire_float(tmp_path: Path) -> None:
    db = tmp_path / "db.sqlite3"
    store = CompletedTaskStore(db)
    store.upsert_many([_done("x1", "first", 9)])

    conn = sqlite3.connect(db)
    try:
        (value,) = conn.execute("SELECT difficulty FROM completed_task").fetchone()
    finally:
        conn.close()
    assert value == 1.5


def test_tasks_without_id_are_skipped(tmp_path: Path) -> None:
    store = CompletedTaskStore(tmp_path / "db.sqlite3")
    assert store.upsert_many([Task(text="no id")]) == 0
    assert store.count_tasks() == 0


def test_old_schema_gets_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "db.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE completed_task (id TEXT PRIMARY KEY, text TEXT NOT NULL, difficulty REAL NOT NULL)")
    conn.execute("INSERT INTO completed_task VALUES ('old', 'legacy row', 2.0)")
    conn.commit()
    conn.close()

    store = CompletedTaskStore(db)
    (old,) = store.list_completed()
    assert old.text == "legacy row"
    assert old.difficulty is Difficulty.HARD
    assert old.checklist is None
    assert old.task_type == "todo"
