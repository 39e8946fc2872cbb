# tests/conftest.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from habitui.backends.local import LocalFileBackend
from habitui.config import Settings
from habitui.core.state import AppState
from habitui.tasks.completed_store import CompletedTaskStore

SEED_TODOS = [
    {"_id": "t-low-1", "text": "Water plants", "type": "todo", "priority": 0.1, "notes": None},
    {"_id": "t-high-1", "text": "File taxes", "type": "todo", "priority": 2.0, "date": "2024-04-15"},
    {
        "_id": "t-mid-1",
        "text": "Clean garage",
        "type": "todo",
        "priority": 1.5,
        "notes": "start with shelves",
        "checklist": [{"text": "shelves", "completed": True}, {"text": "floor", "completed": False}],
    },
]

SEED_COMPLETED = [
    {
        "_id": "c-1",
        "text": "Buy milk",
        "type": "todo",
        "priority": 1,
        "dateCompleted": "2024-03-01T10:00:00.000Z",
    },
    {
        "_id": "c-2",
        "text": "Call bank",
        "type": "todo",
        "priority": 1.5,
        "dateCompleted": "2024-03-02T09:30:00.000Z",
    },
]


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing every path into tmp_path.

    Built directly (not from_env) to keep unit tests isolated from the developer's environment.
    """
    return Settings(
        app_name="habitui",
        log_level="WARNING",
        debug=False,
        dark_mode=False,
        backend="local",
        api_base_url="https://habitica.test/api/v3",
        habitica_user_id=None,
        habitica_token=None,
        habitica_xclient=None,
        config_dir=tmp_path,
        db_path=tmp_path / "habitui.sqlite3",
        local_tasks_path=tmp_path / "habitica_tasks.json",
        local_completed_path=tmp_path / "habitica_completed.json",
        local_latency_ms=0,
    )


@pytest.fixture()
def seeded_files(settings: Settings) -> Settings:
    settings.local_tasks_path.write_text(json.dumps({"data": SEED_TODOS}), "utf-8")
    settings.local_completed_path.write_text(json.dumps({"data": SEED_COMPLETED}), "utf-8")
    return settings


@pytest.fixture()
def local_backend(seeded_files: Settings) -> LocalFileBackend:
    return LocalFileBackend(seeded_files.local_tasks_path, seeded_files.local_completed_path)


@pytest.fixture()
def state(seeded_files: Settings, local_backend: LocalFileBackend) -> AppState:
    """
    AppState wired with the real local backend and SQLite store.

    Both are cheap and file-based, and their behavior is part of what we test.
    """
    return AppState(
        settings=seeded_files,
        backend=local_backend,
        completed_store=CompletedTaskStore(seeded_files.db_path),
    )
