# src/habitui/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from ..core.ports import TaskBackend
from ..core.state import AppState
from ..errors import IOFailure
from .reorder import priority_reorder
from .task_models import Task, decode_task_list

logger = logging.getLogger(__name__)


async def get_task_list(backend: TaskBackend) -> list[Task]:
    raw = await backend.fetch_tasks("todos")
    return decode_task_list(raw)


def _write_snapshot(path: Path, raw: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw, "utf-8")
    except OSError as e:
        raise IOFailure(f"cannot write {path}: {e}") from e


async def list_tasks(state: AppState, *, save_json: bool = False) -> list[Task]:
    """
    Fetch the todo list.

    With save_json the raw payload is written verbatim to the local tasks file,
    which is exactly what the local backend reads, so a remote list can seed
    a development setup.
    """
    raw = await state.backend.fetch_tasks("todos")
    tasks = decode_task_list(raw)
    state.tasks = tasks

    if save_json:
        path = state.settings.local_tasks_path
        _write_snapshot(path, raw)
        logger.info("Saved %d tasks to %s", len(tasks), path)
    return tasks


async def create_task(state: AppState, task: Task) -> Task:
    logger.debug("Creating task text=%r difficulty=%s", task.text, task.difficulty.label)
    return await state.backend.create(task)


async def reorder_tasks(state: AppState) -> int:
    tasks = await get_task_list(state.backend)
    return await priority_reorder(state.backend, tasks)


async def sync_completed(state: AppState) -> list[Task]:
    """Copy the backend's completed todos into the durable store and return all stored rows."""
    raw = await state.backend.fetch_tasks("completedTodos")
    completed = decode_task_list(raw)
    inserted = state.completed_store.upsert_many(completed)
    logger.info("Completed sync: fetched=%d new=%d", len(completed), inserted)
    return state.completed_store.list_completed()


async def complete_task(state: AppState, task: Task) -> None:
    await state.backend.complete(task.id)
    logger.info("Completed task id=%s", task.id)


async def remove_task(state: AppState, task: Task) -> Task:
    return await state.backend.remove(task.id)


async def move_task(state: AppState, task: Task, index: int) -> None:
    await state.backend.reorder(task.id, index)


async def step_difficulty(state: AppState, task: Task, *, forward: bool = True) -> Task:
    """Edit a copy with the stepped difficulty; `task` itself is left as it was."""
    stepped = task.difficulty.next() if forward else task.difficulty.previous()
    return await state.backend.edit(replace(task, difficulty=stepped))
