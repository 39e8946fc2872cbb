# src/habitui/backends/local.py

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from ..core.ports import TASK_KINDS, TaskKind
from ..errors import IOFailure, NotFound
from ..tasks.task_models import Task, TaskId, decode_task_list, encode_task_list

logger = logging.getLogger(__name__)


class LocalFileBackend:
    """
    Development backend: mirrors the Habitica task API over two JSON files.

    - todos live in `tasks_path` as {"data": [...]}, front of the list first
    - completed todos are read-only from `completed_path`

    Every mutating call reads the whole file, changes the list in memory and
    rewrites the file. There is no locking: two processes writing the same
    file at once lose one of the updates.
    """

    def __init__(
        self,
        tasks_path: str | Path,
        completed_path: str | Path,
        *,
        latency_seconds: float = 0.0,
    ) -> None:
        self._tasks_path = Path(tasks_path)
        self._completed_path = Path(completed_path)
        self._latency_s = max(0.0, float(latency_seconds))
        logger.info("LocalFileBackend ready tasks=%s completed=%s", self._tasks_path, self._completed_path)

    @property
    def tasks_path(self) -> Path:
        return self._tasks_path

    async def aclose(self) -> None:
        """Nothing to release (files are opened per call)."""
        return

    # ---- low-level helpers ----

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text("utf-8")
        except OSError as e:
            raise IOFailure(f"cannot read {path}: {e}") from e

    def _load(self) -> list[Task]:
        return decode_task_list(self._read_text(self._tasks_path))

    def _save(self, tasks: list[Task]) -> None:
        try:
            tmp = self._tasks_path.with_suffix(".tmp")
            tmp.write_text(encode_task_list(tasks), "utf-8")
            os.replace(tmp, self._tasks_path)
        except OSError as e:
            raise IOFailure(f"cannot write {self._tasks_path}: {e}") from e

    @staticmethod
    def _index_of(tasks: list[Task], task_id: TaskId) -> int | None:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        return None

    # ---- TaskBackend ----

    async def fetch_tasks(self, kind: TaskKind) -> str:
        if kind not in TASK_KINDS:
            raise ValueError(f"Undefined task type: {kind}")
        path = self._tasks_path if kind == "todos" else self._completed_path
        data = self._read_text(path)

        if self._latency_s:
            await asyncio.sleep(self._latency_s)
        return data

    async def create(self, task: Task) -> Task:
        tasks = self._load()
        tasks.insert(0, task)
        self._save(tasks)
        logger.debug("Local create text=%r (total=%d)", task.text, len(tasks))
        return task

    async def edit(self, task: Task) -> Task:
        tasks = self._load()
        index = self._index_of(tasks, task.id)
        if index is None:
            # Last write wins: an unknown id becomes a new task at the front.
            tasks.insert(0, task)
            logger.debug("Local edit inserted unknown id=%s", task.id)
        else:
            tasks[index] = task
        self._save(tasks)
        return task

    async def remove(self, task_id: TaskId) -> Task:
        tasks = self._load()
        index = self._index_of(tasks, task_id)
        if index is None:
            raise NotFound(task_id)
        removed = tasks.pop(index)
        self._save(tasks)
        logger.debug("Local remove id=%s", task_id)
        return removed

    async def complete(self, task_id: TaskId) -> None:
        # Completion history is not tracked locally.
        await self.remove(task_id)

    async def reorder(self, task_id: TaskId, index: int) -> None:
        tasks = self._load()
        current = self._index_of(tasks, task_id)
        if current is None:
            raise NotFound(task_id)
        task = tasks.pop(current)
        target = max(0, min(int(index), len(tasks)))
        tasks.insert(target, task)
        self._save(tasks)
        logger.debug("Local reorder id=%s %d -> %d", task_id, current, target)
