# src/habitui/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Operations and the reorder engine depend on these Protocols instead of the
concrete local-file / Habitica adapters. The adapter is picked once at start-up
(see backends.build_backend) and injected through AppState.
"""

from typing import Literal, Protocol

from ..tasks.task_models import Task, TaskId

TaskKind = Literal["todos", "completedTodos"]
TASK_KINDS: tuple[str, ...] = ("todos", "completedTodos")


class TaskBackend(Protocol):
    async def fetch_tasks(self, kind: TaskKind) -> str:
        """Raw {"data": [...]} payload; decoding is the caller's job."""
        ...

    async def create(self, task: Task) -> Task: ...
    async def edit(self, task: Task) -> Task: ...
    async def remove(self, task_id: TaskId) -> Task: ...
    async def complete(self, task_id: TaskId) -> None: ...
    async def reorder(self, task_id: TaskId, index: int) -> None: ...
    async def aclose(self) -> None: ...


class CompletedTaskRepo(Protocol):
    def upsert_many(self, tasks: list[Task]) -> int: ...
    def list_completed(self) -> list[Task]: ...
    def count_tasks(self) -> int: ...
