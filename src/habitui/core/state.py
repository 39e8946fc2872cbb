# src/habitui/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..config import Settings
from ..tasks.task_models import Task
from .ports import CompletedTaskRepo, TaskBackend


@dataclass
class AppState:
    # Settings live on the state so commands/connectors never read the environment.
    settings: Settings

    backend: TaskBackend
    completed_store: CompletedTaskRepo

    # Last list shown in the console; slash commands address tasks by position in it.
    tasks: list[Task] = field(default_factory=list)

    # Interactive task prompt, set by the console (/add without a descriptor).
    task_prompt: Callable[[], Task] | None = None
