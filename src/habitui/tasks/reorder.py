# src/habitui/tasks/reorder.py

from __future__ import annotations

"""
Priority reorder.

One pass over the backend's current order that pulls High tasks to the front,
then Mid tasks right behind them, each group keeping its original relative
order. Low tasks are never moved; they end up wherever the backend's
remove-then-insert shifting leaves them.

A failing move stops the pass. Moves already applied stay applied.
"""

import logging
from collections.abc import Iterable

from ..core.ports import TaskBackend
from .difficulty import PriorityTier
from .task_models import Task, priority_tier

logger = logging.getLogger(__name__)


async def priority_reorder(backend: TaskBackend, tasks: Iterable[Task]) -> int:
    """Apply the reorder and return how many moves were issued."""
    high_count = 0
    # Mid targets must account for every High task already moved in front.
    mid_count = 0
    moves = 0

    for task in tasks:
        tier = priority_tier(task)
        if tier == PriorityTier.HIGH:
            await backend.reorder(task.id, high_count)
            high_count += 1
            mid_count += 1
        elif tier == PriorityTier.MID:
            await backend.reorder(task.id, mid_count)
            mid_count += 1
        else:
            continue
        moves += 1
        logger.debug("Moved task id=%s tier=%s", task.id, tier.value)

    logger.info("Priority reorder done: moves=%d high=%d mid=%d", moves, high_count, mid_count - high_count)
    return moves
