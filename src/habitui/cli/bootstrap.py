# src/habitui/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the Settings built once by the entrypoint,
- wires the selected backend and the completed-task store into AppState,
- releases them again at the end of the run.
"""

from __future__ import annotations

import logging

from ..backends import build_backend
from ..config import Settings
from ..core.state import AppState
from ..tasks.completed_store import CompletedTaskStore

logger = logging.getLogger(__name__)


def create_initial_state(settings: Settings) -> AppState:
    """
    Create AppState from the provided settings.

    Raises ConfigurationMissing when the remote backend is selected without credentials.
    """
    # Store first: it holds no open resources if building the backend fails.
    completed_store = CompletedTaskStore(settings.db_path)
    state = AppState(
        settings=settings,
        backend=build_backend(settings),
        completed_store=completed_store,
    )
    logger.debug("State ready backend=%s db=%s", settings.backend, settings.db_path)
    return state


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.backend.aclose()
    except Exception:
        logger.debug("Backend close failed.", exc_info=True)

    try:
        close = getattr(state.completed_store, "close", None)
        if close is not None:
            close()
    except Exception:
        logger.debug("Completed store close failed.", exc_info=True)
