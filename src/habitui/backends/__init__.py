# src/habitui/backends/__init__.py

"""
Task backends.

- local.py: JSON-file backend for development
- remote.py: Habitica HTTP API backend
"""

from __future__ import annotations

from ..config import Settings
from ..core.ports import TaskBackend
from .local import LocalFileBackend
from .remote import HabiticaBackend


def build_backend(settings: Settings) -> TaskBackend:
    """Pick the adapter named by settings.backend. Credentials are checked only for remote."""
    if settings.backend == "local":
        return LocalFileBackend(
            settings.local_tasks_path,
            settings.local_completed_path,
            latency_seconds=settings.local_latency_ms / 1000.0,
        )

    user_id, token, xclient = settings.require_credentials()
    return HabiticaBackend(
        base_url=settings.api_base_url,
        user_id=user_id,
        token=token,
        xclient=xclient,
    )


__all__ = ["HabiticaBackend", "LocalFileBackend", "build_backend"]
