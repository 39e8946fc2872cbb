# src/habitui/errors.py

from __future__ import annotations


class HabituiError(Exception):
    pass


class ConfigurationMissing(HabituiError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(f"missing configuration: {', '.join(self.names)}")


class NotFound(HabituiError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"task with ID: {task_id} not found")


class RemoteRejected(HabituiError):
    def __init__(self, status: int, body: str, url: str = "") -> None:
        self.status = status
        self.body = body
        self.url = url
        where = f" ({url})" if url else ""
        super().__init__(f"remote rejected request{where}: HTTP {status}: {body[:200]}")


class Malformed(HabituiError):
    pass


class IOFailure(HabituiError):
    pass
