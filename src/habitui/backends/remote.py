# src/habitui/backends/remote.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.ports import TASK_KINDS, TaskKind
from ..errors import IOFailure, NotFound, RemoteRejected
from ..tasks.task_models import Task, TaskId, decode_task

logger = logging.getLogger(__name__)


class HabiticaBackend:
    """
    Production backend over the Habitica v3 REST API.

    One authenticated request per call, awaited by the caller before the next one.
    No retries: a failed call surfaces immediately.
    """

    def __init__(
        self,
        *,
        base_url: str,
        user_id: str,
        token: str,
        xclient: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "x-api-user": user_id,
            "x-api-key": token,
            "x-client": xclient,
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            transport=transport,
        )
        logger.info("HabiticaBackend ready base_url=%s", base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        task_id: TaskId | None = None,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            res = await self._client.request(method, url, json=json, params=params)
        except httpx.TransportError as e:
            raise IOFailure(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, res.status_code)
        if res.is_success:
            return res
        if res.status_code == 404 and task_id is not None:
            raise NotFound(task_id)
        raise RemoteRejected(res.status_code, res.text, url=url)

    # ---- TaskBackend ----

    async def fetch_tasks(self, kind: TaskKind) -> str:
        if kind not in TASK_KINDS:
            raise ValueError(f"Undefined task type: {kind}")
        res = await self._request("GET", "/tasks/user", params={"type": kind})
        return res.text

    async def create(self, task: Task) -> Task:
        res = await self._request("POST", "/tasks/user", json=task.to_wire())
        created = decode_task(res.text)
        logger.info("Created task id=%s", created.id)
        return created

    async def edit(self, task: Task) -> Task:
        res = await self._request("PUT", f"/tasks/{task.id}", task_id=task.id, json=task.to_wire())
        return decode_task(res.text)

    async def remove(self, task_id: TaskId) -> Task:
        res = await self._request("DELETE", f"/tasks/{task_id}", task_id=task_id)
        return decode_task(res.text)

    async def complete(self, task_id: TaskId) -> None:
        await self._request("POST", f"/tasks/{task_id}/score/up", task_id=task_id)

    async def reorder(self, task_id: TaskId, index: int) -> None:
        await self._request("POST", f"/tasks/{task_id}/move/to/{int(index)}", task_id=task_id)
