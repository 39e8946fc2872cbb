# tests/test_remote_backend.py

from __future__ import annotations

import json

import httpx
import pytest

from habitui.backends.remote import HabiticaBackend
from habitui.errors import IOFailure, NotFound, RemoteRejected
from habitui.tasks.difficulty import Difficulty
from habitui.tasks.task_models import Task, TaskId

BASE = "https://habitica.test/api/v3"


class FakeHabitica:
    """Minimal stand-in for the Habitica task endpoints, served through httpx.MockTransport."""

    def __init__(self, tasks: list[dict]) -> None:
        self.tasks = tasks
        self.requests: list[httpx.Request] = []

    def _find(self, task_id: str) -> int | None:
        for i, t in enumerate(self.tasks):
            if t["_id"] == task_id:
                return i
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v3")
        parts = path.strip("/").split("/")

        if request.method == "GET" and path == "/tasks/user":
            return httpx.Response(200, json={"success": True, "data": self.tasks})

        if request.method == "POST" and path == "/tasks/user":
            body = json.loads(request.content)
            body["_id"] = f"srv-{len(self.tasks) + 1}"
            self.tasks.insert(0, body)
            return httpx.Response(201, json={"success": True, "data": body})

        index = self._find(parts[1]) if len(parts) > 1 else None
        if index is None:
            return httpx.Response(404, json={"success": False, "error": "NotFound"})

        if request.method == "PUT":
            body = json.loads(request.content)
            self.tasks[index].update(body)
            return httpx.Response(200, json={"data": self.tasks[index]})
        if request.method == "DELETE":
            return httpx.Response(200, json={"data": self.tasks.pop(index)})
        if parts[2:] == ["score", "up"]:
            self.tasks.pop(index)
            return httpx.Response(200, json={"data": {"delta": 1}})
        if parts[2:4] == ["move", "to"]:
            task = self.tasks.pop(index)
            self.tasks.insert(int(parts[4]), task)
            return httpx.Response(200, json={"data": [t["_id"] for t in self.tasks]})
        return httpx.Response(400, text="bad request")


def _backend(fake: FakeHabitica) -> HabiticaBackend:
    return HabiticaBackend(
        base_url=BASE,
        user_id="user-1",
        token="secret",
        xclient="user-1-habitui",
        transport=httpx.MockTransport(fake.handler),
    )


def _seed() -> list[dict]:
    return [
        {"_id": "a", "text": "A", "type": "todo", "priority": 1},
        {"_id": "b", "text": "B", "type": "todo", "priority": 2},
    ]


@pytest.mark.asyncio
async def test_requests_carry_auth_headers() -> None:
    fake = FakeHabitica(_seed())
    backend = _backend(fake)
    try:
        raw = await backend.fetch_tasks("todos")
    finally:
        await backend.aclose()

    assert json.loads(raw)["data"][0]["_id"] == "a"
    req = fake.requests[0]
    assert req.url.params["type"] == "todos"
    assert req.headers["x-api-user"] == "user-1"
    assert req.headers["x-api-key"] == "secret"
    assert req.headers["x-client"] == "user-1-habitui"
    assert req.headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_create_returns_server_assigned_id() -> None:
    fake = FakeHabitica(_seed())
    backend = _backend(fake)
    try:
        created = await backend.create(Task(text="New", difficulty=Difficulty.TRIVIAL))
    finally:
        await backend.aclose()

    assert created.id == "srv-3"
    assert created.difficulty is Difficulty.TRIVIAL
    sent = json.loads(fake.requests[0].content)
    assert "_id" not in sent
    assert sent["type"] == "todo"
    assert sent["priority"] == 0.1


@pytest.mark.asyncio
async def test_edit_existing_and_missing() -> None:
    fake = FakeHabitica(_seed())
    backend = _backend(fake)
    try:
        edited = await backend.edit(Task(id=TaskId("a"), text="A2", difficulty=Difficulty.MEDIUM))
        assert edited.text == "A2"
        assert fake.requests[-1].method == "PUT"
        assert fake.requests[-1].url.path == "/api/v3/tasks/a"

        with pytest.raises(NotFound):
            await backend.edit(Task(id=TaskId("ghost"), text="G"))
    finally:
        await backend.aclose()
    assert [t["_id"] for t in fake.tasks] == ["a", "b"]


@pytest.mark.asyncio
async def test_remove_and_missing_remove() -> None:
    fake = FakeHabitica(_seed())
    backend = _backend(fake)
    try:
        removed = await backend.remove(TaskId("b"))
        assert removed.text == "B"
        assert removed.difficulty is Difficulty.HARD
        with pytest.raises(NotFound):
            await backend.remove(TaskId("b"))
    finally:
        await backend.aclose()


@pytest.mark.asyncio
async def test_complete_and_reorder_paths() -> None:
    fake = FakeHabitica(_seed() + [{"_id": "c", "text": "C", "type": "todo", "priority": 1.5}])
    backend = _backend(fake)
    try:
        await backend.reorder(TaskId("c"), 0)
        await backend.complete(TaskId("a"))
    finally:
        await backend.aclose()

    assert [(r.method, r.url.path) for r in fake.requests] == [
        ("POST", "/api/v3/tasks/c/move/to/0"),
        ("POST", "/api/v3/tasks/a/score/up"),
    ]
    assert [t["_id"] for t in fake.tasks] == ["c", "b"]


@pytest.mark.asyncio
async def test_non_2xx_is_remote_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"success": False, "error": "NotAuthorized"})

    backend = HabiticaBackend(
        base_url=BASE, user_id="u", token="t", xclient="x", transport=httpx.MockTransport(handler)
    )
    try:
        with pytest.raises(RemoteRejected) as exc:
            await backend.fetch_tasks("todos")
    finally:
        await backend.aclose()
    assert exc.value.status == 401
    assert "NotAuthorized" in exc.value.body


@pytest.mark.asyncio
async def test_transport_error_is_io_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = HabiticaBackend(
        base_url=BASE, user_id="u", token="t", xclient="x", transport=httpx.MockTransport(handler)
    )
    try:
        with pytest.raises(IOFailure):
            await backend.reorder(TaskId("a"), 1)
    finally:
        await backend.aclose()
