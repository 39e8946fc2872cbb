# src/habitui/tasks/task_models.py

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, NewType

from ..errors import Malformed
from .difficulty import Difficulty, PriorityTier, decode, encode, tier_of

TaskId = NewType("TaskId", str)

EMPTY_TASK_ID = TaskId("")
TODO = "todo"

NAME_MAX_LEN = 60
NOTES_MAX_LEN = 60


@dataclass(slots=True)
class SubTask:
    text: str
    completed: bool = False


@dataclass(slots=True)
class Task:
    """
    A Habitica todo.

    Notes:
    - id is empty until a backend accepts the task.
    - completed_at is only ever filled for records coming from "completedTodos".
    """

    text: str
    difficulty: Difficulty = Difficulty.EASY
    id: TaskId = EMPTY_TASK_ID
    task_type: str = TODO
    notes: str | None = None
    due_date: date | None = None
    completed_at: datetime | None = None
    checklist: list[SubTask] | None = field(default=None)

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    # ---- wire format ----

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.id:
            out["_id"] = str(self.id)
        out["text"] = self.text
        out["type"] = self.task_type
        out["priority"] = encode(self.difficulty)
        out["notes"] = self.notes
        out["date"] = self.due_date.isoformat() if self.due_date else None
        out["checklist"] = (
            [{"text": s.text, "completed": s.completed} for s in self.checklist]
            if self.checklist is not None
            else None
        )
        if self.completed_at is not None:
            out["dateCompleted"] = self.completed_at.isoformat()
        return out

    @classmethod
    def from_wire(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise Malformed(f"task must be an object, got {type(raw).__name__}")

        text = raw.get("text")
        if not isinstance(text, str):
            raise Malformed("task 'text' must be a string")

        notes = raw.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise Malformed("task 'notes' must be a string")

        return cls(
            id=TaskId(str(raw.get("_id") or "")),
            text=text,
            task_type=str(raw.get("type") or TODO),
            difficulty=_difficulty_from_wire(raw.get("priority", encode(Difficulty.EASY))),
            notes=notes,
            due_date=_date_from_wire(raw.get("date")),
            completed_at=_timestamp_from_wire(raw.get("dateCompleted")),
            checklist=_checklist_from_wire(raw.get("checklist")),
        )


def _difficulty_from_wire(value: Any) -> Difficulty:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise Malformed(f"task 'priority' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise Malformed(f"task 'priority' must be finite, got {value!r}")
    return decode(float(value))


def _parse_iso(value: str) -> datetime:
    # Habitica sends "2024-05-01T00:00:00.000Z"
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise Malformed(f"invalid ISO-8601 value: {value!r}") from None


def _date_from_wire(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise Malformed(f"task 'date' must be a string, got {value!r}")
    return _parse_iso(value).date()


def _timestamp_from_wire(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise Malformed(f"task 'dateCompleted' must be a string, got {value!r}")
    return _parse_iso(value)


def _checklist_from_wire(value: Any) -> list[SubTask] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise Malformed("task 'checklist' must be a list")
    items: list[SubTask] = []
    for item in value:
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            raise Malformed(f"invalid checklist item: {item!r}")
        items.append(SubTask(text=item["text"], completed=bool(item.get("completed", False))))
    return items


# ---- collection payloads: {"data": [...]} / {"data": {...}} ----


def _load_payload(raw: str | bytes) -> Any:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise Malformed(f"payload is not valid JSON: {e}") from e
    if not isinstance(payload, dict) or "data" not in payload:
        raise Malformed("payload has no 'data' field")
    return payload["data"]


def decode_task_list(raw: str | bytes) -> list[Task]:
    data = _load_payload(raw)
    if not isinstance(data, list):
        raise Malformed("payload 'data' must be a list")
    return [Task.from_wire(item) for item in data]


def decode_task(raw: str | bytes) -> Task:
    return Task.from_wire(_load_payload(raw))


def encode_task_list(tasks: list[Task]) -> str:
    return json.dumps({"data": [t.to_wire() for t in tasks]}, ensure_ascii=False)


# ---- helpers ----


def priority_tier(task: Task) -> PriorityTier:
    return tier_of(task.difficulty)


def format_task(task: Task, *, dark_mode: bool = False) -> str:
    unchecked = "⬛" if dark_mode else "⬜"
    lines = [f"{task.text:48}{task.difficulty.label:7}"]
    if task.notes:
        lines.append(task.notes)
    if task.due_date:
        lines.append(task.due_date.isoformat())
    for sub in task.checklist or []:
        check = "✅" if sub.completed else unchecked
        lines.append(f"{check} {sub.text}")
    return "\n".join(lines) + "\n"


def parse_due_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return _parse_iso(raw).date()


def parse_task_descriptor(descriptor: str) -> Task:
    """
    Parse "<name>,<difficulty>,<notes>,<due>,<checklist1>;<checklist2>;...".

    Name and difficulty are required. Empty optional parts are treated as absent.
    """
    parts = descriptor.split(",", 4)
    name = parts[0].strip() if parts else ""
    if not name:
        raise Malformed("Incorrect input: <name> required")
    if len(parts) < 2 or not parts[1].strip():
        raise Malformed("Incorrect input: <difficulty> required")

    notes = parts[2].strip() if len(parts) > 2 and parts[2].strip() else None
    due = parse_due_date(parts[3]) if len(parts) > 3 and parts[3].strip() else None

    checklist: list[SubTask] | None = None
    if len(parts) > 4:
        items = [i.strip() for i in parts[4].split(";") if i.strip()]
        checklist = [SubTask(text=i) for i in items] or None

    return Task(
        text=name,
        difficulty=Difficulty.from_label(parts[1]),
        notes=notes,
        due_date=due,
        checklist=checklist,
    )
