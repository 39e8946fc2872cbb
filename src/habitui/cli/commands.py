# src/habitui/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..errors import Malformed
from ..tasks import task_api
from ..tasks.task_models import Task, format_task, parse_task_descriptor

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # /add keeps its descriptor intact (it may contain spaces).
        args = [rest] if name in ("add", "new") and rest else rest.split()
        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_tasks(state: AppState, tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks."
    out = []
    for n, task in enumerate(tasks, start=1):
        out.append(f"{n:>3}. {format_task(task, dark_mode=state.settings.dark_mode)}")
    return "".join(out).rstrip("\n")


def _pick(state: AppState, raw: str) -> Task:
    """Resolve a 1-based position in the last listed tasks."""
    try:
        n = int(raw)
    except ValueError:
        raise Malformed(f"Not a task number: {raw!r}") from None
    if n < 1 or n > len(state.tasks):
        raise Malformed(f"No task #{n}. Use /list first ({len(state.tasks)} tasks listed).")
    return state.tasks[n - 1]


async def _refresh(state: AppState) -> str:
    tasks = await task_api.list_tasks(state)
    return render_tasks(state, tasks)


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return await _refresh(state)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <name>,<difficulty>,<notes>,<due>,<c1>;<c2>
    /add               -> interactive prompt
    """
    if args:
        task = parse_task_descriptor(args[0])
    elif state.task_prompt is not None:
        task = state.task_prompt()
    else:
        return "Usage: /add <name>,<difficulty>,<notes>,<due>,<checklist1>;<checklist2>"

    created = await task_api.create_task(state, task)
    listing = await _refresh(state)
    return f"Created:\n{format_task(created, dark_mode=state.settings.dark_mode)}\n{listing}"


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done N"
    task = _pick(state, args[0])
    await task_api.complete_task(state, task)
    return f"Completed: {task.text}\n{await _refresh(state)}"


async def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /rm N"
    removed = await task_api.remove_task(state, _pick(state, args[0]))
    return f"Removed: {removed.text}\n{await _refresh(state)}"


async def cmd_move(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /move N INDEX"
    task = _pick(state, args[0])
    try:
        index = int(args[1])
    except ValueError:
        return f"Not an index: {args[1]!r}"
    await task_api.move_task(state, task, max(0, index))
    return await _refresh(state)


async def _step(state: AppState, args: list[str], *, forward: bool) -> str:
    if not args:
        return f"Usage: /{'harder' if forward else 'easier'} N"
    task = _pick(state, args[0])
    edited = await task_api.step_difficulty(state, task, forward=forward)
    return f"{edited.text}: {edited.difficulty.label}\n{await _refresh(state)}"


async def cmd_harder(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return await _step(state, args, forward=True)


async def cmd_easier(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return await _step(state, args, forward=False)


async def cmd_reorder(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Reordering by priority...")
    moves = await task_api.reorder_tasks(state)
    return f"Reordered ({moves} moves).\n{await _refresh(state)}"


async def cmd_history(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    completed = await task_api.sync_completed(state)
    if not completed:
        return "No completed tasks."
    return "".join(format_task(t, dark_mode=state.settings.dark_mode) for t in completed).rstrip("\n")


registry.register("help", cmd_help, "Show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "List todos", aliases=["ls"])
registry.register("add", cmd_add, "Create a todo (descriptor or interactive)", aliases=["new"])
registry.register("done", cmd_done, "Complete todo N")
registry.register("rm", cmd_rm, "Delete todo N", aliases=["del"])
registry.register("move", cmd_move, "Move todo N to position INDEX (0-based)", aliases=["mv"])
registry.register("harder", cmd_harder, "Step todo N to the next difficulty", aliases=["+"])
registry.register("easier", cmd_easier, "Step todo N to the previous difficulty", aliases=["-"])
registry.register("reorder", cmd_reorder, "Reorder todos by descending priority")
registry.register("history", cmd_history, "Sync and show completed todos")
