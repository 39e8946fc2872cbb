# src/habitui/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_tasks
from ..core.state import AppState
from ..errors import HabituiError, Malformed
from ..tasks import task_api
from ..tasks.difficulty import Difficulty
from ..tasks.task_models import NAME_MAX_LEN, NOTES_MAX_LEN, SubTask, Task, parse_due_date

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]

TITLE = (
    "╻ ╻┏━┓┏┓ ╻╺┳╸╻ ╻╻\n"
    "┣━┫┣━┫┣┻┓┃ ┃ ┃ ┃┃\n"
    "╹ ╹╹ ╹┗━┛╹ ╹ ┗━┛╹"
)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _ask(read: Reader, label: str, *, max_len: int | None = None, required: bool = False) -> str:
    while True:
        value = read(label).strip()
        if required and not value:
            print("  Task name cannot be empty.")
            continue
        if max_len is not None and len(value) > max_len:
            print(f"  Must be at most {max_len} characters.")
            continue
        return value


def _ask_difficulty(read: Reader) -> Difficulty:
    choices = " ".join(f"{d.value + 1}){d.label}" for d in Difficulty)
    while True:
        raw = read(f"Difficulty [{choices}] (default Easy): ").strip()
        if not raw:
            return Difficulty.EASY
        if raw.isdigit() and 1 <= int(raw) <= len(Difficulty):
            return Difficulty(int(raw) - 1)
        try:
            return Difficulty.from_label(raw)
        except Malformed as e:
            print(f"  {e}")


def _ask_due(read: Reader) -> date | None:
    while True:
        raw = read("Due date (YYYY-MM-DD, blank to skip): ").strip()
        if not raw:
            return None
        try:
            return parse_due_date(raw)
        except Malformed as e:
            print(f"  {e}")


def prompt_for_task(read: Reader = input) -> Task:
    """Ask for a new todo field by field. A blank checklist item ends the checklist."""
    name = _ask(read, "Task name: ", max_len=NAME_MAX_LEN, required=True)
    difficulty = _ask_difficulty(read)
    notes = _ask(read, "Extra notes: ", max_len=NOTES_MAX_LEN)
    due = _ask_due(read)

    checklist: list[SubTask] = []
    while True:
        item = read(f"Checklist item #{len(checklist) + 1} (blank to finish): ").strip()
        if not item:
            break
        checklist.append(SubTask(text=item))

    return Task(
        text=name,
        difficulty=difficulty,
        notes=notes or None,
        due_date=due,
        checklist=checklist or None,
    )


async def run_console_loop(state: AppState, read: Reader = input) -> None:
    logger.info("Console started (backend=%s).", state.settings.backend)
    print(TITLE)
    _print_ts("Use /help for commands. Use /exit to quit.\n")

    state.task_prompt = lambda: prompt_for_task(read)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        tasks = await task_api.list_tasks(state)
        print(render_tasks(state, tasks))
    except HabituiError as e:
        logger.warning("Initial list failed: %s", e)
        _print_ts(f"[ERROR] {e}")

    while True:
        try:
            user_input = read(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "q"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/" + user_input

        try:
            reply = await command_registry.handle(state, user_input, emit=emit)
        except HabituiError as e:
            logger.info("Command failed: %s", e)
            reply = f"[ERROR] {e}"
        except EOFError:
            reply = "Cancelled."
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console finished.")
