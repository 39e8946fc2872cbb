# src/habitui/cli/main.py

"""
CLI entrypoint.

Parses arguments, builds Settings once, initializes logging, builds AppState,
then runs exactly one top-level operation on a single asyncio event loop:
- list / history / task / reorder one-shot commands,
- the console UI when no command is given.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys

from ..cli.bootstrap import create_initial_state, shutdown
from ..config import BACKENDS, Settings
from ..connectors.console_connector import prompt_for_task, run_console_loop
from ..core.state import AppState
from ..errors import HabituiError
from ..logging_setup import setup_logging
from ..tasks import task_api
from ..tasks.task_models import format_task, parse_task_descriptor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habitui", description="Habitica todos in the terminal.")
    parser.add_argument("--verbose", action="store_true", help="Run command verbosely")
    parser.add_argument("-d", "--debug", action="store_true", help="Turn debugging information on")
    parser.add_argument("--backend", choices=BACKENDS, help="Override HABITUI_BACKEND")

    sub = parser.add_subparsers(dest="command")

    p_list = sub.add_parser("list", help="List all TODOs")
    p_list.add_argument("--save-json", action="store_true", help="Save the list of tasks as a JSON file")

    sub.add_parser("history", help="List completed TODOs")

    p_task = sub.add_parser("task", help="Create a new TODO item")
    p_task.add_argument(
        "descriptor",
        nargs="?",
        help="<name>,<difficulty>,<notes>,<due>,<checklist1>;<checklist2>;...",
    )

    sub.add_parser("reorder", help="Reorder tasks by descending priority")
    return parser


async def run_operation(state: AppState, args: argparse.Namespace) -> None:
    dark = state.settings.dark_mode
    try:
        if args.command == "list":
            for task in await task_api.list_tasks(state, save_json=args.save_json):
                print(format_task(task, dark_mode=dark))
            if args.save_json:
                print(f"Saved list to {state.settings.local_tasks_path}")
        elif args.command == "history":
            for task in await task_api.sync_completed(state):
                print(format_task(task, dark_mode=dark))
        elif args.command == "task":
            task = parse_task_descriptor(args.descriptor) if args.descriptor else prompt_for_task()
            created = await task_api.create_task(state, task)
            print(f"Created: \n{format_task(created, dark_mode=dark)}")
        elif args.command == "reorder":
            moves = await task_api.reorder_tasks(state)
            print(f"Reordered tasks ({moves} moves).")
        else:
            await run_console_loop(state)
    finally:
        await shutdown(state)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"habitui: {e}", file=sys.stderr)
        return 2

    if args.backend:
        settings = dataclasses.replace(settings, backend=args.backend)

    if args.debug:
        console_level = logging.DEBUG
    elif args.verbose:
        console_level = logging.INFO
    else:
        console_level = getattr(logging, settings.log_level, logging.WARNING)
    setup_logging(log_dir=settings.config_dir, console_level=console_level)

    logger.info("Starting %s (backend=%s)...", settings.app_name, settings.backend)

    try:
        state = create_initial_state(settings)
        asyncio.run(run_operation(state, args))
    except HabituiError as e:
        logger.debug("Operation failed.", exc_info=True)
        print(f"habitui: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
