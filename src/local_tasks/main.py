"""Command-line interface for the local task list."""

import argparse
import asyncio
import logging
import os
import shlex
import sys
from collections.abc import Callable

from .task_management.config import DATABASE_PATH_ENV, DEFAULT_DATABASE_PATH
from .task_management.database import KeyValueDatabase
from .task_management.exceptions import DatabaseError, ValidationError
from .task_management.interfaces import Renderer
from .task_management.models import Board, ControlAction
from .task_management.task_store import TaskStore
from .task_management.terminal import TerminalRenderer
from .task_management.view import TaskListView

logger = logging.getLogger(__name__)

CLEAR_MARKER = "-"

ACTION_COMMANDS = {
    "finish": ControlAction.FINISH,
    "restore": ControlAction.RESTORE,
    "remove": ControlAction.REMOVE,
    "rm": ControlAction.REMOVE,
}

SHELL_HELP = """Commands:
  add <name> [description]   Create a task (quote names with spaces)
  finish <ref>               Mark a pending task as finished
  restore <ref>              Bring a finished task back
  edit <ref> [name] [description]
                             Edit a pending task; prompts for omitted fields
  remove <ref> | rm <ref>    Delete a task
  list                       Redraw both lists
  help                       Show this help
  exit                       Leave the shell

<ref> is a task id or the number shown in front of the task."""


def resolve_task_ref(board: Board, ref: str) -> str | None:
    """
    Map a task id or displayed position to a task id.

    Positions count through the pending list first, then the finished list,
    starting at 1. An exact id match wins over a position.

    Args:
        board: Board the user is looking at
        ref: Task id or 1-based position

    Returns:
        Task id, or None if the reference matches nothing
    """
    task_ids = [task_id for section in board.sections for task_id in section.task_ids]
    if ref in task_ids:
        return ref
    if ref.isdigit() and 1 <= int(ref) <= len(task_ids):
        return task_ids[int(ref) - 1]
    return None


class TaskListCLI:
    """Command-line front end driving a task list view."""

    def __init__(
        self,
        store: TaskStore,
        renderer: Renderer | None = None,
        input_func: Callable[[str], str] = input,
    ) -> None:
        """
        Initialize the CLI.

        Args:
            store: Initialized task store
            renderer: Presentation adapter; prints to stdout when None
            input_func: Prompt function used for interactive input
        """
        self._store = store
        self._view = TaskListView(store, renderer or TerminalRenderer())
        self._input = input_func

    @property
    def view(self) -> TaskListView:
        return self._view

    async def run_command(self, args: argparse.Namespace) -> int:
        """
        Execute one parsed command.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Process exit code
        """
        command = args.command or "list"
        try:
            if command == "list":
                await self._show_list()
                return 0
            if command == "add":
                await self._view.submit_new(args.name, args.description)
                return 0

            board = await self._view.bind_current()
            task_id = resolve_task_ref(board, args.ref)
            if task_id is None:
                print(f"❌ No task matches '{args.ref}'")
                return 1

            if command == "edit":
                return 0 if await self._edit(task_id, args.name, args.description) else 1
            return 0 if await self._trigger(ACTION_COMMANDS[command], task_id) else 1

        except ValidationError as e:
            print(f"❌ {e}")
            return 1
        except DatabaseError as e:
            logger.error(f"Storage error: {e}")
            print(f"❌ Error saving tasks: {e}")
            return 1

    async def run_shell(self) -> None:
        """
        Interactive loop; each line is handled to completion before the next.

        Handles startup, main loop, and graceful shutdown on Ctrl+C / EOF.
        """
        await self._view.render_all()
        print("Type 'help' for commands.")
        while True:
            try:
                line = self._input("\n: ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\n👋 Goodbye!")
                return

            if not line:
                continue
            if line.lower() in ("exit", "quit"):
                print("👋 Goodbye!")
                return

            try:
                await self._handle_shell_line(line)
            except ValidationError as e:
                print(f"❌ {e}")
            except DatabaseError as e:
                logger.error(f"Storage error: {e}")
                print(f"❌ Error saving tasks: {e}")

    async def _handle_shell_line(self, line: str) -> None:
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            print(f"❌ Could not parse command: {e}")
            return

        command, params = tokens[0].lower(), tokens[1:]

        if command == "help":
            print(SHELL_HELP)
        elif command == "list":
            await self._show_list()
        elif command == "add":
            if not params:
                print("Usage: add <name> [description]")
                return
            await self._view.submit_new(params[0], " ".join(params[1:]))
        elif command == "edit":
            if not params:
                print("Usage: edit <ref> [name] [description]")
                return
            task_id = await self._resolve_in_shell(params[0])
            if task_id is None:
                return
            name = params[1] if len(params) > 1 else None
            await self._edit(task_id, name, " ".join(params[2:]) or None)
        elif command in ACTION_COMMANDS:
            if len(params) != 1:
                print(f"Usage: {command} <ref>")
                return
            task_id = await self._resolve_in_shell(params[0])
            if task_id is not None:
                await self._trigger(ACTION_COMMANDS[command], task_id)
        else:
            print("Unknown command. Type 'help' for instructions.")

    async def _resolve_in_shell(self, ref: str) -> str | None:
        board = self._view.board or await self._view.bind_current()
        task_id = resolve_task_ref(board, ref)
        if task_id is None:
            print(f"❌ No task matches '{ref}'")
        return task_id

    async def _show_list(self) -> None:
        await self._view.render_all()
        stats = await self._store.get_statistics()
        print(f"{stats['pending']} pending, {stats['finished']} finished")

    async def _trigger(self, action: ControlAction, task_id: str) -> bool:
        if not await self._view.dispatch(action, task_id):
            print(f"❌ Cannot {action.value} task {task_id} in its current list")
            return False
        return True

    async def _edit(
        self, task_id: str, name: str | None = None, description: str | None = None
    ) -> bool:
        """Open the inline form when fields are missing, prompt for them, then save."""
        if name is not None and description is not None:
            if not self._view.is_bound(ControlAction.EDIT, task_id):
                print(f"❌ Cannot edit task {task_id} in its current list")
                return False
            await self._view.submit_edit(task_id, name, description)
            return True

        if not await self._trigger(ControlAction.EDIT, task_id):
            return False

        task = await self._store.get_by_id(task_id)
        if task is None:
            return False
        try:
            if name is None:
                name = self._input(f"name [{task.name}]: ").strip() or task.name
            if description is None:
                description = self._prompt_description(task.description)
        except (KeyboardInterrupt, EOFError):
            print("\n✋ Edit cancelled")
            await self._view.render_all()
            return False

        try:
            return await self._view.dispatch(
                ControlAction.SAVE, task_id, name=name, description=description
            )
        except Exception:
            # Drop the inline form so the item's controls are bound again
            await self._view.render_all()
            raise

    def _prompt_description(self, current: str) -> str:
        """Ask for a description; blank keeps the current one, the clear marker empties it."""
        answer = self._input(
            f"description [{current}] ('{CLEAR_MARKER}' to clear): "
        )
        if answer.strip() == CLEAR_MARKER:
            return ""
        return answer or current


def resolve_database_path(cli_path: str | None = None) -> str:
    """
    Pick the database file: command line, then environment, then default.

    Creates the parent directory of file-backed databases.
    """
    path = cli_path or os.environ.get(DATABASE_PATH_ENV) or DEFAULT_DATABASE_PATH
    if path != ":memory:":
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
    return path


async def main(args: argparse.Namespace) -> int:
    """Main entry point for the CLI application."""
    store = TaskStore(KeyValueDatabase(resolve_database_path(args.db)))
    try:
        await store.initialize()
    except DatabaseError as e:
        print(f"❌ Error opening task database: {e}")
        await store.shutdown()
        return 1

    cli = TaskListCLI(store, TerminalRenderer(clear_screen=args.command == "shell"))
    try:
        if args.command == "shell":
            await cli.run_shell()
            return 0
        return await cli.run_command(args)
    finally:
        await store.shutdown()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Local Tasks CLI - Keep a personal list of pending and finished tasks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  local-tasks                                  # Show both lists
  local-tasks add "Buy milk" -d "2 litres"     # Create a task
  local-tasks finish 1                         # Finish the first listed task
  local-tasks restore 1760790000123            # Bring a task back by id
  local-tasks edit 2 --name "Buy oat milk"     # Edit (prompts for omitted fields)
  local-tasks remove 3                         # Delete a task
  local-tasks shell                            # Interactive mode

The database defaults to {DEFAULT_DATABASE_PATH}; set {DATABASE_PATH_ENV} or pass --db to change it.
        """,
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        metavar="PATH",
        help=f"SQLite database file (default: ${DATABASE_PATH_ENV} or {DEFAULT_DATABASE_PATH})",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    subparsers.add_parser("list", help="Show pending and finished tasks")

    add_parser = subparsers.add_parser("add", help="Create a new task")
    add_parser.add_argument("name", help="Task name (at least 3 characters)")
    add_parser.add_argument(
        "--description", "-d", default="", help="Optional task description"
    )

    edit_parser = subparsers.add_parser("edit", help="Edit a pending task")
    edit_parser.add_argument("ref", help="Task id or listed position")
    edit_parser.add_argument("--name", "-n", default=None, help="New task name")
    edit_parser.add_argument(
        "--description", "-d", default=None, help="New task description"
    )

    for command, help_text in (
        ("finish", "Mark a pending task as finished"),
        ("restore", "Bring a finished task back to pending"),
        ("remove", "Delete a task"),
    ):
        action_parser = subparsers.add_parser(command, help=help_text)
        action_parser.add_argument("ref", help="Task id or listed position")

    subparsers.add_parser("shell", help="Run an interactive session")

    return parser


def handle_arguments(args: argparse.Namespace) -> None:
    """
    Apply global options from parsed command-line arguments.

    Args:
        args: Parsed arguments from argparse
    """
    if args.verbose:
        logging.basicConfig(
            level="DEBUG", format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        logging.basicConfig(
            level="WARNING", format="%(asctime)s - %(levelname)s - %(message)s"
        )


def cli_entry_with_args() -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()

    try:
        args = parser.parse_args()
        handle_arguments(args)
        sys.exit(asyncio.run(main(args)))

    except KeyboardInterrupt:
        pass  # Graceful shutdown
    except SystemExit:
        # Re-raise SystemExit (from argparse help, etc.)
        raise
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli_entry_with_args()
