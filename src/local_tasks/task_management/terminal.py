"""Terminal adapter printing a task board."""

import sys
from typing import TextIO

from .config import FINISHED_CONTAINER, PENDING_CONTAINER
from .interfaces import Renderer
from .models import Board, EditForm, TaskListSection

HEADER_TITLES = {PENDING_CONTAINER: "TO DO", FINISHED_CONTAINER: "FINISHED"}

_CLEAR_SCREEN = "\033[H\033[2J"


class TerminalRenderer(Renderer):
    """Prints the pending and finished sections one after the other."""

    def __init__(self, stream: TextIO | None = None, clear_screen: bool = False) -> None:
        """
        Initialize the renderer.

        Args:
            stream: Output stream (stdout when None)
            clear_screen: Wipe the terminal before each draw, for the
                interactive shell
        """
        self._stream = stream or sys.stdout
        self._clear_screen = clear_screen and self._stream.isatty()

    def clear(self) -> None:
        if self._clear_screen:
            self._stream.write(_CLEAR_SCREEN)
            self._stream.flush()

    def draw(self, board: Board) -> None:
        position = 1
        for section in board.sections:
            position = self._draw_section(section, position)
        self._stream.flush()

    def _draw_section(self, section: TaskListSection, position: int) -> int:
        self._write(HEADER_TITLES.get(section.container, section.container.upper()))
        if not section.items:
            self._write("  (empty)")
        for item in section.items:
            prefix = f"  {position}. "
            indent = " " * len(prefix)
            if isinstance(item, EditForm):
                self._write(f"{prefix}[editing {item.task_id}]")
                self._write(f"{indent}name: {item.name}")
                self._write(f"{indent}description: {item.description}")
            else:
                self._write(f"{prefix}{item.name}  [{item.task_id}]")
                for line in item.description.splitlines():
                    self._write(f"{indent}{line}")
            labels = " | ".join(control.label for control in item.controls)
            self._write(f"{indent}({labels})")
            position += 1
        self._write("")
        return position

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
