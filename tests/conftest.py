"""Shared fixtures for task management tests."""

import pytest

from local_tasks.task_management.database import InMemoryKeyValueStore
from local_tasks.task_management.interfaces import Renderer
from local_tasks.task_management.models import Board
from local_tasks.task_management.task_store import TaskStore


class RecordingRenderer(Renderer):
    """Renderer that keeps every call instead of drawing."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.boards: list[Board] = []

    def clear(self) -> None:
        self.calls.append("clear")

    def draw(self, board: Board) -> None:
        self.calls.append("draw")
        self.boards.append(board)

    @property
    def last_board(self) -> Board:
        return self.boards[-1]


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    """Create an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def store(storage: InMemoryKeyValueStore) -> TaskStore:
    """Create a task store over the in-memory storage."""
    return TaskStore(storage)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()
