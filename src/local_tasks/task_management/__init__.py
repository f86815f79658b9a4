"""Task management module for a locally persisted task list."""

from .models import (
    Board,
    Control,
    ControlAction,
    EditForm,
    Task,
    TaskItem,
    TaskListSection,
)
from .task_store import TaskStore
from .view import TaskListView, build_board

__all__ = [
    "Task",
    "Board",
    "Control",
    "ControlAction",
    "EditForm",
    "TaskItem",
    "TaskListSection",
    "TaskStore",
    "TaskListView",
    "build_board",
]
