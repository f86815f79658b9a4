"""Data models for task management functionality."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass
class Task:
    """Represents a task item."""

    id: str
    name: str
    description: str = ""
    finished: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the persisted field order."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "finished": self.finished,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """
        Build a task from a persisted record.

        Missing optional fields fall back to their defaults; ``id`` is
        required and must be a string.

        Raises:
            ValueError: If the record has no usable id
        """
        task_id = data.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise ValueError(f"Invalid task id: {task_id!r}")
        return cls(
            id=task_id,
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            finished=bool(data.get("finished", False)),
        )


class ControlAction(str, Enum):
    """Per-item actions a rendered control can trigger."""

    FINISH = "finish"
    EDIT = "edit"
    RESTORE = "restore"
    REMOVE = "remove"
    SAVE = "save"


@dataclass(frozen=True)
class Control:
    """A button bound to one task."""

    action: ControlAction
    task_id: str
    label: str


@dataclass(frozen=True)
class TaskItem:
    """Display of a single task inside a list container."""

    task_id: str
    name: str
    description: str
    controls: tuple[Control, ...] = ()


@dataclass(frozen=True)
class EditForm:
    """Inline form replacing a task item while it is being edited."""

    task_id: str
    name: str
    description: str
    controls: tuple[Control, ...] = ()


@dataclass(frozen=True)
class TaskListSection:
    """One list container and the items rendered into it."""

    container: str
    items: tuple[TaskItem | EditForm, ...] = ()

    @property
    def task_ids(self) -> list[str]:
        return [item.task_id for item in self.items]


@dataclass(frozen=True)
class Board:
    """Full description of both rendered lists."""

    pending: TaskListSection
    finished: TaskListSection

    @property
    def sections(self) -> tuple[TaskListSection, TaskListSection]:
        return (self.pending, self.finished)

    @property
    def controls(self) -> list[Control]:
        return [
            control
            for section in self.sections
            for item in section.items
            for control in item.controls
        ]
