"""Task list view: derives both rendered lists from the store and binds controls."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from functools import partial
from typing import Any

from .config import CONTROL_LABELS, FINISHED_CONTAINER, PENDING_CONTAINER
from .forms import validate_task_form
from .interfaces import Renderer
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

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]

PENDING_ACTIONS = (ControlAction.FINISH, ControlAction.EDIT, ControlAction.REMOVE)
FINISHED_ACTIONS = (ControlAction.RESTORE, ControlAction.REMOVE)


def _controls(task_id: str, actions: Iterable[ControlAction]) -> tuple[Control, ...]:
    return tuple(
        Control(action=action, task_id=task_id, label=CONTROL_LABELS[action.value])
        for action in actions
    )


def build_board(tasks: Iterable[Task], editing_id: str | None = None) -> Board:
    """
    Describe both task lists for a collection snapshot.

    Pending tasks go to the pending container with finish, edit and delete
    controls; finished tasks go to the finished container with bring back
    and delete controls. Store order is preserved in both. When
    ``editing_id`` names a pending task, its item is replaced by an inline
    form pre-populated with the current name and description.

    Args:
        tasks: Tasks in store order
        editing_id: Id of the pending task shown as an edit form, if any

    Returns:
        Board describing the pending and finished sections
    """
    pending: list[TaskItem | EditForm] = []
    finished: list[TaskItem | EditForm] = []

    for task in tasks:
        if task.finished:
            finished.append(
                TaskItem(
                    task_id=task.id,
                    name=task.name,
                    description=task.description,
                    controls=_controls(task.id, FINISHED_ACTIONS),
                )
            )
        elif task.id == editing_id:
            pending.append(
                EditForm(
                    task_id=task.id,
                    name=task.name,
                    description=task.description,
                    controls=_controls(task.id, (ControlAction.SAVE,)),
                )
            )
        else:
            pending.append(
                TaskItem(
                    task_id=task.id,
                    name=task.name,
                    description=task.description,
                    controls=_controls(task.id, PENDING_ACTIONS),
                )
            )

    return Board(
        pending=TaskListSection(container=PENDING_CONTAINER, items=tuple(pending)),
        finished=TaskListSection(container=FINISHED_CONTAINER, items=tuple(finished)),
    )


class TaskListView:
    """
    Keeps a renderer in sync with a task store.

    Every store change triggers a full clear-and-redraw of both lists,
    after which the action controls of the freshly built items are bound
    again. Nothing is updated incrementally.
    """

    def __init__(self, store: TaskStore, renderer: Renderer) -> None:
        """
        Initialize the view and subscribe it to store changes.

        Args:
            store: Store owning the task collection
            renderer: Presentation adapter drawing the board
        """
        self._store = store
        self._renderer = renderer
        self._handlers: dict[tuple[ControlAction, str], Handler] = {}
        self._board: Board | None = None
        store.subscribe(self.render_all)

    @property
    def board(self) -> Board | None:
        """Board drawn by the most recent render."""
        return self._board

    async def render_all(self, editing_id: str | None = None) -> Board:
        """
        Redraw both lists from the current store snapshot.

        Args:
            editing_id: Pending task to show as an inline edit form

        Returns:
            The board that was drawn
        """
        tasks = await self._store.list_tasks()
        board = build_board(tasks, editing_id)

        self._renderer.clear()
        self._renderer.draw(board)
        self._bind_actions(board)
        self._board = board

        logger.debug(
            f"Rendered {len(board.pending.items)} pending and "
            f"{len(board.finished.items)} finished tasks"
        )
        return board

    async def bind_current(self) -> Board:
        """Bind the controls of the current snapshot without drawing it."""
        board = build_board(await self._store.list_tasks())
        self._bind_actions(board)
        self._board = board
        return board

    def is_bound(self, action: ControlAction | str, task_id: str) -> bool:
        return (ControlAction(action), task_id) in self._handlers

    async def render_edit_form(self, task_id: str) -> Board | None:
        """
        Replace one pending item with its inline edit form.

        Args:
            task_id: Task to edit

        Returns:
            The board that was drawn, or None if the task is unknown or finished
        """
        task = await self._store.get_by_id(task_id)
        if task is None or task.finished:
            logger.debug(f"Task {task_id} is not editable")
            return None
        return await self.render_all(editing_id=task_id)

    async def submit_new(self, name: str | None, description: str | None = None) -> Task:
        """
        Handle the creation form.

        Raises:
            ValidationError: If the name is missing or too short
        """
        name, description = validate_task_form(name, description)
        return await self._store.create(name, description)

    async def submit_edit(
        self, task_id: str, name: str | None, description: str | None = None
    ) -> None:
        """
        Handle an inline edit form; the task goes back to pending.

        Raises:
            ValidationError: If the name is missing or too short
        """
        name, description = validate_task_form(name, description)
        await self._store.edit(task_id, name, description)

    async def dispatch(self, action: ControlAction | str, task_id: str, **fields: Any) -> bool:
        """
        Trigger a control bound by the last render.

        Args:
            action: Control action
            task_id: Task the control belongs to
            **fields: Form fields for the save action (name, description)

        Returns:
            True if a bound handler ran, False if no such control is shown
        """
        handler = self._handlers.get((ControlAction(action), task_id))
        if handler is None:
            logger.debug(f"No {action} control bound for task {task_id}")
            return False
        await handler(**fields)
        return True

    def _bind_actions(self, board: Board) -> None:
        handlers: dict[tuple[ControlAction, str], Handler] = {}
        for control in board.controls:
            handlers[(control.action, control.task_id)] = self._make_handler(control)
        self._handlers = handlers

    def _make_handler(self, control: Control) -> Handler:
        if control.action is ControlAction.SAVE:
            return partial(self.submit_edit, control.task_id)

        targets: dict[ControlAction, Handler] = {
            ControlAction.FINISH: self._store.finish,
            ControlAction.RESTORE: self._store.restore,
            ControlAction.REMOVE: self._store.remove,
            ControlAction.EDIT: self.render_edit_form,
        }
        return partial(targets[control.action], control.task_id)
