"""Task Store owning the canonical task collection and its persistence."""

import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from .config import STORAGE_KEY
from .exceptions import DatabaseError
from .interfaces import KeyValueStorage
from .models import Task

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Awaitable[Any]]


class TaskStore:
    """
    Manages the task collection stored as one serialized blob.

    Every mutation is a full read-modify-write cycle over the storage slot.
    Subscribed listeners are awaited after each mutation that changed state,
    which is how views are told to redraw.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        """
        Initialize Task Store.

        Args:
            storage: Key-value storage holding the serialized collection
            key: Name of the slot the collection lives under
        """
        self._storage = storage
        self._key = key
        self._listeners: list[ChangeListener] = []

    async def initialize(self) -> None:
        """Initialize the underlying storage."""
        logger.info("Initializing Task Store")
        await self._storage.initialize()

    async def shutdown(self) -> None:
        """
        Close the underlying storage.

        Handles errors gracefully to ensure cleanup completes.
        """
        logger.info("Shutting down Task Store")
        try:
            await self._storage.close()
        except Exception as e:
            logger.error(f"Error closing storage: {e}")

        self._listeners.clear()

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a coroutine function to await after every change."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def list_tasks(self) -> list[Task]:
        """
        Get all tasks.

        Returns:
            Tasks in insertion order
        """
        return await self._read()

    async def get_by_id(self, task_id: str) -> Task | None:
        """
        Get a task by ID.

        Args:
            task_id: Task id

        Returns:
            Task object, or None if no task has this id
        """
        for task in await self._read():
            if task.id == task_id:
                return task
        return None

    async def create(self, name: str, description: str = "") -> Task:
        """
        Append a new pending task.

        Args:
            name: Task name
            description: Optional task description

        Returns:
            The created task

        Raises:
            DatabaseError: If the collection cannot be written
        """
        tasks = await self._read()
        task = Task(
            id=_new_task_id({t.id for t in tasks}),
            name=name,
            description=description or "",
            finished=False,
        )
        tasks.append(task)
        await self._write(tasks)

        logger.info(f"Created task {task.id}: {name}")
        await self._notify()
        return task

    async def update(
        self, task_id: str, name: str, description: str, finished: bool
    ) -> None:
        """
        Overwrite the fields of a task in place.

        Unknown ids are ignored silently: nothing is written and no change
        is announced.

        Args:
            task_id: Task id
            name: New name
            description: New description
            finished: New finished flag

        Raises:
            DatabaseError: If the collection cannot be written
        """
        tasks = await self._read()
        for task in tasks:
            if task.id == task_id:
                task.name = name
                task.description = description
                task.finished = finished
                break
        else:
            logger.debug(f"Ignoring update of unknown task {task_id}")
            return

        await self._write(tasks)

        logger.info(f"Updated task {task_id} (finished={finished})")
        await self._notify()

    async def set_finished(self, task_id: str, value: bool) -> None:
        """Set the finished flag, keeping name and description."""
        task = await self.get_by_id(task_id)
        if task is None:
            logger.debug(f"Ignoring finished flag for unknown task {task_id}")
            return
        await self.update(task_id, task.name, task.description, value)

    async def finish(self, task_id: str) -> None:
        await self.set_finished(task_id, True)

    async def restore(self, task_id: str) -> None:
        await self.set_finished(task_id, False)

    async def edit(self, task_id: str, name: str, description: str) -> None:
        """Apply an edit; an edited task always returns to pending."""
        await self.update(task_id, name, description, False)

    async def remove(self, task_id: str) -> None:
        """
        Delete a task.

        Args:
            task_id: Task id

        Raises:
            DatabaseError: If the collection cannot be written
        """
        tasks = await self._read()
        remaining = [task for task in tasks if task.id != task_id]
        if len(remaining) == len(tasks):
            logger.debug(f"Ignoring removal of unknown task {task_id}")
            return

        await self._write(remaining)

        logger.info(f"Removed task {task_id}")
        await self._notify()

    async def get_statistics(self) -> dict[str, int]:
        """
        Get task statistics.

        Returns:
            Dictionary with task counts:
            - total: Total number of tasks
            - pending: Number of pending tasks
            - finished: Number of finished tasks
        """
        tasks = await self._read()
        finished = sum(1 for task in tasks if task.finished)
        return {
            "total": len(tasks),
            "pending": len(tasks) - finished,
            "finished": finished,
        }

    async def _read(self) -> list[Task]:
        """Load the collection, treating unreadable state as empty."""
        try:
            raw = await self._storage.get(self._key)
        except DatabaseError as e:
            logger.warning(f"Could not read tasks, starting empty: {e}")
            return []

        if raw is None:
            return []
        return _decode_tasks(raw)

    async def _write(self, tasks: list[Task]) -> None:
        await self._storage.set(self._key, _encode_tasks(tasks))

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener()


def _new_task_id(taken: set[str]) -> str:
    """Millisecond timestamp id, bumped until it is unused."""
    candidate = time.time_ns() // 1_000_000
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _encode_tasks(tasks: list[Task]) -> str:
    return json.dumps([task.to_dict() for task in tasks])


def _decode_tasks(raw: str) -> list[Task]:
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Stored tasks are not valid JSON, starting empty: {e}")
        return []

    if not isinstance(data, list):
        logger.warning("Stored tasks are not a list, starting empty")
        return []

    tasks: list[Task] = []
    seen: set[str] = set()
    for entry in data:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed task entry: {entry!r}")
            continue
        try:
            task = Task.from_dict(entry)
        except ValueError as e:
            logger.warning(f"Skipping malformed task entry: {e}")
            continue
        if task.id in seen:
            logger.warning(f"Skipping duplicate task id {task.id}")
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks
