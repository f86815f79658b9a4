"""Abstract interfaces for task management system."""

from abc import ABC, abstractmethod

from local_tasks.task_management.models import Board


class KeyValueStorage(ABC):
    """Abstract interface for the key-value slot holding serialized tasks."""

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the storage for use.

        Raises:
            DatabaseError: If the backing store cannot be opened
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            Stored value, or None if the slot is empty

        Raises:
            DatabaseError: If the read fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Slot name
            value: Serialized value

        Raises:
            DatabaseError: If the write fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any resources held by the storage."""
        pass


class Renderer(ABC):
    """Abstract interface for the presentation adapter consuming a Board."""

    @abstractmethod
    def clear(self) -> None:
        """Empty both list containers."""
        pass

    @abstractmethod
    def draw(self, board: Board) -> None:
        """
        Draw every section of a board into its container.

        Args:
            board: Description of the pending and finished lists
        """
        pass
