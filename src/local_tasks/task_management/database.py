"""Key-value storage for task management using SQLite."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from local_tasks.task_management.config import SCHEMA_VERSION
from local_tasks.task_management.exceptions import DatabaseError, SchemaError
from local_tasks.task_management.interfaces import KeyValueStorage


class KeyValueDatabase(KeyValueStorage):
    """SQLite-backed key-value slots."""

    def __init__(self, db_path: str, wal_mode: bool = True) -> None:
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file (use ":memory:" for in-memory)
            wal_mode: Enable WAL mode for concurrent access
        """
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Initialize database schema and connection."""
        if self._connection is None:
            try:
                self._connection = await aiosqlite.connect(self.db_path)
            except (aiosqlite.Error, OSError) as e:
                raise DatabaseError(f"Failed to open database {self.db_path}: {e}") from e

            # WAL is not supported in :memory:
            if self.wal_mode and self.db_path != ":memory:":
                await self._connection.execute("PRAGMA journal_mode=WAL")

        await self._create_schema()

    async def _create_schema(self) -> None:
        """Create the schema_version and kv_store tables."""
        async with self._get_connection() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

            cursor = await conn.execute("SELECT MAX(version) FROM schema_version")
            result = await cursor.fetchone()
            current_version = result[0] if result and result[0] is not None else 0

            if current_version > SCHEMA_VERSION:
                raise SchemaError(
                    f"Database schema version {current_version} is newer than "
                    f"supported version {SCHEMA_VERSION}"
                )
            if current_version < SCHEMA_VERSION:
                await self._apply_migrations(conn, current_version)

            await conn.commit()

    async def _apply_migrations(
        self, conn: aiosqlite.Connection, from_version: int
    ) -> None:
        """
        Apply database migrations.

        Args:
            conn: Database connection
            from_version: Current schema version
        """
        if from_version < 1:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

            await conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Get database connection context manager.

        Yields:
            Database connection

        Raises:
            DatabaseError: If connection is not initialized
        """
        if self._connection is None:
            raise DatabaseError("Database not initialized")
        yield self._connection

    async def get_schema_version(self) -> int:
        """
        Get current schema version.

        Returns:
            Schema version number
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_version")
            result = await cursor.fetchone()
            return result[0] if result and result[0] is not None else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

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
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to read key {key}: {e}") from e

        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Slot name
            value: Serialized value

        Raises:
            DatabaseError: If the write fails
        """
        try:
            async with self._get_connection() as conn:
                await conn.execute(
                    "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                    (key, value),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to write key {key}: {e}") from e


class InMemoryKeyValueStore(KeyValueStorage):
    """Dictionary-backed key-value slots, used for tests and dry runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def initialize(self) -> None:
        pass

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def close(self) -> None:
        pass
