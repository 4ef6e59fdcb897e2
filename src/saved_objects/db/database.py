"""Database connection and migration management."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

# Database whose transaction the current task is running inside, if any
_transaction_owner: ContextVar["Database | None"] = ContextVar("transaction_owner", default=None)


class Database:
    """Database connection and operations manager."""

    def __init__(self, database_path: str) -> None:
        """Initialize database manager.

        Args:
            database_path: Path to SQLite database file (or ":memory:")
        """
        self.database_path = database_path
        self.conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def in_transaction(self) -> bool:
        """Whether the calling task holds this database's open transaction."""
        return _transaction_owner.get() is self

    async def connect(self) -> None:
        """Connect to database."""
        if self.database_path != ":memory:":
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = await aiosqlite.connect(self.database_path)
        self.conn.row_factory = aiosqlite.Row

        await self.conn.execute("PRAGMA foreign_keys = ON")

    async def close(self) -> None:
        """Close database connection."""
        if self.conn:
            await self.conn.close()
            self.conn = None

    async def execute(
        self, sql: str, parameters: tuple[Any, ...] | dict[str, Any] = ()
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement.

        Args:
            sql: SQL statement
            parameters: Query parameters

        Returns:
            Database cursor
        """
        if not self.conn:
            raise RuntimeError("Database not connected")
        return await self.conn.execute(sql, parameters)

    async def executemany(self, sql: str, parameters: list[tuple[Any, ...]]) -> None:
        """Execute a SQL statement with multiple parameter sets.

        Args:
            sql: SQL statement
            parameters: List of parameter tuples
        """
        if not self.conn:
            raise RuntimeError("Database not connected")
        await self.conn.executemany(sql, parameters)

    async def commit(self) -> None:
        """Commit current transaction."""
        if not self.conn:
            raise RuntimeError("Database not connected")
        await self.conn.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Context manager for database transactions.

        Provides exclusive write access with proper nesting detection.
        If the calling task already holds the transaction, yields without
        starting a new one. Other tasks wait on the write lock.

        Example:
            async with db.transaction():
                await db.execute(...)
        """
        if not self.conn:
            raise RuntimeError("Database not connected")

        if self.in_transaction:
            yield
            return

        async with self._write_lock:
            await self.conn.execute("BEGIN")
            token = _transaction_owner.set(self)
            try:
                yield
                await self.conn.commit()
            except Exception:
                await self.conn.rollback()
                raise
            finally:
                _transaction_owner.reset(token)

    async def migrate(self) -> None:
        """Run database migrations."""
        try:
            cursor = await self.execute(
                "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
            )
            row = await cursor.fetchone()
            current_version = row[0] if row else 0
        except aiosqlite.OperationalError:
            current_version = 0

        if current_version < 1:
            await self._migrate_v1()

    async def _migrate_v1(self) -> None:
        """Initial database schema migration."""
        async with self.transaction():
            await self.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at DATETIME NOT NULL
                )
            """)

            # refs holds the ordered reference list as JSON
            await self.execute("""
                CREATE TABLE IF NOT EXISTS saved_objects (
                    type TEXT NOT NULL,
                    id TEXT NOT NULL,
                    attributes TEXT NOT NULL DEFAULT '{}',
                    refs TEXT NOT NULL DEFAULT '[]',
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL,
                    PRIMARY KEY (type, id)
                )
            """)

            await self.execute(
                "CREATE INDEX IF NOT EXISTS idx_saved_objects_type ON saved_objects(type)"
            )
            await self.execute(
                "CREATE INDEX IF NOT EXISTS idx_saved_objects_updated "
                "ON saved_objects(updated_at DESC)"
            )

            await self.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (1, datetime.now(timezone.utc).isoformat()),
            )
