"""Async SQLite database manager for trust score persistence.

Uses aiosqlite for non-blocking database operations with WAL mode
so diagnostics writes do not block concurrent score reads.
"""

import os
from typing import Self

import aiosqlite

from trust.exceptions import PersistenceError
from trust.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS scores (
    id TEXT PRIMARY KEY,
    entity_id TEXT NOT NULL,
    scope TEXT NOT NULL,
    score REAL NOT NULL,
    confidence REAL NOT NULL,
    created_at_ms INTEGER NOT NULL,
    metadata TEXT
);
"""

_CREATE_INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_scores_entity_created
    ON scores(entity_id, created_at_ms);
"""


class ScoreDatabase:
    """Async SQLite connection manager for score records.

    Usage:
        async with ScoreDatabase("data/trust.db") as db:
            await db.db.execute("SELECT ...")
    """

    def __init__(self, db_path: str = "data/trust.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises PersistenceError if not connected.
        """
        if self._connection is None:
            raise PersistenceError("Database not connected. Call connect() first.")
        return self._connection

    async def connect(self) -> None:
        """Open the connection, configure pragmas and create the schema.

        Creates the parent directory if it does not exist.
        Sets WAL journal mode and NORMAL synchronous for performance.
        """
        db_dir = os.path.dirname(self._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)

        await self._connection.execute("PRAGMA journal_mode=WAL")
        await self._connection.execute("PRAGMA synchronous=NORMAL")

        await self._create_tables()
        await self._ensure_schema_version()

        logger.info("score_db_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the database connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("score_db_closed", db_path=self._db_path)

    async def _create_tables(self) -> None:
        assert self._connection is not None
        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.executescript(_CREATE_INDEXES_SQL)
        await self._connection.commit()

    async def _ensure_schema_version(self) -> None:
        assert self._connection is not None
        cursor = await self._connection.execute(
            "SELECT version FROM schema_version LIMIT 1"
        )
        row = await cursor.fetchone()
        if row is None:
            await self._connection.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await self._connection.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
