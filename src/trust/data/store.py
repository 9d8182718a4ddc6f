"""Score record persistence.

DiagnosticsStore is the contract the scorer depends on; ScoreStore is the
SQLite implementation. All SQL is isolated behind ScoreStore.
"""

import time
import uuid
from abc import ABC, abstractmethod

from trust.data.database import ScoreDatabase
from trust.data.models import ScoreRecord
from trust.logging import get_logger

logger = get_logger(__name__)

_SELECT_COLUMNS = "id, entity_id, scope, score, confidence, created_at_ms, metadata"


class DiagnosticsStore(ABC):
    """Store that owns score records and accepts diagnostics metadata."""

    @abstractmethod
    async def find_latest_score_for(self, entity_id: str) -> ScoreRecord | None:
        """Return the most recent score record for an entity, if any."""
        ...

    @abstractmethod
    async def attach_diagnostics(self, score_id: str, payload: str) -> bool:
        """Attach a diagnostics JSON payload to a score record.

        Returns False when the record does not exist.
        """
        ...


def _row_to_record(row: tuple) -> ScoreRecord:
    return ScoreRecord(
        id=row[0],
        entity_id=row[1],
        scope=row[2],
        score=row[3],
        confidence=row[4],
        created_at_ms=row[5],
        metadata=row[6],
    )


class ScoreStore(DiagnosticsStore):
    """Async SQLite store for score records.

    Usage:
        async with ScoreDatabase("data/trust.db") as database:
            store = ScoreStore(database)
            score_id = await store.insert_score("prod-1", "product", 0.72, 0.8)
    """

    def __init__(self, database: ScoreDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def insert_score(
        self,
        entity_id: str,
        scope: str,
        score: float,
        confidence: float,
        created_at_ms: int | None = None,
    ) -> str:
        """Insert a new score record and return its id."""
        score_id = str(uuid.uuid4())
        if created_at_ms is None:
            created_at_ms = int(time.time() * 1000)

        await self._database.db.execute(
            "INSERT INTO scores "
            "(id, entity_id, scope, score, confidence, created_at_ms) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (score_id, entity_id, scope, score, confidence, created_at_ms),
        )
        await self._database.db.commit()

        logger.debug("inserted_score", entity_id=entity_id, score_id=score_id)
        return score_id

    async def attach_diagnostics(self, score_id: str, payload: str) -> bool:
        cursor = await self._database.db.execute(
            "UPDATE scores SET metadata = ? WHERE id = ?",
            (payload, score_id),
        )
        await self._database.db.commit()

        updated = cursor.rowcount > 0
        logger.debug("attached_diagnostics", score_id=score_id, updated=updated)
        return updated

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def find_latest_score_for(self, entity_id: str) -> ScoreRecord | None:
        cursor = await self._database.db.execute(
            f"SELECT {_SELECT_COLUMNS} FROM scores WHERE entity_id = ? "
            "ORDER BY created_at_ms DESC, rowid DESC LIMIT 1",
            (entity_id,),
        )
        row = await cursor.fetchone()
        return _row_to_record(row) if row is not None else None

    async def get_score(self, score_id: str) -> ScoreRecord | None:
        """Fetch a score record by id."""
        cursor = await self._database.db.execute(
            f"SELECT {_SELECT_COLUMNS} FROM scores WHERE id = ?",
            (score_id,),
        )
        row = await cursor.fetchone()
        return _row_to_record(row) if row is not None else None
