"""Score record persistence.

Provides the aiosqlite-backed ScoreDatabase and ScoreStore, and the
DiagnosticsStore contract the scorer depends on.
"""

from trust.data.database import ScoreDatabase
from trust.data.models import ScoreRecord
from trust.data.store import DiagnosticsStore, ScoreStore

__all__ = [
    "DiagnosticsStore",
    "ScoreDatabase",
    "ScoreRecord",
    "ScoreStore",
]
