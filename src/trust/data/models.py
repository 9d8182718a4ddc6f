"""Data models for stored trust scores."""

from dataclasses import dataclass


@dataclass
class ScoreRecord:
    """A previously computed score for a product or company.

    metadata holds the JSON diagnostics of the aggregation that produced
    (or last refreshed) the score; None until diagnostics are attached.
    """

    id: str
    entity_id: str
    scope: str  # "product" or "company"
    score: float
    confidence: float
    created_at_ms: int
    metadata: str | None = None
