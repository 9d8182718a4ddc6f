"""Letter grade derivation from a trust score."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trust.config import GradingSettings

#: Grade cutoffs on the 0-100 scale, highest first.
DEFAULT_THRESHOLDS: dict[str, float] = {
    "A": 85.0,
    "B": 70.0,
    "C": 55.0,
    "D": 40.0,
}


def thresholds_from_settings(settings: GradingSettings) -> dict[str, float]:
    """Build a threshold table from GradingSettings."""
    return {"A": settings.a, "B": settings.b, "C": settings.c, "D": settings.d}


def letter_grade(score: float, thresholds: dict[str, float] | None = None) -> str:
    """Map a score to A-F.

    Scores in [0, 1] are treated as fractions and scaled to percent;
    anything above 1 is assumed to already be on the 0-100 scale.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    percent = score * 100 if score <= 1 else score

    for grade in ("A", "B", "C", "D"):
        if percent >= thresholds[grade]:
            return grade
    return "F"
