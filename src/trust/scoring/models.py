"""Data models for trust signal aggregation.

Scores, weights and values are plain floats in the logical range [0, 1].
Inputs may carry NaN or out-of-range numbers; the aggregator sanitizes them,
so these models do no validation of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trust.config import AggregatorSettings


class AlphaStrategy(str, Enum):
    """How the prior's pseudo-weight (alpha) is chosen."""

    MISSING_SUM = "missingSum"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: AlphaStrategy | str | None) -> AlphaStrategy:
        """Resolve a strategy name, falling back to MISSING_SUM for anything unknown."""
        if isinstance(value, AlphaStrategy):
            return value
        for strategy in cls:
            if strategy.value == value:
                return strategy
        return cls.MISSING_SUM


@dataclass(frozen=True)
class Signal:
    """A single weighted, possibly-missing observation.

    value is None when the source returned nothing for the entity.
    timestamp, when present, enables time decay for this signal.
    """

    key: str
    weight: float
    value: float | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True)
class AggregatorOptions:
    """Per-call aggregation options.

    vertical is informational only: it selects a weight profile upstream
    and is echoed in telemetry, but never alters the math.
    """

    prior: float = 0.5
    alpha_strategy: AlphaStrategy = AlphaStrategy.MISSING_SUM
    alpha_fixed: float = 0.3
    min_coverage_warn: float = 0.4
    time_decay_days: float | None = None
    vertical: str | None = None

    @classmethod
    def from_settings(
        cls, settings: AggregatorSettings, vertical: str | None = None
    ) -> AggregatorOptions:
        """Build options from AggregatorSettings."""
        return cls(
            prior=settings.prior,
            alpha_strategy=AlphaStrategy.parse(settings.alpha_strategy),
            alpha_fixed=settings.alpha_fixed,
            min_coverage_warn=settings.min_coverage_warn,
            time_decay_days=settings.time_decay_days,
            vertical=vertical,
        )


@dataclass(frozen=True)
class UsedSignal:
    """A signal that contributed data to the score."""

    key: str
    weight: float  # Normalized weight
    value: float  # Clamped value
    decayed_weight: float | None = None  # Present only if time decay applied

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "key": self.key,
            "weight": self.weight,
            "value": self.value,
        }
        if self.decayed_weight is not None:
            data["decayedWeight"] = self.decayed_weight
        return data


@dataclass(frozen=True)
class MissingSignal:
    """A signal with no usable value; its weight feeds the missing-weight total."""

    key: str
    weight: float

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "weight": self.weight}


@dataclass(frozen=True)
class Breakdown:
    """Intermediate sums of the shrinkage computation."""

    numerator: float
    denom: float
    alpha: float
    prior: float
    strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "numerator": self.numerator,
            "denom": self.denom,
            "alpha": self.alpha,
            "prior": self.prior,
            "strategy": self.strategy,
        }


@dataclass(frozen=True)
class AggregationResult:
    """Complete aggregation output with diagnostics.

    score, confidence and coverage are always within [0, 1]. Every input
    signal appears in exactly one of used_signals or missing_signals.
    """

    score: float
    confidence: float
    coverage: float
    used_signals: tuple[UsedSignal, ...]
    missing_signals: tuple[MissingSignal, ...]
    breakdown: Breakdown
    low_confidence: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable diagnostics payload (camelCase keys)."""
        return {
            "score": self.score,
            "confidence": self.confidence,
            "coverage": self.coverage,
            "usedSignals": [s.to_dict() for s in self.used_signals],
            "missingSignals": [s.to_dict() for s in self.missing_signals],
            "breakdown": self.breakdown.to_dict(),
            "lowConfidence": self.low_confidence,
            "timestamp": format_timestamp(self.timestamp),
        }


def format_timestamp(ts: datetime) -> str:
    """Format an instant as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
