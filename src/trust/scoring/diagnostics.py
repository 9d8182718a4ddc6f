"""Diagnostics assembly, telemetry and output shaping for aggregation results.

One path computes everything; what external consumers see is decided
only in public_view().
"""

import json
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import structlog

from trust.scoring.grading import letter_grade
from trust.scoring.models import (
    AggregationResult,
    AggregatorOptions,
    AlphaStrategy,
    Breakdown,
    MissingSignal,
    UsedSignal,
    format_timestamp,
)
from trust.scoring.shrinkage import ShrinkageOutcome


def build_result(
    outcome: ShrinkageOutcome,
    used: Sequence[UsedSignal],
    missing: Sequence[MissingSignal],
    numerator: float,
    denom: float,
    alpha: float,
    strategy: AlphaStrategy,
    evaluated_at: datetime,
) -> AggregationResult:
    """Package a shrinkage outcome and its inputs into an AggregationResult."""
    return AggregationResult(
        score=outcome.score,
        confidence=outcome.confidence,
        coverage=outcome.coverage,
        used_signals=tuple(used),
        missing_signals=tuple(missing),
        breakdown=Breakdown(
            numerator=numerator,
            denom=denom,
            alpha=alpha,
            prior=outcome.prior,
            strategy=strategy.value,
        ),
        low_confidence=outcome.low_confidence,
        timestamp=evaluated_at,
    )


def telemetry_fields(
    result: AggregationResult, options: AggregatorOptions
) -> dict[str, Any]:
    """Flat per-call telemetry record."""
    return {
        "score": result.score,
        "confidence": result.confidence,
        "coverage": result.coverage,
        "low_confidence": result.low_confidence,
        "vertical": options.vertical or "default",
        "used_signals_count": len(result.used_signals),
        "missing_signals_count": len(result.missing_signals),
        "alpha_strategy": result.breakdown.strategy,
        "alpha": result.breakdown.alpha,
        "timestamp": format_timestamp(result.timestamp),
    }


def emit_telemetry(
    result: AggregationResult,
    options: AggregatorOptions,
    logger: structlog.stdlib.BoundLogger,
) -> None:
    """Log one trust_aggregation record, plus a warning on low coverage."""
    fields = telemetry_fields(result, options)
    logger.info("trust_aggregation", **fields)

    if result.low_confidence:
        logger.warning(
            "trust_low_coverage",
            vertical=fields["vertical"],
            coverage=result.coverage,
            min_coverage_warn=options.min_coverage_warn,
            missing=[s.key for s in result.missing_signals],
        )


def diagnostics_payload(result: AggregationResult) -> str:
    """Serialize the full diagnostics for attaching to a stored score record."""
    return json.dumps(result.to_dict(), sort_keys=True)


def public_view(
    result: AggregationResult,
    include_diagnostics: bool,
    grade: str | None = None,
) -> dict[str, Any]:
    """Shape a result for external consumers.

    Always carries score, confidence and grade. The full diagnostics
    (breakdown, used/missing signals) are added only when
    include_diagnostics is set.
    """
    view: dict[str, Any] = {
        "score": result.score,
        "confidence": result.confidence,
        "grade": grade if grade is not None else letter_grade(result.score),
    }
    if include_diagnostics:
        view["diagnostics"] = result.to_dict()
    return view
