"""Trust signal aggregation with Bayesian shrinkage.

aggregate_trust() is the single synchronous entry point:

1. Normalize weights to sum to 1
2. Split signals into available (finite value) and missing
3. Apply time decay to dated, available signals when enabled
4. Pick alpha from the configured strategy
5. Shrink the weighted average toward the prior
6. Assemble diagnostics and emit one telemetry record

The computation holds no shared state and performs no I/O beyond the
telemetry log call, so it is safe to call concurrently from any thread.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

import structlog

from trust.logging import get_logger
from trust.scoring.alpha import select_alpha
from trust.scoring.decay import decay_enabled, decay_factor
from trust.scoring.diagnostics import build_result, emit_telemetry
from trust.scoring.models import (
    AggregationResult,
    AggregatorOptions,
    AlphaStrategy,
    MissingSignal,
    Signal,
    UsedSignal,
)
from trust.scoring.normalize import clamp_unit, finite_float, normalize_weights
from trust.scoring.shrinkage import compute_shrinkage

logger = get_logger(__name__)


def aggregate_trust(
    signals: Iterable[Signal],
    options: AggregatorOptions | None = None,
    *,
    now: datetime | None = None,
    telemetry_logger: structlog.stdlib.BoundLogger | None = None,
) -> AggregationResult:
    """Combine weighted, possibly-missing signals into one trust score.

    Never raises for malformed input: bad weights become 0, missing or
    non-finite values are reported in missing_signals, and out-of-range
    values are clamped.

    Args:
        signals: Signals in caller order; keys are expected to be unique.
        options: Aggregation options. None uses the defaults.
        now: Evaluation instant used for decay and the result timestamp.
            None means the current UTC time. Pass a fixed value for
            reproducible results.
        telemetry_logger: Telemetry sink. None uses this module's logger.

    Returns:
        AggregationResult with score, confidence, coverage and diagnostics.
    """
    options = options or AggregatorOptions()
    evaluated_at = now or datetime.now(timezone.utc)
    strategy = AlphaStrategy.parse(options.alpha_strategy)
    decay_on = decay_enabled(options.time_decay_days)

    used: list[UsedSignal] = []
    missing: list[MissingSignal] = []
    numerator = 0.0
    denom = 0.0
    missing_weight = 0.0

    for signal in normalize_weights(list(signals)):
        raw_value = finite_float(signal.value)
        if raw_value is None:
            missing_weight += signal.weight
            missing.append(MissingSignal(key=signal.key, weight=signal.weight))
            continue

        value = clamp_unit(raw_value)
        effective_weight = signal.weight
        decayed_weight: float | None = None

        # Undated signals keep their full weight even with decay enabled
        if decay_on and signal.timestamp is not None:
            decayed_weight = signal.weight * decay_factor(
                signal.timestamp, options.time_decay_days, evaluated_at
            )
            effective_weight = decayed_weight

        numerator += effective_weight * value
        denom += effective_weight
        used.append(
            UsedSignal(
                key=signal.key,
                weight=signal.weight,
                value=value,
                decayed_weight=decayed_weight,
            )
        )

    alpha = select_alpha(strategy, missing_weight, options.alpha_fixed)
    outcome = compute_shrinkage(
        numerator=numerator,
        denom=denom,
        alpha=alpha,
        prior=options.prior,
        min_coverage_warn=options.min_coverage_warn,
    )

    result = build_result(
        outcome,
        used=used,
        missing=missing,
        numerator=numerator,
        denom=denom,
        alpha=alpha,
        strategy=strategy,
        evaluated_at=evaluated_at,
    )
    emit_telemetry(result, options, telemetry_logger or logger)
    return result
