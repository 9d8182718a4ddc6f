"""Weight normalization and value sanitization.

Nothing here raises: malformed weights and values are sanitized so the
aggregator can always produce a score.
"""

import math
from dataclasses import replace
from decimal import Decimal
from numbers import Real

from trust.scoring.models import Signal

_NUMERIC = (Real, Decimal)


def clamp_unit(x: float) -> float:
    """Clamp a number to [0, 1]. NaN clamps to 0."""
    if math.isnan(x):
        return 0.0
    return max(0.0, min(1.0, x))


def finite_float(x: object) -> float | None:
    """float(x) when x is a finite number, else None."""
    if not isinstance(x, _NUMERIC) or isinstance(x, bool):
        return None
    if isinstance(x, Decimal) and not x.is_finite():
        return None
    try:
        result = float(x)  # type: ignore[arg-type]
    except (OverflowError, ValueError):
        return None
    return result if math.isfinite(result) else None


def is_available(value: object) -> bool:
    """True when a signal value is a finite number.

    None, NaN, infinities, booleans and non-numeric objects are all
    treated as missing rather than as errors.
    """
    return finite_float(value) is not None


def sanitize_weight(weight: object) -> float:
    """Coerce a raw weight to a finite, non-negative float (0.0 otherwise)."""
    result = finite_float(weight)
    if result is None or result < 0:
        return 0.0
    return result


def normalize_weights(signals: list[Signal]) -> list[Signal]:
    """Rescale weights so they sum to 1.

    Weights are sanitized first (negative/non-finite -> 0). When the total
    is 0 the sanitized signals are returned as-is, which drives every
    downstream contribution, and so coverage, to 0.

    Args:
        signals: Raw signals in caller order.

    Returns:
        New list of signals in the same order. Inputs are not mutated.
    """
    sanitized = [replace(s, weight=sanitize_weight(s.weight)) for s in signals]
    total = sum(s.weight for s in sanitized)

    if total <= 0:
        return sanitized

    # Finite weights whose sum overflows: rescale by the largest first
    if math.isinf(total):
        peak = max(s.weight for s in sanitized)
        sanitized = [replace(s, weight=s.weight / peak) for s in sanitized]
        total = sum(s.weight for s in sanitized)

    return [replace(s, weight=s.weight / total) for s in sanitized]
