"""Exponential time decay for dated signals.

The configured ``time_decay_days`` is converted to ``H = days / ln 2`` and a
signal aged ``a`` days is weighted by ``exp(-a / H)``. Future timestamps are
not decayed.
"""

import math
from datetime import datetime, timezone

from trust.scoring.normalize import clamp_unit

_SECONDS_PER_DAY = 86400.0


def half_life_days(time_decay_days: float) -> float:
    """Convert the configured decay period into the exponential scale H."""
    return time_decay_days / math.log(2)


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def age_days(timestamp: datetime, now: datetime) -> float:
    """Fractional days from timestamp to now. Negative for future timestamps."""
    delta = _as_utc(now) - _as_utc(timestamp)
    return delta.total_seconds() / _SECONDS_PER_DAY


def decay_enabled(time_decay_days: float | None) -> bool:
    """True when time_decay_days is a positive finite number."""
    return (
        time_decay_days is not None
        and math.isfinite(time_decay_days)
        and time_decay_days > 0
    )


def decay_factor(
    timestamp: datetime, time_decay_days: float | None, now: datetime
) -> float:
    """Weight multiplier in [0, 1] for a signal observed at timestamp.

    Args:
        timestamp: When the signal was observed.
        time_decay_days: Decay period in days. Non-positive or None disables decay.
        now: Evaluation instant.

    Returns:
        exp(-age / H) clamped to [0, 1]; 1.0 for future timestamps or when
        decay is disabled.
    """
    if not decay_enabled(time_decay_days):
        return 1.0

    age = age_days(timestamp, now)
    if age < 0:
        return 1.0

    return clamp_unit(math.exp(-age / half_life_days(time_decay_days)))
