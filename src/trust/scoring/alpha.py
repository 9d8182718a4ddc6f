"""Alpha strategy selection.

Alpha is the pseudo-weight given to the prior. Strategies are plain
functions of (missing_weight, alpha_fixed) looked up in a registry, so a new
strategy means a new enum member and a new entry here; the shrinkage math
is untouched.
"""

from collections.abc import Callable

from trust.scoring.models import AlphaStrategy
from trust.scoring.normalize import finite_float

AlphaFn = Callable[[float, float], float]


def _missing_sum(missing_weight: float, alpha_fixed: float) -> float:
    return missing_weight


def _fixed(missing_weight: float, alpha_fixed: float) -> float:
    return alpha_fixed


_STRATEGIES: dict[AlphaStrategy, AlphaFn] = {
    AlphaStrategy.MISSING_SUM: _missing_sum,
    AlphaStrategy.FIXED: _fixed,
}


def select_alpha(
    strategy: AlphaStrategy | str,
    missing_weight: float,
    alpha_fixed: float,
) -> float:
    """Compute alpha for the given strategy.

    missingSum: alpha = missing_weight (exactly 0 when nothing is missing).
    fixed: alpha = alpha_fixed regardless of coverage.

    The result is always finite and non-negative; anything else becomes 0.
    """
    alpha = finite_float(
        _STRATEGIES[AlphaStrategy.parse(strategy)](missing_weight, alpha_fixed)
    )
    if alpha is None or alpha < 0:
        return 0.0
    return alpha
