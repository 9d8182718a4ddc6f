"""Bayesian shrinkage of observed signals toward a prior.

    posterior  = (numerator + alpha * prior) / (denom + alpha)
    confidence = denom / (denom + alpha)
    coverage   = denom

With alpha = 0 (missingSum, nothing missing) the posterior is the plain
weighted average; with denom = 0 it is the prior.
"""

from dataclasses import dataclass

from trust.scoring.normalize import clamp_unit, finite_float

DEFAULT_PRIOR = 0.5


@dataclass(frozen=True)
class ShrinkageOutcome:
    """Score and derived metrics, all within [0, 1]."""

    score: float
    confidence: float
    coverage: float
    low_confidence: bool
    prior: float  # Clamped prior actually used


def sanitize_prior(prior: float) -> float:
    """Clamp the prior to [0, 1]; a non-numeric or non-finite prior falls back to 0.5."""
    value = finite_float(prior)
    if value is None:
        return DEFAULT_PRIOR
    return clamp_unit(value)


def compute_shrinkage(
    numerator: float,
    denom: float,
    alpha: float,
    prior: float,
    min_coverage_warn: float,
) -> ShrinkageOutcome:
    """Combine observed sums with the prior.

    Args:
        numerator: Sum of effective_weight * clamped_value over available signals.
        denom: Sum of effective weights over available signals.
        alpha: Pseudo-weight of the prior (>= 0).
        prior: Shrinkage target; clamped to [0, 1].
        min_coverage_warn: Coverage strictly below this flags low confidence.

    Returns:
        ShrinkageOutcome with score, confidence and coverage in [0, 1].
    """
    prior = sanitize_prior(prior)
    total = denom + alpha

    if total > 0:
        posterior = (numerator + alpha * prior) / total
        confidence = clamp_unit(denom / total)
    else:
        posterior = prior
        confidence = 0.0

    coverage = clamp_unit(denom)

    return ShrinkageOutcome(
        score=clamp_unit(posterior),
        confidence=confidence,
        coverage=coverage,
        low_confidence=coverage < min_coverage_warn,
        prior=prior,
    )
