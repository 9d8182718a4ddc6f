"""Trust signal aggregation.

Combines sparse, weighted, possibly-missing signals about a product or
company into one trust score using Bayesian shrinkage toward a prior.
Includes weight normalization, time decay, alpha strategies, diagnostics
assembly, weight profiles per vertical, and the TrustScorer that wires
aggregation to diagnostics persistence.
"""

from trust.scoring.aggregator import aggregate_trust
from trust.scoring.alpha import select_alpha
from trust.scoring.decay import decay_factor, half_life_days
from trust.scoring.diagnostics import diagnostics_payload, public_view
from trust.scoring.grading import letter_grade
from trust.scoring.models import (
    AggregationResult,
    AggregatorOptions,
    AlphaStrategy,
    Breakdown,
    MissingSignal,
    Signal,
    UsedSignal,
)
from trust.scoring.normalize import clamp_unit, normalize_weights
from trust.scoring.profiles import (
    DEFAULT_WEIGHTS,
    VERTICAL_WEIGHTS,
    WeightProfileRegistry,
    breakdown_to_signals,
    default_registry,
    signals_from_values,
)
from trust.scoring.scorer import TrustScorer
from trust.scoring.shrinkage import ShrinkageOutcome, compute_shrinkage

__all__ = [
    "DEFAULT_WEIGHTS",
    "VERTICAL_WEIGHTS",
    "AggregationResult",
    "AggregatorOptions",
    "AlphaStrategy",
    "Breakdown",
    "MissingSignal",
    "ShrinkageOutcome",
    "Signal",
    "TrustScorer",
    "UsedSignal",
    "WeightProfileRegistry",
    "aggregate_trust",
    "breakdown_to_signals",
    "clamp_unit",
    "compute_shrinkage",
    "decay_factor",
    "default_registry",
    "diagnostics_payload",
    "half_life_days",
    "letter_grade",
    "normalize_weights",
    "public_view",
    "select_alpha",
    "signals_from_values",
]
