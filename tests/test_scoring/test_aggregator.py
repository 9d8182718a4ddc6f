"""Tests for aggregate_trust.

Tests verify:
- All-missing and empty input return the prior with zero confidence/coverage
- Full coverage reduces to the weighted average (missingSum, alpha 0)
- Partial coverage shrinks toward the prior
- Fixed alpha strategy
- Clamping, weight scaling, zero weights, malformed values
- Low-confidence threshold boundaries
- Time decay (monotonicity, undated signals, future timestamps)
- Determinism and used/missing partitioning
"""

import math
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from trust.scoring.aggregator import aggregate_trust
from trust.scoring.models import AggregatorOptions, AlphaStrategy, Signal


def _score(signals: list[Signal], now: datetime, **kwargs):
    """Aggregate with a throwaway telemetry logger."""
    return aggregate_trust(
        signals,
        AggregatorOptions(**kwargs),
        now=now,
        telemetry_logger=MagicMock(),
    )


class TestMissingData:
    """Tests for all-missing and empty signal sets."""

    def test_all_missing_returns_prior(self, now: datetime) -> None:
        signals = [Signal("signal1", 0.5, None), Signal("signal2", 0.5, None)]
        result = _score(signals, now, prior=0.6)

        assert result.score == pytest.approx(0.6)
        assert result.confidence == 0.0
        assert result.coverage == 0.0
        assert result.low_confidence is True
        assert result.used_signals == ()
        assert [m.key for m in result.missing_signals] == ["signal1", "signal2"]

    @pytest.mark.parametrize("prior", [0.0, 0.25, 0.5, 0.9, 1.0])
    def test_all_missing_for_any_prior(self, now: datetime, prior: float) -> None:
        signals = [Signal("a", 0.2), Signal("b", 0.3), Signal("c", 0.5)]
        result = _score(signals, now, prior=prior)
        assert result.score == pytest.approx(prior)
        assert result.confidence == 0.0
        assert result.coverage == 0.0

    def test_empty_signals(self, now: datetime) -> None:
        result = _score([], now, prior=0.5)

        assert result.score == 0.5
        assert result.confidence == 0.0
        assert result.coverage == 0.0
        assert result.low_confidence is True
        assert result.breakdown.alpha == 0.0
        assert result.breakdown.denom == 0.0


class TestShrinkage:
    """Tests for the core shrinkage behaviour."""

    def test_full_coverage_is_weighted_average(self, now: datetime) -> None:
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, 0.5)]
        result = _score(signals, now, prior=0.5)

        # (0.6 * 0.8 + 0.4 * 0.5) / 1.0 = 0.68
        assert result.score == pytest.approx(0.68)
        assert result.confidence == 1.0
        assert result.coverage == 1.0
        assert result.low_confidence is False
        assert result.breakdown.alpha == 0.0
        assert len(result.used_signals) == 2
        assert result.missing_signals == ()

    def test_partial_coverage_shrinks_to_prior(self, now: datetime) -> None:
        signals = [Signal("a", 0.5, 0.9), Signal("b", 0.5, None)]
        result = _score(signals, now, prior=0.5)

        # (0.45 + 0.5 * 0.5) / (0.5 + 0.5) = 0.70
        assert result.score == pytest.approx(0.70)
        assert result.confidence == pytest.approx(0.5)
        assert result.coverage == pytest.approx(0.5)
        assert result.breakdown.alpha == pytest.approx(0.5)
        assert result.low_confidence is False

    def test_fixed_alpha(self, now: datetime) -> None:
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, None)]
        result = _score(
            signals, now, prior=0.5, alpha_strategy=AlphaStrategy.FIXED, alpha_fixed=0.3
        )

        # (0.48 + 0.3 * 0.5) / (0.6 + 0.3) = 0.70
        assert result.score == pytest.approx(0.70)
        assert result.breakdown.alpha == 0.3
        assert result.breakdown.strategy == "fixed"

    def test_fixed_alpha_caps_confidence_at_full_coverage(self, now: datetime) -> None:
        signals = [Signal("a", 0.5, 0.8), Signal("b", 0.5, 0.6)]
        result = _score(signals, now, alpha_strategy=AlphaStrategy.FIXED, alpha_fixed=0.3)

        assert result.coverage == 1.0
        assert result.confidence == pytest.approx(1.0 / 1.3)

    def test_strategy_string_accepted(self, now: datetime) -> None:
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, None)]
        result = _score(signals, now, alpha_strategy="fixed", alpha_fixed=0.3)
        assert result.breakdown.strategy == "fixed"
        assert result.breakdown.alpha == 0.3

    def test_prior_is_clamped(self, now: datetime) -> None:
        result = _score([Signal("a", 1.0, None)], now, prior=1.7)
        assert result.breakdown.prior == 1.0
        assert result.score == 1.0

    def test_breakdown_sums(self, now: datetime) -> None:
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, None)]
        result = _score(signals, now)

        assert result.breakdown.numerator == pytest.approx(0.48)
        assert result.breakdown.denom == pytest.approx(0.6)
        assert 0.0 <= result.breakdown.numerator <= result.breakdown.denom


class TestSanitization:
    """Tests for clamping and malformed input handling."""

    def test_values_clamped(self, now: datetime) -> None:
        signals = [Signal("a", 0.5, 1.5), Signal("b", 0.5, -0.3)]
        result = _score(signals, now)

        assert result.used_signals[0].value == 1.0
        assert result.used_signals[1].value == 0.0
        assert result.score == pytest.approx(0.5)

    def test_clamped_values_match_bounds(self, now: datetime) -> None:
        out_of_range = _score([Signal("a", 0.7, 1.5), Signal("b", 0.3, -0.3)], now)
        at_bounds = _score([Signal("a", 0.7, 1.0), Signal("b", 0.3, 0.0)], now)

        assert out_of_range.score == at_bounds.score
        assert out_of_range.breakdown == at_bounds.breakdown

    @pytest.mark.parametrize("factor", [0.001, 2.0, 3.7, 1000.0])
    def test_weight_scaling_invariant(self, now: datetime, factor: float) -> None:
        base = [Signal("a", 0.5, 0.9), Signal("b", 0.3, 0.2), Signal("c", 0.2, None)]
        scaled = [Signal(s.key, s.weight * factor, s.value) for s in base]

        expected = _score(base, now)
        result = _score(scaled, now)

        assert result.score == pytest.approx(expected.score)
        assert result.confidence == pytest.approx(expected.confidence)
        assert result.coverage == pytest.approx(expected.coverage)

    def test_unnormalized_weights(self, now: datetime) -> None:
        signals = [Signal("a", 2.0, 0.8), Signal("b", 2.0, 0.4)]
        result = _score(signals, now)
        assert result.score == pytest.approx(0.6)

    def test_zero_weight_signal_still_used(self, now: datetime) -> None:
        signals = [Signal("a", 0.0, 0.8), Signal("b", 1.0, 0.5)]
        result = _score(signals, now)

        assert result.score == pytest.approx(0.5)
        assert len(result.used_signals) == 2

    def test_all_zero_weights_return_prior(self, now: datetime) -> None:
        signals = [Signal("a", 0.0, 0.9), Signal("b", 0.0, 0.1)]
        result = _score(signals, now, prior=0.4)

        assert result.score == 0.4
        assert result.coverage == 0.0
        assert result.confidence == 0.0
        assert [s.weight for s in result.used_signals] == [0.0, 0.0]

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_values_are_missing(self, now: datetime, bad: float) -> None:
        signals = [Signal("a", 0.5, 0.9), Signal("b", 0.5, bad)]
        result = _score(signals, now)

        assert [s.key for s in result.used_signals] == ["a"]
        assert [s.key for s in result.missing_signals] == ["b"]
        assert result.score == pytest.approx(0.70)

    def test_nan_weight_treated_as_zero(self, now: datetime) -> None:
        signals = [Signal("a", math.nan, 0.0), Signal("b", 1.0, 0.9)]
        result = _score(signals, now)
        assert result.score == pytest.approx(0.9)

    @pytest.mark.parametrize(
        "signals",
        [
            [Signal("a", -5.0, 2.0), Signal("b", math.inf, math.nan)],
            [Signal("a", 1e308, 1e308), Signal("b", 1e308, -1e308)],
            [Signal("a", 0.0, None)],
        ],
    )
    def test_outputs_always_in_unit_range(self, now: datetime, signals) -> None:
        result = _score(signals, now, prior=math.nan, alpha_fixed=math.inf)

        for metric in (result.score, result.confidence, result.coverage):
            assert 0.0 <= metric <= 1.0
        assert result.breakdown.alpha >= 0.0
        assert result.breakdown.denom >= 0.0


class TestLowConfidence:
    """Tests for the low-confidence threshold."""

    def test_below_threshold_flags(self, now: datetime) -> None:
        signals = [Signal("a", 0.3, 0.8), Signal("b", 0.7, None)]
        result = _score(signals, now, min_coverage_warn=0.4)

        assert result.coverage == pytest.approx(0.3)
        assert result.low_confidence is True

    def test_above_threshold_does_not_flag(self, now: datetime) -> None:
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, None)]
        result = _score(signals, now, min_coverage_warn=0.4)

        assert result.coverage == pytest.approx(0.6)
        assert result.low_confidence is False

    def test_boundary_values(self, now: datetime) -> None:
        """lowConfidence == (coverage < threshold) at and around the threshold."""
        signals = [Signal("a", 0.4, 0.8), Signal("b", 0.6, None)]
        coverage = _score(signals, now).coverage

        for threshold in (
            math.nextafter(coverage, 0.0),
            coverage,
            math.nextafter(coverage, 1.0),
        ):
            result = _score(signals, now, min_coverage_warn=threshold)
            assert result.low_confidence == (result.coverage < threshold)

        assert _score(signals, now, min_coverage_warn=coverage).low_confidence is False
        assert (
            _score(
                signals, now, min_coverage_warn=math.nextafter(coverage, 1.0)
            ).low_confidence
            is True
        )


class TestTimeDecay:
    """Tests for time-decayed weights."""

    def test_recent_signal_weighs_more(self, now: datetime) -> None:
        signals = [
            Signal("old", 0.5, 0.9, now - timedelta(days=30)),
            Signal("recent", 0.5, 0.9, now - timedelta(days=1)),
        ]
        result = _score(signals, now, time_decay_days=7)
        old, recent = result.used_signals

        assert old.decayed_weight is not None
        assert recent.decayed_weight is not None
        assert recent.decayed_weight > old.decayed_weight

    def test_decayed_weight_replaces_weight_in_sums(self, now: datetime) -> None:
        signals = [Signal("a", 1.0, 0.8, now - timedelta(days=7))]
        result = _score(signals, now, time_decay_days=7)

        assert result.used_signals[0].weight == 1.0
        assert result.used_signals[0].decayed_weight == pytest.approx(0.5)
        assert result.breakdown.denom == pytest.approx(0.5)
        assert result.coverage == pytest.approx(0.5)
        # No missing signals under missingSum: alpha stays 0
        assert result.score == pytest.approx(0.8)

    def test_undated_signal_not_decayed(self, now: datetime) -> None:
        signals = [
            Signal("dated", 0.5, 0.2, now - timedelta(days=14)),
            Signal("undated", 0.5, 0.9),
        ]
        result = _score(signals, now, time_decay_days=7)
        dated, undated = result.used_signals

        assert dated.decayed_weight == pytest.approx(0.125)
        assert undated.decayed_weight is None
        assert result.breakdown.denom == pytest.approx(0.625)

    def test_future_timestamp_keeps_full_weight(self, now: datetime) -> None:
        signals = [Signal("a", 1.0, 0.7, now + timedelta(days=2))]
        result = _score(signals, now, time_decay_days=7)
        assert result.used_signals[0].decayed_weight == 1.0

    def test_decay_disabled_ignores_timestamps(self, now: datetime) -> None:
        signals = [Signal("a", 1.0, 0.7, now - timedelta(days=90))]
        result = _score(signals, now)

        assert result.used_signals[0].decayed_weight is None
        assert result.coverage == 1.0

    def test_missing_signal_never_decayed(self, now: datetime) -> None:
        signals = [
            Signal("a", 0.5, 0.7),
            Signal("b", 0.5, None, now - timedelta(days=60)),
        ]
        result = _score(signals, now, time_decay_days=7)
        assert result.missing_signals[0].weight == 0.5
        assert result.breakdown.alpha == 0.5


class TestResultShape:
    """Tests for determinism, partitioning and telemetry."""

    def test_deterministic_at_same_instant(self, now: datetime) -> None:
        signals = [
            Signal("a", 0.3, 0.9, now - timedelta(days=3)),
            Signal("b", 0.5, None),
            Signal("c", 0.2, 0.4),
        ]
        first = _score(signals, now, time_decay_days=10)
        second = _score(signals, now, time_decay_days=10)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_every_signal_in_exactly_one_list(self, now: datetime) -> None:
        signals = [
            Signal("a", 0.1, 0.5),
            Signal("b", 0.2, None),
            Signal("c", 0.3, math.nan),
            Signal("d", 0.4, 0.1),
        ]
        result = _score(signals, now)
        used = [s.key for s in result.used_signals]
        missing = [s.key for s in result.missing_signals]

        assert used == ["a", "d"]
        assert missing == ["b", "c"]
        assert sorted(used + missing) == ["a", "b", "c", "d"]

    def test_timestamp_is_evaluation_instant(self, now: datetime) -> None:
        result = _score([Signal("a", 1.0, 0.5)], now)
        assert result.timestamp == now

    def test_default_options(self, now: datetime) -> None:
        result = aggregate_trust(
            [Signal("a", 1.0, None)], now=now, telemetry_logger=MagicMock()
        )
        assert result.breakdown.prior == 0.5
        assert result.breakdown.strategy == "missingSum"

    def test_emits_one_telemetry_record(self, now: datetime) -> None:
        telemetry = MagicMock()
        aggregate_trust(
            [Signal("a", 0.6, 0.8), Signal("b", 0.4, 0.5)],
            AggregatorOptions(vertical="automotive"),
            now=now,
            telemetry_logger=telemetry,
        )

        telemetry.info.assert_called_once()
        event, = telemetry.info.call_args.args
        fields = telemetry.info.call_args.kwargs
        assert event == "trust_aggregation"
        assert fields["vertical"] == "automotive"
        assert fields["used_signals_count"] == 2
        assert fields["missing_signals_count"] == 0
        telemetry.warning.assert_not_called()
