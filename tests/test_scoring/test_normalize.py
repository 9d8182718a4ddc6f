"""Tests for weight normalization and value sanitization.

Tests verify:
- clamp_unit: in range, above, below, NaN
- is_available: None, NaN, inf, bool, strings, Decimal
- normalize_weights: sums to 1, zero total kept, negative/NaN weights, order
"""

import math
from decimal import Decimal

import pytest

from trust.scoring.models import Signal
from trust.scoring.normalize import (
    clamp_unit,
    is_available,
    normalize_weights,
    sanitize_weight,
)


class TestClampUnit:
    """Tests for clamp_unit."""

    def test_in_range_unchanged(self) -> None:
        assert clamp_unit(0.42) == 0.42

    def test_above_one(self) -> None:
        assert clamp_unit(1.5) == 1.0

    def test_below_zero(self) -> None:
        assert clamp_unit(-0.3) == 0.0

    def test_nan_clamps_to_zero(self) -> None:
        assert clamp_unit(math.nan) == 0.0


class TestIsAvailable:
    """Tests for is_available."""

    @pytest.mark.parametrize("value", [0.0, 0.5, 1.0, 2.0, -1.0, 3, Decimal("0.7")])
    def test_finite_numbers_available(self, value: object) -> None:
        assert is_available(value) is True

    @pytest.mark.parametrize(
        "value",
        [None, math.nan, math.inf, -math.inf, True, "0.5", Decimal("NaN")],
    )
    def test_unusable_values_missing(self, value: object) -> None:
        assert is_available(value) is False


class TestSanitizeWeight:
    """Tests for sanitize_weight."""

    def test_negative_becomes_zero(self) -> None:
        assert sanitize_weight(-0.2) == 0.0

    def test_nan_becomes_zero(self) -> None:
        assert sanitize_weight(math.nan) == 0.0

    def test_int_coerced_to_float(self) -> None:
        result = sanitize_weight(2)
        assert result == 2.0
        assert isinstance(result, float)


class TestNormalizeWeights:
    """Tests for normalize_weights."""

    def test_weights_sum_to_one(self) -> None:
        signals = [Signal("a", 2.0, 0.8), Signal("b", 2.0, 0.4), Signal("c", 4.0)]
        result = normalize_weights(signals)
        assert [s.weight for s in result] == [0.25, 0.25, 0.5]
        assert sum(s.weight for s in result) == pytest.approx(1.0)

    def test_already_normalized_is_exact(self) -> None:
        """Weights that already sum to 1 are divided by exactly 1.0."""
        signals = [Signal("a", 0.6, 0.8), Signal("b", 0.4, 0.5)]
        result = normalize_weights(signals)
        assert [s.weight for s in result] == [0.6, 0.4]

    def test_zero_total_returns_unchanged(self) -> None:
        signals = [Signal("a", 0.0, 0.8), Signal("b", 0.0, None)]
        result = normalize_weights(signals)
        assert [s.weight for s in result] == [0.0, 0.0]

    def test_negative_weight_treated_as_zero(self) -> None:
        signals = [Signal("a", -1.0, 0.8), Signal("b", 1.0, 0.5)]
        result = normalize_weights(signals)
        assert [s.weight for s in result] == [0.0, 1.0]

    def test_overflowing_total_still_normalizes(self) -> None:
        signals = [Signal("a", 1e308, 0.8), Signal("b", 1e308, 0.5)]
        result = normalize_weights(signals)
        assert [s.weight for s in result] == [0.5, 0.5]

    def test_preserves_order_and_fields(self, now) -> None:
        signals = [Signal("z", 1.0, None, now), Signal("a", 3.0, 0.1)]
        result = normalize_weights(signals)
        assert [s.key for s in result] == ["z", "a"]
        assert result[0].timestamp == now
        assert result[1].value == 0.1

    def test_does_not_mutate_input(self) -> None:
        signals = [Signal("a", 2.0, 0.8)]
        normalize_weights(signals)
        assert signals[0].weight == 2.0

    def test_empty_list(self) -> None:
        assert normalize_weights([]) == []
