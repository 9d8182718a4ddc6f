"""Shared test fixtures for the trust aggregation engine."""

from datetime import datetime, timezone

import pytest

from trust.config import AggregatorSettings, AppSettings, DatabaseSettings

#: Fixed evaluation instant so decay and timestamps are reproducible.
NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def aggregator_settings() -> AggregatorSettings:
    """Default aggregator settings (prior 0.5, missingSum, no decay)."""
    return AggregatorSettings(
        prior=0.5,
        alpha_strategy="missingSum",
        alpha_fixed=0.3,
        min_coverage_warn=0.4,
        time_decay_days=None,
        include_diagnostics=False,
    )


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with test defaults and a temporary database path."""
    return AppSettings(
        log_level="DEBUG",
        database=DatabaseSettings(path=str(tmp_path / "trust.db")),
    )
