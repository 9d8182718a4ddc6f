"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class AggregatorSettings(BaseSettings):
    """Bayesian shrinkage aggregator parameters.

    Every field maps to one aggregator option. All of them can be set through
    the TRUST_ environment variable prefix, e.g. TRUST_ALPHA_STRATEGY=fixed.
    """

    model_config = SettingsConfigDict(env_prefix="TRUST_")

    prior: float = 0.5  # Shrinkage target when data is absent
    alpha_strategy: Literal["missingSum", "fixed"] = "missingSum"
    alpha_fixed: float = 0.3  # Only read when alpha_strategy == "fixed"
    min_coverage_warn: float = 0.4  # Coverage below this flags low confidence
    time_decay_days: float | None = None  # None disables recency weighting
    include_diagnostics: bool = False  # Surface full breakdown to API consumers


class ProfileSettings(BaseSettings):
    """Weight profile overrides.

    overrides_json is a JSON object mapping vertical name to a
    {signal_key: weight} table. Entries are merged over the built-in
    profiles when the registry is built; the "default" key replaces the
    default profile.
    """

    model_config = SettingsConfigDict(env_prefix="PROFILE_")

    overrides_json: str = ""


class GradingSettings(BaseSettings):
    """Letter grade thresholds on the 0-100 scale."""

    model_config = SettingsConfigDict(env_prefix="GRADE_")

    a: float = 85.0
    b: float = 70.0
    c: float = 55.0
    d: float = 40.0


class DatabaseSettings(BaseSettings):
    """Score store location."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    path: str = "data/trust.db"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    aggregator: AggregatorSettings = AggregatorSettings()
    profiles: ProfileSettings = ProfileSettings()
    grading: GradingSettings = GradingSettings()
    database: DatabaseSettings = DatabaseSettings()
