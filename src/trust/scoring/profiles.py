"""Weight profiles: the default signal weights plus per-vertical overrides.

Profiles are immutable configuration built once at startup. A vertical
selects its profile; the aggregator itself never looks at the vertical.
"""

from __future__ import annotations

import functools
import json
import math
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from trust.exceptions import ProfileError
from trust.logging import get_logger
from trust.scoring.models import Signal

if TYPE_CHECKING:
    from trust.config import ProfileSettings

logger = get_logger(__name__)

#: Default weights for general products. Sums to 1.0.
DEFAULT_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "review_sentiment": 0.20,
        "complaint_rate": 0.15,
        "warranty_score": 0.20,
        "recall_freq": 0.20,
        "regulatory_flags": 0.10,
        "financial_health": 0.10,
        "delivery_kpis": 0.05,
    }
)

#: Vertical-specific overrides. Each table sums to 1.0.
VERTICAL_WEIGHTS: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        # Safety recalls dominate for vehicles
        "automotive": MappingProxyType(
            {
                "recall_freq": 0.35,
                "complaint_rate": 0.20,
                "warranty_score": 0.15,
                "review_sentiment": 0.10,
                "regulatory_flags": 0.10,
                "financial_health": 0.05,
                "delivery_kpis": 0.05,
            }
        ),
        "electronics": MappingProxyType(
            {
                "review_sentiment": 0.25,
                "warranty_score": 0.25,
                "recall_freq": 0.15,
                "complaint_rate": 0.15,
                "regulatory_flags": 0.05,
                "financial_health": 0.05,
                "delivery_kpis": 0.10,
            }
        ),
        "appliance": MappingProxyType(
            {
                "warranty_score": 0.25,
                "recall_freq": 0.25,
                "complaint_rate": 0.15,
                "review_sentiment": 0.15,
                "regulatory_flags": 0.10,
                "financial_health": 0.05,
                "delivery_kpis": 0.05,
            }
        ),
        "financial_services": MappingProxyType(
            {
                "complaint_rate": 0.30,
                "regulatory_flags": 0.30,
                "financial_health": 0.20,
                "review_sentiment": 0.15,
                "delivery_kpis": 0.05,
            }
        ),
    }
)


def _vertical_key(vertical: str) -> str:
    return vertical.strip().lower().replace("-", "_").replace(" ", "_")


def _freeze(name: str, weights: Mapping[str, Any]) -> Mapping[str, float]:
    frozen: dict[str, float] = {}
    for key, weight in weights.items():
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ProfileError(f"Profile {name!r}: weight for {key!r} is not a number")
        if not math.isfinite(weight) or weight < 0:
            raise ProfileError(
                f"Profile {name!r}: weight for {key!r} must be finite and >= 0, got {weight}"
            )
        frozen[key] = float(weight)
    return MappingProxyType(frozen)


class WeightProfileRegistry:
    """Immutable lookup of weight tables by vertical.

    Args:
        default: Weight table used when no vertical override matches.
        overrides: Vertical name -> weight table. Names are matched
            case-insensitively, with '-' and ' ' treated as '_'.

    Raises:
        ProfileError: If any weight is negative, non-finite or non-numeric.
    """

    def __init__(
        self,
        default: Mapping[str, float] = DEFAULT_WEIGHTS,
        overrides: Mapping[str, Mapping[str, float]] = VERTICAL_WEIGHTS,
    ) -> None:
        self._default = _freeze("default", default)
        self._overrides: Mapping[str, Mapping[str, float]] = MappingProxyType(
            {
                _vertical_key(name): _freeze(name, table)
                for name, table in overrides.items()
            }
        )

    @property
    def default(self) -> Mapping[str, float]:
        return self._default

    @property
    def verticals(self) -> list[str]:
        """Names of verticals with their own profile, sorted."""
        return sorted(self._overrides)

    def weights_for(self, vertical: str | None) -> Mapping[str, float]:
        """Return the profile for a vertical, or the default profile."""
        if vertical:
            profile = self._overrides.get(_vertical_key(vertical))
            if profile is not None:
                return profile
        return self._default

    @classmethod
    def from_settings(cls, settings: ProfileSettings) -> WeightProfileRegistry:
        """Build a registry from the built-in tables plus configured overrides.

        A "default" entry in the overrides replaces the default profile;
        every other entry adds or replaces a vertical profile.

        Raises:
            ProfileError: If overrides_json is not a JSON object of weight tables.
        """
        default: Mapping[str, float] = DEFAULT_WEIGHTS
        overrides: dict[str, Mapping[str, float]] = dict(VERTICAL_WEIGHTS)

        if settings.overrides_json.strip():
            try:
                extra = json.loads(settings.overrides_json)
            except json.JSONDecodeError as e:
                raise ProfileError(f"Invalid profile overrides JSON: {e}") from e

            if not isinstance(extra, dict) or not all(
                isinstance(t, dict) for t in extra.values()
            ):
                raise ProfileError(
                    "Profile overrides must map vertical names to weight tables"
                )

            for name, table in extra.items():
                if _vertical_key(name) == "default":
                    default = table
                else:
                    overrides[_vertical_key(name)] = table

            logger.info("weight_profiles_overridden", verticals=sorted(extra))

        return cls(default=default, overrides=overrides)


@functools.cache
def default_registry() -> WeightProfileRegistry:
    """Process-wide registry of the built-in profiles, built on first use."""
    return WeightProfileRegistry()


def signals_from_values(
    weights: Mapping[str, float],
    values: Mapping[str, float | None],
    timestamps: Mapping[str, datetime] | None = None,
) -> list[Signal]:
    """Build one signal per profile key, in profile order.

    Profile keys absent from values become value-absent signals, so they
    count toward missing weight. Values for keys outside the profile are
    ignored.
    """
    timestamps = timestamps or {}

    unknown = sorted(set(values) - set(weights))
    if unknown:
        logger.debug("signal_values_outside_profile", keys=unknown)

    return [
        Signal(
            key=key,
            weight=weight,
            value=values.get(key),
            timestamp=timestamps.get(key),
        )
        for key, weight in weights.items()
    ]


def breakdown_to_signals(
    breakdown: Iterable[Mapping[str, Any]],
    include_zero_values: bool = False,
) -> list[Signal]:
    """Convert a metric breakdown on the 0-100 scale into signals.

    Each item needs "metric", "normalized" (0-100) and "weight". Items with
    normalized <= 0 are dropped unless include_zero_values is set, since a
    zero there usually means "no data" rather than "worst possible".
    """
    return [
        Signal(
            key=item["metric"],
            weight=item["weight"],
            value=item["normalized"] / 100,
        )
        for item in breakdown
        if include_zero_values or item["normalized"] > 0
    ]
