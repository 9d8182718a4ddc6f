"""Entity scoring: profile selection, aggregation and diagnostics persistence.

TrustScorer is the seam between callers (entity-scoring workflows) and the
pure aggregator. Collaborators are passed in explicitly:

- registry: weight profiles by vertical
- store: where diagnostics are attached to existing score records
  (None = no persistence)
- logger: telemetry sink for aggregation records

Persistence is best-effort and fire-and-forget: the score is returned as
soon as it is computed, and a failed or slow write never changes it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from trust.logging import get_logger
from trust.scoring.aggregator import aggregate_trust
from trust.scoring.diagnostics import diagnostics_payload
from trust.scoring.models import AggregationResult, AggregatorOptions, Signal
from trust.scoring.profiles import (
    WeightProfileRegistry,
    default_registry,
    signals_from_values,
)

if TYPE_CHECKING:
    from trust.config import AggregatorSettings
    from trust.data.store import DiagnosticsStore

logger = get_logger(__name__)


class TrustScorer:
    """Scores entities and attaches diagnostics to their stored scores.

    Args:
        settings: Aggregator defaults (prior, alpha strategy, decay, ...).
        registry: Weight profiles. None uses the built-in profiles.
        store: Score store for diagnostics. None disables persistence.
        logger: Telemetry sink. None uses this module's logger.
    """

    def __init__(
        self,
        settings: AggregatorSettings,
        registry: WeightProfileRegistry | None = None,
        store: DiagnosticsStore | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry or default_registry()
        self._store = store
        self._logger = logger or get_logger(__name__)
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        """Number of diagnostics writes still in flight."""
        return len(self._pending)

    def options_for(self, vertical: str | None = None) -> AggregatorOptions:
        """Aggregator options from settings, labelled with the vertical."""
        return AggregatorOptions.from_settings(self._settings, vertical=vertical)

    def score(
        self,
        signals: Iterable[Signal],
        vertical: str | None = None,
        options: AggregatorOptions | None = None,
        now: datetime | None = None,
    ) -> AggregationResult:
        """Aggregate signals synchronously. Explicit options take precedence."""
        return aggregate_trust(
            signals,
            options or self.options_for(vertical),
            now=now,
            telemetry_logger=self._logger,
        )

    def score_values(
        self,
        values: Mapping[str, float | None],
        vertical: str | None = None,
        timestamps: Mapping[str, datetime] | None = None,
        now: datetime | None = None,
    ) -> AggregationResult:
        """Score raw signal values using the vertical's weight profile.

        Profile keys without a value are scored as missing.
        """
        weights = self._registry.weights_for(vertical)
        signals = signals_from_values(weights, values, timestamps)
        return self.score(signals, vertical=vertical, now=now)

    async def compute_trust_for_entity(
        self,
        entity_id: str,
        signals: Iterable[Signal],
        options: AggregatorOptions | None = None,
        now: datetime | None = None,
        persist: bool = True,
    ) -> AggregationResult:
        """Aggregate signals for an entity and schedule diagnostics persistence.

        The persistence write runs as a background task; this coroutine does
        not wait for it. Call drain() to wait for outstanding writes.

        Args:
            entity_id: Product or company id the score belongs to.
            signals: Signals in caller order.
            options: Aggregation options. None builds them from settings.
            now: Evaluation instant. None means the current UTC time.
            persist: Set False to skip the diagnostics write.

        Returns:
            The computed AggregationResult, independent of persistence outcome.
        """
        result = self.score(signals, options=options, now=now)

        if persist and self._store is not None:
            task = asyncio.create_task(self._persist_diagnostics(entity_id, result))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return result

    async def drain(self) -> None:
        """Wait for all in-flight diagnostics writes to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _persist_diagnostics(
        self, entity_id: str, result: AggregationResult
    ) -> None:
        """Attach diagnostics to the entity's latest score. Never raises."""
        assert self._store is not None
        try:
            record = await self._store.find_latest_score_for(entity_id)
            if record is None:
                logger.debug("trust_diagnostics_no_score_record", entity_id=entity_id)
                return

            attached = await self._store.attach_diagnostics(
                record.id, diagnostics_payload(result)
            )
            if not attached:
                logger.warning(
                    "trust_diagnostics_not_attached",
                    entity_id=entity_id,
                    score_id=record.id,
                )
                return

            logger.debug(
                "trust_diagnostics_attached",
                entity_id=entity_id,
                score_id=record.id,
            )
        except Exception as e:
            logger.warning(
                "trust_diagnostics_persist_failed",
                entity_id=entity_id,
                error=str(e),
            )
