"""Command-line entry point for scoring a signal set.

Reads a JSON list of signals, aggregates them with settings loaded from the
environment, and prints the public view as JSON. With --entity-id the
diagnostics are also attached to that entity's latest stored score.

Signal file format:
    [
        {"key": "recall_freq", "weight": 0.2, "value": 0.9,
         "timestamp": "2026-09-01T00:00:00Z"},
        {"key": "complaint_rate", "weight": 0.15, "value": null}
    ]

Usage:
    python -m trust.main signals.json --vertical automotive --include-diagnostics
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from trust.config import AppSettings
from trust.data.database import ScoreDatabase
from trust.data.store import ScoreStore
from trust.logging import get_logger, setup_logging
from trust.scoring.diagnostics import public_view
from trust.scoring.grading import letter_grade, thresholds_from_settings
from trust.scoring.models import AggregationResult, Signal
from trust.scoring.profiles import WeightProfileRegistry
from trust.scoring.scorer import TrustScorer


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def load_signals(path: Path) -> list[Signal]:
    """Load signals from a JSON file containing a list of signal objects."""
    items: list[dict[str, Any]] = json.loads(path.read_text(encoding="utf-8"))
    return [
        Signal(
            key=item["key"],
            weight=item.get("weight", 0.0),
            value=item.get("value"),
            timestamp=_parse_timestamp(item.get("timestamp")),
        )
        for item in items
    ]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trust",
        description="Aggregate trust signals into a score with confidence.",
    )
    parser.add_argument("signals", type=Path, help="JSON file with a list of signals")
    parser.add_argument("--vertical", default=None, help="entity vertical label")
    parser.add_argument(
        "--entity-id",
        default=None,
        help="attach diagnostics to this entity's latest stored score",
    )
    parser.add_argument(
        "--include-diagnostics",
        action="store_true",
        default=None,
        help="include the full breakdown (overrides TRUST_INCLUDE_DIAGNOSTICS)",
    )
    parser.add_argument(
        "--now",
        type=_parse_timestamp,
        default=None,
        help="evaluation instant (ISO-8601), for reproducible output",
    )
    return parser


async def run(args: argparse.Namespace, settings: AppSettings) -> AggregationResult:
    """Score the signal file, persisting diagnostics when an entity id is given."""
    logger = get_logger("trust.main")
    registry = WeightProfileRegistry.from_settings(settings.profiles)
    signals = load_signals(args.signals)

    if args.entity_id is None:
        scorer = TrustScorer(settings.aggregator, registry=registry)
        return scorer.score(signals, vertical=args.vertical, now=args.now)

    async with ScoreDatabase(settings.database.path) as database:
        scorer = TrustScorer(
            settings.aggregator, registry=registry, store=ScoreStore(database)
        )
        result = await scorer.compute_trust_for_entity(
            args.entity_id,
            signals,
            options=scorer.options_for(args.vertical),
            now=args.now,
        )
        await scorer.drain()
        logger.info("entity_scored", entity_id=args.entity_id, score=result.score)
        return result


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point."""
    args = _build_parser().parse_args(argv)

    settings = AppSettings()
    setup_logging(settings.log_level)

    result = asyncio.run(run(args, settings))

    include = (
        args.include_diagnostics
        if args.include_diagnostics is not None
        else settings.aggregator.include_diagnostics
    )
    grade = letter_grade(result.score, thresholds_from_settings(settings.grading))
    json.dump(public_view(result, include, grade=grade), sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
