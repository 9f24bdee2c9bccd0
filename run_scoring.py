#!/usr/bin/env python3
# run_scoring.py
# Command line entry point for scoring an offer's series
# ======================================================

"""
Score an offer from a JSON file holding its observation series.

The file is either a list of observations or an offer object with an
``adData`` list. A new count can be recorded (or an existing day corrected)
before scoring, and the updated series written back out.

Usage:
    python run_scoring.py series.json
    python run_scoring.py series.json --ads 42 --note "new creative"
    python run_scoring.py offer.json --ads 30 --date 2024-03-02 --output offer.json
    python run_scoring.py series.json --delete 2024-03-01 --json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Sequence

from loguru import logger
from pydantic import ValidationError

from config import ENVIRONMENT, TIMEZONE
from config.version import PROJECT_VERSION
from offertrack.config_manager import ConfigError
from src.contracts import ObservationModel
from src.scoring import get_default_scorer
from src.series import delete_observation, sort_series, upsert_observation
from src.utils import parse_iso_date, setup_logging, today_iso


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Score an offer from its daily active-ad series",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", type=Path, help="JSON file with the series or offer")
    parser.add_argument("--ads", type=int, help="Record this active-ad count before scoring")
    parser.add_argument("--date", help="Date of the recorded count (defaults to today)")
    parser.add_argument("--note", help="Free-text observation for the recorded count")
    parser.add_argument("--time", help="Time of day (HH:MM) the count was taken")
    parser.add_argument("--delete", metavar="DATE", help="Remove the observation for DATE")
    parser.add_argument("--output", type=Path, help="Write the updated series/offer here")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)
    if args.ads is not None and args.delete:
        parser.error("--ads and --delete cannot be combined")
    if args.ads is None and any(v is not None for v in (args.date, args.note, args.time)):
        parser.error("--date, --note and --time require --ads")
    return args


def load_document(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc


def extract_series(document: Any) -> List[ObservationModel]:
    raw = document.get("adData", []) if isinstance(document, dict) else document
    if not isinstance(raw, list):
        raise ValueError("expected a list of observations or an object with 'adData'")
    return sort_series(raw)


def replace_series(document: Any, series: List[ObservationModel]) -> Any:
    payload = [item.to_payload() for item in series]
    if isinstance(document, dict):
        return {**document, "adData": payload}
    return payload


def render_text(report: dict) -> str:
    score = report["score"]
    trend = report["trend"]
    lines = [
        f"Score: {score['value']} ({score['label']}, {score['result']})",
        f"Trend: {trend['direction']} {abs(trend['percentage']):.1f}%",
        f"Observations: {report['observations']}",
    ]
    breakdown = report["breakdown"]
    if breakdown.get("raw") is not None:
        lines.append(
            "Terms: base={base:.2f} trend={trend:.2f} consistency={consistency_bonus:.2f} "
            "longevity={longevity:.2f} raw={raw:.2f}".format(**breakdown)
        )
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging({"level": "DEBUG" if args.verbose else "WARNING"}).log_startup(
        PROJECT_VERSION, {"environment": ENVIRONMENT, "timezone": TIMEZONE}
    )

    try:
        document = load_document(args.input)
        series = extract_series(document)

        if args.ads is not None:
            observation = ObservationModel(
                date=args.date or today_iso(TIMEZONE),
                active_ads=args.ads,
                observation=args.note,
                time=args.time,
            )
            series = upsert_observation(series, observation)
        elif args.delete:
            parse_iso_date(args.delete)
            series = delete_observation(series, args.delete)

        scorer = get_default_scorer()
        breakdown = scorer.explain(series)
        trend = scorer.trend(series)
        report = {
            "version": PROJECT_VERSION,
            "observations": len(series),
            "score": breakdown.score.model_dump(),
            "trend": trend.model_dump(),
            "breakdown": breakdown.model_dump(exclude={"score"}),
        }

        if args.output:
            updated = replace_series(document, series)
            args.output.write_text(json.dumps(updated, indent=2) + "\n", encoding="utf-8")
            logger.info("Wrote {} observations to {}", len(series), args.output)
    except (ValidationError, ValueError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(render_text(report))
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(main())
