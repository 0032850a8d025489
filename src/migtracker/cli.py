"""Command-line interface over a JSON dump of tracker records.

Usage examples::

    migtracker --data dump.json progress PHASE_ID
    migtracker --data dump.json forecast PHASE_ID --as-of 2024-06-01
    migtracker --data dump.json dashboard
    migtracker --data dump.json buckets PHASE_ID
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from migtracker.config import AppConfig, configure_logging
from migtracker.errors import NotFoundError
from migtracker.services.store import InMemoryStore
from migtracker.services.tracker import MigrationTracker


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="migtracker",
        description="Progress, forecast and dashboard views over migration snapshots.",
    )
    parser.add_argument(
        "--data",
        type=Path,
        required=True,
        help="JSON file with customers, projects, phases, snapshots and bucketSnapshots.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML config file. (default: ~/.migtracker/config.toml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    progress_parser = subparsers.add_parser("progress", help="Current progress of a phase.")
    progress_parser.add_argument("phase_id")

    forecast_parser = subparsers.add_parser("forecast", help="Completion forecast of a phase.")
    forecast_parser.add_argument("phase_id")
    forecast_parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Reference date for recency, YYYY-MM-DD. (default: today)",
    )

    subparsers.add_parser("dashboard", help="Dashboard statistics and customer tree.")

    buckets_parser = subparsers.add_parser("buckets", help="Per-bucket trend series of a phase.")
    buckets_parser.add_argument("phase_id")

    return parser


def _dump(model: BaseModel) -> str:
    return json.dumps(model.model_dump(mode="json", by_alias=True), indent=2)


def _run(tracker: MigrationTracker, args: argparse.Namespace) -> BaseModel:
    if args.command == "progress":
        return tracker.get_progress(args.phase_id)
    if args.command == "forecast":
        return tracker.get_forecast(args.phase_id, as_of=args.as_of)
    if args.command == "buckets":
        return tracker.get_bucket_trends(args.phase_id)
    return tracker.get_dashboard()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = AppConfig.load(args.config)
    configure_logging(config)

    try:
        payload: Any = json.loads(args.data.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot read {args.data}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(payload, dict):
        print(f"Error: {args.data} must contain a JSON object", file=sys.stderr)
        sys.exit(1)

    store = InMemoryStore()
    store.load_payload(payload)
    tracker = MigrationTracker(store, config)

    try:
        result = _run(tracker, args)
    except NotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(_dump(result))
    sys.exit(0)


if __name__ == "__main__":
    main()
