"""CLI: fetch or read one buoy observation and print the normalized record."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError, ObservationParseError
from .fetch import NDBCTextFetcher, observe_station
from .log_setup import setup_logger
from .models import ObservationRecord
from .parsing.selector import SourceSelector


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch and normalize the latest marine observation for one buoy station."
    )
    parser.add_argument("--station", type=str, default=None, help="Station identifier.")
    parser.add_argument(
        "--tabular-file",
        type=Path,
        default=None,
        help="Read the tabular feed from a file instead of fetching it.",
    )
    parser.add_argument(
        "--narrative-file",
        type=Path,
        default=None,
        help="Read the narrative report from a file instead of fetching it.",
    )
    parser.add_argument("--json", action="store_true", help="Print the record as JSON.")
    parser.add_argument(
        "--show-diagnostics",
        action="store_true",
        help="Print structured diagnostics when parsing fails.",
    )
    return parser.parse_args(argv)


def _read_optional(path: Path | None) -> str | None:
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def _print_record(console: Console, record: ObservationRecord, station: str) -> None:
    table = Table(title=f"Station {station} Observation")
    table.add_column("Field")
    table.add_column("Value", justify="right")
    for key, value in record.model_dump(mode="json", by_alias=True).items():
        table.add_row(key, str(value))
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Run one observation fetch/parse."""
    args = parse_args(argv)
    console = Console()

    try:
        settings: Settings = load_settings(
            **({"station_id": args.station} if args.station else {})
        )
    except ConfigError as exc:
        setup_logger().error("Configuration failure: %s", exc)
        return 2

    logger = setup_logger(level=settings.log_level)
    selector = SourceSelector(logger=logger)

    try:
        if args.tabular_file is not None or args.narrative_file is not None:
            narrative_text = _read_optional(args.narrative_file)
            normalized = selector.observe(
                _read_optional(args.tabular_file), lambda: narrative_text
            )
        else:
            logger.info("Fetching observation: %s", json.dumps(settings.safe_summary()))
            with NDBCTextFetcher(settings=settings, logger=logger) as fetcher:
                normalized = observe_station(fetcher, selector=selector)
    except ObservationParseError as exc:
        logger.error("Observation failure: %s", exc)
        if args.show_diagnostics and exc.diagnostics is not None:
            console.print_json(exc.diagnostics.model_dump_json())
        return 4

    record = normalized.record
    if args.json:
        payload: dict[str, Any] = {
            "station": settings.station_id,
            "source": normalized.source,
            "data": record.model_dump(mode="json", by_alias=True),
        }
        if args.show_diagnostics:
            payload["anomalies"] = normalized.anomalies
        console.print_json(json.dumps(payload))
    else:
        _print_record(console, record, settings.station_id)
        console.print(f"source={normalized.source}")
        if args.show_diagnostics:
            for anomaly in normalized.anomalies:
                console.print(f"anomaly: {anomaly}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
