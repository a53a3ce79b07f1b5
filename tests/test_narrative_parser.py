"""Narrative report parser tests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from buoy_obs.exceptions import MissingTimestampError
from buoy_obs.parsing.narrative import NarrativeParser

FIXTURES = Path(__file__).parent / "fixtures"


def _parser() -> NarrativeParser:
    return NarrativeParser(logger=logging.getLogger("test_narrative_parser"))


def test_parse_fixture_report() -> None:
    text = (FIXTURES / "agxc1_latest_obs.txt").read_text(encoding="utf-8")
    raw = _parser().parse(text)

    assert raw.timestamp == datetime(2025, 11, 16, 23, 48, tzinfo=UTC)
    assert raw.wind_direction == 180
    assert raw.wind_speed is not None
    assert raw.wind_speed.value == 8.0
    assert raw.wind_speed.unit == "kt"
    assert raw.gust_speed is not None
    assert raw.gust_speed.value == 14.0


def test_single_digit_month_and_day() -> None:
    raw = _parser().parse("0905 GMT 3/7/26\nWind: N (5°), 2.0 kt")
    assert raw.timestamp == datetime(2026, 3, 7, 9, 5, tzinfo=UTC)
    assert raw.wind_direction == 5


def test_missing_gust_line_is_not_fatal() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nWind: S (180°), 8.0 kt\n")
    assert raw.gust_speed is None
    assert raw.wind_speed is not None


def test_missing_wind_line_leaves_wind_unset() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nGust: 14.0 kt\n")
    assert raw.wind_direction is None
    assert raw.wind_speed is None
    assert raw.gust_speed is not None


def test_wind_line_without_direction_keeps_speed() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nWind: Calm, 0.0 kt\n")
    assert raw.wind_direction is None
    assert raw.wind_speed is not None
    assert raw.wind_speed.value == 0.0


def test_wind_line_without_speed_keeps_direction() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nWind: W (270°)\n")
    assert raw.wind_direction == 270
    assert raw.wind_speed is None


def test_mis_decoded_degree_sign_is_tolerated() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nWind: S (180Â°), 8.0 kt\n")
    assert raw.wind_direction == 180


def test_speed_unit_is_captured() -> None:
    raw = _parser().parse("2348 GMT 11/16/25\nWind: S (180°), 10 mph\nGust: 5 m/s\n")
    assert raw.wind_speed is not None
    assert raw.wind_speed.unit == "mph"
    assert raw.gust_speed is not None
    assert raw.gust_speed.unit == "m/s"


def test_missing_timestamp_raises_with_snippet() -> None:
    text = "Station AGXC1\nWind: S (180°), 8.0 kt\n"
    with pytest.raises(MissingTimestampError, match="Could not parse date/time") as exc_info:
        _parser().parse(text)
    assert exc_info.value.diagnostics is not None
    assert exc_info.value.diagnostics.raw_snippet == text


def test_invalid_clock_value_is_skipped() -> None:
    with pytest.raises(MissingTimestampError):
        _parser().parse("2575 GMT 11/16/25\nWind: S (180°), 8.0 kt\n")
