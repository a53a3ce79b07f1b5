"""Tabular feed probe and parser tests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from buoy_obs.models import RawTabularFields, StructuralError
from buoy_obs.parsing.tabular import TabularParser, last_data_line, probe_tabular

FIXTURES = Path(__file__).parent / "fixtures"

REFERENCE_LINE = "2025 11 16 23 50 180 4.1 7.2 2.3 7 5 190 1015 18.0 16.5 10 10 MM"


def _parser() -> TabularParser:
    return TabularParser(logger=logging.getLogger("test_tabular_parser"))


def test_last_data_line_skips_trailing_blank_lines() -> None:
    text = "#YY MM DD\n2025 11 16\n\n   \n"
    assert last_data_line(text) == "2025 11 16"


@pytest.mark.parametrize("text", [None, "", "   \n\n"])
def test_probe_rejects_absent_text(text: str | None) -> None:
    probe = probe_tabular(text)
    assert probe.usable is False
    assert probe.token_count == 0


def test_probe_requires_more_than_ten_tokens() -> None:
    assert probe_tabular("1 2 3 4 5 6 7 8 9 10").usable is False
    probe = probe_tabular("1 2 3 4 5 6 7 8 9 10 11")
    assert probe.usable is True
    assert probe.token_count == 11


def test_parse_reference_row() -> None:
    result = _parser().parse(f"#header\n{REFERENCE_LINE}\n")

    assert isinstance(result, RawTabularFields)
    assert result.timestamp == datetime(2025, 11, 16, 23, 50, tzinfo=UTC)
    assert result.wind_direction == 180
    assert result.wind_speed == 4.1
    assert result.gust_speed == 7.2
    assert result.pressure == 1015
    assert result.air_temp_celsius == 18.0
    assert result.water_temp_celsius == 16.5
    assert result.speed_unit == "m/s"
    assert result.missing_fields == []


def test_parse_uses_last_line_of_fixture() -> None:
    text = (FIXTURES / "agxc1_realtime2.txt").read_text(encoding="utf-8")
    result = _parser().parse(text)
    assert isinstance(result, RawTabularFields)
    assert result.timestamp.minute == 50


def test_timestamp_columns_are_zero_padded() -> None:
    result = _parser().parse("2025 1 2 3 4 180 4.1 7.2 2.3 7 5 190 1015 18.0 16.5")
    assert isinstance(result, RawTabularFields)
    assert result.timestamp == datetime(2025, 1, 2, 3, 4, tzinfo=UTC)


def test_short_row_returns_structural_error_value() -> None:
    result = _parser().parse("2025 11 16 23 50 180 4.1 7.2 2.3 7 5 190")

    assert isinstance(result, StructuralError)
    assert result.expected_tokens == 13
    assert result.actual_tokens == 12
    assert "Expected at least 13 columns, got 12" in result.message


def test_invalid_calendar_values_return_structural_error() -> None:
    result = _parser().parse("2025 13 40 23 50 180 4.1 7.2 2.3 7 5 190 1015")
    assert isinstance(result, StructuralError)
    assert "timestamp" in result.message


def test_non_numeric_tokens_default_to_zero() -> None:
    result = _parser().parse("2025 11 16 23 50 MM MM 7.2 2.3 7 5 190 MM MM nan")

    assert isinstance(result, RawTabularFields)
    assert result.wind_direction == 0
    assert result.wind_speed == 0
    assert result.pressure == 0
    assert result.air_temp_celsius == 0
    assert result.water_temp_celsius == 0
    assert result.missing_fields == [
        "wind_direction",
        "wind_speed",
        "pressure",
        "air_temp",
        "water_temp",
    ]


def test_thirteen_column_row_has_no_temperatures() -> None:
    result = _parser().parse("2025 11 16 23 50 180 4.1 7.2 2.3 7 5 190 1015")
    assert isinstance(result, RawTabularFields)
    assert result.missing_fields == ["air_temp", "water_temp"]
