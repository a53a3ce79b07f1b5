"""Parser for the fixed-column realtime tabular feed.

Rows look like::

    #YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS  TIDE
    2025 11 16 23 50 180  4.1  7.2   2.3     7     5 190 1015.0  18.0  16.5  10.0   MM    MM

Only the last non-empty line is used.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from ..models import RawTabularFields, StructuralError, TabularProbe

# The probe accepts a row with more than 10 tokens; the parser needs 13.
PROBE_MIN_TOKENS = 11
REQUIRED_TOKENS = 13

_COLUMNS = {
    "wind_direction": 5,
    "wind_speed": 6,
    "gust_speed": 7,
    "pressure": 12,
    "air_temp": 13,
    "water_temp": 14,
}


def last_data_line(text: str | None) -> str | None:
    """Return the last non-empty line of the text, stripped."""
    if not text:
        return None
    lines = [line.strip() for line in text.strip().splitlines()]
    lines = [line for line in lines if line]
    return lines[-1] if lines else None


def probe_tabular(text: str | None) -> TabularProbe:
    """Decide whether the tabular text is structurally usable."""
    line = last_data_line(text)
    if line is None:
        return TabularProbe(usable=False, reason="tabular text absent or empty")
    token_count = len(line.split())
    if token_count < PROBE_MIN_TOKENS:
        return TabularProbe(
            usable=False,
            line=line,
            token_count=token_count,
            reason=f"expected more than {PROBE_MIN_TOKENS - 1} columns, got {token_count}",
        )
    return TabularProbe(usable=True, line=line, token_count=token_count)


class TabularParser:
    """Extracts raw fields from the most recent tabular row."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("buoy_obs.parsing.tabular")

    def parse(self, text: str) -> RawTabularFields | StructuralError:
        """Parse the last row, returning a StructuralError value if it is unusable."""
        line = last_data_line(text)
        tokens = line.split() if line else []
        if len(tokens) < REQUIRED_TOKENS:
            return StructuralError(
                message=(
                    "Invalid tabular data format. Expected at least "
                    f"{REQUIRED_TOKENS} columns, got {len(tokens)}"
                ),
                expected_tokens=REQUIRED_TOKENS,
                actual_tokens=len(tokens),
                line=line,
            )

        timestamp = self._parse_timestamp(tokens)
        if timestamp is None:
            return StructuralError(
                message=f"Invalid tabular timestamp columns: {' '.join(tokens[:5])}",
                expected_tokens=REQUIRED_TOKENS,
                actual_tokens=len(tokens),
                line=line,
            )

        values: dict[str, float] = {}
        missing: list[str] = []
        for name, index in _COLUMNS.items():
            value = self._as_float(tokens[index]) if index < len(tokens) else None
            if value is None:
                missing.append(name)
                value = 0.0
            values[name] = value

        if missing:
            self.logger.debug("Tabular row has non-numeric columns: %s", ", ".join(missing))

        return RawTabularFields(
            timestamp=timestamp,
            wind_direction=values["wind_direction"],
            wind_speed=values["wind_speed"],
            gust_speed=values["gust_speed"],
            pressure=values["pressure"],
            air_temp_celsius=values["air_temp"],
            water_temp_celsius=values["water_temp"],
            speed_unit="m/s",
            missing_fields=missing,
        )

    @staticmethod
    def _parse_timestamp(tokens: list[str]) -> datetime | None:
        year, month, day, hour, minute = tokens[:5]
        # Compose YYYY-MM-DDTHH:MM:00Z from zero-padded columns.
        candidate = (
            f"{year}-{month.zfill(2)}-{day.zfill(2)}T{hour.zfill(2)}:{minute.zfill(2)}:00"
        )
        try:
            parsed = datetime.strptime(candidate, "%Y-%m-%dT%H:%M:%S")
        except ValueError:
            return None
        return parsed.replace(tzinfo=UTC)

    @staticmethod
    def _as_float(token: str) -> float | None:
        try:
            value = float(token)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        return value
