"""Parser for the human-readable latest-observation report.

A report looks like::

    Station AGXC1
    33.738N 118.219W

    2348 GMT 11/16/25
    Wind: S (180°), 8.0 kt
    Gust: 14.0 kt

Timestamp, wind and gust are extracted independently; only the timestamp is
required.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

from ..exceptions import MissingTimestampError
from ..models import ParseDiagnostics, RawNarrativeFields, SpeedReading

_NUMBER_PATTERN = r"\d+(?:\.\d+)?"
_UNIT_PATTERN = r"[A-Za-z]+(?:/[A-Za-z]+)?"

_GMT_RE = re.compile(
    r"\b(?P<time>\d{4})\s+GMT\s+"
    r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{2})\b"
)
_WIND_MARKER = "Wind:"
_GUST_MARKER = "Gust:"
# "(180°)"; tolerates a missing or mis-decoded degree sign.
_DIRECTION_RE = re.compile(r"\((?P<deg>\d{1,3})\s*(?:°|Â°|deg)?\)")
_WIND_SPEED_RE = re.compile(
    rf"(?:,|Wind:)\s*(?P<value>{_NUMBER_PATTERN})\s*(?P<unit>{_UNIT_PATTERN})"
)
_GUST_SPEED_RE = re.compile(
    rf"Gust:\s*(?P<value>{_NUMBER_PATTERN})\s*(?P<unit>{_UNIT_PATTERN})"
)

RAW_SNIPPET_LENGTH = 500


def _find_line(lines: list[str], marker: str) -> str | None:
    for line in lines:
        if marker in line:
            return line
    return None


class NarrativeParser:
    """Extracts raw fields from a narrative report."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("buoy_obs.parsing.narrative")

    def parse(self, text: str) -> RawNarrativeFields:
        """Parse the report; raises MissingTimestampError if no GMT line is found."""
        lines = text.splitlines()

        timestamp = self.extract_timestamp(lines)
        if timestamp is None:
            raise MissingTimestampError(
                "Could not parse date/time from narrative observation text",
                diagnostics=ParseDiagnostics(
                    source="narrative",
                    raw_snippet=text[:RAW_SNIPPET_LENGTH],
                ),
            )

        direction, wind_speed = self.extract_wind(lines)
        gust_speed = self.extract_gust(lines)
        return RawNarrativeFields(
            timestamp=timestamp,
            wind_direction=direction,
            wind_speed=wind_speed,
            gust_speed=gust_speed,
        )

    def extract_timestamp(self, lines: list[str]) -> datetime | None:
        for line in lines:
            match = _GMT_RE.search(line)
            if match is None:
                continue
            clock = match.group("time")
            try:
                return datetime(
                    int(f"20{match.group('year')}"),
                    int(match.group("month")),
                    int(match.group("day")),
                    int(clock[:2]),
                    int(clock[2:]),
                    tzinfo=UTC,
                )
            except ValueError:
                self.logger.warning("Ignoring GMT line with invalid date/time: %s", line.strip())
        return None

    def extract_wind(self, lines: list[str]) -> tuple[float | None, SpeedReading | None]:
        line = _find_line(lines, _WIND_MARKER)
        if line is None:
            self.logger.debug("Narrative report has no '%s' line", _WIND_MARKER)
            return None, None

        # Only look at the text after the marker.
        tail = line[line.index(_WIND_MARKER):]
        direction: float | None = None
        dir_match = _DIRECTION_RE.search(tail)
        if dir_match:
            direction = float(dir_match.group("deg"))

        speed: SpeedReading | None = None
        speed_match = _WIND_SPEED_RE.search(tail)
        if speed_match:
            speed = SpeedReading(
                value=float(speed_match.group("value")), unit=speed_match.group("unit")
            )
        return direction, speed

    def extract_gust(self, lines: list[str]) -> SpeedReading | None:
        line = _find_line(lines, _GUST_MARKER)
        if line is None:
            return None
        match = _GUST_SPEED_RE.search(line)
        if match is None:
            return None
        return SpeedReading(value=float(match.group("value")), unit=match.group("unit"))
