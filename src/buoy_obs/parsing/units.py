"""Unit conversion and missing-value sentinel resolution.

Everything leaving this module is in knots, millibars and degrees Fahrenheit.
Upstream "not available" sentinels are mapped to 0, the same value a genuine
calm/zero reading produces.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from ..models import (
    ObservationRecord,
    ObservationSource,
    RawNarrativeFields,
    RawTabularFields,
    SpeedReading,
)

KNOTS_PER_METER_PER_SECOND = 1.943844
KNOTS_PER_MILE_PER_HOUR = 0.868976

# Tabular sentinels, compared in source units before any conversion.
DIRECTION_SENTINEL = 99.0
DIRECTION_SENTINEL_FLOOR = 999.0
SPEED_SENTINEL_FLOOR = 99.0
PRESSURE_SENTINEL_FLOOR = 9999.0
TEMPERATURE_SENTINEL_FLOOR = 999.0

_UNIT_ALIASES = {
    "kt": "kt",
    "kts": "kt",
    "knot": "kt",
    "knots": "kt",
    "m/s": "m/s",
    "mps": "m/s",
    "mph": "mph",
}


@dataclass(frozen=True)
class SpeedConversion:
    knots: float
    anomaly: str | None = None


@dataclass
class NormalizedObservation:
    """Canonical record plus the non-fatal anomalies seen while building it."""

    record: ObservationRecord
    source: ObservationSource
    anomalies: list[str] = field(default_factory=list)


def canonical_speed_unit(unit: str) -> str | None:
    """Map a unit tag to 'kt', 'm/s' or 'mph'; None when unrecognized."""
    return _UNIT_ALIASES.get(unit.strip().lower())


def convert_speed(value: float, unit: str) -> SpeedConversion:
    """Convert a speed to knots, rounded to one decimal.

    Unrecognized units pass the value through unchanged and report an anomaly.
    """
    if not math.isfinite(value):
        raise ValueError(f"Speed value must be finite, got {value!r}.")
    canonical = canonical_speed_unit(unit)
    if canonical == "m/s":
        return SpeedConversion(knots=round(value * KNOTS_PER_METER_PER_SECOND, 1))
    if canonical == "mph":
        return SpeedConversion(knots=round(value * KNOTS_PER_MILE_PER_HOUR, 1))
    if canonical == "kt":
        return SpeedConversion(knots=value)
    return SpeedConversion(knots=value, anomaly=f"unknown_speed_unit:{unit}")


def celsius_to_fahrenheit(celsius: float) -> float:
    if not math.isfinite(celsius):
        raise ValueError(f"Temperature value must be finite, got {celsius!r}.")
    return round(celsius * 9 / 5 + 32, 1)


class UnitNormalizer:
    """Turns raw per-source fields into an ObservationRecord."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("buoy_obs.parsing.units")

    def normalize_tabular(self, raw: RawTabularFields) -> NormalizedObservation:
        anomalies: list[str] = [f"non_numeric_token:{name}" for name in raw.missing_fields]

        wind_speed = self._tabular_speed(raw.wind_speed, raw.speed_unit, "wind_speed", anomalies)
        gust_speed = self._tabular_speed(raw.gust_speed, raw.speed_unit, "gust_speed", anomalies)

        pressure = raw.pressure
        if pressure >= PRESSURE_SENTINEL_FLOOR:
            pressure = 0.0
        elif pressure < 0:
            anomalies.append("negative_pressure")
            pressure = 0.0

        record = ObservationRecord(
            timestamp=raw.timestamp,
            wind_direction_degrees=self._tabular_direction(raw.wind_direction, anomalies),
            wind_speed_knots=wind_speed,
            gust_speed_knots=gust_speed,
            pressure_millibars=pressure,
            air_temp_fahrenheit=self._tabular_temperature(
                raw.air_temp_celsius, missing="air_temp" in raw.missing_fields
            ),
            water_temp_fahrenheit=self._tabular_temperature(
                raw.water_temp_celsius, missing="water_temp" in raw.missing_fields
            ),
        )
        self._log_anomalies("tabular", anomalies)
        return NormalizedObservation(record=record, source="tabular", anomalies=anomalies)

    def normalize_narrative(self, raw: RawNarrativeFields) -> NormalizedObservation:
        anomalies: list[str] = []
        direction = 0.0
        if raw.wind_direction is not None:
            direction = self._bearing(raw.wind_direction, anomalies)

        record = ObservationRecord(
            timestamp=raw.timestamp,
            wind_direction_degrees=direction,
            wind_speed_knots=self._narrative_speed(raw.wind_speed, anomalies),
            gust_speed_knots=self._narrative_speed(raw.gust_speed, anomalies),
            # Not reported in the narrative format.
            pressure_millibars=0.0,
            air_temp_fahrenheit=0.0,
            water_temp_fahrenheit=0.0,
        )
        self._log_anomalies("narrative", anomalies)
        return NormalizedObservation(record=record, source="narrative", anomalies=anomalies)

    @classmethod
    def _tabular_direction(cls, value: float, anomalies: list[str]) -> float:
        if value == DIRECTION_SENTINEL or value >= DIRECTION_SENTINEL_FLOOR:
            return 0.0
        return cls._bearing(value, anomalies)

    @staticmethod
    def _bearing(value: float, anomalies: list[str]) -> float:
        if value == 360:
            return 0.0
        if not 0 <= value < 360:
            anomalies.append(f"direction_out_of_range:{value:g}")
            return 0.0
        return value

    @staticmethod
    def _tabular_speed(value: float, unit: str, name: str, anomalies: list[str]) -> float:
        if value >= SPEED_SENTINEL_FLOOR:
            return 0.0
        if value < 0:
            anomalies.append(f"negative_{name}")
            return 0.0
        conversion = convert_speed(value, unit)
        if conversion.anomaly:
            anomalies.append(conversion.anomaly)
        return conversion.knots

    @staticmethod
    def _narrative_speed(reading: SpeedReading | None, anomalies: list[str]) -> float:
        if reading is None:
            return 0.0
        conversion = convert_speed(reading.value, reading.unit)
        if conversion.anomaly:
            anomalies.append(conversion.anomaly)
        return max(conversion.knots, 0.0)

    @staticmethod
    def _tabular_temperature(celsius: float, *, missing: bool) -> float:
        if missing or celsius >= TEMPERATURE_SENTINEL_FLOOR:
            return 0.0
        return celsius_to_fahrenheit(celsius)

    def _log_anomalies(self, source: str, anomalies: list[str]) -> None:
        for anomaly in anomalies:
            if anomaly.startswith("unknown_speed_unit"):
                self.logger.warning(
                    "Unrecognized speed unit in %s source (%s); value kept as knots",
                    source, anomaly,
                    extra={"source": source},
                )
            else:
                self.logger.debug(
                    "Observation anomaly in %s source: %s", source, anomaly,
                    extra={"source": source},
                )
