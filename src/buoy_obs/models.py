"""Typed models for buoy observation parsing and normalization."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

ObservationSource = Literal["tabular", "narrative"]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:00Z"


class ObservationRecord(BaseModel):
    """Canonical observation for one station, in knots, millibars and Fahrenheit.

    A value of 0 is overloaded: it is either a genuine zero reading (calm wind,
    no gust) or the field was unavailable upstream.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: datetime
    wind_direction_degrees: float = Field(
        default=0.0, ge=0, lt=360, allow_inf_nan=False, alias="windDirectionDegrees"
    )
    wind_speed_knots: float = Field(
        default=0.0, ge=0, allow_inf_nan=False, alias="windSpeedKnots"
    )
    gust_speed_knots: float = Field(
        default=0.0, ge=0, allow_inf_nan=False, alias="gustSpeedKnots"
    )
    pressure_millibars: float = Field(
        default=0.0, ge=0, allow_inf_nan=False, alias="pressureMillibars"
    )
    air_temp_fahrenheit: float = Field(
        default=0.0, allow_inf_nan=False, alias="airTempFahrenheit"
    )
    water_temp_fahrenheit: float = Field(
        default=0.0, allow_inf_nan=False, alias="waterTempFahrenheit"
    )

    @field_validator("timestamp")
    @classmethod
    def _require_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class SpeedReading(BaseModel):
    """A speed value with the unit tag it was reported in."""

    value: float
    unit: str


class RawTabularFields(BaseModel):
    """Unconverted values from the last row of the tabular feed (m/s, mb, Celsius)."""

    timestamp: datetime
    wind_direction: float = 0.0
    wind_speed: float = 0.0
    gust_speed: float = 0.0
    pressure: float = 0.0
    air_temp_celsius: float = 0.0
    water_temp_celsius: float = 0.0
    speed_unit: str = "m/s"
    missing_fields: list[str] = Field(default_factory=list)


class RawNarrativeFields(BaseModel):
    """Values found in the narrative report; None means the extractor found nothing."""

    timestamp: datetime
    wind_direction: float | None = None
    wind_speed: SpeedReading | None = None
    gust_speed: SpeedReading | None = None


class TabularProbe(BaseModel):
    """Structural verdict on whether the tabular text is worth parsing."""

    usable: bool
    line: str | None = None
    token_count: int = 0
    reason: str | None = None


class StructuralError(BaseModel):
    """Tabular row rejected by the parser; handled by falling back to the narrative text."""

    message: str
    expected_tokens: int
    actual_tokens: int
    line: str | None = None


class ParseDiagnostics(BaseModel):
    """Operator-facing detail attached to a failed parse attempt."""

    source: ObservationSource | None = None
    tabular_token_count: int | None = None
    required_token_count: int | None = None
    tabular_rejection: str | None = None
    raw_snippet: str | None = None
