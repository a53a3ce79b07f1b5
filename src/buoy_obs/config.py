"""Typed settings loader for the buoy observation pipeline."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

DEFAULT_STATION_ID = "AGXC1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    station_id: str = Field(default=DEFAULT_STATION_ID, alias="BUOY_STATION_ID")
    tabular_url_template: str = Field(
        default="https://www.ndbc.noaa.gov/data/realtime2/{station}.txt",
        alias="BUOY_TABULAR_URL_TEMPLATE",
    )
    narrative_url_template: str = Field(
        default="https://www.ndbc.noaa.gov/data/latest_obs/{station}.txt",
        alias="BUOY_NARRATIVE_URL_TEMPLATE",
    )
    fetch_timeout_seconds: float = Field(default=10.0, alias="BUOY_FETCH_TIMEOUT_SECONDS")
    user_agent: str = Field(default="Wind-Forecast-App/1.0", alias="BUOY_USER_AGENT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("station_id")
    @classmethod
    def _validate_station_id(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or not cleaned.isalnum():
            raise ValueError("BUOY_STATION_ID must be a non-empty alphanumeric station code.")
        return cleaned

    @field_validator("tabular_url_template", "narrative_url_template")
    @classmethod
    def _validate_url_template(cls, value: str) -> str:
        if "{station}" not in value:
            raise ValueError("URL templates must contain a '{station}' placeholder.")
        if not value.startswith(("http://", "https://")):
            raise ValueError("URL templates must be http(s) URLs.")
        return value

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("BUOY_FETCH_TIMEOUT_SECONDS must be > 0.")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def tabular_url(self) -> str:
        """Realtime tabular feed URL (upper-case station code)."""
        return self.tabular_url_template.format(station=self.station_id.upper())

    @property
    def narrative_url(self) -> str:
        """Latest-observation narrative report URL (lower-case station code)."""
        return self.narrative_url_template.format(station=self.station_id.lower())

    def safe_summary(self) -> dict[str, Any]:
        """Return a config summary suitable for logging."""
        return {
            "station_id": self.station_id,
            "tabular_url": self.tabular_url,
            "narrative_url": self.narrative_url,
            "fetch_timeout_seconds": self.fetch_timeout_seconds,
        }


def load_settings(**overrides: Any) -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
