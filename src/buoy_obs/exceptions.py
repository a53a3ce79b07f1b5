"""Application exception classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ParseDiagnostics


class BuoyObsError(Exception):
    """Base class for buoy observation errors."""


class ConfigError(BuoyObsError):
    """Raised when configuration is invalid or incomplete."""


class ObservationParseError(BuoyObsError):
    """Raised when no observation record can be produced from the available text."""

    def __init__(self, message: str, *, diagnostics: ParseDiagnostics | None = None) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics


class FetchFailureError(ObservationParseError):
    """Raised when neither the tabular nor the narrative text is available."""


class MissingTimestampError(ObservationParseError):
    """Raised when the narrative report has no parsable GMT timestamp line."""
