"""Dual-format observation parsing and normalization."""

from .narrative import NarrativeParser
from .selector import SourceSelector, parse_observation
from .tabular import TabularParser, probe_tabular
from .units import NormalizedObservation, UnitNormalizer, celsius_to_fahrenheit, convert_speed

__all__ = [
    "NarrativeParser",
    "NormalizedObservation",
    "SourceSelector",
    "TabularParser",
    "UnitNormalizer",
    "celsius_to_fahrenheit",
    "convert_speed",
    "parse_observation",
    "probe_tabular",
]
