"""Domain models."""

from .domain import (
    GeographyCatalog,
    ValidationResult,
    WizardResult,
    ZoneConfig,
    ZoneInfo,
    ZoneOverlap,
    ZoneType,
    city_key,
    split_city_key,
)

__all__ = [
    "GeographyCatalog",
    "ValidationResult",
    "WizardResult",
    "ZoneConfig",
    "ZoneInfo",
    "ZoneOverlap",
    "ZoneType",
    "city_key",
    "split_city_key",
]
