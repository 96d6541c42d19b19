"""Domain models for zones, regions and derived zone configurations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

CITY_KEY_SEPARATOR = "||"


def city_key(city: str, state: str) -> str:
    """Composite identifier keeping same-named cities in different states apart."""
    return f"{city}{CITY_KEY_SEPARATOR}{state}"


def split_city_key(key: str) -> tuple[str, str]:
    city, _, state = key.partition(CITY_KEY_SEPARATOR)
    return city, state


class ZoneType(str, Enum):
    FULL = "full"
    LIMITED = "limited"


@dataclass(frozen=True, slots=True)
class ZoneInfo:
    """Catalog definition of a single zone code."""

    zone_code: str
    type: ZoneType
    states: tuple[str, ...]
    limited_cities: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class GeographyCatalog:
    """Read-only reference data: regions, zones and the full city index."""

    regions: Mapping[str, tuple[str, ...]]
    zones: Mapping[str, ZoneInfo]
    cities: Mapping[str, tuple[str, ...]]
    source: str = "memory"

    def region_of(self, zone_code: str) -> Optional[str]:
        for region, zone_codes in self.regions.items():
            if zone_code in zone_codes:
                return region
        return None

    def cities_in_state(self, state: str) -> tuple[str, ...]:
        return self.cities.get(state, ())

    @property
    def city_count(self) -> int:
        return sum(len(cities) for cities in self.cities.values())


@dataclass(slots=True)
class ZoneConfig:
    """Expanded state/city membership for one selected zone."""

    zone_code: str
    selected_states: list[str]
    selected_cities: list[str]


@dataclass(slots=True)
class ValidationResult:
    is_valid: bool = True
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ZoneOverlap:
    """Two selected zones claiming at least one common city."""

    zone_a: str
    zone_b: str
    shared_cities: tuple[str, ...]

    @property
    def shared_states(self) -> list[str]:
        states: list[str] = []
        for key in self.shared_cities:
            _, state = split_city_key(key)
            if state not in states:
                states.append(state)
        return states


@dataclass(slots=True)
class WizardResult:
    """Finalized configuration handed to the pricing-matrix editor."""

    zones: list[ZoneConfig]
    price_matrix: dict[str, dict[str, Any]]
