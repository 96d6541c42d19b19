"""Zone selection logic: lookup, validation and expansion into zone configs."""

from __future__ import annotations

import asyncio
from itertools import combinations
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ...config import settings
from ...data.catalog_repository import load_catalog
from ...errors import CatalogLoadError, NotInitializedError
from ...models.domain import (
    GeographyCatalog,
    ValidationResult,
    ZoneConfig,
    ZoneInfo,
    ZoneOverlap,
    ZoneType,
    split_city_key,
)
from .membership import CityMembershipIndex


def _ordered_unique(zone_codes: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(code.strip() for code in zone_codes))


def describe_overlap(overlap: ZoneOverlap) -> str:
    count = len(overlap.shared_cities)
    noun = "city" if count == 1 else "cities"
    example, _ = split_city_key(overlap.shared_cities[0])
    return (
        f"Zones {overlap.zone_a} and {overlap.zone_b} overlap on {count} {noun} "
        f"in {', '.join(overlap.shared_states)} (e.g. {example})"
    )


class ZoneAssignmentService:
    """Pure zone-selection logic over a loaded geography catalog.

    Performs no I/O once initialized. Unknown zone codes never raise: lookups
    return None and expansion skips them.
    """

    def __init__(self, loader: Callable[[], GeographyCatalog] = load_catalog) -> None:
        self._loader = loader
        self._catalog: GeographyCatalog | None = None
        self._index: CityMembershipIndex | None = None
        self._rank: dict[str, int] = {}

    @property
    def is_initialized(self) -> bool:
        return self._catalog is not None

    async def initialize(self, *, timeout: Optional[float] = None) -> None:
        """Load the catalog in a worker thread. Repeat calls after success are no-ops."""
        if self._catalog is not None:
            return
        limit = timeout if timeout is not None else settings.catalog_load_timeout_seconds
        try:
            catalog = await asyncio.wait_for(asyncio.to_thread(self._loader), limit)
        except asyncio.TimeoutError as exc:
            raise CatalogLoadError(f"Catalog load did not finish within {limit} seconds.") from exc
        self.initialize_with(catalog)

    def initialize_with(self, catalog: GeographyCatalog) -> None:
        self._catalog = catalog
        self._index = CityMembershipIndex(catalog)
        self._rank = {code: position for position, code in enumerate(catalog.zones)}

    @property
    def catalog(self) -> GeographyCatalog:
        if self._catalog is None:
            raise NotInitializedError("ZoneAssignmentService.initialize() has not completed.")
        return self._catalog

    @property
    def membership(self) -> CityMembershipIndex:
        if self._index is None:
            raise NotInitializedError("ZoneAssignmentService.initialize() has not completed.")
        return self._index

    def get_regions(self) -> Mapping[str, tuple[str, ...]]:
        return self.catalog.regions

    def get_zone_info(self, zone_code: str) -> ZoneInfo | None:
        return self.catalog.zones.get(zone_code.strip())

    def overlaps(self, zone_codes: Iterable[str]) -> list[ZoneOverlap]:
        """Pairs of known selected zones that claim at least one common city."""
        zones = self.catalog.zones
        known = [code for code in _ordered_unique(zone_codes) if code in zones]
        found: list[ZoneOverlap] = []
        for zone_a, zone_b in combinations(known, 2):
            shared = self.membership.shared_cities(zone_a, zone_b)
            if shared:
                found.append(ZoneOverlap(zone_a=zone_a, zone_b=zone_b, shared_cities=shared))
        return found

    def validate_zone_selection(self, zone_codes: Iterable[str]) -> ValidationResult:
        zones = self.catalog.zones
        selection = _ordered_unique(zone_codes)
        errors = [f"unknown zone {code}" for code in selection if code not in zones]
        if not selection:
            return ValidationResult(is_valid=True, warnings=[], errors=[])

        # catalog order keeps warnings stable for unordered (set) input
        known = sorted((code for code in selection if code in zones), key=self._rank.__getitem__)
        warnings = [describe_overlap(overlap) for overlap in self.overlaps(known)]
        return ValidationResult(is_valid=not errors, warnings=warnings, errors=errors)

    def build_zone_config(self, zone_codes: Iterable[str]) -> list[ZoneConfig]:
        configs: list[ZoneConfig] = []
        for code in _ordered_unique(zone_codes):
            info = self.get_zone_info(code)
            if info is None:
                continue
            if info.type is ZoneType.FULL:
                states = list(info.states)
            else:
                states = [state for state in info.states if info.limited_cities.get(state)]
            configs.append(
                ZoneConfig(
                    zone_code=info.zone_code,
                    selected_states=list(dict.fromkeys(states)),
                    selected_cities=list(self.membership.cities_for(info.zone_code)),
                )
            )
        return configs

    def summarize(self, configs: Sequence[ZoneConfig]) -> dict[str, int]:
        return {
            "zones": len(configs),
            "states": sum(len(config.selected_states) for config in configs),
            "cities": sum(len(config.selected_cities) for config in configs),
        }


zone_assignment_service = ZoneAssignmentService()
