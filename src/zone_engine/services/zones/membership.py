"""Many-to-many lookup between zones and the cities they cover."""

from __future__ import annotations

from ...models.domain import GeographyCatalog, ZoneType, city_key


class CityMembershipIndex:
    """Zone → cities and city → zones tables, built once per catalog.

    A city may be claimed by several zones (a limited zone and a full zone
    over the same state, for example), so no single owning zone is assumed.
    Cities are keyed as ``"city||state"``.
    """

    def __init__(self, catalog: GeographyCatalog) -> None:
        self._zone_cities: dict[str, tuple[str, ...]] = {}
        self._city_zones: dict[str, list[str]] = {}
        for code, info in catalog.zones.items():
            if info.type is ZoneType.FULL:
                keys = [city_key(city, state) for state in info.states for city in catalog.cities_in_state(state)]
            else:
                keys = [city_key(city, state) for state, cities in info.limited_cities.items() for city in cities]
            ordered = tuple(dict.fromkeys(keys))
            self._zone_cities[code] = ordered
            for key in ordered:
                self._city_zones.setdefault(key, []).append(code)

    def cities_for(self, zone_code: str) -> tuple[str, ...]:
        return self._zone_cities.get(zone_code, ())

    def zones_for(self, city: str, state: str) -> tuple[str, ...]:
        return tuple(self._city_zones.get(city_key(city, state), ()))

    def shared_cities(self, zone_a: str, zone_b: str) -> tuple[str, ...]:
        """Cities claimed by both zones, in ``zone_a`` order."""
        other = set(self.cities_for(zone_b))
        return tuple(key for key in self.cities_for(zone_a) if key in other)

    def contested_cities(self) -> dict[str, tuple[str, ...]]:
        """Every city claimed by more than one zone in the catalog."""
        return {key: tuple(zones) for key, zones in self._city_zones.items() if len(zones) > 1}
