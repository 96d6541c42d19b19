"""Pydantic models describing the inbound geography catalog document."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator


def _clean_names(values: list[str]) -> list[str]:
    cleaned: list[str] = []
    for value in values:
        name = str(value).strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


class CatalogZoneModel(BaseModel):
    type: Literal["full", "limited"]
    states: list[str] = Field(default_factory=list)
    limited_cities: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("limited_cities", "limitedCities"),
    )

    @field_validator("states")
    @classmethod
    def _strip_states(cls, value: list[str]) -> list[str]:
        return _clean_names(value)

    @field_validator("limited_cities")
    @classmethod
    def _strip_limited_cities(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        return {state.strip(): _clean_names(cities) for state, cities in value.items() if state.strip()}


class CatalogDocument(BaseModel):
    """Region → zones, zone → definition and state → cities, as persisted."""

    regions: dict[str, list[str]]
    zones: dict[str, CatalogZoneModel]
    cities: dict[str, list[str]]

    @field_validator("regions")
    @classmethod
    def _strip_region_zones(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        return {region.strip(): _clean_names(codes) for region, codes in value.items() if region.strip()}

    @field_validator("zones")
    @classmethod
    def _strip_zone_codes(cls, value: dict[str, CatalogZoneModel]) -> dict[str, CatalogZoneModel]:
        return {code.strip(): zone for code, zone in value.items() if code.strip()}

    @field_validator("cities")
    @classmethod
    def _strip_cities(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        return {state.strip(): _clean_names(cities) for state, cities in value.items() if state.strip()}
