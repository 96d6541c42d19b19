"""Pydantic request/response models for zone endpoints."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

CellValue = Union[str, float, int]


class ZoneSelectionRequest(BaseModel):
    zones: list[str] = Field(default_factory=list, description="Selected zone codes, in selection order.")

    @field_validator("zones")
    @classmethod
    def _dedupe_zones(cls, value: list[str]) -> list[str]:
        ordered: list[str] = []
        for code in value:
            normalized = code.strip()
            if normalized and normalized not in ordered:
                ordered.append(normalized)
        return ordered


class ConfirmRequest(ZoneSelectionRequest):
    blank_cell_value: Optional[CellValue] = Field(
        default=None, description="Value used for every price matrix cell. Defaults to the configured blank value."
    )
    persist: bool = Field(default=False, description="Write the confirmed configuration to a run directory.")


class ZoneInfoModel(BaseModel):
    zoneCode: str
    type: Literal["full", "limited"]
    region: Optional[str] = None
    states: list[str]
    limitedCities: dict[str, list[str]]


class ValidationResultModel(BaseModel):
    isValid: bool
    warnings: list[str]
    errors: list[str]


class ZoneConfigModel(BaseModel):
    zoneCode: str
    selectedStates: list[str]
    selectedCities: list[str]


class ZoneConfigResponse(BaseModel):
    zones: list[ZoneConfigModel]
    totalStates: int
    totalCities: int


class ConfirmResponse(BaseModel):
    zones: list[ZoneConfigModel]
    priceMatrix: dict[str, dict[str, CellValue]]
    runDirectory: Optional[str] = None
