"""API routes for zone lookup, validation and configuration."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import CatalogLoadError, WizardTransitionError
from ...models.domain import WizardResult, ZoneConfig
from ...persistence.filesystem import FileStorage
from ...schemas.zones import (
    ConfirmRequest,
    ConfirmResponse,
    ValidationResultModel,
    ZoneConfigModel,
    ZoneConfigResponse,
    ZoneInfoModel,
    ZoneSelectionRequest,
)
from ...services.outputs.formatter import wizard_result_to_json, zone_config_to_dict, zone_configs_to_csv
from ...services.zones.service import ZoneAssignmentService, zone_assignment_service
from ...services.zones.wizard import ZoneSelectionWizard

router = APIRouter(prefix="/zones", tags=["zones"])


async def _ready_service() -> ZoneAssignmentService:
    try:
        await zone_assignment_service.initialize()
    except CatalogLoadError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Zone data unavailable: {exc}",
        ) from exc
    return zone_assignment_service


def _config_models(configs: list[ZoneConfig]) -> list[ZoneConfigModel]:
    return [ZoneConfigModel.model_validate(zone_config_to_dict(config)) for config in configs]


@router.get("/regions", response_model=dict[str, list[str]])
async def list_regions() -> dict[str, list[str]]:
    service = await _ready_service()
    return {region: list(zones) for region, zones in service.get_regions().items()}


@router.get("/{zone_code}", response_model=ZoneInfoModel)
async def get_zone(zone_code: str) -> ZoneInfoModel:
    service = await _ready_service()
    info = service.get_zone_info(zone_code)
    if info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Zone '{zone_code}' not found.")
    return ZoneInfoModel(
        zoneCode=info.zone_code,
        type=info.type.value,
        region=service.catalog.region_of(info.zone_code),
        states=list(info.states),
        limitedCities={state: list(cities) for state, cities in info.limited_cities.items()},
    )


@router.post("/validate", response_model=ValidationResultModel)
async def validate_zones(payload: ZoneSelectionRequest) -> ValidationResultModel:
    service = await _ready_service()
    result = service.validate_zone_selection(payload.zones)
    return ValidationResultModel(isValid=result.is_valid, warnings=result.warnings, errors=result.errors)


@router.post("/config", response_model=ZoneConfigResponse)
async def build_zone_config(payload: ZoneSelectionRequest) -> ZoneConfigResponse:
    service = await _ready_service()
    validation = service.validate_zone_selection(payload.zones)
    if not validation.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation.errors)
    configs = service.build_zone_config(payload.zones)
    totals = service.summarize(configs)
    return ZoneConfigResponse(zones=_config_models(configs), totalStates=totals["states"], totalCities=totals["cities"])


@router.post("/confirm", response_model=ConfirmResponse)
async def confirm_zones(payload: ConfirmRequest) -> ConfirmResponse:
    """Run a full selection session: select, preview, confirm.

    With ``persist`` the confirmed configuration is also written to a run
    directory as ``summary.json`` and ``zones.csv``.
    """
    service = await _ready_service()
    validation = service.validate_zone_selection(payload.zones)
    if not validation.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation.errors)

    confirmed: list[WizardResult] = []
    wizard = ZoneSelectionWizard(
        confirmed.append,
        initial_selected_zones=payload.zones,
        blank_cell_value=payload.blank_cell_value,
        service=service,
    )
    await wizard.load()
    try:
        wizard.preview()
        result = wizard.confirm()
    except WizardTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    run_directory = None
    if payload.persist:
        storage = FileStorage()
        run_dir = storage.make_run_directory(prefix="zones")
        storage.write_json(run_dir / "summary.json", wizard_result_to_json(result))
        storage.write_csv(run_dir / "zones.csv", zone_configs_to_csv(result.zones))
        run_directory = str(run_dir)
        logging.info(f"Persisted zone configuration to {run_dir}")

    return ConfirmResponse(
        zones=_config_models(result.zones),
        priceMatrix=result.price_matrix,
        runDirectory=run_directory,
    )
