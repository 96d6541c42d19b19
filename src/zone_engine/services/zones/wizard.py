"""Zone selection workflow: select zones, preview their coverage, confirm."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from ...config import settings
from ...errors import CatalogLoadError, WizardTransitionError
from ...models.domain import ValidationResult, WizardResult, ZoneConfig
from .matrix import build_price_matrix
from .service import ZoneAssignmentService, zone_assignment_service

LOAD_ERROR_MESSAGE = "Failed to load zone data. Please refresh the page."


class WizardState(str, Enum):
    LOADING = "loading"
    SELECTING = "selecting"
    PREVIEWING = "previewing"
    CONFIRMED = "confirmed"
    ERROR = "error"


@dataclass(slots=True)
class RegionSelection:
    region: str
    zones: tuple[str, ...]
    selected_zones: list[str] = field(default_factory=list)
    expanded: bool = True


class ZoneSelectionWizard:
    """Drives one zone-selection session against the assignment service.

    The selection is the only mutable input. Validation and the per-region
    views are recomputed from it after every change; the preview is built
    from it on demand.
    """

    def __init__(
        self,
        on_complete: Callable[[WizardResult], Any],
        *,
        initial_selected_zones: Sequence[str] = (),
        blank_cell_value: Any = None,
        service: ZoneAssignmentService | None = None,
    ) -> None:
        self._on_complete = on_complete
        self._initial_selected_zones = tuple(initial_selected_zones)
        self._blank_cell_value = settings.blank_cell_value if blank_cell_value is None else blank_cell_value
        self._service = service or zone_assignment_service

        self._load_started = False
        self._state = WizardState.LOADING
        self._error: Optional[str] = None
        self._selection: dict[str, None] = {}
        self._region_selections: list[RegionSelection] = []
        self._validation = ValidationResult()
        self._preview: list[ZoneConfig] = []

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def selected_zones(self) -> tuple[str, ...]:
        return tuple(self._selection)

    @property
    def selected_zone_count(self) -> int:
        return len(self._selection)

    @property
    def validation(self) -> ValidationResult:
        return self._validation

    @property
    def region_selections(self) -> list[RegionSelection]:
        return self._region_selections

    @property
    def preview_configs(self) -> list[ZoneConfig]:
        return self._preview

    @property
    def total_city_count(self) -> int:
        return sum(len(config.selected_cities) for config in self._preview)

    async def load(self) -> None:
        """Load the catalog once per wizard instance; later calls do nothing."""
        if self._load_started:
            return
        self._load_started = True

        try:
            await self._service.initialize()
        except CatalogLoadError as exc:
            logging.error(f"Zone selection could not load the geography catalog: {exc}")
            self._state = WizardState.ERROR
            self._error = LOAD_ERROR_MESSAGE
            return

        self._region_selections = [
            RegionSelection(region=region, zones=tuple(zones))
            for region, zones in self._service.get_regions().items()
        ]
        self._selection = {
            code.strip(): None for code in self._initial_selected_zones if self._service.get_zone_info(code) is not None
        }
        self._state = WizardState.SELECTING
        self._refresh()

    def toggle_zone(self, zone_code: str) -> None:
        self._require(WizardState.SELECTING, "toggle a zone")
        zone_code = zone_code.strip()
        selection = dict(self._selection)
        if zone_code in selection:
            del selection[zone_code]
        else:
            selection[zone_code] = None
        self._commit(selection)

    def set_region(self, region: str, select_all: bool) -> None:
        """Add or remove every zone of a region in a single selection update."""
        self._require(WizardState.SELECTING, "change a region")
        region_data = next((rs for rs in self._region_selections if rs.region == region), None)
        if region_data is None:
            logging.warning(f"Ignoring selection change for unknown region '{region}'")
            return
        selection = dict(self._selection)
        for zone_code in region_data.zones:
            if select_all:
                selection.setdefault(zone_code, None)
            else:
                selection.pop(zone_code, None)
        self._commit(selection)

    def select_region(self, region: str) -> None:
        self.set_region(region, True)

    def clear_region(self, region: str) -> None:
        self.set_region(region, False)

    def toggle_region_expanded(self, region: str) -> None:
        for rs in self._region_selections:
            if rs.region == region:
                rs.expanded = not rs.expanded

    def preview(self) -> list[ZoneConfig]:
        self._require(WizardState.SELECTING, "preview")
        if not self._selection:
            self._reject("Please select at least one zone")
        if not self._validation.is_valid:
            self._reject(f"Selection has errors: {'; '.join(self._validation.errors)}")

        self._preview = self._service.build_zone_config(self._selection)
        self._state = WizardState.PREVIEWING
        return self._preview

    def back_to_selection(self) -> None:
        self._require(WizardState.PREVIEWING, "return to selection")
        self._preview = []
        self._state = WizardState.SELECTING

    def confirm(self) -> WizardResult:
        self._require(WizardState.PREVIEWING, "confirm")
        if not self._preview:
            self._reject("No zones configured")

        zone_codes = [config.zone_code for config in self._preview]
        result = WizardResult(
            zones=list(self._preview),
            price_matrix=build_price_matrix(zone_codes, self._blank_cell_value),
        )
        self._on_complete(result)
        self._state = WizardState.CONFIRMED
        logging.info(f"Configured {len(zone_codes)} zones with {self.total_city_count} cities")
        return result

    def _commit(self, selection: dict[str, None]) -> None:
        self._selection = selection
        self._refresh()

    def _refresh(self) -> None:
        self._validation = self._service.validate_zone_selection(self._selection)
        for rs in self._region_selections:
            rs.selected_zones = [code for code in self._selection if code in rs.zones]

    def _require(self, expected: WizardState, action: str) -> None:
        if self._state is not expected:
            self._reject(f"Cannot {action} while the wizard is {self._state.value}")

    def _reject(self, message: str) -> None:
        logging.warning(f"Zone selection rejected: {message}")
        raise WizardTransitionError(message, state=self._state.value)
