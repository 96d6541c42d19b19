"""Zone assignment, validation and selection workflow."""

from .matrix import build_price_matrix
from .membership import CityMembershipIndex
from .service import ZoneAssignmentService, zone_assignment_service
from .wizard import RegionSelection, WizardState, ZoneSelectionWizard

__all__ = [
    "CityMembershipIndex",
    "RegionSelection",
    "WizardState",
    "ZoneAssignmentService",
    "ZoneSelectionWizard",
    "build_price_matrix",
    "zone_assignment_service",
]
