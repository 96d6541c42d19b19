import pytest

from zone_engine.data.catalog_repository import build_catalog, load_catalog
from zone_engine.models.domain import GeographyCatalog
from zone_engine.schemas.catalog import CatalogDocument
from zone_engine.services.zones.service import ZoneAssignmentService


def sample_document() -> dict:
    return {
        "regions": {
            "North": ["N1"],
            "East": ["E1", "E2"],
            "West": ["W1"],
            "Northeast": ["NE1"],
            "Special": ["X1"],
        },
        "zones": {
            "N1": {"type": "full", "states": ["Delhi"]},
            "E1": {"type": "full", "states": ["West Bengal", "Odisha"]},
            "E2": {"type": "full", "states": ["Bihar"]},
            "W1": {"type": "full", "states": ["Maharashtra"]},
            "NE1": {
                "type": "limited",
                "states": ["Assam", "West Bengal"],
                "limited_cities": {"Assam": ["Guwahati", "Silchar"], "West Bengal": ["Siliguri"]},
            },
            "X1": {
                "type": "limited",
                "limited_cities": {"Bihar": ["Aurangabad"], "Maharashtra": ["Aurangabad"]},
            },
        },
        "cities": {
            "Delhi": ["New Delhi"],
            "West Bengal": ["Kolkata", "Siliguri", "Howrah"],
            "Odisha": ["Cuttack", "Puri"],
            "Bihar": ["Patna", "Aurangabad"],
            "Maharashtra": ["Aurangabad", "Pune"],
            "Assam": ["Guwahati", "Silchar", "Jorhat"],
        },
    }


@pytest.fixture
def catalog() -> GeographyCatalog:
    return build_catalog(CatalogDocument.model_validate(sample_document()), source="test")


@pytest.fixture
def service(catalog: GeographyCatalog) -> ZoneAssignmentService:
    zone_service = ZoneAssignmentService(loader=lambda: catalog)
    zone_service.initialize_with(catalog)
    return zone_service


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    load_catalog.cache_clear()
    yield
    load_catalog.cache_clear()


@pytest.fixture
def catalog_document() -> dict:
    return sample_document()
