import asyncio
import itertools

import pytest

from zone_engine.errors import CatalogLoadError, NotInitializedError
from zone_engine.models.domain import ValidationResult, city_key
from zone_engine.services.zones.service import ZoneAssignmentService


def test_operations_before_initialize_raise():
    service = ZoneAssignmentService(loader=lambda: None)

    assert not service.is_initialized
    with pytest.raises(NotInitializedError):
        service.get_regions()
    with pytest.raises(NotInitializedError):
        service.get_zone_info("E1")
    with pytest.raises(NotInitializedError):
        service.validate_zone_selection({"E1"})


def test_initialize_loads_catalog_once(catalog):
    calls = []

    def loader():
        calls.append(1)
        return catalog

    service = ZoneAssignmentService(loader=loader)
    asyncio.run(service.initialize())
    asyncio.run(service.initialize())

    assert service.is_initialized
    assert len(calls) == 1
    assert list(service.get_regions()) == ["North", "East", "West", "Northeast", "Special"]


def test_initialize_propagates_catalog_load_error():
    def loader():
        raise CatalogLoadError("backing store unreachable")

    service = ZoneAssignmentService(loader=loader)

    with pytest.raises(CatalogLoadError):
        asyncio.run(service.initialize())
    assert not service.is_initialized


def test_initialize_timeout_becomes_catalog_load_error(catalog):
    import time

    def slow_loader():
        time.sleep(0.5)
        return catalog

    service = ZoneAssignmentService(loader=slow_loader)

    with pytest.raises(CatalogLoadError, match="did not finish"):
        asyncio.run(service.initialize(timeout=0.05))


def test_get_zone_info_returns_none_for_unknown_codes(service):
    assert service.get_zone_info("ZZ9") is None
    assert service.get_zone_info(" E1 ").zone_code == "E1"


@pytest.mark.parametrize("zone_code", ["N1", "E1", "E2", "W1"])
def test_full_zone_covers_every_city_in_its_states(service, catalog, zone_code):
    info = catalog.zones[zone_code]
    expected = [city_key(city, state) for state in info.states for city in catalog.cities_in_state(state)]

    [config] = service.build_zone_config([zone_code])

    assert config.zone_code == zone_code
    assert config.selected_states == list(info.states)
    assert config.selected_cities == expected


def test_limited_zone_covers_exactly_its_whitelist(service, catalog):
    [config] = service.build_zone_config(["NE1"])

    assert config.selected_states == ["Assam", "West Bengal"]
    assert config.selected_cities == [
        "Guwahati||Assam",
        "Silchar||Assam",
        "Siliguri||West Bengal",
    ]
    full_index = {city_key(city, state) for state in config.selected_states for city in catalog.cities_in_state(state)}
    assert set(config.selected_cities) < full_index


def test_same_city_name_in_two_states_stays_distinct(service):
    [config] = service.build_zone_config(["X1"])

    assert config.selected_cities == ["Aurangabad||Bihar", "Aurangabad||Maharashtra"]


def test_build_zone_config_preserves_input_order(service):
    selection = ["NE1", "E1", "N1", "X1"]

    for permutation in itertools.permutations(selection):
        configs = service.build_zone_config(list(permutation))
        assert [config.zone_code for config in configs] == list(permutation)


def test_build_zone_config_skips_unknown_codes(service):
    configs = service.build_zone_config(["NE1", "ZZ9"])

    assert [config.zone_code for config in configs] == ["NE1"]


def test_build_zone_config_ignores_duplicates(service):
    configs = service.build_zone_config(["E1", "E1", "N1"])

    assert [config.zone_code for config in configs] == ["E1", "N1"]


def test_empty_selection_is_valid(service):
    assert service.validate_zone_selection(set()) == ValidationResult(is_valid=True, warnings=[], errors=[])


def test_unknown_zone_is_an_error(service):
    result = service.validate_zone_selection({"NE1", "ZZ9"})

    assert result.is_valid is False
    assert result.errors == ["unknown zone ZZ9"]


def test_limited_and_full_zone_sharing_a_city_warns(service):
    result = service.validate_zone_selection({"NE1", "E1"})

    assert result.is_valid is True
    assert result.errors == []
    assert len(result.warnings) == 1
    assert "overlap" in result.warnings[0]
    assert "Siliguri" in result.warnings[0]
    assert "West Bengal" in result.warnings[0]


def test_single_limited_zone_has_no_warnings(service):
    result = service.validate_zone_selection({"NE1"})

    assert result == ValidationResult(is_valid=True, warnings=[], errors=[])


def test_zones_without_shared_cities_do_not_warn(service):
    result = service.validate_zone_selection({"N1", "E1", "W1"})

    assert result.warnings == []


def test_overlap_warning_does_not_mask_unknown_zone_error(service):
    result = service.validate_zone_selection(["E1", "NE1", "ZZ9"])

    assert result.is_valid is False
    assert result.errors == ["unknown zone ZZ9"]
    assert len(result.warnings) == 1


def test_validation_is_idempotent(service):
    selection = {"X1", "E2", "W1", "NE1", "E1"}

    first = service.validate_zone_selection(selection)
    second = service.validate_zone_selection(selection)

    assert first == second
    assert len(first.warnings) == 3


def test_overlaps_report_shared_cities(service):
    [overlap] = service.overlaps(["E2", "X1"])

    assert (overlap.zone_a, overlap.zone_b) == ("E2", "X1")
    assert overlap.shared_cities == ("Aurangabad||Bihar",)
    assert overlap.shared_states == ["Bihar"]


def test_membership_index_lists_every_zone_for_a_city(service):
    assert service.membership.zones_for("Siliguri", "West Bengal") == ("E1", "NE1")
    assert service.membership.zones_for("Kolkata", "West Bengal") == ("E1",)
    assert "Aurangabad||Maharashtra" in service.membership.contested_cities()


def test_summarize_totals(service):
    configs = service.build_zone_config(["E1", "NE1"])

    assert service.summarize(configs) == {"zones": 2, "states": 4, "cities": 8}
