"""Utilities to serialize confirmed zone configurations into JSON/CSV artifacts."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import WizardResult, ZoneConfig, split_city_key


def zone_config_to_dict(config: ZoneConfig) -> dict:
    return {
        "zoneCode": config.zone_code,
        "selectedStates": list(config.selected_states),
        "selectedCities": list(config.selected_cities),
    }


def wizard_result_to_json(result: WizardResult) -> dict:
    return {
        "zones": [zone_config_to_dict(config) for config in result.zones],
        "priceMatrix": {from_zone: dict(row) for from_zone, row in result.price_matrix.items()},
    }


def zone_configs_to_csv(configs: Sequence[ZoneConfig]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=["zone_code", "state", "city"], lineterminator="\n")
    writer.writeheader()
    for config in configs:
        for key in config.selected_cities:
            city, state = split_city_key(key)
            writer.writerow({"zone_code": config.zone_code, "state": state, "city": city})
    return buffer.getvalue()
