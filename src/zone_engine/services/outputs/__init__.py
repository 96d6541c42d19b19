"""Serialization of confirmed zone configurations."""

from .formatter import wizard_result_to_json, zone_config_to_dict, zone_configs_to_csv

__all__ = ["wizard_result_to_json", "zone_config_to_dict", "zone_configs_to_csv"]
