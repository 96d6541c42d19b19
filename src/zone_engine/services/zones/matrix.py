"""Blank price matrix skeleton for a set of zones."""

from __future__ import annotations

from typing import Any, Iterable


def build_price_matrix(zone_codes: Iterable[str], blank_cell_value: Any = "") -> dict[str, dict[str, Any]]:
    """Square matrix keyed by zone code on both axes, self-pairs included."""
    codes = list(dict.fromkeys(zone_codes))
    return {from_zone: {to_zone: blank_cell_value for to_zone in codes} for from_zone in codes}
