"""Geography catalog loader with database-first approach, falling back to a file."""

from __future__ import annotations

import functools
import json
import logging
import zipfile
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import CatalogLoadError
from ..models.domain import GeographyCatalog, ZoneInfo, ZoneType
from ..schemas.catalog import CatalogDocument, CatalogZoneModel

ZONE_SHEET = "Zones"
CITY_SHEET = "Cities"


def _coerce_json(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value) if value.strip() else None
    return value


def _load_document_from_database() -> CatalogDocument | None:
    """Load the catalog from Supabase. Returns None if the database is not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        zone_rows = supabase.table(settings.catalog_zones_table).select("*").execute().data
        city_rows = supabase.table(settings.catalog_cities_table).select("*").execute().data
    except Exception as e:
        logging.warning(f"Catalog query failed, falling back to file: {e}")
        return None

    if not zone_rows or not city_rows:
        logging.debug("Remote catalog tables are empty, falling back to file")
        return None

    regions: dict[str, list[str]] = {}
    zones: dict[str, dict[str, Any]] = {}
    cities: dict[str, list[str]] = {}
    try:
        for row in zone_rows:
            code = str(row["zone_code"])
            regions.setdefault(str(row["region"]), []).append(code)
            zones[code] = {
                "type": row["zone_type"],
                "states": _coerce_json(row.get("states")) or [],
                "limited_cities": _coerce_json(row.get("limited_cities")) or {},
            }
        for row in city_rows:
            cities.setdefault(str(row["state"]), []).append(str(row["city"]))
        return CatalogDocument.model_validate({"regions": regions, "zones": zones, "cities": cities})
    except (KeyError, TypeError, ValueError) as exc:
        # ValidationError and JSONDecodeError are both ValueError subclasses
        raise CatalogLoadError(f"Remote catalog rows are malformed: {exc}") from exc


def _load_document_from_json(path: Path) -> CatalogDocument:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise CatalogLoadError(f"Catalog file could not be read: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog file '{path}' is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise CatalogLoadError(f"Catalog file '{path}' is not UTF-8 text: {exc}") from exc
    try:
        return CatalogDocument.model_validate(payload)
    except ValidationError as exc:
        raise CatalogLoadError(f"Catalog file '{path}' is malformed: {exc}") from exc


def _header_map(header: Iterable[Any] | None, required: set[str], sheet: str) -> dict[str, int]:
    if header is None:
        raise CatalogLoadError(f"Catalog sheet '{sheet}' is empty.")
    header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
    missing_columns = required - set(header_map)
    if missing_columns:
        raise CatalogLoadError(f"Catalog sheet '{sheet}' missing columns: {', '.join(sorted(missing_columns))}")
    return header_map


def _cell(row: tuple, index: int) -> str:
    value = row[index] if index < len(row) else None
    return "" if value is None else str(value).strip()


def _load_document_from_workbook(path: Path) -> CatalogDocument:
    """Read a two-sheet workbook: Zones (Region, Zone, Type, State, City) and Cities (State, City)."""
    try:
        wb = load_workbook(path, data_only=True, read_only=True)
    except (OSError, KeyError, InvalidFileException, zipfile.BadZipFile) as exc:
        raise CatalogLoadError(f"Catalog workbook could not be opened: {path}") from exc

    try:
        if ZONE_SHEET not in wb.sheetnames or CITY_SHEET not in wb.sheetnames:
            raise CatalogLoadError(f"Catalog workbook '{path}' needs '{ZONE_SHEET}' and '{CITY_SHEET}' sheets.")

        regions: dict[str, list[str]] = {}
        zones: dict[str, dict[str, Any]] = {}
        rows = wb[ZONE_SHEET].iter_rows(min_row=1, values_only=True)
        columns = _header_map(next(rows, None), {"Region", "Zone", "Type", "State", "City"}, ZONE_SHEET)
        for row in rows:
            code = _cell(row, columns["Zone"])
            if not code:
                continue
            region = _cell(row, columns["Region"])
            zone_type = _cell(row, columns["Type"]).lower()
            state = _cell(row, columns["State"])
            city = _cell(row, columns["City"])

            region_zones = regions.setdefault(region, [])
            if code not in region_zones:
                region_zones.append(code)
            zone = zones.setdefault(code, {"type": zone_type, "states": [], "limited_cities": {}})
            if zone["type"] != zone_type:
                raise CatalogLoadError(f"Zone '{code}' is declared as both '{zone['type']}' and '{zone_type}'.")
            if state and state not in zone["states"]:
                zone["states"].append(state)
            if zone_type == ZoneType.LIMITED.value and state and city:
                zone["limited_cities"].setdefault(state, []).append(city)

        cities: dict[str, list[str]] = {}
        rows = wb[CITY_SHEET].iter_rows(min_row=1, values_only=True)
        columns = _header_map(next(rows, None), {"State", "City"}, CITY_SHEET)
        for row in rows:
            state = _cell(row, columns["State"])
            city = _cell(row, columns["City"])
            if state and city:
                cities.setdefault(state, []).append(city)
    finally:
        wb.close()

    try:
        return CatalogDocument.model_validate({"regions": regions, "zones": zones, "cities": cities})
    except ValidationError as exc:
        raise CatalogLoadError(f"Catalog workbook '{path}' is malformed: {exc}") from exc


def _load_document_from_file(source: Path | None = None) -> CatalogDocument:
    path = source or settings.catalog_file
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found: {path}")
    if path.suffix.lower() == ".xlsx":
        return _load_document_from_workbook(path)
    return _load_document_from_json(path)


def _build_zone(code: str, definition: CatalogZoneModel, cities: dict[str, list[str]]) -> ZoneInfo:
    if definition.type == ZoneType.FULL.value:
        if not definition.states:
            raise CatalogLoadError(f"Full zone '{code}' lists no states.")
        unknown_states = [state for state in definition.states if state not in cities]
        if unknown_states:
            raise CatalogLoadError(f"Full zone '{code}' covers states missing from the city index: {', '.join(unknown_states)}")
        return ZoneInfo(zone_code=code, type=ZoneType.FULL, states=tuple(definition.states))

    whitelist = {state: cities_ for state, cities_ in definition.limited_cities.items() if cities_}
    if not whitelist:
        raise CatalogLoadError(f"Limited zone '{code}' has no whitelisted cities.")
    derived_states = list(whitelist)
    if definition.states and set(definition.states) != set(derived_states):
        raise CatalogLoadError(
            f"Limited zone '{code}' declares states {definition.states} but whitelists cities in {derived_states}."
        )
    for state, state_cities in whitelist.items():
        known = set(cities.get(state, ()))
        missing = [city for city in state_cities if city not in known]
        if missing:
            raise CatalogLoadError(f"Limited zone '{code}' whitelists unknown cities in {state}: {', '.join(missing)}")
    return ZoneInfo(
        zone_code=code,
        type=ZoneType.LIMITED,
        states=tuple(derived_states),
        limited_cities=MappingProxyType({state: tuple(values) for state, values in whitelist.items()}),
    )


def build_catalog(document: CatalogDocument, *, source: str = "memory") -> GeographyCatalog:
    """Check the inbound contract and freeze the document into a GeographyCatalog."""
    owner: dict[str, str] = {}
    for region, zone_codes in document.regions.items():
        for code in zone_codes:
            if code not in document.zones:
                raise CatalogLoadError(f"Region '{region}' references zone '{code}' which has no definition.")
            if code in owner and owner[code] != region:
                raise CatalogLoadError(f"Zone '{code}' is listed in both '{owner[code]}' and '{region}'.")
            owner[code] = region

    zones = {code: _build_zone(code, definition, document.cities) for code, definition in document.zones.items()}

    orphans = [code for code in zones if code not in owner]
    if orphans:
        logging.warning(f"Catalog zones without a region: {', '.join(orphans)}")

    return GeographyCatalog(
        regions=MappingProxyType({region: tuple(codes) for region, codes in document.regions.items()}),
        zones=MappingProxyType(zones),
        cities=MappingProxyType({state: tuple(values) for state, values in document.cities.items()}),
        source=source,
    )


@functools.lru_cache(maxsize=1)
def load_catalog(source: Path | None = None) -> GeographyCatalog:
    """Load the geography catalog from the database first, falling back to the catalog file.

    An explicit ``source`` path skips the database.
    """
    document = None
    origin = "database"
    if source is None:
        document = _load_document_from_database()
    if document is None:
        path = source or settings.catalog_file
        document = _load_document_from_file(path)
        origin = str(path)

    catalog = build_catalog(document, source=origin)
    logging.info(
        f"Loaded geography catalog from {origin}: {len(catalog.regions)} regions, "
        f"{len(catalog.zones)} zones, {catalog.city_count} cities"
    )
    return catalog
