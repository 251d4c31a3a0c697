"""Yard loader — reads the JSON data directory, parses and validates it.

A data directory holds:

  boats.json              boat records
  storage_units.json      warehouses and docks (GeoJSON geometry)
  placements.json         boat placements (positions in canvas units)
  restriction_zones.json  optional no-place rectangles (metres)
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Callable

from boatyard.config import YARD_RULES, YardRules
from boatyard.models import Boat, Placement, RestrictionZone

from .models import ValidationError, YardData
from .parsing import parse_boat, parse_placement, parse_restriction_zone, parse_storage_unit
from .serialization import boat_to_dict, placement_to_dict, restriction_zone_to_dict


log = logging.getLogger(__name__)

BOATS_FILE = "boats.json"
STORAGE_FILE = "storage_units.json"
PLACEMENTS_FILE = "placements.json"
ZONES_FILE = "restriction_zones.json"


# ── Validation ─────────────────────────────────────────────────────

def _validate_boat(boat: Boat, record: str) -> list[ValidationError]:
    errs: list[ValidationError] = []
    if boat.length <= 0:
        errs.append(ValidationError(record, "length", "Must be > 0"))
    if boat.width <= 0:
        errs.append(ValidationError(record, "width", "Must be > 0"))
    if boat.safety_margin < 0:
        errs.append(ValidationError(record, "safety_margin", "Must be >= 0"))
    if boat.location_kind not in ("warehouse", "dock", "either"):
        errs.append(ValidationError(record, "location_status",
                                    f"Unknown location '{boat.location_kind}'"))
    return errs


def _validate_placements(data: YardData) -> list[ValidationError]:
    errs: list[ValidationError] = []
    boat_ids = {b.id for b in data.boats}
    unit_ids = {u.id for u in data.storage_units}
    seen: set[int] = set()
    for p in data.placements:
        record = f"placement {p.id}"
        if p.id in seen:
            errs.append(ValidationError(record, "id", "Duplicate placement ID"))
        seen.add(p.id)
        if p.boat_id not in boat_ids:
            errs.append(ValidationError(record, "boat_id", f"Unknown boat {p.boat_id}"))
        if p.storage_unit_id not in unit_ids:
            errs.append(ValidationError(record, "storage_unit_id",
                                        f"Unknown storage unit {p.storage_unit_id}"))
        if p.status not in ("reserved", "placed"):
            errs.append(ValidationError(record, "status", f"Unknown status '{p.status}'"))
    return errs


# ── Reading ────────────────────────────────────────────────────────

def _read_list(path: Path, required: bool = True) -> list[dict]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Missing data file: {path}")
        return []
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a JSON list of records")
    return raw


def _parse_records(
    raw: list[dict],
    parse: Callable[[dict], Any],
    label: str,
    errors: list[ValidationError],
) -> list[Any]:
    """Parse every record, recording failures instead of raising."""
    out = []
    for i, item in enumerate(raw):
        try:
            out.append(parse(item))
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(ValidationError(f"{label}[{i}]", "record", f"Parse error: {exc!r}"))
    return out


def load_yard(directory: Path | str, rules: YardRules = YARD_RULES) -> YardData:
    """Load a yard data directory.

    Boat, placement and zone records that fail to parse are skipped with
    a ValidationError recorded.  Storage geometry is not forgiven: a
    malformed boundary raises StorageGeometryError immediately, since a
    wrong boundary would hide real out-of-bounds placements.
    """
    d = Path(directory)
    data = YardData(directory=d)

    data.storage_units = [
        parse_storage_unit(item, rules)
        for item in _read_list(d / STORAGE_FILE)
    ]

    data.boats = _parse_records(
        _read_list(d / BOATS_FILE), lambda r: parse_boat(r, rules), "boats", data.errors)
    for boat in data.boats:
        data.errors.extend(_validate_boat(boat, f"boat {boat.id}"))

    data.placements = _parse_records(
        _read_list(d / PLACEMENTS_FILE), lambda r: parse_placement(r, rules),
        "placements", data.errors)
    data.restriction_zones = _parse_records(
        _read_list(d / ZONES_FILE, required=False), parse_restriction_zone,
        "restriction_zones", data.errors)

    data.errors.extend(_validate_placements(data))

    log.info(
        "Loaded %d boat(s), %d storage unit(s), %d placement(s), %d zone(s) from %s",
        len(data.boats), len(data.storage_units), len(data.placements),
        len(data.restriction_zones), d,
    )
    for err in data.errors:
        log.warning("%s", err)
    return data


# ── Writing ────────────────────────────────────────────────────────

def _write_json(path: Path, payload: Any, backup: bool) -> Path:
    if backup and path.exists():
        shutil.copyfile(path, path.with_name(path.name + ".bak"))
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
                    encoding="utf-8")
    return path


def save_placements(
    directory: Path | str,
    placements: list[Placement],
    *,
    rules: YardRules = YARD_RULES,
    backup: bool = True,
) -> Path:
    """Write placements.json, keeping a .bak copy of the previous file."""
    payload = [placement_to_dict(p, rules) for p in placements]
    return _write_json(Path(directory) / PLACEMENTS_FILE, payload, backup)


def save_boats(directory: Path | str, boats: list[Boat], *, backup: bool = True) -> Path:
    return _write_json(Path(directory) / BOATS_FILE,
                       [boat_to_dict(b) for b in boats], backup)


def save_restriction_zones(
    directory: Path | str, zones: list[RestrictionZone], *, backup: bool = True,
) -> Path:
    return _write_json(Path(directory) / ZONES_FILE,
                       [restriction_zone_to_dict(z) for z in zones], backup)
