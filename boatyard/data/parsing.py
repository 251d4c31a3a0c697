"""Record parsing — convert raw JSON dicts into yard dataclasses.

On disk, placement positions are in canvas units (decimetres); they are
converted to metres here with the configured scale.  Boats, storage
geometry and restriction zones are stored in metres.  Status and
location fields accept both the English names and the legacy Swedish
values found in older exports.
"""

from __future__ import annotations

from boatyard.config import YARD_RULES, YardRules
from boatyard.geometry.footprint import canvas_to_meters
from boatyard.models import Boat, Placement, RestrictionZone, StorageUnit
from boatyard.storage.parsing import parse_geometry


_BOAT_STATUS_ALIASES = {
    "oplacerad": "unplaced",
    "reserverad": "reserved",
    "placerad": "placed",
    "på service": "in_service",
    "service": "in_service",
    "inservice": "in_service",
}

_PLACEMENT_STATUS_ALIASES = {
    "reserverad": "reserved",
    "placerad": "placed",
}

_LOCATION_ALIASES = {
    "lager": "warehouse",
    "brygga": "dock",
    "lager_brygga": "either",
}


def _alias(value: object, aliases: dict[str, str], default: str) -> str:
    if value is None or value == "":
        return default
    text = str(value).strip().lower()
    return aliases.get(text, text)


def _opt_str(value: object) -> str | None:
    return str(value) if value not in (None, "") else None


def parse_boat(data: dict, rules: YardRules = YARD_RULES) -> Boat:
    """Parse a boat record.  Missing length/width raise KeyError."""
    margin = data.get("safety_margin")
    return Boat(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        length=float(data["length"]),
        width=float(data["width"]),
        safety_margin=float(margin) if margin is not None else rules.default_safety_margin_m,
        rotation=float(data.get("rotation", 0) or 0),
        status=_alias(data.get("current_status", data.get("status")),
                      _BOAT_STATUS_ALIASES, "unplaced"),
        location_kind=_alias(data.get("location_status", data.get("location_kind")),
                             _LOCATION_ALIASES, "warehouse"),
    )


def parse_storage_unit(data: dict, rules: YardRules = YARD_RULES) -> StorageUnit:
    """Parse a storage unit.  Malformed geometry raises StorageGeometryError."""
    unit_id = int(data["id"])
    width = data.get("width")
    return StorageUnit(
        id=unit_id,
        name=str(data.get("name", f"Storage {unit_id}")),
        unit_type=str(data.get("unit_type") or data.get("type") or data.get("Type") or ""),
        geometry=parse_geometry(data["shape_geometry"], unit_id),
        level_count=int(data.get("level_count", 1) or 1),
        width=float(width) if width is not None else rules.default_dock_width_m,
    )


def parse_placement(data: dict, rules: YardRules = YARD_RULES) -> Placement:
    """Parse a placement.  Accepts a nested ``position`` or flat coordinates."""
    pos = data.get("position")
    if isinstance(pos, dict):
        x, y = pos.get("x", 0), pos.get("y", 0)
        rotation = pos.get("rotation", 0)
    else:
        x, y = data.get("x_coordinate", 0), data.get("y_coordinate", 0)
        rotation = data.get("rotation_angle", 0)
    level = data.get("floor_number", data.get("level"))
    return Placement(
        id=int(data["id"]),
        boat_id=int(data["boat_id"]),
        storage_unit_id=int(data["storage_unit_id"]),
        x=canvas_to_meters(float(x or 0), rules),
        y=canvas_to_meters(float(y or 0), rules),
        rotation=float(rotation or 0),
        status=_alias(data.get("status"), _PLACEMENT_STATUS_ALIASES, "reserved"),
        level=int(level) if level is not None else None,
        physical_placement_date=_opt_str(data.get("physical_placement_date")),
        placed_date=_opt_str(data.get("placed_date")),
        reservation_date=_opt_str(data.get("reservation_date")),
        updated_at=_opt_str(data.get("updated_at")),
        created_at=_opt_str(data.get("created_at")),
        notes=str(data.get("notes", "") or ""),
    )


def parse_restriction_zone(data: dict) -> RestrictionZone:
    return RestrictionZone(
        id=int(data["id"]),
        storage_unit_id=int(data.get("storage_unit_id", data.get("warehouse_id"))),
        name=str(data.get("name", "")),
        x=float(data["x_coordinate"]),
        y=float(data["y_coordinate"]),
        width=float(data["width"]),
        height=float(data["height"]),
        kind=str(data.get("type", "pillar")),
    )
