"""Yard record dataclasses — boats, storage units, placements, zones.

All physical quantities are in metres.  Placement coordinates are the
boat's *center* in the storage unit's local frame.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry.base import BaseGeometry


# ── Enumerations (plain strings, as stored on disk) ────────────────

BOAT_STATUSES = ("unplaced", "reserved", "placed", "in_service")
PLACEMENT_STATUSES = ("reserved", "placed")
LOCATION_KINDS = ("warehouse", "dock", "either")
STORAGE_KINDS = ("warehouse", "dock")


@dataclass
class Boat:
    id: int
    name: str
    length: float
    width: float
    safety_margin: float = 0.5
    rotation: float = 0.0
    status: str = "unplaced"            # see BOAT_STATUSES
    location_kind: str = "warehouse"    # "warehouse" | "dock" | "either"

    def allows(self, category: str) -> bool:
        """True if this boat may be stored in a unit of *category*."""
        return self.location_kind == "either" or self.location_kind == category


@dataclass
class StorageUnit:
    """A warehouse (closed polygon) or dock (open polyline)."""

    id: int
    name: str
    unit_type: str                      # raw type field, e.g. "warehouse", "Brygga"
    geometry: BaseGeometry              # Polygon for warehouses, LineString for docks
    level_count: int = 1
    width: float = 2.0                  # dock deck width (docks only)


@dataclass
class Placement:
    id: int
    boat_id: int
    storage_unit_id: int
    x: float
    y: float
    rotation: float = 0.0
    status: str = "reserved"            # "reserved" | "placed"
    level: int | None = None
    physical_placement_date: str | None = None
    placed_date: str | None = None
    reservation_date: str | None = None
    updated_at: str | None = None
    created_at: str | None = None
    notes: str = ""


@dataclass
class RestrictionZone:
    """Axis-aligned no-place rectangle inside a warehouse.

    (x, y) is the top-left corner in the storage frame.
    """

    id: int
    storage_unit_id: int
    name: str
    x: float
    y: float
    width: float
    height: float
    kind: str = "pillar"                # "pillar" | "equipment" | "doorway" | ...
