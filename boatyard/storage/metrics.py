"""Storage unit metrics — classification, bounds, area and capacity."""

from __future__ import annotations

import math

from shapely.geometry import LineString, Point, Polygon

from boatyard.config import YARD_RULES, YardRules
from boatyard.models import StorageUnit


_WAREHOUSE_MARKERS = ("warehouse", "lager", "hall")
_DOCK_MARKERS = ("dock", "brygga", "hamn")


def classify_storage(unit: StorageUnit | None) -> str:
    """Return "warehouse", "dock" or "unknown" from the unit's type field."""
    if unit is None:
        return "unknown"
    t = (unit.unit_type or "").strip().lower()
    if not t:
        return "unknown"
    if any(m in t for m in _WAREHOUSE_MARKERS):
        return "warehouse"
    if any(m in t for m in _DOCK_MARKERS):
        return "dock"
    return "unknown"


def dock_length(unit: StorageUnit) -> float:
    """Length of the dock's long axis (polyline length), in metres."""
    return float(unit.geometry.length)


def storage_bounds(unit: StorageUnit) -> tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y) in the unit's placement frame.

    Warehouses use the polygon's own coordinates.  Dock placements are
    expressed along the dock: x is the distance from the first polyline
    point, y runs across the deck from 0 to the deck width.
    """
    if isinstance(unit.geometry, LineString):
        return (0.0, 0.0, dock_length(unit), unit.width)
    xmin, ymin, xmax, ymax = unit.geometry.bounds
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def storage_area(unit: StorageUnit) -> float:
    """Floor area of a warehouse polygon (0 for docks)."""
    if not isinstance(unit.geometry, Polygon):
        return 0.0
    return float(unit.geometry.area)


def storage_capacity(unit: StorageUnit, rules: YardRules = YARD_RULES) -> int:
    """Rough number of standard boats a warehouse floor can hold.

    Only a share of the floor is usable (aisles, doors), so the area is
    scaled by ``usable_area_factor`` before dividing by the standard boat
    footprint.  Every level holds the same number of boats.
    """
    area = storage_area(unit)
    if area <= 0:
        return 0
    usable = area * rules.usable_area_factor
    per_level = math.floor(usable / rules.average_boat_area_m2)
    return per_level * max(unit.level_count, 1)


def nearest_storage_unit(
    x: float, y: float, units: list[StorageUnit],
) -> StorageUnit | None:
    """Storage unit whose geometry centroid is closest to (x, y)."""
    best: StorageUnit | None = None
    best_dist = float("inf")
    p = Point(x, y)
    for unit in units:
        d = unit.geometry.centroid.distance(p)
        if d < best_dist:
            best_dist = d
            best = unit
    return best
