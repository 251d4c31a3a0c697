"""Low-level geometry helpers for the placer."""

from __future__ import annotations

from functools import lru_cache

from shapely.geometry import LineString, Polygon, box as shapely_box
from shapely.prepared import prep as shapely_prep

from boatyard.geometry.footprint import Rect
from boatyard.models import StorageUnit
from boatyard.storage.metrics import dock_length


@lru_cache(maxsize=64)
def _prepared(poly: Polygon):
    return shapely_prep(poly)


def rect_inside_polygon(rect: Rect, poly: Polygon) -> bool:
    """Check if an AABB is fully inside a Shapely polygon (edges may touch)."""
    return _prepared(poly).covers(
        shapely_box(rect.left, rect.top, rect.right, rect.bottom)
    )


def rect_inside_storage(rect: Rect, storage: StorageUnit) -> bool:
    """Check if a boat's bounding box lies within a storage unit.

    Warehouses: the box must be covered by the floor polygon.  Docks:
    boats lie alongside the deck, so only the along-axis extent is
    bounded by the dock length.
    """
    if isinstance(storage.geometry, LineString):
        return rect.left >= 0.0 and rect.right <= dock_length(storage)
    return rect_inside_polygon(rect, storage.geometry)


def clamp(value: float, lo: float, hi: float) -> tuple[float, bool]:
    """Clamp *value* into [lo, hi].

    Returns (clamped, degenerate).  A degenerate range (lo > hi) clamps
    to the midpoint.
    """
    if lo > hi:
        return ((lo + hi) / 2, True)
    return (max(lo, min(hi, value)), False)
