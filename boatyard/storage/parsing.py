"""Storage geometry parsing — GeoJSON text/mapping into shapely geometry.

Storage boundaries are never replaced with a default shape: a wrong
boundary would hide real out-of-bounds placements, so any malformed
input fails fast with a StorageGeometryError.
"""

from __future__ import annotations

import json
import math

from shapely.geometry import LineString, Polygon


class StorageGeometryError(ValueError):
    """Raised when a storage unit's geometry cannot be parsed."""

    def __init__(self, unit_id: object, reason: str) -> None:
        self.unit_id = unit_id
        self.reason = reason
        super().__init__(f"Storage unit {unit_id!r}: {reason}")


def _coords(raw: object, unit_id: object) -> list[tuple[float, float]]:
    """Validate a list of [x, y] pairs and return float tuples."""
    if not isinstance(raw, list):
        raise StorageGeometryError(unit_id, "coordinates must be a list")
    pts: list[tuple[float, float]] = []
    for i, c in enumerate(raw):
        if not isinstance(c, (list, tuple)) or len(c) < 2:
            raise StorageGeometryError(unit_id, f"coordinate {i} is not an [x, y] pair")
        try:
            x, y = float(c[0]), float(c[1])
        except (TypeError, ValueError):
            raise StorageGeometryError(unit_id, f"coordinate {i} is not numeric") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise StorageGeometryError(unit_id, f"coordinate {i} is not finite")
        pts.append((x, y))
    return pts


def parse_geometry(raw: str | dict, unit_id: object = None) -> Polygon | LineString:
    """Parse a GeoJSON ``Polygon`` or ``LineString`` (metres).

    Accepts either the JSON text (as stored in a ``shape_geometry``
    column) or an already-decoded mapping.  For polygons only the outer
    ring is used.
    """
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageGeometryError(unit_id, f"invalid GeoJSON text: {exc}") from exc
    else:
        data = raw

    if not isinstance(data, dict) or "type" not in data or "coordinates" not in data:
        raise StorageGeometryError(unit_id, "GeoJSON must have 'type' and 'coordinates'")

    gtype = data["type"]
    if gtype == "Polygon":
        rings = data["coordinates"]
        if not isinstance(rings, list) or not rings:
            raise StorageGeometryError(unit_id, "Polygon has no rings")
        ring = _coords(rings[0], unit_id)
        # GeoJSON rings repeat the first point; shapely closes them itself
        if len(ring) > 1 and ring[0] == ring[-1]:
            ring = ring[:-1]
        if len(ring) < 3:
            raise StorageGeometryError(unit_id, f"Polygon ring has only {len(ring)} distinct points")
        poly = Polygon(ring)
        if not poly.is_valid:
            raise StorageGeometryError(unit_id, "Polygon is self-intersecting or otherwise invalid")
        if poly.area <= 0:
            raise StorageGeometryError(unit_id, "Polygon has zero area")
        return poly

    if gtype == "LineString":
        pts = _coords(data["coordinates"], unit_id)
        if len(pts) < 2:
            raise StorageGeometryError(unit_id, "LineString needs at least 2 points")
        line = LineString(pts)
        if line.length <= 0:
            raise StorageGeometryError(unit_id, "LineString has zero length")
        return line

    raise StorageGeometryError(unit_id, f"unsupported geometry type {gtype!r}")

