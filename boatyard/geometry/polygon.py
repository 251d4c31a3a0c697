"""
Pure-Python polygon geometry utilities.

All coordinates in metres, storage-local frame, y growing downwards.
"""

from __future__ import annotations

from typing import Sequence

Vertex = tuple[float, float]
Ring = Sequence[Vertex]


# ── core primitives ─────────────────────────────────────────────────


def polygon_area(ring: Ring) -> float:
    """Signed area via shoelace formula (positive = CCW in a y-up frame)."""
    n = len(ring)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x0, y0 = ring[i]
        x1, y1 = ring[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return area / 2.0


def point_in_polygon(x: float, y: float, ring: Ring) -> bool:
    """Ray-casting (even-odd) point-in-polygon test."""
    n = len(ring)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def polygons_intersect(a: Ring, b: Ring) -> bool:
    """Vertex-containment overlap test in both directions.

    True if any vertex of *a* lies inside *b* or any vertex of *b* lies
    inside *a*.  This is an approximation of a full separating-axis test:
    two rectangles crossing like a plus sign, with no vertex inside the
    other, are reported as clear.  Good enough for convex hull shapes of
    similar size.
    """
    for x, y in a:
        if point_in_polygon(x, y, b):
            return True
    for x, y in b:
        if point_in_polygon(x, y, a):
            return True
    return False
