"""Bounds clamping — pull boat centers back inside their storage unit."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from shapely.geometry import LineString

from boatyard.geometry.footprint import axis_aligned_half_extents
from boatyard.models import Boat, Placement, StorageUnit
from boatyard.storage.metrics import storage_bounds

from .geometry import clamp
from .models import ClampResult


log = logging.getLogger(__name__)


def clamp_position(
    boat: Boat,
    x: float,
    y: float,
    rotation: float,
    storage: StorageUnit,
    *,
    include_margin: bool = False,
) -> ClampResult:
    """Clamp a boat center so its rotated footprint stays in bounds.

    The allowed center range on each axis is
    ``[min + half_extent, max - half_extent]`` using the rotated
    half-extents.  Only the hull is considered unless *include_margin*
    is set.  When the range is degenerate (boat larger than the unit) the
    center goes to the midpoint and the result is flagged ``degenerate``.

    Docks only bound the along-axis coordinate; boats lie outside the
    deck on the cross axis.
    """
    length, width = boat.length, boat.width
    if include_margin:
        length += 2 * boat.safety_margin
        width += 2 * boat.safety_margin
    dx, dy = axis_aligned_half_extents(length, width, rotation)
    xmin, ymin, xmax, ymax = storage_bounds(storage)

    new_x, degenerate_x = clamp(x, xmin + dx, xmax - dx)
    if isinstance(storage.geometry, LineString):
        new_y, degenerate_y = y, False
    else:
        new_y, degenerate_y = clamp(y, ymin + dy, ymax - dy)

    return ClampResult(
        x=new_x,
        y=new_y,
        changed=(new_x != x or new_y != y),
        degenerate=degenerate_x or degenerate_y,
    )


def clamp_placements(
    boats: Sequence[Boat],
    storage: StorageUnit,
    placements: Sequence[Placement],
    *,
    include_margin: bool = False,
    timestamp: str | None = None,
) -> list[Placement]:
    """Clamp every placement of *storage* inside its bounds.

    Degenerate clamps are recovered to the midpoint but logged as
    warnings: they point at bad input data (a boat larger than its
    unit), not a normal operating state.
    """
    boat_map = {b.id: b for b in boats}
    adjusted = 0
    out: list[Placement] = []
    for p in placements:
        boat = boat_map.get(p.boat_id)
        if p.storage_unit_id != storage.id or boat is None:
            out.append(p)
            continue
        res = clamp_position(boat, p.x, p.y, p.rotation, storage,
                             include_margin=include_margin)
        if res.degenerate:
            log.warning(
                "Degenerate clamp: boat %s (%.1f×%.1f m at %g°) is larger than %s; "
                "centered at (%.2f, %.2f)",
                boat.id, boat.length, boat.width, p.rotation, storage.name,
                res.x, res.y,
            )
        if res.changed:
            adjusted += 1
            out.append(replace(p, x=res.x, y=res.y,
                               updated_at=timestamp or p.updated_at))
        else:
            out.append(p)
    log.info("Clamped %d placement(s) inside %s", adjusted, storage.name)
    return out
