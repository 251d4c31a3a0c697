"""Bulk auto-layout — warehouse row packing and dock column distribution.

Both routines are deterministic transforms over plain records:
``(boats, storage, placements) -> placements'``.  Input records are
never mutated; moved placements are replaced with updated copies and new
placements are appended with ids following the current maximum.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from shapely.geometry import Polygon

from boatyard.geometry.footprint import (
    Rect, effective_footprint, rect_around, rects_overlap,
)
from boatyard.models import Boat, Placement, RestrictionZone, StorageUnit
from boatyard.storage.metrics import classify_storage, dock_length, storage_bounds

from .geometry import rect_inside_polygon
from .models import (
    BoatShape,
    DOCK_BOTTOM_ROTATION, DOCK_SIDE_GAP_M, DOCK_START_OFFSET_M, DOCK_STEP_M,
    DOCK_TOP_ROTATION, PACKING_ROTATIONS, WAREHOUSE_GAP_M,
    WAREHOUSE_WALL_MARGIN_M,
)


log = logging.getLogger(__name__)

# Smallest separation used when the configured gap is zero, so touching
# rectangles (which count as overlapping) are never produced.
_MIN_GAP = 1e-6
# Horizontal probe step when a non-rectangular floor rejects a spot.
_FLOOR_PROBE_STEP = 0.5


# ── Shared helpers ─────────────────────────────────────────────────


def _by_size(boats: Iterable[Boat]) -> list[Boat]:
    """First-fit-decreasing order: longest first, ties by id."""
    return sorted(boats, key=lambda b: (-b.length, b.id))


def _next_id(placements: Sequence[Placement]) -> int:
    return max((p.id for p in placements), default=0) + 1


def _occupied_boat_ids(
    placements: Sequence[Placement],
    storage: StorageUnit,
    storage_units: Sequence[StorageUnit] | None,
) -> set[int]:
    """Boats that already hold a placement in the unit's category."""
    category = classify_storage(storage)
    units = {u.id: u for u in storage_units or ()}
    units[storage.id] = storage
    occupied: set[int] = set()
    for p in placements:
        unit = units.get(p.storage_unit_id)
        if p.storage_unit_id == storage.id or (
            unit is not None and classify_storage(unit) == category
        ):
            occupied.add(p.boat_id)
    return occupied


def _new_placement(
    pid: int,
    boat: Boat,
    storage: StorageUnit,
    x: float,
    y: float,
    rotation: float,
    status: str,
    timestamp: str | None,
    note: str,
) -> Placement:
    return Placement(
        id=pid,
        boat_id=boat.id,
        storage_unit_id=storage.id,
        x=x, y=y, rotation=rotation,
        status=status,
        level=1 if classify_storage(storage) == "warehouse" else None,
        physical_placement_date=timestamp if status == "placed" else None,
        placed_date=timestamp,
        reservation_date=timestamp,
        updated_at=timestamp,
        created_at=timestamp,
        notes=note,
    )


# ── Warehouse row packing ──────────────────────────────────────────


def _fit_in_row(
    x_start: float,
    y_top: float,
    options: Sequence[tuple[float, float, float]],
    inner: tuple[float, float, float, float],
    obstacles: list[Rect],
    floor: Polygon,
    gap: float,
) -> tuple[float, float, float, Rect] | None:
    """First spot in a row, scanning right from *x_start*.

    Tries each (rotation, half_w, half_h) option in order, sliding the
    candidate past any obstacle it overlaps.  Returns (rotation, cx, cy,
    margin_rect) or None if no option fits before the row's right edge.
    """
    _, _, x2, y2 = inner
    for rotation, hw, hh in options:
        cx = x_start + hw
        cy = y_top + hh
        while True:
            rect = rect_around(cx, cy, hw, hh)
            if rect.right > x2 or rect.bottom > y2:
                break
            blocker = next((o for o in obstacles if rects_overlap(rect, o)), None)
            if blocker is not None:
                cx = blocker.right + gap + hw
                continue
            if not rect_inside_polygon(rect, floor):
                cx += _FLOOR_PROBE_STEP
                continue
            return (rotation, cx, cy, rect)
    return None


def pack_warehouse(
    boats: Sequence[Boat],
    storage: StorageUnit,
    placements: Sequence[Placement],
    zones: Sequence[RestrictionZone] = (),
    *,
    storage_units: Sequence[StorageUnit] | None = None,
    wall_margin: float = WAREHOUSE_WALL_MARGIN_M,
    gap: float = WAREHOUSE_GAP_M,
    status: str = "placed",
    timestamp: str | None = None,
) -> list[Placement]:
    """Fill a warehouse with unplaced boats, row by row.

    Greedy first-fit decreasing on the margin footprint: the longest
    boats go first.  Each boat is tried at 0° then 90° in the current
    row; if neither fits, the row wraps (advancing by the tallest boat in
    the row plus *gap*) and both orientations are tried again.  A boat
    that fits nowhere is skipped and left unplaced.

    Boats already holding a placement in this unit, or in any warehouse
    when *storage_units* is given, are not packed again.  Existing
    placements in the unit and its restriction zones are obstacles.

    Returns the full placement list with the new placements appended.
    """
    if not isinstance(storage.geometry, Polygon):
        raise ValueError(f"Storage unit {storage.id} is not a warehouse polygon")

    boat_map = {b.id: b for b in boats}
    gap = max(gap, _MIN_GAP)
    xmin, ymin, xmax, ymax = storage_bounds(storage)
    inner = (xmin + wall_margin, ymin + wall_margin,
             xmax - wall_margin, ymax - wall_margin)

    obstacles: list[Rect] = []
    for p in placements:
        if p.storage_unit_id != storage.id:
            continue
        boat = boat_map.get(p.boat_id)
        if boat is None:
            log.warning("Placement %s references unknown boat %s; ignored as obstacle",
                        p.id, p.boat_id)
            continue
        obstacles.append(BoatShape.from_placement(boat, p).margin_rect())
    for z in zones:
        if z.storage_unit_id == storage.id:
            obstacles.append(Rect(z.x, z.y, z.x + z.width, z.y + z.height))

    occupied = _occupied_boat_ids(placements, storage, storage_units)
    candidates = _by_size(
        b for b in boats
        if b.allows("warehouse") and b.status != "in_service" and b.id not in occupied
    )

    result = list(placements)
    pid = _next_id(placements)
    cursor_x, cursor_y = inner[0], inner[1]
    row_height = 0.0
    row_used = False

    for boat in candidates:
        length, width = effective_footprint(boat)
        options = [
            (rot, length / 2, width / 2) if rot % 180 == 0 else (rot, width / 2, length / 2)
            for rot in PACKING_ROTATIONS
        ]

        spot = _fit_in_row(cursor_x, cursor_y, options, inner, obstacles,
                           storage.geometry, gap)
        wrapped_y = None
        if spot is None and row_used:
            wrapped_y = cursor_y + row_height + gap
            spot = _fit_in_row(inner[0], wrapped_y, options, inner, obstacles,
                               storage.geometry, gap)
        if spot is None:
            log.warning("Boat %s (%.1f×%.1f m) does not fit in %s; left unplaced",
                        boat.id, boat.length, boat.width, storage.name)
            continue

        rotation, cx, cy, rect = spot
        if wrapped_y is not None:
            cursor_y = wrapped_y
            row_height = 0.0
        obstacles.append(rect)
        row_height = max(row_height, rect.height)
        cursor_x = rect.right + gap
        row_used = True

        result.append(_new_placement(
            pid, boat, storage, cx, cy, rotation, status, timestamp,
            note=f"Auto-placed in {storage.name}",
        ))
        log.info("Packed boat %s at (%.2f, %.2f) rot=%g° in %s",
                 boat.id, cx, cy, rotation, storage.name)
        pid += 1

    return result


# ── Dock column distribution ───────────────────────────────────────


def _dock_layout(
    boats_in_order: Sequence[Boat],
    storage: StorageUnit,
    *,
    start_offset: float,
    step: float,
    side_gap: float,
) -> list[tuple[float, float, float]]:
    """Column positions (x, y, rotation) for boats in the given order.

    Boats alternate between the top edge (270°) and bottom edge (90°) of
    the dock, offset outward by half their length plus margin and side
    gap.  The walk stops at the first boat whose far edge would pass the
    usable length; the returned list may therefore be shorter than the
    input.
    """
    usable = dock_length(storage) - start_offset
    deck = storage.width
    along = start_offset
    top = True
    positions: list[tuple[float, float, float]] = []

    for boat in boats_in_order:
        far_edge = along + boat.width / 2 + boat.safety_margin
        if far_edge > usable:
            break
        offset = boat.length / 2 + boat.safety_margin + side_gap
        if top:
            positions.append((along, -offset, DOCK_TOP_ROTATION))
        else:
            positions.append((along, deck + offset, DOCK_BOTTOM_ROTATION))
        along += max(step, boat.width + boat.safety_margin)
        top = not top
    return positions


def _relayout_dock(
    boats: Sequence[Boat],
    storage: StorageUnit,
    placements: Sequence[Placement],
    *,
    start_offset: float,
    step: float,
    side_gap: float,
    timestamp: str | None,
) -> tuple[list[Placement], set[int]]:
    """Column layout of a dock.  Returns (placements', positioned ids)."""
    boat_map = {b.id: b for b in boats}
    on_dock = [
        p for p in placements
        if p.storage_unit_id == storage.id and p.boat_id in boat_map
    ]
    on_dock.sort(key=lambda p: (-boat_map[p.boat_id].length, p.boat_id, p.id))

    positions = _dock_layout(
        [boat_map[p.boat_id] for p in on_dock], storage,
        start_offset=start_offset, step=step, side_gap=side_gap,
    )
    moved: dict[int, Placement] = {}
    for p, (x, y, rotation) in zip(on_dock, positions):
        if (p.x, p.y, p.rotation) == (x, y, rotation):
            continue
        moved[p.id] = replace(
            p, x=x, y=y, rotation=rotation,
            updated_at=timestamp or p.updated_at,
        )

    skipped = len(on_dock) - len(positions)
    if skipped:
        log.warning("%d placement(s) do not fit on %s and were left in place",
                    skipped, storage.name)
    log.info("Distributed %d placement(s) on %s (%d moved)",
             len(positions), storage.name, len(moved))
    positioned = {p.id for p in on_dock[:len(positions)]}
    return [moved.get(p.id, p) for p in placements], positioned


def distribute_dock(
    boats: Sequence[Boat],
    storage: StorageUnit,
    placements: Sequence[Placement],
    *,
    start_offset: float = DOCK_START_OFFSET_M,
    step: float = DOCK_STEP_M,
    side_gap: float = DOCK_SIDE_GAP_M,
    timestamp: str | None = None,
) -> list[Placement]:
    """Re-lay out every placement on a dock in alternating columns.

    Placements are ordered by descending boat length.  Placements that
    no longer fit on the dock, or whose boat is unknown, keep their
    previous position.
    """
    laid_out, _ = _relayout_dock(
        boats, storage, placements,
        start_offset=start_offset, step=step, side_gap=side_gap,
        timestamp=timestamp,
    )
    return laid_out


def fill_dock(
    boats: Sequence[Boat],
    storage: StorageUnit,
    placements: Sequence[Placement],
    *,
    storage_units: Sequence[StorageUnit] | None = None,
    start_offset: float = DOCK_START_OFFSET_M,
    step: float = DOCK_STEP_M,
    side_gap: float = DOCK_SIDE_GAP_M,
    status: str = "placed",
    timestamp: str | None = None,
) -> list[Placement]:
    """Add dock-eligible boats to a dock, then re-lay out the whole dock.

    New boats join the column walk together with the boats already on
    the dock.  New boats that do not fit before the end of the dock are
    not given a placement.
    """
    occupied = _occupied_boat_ids(placements, storage, storage_units)
    newcomers = [
        b for b in boats
        if b.allows("dock") and b.status != "in_service" and b.id not in occupied
    ]
    pid = _next_id(placements)
    fresh: list[Placement] = []
    for boat in _by_size(newcomers):
        fresh.append(_new_placement(
            pid, boat, storage, 0.0, 0.0, 0.0, status, timestamp,
            note=f"Auto-placed on {storage.name}",
        ))
        pid += 1

    laid_out, positioned = _relayout_dock(
        boats, storage, list(placements) + fresh,
        start_offset=start_offset, step=step, side_gap=side_gap,
        timestamp=timestamp,
    )
    fresh_ids = {p.id for p in fresh}
    dropped = len(fresh_ids - positioned)
    if dropped:
        log.warning("%d boat(s) did not fit on %s and stay unplaced",
                    dropped, storage.name)
    return [p for p in laid_out if p.id not in fresh_ids or p.id in positioned]
