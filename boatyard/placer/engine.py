"""Placement search — grid candidates ranked by a packing heuristic."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from shapely.geometry import LineString

from boatyard.models import Boat, StorageUnit
from boatyard.storage.metrics import dock_length, storage_bounds

from .collision import CollisionEngine
from .models import (
    BoatShape, Candidate, DOCK_BOTTOM_ROTATION, DOCK_SIDE_GAP_M,
    DOCK_TOP_ROTATION, GRID_STEP_M, MAX_SUGGESTIONS,
)
from .scoring import score_candidate


log = logging.getLogger(__name__)


def _scan_ranges(
    boat: Boat,
    storage: StorageUnit,
    rotations: Sequence[float],
    side_gap: float,
) -> Iterator[tuple[float, float, float, float, float]]:
    """Yield (rotation, x_lo, x_hi, y_lo, y_hi) areas to scan for *boat*.

    Warehouses: the storage bounds shrunk by the rotated hull extents,
    once per rotation.  Docks: the two side lanes next to the deck, the
    same lanes the column layout uses.  Each lane has its own fixed
    orientation, so *rotations* does not apply there.
    """
    if isinstance(storage.geometry, LineString):
        offset = boat.length / 2 + boat.safety_margin + side_gap
        lanes = (
            (DOCK_TOP_ROTATION, -offset),
            (DOCK_BOTTOM_ROTATION, storage.width + offset),
        )
        length = dock_length(storage)
        for rotation, y in lanes:
            dx, _ = BoatShape.from_boat(boat, 0.0, 0.0, rotation).hull_half_extents()
            yield rotation, dx, length - dx, y, y
        return

    xmin, ymin, xmax, ymax = storage_bounds(storage)
    for rotation in rotations:
        dx, dy = BoatShape.from_boat(boat, 0.0, 0.0, rotation).hull_half_extents()
        yield rotation, xmin + dx, xmax - dx, ymin + dy, ymax - dy


def suggest_placements(
    boat: Boat,
    storage: StorageUnit,
    engine: CollisionEngine,
    *,
    grid_step: float = GRID_STEP_M,
    top_k: int = MAX_SUGGESTIONS,
    rotations: Sequence[float] = (0.0,),
    side_gap: float = DOCK_SIDE_GAP_M,
) -> list[Candidate]:
    """Return up to *top_k* valid candidates for *boat*, best first.

    In a warehouse, scans a grid over the storage bounds shrunk by the
    boat's rotated hull half-extents.  On a dock, scans along the two
    side lanes: the top lane at 270° and the bottom lane at 90°, each
    offset outward from the deck by half the boat length plus margin and
    *side_gap*.  A candidate is kept only if the engine accepts it
    (inside bounds, no hull or margin collision with registered boats
    and zones).  An empty list means no valid candidate exists; the
    caller decides whether to leave the boat unplaced.

    Parameters
    ----------
    boat : Boat
        The boat to place.  If it is registered in *engine* its current
        position is ignored during the search.
    storage : StorageUnit
        Target unit; also used for bounds when the engine has none.
    engine : CollisionEngine
        Registry of boats and zones already in the unit.
    grid_step : float
        Grid resolution in metres.
    top_k : int
        Maximum number of candidates returned.
    rotations : sequence of float
        Orientations to try at every grid point (warehouses only).
    side_gap : float
        Outward gap between a dock edge and the boat's margin.
    """
    if grid_step <= 0:
        raise ValueError(f"grid_step must be positive, got {grid_step}")

    xmin, ymin, xmax, ymax = storage_bounds(storage)
    center = ((xmin + xmax) / 2, (ymin + ymax) / 2)

    search = CollisionEngine(engine.storage or storage, precise=engine.precise)
    for shape in engine.boats:
        if shape.boat_id != boat.id:
            search.register_boat(shape)
    search.register_zones(engine.zones)
    placed = search.boats

    candidates: list[Candidate] = []
    for rotation, scan_xmin, scan_xmax, scan_ymin, scan_ymax in _scan_ranges(
        boat, storage, rotations, side_gap,
    ):
        if scan_xmin > scan_xmax or scan_ymin > scan_ymax:
            log.debug("Boat %s does not fit at %g° in unit %s",
                      boat.id, rotation, storage.id)
            continue

        template = BoatShape.from_boat(boat, 0.0, 0.0, rotation)
        cx = scan_xmin
        while cx <= scan_xmax + 1e-6:
            cy = scan_ymin
            while cy <= scan_ymax + 1e-6:
                shape = template.moved(cx, cy)
                if search.is_valid_placement(shape):
                    score, reason = score_candidate(shape, placed, center)
                    candidates.append(Candidate(
                        x=round(cx, 3), y=round(cy, 3),
                        rotation=rotation, score=score, reason=reason,
                    ))
                cy += grid_step
            cx += grid_step

    # Stable sort keeps grid order among equal scores
    candidates.sort(key=lambda c: -c.score)
    if not candidates:
        log.info("No valid candidate found for boat %s in unit %s",
                 boat.id, storage.id)
    return candidates[:top_k]
