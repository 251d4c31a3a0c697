"""Collision detection — hull/margin overlap between boats and zones.

Two-tier severity:

  hull collision    bare hull footprints overlap.  Always invalid.
  margin collision  safety-margin footprints overlap but hulls do not.
                    Allowed, but flagged as a warning.

The baseline test compares the axis-aligned bounds of each rotated
footprint.  The precise test compares the true rotated rectangles with
a vertex-containment polygon check (see geometry.polygon).

Collision state is derived, never stored: the host UI calls
``CollisionEngine.on_position_changed`` on every pointer-move tick and
receives fresh results for the moved boat and every other boat in the
unit.  Each engine owns its registry, so one engine per storage unit (or
per test) can coexist without interference.
"""

from __future__ import annotations

import logging
from typing import Iterable

from boatyard.geometry.footprint import rects_overlap
from boatyard.geometry.polygon import polygons_intersect
from boatyard.models import StorageUnit

from .geometry import rect_inside_storage
from .models import BoatShape, CollisionResult, ZoneShape


log = logging.getLogger(__name__)


# ── Pairwise tests ─────────────────────────────────────────────────


def check_boat_pair(
    a: BoatShape, b: BoatShape, *, precise: bool = False,
) -> tuple[bool, bool]:
    """Return (hull_overlap, margin_overlap) for two boats."""
    if precise:
        return (
            polygons_intersect(a.hull_polygon(), b.hull_polygon()),
            polygons_intersect(a.margin_polygon(), b.margin_polygon()),
        )
    return (
        rects_overlap(a.hull_rect(), b.hull_rect()),
        rects_overlap(a.margin_rect(), b.margin_rect()),
    )


def check_boat_zone(boat: BoatShape, zone: ZoneShape) -> tuple[bool, bool]:
    """Return (hull_overlap, margin_overlap) for a boat and a zone."""
    return (
        rects_overlap(boat.hull_rect(), zone.rect),
        rects_overlap(boat.margin_rect(), zone.rect),
    )


def detect_collisions(
    target: BoatShape,
    others: Iterable[BoatShape],
    zones: Iterable[ZoneShape] = (),
    *,
    precise: bool = False,
) -> CollisionResult:
    """Collision result for *target* against boats and zones.

    A pair with a hull overlap counts as a hull collision only; margin
    collision is reported for pairs whose hulls are clear.
    """
    result = CollisionResult(boat_id=target.boat_id)

    for other in others:
        if other.boat_id == target.boat_id:
            continue
        hull, margin = check_boat_pair(target, other, precise=precise)
        if hull:
            result.hull_collision = True
            result.colliding_boat_ids.append(other.boat_id)
        elif margin:
            result.margin_collision = True
            result.colliding_boat_ids.append(other.boat_id)

    for zone in zones:
        hull, margin = check_boat_zone(target, zone)
        if hull:
            result.hull_collision = True
            result.colliding_zone_ids.append(zone.zone_id)
        elif margin:
            result.margin_collision = True
            result.colliding_zone_ids.append(zone.zone_id)

    result.colliding_boat_ids.sort()
    result.colliding_zone_ids.sort()
    return result


def severity(result: CollisionResult) -> str:
    """Map a collision result to "normal", "warning" or "critical"."""
    if result.hull_collision:
        return "critical"
    if result.margin_collision:
        return "warning"
    return "normal"


# ── Engine ─────────────────────────────────────────────────────────


class CollisionEngine:
    """Registry of boats and restriction zones for one storage unit."""

    def __init__(
        self,
        storage: StorageUnit | None = None,
        *,
        precise: bool = False,
    ) -> None:
        self.storage = storage
        self.precise = precise
        self._boats: dict[int, BoatShape] = {}
        self._zones: dict[int, ZoneShape] = {}

    # ── Registry ───────────────────────────────────────────────────

    def register_boat(self, shape: BoatShape) -> None:
        self._boats[shape.boat_id] = shape

    def unregister_boat(self, boat_id: int) -> None:
        self._boats.pop(boat_id, None)

    def register_zone(self, zone: ZoneShape) -> None:
        self._zones[zone.zone_id] = zone

    def register_zones(self, zones: Iterable[ZoneShape]) -> None:
        for zone in zones:
            self.register_zone(zone)

    def clear(self) -> None:
        self._boats.clear()
        self._zones.clear()

    @property
    def boats(self) -> list[BoatShape]:
        return [self._boats[k] for k in sorted(self._boats)]

    @property
    def zones(self) -> list[ZoneShape]:
        return [self._zones[k] for k in sorted(self._zones)]

    def get(self, boat_id: int) -> BoatShape | None:
        return self._boats.get(boat_id)

    def __len__(self) -> int:
        return len(self._boats)

    # ── Queries ────────────────────────────────────────────────────

    def detect(self, boat_id: int) -> CollisionResult:
        """Collision result for a registered boat."""
        shape = self._boats[boat_id]
        return detect_collisions(
            shape, self.boats, self.zones, precise=self.precise,
        )

    def detect_all(self) -> list[CollisionResult]:
        return [self.detect(bid) for bid in sorted(self._boats)]

    def on_position_changed(
        self,
        boat_id: int,
        x: float,
        y: float,
        rotation: float | None = None,
    ) -> list[CollisionResult]:
        """Move a registered boat and recompute every collision in the unit.

        The moved boat's result comes first.  Every other boat is
        re-checked too, since moving one boat can newly collide with a
        stationary neighbour or clear a previous collision.
        """
        shape = self._boats[boat_id].moved(x, y, rotation)
        self._boats[boat_id] = shape
        results = [self.detect(boat_id)]
        results.extend(
            self.detect(bid) for bid in sorted(self._boats) if bid != boat_id
        )
        log.debug(
            "Recomputed %d collision result(s) after moving boat %s to (%.2f, %.2f)",
            len(results), boat_id, x, y,
        )
        return results

    def inside_bounds(self, shape: BoatShape) -> bool:
        """True if the hull stays inside the engine's storage unit."""
        if self.storage is None:
            return True
        return rect_inside_storage(shape.hull_rect(), self.storage)

    def is_valid_placement(self, shape: BoatShape) -> bool:
        """True if *shape* is inside bounds and has no hull/margin collision.

        Pure: the registered copy of the boat (if any) is not moved.
        """
        if not self.inside_bounds(shape):
            return False
        result = detect_collisions(
            shape, self.boats, self.zones, precise=self.precise,
        )
        return result.clear

    def colliding_count(self) -> int:
        """Number of boats currently in hull or margin collision."""
        return sum(1 for r in self.detect_all() if not r.clear)
