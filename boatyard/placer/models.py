"""Placer dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass, field

from boatyard.config import YARD_RULES
from boatyard.geometry.footprint import (
    Rect, axis_aligned_half_extents, rect_around, rotated_corners,
)
from boatyard.models import Boat, Placement, RestrictionZone


# ── Geometric model ────────────────────────────────────────────────


@dataclass
class BoatShape:
    """A boat's geometric footprint inside one storage unit.

    Decoupled from any drawable object: collision and layout code only
    ever see this model, and the rendering adapter syncs it.
    """

    boat_id: int
    x: float                # center
    y: float
    rotation: float
    length: float           # hull
    width: float
    margin: float

    @classmethod
    def from_boat(
        cls, boat: Boat, x: float, y: float, rotation: float | None = None,
    ) -> BoatShape:
        return cls(
            boat_id=boat.id,
            x=x, y=y,
            rotation=boat.rotation if rotation is None else rotation,
            length=boat.length,
            width=boat.width,
            margin=boat.safety_margin,
        )

    @classmethod
    def from_placement(cls, boat: Boat, placement: Placement) -> BoatShape:
        return cls.from_boat(boat, placement.x, placement.y, placement.rotation)

    def moved(self, x: float, y: float, rotation: float | None = None) -> BoatShape:
        return BoatShape(
            boat_id=self.boat_id, x=x, y=y,
            rotation=self.rotation if rotation is None else rotation,
            length=self.length, width=self.width, margin=self.margin,
        )

    def hull_half_extents(self) -> tuple[float, float]:
        return axis_aligned_half_extents(self.length, self.width, self.rotation)

    def margin_half_extents(self) -> tuple[float, float]:
        return axis_aligned_half_extents(
            self.length + 2 * self.margin,
            self.width + 2 * self.margin,
            self.rotation,
        )

    def hull_rect(self) -> Rect:
        """Axis-aligned client bounds of the rotated hull."""
        dx, dy = self.hull_half_extents()
        return rect_around(self.x, self.y, dx, dy)

    def margin_rect(self) -> Rect:
        dx, dy = self.margin_half_extents()
        return rect_around(self.x, self.y, dx, dy)

    def hull_polygon(self) -> list[tuple[float, float]]:
        return rotated_corners(self.x, self.y, self.length, self.width, self.rotation)

    def margin_polygon(self) -> list[tuple[float, float]]:
        return rotated_corners(
            self.x, self.y,
            self.length + 2 * self.margin,
            self.width + 2 * self.margin,
            self.rotation,
        )


@dataclass(frozen=True)
class ZoneShape:
    zone_id: int
    rect: Rect

    @classmethod
    def from_zone(cls, zone: RestrictionZone) -> ZoneShape:
        return cls(
            zone_id=zone.id,
            rect=Rect(zone.x, zone.y, zone.x + zone.width, zone.y + zone.height),
        )


# ── Results ────────────────────────────────────────────────────────


@dataclass
class CollisionResult:
    """Collision state of one boat against its unit.  Derived, never stored."""

    boat_id: int
    hull_collision: bool = False
    margin_collision: bool = False
    colliding_boat_ids: list[int] = field(default_factory=list)
    colliding_zone_ids: list[int] = field(default_factory=list)

    @property
    def clear(self) -> bool:
        return not (self.hull_collision or self.margin_collision)


@dataclass
class Candidate:
    """A proposed, not-yet-committed placement position."""

    x: float
    y: float
    rotation: float
    score: float            # higher = better
    reason: str = ""


@dataclass
class ClampResult:
    x: float
    y: float
    changed: bool
    degenerate: bool        # boat larger than storage; clamped to midpoint


# ── Defaults copied from YARD_RULES (boatyard.config) ──────────────
# Fixed at import; pass keyword arguments to override per call.
GRID_STEP_M = YARD_RULES.grid_step_m
MAX_SUGGESTIONS = YARD_RULES.max_suggestions
WAREHOUSE_WALL_MARGIN_M = YARD_RULES.warehouse_wall_margin_m
WAREHOUSE_GAP_M = YARD_RULES.warehouse_gap_m
DOCK_START_OFFSET_M = YARD_RULES.dock_start_offset_m
DOCK_STEP_M = YARD_RULES.dock_step_m
DOCK_SIDE_GAP_M = YARD_RULES.dock_side_gap_m

PACKING_ROTATIONS = (0.0, 90.0)
DOCK_TOP_ROTATION = 270.0
DOCK_BOTTOM_ROTATION = 90.0

# Scoring weights: higher absolute value = more influence.
W_NEIGHBOR_DISTANCE = 1.0   # tight packing: stay close to placed boats
W_CENTER_DISTANCE = 1.0     # empty unit: prefer the middle
W_ROTATION = 0.5            # slight penalty for rotating away from 0°
