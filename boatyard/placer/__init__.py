"""Placer — collision detection, placement search and bulk layout.

Submodules:
  models      Geometric model (BoatShape, ZoneShape), results and constants.
  geometry    Storage containment and clamping helpers.
  collision   Hull/margin collision tests and the per-unit CollisionEngine.
  scoring     Candidate position scoring (neighbour / center distance).
  engine      Grid candidate search (suggest_placements).
  packing     Warehouse row packing and dock column distribution.
  clamp       Bounds clamping under rotation.
"""

from .models import BoatShape, ZoneShape, CollisionResult, Candidate, ClampResult
from .collision import (
    CollisionEngine, check_boat_pair, check_boat_zone, detect_collisions, severity,
)
from .engine import suggest_placements
from .packing import pack_warehouse, distribute_dock, fill_dock
from .clamp import clamp_position, clamp_placements

__all__ = [
    # Models
    "BoatShape", "ZoneShape", "CollisionResult", "Candidate", "ClampResult",
    # Collision
    "CollisionEngine", "check_boat_pair", "check_boat_zone",
    "detect_collisions", "severity",
    # Search / layout
    "suggest_placements", "pack_warehouse", "distribute_dock", "fill_dock",
    "clamp_position", "clamp_placements",
]
