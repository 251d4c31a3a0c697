"""Maintenance — offline batch repairs over the persisted placement set.

Submodules:
  reconcile   One authoritative placement per (boat, storage category).
  rotate      Bulk rotation of placements.
  zones       Restriction-zone pruning.

Every routine is an idempotent, deterministic transform over plain
records.  The bulk re-layout routines live in boatyard.placer.packing.
"""

from .reconcile import (
    ReconcileResult, reconcile_placements, apply_boat_status,
    pick_best, placement_recency, aggregate_status,
)
from .rotate import rotate_placements
from .zones import prune_restriction_zones

__all__ = [
    "ReconcileResult", "reconcile_placements", "apply_boat_status",
    "pick_best", "placement_recency", "aggregate_status",
    "rotate_placements", "prune_restriction_zones",
]
