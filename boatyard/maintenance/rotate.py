"""Bulk rotation — flip placements when an orientation convention changes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from boatyard.geometry.footprint import normalize_rotation
from boatyard.models import Placement, StorageUnit
from boatyard.storage.metrics import classify_storage


log = logging.getLogger(__name__)


def rotate_placements(
    placements: Sequence[Placement],
    storage_units: Sequence[StorageUnit],
    *,
    delta: float = 180.0,
    kind: str | None = "dock",
    timestamp: str | None = None,
) -> list[Placement]:
    """Add *delta* degrees to every placement in units of *kind*.

    Positions are untouched and rotations are normalised into [0, 360),
    so applying the same flip k times equals one flip of k·delta.  With
    ``kind=None`` every placement is rotated.  Placements whose storage
    unit is unknown are never touched.
    """
    unit_map = {u.id: u for u in storage_units}
    out: list[Placement] = []
    changed = 0
    for p in placements:
        unit = unit_map.get(p.storage_unit_id)
        if unit is None or (kind is not None and classify_storage(unit) != kind):
            out.append(p)
            continue
        rotated = normalize_rotation(p.rotation + delta)
        if rotated == p.rotation:
            out.append(p)
            continue
        out.append(replace(p, rotation=rotated,
                           updated_at=timestamp or p.updated_at))
        changed += 1
    log.info("Rotated %d placement(s) by %g°", changed, delta)
    return out
