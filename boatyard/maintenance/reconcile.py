"""Placement reconciliation — one authoritative placement per category.

Drift (manual edits, partial migrations) can leave a boat with several
placements in the same storage category.  The reconciler keeps exactly
one per allowed category, removes placements in categories the boat may
not use, and recomputes every boat's aggregate status.

Anything the reconciler cannot classify (unknown storage unit, unknown
boat) is kept: temporary duplication is better than data loss.

Running it twice gives the same result as running it once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Sequence

from boatyard.models import Boat, Placement, StorageUnit
from boatyard.storage.metrics import classify_storage


log = logging.getLogger(__name__)

_STATUS_RANK = {"placed": 2, "reserved": 1}
CATEGORIES = ("warehouse", "dock")


@dataclass
class ReconcileResult:
    kept: list[Placement]
    removed: list[Placement]
    boat_status: dict[int, str] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.removed)


def _timestamp(value: str | None) -> float | None:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        # Naive dates are taken as UTC so they compare with aware ones
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def placement_recency(p: Placement) -> float:
    """Most relevant timestamp of a placement (epoch seconds, 0 if none).

    The first parseable of: physical placement, placed, reservation,
    updated, created.
    """
    for value in (p.physical_placement_date, p.placed_date,
                  p.reservation_date, p.updated_at, p.created_at):
        ts = _timestamp(value)
        if ts is not None:
            return ts
    return 0.0


def pick_best(candidates: Sequence[Placement]) -> Placement | None:
    """Highest status rank, then most recent; earlier input wins ties."""
    if not candidates:
        return None
    return sorted(
        candidates,
        key=lambda p: (-_STATUS_RANK.get(p.status, 0), -placement_recency(p)),
    )[0]


def aggregate_status(placements: Sequence[Placement]) -> str:
    """Boat status implied by its placements."""
    statuses = {p.status for p in placements}
    if "placed" in statuses:
        return "placed"
    if "reserved" in statuses:
        return "reserved"
    return "unplaced"


def reconcile_placements(
    boats: Sequence[Boat],
    storage_units: Sequence[StorageUnit],
    placements: Sequence[Placement],
    *,
    keep_in_service: bool = False,
) -> ReconcileResult:
    """Restore the one-placement-per-(boat, category) invariant.

    Kept placements stay in input order.  Every boat's status is
    recomputed from its kept placements; with *keep_in_service*, boats
    marked ``in_service`` keep that status instead.
    """
    boat_map = {b.id: b for b in boats}
    unit_map = {u.id: u for u in storage_units}

    by_boat: dict[int, list[Placement]] = {}
    for p in placements:
        by_boat.setdefault(p.boat_id, []).append(p)

    removed_refs: set[int] = set()   # id() of removed records; ids may repeat after drift
    for boat_id, group in by_boat.items():
        boat = boat_map.get(boat_id)
        if boat is None:
            log.info("Boat %s is unknown; keeping its %d placement(s)",
                     boat_id, len(group))
            continue

        classified: dict[str, list[Placement]] = {c: [] for c in CATEGORIES}
        for p in group:
            category = classify_storage(unit_map.get(p.storage_unit_id))
            if category == "unknown":
                log.info("Placement %s: storage unit %s is unclassified; kept",
                         p.id, p.storage_unit_id)
                continue
            classified[category].append(p)

        for category, items in classified.items():
            if not boat.allows(category):
                removed_refs.update(id(p) for p in items)
                continue
            best = pick_best(items)
            removed_refs.update(id(p) for p in items if p is not best)

    kept = [p for p in placements if id(p) not in removed_refs]
    removed = [p for p in placements if id(p) in removed_refs]

    kept_by_boat: dict[int, list[Placement]] = {}
    for p in kept:
        kept_by_boat.setdefault(p.boat_id, []).append(p)
    boat_status = {
        b.id: b.status if keep_in_service and b.status == "in_service"
        else aggregate_status(kept_by_boat.get(b.id, []))
        for b in boats
    }

    log.info("Reconciled placements: kept %d of %d, removed %d",
             len(kept), len(placements), len(removed))
    return ReconcileResult(kept=kept, removed=removed, boat_status=boat_status)


def apply_boat_status(
    boats: Sequence[Boat], boat_status: dict[int, str],
) -> list[Boat]:
    """Return boats with their recomputed aggregate status."""
    return [
        replace(b, status=boat_status[b.id])
        if b.id in boat_status and boat_status[b.id] != b.status else b
        for b in boats
    ]
