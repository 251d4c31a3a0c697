"""Restriction-zone pruning."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from boatyard.models import RestrictionZone


log = logging.getLogger(__name__)


def _norm(name: str) -> str:
    return " ".join(str(name).split()).casefold()


def prune_restriction_zones(
    zones: Sequence[RestrictionZone],
    names: Iterable[str],
    *,
    storage_unit_id: int | None = None,
) -> tuple[list[RestrictionZone], int]:
    """Remove zones whose name matches one of *names*.

    Matching ignores case and surrounding/repeated whitespace.  With
    *storage_unit_id* only that unit's zones are considered.  Returns
    (kept zones, number removed); running it again removes nothing.
    """
    targets = {_norm(n) for n in names}
    kept: list[RestrictionZone] = []
    removed = 0
    for z in zones:
        in_scope = storage_unit_id is None or z.storage_unit_id == storage_unit_id
        if in_scope and _norm(z.name) in targets:
            removed += 1
            continue
        kept.append(z)
    log.info("Removed %d restriction zone(s) named %s",
             removed, ", ".join(sorted(targets)))
    return kept, removed
