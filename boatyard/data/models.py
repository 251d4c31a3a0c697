"""Data-file dataclasses — loaded yard snapshot and validation errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from boatyard.models import Boat, Placement, RestrictionZone, StorageUnit


@dataclass
class ValidationError:
    record: str                 # e.g. "boats[3]" or "placement 12"
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.record}] {self.field}: {self.message}"


@dataclass
class YardData:
    """Everything read from a data directory."""

    directory: Path
    boats: list[Boat] = field(default_factory=list)
    storage_units: list[StorageUnit] = field(default_factory=list)
    placements: list[Placement] = field(default_factory=list)
    restriction_zones: list[RestrictionZone] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def storage(self, unit_id: int) -> StorageUnit | None:
        return next((u for u in self.storage_units if u.id == unit_id), None)

    def zones_for(self, unit_id: int) -> list[RestrictionZone]:
        return [z for z in self.restriction_zones if z.storage_unit_id == unit_id]
