"""Shared yard constants for the placement engine.

These values describe the physical conventions of the storage yard: the
canvas scale, default safety margins, and the spacing rules used by the
bulk layout routines.  The **collision engine**, the **placer** and the
**maintenance** scripts all derive their parameters from this single
source of truth.

Module-level constants elsewhere are copied from ``YARD_RULES`` at import
time and only serve as keyword defaults.  A rules file loaded at run time
reaches the routines through the explicit keyword arguments the CLI
passes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class YardRules:
    """Physical layout rules for boat storage.

    All distances are in metres.
    """

    canvas_units_per_meter: float = 10.0
    """Scale between metres and canvas units (decimetres).  Applied to
    boat extents, storage bounds and restriction zones alike."""

    default_safety_margin_m: float = 0.5
    """Safety margin used when a boat record does not carry one."""

    default_dock_width_m: float = 2.0
    """Deck width of a dock when the storage record does not carry one."""

    grid_step_m: float = 1.0
    """Candidate-search grid resolution."""

    max_suggestions: int = 5
    """Default number of candidates returned by the search."""

    warehouse_wall_margin_m: float = 3.0
    """Inset from the warehouse bounds used by row packing."""

    warehouse_gap_m: float = 3.0
    """Gap between packed boats along a row and between rows."""

    dock_start_offset_m: float = 4.0
    """Initial along-axis cursor for dock column distribution."""

    dock_step_m: float = 8.0
    """Minimum along-axis advance between two dock boats."""

    dock_side_gap_m: float = 0.5
    """Extra outward offset between a dock edge and the boat's margin."""

    usable_area_factor: float = 0.7
    """Share of a warehouse floor that can actually hold boats."""

    average_boat_area_m2: float = 14.0
    """Footprint of a standard 7 m × 2 m boat, for capacity estimates."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def grid_step_canvas(self) -> float:
        """Grid resolution expressed in canvas units."""
        return self.grid_step_m * self.canvas_units_per_meter


def rules_from_dict(data: dict) -> YardRules:
    """Build YardRules from a partial mapping, keeping defaults for the rest.

    Raises ValueError on unknown keys so typos in a rules file are not
    silently ignored.
    """
    known = {f.name: f for f in fields(YardRules)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown yard rule(s): {', '.join(unknown)}")
    values = {}
    for key, raw in data.items():
        values[key] = int(raw) if key == "max_suggestions" else float(raw)
    return YardRules(**values)


# Module-level singleton, importable everywhere.
YARD_RULES = YardRules()
