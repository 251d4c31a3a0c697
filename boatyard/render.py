"""Rendering adapter — syncs the geometric model with a canvas layer.

The collision and layout code never touches drawable objects.  This
module holds the small amount of knowledge a canvas needs on top of a
BoatShape: which visual state to draw, how far to scale the hull and
margin SVG paths, and how to read the per-boat shape hint stored next
to each boat record.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from boatyard.config import YARD_RULES, YardRules
from boatyard.models import Boat, Placement
from boatyard.placer.models import BoatShape, CollisionResult


log = logging.getLogger(__name__)


# ── SVG artwork ────────────────────────────────────────────────────

# viewBox sizes of the hull and margin outlines (bow pointing +x)
HULL_VB = (166.498, 70.0)
MARGIN_VB = (196.375, 91.734)

BOAT_STATES = ("new", "placed", "marginCollision", "hullCollision")

STATE_STYLES: dict[str, dict[str, dict]] = {
    "new": {
        "hull": {"stroke": "#27d07c", "strokeWidth": 2, "fill": "#fff"},
        "margin": {"stroke": "#27d07c", "strokeWidth": 1, "dash": [5, 5], "fill": "#E9FBF3"},
    },
    "placed": {
        "hull": {"stroke": "#A8A8A8", "strokeWidth": 2, "fill": "#fff"},
        "margin": {"stroke": "#A8A8A8", "strokeWidth": 1, "dash": [5, 5], "fill": "#F5F5F8"},
    },
    "marginCollision": {
        "hull": {"stroke": "#27d07c", "strokeWidth": 2, "fill": "#fff"},
        "margin": {"stroke": "#902C00", "strokeWidth": 1, "dash": [5, 5], "fill": "#FAEDED"},
    },
    "hullCollision": {
        "hull": {"stroke": "#902C00", "strokeWidth": 2, "fill": "#FAEDED"},
        "margin": {"stroke": "#902C00", "strokeWidth": 1, "dash": [5, 5], "fill": "#FAEDED"},
    },
}


def boat_state(result: CollisionResult, is_active: bool) -> str:
    """Visual state for a boat: hull collisions win over margin ones."""
    if result.hull_collision:
        return "hullCollision"
    if result.margin_collision:
        return "marginCollision"
    return "new" if is_active else "placed"


def _scale(length_m: float, width_m: float, viewbox: tuple[float, float],
           rules: YardRules) -> tuple[float, float]:
    vb_w, vb_h = viewbox
    return (
        length_m * rules.canvas_units_per_meter / vb_w,
        width_m * rules.canvas_units_per_meter / vb_h,
    )


def hull_scale(boat: Boat, rules: YardRules = YARD_RULES) -> tuple[float, float]:
    """(scaleX, scaleY) that stretch the hull artwork to the boat's size."""
    return _scale(boat.length, boat.width, HULL_VB, rules)


def margin_scale(boat: Boat, rules: YardRules = YARD_RULES) -> tuple[float, float]:
    return _scale(
        boat.length + 2 * boat.safety_margin,
        boat.width + 2 * boat.safety_margin,
        MARGIN_VB,
        rules,
    )


# ── Shape hints ────────────────────────────────────────────────────


@dataclass
class ShapeHint:
    """Canvas-side shape parameters stored alongside a boat record."""

    x: float = 0.0
    y: float = 0.0
    width: float = 85.0
    height: float = 28.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0


def parse_shape_json(text: str | None) -> ShapeHint:
    """Parse a boat's shape hint JSON.

    Unlike storage geometry, a bad hint only affects one visibly wrong
    boat, so malformed input falls back to defaults with a warning.
    Zero or missing fields also take the default.
    """
    if not text:
        return ShapeHint()
    try:
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        d = ShapeHint()
        return ShapeHint(
            x=float(raw.get("x") or d.x),
            y=float(raw.get("y") or d.y),
            width=float(raw.get("width") or d.width),
            height=float(raw.get("height") or d.height),
            rotation=float(raw.get("rotation") or d.rotation),
            scale_x=float(raw.get("scaleX") or d.scale_x),
            scale_y=float(raw.get("scaleY") or d.scale_y),
        )
    except (ValueError, TypeError) as exc:
        log.warning("Failed to parse shape JSON, using defaults: %s", exc)
        return ShapeHint()


def shape_hint_to_json(hint: ShapeHint) -> str:
    return json.dumps({
        "x": round(hint.x, 1),
        "y": round(hint.y, 1),
        "width": round(hint.width, 1),
        "height": round(hint.height, 1),
        "rotation": round(hint.rotation, 1),
        "scaleX": round(hint.scale_x, 2),
        "scaleY": round(hint.scale_y, 2),
    })


def shape_from_placement(boat: Boat, placement: Placement) -> BoatShape:
    """Geometric model for a placed boat, ready for a CollisionEngine."""
    if placement.boat_id != boat.id:
        raise ValueError(
            f"placement {placement.id} belongs to boat {placement.boat_id}, not {boat.id}"
        )
    return BoatShape.from_placement(boat, placement)
