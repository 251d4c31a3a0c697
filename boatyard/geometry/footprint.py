"""Boat footprint helpers — unit conversion, rotated extents, rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass

from boatyard.config import YARD_RULES, YardRules
from boatyard.models import Boat


# ── Unit conversion ────────────────────────────────────────────────


def meters_to_canvas(meters: float, rules: YardRules = YARD_RULES) -> float:
    return meters * rules.canvas_units_per_meter


def canvas_to_meters(units: float, rules: YardRules = YARD_RULES) -> float:
    return units / rules.canvas_units_per_meter


# ── Footprints ─────────────────────────────────────────────────────


def hull_footprint(boat: Boat) -> tuple[float, float]:
    """Bare hull (length, width), excluding the safety margin."""
    return (boat.length, boat.width)


def effective_footprint(boat: Boat) -> tuple[float, float]:
    """Margin footprint: hull expanded by the safety margin on all sides."""
    return (
        boat.length + 2 * boat.safety_margin,
        boat.width + 2 * boat.safety_margin,
    )


def axis_aligned_half_extents(
    length: float, width: float, rotation_deg: float,
) -> tuple[float, float]:
    """Return (dx, dy) of a length×width rectangle rotated about its center.

    At 0° the length runs along x.  At 90° a 7 m boat only spans its
    width along x.
    """
    rad = math.radians(rotation_deg)
    c = abs(math.cos(rad))
    s = abs(math.sin(rad))
    return (
        c * length / 2 + s * width / 2,
        s * length / 2 + c * width / 2,
    )


def rotated_corners(
    cx: float, cy: float,
    length: float, width: float,
    rotation_deg: float,
) -> list[tuple[float, float]]:
    """World-space corners of a rotated rectangle, in ring order."""
    rad = math.radians(rotation_deg)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    hl, hw = length / 2, width / 2
    local = [(-hl, -hw), (hl, -hw), (hl, hw), (-hl, hw)]
    return [
        (cx + px * cos_r - py * sin_r, cy + px * sin_r + py * cos_r)
        for px, py in local
    ]


def normalize_rotation(rotation_deg: float) -> float:
    """Map any angle into [0, 360)."""
    r = rotation_deg % 360
    return 0.0 if r == 360 else float(r)


# ── Axis-aligned rectangles ────────────────────────────────────────


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, y growing downwards (canvas convention)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def corners(self) -> list[tuple[float, float]]:
        return [
            (self.left, self.top), (self.right, self.top),
            (self.right, self.bottom), (self.left, self.bottom),
        ]


def rect_around(cx: float, cy: float, dx: float, dy: float) -> Rect:
    """Rectangle centered on (cx, cy) with half-extents (dx, dy)."""
    return Rect(cx - dx, cy - dy, cx + dx, cy + dy)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Bounding-box overlap test.  Touching edges count as overlap."""
    return not (
        a.right < b.left
        or b.right < a.left
        or a.bottom < b.top
        or b.bottom < a.top
    )
