"""Candidate position scoring for the placer."""

from __future__ import annotations

import math

from .models import BoatShape, W_CENTER_DISTANCE, W_NEIGHBOR_DISTANCE, W_ROTATION


def score_candidate(
    shape: BoatShape,
    placed: list[BoatShape],
    center: tuple[float, float],
) -> tuple[float, str]:
    """Score a candidate position.  Higher = better.

    With boats already in the unit, the distance to the nearest placed
    neighbour drives the score (tight packing).  In an empty unit the
    distance to the storage center is used instead.  Rotated candidates
    pay a small penalty so 0° wins ties.

    Returns (score, human-readable reason).
    """
    others = [p for p in placed if p.boat_id != shape.boat_id]
    rot = shape.rotation % 360
    rotation_penalty = W_ROTATION if rot else 0.0

    if others:
        nearest = min(math.hypot(shape.x - p.x, shape.y - p.y) for p in others)
        score = -nearest * W_NEIGHBOR_DISTANCE - rotation_penalty
        reason = f"{nearest:.1f} m from nearest boat"
    else:
        d = math.hypot(shape.x - center[0], shape.y - center[1])
        score = -d * W_CENTER_DISTANCE - rotation_penalty
        reason = f"{d:.1f} m from storage center"

    if rotation_penalty:
        reason += f", rotated {rot:g}°"
    return score, reason
