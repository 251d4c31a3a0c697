"""Record serialization — yard dataclasses back to JSON-safe dicts."""

from __future__ import annotations

from boatyard.config import YARD_RULES, YardRules
from boatyard.geometry.footprint import meters_to_canvas
from boatyard.models import Boat, Placement, RestrictionZone
from boatyard.placer.models import Candidate, CollisionResult


def boat_to_dict(b: Boat) -> dict:
    return {
        "id": b.id,
        "name": b.name,
        "length": b.length,
        "width": b.width,
        "safety_margin": b.safety_margin,
        "rotation": b.rotation,
        "current_status": b.status,
        "location_status": b.location_kind,
    }


def placement_to_dict(p: Placement, rules: YardRules = YARD_RULES) -> dict:
    """Serialize a placement; positions go back to canvas units (0.1 precision)."""
    return {
        "id": p.id,
        "boat_id": p.boat_id,
        "storage_unit_id": p.storage_unit_id,
        "floor_number": p.level,
        "status": p.status,
        "position": {
            "x": round(meters_to_canvas(p.x, rules), 1),
            "y": round(meters_to_canvas(p.y, rules), 1),
            "rotation": round(p.rotation, 1),
        },
        "physical_placement_date": p.physical_placement_date,
        "placed_date": p.placed_date,
        "reservation_date": p.reservation_date,
        "notes": p.notes,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }


def restriction_zone_to_dict(z: RestrictionZone) -> dict:
    return {
        "id": z.id,
        "storage_unit_id": z.storage_unit_id,
        "name": z.name,
        "x_coordinate": z.x,
        "y_coordinate": z.y,
        "width": z.width,
        "height": z.height,
        "type": z.kind,
    }


def collision_to_dict(r: CollisionResult) -> dict:
    return {
        "boat_id": r.boat_id,
        "hull_collision": r.hull_collision,
        "margin_collision": r.margin_collision,
        "colliding_boat_ids": list(r.colliding_boat_ids),
        "colliding_zone_ids": list(r.colliding_zone_ids),
    }


def candidate_to_dict(c: Candidate, rules: YardRules = YARD_RULES) -> dict:
    return {
        "x": round(meters_to_canvas(c.x, rules), 1),
        "y": round(meters_to_canvas(c.y, rules), 1),
        "rotation": c.rotation,
        "score": round(c.score, 3),
        "reason": c.reason,
    }
