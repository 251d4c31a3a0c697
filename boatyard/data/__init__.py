"""Data files — the JSON yard snapshot on disk.

Submodules:
  models          YardData snapshot and ValidationError.
  parsing         Raw record dicts → yard dataclasses (canvas units → metres).
  serialization   Yard dataclasses → JSON-safe dicts (metres → canvas units).
  loader          load_yard / save_* over a data directory.
"""

from .models import ValidationError, YardData
from .parsing import parse_boat, parse_storage_unit, parse_placement, parse_restriction_zone
from .serialization import (
    boat_to_dict, placement_to_dict, restriction_zone_to_dict,
    collision_to_dict, candidate_to_dict,
)
from .loader import load_yard, save_placements, save_boats, save_restriction_zones

__all__ = [
    "ValidationError", "YardData",
    "parse_boat", "parse_storage_unit", "parse_placement", "parse_restriction_zone",
    "boat_to_dict", "placement_to_dict", "restriction_zone_to_dict",
    "collision_to_dict", "candidate_to_dict",
    "load_yard", "save_placements", "save_boats", "save_restriction_zones",
]
