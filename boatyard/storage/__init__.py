"""Storage units — geometry parsing and bounds/area/capacity metrics.

Submodules:
  parsing   GeoJSON → shapely geometry, failing fast on malformed input.
  metrics   Classification, placement-frame bounds, area and capacity.
"""

from .parsing import StorageGeometryError, parse_geometry
from .metrics import (
    classify_storage,
    dock_length,
    storage_bounds,
    storage_area,
    storage_capacity,
    nearest_storage_unit,
)

__all__ = [
    "StorageGeometryError", "parse_geometry",
    "classify_storage", "dock_length", "storage_bounds", "storage_area",
    "storage_capacity", "nearest_storage_unit",
]
