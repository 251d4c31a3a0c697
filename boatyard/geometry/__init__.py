from .footprint import (
    meters_to_canvas,
    canvas_to_meters,
    hull_footprint,
    effective_footprint,
    axis_aligned_half_extents,
    rotated_corners,
    normalize_rotation,
    Rect,
    rect_around,
    rects_overlap,
)
from .polygon import (
    polygon_area,
    point_in_polygon,
    polygons_intersect,
)
