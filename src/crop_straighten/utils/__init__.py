"""Geometry helpers shared by the constraint engine and the editor UI."""

from .geometry import (
    EPSILON,
    Point,
    Rect,
    clamp,
    closest_point_on_segment,
    normalize,
    rotate_point,
)
from .polygon import (
    Polygon,
    bounding_box,
    closest_point_on_polygon,
    is_point_in_polygon,
    make_polygon,
    nearest_intersection,
    polygon_area,
    segment_intersection,
)

__all__ = [
    "EPSILON",
    "Point",
    "Rect",
    "Polygon",
    "clamp",
    "closest_point_on_segment",
    "normalize",
    "rotate_point",
    "bounding_box",
    "closest_point_on_polygon",
    "is_point_in_polygon",
    "make_polygon",
    "nearest_intersection",
    "polygon_area",
    "segment_intersection",
]
