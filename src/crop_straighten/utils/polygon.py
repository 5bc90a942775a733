"""Convex quadrilateral primitives: containment, intersections, bounding boxes.

Every polygon handled here is a 4-tuple of :class:`Point` with a consistent
winding, as produced by :func:`crop_straighten.constraints.rotated_boundary`.
The winding is a precondition and is never validated; mis-ordered corners
silently give wrong containment answers.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

from .geometry import EPSILON, Point, Rect, closest_point_on_segment

Polygon = Tuple[Point, Point, Point, Point]


def make_polygon(points: Sequence[Point]) -> Polygon:
    """Freeze ``points`` into a :data:`Polygon`, rejecting anything but four corners."""
    if len(points) != 4:
        raise ValueError(f"Expected 4 polygon corners, got {len(points)}.")
    return (points[0], points[1], points[2], points[3])


def bounding_box(points: Iterable[Point]) -> Rect:
    """Axis-aligned box around ``points`` with width and height floored at 1."""
    min_x = math.inf
    min_y = math.inf
    max_x = -math.inf
    max_y = -math.inf
    for p in points:
        min_x = min(min_x, p.x)
        min_y = min(min_y, p.y)
        max_x = max(max_x, p.x)
        max_y = max(max_y, p.y)
    if min_x == math.inf:
        return Rect(0.0, 0.0, 1.0, 1.0)
    return Rect(min_x, min_y, max(1.0, max_x - min_x), max(1.0, max_y - min_y))


def polygon_area(corners: Sequence[Point]) -> float:
    """Signed shoelace area; positive for the winding the boundary builder emits."""
    area = 0.0
    n = len(corners)
    for i in range(n):
        a = corners[i]
        b = corners[(i + 1) % n]
        area += a.x * b.y - b.x * a.y
    return area / 2.0


def is_point_in_polygon(point: Point, corners: Sequence[Point]) -> bool:
    """True when ``point`` is on the inner side of all four edges.

    Points on an edge (within ``EPSILON``) count as inside. Zero-area
    polygons contain nothing.
    """
    if abs(polygon_area(corners)) < EPSILON:
        return False
    for i in range(4):
        p1 = corners[i]
        p2 = corners[(i + 1) % 4]
        edge_x = p2.x - p1.x
        edge_y = p2.y - p1.y
        to_x = point.x - p1.x
        to_y = point.y - p1.y
        if edge_x * to_y - edge_y * to_x < -EPSILON:
            return False
    return True


def segment_intersection(
    a1: Point, a2: Point, b1: Point, b2: Point
) -> Optional[Point]:
    """Intersection of segments ``a1``→``a2`` and ``b1``→``b2``, if any.

    Near-parallel segments (``|denom| < EPSILON``) never intersect. Both
    segment parameters must lie in the inclusive range ``[0, 1]``.
    """
    x1, y1 = a1.x, a1.y
    x2, y2 = a2.x, a2.y
    x3, y3 = b1.x, b1.y
    x4, y4 = b2.x, b2.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < EPSILON:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def nearest_intersection(
    start: Point, end: Point, corners: Sequence[Point]
) -> Optional[Point]:
    """Closest crossing (to ``start``) of ``start``→``end`` with the polygon edges."""
    closest: Optional[Point] = None
    closest_dist = math.inf
    for i in range(4):
        hit = segment_intersection(start, end, corners[i], corners[(i + 1) % 4])
        if hit is None:
            continue
        dist = start.distance_to(hit)
        if dist < closest_dist:
            closest_dist = dist
            closest = hit
    return closest


def closest_point_on_polygon(point: Point, corners: Sequence[Point]) -> Point:
    """``point`` itself when inside, else the nearest point on the polygon outline."""
    if is_point_in_polygon(point, corners):
        return point
    best = point
    best_dist = math.inf
    n = len(corners)
    for i in range(n):
        candidate = closest_point_on_segment(point, corners[i], corners[(i + 1) % n])
        dist = point.distance_to(candidate)
        if dist < best_dist:
            best_dist = dist
            best = candidate
    return best


__all__ = [
    "Polygon",
    "make_polygon",
    "bounding_box",
    "polygon_area",
    "is_point_in_polygon",
    "segment_intersection",
    "nearest_intersection",
    "closest_point_on_polygon",
]
