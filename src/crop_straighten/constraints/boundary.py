"""Rotated image boundary ("diamond") and its rectangle-aware inset."""

from __future__ import annotations

import math
from typing import Sequence

from ..utils.geometry import Point, Rect, normalize, rotate_point
from ..utils.polygon import Polygon, make_polygon


def rotated_boundary(bounds: Rect, angle_deg: float) -> Polygon:
    """Corners of ``bounds`` rotated about its center by ``angle_deg``.

    The corners keep the (min/min, max/min, max/max, min/max) order, which is
    the winding every containment and inset routine relies on.
    """
    radians = math.radians(angle_deg)
    center = bounds.center
    return make_polygon([rotate_point(c, center, radians) for c in bounds.corners()])


def inset_for_rect(
    rotated_corners: Sequence[Point],
    angle_rad: float,
    half_width: float,
    half_height: float,
) -> Polygon:
    """Shrink the rotated boundary so it bounds the center of an axis-aligned rect.

    Each edge moves inward by the perpendicular reach of a rect with the given
    half extents, ``|hw * nx| + |hh * ny|`` for the edge's inward normal
    ``(nx, ny)``. Any rect of that size centered inside the result lies inside
    ``rotated_corners``. Output keeps the input order and winding.

    ``angle_rad`` is accepted for symmetry with the boundary builder; the edge
    directions already carry the rotation.
    """
    inset = []
    for i in range(4):
        prev = rotated_corners[(i + 3) % 4]
        curr = rotated_corners[i]
        nxt = rotated_corners[(i + 1) % 4]

        edge1 = normalize(curr - prev)
        edge2 = normalize(nxt - curr)

        normal1 = Point(-edge1.y, edge1.x)
        normal2 = Point(-edge2.y, edge2.x)

        reach1 = abs(half_width * normal1.x) + abs(half_height * normal1.y)
        reach2 = abs(half_width * normal2.x) + abs(half_height * normal2.y)

        inset.append(curr + normal1 * reach1 + normal2 * reach2)
    return make_polygon(inset)


def center_constraint_polygon(
    bounds: Rect, angle_deg: float, width: float, height: float
) -> Polygon:
    """Region a ``width`` x ``height`` rect's center may occupy inside the rotated bounds."""
    corners = rotated_boundary(bounds, angle_deg)
    return inset_for_rect(corners, math.radians(angle_deg), width / 2.0, height / 2.0)


__all__ = ["rotated_boundary", "inset_for_rect", "center_constraint_polygon"]
