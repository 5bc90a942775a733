"""Keep an axis-aligned crop rect inside the straightened image boundary.

Two strategies are exposed:

* :func:`constrain_to_rotated_bounds` pulls individual edges in so every crop
  corner lands on or inside the rotated boundary (used while resizing).
* :func:`constrain_center_to_inset_diamond` moves only the center, keeping the
  size, so the whole rect stays inside (used while moving the rect).

All functions are pure: they take value snapshots and return a new
:class:`~crop_straighten.utils.geometry.Rect`.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional, Tuple

from loguru import logger

from ..utils.geometry import Point, Rect, clamp
from ..utils.polygon import (
    Polygon,
    closest_point_on_polygon,
    is_point_in_polygon,
    nearest_intersection,
)
from .boundary import inset_for_rect, rotated_boundary

if TYPE_CHECKING:  # pragma: no cover - only for type checkers
    from ..models import CropState


def constrain_axis_aligned(rect: Rect, bounds: Rect) -> Rect:
    """Translate ``rect`` back inside ``bounds`` without resizing it."""
    x = rect.x
    y = rect.y
    if rect.min_x < bounds.min_x:
        x = bounds.min_x
    if rect.min_y < bounds.min_y:
        y = bounds.min_y
    if rect.max_x > bounds.max_x:
        x = bounds.max_x - rect.width
    if rect.max_y > bounds.max_y:
        y = bounds.max_y - rect.height
    return Rect(x, y, rect.width, rect.height)


def _clamp_edges_once(rect: Rect, boundary: Polygon) -> Tuple[Rect, bool]:
    center = rect.center
    min_x, min_y, max_x, max_y = rect.min_x, rect.min_y, rect.max_x, rect.max_y
    adjusted = False

    for index, corner in enumerate(rect.corners()):
        if is_point_in_polygon(corner, boundary):
            continue
        hit = nearest_intersection(center, corner, boundary)
        if hit is None:
            continue
        adjusted = True
        if index == 0:
            min_x = max(min_x, hit.x)
            min_y = max(min_y, hit.y)
        elif index == 1:
            max_x = min(max_x, hit.x)
            min_y = max(min_y, hit.y)
        elif index == 2:
            max_x = min(max_x, hit.x)
            max_y = min(max_y, hit.y)
        else:
            min_x = max(min_x, hit.x)
            max_y = min(max_y, hit.y)

    if not adjusted:
        return rect, False
    return Rect.from_edges(min_x, min_y, max_x, max_y), True


def constrain_to_rotated_bounds(
    rect: Rect, bounds: Rect, angle_deg: float, *, max_passes: int = 1
) -> Rect:
    """Pull the edges of ``rect`` in until its corners sit inside the rotated bounds.

    Each corner outside the boundary is walked back toward the rect center to
    where that ray crosses the boundary, and the two edges meeting at that
    corner are tightened to the crossing point.

    One pass is the default and matches the editor's historical behavior. Its
    corners are clamped independently, so extreme rotation and size
    combinations can leave a corner slightly outside after a single pass.
    ``max_passes`` > 1 re-runs the pass on its own output until nothing
    changes or the budget is spent.

    Zero-size rects pass through unchanged; the result never has negative
    width or height.
    """
    if angle_deg == 0:
        return constrain_axis_aligned(rect, bounds)

    boundary = rotated_boundary(bounds, angle_deg)
    result = rect
    for pass_no in range(max(1, max_passes)):
        clamped, adjusted = _clamp_edges_once(result, boundary)
        if not adjusted or clamped == result:
            break
        logger.debug(
            "Edge clamp pass {} at {:.2f}°: {} -> {}",
            pass_no + 1,
            angle_deg,
            result.describe(),
            clamped.describe(),
        )
        result = clamped
    return result


def _axis_aligned_center(rect: Rect, bounds: Rect) -> Point:
    half_w = rect.width / 2.0
    half_h = rect.height / 2.0
    lo_x, hi_x = bounds.min_x + half_w, bounds.max_x - half_w
    lo_y, hi_y = bounds.min_y + half_h, bounds.max_y - half_h
    cx = clamp(rect.mid_x, lo_x, hi_x) if lo_x <= hi_x else bounds.mid_x
    cy = clamp(rect.mid_y, lo_y, hi_y) if lo_y <= hi_y else bounds.mid_y
    return Point(cx, cy)


def _recentered(rect: Rect, center: Point) -> Rect:
    if center == rect.center:
        return rect
    return Rect.from_center(center, rect.width, rect.height)


def _allowed_centers(rect: Rect, bounds: Rect, angle_deg: float) -> Polygon:
    boundary = rotated_boundary(bounds, angle_deg)
    return inset_for_rect(
        boundary, math.radians(angle_deg), rect.width / 2.0, rect.height / 2.0
    )


def constrain_center_to_inset_diamond(
    rect: Rect,
    bounds: Rect,
    angle_deg: float,
    from_center: Optional[Point] = None,
) -> Rect:
    """Move only the center of ``rect`` so the whole rect stays in the rotated bounds.

    ``from_center`` is the last center known to be valid during the current
    drag (the bounds center when omitted). A center outside the allowed region
    is pulled back along the segment from ``from_center`` to where it crosses
    that region. If the segment never crosses it the center is left where it
    is, and the caller gets a rect that is still outside until the next event.
    """
    if angle_deg == 0:
        return _recentered(rect, _axis_aligned_center(rect, bounds))

    allowed = _allowed_centers(rect, bounds, angle_deg)
    center = rect.center
    if is_point_in_polygon(center, allowed):
        return rect

    anchor = from_center if from_center is not None else bounds.center
    hit = nearest_intersection(anchor, center, allowed)
    if hit is None:
        logger.debug(
            "Center {} has no path back into the allowed region from {}; left as is",
            center.as_tuple(),
            anchor.as_tuple(),
        )
        return rect
    return _recentered(rect, hit)


def constrain_center_to_nearest(rect: Rect, bounds: Rect, angle_deg: float) -> Rect:
    """Snap the center of ``rect`` to the closest center the rotated bounds allow."""
    if angle_deg == 0:
        return _recentered(rect, _axis_aligned_center(rect, bounds))

    allowed = _allowed_centers(rect, bounds, angle_deg)
    return _recentered(rect, closest_point_on_polygon(rect.center, allowed))


def constrained_crop_rect(
    state: "CropState", bounds: Rect, *, max_passes: int = 1
) -> Rect:
    """The rect a crop adjustment actually applies for ``state`` over ``bounds``."""
    if not state.constrain:
        return state.crop_rect
    centered = constrain_center_to_inset_diamond(
        state.crop_rect, bounds, state.straighten, bounds.center
    )
    return constrain_to_rotated_bounds(
        centered, bounds, state.straighten, max_passes=max_passes
    )


__all__ = [
    "constrain_axis_aligned",
    "constrain_to_rotated_bounds",
    "constrain_center_to_inset_diamond",
    "constrain_center_to_nearest",
    "constrained_crop_rect",
]
