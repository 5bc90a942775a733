import math

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from crop_straighten.constraints import (
    center_constraint_polygon,
    inset_for_rect,
    rotated_boundary,
)
from crop_straighten.utils.geometry import Point, Rect, rotate_point
from crop_straighten.utils.polygon import is_point_in_polygon

BOUNDS = Rect(0, 0, 200, 200)


def test_rotated_boundary_at_zero_is_the_bounds() -> None:
    assert rotated_boundary(BOUNDS, 0) == BOUNDS.corners()


def test_rotated_boundary_at_45_is_a_diamond() -> None:
    corners = rotated_boundary(BOUNDS, 45)
    half_diag = 100 * math.sqrt(2)
    expected = [
        (100, 100 - half_diag),
        (100 + half_diag, 100),
        (100, 100 + half_diag),
        (100 - half_diag, 100),
    ]
    for got, want in zip(corners, expected):
        assert (got.x, got.y) == pytest.approx(want)


def test_inset_without_rotation_shrinks_by_half_extents() -> None:
    inset = inset_for_rect(BOUNDS.corners(), 0.0, 50.0, 30.0)
    assert inset == (
        Point(50, 30),
        Point(150, 30),
        Point(150, 170),
        Point(50, 170),
    )


def test_inset_diamond_for_square_at_45() -> None:
    allowed = center_constraint_polygon(BOUNDS, 45, 100, 100)
    center = BOUNDS.center
    for corner in allowed:
        assert corner.distance_to(center) == pytest.approx(100 * math.sqrt(2) - 100)


@given(
    st.floats(min_value=-45, max_value=45),
    st.floats(min_value=1, max_value=100),
    st.floats(min_value=1, max_value=100),
    st.floats(min_value=0, max_value=1),
    st.floats(min_value=0, max_value=1),
)
@settings(max_examples=150, deadline=None)
def test_rect_centered_in_inset_fits_in_boundary(angle, w, h, s, t) -> None:
    allowed = center_constraint_polygon(BOUNDS, angle, w, h)
    # pick a point inside the convex inset by interpolating its corners
    top = allowed[0] + (allowed[1] - allowed[0]) * s
    bottom = allowed[3] + (allowed[2] - allowed[3]) * s
    center = top + (bottom - top) * t
    if not is_point_in_polygon(center, allowed):
        return  # inset collapsed for this size
    rect = Rect.from_center(center, w, h)
    boundary = rotated_boundary(BOUNDS, angle)
    # un-rotate each corner into the image frame and check it lies in the image
    for corner in rect.corners():
        back = rotate_point(corner, BOUNDS.center, -math.radians(angle))
        assert BOUNDS.min_x - 1e-6 <= back.x <= BOUNDS.max_x + 1e-6
        assert BOUNDS.min_y - 1e-6 <= back.y <= BOUNDS.max_y + 1e-6
    assert all(is_point_in_polygon(c, boundary) for c in rect.corners())
