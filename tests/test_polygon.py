from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from crop_straighten.constraints import rotated_boundary
from crop_straighten.utils.geometry import Point, Rect
from crop_straighten.utils.polygon import (
    bounding_box,
    closest_point_on_polygon,
    is_point_in_polygon,
    make_polygon,
    nearest_intersection,
    polygon_area,
    segment_intersection,
)

SQUARE = Rect(0, 0, 100, 100).corners()


def test_segments_crossing_at_five_five() -> None:
    hit = segment_intersection(
        Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0)
    )
    assert hit is not None
    assert hit.x == pytest.approx(5.0, abs=1e-6)
    assert hit.y == pytest.approx(5.0, abs=1e-6)


def test_parallel_segments_do_not_intersect() -> None:
    assert (
        segment_intersection(Point(0, 0), Point(10, 0), Point(0, 5), Point(10, 5))
        is None
    )


def test_segment_parameters_are_inclusive() -> None:
    # touching at an endpoint counts
    hit = segment_intersection(Point(0, 0), Point(5, 0), Point(5, -5), Point(5, 5))
    assert hit == Point(5.0, 0.0)
    assert (
        segment_intersection(Point(0, 0), Point(4.9, 0), Point(5, -5), Point(5, 5))
        is None
    )


def test_point_in_polygon_inside_edge_and_outside() -> None:
    assert is_point_in_polygon(Point(50, 50), SQUARE)
    assert is_point_in_polygon(Point(0, 50), SQUARE)
    assert is_point_in_polygon(Point(100, 100), SQUARE)
    assert not is_point_in_polygon(Point(101, 50), SQUARE)
    assert not is_point_in_polygon(Point(50, -0.01), SQUARE)


def test_zero_area_polygon_contains_nothing() -> None:
    flat = (Point(0, 0), Point(10, 0), Point(20, 0), Point(30, 0))
    assert not is_point_in_polygon(Point(5, 0), flat)
    collapsed = Rect.zero().corners()
    assert not is_point_in_polygon(Point(0, 0), collapsed)


@given(
    st.floats(min_value=-80, max_value=80),
    st.floats(min_value=10, max_value=190),
    st.floats(min_value=10, max_value=190),
)
@settings(max_examples=100, deadline=None)
def test_rotated_boundary_winding_is_consistent(angle, x, y) -> None:
    boundary = rotated_boundary(Rect(0, 0, 200, 200), angle)
    assert polygon_area(boundary) > 0
    # points near the center are inside at any rotation
    center = Point(100 + (x - 100) * 0.5, 100 + (y - 100) * 0.5)
    assert is_point_in_polygon(center, boundary)


def test_nearest_intersection_picks_closest_edge() -> None:
    hit = nearest_intersection(Point(50, 50), Point(150, 50), SQUARE)
    assert hit == Point(100.0, 50.0)
    assert nearest_intersection(Point(50, 50), Point(60, 60), SQUARE) is None


def test_closest_point_on_polygon() -> None:
    assert closest_point_on_polygon(Point(30, 40), SQUARE) == Point(30, 40)
    assert closest_point_on_polygon(Point(130, 40), SQUARE) == Point(100, 40)
    assert closest_point_on_polygon(Point(-10, -10), SQUARE) == Point(0, 0)


def test_bounding_box_floors_size_at_one() -> None:
    assert bounding_box([Point(3, 4), Point(3, 4)]) == Rect(3, 4, 1, 1)
    assert bounding_box([]) == Rect(0, 0, 1, 1)
    assert bounding_box(SQUARE) == Rect(0, 0, 100, 100)


def test_make_polygon_requires_four_points() -> None:
    with pytest.raises(ValueError):
        make_polygon([Point(), Point(), Point()])
