"""Image adjustments run through OpenCV on small synthetic images."""

from __future__ import annotations

import math

import cv2
from hypothesis import given, settings
from hypothesis import strategies as st
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from crop_straighten.adjustments import (
    BlackAndWhiteAdjustment,
    CropAdjustment,
    Edit,
    InvertAdjustment,
    compose,
    image_extent,
    load_image,
    straighten_from_line,
)
from crop_straighten.models import CropState
from crop_straighten.utils.geometry import Point, Rect, rotate_point


def _gradient_image(width: int = 100, height: int = 80) -> np.ndarray:
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[..., 0] = np.tile(np.arange(width, dtype=np.uint8), (height, 1))
    img[..., 1] = np.tile(np.arange(height, dtype=np.uint8)[:, None], (1, width))
    img[..., 2] = 200
    return img


# ---- straighten line ----


def test_straighten_from_rising_line() -> None:
    assert straighten_from_line(Point(0, 0), Point(10, -10)) == pytest.approx(45.0)


def test_straighten_ignores_drawing_direction() -> None:
    forward = straighten_from_line(Point(0, 0), Point(10, 4))
    backward = straighten_from_line(Point(10, 4), Point(0, 0))
    assert forward == pytest.approx(backward)
    assert forward == pytest.approx(-math.degrees(math.atan2(4, 10)))


def test_straighten_level_line_is_zero() -> None:
    assert straighten_from_line(Point(3, 7), Point(50, 7)) == 0.0


# ---- crop adjustment ----


def test_crop_transform_at_zero_is_identity() -> None:
    adj = CropAdjustment(CropState())
    assert_allclose(adj.transform(Rect(0, 0, 100, 80)), np.eye(3)[:2])


@given(
    st.floats(min_value=-45, max_value=45),
    st.floats(min_value=-200, max_value=200),
    st.floats(min_value=-200, max_value=200),
)
@settings(max_examples=100, deadline=None)
def test_crop_transform_matches_rotate_point(angle, x, y) -> None:
    extent = Rect(0, 0, 100, 80)
    matrix = CropAdjustment(CropState(straighten=angle)).transform(extent)
    mapped = matrix @ np.array([x, y, 1.0])
    expected = rotate_point(Point(x, y), extent.center, math.radians(angle))
    assert_allclose(mapped, [expected.x, expected.y], atol=1e-9)


def test_crop_without_rotation_is_a_slice() -> None:
    img = _gradient_image()
    state = CropState(crop_rect=Rect(10, 20, 30, 40))
    out = CropAdjustment(state).apply(img)
    assert out.shape == (40, 30, 3)
    assert_array_equal(out, img[20:60, 10:40])


def test_empty_crop_means_whole_image() -> None:
    img = _gradient_image()
    assert_array_equal(CropAdjustment(CropState()).apply(img), img)


def test_interactive_skips_cropping() -> None:
    img = _gradient_image()
    state = CropState(crop_rect=Rect(10, 20, 30, 40), straighten=90.0)
    out = CropAdjustment(state).apply(img, interactive=True)
    assert out.shape == (100, 80, 3)


def test_rotated_crop_stays_inside_image_content() -> None:
    img = np.full((120, 160, 3), 255, dtype=np.uint8)
    state = CropState(crop_rect=image_extent(img), straighten=20.0)
    out = CropAdjustment(state).apply(img)
    assert out.shape[0] < 120 and out.shape[1] < 160
    # constrained crop never shows the black fill outside the rotated image
    assert out[6:-6, 6:-6].min() > 200


def test_unconstrained_rotated_crop_shows_fill() -> None:
    img = np.full((120, 160, 3), 255, dtype=np.uint8)
    state = CropState(crop_rect=image_extent(img), straighten=20.0, constrain=False)
    out = CropAdjustment(state).apply(img)
    assert out.shape == (120, 160, 3)
    assert out[0, 0].max() == 0


def test_grayscale_and_bgra_inputs_are_accepted() -> None:
    gray = np.full((10, 12), 7, dtype=np.uint8)
    assert CropAdjustment().apply(gray).shape == (10, 12, 3)
    bgra = np.zeros((10, 12, 4), dtype=np.uint8)
    assert CropAdjustment().apply(bgra).shape == (10, 12, 3)


def test_non_image_array_is_rejected() -> None:
    with pytest.raises(ValueError):
        CropAdjustment().apply(np.zeros(10, dtype=np.uint8))


# ---- filters and pipeline ----


def test_black_and_white_equalizes_channels() -> None:
    out = BlackAndWhiteAdjustment().apply(_gradient_image())
    assert_array_equal(out[..., 0], out[..., 1])
    assert_array_equal(out[..., 1], out[..., 2])


def test_invert() -> None:
    img = _gradient_image()
    assert_array_equal(InvertAdjustment().apply(img), 255 - img)


def test_edit_applies_in_order() -> None:
    img = _gradient_image()
    state = CropState(crop_rect=Rect(0, 0, 50, 40))
    edit = Edit.of(CropAdjustment(state), InvertAdjustment(), BlackAndWhiteAdjustment())
    expected = cv2.cvtColor(
        cv2.cvtColor(255 - img[:40, :50], cv2.COLOR_BGR2GRAY), cv2.COLOR_GRAY2BGR
    )
    assert_array_equal(edit.apply(img), expected)


def test_interactive_edit_passes_flag_through() -> None:
    img = _gradient_image()
    edit = Edit.of(CropAdjustment(CropState(crop_rect=Rect(0, 0, 50, 40))), interactive=True)
    assert edit.apply(img).shape == img.shape


def test_compose_filters_do_not_move_pixels() -> None:
    extent = Rect(0, 0, 100, 80)
    crop = CropAdjustment(CropState(straighten=10.0))
    combined = compose([InvertAdjustment(), crop, BlackAndWhiteAdjustment()], extent)
    assert_allclose(combined, crop.transform(extent))


# ---- loading ----


def test_load_image_round_trip(tmp_path) -> None:
    img = _gradient_image(16, 12)
    path = tmp_path / "gradient.png"
    assert cv2.imwrite(str(path), img)
    assert_array_equal(load_image(path), img)


def test_load_image_missing_file(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_image(tmp_path / "missing.png")
