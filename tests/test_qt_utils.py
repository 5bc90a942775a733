import numpy as np
from numpy.testing import assert_array_equal
import pytest

QtGui = pytest.importorskip("PySide6.QtGui")

from crop_straighten.utils.qt import bgr_to_qimage, qimage_to_bgr  # noqa: E402


def test_bgr_to_qimage_swaps_channels() -> None:
    img = np.zeros((4, 5, 3), dtype=np.uint8)
    img[..., 0] = 10  # blue
    img[..., 1] = 20  # green
    img[..., 2] = 30  # red

    qimg = bgr_to_qimage(img)
    assert (qimg.width(), qimg.height()) == (5, 4)
    color = qimg.pixelColor(2, 1)
    assert (color.red(), color.green(), color.blue()) == (30, 20, 10)


def test_qimage_round_trip_keeps_pixels() -> None:
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, size=(7, 9, 3), dtype=np.uint8)
    assert_array_equal(qimage_to_bgr(bgr_to_qimage(img)), img)


def test_grayscale_is_expanded() -> None:
    gray = np.full((3, 3), 99, dtype=np.uint8)
    color = bgr_to_qimage(gray).pixelColor(0, 0)
    assert (color.red(), color.green(), color.blue()) == (99, 99, 99)


def test_rejects_float_images() -> None:
    with pytest.raises(ValueError):
        bgr_to_qimage(np.zeros((3, 3, 3), dtype=np.float32))
