"""Qt helper utilities."""

from PySide6 import QtCore, QtGui
import numpy as np

from .geometry import Point, Rect


def bgr_to_qimage(image: np.ndarray) -> QtGui.QImage:
    """Convert a BGR (or grayscale) NumPy array into a detached :class:`QImage`."""
    arr = np.asarray(image)
    if arr.dtype != np.uint8 or arr.ndim not in (2, 3):
        raise ValueError("Expected a uint8 grayscale or BGR image array.")
    if arr.ndim == 2:
        arr = np.repeat(arr[..., None], 3, axis=2)
    if arr.shape[2] != 3:
        raise ValueError("Expected a 3-channel BGR image array.")
    rgb = np.ascontiguousarray(arr[..., ::-1])
    height, width = rgb.shape[:2]
    img = QtGui.QImage(
        rgb.data, width, height, rgb.strides[0], QtGui.QImage.Format.Format_RGB888
    )
    # QImage borrows the buffer; copy so it outlives ``rgb``
    return img.copy()


def qimage_to_bgr(img: QtGui.QImage) -> np.ndarray:
    """Convert a :class:`QImage` into a BGR NumPy array."""
    img = img.convertToFormat(QtGui.QImage.Format.Format_RGBA8888)
    width = img.width()
    height = img.height()
    bytes_per_line = img.bytesPerLine()
    arr = np.frombuffer(img.constBits(), np.uint8)
    arr = arr.reshape((height, bytes_per_line))  # include stride
    arr = arr[:, : width * 4].reshape((height, width, 4))
    return np.ascontiguousarray(arr[..., 2::-1])


def to_qpointf(p: Point) -> QtCore.QPointF:
    return QtCore.QPointF(p.x, p.y)


def to_qrectf(r: Rect) -> QtCore.QRectF:
    return QtCore.QRectF(r.x, r.y, r.width, r.height)


def to_qpolygonf(points) -> QtGui.QPolygonF:
    return QtGui.QPolygonF([to_qpointf(p) for p in points])


__all__ = ["bgr_to_qimage", "qimage_to_bgr", "to_qpointf", "to_qrectf", "to_qpolygonf"]
