"""Point/rect value types and the vector helpers used by the constraint engine."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Tuple

EPSILON = 1e-4


@dataclass(frozen=True)
class Point:
    """Immutable 2-D coordinate."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its origin and size.

    Zero-sized rectangles are valid values and flow through every operation
    unchanged; nothing here divides by width or height.
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @staticmethod
    def zero() -> "Rect":
        return Rect(0.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_edges(min_x: float, min_y: float, max_x: float, max_y: float) -> "Rect":
        """Build a rect from its edges; crossed edges collapse to zero size."""
        return Rect(min_x, min_y, max(0.0, max_x - min_x), max(0.0, max_y - min_y))

    @staticmethod
    def from_center(center: Point, width: float, height: float) -> "Rect":
        return Rect(center.x - width / 2.0, center.y - height / 2.0, width, height)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def center(self) -> Point:
        return Point(self.mid_x, self.mid_y)

    def is_empty(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in the fixed (min/min, max/min, max/max, min/max) order."""
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        )

    def offset_by(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def contains_rect(self, other: "Rect", tol: float = EPSILON) -> bool:
        return (
            other.min_x >= self.min_x - tol
            and other.min_y >= self.min_y - tol
            and other.max_x <= self.max_x + tol
            and other.max_y <= self.max_y + tol
        )

    def fit_in(self, width: float, height: float) -> "Rect":
        """Largest rect of aspect ``width:height`` centered inside this one."""
        if width <= 0 or height <= 0 or self.width <= 0 or self.height <= 0:
            return Rect.zero()
        scale = min(self.width / width, self.height / height)
        fitted_w = width * scale
        fitted_h = height * scale
        return Rect(
            self.min_x + (self.width - fitted_w) / 2.0,
            self.min_y + (self.height - fitted_h) / 2.0,
            fitted_w,
            fitted_h,
        )

    def describe(self) -> str:
        return (
            f"({self.x:.2f}, {self.y:.2f}) - ({self.width:.2f}, {self.height:.2f})"
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


def rotate_point(point: Point, center: Point, radians: float) -> Point:
    """Rotate ``point`` around ``center`` by ``radians``."""
    cos_t = math.cos(radians)
    sin_t = math.sin(radians)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(
        center.x + dx * cos_t - dy * sin_t,
        center.y + dx * sin_t + dy * cos_t,
    )


def normalize(vector: Point) -> Point:
    """Unit vector in the direction of ``vector``; a zero vector is returned as is."""
    length = vector.length()
    if length <= 0.0:
        return vector
    return Point(vector.x / length, vector.y / length)


def closest_point_on_segment(point: Point, start: Point, end: Point) -> Point:
    """Project ``point`` onto the segment ``start``→``end``."""
    dx = end.x - start.x
    dy = end.y - start.y
    seg_len2 = dx * dx + dy * dy
    if seg_len2 == 0.0:
        return start
    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / seg_len2
    t = clamp(t, 0.0, 1.0)
    return Point(start.x + t * dx, start.y + t * dy)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` to the inclusive range ``[lo, hi]``."""
    return max(lo, min(hi, value))


__all__ = [
    "EPSILON",
    "Point",
    "Rect",
    "rotate_point",
    "normalize",
    "closest_point_on_segment",
    "clamp",
]
