"""Image adjustments applied in sequence: straighten+crop, black & white, invert."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from pathlib import Path
from typing import List, Protocol, Sequence, Union

import cv2  # opencv-python
import numpy as np
from loguru import logger

from .constraints import constrained_crop_rect, rotated_boundary
from .models import CropState
from .utils.geometry import EPSILON, Point, Rect
from .utils.polygon import bounding_box


def _coerce_bgr(image: np.ndarray) -> np.ndarray:
    """Return a uint8 BGR image regardless of the input channel layout."""

    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    if arr.ndim == 2:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    if arr.ndim == 3:
        if arr.shape[2] == 3:
            return arr
        if arr.shape[2] == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2BGR)
    raise ValueError("Expected a grayscale or BGR/BGRA image array.")


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Read ``path`` as a BGR image."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Unable to read image from {path}.")
    logger.info("Loaded {} ({}x{})", path, image.shape[1], image.shape[0])
    return image


def image_extent(image: np.ndarray) -> Rect:
    """Unrotated bounds of ``image`` in pixel coordinates."""
    height, width = image.shape[:2]
    return Rect(0.0, 0.0, float(width), float(height))


def straighten_from_line(start: Point, end: Point) -> float:
    """Rotation in degrees that makes the drawn line ``start``→``end`` level.

    Lines drawn right to left give the same answer as left to right. The
    result is meant to be added to the current straighten angle.
    """
    dx = end.x - start.x
    dy = start.y - end.y
    if dx < 0:
        dx = -dx
        dy = -dy
    return math.degrees(math.atan2(dy, dx))


class Adjustment(Protocol):
    def transform(self, extent: Rect) -> np.ndarray:
        """2x3 affine this adjustment applies to image coordinates."""
        ...

    def apply(self, image: np.ndarray, interactive: bool = False) -> np.ndarray: ...


_IDENTITY = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]], dtype=np.float64)


@dataclass
class CropAdjustment:
    """Rotate the image about its center by the straighten angle, then crop."""

    state: CropState = field(default_factory=CropState)
    clamp_passes: int = 1

    def transform(self, extent: Rect) -> np.ndarray:
        radians = math.radians(self.state.straighten)
        cos_t = math.cos(radians)
        sin_t = math.sin(radians)
        cx, cy = extent.mid_x, extent.mid_y
        return np.array(
            [
                [cos_t, -sin_t, cx - cx * cos_t + cy * sin_t],
                [sin_t, cos_t, cy - cx * sin_t - cy * cos_t],
            ],
            dtype=np.float64,
        )

    def crop_rect_for(self, extent: Rect) -> Rect:
        """Rect that gets cropped; an unset (empty) crop means the whole image."""
        state = self.state
        if state.crop_rect.is_empty():
            state = state.with_rect(extent)
        return constrained_crop_rect(state, extent, max_passes=self.clamp_passes)

    def apply(self, image: np.ndarray, interactive: bool = False) -> np.ndarray:
        img = _coerce_bgr(image)
        extent = image_extent(img)

        canvas = bounding_box(rotated_boundary(extent, self.state.straighten))
        matrix = self.transform(extent)
        matrix[0, 2] -= canvas.x
        matrix[1, 2] -= canvas.y
        # rotation leaves float noise on exact sizes
        size = (
            int(math.ceil(canvas.width - EPSILON)),
            int(math.ceil(canvas.height - EPSILON)),
        )
        rotated = cv2.warpAffine(
            img,
            matrix,
            size,
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0),
        )
        if interactive:
            return rotated

        rect = self.crop_rect_for(extent).offset_by(-canvas.x, -canvas.y)
        x0 = int(np.clip(round(rect.min_x), 0, size[0]))
        x1 = int(np.clip(round(rect.max_x), 0, size[0]))
        y0 = int(np.clip(round(rect.min_y), 0, size[1]))
        y1 = int(np.clip(round(rect.max_y), 0, size[1]))
        logger.debug("Cropping {} from canvas {}x{}", rect.describe(), *size)
        return np.ascontiguousarray(rotated[y0:y1, x0:x1])


@dataclass
class BlackAndWhiteAdjustment:
    def transform(self, extent: Rect) -> np.ndarray:
        return _IDENTITY.copy()

    def apply(self, image: np.ndarray, interactive: bool = False) -> np.ndarray:
        gray = cv2.cvtColor(_coerce_bgr(image), cv2.COLOR_BGR2GRAY)
        return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


@dataclass
class InvertAdjustment:
    def transform(self, extent: Rect) -> np.ndarray:
        return _IDENTITY.copy()

    def apply(self, image: np.ndarray, interactive: bool = False) -> np.ndarray:
        return cv2.bitwise_not(_coerce_bgr(image))


@dataclass
class Edit:
    """Ordered list of adjustments applied one after another."""

    adjustments: List[Adjustment] = field(default_factory=list)
    interactive: bool = False

    def apply(self, image: np.ndarray) -> np.ndarray:
        result = image
        for adjustment in self.adjustments:
            result = adjustment.apply(result, interactive=self.interactive)
        return result

    @staticmethod
    def of(*adjustments: Adjustment, interactive: bool = False) -> "Edit":
        return Edit(list(adjustments), interactive=interactive)


def compose(adjustments: Sequence[Adjustment], extent: Rect) -> np.ndarray:
    """Combined 2x3 affine of ``adjustments`` applied in order."""
    total = np.eye(3, dtype=np.float64)
    for adjustment in adjustments:
        step = np.vstack([adjustment.transform(extent), [0.0, 0.0, 1.0]])
        total = step @ total
    return total[:2]


__all__ = [
    "Adjustment",
    "CropAdjustment",
    "BlackAndWhiteAdjustment",
    "InvertAdjustment",
    "Edit",
    "compose",
    "load_image",
    "image_extent",
    "straighten_from_line",
]
