"""Constraint engine keeping the crop rect inside the straightened image."""

from .boundary import center_constraint_polygon, inset_for_rect, rotated_boundary
from .clamp import (
    constrain_axis_aligned,
    constrain_center_to_inset_diamond,
    constrain_center_to_nearest,
    constrain_to_rotated_bounds,
    constrained_crop_rect,
)
from .drag import (
    MIN_SIZE,
    DragSession,
    Handle,
    ViewTransform,
    apply_drag,
    center_is_valid,
    hit_test,
    resize_rect,
)

__all__ = [
    "rotated_boundary",
    "inset_for_rect",
    "center_constraint_polygon",
    "constrain_axis_aligned",
    "constrain_to_rotated_bounds",
    "constrain_center_to_inset_diamond",
    "constrain_center_to_nearest",
    "constrained_crop_rect",
    "MIN_SIZE",
    "DragSession",
    "Handle",
    "ViewTransform",
    "apply_drag",
    "center_is_valid",
    "hit_test",
    "resize_rect",
]
