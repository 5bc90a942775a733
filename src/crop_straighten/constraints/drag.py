"""Turn handle drags in view space into constrained crop rects in image space."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from loguru import logger

from ..utils.geometry import Point, Rect
from ..utils.polygon import is_point_in_polygon
from .boundary import center_constraint_polygon
from .clamp import (
    constrain_center_to_inset_diamond,
    constrain_center_to_nearest,
    constrain_to_rotated_bounds,
)

MIN_SIZE = 65.0  # view pixels


class Handle(Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"

    @property
    def is_corner(self) -> bool:
        return self in _CORNERS

    @property
    def is_edge(self) -> bool:
        return self in _EDGES

    def position(self, rect: Rect) -> Point:
        """Where this handle sits on ``rect`` (Y grows downward)."""
        xs = {"left": rect.min_x, "right": rect.max_x}
        ys = {"top": rect.min_y, "bottom": rect.max_y}
        parts = self.value.split("_")
        x = rect.mid_x
        y = rect.mid_y
        for part in parts:
            if part in xs:
                x = xs[part]
            elif part in ys:
                y = ys[part]
        return Point(x, y)

    def hit_rect(self, rect: Rect, thickness: float) -> Rect:
        """Band along an edge handle; empty for corners and the center."""
        half = thickness / 2.0
        if self is Handle.TOP:
            return Rect(rect.min_x, rect.min_y - half, rect.width, thickness)
        if self is Handle.BOTTOM:
            return Rect(rect.min_x, rect.max_y - half, rect.width, thickness)
        if self is Handle.LEFT:
            return Rect(rect.min_x - half, rect.min_y, thickness, rect.height)
        if self is Handle.RIGHT:
            return Rect(rect.max_x - half, rect.min_y, thickness, rect.height)
        return Rect.zero()


_CORNERS = frozenset(
    {Handle.TOP_LEFT, Handle.TOP_RIGHT, Handle.BOTTOM_LEFT, Handle.BOTTOM_RIGHT}
)
_EDGES = frozenset({Handle.TOP, Handle.BOTTOM, Handle.LEFT, Handle.RIGHT})


def hit_test(
    rect: Rect,
    pos: Point,
    corner_radius: float = 25.0,
    edge_thickness: float = 30.0,
    center_radius: float = 30.0,
    edge_padding: float = 40.0,
) -> Optional[Handle]:
    """Handle under ``pos``; corners win over edges, edges over the center."""
    for handle in (
        Handle.TOP_LEFT,
        Handle.TOP_RIGHT,
        Handle.BOTTOM_LEFT,
        Handle.BOTTOM_RIGHT,
    ):
        if handle.position(rect).distance_to(pos) <= corner_radius:
            return handle

    for handle in (Handle.TOP, Handle.BOTTOM, Handle.LEFT, Handle.RIGHT):
        band = handle.hit_rect(rect, edge_thickness)
        pad = 2 * edge_padding
        if handle in (Handle.TOP, Handle.BOTTOM):
            band = Rect(band.x + edge_padding, band.y, band.width - pad, band.height)
        else:
            band = Rect(band.x, band.y + edge_padding, band.width, band.height - pad)
        if band.is_empty():
            continue
        if band.min_x <= pos.x <= band.max_x and band.min_y <= pos.y <= band.max_y:
            return handle

    if rect.center.distance_to(pos) <= center_radius:
        return Handle.CENTER
    return None


def resize_rect(
    rect: Rect, handle: Handle, dx: float, dy: float, min_size: float = MIN_SIZE
) -> Rect:
    """Apply a pointer delta to ``rect`` as the given handle would.

    The delta, not the resulting size, is clamped against ``min_size`` so a
    drag past the minimum stops the rect at exactly that size.
    """
    if handle is Handle.CENTER:
        return rect.offset_by(dx, dy)

    x, y, w, h = rect.x, rect.y, rect.width, rect.height
    moves_left = handle in (Handle.TOP_LEFT, Handle.BOTTOM_LEFT, Handle.LEFT)
    moves_right = handle in (Handle.TOP_RIGHT, Handle.BOTTOM_RIGHT, Handle.RIGHT)
    moves_top = handle in (Handle.TOP_LEFT, Handle.TOP_RIGHT, Handle.TOP)
    moves_bottom = handle in (Handle.BOTTOM_LEFT, Handle.BOTTOM_RIGHT, Handle.BOTTOM)

    if moves_left:
        if w - dx < min_size:
            dx = w - min_size
        x += dx
        w -= dx
    elif moves_right:
        if w + dx < min_size:
            dx = min_size - w
        w += dx

    if moves_top:
        if h - dy < min_size:
            dy = h - min_size
        y += dy
        h -= dy
    elif moves_bottom:
        if h + dy < min_size:
            dy = min_size - h
        h += dy

    return Rect(x, y, w, h)


@dataclass(frozen=True)
class ViewTransform:
    """Uniform scale plus translation mapping image space into view space."""

    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @staticmethod
    def aspect_fit(
        extent: Rect,
        view_width: float,
        view_height: float,
        zoom: float = 1.0,
        offset: Point = Point(),
    ) -> "ViewTransform":
        """Fit ``extent`` centered in the view, then apply ``zoom`` and ``offset``."""
        if view_width <= 0 or view_height <= 0 or extent.is_empty():
            return ViewTransform()
        fit = min(view_width / extent.width, view_height / extent.height)
        scale = fit * zoom
        tx = -scale * extent.mid_x + view_width / 2.0 + offset.x
        ty = -scale * extent.mid_y + view_height / 2.0 + offset.y
        return ViewTransform(scale, tx, ty)

    def map_point(self, p: Point) -> Point:
        return Point(p.x * self.scale + self.tx, p.y * self.scale + self.ty)

    def map_rect(self, r: Rect) -> Rect:
        origin = self.map_point(Point(r.x, r.y))
        return Rect(origin.x, origin.y, r.width * self.scale, r.height * self.scale)

    def inverted(self) -> "ViewTransform":
        if self.scale == 0:
            raise ValueError("ViewTransform with zero scale is not invertible.")
        inv = 1.0 / self.scale
        return ViewTransform(inv, -self.tx * inv, -self.ty * inv)


def apply_drag(
    view_rect: Rect,
    handle: Handle,
    dx: float,
    dy: float,
    *,
    transform: ViewTransform,
    bounds: Rect,
    angle_deg: float,
    constrain: bool,
    from_center: Optional[Point] = None,
    min_size: float = MIN_SIZE,
    max_passes: int = 1,
    snap_center_to_nearest: bool = False,
) -> Rect:
    """Resize or move ``view_rect`` by one drag event and return the image-space rect.

    ``view_rect`` is the current crop rect in view space. With ``constrain``
    set, a center drag only moves the center back inside the rotated bounds
    while any other handle pulls edges in.
    """
    candidate = resize_rect(view_rect, handle, dx, dy, min_size)
    image_rect = transform.inverted().map_rect(candidate)
    if not constrain:
        return image_rect
    if handle is Handle.CENTER:
        if snap_center_to_nearest:
            return constrain_center_to_nearest(image_rect, bounds, angle_deg)
        return constrain_center_to_inset_diamond(
            image_rect, bounds, angle_deg, from_center
        )
    return constrain_to_rotated_bounds(
        image_rect, bounds, angle_deg, max_passes=max_passes
    )


def center_is_valid(rect: Rect, bounds: Rect, angle_deg: float) -> bool:
    """True when ``rect`` centered where it is fits inside the rotated bounds."""
    if angle_deg == 0:
        return bounds.contains_rect(rect)
    allowed = center_constraint_polygon(bounds, angle_deg, rect.width, rect.height)
    return is_point_in_polygon(rect.center, allowed)


@dataclass
class DragSession:
    """Per-gesture drag state, owned by whoever receives the pointer events.

    The pointer reports a translation accumulated since the gesture started;
    the session converts it into per-event deltas and remembers the last
    valid center used to pull a dragged rect back inside the bounds.
    """

    handle: Optional[Handle] = None
    previous_translation: Point = field(default_factory=Point)
    from_center: Optional[Point] = None

    @property
    def active(self) -> bool:
        return self.handle is not None

    def begin(self, handle: Handle, start_center: Optional[Point] = None) -> None:
        self.handle = handle
        self.previous_translation = Point()
        self.from_center = start_center

    def update(
        self,
        translation: Point,
        view_rect: Rect,
        *,
        transform: ViewTransform,
        bounds: Rect,
        angle_deg: float,
        constrain: bool,
        min_size: float = MIN_SIZE,
        max_passes: int = 1,
        snap_center_to_nearest: bool = False,
    ) -> Rect:
        if self.handle is None:
            raise RuntimeError("DragSession.update() called before begin().")
        delta = translation - self.previous_translation
        self.previous_translation = translation

        result = apply_drag(
            view_rect,
            self.handle,
            delta.x,
            delta.y,
            transform=transform,
            bounds=bounds,
            angle_deg=angle_deg,
            constrain=constrain,
            from_center=self.from_center,
            min_size=min_size,
            max_passes=max_passes,
            snap_center_to_nearest=snap_center_to_nearest,
        )
        if self.handle is Handle.CENTER and (
            not constrain or center_is_valid(result, bounds, angle_deg)
        ):
            self.from_center = result.center
        logger.debug("Drag {} -> {}", self.handle.value, result.describe())
        return result

    def end(self) -> None:
        self.handle = None
        self.previous_translation = Point()
        self.from_center = None


__all__ = [
    "MIN_SIZE",
    "Handle",
    "hit_test",
    "resize_rect",
    "ViewTransform",
    "apply_drag",
    "center_is_valid",
    "DragSession",
]
