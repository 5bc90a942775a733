"""Dataclasses describing crop state and persisted editor configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Dict, Optional

import json

from .utils.geometry import Rect


class AspectRatio(str, Enum):
    """Aspect ratio modes; stored with the crop but not enforced by the clamps."""

    ORIGINAL = "original"
    FREEFORM = "freeform"
    CUSTOM = "custom"
    STANDARD = "standard"


@dataclass(frozen=True)
class CropState:
    """Snapshot of a crop edit: rect in image space, straighten angle, constrain flag."""

    crop_rect: Rect = field(default_factory=Rect.zero)
    straighten: float = 0.0  # degrees
    constrain: bool = True
    aspect_ratio: AspectRatio = AspectRatio.ORIGINAL
    aspect_width: Optional[int] = None
    aspect_height: Optional[int] = None

    def with_rect(self, rect: Rect) -> "CropState":
        return replace(self, crop_rect=rect)

    def with_straighten(self, degrees: float) -> "CropState":
        return replace(self, straighten=float(degrees))

    def with_constrain(self, constrain: bool) -> "CropState":
        return replace(self, constrain=bool(constrain))


@dataclass
class EditorParams:
    """Interaction tuning for the crop editor."""

    min_crop_size_px: float = 65.0
    corner_hit_radius_px: float = 25.0
    edge_hit_thickness_px: float = 30.0
    edge_corner_padding_px: float = 40.0
    center_hit_radius_px: float = 30.0
    clamp_passes: int = 1  # >1 enables iterative edge clamping
    snap_center_to_nearest: bool = False
    constrain: bool = True


@dataclass
class UIState:
    """User-interface level preferences for the editor window."""

    debug_overlay: bool = False
    last_image_path: str = ""
    window_width: int = 1100
    window_height: int = 760


@dataclass
class AppConfig:
    """Persisted configuration for the application."""

    params: EditorParams = field(default_factory=EditorParams)
    ui: UIState = field(default_factory=UIState)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @staticmethod
    def from_json(text: str) -> "AppConfig":
        data: Dict = json.loads(text)
        p = data.get("params", {})
        u = data.get("ui", {})
        return AppConfig(
            params=EditorParams(
                min_crop_size_px=float(p.get("min_crop_size_px", 65.0)),
                corner_hit_radius_px=float(p.get("corner_hit_radius_px", 25.0)),
                edge_hit_thickness_px=float(p.get("edge_hit_thickness_px", 30.0)),
                edge_corner_padding_px=float(p.get("edge_corner_padding_px", 40.0)),
                center_hit_radius_px=float(p.get("center_hit_radius_px", 30.0)),
                clamp_passes=max(1, int(p.get("clamp_passes", 1))),
                snap_center_to_nearest=bool(p.get("snap_center_to_nearest", False)),
                constrain=bool(p.get("constrain", True)),
            ),
            ui=UIState(
                debug_overlay=bool(u.get("debug_overlay", False)),
                last_image_path=str(u.get("last_image_path", "")),
                window_width=int(u.get("window_width", 1100)),
                window_height=int(u.get("window_height", 760)),
            ),
        )


__all__ = [
    "AspectRatio",
    "CropState",
    "EditorParams",
    "UIState",
    "AppConfig",
]
