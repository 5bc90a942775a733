"""Qt application entry point for the crop_straighten editor."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import sys

import cv2  # opencv-python
import numpy as np
from loguru import logger
from PySide6 import QtCore, QtGui, QtWidgets

APP_VERSION: str

if __package__ in (None, ""):
    PACKAGE_ROOT = Path(__file__).resolve().parents[1]
    if str(PACKAGE_ROOT) not in sys.path:
        sys.path.insert(0, str(PACKAGE_ROOT))

    import crop_straighten as _pkg

    from crop_straighten.adjustments import (
        Adjustment,
        BlackAndWhiteAdjustment,
        CropAdjustment,
        Edit,
        InvertAdjustment,
        image_extent,
        load_image,
        straighten_from_line,
    )
    from crop_straighten.constraints import (
        DragSession,
        Handle,
        ViewTransform,
        center_constraint_polygon,
        constrained_crop_rect,
        hit_test,
        rotated_boundary,
    )
    from crop_straighten.logger import configure_logging
    from crop_straighten.models import AppConfig, CropState, EditorParams
    from crop_straighten.utils import Point, Rect, clamp
    from crop_straighten.utils.qt import (
        bgr_to_qimage,
        to_qpointf,
        to_qpolygonf,
        to_qrectf,
    )

    APP_VERSION = getattr(_pkg, "__version__", "0.0.0")
else:
    from . import __version__ as APP_VERSION
    from .adjustments import (
        Adjustment,
        BlackAndWhiteAdjustment,
        CropAdjustment,
        Edit,
        InvertAdjustment,
        image_extent,
        load_image,
        straighten_from_line,
    )
    from .constraints import (
        DragSession,
        Handle,
        ViewTransform,
        center_constraint_polygon,
        constrained_crop_rect,
        hit_test,
        rotated_boundary,
    )
    from .logger import configure_logging
    from .models import AppConfig, CropState, EditorParams
    from .utils import Point, Rect, clamp
    from .utils.qt import bgr_to_qimage, to_qpointf, to_qpolygonf, to_qrectf

MAX_STRAIGHTEN = 45.0
VIEW_ZOOM = 0.9  # leave room around the image for the handles

_CURSORS = {
    Handle.TOP_LEFT: QtCore.Qt.CursorShape.SizeFDiagCursor,
    Handle.BOTTOM_RIGHT: QtCore.Qt.CursorShape.SizeFDiagCursor,
    Handle.TOP_RIGHT: QtCore.Qt.CursorShape.SizeBDiagCursor,
    Handle.BOTTOM_LEFT: QtCore.Qt.CursorShape.SizeBDiagCursor,
    Handle.TOP: QtCore.Qt.CursorShape.SizeVerCursor,
    Handle.BOTTOM: QtCore.Qt.CursorShape.SizeVerCursor,
    Handle.LEFT: QtCore.Qt.CursorShape.SizeHorCursor,
    Handle.RIGHT: QtCore.Qt.CursorShape.SizeHorCursor,
    Handle.CENTER: QtCore.Qt.CursorShape.SizeAllCursor,
}


def _point(p: QtCore.QPointF) -> Point:
    return Point(float(p.x()), float(p.y()))


# ----------------------------- Crop Overlay Widget ----------------------------


class CropOverlayWidget(QtWidgets.QWidget):
    cropChanged = QtCore.Signal()
    straightenChanged = QtCore.Signal(float)

    def __init__(self, cfg: AppConfig) -> None:
        super().__init__(None)
        self.setWindowTitle("crop_straighten")
        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(480, 360)
        self.resize(cfg.ui.window_width, cfg.ui.window_height)

        self._params: EditorParams = cfg.params
        self._debug: bool = bool(cfg.ui.debug_overlay)
        self._image: Optional[np.ndarray] = None
        self._qimage: Optional[QtGui.QImage] = None
        self._extent = Rect.zero()
        self._state = CropState(constrain=cfg.params.constrain)

        self._session = DragSession()
        self._press_pos = Point()
        self._line: Optional[Tuple[Point, Point]] = None  # straighten guide

    # ----------------------------- Properties ---------------------------------

    @property
    def state(self) -> CropState:
        return self._state

    @property
    def image(self) -> Optional[np.ndarray]:
        return self._image

    def set_image(self, image: np.ndarray) -> None:
        self._image = image
        self._qimage = bgr_to_qimage(image)
        self._extent = image_extent(image)
        self._state = CropState(crop_rect=self._extent, constrain=self._state.constrain)
        self._session.end()
        self.cropChanged.emit()
        self.update()

    def set_straighten(self, degrees: float) -> None:
        degrees = clamp(float(degrees), -MAX_STRAIGHTEN, MAX_STRAIGHTEN)
        self._state = self._state.with_straighten(degrees)
        self._refit_crop()

    def set_constrain(self, enabled: bool) -> None:
        self._state = self._state.with_constrain(enabled)
        self._refit_crop()

    def set_params(self, params: EditorParams) -> None:
        self._params = params
        self.update()

    def set_debug_overlay(self, enabled: bool) -> None:
        self._debug = bool(enabled)
        self.update()

    def reset_crop(self) -> None:
        self._state = CropState(crop_rect=self._extent, constrain=self._state.constrain)
        self.straightenChanged.emit(0.0)
        self.cropChanged.emit()
        self.update()

    def view_transform(self) -> ViewTransform:
        return ViewTransform.aspect_fit(
            self._extent, float(self.width()), float(self.height()), zoom=VIEW_ZOOM
        )

    def _refit_crop(self) -> None:
        if not self._extent.is_empty():
            rect = constrained_crop_rect(
                self._state, self._extent, max_passes=self._params.clamp_passes
            )
            self._state = self._state.with_rect(rect)
        self.cropChanged.emit()
        self.update()

    # ----------------------------- Interaction --------------------------------

    def _view_crop_rect(self) -> Rect:
        return self.view_transform().map_rect(self._state.crop_rect)

    def _hit(self, pos: Point) -> Optional[Handle]:
        p = self._params
        return hit_test(
            self._view_crop_rect(),
            pos,
            corner_radius=p.corner_hit_radius_px,
            edge_thickness=p.edge_hit_thickness_px,
            center_radius=p.center_hit_radius_px,
            edge_padding=p.edge_corner_padding_px,
        )

    def mousePressEvent(self, e: QtGui.QMouseEvent) -> None:
        if self._qimage is None:
            return
        pos = _point(e.position())
        self._press_pos = pos
        mods = e.modifiers()
        if mods & QtCore.Qt.KeyboardModifier.ShiftModifier:
            self._line = (pos, pos)
        else:
            handle = self._hit(pos)
            if handle is not None:
                self._session.begin(handle, self._state.crop_rect.center)
        e.accept()

    def mouseMoveEvent(self, e: QtGui.QMouseEvent) -> None:
        pos = _point(e.position())
        if self._line is not None:
            self._line = (self._line[0], pos)
            self.update()
        elif self._session.active:
            p = self._params
            rect = self._session.update(
                pos - self._press_pos,
                self._view_crop_rect(),
                transform=self.view_transform(),
                bounds=self._extent,
                angle_deg=self._state.straighten,
                constrain=self._state.constrain,
                min_size=p.min_crop_size_px,
                max_passes=p.clamp_passes,
                snap_center_to_nearest=p.snap_center_to_nearest,
            )
            self._state = self._state.with_rect(rect)
            self.cropChanged.emit()
            self.update()
        else:
            handle = self._hit(pos) if self._qimage is not None else None
            cursor = _CURSORS.get(handle, QtCore.Qt.CursorShape.ArrowCursor)
            self.setCursor(cursor)

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent) -> None:
        if self._line is not None:
            start, end = self._line
            self._line = None
            if start.distance_to(end) > 4.0:
                angle = self._state.straighten + straighten_from_line(start, end)
                angle = clamp(angle, -MAX_STRAIGHTEN, MAX_STRAIGHTEN)
                logger.info("Straighten line gives {:.2f} degrees", angle)
                self.set_straighten(angle)
                self.straightenChanged.emit(angle)
            self.update()
        self._session.end()
        e.accept()

    def keyPressEvent(self, e: QtGui.QKeyEvent) -> None:
        key = e.key()
        if key == QtCore.Qt.Key.Key_R:
            self.reset_crop()
        elif key == QtCore.Qt.Key.Key_D:
            self.set_debug_overlay(not self._debug)
        elif key == QtCore.Qt.Key.Key_Escape:
            self._session.end()
            self._line = None
            self.update()
        else:
            super().keyPressEvent(e)

    # ----------------------------- Painting -----------------------------------

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        painter.setRenderHint(QtGui.QPainter.RenderHint.SmoothPixmapTransform, True)
        painter.fillRect(self.rect(), QtGui.QColor(30, 30, 30))

        if self._qimage is None:
            painter.setPen(QtGui.QPen(QtGui.QColor(170, 170, 170)))
            painter.drawText(
                self.rect(),
                QtCore.Qt.AlignmentFlag.AlignCenter,
                "No image loaded.\nUse ‘Open Image…’ in the control window.",
            )
            return

        xf = self.view_transform()
        angle = self._state.straighten
        center = self._extent.center

        # Image, rotated about its center
        painter.save()
        painter.translate(xf.tx, xf.ty)
        painter.scale(xf.scale, xf.scale)
        painter.translate(center.x, center.y)
        painter.rotate(angle)
        painter.translate(-center.x, -center.y)
        painter.drawImage(QtCore.QPointF(0.0, 0.0), self._qimage)
        painter.restore()

        crop = xf.map_rect(self._state.crop_rect)

        # Dim everything outside the crop
        shade = QtGui.QPainterPath()
        shade.setFillRule(QtCore.Qt.FillRule.OddEvenFill)
        shade.addRect(QtCore.QRectF(self.rect()))
        shade.addRect(to_qrectf(crop))
        painter.fillPath(shade, QtGui.QBrush(QtGui.QColor(0, 0, 0, 150)))

        if self._debug:
            self._paint_debug(painter, xf)

        # Crop frame and thirds guide
        painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        painter.setPen(QtGui.QPen(QtGui.QColor(255, 255, 255, 220), 1))
        painter.drawRect(to_qrectf(crop))
        if self._session.active:
            painter.setPen(QtGui.QPen(QtGui.QColor(255, 255, 255, 90), 1))
            for i in (1, 2):
                x = crop.x + crop.width * i / 3.0
                y = crop.y + crop.height * i / 3.0
                painter.drawLine(
                    QtCore.QPointF(x, crop.min_y), QtCore.QPointF(x, crop.max_y)
                )
                painter.drawLine(
                    QtCore.QPointF(crop.min_x, y), QtCore.QPointF(crop.max_x, y)
                )

        self._paint_handles(painter, crop)

        if self._line is not None:
            pen = QtGui.QPen(QtGui.QColor(255, 210, 0, 230), 2)
            pen.setStyle(QtCore.Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.drawLine(to_qpointf(self._line[0]), to_qpointf(self._line[1]))

        # HUD
        hud = f"{angle:+.1f}°  |  {self._state.crop_rect.describe()}"
        if not self._state.constrain:
            hud += "  |  unconstrained"
        hud_rect = QtCore.QRectF(12.0, 12.0, 420.0, 24.0)
        painter.setPen(QtGui.QPen(QtGui.QColor(0, 0, 0, 180)))
        painter.setBrush(QtGui.QBrush(QtGui.QColor(255, 255, 255, 200)))
        painter.drawRoundedRect(hud_rect, 6, 6)
        painter.setPen(QtGui.QPen(QtGui.QColor(0, 0, 0, 255)))
        painter.drawText(hud_rect, QtCore.Qt.AlignmentFlag.AlignCenter, hud)

    def _paint_handles(self, painter: QtGui.QPainter, crop: Rect) -> None:
        length = 18.0
        pen = QtGui.QPen(QtGui.QColor(255, 255, 255, 240), 4)
        pen.setCapStyle(QtCore.Qt.PenCapStyle.FlatCap)
        painter.setPen(pen)
        for handle in (
            Handle.TOP_LEFT,
            Handle.TOP_RIGHT,
            Handle.BOTTOM_LEFT,
            Handle.BOTTOM_RIGHT,
        ):
            p = handle.position(crop)
            sx = 1.0 if p.x == crop.min_x else -1.0
            sy = 1.0 if p.y == crop.min_y else -1.0
            corner = to_qpointf(p)
            painter.drawLine(corner, QtCore.QPointF(p.x + sx * length, p.y))
            painter.drawLine(corner, QtCore.QPointF(p.x, p.y + sy * length))

        half = length / 2.0
        for handle in (Handle.TOP, Handle.BOTTOM, Handle.LEFT, Handle.RIGHT):
            p = handle.position(crop)
            if handle in (Handle.TOP, Handle.BOTTOM):
                a, b = Point(p.x - half, p.y), Point(p.x + half, p.y)
            else:
                a, b = Point(p.x, p.y - half), Point(p.x, p.y + half)
            painter.drawLine(to_qpointf(a), to_qpointf(b))

    def _paint_debug(self, painter: QtGui.QPainter, xf: ViewTransform) -> None:
        angle = self._state.straighten
        rect = self._state.crop_rect
        boundary = [xf.map_point(p) for p in rotated_boundary(self._extent, angle)]
        allowed = [
            xf.map_point(p)
            for p in center_constraint_polygon(
                self._extent, angle, rect.width, rect.height
            )
        ]
        painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        painter.setPen(QtGui.QPen(QtGui.QColor(255, 80, 80, 220), 1))
        painter.drawPolygon(to_qpolygonf(boundary))
        painter.setPen(QtGui.QPen(QtGui.QColor(80, 220, 120, 220), 1))
        painter.drawPolygon(to_qpolygonf(allowed))

        painter.setBrush(QtGui.QBrush(QtGui.QColor(80, 220, 120, 240)))
        painter.drawEllipse(to_qpointf(xf.map_point(rect.center)), 4, 4)
        anchor = self._session.from_center
        if anchor is not None:
            painter.setBrush(QtGui.QBrush(QtGui.QColor(0, 170, 255, 240)))
            painter.drawEllipse(to_qpointf(xf.map_point(anchor)), 3, 3)


# ---------------------------- Control Dialog UI -------------------------------


class ControlDialog(QtWidgets.QDialog):
    openRequested = QtCore.Signal()
    exportRequested = QtCore.Signal()
    resetRequested = QtCore.Signal()
    straightenChanged = QtCore.Signal(float)
    constrainToggled = QtCore.Signal(bool)
    debugToggled = QtCore.Signal(bool)
    minSizeChanged = QtCore.Signal(int)
    clampPassesChanged = QtCore.Signal(int)
    snapCenterToggled = QtCore.Signal(bool)

    def __init__(self, cfg: AppConfig, app_version: str) -> None:
        super().__init__(None)
        self._app_version = app_version or "unknown"
        self.setWindowTitle(f"crop_straighten {self._app_version} — Controls")
        self.setMinimumWidth(420)

        # Widgets
        self.open_btn = QtWidgets.QPushButton("Open Image…")
        self.open_btn.clicked.connect(self.openRequested)

        self.export_btn = QtWidgets.QPushButton("Export…")
        self.export_btn.clicked.connect(self.exportRequested)

        self.reset_btn = QtWidgets.QPushButton("Reset Crop  (R)")
        self.reset_btn.clicked.connect(self.resetRequested)

        # Slider works in tenths of a degree
        self.straighten_slider = QtWidgets.QSlider(QtCore.Qt.Orientation.Horizontal)
        self.straighten_slider.setRange(
            int(-MAX_STRAIGHTEN * 10), int(MAX_STRAIGHTEN * 10)
        )
        self.straighten_slider.setValue(0)
        self.straighten_slider.valueChanged.connect(self._on_slider)
        self.straighten_label = QtWidgets.QLabel("+0.0°")
        self.straighten_label.setMinimumWidth(52)

        self.constrain_check = QtWidgets.QCheckBox("Enable")
        self.constrain_check.setChecked(cfg.params.constrain)
        self.constrain_check.toggled.connect(self.constrainToggled)

        self.debug_check = QtWidgets.QCheckBox("Show")
        self.debug_check.setChecked(cfg.ui.debug_overlay)
        self.debug_check.toggled.connect(self.debugToggled)

        self.min_size_spin = QtWidgets.QSpinBox()
        self.min_size_spin.setRange(16, 512)
        self.min_size_spin.setValue(int(cfg.params.min_crop_size_px))
        self.min_size_spin.valueChanged.connect(self.minSizeChanged)

        self.passes_spin = QtWidgets.QSpinBox()
        self.passes_spin.setRange(1, 16)
        self.passes_spin.setValue(cfg.params.clamp_passes)
        self.passes_spin.valueChanged.connect(self.clampPassesChanged)

        self.snap_check = QtWidgets.QCheckBox("Snap to nearest point")
        self.snap_check.setChecked(cfg.params.snap_center_to_nearest)
        self.snap_check.toggled.connect(self.snapCenterToggled)

        self.bw_check = QtWidgets.QCheckBox("Black && white")
        self.bw_check.setChecked(True)
        self.invert_check = QtWidgets.QCheckBox("Invert")

        self.status_label = QtWidgets.QLabel(
            "Open an image, then drag the crop handles or the straighten slider."
        )
        self.status_label.setWordWrap(True)

        # Tabs
        self.tabs = QtWidgets.QTabWidget(self)

        # --- Crop tab
        crop_page = QtWidgets.QWidget(self)
        crop_form = QtWidgets.QFormLayout(crop_page)
        crop_form.setFieldGrowthPolicy(
            QtWidgets.QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow
        )
        straighten_row = QtWidgets.QHBoxLayout()
        straighten_row.addWidget(self.straighten_slider, stretch=1)
        straighten_row.addWidget(self.straighten_label)
        crop_form.addRow(self.open_btn)
        crop_form.addRow("Straighten:", straighten_row)
        crop_form.addRow("Constrain to image:", self.constrain_check)
        crop_form.addRow("Constraint overlay:", self.debug_check)
        crop_form.addRow(self.reset_btn)
        crop_v = QtWidgets.QVBoxLayout()
        crop_v.addLayout(crop_form)
        crop_v.addWidget(self.status_label)
        crop_page.setLayout(crop_v)
        self.tabs.addTab(crop_page, "Crop")

        # --- Export tab
        export_page = QtWidgets.QWidget(self)
        export_form = QtWidgets.QFormLayout(export_page)
        export_form.addRow("Filters:", self.bw_check)
        export_form.addRow("", self.invert_check)
        export_form.addRow(self.export_btn)
        self.tabs.addTab(export_page, "Export")

        # --- Advanced tab
        adv_page = QtWidgets.QWidget(self)
        adv_form = QtWidgets.QFormLayout(adv_page)
        adv_form.addRow("Minimum crop size (px):", self.min_size_spin)
        adv_form.addRow("Edge clamp passes:", self.passes_spin)
        adv_form.addRow("Center drag:", self.snap_check)
        self.tabs.addTab(adv_page, "Advanced")

        # --- Help tab
        help_page = QtWidgets.QScrollArea(self)
        help_page.setWidgetResizable(True)
        help_body = QtWidgets.QWidget()
        help_layout = QtWidgets.QVBoxLayout(help_body)
        help_text = QtWidgets.QLabel(self._help_markdown(), help_body)
        help_text.setTextFormat(QtCore.Qt.TextFormat.RichText)
        help_text.setWordWrap(True)
        help_layout.addWidget(help_text)
        help_layout.addStretch(1)
        help_page.setWidget(help_body)
        self.tabs.addTab(help_page, "Help")

        v = QtWidgets.QVBoxLayout(self)
        v.addWidget(self.tabs)
        self.tabs.setCurrentIndex(0)

    # --- helpers ---
    def _help_markdown(self) -> str:
        return (
            f"<h3>crop_straighten {self._app_version} — quick reference</h3>"
            "<ul>"
            "<li>Drag a <b>corner</b> or <b>edge</b> to resize the crop.</li>"
            "<li>Drag the <b>center</b> to move it.</li>"
            "<li>With <b>Constrain</b> on, the crop never shows area outside "
            "the rotated image.</li>"
            "<li><b>Shift</b>-drag along a horizon to straighten to it.</li>"
            "<li>The <b>constraint overlay</b> draws the rotated image outline "
            "(red) and where the crop center may go (green).</li>"
            "</ul>"
            "<h4>Shortcuts</h4>"
            "<ul>"
            "<li><b>R</b> — Reset crop and straighten</li>"
            "<li><b>D</b> — Toggle constraint overlay</li>"
            "<li><b>Esc</b> — Cancel the current drag</li>"
            "</ul>"
        )

    def set_status(self, text: str) -> None:
        self.status_label.setText(text)

    def set_straighten(self, degrees: float) -> None:
        self.straighten_slider.blockSignals(True)
        self.straighten_slider.setValue(int(round(degrees * 10)))
        self.straighten_slider.blockSignals(False)
        self.straighten_label.setText(f"{degrees:+.1f}°")

    def export_adjustments(self) -> List[Adjustment]:
        extras: List[Adjustment] = []
        if self.bw_check.isChecked():
            extras.append(BlackAndWhiteAdjustment())
        if self.invert_check.isChecked():
            extras.append(InvertAdjustment())
        return extras

    def _on_slider(self, val: int) -> None:
        degrees = val / 10.0
        self.straighten_label.setText(f"{degrees:+.1f}°")
        self.straightenChanged.emit(degrees)


# ---------------------------- Main Controller ---------------------------------


class MainController(QtCore.QObject):
    def __init__(self, app: QtWidgets.QApplication) -> None:
        super().__init__(None)
        self.app = app
        self.cfg = self._load_config()

        self.overlay = CropOverlayWidget(self.cfg)
        self._app_version = app.applicationVersion() or APP_VERSION
        self.ctrl = ControlDialog(self.cfg, self._app_version)

        # Wire signals
        self.ctrl.openRequested.connect(self.open_image)
        self.ctrl.exportRequested.connect(self.export_image)
        self.ctrl.resetRequested.connect(self.overlay.reset_crop)
        self.ctrl.straightenChanged.connect(self.overlay.set_straighten)
        self.ctrl.constrainToggled.connect(self._on_constrain_toggle)
        self.ctrl.debugToggled.connect(self._on_debug_toggle)
        self.ctrl.minSizeChanged.connect(self._on_min_size)
        self.ctrl.clampPassesChanged.connect(self._on_clamp_passes)
        self.ctrl.snapCenterToggled.connect(self._on_snap_toggle)

        self.overlay.straightenChanged.connect(self.ctrl.set_straighten)
        self.overlay.cropChanged.connect(self._on_crop_changed)

        self.overlay.show()
        self.ctrl.show()
        self.ctrl.move(self.overlay.x() + self.overlay.width() + 16, self.overlay.y())

        last = self.cfg.ui.last_image_path
        if last and Path(last).exists():
            self._load(Path(last))

    # ---------------------------- Config I/O ----------------------------------

    def _config_path(self) -> Path:
        home = Path.home()
        return home / ".crop_straighten_config.json"

    def _load_config(self) -> AppConfig:
        p = self._config_path()
        if p.exists():
            try:
                return AppConfig.from_json(p.read_text(encoding="utf-8"))
            except Exception as exc:
                logger.warning("Ignoring unreadable config {}: {}", p, exc)
        return AppConfig()

    def _save_config(self) -> None:
        p = self._config_path()
        self.cfg.ui.window_width = self.overlay.width()
        self.cfg.ui.window_height = self.overlay.height()
        try:
            p.write_text(self.cfg.to_json(), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save config to {}: {}", p, exc)

    # ---------------------------- Event Handlers ------------------------------

    def _on_crop_changed(self) -> None:
        state = self.overlay.state
        self.ctrl.set_status(
            f"Crop {state.crop_rect.describe()} at {state.straighten:+.1f}°"
        )

    def _on_constrain_toggle(self, enabled: bool) -> None:
        self.cfg.params.constrain = bool(enabled)
        self.overlay.set_constrain(enabled)
        self._save_config()

    def _on_debug_toggle(self, enabled: bool) -> None:
        self.cfg.ui.debug_overlay = bool(enabled)
        self.overlay.set_debug_overlay(enabled)
        self._save_config()

    def _on_min_size(self, value: int) -> None:
        self.cfg.params.min_crop_size_px = float(value)
        self.overlay.set_params(self.cfg.params)

    def _on_clamp_passes(self, value: int) -> None:
        self.cfg.params.clamp_passes = max(1, int(value))
        self.overlay.set_params(self.cfg.params)

    def _on_snap_toggle(self, enabled: bool) -> None:
        self.cfg.params.snap_center_to_nearest = bool(enabled)
        self.overlay.set_params(self.cfg.params)

    # ----------------------------- Core Actions --------------------------------

    def open_image(self) -> None:
        last = self.cfg.ui.last_image_path
        start = str(Path(last).parent) if last else ""
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self.ctrl,
            "Open Image",
            start,
            "Images (*.png *.jpg *.jpeg *.bmp *.tif *.tiff *.webp)",
        )
        if path:
            self._load(Path(path))

    def _load(self, path: Path) -> None:
        try:
            image = load_image(path)
        except ValueError as exc:
            logger.warning("{}", exc)
            self.ctrl.set_status(str(exc))
            return
        self.overlay.set_image(image)
        self.ctrl.set_straighten(0.0)
        self.cfg.ui.last_image_path = str(path)
        self._save_config()

    def export_image(self) -> None:
        image = self.overlay.image
        if image is None:
            self.ctrl.set_status("Nothing to export yet.")
            return
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self.ctrl, "Export Image", "", "PNG (*.png);;JPEG (*.jpg *.jpeg)"
        )
        if not path:
            return
        edit = Edit.of(
            CropAdjustment(self.overlay.state, self.cfg.params.clamp_passes),
            *self.ctrl.export_adjustments(),
        )
        result = edit.apply(image)
        if result.size == 0 or not cv2.imwrite(path, result):
            logger.warning("Export to {} failed", path)
            self.ctrl.set_status(f"Could not write {path}.")
            return
        logger.info("Exported {}x{} to {}", result.shape[1], result.shape[0], path)
        self.ctrl.set_status(f"Exported {result.shape[1]}×{result.shape[0]} to {path}.")


# ---------------------------------- Main --------------------------------------


def main() -> None:
    configure_logging()
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("crop_straighten")
    app.setApplicationVersion(APP_VERSION)
    logger.info("crop_straighten {} starting", APP_VERSION)

    ctrl = MainController(app)
    ret = app.exec()

    ctrl._save_config()
    sys.exit(ret)


if __name__ == "__main__":
    main()
