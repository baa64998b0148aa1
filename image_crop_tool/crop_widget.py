"""
Interactive crop-overlay widget and Qt image helpers.

This module contains everything that touches both Qt **and** image display:
``pil_to_qpixmap``, the background ``ImageLoaderThread``, and the
``ImageCropWidget`` editor.  Geometry lives in the Qt-free session; the
widget only translates Qt events and paints.
"""

from pathlib import Path

from PIL import Image
from PyQt6.QtWidgets import QWidget, QSizePolicy
from PyQt6.QtCore import Qt, QRectF, QPointF, pyqtSignal, QThread
from PyQt6.QtGui import (
    QPainter, QPixmap, QColor, QPen, QBrush, QImage,
    QKeyEvent, QMouseEvent, QPaintEvent,
)

from image_crop_tool.config import HANDLE_SIZE, NUDGE_SMALL, NUDGE_LARGE
from image_crop_tool.errors import CropToolError
from image_crop_tool.gesture import MODE_MOVE, MODE_RESIZE
from image_crop_tool.image_io import load_source
from image_crop_tool.mapping import fit_viewport, rect_to_display
from image_crop_tool.models import (
    AspectRatioSpec, Corner, CropRect, ImageBounds, Point, PointerEvent,
    PointerKind, ViewportBounds,
)
from image_crop_tool.session import CropSession


# =============================================================================
# Qt ↔ PIL helpers
# =============================================================================

def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    """Convert a PIL Image to QPixmap."""
    img_rgb = pil_img.convert("RGBA")
    data = img_rgb.tobytes("raw", "RGBA")
    qimg = QImage(data, img_rgb.width, img_rgb.height, QImage.Format.Format_RGBA8888)
    return QPixmap.fromImage(qimg)


# =============================================================================
# Background image loader
# =============================================================================

class ImageLoaderThread(QThread):
    """Background thread that decodes the selected file into a SourceImage."""
    loaded = pyqtSignal(object)
    error = pyqtSignal(str)

    def __init__(self, path: Path, parent=None):
        super().__init__(parent)
        self._path = path

    def run(self):
        try:
            source = load_source(self._path)
        except CropToolError as e:
            self.error.emit(str(e))
            return
        self.loaded.emit(source)


# =============================================================================
# Image Crop Widget: interactive crop overlay on image
# =============================================================================

class ImageCropWidget(QWidget):
    """Widget that displays an image with an interactive, resizable crop overlay."""

    crop_changed = pyqtSignal()

    def __init__(self, parent=None, session: CropSession | None = None):
        super().__init__(parent)
        self.setMinimumSize(400, 300)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMouseTracking(True)

        self._session = session or CropSession()
        self._pixmap: QPixmap | None = None
        self._loading = False

    @property
    def session(self) -> CropSession:
        return self._session

    def set_loading(self, loading: bool):
        """Show/hide loading indicator."""
        self._loading = loading
        self.update()

    def set_image(self, pixmap: QPixmap, bounds: ImageBounds):
        """Set the image to display and start a fresh crop on it."""
        self._loading = False
        self._pixmap = pixmap
        self._session.load(bounds)
        self.crop_changed.emit()
        self.update()

    def set_ratio(self, spec: AspectRatioSpec):
        """Lock to ``spec``; raises InputError for an invalid ratio."""
        self._session.set_ratio(spec)
        self.crop_changed.emit()
        self.update()

    def reset_crop(self):
        self._session.reset()
        self.crop_changed.emit()
        self.update()

    def get_crop(self) -> CropRect:
        return self._session.rect

    def has_image(self) -> bool:
        """Return True if an image is loaded and ready for crop operations."""
        return self._pixmap is not None

    def clear(self):
        self._pixmap = None
        self._session.clear()
        self.unsetCursor()
        self.update()

    # --- Coordinate mapping ---

    def viewport(self) -> ViewportBounds:
        """Letterboxed display rectangle of the image, recomputed from the current size."""
        bounds = self._session.bounds
        if bounds is None:
            return ViewportBounds(0, 0)
        return fit_viewport(self.width(), self.height(), bounds)

    def _crop_display_rect(self) -> QRectF:
        tl, br = rect_to_display(self._session.rect, self.viewport(), self._session.bounds)
        return QRectF(QPointF(tl.x, tl.y), QPointF(br.x, br.y))

    def _handle_rects(self) -> list[QRectF]:
        """Return screen-coordinate rectangles for the 4 corner handles."""
        r = self._crop_display_rect()
        hs = HANDLE_SIZE
        return [
            QRectF(corner.x() - hs, corner.y() - hs, hs * 2, hs * 2)
            for corner in (r.topLeft(), r.topRight(), r.bottomLeft(), r.bottomRight())
        ]

    # --- Painting ---

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(30, 30, 30))

        if not self._pixmap or not self._session.has_image():
            painter.setPen(QColor(128, 128, 128))
            msg = "Loading image…" if self._loading else "No image loaded"
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, msg)
            painter.end()
            return

        # Draw image
        vp = self.viewport()
        dest = QRectF(vp.left, vp.top, vp.width, vp.height)
        painter.drawPixmap(dest.toRect(), self._pixmap)

        # Dim area outside crop
        crop_rect = self._crop_display_rect()
        dim = QColor(0, 0, 0, 140)

        # Top strip
        painter.fillRect(QRectF(dest.left(), dest.top(), dest.width(), crop_rect.top() - dest.top()), dim)
        # Bottom strip
        painter.fillRect(QRectF(dest.left(), crop_rect.bottom(), dest.width(), dest.bottom() - crop_rect.bottom()), dim)
        # Left strip
        painter.fillRect(QRectF(dest.left(), crop_rect.top(), crop_rect.left() - dest.left(), crop_rect.height()), dim)
        # Right strip
        painter.fillRect(QRectF(crop_rect.right(), crop_rect.top(), dest.right() - crop_rect.right(), crop_rect.height()), dim)

        # Draw crop border
        painter.setPen(QPen(QColor(16, 185, 129), 2))
        painter.drawRect(crop_rect)

        # Draw rule-of-thirds lines
        pen_thirds = QPen(QColor(255, 255, 255, 80), 1, Qt.PenStyle.DashLine)
        painter.setPen(pen_thirds)
        for i in range(1, 3):
            x = crop_rect.left() + crop_rect.width() * i / 3
            painter.drawLine(QPointF(x, crop_rect.top()), QPointF(x, crop_rect.bottom()))
            y = crop_rect.top() + crop_rect.height() * i / 3
            painter.drawLine(QPointF(crop_rect.left(), y), QPointF(crop_rect.right(), y))

        # Draw corner handles
        painter.setPen(QPen(QColor(0, 0, 0), 1))
        painter.setBrush(QBrush(QColor(255, 255, 255)))
        for rect in self._handle_rects():
            painter.drawRect(rect)

        # Draw crop size label
        crop = self._session.rect
        painter.setPen(QColor(255, 255, 255))
        label = f"{round(crop.w)} × {round(crop.h)}"
        painter.drawText(
            crop_rect.adjusted(0, -20, 0, 0).toRect(),
            Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom,
            label,
        )

        painter.end()

    # --- Mouse interaction ---

    def _dispatch(self, kind: PointerKind, pos: QPointF):
        if not self.has_image():
            return
        rect = self._session.handle_pointer(PointerEvent(kind, pos.x(), pos.y()), self.viewport())
        if rect is not None:
            self.crop_changed.emit()
            self.update()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._dispatch(PointerKind.DOWN, event.position())

    def mouseMoveEvent(self, event: QMouseEvent):
        if not self.has_image():
            return
        pos = event.position()
        if not self._session.machine.active:
            self._update_cursor(pos)
        self._dispatch(PointerKind.MOVE, pos)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._dispatch(PointerKind.UP, event.position())

    def leaveEvent(self, event):
        self._dispatch(PointerKind.LEAVE, QPointF(0, 0))
        super().leaveEvent(event)

    def _update_cursor(self, pos: QPointF):
        mode, corner = self._session.machine.hover(Point(pos.x(), pos.y()), self.viewport())
        if mode == MODE_RESIZE:
            if corner in (Corner.TOP_LEFT, Corner.BOTTOM_RIGHT):
                self.setCursor(Qt.CursorShape.SizeFDiagCursor)
            else:
                self.setCursor(Qt.CursorShape.SizeBDiagCursor)
        elif mode == MODE_MOVE:
            self.setCursor(Qt.CursorShape.SizeAllCursor)
        else:
            self.setCursor(Qt.CursorShape.ArrowCursor)

    # --- Keyboard nudge ---

    def keyPressEvent(self, event: QKeyEvent):
        if not self.has_image():
            return
        amount = NUDGE_LARGE if event.modifiers() & Qt.KeyboardModifier.ShiftModifier else NUDGE_SMALL
        key = event.key()
        if key == Qt.Key.Key_Left:
            step = (-amount, 0)
        elif key == Qt.Key.Key_Right:
            step = (amount, 0)
        elif key == Qt.Key.Key_Up:
            step = (0, -amount)
        elif key == Qt.Key.Key_Down:
            step = (0, amount)
        else:
            super().keyPressEvent(event)
            return
        if self._session.nudge(*step) is not None:
            self.crop_changed.emit()
            self.update()
