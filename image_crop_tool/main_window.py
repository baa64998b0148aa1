"""
Main application window.

Orchestrates image loading, ratio selection, the crop editor and
crop-and-save export.
"""

import logging
from pathlib import Path

from PIL import Image
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QFileDialog, QSplitter, QGroupBox, QMessageBox, QStatusBar, QToolBar,
    QComboBox, QLineEdit, QSlider, QApplication,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence, QShortcut

from image_crop_tool.config import (
    CUSTOM_RATIO_PART_MAX, IMAGE_EXTENSIONS, JPEG_QUALITY_MAX, JPEG_QUALITY_MIN,
    PRESET_RATIOS, RATIO_CUSTOM,
)
from image_crop_tool.crop_widget import ImageCropWidget, ImageLoaderThread, pil_to_qpixmap
from image_crop_tool.errors import ExportError, InputError
from image_crop_tool.exporter import default_output_path, save_cropped
from image_crop_tool.image_io import SourceImage
from image_crop_tool.ratios import parse_ratio_part, spec_for_key
from image_crop_tool.settings import load_settings, save_settings

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Image Crop Tool")
        self.setMinimumSize(900, 500)

        # Screen-aware startup size, clamped to 80% of screen
        preferred_w, preferred_h = 1280, 800
        screen = QApplication.primaryScreen()
        if screen is not None:
            avail = screen.availableGeometry()
            preferred_w = min(preferred_w, int(avail.width() * 0.8))
            preferred_h = min(preferred_h, int(avail.height() * 0.8))
        self.resize(preferred_w, preferred_h)

        self._settings = load_settings()
        self._source: SourceImage | None = None
        self._loader: ImageLoaderThread | None = None
        self._last_dir: Path = Path.home()

        self._build_ui()
        self._apply_selected_ratio()
        self._update_button_states()

    # =========================================================================
    # UI construction
    # =========================================================================

    def _build_ui(self):
        self._build_toolbar()

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        main_layout.addWidget(splitter)

        # Center panel: crop editor
        self._crop_widget = ImageCropWidget()
        self._crop_widget.crop_changed.connect(self._update_crop_info)
        splitter.addWidget(self._crop_widget)

        splitter.addWidget(self._build_right_panel())
        splitter.setSizes([1000, 240])

        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._status.showMessage("Open an image to begin.")

        QShortcut(QKeySequence(Qt.KeyboardModifier.ControlModifier | Qt.Key.Key_O), self, self._open_image)
        QShortcut(QKeySequence(Qt.KeyboardModifier.ControlModifier | Qt.Key.Key_S), self, self._crop_and_save)
        QShortcut(QKeySequence(Qt.Key.Key_R), self, self._reset_crop)

    def _build_toolbar(self):
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        act_open = QAction("📂 Open Image", self)
        act_open.triggered.connect(self._open_image)
        toolbar.addAction(act_open)

        toolbar.addSeparator()

        act_save = QAction("✂ Crop and Save", self)
        act_save.triggered.connect(self._crop_and_save)
        toolbar.addAction(act_save)
        self._act_save = act_save

        act_remove = QAction("🗑 Remove Image", self)
        act_remove.triggered.connect(self._remove_image)
        toolbar.addAction(act_remove)
        self._act_remove = act_remove

    def _build_right_panel(self) -> QWidget:
        right_panel = QWidget()
        right_panel.setFixedWidth(240)
        layout = QVBoxLayout(right_panel)
        layout.setContentsMargins(4, 0, 0, 0)

        layout.addWidget(self._build_ratio_group())

        self._crop_info_label = QLabel("Crop: —")
        self._crop_info_label.setWordWrap(True)
        layout.addWidget(self._crop_info_label)

        btn_reset = QPushButton("↺ Reset Crop")
        btn_reset.setToolTip("Restore the crop to the full image")
        btn_reset.clicked.connect(self._reset_crop)
        layout.addWidget(btn_reset)
        self._btn_reset = btn_reset

        layout.addWidget(self._build_export_group())
        layout.addWidget(self._build_shortcuts_group())
        layout.addStretch()
        return right_panel

    def _build_ratio_group(self) -> QGroupBox:
        ratio_group = QGroupBox("Aspect Ratio")
        ratio_layout = QVBoxLayout(ratio_group)

        self._ratio_combo = QComboBox()
        for key, (label, _) in PRESET_RATIOS.items():
            self._ratio_combo.addItem(label, key)
        index = self._ratio_combo.findData(self._settings["ratio"])
        self._ratio_combo.setCurrentIndex(max(index, 0))
        self._ratio_combo.currentIndexChanged.connect(self._on_ratio_changed)
        ratio_layout.addWidget(self._ratio_combo)

        # Custom ratio parts; anything that is not a positive integer reads as 1
        custom_row = QHBoxLayout()
        self._custom_w = QLineEdit()
        self._custom_h = QLineEdit()
        for field, key in ((self._custom_w, "custom_w"), (self._custom_h, "custom_h")):
            field.setMaxLength(len(str(CUSTOM_RATIO_PART_MAX)))
            field.setText(str(self._settings[key]))
            field.editingFinished.connect(self._on_custom_ratio_changed)
        custom_row.addWidget(QLabel("Width:"))
        custom_row.addWidget(self._custom_w)
        custom_row.addWidget(QLabel("Height:"))
        custom_row.addWidget(self._custom_h)
        self._custom_row = QWidget()
        self._custom_row.setLayout(custom_row)
        ratio_layout.addWidget(self._custom_row)

        return ratio_group

    def _build_export_group(self) -> QGroupBox:
        export_group = QGroupBox("Export Settings")
        export_layout = QVBoxLayout(export_group)

        quality_row = QHBoxLayout()
        quality_row.addWidget(QLabel("JPEG quality:"))
        self._jpeg_quality_slider = QSlider(Qt.Orientation.Horizontal)
        self._jpeg_quality_slider.setRange(JPEG_QUALITY_MIN, JPEG_QUALITY_MAX)
        self._jpeg_quality_slider.setValue(self._settings["jpeg_quality"])
        quality_row.addWidget(self._jpeg_quality_slider, stretch=1)
        self._jpeg_quality_label = QLabel(str(self._settings["jpeg_quality"]))
        self._jpeg_quality_label.setFixedWidth(24)
        quality_row.addWidget(self._jpeg_quality_label)
        self._jpeg_quality_slider.valueChanged.connect(
            lambda v: self._jpeg_quality_label.setText(str(v))
        )
        export_layout.addLayout(quality_row)

        note = QLabel("Output keeps the source format.")
        note.setStyleSheet("color: #888; font-size: 8pt;")
        export_layout.addWidget(note)
        return export_group

    def _build_shortcuts_group(self) -> QGroupBox:
        help_group = QGroupBox("Shortcuts")
        help_layout = QVBoxLayout(help_group)
        help_label = QLabel(
            "Drag corners: resize crop\n"
            "Drag body: move crop\n"
            "Arrow keys: nudge crop (1px)\n"
            "Shift+Arrow: nudge (10px)\n"
            "\n"
            "Ctrl+O: open image\n"
            "Ctrl+S: crop and save\n"
            "R: reset crop"
        )
        help_label.setStyleSheet("color: #888; font-size: 8pt;")
        help_layout.addWidget(help_label)
        return help_group

    # =========================================================================
    # Image loading
    # =========================================================================

    def _open_image(self):
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTENSIONS))
        path, _ = QFileDialog.getOpenFileName(
            self, "Select Image", str(self._last_dir), f"Images ({patterns})",
        )
        if not path:
            return
        self._load_image(Path(path))

    def _load_image(self, path: Path):
        self._last_dir = path.parent
        self._source = None
        self._crop_widget.clear()
        self._crop_widget.set_loading(True)
        self._status.showMessage(f"Loading {path.name}…")

        # Drop any previous loader
        if self._loader is not None:
            try:
                self._loader.loaded.disconnect()
                self._loader.error.disconnect()
            except (TypeError, RuntimeError):
                pass  # Already disconnected or destroyed
            if self._loader.isRunning():
                self._loader.quit()
                self._loader.wait(500)

        self._loader = ImageLoaderThread(path, self)
        self._loader.loaded.connect(self._on_image_loaded)
        self._loader.error.connect(self._on_image_load_error)
        self._loader.start()
        self._update_button_states()

    def _on_image_loaded(self, source: SourceImage):
        """Called when background decoding completes."""
        self._source = source
        pixmap = pil_to_qpixmap(source.image)
        bounds = source.bounds
        self._crop_widget.set_image(pixmap, bounds)
        self._status.showMessage(f"Loaded {source.path.name} ({bounds.width}×{bounds.height})")
        self._update_button_states()

    def _on_image_load_error(self, error: str):
        """Called when background decoding fails."""
        self._crop_widget.set_loading(False)
        self._status.showMessage(error)
        QMessageBox.warning(self, "Invalid file", error)
        self._update_button_states()

    def _remove_image(self):
        self._source = None
        self._crop_widget.clear()
        self._update_crop_info()
        self._update_button_states()
        self._status.showMessage("Image removed.")

    # =========================================================================
    # Ratio selection
    # =========================================================================

    def _selected_ratio_key(self) -> str:
        return self._ratio_combo.currentData()

    def _on_ratio_changed(self, index: int):
        self._apply_selected_ratio()

    def _custom_parts(self) -> tuple[int, int]:
        return parse_ratio_part(self._custom_w.text()), parse_ratio_part(self._custom_h.text())

    def _on_custom_ratio_changed(self):
        custom_w, custom_h = self._custom_parts()
        self._custom_w.setText(str(custom_w))
        self._custom_h.setText(str(custom_h))
        if self._selected_ratio_key() == RATIO_CUSTOM:
            self._apply_selected_ratio()

    def _apply_selected_ratio(self):
        key = self._selected_ratio_key()
        self._custom_row.setVisible(key == RATIO_CUSTOM)
        try:
            spec = spec_for_key(key, self._custom_parts())
            self._crop_widget.set_ratio(spec)
        except InputError as exc:
            QMessageBox.warning(self, "Invalid ratio", str(exc))

    def _reset_crop(self):
        if not self._crop_widget.has_image():
            return
        self._crop_widget.reset_crop()

    # =========================================================================
    # Crop info
    # =========================================================================

    def _update_crop_info(self):
        if not self._crop_widget.has_image():
            self._crop_info_label.setText("Crop: —")
            return
        crop = self._crop_widget.get_crop()
        self._crop_info_label.setText(
            f"Crop: {round(crop.w)}×{round(crop.h)}\n"
            f"Position: ({round(crop.x)}, {round(crop.y)})"
        )

    def _update_button_states(self):
        has_image = self._source is not None and self._crop_widget.has_image()
        self._act_save.setEnabled(has_image)
        self._act_remove.setEnabled(has_image)
        self._btn_reset.setEnabled(has_image)

    # =========================================================================
    # Export
    # =========================================================================

    def _crop_and_save(self):
        if self._source is None:
            QMessageBox.warning(self, "No Image", "Please select an image to crop.")
            return

        try:
            cropped = self._crop_widget.session.export(self._source.image)
        except ExportError as exc:
            logger.error("Crop failed for %s: %s", self._source.path.name, exc)
            QMessageBox.critical(self, "Error", f"An error occurred while cropping the image:\n{exc}")
            return

        default_path, fmt = default_output_path(self._source.path, self._source.format)
        path, _ = QFileDialog.getSaveFileName(self, "Save Cropped Image", str(default_path))
        if not path:
            return
        out_path = Path(path)
        # Honour an extension the user typed, if Pillow knows it
        fmt = Image.registered_extensions().get(out_path.suffix.lower(), fmt)

        try:
            save_cropped(cropped, out_path, fmt, jpeg_quality=self._jpeg_quality_slider.value())
        except ExportError as exc:
            logger.error("Save failed: %s", exc)
            QMessageBox.critical(self, "Error", f"Failed to save {out_path.name}:\n{exc}")
            return

        self._status.showMessage(f"Image cropped successfully: {out_path}")

    # =========================================================================
    # Settings persistence
    # =========================================================================

    def _save_settings(self):
        custom_w, custom_h = self._custom_parts()
        self._settings = {
            "ratio": self._selected_ratio_key(),
            "custom_w": custom_w,
            "custom_h": custom_h,
            "jpeg_quality": self._jpeg_quality_slider.value(),
        }
        try:
            save_settings(self._settings)
        except (ValueError, OSError) as exc:
            logger.warning("Could not save settings: %s", exc)

    def closeEvent(self, event):
        """Persist preferences before closing."""
        self._save_settings()
        super().closeEvent(event)
