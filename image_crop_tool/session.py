"""
Crop session: one loaded image, its ratio lock, crop model and gesture machine.

The widget and window talk to this object only.  Ratio changes and image
replacement re-run the ratio resolver; pointer events go to the gesture
machine; export hands the committed rectangle to the exporter.
"""

import logging

from PIL import Image

from image_crop_tool.config import HANDLE_SIZE, MIN_CROP_SIZE
from image_crop_tool.crop_model import CropRectModel
from image_crop_tool.exporter import export_crop
from image_crop_tool.gesture import GestureMachine
from image_crop_tool.models import (
    AspectRatioSpec, CropRect, FreeRatio, ImageBounds, PointerEvent, ViewportBounds,
)
from image_crop_tool.ratios import apply_ratio, describe

logger = logging.getLogger(__name__)


class CropSession:
    def __init__(self, ratio: AspectRatioSpec | None = None,
                 minimum: float = MIN_CROP_SIZE, handle_size: float = HANDLE_SIZE):
        self._model = CropRectModel(minimum=minimum)
        self._machine = GestureMachine(self._model, ratio or FreeRatio(), handle_size)

    @property
    def bounds(self) -> ImageBounds | None:
        return self._model.bounds

    @property
    def rect(self) -> CropRect:
        return self._model.get()

    @property
    def ratio(self) -> AspectRatioSpec:
        return self._machine.ratio

    @property
    def machine(self) -> GestureMachine:
        return self._machine

    def has_image(self) -> bool:
        return self._model.bounds is not None

    def load(self, bounds: ImageBounds) -> CropRect:
        """Start editing a newly loaded image: full rectangle, then the ratio lock."""
        self._machine.release()
        self._model.reset(bounds)
        logger.info("Crop session for %gx%g image", bounds.width, bounds.height)
        return self._apply_current_ratio()

    def set_ratio(self, spec: AspectRatioSpec) -> CropRect:
        """
        Change the ratio lock.

        Raises InputError for an invalid ratio, leaving the session unchanged.
        """
        self._machine.ratio = spec
        self._machine.release()
        logger.debug("Aspect ratio set to %s", describe(spec))
        return self._apply_current_ratio()

    def reset(self) -> CropRect:
        """Restore the full-image rectangle."""
        self._machine.release()
        return self._model.reset()

    def clear(self):
        """Forget the image (removed or about to be replaced)."""
        self._machine.release()
        self._model.clear()

    def handle_pointer(self, event: PointerEvent, viewport: ViewportBounds) -> CropRect | None:
        return self._machine.handle(event, viewport)

    def nudge(self, dx: float, dy: float) -> CropRect | None:
        return self._machine.nudge(dx, dy)

    def export(self, source: Image.Image | None) -> Image.Image:
        """Crop ``source`` to the committed rectangle; raises ExportError."""
        return export_crop(source, self._model.get())

    def _apply_current_ratio(self) -> CropRect:
        if self._model.bounds is None:
            return self._model.get()
        rect = apply_ratio(self._machine.ratio, self._model.bounds, self._model.get())
        return self._model.set(rect)
