"""
The current crop selection.

``CropRectModel`` is the single source of truth for the rectangle.  Every
``set`` re-clamps to the image, so the stored value always satisfies the
bounds and minimum-size invariants.
"""

from image_crop_tool.config import MIN_CROP_SIZE
from image_crop_tool.models import CropRect, ImageBounds, full_rect


def min_size(bounds: ImageBounds, minimum: float = MIN_CROP_SIZE) -> tuple[float, float]:
    """Minimum crop (width, height), capped for images smaller than the minimum."""
    return min(minimum, bounds.width), min(minimum, bounds.height)


def clamp_crop(crop: CropRect, bounds: ImageBounds, minimum: float = MIN_CROP_SIZE) -> CropRect:
    """Clamp crop rectangle to image bounds."""
    min_w, min_h = min_size(bounds, minimum)
    w = max(min_w, min(crop.w, bounds.width))
    h = max(min_h, min(crop.h, bounds.height))
    x = max(0, min(crop.x, bounds.width - w))
    y = max(0, min(crop.y, bounds.height - h))
    return CropRect(x, y, w, h)


class CropRectModel:
    """Holds the crop rectangle for one image."""

    def __init__(self, bounds: ImageBounds | None = None, minimum: float = MIN_CROP_SIZE):
        self._minimum = minimum
        self._bounds = bounds
        self._rect = full_rect(bounds) if bounds else CropRect()

    @property
    def bounds(self) -> ImageBounds | None:
        return self._bounds

    @property
    def minimum(self) -> float:
        return self._minimum

    def get(self) -> CropRect:
        return self._rect

    def set(self, rect: CropRect) -> CropRect:
        """Store ``rect`` clamped to the image and return the stored value."""
        if self._bounds is None:
            return self._rect
        self._rect = clamp_crop(rect, self._bounds, self._minimum)
        return self._rect

    def reset(self, bounds: ImageBounds | None = None) -> CropRect:
        """Restore the full-image rectangle, optionally for new bounds."""
        if bounds is not None:
            self._bounds = bounds
        self._rect = full_rect(self._bounds) if self._bounds else CropRect()
        return self._rect

    def clear(self):
        self._bounds = None
        self._rect = CropRect()
