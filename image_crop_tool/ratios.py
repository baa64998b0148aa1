"""
Aspect-ratio resolution.

Turns the ratio chosen in the UI into an ``AspectRatioSpec`` and, for
constrained specs, into the largest centered rectangle of that ratio
inside the image.  Free specs leave the current rectangle untouched.
This module is Qt-free.
"""

import logging
import math

from image_crop_tool.config import CUSTOM_RATIO_DEFAULT, PRESET_RATIOS, RATIO_CUSTOM, RATIO_FREE
from image_crop_tool.errors import InputError
from image_crop_tool.models import (
    AspectRatioSpec, CropRect, CustomRatio, FixedRatio, FreeRatio, ImageBounds,
)

logger = logging.getLogger(__name__)


def ratio_value(spec: AspectRatioSpec) -> float | None:
    """
    Return width / height for a constrained spec, None for free.

    Raises InputError for a zero, negative or non-finite ratio.
    """
    value = spec.value
    if value is None:
        return None
    if not math.isfinite(value) or value <= 0:
        raise InputError(f"aspect ratio must be a positive finite number, got {value!r}")
    return value


# =============================================================================
# UI boundary
# =============================================================================
def parse_ratio_part(text) -> int:
    """Parse a custom ratio part; anything that is not a positive integer becomes 1."""
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        return 1
    return value if value >= 1 else 1


def custom_ratio(width_parts: int, height_parts: int) -> CustomRatio:
    """Build a custom spec, rejecting parts below 1."""
    for name, part in (("width", width_parts), ("height", height_parts)):
        if not isinstance(part, int) or part < 1:
            raise InputError(f"custom ratio {name} must be a positive integer, got {part!r}")
    return CustomRatio(width_parts, height_parts)


def spec_for_key(key: str, custom: tuple[int, int] = CUSTOM_RATIO_DEFAULT) -> AspectRatioSpec:
    """Map a selector key (``"free"``, ``"16:9"``, ``"custom"``…) to a spec."""
    if key == RATIO_FREE:
        return FreeRatio()
    if key == RATIO_CUSTOM:
        return custom_ratio(*custom)
    if key not in PRESET_RATIOS:
        raise InputError(f"unknown aspect ratio '{key}'")
    ratio_w, ratio_h = PRESET_RATIOS[key][1]
    return FixedRatio(ratio_w / ratio_h)


def describe(spec: AspectRatioSpec) -> str:
    """Short human-readable label for status messages."""
    if isinstance(spec, FreeRatio):
        return "free"
    if isinstance(spec, CustomRatio):
        return f"{spec.width_parts}:{spec.height_parts}"
    return f"{spec.ratio:.4g}"


# =============================================================================
# Crop math
# =============================================================================
def calculate_max_crop(img_w: float, img_h: float, ratio: float) -> tuple[float, float]:
    """Largest (width, height) of the given ratio that fits inside the image."""
    if img_w / img_h > ratio:
        # Image is wider than the ratio: full height
        crop_h = img_h
        crop_w = crop_h * ratio
    else:
        crop_w = img_w
        crop_h = crop_w / ratio
    return crop_w, crop_h


def center_crop(img_w: float, img_h: float, crop_w: float, crop_h: float) -> CropRect:
    """Return a centered crop rectangle."""
    return CropRect((img_w - crop_w) / 2, (img_h - crop_h) / 2, crop_w, crop_h)


def apply_ratio(spec: AspectRatioSpec, bounds: ImageBounds, current: CropRect) -> CropRect:
    """
    Resolve ``spec`` against the image.

    Free returns ``current`` unchanged; constrained specs return the
    maximum centered rectangle of that ratio.
    """
    ratio = ratio_value(spec)
    if ratio is None:
        return current
    cw, ch = calculate_max_crop(bounds.width, bounds.height, ratio)
    rect = center_crop(bounds.width, bounds.height, cw, ch)
    logger.debug("Applied ratio %s to %gx%g: %s", describe(spec), bounds.width, bounds.height, rect)
    return rect
