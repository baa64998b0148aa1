"""
Data models for the crop editor.

All geometry is plain values: bounds, points and ``CropRect`` in image
pixel-space, the ``AspectRatioSpec`` variants chosen in the UI, and the
``GestureState`` variants owned by the gesture machine.  Nothing here
mutates shared state; the machine and the model swap whole values.
"""

import math
from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Bounds and points
# =============================================================================
@dataclass(frozen=True)
class ImageBounds:
    """Natural pixel dimensions of the loaded image."""
    width: float
    height: float


@dataclass(frozen=True)
class ViewportBounds:
    """Display rectangle the image is drawn into.

    ``left``/``top`` are the display position of the image's top-left
    corner inside the widget (letterbox offset); zero when the image
    fills the widget.
    """
    width: float
    height: float
    left: float = 0.0
    top: float = 0.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in image coordinates."""
    x: float = 0
    y: float = 0
    w: float = 0
    h: float = 0

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def contains(self, p: Point) -> bool:
        return self.x <= p.x <= self.right and self.y <= p.y <= self.bottom

    def as_box(self) -> tuple[int, int, int, int]:
        """Whole-pixel ``(left, top, right, bottom)`` box for Pillow."""
        left = int(round(self.x))
        top = int(round(self.y))
        return left, top, int(round(self.x + self.w)), int(round(self.y + self.h))


def full_rect(bounds: ImageBounds) -> CropRect:
    """Rectangle covering the whole image."""
    return CropRect(0, 0, bounds.width, bounds.height)


# =============================================================================
# Aspect ratio variants
# =============================================================================
@dataclass(frozen=True)
class FreeRatio:
    """No aspect constraint."""

    @property
    def value(self) -> float | None:
        return None


@dataclass(frozen=True)
class FixedRatio:
    """Preset ratio expressed as width / height."""
    ratio: float

    @property
    def value(self) -> float | None:
        return self.ratio


@dataclass(frozen=True)
class CustomRatio:
    """User-entered ratio ``width_parts:height_parts``."""
    width_parts: int
    height_parts: int

    @property
    def value(self) -> float | None:
        if self.height_parts == 0:
            return math.inf
        return self.width_parts / self.height_parts


AspectRatioSpec = FreeRatio | FixedRatio | CustomRatio


# =============================================================================
# Gesture state variants
# =============================================================================
class Corner(Enum):
    TOP_LEFT = "tl"
    TOP_RIGHT = "tr"
    BOTTOM_LEFT = "bl"
    BOTTOM_RIGHT = "br"

    @property
    def moves_left_edge(self) -> bool:
        return self in (Corner.TOP_LEFT, Corner.BOTTOM_LEFT)

    @property
    def moves_top_edge(self) -> bool:
        return self in (Corner.TOP_LEFT, Corner.TOP_RIGHT)


# Hit-test order: first match wins when handles overlap
CORNER_PRIORITY = (
    Corner.BOTTOM_RIGHT,
    Corner.BOTTOM_LEFT,
    Corner.TOP_RIGHT,
    Corner.TOP_LEFT,
)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    """Moving the whole rectangle.

    ``anchor`` is the pointer's image-space offset from the rectangle's
    top-left corner at press time.
    """
    anchor: Point


@dataclass(frozen=True)
class Resizing:
    """Resizing from ``corner``; the opposite corner of ``anchor_rect`` stays put."""
    corner: Corner
    anchor_rect: CropRect
    press: Point


GestureState = Idle | Dragging | Resizing


# =============================================================================
# Pointer events
# =============================================================================
class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer event in display coordinates."""
    kind: PointerKind
    x: float
    y: float

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)
