"""
Pointer-gesture state machine for the crop overlay.

A press inside the rectangle starts a drag, a press near a corner starts a
resize from that corner, anything else is ignored.  Every move recomputes
the rectangle from the gesture's fixed anchor and the latest pointer
position, so dropped or coalesced move events never cause drift.  Results
are written through ``CropRectModel.set`` and therefore clamped after every
event.  Nothing here raises; this module is Qt-free.
"""

import logging

from image_crop_tool.config import HANDLE_SIZE
from image_crop_tool.crop_model import CropRectModel, min_size
from image_crop_tool.mapping import rect_to_display, to_image_space
from image_crop_tool.models import (
    CORNER_PRIORITY, AspectRatioSpec, Corner, CropRect, Dragging, FreeRatio,
    GestureState, Idle, ImageBounds, Point, PointerEvent, PointerKind,
    Resizing, ViewportBounds,
)
from image_crop_tool.ratios import ratio_value

logger = logging.getLogger(__name__)

MODE_NONE = "none"
MODE_MOVE = "move"
MODE_RESIZE = "resize"


# =============================================================================
# Hit testing
# =============================================================================
def corner_positions(rect: CropRect, viewport: ViewportBounds,
                     image: ImageBounds) -> dict[Corner, Point]:
    """Display-space position of each corner."""
    tl, br = rect_to_display(rect, viewport, image)
    return {
        Corner.TOP_LEFT: tl,
        Corner.TOP_RIGHT: Point(br.x, tl.y),
        Corner.BOTTOM_LEFT: Point(tl.x, br.y),
        Corner.BOTTOM_RIGHT: br,
    }


def hit_test(rect: CropRect, pos: Point, viewport: ViewportBounds, image: ImageBounds,
             tolerance: float = HANDLE_SIZE) -> tuple[str, Corner | None]:
    """Returns (mode, corner) for a display position."""
    corners = corner_positions(rect, viewport, image)
    for corner in CORNER_PRIORITY:
        c = corners[corner]
        if abs(pos.x - c.x) <= tolerance and abs(pos.y - c.y) <= tolerance:
            return MODE_RESIZE, corner
    if rect.contains(to_image_space(pos, viewport, image)):
        return MODE_MOVE, None
    return MODE_NONE, None


def begin_gesture(rect: CropRect, pos: Point, viewport: ViewportBounds, image: ImageBounds,
                  tolerance: float = HANDLE_SIZE) -> GestureState:
    """Classify a pointer-down into the gesture it starts."""
    mode, corner = hit_test(rect, pos, viewport, image, tolerance)
    img_pos = to_image_space(pos, viewport, image)
    if mode == MODE_RESIZE:
        return Resizing(corner, rect, img_pos)
    if mode == MODE_MOVE:
        return Dragging(Point(img_pos.x - rect.x, img_pos.y - rect.y))
    return Idle()


# =============================================================================
# Geometry
# =============================================================================
def drag_rect(anchor: Point, pointer: Point, rect: CropRect, image: ImageBounds) -> CropRect:
    """Move ``rect`` so the grabbed point follows the pointer; size unchanged."""
    x = max(0, min(pointer.x - anchor.x, image.width - rect.w))
    y = max(0, min(pointer.y - anchor.y, image.height - rect.h))
    return CropRect(x, y, rect.w, rect.h)


def resize_rect(corner: Corner, anchor_rect: CropRect, press: Point, pointer: Point,
                ratio: float | None, image: ImageBounds, minimum: float) -> CropRect:
    """
    Resize ``anchor_rect`` from ``corner`` by the pointer delta since ``press``.

    The opposite corner stays fixed.  Free: horizontal delta drives width and
    vertical delta drives height.  Ratio-locked: horizontal delta drives width
    for every corner and height is ``width / ratio``; the size is limited by
    the room between the fixed corner and the image edges so clamping keeps
    the ratio.
    """
    min_w, min_h = min_size(image, minimum)
    left = corner.moves_left_edge
    top = corner.moves_top_edge

    fixed_x = anchor_rect.right if left else anchor_rect.x
    fixed_y = anchor_rect.bottom if top else anchor_rect.y
    grow_x = press.x - pointer.x if left else pointer.x - press.x
    grow_y = press.y - pointer.y if top else pointer.y - press.y

    if ratio is None:
        w = max(min_w, anchor_rect.w + grow_x)
        h = max(min_h, anchor_rect.h + grow_y)
        x = fixed_x - w if left else fixed_x
        y = fixed_y - h if top else fixed_y

        # Shrink back inside the image
        if x < 0:
            w += x
            x = 0
        if y < 0:
            h += y
            y = 0
        if x + w > image.width:
            w = image.width - x
        if y + h > image.height:
            h = image.height - y
        return CropRect(x, y, w, h)

    w = max(min_w, min_h * ratio, anchor_rect.w + grow_x)
    room_w = fixed_x if left else image.width - fixed_x
    room_h = fixed_y if top else image.height - fixed_y
    w = min(w, room_w, room_h * ratio)
    h = w / ratio
    x = fixed_x - w if left else fixed_x
    y = fixed_y - h if top else fixed_y
    return CropRect(x, y, w, h)


# =============================================================================
# State machine
# =============================================================================
class GestureMachine:
    """Routes pointer events to drag/resize handlers and writes the model."""

    def __init__(self, model: CropRectModel, ratio: AspectRatioSpec | None = None,
                 handle_size: float = HANDLE_SIZE):
        self._model = model
        self._ratio: AspectRatioSpec = FreeRatio()
        if ratio is not None:
            self.ratio = ratio
        self._handle_size = handle_size
        self._state: GestureState = Idle()

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def active(self) -> bool:
        return not isinstance(self._state, Idle)

    @property
    def ratio(self) -> AspectRatioSpec:
        return self._ratio

    @ratio.setter
    def ratio(self, spec: AspectRatioSpec):
        """Raises InputError for a non-positive or non-finite ratio."""
        ratio_value(spec)
        self._ratio = spec

    def hover(self, pos: Point, viewport: ViewportBounds) -> tuple[str, Corner | None]:
        """Hit test without changing state (for cursor feedback)."""
        image = self._model.bounds
        if image is None:
            return MODE_NONE, None
        return hit_test(self._model.get(), pos, viewport, image, self._handle_size)

    def press(self, pos: Point, viewport: ViewportBounds) -> GestureState:
        image = self._model.bounds
        if image is None or self.active:
            return self._state
        self._state = begin_gesture(self._model.get(), pos, viewport, image, self._handle_size)
        if self.active:
            logger.debug("Gesture started: %s", self._state)
        return self._state

    def move(self, pos: Point, viewport: ViewportBounds) -> CropRect | None:
        """Recompute the rectangle for the latest pointer position.

        Returns the stored rectangle, or None when no gesture is active.
        """
        image = self._model.bounds
        if image is None:
            return None
        pointer = to_image_space(pos, viewport, image)
        if isinstance(self._state, Dragging):
            return self._on_drag(self._state, pointer, image)
        if isinstance(self._state, Resizing):
            return self._on_resize(self._state, pointer, image)
        return None

    def release(self) -> CropRect:
        """End the gesture; the last computed rectangle stays committed."""
        if self.active:
            logger.debug("Gesture ended: %s", self._model.get())
        self._state = Idle()
        return self._model.get()

    def handle(self, event: PointerEvent, viewport: ViewportBounds) -> CropRect | None:
        """Dispatch a pointer event; returns the rectangle when it may have changed."""
        if event.kind is PointerKind.DOWN:
            self.press(event.position, viewport)
            return None
        if event.kind is PointerKind.MOVE:
            return self.move(event.position, viewport)
        if self.active:
            return self.release()
        return None

    def nudge(self, dx: float, dy: float) -> CropRect | None:
        """Shift the rectangle by a keyboard step; ignored mid-gesture."""
        image = self._model.bounds
        if image is None or self.active:
            return None
        rect = self._model.get()
        moved = drag_rect(Point(0, 0), Point(rect.x + dx, rect.y + dy), rect, image)
        return self._model.set(moved)

    # --- Per-state handlers ---

    def _on_drag(self, state: Dragging, pointer: Point, image: ImageBounds) -> CropRect:
        rect = self._model.get()
        return self._model.set(drag_rect(state.anchor, pointer, rect, image))

    def _on_resize(self, state: Resizing, pointer: Point, image: ImageBounds) -> CropRect:
        candidate = resize_rect(
            state.corner, state.anchor_rect, state.press, pointer,
            ratio_value(self._ratio), image, self._model.minimum,
        )
        return self._model.set(candidate)
