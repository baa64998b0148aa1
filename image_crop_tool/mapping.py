"""
Display <-> image coordinate mapping.

Pure functions of the current viewport and image bounds.  Callers
recompute on every pointer event instead of caching scale factors,
since the viewport can change between events.

The widget letterboxes the image instead of stretching it, so a viewport
may carry a left/top offset; with a zero offset this is the plain
per-axis scale mapping.
"""

from image_crop_tool.models import CropRect, ImageBounds, Point, ViewportBounds


def scale_factors(viewport: ViewportBounds, image: ImageBounds) -> tuple[float, float]:
    """Image pixels per display unit along X and Y."""
    if viewport.width <= 0 or viewport.height <= 0:
        return 0.0, 0.0
    return image.width / viewport.width, image.height / viewport.height


def to_image_space(p: Point, viewport: ViewportBounds, image: ImageBounds) -> Point:
    sx, sy = scale_factors(viewport, image)
    return Point((p.x - viewport.left) * sx, (p.y - viewport.top) * sy)


def to_display_space(p: Point, viewport: ViewportBounds, image: ImageBounds) -> Point:
    sx, sy = scale_factors(viewport, image)
    if sx == 0 or sy == 0:
        return Point(viewport.left, viewport.top)
    return Point(p.x / sx + viewport.left, p.y / sy + viewport.top)


def rect_to_display(rect: CropRect, viewport: ViewportBounds,
                    image: ImageBounds) -> tuple[Point, Point]:
    """Top-left and bottom-right display corners of an image-space rectangle."""
    tl = to_display_space(Point(rect.x, rect.y), viewport, image)
    br = to_display_space(Point(rect.right, rect.bottom), viewport, image)
    return tl, br


def fit_viewport(widget_w: float, widget_h: float, image: ImageBounds) -> ViewportBounds:
    """Letterboxed viewport that shows the whole image at uniform scale."""
    if image.width <= 0 or image.height <= 0 or widget_w <= 0 or widget_h <= 0:
        return ViewportBounds(0, 0)
    scale = min(widget_w / image.width, widget_h / image.height)
    disp_w = image.width * scale
    disp_h = image.height * scale
    return ViewportBounds(disp_w, disp_h, (widget_w - disp_w) / 2, (widget_h - disp_h) / 2)
