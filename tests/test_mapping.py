from image_crop_tool.mapping import (
    fit_viewport, rect_to_display, scale_factors, to_display_space, to_image_space,
)
from image_crop_tool.models import CropRect, ImageBounds, Point, ViewportBounds


def test_scale_factors_are_independent_per_axis():
    sx, sy = scale_factors(ViewportBounds(500, 200), ImageBounds(1000, 1000))
    assert sx == 2.0
    assert sy == 5.0


def test_to_image_space_stretched_viewport():
    p = to_image_space(Point(100, 40), ViewportBounds(500, 200), ImageBounds(1000, 1000))
    assert p == Point(200, 200)


def test_display_and_image_space_are_inverse():
    viewport = ViewportBounds(320, 240, left=40, top=12)
    image = ImageBounds(1920, 1080)
    original = Point(123.5, 456.25)
    back = to_image_space(to_display_space(original, viewport, image), viewport, image)
    assert abs(back.x - original.x) < 1e-9
    assert abs(back.y - original.y) < 1e-9


def test_offset_is_subtracted_before_scaling():
    viewport = ViewportBounds(200, 100, left=100, top=50)
    p = to_image_space(Point(100, 50), viewport, ImageBounds(400, 200))
    assert p == Point(0, 0)


def test_empty_viewport_maps_to_origin():
    assert scale_factors(ViewportBounds(0, 0), ImageBounds(10, 10)) == (0.0, 0.0)
    assert to_image_space(Point(5, 5), ViewportBounds(0, 0), ImageBounds(10, 10)) == Point(0, 0)


def test_rect_to_display():
    tl, br = rect_to_display(CropRect(100, 100, 200, 100), ViewportBounds(500, 500), ImageBounds(1000, 1000))
    assert tl == Point(50, 50)
    assert br == Point(150, 100)


def test_fit_viewport_letterboxes_wide_image():
    vp = fit_viewport(400, 300, ImageBounds(200, 100))
    assert (vp.width, vp.height) == (400, 200)
    assert (vp.left, vp.top) == (0, 50)


def test_fit_viewport_pillarboxes_tall_image():
    vp = fit_viewport(400, 300, ImageBounds(100, 300))
    assert (vp.width, vp.height) == (100, 300)
    assert (vp.left, vp.top) == (150, 0)
