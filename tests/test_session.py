import pytest
from PIL import Image

from image_crop_tool.errors import ExportError, InputError
from image_crop_tool.models import (
    CropRect, CustomRatio, FixedRatio, FreeRatio, ImageBounds, PointerEvent,
    PointerKind, ViewportBounds,
)
from image_crop_tool.session import CropSession


def _gesture(session, viewport, *points):
    down, *moves = points
    session.handle_pointer(PointerEvent(PointerKind.DOWN, *down), viewport)
    for p in moves:
        session.handle_pointer(PointerEvent(PointerKind.MOVE, *p), viewport)
    return session.handle_pointer(PointerEvent(PointerKind.UP, *moves[-1]), viewport)


def test_load_starts_with_full_image_when_free():
    session = CropSession()
    assert session.load(ImageBounds(640, 480)) == CropRect(0, 0, 640, 480)


def test_load_applies_current_ratio():
    session = CropSession(FixedRatio(1.0))
    assert session.load(ImageBounds(400, 200)) == CropRect(100, 0, 200, 200)


def test_replacing_image_reapplies_ratio():
    session = CropSession(CustomRatio(2, 1))
    session.load(ImageBounds(400, 400))
    assert session.load(ImageBounds(1000, 1000)) == CropRect(0, 250, 1000, 500)


def test_switching_to_free_keeps_rect():
    session = CropSession(FixedRatio(1.0))
    session.load(ImageBounds(400, 200))
    assert session.set_ratio(FreeRatio()) == CropRect(100, 0, 200, 200)


def test_invalid_ratio_leaves_session_unchanged():
    session = CropSession(FixedRatio(1.0))
    session.load(ImageBounds(400, 200))
    with pytest.raises(InputError):
        session.set_ratio(CustomRatio(0, 1))
    assert session.ratio == FixedRatio(1.0)
    assert session.rect == CropRect(100, 0, 200, 200)


def test_set_ratio_mid_gesture_ends_gesture():
    session = CropSession()
    session.load(ImageBounds(200, 200))
    vp = ViewportBounds(200, 200)
    session.handle_pointer(PointerEvent(PointerKind.DOWN, 100, 100), vp)
    assert session.machine.active
    session.set_ratio(FixedRatio(1.0))
    assert not session.machine.active


def test_reset_after_gestures_restores_full_image():
    session = CropSession(FixedRatio(16 / 9))
    session.load(ImageBounds(1200, 900))
    vp = ViewportBounds(600, 450)
    _gesture(session, vp, (300, 225), (250, 200), (10, 10))
    rect = session.rect
    corner = (rect.right / 2, rect.bottom / 2)
    _gesture(session, vp, corner, (corner[0] - 100, corner[1]))
    assert session.rect != CropRect(0, 0, 1200, 900)

    assert session.reset() == CropRect(0, 0, 1200, 900)
    assert session.rect == CropRect(0, 0, 1200, 900)


def test_export_returns_cropped_bitmap():
    session = CropSession()
    session.load(ImageBounds(120, 80))
    vp = ViewportBounds(120, 80)
    _gesture(session, vp, (120, 80), (70, 60))
    image = Image.new("RGB", (120, 80), "white")
    out = session.export(image)
    assert out.size == (70, 60)


def test_export_failure_leaves_state_unchanged():
    session = CropSession()
    session.load(ImageBounds(120, 80))
    before = session.rect
    with pytest.raises(ExportError):
        session.export(None)
    assert session.rect == before


def test_clear_removes_image():
    session = CropSession()
    session.load(ImageBounds(120, 80))
    session.clear()
    assert not session.has_image()
    assert session.nudge(1, 0) is None
    with pytest.raises(ExportError):
        session.export(Image.new("RGB", (120, 80)))
