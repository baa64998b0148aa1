from image_crop_tool.crop_model import CropRectModel, clamp_crop, min_size
from image_crop_tool.models import CropRect, ImageBounds


def test_new_model_holds_full_image():
    model = CropRectModel(ImageBounds(640, 480))
    assert model.get() == CropRect(0, 0, 640, 480)


def test_set_clamps_position_inside_image():
    model = CropRectModel(ImageBounds(200, 200))
    assert model.set(CropRect(510, -20, 100, 100)) == CropRect(100, 0, 100, 100)


def test_set_clamps_size_to_image_and_minimum():
    model = CropRectModel(ImageBounds(200, 200))
    assert model.set(CropRect(0, 0, 900, 10)) == CropRect(0, 0, 200, 50)


def test_set_is_idempotent():
    model = CropRectModel(ImageBounds(300, 200))
    first = model.set(CropRect(250, 180, 120, 5))
    second = model.set(first)
    assert first == second == model.get()


def test_reset_restores_full_image():
    model = CropRectModel(ImageBounds(300, 200))
    model.set(CropRect(10, 20, 60, 70))
    assert model.reset() == CropRect(0, 0, 300, 200)


def test_reset_with_new_bounds_replaces_image():
    model = CropRectModel(ImageBounds(300, 200))
    assert model.reset(ImageBounds(50, 80)) == CropRect(0, 0, 50, 80)
    assert model.bounds == ImageBounds(50, 80)


def test_minimum_is_capped_for_small_images():
    assert min_size(ImageBounds(30, 400)) == (30, 50)
    assert clamp_crop(CropRect(5, 5, 1, 1), ImageBounds(30, 400)) == CropRect(0, 5, 30, 50)


def test_model_without_image_ignores_set():
    model = CropRectModel()
    assert model.set(CropRect(1, 2, 3, 4)) == CropRect()
    assert model.bounds is None


def test_clear_forgets_image():
    model = CropRectModel(ImageBounds(100, 100))
    model.clear()
    assert model.bounds is None
    assert model.get() == CropRect()
