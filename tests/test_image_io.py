import pytest
from PIL import Image

from image_crop_tool.errors import ImageDecodeError
from image_crop_tool.image_io import load_source, unique_path
from image_crop_tool.models import ImageBounds


def test_load_source_keeps_format_and_bounds(tmp_path):
    path = tmp_path / "pic.png"
    Image.new("RGB", (64, 32), "blue").save(path)
    source = load_source(path)
    assert source.format == "PNG"
    assert source.bounds == ImageBounds(64, 32)
    assert source.path == path


def test_load_source_rejects_non_images(tmp_path):
    path = tmp_path / "notes.jpg"
    path.write_text("not an image")
    with pytest.raises(ImageDecodeError):
        load_source(path)


def test_load_source_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError):
        load_source(tmp_path / "missing.png")


def test_unique_path(tmp_path):
    target = tmp_path / "a.png"
    assert unique_path(target) == target
    target.write_bytes(b"")
    (tmp_path / "a-01.png").write_bytes(b"")
    assert unique_path(target) == tmp_path / "a-02.png"
