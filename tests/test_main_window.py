import pytest

pytest.importorskip("PyQt6")
pytest.importorskip("pytestqt")

from PIL import Image

from image_crop_tool.image_io import SourceImage
from image_crop_tool.main_window import MainWindow
from image_crop_tool.models import CropRect, CustomRatio


@pytest.fixture
def window(config_home, qtbot):
    w = MainWindow()
    qtbot.addWidget(w)
    return w


def _select_ratio(window, key):
    window._ratio_combo.setCurrentIndex(window._ratio_combo.findData(key))


def test_custom_parts_fall_back_to_one(window):
    _select_ratio(window, "custom")
    window._custom_w.setText("abc")
    window._custom_h.setText("0")
    window._custom_w.editingFinished.emit()
    assert window._custom_w.text() == "1"
    assert window._custom_h.text() == "1"
    assert window._crop_widget.session.ratio == CustomRatio(1, 1)


def test_custom_parts_are_applied(window):
    _select_ratio(window, "custom")
    window._custom_w.setText(" 21 ")
    window._custom_h.setText("9")
    window._custom_h.editingFinished.emit()
    assert window._custom_w.text() == "21"
    assert window._crop_widget.session.ratio == CustomRatio(21, 9)


def test_loaded_image_uses_selected_ratio_once(window, tmp_path, monkeypatch):
    _select_ratio(window, "1:1")
    session = window._crop_widget.session
    calls = []
    monkeypatch.setattr(session, "set_ratio", calls.append)

    source = SourceImage(path=tmp_path / "pic.png", image=Image.new("RGB", (200, 100)), format="PNG")
    window._on_image_loaded(source)

    assert calls == []
    assert session.bounds == source.bounds
    assert window._crop_widget.get_crop() == CropRect(50, 0, 100, 100)
    assert window._act_save.isEnabled()
