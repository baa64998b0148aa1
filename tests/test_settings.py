import json

import pytest

from image_crop_tool.settings import DEFAULT_SETTINGS, load_settings, save_settings, validate_settings


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_missing_file_creates_defaults(config_home):
    assert load_settings() == DEFAULT_SETTINGS
    on_disk = json.loads((config_home / "settings.json").read_text(encoding="utf-8"))
    assert on_disk == {"version": 1, "settings": DEFAULT_SETTINGS}


def test_round_trip(config_home):
    settings = {"ratio": "16:9", "custom_w": 21, "custom_h": 9, "jpeg_quality": 80}
    save_settings(settings)
    assert load_settings() == settings


def test_corrupt_file_restores_defaults(config_home):
    (config_home / "settings.json").write_text("{not json", encoding="utf-8")
    assert load_settings() == DEFAULT_SETTINGS


def test_missing_envelope_restores_defaults(config_home):
    _write(config_home / "settings.json", {"ratio": "free"})
    assert load_settings() == DEFAULT_SETTINGS


def test_invalid_values_restore_defaults(config_home):
    bad = dict(DEFAULT_SETTINGS, custom_w=0)
    _write(config_home / "settings.json", {"version": 1, "settings": bad})
    assert load_settings() == DEFAULT_SETTINGS


def test_save_rejects_invalid_settings(config_home):
    with pytest.raises(ValueError):
        save_settings(dict(DEFAULT_SETTINGS, ratio="5:7"))
    assert not (config_home / "settings.json").exists()


def test_validate_settings_messages():
    assert validate_settings(DEFAULT_SETTINGS) == []
    assert validate_settings([]) == ["Settings data must be a dict"]
    errors = validate_settings(dict(DEFAULT_SETTINGS, jpeg_quality=True, extra=1))
    assert any("jpeg_quality" in e for e in errors)
    assert any("unknown keys: extra" in e for e in errors)
