"""Pytest configuration.

Widget tests need a Qt platform that works without a display, so the
offscreen plugin is selected before any Qt module is imported.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the settings module at a throwaway config directory."""
    monkeypatch.setattr("image_crop_tool.settings.config_dir", lambda: tmp_path)
    return tmp_path
