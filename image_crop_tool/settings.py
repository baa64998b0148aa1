"""
Settings persistence: load, save, and validate UI preferences.

Preferences are stored in a JSON file in the user's config directory
(provided by ``config.config_dir()``).  On first launch (or if the file
is missing/corrupt), the file is created from DEFAULT_SETTINGS.  Crop
rectangles are never stored.  This module is Qt-free.

The on-disk format uses a versioned envelope::

    {"version": 1, "settings": {"ratio": "16:9", "custom_w": 4, ...}}
"""

import json
import logging
from copy import deepcopy
from pathlib import Path

from image_crop_tool.config import (
    CUSTOM_RATIO_DEFAULT, CUSTOM_RATIO_PART_MAX, JPEG_QUALITY_DEFAULT,
    JPEG_QUALITY_MAX, JPEG_QUALITY_MIN, PRESET_RATIOS, RATIO_FREE, config_dir,
)

logger = logging.getLogger(__name__)

_SETTINGS_FILENAME = "settings.json"
_FORMAT_VERSION = 1

DEFAULT_SETTINGS = {
    "ratio": RATIO_FREE,
    "custom_w": CUSTOM_RATIO_DEFAULT[0],
    "custom_h": CUSTOM_RATIO_DEFAULT[1],
    "jpeg_quality": JPEG_QUALITY_DEFAULT,
}

# key -> (min, max) for integer settings
_INT_RANGES = {
    "custom_w": (1, CUSTOM_RATIO_PART_MAX),
    "custom_h": (1, CUSTOM_RATIO_PART_MAX),
    "jpeg_quality": (JPEG_QUALITY_MIN, JPEG_QUALITY_MAX),
}


def _settings_path() -> Path:
    """Return the full path to settings.json."""
    return config_dir() / _SETTINGS_FILENAME


# =============================================================================
# Validation
# =============================================================================
def validate_settings(data: object) -> list[str]:
    """
    Validate a settings dict.

    Returns a list of error strings (empty means valid).
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        errors.append("Settings data must be a dict")
        return errors

    missing = DEFAULT_SETTINGS.keys() - data.keys()
    if missing:
        errors.append(f"missing keys: {', '.join(sorted(missing))}")

    unknown = data.keys() - DEFAULT_SETTINGS.keys()
    if unknown:
        errors.append(f"unknown keys: {', '.join(sorted(unknown))}")

    ratio = data.get("ratio")
    if "ratio" in data and ratio not in PRESET_RATIOS:
        errors.append(f"ratio must be one of {', '.join(PRESET_RATIOS)}, got {ratio!r}")

    for key, (lo, hi) in _INT_RANGES.items():
        if key not in data:
            continue
        val = data[key]
        # bool is an int subclass
        if not isinstance(val, int) or isinstance(val, bool) or not lo <= val <= hi:
            errors.append(f"{key} must be an integer in [{lo}, {hi}], got {val!r}")

    return errors


# =============================================================================
# Load / Save
# =============================================================================
def load_settings() -> dict:
    """
    Load settings from settings.json.

    If the file is missing, corrupt, or fails validation, writes the
    defaults and returns them.
    """
    path = _settings_path()

    if not path.exists():
        logger.info("settings.json not found — creating with defaults at %s", path)
        _write_defaults(path)
        return deepcopy(DEFAULT_SETTINGS)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read settings.json (%s) — restoring defaults", exc)
        _write_defaults(path)
        return deepcopy(DEFAULT_SETTINGS)

    if not isinstance(raw, dict) or "version" not in raw or "settings" not in raw:
        logger.warning("settings.json missing version envelope — restoring defaults")
        _write_defaults(path)
        return deepcopy(DEFAULT_SETTINGS)

    data = raw["settings"]
    errors = validate_settings(data)
    if errors:
        logger.warning(
            "settings.json validation failed:\n  %s\nRestoring defaults.",
            "\n  ".join(errors),
        )
        _write_defaults(path)
        return deepcopy(DEFAULT_SETTINGS)

    return data


def save_settings(settings: dict) -> None:
    """
    Validate and write settings to settings.json in versioned envelope.

    Raises ValueError if validation fails.
    Raises OSError if the file cannot be written.
    """
    errors = validate_settings(settings)
    if errors:
        raise ValueError("Invalid settings:\n  " + "\n  ".join(errors))

    envelope = {"version": _FORMAT_VERSION, "settings": settings}
    path = _settings_path()
    path.write_text(json.dumps(envelope, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved settings to %s", path)


def _write_defaults(path: Path) -> None:
    """Write DEFAULT_SETTINGS to the given path in versioned envelope."""
    try:
        envelope = {"version": _FORMAT_VERSION, "settings": deepcopy(DEFAULT_SETTINGS)}
        path.write_text(
            json.dumps(envelope, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as exc:
        logger.error("Could not write default settings to %s: %s", path, exc)
