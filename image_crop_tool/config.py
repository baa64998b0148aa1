"""
Application constants and configuration.

PRESET_RATIOS lists the entries of the aspect-ratio selector. All other
constants control crop-editor behaviour and export encoding.

The ``config_dir()`` helper returns the platform-appropriate config
directory used by the settings module.
"""

import os
import sys
from pathlib import Path

# =============================================================================
# APP IDENTITY & CONFIG DIRECTORY
# =============================================================================
APP_NAME = "image-crop-tool"


def config_dir() -> Path:
    """Return the platform-appropriate config directory, creating it if needed."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    directory = base / APP_NAME
    directory.mkdir(parents=True, exist_ok=True)
    return directory

# =============================================================================
# ASPECT RATIOS: entries of the ratio selector
# =============================================================================
RATIO_FREE = "free"
RATIO_CUSTOM = "custom"

# key -> (label, (ratio_w, ratio_h) or None)
PRESET_RATIOS = {
    RATIO_FREE: ("Free Form", None),
    "1:1": ("Square (1:1)", (1, 1)),
    "4:3": ("4:3", (4, 3)),
    "16:9": ("16:9", (16, 9)),
    "3:2": ("3:2", (3, 2)),
    RATIO_CUSTOM: ("Custom", None),
}

CUSTOM_RATIO_DEFAULT = (4, 3)
CUSTOM_RATIO_PART_MAX = 9999

# Log level name, overridable via environment
LOG_LEVEL_ENV = "IMAGE_CROP_TOOL_LOG_LEVEL"
LOG_LEVEL_DEFAULT = "INFO"

# =============================================================================
# EXPORT
# =============================================================================
CROPPED_SUFFIX = "_cropped"
DEFAULT_EXTENSION = ".jpg"

# PNG compression level (0-9, 9 = maximum compression)
PNG_COMPRESS_LEVEL = 9

# JPEG export defaults
JPEG_QUALITY_DEFAULT = 95
JPEG_QUALITY_MIN = 1
JPEG_QUALITY_MAX = 100

# Pillow format names that the exporter can write back in the source encoding
WRITABLE_FORMATS = {"JPEG", "PNG", "BMP", "TIFF", "WEBP", "GIF"}
FALLBACK_FORMAT = "PNG"

# Pillow format name -> extension used when the format has to change
FORMAT_EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "BMP": ".bmp",
    "TIFF": ".tif",
    "WEBP": ".webp",
    "GIF": ".gif",
}

# Supported image extensions
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tiff", ".tif", ".webp", ".gif", ".psd"}

# =============================================================================
# CROP EDITOR
# =============================================================================
# Nudge amounts (pixels in image coordinates)
NUDGE_SMALL = 1
NUDGE_LARGE = 10

# Minimum crop size (pixels in image coordinates)
MIN_CROP_SIZE = 50

# Handle hit tolerance for resize corners (pixels in screen coordinates)
HANDLE_SIZE = 10
