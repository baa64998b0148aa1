"""
Qt-free image I/O utilities.

Decodes the selected file into a Pillow image (psd-tools for PSD) and
generates unique output paths.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from psd_tools import PSDImage

from image_crop_tool.errors import ImageDecodeError
from image_crop_tool.models import ImageBounds

logger = logging.getLogger(__name__)

# Allow very large images (Pillow's default limit is ~178MP)
Image.MAX_IMAGE_PIXELS = None


@dataclass
class SourceImage:
    """A decoded image plus what the exporter needs to write it back."""
    path: Path
    image: Image.Image
    format: str  # Pillow format name of the source encoding, e.g. "JPEG"

    @property
    def bounds(self) -> ImageBounds:
        return ImageBounds(self.image.width, self.image.height)


def open_image(path: Path) -> Image.Image:
    """Open an image file, using psd-tools for PSD and Pillow for the rest."""
    if path.suffix.lower() == ".psd":
        psd = PSDImage.open(str(path))
        return psd.composite()
    return Image.open(path)


def load_source(path: Path) -> SourceImage:
    """
    Fully decode ``path``.

    Raises ImageDecodeError if the file is missing or not a readable image.
    """
    try:
        img = open_image(path)
        fmt = "PSD" if path.suffix.lower() == ".psd" else (img.format or "")
        img.load()
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise ImageDecodeError(f"Failed to load image: {path.name} ({exc})") from exc
    logger.info("Loaded %s (%dx%d, %s)", path.name, img.width, img.height, fmt or "unknown")
    return SourceImage(path=path, image=img, format=fmt)


def unique_path(out_path: Path) -> Path:
    """Return a unique path by appending -01, -02, etc. if file already exists."""
    if not out_path.exists():
        return out_path
    stem = out_path.stem
    suffix = out_path.suffix
    parent = out_path.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}-{counter:02d}{suffix}"
        if not candidate.exists():
            return candidate
        counter += 1
