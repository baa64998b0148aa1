"""
Crop export: cut the committed rectangle out of the source and save it.

The pixel copy is Pillow's ``Image.crop`` at 1:1 scale; the output is
written back in the source's original encoding where Pillow can write it.
This module is Qt-free.
"""

import logging
from pathlib import Path

from PIL import Image

from image_crop_tool.config import (
    CROPPED_SUFFIX, DEFAULT_EXTENSION, FALLBACK_FORMAT, FORMAT_EXTENSIONS,
    JPEG_QUALITY_DEFAULT, PNG_COMPRESS_LEVEL, WRITABLE_FORMATS,
)
from image_crop_tool.errors import ExportError
from image_crop_tool.image_io import unique_path
from image_crop_tool.models import CropRect

logger = logging.getLogger(__name__)


def export_crop(source: Image.Image | None, rect: CropRect) -> Image.Image:
    """
    Return the ``rect`` region of ``source`` as a new image.

    Raises ExportError if the source is unavailable, or the rectangle has
    no area or does not lie inside the source.
    """
    if source is None:
        raise ExportError("No decoded source image to crop")
    left, top, right, bottom = rect.as_box()
    if rect.w <= 0 or rect.h <= 0 or right <= left or bottom <= top:
        raise ExportError(f"Crop area is empty ({rect.w:g}×{rect.h:g})")
    if left < 0 or top < 0 or right > source.width or bottom > source.height:
        raise ExportError(
            f"Crop area ({left}, {top}, {right}, {bottom}) lies outside the "
            f"{source.width}×{source.height} image"
        )
    return source.crop((left, top, right, bottom))


def cropped_filename(name: str) -> str:
    """``photo.png`` → ``photo_cropped.png``; names without extension get ``.jpg``."""
    path = Path(name)
    stem = path.stem if path.suffix else path.name
    suffix = path.suffix or DEFAULT_EXTENSION
    return f"{stem}{CROPPED_SUFFIX}{suffix}"


def output_format(source_format: str, name: str) -> tuple[str, str]:
    """
    Pick the save format and output filename for a source.

    Keeps the source encoding when Pillow can write it, otherwise falls
    back to PNG with a matching extension.
    """
    fmt = (source_format or "").upper()
    filename = cropped_filename(name)
    if fmt in WRITABLE_FORMATS:
        return fmt, filename
    if not fmt and Path(filename).suffix.lower() in (".jpg", ".jpeg"):
        return "JPEG", filename
    return FALLBACK_FORMAT, str(Path(filename).with_suffix(FORMAT_EXTENSIONS[FALLBACK_FORMAT]))


def default_output_path(source_path: Path, source_format: str) -> tuple[Path, str]:
    """Unique ``<stem>_cropped<ext>`` path next to the source, plus its format."""
    fmt, filename = output_format(source_format, source_path.name)
    return unique_path(source_path.parent / filename), fmt


def save_cropped(image: Image.Image, out_path: Path, fmt: str,
                 jpeg_quality: int = JPEG_QUALITY_DEFAULT) -> Path:
    """Write the cropped image; raises ExportError if it cannot be written."""
    try:
        if fmt == "JPEG":
            if image.mode not in ("RGB", "L", "CMYK"):
                image = image.convert("RGB")
            image.save(str(out_path), "JPEG", quality=jpeg_quality, optimize=True)
        elif fmt == "PNG":
            image.save(str(out_path), "PNG", compress_level=PNG_COMPRESS_LEVEL)
        else:
            image.save(str(out_path), fmt)
    except (OSError, ValueError, KeyError) as exc:
        raise ExportError(f"Could not write {out_path.name}: {exc}") from exc
    logger.info("Saved %s (%dx%d, %s)", out_path, image.width, image.height, fmt)
    return out_path
