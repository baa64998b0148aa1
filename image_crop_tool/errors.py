"""
Exception types raised by the crop tool.

Geometry never raises: pointer interaction clamps instead.  Only input
validation, image decoding and the final export step fail observably.
"""


class CropToolError(Exception):
    """Base class for all crop tool errors."""


class InputError(CropToolError, ValueError):
    """Invalid user input, e.g. a custom ratio part below 1."""


class ImageDecodeError(CropToolError):
    """The selected file could not be decoded into an image."""


class ExportError(CropToolError):
    """The cropped bitmap could not be produced or written."""
