"""
AnyBitmap: a format-agnostic image buffer with a pixel transform engine.
"""

from .any_bitmap import AnyBitmap
from .errors import (
    AnyBitmapError,
    DecodeError,
    EncodeError,
    InvalidArgumentError,
    OutOfRangeError,
    ResourceExhaustedError,
    UnsupportedFormatError,
)
from .models import Color, CropRectangle, ImageFormat, PixelBuffer

__version__ = "1.0.0"
__all__ = [
    "AnyBitmap",
    "AnyBitmapError",
    "Color",
    "CropRectangle",
    "DecodeError",
    "EncodeError",
    "ImageFormat",
    "InvalidArgumentError",
    "OutOfRangeError",
    "PixelBuffer",
    "ResourceExhaustedError",
    "UnsupportedFormatError",
]
