from .geometry import Color, CropRectangle
from .image_format import ImageFormat
from .pixel_buffer import PixelBuffer

__all__ = ["Color", "CropRectangle", "ImageFormat", "PixelBuffer"]
