from __future__ import annotations
from contextlib import contextmanager
import logging
import math
import os

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..errors import InvalidArgumentError, OutOfRangeError, ResourceExhaustedError
from ..models.geometry import Color, CropRectangle
from ..models.pixel_buffer import PixelBuffer
from .trim_service import TrimService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class TransformService:
    """
    Pixel-level transforms. Every method takes a PixelBuffer and returns a
    new one; inputs are never modified.

    Resampling follows one fixed high-quality policy (see _interpolation)
    and runs on premultiplied alpha so transparent edges do not bleed color.
    """

    def __init__(self, max_pixels: int = None):
        self.max_pixels = max_pixels or int(os.getenv("ANYBITMAP_MAX_PIXELS", str(1 << 28)))
        self.trim_service = TrimService()

    # ─── Resize ─────────────────────────────────────────────────────
    def resize_by_scale(self, buffer: PixelBuffer, scale: float) -> PixelBuffer:
        self._require(buffer)
        if not _is_finite_number(scale) or scale <= 0:
            raise InvalidArgumentError(f"Scale must be a positive finite number, got {scale!r}")

        width = math.floor(buffer.width * scale)
        height = math.floor(buffer.height * scale)
        if width <= 0 or height <= 0:
            raise OutOfRangeError(
                f"Scaling {buffer.width}x{buffer.height} by {scale} collapses to {width}x{height}"
            )
        return self._resample(buffer, width, height)

    def resize(self, buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        self._require(buffer)
        if not _is_int(width) or not _is_int(height) or width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Target size must be positive integers, got {width!r}x{height!r}")
        return self._resample(buffer, int(width), int(height))

    def _resample(self, buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        self._check_canvas(width, height)
        interpolation = _interpolation(width / buffer.width, height / buffer.height)
        with self._allocating(width, height):
            resized = cv2.resize(_premultiply(buffer.pixels), (width, height), interpolation=interpolation)
            result = PixelBuffer(_unpremultiply(resized))
        logger.debug(f"Resized {buffer.width}x{buffer.height} -> {width}x{height}")
        return result

    # ─── Crop ───────────────────────────────────────────────────────
    def crop(self, buffer: PixelBuffer, rect: CropRectangle) -> PixelBuffer:
        if buffer is None or rect is None:
            raise InvalidArgumentError("Please provide a bitmap and crop area to process.")

        area = rect.clamp_to(buffer.width, buffer.height)
        if area.is_empty:
            raise OutOfRangeError(
                f"Crop area {rect} collapses to {area.width}x{area.height} "
                f"inside a {buffer.width}x{buffer.height} image"
            )
        logger.debug(f"Crop {rect} clamped to {area}")
        return PixelBuffer(buffer.pixels[area.y:area.bottom, area.x:area.right])

    def crop_to_size(self, buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        """
        Top-left width x height window. Unlike crop(), nothing is clamped:
        a window larger than the source raises OutOfRangeError.
        """
        self._require(buffer)
        if not _is_int(width) or not _is_int(height) or width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Crop size must be positive integers, got {width!r}x{height!r}")
        if width > buffer.width or height > buffer.height:
            raise OutOfRangeError(
                f"Crop size {width}x{height} exceeds the {buffer.width}x{buffer.height} source"
            )
        return PixelBuffer(buffer.pixels[:height, :width])

    # ─── Rotate ─────────────────────────────────────────────────────
    def rotate(self, buffer: PixelBuffer, angle: float) -> PixelBuffer:
        """
        Rotate clockwise by angle degrees onto a transparent canvas sized to
        the rotated bounding box.
        """
        self._require(buffer)
        if not _is_finite_number(angle):
            raise InvalidArgumentError(f"Angle must be a finite number of degrees, got {angle!r}")

        radians = math.radians(angle)
        sine, cosine = math.sin(radians), math.cos(radians)
        width, height = buffer.width, buffer.height
        rotated_width = int(abs(cosine) * width + abs(sine) * height)
        rotated_height = int(abs(cosine) * height + abs(sine) * width)
        if rotated_width <= 0 or rotated_height <= 0:
            raise OutOfRangeError(f"Rotating {width}x{height} by {angle} collapses to zero area")
        self._check_canvas(rotated_width, rotated_height)

        # canvas centre <- rotate(angle) <- source centre; OpenCV indexes pixel centres, hence -0.5
        center_x, center_y = rotated_width // 2 - 0.5, rotated_height // 2 - 0.5
        origin_x, origin_y = width // 2 - 0.5, height // 2 - 0.5
        matrix = np.array([
            [cosine, -sine, center_x - (cosine * origin_x - sine * origin_y)],
            [sine, cosine, center_y - (sine * origin_x + cosine * origin_y)],
        ], dtype=np.float64)

        with self._allocating(rotated_width, rotated_height):
            rotated = cv2.warpAffine(
                _premultiply(buffer.pixels),
                matrix,
                (rotated_width, rotated_height),
                flags=_interpolation(1.0, 1.0),
                borderMode=cv2.BORDER_CONSTANT,
                borderValue=(0, 0, 0, 0),
            )
            result = PixelBuffer(_unpremultiply(rotated))
        logger.debug(f"Rotated {width}x{height} by {angle} -> {rotated_width}x{rotated_height}")
        return result

    # ─── Trim ───────────────────────────────────────────────────────
    def trim(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Crop away the white margin. An all-white image has no content box and
        comes back as an unchanged full-size copy.
        """
        self._require(buffer)
        bounds = self.trim_service.find_bounds(buffer)
        if bounds is None:
            return PixelBuffer(buffer.pixels)
        return self.crop(buffer, bounds.to_rectangle())

    # ─── Border ─────────────────────────────────────────────────────
    def add_border(self, buffer: PixelBuffer, color: Color, width: int) -> PixelBuffer:
        self._require(buffer)
        if color is None:
            raise InvalidArgumentError("Please provide a border color.")
        if not _is_int(width) or width < 0:
            raise InvalidArgumentError(f"Border width must be a non-negative integer, got {width!r}")

        width = int(width)
        canvas_size = (buffer.width + 2 * width, buffer.height + 2 * width)
        self._check_canvas(*canvas_size)
        with self._allocating(*canvas_size):
            canvas = PILImage.new("RGBA", canvas_size, color.as_rgba())
            canvas.alpha_composite(PILImage.fromarray(np.array(buffer.pixels)), dest=(width, width))
            result = PixelBuffer(np.asarray(canvas))
        logger.debug(f"Added {width}px border to {buffer.width}x{buffer.height}")
        return result

    # ─── Helpers ────────────────────────────────────────────────────
    @staticmethod
    def _require(buffer: PixelBuffer) -> None:
        if buffer is None:
            raise InvalidArgumentError("Please provide a bitmap to process.")

    def _check_canvas(self, width: int, height: int) -> None:
        if width * height > self.max_pixels:
            raise ResourceExhaustedError(
                f"A {width}x{height} canvas exceeds the {self.max_pixels} pixel limit"
            )

    @staticmethod
    @contextmanager
    def _allocating(width: int, height: int):
        try:
            yield
        except MemoryError as err:
            raise ResourceExhaustedError(f"Out of memory allocating a {width}x{height} canvas") from err
        except cv2.error as err:
            if "memory" in str(err).lower():
                raise ResourceExhaustedError(f"Out of memory allocating a {width}x{height} canvas") from err
            raise


def _interpolation(scale_x: float, scale_y: float) -> int:
    """The single sampling policy: area averaging to shrink, bicubic otherwise."""
    if scale_x < 1 and scale_y < 1:
        return cv2.INTER_AREA
    return cv2.INTER_CUBIC


def _premultiply(pixels: np.ndarray) -> np.ndarray:
    rgba = pixels.astype(np.float32)
    rgba[..., :3] *= rgba[..., 3:4] / 255.0
    return rgba


def _unpremultiply(rgba: np.ndarray) -> np.ndarray:
    rgba = np.clip(rgba, 0, 255)
    alpha = rgba[..., 3:4]
    rgb = np.divide(rgba[..., :3] * 255.0, alpha, out=np.zeros_like(rgba[..., :3]), where=alpha > 0)
    out = np.concatenate([np.clip(rgb, 0, 255), alpha], axis=-1)
    return np.rint(out).astype(np.uint8)


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool) \
        and math.isfinite(value)
