from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Optional, Union
import logging
import threading

import numpy as np
from PIL import Image as PILImage

from .errors import InvalidArgumentError
from .models.geometry import Color, CropRectangle
from .models.image_format import ImageFormat
from .models.pixel_buffer import PixelBuffer
from .services.image_service import ImageService
from .services.transform_service import TransformService

logger = logging.getLogger(__name__)

FormatArg = Union[str, ImageFormat, None]


class AnyBitmap:
    """
    Format-agnostic image: the bytes it was built from are the source of truth.

    Pixels are decoded lazily, once, and cached. Reading them never changes
    what export_bytes() returns. Every transform builds a new AnyBitmap from
    freshly encoded bytes; this instance is left untouched.
    """

    _image_service: ImageService | None = None
    _transform_service: TransformService | None = None
    _services_lock = threading.Lock()

    def __init__(self, data: bytes):
        if data is None:
            raise InvalidArgumentError("Please provide image bytes to process.")
        self._data = bytes(data)
        self._format = self.image_service().require_format(self._data)
        self._pixel_buffer: PixelBuffer | None = None
        self._decode_lock = threading.Lock()

    # ─── Shared services ────────────────────────────────────────────
    @classmethod
    def image_service(cls) -> ImageService:
        if AnyBitmap._image_service is None:
            with AnyBitmap._services_lock:
                if AnyBitmap._image_service is None:
                    AnyBitmap._image_service = ImageService()
        return AnyBitmap._image_service

    @classmethod
    def transform_service(cls) -> TransformService:
        if AnyBitmap._transform_service is None:
            with AnyBitmap._services_lock:
                if AnyBitmap._transform_service is None:
                    AnyBitmap._transform_service = TransformService()
        return AnyBitmap._transform_service

    # ─── Construction ───────────────────────────────────────────────
    @classmethod
    def from_bytes(cls, data: bytes) -> AnyBitmap:
        return cls(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> AnyBitmap:
        return cls(cls.image_service().read_file(path))

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> AnyBitmap:
        return cls(cls.image_service().read_stream(stream))

    @classmethod
    def from_pixel_buffer(
        cls, buffer: PixelBuffer, image_format: FormatArg = None, quality: Optional[int] = None
    ) -> AnyBitmap:
        """
        Encode a pixel buffer and wrap the result.
        Format defaults to ANYBITMAP_TRANSFORM_FORMAT (png).
        """
        if buffer is None:
            raise InvalidArgumentError("Please provide a pixel buffer to encode.")
        service = cls.image_service()
        image_format = service.resolve_format(image_format)
        bitmap = cls(service.encode(buffer, image_format, quality))
        # PNG decodes back to the identical RGBA grid, so skip the decode later
        if image_format is ImageFormat.PNG:
            bitmap._pixel_buffer = buffer
        return bitmap

    # ─── Foreign conversions ────────────────────────────────────────
    @classmethod
    def from_pil(cls, pil_img: PILImage.Image, image_format: FormatArg = None) -> AnyBitmap:
        if pil_img is None:
            raise InvalidArgumentError("Please provide a Pillow image to convert.")
        return cls.from_numpy(np.asarray(pil_img.convert("RGBA")), image_format)

    def to_pil(self) -> PILImage.Image:
        return PILImage.fromarray(np.array(self.pixel_buffer().pixels))

    @classmethod
    def from_numpy(cls, pixels: np.ndarray, image_format: FormatArg = None) -> AnyBitmap:
        """
        Accepts (H, W) grey, (H, W, 3) RGB or (H, W, 4) RGBA uint8 arrays.
        """
        if pixels is None:
            raise InvalidArgumentError("Please provide pixels to convert.")
        pixels = np.asarray(pixels)
        if pixels.ndim == 2:
            pixels = np.repeat(pixels[..., None], 3, axis=-1)
        if pixels.ndim == 3 and pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=pixels.dtype)
            pixels = np.concatenate([pixels, alpha], axis=-1)
        return cls.from_pixel_buffer(PixelBuffer(pixels), image_format)

    def to_numpy(self) -> np.ndarray:
        """Writable (H, W, 4) RGBA copy of the decoded pixels."""
        return np.array(self.pixel_buffer().pixels)

    # ─── Identity ───────────────────────────────────────────────────
    @property
    def data(self) -> bytes:
        return self._data

    @property
    def image_format(self) -> ImageFormat:
        return self._format

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def width(self) -> int:
        return self.pixel_buffer().width

    @property
    def height(self) -> int:
        return self.pixel_buffer().height

    def pixel_buffer(self) -> PixelBuffer:
        """Decode on first use; later calls (from any thread) share the cache."""
        buffer = self._pixel_buffer
        if buffer is not None:
            return buffer
        with self._decode_lock:
            if self._pixel_buffer is None:
                self._pixel_buffer = self.image_service().decode(self._data)
                logger.debug(
                    f"Materialised {self._format.name} pixels "
                    f"({self._pixel_buffer.width}x{self._pixel_buffer.height})"
                )
            return self._pixel_buffer

    def export_bytes(self, image_format: FormatArg = None, quality: Optional[int] = None) -> bytes:
        """
        Without a format: the original bytes, untouched.
        With a format: the decoded pixels re-encoded; quality only reaches lossy encoders.
        """
        if image_format is None:
            if quality is not None:
                self.image_service().validate_quality(quality)
            return self._data
        return self.image_service().encode(self.pixel_buffer(), image_format, quality)

    def save_as(self, path: Union[str, Path], image_format: FormatArg = None, quality: Optional[int] = None) -> Path:
        """
        Write to disk. Without an explicit format the extension decides; the
        original bytes are written verbatim when it matches the detected format.
        A path without an extension gets the one of the explicit format.
        """
        path = Path(path)
        if image_format is not None:
            target = ImageFormat.parse(image_format)
            if not path.suffix and target.extension:
                path = path.with_suffix(target.extension)
        else:
            target = ImageFormat.from_extension(path)
        if target is self._format or (target is ImageFormat.UNKNOWN and image_format is None):
            data = self.export_bytes(quality=quality)
        else:
            data = self.export_bytes(target, quality)
        return self.image_service().write_file(path, data)

    def clone(self) -> AnyBitmap:
        return AnyBitmap(self._data)

    def __eq__(self, other):
        if not isinstance(other, AnyBitmap):
            return NotImplemented
        return self._data == other._data

    def __hash__(self):
        return hash(self._data)

    def __repr__(self):
        return f"AnyBitmap(format={self._format.name}, length={len(self._data)})"

    # ─── Transforms ─────────────────────────────────────────────────
    def _wrap(self, buffer: PixelBuffer, image_format: FormatArg, quality: Optional[int]) -> AnyBitmap:
        return AnyBitmap.from_pixel_buffer(buffer, image_format, quality)

    def resize_by_scale(self, scale: float, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().resize_by_scale(self.pixel_buffer(), scale), image_format, quality)

    def resize(self, width: int, height: int, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().resize(self.pixel_buffer(), width, height), image_format, quality)

    def crop(self, rect: CropRectangle, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().crop(self.pixel_buffer(), rect), image_format, quality)

    def crop_to_size(self, width: int, height: int, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().crop_to_size(self.pixel_buffer(), width, height), image_format, quality)

    def rotate(self, angle: float, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().rotate(self.pixel_buffer(), angle), image_format, quality)

    def trim(self, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().trim(self.pixel_buffer()), image_format, quality)

    def add_border(self, color: Color, width: int, image_format: FormatArg = None, quality: Optional[int] = None) -> AnyBitmap:
        return self._wrap(self.transform_service().add_border(self.pixel_buffer(), color, width), image_format, quality)
