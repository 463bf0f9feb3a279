from pathlib import Path
from typing import BinaryIO, Optional, Union
import os
import math

from dotenv import load_dotenv

from ..errors import InvalidArgumentError, UnsupportedFormatError
from ..models.image_format import ImageFormat
from ..models.pixel_buffer import PixelBuffer
from ..repositories.codec_repository import CodecRepository
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()


class ImageService:
    """
    Business layer over the codec and file repositories.
    Validates arguments, applies configured defaults; no pixel math.
    """
    def __init__(self, default_quality: int = None, transform_format: str = None):
        self.default_quality = self.validate_quality(
            default_quality if default_quality is not None
            else int(os.getenv("ANYBITMAP_DEFAULT_QUALITY", "100"))
        )
        self.transform_format = ImageFormat.parse(
            transform_format or os.getenv("ANYBITMAP_TRANSFORM_FORMAT", "png")
        )
        if not self.transform_format.is_encodable:
            raise InvalidArgumentError(f"Transform results cannot be encoded as {self.transform_format.name}")
        self.codec_repository = CodecRepository()
        self.image_repository = ImageRepository()

    @staticmethod
    def validate_quality(quality) -> int:
        if isinstance(quality, bool) or not isinstance(quality, (int, float)) or not math.isfinite(quality):
            raise InvalidArgumentError(f"Quality must be a number in 0..100, got {quality!r}")
        if not 0 <= quality <= 100:
            raise InvalidArgumentError(f"Quality must be in 0..100, got {quality}")
        return int(quality)

    def resolve_format(self, image_format: Union[str, ImageFormat, None]) -> ImageFormat:
        """Caller's format, or the configured transform format when omitted."""
        if image_format is None:
            return self.transform_format
        return ImageFormat.parse(image_format)

    def resolve_quality(self, quality: Optional[int]) -> int:
        if quality is None:
            return self.default_quality
        return self.validate_quality(quality)

    # ─── Codec ──────────────────────────────────────────────────────
    def detect_format(self, data: bytes) -> ImageFormat:
        return self.codec_repository.detect_format(data)

    def require_format(self, data: bytes) -> ImageFormat:
        """
        Args:
            data (bytes): Encoded image bytes.
        Returns:
            The detected ImageFormat; raises UnsupportedFormatError for UNKNOWN.
        """
        if not data:
            raise InvalidArgumentError("Please provide image bytes to process.")
        image_format = self.detect_format(data)
        if image_format is ImageFormat.UNKNOWN:
            raise UnsupportedFormatError(
                f"No known image signature in {len(data)} bytes (starts with {bytes(data[:8])!r})"
            )
        return image_format

    def decode(self, data: bytes) -> PixelBuffer:
        return self.codec_repository.decode(data)

    def encode(self, buffer: PixelBuffer, image_format, quality: Optional[int] = None) -> bytes:
        return self.codec_repository.encode(
            buffer, ImageFormat.parse(image_format), self.resolve_quality(quality)
        )

    # ─── File / stream I/O ──────────────────────────────────────────
    def read_file(self, path: Union[str, Path]) -> bytes:
        return self.image_repository.read_file(path)

    def read_stream(self, stream: BinaryIO) -> bytes:
        return self.image_repository.read_stream(stream)

    def write_file(self, path: Union[str, Path], data: bytes) -> Path:
        return self.image_repository.write_file(path, data)
