from __future__ import annotations
from io import BytesIO
import logging
import os

import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError
from dotenv import load_dotenv

from ..errors import DecodeError, EncodeError, ResourceExhaustedError
from ..models.image_format import ImageFormat
from ..models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Checked top to bottom; every (offset, bytes) pair of an entry must match.
_SIGNATURES = (
    (ImageFormat.PNG, ((0, b"\x89PNG\r\n\x1a\n"),)),
    (ImageFormat.JPEG, ((0, b"\xff\xd8\xff"),)),
    (ImageFormat.GIF, ((0, b"GIF87a"),)),
    (ImageFormat.GIF, ((0, b"GIF89a"),)),
    (ImageFormat.WEBP, ((0, b"RIFF"), (8, b"WEBP"))),
    (ImageFormat.TIFF, ((0, b"II*\x00"),)),
    (ImageFormat.TIFF, ((0, b"MM\x00*"),)),
    (ImageFormat.BMP, ((0, b"BM"),)),
)

_SNIFF_LENGTH = 4096


class CodecRepository:
    """
    Codec boundary: signature detection, decode to PixelBuffer, encode to bytes.
    Pillow handles raster containers, CairoSVG rasterises SVG.
    """

    def __init__(self, svg_dpi: float = None):
        self.svg_dpi = svg_dpi or float(os.getenv("ANYBITMAP_SVG_DPI", "96"))

    # ---------- detection ----------
    @staticmethod
    def detect_format(data: bytes) -> ImageFormat:
        for image_format, patterns in _SIGNATURES:
            if all(data[offset:offset + len(magic)] == magic for offset, magic in patterns):
                return image_format
        if CodecRepository._looks_like_svg(data):
            return ImageFormat.SVG
        return ImageFormat.UNKNOWN

    @staticmethod
    def _looks_like_svg(data: bytes) -> bool:
        head = data[:_SNIFF_LENGTH].decode("utf-8", errors="ignore").lstrip("\ufeff \t\r\n").lower()
        if not head.startswith("<"):
            return False
        return "<svg" in head

    # ---------- decode ----------
    def decode(self, data: bytes) -> PixelBuffer:
        if self.detect_format(data) is ImageFormat.SVG:
            data = self._rasterise_svg(data)
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                pil_img.seek(0)  # first frame only
                rgba = pil_img.convert("RGBA")
        except PILImage.DecompressionBombError as err:
            raise ResourceExhaustedError(f"Refusing to decode oversized image: {err}") from err
        except (UnidentifiedImageError, OSError, EOFError, SyntaxError, ValueError) as err:
            raise DecodeError(f"Codec rejected {len(data)} bytes: {err}") from err
        logger.debug(f"Decoded {len(data)} bytes into {rgba.width}x{rgba.height} RGBA")
        return PixelBuffer(np.asarray(rgba))

    def _rasterise_svg(self, data: bytes) -> bytes:
        # Cairo is a system library; import on first use so raster decoding works without it.
        try:
            import cairosvg
            return cairosvg.svg2png(bytestring=data, dpi=self.svg_dpi)
        except (ImportError, OSError) as err:
            raise DecodeError(f"SVG rasterisation is unavailable: {err}") from err
        except Exception as err:
            raise DecodeError(f"Codec rejected SVG markup: {err}") from err

    # ---------- encode ----------
    @staticmethod
    def encode(buffer: PixelBuffer, image_format: ImageFormat, quality: int) -> bytes:
        pillow_name = image_format.pillow_name
        if pillow_name is None:
            raise EncodeError(f"Cannot encode to {image_format.name}")

        pil_img = PILImage.fromarray(np.array(buffer.pixels))
        options = {"quality": quality} if image_format.is_lossy else {}
        if image_format is ImageFormat.JPEG:
            pil_img = pil_img.convert("RGB")  # JPEG has no alpha channel
        elif image_format is ImageFormat.WEBP:
            options["lossless"] = quality >= 100

        out = BytesIO()
        try:
            pil_img.save(out, format=pillow_name, **options)
        except (OSError, KeyError, ValueError) as err:
            raise EncodeError(f"Codec rejected {image_format.name} target: {err}") from err
        logger.debug(f"Encoded {buffer.width}x{buffer.height} as {image_format.name} ({out.tell()} bytes)")
        return out.getvalue()
