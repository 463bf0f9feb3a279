from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Union


class ImageFormat(Enum):
    """
    Container formats the codec can recognise.
    """
    BMP = "bmp"
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    TIFF = "tiff"
    WEBP = "webp"
    SVG = "svg"
    UNKNOWN = "unknown"

    @property
    def pillow_name(self) -> str | None:
        """Format name Pillow writes with, None when it cannot write it."""
        return _PILLOW_NAMES.get(self)

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self, "")

    @property
    def is_lossy(self) -> bool:
        return self in (ImageFormat.JPEG, ImageFormat.WEBP)

    @property
    def is_encodable(self) -> bool:
        return self.pillow_name is not None

    @classmethod
    def parse(cls, value: Union[str, "ImageFormat"]) -> "ImageFormat":
        """Accept an ImageFormat, a name ("png") or an extension (".jpg")."""
        if isinstance(value, ImageFormat):
            return value
        key = str(value).strip().lower().lstrip(".")
        return _BY_NAME.get(key, cls.UNKNOWN)

    @classmethod
    def from_extension(cls, path: Union[str, Path]) -> "ImageFormat":
        suffix = Path(path).suffix
        if not suffix:
            return cls.UNKNOWN
        return cls.parse(suffix)


_PILLOW_NAMES = {
    ImageFormat.BMP: "BMP",
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.GIF: "GIF",
    ImageFormat.TIFF: "TIFF",
    ImageFormat.WEBP: "WEBP",
}

_EXTENSIONS = {
    ImageFormat.BMP: ".bmp",
    ImageFormat.PNG: ".png",
    ImageFormat.JPEG: ".jpg",
    ImageFormat.GIF: ".gif",
    ImageFormat.TIFF: ".tiff",
    ImageFormat.WEBP: ".webp",
    ImageFormat.SVG: ".svg",
}

_BY_NAME = {
    "bmp": ImageFormat.BMP,
    "png": ImageFormat.PNG,
    "jpg": ImageFormat.JPEG,
    "jpeg": ImageFormat.JPEG,
    "gif": ImageFormat.GIF,
    "tif": ImageFormat.TIFF,
    "tiff": ImageFormat.TIFF,
    "webp": ImageFormat.WEBP,
    "svg": ImageFormat.SVG,
}
