from __future__ import annotations
import numpy as np

from ..errors import InvalidArgumentError


class PixelBuffer:
    """
    Decoded pixel grid: RGBA samples, shape (H, W, 4), dtype uint8.
    The array is copied on construction and never written to again;
    every transform builds a new PixelBuffer.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        if pixels is None:
            raise InvalidArgumentError("Please provide pixels to build a buffer.")
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidArgumentError(f"Expected an (H, W, 4) RGBA array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidArgumentError(f"Expected uint8 samples, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidArgumentError(f"Pixel buffer must not be empty, got shape {pixels.shape}")

        owned = np.ascontiguousarray(pixels).copy()
        owned.flags.writeable = False
        self._pixels = owned

    @classmethod
    def from_samples(cls, samples: np.ndarray, width: int, height: int) -> PixelBuffer:
        """
        Build from packed 32-bit samples (A<<24 | R<<16 | G<<8 | B), row-major.
        """
        samples = np.asarray(samples, dtype=np.uint32).reshape(-1)
        if samples.size != width * height:
            raise InvalidArgumentError(
                f"{samples.size} samples do not fill a {width}x{height} grid"
            )
        grid = samples.reshape(height, width)
        rgba = np.stack(
            [(grid >> 16) & 0xFF, (grid >> 8) & 0xFF, grid & 0xFF, (grid >> 24) & 0xFF],
            axis=-1,
        ).astype(np.uint8)
        return cls(rgba)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def samples(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: uint32 array of length width*height; the low 24 bits are RGB.
        """
        p = self._pixels.astype(np.uint32)
        packed = (p[..., 3] << 24) | (p[..., 0] << 16) | (p[..., 1] << 8) | p[..., 2]
        return packed.reshape(-1)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer(width={self.width}, height={self.height})"
