from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage


def encode(pixels: np.ndarray, fmt: str = "PNG", **options) -> bytes:
    """Encode an (H, W, 3|4) uint8 array with Pillow."""
    out = BytesIO()
    PILImage.fromarray(pixels).save(out, format=fmt, **options)
    return out.getvalue()


def solid(width: int, height: int, rgba=(255, 255, 255, 255)) -> np.ndarray:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return pixels


@pytest.fixture
def gradient_pixels():
    """40x30 RGBA gradient, fully opaque."""
    ys, xs = np.mgrid[0:30, 0:40]
    pixels = np.zeros((30, 40, 4), dtype=np.uint8)
    pixels[..., 0] = xs * 6
    pixels[..., 1] = ys * 8
    pixels[..., 2] = 128
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def gradient_png(gradient_pixels):
    return encode(gradient_pixels, "PNG")


@pytest.fixture
def framed_pixels():
    """
    20x16 white image with a red block covering rows 4..9 and columns 3..12.
    """
    pixels = solid(20, 16)
    pixels[4:10, 3:13] = (200, 0, 0, 255)
    return pixels
