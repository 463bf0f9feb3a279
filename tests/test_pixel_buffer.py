"""Pixel buffer invariants: shape, packing, immutability and equality."""

import numpy as np
import pytest

from anybitmap import InvalidArgumentError, PixelBuffer
from conftest import solid


def test_pixel_count_matches_dimensions(gradient_pixels):
    buffer = PixelBuffer(gradient_pixels)

    assert (buffer.width, buffer.height) == (40, 30)
    assert buffer.samples().shape == (buffer.width * buffer.height,)


def test_samples_pack_rgb_into_low_24_bits():
    buffer = PixelBuffer(solid(2, 1, (0x12, 0x34, 0x56, 0x78)))

    samples = buffer.samples()

    assert samples.dtype == np.uint32
    assert int(samples[0]) == 0x78123456
    assert int(samples[0]) & 0xFFFFFF == 0x123456


def test_from_samples_inverts_samples(gradient_pixels):
    buffer = PixelBuffer(gradient_pixels)

    rebuilt = PixelBuffer.from_samples(buffer.samples(), buffer.width, buffer.height)

    assert rebuilt == buffer


def test_from_samples_rejects_wrong_count():
    with pytest.raises(InvalidArgumentError):
        PixelBuffer.from_samples(np.zeros(5, dtype=np.uint32), 2, 2)


def test_buffer_is_a_read_only_copy(gradient_pixels):
    buffer = PixelBuffer(gradient_pixels)
    gradient_pixels[0, 0] = (1, 2, 3, 4)

    assert tuple(buffer.pixels[0, 0]) != (1, 2, 3, 4)
    with pytest.raises(ValueError):
        buffer.pixels[0, 0, 0] = 9


@pytest.mark.parametrize("pixels", [
    np.zeros((4, 4, 3), dtype=np.uint8),
    np.zeros((4, 4), dtype=np.uint8),
    np.zeros((4, 4, 4), dtype=np.float32),
    np.zeros((0, 4, 4), dtype=np.uint8),
])
def test_rejects_malformed_arrays(pixels):
    with pytest.raises(InvalidArgumentError):
        PixelBuffer(pixels)


def test_equality_is_by_pixels():
    assert PixelBuffer(solid(3, 3)) == PixelBuffer(solid(3, 3))
    assert PixelBuffer(solid(3, 3)) != PixelBuffer(solid(3, 3, (0, 0, 0, 255)))
    assert PixelBuffer(solid(3, 3)) != PixelBuffer(solid(3, 4))
