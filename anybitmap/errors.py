"""
Error taxonomy for AnyBitmap.

Every failure is raised synchronously at the call that triggers it.
Third-party exceptions are chained so the codec's own message survives.
"""


class AnyBitmapError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(AnyBitmapError, ValueError):
    """Absent input, non-positive size, out-of-range quality or non-finite angle."""


class OutOfRangeError(InvalidArgumentError):
    """Geometry collapses to zero area or would read outside the source."""


class DecodeError(AnyBitmapError):
    """The codec rejected the encoded bytes."""


class EncodeError(AnyBitmapError):
    """The codec cannot write the requested container format."""


class UnsupportedFormatError(AnyBitmapError):
    """No known signature matched the bytes."""


class ResourceExhaustedError(AnyBitmapError, MemoryError):
    """A canvas could not be allocated."""
