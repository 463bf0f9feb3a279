from __future__ import annotations
from dataclasses import dataclass
import numbers
from typing import Optional, Tuple

from ..errors import InvalidArgumentError


@dataclass(frozen=True)
class CropRectangle:
    """
    Requested crop region. Never trusted as-is: call clamp_to() first.
    x, y may be negative or None (unspecified); width, height <= 0 mean
    "use the source dimension".
    """
    x: Optional[int] = 0
    y: Optional[int] = 0
    width: int = 0
    height: int = 0

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if value is None and name in ("x", "y"):
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidArgumentError(f"Crop {name} must be an integer, got {value!r}")
            object.__setattr__(self, name, int(value))

    @property
    def right(self) -> int:
        return (self.x or 0) + self.width

    @property
    def bottom(self) -> int:
        return (self.y or 0) + self.height

    @property
    def area(self) -> int:
        return max(self.width, 0) * max(self.height, 0)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def clamp_to(self, max_width: int, max_height: int) -> CropRectangle:
        """
        Clamp against a (max_width, max_height) source.

        Negative or unset x/y become 0, non-positive sizes become the source
        size, and a rectangle running past the source edge is shrunk to fit.
        The result can be empty when x/y lie outside the source.
        """
        x = self.x if self.x is not None and self.x > 0 else 0
        y = self.y if self.y is not None and self.y > 0 else 0
        width = self.width if self.width > 0 else max_width
        height = self.height if self.height > 0 else max_height

        if x + width > max_width:
            width = max_width - x
        if y + height > max_height:
            height = max_height - y
        return CropRectangle(x, y, width, height)


def _channel(name: str, value: int) -> int:
    value = int(value)
    if not 0 <= value <= 255:
        raise InvalidArgumentError(f"Color channel {name}={value} is outside 0..255")
    return value


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color value."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for name in ("r", "g", "b", "a"):
            object.__setattr__(self, name, _channel(name, getattr(self, name)))

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse "#RGB", "#RRGGBB" or "#RRGGBBAA"."""
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) not in (6, 8):
            raise InvalidArgumentError(f"Unrecognised hex color: {value!r}")
        try:
            channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError as err:
            raise InvalidArgumentError(f"Unrecognised hex color: {value!r}") from err
        return cls(*channels)

    @classmethod
    def from_argb(cls, value: int) -> Color:
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, (value >> 24) & 0xFF)

    def to_argb(self) -> int:
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b

    def as_rgba(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a


Color.WHITE = Color(255, 255, 255)
Color.BLACK = Color(0, 0, 0)
Color.TRANSPARENT = Color(0, 0, 0, 0)
