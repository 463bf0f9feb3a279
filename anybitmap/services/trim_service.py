from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional
import logging

import numpy as np

from ..models.geometry import CropRectangle
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrimBounds:
    """Inclusive row/column bounds of the non-white content."""
    left: int
    top: int
    right: int
    bottom: int

    def to_rectangle(self) -> CropRectangle:
        return CropRectangle(self.left, self.top, self.right - self.left + 1, self.bottom - self.top + 1)


class TrimService:
    """
    Locates the non-white bounding box of a pixel buffer.

    A pixel is non-white when its RGB differs from (255, 255, 255); alpha is
    ignored. The scan runs as four phases, each stopping at its first hit:
      1. find_top:           storage order from the start
      2. find_bottom:        storage order from the end
      3. refine_left_right:  rows strictly between top and bottom
      4. crop rectangle:     TrimBounds.to_rectangle()
    """

    @staticmethod
    def non_white_mask(buffer: PixelBuffer) -> np.ndarray:
        return np.any(buffer.pixels[..., :3] != 255, axis=-1)

    @staticmethod
    def find_top(mask: np.ndarray) -> Optional[TrimBounds]:
        """First hit fixes top and seeds left/right; None when nothing is found."""
        flat = mask.reshape(-1)
        first = int(np.argmax(flat))
        if not flat[first]:
            return None
        row, col = divmod(first, mask.shape[1])
        return TrimBounds(left=col, top=row, right=col, bottom=row)

    @staticmethod
    def find_bottom(mask: np.ndarray, bounds: TrimBounds) -> TrimBounds:
        """Last hit in storage order fixes bottom and may widen left/right."""
        flat = mask.reshape(-1)
        last = flat.size - 1 - int(np.argmax(flat[::-1]))
        row, col = divmod(last, mask.shape[1])
        return replace(
            bounds,
            left=min(bounds.left, col),
            right=max(bounds.right, col),
            bottom=row,
        )

    @staticmethod
    def refine_left_right(mask: np.ndarray, bounds: TrimBounds) -> TrimBounds:
        """Widen left/right using every row strictly between top and bottom."""
        if bounds.bottom <= bounds.top:
            return bounds
        inner = mask[bounds.top + 1:bounds.bottom]
        columns = np.flatnonzero(inner.any(axis=0))
        if columns.size == 0:
            return bounds
        return replace(
            bounds,
            left=min(bounds.left, int(columns[0])),
            right=max(bounds.right, int(columns[-1])),
        )

    def find_bounds(self, buffer: PixelBuffer) -> Optional[TrimBounds]:
        mask = self.non_white_mask(buffer)
        bounds = self.find_top(mask)
        if bounds is None:
            logger.warning(f"Nothing to trim: {buffer.width}x{buffer.height} image is entirely white")
            return None
        bounds = self.find_bottom(mask, bounds)
        bounds = self.refine_left_right(mask, bounds)
        logger.debug(f"Trim bounds for {buffer.width}x{buffer.height}: {bounds}")
        return bounds
