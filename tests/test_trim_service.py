"""Four-phase trim scan: each phase is checked on its own."""

import numpy as np

from anybitmap import CropRectangle, PixelBuffer
from anybitmap.services.trim_service import TrimBounds, TrimService
from conftest import solid


def _mask(rows):
    return np.array(rows, dtype=bool)


def test_find_top_stops_at_first_hit_in_storage_order():
    mask = _mask([
        [0, 0, 0, 0],
        [0, 0, 1, 0],
        [1, 0, 0, 0],
    ])

    assert TrimService.find_top(mask) == TrimBounds(left=2, top=1, right=2, bottom=1)


def test_find_top_returns_none_without_hits():
    assert TrimService.find_top(np.zeros((3, 3), dtype=bool)) is None


def test_find_bottom_widens_left_and_right():
    mask = _mask([
        [0, 0, 1, 0],
        [0, 0, 0, 0],
        [1, 0, 0, 0],
    ])
    top = TrimService.find_top(mask)

    assert TrimService.find_bottom(mask, top) == TrimBounds(left=0, top=0, right=2, bottom=2)


def test_refine_only_looks_strictly_between_top_and_bottom():
    mask = _mask([
        [0, 0, 1, 0, 0, 0],
        [1, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 1],
        [0, 0, 0, 1, 0, 0],
    ])
    bounds = TrimBounds(left=2, top=0, right=3, bottom=3)

    assert TrimService.refine_left_right(mask, bounds) == TrimBounds(left=0, top=0, right=5, bottom=3)


def test_refine_is_skipped_for_a_single_row():
    mask = _mask([[0, 1, 1, 0]])
    bounds = TrimBounds(left=1, top=0, right=2, bottom=0)

    assert TrimService.refine_left_right(mask, bounds) is bounds


def test_alpha_is_ignored_when_classifying_white():
    pixels = solid(3, 1, (255, 255, 255, 0))
    pixels[0, 1] = (0, 0, 0, 0)

    mask = TrimService.non_white_mask(PixelBuffer(pixels))

    assert mask.tolist() == [[False, True, False]]


def test_bounds_become_an_inclusive_rectangle():
    assert TrimBounds(left=1, top=2, right=9, bottom=8).to_rectangle() == CropRectangle(1, 2, 9, 7)


def test_find_bounds_all_white_is_none():
    assert TrimService().find_bounds(PixelBuffer(solid(10, 10))) is None
