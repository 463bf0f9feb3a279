import numpy as np
import pytest

from anybitmap import Color, CropRectangle, InvalidArgumentError


def test_clamp_keeps_a_rectangle_that_fits():
    assert CropRectangle(2, 3, 4, 5).clamp_to(20, 20) == CropRectangle(2, 3, 4, 5)


def test_clamp_shrinks_to_the_source_edge():
    assert CropRectangle(1800, 0, 500, 1000).clamp_to(2000, 1000) == CropRectangle(1800, 0, 200, 1000)


def test_clamp_moves_negative_origin_to_zero():
    assert CropRectangle(-10, -3, 5, 5).clamp_to(20, 20) == CropRectangle(0, 0, 5, 5)


def test_clamp_treats_unset_origin_as_zero():
    assert CropRectangle(None, None, 5, 5).clamp_to(20, 20) == CropRectangle(0, 0, 5, 5)


def test_clamp_non_positive_size_means_remaining_extent():
    assert CropRectangle(5, 4, 0, -1).clamp_to(20, 10) == CropRectangle(5, 4, 15, 6)


def test_clamp_can_collapse_to_empty():
    area = CropRectangle(25, 0, 5, 5).clamp_to(20, 20)

    assert area.is_empty
    assert area.area == 0


def test_rectangle_edges():
    rect = CropRectangle(2, 3, 4, 5)

    assert (rect.right, rect.bottom, rect.area) == (6, 8, 20)


@pytest.mark.parametrize("text, expected", [
    ("#ff8000", Color(255, 128, 0)),
    ("FF800080", Color(255, 128, 0, 128)),
    ("#f80", Color(255, 136, 0)),
])
def test_color_from_hex(text, expected):
    assert Color.from_hex(text) == expected


def test_color_argb_round_trip():
    color = Color(1, 2, 3, 4)

    assert color.to_argb() == 0x04010203
    assert Color.from_argb(0x04010203) == color


def test_color_rejects_out_of_range_channel():
    with pytest.raises(InvalidArgumentError):
        Color(256, 0, 0)
    with pytest.raises(InvalidArgumentError):
        Color.from_hex("#12345")


def test_color_constants():
    assert Color.WHITE.as_rgba() == (255, 255, 255, 255)
    assert Color.TRANSPARENT.a == 0


@pytest.mark.parametrize("fields", [(1.5, 0, 4, 4), (0, 0, 4.0, 4), (0, "2", 4, 4), (True, 0, 4, 4)])
def test_rectangle_rejects_non_integer_fields(fields):
    with pytest.raises(InvalidArgumentError):
        CropRectangle(*fields)


def test_rectangle_accepts_numpy_integers():
    rect = CropRectangle(np.int64(2), np.int32(3), np.uint16(4), 5)

    assert rect == CropRectangle(2, 3, 4, 5)
    assert type(rect.x) is int
