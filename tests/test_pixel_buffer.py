"""Tests for the palette index grid."""

import pytest

from palettepng.errors import (
    BufferLengthMismatchError,
    CoordinateOutOfRangeError,
    PaletteIndexOutOfRangeError,
)
from palettepng.image.pixel_buffer import PixelIndexBuffer


@pytest.fixture
def buffer():
    return PixelIndexBuffer(3, 2, 16)


def test_starts_zeroed(buffer):
    assert buffer.raw() == bytes(6)
    assert len(buffer) == 6


def test_row_major_layout(buffer):
    buffer.set_index(2, 1, 7)

    assert buffer.get_index(2, 1) == 7
    assert buffer.raw()[1 * 3 + 2] == 7
    assert list(buffer.rows()) == [bytes(3), bytes([0, 0, 7])]


@pytest.mark.parametrize("x, y", [(-1, 0), (3, 0), (0, -1), (0, 2), (5, 5)])
def test_coordinates_out_of_range(buffer, x, y):
    before = buffer.raw()

    with pytest.raises(CoordinateOutOfRangeError) as excinfo:
        buffer.set_index(x, y, 1)
    assert (excinfo.value.x, excinfo.value.y) == (x, y)
    assert buffer.raw() == before

    with pytest.raises(CoordinateOutOfRangeError):
        buffer.get_index(x, y)


@pytest.mark.parametrize("value", [-1, 16, 255])
def test_palette_index_out_of_range(buffer, value):
    buffer.set_index(1, 1, 3)

    with pytest.raises(PaletteIndexOutOfRangeError) as excinfo:
        buffer.set_index(1, 1, value)
    assert excinfo.value.index == value
    assert excinfo.value.limit == 16
    assert buffer.get_index(1, 1) == 3


def test_replace_raw(buffer):
    buffer.replace_raw(bytes([0, 1, 2, 3, 4, 5]))

    assert buffer.get_index(0, 1) == 3


def test_replace_raw_rejects_bad_input(buffer):
    with pytest.raises(BufferLengthMismatchError):
        buffer.replace_raw(bytes(5))

    with pytest.raises(PaletteIndexOutOfRangeError):
        buffer.replace_raw(bytes([0, 0, 0, 0, 0, 16]))
    assert buffer.raw() == bytes(6)


def test_replace_raw_rejects_negative_index(buffer):
    with pytest.raises(PaletteIndexOutOfRangeError) as excinfo:
        buffer.replace_raw([0, 1, 2, 3, -1, 5])
    assert excinfo.value.index == -1
    assert buffer.raw() == bytes(6)
