from palettepng.errors import (
    BufferLengthMismatchError,
    CoordinateOutOfRangeError,
    PaletteIndexOutOfRangeError,
)


class PixelIndexBuffer:
    """Row-major grid of palette indices, one byte per pixel (index = y * width + x)."""

    def __init__(self, width, height, max_colors):
        self.width = width
        self.height = height
        self.max_colors = max_colors
        self._data = bytearray(width * height)

    def __len__(self):
        return len(self._data)

    def _check_coordinates(self, x, y):
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise CoordinateOutOfRangeError(x, y, self.width, self.height)

    def set_index(self, x, y, value):
        self._check_coordinates(x, y)
        if value < 0 or value >= self.max_colors:
            raise PaletteIndexOutOfRangeError(value, self.max_colors)
        self._data[y * self.width + x] = value

    def get_index(self, x, y):
        self._check_coordinates(x, y)
        return self._data[y * self.width + x]

    def replace_raw(self, data):
        if len(data) != len(self._data):
            raise BufferLengthMismatchError(len(self._data), len(data))
        if len(data):
            if min(data) < 0:
                raise PaletteIndexOutOfRangeError(min(data), self.max_colors)
            if max(data) >= self.max_colors:
                raise PaletteIndexOutOfRangeError(max(data), self.max_colors)
        self._data[:] = data

    def raw(self) -> bytes:
        return bytes(self._data)

    def rows(self):
        for y in range(self.height):
            yield bytes(self._data[y * self.width:(y + 1) * self.width])
