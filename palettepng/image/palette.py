from palettepng.errors import BufferLengthMismatchError, IndexOutOfRangeError, PaletteOverflowError
from palettepng.models import RGBA

MAX_PALETTE_SIZE = 256


class Palette:
    """
    Fixed-capacity RGBA color table stored as a flat bytearray
    (4 bytes per entry: r, g, b, a).
    Entries never assigned stay opaque black (0, 0, 0, 255).
    """

    def __init__(self, max_colors=MAX_PALETTE_SIZE):
        if not 1 <= max_colors <= MAX_PALETTE_SIZE:
            raise ValueError(f"max_colors must be between 1 and {MAX_PALETTE_SIZE}, got {max_colors}")
        self.max_colors = max_colors
        self._data = bytearray(max_colors * 4)
        for i in range(max_colors):
            self._data[i * 4 + 3] = 255

    def __len__(self):
        return self.max_colors

    def __getitem__(self, index):
        return self.get_color(index)

    def _check_index(self, index):
        if index < 0 or index >= self.max_colors:
            raise IndexOutOfRangeError(index, self.max_colors)

    def set_color(self, index, r, g, b, a=255):
        self._check_index(index)
        # bytes() rejects values outside 0..255 before the table is touched
        self._data[index * 4:index * 4 + 4] = bytes((r, g, b, a))

    def get_color(self, index) -> RGBA:
        self._check_index(index)
        r, g, b, a = self._data[index * 4:index * 4 + 4]
        return RGBA(r, g, b, a)

    def assign(self, colors):
        """
        Bulk-replace the first len(colors) entries.
        Accepts RGBA instances or (r, g, b, a) tuples; later entries keep their values.
        """
        if len(colors) > self.max_colors:
            raise PaletteOverflowError(len(colors), self.max_colors)

        packed = bytearray()
        for color in colors:
            if isinstance(color, RGBA):
                color = color.as_tuple()
            if len(color) != 4:
                raise ValueError("Each palette color must have exactly 4 channels")
            packed += bytes(color)
        self._data[:len(packed)] = packed

    def replace_raw(self, data):
        if len(data) != self.max_colors * 4:
            raise BufferLengthMismatchError(self.max_colors * 4, len(data))
        self._data[:] = data

    def raw(self) -> bytes:
        return bytes(self._data)

    def colors(self):
        return [self.get_color(i) for i in range(self.max_colors)]
