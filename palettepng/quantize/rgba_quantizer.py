import logging

import numpy as np

from palettepng.errors import BufferLengthMismatchError, PaletteOverflowError
from palettepng.image.palette import MAX_PALETTE_SIZE
from palettepng.models import RGBA

logger = logging.getLogger(__name__)


class RGBAQuantizer:
    """
    Maps raw RGBA bytes to a palette and per-pixel palette indices.

    Colors get palette indices in first-seen (row-major) order. Once all 256
    entries are taken, a new color either fails with PaletteOverflowError or,
    with quantize=True, is mapped to the nearest existing entry by squared
    Euclidean distance over (r, g, b, a), lowest index winning ties.
    """

    def __init__(self, quantize=False):
        self.quantize = quantize

    def quantize_rgba(self, rgba, width, height):
        """
        Returns (colors, indices): the palette entries in first-seen order and
        one palette index byte per pixel, row-major.
        """
        expected = width * height * 4
        if len(rgba) != expected:
            raise BufferLengthMismatchError(expected, len(rgba))

        return self._index_colors(rgba)

    def _index_colors(self, rgba):
        # '>u4' packs each pixel as (r << 24) | (g << 16) | (b << 8) | a
        packed_pixels = np.frombuffer(bytes(rgba), dtype='>u4').tolist()

        color_map = {}
        fallback_map = {}
        colors = []
        indices = bytearray(len(packed_pixels))
        palette_array = None

        for i, packed in enumerate(packed_pixels):
            index = color_map.get(packed)
            if index is not None:
                indices[i] = index
                continue

            if len(colors) < MAX_PALETTE_SIZE:
                index = len(colors)
                color_map[packed] = index
                colors.append(RGBA(packed >> 24, (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF))
                indices[i] = index
                continue

            if not self.quantize:
                raise PaletteOverflowError(len(colors) + 1, MAX_PALETTE_SIZE)

            # Palette is full from here on, so nearest matches never change
            index = fallback_map.get(packed)
            if index is None:
                if palette_array is None:
                    palette_array = np.array([c.as_tuple() for c in colors], dtype=np.int32)
                    logger.debug("Palette full after %d pixels, mapping new colors to nearest entry", i)
                index = nearest_color_index(palette_array, packed)
                fallback_map[packed] = index
            indices[i] = index

        return colors, bytes(indices)


def nearest_color_index(palette_array, packed):
    """
    Index of the palette row closest to the packed RGBA color.
    np.argmin returns the first minimum, so ties resolve to the lowest index.
    """
    target = np.array(
        [packed >> 24, (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF],
        dtype=np.int32,
    )
    distances = ((palette_array - target) ** 2).sum(axis=1)
    return int(np.argmin(distances))
