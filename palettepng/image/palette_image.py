import numpy as np
from PIL import Image

from palettepng.codecs.scanline_filter import unfilter_scanlines
from palettepng.encoders.png_encoder import DEFAULT_COMPRESSION_LEVEL, PNGEncoder
from palettepng.image.palette import MAX_PALETTE_SIZE, Palette
from palettepng.image.pixel_buffer import PixelIndexBuffer
from palettepng.parsers.png_parser import PNGParser
from palettepng.quantize.rgba_quantizer import RGBAQuantizer


class PaletteImage:
    """
    Indexed-color image: a palette of up to 256 RGBA entries and a
    width x height grid of palette indices.

    Build one empty (palette opaque black, all pixels index 0), decode one with
    from_png_bytes, or quantize raw RGBA with from_rgba_bytes / from_pil.
    Width, height and max_colors never change after construction.
    """

    def __init__(self, width, height, max_colors=MAX_PALETTE_SIZE):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._palette = Palette(max_colors)
        self._pixels = PixelIndexBuffer(width, height, max_colors)

    def __repr__(self):
        return f"PaletteImage(width={self._width}, height={self._height}, max_colors={self.max_colors})"

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def max_colors(self):
        return self._palette.max_colors

    # Palette

    def get_palette(self):
        return self._palette.colors()

    def get_palette_bytes(self) -> bytes:
        """Flat copy of the palette, 4 bytes (r, g, b, a) per entry."""
        return self._palette.raw()

    def set_palette(self, data):
        self._palette.replace_raw(data)

    def assign_palette(self, colors):
        self._palette.assign(colors)

    def set_palette_color(self, index, r, g, b, a=255):
        self._palette.set_color(index, r, g, b, a)

    def get_palette_color(self, index):
        return self._palette.get_color(index)

    # Pixels

    def set_pixel_palette_index(self, x, y, color_index):
        self._pixels.set_index(x, y, color_index)

    def get_pixel_palette_index(self, x, y):
        return self._pixels.get_index(x, y)

    def get_pixels(self) -> bytes:
        return self._pixels.raw()

    def set_pixels(self, data):
        self._pixels.replace_raw(data)

    def get_image_data(self) -> bytes:
        """
        Expand every pixel through the palette: width * height * 4 RGBA bytes.
        """
        palette = np.frombuffer(self._palette.raw(), dtype=np.uint8).reshape(-1, 4)
        return palette[self.to_array()].tobytes()

    def to_array(self):
        return np.frombuffer(self._pixels.raw(), dtype=np.uint8).reshape(self._height, self._width).copy()

    # Codecs

    @classmethod
    def from_png_bytes(cls, data):
        """
        Decode an 8-bit indexed PNG. The result always has a 256-entry palette.
        Raises a PNGDecodeError subclass on any structural, checksum or filter problem.
        """
        parsed = PNGParser(data).parse()
        header = parsed['header']
        width, height = header['width'], header['height']

        pixels = unfilter_scanlines(parsed['scanlines'], width, height)

        img = cls(width, height, MAX_PALETTE_SIZE)
        img.set_palette(parsed['palette'])
        img.set_pixels(pixels)
        return img

    def to_png_bytes(self, compression_level=DEFAULT_COMPRESSION_LEVEL) -> bytes:
        return PNGEncoder(self, compression_level).encode()

    @classmethod
    def from_rgba_bytes(cls, rgba, width, height, quantize=False):
        colors, indices = RGBAQuantizer(quantize=quantize).quantize_rgba(rgba, width, height)

        img = cls(width, height, MAX_PALETTE_SIZE)
        img.assign_palette(colors)
        img.set_pixels(indices)
        return img

    # Pillow interop

    def to_pil(self):
        """
        Mode "P" PIL image sharing this image's palette; per-entry alpha is
        attached as the "transparency" info bytes.
        """
        pil_image = Image.frombytes("P", (self._width, self._height), self._pixels.raw())
        palette = np.frombuffer(self._palette.raw(), dtype=np.uint8).reshape(-1, 4)
        pil_image.putpalette(palette[:, :3].tobytes())
        pil_image.info['transparency'] = palette[:, 3].tobytes()
        return pil_image

    @classmethod
    def from_pil(cls, pil_image, quantize=False):
        rgba_image = pil_image.convert("RGBA")
        width, height = rgba_image.size
        return cls.from_rgba_bytes(rgba_image.tobytes(), width, height, quantize=quantize)


def decode_png(data):
    return PaletteImage.from_png_bytes(data)


def encode_png(image, compression_level=DEFAULT_COMPRESSION_LEVEL):
    return image.to_png_bytes(compression_level)
