import struct
import zlib

from palettepng.codecs.scanline_filter import FILTER_NONE, filter_scanlines
from palettepng.parsers.png_parser import COLOR_TYPE_INDEXED, PNG_SIGNATURE

DEFAULT_COMPRESSION_LEVEL = 6


def create_chunk(chunk_type, payload):
    """
    Build one PNG chunk: length (4 bytes, big-endian), type, payload and the
    CRC-32 of type + payload (4 bytes, big-endian).
    """
    if isinstance(chunk_type, str):
        chunk_type = chunk_type.encode('ascii')
    if len(chunk_type) != 4 or not chunk_type.isalpha():
        raise ValueError(f"Invalid chunk type: {chunk_type!r}")

    payload = bytes(payload)
    crc = zlib.crc32(chunk_type + payload)
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


class PNGEncoder:
    """
    Serializes a PaletteImage as an 8-bit indexed PNG.

    Chunk order is fixed: IHDR, PLTE, tRNS, IDAT, IEND. PLTE and tRNS always
    cover every palette entry (max_colors of them), and tRNS is written even when
    all entries are opaque. Scanlines are stored unfiltered (filter type 0).
    """

    def __init__(self, image, compression_level=DEFAULT_COMPRESSION_LEVEL):
        if not -1 <= compression_level <= 9:
            raise ValueError(f"compression_level must be between -1 and 9, got {compression_level}")
        self.image = image
        self.compression_level = compression_level

    def encode(self) -> bytes:
        palette = self.image.get_palette_bytes()

        return b''.join([
            PNG_SIGNATURE,
            create_chunk(b'IHDR', self._ihdr_payload()),
            create_chunk(b'PLTE', self._plte_payload(palette)),
            create_chunk(b'tRNS', self._trns_payload(palette)),
            create_chunk(b'IDAT', self._idat_payload()),
            create_chunk(b'IEND', b''),
        ])

    def _ihdr_payload(self):
        # bit depth 8, color type 3, compression 0, filter 0, interlace 0
        return struct.pack(">IIBBBBB", self.image.width, self.image.height, 8, COLOR_TYPE_INDEXED, 0, 0, 0)

    @staticmethod
    def _plte_payload(palette):
        payload = bytearray()
        for i in range(0, len(palette), 4):
            payload += palette[i:i + 3]
        return bytes(payload)

    @staticmethod
    def _trns_payload(palette):
        return bytes(palette[3::4])

    def _idat_payload(self):
        scanlines = filter_scanlines(self.image.get_pixels(), self.image.width, self.image.height, FILTER_NONE)
        return zlib.compress(scanlines, self.compression_level)
