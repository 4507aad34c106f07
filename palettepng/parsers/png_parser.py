import logging
import struct
import zlib

from palettepng.errors import (
    ChecksumError,
    DecompressionError,
    FormatError,
    MalformedChunkError,
    MissingChunkError,
    OrderingError,
    TruncatedChunkError,
    UnsupportedBitDepthError,
    UnsupportedColorTypeError,
    UnsupportedInterlaceError,
)

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
PALETTE_ENTRIES = 256
IHDR_LENGTH = 13
COLOR_TYPE_INDEXED = 3


class PNGParser:
    def __init__(self, data):
        self.data = data
        self.offset = 0
        self.parsed_data = {
            'signature': None,      # PNG signature (8 bytes)
            'header': None,         # IHDR chunk info
            'palette': None,        # 256 RGBA entries, flat bytearray (PLTE + tRNS)
            'idat_chunks': [],      # Raw IDAT chunks (compressed image data)
            'scanlines': b'',       # Decompressed, still filtered scanline stream
            'unknown_chunks': [],   # Skipped chunk types
            'end': False            # True when IEND chunk is encountered
        }

    def parse(self):
        """
        Parse the entire PNG byte buffer. This method orchestrates:
        1) Checking the PNG signature.
        2) Iterating through all chunks (IHDR, PLTE, tRNS, IDAT, IEND, others skipped),
           verifying every chunk's CRC before looking at its payload.
        3) Checking that IHDR and PLTE were present.
        4) Decompressing the concatenated IDAT data.
        """
        # 1) Parse the PNG signature
        self._parse_signature()

        # 2) Read chunks until IEND or end of data
        while not self.parsed_data['end'] and self.offset < len(self.data):
            if self.offset + 8 > len(self.data):
                logger.debug("Stopping chunk walk: %d stray bytes at offset %d",
                             len(self.data) - self.offset, self.offset)
                break

            chunk_type, chunk_data = self._read_chunk()

            if chunk_type == 'IHDR':
                self._parse_ihdr(chunk_data)
            elif chunk_type == 'PLTE':
                self._parse_plte(chunk_data)
            elif chunk_type == 'tRNS':
                self._parse_trns(chunk_data)
            elif chunk_type == 'IDAT':
                self._parse_idat(chunk_data)
            elif chunk_type == 'IEND':
                self.parsed_data['end'] = True
                if self.offset < len(self.data):
                    logger.debug("Ignoring %d bytes after IEND", len(self.data) - self.offset)
            else:
                self._parse_unknown(chunk_type, chunk_data)

        # 3) Required chunks
        header = self.parsed_data['header']
        if not header or not header['width'] or not header['height']:
            raise MissingChunkError('IHDR')
        if self.parsed_data['palette'] is None:
            raise MissingChunkError('PLTE')

        # 4) Decompress IDAT data
        self._decompress_idat()

        return self.parsed_data

    def _parse_signature(self):
        signature = bytes(self.data[:8])
        if signature != PNG_SIGNATURE:
            raise FormatError()
        self.parsed_data['signature'] = signature
        self.offset = 8

    def _read_chunk(self):
        """
        Read a single chunk from the current offset:
        1) 4 bytes chunk length (big-endian)
        2) 4 bytes chunk type
        3) 'chunk_length' bytes of chunk data
        4) 4 bytes CRC (big-endian), computed over type + data
        """
        start = self.offset
        chunk_length, raw_type = struct.unpack(">I4s", self.data[start:start + 8])
        chunk_type = raw_type.decode('ascii', 'replace')

        if start + 12 + chunk_length > len(self.data):
            raise TruncatedChunkError(chunk_type)

        chunk_data = bytes(self.data[start + 8:start + 8 + chunk_length])
        (stored_crc,) = struct.unpack(">I", self.data[start + 8 + chunk_length:start + 12 + chunk_length])
        computed_crc = zlib.crc32(raw_type + chunk_data)
        if stored_crc != computed_crc:
            raise ChecksumError(chunk_type, stored_crc, computed_crc)

        self.offset = start + 12 + chunk_length
        return chunk_type, chunk_data

    def _parse_ihdr(self, chunk_data):
        """
        Parse the IHDR chunk (13 bytes):
        - width (4 bytes)
        - height (4 bytes)
        - bit_depth (1 byte), must be 8
        - color_type (1 byte), must be 3 (indexed)
        - compression (1 byte)
        - filter_method (1 byte)
        - interlace (1 byte)
        """
        if len(chunk_data) != IHDR_LENGTH:
            raise MalformedChunkError('IHDR', f"expected {IHDR_LENGTH} bytes, got {len(chunk_data)}")

        width, height, bit_depth, color_type, comp, f_method, interlace = struct.unpack(">IIBBBBB", chunk_data)

        if bit_depth != 8:
            raise UnsupportedBitDepthError(bit_depth)
        if color_type != COLOR_TYPE_INDEXED:
            raise UnsupportedColorTypeError(color_type)
        if comp != 0:
            raise MalformedChunkError('IHDR', f"unknown compression method {comp}")
        if f_method != 0:
            raise MalformedChunkError('IHDR', f"unknown filter method {f_method}")
        if interlace != 0:
            raise UnsupportedInterlaceError(interlace)

        self.parsed_data['header'] = {
            'width': width,
            'height': height,
            'bit_depth': bit_depth,
            'color_type': color_type,
            'compression': comp,
            'filter_method': f_method,
            'interlace': interlace
        }

    def _parse_plte(self, chunk_data):
        """
        Parse the PLTE chunk: a series of 3-byte RGB entries expanded into a
        256-entry RGBA table. Entries past the end of the chunk stay opaque black.
        """
        if len(chunk_data) % 3 != 0:
            raise MalformedChunkError('PLTE', f"length {len(chunk_data)} is not a multiple of 3")
        if len(chunk_data) > PALETTE_ENTRIES * 3:
            raise MalformedChunkError('PLTE', f"{len(chunk_data) // 3} entries exceed {PALETTE_ENTRIES}")

        palette = bytearray(PALETTE_ENTRIES * 4)
        for i in range(PALETTE_ENTRIES):
            palette[i * 4 + 3] = 255

        for i in range(len(chunk_data) // 3):
            palette[i * 4:i * 4 + 3] = chunk_data[i * 3:i * 3 + 3]

        self.parsed_data['palette'] = palette

    def _parse_trns(self, chunk_data):
        """
        Parse the tRNS chunk: byte i is the alpha of palette entry i.
        """
        palette = self.parsed_data['palette']
        if palette is None:
            raise OrderingError('tRNS', 'PLTE')
        if len(chunk_data) > PALETTE_ENTRIES:
            raise MalformedChunkError('tRNS', f"{len(chunk_data)} alpha values exceed {PALETTE_ENTRIES}")

        for i, alpha in enumerate(chunk_data):
            palette[i * 4 + 3] = alpha

    def _parse_idat(self, chunk_data):
        """
        Collect IDAT chunks (compressed image data).
        We will decompress after reading all IDAT chunks.
        """
        self.parsed_data['idat_chunks'].append(chunk_data)

    def _parse_unknown(self, chunk_type, chunk_data):
        logger.debug("Skipping %s chunk (%d bytes)", chunk_type, len(chunk_data))
        self.parsed_data['unknown_chunks'].append({
            'type': chunk_type,
            'length': len(chunk_data),
        })

    def _decompress_idat(self):
        all_idat_data = b''.join(self.parsed_data['idat_chunks'])
        try:
            self.parsed_data['scanlines'] = zlib.decompress(all_idat_data)
        except zlib.error as exc:
            raise DecompressionError(f"Failed to decompress IDAT chunks: {exc}") from exc
