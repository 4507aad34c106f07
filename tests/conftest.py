"""Shared fixtures for building PNG byte streams by hand."""

import struct
import zlib

import pytest

SIGNATURE = b'\x89PNG\r\n\x1a\n'


def _chunk(chunk_type, payload):
    return (struct.pack(">I", len(payload)) + chunk_type + payload
            + struct.pack(">I", zlib.crc32(chunk_type + payload)))


def _ihdr(width, height, bit_depth=8, color_type=3, compression=0, filter_method=0, interlace=0):
    return _chunk(b'IHDR', struct.pack(">IIBBBBB", width, height, bit_depth, color_type,
                                       compression, filter_method, interlace))


@pytest.fixture
def make_chunk():
    """Return a function building one chunk with a correct CRC."""
    return _chunk


@pytest.fixture
def make_ihdr():
    return _ihdr


@pytest.fixture
def build_png():
    """
    Return a function assembling signature + chunks. `scanlines` is the raw
    (already filtered) scanline stream and gets deflated into one IDAT chunk.
    """
    def _build(width, height, scanlines, plte=b'\x00\x00\x00', trns=None, extra_chunks=()):
        parts = [SIGNATURE, _ihdr(width, height)]
        if plte is not None:
            parts.append(_chunk(b'PLTE', plte))
        if trns is not None:
            parts.append(_chunk(b'tRNS', trns))
        parts.extend(extra_chunks)
        parts.append(_chunk(b'IDAT', zlib.compress(bytes(scanlines))))
        parts.append(_chunk(b'IEND', b''))
        return b''.join(parts)

    return _build
