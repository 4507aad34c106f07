"""Tests for chunk assembly and PNG serialization."""

import struct
import zlib

import pytest

from palettepng.encoders.png_encoder import PNGEncoder, create_chunk
from palettepng.image.palette_image import PaletteImage
from palettepng.parsers.png_parser import PNG_SIGNATURE


def split_chunks(png):
    chunks = []
    offset = 8
    while offset < len(png):
        (length,) = struct.unpack(">I", png[offset:offset + 4])
        chunk_type = png[offset + 4:offset + 8].decode('ascii')
        payload = png[offset + 8:offset + 8 + length]
        chunks.append((chunk_type, payload))
        offset += 12 + length
    return chunks


@pytest.fixture
def small_image():
    img = PaletteImage(3, 2, max_colors=4)
    img.set_palette_color(1, 255, 0, 0, 128)
    img.set_palette_color(2, 0, 0, 255)
    img.set_pixel_palette_index(0, 0, 1)
    img.set_pixel_palette_index(2, 1, 2)
    return img


def test_create_chunk_layout():
    # IEND's CRC is the same in every PNG file
    assert create_chunk(b'IEND', b'') == bytes.fromhex('0000000049454e44ae426082')


def test_create_chunk_accepts_str_type():
    chunk = create_chunk('tRNS', b'\x01\x02')

    assert chunk[:4] == b'\x00\x00\x00\x02'
    assert chunk[4:8] == b'tRNS'
    assert chunk[8:10] == b'\x01\x02'
    assert struct.unpack(">I", chunk[10:])[0] == zlib.crc32(b'tRNS\x01\x02')


@pytest.mark.parametrize("chunk_type", [b'IHD', b'IHDRX', b'ID1T', 'I D '])
def test_create_chunk_rejects_bad_type(chunk_type):
    with pytest.raises(ValueError):
        create_chunk(chunk_type, b'')


def test_chunk_order_and_payloads(small_image):
    png = small_image.to_png_bytes()

    assert png[:8] == PNG_SIGNATURE
    chunks = split_chunks(png)
    assert [name for name, _ in chunks] == ['IHDR', 'PLTE', 'tRNS', 'IDAT', 'IEND']

    payloads = dict(chunks)
    assert payloads['IHDR'] == struct.pack(">IIBBBBB", 3, 2, 8, 3, 0, 0, 0)
    assert payloads['PLTE'] == bytes([0, 0, 0, 255, 0, 0, 0, 0, 255, 0, 0, 0])
    assert payloads['tRNS'] == bytes([255, 128, 255, 255])
    assert payloads['IEND'] == b''


def test_idat_holds_unfiltered_scanlines(small_image):
    payloads = dict(split_chunks(small_image.to_png_bytes()))

    assert zlib.decompress(payloads['IDAT']) == bytes([0, 1, 0, 0,
                                                       0, 0, 0, 2])


def test_trns_emitted_even_when_opaque():
    payloads = dict(split_chunks(PaletteImage(1, 1, max_colors=2).to_png_bytes()))

    assert payloads['tRNS'] == b'\xff\xff'


@pytest.mark.parametrize("level", [0, 9])
def test_compression_level_does_not_change_content(small_image, level):
    payloads = dict(split_chunks(PNGEncoder(small_image, compression_level=level).encode()))

    assert zlib.decompress(payloads['IDAT']) == bytes([0, 1, 0, 0, 0, 0, 0, 2])


def test_invalid_compression_level(small_image):
    with pytest.raises(ValueError):
        PNGEncoder(small_image, compression_level=10)
