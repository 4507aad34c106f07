class PaletteImageError(ValueError):
    """Base class for every failure raised by palettepng."""


class PNGDecodeError(PaletteImageError):
    pass


class RangeError(PaletteImageError):
    pass


class FormatError(PNGDecodeError):
    def __init__(self, message="Not a PNG file signature"):
        super().__init__(message)


class TruncatedChunkError(PNGDecodeError):
    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f"Chunk {chunk_type} exceeds file bounds")


class ChecksumError(PNGDecodeError):
    def __init__(self, chunk_type, expected, actual):
        self.chunk_type = chunk_type
        self.expected = expected
        self.actual = actual
        super().__init__(f"CRC mismatch in chunk {chunk_type}: stored {expected:#010x}, computed {actual:#010x}")


class MalformedChunkError(PNGDecodeError):
    def __init__(self, chunk_type, reason):
        self.chunk_type = chunk_type
        self.reason = reason
        super().__init__(f"Malformed {chunk_type} chunk: {reason}")


class UnsupportedBitDepthError(PNGDecodeError):
    def __init__(self, bit_depth):
        self.bit_depth = bit_depth
        super().__init__(f"Unsupported bit depth: {bit_depth}")


class UnsupportedColorTypeError(PNGDecodeError):
    def __init__(self, color_type):
        self.color_type = color_type
        super().__init__(f"Only indexed color (3) is supported, got color type {color_type}")


class UnsupportedInterlaceError(PNGDecodeError):
    def __init__(self, interlace):
        self.interlace = interlace
        super().__init__(f"Interlaced images are not supported (interlace method {interlace})")


class OrderingError(PNGDecodeError):
    def __init__(self, chunk_type, required_before):
        self.chunk_type = chunk_type
        self.required_before = required_before
        super().__init__(f"{chunk_type} chunk found before {required_before}")


class MissingChunkError(PNGDecodeError):
    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f"Missing {chunk_type} chunk")


class DecompressionError(PNGDecodeError):
    def __init__(self, message="Failed to decompress IDAT chunks"):
        super().__init__(message)


class TruncatedScanlineDataError(PNGDecodeError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Decompressed data size is too small: expected {expected} bytes, got {actual}")


class UnknownFilterTypeError(PNGDecodeError):
    def __init__(self, filter_type, row=None):
        self.filter_type = filter_type
        self.row = row
        where = f" in row {row}" if row is not None else ""
        super().__init__(f"Unknown filter type: {filter_type}{where}")


class IndexOutOfRangeError(RangeError):
    def __init__(self, index, limit):
        self.index = index
        self.limit = limit
        super().__init__(f"Palette index {index} out of bounds [0, {limit})")


class CoordinateOutOfRangeError(RangeError):
    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"Coordinate ({x}, {y}) out of bounds for {width}x{height} image")


class PaletteIndexOutOfRangeError(RangeError):
    def __init__(self, index, limit):
        self.index = index
        self.limit = limit
        super().__init__(f"Pixel palette index {index} out of bounds [0, {limit})")


class BufferLengthMismatchError(PaletteImageError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid buffer length: expected {expected} bytes, got {actual}")


class PaletteOverflowError(PaletteImageError):
    def __init__(self, count, limit):
        self.count = count
        self.limit = limit
        super().__init__(
            f"Image has too many unique colors ({count} > {limit}). Try enabling the 'quantize' flag."
        )
