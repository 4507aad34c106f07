from palettepng.errors import BufferLengthMismatchError, TruncatedScanlineDataError, UnknownFilterTypeError

FILTER_NONE = 0
FILTER_SUB = 1
FILTER_UP = 2
FILTER_AVERAGE = 3
FILTER_PAETH = 4

# Indexed color at bit depth 8: one byte per pixel, so "left" is the previous byte
BYTES_PER_PIXEL = 1


def paeth_predictor(left, above, upper_left):
    """
    Pick whichever of left, above, upper_left is closest to left + above - upper_left.
    Ties go to left, then above, then upper_left.
    """
    p = left + above - upper_left
    p_left = abs(p - left)
    p_above = abs(p - above)
    p_upper_left = abs(p - upper_left)

    if p_left <= p_above and p_left <= p_upper_left:
        return left
    if p_above <= p_upper_left:
        return above
    return upper_left


def _unfilter_none(scanline, prior_row):
    """
    Filter type 0: No filter applied, so raw bytes are already correct.
    """
    return bytearray(scanline)


def _unfilter_sub(scanline, prior_row):
    """
    Filter type 1 (Sub): add the reconstructed byte to the left.
    """
    recon = bytearray(len(scanline))
    for i in range(len(scanline)):
        left = recon[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0
        recon[i] = (scanline[i] + left) & 0xFF
    return recon


def _unfilter_up(scanline, prior_row):
    """
    Filter type 2 (Up): add the byte from the previous row (same column).
    """
    recon = bytearray(len(scanline))
    for i in range(len(scanline)):
        recon[i] = (scanline[i] + prior_row[i]) & 0xFF
    return recon


def _unfilter_average(scanline, prior_row):
    """
    Filter type 3 (Average): add floor((left + above) / 2).
    """
    recon = bytearray(len(scanline))
    for i in range(len(scanline)):
        left = recon[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0
        recon[i] = (scanline[i] + ((left + prior_row[i]) >> 1)) & 0xFF
    return recon


def _unfilter_paeth(scanline, prior_row):
    """
    Filter type 4 (Paeth): add the Paeth prediction from left, above and upper-left.
    """
    recon = bytearray(len(scanline))
    for i in range(len(scanline)):
        left = recon[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0
        upper_left = prior_row[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0
        recon[i] = (scanline[i] + paeth_predictor(left, prior_row[i], upper_left)) & 0xFF
    return recon


_UNFILTERS = {
    FILTER_NONE: _unfilter_none,
    FILTER_SUB: _unfilter_sub,
    FILTER_UP: _unfilter_up,
    FILTER_AVERAGE: _unfilter_average,
    FILTER_PAETH: _unfilter_paeth,
}


def unfilter_scanlines(data, width, height):
    """
    Reverse the per-row PNG filters of an inflated IDAT stream.

    The stream is `height` rows of `width + 1` bytes: a filter-type tag followed
    by `width` filtered bytes. Rows are rebuilt top to bottom since every filter
    but None depends on already reconstructed neighbours; the row above the
    first row is all zeros. Bytes past `height * (width + 1)` are ignored.

    Returns the reconstructed bytes as one flat row-major bytearray.
    """
    stride = width + 1
    expected = height * stride
    if len(data) < expected:
        raise TruncatedScanlineDataError(expected, len(data))

    pixels = bytearray(width * height)
    prior_row = bytearray(width)
    offset = 0

    for y in range(height):
        filter_type = data[offset]
        unfilter = _UNFILTERS.get(filter_type)
        if unfilter is None:
            raise UnknownFilterTypeError(filter_type, y)

        recon = unfilter(data[offset + 1:offset + stride], prior_row)
        pixels[y * width:(y + 1) * width] = recon
        prior_row = recon
        offset += stride

    return pixels


def filter_row(filter_type, row, prior_row):
    """
    Forward transform of a single row: the inverse of the matching _unfilter_* function.
    """
    out = bytearray(len(row))
    for i in range(len(row)):
        left = row[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0
        above = prior_row[i]
        upper_left = prior_row[i - BYTES_PER_PIXEL] if i >= BYTES_PER_PIXEL else 0

        if filter_type == FILTER_NONE:
            predicted = 0
        elif filter_type == FILTER_SUB:
            predicted = left
        elif filter_type == FILTER_UP:
            predicted = above
        elif filter_type == FILTER_AVERAGE:
            predicted = (left + above) >> 1
        elif filter_type == FILTER_PAETH:
            predicted = paeth_predictor(left, above, upper_left)
        else:
            raise UnknownFilterTypeError(filter_type)

        out[i] = (row[i] - predicted) & 0xFF
    return out


def filter_scanlines(pixels, width, height, filter_type=FILTER_NONE):
    """
    Build the scanline stream for IDAT: every row prefixed with its filter tag.
    The PNG encoder only ever uses FILTER_NONE (tag 0 + the raw index bytes).
    """
    if len(pixels) != width * height:
        raise BufferLengthMismatchError(width * height, len(pixels))
    if filter_type not in _UNFILTERS:
        raise UnknownFilterTypeError(filter_type)

    stride = width + 1
    filtered = bytearray(height * stride)
    prior_row = bytes(width)

    for y in range(height):
        row = pixels[y * width:(y + 1) * width]
        filtered[y * stride] = filter_type
        if filter_type == FILTER_NONE:
            filtered[y * stride + 1:(y + 1) * stride] = row
        else:
            filtered[y * stride + 1:(y + 1) * stride] = filter_row(filter_type, row, prior_row)
        prior_row = row

    return bytes(filtered)
