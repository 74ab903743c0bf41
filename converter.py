import os
import tempfile
import time

from bmp_parser import (
    BMPBoundsError,
    BMPParser,
    DegenerateGeometryError,
    PaddingMismatchError,
    UnsupportedFormatError,
)

# Map symbols
SYMBOL_WHITE = 0x00   # palette index 0xFF
SYMBOL_BLACK = 0x01   # palette index 0x00
SYMBOL_OTHER = 0x02   # every other index

# Preview colour per symbol, (R, G, B)
SYMBOL_COLORS = {
    SYMBOL_WHITE: (255, 255, 255),
    SYMBOL_BLACK: (0, 0, 0),
    SYMBOL_OTHER: (128, 128, 128),
}


def remap_pixel(value):
    if value == 0xFF:
        return SYMBOL_WHITE
    if value == 0x00:
        return SYMBOL_BLACK
    return SYMBOL_OTHER


SYMBOL_TABLE = bytes(remap_pixel(v) for v in range(256))


def read_span(buf, offset, length):
    # Every pixel read goes through here
    if offset < 0 or offset + length > len(buf):
        raise BMPBoundsError(
            f"Pixel read at offset {offset} ({length} bytes) is outside the file ({len(buf)} bytes)"
        )
    return buf[offset:offset + length]


def validate(header, buffer_len, strict=False):
    """Check the header before any pixel arithmetic is done.

    Only 8 bpp images are accepted; the compression field is never looked at.
    With ``strict`` the padding implied by ``data_size`` must also match the
    usual 4-byte row alignment.
    """
    if header.bpp != 8:
        raise UnsupportedFormatError(f"needs to be 256 colors! (got {header.bpp} bpp)")
    if header.width == 0 or header.height == 0:
        raise DegenerateGeometryError(
            f"Image has no pixels ({header.width}x{header.height})"
        )

    pixel_count = header.width * header.height
    if header.data_size < pixel_count:
        raise BMPBoundsError(
            f"Pixel data size {header.data_size} is smaller than "
            f"{header.width}x{header.height} = {pixel_count} pixels"
        )
    if header.data_offset + header.data_size > buffer_len:
        raise BMPBoundsError(
            f"Pixel data ({header.data_size} bytes at offset {header.data_offset}) "
            f"runs past end of file ({buffer_len} bytes)"
        )

    if strict:
        extra = header.data_size - pixel_count
        expected = (-header.width) % 4
        if extra % header.height != 0 or header.padding != expected:
            raise PaddingMismatchError(
                f"Row padding from header is {extra / header.height:g} bytes, "
                f"4-byte alignment needs {expected}"
            )


def row_offsets(header):
    # Rows are stored bottom first: start at the last stored row and walk back
    stride = header.width + header.padding
    offset = header.data_offset + header.data_size - header.width - header.padding
    offsets = []
    for _ in range(header.height):
        offsets.append(offset)
        offset -= stride
    return offsets


def extract_pixels(buf, header):
    pixels = bytearray()
    for offset in row_offsets(header):
        # padding bytes at the end of each row are skipped
        pixels.extend(read_span(buf, offset, header.width))
    return pixels


def remap(pixels):
    return bytes(pixels).translate(SYMBOL_TABLE)


def convert_bytes(data, strict=False):
    header = BMPParser.from_bytes(data).header
    validate(header, len(data), strict=strict)
    return remap(extract_pixels(data, header))


def symbol_rows(map_data, width):
    # Split a flat map back into rows, top row first
    if width <= 0:
        return []
    return [list(map_data[i:i + width]) for i in range(0, len(map_data), width)]


def write_map(output_path, data):
    # Written next to the target and renamed over it, so a failed write leaves nothing behind
    directory = os.path.dirname(os.path.abspath(output_path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".bmp2map-", suffix=".tmp")
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        # mkstemp creates the file 0600; give it the mode a plain open() would
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, output_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class MapConverter:

    def __init__(self, strict=False):
        self.strict = strict

    def convert(self, input_path, output_path):
        start_time = time.time()

        parser = BMPParser(input_path).load()
        header = parser.header
        map_data = convert_bytes(parser.bmp_bytes, strict=self.strict)
        # source buffer is not needed past this point
        parser.bmp_bytes = b""

        write_map(output_path, map_data)
        end_time = time.time()

        return {
            "width": header.width,
            "height": header.height,
            "padding": header.padding,
            "input_size": parser.metadata["file_size"],
            "output_size": len(map_data),
            "time_ms": (end_time - start_time) * 1000,
            "map_data": map_data,
        }
