import struct

import pytest

PALETTE = b"".join(bytes([i, i, i, 0]) for i in range(256))
DATA_OFFSET = 14 + 40 + len(PALETTE)


def make_bmp(rows, width, height, bpp=8, padding=None, data_size=None, truncate=0):
    """Build an uncompressed BMP from ``rows`` given in stored order (bottom row first)."""
    if padding is None:
        padding = (-width) % 4
    pixel_data = b"".join(bytes(row) + b"\x00" * padding for row in rows)
    if data_size is None:
        data_size = len(pixel_data)

    file_size = DATA_OFFSET + len(pixel_data)
    file_header = struct.pack('<2sIHHI', b'BM', file_size, 0, 0, DATA_OFFSET)
    info_header = struct.pack('<IiiHHIIiiII', 40, width, height, 1, bpp, 0,
                              data_size, 2835, 2835, 256, 0)
    data = file_header + info_header + PALETTE + pixel_data
    if truncate:
        data = data[:-truncate]
    return data


@pytest.fixture
def bmp_file(tmp_path):
    def write(name="image.bmp", **kwargs):
        path = tmp_path / name
        path.write_bytes(make_bmp(**kwargs))
        return path
    return write
