class BMPError(ValueError):
    """Base class for every error raised while reading or converting a BMP."""


class BMPBoundsError(BMPError):
    """A read would fall outside the loaded file."""


class UnsupportedFormatError(BMPError):
    pass


class DegenerateGeometryError(BMPError):
    pass


class PaddingMismatchError(BMPError):
    pass


# Fixed header field locations: (offset, length in bytes)
DATA_OFFSET_FIELD = (0x0A, 4)
WIDTH_FIELD = (0x12, 4)
HEIGHT_FIELD = (0x16, 4)
BPP_FIELD = (0x1C, 2)
DATA_SIZE_FIELD = (0x22, 4)


def read_le(buf, offset, length):
    # Unsigned little-endian integer of `length` bytes starting at `offset`
    if not 1 <= length <= 4:
        raise BMPBoundsError(f"Field length must be 1-4 bytes, got {length}")
    if offset < 0 or offset + length > len(buf):
        raise BMPBoundsError(
            f"Header field at 0x{offset:X} ({length} bytes) is past end of file ({len(buf)} bytes)"
        )
    value = 0
    for i in range(length):
        value += buf[offset + i] << (8 * i)
    return value


class BMPHeader:
    def __init__(self, data_offset, width, height, bpp, data_size):
        self.data_offset = data_offset  # where pixel data starts
        self.width = width
        self.height = height
        self.bpp = bpp                  # bits per pixel
        self.data_size = data_size      # pixel data length, row padding included

    @classmethod
    def parse(cls, buf):
        return cls(
            data_offset=read_le(buf, *DATA_OFFSET_FIELD),
            width=read_le(buf, *WIDTH_FIELD),
            height=read_le(buf, *HEIGHT_FIELD),
            bpp=read_le(buf, *BPP_FIELD),
            data_size=read_le(buf, *DATA_SIZE_FIELD),
        )

    @property
    def padding(self):
        # Filler bytes after each row. Callers must reject height == 0 first.
        return (self.data_size - self.width * self.height) // self.height

    def as_dict(self):
        return {
            'data_offset': self.data_offset,
            'width': self.width,
            'height': self.height,
            'bpp': self.bpp,
            'data_size': self.data_size,
        }

    def __eq__(self, other):
        if not isinstance(other, BMPHeader):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        fields = ", ".join(f"{k}={v}" for k, v in self.as_dict().items())
        return f"BMPHeader({fields})"


class BMPParser:
    def __init__(self, filepath=None):
        self.filepath = filepath
        self.metadata = {}      # Header fields shown to the user (width, height, etc.)
        self.header = None
        self.bmp_bytes = b""

    @classmethod
    def from_bytes(cls, data):
        parser = cls()
        parser.bmp_bytes = bytes(data)
        parser._parse_header()
        return parser

    def load(self):
        # Read the entire BMP file into memory
        with open(self.filepath, "rb") as f:
            self.bmp_bytes = f.read()
        self._parse_header()
        return self

    def _parse_header(self):
        self.header = BMPHeader.parse(self.bmp_bytes)
        self.metadata = {'file_size': len(self.bmp_bytes)}
        self.metadata.update(self.header.as_dict())
