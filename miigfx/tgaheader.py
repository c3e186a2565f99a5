"""TGA header parsing and run-length decoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

HEADER_SIZE = 18
RIGHT_ORIGIN = 0x10
UPPER_ORIGIN = 0x20

_HEADER = struct.Struct("<BBBHHBHHHHBB")


class TgaError(ValueError):
    """Raised when TGA data is truncated or malformed."""


class ImageType(IntEnum):
    """Image types understood by the reader."""

    COLORMAP = 1
    RGB = 2
    GRAYSCALE = 3
    COLORMAP_RLE = 9
    RGB_RLE = 10
    GRAYSCALE_RLE = 11

    @property
    def is_rle(self) -> bool:
        return self in (ImageType.COLORMAP_RLE, ImageType.RGB_RLE, ImageType.GRAYSCALE_RLE)

    @property
    def is_colormap(self) -> bool:
        return self in (ImageType.COLORMAP, ImageType.COLORMAP_RLE)


@dataclass(frozen=True)
class TgaHeader:
    """The fixed 18-byte header at the start of a TGA file."""

    id_length: int
    colormap_type: int
    type_code: int
    colormap_origin: int
    colormap_length: int
    colormap_depth: int
    x_origin: int
    y_origin: int
    width: int
    height: int
    depth: int
    descriptor: int

    @classmethod
    def parse(cls, data: bytes) -> "TgaHeader":
        """Parse the header from the start of ``data``."""
        if len(data) < HEADER_SIZE:
            raise TgaError(f"TGA header needs {HEADER_SIZE} bytes, got {len(data)}")
        return cls(*_HEADER.unpack_from(data))

    @property
    def image_type(self) -> ImageType | None:
        """The image type, or None if it is not one the reader handles."""
        try:
            return ImageType(self.type_code)
        except ValueError:
            return None

    @property
    def right_origin(self) -> bool:
        return bool(self.descriptor & RIGHT_ORIGIN)

    @property
    def upper_origin(self) -> bool:
        return bool(self.descriptor & UPPER_ORIGIN)

    @property
    def image_data_offset(self) -> int:
        """Offset of the pixel data; the colour map sits before it."""
        kind = self.image_type
        if kind is not None and kind.is_colormap:
            return HEADER_SIZE + (self.colormap_depth // 8) * self.colormap_length
        return HEADER_SIZE


def _read_u16(data: bytes, offset: int) -> int:
    if len(data) < offset + 2:
        raise TgaError(f"TGA data too short to read offset {offset}")
    return data[offset] | data[offset + 1] << 8


def get_width(data: bytes) -> int:
    """Return the image width stored in the header."""
    return _read_u16(data, 12)


def get_height(data: bytes) -> int:
    """Return the image height stored in the header."""
    return _read_u16(data, 14)


def decode_rle(data: bytes, offset: int, width: int, height: int, depth: int) -> bytes:
    """Expand run-length encoded pixel data starting at ``offset``."""
    element_count = depth // 8
    total = element_count * width * height
    out = bytearray()
    pos = offset
    while len(out) < total:
        if pos >= len(data):
            raise TgaError("RLE data ends before the image is complete")
        packet = data[pos]
        pos += 1
        if packet & 0x80:
            element = bytes(data[pos:pos + element_count])
            if len(element) < element_count:
                raise TgaError("RLE run packet is truncated")
            pos += element_count
            out += element * ((packet & 0x7F) + 1)
        else:
            size = (packet + 1) * element_count
            chunk = bytes(data[pos:pos + size])
            if len(chunk) < size:
                raise TgaError("RLE raw packet is truncated")
            pos += size
            out += chunk
    return bytes(out[:total])