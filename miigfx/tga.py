"""Decoding of TGA images into packed 32-bit pixels."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .tgaheader import HEADER_SIZE, ImageType, TgaError, TgaHeader, decode_rle

_OPAQUE = 0xFF
_MISSING_COLOR = 0xFFFFFFFF


@dataclass(frozen=True)
class TgaOrder:
    """Bit positions of each channel inside a packed 32-bit pixel."""

    red_shift: int
    green_shift: int
    blue_shift: int
    alpha_shift: int

    def pack(self, r: int, g: int, b: int, a: int) -> int:
        """Pack four 8-bit channels into one unsigned 32-bit value."""
        value = (
            (r << self.red_shift)
            | (g << self.green_shift)
            | (b << self.blue_shift)
            | (a << self.alpha_shift)
        )
        return value & 0xFFFFFFFF


ARGB = TgaOrder(16, 8, 0, 24)
ABGR = TgaOrder(0, 8, 16, 24)
RGBA = TgaOrder(24, 16, 8, 0)


def _require(data: bytes, end: int, what: str) -> None:
    if len(data) < end:
        raise TgaError(f"TGA {what} is truncated: need {end} bytes, have {len(data)}")


def _rgb_colors(
    data: bytes, offset: int, width: int, height: int, depth: int, order: TgaOrder
) -> Iterator[int]:
    if depth not in (24, 32):
        raise TgaError(f"unsupported RGB depth {depth}")
    step = depth // 8
    end = offset + step * width * height
    _require(data, end, "RGB data")
    for pos in range(offset, end, step):
        b, g, r = data[pos], data[pos + 1], data[pos + 2]
        a = data[pos + 3] if step == 4 else _OPAQUE
        yield order.pack(r, g, b, a)


def _grayscale_colors(
    data: bytes, offset: int, width: int, height: int, depth: int, order: TgaOrder
) -> Iterator[int]:
    if depth not in (8, 16):
        raise TgaError(f"unsupported grayscale depth {depth}")
    step = depth // 8
    end = offset + step * width * height
    _require(data, end, "grayscale data")
    for pos in range(offset, end, step):
        e = data[pos]
        a = data[pos + 1] if step == 2 else _OPAQUE
        yield order.pack(e, e, e, a)


def _colormap_colors(
    data: bytes,
    offset: int,
    width: int,
    height: int,
    depth: int,
    palette: bytes,
    origin: int,
    order: TgaOrder,
) -> Iterator[int]:
    if depth not in (24, 32):
        raise TgaError(f"unsupported colour map depth {depth}")
    entry = depth // 8
    end = offset + width * height
    _require(data, end, "colour-mapped data")
    for raw in data[offset:end]:
        index = raw - origin
        if index < 0:
            yield _MISSING_COLOR
            continue
        base = HEADER_SIZE + entry * index
        _require(palette, base + entry, "colour map")
        b, g, r = palette[base], palette[base + 1], palette[base + 2]
        a = palette[base + 3] if entry == 4 else _OPAQUE
        yield order.pack(r, g, b, a)


def _orient(header: TgaHeader, colors: Iterator[int]) -> list[int]:
    """Arrange pixels stored in file order into top-left, row-major order."""
    values = list(colors)
    width = header.width
    rows = [values[start:start + width] for start in range(0, len(values), width)] if width else []
    if header.right_origin:
        rows = [row[::-1] for row in rows]
    if not header.upper_origin:
        rows.reverse()
    return [pixel for row in rows for pixel in row]


def read_tga(data: bytes, order: TgaOrder = RGBA) -> list[int]:
    """Decode a TGA image into a list of packed pixels, top-left first."""
    header = TgaHeader.parse(data)
    kind = header.image_type
    if kind is None:
        raise TgaError(f"unsupported TGA image type {header.type_code}")

    width, height = header.width, header.height
    offset = header.image_data_offset
    if kind.is_rle:
        pixels = decode_rle(data, offset, width, height, header.depth)
        offset = 0
    else:
        pixels = data

    if kind in (ImageType.RGB, ImageType.RGB_RLE):
        colors = _rgb_colors(pixels, offset, width, height, header.depth, order)
    elif kind in (ImageType.GRAYSCALE, ImageType.GRAYSCALE_RLE):
        colors = _grayscale_colors(pixels, offset, width, height, header.depth, order)
    else:
        colors = _colormap_colors(
            pixels,
            offset,
            width,
            height,
            header.colormap_depth,
            data,
            header.colormap_origin,
            order,
        )
    return _orient(header, colors)