"""TrueType font container: table lookup, character mapping and glyph metrics."""

from __future__ import annotations

import struct

SCHRIFT_VERSION = "0.10.2"

FILE_MAGIC_ONE = 0x00010000
FILE_MAGIC_TWO = 0x74727565

_UINT32_MAX = 0xFFFFFFFF

# cmap (platform, encoding) pairs folded into one number, platform * 64 + encoding.
_FULL_REPERTOIRE = (0o004, 0o312)
_UNICODE_BMP = (0o003, 0o301)


class FontError(ValueError):
    """Raised when font data is malformed or a lookup cannot be satisfied."""


def version() -> str:
    """Version string of the font engine."""
    return SCHRIFT_VERSION


class Font:
    """A TrueType font held in memory."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.size = len(self.data)
        if self.size > _UINT32_MAX:
            raise FontError("font data is larger than 4 GiB")

        self._require(0, 12)
        scaler_type = self.u32(0)
        if scaler_type not in (FILE_MAGIC_ONE, FILE_MAGIC_TWO):
            raise FontError(f"unsupported font scaler type 0x{scaler_type:08X}")

        head = self.table_offset("head")
        self._require(head, 54)
        self.units_per_em = self.u16(head + 18)
        self.loca_format = self.i16(head + 50)

        hhea = self.table_offset("hhea")
        self._require(hhea, 36)
        self.num_long_hmtx = self.u16(hhea + 34)

    # -- raw access -------------------------------------------------------

    def is_safe_offset(self, offset: int, margin: int) -> bool:
        """True if ``margin`` bytes can be read starting at ``offset``."""
        if offset < 0 or offset > self.size:
            return False
        return self.size - offset >= margin

    def _require(self, offset: int, margin: int) -> None:
        if not self.is_safe_offset(offset, margin):
            raise FontError(f"font data too short: {margin} bytes at offset {offset}")

    def _unpack(self, fmt: str, offset: int) -> int:
        width = struct.calcsize(fmt)
        self._require(offset, width)
        return struct.unpack_from(fmt, self.data, offset)[0]

    def u8(self, offset: int) -> int:
        return self._unpack(">B", offset)

    def i8(self, offset: int) -> int:
        return self._unpack(">b", offset)

    def u16(self, offset: int) -> int:
        return self._unpack(">H", offset)

    def i16(self, offset: int) -> int:
        return self._unpack(">h", offset)

    def u32(self, offset: int) -> int:
        return self._unpack(">I", offset)

    # -- tables -----------------------------------------------------------

    def table_offset(self, tag: str | bytes) -> int:
        """Offset of the table named ``tag``; FontError if there is none."""
        key = tag.encode("latin-1") if isinstance(tag, str) else bytes(tag)
        if len(key) != 4:
            raise FontError(f"table tags are four bytes long, got {key!r}")
        num_tables = self.u16(4)
        self._require(12, num_tables * 16)
        low, high = 0, num_tables
        while low < high:
            mid = (low + high) // 2
            record = 12 + mid * 16
            sample = self.data[record:record + 4]
            if sample == key:
                return self.u32(record + 8)
            if key < sample:
                high = mid
            else:
                low = mid + 1
        raise FontError(f"font has no {key.decode('latin-1')!r} table")

    # -- character mapping ------------------------------------------------

    def glyph_id(self, codepoint: int) -> int:
        """Map a Unicode code point to a glyph index; 0 means missing glyph."""
        cmap = self.table_offset("cmap")
        self._require(cmap, 4)
        num_entries = self.u16(cmap + 2)
        self._require(cmap, 4 + num_entries * 8)

        entries = [cmap + 4 + idx * 8 for idx in range(num_entries)]

        for entry in entries:
            if self._cmap_type(entry) in _FULL_REPERTOIRE:
                table = cmap + self.u32(entry + 4)
                self._require(table, 8)
                fmt = self.u16(table)
                if fmt == 12:
                    return self._cmap_fmt12_13(table, codepoint, 12)
                raise FontError(f"unsupported full-repertoire cmap format {fmt}")

        for entry in entries:
            if self._cmap_type(entry) in _UNICODE_BMP:
                table = cmap + self.u32(entry + 4)
                self._require(table, 6)
                fmt = self.u16(table)
                if fmt == 4:
                    return self._cmap_fmt4(table + 6, codepoint)
                if fmt == 6:
                    return self._cmap_fmt6(table + 6, codepoint)
                raise FontError(f"unsupported BMP cmap format {fmt}")

        raise FontError("font has no usable Unicode cmap")

    def _cmap_type(self, entry: int) -> int:
        return self.u16(entry) * 0o100 + self.u16(entry + 2)

    def _cmap_fmt4(self, table: int, codepoint: int) -> int:
        if codepoint > 0xFFFF:
            return 0
        short_code = codepoint
        self._require(table, 8)
        seg_count_x2 = self.u16(table)
        if seg_count_x2 & 1 or not seg_count_x2:
            raise FontError(f"invalid cmap format 4 segment count {seg_count_x2}")
        end_codes = table + 8
        start_codes = end_codes + seg_count_x2 + 2
        id_deltas = start_codes + seg_count_x2
        id_range_offsets = id_deltas + seg_count_x2
        self._require(id_range_offsets, seg_count_x2)

        # Lower-bound search over segment end codes, clamped to the last segment.
        low, high = 0, seg_count_x2 // 2 - 1
        while low != high:
            mid = low + (high - low) // 2
            if short_code > self.u16(end_codes + mid * 2):
                low = mid + 1
            else:
                high = mid
        seg_idx_x2 = low * 2

        start_code = self.u16(start_codes + seg_idx_x2)
        if start_code > short_code:
            return 0
        id_delta = self.u16(id_deltas + seg_idx_x2)
        id_range_offset = self.u16(id_range_offsets + seg_idx_x2)
        if not id_range_offset:
            return (short_code + id_delta) & 0xFFFF
        id_offset = (
            id_range_offsets + seg_idx_x2 + id_range_offset + 2 * (short_code - start_code)
        )
        self._require(id_offset, 2)
        glyph = self.u16(id_offset)
        return (glyph + id_delta) & 0xFFFF if glyph else 0

    def _cmap_fmt6(self, table: int, codepoint: int) -> int:
        if codepoint > 0xFFFF:
            return 0
        self._require(table, 4)
        first_code = self.u16(table)
        entry_count = self.u16(table + 2)
        self._require(table, 4 + 2 * entry_count)
        if codepoint < first_code:
            raise FontError(f"code point {codepoint:#x} precedes the cmap range")
        index = codepoint - first_code
        if index >= entry_count:
            raise FontError(f"code point {codepoint:#x} is past the cmap range")
        return self.u16(table + 4 + 2 * index)

    def _cmap_fmt12_13(self, table: int, codepoint: int, which: int) -> int:
        self._require(table, 16)
        length = self.u32(table + 4)
        if length < 16:
            raise FontError(f"cmap format {which} table length {length} is too small")
        self._require(table, length)
        num_entries = self.u32(table + 12)
        for i in range(num_entries):
            group = table + 16 + i * 12
            first_code = self.u32(group)
            last_code = self.u32(group + 4)
            if first_code <= codepoint <= last_code:
                glyph_offset = self.u32(group + 8)
                if which == 12:
                    return (codepoint - first_code + glyph_offset) & _UINT32_MAX
                return glyph_offset
        return 0

    # -- glyph data -------------------------------------------------------

    def hor_metrics(self, glyph: int) -> tuple[int, int]:
        """Return ``(advance_width, left_side_bearing)`` in font units."""
        hmtx = self.table_offset("hmtx")
        if glyph < self.num_long_hmtx:
            offset = hmtx + 4 * glyph
            self._require(offset, 4)
            return self.u16(offset), self.i16(offset + 2)

        boundary = hmtx + 4 * self.num_long_hmtx
        if boundary < 4:
            raise FontError("horizontal metrics table has no long entries")
        offset = boundary - 4
        self._require(offset, 4)
        advance = self.u16(offset)
        offset = boundary + 2 * (glyph - self.num_long_hmtx)
        self._require(offset, 2)
        return advance, self.i16(offset)

    def outline_offset(self, glyph: int) -> int | None:
        """Offset of the glyph's outline, or None if the glyph has none."""
        loca = self.table_offset("loca")
        glyf = self.table_offset("glyf")
        if self.loca_format == 0:
            base = loca + 2 * glyph
            self._require(base, 4)
            this = 2 * self.u16(base)
            following = 2 * self.u16(base + 2)
        else:
            base = loca + 4 * glyph
            self._require(base, 8)
            this = self.u32(base)
            following = self.u32(base + 4)
        return None if this == following else glyf + this

    def bbox(self, outline: int) -> tuple[int, int, int, int]:
        """Bounding box ``(x_min, y_min, x_max, y_max)`` of an outline, in font units."""
        self._require(outline, 10)
        box = (
            self.i16(outline + 2),
            self.i16(outline + 4),
            self.i16(outline + 6),
            self.i16(outline + 8),
        )
        if box[2] <= box[0] or box[3] <= box[1]:
            raise FontError(f"degenerate glyph bounding box {box}")
        return box