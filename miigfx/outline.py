"""Glyph outlines: decoding from the glyf table, transformation and tesselation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from .font import Font, FontError

POINT_IS_ON_CURVE = 0x01
X_CHANGE_IS_SMALL = 0x02
Y_CHANGE_IS_SMALL = 0x04
REPEAT_FLAG = 0x08
X_CHANGE_IS_ZERO = 0x10
X_CHANGE_IS_POSITIVE = 0x10
Y_CHANGE_IS_ZERO = 0x20
Y_CHANGE_IS_POSITIVE = 0x20

OFFSETS_ARE_LARGE = 0x001
ACTUAL_XY_OFFSETS = 0x002
GOT_A_SINGLE_SCALE = 0x008
THERE_ARE_MORE_COMPONENTS = 0x020
GOT_AN_X_AND_Y_SCALE = 0x040
GOT_A_SCALE_MATRIX = 0x080

# Points, lines and curves are each limited to what a 16-bit capacity can double up to.
_MAX_ITEMS = 32768
_MAX_RECURSION = 4
_TESSELATION_STACK = 10
_FLATNESS = 2.0


@dataclass(frozen=True)
class Point:
    """A point in outline space."""

    x: float
    y: float

    def midpoint(self, other: "Point") -> "Point":
        return Point(0.5 * (self.x + other.x), 0.5 * (self.y + other.y))


Matrix = Sequence[float]


def _apply(point: Point, m: Matrix) -> Point:
    return Point(
        point.x * m[0] + point.y * m[2] + m[4],
        point.x * m[1] + point.y * m[3] + m[5],
    )


@dataclass
class Outline:
    """Points plus the straight lines ``(beg, end)`` and quadratic curves
    ``(beg, end, ctrl)`` connecting them, by point index."""

    points: list[Point] = field(default_factory=list)
    curves: list[tuple[int, int, int]] = field(default_factory=list)
    lines: list[tuple[int, int]] = field(default_factory=list)

    # -- growth -----------------------------------------------------------

    def _add_point(self, point: Point) -> int:
        if len(self.points) >= _MAX_ITEMS:
            raise FontError("outline has too many points")
        self.points.append(point)
        return len(self.points) - 1

    def _add_line(self, beg: int, end: int) -> None:
        if len(self.lines) >= _MAX_ITEMS:
            raise FontError("outline has too many lines")
        self.lines.append((beg, end))

    def _add_curve(self, beg: int, end: int, ctrl: int) -> None:
        if len(self.curves) >= _MAX_ITEMS:
            raise FontError("outline has too many curves")
        self.curves.append((beg, end, ctrl))

    # -- geometry ---------------------------------------------------------

    def _transform_from(self, start: int, matrix: Matrix) -> None:
        self.points[start:] = [_apply(p, matrix) for p in self.points[start:]]

    def transform(self, matrix: Matrix) -> None:
        """Apply the affine matrix ``(a, b, c, d, e, f)`` to every point."""
        if len(matrix) != 6:
            raise ValueError("an affine matrix has six entries")
        self._transform_from(0, matrix)

    def clip(self, width: int, height: int) -> None:
        """Clamp every point into ``[0, width) x [0, height)``."""
        max_x = math.nextafter(width, 0.0)
        max_y = math.nextafter(height, 0.0)

        def clamp(value: float, limit: int, top: float) -> float:
            if value < 0.0:
                return 0.0
            if value >= limit:
                return top
            return value

        self.points = [
            Point(clamp(p.x, width, max_x), clamp(p.y, height, max_y)) for p in self.points
        ]

    # -- tesselation ------------------------------------------------------

    def _is_flat(self, curve: tuple[int, int, int]) -> bool:
        beg, end, ctrl = curve
        a, b, c = self.points[beg], self.points[ctrl], self.points[end]
        gx, gy = b.x - a.x, b.y - a.y
        hx, hy = c.x - a.x, c.y - a.y
        return abs(gx * hy - hx * gy) <= _FLATNESS

    def _tesselate_curve(self, curve: tuple[int, int, int]) -> None:
        stack: list[tuple[int, int, int]] = []
        while True:
            if self._is_flat(curve) or len(stack) >= _TESSELATION_STACK:
                self._add_line(curve[0], curve[1])
                if not stack:
                    return
                curve = stack.pop()
            else:
                beg, end, ctrl = curve
                ctrl0 = self._add_point(self.points[beg].midpoint(self.points[ctrl]))
                ctrl1 = self._add_point(self.points[ctrl].midpoint(self.points[end]))
                pivot = self._add_point(self.points[ctrl0].midpoint(self.points[ctrl1]))
                stack.append((beg, pivot, ctrl0))
                curve = (pivot, end, ctrl1)

    def tesselate_curves(self) -> None:
        """Approximate every curve by straight lines appended to ``lines``."""
        for curve in list(self.curves):
            self._tesselate_curve(curve)


# -- decoding -------------------------------------------------------------


def _require(font: Font, offset: int, margin: int) -> None:
    if not font.is_safe_offset(offset, margin):
        raise FontError(f"glyph data too short: {margin} bytes at offset {offset}")


def _simple_flags(font: Font, offset: int, num_pts: int) -> tuple[list[int], int]:
    flags: list[int] = []
    value = 0
    repeat = 0
    while len(flags) < num_pts:
        if repeat:
            repeat -= 1
        else:
            _require(font, offset, 1)
            value = font.u8(offset)
            offset += 1
            if value & REPEAT_FLAG:
                _require(font, offset, 1)
                repeat = font.u8(offset)
                offset += 1
        flags.append(value)
    return flags, offset


def _coordinates(
    font: Font, offset: int, flags: list[int], small: int, same_or_positive: int
) -> tuple[list[float], int]:
    values: list[float] = []
    accum = 0
    for flag in flags:
        if flag & small:
            _require(font, offset, 1)
            delta = font.u8(offset)
            offset += 1
            accum += delta if flag & same_or_positive else -delta
        elif not flag & same_or_positive:
            _require(font, offset, 2)
            accum += font.i16(offset)
            offset += 2
        values.append(float(accum))
    return values, offset


def _decode_contour(flags: list[int], base: int, count: int, outline: Outline) -> None:
    # Contours of fewer than two points have no area and are skipped.
    if count < 2:
        return

    if flags[0] & POINT_IS_ON_CURVE:
        loose_end = base
        base += 1
        flags = flags[1:]
        count -= 1
    elif flags[count - 1] & POINT_IS_ON_CURVE:
        count -= 1
        loose_end = base + count
    else:
        loose_end = outline._add_point(
            outline.points[base].midpoint(outline.points[base + count - 1])
        )

    beg = loose_end
    ctrl: int | None = None
    for cur, flag in zip(range(base, base + count), flags):
        if flag & POINT_IS_ON_CURVE:
            if ctrl is not None:
                outline._add_curve(beg, cur, ctrl)
            else:
                outline._add_line(beg, cur)
            beg = cur
            ctrl = None
        else:
            if ctrl is not None:
                center = outline._add_point(
                    outline.points[ctrl].midpoint(outline.points[cur])
                )
                outline._add_curve(beg, center, ctrl)
                beg = center
            ctrl = cur

    if ctrl is not None:
        outline._add_curve(beg, loose_end, ctrl)
    else:
        outline._add_line(beg, loose_end)


def _simple_outline(font: Font, offset: int, num_contours: int, outline: Outline) -> None:
    base_point = len(outline.points)

    _require(font, offset, num_contours * 2 + 2)
    num_pts = font.u16(offset + (num_contours - 1) * 2)
    if num_pts >= 0xFFFF:
        raise FontError("glyph has too many points")
    num_pts += 1
    if base_point + num_pts > _MAX_ITEMS:
        raise FontError("outline has too many points")

    end_pts = [font.u16(offset + 2 * i) for i in range(num_contours)]
    offset += 2 * num_contours
    # Falling end points make no sense and only appear in malicious input.
    if any(nxt < prev + 1 for prev, nxt in zip(end_pts, end_pts[1:])):
        raise FontError("glyph contour end points are not increasing")
    offset += 2 + font.u16(offset)

    flags, offset = _simple_flags(font, offset, num_pts)
    xs, offset = _coordinates(font, offset, flags, X_CHANGE_IS_SMALL, X_CHANGE_IS_POSITIVE)
    ys, offset = _coordinates(font, offset, flags, Y_CHANGE_IS_SMALL, Y_CHANGE_IS_POSITIVE)
    outline.points.extend(Point(x, y) for x, y in zip(xs, ys))

    beg = 0
    for end in end_pts:
        _decode_contour(flags[beg:], base_point + beg, end - beg + 1, outline)
        beg = end + 1


def _compound_outline(font: Font, offset: int, depth: int, outline: Outline) -> None:
    # Guards against compound glyphs that contain themselves.
    if depth >= _MAX_RECURSION:
        raise FontError("compound glyphs nest too deeply")
    while True:
        _require(font, offset, 4)
        flags = font.u16(offset)
        glyph = font.u16(offset + 2)
        offset += 4
        if not flags & ACTUAL_XY_OFFSETS:
            raise FontError("compound glyph point matching is not supported")

        if flags & OFFSETS_ARE_LARGE:
            _require(font, offset, 4)
            dx, dy = float(font.i16(offset)), float(font.i16(offset + 2))
            offset += 4
        else:
            _require(font, offset, 2)
            dx, dy = float(font.i8(offset)), float(font.i8(offset + 1))
            offset += 2

        a, b, c, d = 1.0, 0.0, 0.0, 1.0
        if flags & GOT_A_SINGLE_SCALE:
            _require(font, offset, 2)
            a = d = font.i16(offset) / 16384.0
            offset += 2
        elif flags & GOT_AN_X_AND_Y_SCALE:
            _require(font, offset, 4)
            a = font.i16(offset) / 16384.0
            d = font.i16(offset + 2) / 16384.0
            offset += 4
        elif flags & GOT_A_SCALE_MATRIX:
            _require(font, offset, 8)
            a, b, c, d = (font.i16(offset + 2 * k) / 16384.0 for k in range(4))
            offset += 8

        component = font.outline_offset(glyph)
        if component is not None:
            base_point = len(outline.points)
            _decode_into(font, component, depth + 1, outline)
            outline._transform_from(base_point, (a, b, c, d, dx, dy))

        if not flags & THERE_ARE_MORE_COMPONENTS:
            return


def _decode_into(font: Font, offset: int, depth: int, outline: Outline) -> None:
    _require(font, offset, 10)
    num_contours = font.i16(offset)
    if num_contours > 0:
        _simple_outline(font, offset + 10, num_contours, outline)
    elif num_contours < 0:
        _compound_outline(font, offset + 10, depth, outline)


def decode_outline(font: Font, offset: int) -> Outline:
    """Decode the glyph outline stored at ``offset`` in ``font``."""
    outline = Outline()
    _decode_into(font, offset, 0, outline)
    return outline