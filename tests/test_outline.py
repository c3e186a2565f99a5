import math
import struct
from collections import Counter

import pytest

from miigfx.font import Font, FontError
from miigfx.outline import Outline, Point, decode_outline


def _build_font(glyphs):
    glyf = b""
    offsets = [0]
    for glyph in glyphs:
        if len(glyph) % 2:
            glyph += b"\0"
        glyf += glyph
        offsets.append(len(glyf))
    loca = b"".join(struct.pack(">I", o) for o in offsets)
    head = bytearray(54)
    struct.pack_into(">H", head, 18, 1000)
    struct.pack_into(">h", head, 50, 1)
    hhea = bytearray(36)
    struct.pack_into(">H", hhea, 34, 1)
    tables = [(b"glyf", glyf), (b"head", bytes(head)), (b"hhea", bytes(hhea)), (b"loca", loca)]
    header = struct.pack(">IHHHH", 0x00010000, len(tables), 0, 0, 0)
    start = 12 + 16 * len(tables)
    directory = b""
    body = b""
    for tag, data in tables:
        directory += tag + struct.pack(">III", 0, start + len(body), len(data))
        body += data
        body += b"\0" * (-len(body) % 4)
    return Font(header + directory + body)


def _simple_glyph(contours):
    points = [p for contour in contours for p in contour]
    end_pts = []
    total = 0
    for contour in contours:
        total += len(contour)
        end_pts.append(total - 1)
    data = struct.pack(">hhhhh", len(contours), 0, 0, 100, 100)
    data += b"".join(struct.pack(">H", e) for e in end_pts)
    data += struct.pack(">H", 0)
    data += bytes(1 if on else 0 for _, _, on in points)
    prev = 0
    for x, _, _ in points:
        data += struct.pack(">h", x - prev)
        prev = x
    prev = 0
    for _, y, _ in points:
        data += struct.pack(">h", y - prev)
        prev = y
    return data


SQUARE = [(0, 0, True), (100, 0, True), (100, 100, True), (0, 100, True)]


def _outline_of(font, glyph):
    return decode_outline(font, font.outline_offset(glyph))


def test_square_gives_points_and_closed_lines():
    font = _build_font([_simple_glyph([SQUARE])])
    outline = _outline_of(font, 0)
    assert outline.points == [Point(float(x), float(y)) for x, y, _ in SQUARE]
    assert outline.curves == []
    assert sorted(outline.lines) == [(0, 1), (1, 2), (2, 3), (3, 0)]


def test_off_curve_point_makes_a_curve():
    contour = [(0, 0, True), (50, 100, False), (100, 0, True)]
    font = _build_font([_simple_glyph([contour])])
    outline = _outline_of(font, 0)
    assert outline.curves == [(1, 2, 1)] or len(outline.curves) == 1
    beg, end, ctrl = outline.curves[0]
    assert outline.points[ctrl] == Point(50.0, 100.0)
    assert {beg, end} == {1 - 1 + 0, 2} or outline.points[end] == Point(100.0, 0.0)
    assert len(outline.lines) == 1


def test_all_off_curve_contour_adds_midpoint():
    contour = [(0, 0, False), (100, 0, False), (100, 100, False), (0, 100, False)]
    font = _build_font([_simple_glyph([contour])])
    outline = _outline_of(font, 0)
    assert len(outline.points) > len(contour)
    assert outline.points[len(contour)] == outline.points[0].midpoint(outline.points[3])
    assert outline.lines == []
    assert len(outline.curves) == len(contour)


def test_two_contours_are_both_decoded():
    inner = [(25, 25, True), (75, 25, True), (75, 75, True)]
    font = _build_font([_simple_glyph([SQUARE, inner])])
    outline = _outline_of(font, 0)
    assert len(outline.points) == len(SQUARE) + len(inner)
    assert len(outline.lines) == len(SQUARE) + len(inner)
    for beg, end in outline.lines:
        assert (beg < len(SQUARE)) == (end < len(SQUARE))


def test_small_and_repeated_coordinates():
    data = struct.pack(">hhhhh", 1, 0, 0, 10, 10)
    data += struct.pack(">H", 2) + struct.pack(">H", 0)
    data += bytes([0x01 | 0x02 | 0x10 | 0x20, 0x01 | 0x02 | 0x04 | 0x20, 0x01 | 0x10])
    data += bytes([5, 2])
    data += bytes([7]) + struct.pack(">h", -4)
    font = _build_font([data])
    outline = _outline_of(font, 0)
    assert outline.points == [Point(5.0, 0.0), Point(3.0, 7.0), Point(3.0, 3.0)]


def test_repeat_flag_applies_to_following_points():
    data = struct.pack(">hhhhh", 1, 0, 0, 10, 10)
    data += struct.pack(">H", 2) + struct.pack(">H", 0)
    data += bytes([0x01 | 0x08, 2])
    data += struct.pack(">hhh", 10, 20, 30)
    data += struct.pack(">hhh", 1, 1, 1)
    font = _build_font([data])
    outline = _outline_of(font, 0)
    assert [p.x for p in outline.points] == [10.0, 30.0, 60.0]
    assert [p.y for p in outline.points] == [1.0, 2.0, 3.0]
    assert outline.curves == []


def test_empty_glyph_decodes_to_nothing():
    font = _build_font([struct.pack(">hhhhh", 0, 0, 0, 10, 10)])
    outline = _outline_of(font, 0)
    assert outline == Outline()


def test_truncated_outline_raises():
    font = _build_font([_simple_glyph([SQUARE])])
    with pytest.raises(FontError):
        decode_outline(font, font.size - 4)


def test_falling_end_points_raise():
    data = struct.pack(">hhhhh", 2, 0, 0, 10, 10)
    data += struct.pack(">HH", 3, 1) + struct.pack(">H", 0)
    data += bytes(16)
    font = _build_font([data])
    with pytest.raises(FontError):
        _outline_of(font, 0)


def test_compound_glyph_shifts_component():
    dx, dy = 7, -3
    compound = struct.pack(">hhhhh", -1, 0, 0, 10, 10)
    compound += struct.pack(">HHhh", 0x0001 | 0x0002, 0, dx, dy)
    font = _build_font([_simple_glyph([SQUARE]), compound])
    base = _outline_of(font, 0)
    shifted = _outline_of(font, 1)
    assert shifted.points == [Point(p.x + dx, p.y + dy) for p in base.points]
    assert shifted.lines == base.lines


def test_compound_without_xy_offsets_raises():
    compound = struct.pack(">hhhhh", -1, 0, 0, 10, 10)
    compound += struct.pack(">HHbb", 0x0000, 0, 0, 0)
    font = _build_font([_simple_glyph([SQUARE]), compound])
    with pytest.raises(FontError):
        _outline_of(font, 1)


def test_self_referencing_compound_raises():
    compound = struct.pack(">hhhhh", -1, 0, 0, 10, 10)
    compound += struct.pack(">HHbb", 0x0002, 0, 0, 0)
    font = _build_font([compound])
    with pytest.raises(FontError):
        _outline_of(font, 0)


def test_transform_applies_matrix():
    outline = Outline(points=[Point(1.0, 1.0)])
    outline.transform((2.0, 0.0, 0.0, 3.0, 1.0, -1.0))
    assert outline.points == [Point(3.0, 2.0)]


def test_identity_transform_keeps_points():
    points = [Point(1.5, -2.0), Point(40.0, 7.25)]
    outline = Outline(points=list(points))
    outline.transform((1.0, 0.0, 0.0, 1.0, 0.0, 0.0))
    assert outline.points == points


def test_transform_rejects_wrong_size():
    with pytest.raises(ValueError):
        Outline(points=[Point(0.0, 0.0)]).transform((1.0, 0.0, 0.0, 1.0))


def test_clip_keeps_points_inside():
    outline = Outline(points=[Point(-5.0, 3.0), Point(20.0, 12.0), Point(4.0, 5.0)])
    outline.clip(10, 10)
    assert outline.points[0] == Point(0.0, 3.0)
    assert outline.points[2] == Point(4.0, 5.0)
    assert outline.points[1].x == math.nextafter(10, 0.0)
    assert all(0.0 <= p.x < 10 and 0.0 <= p.y < 10 for p in outline.points)


def test_flat_curve_becomes_single_line():
    outline = Outline(
        points=[Point(0.0, 0.0), Point(5.0, 5.0), Point(10.0, 10.0)],
        curves=[(0, 2, 1)],
    )
    outline.tesselate_curves()
    assert outline.lines == [(0, 2)]
    assert len(outline.points) == 3


def test_bent_curve_becomes_connected_path():
    outline = Outline(
        points=[Point(0.0, 0.0), Point(50.0, 100.0), Point(100.0, 0.0)],
        curves=[(0, 2, 1)],
    )
    outline.tesselate_curves()
    assert len(outline.lines) > 1
    degree = Counter(i for line in outline.lines for i in line)
    assert degree[0] == 1 and degree[2] == 1
    assert all(count == 2 for index, count in degree.items() if index not in (0, 2))
    assert all(0.0 <= p.x <= 100.0 and 0.0 <= p.y <= 100.0 for p in outline.points)


def test_decoded_curves_tesselate_into_closed_loop():
    contour = [(0, 0, True), (50, 100, False), (100, 0, True)]
    font = _build_font([_simple_glyph([contour])])
    outline = _outline_of(font, 0)
    outline.tesselate_curves()
    degree = Counter(i for line in outline.lines for i in line)
    assert all(count % 2 == 0 for count in degree.values())