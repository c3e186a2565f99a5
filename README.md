# miigfx

Small, dependency-free helpers for simple menu-style interfaces, in pure
Python:

- **TGA decoding**: `miigfx.tgaheader` parses the 18-byte header
  (`TgaHeader.parse`, `get_width`, `get_height`) and expands run-length
  encoded data (`decode_rle`); `miigfx.tga` turns colour-mapped, true-colour
  (24/32-bit) and grayscale (8/16-bit) images, plain or RLE, into a list of
  packed 32-bit pixels, top-left first, honouring the image origin. The
  channel layout is chosen with a `TgaOrder`; `RGBA`, `ARGB` and `ABGR` are
  provided. Malformed or truncated data raises `TgaError`.
- **TrueType fonts**: `miigfx.font.Font` loads a font from bytes, finds tables
  (`table_offset`), maps code points to glyph ids through cmap formats 4, 6
  and 12 (`glyph_id`), and reads horizontal metrics (`hor_metrics`), outline
  offsets (`outline_offset`) and bounding boxes (`bbox`). Problems raise
  `FontError`.
- **Glyph outlines**: `miigfx.outline.decode_outline` decodes simple and
  compound glyphs into an `Outline` of `Point`s, lines and quadratic curves,
  which can be transformed by an affine matrix (`transform`), clamped to a
  box (`clip`) and flattened into straight lines (`tesselate_curves`).
- **On-screen keyboard**: `miigfx.keyboard.Keyboard` keeps a cursor over a
  grid of keys with wrap-around movement, a shift layer, and an input line
  limited to 30 bytes of UTF-8.
- **Message catalogs**: `miigfx.language.Catalog` reads JSON translation files
  and looks messages up by a 32-bit string hash (`hash_string`), falling back
  to the original text. `Language` lists the system language codes.
- **Text helpers**: `miigfx.textutils` offers `replace_first` and
  `decode_xml_escape_line`, which decodes the first occurrence of each basic
  XML entity in a line.

## Installation

```
pip install .
```

## Examples

Decode a TGA file into pixels:

```python
from miigfx.tga import RGBA, read_tga
from miigfx.tgaheader import TgaHeader

with open("icon.tga", "rb") as fh:
    data = fh.read()
header = TgaHeader.parse(data)
pixels = read_tga(data, RGBA)
print(header.width, header.height, len(pixels))
```

Look up a glyph and decode its outline:

```python
from miigfx.font import Font
from miigfx.outline import decode_outline

with open("font.ttf", "rb") as fh:
    font = Font(fh.read())
glyph = font.glyph_id(ord("A"))
advance, bearing = font.hor_metrics(glyph)
offset = font.outline_offset(glyph)
if offset is not None:
    x_min, y_min, x_max, y_max = font.bbox(offset)
    outline = decode_outline(font, offset)
    scale = 22 / font.units_per_em
    outline.transform((scale, 0.0, 0.0, scale, -x_min * scale, -y_min * scale))
    outline.tesselate_curves()
    print(len(outline.points), len(outline.lines))
```

Look up translations:

```python
from miigfx.language import Catalog, Language

catalog = Catalog()
catalog.load_language(Language.GERMAN, "languages")  # reads languages/german.json
print(catalog.gettext("Backup"))
print(catalog.loaded_language_name())
```

Use the on-screen keyboard:

```python
from miigfx.keyboard import Keyboard

kb = Keyboard(["1234567890", "qwertyuiop"], ["!@#$%^&*()", "QWERTYUIOP"])
kb.down()
kb.key_pressed()
print(kb.input)  # "q"
```

Decode XML entities in a line:

```python
from miigfx.textutils import decode_xml_escape_line

print(decode_xml_escape_line("&lt;b&gt; &amp; more"))  # "<b> & more"
```

## What the package does not do

The package stops at glyph outlines: it does not rasterize glyphs into
coverage images, compute kerning or line metrics, or lay out text. It has no
framebuffer or drawing surface, so it does not draw pixels, lines, pictures
or text to a screen, and it reads no controller input. It has no command-line
tool.

## Running the tests

```
pip install .[test]
pytest
```