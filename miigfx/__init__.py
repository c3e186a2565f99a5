"""TGA decoding, TrueType font parsing and glyph outlines, on-screen keyboard state and message catalogs."""

__version__ = "0.1.0"