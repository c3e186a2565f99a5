"""Small string helpers."""

from __future__ import annotations

_XML_ESCAPES = (
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)


def replace_first(text: str, old: str, new: str) -> str:
    """Replace the first occurrence of ``old`` in ``text`` with ``new``."""
    return text.replace(old, new, 1)


def decode_xml_escape_line(text: str) -> str:
    """Decode the first occurrence of each basic XML entity, ``&amp;`` last."""
    for entity, char in _XML_ESCAPES:
        text = replace_first(text, entity, char)
    return text