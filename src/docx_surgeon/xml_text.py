"""
Helpers for literal text found between WordprocessingML tags.

Literal text in the segmentation model is the raw inter-tag substring: entity
references are kept encoded. These helpers escape, case-convert and project
such text without disturbing the entities it already contains.
"""

import html
import re

# An entity reference already present in raw literal text
_ENTITY_RE = re.compile(r"&(?:#[0-9]+|#x[0-9a-fA-F]+|[A-Za-z_][\w.-]*);")

# An ampersand that does not start an entity reference
_BARE_AMPERSAND_RE = re.compile(r"&(?!(?:#[0-9]+|#x[0-9a-fA-F]+|[A-Za-z_][\w.-]*);)")

_PARAGRAPH_START_RE = re.compile(r"(<w:p[ >])")
_TAB_RE = re.compile(r"<w:tab[^s][^>]*>")
_TAG_RE = re.compile(r"<[^>]+>")


def escape_xml_text(text: str) -> str:
    """Escape text for use as element content.

    Entity references already present are left alone, so raw literal text
    taken from the document passes through unchanged while plain strings
    become valid XML.

    Args:
        text: Raw or plain text

    Returns:
        XML-safe text

    Example:
        >>> escape_xml_text("Fish & Chips &amp; <Co>")
        'Fish &amp; Chips &amp; &lt;Co&gt;'
    """
    text = _BARE_AMPERSAND_RE.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")


def escape_xml_attr(value: str) -> str:
    """Escape text for use inside a double-quoted attribute value."""
    return escape_xml_text(value).replace('"', "&quot;")


def needs_preserve_space(text: str | None) -> bool:
    """Check whether text needs xml:space="preserve" to keep its edge whitespace."""
    return bool(text) and (text[0].isspace() or text[-1].isspace())


def uppercase_outside_entities(text: str) -> str:
    """Upper-case literal text while leaving entity references untouched.

    Example:
        >>> uppercase_outside_entities("fish &amp; chips")
        'FISH &amp; CHIPS'
    """
    parts = []
    pos = 0
    for match in _ENTITY_RE.finditer(text):
        parts.append(text[pos : match.start()].upper())
        parts.append(match.group(0))
        pos = match.end()
    parts.append(text[pos:].upper())
    return "".join(parts)


def markup_to_plain_text(xml: str) -> str:
    """Project document markup to plain text.

    Each paragraph opening becomes a newline, each tab node becomes a
    horizontal tab, every other tag is removed and entities are decoded.
    This is a lossy, one-way conversion.

    Args:
        xml: Document body markup

    Returns:
        Plain text

    Example:
        >>> markup_to_plain_text("<w:p><w:r><w:t>Hi</w:t></w:r></w:p>")
        '\\nHi'
    """
    text = _PARAGRAPH_START_RE.sub(r"\n\1", xml)
    text = _TAB_RE.sub("\t", text)
    text = _TAG_RE.sub("", text)
    return html.unescape(text)
