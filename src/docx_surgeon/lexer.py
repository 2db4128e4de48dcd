"""
Single-pass scanner splitting a document body into run and text boundaries.

The scanner only knows what a boundary looks like; assembling runs and texts
from the token stream is the segmenter's job. Concatenating the ``value`` of
every token reproduces the scanned markup exactly.

Recognized markers:

- ``<w:r>`` ... ``</w:r>``: a run. Runs carrying attributes (``<w:r w:rsidR=...>``)
  are not recognized and stay opaque until the ``revision_ids`` noise
  reduction strips their attributes.
- ``<w:rPr>`` ... ``</w:rPr>``: run properties, only directly after ``<w:r>``.
- ``<w:t>`` or ``<w:t xml:space="preserve">`` ... ``</w:t>``: literal text,
  only inside a run.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .constants import (
    CONTEXT_CHARS_DEFAULT,
    PROPS_END,
    PROPS_START,
    RUN_END,
    RUN_START,
    TEXT_END,
)
from .errors import MalformedMarkupError

_TEXT_START_RE = re.compile(r'<w:t(?: xml:space="preserve")?>')


class TokenKind(Enum):
    """Kinds of tokens produced by the scanner."""

    OPAQUE = "opaque"
    RUN_START = "run_start"
    RUN_PROPS = "run_props"
    RUN_END = "run_end"
    TEXT_START = "text_start"
    LITERAL = "literal"
    TEXT_END = "text_end"


@dataclass(frozen=True)
class Token:
    """A slice of the scanned markup.

    Attributes:
        kind: What the slice represents
        value: The exact markup of the slice (for RUN_PROPS, the whole
            ``<w:rPr>...</w:rPr>`` block)
        offset: Position of the slice in the scanned markup
    """

    kind: TokenKind
    value: str
    offset: int

    @property
    def props(self) -> str:
        """Inner markup of a RUN_PROPS token."""
        if self.kind is not TokenKind.RUN_PROPS:
            raise AttributeError(f"{self.kind.value} token has no run properties")
        return self.value[len(PROPS_START) : -len(PROPS_END)]


def _context(xml: str, offset: int) -> str:
    start = max(0, offset - CONTEXT_CHARS_DEFAULT // 2)
    return xml[start : offset + CONTEXT_CHARS_DEFAULT // 2]


def _find_closing(xml: str, marker: str, start: int, limit: int, what: str, opened_at: int) -> int:
    """Find ``marker`` in ``xml[start:limit]`` or raise MalformedMarkupError."""
    pos = xml.find(marker, start, limit)
    if pos < 0:
        raise MalformedMarkupError(f"unclosed {what}", opened_at, _context(xml, opened_at))
    return pos


def _scan_run_contents(xml: str, start: int, end: int) -> Iterator[Token]:
    """Yield text-level tokens for the run contents in ``xml[start:end]``."""
    pos = start
    while pos < end:
        match = _TEXT_START_RE.search(xml, pos, end)
        if match is None:
            break
        if match.start() > pos:
            yield Token(TokenKind.OPAQUE, xml[pos : match.start()], pos)
        yield Token(TokenKind.TEXT_START, match.group(0), match.start())

        close = _find_closing(xml, TEXT_END, match.end(), end, "text node", match.start())
        yield Token(TokenKind.LITERAL, xml[match.end() : close], match.end())
        yield Token(TokenKind.TEXT_END, TEXT_END, close)
        pos = close + len(TEXT_END)

    if pos < end:
        yield Token(TokenKind.OPAQUE, xml[pos:end], pos)


def tokenize(xml: str) -> Iterator[Token]:
    """Scan document markup into a stream of tokens.

    Args:
        xml: The document body

    Yields:
        Tokens in document order; empty opaque slices are never produced

    Raises:
        MalformedMarkupError: If a run, properties block or text node is
            opened but never closed
    """
    pos = 0
    length = len(xml)
    while pos < length:
        run_start = xml.find(RUN_START, pos)
        if run_start < 0:
            break
        if run_start > pos:
            yield Token(TokenKind.OPAQUE, xml[pos:run_start], pos)
        yield Token(TokenKind.RUN_START, RUN_START, run_start)

        contents_start = run_start + len(RUN_START)
        run_end = _find_closing(xml, RUN_END, contents_start, length, "run", run_start)

        if xml.startswith(PROPS_START, contents_start, run_end):
            props_end = _find_closing(
                xml, PROPS_END, contents_start, run_end, "run properties", contents_start
            )
            props_end += len(PROPS_END)
            yield Token(TokenKind.RUN_PROPS, xml[contents_start:props_end], contents_start)
            contents_start = props_end

        yield from _scan_run_contents(xml, contents_start, run_end)
        yield Token(TokenKind.RUN_END, RUN_END, run_end)
        pos = run_end + len(RUN_END)

    if pos < length:
        yield Token(TokenKind.OPAQUE, xml[pos:], pos)
