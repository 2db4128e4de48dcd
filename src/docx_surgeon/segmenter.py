"""
Segmentation of a document body into Run and Text nodes, and the inverse.

Every byte of the body ends up in exactly one node: opaque markup is attached
as ``xml_before`` to the node that follows it, and markup after the last run
goes into a tail node. ``reassemble(segment(xml)) == xml`` holds for any body
the scanner accepts.
"""

from collections.abc import Iterable

from .constants import TEXT_START_PRESERVE
from .lexer import Token, TokenKind, tokenize
from .models.run import Run
from .models.text import Text


def _build_run(xml_before: str, tokens: list[Token]) -> Run:
    """Build a Run from the tokens found between RUN_START and RUN_END."""
    run = Run(xml_before=xml_before)
    pending = ""
    preserve = False

    for token in tokens:
        if token.kind is TokenKind.RUN_PROPS:
            run.props = token.props
            run.has_props_block = True
        elif token.kind is TokenKind.OPAQUE:
            pending += token.value
        elif token.kind is TokenKind.TEXT_START:
            preserve = token.value == TEXT_START_PRESERVE
        elif token.kind is TokenKind.LITERAL:
            # always present between TEXT_START and TEXT_END, possibly empty
            run.inner_texts.append(Text(pending, token.value, preserve))
            pending = ""

    if pending:
        run.inner_texts.append(Text(xml_before=pending))
    return run


def segment(xml: str) -> list[Run]:
    """Split a document body into runs.

    Runs without any text node and empty ``<w:t></w:t>`` elements are kept
    as nodes rather than dropped, so that reassembling the result gives back
    the exact body. Only an empty tail is omitted.

    Args:
        xml: The document body

    Returns:
        Runs in document order, followed by a tail node if markup remains
        after the last run

    Raises:
        MalformedMarkupError: If run or text markers are unbalanced
    """
    runs: list[Run] = []
    xml_before = ""
    run_tokens: list[Token] | None = None

    for token in tokenize(xml):
        if token.kind is TokenKind.RUN_START:
            run_tokens = []
        elif token.kind is TokenKind.RUN_END:
            runs.append(_build_run(xml_before, run_tokens or []))
            xml_before = ""
            run_tokens = None
        elif run_tokens is not None:
            run_tokens.append(token)
        else:
            xml_before += token.value

    if xml_before:
        runs.append(Run(xml_before=xml_before, is_tail=True))
    return runs


def reassemble(runs: Iterable[Run]) -> str:
    """Concatenate the markup of every node."""
    return "".join(run.as_xml() for run in runs)
