"""
Text node: a literal text span plus the opaque markup preceding it.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docx_surgeon.constants import TEXT_END, TEXT_START, TEXT_START_PRESERVE
from docx_surgeon.xml_text import needs_preserve_space, uppercase_outside_entities

if TYPE_CHECKING:
    from docx_surgeon.models.run import Run

# A piece of rewritten markup; the flag tells whether it belongs inside a run
Piece = tuple[bool, str]

Replacement = str | Callable[..., str]


@dataclass
class Text:
    """A ``<w:t>`` element of a run, with the markup that precedes it.

    Attributes:
        xml_before: Opaque markup between the previous text boundary and
            this text (for example ``<w:tab/>``), commonly empty
        literal_text: Raw content of the ``<w:t>`` element, entities still
            encoded. None when the node carries only trailing opaque markup
            and has no ``<w:t>`` element.
        preserve_space: Whether the source element carried ``xml:space="preserve"``;
            None for nodes built in memory, which get the attribute only when
            the literal text has leading or trailing whitespace
    """

    xml_before: str = ""
    literal_text: str | None = None
    preserve_space: bool | None = None

    @property
    def has_text(self) -> bool:
        """Whether this node holds a ``<w:t>`` element."""
        return self.literal_text is not None

    def opening_xml(self) -> str:
        """Text-opening marker, with ``xml:space="preserve"`` when needed."""
        preserve = self.preserve_space
        if preserve is None:
            preserve = needs_preserve_space(self.literal_text)
        return TEXT_START_PRESERVE if preserve else TEXT_START

    def as_xml(self) -> str:
        """Serialize the node back to markup."""
        if self.literal_text is None:
            return self.xml_before
        return f"{self.xml_before}{self.opening_xml()}{self.literal_text}{TEXT_END}"

    def to_uppercase(self) -> None:
        """Upper-case the literal text, leaving entity references alone."""
        if self.literal_text:
            self.literal_text = uppercase_outside_entities(self.literal_text)

    def replace(
        self,
        regex: re.Pattern[str],
        replacement: Replacement,
        run: "Run",
        **replacement_args: Any,
    ) -> list[Piece] | None:
        """Rewrite every match of ``regex`` in the literal text.

        A replacement containing ``<`` is markup and is returned as a piece
        outside the run. A callable producing markup owns the ``xml_before``
        it was handed. Any other replacement is literal text and stays in the
        text element, after the node's ``xml_before``.

        Args:
            regex: Compiled pattern without capturing groups
            replacement: Fixed string, or callable receiving ``matched``,
                ``run``, ``xml_before`` and ``replacement_args`` as keywords
            run: The run holding this text
            **replacement_args: Extra keywords forwarded to the callable

        Returns:
            Rewritten pieces, or None if nothing matched
        """
        if not self.literal_text:
            return None

        # unmatched and matched text, alternating, starting and ending unmatched
        fragments: list[str] = []
        pos = 0
        for match in regex.finditer(self.literal_text):
            fragments += [self.literal_text[pos : match.start()], match.group(0)]
            pos = match.end()
        if not fragments:
            return None
        fragments.append(self.literal_text[pos:])

        pieces: list[Piece] = []
        xml_before = self.xml_before
        buffer = ""

        def flush() -> None:
            nonlocal xml_before, buffer
            if buffer:
                piece = Text(xml_before, buffer, True if self.preserve_space else None)
                pieces.append((True, piece.as_xml()))
            elif xml_before:
                pieces.append((True, xml_before))
            xml_before = buffer = ""

        for i in range(0, len(fragments), 2):
            buffer += fragments[i]
            if i + 1 == len(fragments):
                break
            matched = fragments[i + 1]
            # opaque xml is handed over only when nothing precedes the match
            handed = "" if buffer else xml_before

            if callable(replacement):
                new_xml = replacement(
                    matched=matched, run=run, xml_before=handed, **replacement_args
                )
            else:
                new_xml = replacement

            if "<" not in new_xml:
                buffer += new_xml
                continue
            if handed and callable(replacement):
                xml_before = ""
            else:
                flush()
            pieces.append((False, new_xml))

        flush()
        return pieces
