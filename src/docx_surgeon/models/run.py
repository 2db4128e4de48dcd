"""
Run node: a formatted span of text with its raw properties.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from docx_surgeon.constants import PROPS_END, PROPS_START, RUN_END, RUN_START
from docx_surgeon.models.text import Piece, Replacement, Text

# Capitalization property, optionally with an explicit value
_CAPS_RE = re.compile(r'<w:caps(?: w:val="([^"]*)")?/>')
_TRUTHY_VALUES = {None, "true", "1", "on"}


@dataclass
class Run:
    """A ``<w:r>`` element of the document body.

    Properties are kept as unparsed markup; the only property ever
    interpreted is capitalization (see ``remove_caps_property``).

    Attributes:
        xml_before: Opaque markup between the previous run and this one
        props: Raw content of the ``<w:rPr>`` block, empty if absent
        inner_texts: Text nodes of the run, in order
        has_props_block: The source carried a ``<w:rPr>`` block, possibly
            empty; only used to reproduce it
        is_tail: Not a run at all but the opaque markup following the last
            run of the document, held in ``xml_before``
    """

    xml_before: str = ""
    props: str = ""
    inner_texts: list[Text] = field(default_factory=list)
    has_props_block: bool = False
    is_tail: bool = False

    @property
    def literal_text(self) -> str:
        """Concatenated literal text of all inner text nodes."""
        return "".join(t.literal_text or "" for t in self.inner_texts)

    def opening_xml(self) -> str:
        """Run-opening marker followed by the properties block, if any."""
        if self.props or self.has_props_block:
            return f"{RUN_START}{PROPS_START}{self.props}{PROPS_END}"
        return RUN_START

    def as_xml(self) -> str:
        """Serialize the run back to markup."""
        if self.is_tail:
            return self.xml_before
        inner = "".join(t.as_xml() for t in self.inner_texts)
        return f"{self.xml_before}{self.opening_xml()}{inner}{RUN_END}"

    def merge(self, other: "Run") -> None:
        """Append the texts of ``other`` to this run."""
        self.inner_texts.extend(other.inner_texts)

    def fuse_texts(self) -> None:
        """Join each text node with the preceding one when no markup separates them."""
        fused: list[Text] = []
        for text in self.inner_texts:
            previous = fused[-1] if fused else None
            if previous and previous.has_text and text.has_text and not text.xml_before:
                preserve = previous.preserve_space or text.preserve_space
                fused[-1] = Text(
                    previous.xml_before,
                    f"{previous.literal_text}{text.literal_text}",
                    True if preserve else None,
                )
            else:
                fused.append(text)
        self.inner_texts = fused

    def remove_caps_property(self) -> bool:
        """Drop an active ``<w:caps/>`` property and upper-case the texts instead.

        Returns:
            True if the property was found and removed
        """
        match = next(
            (m for m in _CAPS_RE.finditer(self.props) if m.group(1) in _TRUTHY_VALUES),
            None,
        )
        if match is None:
            return False
        self.props = self.props[: match.start()] + self.props[match.end() :]
        if not self.props:
            self.has_props_block = False
        for text in self.inner_texts:
            text.to_uppercase()
        return True

    def replace(
        self, regex: re.Pattern[str], replacement: Replacement, **replacement_args: Any
    ) -> str:
        """Serialize the run with every match of ``regex`` replaced.

        The run is closed before markup returned by the replacement and
        reopened, with the same properties, after it. A run in which nothing
        matched is returned unchanged.

        Args:
            regex: Compiled pattern without capturing groups
            replacement: Fixed string or callable, see ``Text.replace``
            **replacement_args: Extra keywords forwarded to the callable

        Returns:
            New markup for this run
        """
        if self.is_tail:
            return self.xml_before

        rewritten: list[list[Piece] | None] = [
            text.replace(regex, replacement, run=self, **replacement_args)
            for text in self.inner_texts
        ]
        if all(pieces is None for pieces in rewritten):
            return self.as_xml()

        parts = [self.xml_before]
        is_open = False
        for text, pieces in zip(self.inner_texts, rewritten):
            if pieces is None:
                pieces = [(True, text.as_xml())]
            for inside_run, xml in pieces:
                if not xml:
                    continue
                if inside_run and not is_open:
                    parts.append(self.opening_xml())
                    is_open = True
                elif not inside_run and is_open:
                    parts.append(RUN_END)
                    is_open = False
                parts.append(xml)
        if is_open:
            parts.append(RUN_END)
        return "".join(parts)
