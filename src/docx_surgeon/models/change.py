"""
Tracked-change fragments for Word revision marks.

A Change is a short-lived value: it is built, serialized to ``<w:del>`` and
``<w:ins>`` markup right away, and dropped. Revision ids come from the
owning Document, which hands out a fresh one per change.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from docx_surgeon.constants import (
    DATE_FORMAT,
    DEL_TEXT_END,
    DEL_TEXT_START,
    DEL_TEXT_START_PRESERVE,
    PROPS_END,
    PROPS_START,
    RUN_END,
    RUN_START,
    TEXT_END,
    TEXT_START,
    TEXT_START_PRESERVE,
)
from docx_surgeon.errors import InvalidChangeError
from docx_surgeon.xml_text import escape_xml_attr, escape_xml_text, needs_preserve_space


def format_date(date: datetime | str | None) -> str:
    """Format a w:date attribute value, defaulting to the current UTC time."""
    if date is None:
        date = datetime.now(timezone.utc)
    if isinstance(date, datetime):
        if date.tzinfo is not None:
            date = date.astimezone(timezone.utc)
        return date.strftime(DATE_FORMAT)
    return date


@dataclass
class Change:
    """One tracked-change event: a deletion, an insertion, or both.

    Attributes:
        rev_id: Revision id stamped on both the deletion and the insertion
        author: Author displayed by Word for the change
        date: Timestamp of the change (datetime, preformatted string, or None
            for the current time)
        to_delete: Text to mark as deleted (raw literal text or plain text)
        to_insert: Text to mark as inserted
        run_props: Raw properties of the enclosing run, copied into the
            generated runs
        xml_before: Opaque markup placed before the inserted text node
    """

    rev_id: int
    author: str
    date: datetime | str | None = None
    to_delete: str | None = None
    to_insert: str | None = None
    run_props: str = ""
    xml_before: str = ""

    def __post_init__(self) -> None:
        """Validate that there is something to delete or insert."""
        if not self.to_delete and not self.to_insert:
            raise InvalidChangeError("A change needs text to delete or text to insert")

    def _attributes(self) -> str:
        return (
            f'w:id="{self.rev_id}" w:author="{escape_xml_attr(self.author)}" '
            f'w:date="{escape_xml_attr(format_date(self.date))}"'
        )

    def _run_opening(self) -> str:
        if self.run_props:
            return f"{RUN_START}{PROPS_START}{self.run_props}{PROPS_END}"
        return RUN_START

    def deletion_xml(self) -> str:
        """Generate the ``<w:del>`` block, or an empty string if nothing is deleted."""
        if not self.to_delete:
            return ""
        opening = (
            DEL_TEXT_START_PRESERVE if needs_preserve_space(self.to_delete) else DEL_TEXT_START
        )
        return (
            f"<w:del {self._attributes()}>"
            f"{self._run_opening()}"
            f"{opening}{escape_xml_text(self.to_delete)}{DEL_TEXT_END}"
            f"{RUN_END}"
            f"</w:del>"
        )

    def insertion_xml(self) -> str:
        """Generate the ``<w:ins>`` block, or an empty string if nothing is inserted."""
        if not self.to_insert:
            return ""
        opening = TEXT_START_PRESERVE if needs_preserve_space(self.to_insert) else TEXT_START
        return (
            f"<w:ins {self._attributes()}>"
            f"{self._run_opening()}"
            f"{self.xml_before}"
            f"{opening}{escape_xml_text(self.to_insert)}{TEXT_END}"
            f"{RUN_END}"
            f"</w:ins>"
        )

    def as_xml(self) -> str:
        """Generate the complete fragment: deletion first, then insertion.

        Without an insertion, ``xml_before`` is kept in a plain run placed
        before the deletion.
        """
        xml = ""
        if self.xml_before and not self.to_insert:
            xml += f"{self._run_opening()}{self.xml_before}{RUN_END}"
        return xml + self.deletion_xml() + self.insertion_xml()
