"""
Document class for editing the text of Word documents.

This module provides the main Document class. It owns the document body as a
unicode string, derives the run segmentation from it on demand, and hands out
revision ids for tracked changes.
"""

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from . import merge, noise
from .constants import AUTHOR_ENV, DEFAULT_AUTHOR, FIRST_REVISION_ID, MAIN_DOCUMENT
from .errors import MalformedMarkupError, PackageError
from .models.change import Change
from .models.run import Run
from .models.text import Replacement
from .package import DocxPackage
from .replace import replace_in_runs
from .segmenter import reassemble, segment
from .xml_text import markup_to_plain_text

logger = logging.getLogger(__name__)


class Document:
    """Surgical text editing on the body of a Word document.

    The body is the single source of truth. The run segmentation is a cached
    view of it, dropped whenever the body is replaced and rebuilt lazily on
    the next access to ``runs``. Instances are meant for a single writer;
    callers sharing one across threads must serialize every mutating call.

    Example:
        >>> doc = Document.open("contract.docx")
        >>> doc.reduce_all_noises()
        >>> doc.unlink_fields()
        >>> doc.merge_runs(fuse_texts=True)
        >>> aliases = {"Claudio MONTEVERDI": "A_____"}
        >>> def anonymize(matched, run, xml_before, **kwargs):
        ...     return doc.change(to_delete=matched, to_insert=aliases[matched],
        ...                       run=run, xml_before=xml_before)
        >>> doc.contents = doc.replace("|".join(aliases), anonymize)
        >>> doc.save("contract_anonymized.docx")

    Attributes:
        author: Default author for tracked changes
        package: The .docx archive the body was read from, if any
    """

    def __init__(
        self,
        contents: str,
        author: str | None = None,
        package: DocxPackage | None = None,
    ) -> None:
        """Initialize a Document from the markup of a document body.

        Args:
            contents: The document body (the ``word/document.xml`` member)
            author: Default author for tracked changes; falls back to the
                DOCX_SURGEON_AUTHOR environment variable, then DEFAULT_AUTHOR
            package: Archive to write the body back to when saving
        """
        self._original_contents = contents
        self._contents = contents
        self._runs: list[Run] | None = None
        self._next_rev_id = FIRST_REVISION_ID
        self.author = author or os.environ.get(AUTHOR_ENV) or DEFAULT_AUTHOR
        self.package = package

    @classmethod
    def open(cls, source: str | Path | bytes | BinaryIO, author: str | None = None) -> "Document":
        """Open the main document body of a .docx file.

        Args:
            source: Path to a .docx file, its raw bytes, or a binary stream
            author: Default author for tracked changes

        Returns:
            Document bound to the opened package

        Raises:
            PackageError: If the archive or its main document cannot be read
        """
        if isinstance(source, bytes):
            package = DocxPackage.from_bytes(source)
        else:
            package = DocxPackage.open(source)
        contents = package.read_part(MAIN_DOCUMENT)
        logger.debug("Loaded %s (%d characters)", MAIN_DOCUMENT, len(contents))
        return cls(contents, author=author, package=package)

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    @property
    def contents(self) -> str:
        """The current document body."""
        return self._contents

    @contents.setter
    def contents(self, value: str) -> None:
        self.set_contents(value)

    def set_contents(self, contents: str) -> None:
        """Replace the document body and drop the cached runs."""
        self._contents = contents
        self._runs = None

    @property
    def original_contents(self) -> str:
        """The document body as it was supplied, before any modification."""
        return self._original_contents

    @property
    def runs(self) -> list[Run]:
        """Runs of the current body, segmented on first access.

        Raises:
            MalformedMarkupError: If run or text markers are unbalanced
        """
        if self._runs is None:
            self._runs = segment(self._contents)
            logger.debug("Segmented body into %d runs", len(self._runs))
        return self._runs

    def indented_contents(self) -> str:
        """Pretty-printed body for inspection; not meant to be saved back.

        Raises:
            MalformedMarkupError: If the body is not well-formed XML
        """
        parser = etree.XMLParser(remove_blank_text=True)
        try:
            root = etree.fromstring(self._contents.encode("utf-8"), parser)
        except etree.XMLSyntaxError as e:
            raise MalformedMarkupError(f"Cannot parse document body: {e}") from e
        return etree.tostring(root, encoding="unicode", pretty_print=True)

    def plain_text(self) -> str:
        """Text of the body without markup; paragraphs become newlines."""
        return markup_to_plain_text(self._contents)

    # ------------------------------------------------------------------
    # Modifying contents
    # ------------------------------------------------------------------

    def noise_reduction_regex(self, name: str) -> re.Pattern[str]:
        """Get a builtin noise-reduction pattern by name.

        Raises:
            UnknownNoisePatternError: If the name is not in the catalog
        """
        return noise.noise_reduction_regex(name)

    def reduce_noise(self, *patterns: noise.NoisePattern) -> None:
        """Delete every match of the given patterns from the body.

        Args:
            *patterns: Names of builtin patterns or compiled patterns;
                applied to the whole body, not only to runs

        Raises:
            UnknownNoisePatternError: If a name is not in the catalog
        """
        self._commit(noise.reduce_noise(self._contents, *patterns), "reduce_noise")

    def reduce_all_noises(self) -> None:
        """Apply every builtin noise-reduction pattern."""
        self._commit(noise.reduce_all_noises(self._contents), "reduce_all_noises")

    def unlink_fields(self) -> None:
        """Remove all fields, keeping their current values as plain text."""
        self._commit(noise.unlink_fields(self._contents), "unlink_fields")

    def merge_runs(self, no_caps: bool = False, fuse_texts: bool = False) -> None:
        """Merge adjacent runs having the same properties and nothing in between.

        Args:
            no_caps: Convert runs with the capitalization property to
                upper-cased text without the property, allowing more merges
            fuse_texts: Also join adjacent text nodes inside each merged run

        Raises:
            MalformedMarkupError: If the body cannot be segmented
        """
        new_runs = merge.merge_runs(self.runs, no_caps=no_caps, fuse_texts=fuse_texts)
        self._commit(reassemble(new_runs), "merge_runs")

    def replace(
        self,
        pattern: str | re.Pattern[str],
        replacement: Replacement,
        **replacement_args: Any,
    ) -> str:
        """Replace all matches of ``pattern`` within text nodes.

        The search does not cross text node boundaries, so calling
        ``merge_runs()`` first is highly recommended. The body is not
        modified; assign the result to ``contents`` to apply it.

        Args:
            pattern: Pattern without capturing groups
            replacement: Fixed string, or callable invoked for each match with
                the keywords ``matched``, ``run``, ``xml_before`` plus
                ``replacement_args``. A result containing markup is placed
                between runs; plain text stays inside the text node.
            **replacement_args: Extra keywords forwarded to the callable

        Returns:
            The new body

        Raises:
            InvalidPatternError: If the pattern has capturing groups
        """
        return replace_in_runs(self.runs, pattern, replacement, **replacement_args)

    def change(
        self,
        to_delete: str | None = None,
        to_insert: str | None = None,
        author: str | None = None,
        date: datetime | str | None = None,
        run: Run | None = None,
        xml_before: str = "",
    ) -> str:
        """Generate markup for a tracked change.

        Typically called from a ``replace()`` callback. Each call consumes
        one revision id, shared by the deletion and the insertion it emits.

        Args:
            to_delete: Text to mark as deleted (usually the matched text)
            to_insert: Text to mark as inserted
            author: Author of the change (default: the document's author)
            date: Date of the change (default: now, UTC)
            run: Run whose properties are copied to the generated runs
            xml_before: Markup to put before the inserted text node

        Returns:
            The ``<w:del>``/``<w:ins>`` markup

        Raises:
            InvalidChangeError: If there is nothing to delete or insert
        """
        change = Change(
            rev_id=self._next_rev_id,
            author=author or self.author,
            date=date,
            to_delete=to_delete,
            to_insert=to_insert,
            run_props=run.props if run is not None else "",
            xml_before=xml_before,
        )
        self._next_rev_id += 1
        return change.as_xml()

    def _commit(self, contents: str, operation: str) -> None:
        logger.debug(
            "%s: %d -> %d characters", operation, len(self._contents), len(contents)
        )
        self.set_contents(contents)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def _updated_package(self) -> DocxPackage:
        if self.package is None:
            raise PackageError("Document was not opened from a .docx package")
        self.package.write_part(MAIN_DOCUMENT, self._contents)
        return self.package

    def save(self, output_path: str | Path) -> None:
        """Write the current body into the package and save it as a new file.

        Raises:
            PackageError: If the document has no package or the file cannot be written
        """
        self._updated_package().save(output_path)

    def save_to_bytes(self) -> bytes:
        """Write the current body into the package and return the .docx bytes."""
        return self._updated_package().save_to_bytes()

    def overwrite(self) -> None:
        """Write the current body back to the file the document was opened from.

        Raises:
            PackageError: If the document was not opened from a file path
        """
        package = self._updated_package()
        if package.source_path is None:
            raise PackageError("Document was not opened from a file; use save() instead")
        package.save(package.source_path)
