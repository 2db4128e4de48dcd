"""
Custom exception classes for the docx_surgeon package.

Configuration mistakes (unknown noise pattern, empty change, bad replacement
pattern) are reported immediately. Malformed markup and archive failures are
surfaced as recoverable errors; the document body is left untouched.
"""

from collections.abc import Iterable


class SurgeonError(Exception):
    """Base exception for all docx_surgeon errors."""

    pass


class UnknownNoisePatternError(SurgeonError, LookupError):
    """Raised when a noise-reduction pattern is requested by an unknown name.

    Attributes:
        name: The name that was looked up
        known: Names available in the catalog
    """

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = list(known)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message listing the known pattern names."""
        msg = f"Unknown noise reduction pattern '{self.name}'"
        if self.known:
            msg += f"\n\nKnown patterns: {', '.join(self.known)}"
        return msg


class InvalidChangeError(SurgeonError, ValueError):
    """Raised when a tracked change has neither text to delete nor to insert."""

    pass


class InvalidPatternError(SurgeonError, ValueError):
    """Raised when a replacement pattern cannot be used for text splitting.

    Attributes:
        pattern: The offending pattern source
        groups: Number of capturing groups found in the pattern
    """

    def __init__(self, pattern: str, groups: int) -> None:
        self.pattern = pattern
        self.groups = groups
        super().__init__(
            f"Pattern {pattern!r} contains {groups} capturing group(s); "
            "use non-capturing groups (?:...) instead"
        )


class MalformedMarkupError(SurgeonError):
    """Raised when run or text markers are unbalanced, or the XML cannot be parsed.

    Attributes:
        message: Description of the problem
        offset: Character offset in the document body (None if unknown)
        context: Excerpt of the markup around the offset
    """

    def __init__(self, message: str, offset: int | None = None, context: str = "") -> None:
        self.message = message
        self.offset = offset
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.offset is not None:
            msg += f" at offset {self.offset}"
        if self.context:
            msg += f": ...{self.context}..."
        return msg


class PackageError(SurgeonError):
    """Raised when the .docx archive cannot be read or written.

    This can occur when:
    - The source file does not exist or is not a ZIP archive
    - The main document member is missing
    - A document without a package is asked to save itself

    Attributes:
        errors: List of specific error messages (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
