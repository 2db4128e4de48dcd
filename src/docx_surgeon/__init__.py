"""
docx_surgeon - surgical edits to the text of Word documents.

This package segments the body of a .docx document into runs of formatted
text and the literal text spans inside them, carrying every other piece of
markup through untouched. On top of that model it offers noise reduction,
run merging, regex replacement with callbacks, and tracked-change markup.

Example:
    >>> from docx_surgeon import Document
    >>> doc = Document.open("letter.docx")
    >>> doc.reduce_all_noises()
    >>> doc.merge_runs(fuse_texts=True)
    >>> doc.contents = doc.replace(r"\\bMr\\. Smith\\b", "Mr. Jones")
    >>> doc.save("letter_edited.docx")
"""

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocxPackage",
    "Run",
    "Text",
    "Change",
    "Token",
    "TokenKind",
    "tokenize",
    "segment",
    "reassemble",
    "merge_runs",
    "replace_in_runs",
    "compile_pattern",
    "reduce_noise",
    "reduce_all_noises",
    "unlink_fields",
    "noise_reduction_regex",
    "NOISE_REDUCTION_REGEXES",
    "NOISE_REDUCTION_LIST",
    "SurgeonError",
    "UnknownNoisePatternError",
    "InvalidChangeError",
    "InvalidPatternError",
    "MalformedMarkupError",
    "PackageError",
]

# Import document class
from .document import Document
from .errors import (
    InvalidChangeError,
    InvalidPatternError,
    MalformedMarkupError,
    PackageError,
    SurgeonError,
    UnknownNoisePatternError,
)

# Import segmentation model
from .lexer import Token, TokenKind, tokenize
from .merge import merge_runs
from .models import Change, Run, Text

# Import noise reduction
from .noise import (
    NOISE_REDUCTION_LIST,
    NOISE_REDUCTION_REGEXES,
    noise_reduction_regex,
    reduce_all_noises,
    reduce_noise,
    unlink_fields,
)

# Import package class
from .package import DocxPackage
from .replace import compile_pattern, replace_in_runs
from .segmenter import reassemble, segment
