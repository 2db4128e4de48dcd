"""
Noise reduction: deletion of uninteresting markup from the raw document body.

Word scatters proofing marks, revision ids, language tags and similar markup
across runs. None of it matters for text editing, but it splits runs that
would otherwise carry identical properties. Removing it first gives the run
merger and the pattern replacer wider text spans to work on.

These functions operate on the raw body string, not on the segmented model.
"""

import logging
import re

from .errors import UnknownNoisePatternError

logger = logging.getLogger(__name__)

NoisePattern = str | re.Pattern[str]

# Builtin patterns, by name
NOISE_REDUCTION_REGEXES: dict[str, re.Pattern[str]] = {
    "proof_checking": re.compile(r"<w:(?:proofErr[^>]+|noProof/)>"),
    "revision_ids": re.compile(r'\sw:rsid\w+="[^"]+"'),
    "complex_script_bold": re.compile(r"<w:bCs/>"),
    "page_breaks": re.compile(r"<w:lastRenderedPageBreak/>"),
    "language": re.compile(r'<w:lang w:val="[^/>]+/>'),
    "empty_run_props": re.compile(r"<w:rPr></w:rPr>"),
}

# Order in which reduce_all_noises applies the builtin patterns; empty
# properties come last since the others may leave them behind
NOISE_REDUCTION_LIST = [
    "proof_checking",
    "revision_ids",
    "complex_script_bold",
    "page_breaks",
    "language",
    "empty_run_props",
]

# Field markup: instruction text, begin/separate/end boundaries (self-closing
# or with content), and simple field wrappers. Removing all of it leaves the
# cached field result as plain text.
FIELD_UNLINKING_REGEXES: list[re.Pattern[str]] = [
    re.compile(r"<w:instrText.*?</w:instrText>", re.DOTALL),
    re.compile(
        r"""<w:fldChar
            (?:  [^>]*?/>                   # self-closing boundary
               | [^>]*?>.*?</w:fldChar>     # boundary with content
            )""",
        re.VERBOSE | re.DOTALL,
    ),
    re.compile(r"</?w:fldSimple[^>]*>"),
]


def noise_reduction_regex(name: str) -> re.Pattern[str]:
    """Get a builtin noise-reduction pattern by name.

    Args:
        name: One of the keys of NOISE_REDUCTION_REGEXES

    Returns:
        The compiled pattern

    Raises:
        UnknownNoisePatternError: If the name is not in the catalog
    """
    try:
        return NOISE_REDUCTION_REGEXES[name]
    except KeyError:
        raise UnknownNoisePatternError(name, NOISE_REDUCTION_REGEXES) from None


def resolve_noise_patterns(patterns: tuple[NoisePattern, ...]) -> list[re.Pattern[str]]:
    """Turn catalog names into compiled patterns; compiled patterns pass through."""
    return [p if isinstance(p, re.Pattern) else noise_reduction_regex(p) for p in patterns]


def reduce_noise(xml: str, *patterns: NoisePattern) -> str:
    """Delete every match of the given patterns from the markup.

    Args:
        xml: The document body
        *patterns: Catalog names or compiled patterns, applied in order

    Returns:
        The body with all matches removed

    Raises:
        UnknownNoisePatternError: If a name is not in the catalog
    """
    regexes = resolve_noise_patterns(patterns)
    # repeat until stable: one deletion may expose a match for an earlier pattern
    while True:
        previous = xml
        for regex in regexes:
            xml, count = regex.subn("", xml)
            if count:
                logger.debug("Removed %d match(es) of %s", count, regex.pattern)
        if xml == previous:
            return xml


def reduce_all_noises(xml: str) -> str:
    """Apply every builtin pattern, in NOISE_REDUCTION_LIST order."""
    return reduce_noise(xml, *NOISE_REDUCTION_LIST)


def unlink_fields(xml: str) -> str:
    """Remove field instructions and boundaries, keeping the fields' current values.

    This is the equivalent of Ctrl-Shift-F9 on the whole document in Word.
    """
    return reduce_noise(xml, *FIELD_UNLINKING_REGEXES)
