"""
Centralized constants for WordprocessingML markers and other magic values.

The segmentation model only recognizes a handful of markers; everything else
in the document body is carried through as opaque markup. Import from here to
keep the scanner, the serializers and the noise reducer consistent.
"""

# =============================================================================
# Package parts
# =============================================================================

# Name of the archive member holding the main document body
MAIN_DOCUMENT = "word/document.xml"


# =============================================================================
# Run and text markers
# =============================================================================

RUN_START = "<w:r>"
RUN_END = "</w:r>"
PROPS_START = "<w:rPr>"
PROPS_END = "</w:rPr>"
TEXT_START = "<w:t>"
TEXT_START_PRESERVE = '<w:t xml:space="preserve">'
TEXT_END = "</w:t>"
DEL_TEXT_START = "<w:delText>"
DEL_TEXT_START_PRESERVE = '<w:delText xml:space="preserve">'
DEL_TEXT_END = "</w:delText>"


# =============================================================================
# Defaults
# =============================================================================

# Author stamped on tracked changes when none is given
DEFAULT_AUTHOR = "docx-surgeon"

# Environment variable overriding DEFAULT_AUTHOR
AUTHOR_ENV = "DOCX_SURGEON_AUTHOR"

# Timestamp format for w:date attributes
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# First revision id handed out by a document
FIRST_REVISION_ID = 1

# Characters of surrounding markup quoted in MalformedMarkupError messages
CONTEXT_CHARS_DEFAULT = 40
