"""
Tests for the scanner and the segmentation model.

These tests verify that a document body splits into runs and text nodes,
and that reassembling the nodes reproduces the body byte-for-byte.
"""

import pytest

from docx_surgeon import MalformedMarkupError, TokenKind, reassemble, segment, tokenize

# A realistic body with paragraph properties, styled runs, tabs, a run with
# attributes (opaque) and section properties after the last run
DOCUMENT_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>"
    '<w:p><w:pPr><w:jc w:val="center"/></w:pPr>'
    "<w:r><w:rPr><w:b/></w:rPr><w:t>Hello</w:t></w:r>"
    '<w:r><w:t xml:space="preserve"> big </w:t><w:tab/><w:t>world</w:t><w:br/></w:r>'
    '<w:r w:rsidR="00A1B2C3"><w:t>opaque run</w:t></w:r>'
    "</w:p>"
    '<w:sectPr><w:pgSz w:w="11906" w:h="16838"/></w:sectPr>'
    "</w:body></w:document>"
)

PRETTY_DOCUMENT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
  <w:body>
    <w:p>
      <w:r>
        <w:rPr>
          <w:i/>
        </w:rPr>
        <w:t>Fish &amp; Chips</w:t>
      </w:r>
    </w:p>
  </w:body>
</w:document>"""


# ============================================================================
# Scanner
# ============================================================================


def test_tokens_concatenate_to_input():
    """Concatenating token values reproduces the scanned markup."""
    tokens = list(tokenize(DOCUMENT_XML))
    assert "".join(t.value for t in tokens) == DOCUMENT_XML


def test_token_offsets_point_into_input():
    """Each token's offset locates its value in the input."""
    for token in tokenize(DOCUMENT_XML):
        assert DOCUMENT_XML[token.offset : token.offset + len(token.value)] == token.value


def test_token_kinds_for_simple_run():
    """A run with properties and one text yields the expected token kinds."""
    tokens = list(tokenize("<w:r><w:rPr><w:i/></w:rPr><w:t>a</w:t></w:r>"))
    assert [t.kind for t in tokens] == [
        TokenKind.RUN_START,
        TokenKind.RUN_PROPS,
        TokenKind.TEXT_START,
        TokenKind.LITERAL,
        TokenKind.TEXT_END,
        TokenKind.RUN_END,
    ]
    assert tokens[1].props == "<w:i/>"


def test_props_only_on_props_token():
    """Asking a non-properties token for props is an error."""
    token = next(tokenize("<w:r></w:r>"))
    with pytest.raises(AttributeError):
        token.props


def test_run_with_attributes_is_opaque():
    """Runs carrying attributes are not recognized as runs."""
    tokens = list(tokenize('<w:r w:rsidR="001"><w:t>x</w:t></w:r>'))
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.OPAQUE


def test_tab_is_not_a_text_marker():
    """<w:tab/> and <w:tabs> do not open a text node."""
    tokens = list(tokenize("<w:r><w:tab/><w:t>a</w:t></w:r>"))
    assert tokens[1].kind is TokenKind.OPAQUE
    assert tokens[1].value == "<w:tab/>"


def test_no_empty_opaque_tokens():
    """The scanner never produces empty opaque slices."""
    for token in tokenize("<w:r><w:t>a</w:t></w:r><w:r><w:t>b</w:t></w:r>"):
        if token.kind is TokenKind.OPAQUE:
            assert token.value


# ============================================================================
# Malformed markup
# ============================================================================


def test_unclosed_run_raises():
    """A run that is never closed is reported with its offset."""
    with pytest.raises(MalformedMarkupError) as exc_info:
        segment("<w:p><w:r><w:t>a</w:t>")
    assert exc_info.value.offset == 5
    assert "unclosed run" in str(exc_info.value)


def test_unclosed_text_raises():
    """A text node not closed before the end of its run is reported."""
    with pytest.raises(MalformedMarkupError) as exc_info:
        segment("<w:r><w:t>a</w:r>")
    assert exc_info.value.offset == 5
    assert "unclosed text node" in str(exc_info.value)


def test_unclosed_props_raises():
    """A properties block not closed before the end of its run is reported."""
    with pytest.raises(MalformedMarkupError):
        segment("<w:r><w:rPr><w:b/></w:r>")


def test_malformed_markup_context_excerpt():
    """The error quotes the markup around the problem."""
    with pytest.raises(MalformedMarkupError) as exc_info:
        segment("<w:body><w:p><w:r><w:t>never closed")
    assert "<w:r>" in exc_info.value.context


# ============================================================================
# Segmentation
# ============================================================================


def test_scenario_one_run_two_texts():
    """A run with two text elements segments into one run with two texts."""
    runs = segment("<w:r><w:t>Hello </w:t><w:t>World</w:t></w:r>")

    assert len(runs) == 1
    assert [t.literal_text for t in runs[0].inner_texts] == ["Hello ", "World"]
    assert runs[0].xml_before == ""
    assert runs[0].props == ""


def test_xml_before_attached_to_following_nodes():
    """Opaque markup goes to the run or text that follows it."""
    runs = segment("<w:p><w:r><w:tab/><w:t>b</w:t><w:br/></w:r></w:p>")

    run = runs[0]
    assert run.xml_before == "<w:p>"
    assert run.inner_texts[0].xml_before == "<w:tab/>"
    assert run.inner_texts[0].literal_text == "b"
    # trailing markup inside the run becomes a node without text
    assert run.inner_texts[1].xml_before == "<w:br/>"
    assert run.inner_texts[1].literal_text is None
    assert not run.inner_texts[1].has_text


def test_tail_node_holds_markup_after_last_run():
    """Markup after the last run is kept in a tail node."""
    runs = segment("<w:p><w:r><w:t>a</w:t></w:r></w:p>")

    assert len(runs) == 2
    assert runs[1].is_tail
    assert runs[1].xml_before == "</w:p>"
    assert runs[1].inner_texts == []


def test_no_tail_when_body_ends_with_run():
    """No tail node is emitted when nothing follows the last run."""
    runs = segment("<w:r><w:t>a</w:t></w:r>")
    assert len(runs) == 1
    assert not runs[0].is_tail


def test_body_without_runs_is_a_single_tail():
    """A body without recognizable runs becomes one tail node."""
    runs = segment('<w:p><w:r w:rsidR="1"><w:t>x</w:t></w:r></w:p>')
    assert len(runs) == 1
    assert runs[0].is_tail


def test_empty_body_has_no_nodes():
    """An empty body segments into nothing."""
    assert segment("") == []


def test_run_properties_captured():
    """Run properties are kept as raw markup."""
    runs = segment('<w:r><w:rPr><w:b/><w:sz w:val="24"/></w:rPr><w:t>x</w:t></w:r>')
    assert runs[0].props == '<w:b/><w:sz w:val="24"/>'
    assert runs[0].has_props_block


def test_empty_and_absent_props_compare_equal():
    """An explicitly empty properties block and no block both give empty props."""
    runs = segment("<w:r><w:rPr></w:rPr><w:t>a</w:t></w:r><w:r><w:t>b</w:t></w:r>")
    assert runs[0].props == runs[1].props == ""
    assert runs[0].has_props_block
    assert not runs[1].has_props_block


def test_preserve_space_attribute_recognized():
    """The xml:space attribute is recorded on the text node."""
    runs = segment('<w:r><w:t xml:space="preserve"> a </w:t><w:t>b</w:t></w:r>')
    assert runs[0].inner_texts[0].preserve_space is True
    assert runs[0].inner_texts[1].preserve_space is False


def test_entities_are_not_decoded():
    """Literal text is the raw substring between tags."""
    runs = segment("<w:r><w:t>Fish &amp; Chips &#x41;</w:t></w:r>")
    assert runs[0].inner_texts[0].literal_text == "Fish &amp; Chips &#x41;"


def test_run_without_text_is_kept():
    """A run with no text nodes still takes part in reassembly."""
    runs = segment("<w:p><w:r><w:rPr><w:b/></w:rPr></w:r></w:p>")
    assert runs[0].inner_texts == []
    assert runs[0].props == "<w:b/>"


def test_empty_text_element_is_kept():
    """An empty <w:t></w:t> is a text node with empty literal text."""
    runs = segment("<w:r><w:t></w:t></w:r>")
    assert runs[0].inner_texts[0].literal_text == ""


def test_bare_empty_nodes_survive_reassembly():
    """Empty runs and texts with no markup before them are not dropped."""
    body = "<w:r></w:r><w:r><w:t></w:t></w:r>"
    runs = segment(body)

    assert len(runs) == 2
    assert runs[0].xml_before == "" and runs[0].inner_texts == []
    assert runs[1].inner_texts[0].xml_before == ""
    assert reassemble(runs) == body


def test_run_literal_text():
    """A run exposes the concatenation of its literal texts."""
    runs = segment("<w:r><w:t>ab</w:t><w:tab/><w:t>cd</w:t></w:r>")
    assert runs[0].literal_text == "abcd"


# ============================================================================
# Round trip
# ============================================================================


@pytest.mark.parametrize(
    "xml",
    [
        DOCUMENT_XML,
        PRETTY_DOCUMENT_XML,
        "",
        "<w:p/>",
        "<w:r></w:r>",
        "<w:r><w:t></w:t></w:r>",
        "<w:r><w:rPr></w:rPr><w:t>a</w:t></w:r>",
        "<w:r><w:t/></w:r>",
        "<w:r><w:t>Hello </w:t><w:t>World</w:t></w:r>",
        '<w:r><w:t xml:space="preserve">no edge spaces</w:t></w:r>',
        "<w:r><w:t> spaces without attribute </w:t></w:r>",
        "<w:r><w:t>a</w:t></w:r><w:r><w:t>b</w:t></w:r>",
        '<w:r w:rsidR="1"><w:t>x</w:t></w:r><w:r><w:t>y</w:t></w:r>',
        "<w:r><w:t>line\nbreak</w:t>\n</w:r>\n",
    ],
)
def test_round_trip(xml):
    """Reassembling the segmented body reproduces it exactly."""
    assert reassemble(segment(xml)) == xml


def test_round_trip_per_run_slice():
    """Each run serializes to its own slice of the body."""
    xml = "<w:p><w:r><w:t>a</w:t></w:r><w:bookmarkStart/><w:r><w:t>b</w:t></w:r></w:p>"
    runs = segment(xml)
    assert [r.as_xml() for r in runs] == [
        "<w:p><w:r><w:t>a</w:t></w:r>",
        "<w:bookmarkStart/><w:r><w:t>b</w:t></w:r>",
        "</w:p>",
    ]
