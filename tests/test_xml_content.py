"""Tests for example extraction and XML pretty printing."""
import pytest
from doc_restlet.errors import XmlError
from doc_restlet.xml_content import (
    clean_whitespace,
    get_example_content,
    parse_xml,
    to_string,
)

DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'


class TestExampleContent:
    """Test selection of the example subtree."""

    def test_first_element_of_root_level_example(self):
        doc = parse_xml("<root><example><item id='1'/><item id='2'/></example></root>")
        node = get_example_content(doc)
        assert node.tagName == "item"
        assert node.getAttribute("id") == "1"

    def test_skips_text_and_comments_before_element(self):
        doc = parse_xml("<root><example>\n  <!-- c -->text<item/></example></root>")
        assert get_example_content(doc).tagName == "item"

    def test_no_example(self):
        assert get_example_content(parse_xml("<root><item/></root>")) is None

    def test_nested_example_is_ignored(self):
        doc = parse_xml("<root><a><example><deep/></example></a></root>")
        assert get_example_content(doc) is None

    def test_nested_example_before_root_level_one(self):
        doc = parse_xml(
            "<root><a><example><deep/></example></a>"
            "<example><shallow/></example></root>"
        )
        assert get_example_content(doc).tagName == "shallow"

    def test_example_without_element_children(self):
        assert get_example_content(parse_xml("<root><example>text</example></root>")) is None

    def test_root_named_example_is_not_selected(self):
        assert get_example_content(parse_xml("<example/>")) is None

    def test_matches_local_name_in_namespace(self):
        doc = parse_xml('<r:root xmlns:r="urn:r"><r:example><r:item/></r:example></r:root>')
        assert get_example_content(doc).localName == "item"


class TestCleanWhitespace:
    """Test removal of whitespace-only text."""

    def test_removes_indentation_only(self):
        doc = parse_xml("<root>\n  <a> x </a>\n  <b>\t</b>\n</root>")
        assert clean_whitespace(doc) == 4
        assert doc.documentElement.toxml() == "<root><a> x </a><b/></root>"


class TestToString:
    """Test pretty printing."""

    def test_single_element(self):
        doc = parse_xml("<root><example><item id=\"1\"/></example></root>")
        assert to_string(get_example_content(doc)) == DECLARATION + '<item id="1"/>'

    def test_indents_two_spaces(self):
        doc = parse_xml("<a>  <b><c>1</c></b>\n<d/></a>")
        assert to_string(doc) == (
            DECLARATION
            + "<a>\n  <b>\n    <c>1</c>\n  </b>\n  <d/>\n</a>"
        )

    def test_mixed_content_is_kept(self):
        doc = parse_xml("<p>Hello <b>bold</b> world</p>")
        assert to_string(doc) == DECLARATION + "<p>Hello <b>bold</b> world</p>"

    def test_carries_namespace_of_ancestors(self):
        doc = parse_xml('<root xmlns:n="urn:n"><example><n:item/></example></root>')
        out = to_string(get_example_content(doc))
        assert 'xmlns:n="urn:n"' in out
        parse_xml(out.encode("utf-8"))

    def test_non_ascii_text(self):
        doc = parse_xml("<a>räksmörgås</a>".encode("utf-8"))
        assert to_string(doc) == DECLARATION + "<a>räksmörgås</a>"

    @pytest.mark.parametrize("source", [
        "<root><example><payload><n>7</n></payload></example></root>",
        "<a>\n    <b x='1'>  <c/>\n</b><!-- note --><p>Hi <i>there</i> you</p></a>",
        "<ok/>",
    ])
    def test_printing_is_idempotent(self, source):
        first = to_string(parse_xml(source))
        second = to_string(parse_xml(first.encode("utf-8")))
        assert first == second


class TestParseXml:
    """Test XML parse failures."""

    def test_invalid_xml(self):
        with pytest.raises(XmlError) as exc_info:
            parse_xml(b"not xml", "http://example.org/rest/ts/x")
        assert exc_info.value.details["url"] == "http://example.org/rest/ts/x"

    def test_empty_payload(self):
        with pytest.raises(XmlError):
            parse_xml(b"")
