"""Unit tests for the markup tree model (ssml_pipeline.core.markup)."""

import pytest

from ssml_pipeline.core.markup import (
    Element,
    MarkupSyntaxError,
    TextNode,
    is_well_formed,
    parse_document,
    parse_fragment,
)


class TestParseDocument:

    def test_text_and_elements_in_order(self):
        root = parse_document('<speak>Hello<break time="1s"/>world</speak>')
        assert root.name == "speak"
        assert root.children == (
            TextNode("Hello"),
            Element(name="break", attributes=(("time", "1s"),)),
            TextNode("world"),
        )

    def test_names_lowercased_and_default_namespace_ignored(self):
        root = parse_document(
            '<SPEAK xmlns="http://www.w3.org/2001/10/synthesis"><Break/></SPEAK>'
        )
        assert [e.name for e in root.iter()] == ["speak", "break"]

    def test_attribute_lookup_ignores_name_case(self):
        root = parse_document('<speak><break TIME="500MS"/></speak>')
        brk = root.children[0]
        assert brk.get("time") == "500MS"
        assert brk.get("strength") is None
        assert brk.get("strength", "none") == "none"

    def test_malformed_raises(self):
        with pytest.raises(MarkupSyntaxError):
            parse_document("<speak>")

    def test_prefixed_name_kept_without_declaration(self):
        root = parse_document("<speak><mstts:express-as>Hi</mstts:express-as></speak>")
        assert [e.name for e in root.iter()] == ["speak", "mstts:express-as"]

    def test_prefixed_name_kept_with_declaration(self):
        root = parse_document(
            '<speak xmlns:mstts="https://www.w3.org/2001/mstts">'
            '<MSTTS:Silence type="Leading"/></speak>'
        )
        assert [e.name for e in root.iter()] == ["speak", "mstts:silence"]

    def test_lone_surrogate_raises_syntax_error(self):
        with pytest.raises(MarkupSyntaxError):
            parse_document("<speak>Hi \ud800</speak>")

    def test_nesting_limit(self):
        with pytest.raises(MarkupSyntaxError):
            parse_document("<p>" * 300 + "</p>" * 300)

    def test_text_split_by_comment_is_merged(self):
        root = parse_document("<speak>Hi<!-- note --> there</speak>")
        assert root.children == (TextNode("Hi there"),)

    def test_iter_is_depth_first(self):
        root = parse_document("<speak><p><s>a</s></p><p/></speak>")
        assert [e.name for e in root.iter()] == ["speak", "p", "s", "p"]


class TestParseFragment:

    def test_fragment_gets_speak_root(self):
        root = parse_fragment("one <emphasis>two</emphasis> three")
        assert root.name == "speak"
        assert root.children[0] == TextNode("one ")
        assert root.children[1].name == "emphasis"
        assert root.children[2] == TextNode(" three")

    def test_leading_declaration_ignored(self):
        root = parse_fragment('<?xml version="1.0"?><p>x</p>')
        assert [e.name for e in root.iter()] == ["speak", "p"]

    @pytest.mark.parametrize("text,expected", [
        ("plain", True),
        ("<p>a</p><p>b</p>", True),
        ("a < b", False),
        ("<p>unclosed", False),
    ])
    def test_is_well_formed(self, text, expected):
        assert is_well_formed(text) is expected
