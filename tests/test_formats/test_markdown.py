"""Tests for the MarkdownV2 exporter."""

import pytest

from tgformat.formats.markdown_exporter import (
    MarkdownExporter,
    escape_markdown,
    to_escaped_markdown,
)
from tgformat.formatting.ir import (
    Document,
    Element,
    TagKind,
    document,
    element,
    line_break,
    text,
)

RESERVED = "\\_*[]()~`>#+-=|{}.!"


class TestEscapeMarkdown:
    """Tests for MarkdownV2 escaping."""

    def test_example(self):
        """Test the documented example."""
        assert escape_markdown("a.b!c") == "a\\.b\\!c"

    def test_every_reserved_character(self):
        """Test each reserved character gets exactly one backslash."""
        assert escape_markdown(RESERVED) == "".join("\\" + char for char in RESERVED)

    def test_other_characters_untouched(self):
        """Test ordinary text and whitespace pass through."""
        value = "Привет, world:  1/2 ? @user\n\ttab"
        assert escape_markdown(value) == value


class TestEscapedMarkdown:
    """Tests for to_escaped_markdown."""

    def test_bold_then_plain(self, sample_document: Document):
        """Test the basic bold scenario."""
        assert to_escaped_markdown(sample_document) == "*hello* world"

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (TagKind.BOLD, "*t*"),
            (TagKind.ITALIC, "_t_"),
            (TagKind.UNDERLINE, "__t__"),
            (TagKind.STRIKETHROUGH, "~t~"),
            (TagKind.CODE, "`t`"),
            (TagKind.SPOILER, "||t||"),
            (TagKind.PARAGRAPH, "t"),
            (TagKind.BLOCKQUOTE, "> t"),
        ],
    )
    def test_element_mapping(self, kind: TagKind, expected: str):
        """Test the fixed element table."""
        assert to_escaped_markdown(document(element(kind, text("t")))) == expected

    def test_every_kind_handled(self):
        """Test no tag kind falls through the serializer."""
        for kind in TagKind:
            node = Element(kind=kind)
            if kind is not TagKind.LINE_BREAK:
                node.append(text("x"))
            to_escaped_markdown(document(node))

    def test_text_inside_formatting_escaped(self):
        """Test text is escaped inside formatting too."""
        doc = document(element(TagKind.BOLD, text("1.5")))
        assert to_escaped_markdown(doc) == "*1\\.5*"

    def test_link(self):
        """Test links escape their target."""
        doc = document(element(TagKind.LINK, text("site"), href="https://t.me/x"))
        assert to_escaped_markdown(doc) == "[site](https://t\\.me/x)"

    def test_link_without_href(self):
        """Test a missing href becomes an escaped placeholder."""
        doc = document(element(TagKind.LINK, text("site")))
        assert to_escaped_markdown(doc) == "[site](\\#)"

    def test_blockquote_lines(self, quote_document: Document):
        """Test each quoted line gets its own prefix."""
        assert to_escaped_markdown(quote_document) == "> a\n> b"

    def test_blockquote_blank_line(self):
        """Test blank lines inside a quote keep the bare marker."""
        doc = document(
            element(TagKind.BLOCKQUOTE, text("a"), line_break(), line_break(), text("b"))
        )
        assert to_escaped_markdown(doc) == "> a\n>\n> b"

    def test_blockquote_with_paragraphs(self):
        """Test paragraphs inside a quote do not leave a trailing marker."""
        doc = document(
            element(
                TagKind.BLOCKQUOTE,
                element(TagKind.PARAGRAPH, text("one")),
                element(TagKind.PARAGRAPH, element(TagKind.BOLD, text("two"))),
            )
        )
        assert to_escaped_markdown(doc) == "> one\n> *two*"

    def test_empty_paragraph_adds_no_line(self):
        """Test the paragraph rule matches the HTML exporter."""
        doc = document(
            element(TagKind.PARAGRAPH, text("x")),
            element(TagKind.PARAGRAPH, text("")),
            element(TagKind.PARAGRAPH, text("y")),
        )
        assert to_escaped_markdown(doc) == "x\ny"

    def test_only_trailing_newlines_stripped(self):
        """Test leading newlines stay and trailing ones go."""
        doc = document(line_break(), text("a"), line_break(), line_break())
        assert to_escaped_markdown(doc) == "\na"

    def test_unknown_node_type(self, stray_document: Document):
        """Test a foreign node type is rejected."""
        with pytest.raises(TypeError, match="StrayNode"):
            to_escaped_markdown(stray_document)

    def test_exporter(self, sample_document: Document):
        """Test the exporter class delegates to the serializer."""
        exporter = MarkdownExporter()
        assert exporter.export(sample_document) == "*hello* world"
        assert exporter.extension == ".md"
