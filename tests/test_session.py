"""Tests for the editor session."""

import pytest
from pathlib import Path

from tgformat.core.session import EditorSession, ExportResult, SessionError
from tgformat.formatting.ir import Document, TagKind, document, element, text


class TestPaste:
    """Tests for pasting clipboard content."""

    def test_paste_html(self):
        """Test pasted HTML is sanitized into the document."""
        session = EditorSession()
        session.paste(html="<b>hi</b> there")

        assert session.export("html").text == "<b>hi</b> there"

    def test_paste_clipboard_html(self, clipboard_html: str):
        """Test browser clipboard wrappers and attributes are dropped."""
        session = EditorSession()
        session.paste(html=clipboard_html)

        assert session.export("html").text == (
            '<b>hi</b> <a href="https://t.me/x">there</a>'
        )

    def test_html_preferred_over_text(self):
        """Test HTML wins when both flavors are on the clipboard."""
        session = EditorSession()
        session.paste(html="<i>x</i>", text="x")

        assert session.export("html").text == "<i>x</i>"

    def test_text_used_when_html_blank(self):
        """Test plain text is used when the HTML flavor is blank."""
        session = EditorSession()
        session.paste(html="  ", text="a\nb")

        assert session.export("html").text == "a\nb"

    def test_blank_paste_ignored(self, sample_document: Document):
        """Test pasting nothing leaves the document untouched."""
        session = EditorSession(sample_document.clone())
        session.paste(html="   ", text="")

        assert session.document == sample_document

    def test_consecutive_pastes_append(self):
        """Test the caret follows pasted content."""
        session = EditorSession()
        session.paste(text="a")
        session.paste(text="b")

        assert session.document == document(text("ab"))

    def test_paste_into_blank_document_resets_caret(self):
        """Test a stale selection is replaced when the document is blank."""
        session = EditorSession(document(text("   ")))
        session.select_all()
        session.paste(text="x")

        assert session.document.text_content == "x   "


class TestFormatting:
    """Tests for toggling formatting through the session."""

    def test_toggle_bold_twice(self):
        """Test toggling twice restores the original document."""
        session = EditorSession()
        session.paste(text="hello")
        original = session.document.clone()

        session.select_all()
        session.toggle(TagKind.BOLD)
        assert session.export("html").text == "<b>hello</b>"

        session.toggle(TagKind.BOLD)
        assert session.document == original

    def test_toggle_link(self):
        """Test links carry their target."""
        session = EditorSession(document(text("site")))
        session.select_all()
        session.toggle(TagKind.LINK, href="https://t.me/x")

        assert session.document == document(
            element(TagKind.LINK, text("site"), href="https://t.me/x")
        )

    def test_toggle_collapsed_is_noop(self, sample_document: Document):
        """Test toggling with no selection changes nothing."""
        session = EditorSession(sample_document.clone())
        session.toggle(TagKind.ITALIC)

        assert session.document == sample_document

    def test_type_over_selection(self, sample_document: Document):
        """Test typing replaces the selected content."""
        session = EditorSession(sample_document)
        session.select_all()
        session.type_text("new")

        assert session.document == document(text("new"))

    def test_clear_formatting(self, sample_document: Document):
        """Test clearing formatting keeps the text."""
        session = EditorSession(sample_document)
        session.clear_formatting()

        assert session.export("html").text == "hello world"

    def test_clear_all(self, sample_document: Document):
        """Test clearing all content."""
        session = EditorSession(sample_document)
        session.clear_all()

        assert session.export("html").text == ""
        assert session.selection.collapsed


class TestExport:
    """Tests for exporting."""

    def test_export_result(self, sample_document: Document):
        """Test the result carries the format and action names."""
        result = EditorSession(sample_document).export("markdown")

        assert isinstance(result, ExportResult)
        assert result.text == "*hello* world"
        assert result.format == "markdown"
        assert result.action == "Export to MarkdownV2"

    def test_export_literal(self, quote_document: Document):
        """Test the literal export."""
        result = EditorSession(quote_document).export("literal")

        assert result.text == "'<blockquote>a' + '\\n' + 'b</blockquote>'"
        assert result.action == "Export to Calculator"

    def test_export_default_format(self, sample_document: Document):
        """Test the default format is HTML."""
        assert EditorSession(sample_document).export().format == "html"

    def test_export_default_from_environment(
        self, sample_document: Document, monkeypatch: pytest.MonkeyPatch
    ):
        """Test the default format comes from settings."""
        monkeypatch.setenv("TGFORMAT_FORMAT", "markdown")

        assert EditorSession(sample_document).export().text == "*hello* world"

    def test_export_unknown_format(self, sample_document: Document):
        """Test unknown formats raise SessionError."""
        with pytest.raises(SessionError, match="Unsupported export format"):
            EditorSession(sample_document).export("rtf")

    def test_export_does_not_mutate(self, quote_document: Document):
        """Test exporting leaves the document unchanged."""
        session = EditorSession(quote_document)
        before = quote_document.clone()
        for name in ("html", "markdown", "literal"):
            session.export(name)

        assert session.document == before


class TestFromFile:
    """Tests for loading files."""

    def test_html_file(self, tmp_html_file: Path):
        """Test HTML files are pasted as HTML."""
        session = EditorSession.from_file(tmp_html_file)

        assert session.export("html").text == "<b>hi</b> <i>there</i>"

    def test_text_file(self, tmp_path: Path):
        """Test text files are pasted as plain text."""
        file_path = tmp_path / "note.txt"
        file_path.write_text("<b>not markup</b>\nline two", encoding="utf-8")
        session = EditorSession.from_file(file_path)

        assert session.export("html").text == (
            "&lt;b&gt;not markup&lt;/b&gt;\nline two"
        )

    def test_unsupported_extension(self, tmp_path: Path):
        """Test unsupported file types are rejected."""
        file_path = tmp_path / "doc.pdf"
        file_path.write_text("x")

        with pytest.raises(SessionError, match="Unsupported file format"):
            EditorSession.from_file(file_path)

    def test_missing_file(self, tmp_path: Path):
        """Test missing files raise SessionError."""
        with pytest.raises(SessionError, match="Could not read"):
            EditorSession.from_file(tmp_path / "missing.html")

    def test_encoding(self, tmp_path: Path):
        """Test an explicit encoding is used for reading."""
        file_path = tmp_path / "latin.txt"
        file_path.write_bytes("café".encode("latin-1"))
        session = EditorSession.from_file(file_path, encoding="latin-1")

        assert session.document.text_content == "café"
