"""Editor session: one document, one selection, and the editing actions."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tgformat.config import get_settings
from tgformat.formats import get_exporter
from tgformat.formatting.editing import (
    clear_document,
    clear_formatting,
    insert_fragment,
    insert_text,
    is_blank,
)
from tgformat.formatting.engine import toggle_format
from tgformat.formatting.ir import Document, TagKind
from tgformat.formatting.ranges import Position, Range
from tgformat.formatting.sanitizer import sanitize_html

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".html", ".htm", ".txt")


class SessionError(Exception):
    """Error loading or exporting a document."""

    pass


@dataclass
class ExportResult:
    """An exported string and the action that produced it.

    Attributes:
        text: The exported text
        format: Export format name
        action: UI action name, for status messages
    """

    text: str
    format: str
    action: str


class EditorSession:
    """Owns a document and the current selection.

    All editing goes through this object, so no two operations interleave
    on the same tree. Every mutating action replaces the selection with the
    range the operation returned.
    """

    def __init__(self, document: Optional[Document] = None) -> None:
        self.document = document if document is not None else Document()
        self.selection = Range.collapsed_at(Position(self.document, 0))

    @classmethod
    def from_file(cls, path: Path, encoding: Optional[str] = None) -> "EditorSession":
        """Create a session holding the content of an HTML or text file."""
        ext = path.suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise SessionError(
                f"Unsupported file format: {ext}. "
                f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
            )
        try:
            content = path.read_text(encoding=encoding or get_settings().encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise SessionError(f"Could not read {path}: {e}") from e

        session = cls()
        if ext == ".txt":
            session.paste(text=content)
        else:
            session.paste(html=content)
        logger.debug("Loaded %s (%d characters)", path, len(session.document.text_content))
        return session

    def select(self, rng: Range) -> None:
        self.selection = rng

    def select_all(self) -> Range:
        """Select the whole document."""
        self.selection = Range.select_contents(self.document)
        return self.selection

    def toggle(self, kind: TagKind, href: Optional[str] = None) -> Range:
        """Toggle formatting of kind over the current selection."""
        attrs = {"href": href} if href is not None else None
        self.selection = toggle_format(self.document, self.selection, kind, attrs)
        return self.selection

    def paste(self, html: Optional[str] = None, text: Optional[str] = None) -> Range:
        """Paste clipboard content over the selection.

        Non-blank HTML is sanitized and inserted; otherwise non-blank plain
        text is inserted. Blank input is ignored.
        """
        if is_blank(self.document):
            self.selection = Range.collapsed_at(Position(self.document, 0))

        if html and html.strip():
            fragment = sanitize_html(html)
            self.selection = insert_fragment(self.document, self.selection, fragment)
        elif text and text.strip():
            self.selection = insert_text(self.document, self.selection, text)
        else:
            logger.debug("Nothing to paste")
        return self.selection

    def type_text(self, value: str) -> Range:
        """Replace the selection with typed text."""
        self.selection = insert_text(self.document, self.selection, value)
        return self.selection

    def clear_formatting(self) -> None:
        """Remove all formatting, keeping the text and line structure."""
        clear_formatting(self.document)
        self.selection = Range.collapsed_at(Position(self.document, 0))

    def clear_all(self) -> None:
        """Remove all content."""
        clear_document(self.document)
        self.selection = Range.collapsed_at(Position(self.document, 0))

    def export(self, format_name: Optional[str] = None) -> ExportResult:
        """Export a snapshot of the document.

        Raises:
            SessionError: If the format is not supported
        """
        name = format_name or get_settings().default_format
        try:
            exporter = get_exporter(name)
        except ValueError as e:
            raise SessionError(str(e)) from e
        text = exporter.export(self.document.clone())
        return ExportResult(text=text, format=exporter.name, action=exporter.action)
