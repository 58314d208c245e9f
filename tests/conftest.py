"""Pytest fixtures for tgformat tests."""

import pytest
from pathlib import Path

import tgformat.config
from tgformat.formatting.ir import Document, Node, TagKind, element, line_break, text


class StrayNode(Node):
    """A node type no serializer knows about."""

    @property
    def text_content(self) -> str:
        return "stray"

    def clone(self) -> "StrayNode":
        return StrayNode()


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from default settings."""
    for name in ("TGFORMAT_FORMAT", "TGFORMAT_ENCODING", "TGFORMAT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(tgformat.config, "_settings", None)


@pytest.fixture
def stray_document() -> Document:
    """A document holding a node outside the Text/Element vocabulary."""
    return Document(children=[StrayNode()])


@pytest.fixture
def plain_document() -> Document:
    """A document holding one run of plain text."""
    return Document(children=[text("hello world")])


@pytest.fixture
def sample_document() -> Document:
    """Bold 'hello' followed by plain ' world'."""
    return Document(children=[element(TagKind.BOLD, text("hello")), text(" world")])


@pytest.fixture
def quote_document() -> Document:
    """A two-line blockquote."""
    return Document(
        children=[element(TagKind.BLOCKQUOTE, text("a"), line_break(), text("b"))]
    )


@pytest.fixture
def clipboard_html() -> str:
    """HTML as a browser puts it on the clipboard."""
    return (
        '<html><body><!--StartFragment-->'
        '<span style="font-weight:bold">hi</span> '
        '<a href="https://t.me/x" target="_blank" class="link">there</a>'
        '<!--EndFragment--></body></html>'
    )


@pytest.fixture
def tmp_html_file(tmp_path: Path) -> Path:
    """A temporary HTML input file."""
    file_path = tmp_path / "message.html"
    file_path.write_text("<b>hi</b> <i>there</i>", encoding="utf-8")
    return file_path
