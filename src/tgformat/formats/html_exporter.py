"""Telegram HTML dialect exporter."""

from tgformat.formats.base import Exporter
from tgformat.formatting.ir import Container, Element, Node, TagKind, Text
from tgformat.formatting.markup import escape_html

SPOILER_CLASS = "tg-spoiler"
MISSING_HREF = "#"

_SIMPLE_TAGS: dict[TagKind, str] = {
    TagKind.BOLD: "b",
    TagKind.ITALIC: "i",
    TagKind.UNDERLINE: "u",
    TagKind.STRIKETHROUGH: "s",
    TagKind.CODE: "code",
    TagKind.BLOCKQUOTE: "blockquote",
}


def _walk(node: Node, out: list[str]) -> None:
    if isinstance(node, Text):
        out.append(escape_html(node.value))
        return
    if not isinstance(node, Element):
        raise TypeError(f"Cannot serialize node of type {type(node).__name__}")

    def open_close(open_tag: str, close_tag: str) -> None:
        out.append(open_tag)
        for child in node.children:
            _walk(child, out)
        out.append(close_tag)

    kind = node.kind
    if kind in _SIMPLE_TAGS:
        tag = _SIMPLE_TAGS[kind]
        open_close(f"<{tag}>", f"</{tag}>")
    elif kind is TagKind.SPOILER:
        open_close(f'<span class="{SPOILER_CLASS}">', "</span>")
    elif kind is TagKind.LINK:
        href = node.href if node.href is not None else MISSING_HREF
        open_close(f'<a href="{escape_html(href)}">', "</a>")
    elif kind is TagKind.LINE_BREAK:
        out.append("\n")
    elif kind is TagKind.PARAGRAPH:
        for child in node.children:
            _walk(child, out)
        # Empty paragraphs must not accumulate blank lines
        if node.text_content:
            out.append("\n")
    else:
        raise AssertionError(f"Unhandled tag kind: {kind}")


def to_html_dialect(root: Container) -> str:
    """Serialize root's children as Telegram HTML.

    Whitespace inside text is kept exactly; only trailing newlines of the
    final output are stripped.
    """
    out: list[str] = []
    for child in root.children:
        _walk(child, out)
    return "".join(out).rstrip("\n")


class HTMLExporter(Exporter):
    """Exporter for the Telegram HTML parse mode."""

    @property
    def name(self) -> str:
        return "html"

    @property
    def action(self) -> str:
        return "Export to HTML"

    @property
    def extension(self) -> str:
        return ".html"

    def export(self, root: Container) -> str:
        return to_html_dialect(root)
