"""Telegram MarkdownV2 exporter."""

import re

from tgformat.formats.base import Exporter
from tgformat.formatting.ir import Container, Element, Node, TagKind, Text

# Every character MarkdownV2 reserves must be backslash-escaped in text
RESERVED_PATTERN = re.compile(r"[\\_*\[\]()~`>#+\-=|{}.!]")

MISSING_HREF = "#"

_DELIMITERS: dict[TagKind, str] = {
    TagKind.BOLD: "*",
    TagKind.ITALIC: "_",
    TagKind.UNDERLINE: "__",
    TagKind.STRIKETHROUGH: "~",
    TagKind.CODE: "`",
    TagKind.SPOILER: "||",
}


def escape_markdown(value: str) -> str:
    """Prefix every reserved character with a backslash."""
    return RESERVED_PATTERN.sub(lambda match: "\\" + match.group(0), value)


def _quote(value: str) -> str:
    """Prefix each line with '> ' (blank lines get a bare '>')."""
    return "\n".join(
        f"> {line}" if line.strip() else ">" for line in value.split("\n")
    )


def _walk(node: Node, out: list[str]) -> None:
    if isinstance(node, Text):
        out.append(escape_markdown(node.value))
        return
    if not isinstance(node, Element):
        raise TypeError(f"Cannot serialize node of type {type(node).__name__}")

    kind = node.kind
    if kind in _DELIMITERS:
        delimiter = _DELIMITERS[kind]
        out.append(delimiter)
        for child in node.children:
            _walk(child, out)
        out.append(delimiter)
    elif kind is TagKind.LINK:
        href = node.href if node.href is not None else MISSING_HREF
        out.append("[")
        for child in node.children:
            _walk(child, out)
        out.append(f"]({escape_markdown(href)})")
    elif kind is TagKind.BLOCKQUOTE:
        out.append(_quote(to_escaped_markdown(node)))
    elif kind is TagKind.LINE_BREAK:
        out.append("\n")
    elif kind is TagKind.PARAGRAPH:
        for child in node.children:
            _walk(child, out)
        if node.text_content:
            out.append("\n")
    else:
        raise AssertionError(f"Unhandled tag kind: {kind}")


def to_escaped_markdown(root: Container) -> str:
    """Serialize root's children as Telegram MarkdownV2."""
    out: list[str] = []
    for child in root.children:
        _walk(child, out)
    return "".join(out).rstrip("\n")


class MarkdownExporter(Exporter):
    """Exporter for the Telegram MarkdownV2 parse mode."""

    @property
    def name(self) -> str:
        return "markdown"

    @property
    def action(self) -> str:
        return "Export to MarkdownV2"

    @property
    def extension(self) -> str:
        return ".md"

    def export(self, root: Container) -> str:
        return to_escaped_markdown(root)
