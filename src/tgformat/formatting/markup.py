"""Editor markup: the HTML the editing surface holds for a canonical tree."""

from tgformat.formatting.ir import Container, Element, Node, TagKind, Text

# Class the editing surface uses for spoiler spans
EDITOR_SPOILER_CLASS = "spoiler"

_EDITOR_TAGS: dict[TagKind, str] = {
    TagKind.BOLD: "b",
    TagKind.ITALIC: "i",
    TagKind.UNDERLINE: "u",
    TagKind.STRIKETHROUGH: "s",
    TagKind.CODE: "code",
    TagKind.BLOCKQUOTE: "blockquote",
    TagKind.PARAGRAPH: "p",
}


def escape_html(value: str) -> str:
    """Escape the five HTML-significant characters."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def _render(node: Node, out: list[str]) -> None:
    if isinstance(node, Text):
        out.append(escape_html(node.value))
        return
    if not isinstance(node, Element):
        raise TypeError(f"Cannot serialize node of type {type(node).__name__}")

    if node.kind is TagKind.LINE_BREAK:
        out.append("<br>")
        return
    if node.kind is TagKind.SPOILER:
        open_tag, close_tag = f'<span class="{EDITOR_SPOILER_CLASS}">', "</span>"
    elif node.kind is TagKind.LINK:
        href = f' href="{escape_html(node.href)}"' if node.href is not None else ""
        open_tag, close_tag = f"<a{href}>", "</a>"
    else:
        tag = _EDITOR_TAGS[node.kind]
        open_tag, close_tag = f"<{tag}>", f"</{tag}>"

    out.append(open_tag)
    for child in node.children:
        _render(child, out)
    out.append(close_tag)


def to_editor_markup(root: Container) -> str:
    """Render the children of root as editor HTML.

    The output re-sanitizes to the same tree.
    """
    out: list[str] = []
    for child in root.children:
        _render(child, out)
    return "".join(out)
