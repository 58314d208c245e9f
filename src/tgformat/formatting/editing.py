"""Plain editing operations: typing, paste, clearing.

These mutate the document outside of the formatting engine. Like the
engine, each operation returns a fresh Range for the caret afterwards.
"""

from tgformat.formatting.ir import (
    Container,
    Document,
    Element,
    Node,
    TagKind,
    Text,
    line_break,
)
from tgformat.formatting.ranges import (
    Position,
    Range,
    boundary,
    extract_contents,
    merge_text_run,
)

# Elements that end a line when formatting is cleared
_LINE_ENDING_KINDS = frozenset({TagKind.PARAGRAPH, TagKind.BLOCKQUOTE, TagKind.LINE_BREAK})


def delete_contents(rng: Range) -> Position:
    """Remove the selected content and return the collapsed caret position."""
    if rng.collapsed:
        return rng.start
    _, point = extract_contents(rng)
    return point


def _insertion_point(position: Position) -> tuple[Container, int]:
    node = position.node
    if isinstance(node, Text) and 0 < position.offset < len(node):
        tail = node.split(position.offset)
        return tail.parent, tail.parent.index(tail)  # type: ignore[union-attr]
    resolved = boundary(position)
    if resolved is None:
        raise ValueError(f"Cannot insert at {position!r}")
    return resolved


def insert_nodes(document: Document, position: Position, nodes: list[Node]) -> Range:
    """Insert nodes at position; returns a collapsed range after them."""
    if not nodes:
        return Range.collapsed_at(position)

    container, index = _insertion_point(position)
    for offset, node in enumerate(nodes):
        container.insert(index + offset, node)

    last = nodes[-1]
    if isinstance(last, Text):
        merged, lead = merge_text_run(last)
        caret = Position(merged, lead + len(last))
        document.normalize()
        return Range.collapsed_at(caret)

    document.normalize()
    return Range.collapsed_at(Position(container, container.index(last) + 1))


def text_to_nodes(value: str) -> list[Node]:
    """Convert plain text into Text nodes separated by line breaks."""
    nodes: list[Node] = []
    for number, line in enumerate(value.replace("\r\n", "\n").split("\n")):
        if number:
            nodes.append(line_break())
        if line:
            nodes.append(Text(value=line))
    return nodes


def insert_text(document: Document, rng: Range, value: str) -> Range:
    """Replace the selection with plain text."""
    point = delete_contents(rng)
    return insert_nodes(document, point, text_to_nodes(value))


def insert_fragment(document: Document, rng: Range, fragment: Document) -> Range:
    """Replace the selection with the children of a (sanitized) fragment."""
    point = delete_contents(rng)
    return insert_nodes(document, point, fragment.take_children())


def _flatten(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    result = "".join(_flatten(child) for child in node.children)  # type: ignore[attr-defined]
    if isinstance(node, Element) and node.kind in _LINE_ENDING_KINDS:
        result += "\n"
    return result


def clear_formatting(document: Document) -> None:
    """Strip all formatting while keeping the line structure.

    Every paragraph, blockquote and line break ends a line. Lines are
    rebuilt as Text nodes separated by line breaks; whitespace-only lines
    after the first keep only their line break.
    """
    flattened = "".join(_flatten(child) for child in document.children) + "\n"
    lines = flattened.split("\n")
    document.take_children()
    for number, line in enumerate(lines):
        if line.strip() or (number == 0 and line):
            document.append(Text(value=line))
        if number < len(lines) - 1:
            document.append(line_break())


def clear_document(document: Document) -> None:
    """Remove all content."""
    document.take_children()


def is_blank(document: Document) -> bool:
    """True when the document holds no visible text."""
    return not document.text_content.strip()
