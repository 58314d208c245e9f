"""Document tree, ranges, formatting engine and sanitizer."""

from tgformat.formatting.ir import (
    TagKind,
    Node,
    Text,
    Container,
    Element,
    Document,
    text,
    element,
    document,
    line_break,
)
from tgformat.formatting.ranges import Position, Range
from tgformat.formatting.engine import TOGGLEABLE_KINDS, toggle_format
from tgformat.formatting.sanitizer import sanitize, sanitize_html
from tgformat.formatting.markup import to_editor_markup

__all__ = [
    "TagKind",
    "Node",
    "Text",
    "Container",
    "Element",
    "Document",
    "text",
    "element",
    "document",
    "line_break",
    "Position",
    "Range",
    "TOGGLEABLE_KINDS",
    "toggle_format",
    "sanitize",
    "sanitize_html",
    "to_editor_markup",
]
