"""Sanitize externally sourced markup into the canonical vocabulary.

Pasted HTML arrives as a BeautifulSoup tree. The sanitizer walks it top-down
and builds a detached Document:

- canonical tags (by name) are kept with every attribute dropped except
  ``href`` on links;
- spoilers are recognised by tag name, class token, or inline style;
- inline style formatting (bold weight, italic, underline, line-through)
  is promoted to canonical elements;
- ``<pre>`` blocks become inline code holding only their text;
- anything else is unwrapped: its children are spliced into its place.

The sanitizer never raises. The worst result for odd input is a text-only
or empty fragment.
"""

import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from tgformat.formatting.ir import Document, Element, Node, TagKind, Text, line_break

logger = logging.getLogger(__name__)

Markup = Union[PageElement, Node, str]

TAG_KINDS: dict[str, TagKind] = {
    "b": TagKind.BOLD,
    "strong": TagKind.BOLD,
    "i": TagKind.ITALIC,
    "em": TagKind.ITALIC,
    "u": TagKind.UNDERLINE,
    "ins": TagKind.UNDERLINE,
    "s": TagKind.STRIKETHROUGH,
    "del": TagKind.STRIKETHROUGH,
    "strike": TagKind.STRIKETHROUGH,
    "code": TagKind.CODE,
    "tt": TagKind.CODE,
    "kbd": TagKind.CODE,
    "samp": TagKind.CODE,
    "a": TagKind.LINK,
    "blockquote": TagKind.BLOCKQUOTE,
    "p": TagKind.PARAGRAPH,
    "div": TagKind.PARAGRAPH,
    "br": TagKind.LINE_BREAK,
    "tg-spoiler": TagKind.SPOILER,
}

SPOILER_CLASSES = frozenset({"spoiler", "tg-spoiler"})
SPOILER_STYLE_KEYWORD = "spoiler"

# Promotion order, outermost first
_STYLE_ORDER = (
    TagKind.BOLD,
    TagKind.ITALIC,
    TagKind.UNDERLINE,
    TagKind.STRIKETHROUGH,
)

_STYLE_DECLARATION = re.compile(r"\s*([-\w]+)\s*:\s*([^;]*)")


def parse_style(style: str) -> dict[str, str]:
    """Parse an inline style attribute into lowercase property -> value."""
    declarations: dict[str, str] = {}
    for part in style.split(";"):
        match = _STYLE_DECLARATION.match(part)
        if match:
            declarations[match.group(1).lower()] = match.group(2).strip().lower()
    return declarations


def _is_bold_weight(weight: str) -> bool:
    if weight in ("bold", "bolder"):
        return True
    return weight.isdigit() and int(weight) >= 600


def style_kinds(style: str) -> list[TagKind]:
    """Canonical kinds implied by an inline style, outermost first."""
    declarations = parse_style(style)
    decoration = " ".join(
        (declarations.get("text-decoration", ""), declarations.get("text-decoration-line", ""))
    )
    found = set()
    if _is_bold_weight(declarations.get("font-weight", "")):
        found.add(TagKind.BOLD)
    if declarations.get("font-style", "").startswith(("italic", "oblique")):
        found.add(TagKind.ITALIC)
    if "underline" in decoration:
        found.add(TagKind.UNDERLINE)
    if "line-through" in decoration:
        found.add(TagKind.STRIKETHROUGH)
    return [kind for kind in _STYLE_ORDER if kind in found]


def _class_tokens(tag: Tag) -> set[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return {token.lower() for token in classes}


def _style_of(tag: Tag) -> str:
    style = tag.get("style") or ""
    return style if isinstance(style, str) else " ".join(style)


def is_spoiler(tag: Tag) -> bool:
    """Recognise a spoiler by tag name, class token, or inline style."""
    if (tag.name or "").lower() == "tg-spoiler":
        return True
    if _class_tokens(tag) & SPOILER_CLASSES:
        return True
    return SPOILER_STYLE_KEYWORD in _style_of(tag).lower()


def tag_kind(tag: Tag) -> Optional[TagKind]:
    """The canonical kind of a tag, before style promotion."""
    kind = TAG_KINDS.get((tag.name or "").lower())
    if kind is not None:
        return kind
    if is_spoiler(tag):
        return TagKind.SPOILER
    return None


def _sanitize_children(tag: Tag) -> list[Node]:
    nodes: list[Node] = []
    for child in tag.children:
        nodes.extend(_sanitize_element(child))
    return nodes


def _sanitize_tag(tag: Tag) -> list[Node]:
    name = (tag.name or "").lower()
    if name == "pre":
        content = tag.get_text()
        return [Element(kind=TagKind.CODE, children=[Text(value=content)] if content else [])]

    kind = tag_kind(tag)
    children = _sanitize_children(tag)

    if kind is TagKind.LINE_BREAK:
        nodes: list[Node] = [line_break(), *children]
    elif kind is TagKind.LINK:
        href = tag.get("href")
        attributes = {"href": href} if isinstance(href, str) else {}
        nodes = [Element(kind=kind, attributes=attributes, children=children)]
    elif kind is not None:
        nodes = [Element(kind=kind, children=children)]
    else:
        nodes = children

    for promoted in reversed(style_kinds(_style_of(tag))):
        if promoted is kind:
            continue
        nodes = [Element(kind=promoted, children=nodes)]
    return nodes


def _sanitize_element(node: PageElement) -> list[Node]:
    if isinstance(node, PreformattedString):
        # comments, doctypes, CDATA, processing instructions
        return []
    if isinstance(node, NavigableString):
        return [Text(value=str(node))] if str(node) else []
    if isinstance(node, Tag):
        return _sanitize_tag(node)
    return []


def sanitize(markup: Markup) -> Document:
    """Normalize external markup into a canonical Document fragment.

    Args:
        markup: A BeautifulSoup tree or element, a plain string (treated as
            text), or an already canonical node (copied as is)

    Returns:
        A detached Document holding the canonical content
    """
    fragment = Document()
    if isinstance(markup, Document):
        fragment = markup.clone()
    elif isinstance(markup, (Element, Text)):
        fragment.append(markup.clone())
    elif isinstance(markup, PageElement):
        fragment.extend(_sanitize_element(markup))
    elif isinstance(markup, str):
        if markup:
            fragment.append(Text(value=markup))
    else:
        logger.debug("Unrecognised markup of type %s, returning empty fragment", type(markup))
    fragment.normalize()
    return fragment


def sanitize_html(html: str) -> Document:
    """Parse an HTML string and sanitize it."""
    soup = BeautifulSoup(html, "html.parser")
    return sanitize(soup)
