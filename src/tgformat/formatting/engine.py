"""Toggle formatting over a range of the document.

toggle_format either unwraps the innermost enclosing element of the
requested kind or wraps the selected content in a new one. Wrapping takes
one of two paths, chosen up front:

1. Aligned: both range ends sit on node boundaries of the same container,
   so the selected children move under the new element in place.
2. Fallback: boundary Text nodes are split, the selection is extracted
   into a fragment, and the new element is inserted where the content was.
"""

import logging
from typing import Optional

from tgformat.formatting.ir import Document, Element, TagKind, Text
from tgformat.formatting.ranges import (
    Range,
    Position,
    boundary,
    common_ancestor,
    extract_contents,
    has_content,
    is_well_formed,
    merge_text_run,
)

logger = logging.getLogger(__name__)

TOGGLEABLE_KINDS = frozenset(
    {
        TagKind.BOLD,
        TagKind.ITALIC,
        TagKind.UNDERLINE,
        TagKind.STRIKETHROUGH,
        TagKind.CODE,
        TagKind.SPOILER,
        TagKind.BLOCKQUOTE,
        TagKind.LINK,
    }
)


def toggle_format(
    document: Document,
    rng: Range,
    kind: TagKind,
    attrs: Optional[dict[str, str]] = None,
) -> Range:
    """Add or remove one layer of formatting over the selected range.

    Args:
        document: The document root the range points into
        rng: The selection to format
        kind: One of TOGGLEABLE_KINDS
        attrs: Element attributes; only ``href`` is used, for LINK

    Returns:
        A range selecting the affected content after the change, or the
        input range unchanged when nothing was done.
    """
    if kind not in TOGGLEABLE_KINDS:
        raise ValueError(
            f"Cannot toggle {kind.name}. "
            f"Toggleable kinds: {', '.join(sorted(k.name for k in TOGGLEABLE_KINDS))}"
        )

    if rng.collapsed:
        logger.debug("Collapsed range, nothing to %s", kind.name)
        return rng
    if not is_well_formed(rng, document):
        logger.debug("Range is not inside the document, ignoring %s", kind.name)
        return rng
    if not has_content(rng):
        logger.debug("Range holds no characters, nothing to %s", kind.name)
        return rng

    existing = find_existing_wrapper(rng, kind)
    if existing is not None:
        logger.debug("Unwrapping existing %s", kind.name)
        return unwrap(existing)

    attributes = dict(attrs or {})
    if kind is TagKind.LINK and not attributes.get("href"):
        logger.debug("No href given, link not created")
        return rng

    return wrap(document, rng, kind, attributes)


def _selected_element(rng: Range) -> Optional[Element]:
    """The single element the range covers exactly, if any."""
    start = boundary(rng.start)
    end = boundary(rng.end)
    if start is None or end is None or start[0] is not end[0]:
        return None
    container, index = start
    if end[1] != index + 1:
        return None
    child = container.children[index]
    return child if isinstance(child, Element) else None


def find_existing_wrapper(rng: Range, kind: TagKind) -> Optional[Element]:
    """Find the innermost element of kind enclosing (or exactly covering) rng."""
    selected = _selected_element(rng)
    if selected is not None and selected.kind is kind:
        return selected

    node = common_ancestor(rng)
    while node is not None and not isinstance(node, Document):
        if isinstance(node, Element) and node.kind is kind:
            return node
        node = node.parent
    return None


def unwrap(wrapper: Element) -> Range:
    """Replace wrapper with a single Text of its flattened content.

    Formatting of descendants is discarded along with the wrapper.
    """
    flattened = Text(value=wrapper.text_content)
    length = len(flattened)
    wrapper.replace_with(flattened)
    merged, lead = merge_text_run(flattened)
    return Range(start=Position(merged, lead), end=Position(merged, lead + length))


def _aligned(rng: Range) -> bool:
    start = boundary(rng.start)
    end = boundary(rng.end)
    return start is not None and end is not None and start[0] is end[0]


def wrap(
    document: Document,
    rng: Range,
    kind: TagKind,
    attrs: Optional[dict[str, str]] = None,
) -> Range:
    """Wrap the selected content in a new element of kind."""
    wrapper = Element(kind=kind, attributes=dict(attrs or {}))

    if _aligned(rng):
        container, first = boundary(rng.start)  # type: ignore[misc]
        _, last = boundary(rng.end)  # type: ignore[misc]
        wrapper.extend(container.children[first:last])
        container.insert(first, wrapper)
    else:
        logger.debug("Range splits text, extracting contents for %s", kind.name)
        fragment, point = extract_contents(rng)
        wrapper.extend(fragment.take_children())
        point.node.insert(point.offset, wrapper)  # type: ignore[attr-defined]

    document.normalize()
    return Range.select_contents(wrapper)
