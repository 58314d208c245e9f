"""Ranges over the document tree.

A Range is a pair of positions (node + offset). For a Text position the
offset indexes into the string; for a container position it indexes between
children. Ranges hold non-owning references and go stale once the nodes they
point at are removed, so every mutating operation returns a fresh Range.
"""

from dataclasses import dataclass
from typing import Optional

from tgformat.formatting.ir import Container, Document, Element, Node, TagKind, Text


@dataclass(frozen=True, eq=False)
class Position:
    """A location in the tree: a node and an offset inside it."""

    node: Node
    offset: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.node is other.node and self.offset == other.offset

    def __hash__(self) -> int:
        return hash((id(self.node), self.offset))


@dataclass(frozen=True)
class Range:
    """An ordered pair of positions."""

    start: Position
    end: Position

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    @classmethod
    def collapsed_at(cls, position: Position) -> "Range":
        return cls(start=position, end=position)

    @classmethod
    def select_contents(cls, node: Node) -> "Range":
        """Range covering the full contents of node."""
        if isinstance(node, Text):
            length = len(node)
        elif isinstance(node, Container):
            length = len(node.children)
        else:
            raise ValueError(f"Cannot select contents of {node!r}")
        return cls(start=Position(node, 0), end=Position(node, length))


def _ancestors(node: Node) -> list[Node]:
    """Node and its ancestors, innermost first."""
    chain = [node]
    while chain[-1].parent is not None:
        chain.append(chain[-1].parent)
    return chain


def _path(node: Node) -> list[int]:
    """Child indices leading from the root down to node."""
    path: list[int] = []
    while node.parent is not None:
        path.append(node.parent.index(node))
        node = node.parent
    path.reverse()
    return path


def _offset_in_bounds(position: Position) -> bool:
    node = position.node
    if isinstance(node, Text):
        limit = len(node)
    elif isinstance(node, Container):
        limit = len(node.children)
    else:
        return False
    return 0 <= position.offset <= limit


def _key(position: Position) -> list[int]:
    """Document-order sort key: the node's path plus the offset."""
    return _path(position.node) + [position.offset]


def is_well_formed(rng: Range, root: Node) -> bool:
    """Check both positions lie under root and start precedes or equals end."""
    for position in (rng.start, rng.end):
        if position.node.root is not root or not _offset_in_bounds(position):
            return False
    return _key(rng.start) <= _key(rng.end)


def _first_selected_offset(base: list[int], start_key: list[int]) -> Optional[int]:
    """First character offset of the Text at base that lies after start_key."""
    if start_key[:len(base)] == base:
        return start_key[len(base)] if len(start_key) > len(base) else 0
    return 0 if base > start_key else None


def has_content(rng: Range) -> bool:
    """True when a well-formed range covers at least one character or line break."""
    if rng.collapsed:
        return False
    start_key, end_key = _key(rng.start), _key(rng.end)
    for node in common_ancestor(rng).depth_first():
        if isinstance(node, Text):
            base = _path(node)
            first = _first_selected_offset(base, start_key)
            if first is not None and first < len(node) and base + [first + 1] <= end_key:
                return True
        elif isinstance(node, Element) and node.kind is TagKind.LINE_BREAK:
            base = _path(node)
            after = base[:-1] + [base[-1] + 1]
            if start_key <= base and after <= end_key:
                return True
    return False


def common_ancestor(rng: Range) -> Container:
    """Deepest container holding both ends of the range."""
    start_chain = {id(node) for node in _ancestors(rng.start.node)}
    for node in _ancestors(rng.end.node):
        if id(node) in start_chain:
            if isinstance(node, Text):
                if node.parent is None:
                    raise ValueError("Range points into a detached text node")
                return node.parent
            return node  # type: ignore[return-value]
    raise ValueError("Range ends do not share a root")


def boundary(position: Position) -> Optional[tuple[Container, int]]:
    """Resolve a position to a (container, child index) boundary.

    Returns None when the position falls strictly inside a Text node.
    """
    node = position.node
    if isinstance(node, Text):
        parent = node.parent
        if parent is None:
            return None
        if position.offset == 0:
            return parent, parent.index(node)
        if position.offset == len(node):
            return parent, parent.index(node) + 1
        return None
    if isinstance(node, Element) and node.kind is TagKind.LINE_BREAK:
        parent = node.parent
        if parent is None:
            return None
        return parent, parent.index(node) + min(position.offset, 1)
    if isinstance(node, Container):
        return node, position.offset
    return None


def split_boundaries(rng: Range) -> Range:
    """Split boundary Text nodes so both ends become container boundaries.

    Text is split at the exact offsets, so no character is duplicated or
    dropped. Returns a Range whose positions are (container, index) pairs.
    """
    start_node, start_offset = rng.start.node, rng.start.offset
    end_node, end_offset = rng.end.node, rng.end.offset

    if isinstance(start_node, Text) and 0 < start_offset < len(start_node):
        parent = start_node.parent
        split_index = parent.index(start_node) if parent is not None else -1
        tail = start_node.split(start_offset)
        if end_node is start_node:
            end_node, end_offset = tail, end_offset - start_offset
        elif end_node is parent and end_offset > split_index:
            end_offset += 1
        start_node, start_offset = tail, 0

    if isinstance(end_node, Text) and 0 < end_offset < len(end_node):
        end_node.split(end_offset)

    start = boundary(Position(start_node, start_offset))
    end = boundary(Position(end_node, end_offset))
    if start is None or end is None:
        raise ValueError("Range boundaries must lie inside attached nodes")
    return Range(start=Position(*start), end=Position(*end))


def _child_toward(ancestor: Container, node: Node) -> Node:
    """The child of ancestor on the path down to node."""
    while node.parent is not ancestor:
        if node.parent is None:
            raise ValueError("Node is not a descendant of the given ancestor")
        node = node.parent
    return node


def _prune_if_empty(node: Node) -> bool:
    """Detach an element left without children. Returns True if removed."""
    if (
        isinstance(node, Element)
        and node.kind is not TagKind.LINE_BREAK
        and not node.children
        and node.parent is not None
    ):
        node.detach()
        return True
    return False


def _extract_after(ancestor: Element, container: Container, index: int) -> Element:
    """Move everything after the boundary into a shallow clone of ancestor."""
    clone = ancestor.shallow_clone()
    if ancestor is container:
        clone.extend(ancestor.children[index:])
        return clone
    inner = _child_toward(ancestor, container)
    position = ancestor.index(inner)
    trailing = ancestor.children[position + 1:]
    inner_clone = _extract_after(inner, container, index)  # type: ignore[arg-type]
    if inner_clone.children:
        clone.append(inner_clone)
    clone.extend(trailing)
    _prune_if_empty(inner)
    return clone


def _extract_before(ancestor: Element, container: Container, index: int) -> Element:
    """Move everything before the boundary into a shallow clone of ancestor."""
    clone = ancestor.shallow_clone()
    if ancestor is container:
        clone.extend(ancestor.children[:index])
        return clone
    inner = _child_toward(ancestor, container)
    leading = ancestor.children[:ancestor.index(inner)]
    clone.extend(leading)
    inner_clone = _extract_before(inner, container, index)  # type: ignore[arg-type]
    if inner_clone.children:
        clone.append(inner_clone)
    _prune_if_empty(inner)
    return clone


def extract_contents(rng: Range) -> tuple[Document, Position]:
    """Move the selected content out of the tree into a detached fragment.

    Partially selected ancestors are cloned shallowly on each side, the
    way a browser's extractContents behaves. Elements emptied by the move
    are pruned.

    Returns:
        The fragment and the collapsed position where the content used to
        start (in the common ancestor, after any start-side ancestor).
    """
    rng = split_boundaries(rng)
    start_container, start_index = rng.start.node, rng.start.offset
    end_container, end_index = rng.end.node, rng.end.offset
    fragment = Document()

    if start_container is end_container:
        fragment.extend(start_container.children[start_index:end_index])  # type: ignore[union-attr]
        return fragment, Position(start_container, start_index)

    ancestor = common_ancestor(rng)

    start_side: Optional[Node] = None
    end_side: Optional[Node] = None
    first = start_index
    if start_container is not ancestor:
        start_side = _child_toward(ancestor, start_container)
        first = ancestor.index(start_side) + 1
    last = end_index
    if end_container is not ancestor:
        end_side = _child_toward(ancestor, end_container)
        last = ancestor.index(end_side)

    middle = ancestor.children[first:last]
    if start_side is not None:
        head = _extract_after(start_side, start_container, start_index)  # type: ignore[arg-type]
        if head.children:
            fragment.append(head)
    fragment.extend(middle)
    if end_side is not None:
        tail = _extract_before(end_side, end_container, end_index)  # type: ignore[arg-type]
        if tail.children:
            fragment.append(tail)
        _prune_if_empty(end_side)

    if start_side is None:
        return fragment, Position(ancestor, start_index)
    insert_at = ancestor.index(start_side) + 1
    if _prune_if_empty(start_side):
        insert_at -= 1
    return fragment, Position(ancestor, insert_at)


def merge_text_run(node: Text) -> tuple[Text, int]:
    """Coalesce node with its adjacent Text siblings.

    Returns:
        The merged Text node and the offset at which node's characters
        begin inside it.
    """
    parent = node.parent
    if parent is None:
        return node, 0
    siblings = parent.children
    index = parent.index(node)
    first = index
    while first > 0 and isinstance(siblings[first - 1], Text):
        first -= 1
    last = index
    while last + 1 < len(siblings) and isinstance(siblings[last + 1], Text):
        last += 1

    lead = sum(len(sibling) for sibling in siblings[first:index])  # type: ignore[arg-type]
    if first == last:
        return node, lead
    merged = Text(value="".join(sibling.text_content for sibling in siblings[first:last + 1]))
    for sibling in siblings[first:last + 1]:
        sibling.parent = None
    parent.children[first:last + 1] = [merged]
    merged.parent = parent
    return merged, lead
