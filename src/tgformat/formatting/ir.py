"""Document tree for formatted text.

This module defines the in-memory styled-text document that the formatting
engine mutates and the exporters read. The tree is made of two node types:
Text leaves and Element containers over a closed tag vocabulary. A Document
is the single root container and is also used as a detached holder for
fragments (sanitized paste content, extracted selections).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class TagKind(Enum):
    """The canonical tag vocabulary shared by every component."""

    BOLD = "b"
    ITALIC = "i"
    UNDERLINE = "u"
    STRIKETHROUGH = "s"
    CODE = "code"
    SPOILER = "spoiler"
    LINK = "a"
    BLOCKQUOTE = "blockquote"
    PARAGRAPH = "p"
    LINE_BREAK = "br"


@dataclass(eq=False)
class Node(ABC):
    """Base class for tree nodes.

    Attributes:
        parent: Owning container, or None for a detached node
    """

    parent: Optional["Container"] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def root(self) -> "Node":
        """Walk up to the topmost ancestor."""
        node: Node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    @abstractmethod
    def text_content(self) -> str:
        """Flattened text of this node."""
        ...

    def detach(self) -> "Node":
        """Remove this node from its parent and return it."""
        if self.parent is not None:
            self.parent.remove(self)
        return self

    def replace_with(self, *nodes: "Node") -> None:
        """Replace this node with the given nodes, in order."""
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a detached node")
        index = parent.index(self)
        parent.remove(self)
        for offset, node in enumerate(nodes):
            parent.insert(index + offset, node)

    @abstractmethod
    def clone(self) -> "Node":
        """Deep copy without a parent link."""
        ...


@dataclass(eq=False)
class Text(Node):
    """A leaf holding a run of characters."""

    value: str = ""

    @property
    def text_content(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value)

    def split(self, offset: int) -> "Text":
        """Split at offset; the tail becomes the next sibling and is returned."""
        if not 0 <= offset <= len(self.value):
            raise ValueError(f"Split offset {offset} out of range for {self.value!r}")
        tail = Text(value=self.value[offset:])
        self.value = self.value[:offset]
        if self.parent is not None:
            self.parent.insert(self.parent.index(self) + 1, tail)
        return tail

    def clone(self) -> "Text":
        return Text(value=self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Text):
            return NotImplemented
        return self.value == other.value

    __hash__ = object.__hash__

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class Container(Node):
    """A node with an ordered list of children.

    Children are tracked by identity: two structurally equal Text nodes in
    the same container are still distinct positions.
    """

    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        initial = self.children
        self.children = []
        for child in initial:
            self.append(child)

    @property
    def text_content(self) -> str:
        """Flattened text of all descendants."""
        return "".join(child.text_content for child in self.children)

    def _check_child(self, child: Node) -> None:
        if isinstance(child, Document):
            raise ValueError("A Document cannot be nested inside another container")
        node: Optional[Node] = self
        while node is not None:
            if node is child:
                raise ValueError("Cannot insert a node into its own subtree")
            node = node.parent

    def append(self, child: Node) -> Node:
        """Append a child (detaching it from any previous parent)."""
        return self.insert(len(self.children), child)

    def insert(self, index: int, child: Node) -> Node:
        """Insert a child at index (detaching it from any previous parent)."""
        self._check_child(child)
        if child.parent is self:
            current = self.index(child)
            del self.children[current]
            if current < index:
                index -= 1
        elif child.parent is not None:
            child.parent.remove(child)
        self.children.insert(index, child)
        child.parent = self
        return child

    def remove(self, child: Node) -> None:
        del self.children[self.index(child)]
        child.parent = None

    def index(self, child: Node) -> int:
        """Position of child among this container's children, by identity."""
        for i, candidate in enumerate(self.children):
            if candidate is child:
                return i
        raise ValueError("Node is not a child of this container")

    def extend(self, nodes: list[Node]) -> None:
        for node in list(nodes):
            self.append(node)

    def take_children(self) -> list[Node]:
        """Detach and return all children."""
        taken = self.children
        self.children = []
        for child in taken:
            child.parent = None
        return taken

    def depth_first(self) -> Iterator[Node]:
        """Traverse the subtree depth-first, yielding self then descendants."""
        yield self
        for child in self.children:
            if isinstance(child, Container):
                yield from child.depth_first()
            else:
                yield child

    def normalize(self) -> None:
        """Coalesce adjacent Text siblings throughout the subtree."""
        merged: list[Node] = []
        for child in self.children:
            if isinstance(child, Text) and merged and isinstance(merged[-1], Text):
                merged[-1].value += child.value
                child.parent = None
                continue
            merged.append(child)
        self.children = merged
        for child in merged:
            if isinstance(child, Container):
                child.normalize()

    def _children_equal(self, other: "Container") -> bool:
        return len(self.children) == len(other.children) and all(
            a == b for a, b in zip(self.children, other.children)
        )


@dataclass(eq=False)
class Element(Container):
    """A formatting or structural element.

    Attributes:
        kind: The canonical tag kind
        attributes: Only ``href`` on LINK elements is ever retained
    """

    kind: TagKind = TagKind.PARAGRAPH
    attributes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind is TagKind.LINK and "href" in self.attributes:
            self.attributes = {"href": self.attributes["href"]}
        else:
            self.attributes = {}
        super().__post_init__()

    @property
    def href(self) -> Optional[str]:
        return self.attributes.get("href")

    @property
    def is_spoiler(self) -> bool:
        """The spoiler flag: set for reveal-on-click containers."""
        return self.kind is TagKind.SPOILER

    def insert(self, index: int, child: Node) -> Node:
        if self.kind is TagKind.LINE_BREAK:
            raise ValueError("A line break cannot have children")
        return super().insert(index, child)

    def shallow_clone(self) -> "Element":
        """Copy kind and attributes without children."""
        return Element(kind=self.kind, attributes=dict(self.attributes))

    def clone(self) -> "Element":
        copy = self.shallow_clone()
        for child in self.children:
            copy.append(child.clone())
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.attributes == other.attributes
            and self._children_equal(other)
        )

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        inner = ", ".join(repr(child) for child in self.children)
        attrs = f", href={self.href!r}" if self.href is not None else ""
        return f"{self.kind.name}({inner}{attrs})"


@dataclass(eq=False)
class Document(Container):
    """The root container of a formatted document.

    A Document is never wrapped, removed, or nested. Detached fragments
    (sanitized markup, extracted selections) are also held in Documents.
    """

    def clone(self) -> "Document":
        copy = Document()
        for child in self.children:
            copy.append(child.clone())
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._children_equal(other)

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        inner = ", ".join(repr(child) for child in self.children)
        return f"Document({inner})"


def text(value: str) -> Text:
    """Create a Text node."""
    return Text(value=value)


def element(kind: TagKind, *children: Node, href: Optional[str] = None) -> Element:
    """Create an Element of kind with the given children."""
    attributes = {"href": href} if href is not None else {}
    return Element(kind=kind, attributes=attributes, children=list(children))


def document(*children: Node) -> Document:
    """Create a Document holding the given children."""
    return Document(children=list(children))


def line_break() -> Element:
    return Element(kind=TagKind.LINE_BREAK)
