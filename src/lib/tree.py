"""
Parse tree and traversal cursor

The Markdown front-end builds a tree of Node objects; the transform passes
walk it with a Cursor and rewrite it in place.

Nodes are linked both ways: a parent owns its children through
first_child/last_child, and each child points back at its parent and its
prev/next siblings. All structural edits go through the methods here so
those links always agree with each other.

The Cursor emits one Event per leaf and two per container (entering and
leaving). It computes the successor of a node *before* handing that node
out, so the caller is free to unlink or replace the node it was just given.
When an edit inserts a node the walk should visit next, call resume_at()
with the node the edit returned.

Example:
    >>> doc = Node(NodeType.DOCUMENT)
    >>> para = doc.append_child(Node(NodeType.PARAGRAPH))
    >>> _ = para.append_child(Node.text("Hello"))
    >>> [(e.node.type.value, e.entering) for e in doc.walker()]
    [('document', True), ('paragraph', True), ('text', True), ('paragraph', False), ('document', False)]
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional


class NodeType(str, Enum):
    """Closed set of parse tree node kinds"""

    # Blocks
    DOCUMENT = "document"
    BLOCK_QUOTE = "block_quote"
    LIST = "list"
    ITEM = "item"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    THEMATIC_BREAK = "thematic_break"
    CODE_BLOCK = "code_block"
    HTML_BLOCK = "html_block"

    # Inlines
    TEXT = "text"
    SOFTBREAK = "softbreak"
    LINEBREAK = "linebreak"
    CODE = "code"
    HTML_INLINE = "html_inline"
    EMPH = "emph"
    STRONG = "strong"
    LINK = "link"
    IMAGE = "image"


CONTAINER_TYPES = frozenset({
    NodeType.DOCUMENT,
    NodeType.BLOCK_QUOTE,
    NodeType.LIST,
    NodeType.ITEM,
    NodeType.PARAGRAPH,
    NodeType.HEADING,
    NodeType.EMPH,
    NodeType.STRONG,
    NodeType.LINK,
    NodeType.IMAGE,
})


class SourcePos(NamedTuple):
    """Origin span of a node in the (alias-expanded) source, 1-based lines"""
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(eq=False)
class Node:
    """
    A single parse tree node

    Attributes:
        type: Node kind
        literal: Text payload (text, code, code_block, html_* nodes)
        destination: Target URL (link, image)
        title: Title attribute (link, image)
        info: Info string of a fenced code block
        level: Heading level 1-6
        list_type: "bullet" or "ordered"
        list_start: First number of an ordered list
        list_tight: Whether item paragraphs render without <p>
        sourcepos: Origin span, when known
    """
    type: NodeType
    literal: Optional[str] = None
    destination: Optional[str] = None
    title: Optional[str] = None
    info: Optional[str] = None
    level: int = 0
    list_type: Optional[str] = None
    list_start: int = 1
    list_tight: bool = True
    sourcepos: Optional[SourcePos] = None

    parent: Optional["Node"] = field(default=None, repr=False)
    first_child: Optional["Node"] = field(default=None, repr=False)
    last_child: Optional["Node"] = field(default=None, repr=False)
    prev: Optional["Node"] = field(default=None, repr=False)
    next: Optional["Node"] = field(default=None, repr=False)

    @classmethod
    def text(cls, literal: str, sourcepos: Optional[SourcePos] = None) -> "Node":
        return cls(NodeType.TEXT, literal=literal, sourcepos=sourcepos)

    @classmethod
    def html_inline(cls, literal: str, sourcepos: Optional[SourcePos] = None) -> "Node":
        return cls(NodeType.HTML_INLINE, literal=literal, sourcepos=sourcepos)

    @classmethod
    def link(cls, destination: str, title: Optional[str] = None,
             sourcepos: Optional[SourcePos] = None) -> "Node":
        return cls(NodeType.LINK, destination=destination, title=title, sourcepos=sourcepos)

    @classmethod
    def image(cls, destination: str, title: Optional[str] = None,
              sourcepos: Optional[SourcePos] = None) -> "Node":
        return cls(NodeType.IMAGE, destination=destination, title=title, sourcepos=sourcepos)

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    def children(self) -> List["Node"]:
        """Snapshot of direct children, safe to iterate while editing"""
        result = []
        child = self.first_child
        while child is not None:
            result.append(child)
            child = child.next
        return result

    def append_child(self, child: "Node") -> "Node":
        """Attach child as the last child. Returns child."""
        child.unlink()
        child.parent = self
        if self.last_child is not None:
            self.last_child.next = child
            child.prev = self.last_child
            self.last_child = child
        else:
            self.first_child = child
            self.last_child = child
        return child

    def prepend_child(self, child: "Node") -> "Node":
        """Attach child as the first child. Returns child."""
        child.unlink()
        child.parent = self
        if self.first_child is not None:
            self.first_child.prev = child
            child.next = self.first_child
            self.first_child = child
        else:
            self.first_child = child
            self.last_child = child
        return child

    def insert_before(self, sibling: "Node") -> "Node":
        """Place sibling immediately before this node. Returns sibling."""
        sibling.unlink()
        sibling.next = self
        sibling.prev = self.prev
        if self.prev is not None:
            self.prev.next = sibling
        sibling.parent = self.parent
        if self.parent is not None and self.parent.first_child is self:
            self.parent.first_child = sibling
        self.prev = sibling
        return sibling

    def insert_after(self, sibling: "Node") -> "Node":
        """Place sibling immediately after this node. Returns sibling."""
        sibling.unlink()
        sibling.prev = self
        sibling.next = self.next
        if self.next is not None:
            self.next.prev = sibling
        sibling.parent = self.parent
        if self.parent is not None and self.parent.last_child is self:
            self.parent.last_child = sibling
        self.next = sibling
        return sibling

    def unlink(self) -> Optional["Node"]:
        """
        Detach this node (with its subtree) from the tree

        Returns:
            The node that preceded this one in document order: the previous
            sibling if any, otherwise the former parent. None for a detached
            node.
        """
        resume = self.prev if self.prev is not None else self.parent
        if self.prev is not None:
            self.prev.next = self.next
        elif self.parent is not None:
            self.parent.first_child = self.next
        if self.next is not None:
            self.next.prev = self.prev
        elif self.parent is not None:
            self.parent.last_child = self.prev
        self.parent = None
        self.next = None
        self.prev = None
        return resume

    def replace_with(self, replacement: "Node") -> "Node":
        """Swap this node out of the tree for replacement. Returns replacement."""
        self.insert_before(replacement)
        self.unlink()
        return replacement

    def walker(self) -> "Cursor":
        return Cursor(self)


class Event(NamedTuple):
    """One step of a depth-first walk"""
    node: Node
    entering: bool


class Cursor:
    """
    Depth-first walk over a subtree as a stream of enter/exit events

    `current`/`entering` describe the event the next call to next() will
    return; advancing is computed when that event is handed out.
    """

    def __init__(self, root: Node) -> None:
        self.root = root
        self.current: Optional[Node] = root
        self.entering = True

    def next(self) -> Optional[Event]:
        node = self.current
        entering = self.entering
        if node is None:
            return None

        if entering and node.is_container:
            if node.first_child is not None:
                self.current = node.first_child
                self.entering = True
            else:
                self.entering = False
        elif node is self.root:
            self.current = None
        elif node.next is None:
            self.current = node.parent
            self.entering = False
        else:
            self.current = node.next
            self.entering = True

        return Event(node, entering)

    def resume_at(self, node: Node, entering: bool = False) -> None:
        """
        Continue the walk from node

        With entering=False the next event is node's exit event (for a leaf,
        a plain visit that is then followed by its next sibling), so a freshly
        inserted node is not processed again.
        """
        self.current = node
        self.entering = entering

    def __iter__(self) -> Iterator[Event]:
        while True:
            event = self.next()
            if event is None:
                return
            yield event


def tree_dump(root: Node) -> str:
    """
    Indented one-line-per-node view of a tree, for debug logging

    Example:
        document:
          paragraph:
            text: Hello
    """
    lines = []
    indent = 0
    for node, entering in root.walker():
        if node.is_container and not entering:
            indent -= 1
        if not node.is_container or entering:
            literal = node.literal.replace("\n", "\\n") if node.literal else ""
            lines.append(f"{'  ' * indent}{node.type.value}: {literal}")
        if node.is_container and entering:
            indent += 1
    return "\n".join(lines)


def text_collect(root: Node) -> str:
    """Concatenate the literal of every text node under root, in order"""
    return "".join(
        node.literal or ""
        for node, entering in root.walker()
        if node.type is NodeType.TEXT
    )
