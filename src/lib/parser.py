"""
Markdown front-end

Parses (alias-expanded) Markdown with markdown-it-py's CommonMark preset and
converts the flat token stream into a linked Node tree.

markdown-it emits block tokens as open/close pairs (nesting +1/-1) plus
self-contained leaves; each `inline` block token carries its own child
token stream, which is converted the same way. Block tokens know their
source line range (token.map), which becomes each node's sourcepos; inline
nodes inherit the span of the block that contains them.

Example:
    Parser("See [docs](/docs).").parse() gives

    document:
      paragraph:
        text: See
        link:
          text: docs
        text: .
"""

from typing import Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .tree import Node, NodeType, SourcePos

BLOCK_CONTAINERS: Dict[str, NodeType] = {
    "paragraph_open": NodeType.PARAGRAPH,
    "heading_open": NodeType.HEADING,
    "blockquote_open": NodeType.BLOCK_QUOTE,
    "bullet_list_open": NodeType.LIST,
    "ordered_list_open": NodeType.LIST,
    "list_item_open": NodeType.ITEM,
}

INLINE_CONTAINERS: Dict[str, NodeType] = {
    "em_open": NodeType.EMPH,
    "strong_open": NodeType.STRONG,
    "link_open": NodeType.LINK,
}

INLINE_LEAVES: Dict[str, NodeType] = {
    "text": NodeType.TEXT,
    "text_special": NodeType.TEXT,
    "softbreak": NodeType.SOFTBREAK,
    "hardbreak": NodeType.LINEBREAK,
    "code_inline": NodeType.CODE,
    "html_inline": NodeType.HTML_INLINE,
}


class Parser:
    """
    Builds a Node tree from Markdown source

    Args:
        source: Markdown text (already alias-expanded)
        filepath: Path of the file the text came from, kept for diagnostics

    Attributes:
        md: Configured MarkdownIt instance
        lines: Source split into lines, for sourcepos end columns
    """

    def __init__(self, source: str, filepath: str = "") -> None:
        self.source = source
        self.filepath = filepath
        self.lines = source.splitlines()
        self.md = MarkdownIt("commonmark")

    def parse(self) -> Node:
        """
        Parse source into a document tree

        Returns:
            DOCUMENT node; empty source gives a document with no children
        """
        document = Node(
            NodeType.DOCUMENT,
            sourcepos=self.sourcepos_make([0, max(len(self.lines), 1)]),
        )
        stack: List[Node] = [document]

        for token in self.md.parse(self.source):
            self.blockToken_add(token, stack)

        return document

    def sourcepos_make(self, line_map: Optional[List[int]]) -> Optional[SourcePos]:
        """Convert a 0-based [start, end) line map to a 1-based SourcePos"""
        if not line_map:
            return None
        start, end = line_map[0], line_map[1]
        end_column = len(self.lines[end - 1]) if 0 < end <= len(self.lines) else 0
        return SourcePos(start + 1, 1, max(end, start + 1), end_column)

    def blockToken_add(self, token: Token, stack: List[Node]) -> None:
        parent = stack[-1]
        sourcepos = self.sourcepos_make(token.map) or parent.sourcepos

        if token.nesting == -1:
            stack.pop()
            return

        if token.type in BLOCK_CONTAINERS:
            node = Node(BLOCK_CONTAINERS[token.type], sourcepos=sourcepos)
            if token.type == "heading_open":
                node.level = int(token.tag[1:])
            elif token.type == "bullet_list_open":
                node.list_type = "bullet"
            elif token.type == "ordered_list_open":
                node.list_type = "ordered"
                start = token.attrGet("start")
                node.list_start = 1 if start is None else int(start)
            elif token.type == "paragraph_open" and not token.hidden:
                # A visible paragraph inside an item makes its list loose
                if parent.type is NodeType.ITEM and parent.parent is not None:
                    parent.parent.list_tight = False
            parent.append_child(node)
            stack.append(node)
            return

        if token.nesting == 1:
            # Unknown container: keep its children in place, pop on its close
            stack.append(parent)
            return

        if token.type in ("fence", "code_block"):
            parent.append_child(Node(
                NodeType.CODE_BLOCK,
                literal=token.content,
                info=token.info.strip() or None,
                sourcepos=sourcepos,
            ))
        elif token.type == "html_block":
            parent.append_child(Node(NodeType.HTML_BLOCK, literal=token.content, sourcepos=sourcepos))
        elif token.type == "hr":
            parent.append_child(Node(NodeType.THEMATIC_BREAK, sourcepos=sourcepos))
        elif token.type == "inline":
            self.inlineTokens_add(token.children or [], parent, sourcepos)
        elif token.content:
            # Block kinds outside the CommonMark preset degrade to a paragraph of text
            paragraph = parent.append_child(Node(NodeType.PARAGRAPH, sourcepos=sourcepos))
            paragraph.append_child(Node.text(token.content, sourcepos))

    def inlineTokens_add(
        self, tokens: List[Token], parent: Node, sourcepos: Optional[SourcePos]
    ) -> None:
        """Append the nodes for an inline token stream under parent"""
        stack: List[Node] = [parent]

        for token in tokens:
            if token.nesting == -1:
                stack.pop()
                continue

            current = stack[-1]

            if token.type in INLINE_CONTAINERS:
                node = Node(INLINE_CONTAINERS[token.type], sourcepos=sourcepos)
                if token.type == "link_open":
                    node.destination = str(token.attrGet("href") or "")
                    title = token.attrGet("title")
                    node.title = str(title) if title else None
                current.append_child(node)
                stack.append(node)
            elif token.type == "image":
                title = token.attrGet("title")
                image = current.append_child(Node.image(
                    str(token.attrGet("src") or ""),
                    title=str(title) if title else None,
                    sourcepos=sourcepos,
                ))
                self.inlineTokens_add(token.children or [], image, sourcepos)
            elif token.nesting == 1:
                stack.append(current)
            elif token.type in INLINE_LEAVES:
                node_type = INLINE_LEAVES[token.type]
                breaks = (NodeType.SOFTBREAK, NodeType.LINEBREAK)
                literal = None if node_type in breaks else token.content
                current.append_child(Node(node_type, literal=literal, sourcepos=sourcepos))
            elif token.content:
                current.append_child(Node.text(token.content, sourcepos))
