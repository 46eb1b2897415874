"""
HTML renderer for the parse tree

Serializes a Node tree to HTML following the CommonMark reference output.
The renderer walks the tree with a Cursor and streams markup into a buffer.
Each NodeType has exactly one handler, called on entry and (for containers)
on exit. The handler registry is checked at construction, so a node kind
without a handler is a startup error rather than a silently dropped node.

Fenced code blocks can optionally be syntax-highlighted with Pygments.

Example:
    >>> doc = Node(NodeType.DOCUMENT)
    >>> para = doc.append_child(Node(NodeType.PARAGRAPH))
    >>> _ = para.append_child(Node.text("a < b"))
    >>> HtmlRenderer().render(doc)
    '<p>a &lt; b</p>\\n'
"""

import html
from typing import Callable, Dict, List, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .tree import Node, NodeType

Handler = Callable[[Node, bool], None]


def escape(text: Optional[str]) -> str:
    return html.escape(text or "")


class HtmlRenderer:
    """
    Renders parse trees to HTML strings

    Args:
        softbreak: Markup emitted for a soft line break
        highlight_code: Highlight fenced code with Pygments
        pygments_style: Pygments style name used when highlighting
    """

    def __init__(
        self,
        softbreak: str = "<br/>",
        highlight_code: bool = False,
        pygments_style: str = "default",
    ) -> None:
        self.softbreak = softbreak
        self.highlight_code = highlight_code
        self.pygments_style = pygments_style

        self.buffer: List[str] = []
        self.tags_disabled = 0

        self.handlers: Dict[NodeType, Handler] = {}
        self.handlers_register()
        missing = [t.value for t in NodeType if t not in self.handlers]
        if missing:
            raise TypeError(f"No render handler for node types: {', '.join(missing)}")

    def handlers_register(self) -> None:
        """Map every NodeType to its render handler"""
        self.handlers.update({
            NodeType.DOCUMENT: lambda node, entering: None,
            NodeType.BLOCK_QUOTE: self.blockQuote_render,
            NodeType.LIST: self.list_render,
            NodeType.ITEM: self.item_render,
            NodeType.PARAGRAPH: self.paragraph_render,
            NodeType.HEADING: self.heading_render,
            NodeType.THEMATIC_BREAK: self.thematicBreak_render,
            NodeType.CODE_BLOCK: self.codeBlock_render,
            NodeType.HTML_BLOCK: self.htmlBlock_render,
            NodeType.TEXT: lambda node, entering: self.lit(escape(node.literal)),
            NodeType.SOFTBREAK: lambda node, entering: self.lit(self.softbreak),
            NodeType.LINEBREAK: self.linebreak_render,
            NodeType.CODE: self.code_render,
            NodeType.HTML_INLINE: lambda node, entering: self.lit(node.literal or ""),
            NodeType.EMPH: lambda node, entering: self.tag("em" if entering else "/em"),
            NodeType.STRONG: lambda node, entering: self.tag("strong" if entering else "/strong"),
            NodeType.LINK: self.link_render,
            NodeType.IMAGE: self.image_render,
        })

    def render(self, node: Node) -> str:
        """Render node and its subtree to an HTML string"""
        self.buffer = []
        self.tags_disabled = 0
        for event in node.walker():
            self.handlers[event.node.type](event.node, event.entering)
        return "".join(self.buffer)

    # Output primitives

    def lit(self, text: str) -> None:
        if text:
            self.buffer.append(text)

    def tag(self, name: str, attrs: str = "", selfclosing: bool = False) -> None:
        """Emit <name attrs>, unless inside image alt text"""
        if self.tags_disabled > 0:
            return
        self.lit(f"<{name}{attrs}{' /' if selfclosing else ''}>")

    def cr(self) -> None:
        """Start a new line unless already at the start of one"""
        if self.buffer and not self.buffer[-1].endswith("\n"):
            self.lit("\n")

    # Blocks

    def blockQuote_render(self, node: Node, entering: bool) -> None:
        self.cr()
        self.tag("blockquote" if entering else "/blockquote")
        self.cr()

    def list_render(self, node: Node, entering: bool) -> None:
        name = "ol" if node.list_type == "ordered" else "ul"
        if entering:
            start = ""
            if node.list_type == "ordered" and node.list_start != 1:
                start = f' start="{node.list_start}"'
            self.cr()
            self.tag(name, start)
            self.cr()
        else:
            self.cr()
            self.tag(f"/{name}")
            self.cr()

    def item_render(self, node: Node, entering: bool) -> None:
        if entering:
            self.tag("li")
        else:
            self.tag("/li")
            self.cr()

    def paragraph_render(self, node: Node, entering: bool) -> None:
        grandparent = node.parent.parent if node.parent is not None else None
        if (
            grandparent is not None
            and grandparent.type is NodeType.LIST
            and grandparent.list_tight
        ):
            return
        if entering:
            self.cr()
            self.tag("p")
        else:
            self.tag("/p")
            self.cr()

    def heading_render(self, node: Node, entering: bool) -> None:
        if entering:
            self.cr()
            self.tag(f"h{node.level}")
        else:
            self.tag(f"/h{node.level}")
            self.cr()

    def thematicBreak_render(self, node: Node, entering: bool) -> None:
        self.cr()
        self.tag("hr", selfclosing=True)
        self.cr()

    def codeBlock_render(self, node: Node, entering: bool) -> None:
        info = (node.info or "").split()
        language = info[0] if info else ""

        self.cr()
        if self.highlight_code and language:
            lexer: Lexer
            try:
                lexer = get_lexer_by_name(language)
            except ClassNotFound:
                lexer = TextLexer()
            formatter = HtmlFormatter(style=self.pygments_style, noclasses=True)
            self.lit(highlight(node.literal or "", lexer, formatter))
        else:
            css_class = f' class="language-{escape(language)}"' if language else ""
            self.tag("pre")
            self.tag("code", css_class)
            self.lit(escape(node.literal))
            self.tag("/code")
            self.tag("/pre")
        self.cr()

    def htmlBlock_render(self, node: Node, entering: bool) -> None:
        self.cr()
        self.lit(node.literal or "")
        self.cr()

    # Inlines

    def linebreak_render(self, node: Node, entering: bool) -> None:
        self.tag("br", selfclosing=True)
        self.cr()

    def code_render(self, node: Node, entering: bool) -> None:
        self.tag("code")
        self.lit(escape(node.literal))
        self.tag("/code")

    def link_render(self, node: Node, entering: bool) -> None:
        if entering:
            title = f' title="{escape(node.title)}"' if node.title else ""
            self.tag("a", f' href="{escape(node.destination)}"{title}')
        else:
            self.tag("/a")

    def image_render(self, node: Node, entering: bool) -> None:
        """<img> with the flattened text of the children as alt"""
        if entering:
            if self.tags_disabled == 0:
                self.lit(f'<img src="{escape(node.destination)}" alt="')
            self.tags_disabled += 1
        else:
            self.tags_disabled -= 1
            if self.tags_disabled == 0:
                title = f' title="{escape(node.title)}"' if node.title else ""
                self.lit(f'"{title} />')
