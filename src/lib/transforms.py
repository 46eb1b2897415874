"""
Parse tree transform passes

Run in order on each parsed file:
1. textRuns_consolidate: merge adjacent text siblings into one node
2. LinkRewriter.rewrite: replace every link and image node with an
   html_inline node holding the final markup

Both passes edit the tree while walking it. They rely on Cursor computing
its next position before handing out a node, and call resume_at() whenever
an edit inserts a node the walk must not skip.
"""

import html
from typing import Optional

from ..models.rewrite import RewriteConfig
from .errors import StructuralMisuseError
from .tree import Cursor, Event, Node, NodeType

EXTERNAL_SCHEMES = ("http:", "https:", "mailto:")


def textRuns_consolidate(tree: Node) -> Node:
    """
    Merge runs of adjacent text nodes into their first node

    The Markdown parser can split one run of prose into several text
    nodes (around punctuation, failed emphasis delimiters, escapes).
    Later passes are simpler when each run is a single node.

    Args:
        tree: Root of the tree to edit in place

    Returns:
        The same tree

    Example:
        paragraph[text "Hello", text ", ", text "world"]
        becomes
        paragraph[text "Hello, world"]
    """
    previous: Optional[Node] = None
    for node, entering in tree.walker():
        if (
            node.type is NodeType.TEXT
            and previous is not None
            and previous.type is NodeType.TEXT
        ):
            if node.literal:
                previous.literal = (previous.literal or "") + node.literal
            node.unlink()
        else:
            previous = node
    return tree


def link_isExternal(destination: Optional[str]) -> bool:
    """
    True for http:, https: and mailto: destinations

    The scheme is the text before the first '/', compared case-insensitively.

    Example:
        >>> link_isExternal("HTTPS://example.com")
        True
        >>> link_isExternal("/about")
        False
    """
    if not destination:
        return False
    return destination.split("/", 1)[0].lower() in EXTERNAL_SCHEMES


def linkText_extract(rendered: str) -> str:
    """
    Strip the outer <a ...> and </a> from a rendered link

    Example:
        >>> linkText_extract('<a href="/x">Go <em>now</em></a>')
        'Go <em>now</em>'
    """
    open_end = rendered.find(">")
    if open_end == -1:
        return rendered
    return rendered[open_end + 1:len(rendered) - len("</a>")]


class LinkRewriter:
    """
    Replaces link and image nodes with explicit inline markup

    Images become <img src alt title> tags, with the alt text echoed into
    title so it shows on mouseover. External links get the configured
    decoration markup and open in a new window:

        [Go](https://example.com)  ->  <a target="_blank" href="https://example.com">Go★</a>

    Internal links keep exactly the markup the renderer gives them.

    Raises:
        StructuralMisuseError: A rewrite routine was reached with a node of
            the wrong type. This points at a traversal bug, never at bad
            input, and aborts the file.
    """

    def __init__(self, config: RewriteConfig, filepath: str = "") -> None:
        self.config = config
        self.filepath = filepath

    def rewrite(self, tree: Node) -> Node:
        """
        Run the pass over tree, editing it in place

        Returns:
            The same tree, now free of link and image nodes
        """
        walker = tree.walker()
        for event in walker:
            if event.node.type is NodeType.IMAGE:
                self.image_rewrite(walker, event)
            elif event.node.type is NodeType.LINK:
                if link_isExternal(event.node.destination):
                    self.externalLink_rewrite(walker, event)
                elif not event.entering:
                    self.link_replace(event.node, self.config.render_inline(event.node))
        return tree

    def type_check(self, node: Node, expected: NodeType, routine: str) -> None:
        if node.type is not expected:
            raise StructuralMisuseError(
                f"{routine} received a {node.type.value} node, which is illegal",
                filepath=self.filepath,
                sourcepos=node.sourcepos,
            )

    def image_rewrite(self, walker: Cursor, event: Event) -> Node:
        """
        Replace an image node with an <img> html_inline node

        A leading text child is taken as the alt text and consumed. The walk
        resumes at the new node, so the image subtree is never visited.

        Returns:
            The new html_inline node
        """
        node = event.node
        self.type_check(node, NodeType.IMAGE, "image_rewrite")

        alt = ""
        if node.first_child is not None and node.first_child.type is NodeType.TEXT:
            alt = node.first_child.literal or ""
            node.first_child.unlink()

        src = html.escape(node.destination or "")
        alt = html.escape(alt)
        markup = Node.html_inline(
            f'<img src="{src}" alt="{alt}" title="{alt}">', node.sourcepos
        )
        walker.resume_at(node.replace_with(markup))
        return markup

    def externalLink_rewrite(self, walker: Cursor, event: Event) -> Optional[Node]:
        """
        Decorate an external link on entry, replace it on exit

        Entering: insert the decoration as an html_inline child. When
        prepended, the walk resumes at it so the link's original children
        are still visited afterwards.

        Leaving: replace the link with <a target="_blank" href=...>.

        Returns:
            The inserted decoration node on entry, the replacement on exit
        """
        node = event.node
        self.type_check(node, NodeType.LINK, "externalLink_rewrite")

        if event.entering:
            decoration = Node.html_inline(self.config.external_html, node.sourcepos)
            if self.config.prepend:
                walker.resume_at(node.prepend_child(decoration))
            else:
                node.append_child(decoration)
            return decoration

        inner = linkText_extract(self.config.render_inline(node))
        href = html.escape(node.destination or "")
        return self.link_replace(node, f'<a target="_blank" href="{href}">{inner}</a>')

    def link_replace(self, node: Node, markup: str) -> Node:
        """
        Swap a link node for an html_inline node holding markup

        Returns:
            The new html_inline node
        """
        self.type_check(node, NodeType.LINK, "link_replace")
        return node.replace_with(Node.html_inline(markup, node.sourcepos))
