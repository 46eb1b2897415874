"""
Transform pass tests - text consolidation and link/image rewriting
"""

import pytest

from snapsite.lib.errors import StructuralMisuseError
from snapsite.lib.parser import Parser
from snapsite.lib.renderer import HtmlRenderer
from snapsite.lib.transforms import (
    LinkRewriter,
    link_isExternal,
    linkText_extract,
    textRuns_consolidate,
)
from snapsite.lib.tree import Event, Node, NodeType, SourcePos, text_collect
from snapsite.models.rewrite import RewriteConfig


def rewriter_make(external_html="★", prepend=False, filepath=""):
    config = RewriteConfig(
        external_html=external_html,
        prepend=prepend,
        render_inline=HtmlRenderer().render,
    )
    return LinkRewriter(config, filepath=filepath)


def paragraph_with(*inlines):
    doc = Node(NodeType.DOCUMENT)
    para = doc.append_child(Node(NodeType.PARAGRAPH))
    for inline in inlines:
        para.append_child(inline)
    return doc, para


def link_with_text(destination, text):
    link = Node.link(destination)
    link.append_child(Node.text(text))
    return link


def types_in(root):
    return {node.type for node, _ in root.walker()}


class TestTextRunsConsolidate:
    """Test merging of adjacent text nodes"""

    def test_merges_adjacent_runs(self):
        doc, para = paragraph_with(Node.text("Hello"), Node.text(", "), Node.text("world"))
        textRuns_consolidate(doc)

        children = para.children()
        assert len(children) == 1
        assert children[0].literal == "Hello, world"

    def test_keeps_non_text_boundaries(self):
        emph = Node(NodeType.EMPH)
        emph.append_child(Node.text("b"))
        doc, para = paragraph_with(Node.text("a"), Node.text("1"), emph, Node.text("c"))
        textRuns_consolidate(doc)

        assert [n.type for n in para.children()] == [NodeType.TEXT, NodeType.EMPH, NodeType.TEXT]
        assert para.first_child.literal == "a1"
        assert para.last_child.literal == "c"

    def test_empty_follower_is_removed(self):
        doc, para = paragraph_with(Node.text("a"), Node(NodeType.TEXT), Node.text("b"))
        textRuns_consolidate(doc)

        assert len(para.children()) == 1
        assert para.first_child.literal == "ab"

    def test_text_content_and_idempotence(self):
        doc = Parser("Some *mixed* text [with](/link) and `code`.").parse()
        before = text_collect(doc)

        textRuns_consolidate(doc)
        once = [(n.type, n.literal) for n, _ in doc.walker()]
        textRuns_consolidate(doc)
        twice = [(n.type, n.literal) for n, _ in doc.walker()]

        assert text_collect(doc) == before
        assert once == twice

    def test_no_adjacent_text_siblings_remain(self):
        doc, _ = paragraph_with(*(Node.text(c) for c in "abcdef"))
        textRuns_consolidate(doc)

        for node, entering in doc.walker():
            if node.type is NodeType.TEXT and node.next is not None:
                assert node.next.type is not NodeType.TEXT


class TestLinkHelpers:
    """Test link classification and text extraction"""

    @pytest.mark.parametrize("destination", [
        "http://example.com", "https://example.com/a/b", "HTTPS://EXAMPLE.COM", "mailto:me@example.com",
    ])
    def test_external(self, destination):
        assert link_isExternal(destination)

    @pytest.mark.parametrize("destination", [
        "/about", "about.html", "#top", "ftp://example.com", "", None,
    ])
    def test_internal(self, destination):
        assert not link_isExternal(destination)

    def test_link_text_extract(self):
        assert linkText_extract('<a href="/x" title="t">Go</a>') == "Go"


class TestImageRewrite:
    """Test image to <img> rewriting"""

    def test_image_becomes_img_tag(self):
        image = Node.image("pics/cat.png")
        image.append_child(Node.text("A cat"))
        doc, para = paragraph_with(image)

        rewriter_make().rewrite(doc)

        assert len(para.children()) == 1
        markup = para.first_child
        assert markup.type is NodeType.HTML_INLINE
        assert markup.literal == '<img src="pics/cat.png" alt="A cat" title="A cat">'

    def test_image_without_alt(self):
        doc, para = paragraph_with(Node.image("x.png"))
        rewriter_make().rewrite(doc)

        assert para.first_child.literal == '<img src="x.png" alt="" title="">'

    def test_attribute_values_escaped(self):
        image = Node.image('a"b.png')
        image.append_child(Node.text('say "hi" <now>'))
        doc, para = paragraph_with(image)
        rewriter_make().rewrite(doc)

        assert para.first_child.literal == (
            '<img src="a&quot;b.png" alt="say &quot;hi&quot; &lt;now&gt;" '
            'title="say &quot;hi&quot; &lt;now&gt;">'
        )

    def test_siblings_after_image_still_visited(self):
        first = Node.image("1.png")
        second = Node.image("2.png")
        doc, para = paragraph_with(first, Node.text(" and "), second)
        rewriter_make().rewrite(doc)

        assert [n.type for n in para.children()] == [
            NodeType.HTML_INLINE, NodeType.TEXT, NodeType.HTML_INLINE,
        ]
        assert NodeType.IMAGE not in types_in(doc)


class TestExternalLinkRewrite:
    """Test decoration and target of external links"""

    def test_appended_decoration(self):
        doc, para = paragraph_with(link_with_text("https://example.com", "Go"))
        rewriter_make(prepend=False).rewrite(doc)

        assert para.first_child.type is NodeType.HTML_INLINE
        assert para.first_child.literal == '<a target="_blank" href="https://example.com">Go★</a>'

    def test_prepended_decoration(self):
        doc, para = paragraph_with(link_with_text("https://example.com", "Go"))
        rewriter_make(prepend=True).rewrite(doc)

        assert para.first_child.literal == '<a target="_blank" href="https://example.com">★Go</a>'

    def test_mailto_is_external(self):
        doc, para = paragraph_with(link_with_text("mailto:me@example.com", "mail"))
        rewriter_make(external_html="").rewrite(doc)

        assert para.first_child.literal == '<a target="_blank" href="mailto:me@example.com">mail</a>'

    def test_formatted_link_text_kept(self):
        link = Node.link("http://example.com")
        strong = link.append_child(Node(NodeType.STRONG))
        strong.append_child(Node.text("bold"))
        doc, para = paragraph_with(link)
        rewriter_make().rewrite(doc)

        assert para.first_child.literal == (
            '<a target="_blank" href="http://example.com"><strong>bold</strong>★</a>'
        )

    def test_image_inside_external_link(self):
        image = Node.image("logo.png")
        image.append_child(Node.text("logo"))
        link = Node.link("https://example.com")
        link.append_child(image)
        doc, para = paragraph_with(link)

        rewriter_make().rewrite(doc)

        assert para.first_child.literal == (
            '<a target="_blank" href="https://example.com">'
            '<img src="logo.png" alt="logo" title="logo">★</a>'
        )


class TestInternalLinkRewrite:
    """Test that internal links keep the renderer's markup"""

    def test_internal_link_markup(self):
        link = link_with_text("/about", "About")
        link.title = "About us"
        doc, para = paragraph_with(Node.text("See "), link)
        rewriter_make().rewrite(doc)

        markup = para.last_child
        assert markup.type is NodeType.HTML_INLINE
        assert markup.literal == '<a href="/about" title="About us">About</a>'
        assert "target=" not in markup.literal
        assert "★" not in markup.literal

    def test_rendered_output_unchanged_by_rewrite(self):
        """Rewriting an internal link does not change the rendered page"""
        source = "Read the [guide](docs/guide.html) first."
        renderer = HtmlRenderer()

        before = renderer.render(Parser(source).parse())
        tree = Parser(source).parse()
        rewriter_make().rewrite(tree)

        assert renderer.render(tree) == before


class TestRewriteInvariants:
    """Test the pass as a whole"""

    def test_no_links_or_images_survive(self):
        source = (
            "[a](/a) and [b](https://b.example) and ![c](c.png)\n\n"
            "- [![d](d.png)](/d)\n"
            "- *[e](mailto:e@example.com)*\n"
        )
        tree = Parser(source).parse()
        textRuns_consolidate(tree)
        rewriter_make().rewrite(tree)

        found = types_in(tree)
        assert NodeType.LINK not in found
        assert NodeType.IMAGE not in found

    def test_type_check_raises_with_location(self):
        rewriter = rewriter_make(filepath="source/page.md")
        text = Node.text("oops", sourcepos=SourcePos(3, 1, 3, 5))
        doc, _ = paragraph_with(text)

        with pytest.raises(StructuralMisuseError) as excinfo:
            rewriter.image_rewrite(doc.walker(), Event(text, True))

        message = str(excinfo.value)
        assert message.startswith("source/page.md (3,1): ")
        assert "image_rewrite" in message

    def test_link_replace_rejects_non_links(self):
        with pytest.raises(StructuralMisuseError):
            rewriter_make().link_replace(Node.text("x"), "<a></a>")
