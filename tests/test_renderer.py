"""
HTML renderer tests
"""

import pytest

from snapsite.lib.parser import Parser
from snapsite.lib.renderer import HtmlRenderer
from snapsite.lib.tree import Node, NodeType


def render(source, **kwargs):
    return HtmlRenderer(**kwargs).render(Parser(source).parse())


class TestHandlerRegistry:
    """Test that every node kind is renderable"""

    def test_every_node_type_has_a_handler(self):
        renderer = HtmlRenderer()
        assert set(renderer.handlers) == set(NodeType)

    def test_missing_handler_is_a_construction_error(self):
        class Incomplete(HtmlRenderer):
            def handlers_register(self):
                super().handlers_register()
                del self.handlers[NodeType.EMPH]

        with pytest.raises(TypeError, match="emph"):
            Incomplete()


class TestBlocks:
    """Test block rendering against CommonMark reference output"""

    def test_paragraph_and_escaping(self):
        assert render("a < b & c") == "<p>a &lt; b &amp; c</p>\n"

    def test_heading(self):
        assert render("# Title") == "<h1>Title</h1>\n"

    def test_tight_list(self):
        assert render("- a\n- b\n") == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n"

    def test_loose_list(self):
        expected = "<ul>\n<li>\n<p>a</p>\n</li>\n<li>\n<p>b</p>\n</li>\n</ul>\n"
        assert render("- a\n\n- b\n") == expected

    def test_ordered_list_start(self):
        assert render("2. x\n") == '<ol start="2">\n<li>x</li>\n</ol>\n'

    def test_ordered_list_start_zero(self):
        expected = '<ol start="0">\n<li>zero</li>\n<li>one</li>\n</ol>\n'
        assert render("0. zero\n1. one\n") == expected

    def test_block_quote(self):
        assert render("> q") == "<blockquote>\n<p>q</p>\n</blockquote>\n"

    def test_thematic_break(self):
        assert render("---") == "<hr />\n"

    def test_fenced_code(self):
        expected = '<pre><code class="language-py">if a &lt; b:\n    pass\n</code></pre>\n'
        assert render("```py\nif a < b:\n    pass\n```\n") == expected

    def test_html_block_passthrough(self):
        assert render("<div>raw</div>\n") == "<div>raw</div>\n"

    def test_two_paragraphs(self):
        assert render("one\n\ntwo") == "<p>one</p>\n<p>two</p>\n"


class TestInlines:
    """Test inline rendering"""

    def test_emphasis(self):
        assert render("Hello *world* **now**") == "<p>Hello <em>world</em> <strong>now</strong></p>\n"

    def test_softbreak_default(self):
        assert render("a\nb") == "<p>a<br/>b</p>\n"

    def test_softbreak_configurable(self):
        assert render("a\nb", softbreak="\n") == "<p>a\nb</p>\n"

    def test_hard_break(self):
        assert render("a  \nb") == "<p>a<br />\nb</p>\n"

    def test_code_span(self):
        assert render("use `<tag>`") == "<p>use <code>&lt;tag&gt;</code></p>\n"

    def test_link_with_title(self):
        assert render('[x](/y "Why")') == '<p><a href="/y" title="Why">x</a></p>\n'

    def test_image_alt_is_flattened(self):
        expected = '<p><img src="cat.png" alt="a fine cat" title="T" /></p>\n'
        assert render('![a *fine* cat](cat.png "T")') == expected

    def test_html_inline_verbatim(self):
        doc = Node(NodeType.DOCUMENT)
        para = doc.append_child(Node(NodeType.PARAGRAPH))
        para.append_child(Node.html_inline('<a target="_blank" href="x">y</a>'))

        assert HtmlRenderer().render(doc) == '<p><a target="_blank" href="x">y</a></p>\n'

    def test_render_subtree(self):
        """Rendering a single link node gives just its markup"""
        link = Node.link("/a")
        link.append_child(Node.text("A"))

        assert HtmlRenderer().render(link) == '<a href="/a">A</a>'

    def test_renderer_is_reusable(self):
        renderer = HtmlRenderer()
        first = renderer.render(Parser("one").parse())
        second = renderer.render(Parser("two").parse())

        assert first == "<p>one</p>\n"
        assert second == "<p>two</p>\n"


class TestHighlighting:
    """Test optional Pygments highlighting of fenced code"""

    def test_highlighted_block(self):
        html = render("```python\ndef f():\n    return 1\n```\n", highlight_code=True)

        assert '<div class="highlight"' in html
        assert "language-python" not in html
        assert "style=" in html

    def test_unknown_language_falls_back_to_plain_text(self):
        html = render("```nosuchlang\na < b\n```\n", highlight_code=True)

        assert '<div class="highlight"' in html
        assert "a &lt; b" in html

    def test_no_info_is_not_highlighted(self):
        html = render("```\nplain\n```\n", highlight_code=True)
        assert html == "<pre><code>plain\n</code></pre>\n"
