"""
Markdown front-end tests - token stream to Node tree
"""

from snapsite.lib.parser import Parser
from snapsite.lib.tree import NodeType


def parse(source):
    return Parser(source).parse()


def only_block(source):
    doc = parse(source)
    blocks = doc.children()
    assert len(blocks) == 1
    return blocks[0]


class TestBlocks:
    """Test block-level node construction"""

    def test_empty_source(self):
        doc = parse("")

        assert doc.type is NodeType.DOCUMENT
        assert doc.first_child is None

    def test_paragraph(self):
        para = only_block("Hello world")

        assert para.type is NodeType.PARAGRAPH
        assert [(n.type, n.literal) for n in para.children()] == [(NodeType.TEXT, "Hello world")]

    def test_heading_level(self):
        heading = only_block("## Section")

        assert heading.type is NodeType.HEADING
        assert heading.level == 2
        assert heading.first_child.literal == "Section"

    def test_fenced_code(self):
        block = only_block("```python\nx = 1\n```\n")

        assert block.type is NodeType.CODE_BLOCK
        assert block.info == "python"
        assert block.literal == "x = 1\n"

    def test_indented_code_has_no_info(self):
        block = only_block("    indented\n")

        assert block.type is NodeType.CODE_BLOCK
        assert block.info is None
        assert block.literal == "indented\n"

    def test_html_block(self):
        block = only_block("<div>raw</div>\n")

        assert block.type is NodeType.HTML_BLOCK
        assert block.literal == "<div>raw</div>\n"

    def test_thematic_break(self):
        assert only_block("***").type is NodeType.THEMATIC_BREAK

    def test_block_quote(self):
        quote = only_block("> quoted")

        assert quote.type is NodeType.BLOCK_QUOTE
        assert quote.first_child.type is NodeType.PARAGRAPH

    def test_tight_bullet_list(self):
        lst = only_block("- a\n- b\n")

        assert lst.type is NodeType.LIST
        assert lst.list_type == "bullet"
        assert lst.list_tight is True
        assert [item.type for item in lst.children()] == [NodeType.ITEM, NodeType.ITEM]

    def test_loose_list(self):
        lst = only_block("- a\n\n- b\n")
        assert lst.list_tight is False

    def test_ordered_list_start(self):
        lst = only_block("3. three\n4. four\n")

        assert lst.list_type == "ordered"
        assert lst.list_start == 3

    def test_ordered_list_starting_at_zero(self):
        lst = only_block("0. zero\n1. one\n")

        assert lst.list_type == "ordered"
        assert lst.list_start == 0


class TestInlines:
    """Test inline node construction"""

    def test_emphasis_and_strong(self):
        para = only_block("a *b* **c**")
        kinds = [n.type for n in para.children()]

        assert kinds == [NodeType.TEXT, NodeType.EMPH, NodeType.TEXT, NodeType.STRONG]
        assert para.children()[1].first_child.literal == "b"

    def test_link_fields(self):
        para = only_block('[docs](/docs "The docs")')
        link = para.first_child

        assert link.type is NodeType.LINK
        assert link.destination == "/docs"
        assert link.title == "The docs"
        assert link.first_child.literal == "docs"

    def test_link_without_title(self):
        link = only_block("[x](https://example.com)").first_child
        assert link.title is None

    def test_image_children_are_alt(self):
        image = only_block("![a *fine* cat](cat.png)").first_child

        assert image.type is NodeType.IMAGE
        assert image.destination == "cat.png"
        assert image.first_child.type is NodeType.TEXT
        assert image.first_child.literal == "a "

    def test_breaks(self):
        para = only_block("one\ntwo  \nthree")
        kinds = [n.type for n in para.children()]

        assert kinds == [
            NodeType.TEXT, NodeType.SOFTBREAK, NodeType.TEXT, NodeType.LINEBREAK, NodeType.TEXT,
        ]
        assert para.children()[1].literal is None

    def test_code_span_and_inline_html(self):
        para = only_block("`x` and <span>y</span>")
        kinds = [n.type for n in para.children()]

        assert kinds[0] is NodeType.CODE
        assert para.first_child.literal == "x"
        assert NodeType.HTML_INLINE in kinds

    def test_alias_output_survives_as_inline_html(self):
        """Markup produced by alias expansion reaches the tree as html_inline"""
        para = only_block("<b>Hi</b> there")

        assert para.first_child.type is NodeType.HTML_INLINE
        assert para.first_child.literal == "<b>"


class TestSourcePos:
    """Test source positions carried on nodes"""

    def test_block_lines(self):
        doc = parse("first para\n\nsecond para\nwraps here\n")
        first, second = doc.children()

        assert first.sourcepos.start_line == 1
        assert first.sourcepos.end_line == 1
        assert second.sourcepos.start_line == 3
        assert second.sourcepos.end_line == 4
        assert second.sourcepos.end_column == len("wraps here")

    def test_inlines_inherit_block_span(self):
        doc = parse("intro\n\nsee [here](/x)\n")
        link = doc.last_child.last_child

        assert link.type is NodeType.LINK
        assert link.sourcepos.start_line == 3
