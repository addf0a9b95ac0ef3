"""
Tests for the HTML renderer: paragraphs, runs, links and embedded resources.
"""

import asyncio
import io

import pytest
from PIL import Image

from docx_preview.api import parse_document
from docx_preview.options import Options
from docx_preview.renderers.html_renderer import HtmlRenderer

PICTURE = """<w:p><w:r><w:drawing><wp:inline>
  <wp:extent cx="952500" cy="476250"/>
  <wp:docPr id="1" name="Picture 1" descr="A red square"/>
  <a:graphic><a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">
    <pic:pic><pic:blipFill><a:blip r:embed="{rel_id}"/></pic:blipFill>
      <pic:spPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="952500" cy="476250"/></a:xfrm></pic:spPr>
    </pic:pic>
  </a:graphicData></a:graphic>
</wp:inline></w:drawing></w:r></w:p>"""


def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buffer, format="PNG")
    return buffer.getvalue()


def paragraphs(body):
    return body.findall(".//article/p")


class TestDocumentStructure:
    """Test cases for the wrapper and page containers."""

    def test_wrapper(self, docx_builder, para, render_tree):
        builder = docx_builder()
        builder.body = para("Hello")
        body, _ = render_tree(builder.build())

        wrapper = body[0]
        assert wrapper.get("class") == "docx-wrapper"
        section = wrapper[0]
        assert section.tag == "section"
        assert section.get("class") == "docx docx-sect-1"
        assert section[0].tag == "article"
        assert section[0][0].findtext("span") == "Hello"

    def test_without_wrapper(self, docx_builder, para, render_tree):
        builder = docx_builder()
        builder.body = para("Hello")
        body, _ = render_tree(builder.build(), in_wrapper=False)
        assert body[0].tag == "section"

    def test_class_name(self, docx_builder, para, render_tree, css_text):
        builder = docx_builder()
        builder.body = para("Hello")
        body, styles = render_tree(builder.build(), class_name="preview")
        assert body[0].get("class") == "preview-wrapper"
        assert body[0][0].get("class") == "preview preview-sect-1"
        assert ".preview-wrapper { background: gray;" in css_text(styles)

    def test_background(self, docx_builder, para, render_tree):
        builder = docx_builder()
        builder.background = "FFFF00"
        builder.body = para("Hello")
        body, _ = render_tree(builder.build())
        assert "background-color: #FFFF00;" in body.find(".//section").get("style")

    def test_default_style(self, docx_builder, render_tree, css_text):
        body, styles = render_tree(docx_builder().build())
        css = css_text(styles)
        assert styles[0].tag == "style"
        assert css.index(".docx-wrapper {") < css.index("section.docx {")
        assert "@media not print" not in css
        assert "docx-comment-popover" not in css

    def test_hide_wrapper_on_print(self, docx_builder, render_tree, css_text):
        _, styles = render_tree(docx_builder().build(), hide_wrapper_on_print=True)
        assert css_text(styles).startswith("@media not print {\n.docx-wrapper {")


class TestParagraphsAndRuns:
    """Test cases for paragraph and run output."""

    def test_paragraph_style_class(self, docx_builder, para, render_tree, css_text):
        builder = docx_builder()
        builder.with_styles('<w:style w:type="paragraph" w:styleId="Heading1">'
                            '<w:pPr><w:jc w:val="center"/></w:pPr></w:style>')
        builder.body = para("Title", '<w:pStyle w:val="Heading1"/>')
        body, styles = render_tree(builder.build())
        assert paragraphs(body)[0].get("class") == "docx_heading1"
        assert ".docx p.docx_heading1 {\r\ntext-align: center;\r\n}" in css_text(styles)

    def test_direct_formatting_is_inline(self, docx_builder, para, render_tree):
        builder = docx_builder()
        builder.body = para("Bold", '<w:jc w:val="right"/>', "<w:b/>")
        body, _ = render_tree(builder.build())
        p = paragraphs(body)[0]
        assert p.get("style") == "text-align: right;"
        assert p[0].get("style") == "font-weight: bold;"

    def test_vertical_align(self, docx_builder, para, render_tree):
        builder = docx_builder()
        builder.body = para("2", run_properties='<w:vertAlign w:val="superscript"/>')
        body, _ = render_tree(builder.build())
        sup = paragraphs(body)[0][0]
        assert sup.tag == "sup"
        assert sup.findtext("span") == "2"

    def test_tabs_and_breaks(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = ('<w:p><w:r><w:t>a</w:t><w:tab/><w:t>b</w:t><w:br/><w:t>c</w:t>'
                        '<w:lastRenderedPageBreak/></w:r></w:p>')
        body, _ = render_tree(builder.build())
        span = paragraphs(body)[0][0]
        assert span.text == "a"
        tab, br = span
        assert tab.get("class") == "docx-tab"
        assert tab.text == "\u2003"
        assert tab.tail == "b"
        assert br.tag == "br"
        assert br.tail == "c"

    def test_symbol(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = '<w:p><w:r><w:sym w:font="Wingdings" w:char="F0E0"/></w:r></w:p>'
        body, _ = render_tree(builder.build())
        symbol = paragraphs(body)[0][0][0]
        assert symbol.text == "\uf0e0"
        assert symbol.get("style") == "font-family: Wingdings;"

    def test_hyphens(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = '<w:p><w:r><w:t>co</w:t><w:noBreakHyphen/><w:t>op</w:t><w:softHyphen/></w:r></w:p>'
        body, _ = render_tree(builder.build())
        assert paragraphs(body)[0][0].text == "co\u2011op\u00ad"

    def test_unknown_markup_is_skipped(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = '<w:p><w:customThing/><w:r><w:t>kept</w:t></w:r></w:p>'
        body, _ = render_tree(builder.build())
        assert paragraphs(body)[0].findtext("span") == "kept"


class TestLinks:
    """Test cases for hyperlinks and bookmarks."""

    def test_external_hyperlink(self, docx_builder, render_tree):
        builder = docx_builder()
        rel_id = builder.add_relationship("hyperlink", "https://example.com/page", external=True)
        builder.body = (f'<w:p><w:hyperlink r:id="{rel_id}" w:anchor="part" w:tooltip="Open">'
                        '<w:r><w:t>link</w:t></w:r></w:hyperlink></w:p>')
        body, _ = render_tree(builder.build())
        link = paragraphs(body)[0][0]
        assert link.tag == "a"
        assert link.get("href") == "https://example.com/page#part"
        assert link.get("title") == "Open"
        assert link.findtext("span") == "link"

    def test_internal_hyperlink(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = '<w:p><w:hyperlink w:anchor="_Toc1"><w:r><w:t>go</w:t></w:r></w:hyperlink></w:p>'
        body, _ = render_tree(builder.build())
        assert paragraphs(body)[0][0].get("href") == "#_Toc1"

    def test_bookmarks(self, docx_builder, render_tree):
        builder = docx_builder()
        builder.body = ('<w:p><w:bookmarkStart w:id="0" w:name="_Toc1"/><w:bookmarkStart w:id="1" w:name="_GoBack"/>'
                        '<w:r><w:t>x</w:t></w:r><w:bookmarkEnd w:id="0"/></w:p>')
        body, _ = render_tree(builder.build())
        bookmarks = body.findall(".//span[@class='docx-bookmark']")
        assert [node.get("id") for node in bookmarks] == ["_Toc1"]


class TestResources:
    """Test cases for images and embedded parts."""

    def test_image_data_uri(self, docx_builder, render_tree):
        builder = docx_builder()
        rel_id = builder.add_part("image", "word/media/image1.png", png_bytes())
        builder.body = PICTURE.format(rel_id=rel_id)
        body, _ = render_tree(builder.build())
        img = body.find(".//img")
        assert img.get("alt") == "A red square"
        assert img.get("src").startswith("data:image/png;base64,")
        assert "width: 75.00pt;" in img.get("style")
        assert img.getparent().get("style").startswith("width: 75.00pt; height: 37.50pt;")

    def test_image_assets(self, docx_builder):
        builder = docx_builder()
        rel_id = builder.add_part("image", "word/media/image1.png", png_bytes())
        builder.body = PICTURE.format(rel_id=rel_id)
        document = parse_document(builder.build())
        renderer = HtmlRenderer(document, Options(use_data_uris=False))
        result = asyncio.run(renderer.render_async())
        assert result.failed_resources == 0
        assert result.body[0].find(".//img").get("src") == "word/media/image1.png"
        assert list(result.assets) == ["word/media/image1.png"]

    def test_missing_image_is_dropped(self, docx_builder, render_tree):
        builder = docx_builder()
        rel_id = builder.add_relationship("image", "media/missing.png")
        builder.body = PICTURE.format(rel_id=rel_id)
        body, _ = render_tree(builder.build())
        assert body.find(".//img") is None

    def test_undecodable_image_is_dropped(self, docx_builder, render_tree):
        builder = docx_builder()
        rel_id = builder.add_part("image", "word/media/image1.png", b"not an image")
        builder.body = PICTURE.format(rel_id=rel_id) + '<w:p><w:r><w:t>after</w:t></w:r></w:p>'
        body, _ = render_tree(builder.build())
        assert body.find(".//img") is None
        assert paragraphs(body)[1].findtext("span") == "after"

    @pytest.mark.parametrize("enabled", [True, False])
    def test_alt_chunk(self, docx_builder, render_tree, enabled):
        builder = docx_builder()
        rel_id = builder.add_part("aFChunk", "word/chunk.html", "<p>embedded</p>")
        builder.body = f'<w:altChunk r:id="{rel_id}"/>'
        body, _ = render_tree(builder.build(), render_alt_chunks=enabled)
        frame = body.find(".//iframe")
        if enabled:
            assert frame.get("class") == "docx-alt-chunk"
            assert frame.get("srcdoc") == "<p>embedded</p>"
        else:
            assert frame is None
