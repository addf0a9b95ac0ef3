"""
Tests for DocumentLoader: part discovery and tolerance of broken optional parts.
"""

import pytest

from docx_preview.api import parse_document
from docx_preview.exceptions import PackageError, ParsingError
from docx_preview.utils.element_types import DomType

CORE_PROPERTIES = """<cp:coreProperties
    xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
    xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Quarterly report</dc:title><dc:creator>Finance</dc:creator><cp:revision>4</cp:revision>
</cp:coreProperties>"""

THEME = """<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Office">
<a:themeElements>
  <a:clrScheme name="Office">
    <a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>
    <a:accent1><a:srgbClr val="4472C4"/></a:accent1>
  </a:clrScheme>
  <a:fontScheme name="Office">
    <a:majorFont><a:latin typeface="Calibri Light"/></a:majorFont>
    <a:minorFont><a:latin typeface="Calibri"/></a:minorFont>
  </a:fontScheme>
</a:themeElements>
</a:theme>"""


class TestDocumentLoader:
    """Test cases for loading packages."""

    def test_minimal_package(self, docx_builder, para):
        builder = docx_builder()
        builder.body = para("Hello")
        document = parse_document(builder.build())
        assert document.main_part == "word/document.xml"
        assert document.document.type == DomType.DOCUMENT
        assert document.document.get_text() == "Hello"
        assert len(document.styles) == 0
        assert document.warnings == []

    def test_not_a_package(self):
        with pytest.raises(PackageError):
            parse_document(b"plain text")

    def test_main_part_fallback(self, docx_builder, para):
        builder = docx_builder()
        builder.main_rel = False
        builder.body = para("fallback")
        document = parse_document(builder.build())
        assert document.document.get_text() == "fallback"
        assert any("main document" in warning for warning in document.warnings)

    def test_main_part_missing(self, docx_builder):
        builder = docx_builder()
        builder.main_rel = False
        builder.MAIN_PART = "word/other.xml"
        builder.rels = {"word/other.xml": []}
        with pytest.raises(ParsingError):
            parse_document(builder.build())

    def test_malformed_main_part(self, docx_builder):
        builder = docx_builder()
        builder.body = "<w:p>"
        with pytest.raises(ParsingError):
            parse_document(builder.build())

    def test_malformed_optional_part_is_a_warning(self, docx_builder, para):
        builder = docx_builder()
        builder.body = para("still here")
        builder.add_part("styles", "word/styles.xml", "<w:styles><broken")
        document = parse_document(builder.build())
        assert document.document.get_text() == "still here"
        assert len(document.styles) == 0
        assert any("styles" in warning for warning in document.warnings)

    def test_missing_comments_part(self, docx_builder, para):
        """A relationship to an absent comments part degrades to no comments."""
        builder = docx_builder()
        builder.body = para("text")
        builder.add_relationship("comments", "comments.xml")
        document = parse_document(builder.build())
        assert document.comments == {}
        assert any("comments part word/comments.xml is missing" in warning for warning in document.warnings)

    def test_dangling_relationship(self, docx_builder):
        builder = docx_builder()
        builder.body = '<w:p><w:hyperlink r:id="rId404"><w:r><w:t>x</w:t></w:r></w:hyperlink></w:p>'
        document = parse_document(builder.build())
        assert any("rId404" in warning for warning in document.warnings)

    def test_auxiliary_parts(self, docx_builder, para):
        builder = docx_builder()
        builder.body = para("x")
        builder.with_settings('<w:evenAndOddHeaders/><w:footnotePr><w:numFmt w:val="lowerRoman"/>'
                              '<w:numStart w:val="5"/></w:footnotePr>')
        builder.with_footnotes('<w:footnote w:type="separator" w:id="-1"><w:p/></w:footnote>'
                               '<w:footnote w:id="1"><w:p><w:r><w:t>Note</w:t></w:r></w:p></w:footnote>')
        builder.with_comments('<w:comment w:id="0" w:author="Ann" w:date="2024-02-03T10:00:00Z">'
                              '<w:p><w:r><w:t>Check</w:t></w:r></w:p></w:comment>')
        builder.add_header(para("Head"))
        builder.add_part("theme", "word/theme/theme1.xml", THEME)
        document = parse_document(builder.build())

        assert document.settings.even_and_odd_headers
        assert document.settings.footnote_props.start == 5
        assert document.footnotes["1"].get_text() == "Note"
        assert document.footnotes["-1"].note_type == "separator"
        assert document.comments["0"].author == "Ann"
        assert document.headers["word/header1.xml"].get_text() == "Head"
        assert document.theme.colors == {"dk1": "000000", "accent1": "4472C4"}
        assert document.theme.minor_font == "Calibri"
        assert document.parts["footnotes"] == "word/footnotes.xml"

    def test_core_properties(self, docx_builder):
        builder = docx_builder()
        builder.add_package_part(
            "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties",
            "docProps/core.xml", CORE_PROPERTIES)
        document = parse_document(builder.build())
        assert document.title == "Quarterly report"
        assert document.core_properties.creator == "Finance"
        assert document.core_properties.revision == 4

    def test_style_cycle_is_cut(self, docx_builder):
        builder = docx_builder()
        builder.with_styles('<w:style w:type="paragraph" w:styleId="A"><w:basedOn w:val="B"/></w:style>'
                            '<w:style w:type="paragraph" w:styleId="B"><w:basedOn w:val="A"/></w:style>')
        document = parse_document(builder.build())
        assert [style.id for style in document.styles.chain("A")] == ["B", "A"]
        assert any("removed basedOn" in warning for warning in document.warnings)

    def test_font_table(self, docx_builder):
        builder = docx_builder()
        builder.add_part("fontTable", "word/fontTable.xml",
                         '<w:fonts xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" '
                         'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
                         '<w:font w:name="Calibri"><w:family w:val="swiss"/></w:font>'
                         '<w:font w:name="Brand"><w:embedBold r:id="rId1" '
                         'w:fontKey="{01234567-89AB-CDEF-0123-456789ABCDEF}"/></w:font></w:fonts>')
        builder.add_relationship("font", "fonts/font1.odttf", "rId1", part="word/fontTable.xml")
        document = parse_document(builder.build())
        assert len(document.fonts) == 2
        brand = document.fonts.get("Brand")
        assert brand.embed_refs[0].weight == "bold"
        assert [font.name for font in document.fonts.embedded()] == ["Brand"]
