"""
Tests for OpenXmlPackage and the relationship manifests.
"""

import io
import zipfile

import pytest

from docx_preview.exceptions import PackageError, ParsingError
from docx_preview.parser.package_reader import OpenXmlPackage, normalize_part_name, rels_part_name
from docx_preview.parser.relationships import Relationships, resolve_target


def make_zip(files) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


class TestOpenXmlPackage:
    """Test cases for OpenXmlPackage."""

    def test_load_from_bytes(self, docx_builder):
        package = OpenXmlPackage.load(docx_builder().build())
        assert package.exists("word/document.xml")
        assert "word/document.xml" in package.list_parts()

    def test_load_from_path(self, docx_builder, temp_dir):
        path = temp_dir / "test.docx"
        path.write_bytes(docx_builder().build())
        with OpenXmlPackage.load(path) as package:
            assert package.read_part("word/document.xml") is not None

    def test_load_from_stream(self, docx_builder):
        package = OpenXmlPackage.load(io.BytesIO(docx_builder().build()))
        assert package.exists("/word/document.xml")

    def test_invalid_zip(self):
        with pytest.raises(PackageError):
            OpenXmlPackage.load(b"This is not a ZIP file")

    def test_missing_file(self, temp_dir):
        with pytest.raises(PackageError):
            OpenXmlPackage.load(temp_dir / "missing.docx")

    def test_lookup_is_case_insensitive(self):
        package = OpenXmlPackage.load(make_zip({"Word/Document.XML": "<a/>"}))
        assert package.read_part("word/document.xml") == b"<a/>"

    def test_absent_part(self):
        package = OpenXmlPackage.load(make_zip({"a.xml": "<a/>"}))
        assert package.read_part("word/missing.xml") is None
        assert package.read_part_xml("word/missing.xml") is None
        assert package.read_part(None) is None

    def test_malformed_xml(self):
        package = OpenXmlPackage.load(make_zip({"word/document.xml": "<w:document><unclosed>"}))
        with pytest.raises(ParsingError):
            package.read_part_xml("word/document.xml")

    def test_xml_declaration_is_trimmed(self):
        package = OpenXmlPackage.load(make_zip({"a.xml": '\xef\xbb\xbf<?xml version="1.0"?><a/>'.encode("latin-1")}))
        assert package.read_part_xml("a.xml").tag == "a"

    def test_package_relationships(self, docx_builder):
        package = OpenXmlPackage.load(docx_builder().build())
        rels = package.load_relationships("")
        assert rels.get("rId1").target == "word/document.xml"

    def test_missing_manifest_is_empty(self):
        package = OpenXmlPackage.load(make_zip({"word/document.xml": "<a/>"}))
        rels = package.load_relationships("word/document.xml")
        assert len(rels) == 0


class TestPartNames:
    """Test cases for part name helpers."""

    def test_normalize(self):
        assert normalize_part_name("/word\\document.xml") == "word/document.xml"

    def test_rels_part_name(self):
        assert rels_part_name("word/document.xml") == "word/_rels/document.xml.rels"
        assert rels_part_name("/word/header1.xml") == "word/_rels/header1.xml.rels"


class TestRelationships:
    """Test cases for relationship resolution."""

    def test_relative_target(self):
        assert resolve_target("word/document.xml", "media/image1.png") == "word/media/image1.png"

    def test_parent_folder_target(self):
        assert resolve_target("word/document.xml", "../customXml/item1.xml") == "customXml/item1.xml"

    def test_absolute_target(self):
        assert resolve_target("word/document.xml", "/word/styles.xml") == "word/styles.xml"

    def test_external_target_has_no_path(self, docx_builder):
        builder = docx_builder()
        rel_id = builder.add_relationship("hyperlink", "https://example.com", external=True)
        package = OpenXmlPackage.load(builder.build())
        rels = package.load_relationships("word/document.xml")
        assert rels.get(rel_id).is_external
        assert rels.target_path(rel_id) is None

    def test_unknown_id(self):
        rels = Relationships("word/document.xml")
        assert rels.get("rId404") is None
        assert rels.target_path("rId404") is None
        assert rels.get(None) is None

    def test_type_matched_by_last_segment(self, docx_builder):
        builder = docx_builder()
        builder.with_styles("")
        package = OpenXmlPackage.load(builder.build())
        rels = package.load_relationships("word/document.xml")
        strict = "http://purl.oclc.org/ooxml/officeDocument/relationships/styles"
        assert rels.first_of_type(strict) is not None
