"""
Pytest configuration for docx-preview.

Packages are built in memory: ``DocxBuilder`` writes only the parts a test
asks for, so every test states the markup it depends on.
"""

import io
import logging
import sys
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
from lxml import etree

from docx_preview.api import render_document
from docx_preview.options import Options

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
M_NS = "http://schemas.openxmlformats.org/officeDocument/2006/math"
REL_TYPE = R_NS
PACKAGE_RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

NAMESPACES = (f'xmlns:w="{W_NS}" xmlns:r="{R_NS}" xmlns:m="{M_NS}" '
              'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
              'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
              'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture" '
              'xmlns:v="urn:schemas-microsoft-com:vml" '
              'xmlns:o="urn:schemas-microsoft-com:office:office" '
              'xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006"')

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
    <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
    <Default Extension="xml" ContentType="application/xml"/>
    <Default Extension="png" ContentType="image/png"/>
    <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""


class DocxBuilder:
    """
    Minimal WordprocessingML package writer.

    Attributes:
        body: Markup placed inside ``w:body``
        background: Document background color (``w:background/@w:color``)
    """

    MAIN_PART = "word/document.xml"

    def __init__(self):
        self.body = ""
        self.background: Optional[str] = None
        self.files: Dict[str, bytes] = {}
        self.rels: Dict[str, List[Tuple[str, str, str, Optional[str]]]] = {self.MAIN_PART: []}
        self.package_rels: List[Tuple[str, str, str, Optional[str]]] = []
        self.main_rel = True
        self._next_id = 100

    def _rel_id(self) -> str:
        self._next_id += 1
        return f"rId{self._next_id}"

    def add_relationship(self, rel_type: str, target: str, rel_id: Optional[str] = None,
                         part: str = MAIN_PART, external: bool = False) -> str:
        rel_id = rel_id or self._rel_id()
        self.rels.setdefault(part, []).append(
            (rel_id, f"{REL_TYPE}/{rel_type}", target, "External" if external else None))
        return rel_id

    def add_part(self, rel_type: str, path: str, content, rel_id: Optional[str] = None) -> str:
        """Add a part related to the main document; returns the relationship id."""
        self.files[path] = content.encode("utf-8") if isinstance(content, str) else content
        target = path[len("word/"):] if path.startswith("word/") else f"/{path}"
        return self.add_relationship(rel_type, target, rel_id)

    def add_package_part(self, rel_type_uri: str, path: str, content: str) -> str:
        """Add a part related to the package itself (core properties)."""
        rel_id = self._rel_id()
        self.files[path] = content.encode("utf-8")
        self.package_rels.append((rel_id, rel_type_uri, path, None))
        return rel_id

    def add_xml_part(self, rel_type: str, path: str, root: str, inner: str,
                     rel_id: Optional[str] = None) -> str:
        return self.add_part(rel_type, path, f"<w:{root} {NAMESPACES}>{inner}</w:{root}>", rel_id)

    def with_styles(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("styles", "word/styles.xml", "styles", inner)
        return self

    def with_numbering(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("numbering", "word/numbering.xml", "numbering", inner)
        return self

    def with_settings(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("settings", "word/settings.xml", "settings", inner)
        return self

    def with_footnotes(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("footnotes", "word/footnotes.xml", "footnotes", inner)
        return self

    def with_endnotes(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("endnotes", "word/endnotes.xml", "endnotes", inner)
        return self

    def with_comments(self, inner: str) -> "DocxBuilder":
        self.add_xml_part("comments", "word/comments.xml", "comments", inner)
        return self

    def add_header(self, inner: str, name: str = "header1.xml") -> str:
        return self.add_xml_part("header", f"word/{name}", "hdr", inner)

    def add_footer(self, inner: str, name: str = "footer1.xml") -> str:
        return self.add_xml_part("footer", f"word/{name}", "ftr", inner)

    def document_xml(self) -> str:
        background = f'<w:background w:color="{self.background}"/>' if self.background else ""
        return (f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
                f"<w:document {NAMESPACES}>{background}<w:body>{self.body}</w:body></w:document>")

    @staticmethod
    def rels_xml(rels: List[Tuple[str, str, str, Optional[str]]]) -> str:
        items = []
        for rel_id, rel_type, target, mode in rels:
            mode_attr = f' TargetMode="{mode}"' if mode else ""
            items.append(f'<Relationship Id="{rel_id}" Type="{rel_type}" Target="{target}"{mode_attr}/>')
        return f'<Relationships xmlns="{PACKAGE_RELS_NS}">{"".join(items)}</Relationships>'

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", CONTENT_TYPES)
            package_rels = list(self.package_rels)
            if self.main_rel:
                package_rels.append(("rId1", f"{REL_TYPE}/officeDocument", self.MAIN_PART, None))
            archive.writestr("_rels/.rels", self.rels_xml(package_rels))
            archive.writestr(self.MAIN_PART, self.document_xml())
            for part, rels in self.rels.items():
                folder, _, name = part.rpartition("/")
                archive.writestr(f"{folder}/_rels/{name}.rels", self.rels_xml(rels))
            for path, data in self.files.items():
                archive.writestr(path, data)
        return buffer.getvalue()


def paragraph(text: str = "", properties: str = "", run_properties: str = "") -> str:
    """Markup of a one-run paragraph."""
    ppr = f"<w:pPr>{properties}</w:pPr>" if properties else ""
    rpr = f"<w:rPr>{run_properties}</w:rPr>" if run_properties else ""
    run = f'<w:r>{rpr}<w:t xml:space="preserve">{text}</w:t></w:r>' if text else ""
    return f"<w:p>{ppr}{run}</w:p>"


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid leaking handlers between tests."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    return tmp_path


@pytest.fixture
def docx_builder():
    """Factory for in-memory packages."""
    return DocxBuilder


@pytest.fixture
def para():
    return paragraph


@pytest.fixture
def render_tree():
    """
    Render package bytes into detached containers.

    Returns a callable ``(data, **options) -> (body, styles)`` where both
    are ``div`` elements holding the rendered nodes.
    """
    def render(data: bytes, **options):
        body = etree.Element("div")
        styles = etree.Element("div")
        render_document(data, body, styles, Options(**options))
        return body, styles

    return render


@pytest.fixture
def css_text():
    """Concatenated text of the ``<style>`` elements of a styles container."""
    def collect(styles: etree._Element) -> str:
        return "".join(node.text or "" for node in styles.iter("style"))

    return collect
