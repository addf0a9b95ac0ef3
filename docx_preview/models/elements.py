"""
Element models for WordprocessingML content.

Each class is one tagged variant of ``OpenXmlElement``. Classes only add
the attributes specific to their kind; behaviour lives in the parser and
the renderers, which dispatch on ``type``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..utils.element_types import DomType
from .base import OpenXmlElement
from .section import SectionProperties


@dataclass(frozen=True)
class NumberingRef:
    """Paragraph reference to a numbering definition level."""

    id: str
    level: int = 0


@dataclass(frozen=True)
class TabStop:
    style: str
    position: Optional[str] = None
    leader: Optional[str] = None


@dataclass(eq=False)
class ParagraphProperties:
    """Non-CSS paragraph properties shared by paragraphs and paragraph styles."""

    numbering: Optional[NumberingRef] = None
    tabs: Optional[List[TabStop]] = None
    section_props: Optional[SectionProperties] = None
    keep_lines: Optional[bool] = None
    keep_next: Optional[bool] = None
    page_break_before: Optional[bool] = None
    outline_level: Optional[int] = None
    text_alignment: Optional[str] = None
    run_props: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class DocumentRoot(OpenXmlElement):
    type: DomType = DomType.DOCUMENT
    props: SectionProperties = field(default_factory=SectionProperties)


@dataclass(eq=False)
class Paragraph(OpenXmlElement):
    type: DomType = DomType.PARAGRAPH
    props: ParagraphProperties = field(default_factory=ParagraphProperties)


@dataclass(eq=False)
class Run(OpenXmlElement):
    type: DomType = DomType.RUN
    vertical_align: Optional[str] = None
    field_run: bool = False


@dataclass(eq=False)
class Text(OpenXmlElement):
    type: DomType = DomType.TEXT
    text: str = ""

    def get_text(self) -> str:
        return self.text


@dataclass(eq=False)
class Symbol(OpenXmlElement):
    type: DomType = DomType.SYMBOL
    font: Optional[str] = None
    char: Optional[str] = None


@dataclass(eq=False)
class Break(OpenXmlElement):
    type: DomType = DomType.BREAK
    break_type: str = "textWrapping"


@dataclass(eq=False)
class Hyperlink(OpenXmlElement):
    type: DomType = DomType.HYPERLINK
    rel_id: Optional[str] = None
    anchor: Optional[str] = None
    tooltip: Optional[str] = None


@dataclass(eq=False)
class BookmarkStart(OpenXmlElement):
    type: DomType = DomType.BOOKMARK_START
    id: Optional[str] = None
    name: Optional[str] = None
    col_first: Optional[int] = None
    col_last: Optional[int] = None


@dataclass(eq=False)
class BookmarkEnd(OpenXmlElement):
    type: DomType = DomType.BOOKMARK_END
    id: Optional[str] = None


@dataclass(eq=False)
class SimpleField(OpenXmlElement):
    type: DomType = DomType.SIMPLE_FIELD
    instruction: str = ""
    lock: bool = False
    dirty: bool = False


@dataclass(eq=False)
class ComplexField(OpenXmlElement):
    type: DomType = DomType.COMPLEX_FIELD
    char_type: str = ""
    lock: bool = False
    dirty: bool = False


@dataclass(eq=False)
class Instruction(OpenXmlElement):
    type: DomType = DomType.INSTRUCTION
    text: str = ""


@dataclass(eq=False)
class NoteReference(OpenXmlElement):
    """``footnoteReference`` / ``endnoteReference``."""

    type: DomType = DomType.FOOTNOTE_REFERENCE
    id: Optional[str] = None


@dataclass(eq=False)
class Note(OpenXmlElement):
    """Footnote or endnote body."""

    type: DomType = DomType.FOOTNOTE
    id: Optional[str] = None
    note_type: Optional[str] = None


@dataclass(eq=False)
class HeaderFooter(OpenXmlElement):
    type: DomType = DomType.HEADER


@dataclass(eq=False)
class Revision(OpenXmlElement):
    """Tracked insertion or deletion wrapper."""

    type: DomType = DomType.INSERTED
    id: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None


@dataclass(eq=False)
class CommentMarker(OpenXmlElement):
    """Comment range start/end and comment reference markers."""

    type: DomType = DomType.COMMENT_REFERENCE
    id: Optional[str] = None


@dataclass(eq=False)
class Comment(OpenXmlElement):
    type: DomType = DomType.COMMENT
    id: Optional[str] = None
    author: Optional[str] = None
    initials: Optional[str] = None
    date: Optional[str] = None


@dataclass(eq=False)
class Drawing(OpenXmlElement):
    type: DomType = DomType.DRAWING


@dataclass(eq=False)
class Image(OpenXmlElement):
    type: DomType = DomType.IMAGE
    rel_id: Optional[str] = None
    title: Optional[str] = None


@dataclass(eq=False)
class VmlElement(OpenXmlElement):
    """A legacy vector shape, already mapped onto an SVG tag name."""

    type: DomType = DomType.VML_ELEMENT
    tag_name: str = "g"
    attrs: Dict[str, str] = field(default_factory=dict)
    css_style_text: Optional[str] = None
    image_rel_id: Optional[str] = None


@dataclass(eq=False)
class AltChunk(OpenXmlElement):
    type: DomType = DomType.ALT_CHUNK
    rel_id: Optional[str] = None


@dataclass(frozen=True)
class TableColumn:
    width: Optional[str] = None


@dataclass(eq=False)
class Table(OpenXmlElement):
    """
    Table with its grid.

    ``cell_style`` holds CSS that the table's direct formatting applies to
    every cell (cell margins, inside borders).
    """

    type: DomType = DomType.TABLE
    columns: List[TableColumn] = field(default_factory=list)
    cell_style: Dict[str, str] = field(default_factory=dict)
    look: List[str] = field(default_factory=list)
    col_band_size: int = 1
    row_band_size: int = 1


@dataclass(eq=False)
class TableRow(OpenXmlElement):
    type: DomType = DomType.TABLE_ROW
    is_header: bool = False
    grid_before: int = 0
    grid_after: int = 0
    cell_style: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class TableCell(OpenXmlElement):
    type: DomType = DomType.TABLE_CELL
    span: int = 1
    vertical_merge: Optional[str] = None


@dataclass(frozen=True)
class MathProperties:
    char: Optional[str] = None
    begin_char: Optional[str] = None
    end_char: Optional[str] = None
    position: Optional[str] = None
    vertical_justification: Optional[str] = None
    hide_degree: bool = False


@dataclass(eq=False)
class MathElement(OpenXmlElement):
    type: DomType = DomType.MML_MATH
    props: MathProperties = field(default_factory=MathProperties)
    text: str = ""

    def get_text(self) -> str:
        return self.text or super().get_text()
