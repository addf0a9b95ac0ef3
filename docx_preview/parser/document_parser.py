"""
Document parser for WordprocessingML parts.

Walks the XML of the main document, headers, footers, notes and comments
and builds the element tree. Dispatch is on the local name of each node;
unknown names are skipped and reported as warnings so that new markup never
aborts a conversion.
"""

import logging
from typing import Callable, Dict, List, Optional

from lxml import etree

from ..models.base import OpenXmlElement
from ..models.elements import (AltChunk, BookmarkEnd, BookmarkStart, Break, Comment,
                               CommentMarker, ComplexField, DocumentRoot, Drawing,
                               HeaderFooter, Hyperlink, Image, Instruction, MathElement,
                               MathProperties, Note, NoteReference, NumberingRef, Paragraph,
                               ParagraphProperties, Revision, Run, SimpleField, Symbol,
                               Table, TableCell, TableColumn, TableRow, TabStop, Text)
from ..models.section import (Column, Columns, HeaderFooterReference, PageMargins, PageNumber,
                              PageSize, SectionProperties)
from ..options import DEFAULT_OPTIONS, Options
from ..utils.element_types import MATH_TAGS, DomType
from ..utils.units import LengthUsages, convert_length
from ..utils.xml_utils import (attr, bool_attr, element, element_attr, elements, hex_attr,
                               int_attr, length_attr, local_name, qualified_name, text_content)
from .properties_parser import PropertiesParser, color_attr, parse_borders
from .vml_parser import VmlParser

logger = logging.getLogger(__name__)

# Markup with no rendering of its own
IGNORED_ELEMENTS = frozenset({
    "proofErr", "permStart", "permEnd", "moveFromRangeStart", "moveFromRangeEnd",
    "moveToRangeStart", "moveToRangeEnd", "customXmlPr", "sdtPr", "sdtEndPr",
    "annotationRef", "footnoteRef", "endnoteRef", "separator", "continuationSeparator",
    "customXmlInsRangeStart", "customXmlInsRangeEnd", "customXmlDelRangeStart",
    "customXmlDelRangeEnd", "rsidR", "ctrlPr", "lastRenderedPageBreakHint",
    "dayShort", "monthShort", "yearShort", "dayLong", "monthLong", "yearLong",
    "pgNum", "contentPart", "ruby",
})

# Wrappers whose content is lifted into their parent
FLATTENED_ELEMENTS = frozenset({"smartTag", "customXml", "dir", "bdo"})

CONDITIONAL_CLASSES = (
    "first-row", "last-row", "first-col", "last-col", "odd-col", "even-col",
    "odd-row", "even-row", "ne-cell", "nw-cell", "se-cell", "sw-cell",
)


def class_name_of_table_look(node: etree._Element) -> List[str]:
    """Conditional format flags enabled by ``w:tblLook``, attributes or legacy bit mask."""
    mask = hex_attr(node, "val", 0) or 0
    flags = []
    for name, flag, bit in (("firstRow", "first-row", 0x0020),
                            ("lastRow", "last-row", 0x0040),
                            ("firstColumn", "first-col", 0x0080),
                            ("lastColumn", "last-col", 0x0100),
                            ("noHBand", "no-hband", 0x0200),
                            ("noVBand", "no-vband", 0x0400)):
        if bool_attr(node, name) or mask & bit:
            flags.append(flag)
    return flags


def class_name_of_cnf_style(node: etree._Element) -> Optional[str]:
    """Classes of a ``w:cnfStyle`` bit string."""
    value = attr(node, "val")
    if value:
        names = [name for index, name in enumerate(CONDITIONAL_CLASSES)
                 if index < len(value) and value[index] == "1"]
    else:
        names = []
        for attr_name, name in (("firstRow", "first-row"), ("lastRow", "last-row"),
                                ("firstColumn", "first-col"), ("lastColumn", "last-col"),
                                ("oddVBand", "odd-col"), ("evenVBand", "even-col"),
                                ("oddHBand", "odd-row"), ("evenHBand", "even-row"),
                                ("firstRowLastColumn", "ne-cell"),
                                ("firstRowFirstColumn", "nw-cell"),
                                ("lastRowLastColumn", "se-cell"),
                                ("lastRowFirstColumn", "sw-cell")):
            if bool_attr(node, attr_name):
                names.append(name)
    return " ".join(names) or None


class DocumentParser:
    """
    Builds element trees out of WordprocessingML parts.

    A parser instance belongs to one conversion; every absorbed problem is
    appended to ``warnings``.
    """

    def __init__(self, options: Options = DEFAULT_OPTIONS, warnings: Optional[List[str]] = None):
        """
        Initialize the parser.

        Args:
            options: Conversion options
            warnings: List receiving warnings (a new one by default)
        """
        self.options = options
        self.warnings: List[str] = warnings if warnings is not None else []
        self.properties = PropertiesParser(ignore_width=options.ignore_width,
                                           on_unknown=self._unknown_property)
        self.vml = VmlParser(self.parse_body_elements, self.warnings)
        self.rel_ids: List[str] = []

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------

    def parse_document(self, root: etree._Element) -> DocumentRoot:
        """
        Parse the main document part.

        Args:
            root: ``w:document`` element

        Returns:
            Document root holding the body content and the final section
        """
        result = DocumentRoot()
        body = element(root, "body")
        background = element(root, "background")
        if background is not None:
            color = color_attr(background, "color")
            if color:
                result.css_style["background-color"] = color

        if body is None:
            self._warn("document has no body")
            return result

        sect_pr = element(body, "sectPr")
        if sect_pr is not None:
            result.props = self.parse_section_properties(sect_pr)
        result.extend(self.parse_body_elements(body))
        return result

    def parse_header_footer(self, root: etree._Element, dom_type: DomType) -> HeaderFooter:
        """Parse a ``w:hdr`` or ``w:ftr`` part."""
        result = HeaderFooter(type=dom_type)
        result.extend(self.parse_body_elements(root))
        return result

    def parse_notes(self, root: etree._Element, dom_type: DomType) -> Dict[str, Note]:
        """
        Parse a footnotes or endnotes part.

        Separator notes are kept; the renderer skips them.
        """
        name = "footnote" if dom_type == DomType.FOOTNOTE else "endnote"
        result: Dict[str, Note] = {}
        for node in elements(root, name):
            note_id = attr(node, "id")
            if note_id is None:
                continue
            note = Note(type=dom_type, id=note_id, note_type=attr(node, "type"))
            note.extend(self.parse_body_elements(node))
            result[note_id] = note
        return result

    def parse_comments(self, root: etree._Element) -> Dict[str, Comment]:
        result: Dict[str, Comment] = {}
        for node in elements(root, "comment"):
            comment_id = attr(node, "id")
            if comment_id is None:
                continue
            comment = Comment(id=comment_id, author=attr(node, "author"),
                              initials=attr(node, "initials"), date=attr(node, "date"))
            comment.extend(self.parse_body_elements(node))
            result[comment_id] = comment
        return result

    # ------------------------------------------------------------------
    # Block content
    # ------------------------------------------------------------------

    def parse_body_elements(self, node: etree._Element) -> List[OpenXmlElement]:
        """Parse block level content (body, cell, note, text box)."""
        result: List[OpenXmlElement] = []
        for child in elements(node):
            result.extend(self._parse_block(child))
        return result

    def _parse_block(self, node: etree._Element) -> List[OpenXmlElement]:
        name = local_name(node)
        if name == "p":
            return [self.parse_paragraph(node)]
        if name == "tbl":
            return [self.parse_table(node)]
        if name == "sdt":
            return self.parse_body_elements(element(node, "sdtContent"))
        if name in FLATTENED_ELEMENTS:
            return self.parse_body_elements(node)
        if name == "altChunk":
            rel_id = attr(node, "id")
            self.register_rel_id(rel_id)
            return [AltChunk(rel_id=rel_id)]
        if name == "AlternateContent":
            return self._parse_alternate_content(node, self.parse_body_elements)
        if name in ("ins", "del", "moveTo", "moveFrom"):
            return [self._parse_revision(node, self.parse_body_elements)]
        if name in ("bookmarkStart", "bookmarkEnd", "commentRangeStart", "commentRangeEnd"):
            return self._parse_paragraph_child(node)
        if name == "sectPr" or name in IGNORED_ELEMENTS:
            return []
        self._unknown_element(node)
        return []

    def parse_paragraph(self, node: etree._Element) -> Paragraph:
        result = Paragraph()
        for child in elements(node):
            if local_name(child) == "pPr":
                self.parse_paragraph_properties(child, result)
            else:
                result.extend(self._parse_paragraph_child(child))
        return result

    def parse_paragraph_properties(self, node: etree._Element, paragraph: Paragraph) -> None:
        props = paragraph.props

        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "pStyle":
                paragraph.style_name = attr(child, "val")
                return True
            if name == "rPr":
                props.run_props = self.properties.parse(child)
                return True
            return self.parse_common_paragraph_property(child, props)

        self.properties.parse(node, paragraph.css_style, handler=handler)

    def parse_common_paragraph_property(self, node: etree._Element, props: ParagraphProperties) -> bool:
        """
        Non-CSS paragraph properties shared by paragraphs, styles and numbering levels.

        Returns:
            True if the node was consumed
        """
        name = local_name(node)
        if name == "numPr":
            num_id = element_attr(node, "numId", "val")
            level = int_attr(element(node, "ilvl"), "val", 0)
            if num_id is not None:
                props.numbering = NumberingRef(id=num_id, level=level or 0)
        elif name == "tabs":
            props.tabs = [TabStop(style=attr(tab, "val") or "left",
                                  position=length_attr(tab, "pos"),
                                  leader=attr(tab, "leader"))
                          for tab in elements(node, "tab")]
        elif name == "sectPr":
            props.section_props = self.parse_section_properties(node)
        elif name == "keepLines":
            props.keep_lines = bool_attr(node, "val", True)
        elif name == "keepNext":
            props.keep_next = bool_attr(node, "val", True)
        elif name == "pageBreakBefore":
            props.page_break_before = bool_attr(node, "val", True)
        elif name == "outlineLvl":
            props.outline_level = int_attr(node, "val")
        elif name == "textAlignment":
            props.text_alignment = attr(node, "val")
            return False
        else:
            return False
        return True

    def _parse_paragraph_child(self, node: etree._Element) -> List[OpenXmlElement]:
        """Inline content of a paragraph, hyperlink, field or revision."""
        name = local_name(node)
        if name == "r":
            return [self.parse_run(node)]
        if name == "hyperlink":
            return [self.parse_hyperlink(node)]
        if name == "fldSimple":
            result = SimpleField(instruction=attr(node, "instr") or "",
                                 lock=bool_attr(node, "fldLock"), dirty=bool_attr(node, "dirty"))
            result.extend(self._parse_inline_children(node))
            return [result]
        if name == "bookmarkStart":
            return [BookmarkStart(id=attr(node, "id"), name=attr(node, "name"),
                                  col_first=int_attr(node, "colFirst"), col_last=int_attr(node, "colLast"))]
        if name == "bookmarkEnd":
            return [BookmarkEnd(id=attr(node, "id"))]
        if name in ("ins", "del", "moveTo", "moveFrom"):
            return [self._parse_revision(node, self._parse_inline_children)]
        if name == "commentRangeStart":
            return [CommentMarker(type=DomType.COMMENT_RANGE_START, id=attr(node, "id"))]
        if name == "commentRangeEnd":
            return [CommentMarker(type=DomType.COMMENT_RANGE_END, id=attr(node, "id"))]
        if name in ("oMath", "oMathPara"):
            return [self.parse_math_element(node)]
        if name == "sdt":
            return self._parse_inline_children(element(node, "sdtContent"))
        if name in FLATTENED_ELEMENTS:
            return self._parse_inline_children(node)
        if name == "AlternateContent":
            return self._parse_alternate_content(node, self._parse_inline_children)
        if name in IGNORED_ELEMENTS:
            return []
        self._unknown_element(node)
        return []

    def _parse_inline_children(self, node: Optional[etree._Element]) -> List[OpenXmlElement]:
        result: List[OpenXmlElement] = []
        for child in elements(node):
            if local_name(child) in ("rPr", "pPr"):
                continue
            result.extend(self._parse_paragraph_child(child))
        return result

    def _parse_revision(self, node: etree._Element,
                        parse_content: Callable[[etree._Element], List[OpenXmlElement]]) -> Revision:
        name = local_name(node)
        dom_type = DomType.INSERTED if name in ("ins", "moveTo") else DomType.DELETED
        result = Revision(type=dom_type, id=attr(node, "id"), author=attr(node, "author"),
                          date=attr(node, "date"))
        result.extend(parse_content(node))
        return result

    def parse_hyperlink(self, node: etree._Element) -> Hyperlink:
        rel_id = attr(node, "id")
        self.register_rel_id(rel_id)
        result = Hyperlink(rel_id=rel_id, anchor=attr(node, "anchor"), tooltip=attr(node, "tooltip"))
        result.extend(self._parse_inline_children(node))
        return result

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def parse_run(self, node: etree._Element) -> Run:
        result = Run()
        for child in elements(node):
            name = local_name(child)
            if name == "rPr":
                self.parse_run_properties(child, result)
                continue
            result.extend(self._parse_run_child(child, result))
        return result

    def parse_run_properties(self, node: etree._Element, run: Run) -> None:
        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "rStyle":
                run.style_name = attr(child, "val")
                return True
            if name == "vertAlign":
                value = attr(child, "val")
                run.vertical_align = {"superscript": "sup", "subscript": "sub"}.get(value or "")
                return True
            return False

        self.properties.parse(node, run.css_style, handler=handler)

    def _parse_run_child(self, node: etree._Element, run: Run) -> List[OpenXmlElement]:
        name = local_name(node)
        if name == "t":
            return [Text(text=node.text or "")]
        if name == "delText":
            return [Text(type=DomType.DELETED_TEXT, text=node.text or "")]
        if name in ("instrText", "delInstrText"):
            run.field_run = True
            return [Instruction(text=node.text or "")]
        if name == "fldChar":
            return [ComplexField(char_type=attr(node, "fldCharType") or "",
                                 lock=bool_attr(node, "fldLock"), dirty=bool_attr(node, "dirty"))]
        if name in ("tab", "ptab"):
            return [OpenXmlElement(type=DomType.TAB)]
        if name == "sym":
            return [Symbol(font=attr(node, "font"), char=attr(node, "char"))]
        if name == "br":
            return [Break(break_type=attr(node, "type") or "textWrapping")]
        if name == "cr":
            return [Break(break_type="textWrapping")]
        if name == "lastRenderedPageBreak":
            return [Break(break_type="lastRenderedPageBreak")]
        if name == "noBreakHyphen":
            return [OpenXmlElement(type=DomType.NO_BREAK_HYPHEN)]
        if name == "softHyphen":
            return [OpenXmlElement(type=DomType.SOFT_HYPHEN)]
        if name in ("footnoteReference", "endnoteReference"):
            dom_type = DomType.FOOTNOTE_REFERENCE if name == "footnoteReference" else DomType.ENDNOTE_REFERENCE
            return [NoteReference(type=dom_type, id=attr(node, "id"))]
        if name == "commentReference":
            return [CommentMarker(type=DomType.COMMENT_REFERENCE, id=attr(node, "id"))]
        if name == "drawing":
            return [self.parse_drawing(node)]
        if name in ("pict", "object"):
            return [self.vml.parse_picture(node)]
        if name == "AlternateContent":
            return self._parse_alternate_content(
                node, lambda content: [item for child in elements(content)
                                       for item in self._parse_run_child(child, run)])
        if name in IGNORED_ELEMENTS:
            return []
        self._unknown_element(node)
        return []

    # ------------------------------------------------------------------
    # Drawings
    # ------------------------------------------------------------------

    def parse_drawing(self, node: etree._Element) -> Drawing:
        result = Drawing()
        for wrapper in elements(node):
            if local_name(wrapper) in ("inline", "anchor"):
                self._parse_drawing_wrapper(wrapper, result)
        return result

    def _parse_drawing_wrapper(self, node: etree._Element, result: Drawing) -> None:
        is_anchor = local_name(node) == "anchor"
        simple_pos = bool_attr(node, "simplePos")
        wrap_type = None
        pos_x = {"relative": "page", "align": "left", "offset": "0"}
        pos_y = {"relative": "page", "align": "top", "offset": "0"}
        title = None

        for child in elements(node):
            name = local_name(child)
            if name == "simplePos":
                if simple_pos:
                    pos_x["offset"] = length_attr(child, "x", LengthUsages.EMU)
                    pos_y["offset"] = length_attr(child, "y", LengthUsages.EMU)
            elif name == "extent":
                result.css_style["width"] = length_attr(child, "cx", LengthUsages.EMU)
                result.css_style["height"] = length_attr(child, "cy", LengthUsages.EMU)
            elif name in ("positionH", "positionV"):
                if not simple_pos:
                    pos = pos_x if name == "positionH" else pos_y
                    align = element(child, "align")
                    offset = element(child, "posOffset")
                    pos["relative"] = attr(child, "relativeFrom") or pos["relative"]
                    if align is not None:
                        pos["align"] = text_content(align)
                    if offset is not None:
                        pos["offset"] = convert_length(text_content(offset), LengthUsages.EMU)
            elif name in ("wrapTopAndBottom", "wrapNone", "wrapSquare", "wrapTight", "wrapThrough"):
                wrap_type = name
            elif name == "docPr":
                title = attr(child, "descr") or attr(child, "title")
            elif name == "graphic":
                image = self._parse_graphic(child)
                if image is not None:
                    image.title = title
                    result.add_child(image)

        if wrap_type == "wrapTopAndBottom":
            result.css_style["display"] = "block"
            if pos_x["align"]:
                result.css_style["text-align"] = pos_x["align"]
                result.css_style["width"] = "100%"
        elif wrap_type == "wrapNone":
            result.css_style["display"] = "block"
            result.css_style["position"] = "relative"
            result.css_style["width"] = "0px"
            result.css_style["height"] = "0px"
            if pos_x["offset"]:
                result.css_style["left"] = pos_x["offset"]
            if pos_y["offset"]:
                result.css_style["top"] = pos_y["offset"]
        elif is_anchor and pos_x["align"] in ("left", "right"):
            result.css_style["float"] = pos_x["align"]
        else:
            result.css_style["display"] = "inline-block"

    def _parse_graphic(self, node: etree._Element) -> Optional[Image]:
        data = element(node, "graphicData")
        for child in elements(data):
            if local_name(child) == "pic":
                return self._parse_picture(child)
        self._warn(f"unsupported graphic: {attr(data, 'uri')}")
        return None

    def _parse_picture(self, node: etree._Element) -> Image:
        blip = element(element(node, "blipFill"), "blip")
        rel_id = attr(blip, "embed") or attr(blip, "link")
        self.register_rel_id(rel_id)
        result = Image(rel_id=rel_id)
        result.css_style["position"] = "relative"
        xfrm = element(element(node, "spPr"), "xfrm")
        for child in elements(xfrm):
            name = local_name(child)
            if name == "ext":
                result.css_style["width"] = length_attr(child, "cx", LengthUsages.EMU)
                result.css_style["height"] = length_attr(child, "cy", LengthUsages.EMU)
            elif name == "off":
                result.css_style["left"] = length_attr(child, "x", LengthUsages.EMU)
                result.css_style["top"] = length_attr(child, "y", LengthUsages.EMU)
        rotation = int_attr(xfrm, "rot")
        if rotation:
            result.css_style["transform"] = f"rotate({rotation / 60000:.2f}deg)"
        return result

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def parse_table(self, node: etree._Element) -> Table:
        result = Table()
        for child in elements(node):
            name = local_name(child)
            if name == "tr":
                result.add_child(self.parse_table_row(child))
            elif name == "tblGrid":
                result.columns = [TableColumn(width=length_attr(col, "w"))
                                  for col in elements(child, "gridCol")]
            elif name == "tblPr":
                self.parse_table_properties(child, result)
            elif name in ("sdt", "customXml"):
                content = element(child, "sdtContent") if name == "sdt" else child
                for row in elements(content, "tr"):
                    result.add_child(self.parse_table_row(row))
            elif name not in IGNORED_ELEMENTS and name not in ("bookmarkStart", "bookmarkEnd"):
                self._unknown_element(child)
        return result

    def parse_table_properties(self, node: etree._Element, table: Table) -> None:
        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "tblStyle":
                table.style_name = attr(child, "val")
            elif name == "tblLook":
                table.look = class_name_of_table_look(child)
            elif name == "tblStyleColBandSize":
                table.col_band_size = int_attr(child, "val", 1) or 1
            elif name == "tblStyleRowBandSize":
                table.row_band_size = int_attr(child, "val", 1) or 1
            elif name == "hidden":
                table.css_style["display"] = "none"
            elif name == "tblCaption":
                return True
            else:
                return False
            return True

        self.properties.parse(node, table.css_style, table.cell_style, handler=handler)

    def parse_table_row(self, node: etree._Element) -> TableRow:
        result = TableRow()
        for child in elements(node):
            name = local_name(child)
            if name == "tc":
                result.add_child(self.parse_table_cell(child))
            elif name == "trPr":
                self._parse_table_row_properties(child, result)
            elif name == "tblPrEx":
                self.properties.parse(child, {}, result.cell_style,
                                      handler=lambda c: local_name(c) in ("tblLook", "tblStyle"))
            elif name == "sdt":
                for cell in elements(element(child, "sdtContent"), "tc"):
                    result.add_child(self.parse_table_cell(cell))
            elif name not in IGNORED_ELEMENTS and name not in ("bookmarkStart", "bookmarkEnd"):
                self._unknown_element(child)
        return result

    def _parse_table_row_properties(self, node: etree._Element, row: TableRow) -> None:
        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "cnfStyle":
                row.class_name = class_name_of_cnf_style(child)
            elif name == "tblHeader":
                row.is_header = bool_attr(child, "val", True)
            elif name == "gridBefore":
                row.grid_before = int_attr(child, "val", 0) or 0
            elif name == "gridAfter":
                row.grid_after = int_attr(child, "val", 0) or 0
            elif name in ("wBefore", "wAfter", "jc", "ins", "del"):
                pass
            else:
                return False
            return True

        self.properties.parse(node, row.css_style, handler=handler)

    def parse_table_cell(self, node: etree._Element) -> TableCell:
        result = TableCell()
        for child in elements(node):
            if local_name(child) == "tcPr":
                self._parse_table_cell_properties(child, result)
            else:
                result.extend(self._parse_block(child))
        return result

    def _parse_table_cell_properties(self, node: etree._Element, cell: TableCell) -> None:
        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "gridSpan":
                cell.span = int_attr(child, "val", 1) or 1
            elif name == "vMerge":
                cell.vertical_merge = attr(child, "val") or "continue"
            elif name == "hMerge":
                # Legacy horizontal merge: continued cells collapse into the first one
                if attr(child, "val") != "restart":
                    cell.span = 0
            elif name == "cnfStyle":
                cell.class_name = class_name_of_cnf_style(child)
            else:
                return False
            return True

        self.properties.parse(node, cell.css_style, handler=handler)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def parse_section_properties(self, node: etree._Element) -> SectionProperties:
        result = SectionProperties()
        for child in elements(node):
            name = local_name(child)
            if name == "pgSz":
                result.page_size = PageSize(width=length_attr(child, "w"), height=length_attr(child, "h"),
                                            orientation=attr(child, "orient"))
            elif name == "type":
                result.type = attr(child, "val")
            elif name == "pgMar":
                result.page_margins = PageMargins(
                    left=length_attr(child, "left"), right=length_attr(child, "right"),
                    top=length_attr(child, "top"), bottom=length_attr(child, "bottom"),
                    header=length_attr(child, "header"), footer=length_attr(child, "footer"),
                    gutter=length_attr(child, "gutter"),
                )
            elif name == "cols":
                result.columns = Columns(
                    number_of_columns=int_attr(child, "num"),
                    space=length_attr(child, "space"),
                    separator=bool_attr(child, "sep"),
                    equal_width=bool_attr(child, "equalWidth", True),
                    columns=[Column(width=length_attr(col, "w"), space=length_attr(col, "space"))
                             for col in elements(child, "col")],
                )
            elif name in ("headerReference", "footerReference"):
                rel_id = attr(child, "id")
                if rel_id:
                    self.register_rel_id(rel_id)
                    refs = result.header_refs if name == "headerReference" else result.footer_refs
                    refs.append(HeaderFooterReference(id=rel_id, type=attr(child, "type") or "default"))
            elif name == "titlePg":
                result.title_page = bool_attr(child, "val", True)
            elif name == "pgBorders":
                parse_borders(child, result.page_borders)
            elif name == "pgNumType":
                result.page_number = PageNumber(format=attr(child, "fmt"), start=int_attr(child, "start"),
                                                chapter_separator=attr(child, "chapSep"),
                                                chapter_style=attr(child, "chapStyle"))
        return result

    # ------------------------------------------------------------------
    # Office math
    # ------------------------------------------------------------------

    def parse_math_element(self, node: etree._Element) -> MathElement:
        name = local_name(node)
        result = MathElement(type=MATH_TAGS.get(name, DomType.MML_TEXT))
        props_name = f"{name}Pr"
        for child in elements(node):
            child_name = local_name(child)
            if child_name in MATH_TAGS:
                result.add_child(self.parse_math_element(child))
            elif child_name == "r":
                result.add_child(MathElement(type=DomType.MML_RUN,
                                             text="".join(text_content(t) for t in elements(child, "t"))))
            elif child_name == props_name:
                result.props = self._parse_math_properties(child)
            elif child_name.endswith("Pr") or child_name in IGNORED_ELEMENTS:
                continue
            else:
                text = text_content(child)
                self._warn(f"unsupported math element: {qualified_name(child)}")
                if text:
                    result.add_child(MathElement(type=DomType.MML_TEXT, text=text))
        return result

    def _parse_math_properties(self, node: etree._Element) -> MathProperties:
        values = {}
        for child in elements(node):
            name = local_name(child)
            if name == "chr":
                values["char"] = attr(child, "val")
            elif name == "begChr":
                values["begin_char"] = attr(child, "val")
            elif name == "endChr":
                values["end_char"] = attr(child, "val")
            elif name == "pos":
                values["position"] = attr(child, "val")
            elif name == "vertJc":
                values["vertical_justification"] = attr(child, "val")
            elif name == "degHide":
                values["hide_degree"] = bool_attr(child, "val", True)
        return MathProperties(**values)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parse_alternate_content(self, node: etree._Element,
                                 parse_content: Callable[[etree._Element], List[OpenXmlElement]]
                                 ) -> List[OpenXmlElement]:
        """Use ``mc:Choice`` when it yields content, else ``mc:Fallback``."""
        choice = element(node, "Choice")
        if choice is not None:
            marker = len(self.warnings)
            result = parse_content(choice)
            if any(self._has_content(item) for item in result):
                return result
            del self.warnings[marker:]
        fallback = element(node, "Fallback")
        return parse_content(fallback) if fallback is not None else []

    @staticmethod
    def _has_content(item: OpenXmlElement) -> bool:
        if item.type in (DomType.DRAWING, DomType.VML_PICTURE):
            return bool(item.children)
        return True

    def register_rel_id(self, rel_id: Optional[str]) -> None:
        if rel_id and rel_id not in self.rel_ids:
            self.rel_ids.append(rel_id)

    def _unknown_element(self, node: etree._Element) -> None:
        self._warn(f"unknown element: {qualified_name(node)}")

    def _unknown_property(self, name: str) -> None:
        self._warn(f"unknown property: {name}")

    def _warn(self, message: str) -> None:
        if self.options.debug:
            logger.warning(message)
        else:
            logger.debug(message)
        self.warnings.append(message)
