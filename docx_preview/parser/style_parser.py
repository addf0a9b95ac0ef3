"""
Styles part parser (``word/styles.xml``).

Produces the ``StyleCatalog``: document defaults plus one definition per
``w:style``, with table conditional formats kept as separate value sets.
"""

import logging
from typing import Dict, List, Optional

from lxml import etree

from ..models.elements import Paragraph, ParagraphProperties
from ..models.styles import StyleCatalog, StyleDefinition, StyleValues
from ..utils.xml_utils import attr, bool_attr, element, elements, int_attr, local_name
from .document_parser import DocumentParser

logger = logging.getLogger(__name__)

STYLE_TARGETS = {
    "paragraph": "p",
    "character": "span",
    "table": "table",
    "numbering": "numbering",
}

TABLE_CONDITIONS = frozenset({
    "wholeTable", "firstRow", "lastRow", "firstCol", "lastCol",
    "band1Vert", "band2Vert", "band1Horz", "band2Horz",
    "neCell", "nwCell", "seCell", "swCell",
})

_IGNORED_STYLE_ELEMENTS = frozenset({
    "rsid", "qFormat", "hidden", "semiHidden", "unhideWhenUsed", "autoRedefine",
    "uiPriority", "locked", "personal", "personalCompose", "personalReply", "trPr",
})


class StyleParser:
    """Parses the styles part with the formatting translation of a ``DocumentParser``."""

    def __init__(self, document_parser: DocumentParser):
        self._parser = document_parser
        self.warnings = document_parser.warnings

    def parse(self, root: etree._Element) -> StyleCatalog:
        """
        Parse ``w:styles``.

        Args:
            root: Root element of the styles part

        Returns:
            Catalog (not yet validated for cycles)
        """
        defaults: Dict[str, Dict[str, str]] = {}
        default_props = ParagraphProperties()
        styles: List[StyleDefinition] = []

        for node in elements(root):
            name = local_name(node)
            if name == "style":
                style = self.parse_style(node)
                if style is not None:
                    styles.append(style)
            elif name == "docDefaults":
                default_props = self._parse_defaults(node, defaults)
            elif name != "latentStyles":
                self._warn(f"unknown style element: {name}")

        logger.debug(f"Parsed {len(styles)} styles")
        return StyleCatalog(styles, defaults, default_props)

    def _parse_defaults(self, node: etree._Element, defaults: Dict[str, Dict[str, str]]) -> ParagraphProperties:
        props = ParagraphProperties()
        for child in elements(node):
            name = local_name(child)
            if name == "rPrDefault":
                r_pr = element(child, "rPr")
                if r_pr is not None:
                    defaults["span"] = self._parser.properties.parse(r_pr)
            elif name == "pPrDefault":
                p_pr = element(child, "pPr")
                if p_pr is not None:
                    holder = Paragraph()
                    self._parser.parse_paragraph_properties(p_pr, holder)
                    defaults["p"] = holder.css_style
                    props = holder.props
        return props

    def parse_style(self, node: etree._Element) -> Optional[StyleDefinition]:
        style_id = attr(node, "styleId")
        style_type = attr(node, "type") or "paragraph"
        target = STYLE_TARGETS.get(style_type)
        if not style_id or target is None:
            self._warn(f"skipped style {style_id!r} of type {style_type!r}")
            return None

        result = StyleDefinition(id=style_id, target=target,
                                 is_default=bool_attr(node, "default"),
                                 custom=bool_attr(node, "customStyle"))

        for child in elements(node):
            name = local_name(child)
            if name == "basedOn":
                result.based_on = attr(child, "val")
            elif name == "name":
                result.name = attr(child, "val")
            elif name == "link":
                result.linked = attr(child, "val")
            elif name == "next":
                result.next = attr(child, "val")
            elif name == "aliases":
                continue
            elif name == "pPr":
                holder = Paragraph()
                self._parser.parse_paragraph_properties(child, holder)
                result.paragraph_props = holder.props
                result.styles.append(StyleValues(target="p", values=holder.css_style))
            elif name == "rPr":
                result.styles.append(StyleValues(target="span", values=self._parser.properties.parse(child)))
            elif name == "tblPr":
                self._parse_table_style_properties(child, result, None)
            elif name == "tcPr":
                result.styles.append(StyleValues(target="td", values=self._parser.properties.parse(child)))
            elif name == "tblStylePr":
                self._parse_conditional_format(child, result)
            elif name not in _IGNORED_STYLE_ELEMENTS:
                self._warn(f"unknown style element: {name}")
        return result

    def _parse_table_style_properties(self, node: etree._Element, style: StyleDefinition,
                                      condition: Optional[str]) -> None:
        table_values: Dict[str, str] = {}
        cell_values: Dict[str, str] = {}

        def handler(child: etree._Element) -> bool:
            name = local_name(child)
            if name == "tblStyleRowBandSize":
                style.row_band_size = int_attr(child, "val")
            elif name == "tblStyleColBandSize":
                style.col_band_size = int_attr(child, "val")
            else:
                return name in ("tblStyle", "tblLook")
            return True

        self._parser.properties.parse(node, table_values, cell_values, handler=handler)
        if table_values:
            style.styles.append(StyleValues(target="table", values=table_values, condition=condition))
        if cell_values:
            style.styles.append(StyleValues(target="td", values=cell_values, condition=condition))

    def _parse_conditional_format(self, node: etree._Element, style: StyleDefinition) -> None:
        condition = attr(node, "type")
        if condition not in TABLE_CONDITIONS:
            self._warn(f"unknown table style condition: {condition}")
            return
        for child in elements(node):
            name = local_name(child)
            if name == "pPr":
                holder = Paragraph()
                self._parser.parse_paragraph_properties(child, holder)
                style.styles.append(StyleValues(target="p", values=holder.css_style, condition=condition))
            elif name == "rPr":
                style.styles.append(StyleValues(target="span", values=self._parser.properties.parse(child),
                                                condition=condition))
            elif name == "tblPr":
                self._parse_table_style_properties(child, style, condition)
            elif name == "tcPr":
                style.styles.append(StyleValues(target="td", values=self._parser.properties.parse(child),
                                                condition=condition))
            elif name == "trPr":
                style.styles.append(StyleValues(target="tr", values=self._parser.properties.parse(child),
                                                condition=condition))

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)
