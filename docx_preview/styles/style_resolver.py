"""
Style cascade resolution.

Effective formatting is an ordered merge where later layers win:

* paragraphs: document defaults, paragraph style chain (most distant
  ancestor first), numbering level, direct formatting;
* runs: document defaults, run values of the paragraph style chain,
  character style chain, direct formatting;
* table cells: table style cell values, conditional formats in Word's
  precedence order, table cell defaults, row overrides, cell direct
  formatting.

The generated stylesheet encodes the same order through selector
specificity; this module gives the explicit walk, used for inline table
cell styles and for callers inspecting a parsed document.
"""

import logging
from dataclasses import fields
from typing import Dict, Iterable, List, Optional

from ..exceptions import StyleError
from ..models.elements import Paragraph, ParagraphProperties, Run, Table, TableCell, TableRow
from ..models.numbering import NumberingCatalog, NumberingLevel
from ..models.styles import StyleCatalog, StyleDefinition

logger = logging.getLogger(__name__)

# Word applies table conditional formats in this order, later entries win
CONDITIONAL_PRECEDENCE = (
    "wholeTable",
    "band1Vert", "band2Vert",
    "band1Horz", "band2Horz",
    "lastCol", "firstCol",
    "lastRow", "firstRow",
    "neCell", "nwCell", "seCell", "swCell",
)

# Conditional format -> class flag set on the row or cell it applies to
CONDITION_FLAGS = {
    "wholeTable": None,
    "firstRow": "first-row",
    "lastRow": "last-row",
    "firstCol": "first-col",
    "lastCol": "last-col",
    "band1Vert": "odd-col",
    "band2Vert": "even-col",
    "band1Horz": "odd-row",
    "band2Horz": "even-row",
    "neCell": "ne-cell",
    "nwCell": "nw-cell",
    "seCell": "se-cell",
    "swCell": "sw-cell",
}


class StyleResolver:
    """Explicit cascade walk over a style catalog and a numbering catalog."""

    def __init__(self, styles: StyleCatalog, numbering: Optional[NumberingCatalog] = None):
        self.styles = styles
        self.numbering = numbering or NumberingCatalog()

    def chain(self, style_id: Optional[str]) -> List[StyleDefinition]:
        """
        Inheritance chain of a style, most distant ancestor first.

        A chain that still contains a cycle resolves to nothing.
        """
        try:
            return self.styles.chain(style_id)
        except StyleError as e:
            logger.warning(f"Ignoring style {style_id!r}: {e}")
            return []

    def resolve_values(self, style_id: Optional[str], target: str,
                       condition: Optional[str] = None) -> Dict[str, str]:
        """
        Flattened values of a style for one target.

        Args:
            style_id: Style to resolve
            target: ``p``, ``span``, ``table``, ``tr`` or ``td``
            condition: Table conditional format type

        Returns:
            CSS values, descendants overriding ancestors
        """
        result: Dict[str, str] = {}
        for style in self.chain(style_id):
            result.update(style.values_for(target, condition))
        return result

    def paragraph_style_id(self, paragraph: Paragraph) -> Optional[str]:
        """Named style of a paragraph, falling back to the default paragraph style."""
        if paragraph.style_name and paragraph.style_name in self.styles:
            return paragraph.style_name
        default = self.styles.default_style("p")
        return default.id if default is not None else None

    def resolve_paragraph_properties(self, paragraph: Paragraph) -> ParagraphProperties:
        """
        Non-CSS paragraph properties.

        Each property comes from the paragraph itself when set, else from the
        nearest style of its chain, else from the document defaults.
        """
        layers = [self.styles.default_paragraph_props]
        layers.extend(style.paragraph_props for style in self.chain(self.paragraph_style_id(paragraph)))
        layers.append(paragraph.props)

        result = ParagraphProperties()
        for item in fields(ParagraphProperties):
            if item.name == "run_props":
                continue
            for layer in reversed(layers):
                value = getattr(layer, item.name)
                if value is not None:
                    setattr(result, item.name, value)
                    break
        result.run_props = paragraph.props.run_props
        return result

    def numbering_level(self, paragraph: Paragraph) -> Optional[NumberingLevel]:
        numbering = self.resolve_paragraph_properties(paragraph).numbering
        if numbering is None:
            return None
        return self.numbering.get_level(numbering.id, numbering.level)

    def resolve_paragraph(self, paragraph: Paragraph) -> Dict[str, str]:
        """Effective CSS of a paragraph."""
        result = dict(self.styles.defaults.get("p", {}))
        result.update(self.resolve_values(self.paragraph_style_id(paragraph), "p"))
        level = self.numbering_level(paragraph)
        if level is not None:
            result.update(level.paragraph_css)
        result.update(paragraph.css_style)
        return result

    def resolve_run(self, run: Run, paragraph: Optional[Paragraph] = None) -> Dict[str, str]:
        """Effective CSS of a run inside a paragraph."""
        result = dict(self.styles.defaults.get("span", {}))
        if paragraph is not None:
            result.update(self.resolve_values(self.paragraph_style_id(paragraph), "span"))
        result.update(self.resolve_values(run.style_name, "span"))
        result.update(run.css_style)
        return result

    def resolve_table_cell(self, table: Table, row: Optional[TableRow], cell: TableCell,
                           flags: Iterable[str] = ()) -> Dict[str, str]:
        """
        Effective CSS of a table cell.

        Args:
            table: Owning table
            row: Owning row
            cell: The cell
            flags: Conditional classes of the row and the cell (``first-row``, ``odd-col``, ...)

        Returns:
            CSS values
        """
        active = set(flags)
        style_id = table.style_name
        result = self.resolve_values(style_id, "td")
        for condition in CONDITIONAL_PRECEDENCE:
            flag = CONDITION_FLAGS[condition]
            if flag is None or flag in active:
                result.update(self.resolve_values(style_id, "td", condition))
        result.update(table.cell_style)
        if row is not None:
            result.update(row.cell_style)
        result.update(cell.css_style)
        return result

    def table_band_sizes(self, table: Table) -> tuple:
        """Row and column band sizes, direct formatting over the table style."""
        row_size = table.row_band_size
        col_size = table.col_band_size
        for style in self.chain(table.style_name):
            if style.row_band_size and row_size == 1:
                row_size = style.row_band_size
            if style.col_band_size and col_size == 1:
                col_size = style.col_band_size
        return max(row_size, 1), max(col_size, 1)
