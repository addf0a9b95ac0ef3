"""
Table renderer.

Tables keep Word's grid: a ``<colgroup>`` from ``w:tblGrid``, one ``<td>``
per emitted cell, ``colspan`` for ``gridSpan`` and ``rowspan`` for vertical
merges. An occupancy map tracks which grid columns are held by an open
vertical merge so covered cells are never emitted.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from lxml import etree

from ..models.elements import Table, TableCell, TableRow
from ..utils.element_types import DomType
from .dom import add_class, append_element, apply_style

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)


def row_flags(table: Table, index: int, count: int, band_size: int = 1) -> List[str]:
    """
    Conditional format classes of a row.

    Args:
        table: Owning table (its look decides which conditions apply)
        index: Row index
        count: Number of rows
        band_size: Rows per horizontal band

    Returns:
        Flags such as ``first-row`` or ``odd-row``
    """
    look = set(table.look)
    flags = []
    first = "first-row" in look and index == 0
    last = "last-row" in look and index == count - 1
    if first:
        flags.append("first-row")
    if last:
        flags.append("last-row")
    if not first and not last and "no-hband" not in look:
        position = index - (1 if "first-row" in look else 0)
        flags.append("odd-row" if (position // band_size) % 2 == 0 else "even-row")
    return flags


def cell_flags(table: Table, column: int, span: int, count: int, band_size: int = 1,
               row_classes: Optional[List[str]] = None) -> List[str]:
    """Conditional format classes of a cell starting at grid column ``column``."""
    look = set(table.look)
    row_classes = row_classes or []
    flags = []
    first = "first-col" in look and column == 0
    last = "last-col" in look and column + span >= count
    if first:
        flags.append("first-col")
    if last:
        flags.append("last-col")
    if not first and not last and "no-vband" not in look:
        position = column - (1 if "first-col" in look else 0)
        flags.append("odd-col" if (position // band_size) % 2 == 0 else "even-col")
    if "first-row" in row_classes:
        if first:
            flags.append("nw-cell")
        if last:
            flags.append("ne-cell")
    if "last-row" in row_classes:
        if first:
            flags.append("sw-cell")
        if last:
            flags.append("se-cell")
    return flags


def grid_width(table: Table) -> int:
    """Number of grid columns, from the grid or from the widest row."""
    widest = 0
    for row in table.children:
        if row.type != DomType.TABLE_ROW:
            continue
        width = row.grid_before + row.grid_after
        width += sum(max(cell.span, 1) for cell in row.children if cell.type == DomType.TABLE_CELL)
        widest = max(widest, width)
    return max(len(table.columns), widest)


class TableRenderer:
    """Renders ``Table`` elements into HTML tables."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer

    def render_table(self, table: Table, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "table")
        add_class(node, self.renderer.style_sheet.class_for(table.style_name))

        if table.columns:
            colgroup = append_element(node, "colgroup")
            for column in table.columns:
                col = append_element(colgroup, "col")
                if column.width:
                    col.set("style", f"width: {column.width};")

        rows = [row for row in table.children if row.type == DomType.TABLE_ROW]
        row_band, col_band = self.renderer.resolver.table_band_sizes(table)
        columns = grid_width(table)

        header_count = 0
        while header_count < len(rows) and rows[header_count].is_header:
            header_count += 1
        head = append_element(node, "thead") if header_count else None
        body = append_element(node, "tbody") if header_count else node

        merges: Dict[int, etree._Element] = {}
        for index, row in enumerate(rows):
            flags = row.class_name.split() if row.class_name else row_flags(table, index, len(rows), row_band)
            container = head if head is not None and index < header_count else body
            self._render_row(table, row, flags, container, merges, columns, col_band)

        apply_style(node, table.css_style)
        return node

    def _render_row(self, table: Table, row: TableRow, flags: List[str], parent: etree._Element,
                    merges: Dict[int, etree._Element], columns: int, col_band: int) -> None:
        node = append_element(parent, "tr")
        add_class(node, *flags)

        column = 0
        if row.grid_before:
            self._placeholder(node, row.grid_before)
            column += row.grid_before

        previous: Optional[etree._Element] = None
        for cell in row.children:
            if cell.type != DomType.TABLE_CELL:
                continue
            if cell.span == 0 and previous is not None:
                # Continued horizontal merge widens the previous cell
                previous.set("colspan", str(int(previous.get("colspan", "1")) + 1))
                column += 1
                continue

            span = max(cell.span, 1)
            origin = merges.get(column)
            if cell.vertical_merge == "continue" and origin is not None:
                origin.set("rowspan", str(int(origin.get("rowspan", "1")) + 1))
                column += span
                previous = None
                continue

            td = self._render_cell(table, row, cell, flags, node, column, span, columns, col_band)
            for covered in range(column, column + span):
                merges.pop(covered, None)
            if cell.vertical_merge == "restart":
                merges[column] = td
            previous = td
            column += span

        if row.grid_after:
            self._placeholder(node, row.grid_after)
        apply_style(node, row.css_style)

    def _render_cell(self, table: Table, row: TableRow, cell: TableCell, flags: List[str],
                     parent: etree._Element, column: int, span: int, columns: int,
                     col_band: int) -> etree._Element:
        td = append_element(parent, "td")
        if cell.class_name:
            classes = cell.class_name.split()
        else:
            classes = cell_flags(table, column, span, columns, col_band, flags)
        add_class(td, *classes)
        if span > 1:
            td.set("colspan", str(span))
        self.renderer.render_children(cell, td)
        apply_style(td, self.renderer.resolver.resolve_table_cell(table, row, cell, flags + classes))
        return td

    @staticmethod
    def _placeholder(parent: etree._Element, span: int) -> etree._Element:
        td = append_element(parent, "td", attrs={"colspan": str(span)})
        td.set("style", "border: none;")
        return td
