"""
Page renderer.

The body is cut into sections at paragraphs carrying a ``w:sectPr`` and,
when ``break_pages`` is on, at explicit page breaks. Sections are grouped
into pages: a page break always starts a new page, a section break starts
one unless the next section is continuous on the same page geometry.

Splitting works on shallow copies; the parsed tree is never modified.
"""

import copy
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from lxml import etree

from ..models.base import OpenXmlElement
from ..models.elements import DocumentRoot, Paragraph
from ..models.section import HeaderFooterReference, SectionProperties
from ..styles.style_sheet import style_to_string
from ..utils.element_types import DomType
from .dom import append_element, apply_style, create_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SectionChunk:
    """
    Run of body elements rendered into one ``<article>``.

    Attributes:
        props: Section the elements belong to
        elements: Body elements, in order
        page_break: The chunk ends at a page break rather than a section break
    """

    props: Optional[SectionProperties] = None
    elements: List[OpenXmlElement] = field(default_factory=list)
    page_break: bool = False


class PageRenderer:
    """Splits the body into pages and renders page boxes with headers and footers."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options
        self.document = renderer.document
        self._page_classes: Dict[tuple, str] = {}
        self._page_rules: List[str] = []

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------

    def is_page_break(self, elem: OpenXmlElement) -> bool:
        if elem.type != DomType.BREAK:
            return False
        if elem.break_type == "lastRenderedPageBreak":
            return self.options.respect_last_rendered_page_break
        return elem.break_type == "page"

    def split_sections(self, elements: List[OpenXmlElement],
                       default_props: SectionProperties) -> List[SectionChunk]:
        """
        Cut body elements into chunks at section and page breaks.

        Args:
            elements: Body elements
            default_props: Final section of the body (``w:body/w:sectPr``)

        Returns:
            Chunks in document order, each with its section properties
        """
        current = SectionChunk()
        result = [current]
        resolver = self.renderer.resolver

        for elem in elements:
            pending: List[OpenXmlElement] = [elem]
            while pending:
                item = pending.pop()
                if item.type != DomType.PARAGRAPH:
                    current.elements.append(item)
                    continue

                if (self.options.break_pages and current.elements and item is elem
                        and resolver.resolve_paragraph_properties(item).page_break_before):
                    current.page_break = True
                    current = SectionChunk()
                    result.append(current)

                before, after = item, None
                index, run_index = self._find_page_break(item)
                if index != -1:
                    before, after = self._split_paragraph(item, index, run_index)
                if before is not None:
                    current.elements.append(before)

                section_props = item.props.section_props if after is None else None
                if section_props is not None or index != -1:
                    current.props = section_props
                    current.page_break = index != -1
                    current = SectionChunk()
                    result.append(current)
                if after is not None:
                    pending.append(after)

        if not result[-1].elements and len(result) > 1:
            result.pop()
            result[-1].page_break = False

        following = None
        for chunk in reversed(result):
            if chunk.props is None:
                chunk.props = following or default_props
            else:
                following = chunk.props
        return result

    def _find_page_break(self, paragraph: Paragraph) -> Tuple[int, int]:
        """Position (child index, run child index) of the first page break, (-1, -1) if none."""
        if not self.options.break_pages:
            return -1, -1
        for index, child in enumerate(paragraph.children):
            if child.type != DomType.RUN:
                continue
            for run_index, item in enumerate(child.children):
                if self.is_page_break(item):
                    return index, run_index
        return -1, -1

    @staticmethod
    def _split_paragraph(paragraph: Paragraph, index: int,
                         run_index: int) -> Tuple[Optional[Paragraph], Optional[Paragraph]]:
        """
        Split a paragraph around the page break at (index, run_index).

        The break itself is dropped. A part with no content left is None.
        """
        run = paragraph.children[index]
        head_run = copy.copy(run)
        head_run.children = run.children[:run_index]
        tail_run = copy.copy(run)
        tail_run.children = run.children[run_index + 1:]

        head_children = paragraph.children[:index] + ([head_run] if head_run.children else [])
        tail_children = ([tail_run] if tail_run.children else []) + paragraph.children[index + 1:]

        before = copy.copy(paragraph)
        before.children = head_children
        after = copy.copy(paragraph)
        after.children = tail_children
        return (before if head_children else None), (after if tail_children else None)

    def group_pages(self, sections: List[SectionChunk]) -> List[List[SectionChunk]]:
        pages: List[List[SectionChunk]] = [[]]
        previous: Optional[SectionChunk] = None
        for chunk in sections:
            if previous is not None and pages[-1] and not previous.page_break \
                    and self._starts_new_page(previous.props, chunk.props):
                pages.append([])
            pages[-1].append(chunk)
            if chunk.page_break:
                pages.append([])
            previous = chunk
        return [page for page in pages if page]

    @staticmethod
    def _starts_new_page(previous: SectionProperties, current: SectionProperties) -> bool:
        if current is previous:
            return False
        if current.type == "continuous":
            return current.page_size != previous.page_size
        return True

    # ------------------------------------------------------------------
    # Page geometry
    # ------------------------------------------------------------------

    def page_class(self, props: SectionProperties) -> str:
        """Generated class of a page geometry; sections with the same geometry share it."""
        key = props.geometry_key()
        name = self._page_classes.get(key)
        if name is None:
            name = f"{self.options.class_name}-sect-{len(self._page_classes) + 1}"
            self._page_classes[key] = name
            self._page_rules.append(self._geometry_rule(name, props))
        return name

    def _geometry_rule(self, name: str, props: SectionProperties) -> str:
        values: Dict[str, str] = {}
        margins = props.page_margins
        if margins is not None:
            for side in ("left", "right", "top", "bottom"):
                if getattr(margins, side):
                    values[f"padding-{side}"] = getattr(margins, side)
        size = props.page_size
        has_size = size is not None and bool(size.width) and bool(size.height)
        if size is not None:
            if size.width and not self.options.ignore_width:
                values["width"] = size.width
            if size.height and not self.options.ignore_height:
                values["min-height"] = size.height
        values.update(props.page_borders)
        if has_size:
            values["page"] = name

        rule = style_to_string(f"section.{self.options.class_name}.{name}", values)
        if has_size:
            rule += style_to_string(f"@page {name}", {"size": f"{size.width} {size.height}", "margin": "0"})
        return rule

    def render_page_styles(self) -> str:
        return "".join(self._page_rules)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def render_pages(self, root: DocumentRoot) -> List[etree._Element]:
        """
        Render the body as page sections.

        Returns:
            ``<section>`` elements, with page break markers between them when
            ``break_pages`` is on
        """
        renderer = self.renderer
        options = self.options
        prefix = options.class_name
        pages = self.group_pages(self.split_sections(root.children, root.props))
        numbers, section_pages = self._number_pages(pages)
        logger.debug(f"Rendering {len(pages)} page(s)")

        renderer.fields.total_pages = len(pages)
        headers: Dict[str, HeaderFooterReference] = {}
        footers: Dict[str, HeaderFooterReference] = {}
        result: List[etree._Element] = []
        previous: Optional[SectionProperties] = None

        for index, page in enumerate(pages):
            props = page[0].props
            first_of_section = props is not previous
            if first_of_section:
                self._inherit_refs(props, headers, footers)

            fields = renderer.fields
            fields.page_number = numbers[index]
            fields.page_number_format = props.page_number.format if props.page_number else None
            fields.section_pages = section_pages[id(props)]
            renderer.notes.start_page()

            if options.break_pages and result:
                result.append(create_element("div", f"{prefix}-page-break"))
            node = create_element("section", f"{prefix} {self.page_class(props)}")
            apply_style(node, root.css_style)

            if options.render_headers:
                ref = self._select_ref(headers, props, numbers[index], first_of_section)
                self._render_header_footer(ref, props, node, DomType.HEADER)

            last = props
            for chunk in page:
                if chunk.props is not last:
                    self._inherit_refs(chunk.props, headers, footers)
                    last = chunk.props
                article = append_element(node, "article")
                self._apply_columns(article, chunk.props)
                renderer.render_elements(chunk.elements, article)

            renderer.notes.render_page_footnotes(node)
            if index == len(pages) - 1:
                renderer.notes.render_endnotes(node)

            if options.render_footers:
                ref = self._select_ref(footers, last, numbers[index], first_of_section)
                self._render_header_footer(ref, last, node, DomType.FOOTER)

            result.append(node)
            previous = last
        return result

    @staticmethod
    def _number_pages(pages: List[List[SectionChunk]]) -> Tuple[List[int], Counter]:
        numbers: List[int] = []
        section_pages: Counter = Counter()
        number = 0
        previous = None
        for page in pages:
            props = page[0].props
            if props is not previous and props.page_number is not None and props.page_number.start is not None:
                number = props.page_number.start
            else:
                number += 1
            numbers.append(number)
            section_pages[id(props)] += 1
            previous = page[-1].props
        return numbers, section_pages

    @staticmethod
    def _inherit_refs(props: SectionProperties, headers: Dict[str, HeaderFooterReference],
                      footers: Dict[str, HeaderFooterReference]) -> None:
        """Sections without their own header/footer references keep the previous ones."""
        for ref in props.header_refs:
            headers[ref.type] = ref
        for ref in props.footer_refs:
            footers[ref.type] = ref

    def _select_ref(self, refs: Dict[str, HeaderFooterReference], props: SectionProperties,
                    page_number: int, first_of_section: bool) -> Optional[HeaderFooterReference]:
        ref = None
        if props.title_page and first_of_section:
            ref = refs.get("first")
        if ref is None and self.document.settings.even_and_odd_headers and page_number % 2 == 0:
            ref = refs.get("even")
        return ref or refs.get("default")

    def _render_header_footer(self, ref: Optional[HeaderFooterReference], props: SectionProperties,
                              page: etree._Element, dom_type: DomType) -> Optional[etree._Element]:
        if ref is None:
            return None
        document = self.document
        path = document.find_part_by_rel_id(ref.id, document.main_part)
        parts = document.headers if dom_type == DomType.HEADER else document.footers
        content = parts.get(path) if path else None
        if content is None:
            logger.debug(f"No {dom_type.value} part for {ref.id}")
            return None

        node = append_element(page, "header" if dom_type == DomType.HEADER else "footer")
        with self.renderer.part_scope(path):
            self.renderer.render_children(content, node)

        margins = props.page_margins
        if margins is not None:
            if dom_type == DomType.HEADER and margins.header and margins.top:
                apply_style(node, {"margin-top": f"calc({margins.header} - {margins.top})",
                                   "min-height": f"calc({margins.top} - {margins.header})"})
            elif dom_type == DomType.FOOTER and margins.footer and margins.bottom:
                apply_style(node, {"margin-bottom": f"calc({margins.footer} - {margins.bottom})",
                                   "min-height": f"calc({margins.bottom} - {margins.footer})"})
        return node

    @staticmethod
    def _apply_columns(article: etree._Element, props: Optional[SectionProperties]) -> None:
        columns = props.columns if props is not None else None
        if columns is None or not columns.number_of_columns or columns.number_of_columns < 2:
            return
        values = {"column-count": str(columns.number_of_columns)}
        if columns.space:
            values["column-gap"] = columns.space
        if columns.separator:
            values["column-rule"] = "1px solid black"
        apply_style(article, values)
