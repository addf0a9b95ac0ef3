"""
HTML renderer.

Walks the parsed element tree and builds an ``lxml`` DOM: one ``<section>``
per page, ``<p>`` / ``<span>`` for paragraphs and runs, ``<table>`` for
tables, plus the stylesheet fragments generated from the style, numbering,
theme and font catalogs.

The walk itself is synchronous. Images, fonts, picture bullets and embedded
HTML parts are recorded as pending resources while walking and resolved
together by ``render_async``.
"""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from string import Template
from typing import Callable, Dict, Iterator, List, Optional

from lxml import etree

from ..exceptions import RenderingError
from ..media.resources import PendingResource, ResourceResolver, gather_resources
from ..models.base import OpenXmlElement
from ..models.document import WordDocument
from ..models.elements import AltChunk, BookmarkStart, Break, Hyperlink, Image, Paragraph, Run, Symbol, Text
from ..options import DEFAULT_OPTIONS, Options
from ..parser.properties_parser import enclose_font_family
from ..styles.style_resolver import StyleResolver
from ..styles.style_sheet import StyleSheet, render_theme_styles
from ..utils.element_types import DomType
from .comment_renderer import CommentRenderer
from .dom import add_class, append_element, append_text, apply_style, create_element, create_style_element
from .field_renderer import FieldRenderer
from .font_renderer import FontRenderer
from .footnote_renderer import FootnoteRenderer
from .math_renderer import MathRenderer
from .numbering_renderer import NumberingRenderer
from .page_renderer import PageRenderer
from .revision_renderer import RevisionRenderer
from .table_renderer import TableRenderer
from .vml_renderer import VmlRenderer

logger = logging.getLogger(__name__)

# Inline elements that may sit inside a field result
INLINE_TYPES = frozenset({
    DomType.HYPERLINK,
    DomType.SIMPLE_FIELD,
    DomType.BOOKMARK_START,
    DomType.BOOKMARK_END,
    DomType.INSERTED,
    DomType.DELETED,
    DomType.COMMENT_RANGE_START,
    DomType.COMMENT_RANGE_END,
    DomType.MML_MATH,
    DomType.MML_MATH_PARAGRAPH,
})

TAB_CHAR = "\u2003"
NO_BREAK_HYPHEN = "\u2011"
SOFT_HYPHEN = "\u00ad"

_WRAPPER_STYLE = Template("""\
.$c-wrapper { background: gray; padding: 30px; padding-bottom: 0px; display: flex; flex-flow: column; align-items: center; }
.$c-wrapper>section.$c { background: white; box-shadow: 0 0 10px rgba(0, 0, 0, 0.5); margin-bottom: 30px; }
""")

_DEFAULT_STYLE = Template("""\
.$c { color: black; hyphens: auto; text-underline-position: from-font; }
section.$c { box-sizing: border-box; display: flex; flex-flow: column nowrap; position: relative; overflow: hidden; }
section.$c>article { margin-bottom: auto; z-index: 1; }
section.$c>footer { z-index: 1; }
.$c table { border-collapse: collapse; }
.$c table td, .$c table th { vertical-align: top; }
.$c p { margin: 0pt; min-height: 1em; }
.$c span { white-space: pre-wrap; overflow-wrap: break-word; }
.$c a { color: inherit; text-decoration: inherit; }
.$c svg { fill: transparent; }
.$c-page-break { break-after: page; height: 0; }
.$c-alt-chunk { border: none; width: 100%; }
""")

_COMMENT_STYLE = Template("""\
.$c-comment-ref { cursor: default; }
.$c-comment-popover { display: none; z-index: 1000; padding: 0.5rem; background: #fff; position: absolute; box-shadow: 0 0 0.25rem rgba(0, 0, 0, 0.25); width: 30ch; }
.$c-comment-ref:hover ~ .$c-comment-popover { display: block; }
.$c-comment-popover>span { display: block; }
.$c-comment-author, .$c-comment-date { font-size: 0.875rem; color: #888; }
.$c-comments { padding: 1rem; background: white; max-width: 60ch; }
""")


@dataclass(eq=False)
class RenderResult:
    """
    Output of one render.

    Attributes:
        body: Top level body nodes (the wrapper, or the pages and comment list)
        styles: ``<style>`` elements in cascade order
        failed_resources: Number of resources left out after loading failed
        assets: Image bytes keyed by package path when data URIs are off
    """

    body: List[etree._Element] = field(default_factory=list)
    styles: List[etree._Element] = field(default_factory=list)
    failed_resources: int = 0
    assets: Dict[str, bytes] = field(default_factory=dict)


class HtmlRenderer:
    """
    Renders a parsed ``WordDocument`` to HTML.

    One instance renders one document once; feature rendering is delegated
    to the sub-renderers, which share this instance's state.
    """

    def __init__(self, document: WordDocument, options: Options = DEFAULT_OPTIONS):
        self.document = document
        self.options = options
        self.resolver = StyleResolver(document.styles, document.numbering)
        self.style_sheet = StyleSheet(document.styles, self.resolver, options)
        self.resources = ResourceResolver(document, options)
        self.pending: List[PendingResource] = []
        self.current_part: Optional[str] = document.main_part

        self.fields = FieldRenderer(self)
        self.tables = TableRenderer(self)
        self.notes = FootnoteRenderer(self)
        self.revisions = RevisionRenderer(self)
        self.comments = CommentRenderer(self)
        self.math = MathRenderer(self)
        self.vml = VmlRenderer(self)
        self.fonts = FontRenderer(self)
        self.numbering = NumberingRenderer(self)
        self.pages = PageRenderer(self)

        self._handlers: Dict[DomType, Callable[[OpenXmlElement, etree._Element], Optional[etree._Element]]] = {
            DomType.PARAGRAPH: self._render_paragraph,
            DomType.RUN: self._render_run,
            DomType.TEXT: self._render_text,
            DomType.DELETED_TEXT: self.revisions.render_deleted_text,
            DomType.TAB: self._render_tab,
            DomType.SYMBOL: self._render_symbol,
            DomType.BREAK: self._render_break,
            DomType.NO_BREAK_HYPHEN: lambda elem, parent: append_text(parent, NO_BREAK_HYPHEN),
            DomType.SOFT_HYPHEN: lambda elem, parent: append_text(parent, SOFT_HYPHEN),
            DomType.HYPERLINK: self._render_hyperlink,
            DomType.ALT_CHUNK: self._render_alt_chunk,
            DomType.TABLE: self.tables.render_table,
            DomType.BOOKMARK_START: self._render_bookmark,
            DomType.BOOKMARK_END: lambda elem, parent: None,
            DomType.SIMPLE_FIELD: self.fields.render_simple,
            DomType.FOOTNOTE_REFERENCE: self.notes.render_reference,
            DomType.ENDNOTE_REFERENCE: self.notes.render_reference,
            DomType.INSERTED: self.revisions.render,
            DomType.DELETED: self.revisions.render,
            DomType.COMMENT_RANGE_START: self.comments.render_marker,
            DomType.COMMENT_RANGE_END: self.comments.render_marker,
            DomType.COMMENT_REFERENCE: self.comments.render_marker,
            DomType.DRAWING: self._render_drawing,
            DomType.IMAGE: self._render_image,
            DomType.VML_PICTURE: self.vml.render_picture,
            DomType.VML_ELEMENT: self.vml.render_shape,
            DomType.MML_MATH: self.math.render,
            DomType.MML_MATH_PARAGRAPH: self.math.render,
        }

    @property
    def root_selector(self) -> str:
        """Selector numbering counters and resource variables are declared on."""
        if self.options.in_wrapper:
            return f".{self.options.class_name}-wrapper"
        return ":root"

    @contextmanager
    def part_scope(self, part: Optional[str]) -> Iterator[None]:
        """Render content of another part (header, note, comment) with its own relationships."""
        saved = self.current_part
        self.current_part = part or saved
        try:
            with self.fields.isolated():
                yield
        finally:
            self.current_part = saved

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render(self) -> RenderResult:
        """
        Synchronous walk.

        Resources are only recorded in ``pending``; their slots stay empty
        until ``gather_resources`` runs.
        """
        document = self.document
        prefix = self.options.class_name
        logger.debug(f"Rendering {document.main_part}")

        body = self.pages.render_pages(document.document)
        comment_list = self.comments.render_comment_list()
        if comment_list is not None:
            body.append(comment_list)
        if self.options.in_wrapper:
            wrapper = create_element("div", f"{prefix}-wrapper")
            for node in body:
                wrapper.append(node)
            body = [wrapper]

        styles = [create_style_element(self.render_default_style())]
        theme_css = render_theme_styles(document.theme, self.options)
        if theme_css:
            styles.append(create_style_element(theme_css))
        font_style = self.fonts.render()
        if font_style is not None:
            styles.append(font_style)
        styles.append(create_style_element(self.style_sheet.render()))
        styles.append(self.numbering.render(self.root_selector))
        styles.append(create_style_element(self.pages.render_page_styles()))

        logger.debug(f"Rendered {len(body)} body node(s), {len(self.pending)} pending resource(s)")
        return RenderResult(body=body, styles=styles, assets=self.resources.assets)

    async def render_async(self) -> RenderResult:
        """Render and resolve every pending resource."""
        try:
            result = self.render()
        except Exception as e:
            self._close_pending()
            if isinstance(e, RenderingError):
                raise
            raise RenderingError("Rendering failed", str(e)) from e
        result.failed_resources = await gather_resources(self.pending, self.options.debug)
        return result

    def _close_pending(self) -> None:
        for item in self.pending:
            if asyncio.iscoroutine(item.load):
                item.load.close()
        self.pending.clear()

    def render_default_style(self) -> str:
        values = {"c": self.options.class_name}
        wrapper = _WRAPPER_STYLE.substitute(values)
        if self.options.hide_wrapper_on_print:
            wrapper = f"@media not print {{\n{wrapper}}}\n"
        css = wrapper + _DEFAULT_STYLE.substitute(values)
        if self.options.render_comments:
            css += _COMMENT_STYLE.substitute(values)
        return css

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def render_elements(self, elements: List[OpenXmlElement], parent: etree._Element) -> None:
        for elem in elements:
            self.render_element(elem, parent)

    def render_children(self, elem: OpenXmlElement, parent: etree._Element) -> None:
        self.render_elements(elem.children, parent)

    def render_element(self, elem: OpenXmlElement, parent: etree._Element) -> Optional[etree._Element]:
        """
        Render one element into parent.

        Inline elements are skipped inside field instructions and routed
        into the wrapper of the enclosing field result.
        """
        if elem.type in INLINE_TYPES:
            if self.fields.suppressed():
                return None
            parent = self.fields.container(parent)
        handler = self._handlers.get(elem.type)
        if handler is None:
            if self.options.debug:
                logger.warning(f"No renderer for {elem.type.value}")
            return None
        return handler(elem, parent)

    # ------------------------------------------------------------------
    # Paragraphs and runs
    # ------------------------------------------------------------------

    def _render_paragraph(self, elem: Paragraph, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "p")
        add_class(node, self.style_sheet.class_for(elem.style_name))
        numbering = self.resolver.resolve_paragraph_properties(elem).numbering
        if numbering is not None and numbering.id != "0" \
                and self.document.numbering.get_level(numbering.id, numbering.level) is not None:
            add_class(node, self.numbering.class_for(numbering.id, numbering.level))
        self.render_children(elem, node)
        apply_style(node, elem.css_style)
        return node

    def _render_run(self, elem: Run, parent: etree._Element) -> Optional[etree._Element]:
        fields = self.fields
        if elem.field_run:
            for child in elem.children:
                if child.type == DomType.INSTRUCTION:
                    fields.add_instruction(child.text)
                elif child.type == DomType.COMPLEX_FIELD:
                    fields.handle_char(child, parent)
            return None

        node = None
        for child in elem.children:
            if child.type == DomType.COMPLEX_FIELD:
                fields.handle_char(child, parent)
                node = None
                continue
            if fields.suppressed():
                continue
            if node is None:
                node = self._create_run_node(elem, fields.container(parent))
            self.render_element(child, node)
        return node

    def _create_run_node(self, elem: Run, container: etree._Element) -> etree._Element:
        if elem.vertical_align:
            container = append_element(container, elem.vertical_align)
        node = append_element(container, "span")
        add_class(node, self.style_sheet.class_for(elem.style_name))
        apply_style(node, elem.css_style)
        return node

    def _render_text(self, elem: Text, parent: etree._Element) -> None:
        append_text(parent, elem.text)

    def _render_tab(self, elem: OpenXmlElement, parent: etree._Element) -> etree._Element:
        return append_element(parent, "span", f"{self.options.class_name}-tab", text=TAB_CHAR)

    def _render_symbol(self, elem: Symbol, parent: etree._Element) -> Optional[etree._Element]:
        try:
            char = chr(int(elem.char or "", 16))
        except ValueError:
            logger.debug(f"Invalid symbol character {elem.char!r}")
            return None
        node = append_element(parent, "span", text=char)
        if elem.font:
            apply_style(node, {"font-family": enclose_font_family(elem.font)})
        return node

    def _render_break(self, elem: Break, parent: etree._Element) -> Optional[etree._Element]:
        if elem.break_type == "textWrapping":
            return append_element(parent, "br")
        return None

    # ------------------------------------------------------------------
    # Links and bookmarks
    # ------------------------------------------------------------------

    def _render_hyperlink(self, elem: Hyperlink, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "a")
        href = f"#{elem.anchor}" if elem.anchor else None
        if elem.rel_id:
            rel = self.document.get_relationship(elem.rel_id, self.current_part)
            if rel is not None:
                href = rel.target + (href or "")
            else:
                logger.debug(f"Hyperlink relationship {elem.rel_id} not found")
        if href:
            node.set("href", href)
        if elem.tooltip:
            node.set("title", elem.tooltip)
        self.render_children(elem, node)
        apply_style(node, elem.css_style)
        return node

    def _render_bookmark(self, elem: BookmarkStart, parent: etree._Element) -> Optional[etree._Element]:
        if not elem.name or elem.name == "_GoBack":
            return None
        return append_element(parent, "span", f"{self.options.class_name}-bookmark", {"id": elem.name})

    # ------------------------------------------------------------------
    # Graphics and embedded content
    # ------------------------------------------------------------------

    def _render_drawing(self, elem: OpenXmlElement, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "span")
        apply_style(node, elem.css_style)
        self.render_children(elem, node)
        return node

    def _render_image(self, elem: Image, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "img", attrs={"alt": elem.title})
        apply_style(node, elem.css_style)
        self.pending.append(PendingResource(
            load=self.resources.image(elem.rel_id, self.current_part),
            apply=lambda url: node.set("src", url),
            slot=node,
            label=f"image {elem.rel_id}",
        ))
        return node

    def _render_alt_chunk(self, elem: AltChunk, parent: etree._Element) -> Optional[etree._Element]:
        if not self.options.render_alt_chunks:
            return None
        node = append_element(parent, "iframe", f"{self.options.class_name}-alt-chunk")
        self.pending.append(PendingResource(
            load=self.resources.html_part(elem.rel_id, self.current_part),
            apply=lambda text: node.set("srcdoc", text),
            slot=node,
            label=f"embedded part {elem.rel_id}",
        ))
        return node
