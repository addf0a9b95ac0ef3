"""
Footnote and endnote renderer.

References become superscript links numbered in document order. Footnotes
referenced on a page are listed at the bottom of that page; endnotes are
listed after the last page.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from lxml import etree

from ..models.elements import Note, NoteReference
from ..models.parts import NoteProperties
from ..utils.element_types import DomType
from .dom import append_element, create_element
from .numbering_renderer import num_format_to_css

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)


class FootnoteRenderer:
    """
    Renderer for footnotes and endnotes.

    Each note gets one display number, assigned on its first reference.
    """

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options
        settings = renderer.document.settings
        self.footnote_counter = (settings.footnote_props.start or 1) - 1
        self.endnote_counter = (settings.endnote_props.start or 1) - 1
        self.footnote_map: Dict[str, int] = {}
        self.endnote_map: Dict[str, int] = {}
        self.page_footnotes: List[str] = []

    def start_page(self) -> None:
        self.page_footnotes = []

    def render_reference(self, elem: NoteReference, parent: etree._Element) -> Optional[etree._Element]:
        """
        Render a ``w:footnoteReference`` / ``w:endnoteReference``.

        References to notes that are disabled or missing render nothing.
        """
        document = self.renderer.document
        if elem.type == DomType.FOOTNOTE_REFERENCE:
            if not self.options.render_footnotes or elem.id not in document.footnotes:
                return None
            kind = "footnote"
            number = self.register_footnote(elem.id)
        else:
            if not self.options.render_endnotes or elem.id not in document.endnotes:
                return None
            kind = "endnote"
            number = self.register_endnote(elem.id)

        prefix = self.options.class_name
        sup = append_element(parent, "sup", f"{prefix}-{kind}-ref")
        append_element(sup, "a", attrs={"href": f"#{prefix}-{kind}-{elem.id}"}, text=str(number))
        return sup

    def register_footnote(self, note_id: str) -> int:
        """Display number of a footnote, registering it on the current page."""
        if note_id not in self.footnote_map:
            self.footnote_counter += 1
            self.footnote_map[note_id] = self.footnote_counter
            self.page_footnotes.append(note_id)
        return self.footnote_map[note_id]

    def register_endnote(self, note_id: str) -> int:
        if note_id not in self.endnote_map:
            self.endnote_counter += 1
            self.endnote_map[note_id] = self.endnote_counter
        return self.endnote_map[note_id]

    def render_page_footnotes(self, page: etree._Element) -> Optional[etree._Element]:
        """Append the footnotes referenced on the current page."""
        if not self.options.render_footnotes or not self.page_footnotes:
            return None
        document = self.renderer.document
        result = self._render_list("footnote", self.page_footnotes, self.footnote_map,
                                   document.footnotes, document.settings.footnote_props)
        page.append(result)
        return result

    def render_endnotes(self, page: etree._Element) -> Optional[etree._Element]:
        if not self.options.render_endnotes or not self.endnote_map:
            return None
        document = self.renderer.document
        result = self._render_list("endnote", list(self.endnote_map), self.endnote_map,
                                   document.endnotes, document.settings.endnote_props)
        page.append(result)
        return result

    def _render_list(self, kind: str, note_ids: List[str], numbers: Dict[str, int],
                     notes: Dict[str, Note], props: NoteProperties) -> etree._Element:
        prefix = self.options.class_name
        first = numbers[note_ids[0]]
        result = create_element("ol", f"{prefix}-{kind}s")
        if first != 1:
            result.set("start", str(first))
        if props.number_format:
            result.set("style", f"list-style-type: {num_format_to_css(props.number_format)};")

        part = self.renderer.document.parts.get(f"{kind}s")
        for note_id in note_ids:
            item = append_element(result, "li", attrs={"id": f"{prefix}-{kind}-{note_id}",
                                                      "value": str(numbers[note_id])})
            with self.renderer.part_scope(part):
                self.renderer.render_children(notes[note_id], item)
        return result
