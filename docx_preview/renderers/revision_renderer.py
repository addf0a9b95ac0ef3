"""Tracked changes renderer."""

import logging
from typing import TYPE_CHECKING, Optional

from lxml import etree

from ..models.elements import Revision, Text
from ..utils.element_types import DomType
from .dom import append_element, append_text

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)


class RevisionRenderer:
    """
    Renders insertions and deletions.

    With ``render_changes`` on, both become ``<ins>`` / ``<del>`` wrappers
    carrying the author and date. With it off the document shows its final
    state: inserted content is rendered inline and deleted content is
    dropped.
    """

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options

    def render(self, elem: Revision, parent: etree._Element) -> Optional[etree._Element]:
        if not self.options.render_changes:
            if elem.type == DomType.INSERTED:
                self.renderer.render_children(elem, parent)
            return None

        tag = "ins" if elem.type == DomType.INSERTED else "del"
        attrs = {"data-author": elem.author, "data-date": elem.date}
        if elem.author:
            attrs["title"] = f"{elem.author} {elem.date}" if elem.date else elem.author
        node = append_element(parent, tag, f"{self.options.class_name}-{tag}", attrs)
        self.renderer.render_children(elem, node)
        return node

    def render_deleted_text(self, elem: Text, parent: etree._Element) -> None:
        if self.options.render_changes:
            append_text(parent, elem.text)
