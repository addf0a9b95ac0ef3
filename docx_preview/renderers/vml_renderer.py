"""
Legacy vector graphics renderer.

Each top level shape of a ``w:pict`` becomes an ``<svg>`` box sized from
the shape's CSS ``width`` / ``height``; nested shapes become SVG elements
with the attributes mapped by the parser. Image data is loaded as a
pending resource.
"""

import logging
import re
from typing import TYPE_CHECKING, Dict, Optional

from lxml import etree

from ..media.resources import PendingResource
from ..models.base import OpenXmlElement
from ..models.elements import VmlElement
from ..utils.element_types import DomType
from .dom import append_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

_DECLARATION = re.compile(r"\s*([\w-]+)\s*:\s*([^;]+)")


def parse_css_text(text: Optional[str]) -> Dict[str, str]:
    """Declarations of an inline style string, keyed by lower case property."""
    return {name.lower(): value.strip() for name, value in _DECLARATION.findall(text or "")}


class VmlRenderer:
    """Renders ``VML_PICTURE`` containers as inline SVG."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer

    def render_picture(self, elem: OpenXmlElement, parent: etree._Element) -> Optional[etree._Element]:
        result = None
        for child in elem.children:
            if child.type == DomType.VML_ELEMENT:
                result = self.render_shape(child, parent)
        return result

    def render_shape(self, elem: VmlElement, parent: etree._Element) -> etree._Element:
        """Render a top level shape in its own ``<svg>`` box."""
        css = parse_css_text(elem.css_style_text)
        attrs = {"style": elem.css_style_text or None}
        for name in ("width", "height"):
            if name in css:
                attrs[name] = css[name]
        svg = append_element(parent, "svg", attrs=attrs)
        self._render_element(elem, svg)
        return svg

    def _render_element(self, elem: VmlElement, parent: etree._Element) -> etree._Element:
        node = append_element(parent, elem.tag_name, attrs=elem.attrs)
        if elem.image_rel_id:
            renderer = self.renderer
            renderer.pending.append(PendingResource(
                load=renderer.resources.image(elem.image_rel_id, renderer.current_part),
                apply=lambda url: node.set("href", url),
                slot=node,
                label=f"vector image {elem.image_rel_id}",
            ))
        for child in elem.children:
            if child.type == DomType.VML_ELEMENT:
                self._render_element(child, node)
            else:
                self.renderer.render_element(child, node)
        return node
