"""
Legacy vector graphics (VML) parser.

Supported shapes are an explicit enumeration mapped onto SVG tag names.
Anything outside ``VML_SHAPES`` is dropped with a warning.
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from lxml import etree

from ..models.base import OpenXmlElement
from ..models.elements import VmlElement
from ..utils.element_types import DomType
from ..utils.units import LengthUsages, convert_boolean, convert_length, css_length_to_points
from ..utils.xml_utils import attr, elements, local_name, qualified_name

logger = logging.getLogger(__name__)

# VML local name -> (SVG tag, default SVG attributes)
VML_SHAPES: Dict[str, tuple] = {
    "rect": ("rect", {"width": "100%", "height": "100%"}),
    "roundrect": ("rect", {"width": "100%", "height": "100%", "rx": "10%", "ry": "10%"}),
    "oval": ("ellipse", {"cx": "50%", "cy": "50%", "rx": "50%", "ry": "50%"}),
    "line": ("line", {}),
    "polyline": ("polyline", {}),
    "shape": ("g", {}),
    "group": ("g", {}),
    "textbox": ("foreignObject", {"width": "100%", "height": "100%"}),
}

# Child elements carrying no shape of their own
_SHAPE_DETAILS = frozenset({"path", "formulas", "handles", "shadow", "textpath", "lock",
                            "shapetype", "wrap", "anchorlock", "extrusion", "skew",
                            "callout", "signatureline", "OLEObject", "ink", "clientData"})

_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")


def parse_point(value: str) -> List[str]:
    """Split a VML point (``10pt,20pt``) into its coordinates."""
    parts = [part.strip() for part in value.split(",")]
    while len(parts) < 2:
        parts.append("0")
    return [_vml_length(part) for part in parts[:2]]


def parse_points(value: str) -> str:
    """
    Convert a VML point list into an SVG ``points`` value.

    SVG point lists take user units only, so every coordinate becomes a
    plain number of points.
    """
    numbers = []
    for part in re.split(r"[,\s]+", value.strip()):
        if not part:
            continue
        points = css_length_to_points(_vml_length(part))
        numbers.append(f"{points:.2f}" if points is not None else "0")
    return " ".join(numbers)


def _vml_length(value: str) -> str:
    """Bare VML numbers are EMU; anything with a unit passes through."""
    if _NUMBER.match(value):
        return convert_length(value, LengthUsages.EMU) or "0"
    return value


def vml_bool(value: Optional[str], default: bool = False) -> bool:
    """VML booleans also use ``t`` / ``f``."""
    if value in ("t", "f"):
        return value == "t"
    return convert_boolean(value, default)


def _stroke_width(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return _vml_length(value)


def parse_stroke(node: etree._Element) -> Dict[str, str]:
    result = {}
    if not vml_bool(attr(node, "on"), True):
        result["stroke"] = "none"
        return result
    color = attr(node, "color")
    if color:
        result["stroke"] = color
    result["stroke-width"] = _stroke_width(attr(node, "weight")) or "1px"
    dash = attr(node, "dashstyle")
    if dash and dash != "solid":
        result["stroke-dasharray"] = "4 2"
    return result


def parse_fill(node: etree._Element) -> Dict[str, str]:
    result = {}
    if not vml_bool(attr(node, "on"), True):
        result["fill"] = "none"
        return result
    color = attr(node, "color")
    if color:
        result["fill"] = color
    opacity = attr(node, "opacity")
    if opacity:
        result["fill-opacity"] = _opacity(opacity)
    return result


def _opacity(value: str) -> str:
    """VML opacity: a fraction, a percentage or a 16.16 fixed number ending in ``f``."""
    if value.endswith("f"):
        return f"{int(value[:-1]) / 65536:.2f}"
    if value.endswith("%"):
        return f"{float(value[:-1]) / 100:.2f}"
    return value


class VmlParser:
    """
    Builds ``VmlElement`` trees out of ``w:pict`` / ``w:object`` content.

    Text box content is parsed with the body parser passed in.
    """

    def __init__(self, parse_body: Callable[[etree._Element], List[OpenXmlElement]],
                 warnings: Optional[List[str]] = None):
        self._parse_body = parse_body
        self.warnings = warnings if warnings is not None else []

    def parse_picture(self, node: etree._Element) -> OpenXmlElement:
        """Parse a ``w:pict`` (or ``w:object``) container."""
        result = OpenXmlElement(type=DomType.VML_PICTURE)
        for child in elements(node):
            shape = self.parse_element(child)
            if shape is not None:
                result.add_child(shape)
        return result

    def parse_element(self, node: etree._Element) -> Optional[VmlElement]:
        """
        Parse one VML shape.

        Returns:
            The shape, or None if its kind is not supported
        """
        name = local_name(node)
        shape = VML_SHAPES.get(name)
        if shape is None:
            if name not in _SHAPE_DETAILS:
                self._warn(f"unsupported vector shape: {qualified_name(node)}")
            return None

        tag_name, defaults = shape
        result = VmlElement(tag_name=tag_name, attrs=dict(defaults))
        self._parse_attributes(node, result)

        for child in elements(node):
            child_name = local_name(child)
            if child_name == "stroke":
                result.attrs.update(parse_stroke(child))
            elif child_name == "fill":
                result.attrs.update(parse_fill(child))
            elif child_name == "imagedata":
                result.tag_name = "image"
                result.attrs.update({"width": "100%", "height": "100%"})
                result.image_rel_id = attr(child, "id")
                title = attr(child, "title")
                if title:
                    result.attrs["aria-label"] = title
            elif child_name == "txbxContent":
                result.extend(self._parse_body(child))
            elif child_name in _SHAPE_DETAILS:
                continue
            else:
                nested = self.parse_element(child)
                if nested is not None:
                    result.add_child(nested)
        return result

    def _parse_attributes(self, node: etree._Element, result: VmlElement) -> None:
        stroked = True
        filled = True
        for key, value in node.attrib.items():
            name = etree.QName(key).localname
            if name == "style":
                result.css_style_text = value
            elif name == "fillcolor":
                result.attrs["fill"] = value
            elif name == "strokecolor":
                result.attrs["stroke"] = value
            elif name == "strokeweight":
                result.attrs["stroke-width"] = _stroke_width(value) or "1px"
            elif name == "stroked":
                stroked = vml_bool(value, True)
            elif name == "filled":
                filled = vml_bool(value, True)
            elif name == "from":
                result.attrs["x1"], result.attrs["y1"] = parse_point(value)
            elif name == "to":
                result.attrs["x2"], result.attrs["y2"] = parse_point(value)
            elif name == "points":
                result.attrs["points"] = parse_points(value)
            elif name == "arcsize" and result.tag_name == "rect":
                result.attrs["rx"] = result.attrs["ry"] = f"{_arc_ratio(value) * 50:.2f}%"

        if not stroked:
            result.attrs["stroke"] = "none"
        if not filled:
            result.attrs["fill"] = "none"
        elif "fill" not in result.attrs and result.tag_name in ("rect", "ellipse"):
            result.attrs["fill"] = "white"
        if "stroke" not in result.attrs and result.tag_name in ("rect", "ellipse", "line", "polyline"):
            result.attrs["stroke"] = "black"
            result.attrs.setdefault("stroke-width", "0.75pt")

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


def _arc_ratio(value: str) -> float:
    try:
        if value.endswith("f"):
            return int(value[:-1]) / 65536
        return float(value.rstrip("%")) / (100 if value.endswith("%") else 1)
    except ValueError:
        return 0.2
