"""Theme part parser (``word/theme/theme1.xml``)."""

import logging
from typing import Optional

from lxml import etree

from ..models.parts import Theme
from ..utils.xml_utils import attr, element, elements, local_name

logger = logging.getLogger(__name__)


def _scheme_color(node: etree._Element) -> Optional[str]:
    """Hex value of a color scheme entry (``a:srgbClr`` or ``a:sysClr``)."""
    for child in elements(node):
        name = local_name(child)
        if name == "srgbClr":
            return attr(child, "val")
        if name == "sysClr":
            return attr(child, "lastClr")
    return None


def parse_theme(root: etree._Element) -> Theme:
    """
    Parse ``a:theme``: the color scheme and the latin major/minor fonts.

    Args:
        root: Root element of the theme part

    Returns:
        Theme
    """
    result = Theme(name=attr(root, "name"))
    elements_node = element(root, "themeElements")

    color_scheme = element(elements_node, "clrScheme")
    for node in elements(color_scheme):
        value = _scheme_color(node)
        if value:
            result.colors[local_name(node)] = value

    font_scheme = element(elements_node, "fontScheme")
    result.major_font = attr(element(element(font_scheme, "majorFont"), "latin"), "typeface")
    result.minor_font = attr(element(element(font_scheme, "minorFont"), "latin"), "typeface")

    logger.debug(f"Parsed theme {result.name!r} with {len(result.colors)} colors")
    return result
