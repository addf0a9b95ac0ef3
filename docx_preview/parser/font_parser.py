"""
Font table parser (``word/fontTable.xml``).

Collects font declarations and the references to embedded font parts.
Font data itself is loaded and deobfuscated by the font renderer.
"""

import logging

from lxml import etree

from ..models.fonts import EMBED_KIND_STYLES, EmbeddedFontReference, FontCatalog, FontDeclaration
from ..utils.xml_utils import attr, bool_attr, elements, local_name

logger = logging.getLogger(__name__)


def parse_font(node: etree._Element) -> FontDeclaration:
    result = FontDeclaration(name=attr(node, "name") or "")
    for child in elements(node):
        name = local_name(child)
        if name == "family":
            result.family = attr(child, "val")
        elif name == "altName":
            result.alt_name = attr(child, "val")
        elif name == "pitch":
            result.pitch = attr(child, "val")
        elif name == "charset":
            result.charset = attr(child, "val")
        elif name in EMBED_KIND_STYLES:
            rel_id = attr(child, "id")
            if rel_id:
                result.embed_refs.append(EmbeddedFontReference(
                    kind=name,
                    rel_id=rel_id,
                    key=attr(child, "fontKey"),
                    subsetted=bool_attr(child, "subsetted"),
                ))
    return result


def parse_font_table(root: etree._Element) -> FontCatalog:
    """
    Parse ``w:fonts``.

    Args:
        root: Root element of the font table part

    Returns:
        Font catalog
    """
    fonts = [parse_font(node) for node in elements(root, "font")]
    catalog = FontCatalog([font for font in fonts if font.name])
    logger.debug(f"Parsed {len(catalog)} fonts, {sum(1 for _ in catalog.embedded())} with embedded data")
    return catalog
