"""
XML utilities for WordprocessingML parts.

Thin helpers over lxml elements: namespace-agnostic attribute lookup by
local name, child iteration that skips comments and processing
instructions, and typed attribute readers.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from lxml import etree

from .units import LengthUsage, LengthUsages, convert_boolean, convert_length


class Namespaces:
    """Namespace URIs used by the parser."""

    WORDML = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
    DRAWINGML = "http://schemas.openxmlformats.org/drawingml/2006/main"
    PICTURE = "http://schemas.openxmlformats.org/drawingml/2006/picture"
    WP = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
    RELATIONSHIPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
    PACKAGE_RELATIONSHIPS = "http://schemas.openxmlformats.org/package/2006/relationships"
    MATH = "http://schemas.openxmlformats.org/officeDocument/2006/math"
    VML = "urn:schemas-microsoft-com:vml"
    OFFICE = "urn:schemas-microsoft-com:office:office"
    MARKUP_COMPATIBILITY = "http://schemas.openxmlformats.org/markup-compatibility/2006"
    CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
    DUBLIN_CORE = "http://purl.org/dc/elements/1.1/"
    DUBLIN_CORE_TERMS = "http://purl.org/dc/terms/"
    MATHML = "http://www.w3.org/1998/Math/MathML"
    SVG = "http://www.w3.org/2000/svg"


_XML_DECLARATION = re.compile(rb"^\s*(\xef\xbb\xbf)?\s*<\?xml[^>]*\?>")

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True, remove_blank_text=False)


def parse_xml(data: bytes, trim_declaration: bool = True) -> etree._Element:
    """
    Parse raw part bytes into an lxml element.

    Args:
        data: Part content
        trim_declaration: Strip the ``<?xml ...?>`` declaration first

    Returns:
        Root element

    Raises:
        etree.XMLSyntaxError: If the content is not well-formed
    """
    if trim_declaration:
        data = _XML_DECLARATION.sub(b"", data, count=1)
    return etree.fromstring(data, _PARSER)


def local_name(node: etree._Element) -> str:
    """Local name of an element, without namespace."""
    return etree.QName(node).localname


def namespace(node: etree._Element) -> Optional[str]:
    """Namespace URI of an element."""
    return etree.QName(node).namespace


def qualified_name(node: etree._Element) -> str:
    """Prefixed name of an element, for diagnostics."""
    prefix = node.prefix
    name = local_name(node)
    return f"{prefix}:{name}" if prefix else name


def elements(node: Optional[etree._Element], name: Optional[str] = None) -> List[etree._Element]:
    """
    Child elements of a node, optionally filtered by local name.

    Comments and processing instructions are skipped.
    """
    if node is None:
        return []
    result = []
    for child in node:
        if not isinstance(child.tag, str):
            continue
        if name is None or local_name(child) == name:
            result.append(child)
    return result


def iter_elements(node: Optional[etree._Element]) -> Iterator[etree._Element]:
    """Iterate child elements of a node."""
    if node is None:
        return
    for child in node:
        if isinstance(child.tag, str):
            yield child


def element(node: Optional[etree._Element], name: str) -> Optional[etree._Element]:
    """First child element with the given local name."""
    if node is None:
        return None
    for child in node:
        if isinstance(child.tag, str) and local_name(child) == name:
            return child
    return None


def attr(node: Optional[etree._Element], name: str) -> Optional[str]:
    """Attribute value looked up by local name, whatever its namespace."""
    if node is None:
        return None
    for key, value in node.attrib.items():
        if key == name or key.endswith("}" + name):
            return value
    return None


def element_attr(node: Optional[etree._Element], name: str, attr_name: str) -> Optional[str]:
    """Attribute of the first child element with the given local name."""
    return attr(element(node, name), attr_name)


def int_attr(node: Optional[etree._Element], name: str, default: Optional[int] = None) -> Optional[int]:
    value = attr(node, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except ValueError:
            return default


def hex_attr(node: Optional[etree._Element], name: str, default: Optional[int] = None) -> Optional[int]:
    value = attr(node, name)
    if value is None:
        return default
    try:
        return int(value, 16)
    except ValueError:
        return default


def float_attr(node: Optional[etree._Element], name: str, default: Optional[float] = None) -> Optional[float]:
    value = attr(node, name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def bool_attr(node: Optional[etree._Element], name: str, default: bool = False) -> bool:
    return convert_boolean(attr(node, name), default)


def length_attr(node: Optional[etree._Element], name: str,
                usage: LengthUsage = LengthUsages.DXA) -> Optional[str]:
    return convert_length(attr(node, name), usage)


def text_content(node: Optional[etree._Element]) -> str:
    """Concatenated text of a node and its descendants."""
    if node is None:
        return ""
    return "".join(node.itertext())
