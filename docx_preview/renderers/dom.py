"""
Helpers for building the output DOM.

The output is an ``lxml.etree`` tree serialized with the HTML method. lxml
has no text nodes, so text is appended to ``.text`` of the parent or to the
``.tail`` of its last child.
"""

import logging
from typing import Dict, Iterable, Optional

from lxml import etree

from ..styles.style_sheet import css_declarations

logger = logging.getLogger(__name__)


def create_element(tag: str, class_name: Optional[str] = None,
                   attrs: Optional[Dict[str, str]] = None,
                   text: Optional[str] = None) -> etree._Element:
    """
    Create a detached element.

    Args:
        tag: Tag name
        class_name: Value of the ``class`` attribute
        attrs: Other attributes; None values are skipped
        text: Initial text content
    """
    node = etree.Element(tag)
    if class_name:
        node.set("class", class_name)
    for key, value in (attrs or {}).items():
        if value is not None:
            node.set(key, str(value))
    if text:
        node.text = text
    return node


def append_element(parent: etree._Element, tag: str, class_name: Optional[str] = None,
                   attrs: Optional[Dict[str, str]] = None,
                   text: Optional[str] = None) -> etree._Element:
    node = create_element(tag, class_name, attrs, text)
    parent.append(node)
    return node


def append_text(parent: etree._Element, text: str) -> None:
    """Append text after the current last child of parent."""
    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def add_class(node: etree._Element, *names: Optional[str]) -> None:
    current = (node.get("class") or "").split()
    for name in names:
        for item in (name or "").split():
            if item not in current:
                current.append(item)
    if current:
        node.set("class", " ".join(current))


def apply_style(node: etree._Element, values: Dict[str, str]) -> None:
    """
    Write CSS values as the inline style of a node.

    ``$``-prefixed keys are attributes (``$lang`` -> ``lang``).
    """
    if not values:
        return
    for key, value in values.items():
        if key.startswith("$") and value is not None:
            node.set(key[1:], value)
    declarations = css_declarations(values)
    if not declarations:
        return
    current = node.get("style")
    node.set("style", f"{current} {declarations}" if current else declarations)


def create_style_element(css_text: str) -> etree._Element:
    return create_element("style", text=css_text or None)


def move_children(source: etree._Element, target: etree._Element) -> None:
    """Move the content of source (text and children) to the end of target."""
    append_text(target, source.text or "")
    source.text = None
    for child in list(source):
        target.append(child)


def clear(node: etree._Element) -> None:
    """Remove the content of a node, keeping its attributes and tail."""
    node.text = None
    for child in list(node):
        node.remove(child)


def extend(parent: etree._Element, nodes: Iterable[etree._Element]) -> None:
    for node in nodes:
        parent.append(node)


def to_html(node: etree._Element, pretty: bool = False) -> str:
    return etree.tostring(node, method="html", encoding="unicode", pretty_print=pretty)
