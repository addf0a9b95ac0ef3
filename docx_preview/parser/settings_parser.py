"""Settings and core properties parsers."""

import logging
from typing import Optional

from lxml import etree

from ..models.parts import CoreProperties, NoteProperties, Settings
from ..utils.xml_utils import attr, bool_attr, element, elements, int_attr, length_attr, local_name, text_content

logger = logging.getLogger(__name__)


def parse_note_properties(node: Optional[etree._Element]) -> NoteProperties:
    if node is None:
        return NoteProperties()
    return NoteProperties(
        number_format=attr(element(node, "numFmt"), "val"),
        start=int_attr(element(node, "numStart"), "val"),
        position=attr(element(node, "pos"), "val"),
    )


def parse_settings(root: etree._Element) -> Settings:
    """
    Parse ``w:settings``.

    Args:
        root: Root element of the settings part

    Returns:
        Settings
    """
    result = Settings()
    for node in elements(root):
        name = local_name(node)
        if name == "defaultTabStop":
            result.default_tab_stop = length_attr(node, "val")
        elif name == "evenAndOddHeaders":
            result.even_and_odd_headers = bool_attr(node, "val", True)
        elif name == "autoHyphenation":
            result.auto_hyphenation = bool_attr(node, "val", True)
        elif name == "footnotePr":
            result.footnote_props = parse_note_properties(node)
        elif name == "endnotePr":
            result.endnote_props = parse_note_properties(node)
    return result


def parse_core_properties(root: etree._Element) -> CoreProperties:
    """Parse ``docProps/core.xml``."""
    values = {}
    for node in elements(root):
        name = local_name(node)
        value = text_content(node)
        if name == "title":
            values["title"] = value
        elif name == "subject":
            values["subject"] = value
        elif name == "creator":
            values["creator"] = value
        elif name == "keywords":
            values["keywords"] = value
        elif name == "description":
            values["description"] = value
        elif name == "lastModifiedBy":
            values["last_modified_by"] = value
        elif name == "revision":
            values["revision"] = int(value) if value.strip().isdigit() else None
        elif name == "created":
            values["created"] = value
        elif name == "modified":
            values["modified"] = value
    return CoreProperties(**values)
