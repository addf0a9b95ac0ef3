"""Numbering part parser (``word/numbering.xml``)."""

import logging
from typing import List, Optional

from lxml import etree

from ..models.elements import Paragraph
from ..models.numbering import (AbstractNumbering, LevelOverride, NumberingCatalog,
                                NumberingInstance, NumberingLevel, PictureBullet)
from ..models.styles import StyleCatalog
from ..utils.xml_utils import attr, bool_attr, element, element_attr, elements, int_attr, local_name
from .document_parser import DocumentParser

logger = logging.getLogger(__name__)


class NumberingParser:
    """Builds the ``NumberingCatalog``."""

    def __init__(self, document_parser: DocumentParser):
        self._parser = document_parser
        self.warnings = document_parser.warnings

    def parse(self, root: etree._Element) -> NumberingCatalog:
        catalog = NumberingCatalog()
        for node in elements(root):
            name = local_name(node)
            if name == "numPicBullet":
                bullet = self._parse_picture_bullet(node)
                if bullet is not None:
                    catalog.bullets[bullet.id] = bullet
            elif name == "abstractNum":
                abstract = self._parse_abstract(node)
                catalog.abstracts[abstract.id] = abstract
            elif name == "num":
                instance = self._parse_instance(node)
                if instance is not None:
                    catalog.instances[instance.id] = instance
        logger.debug(f"Parsed {len(catalog.abstracts)} abstract numberings, {len(catalog.instances)} numberings")
        return catalog

    def _parse_picture_bullet(self, node: etree._Element) -> Optional[PictureBullet]:
        bullet_id = int_attr(node, "numPicBulletId")
        shape = element(element(node, "pict"), "shape")
        image = element(shape, "imagedata")
        if bullet_id is None or image is None:
            self.warnings.append("picture bullet without image data")
            return None
        css = {}
        for declaration in (attr(shape, "style") or "").split(";"):
            key, _, value = declaration.partition(":")
            if key.strip() and value.strip():
                css[key.strip()] = value.strip()
        rel_id = attr(image, "id")
        self._parser.register_rel_id(rel_id)
        return PictureBullet(id=bullet_id, rel_id=rel_id, css_style=css)

    def _parse_abstract(self, node: etree._Element) -> AbstractNumbering:
        result = AbstractNumbering(id=attr(node, "abstractNumId") or "")
        for child in elements(node):
            name = local_name(child)
            if name == "lvl":
                level = self.parse_level(child)
                result.levels[level.level] = level
            elif name == "name":
                result.name = attr(child, "val")
            elif name == "multiLevelType":
                result.multi_level_type = attr(child, "val")
            elif name == "numStyleLink":
                result.num_style_link = attr(child, "val")
            elif name == "styleLink":
                result.style_link = attr(child, "val")
        return result

    def parse_level(self, node: etree._Element) -> NumberingLevel:
        result = NumberingLevel(level=int_attr(node, "ilvl", 0) or 0)
        for child in elements(node):
            name = local_name(child)
            if name == "start":
                result.start = int_attr(child, "val", 1)
            elif name == "numFmt":
                result.format = attr(child, "val") or "decimal"
            elif name == "lvlText":
                result.level_text = attr(child, "val") or ""
            elif name == "suff":
                result.suffix = attr(child, "val") or "tab"
            elif name == "pStyle":
                result.paragraph_style = attr(child, "val")
            elif name == "lvlPicBulletId":
                result.picture_bullet_id = int_attr(child, "val")
            elif name == "lvlRestart":
                result.restart = int_attr(child, "val")
            elif name == "isLgl":
                result.is_legal = bool_attr(child, "val", True)
            elif name == "pPr":
                holder = Paragraph()
                self._parser.parse_paragraph_properties(child, holder)
                result.paragraph_css = holder.css_style
                result.paragraph_props = holder.props
            elif name == "rPr":
                result.run_css = self._parser.properties.parse(child)
        return result

    def _parse_instance(self, node: etree._Element) -> Optional[NumberingInstance]:
        num_id = attr(node, "numId")
        abstract_id = element_attr(node, "abstractNumId", "val")
        if num_id is None or abstract_id is None:
            self.warnings.append(f"numbering {num_id!r} without abstract numbering")
            return None
        result = NumberingInstance(id=num_id, abstract_id=abstract_id)
        for override in elements(node, "lvlOverride"):
            level = int_attr(override, "ilvl", 0) or 0
            definition = element(override, "lvl")
            result.overrides[level] = LevelOverride(
                level=level,
                start=int_attr(element(override, "startOverride"), "val"),
                definition=self.parse_level(definition) if definition is not None else None,
            )
        return result


def resolve_style_links(catalog: NumberingCatalog, styles: StyleCatalog) -> List[str]:
    """
    Point abstract numberings that only carry ``w:numStyleLink`` at the levels of the linked style.

    Returns:
        Warnings for links that cannot be followed
    """
    warnings = []
    for abstract in catalog.abstracts.values():
        if abstract.levels or not abstract.num_style_link:
            continue
        style = styles.get(abstract.num_style_link)
        numbering = style.paragraph_props.numbering if style is not None else None
        target = catalog.abstract_for(numbering.id) if numbering is not None else None
        if target is None or target is abstract:
            warnings.append(f"numbering style link {abstract.num_style_link!r} cannot be resolved")
            continue
        abstract.levels = target.levels
    return warnings
