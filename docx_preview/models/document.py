"""
Loaded package model.

``WordDocument`` aggregates everything one conversion needs: the parsed main
document, the catalogs, the auxiliary parts and the relationship manifests.
It is built once by the loader and only read afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from ..parser.relationships import Relationship, Relationships
from .elements import Comment, DocumentRoot, HeaderFooter, Note
from .fonts import FontCatalog
from .numbering import NumberingCatalog
from .parts import CoreProperties, Settings, Theme
from .styles import StyleCatalog

if TYPE_CHECKING:
    from ..parser.package_reader import OpenXmlPackage

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class WordDocument:
    """
    Parsed package.

    Attributes:
        main_part: Path of the main document part
        document: Root of the main document element tree
        styles: Style catalog (empty when the styles part is absent)
        numbering: Numbering catalog
        fonts: Font table
        settings: Document settings
        theme: Theme, None when absent
        core_properties: Title, creator and the other core properties
        headers: Header trees keyed by part path
        footers: Footer trees keyed by part path
        footnotes: Footnotes keyed by id
        endnotes: Endnotes keyed by id
        comments: Comments keyed by id
        relationships: Relationship manifests keyed by owning part path
        parts: Paths of the loaded auxiliary parts keyed by kind (``numbering``, ``fontTable``, ...)
        warnings: Absorbed problems, in the order they were met
        package: Container the document was read from
    """

    main_part: str
    document: DocumentRoot
    styles: StyleCatalog = field(default_factory=StyleCatalog)
    numbering: NumberingCatalog = field(default_factory=NumberingCatalog)
    fonts: FontCatalog = field(default_factory=FontCatalog)
    settings: Settings = field(default_factory=Settings)
    theme: Optional[Theme] = None
    core_properties: CoreProperties = field(default_factory=CoreProperties)
    headers: Dict[str, HeaderFooter] = field(default_factory=dict)
    footers: Dict[str, HeaderFooter] = field(default_factory=dict)
    footnotes: Dict[str, Note] = field(default_factory=dict)
    endnotes: Dict[str, Note] = field(default_factory=dict)
    comments: Dict[str, Comment] = field(default_factory=dict)
    relationships: Dict[str, Relationships] = field(default_factory=dict)
    parts: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    package: Optional["OpenXmlPackage"] = field(default=None, repr=False)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)
        logger.debug(message)

    def rels_for(self, part: Optional[str] = None) -> Relationships:
        """Manifest of a part, the main part by default. Missing manifests are empty."""
        name = part or self.main_part
        return self.relationships.get(name) or Relationships(name)

    def get_relationship(self, rel_id: Optional[str], part: Optional[str] = None) -> Optional[Relationship]:
        return self.rels_for(part).get(rel_id)

    def find_part_by_rel_id(self, rel_id: Optional[str], part: Optional[str] = None) -> Optional[str]:
        """Package path targeted by rel_id in part, None if unknown or external."""
        return self.rels_for(part).target_path(rel_id)

    @property
    def title(self) -> Optional[str]:
        return self.core_properties.title
