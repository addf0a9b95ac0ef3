"""
Relationship manifests (``_rels/*.rels``).

A relationship id is a lookup key into the manifest of the part that uses
it. Resolution is a fallible lookup: unknown ids give None.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from lxml import etree

from ..utils.xml_utils import attr, elements


class RelationshipTypes:
    """Relationship type URIs of the parts the loader knows."""

    _BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

    OFFICE_DOCUMENT = _BASE + "/officeDocument"
    STRICT_OFFICE_DOCUMENT = "http://purl.oclc.org/ooxml/officeDocument/relationships/officeDocument"
    CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
    EXTENDED_PROPERTIES = _BASE + "/extended-properties"
    STYLES = _BASE + "/styles"
    NUMBERING = _BASE + "/numbering"
    SETTINGS = _BASE + "/settings"
    THEME = _BASE + "/theme"
    FONT_TABLE = _BASE + "/fontTable"
    FONT = _BASE + "/font"
    HEADER = _BASE + "/header"
    FOOTER = _BASE + "/footer"
    FOOTNOTES = _BASE + "/footnotes"
    ENDNOTES = _BASE + "/endnotes"
    COMMENTS = _BASE + "/comments"
    IMAGE = _BASE + "/image"
    HYPERLINK = _BASE + "/hyperlink"
    ALT_CHUNK = _BASE + "/aFChunk"


@dataclass(frozen=True)
class Relationship:
    id: str
    type: str
    target: str
    target_mode: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return (self.target_mode or "").lower() == "external"

    @property
    def type_name(self) -> str:
        """Last path segment of the type URI (``image``, ``header``, ...)."""
        return self.type.rsplit("/", 1)[-1]


def _source_folder(part_name: str) -> str:
    return posixpath.dirname(part_name.lstrip("/"))


def resolve_target(part_name: str, target: str) -> str:
    """
    Resolve a relationship target against the folder of its owning part.

    Absolute targets (leading ``/``) are package-root relative.
    """
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    folder = _source_folder(part_name)
    resolved = posixpath.normpath(posixpath.join(folder, target))
    while resolved.startswith("../"):
        resolved = resolved[3:]
    return resolved


class Relationships:
    """Manifest of one part."""

    def __init__(self, part_name: str = "", relationships: Optional[List[Relationship]] = None):
        self.part_name = part_name
        self._by_id: Dict[str, Relationship] = {}
        for rel in relationships or []:
            self._by_id[rel.id] = rel

    @classmethod
    def from_xml(cls, part_name: str, root: Optional[etree._Element]) -> "Relationships":
        """Build the manifest of part_name from a parsed ``.rels`` document."""
        rels = []
        for node in elements(root, "Relationship"):
            rel_id = attr(node, "Id")
            target = attr(node, "Target")
            if not rel_id or target is None:
                continue
            rels.append(Relationship(
                id=rel_id,
                type=attr(node, "Type") or "",
                target=target,
                target_mode=attr(node, "TargetMode"),
            ))
        return cls(part_name, rels)

    def get(self, rel_id: Optional[str]) -> Optional[Relationship]:
        if rel_id is None:
            return None
        return self._by_id.get(rel_id)

    def __contains__(self, rel_id: object) -> bool:
        return rel_id in self._by_id

    def __iter__(self) -> Iterator[Relationship]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def by_type(self, rel_type: str) -> List[Relationship]:
        """Relationships of a type, matched by full URI or by its last segment."""
        name = rel_type.rsplit("/", 1)[-1]
        return [rel for rel in self._by_id.values() if rel.type == rel_type or rel.type_name == name]

    def first_of_type(self, rel_type: str) -> Optional[Relationship]:
        found = self.by_type(rel_type)
        return found[0] if found else None

    def target_path(self, rel_id: Optional[str]) -> Optional[str]:
        """Package path of an internal target, None for unknown or external ids."""
        rel = self.get(rel_id)
        if rel is None or rel.is_external:
            return None
        return resolve_target(self.part_name, rel.target)
