"""
Style catalog model.

Style definitions form single-inheritance chains through ``based_on``. The
catalog flattens a chain with an iterative walk and refuses cycles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..exceptions import StyleError
from .elements import ParagraphProperties

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class StyleValues:
    """
    CSS values a style applies to one target.

    Attributes:
        target: Element the values apply to (``p``, ``span``, ``table``, ``tr``, ``td``)
        values: CSS property assignments
        condition: Table conditional format type (``firstRow``, ``band1Horz``, ...)
    """

    target: str
    values: Dict[str, str] = field(default_factory=dict)
    condition: Optional[str] = None


@dataclass(eq=False)
class StyleDefinition:
    """One ``w:style`` entry."""

    id: str
    target: str
    name: Optional[str] = None
    based_on: Optional[str] = None
    linked: Optional[str] = None
    next: Optional[str] = None
    is_default: bool = False
    custom: bool = False
    paragraph_props: ParagraphProperties = field(default_factory=ParagraphProperties)
    styles: List[StyleValues] = field(default_factory=list)
    row_band_size: Optional[int] = None
    col_band_size: Optional[int] = None

    def values_for(self, target: str, condition: Optional[str] = None) -> Dict[str, str]:
        """Merged values of every entry matching target and condition."""
        result: Dict[str, str] = {}
        for entry in self.styles:
            if entry.target == target and entry.condition == condition:
                result.update(entry.values)
        return result

    def conditions(self) -> List[str]:
        """Table conditional format types present on this style, in declaration order."""
        seen: List[str] = []
        for entry in self.styles:
            if entry.condition and entry.condition not in seen:
                seen.append(entry.condition)
        return seen


class StyleCatalog:
    """
    Request scoped mapping of style id to definition.

    ``defaults`` holds the ``docDefaults`` values per target (``p``, ``span``).
    """

    def __init__(self, styles: Optional[List[StyleDefinition]] = None,
                 defaults: Optional[Dict[str, Dict[str, str]]] = None,
                 default_paragraph_props: Optional[ParagraphProperties] = None):
        self._styles: Dict[str, StyleDefinition] = {}
        self.defaults: Dict[str, Dict[str, str]] = defaults or {}
        self.default_paragraph_props = default_paragraph_props or ParagraphProperties()
        for style in styles or []:
            self.add(style)

    def add(self, style: StyleDefinition) -> None:
        if style.id in self._styles:
            logger.debug(f"Duplicate style id {style.id!r}, keeping the last definition")
        self._styles[style.id] = style

    def get(self, style_id: Optional[str]) -> Optional[StyleDefinition]:
        if style_id is None:
            return None
        return self._styles.get(style_id)

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._styles

    def __iter__(self) -> Iterator[StyleDefinition]:
        return iter(self._styles.values())

    def __len__(self) -> int:
        return len(self._styles)

    def default_style(self, target: str) -> Optional[StyleDefinition]:
        """The style flagged as default for the given target kind."""
        for style in self._styles.values():
            if style.is_default and style.target == target:
                return style
        return None

    def chain(self, style_id: Optional[str]) -> List[StyleDefinition]:
        """
        Inheritance chain of a style, most distant ancestor first.

        A ``based_on`` pointing at an unknown id ends the chain.

        Args:
            style_id: Style to start from

        Returns:
            List of definitions, empty if the style is unknown

        Raises:
            StyleError: If the chain contains a cycle
        """
        result: List[StyleDefinition] = []
        visited: List[str] = []
        current = self.get(style_id)
        while current is not None:
            if current.id in visited:
                cycle = visited[visited.index(current.id):] + [current.id]
                raise StyleError("Style inheritance cycle", " -> ".join(cycle))
            visited.append(current.id)
            result.append(current)
            current = self.get(current.based_on)
        result.reverse()
        return result

    def validate(self) -> List[str]:
        """
        Check that every chain terminates, cutting cycles where found.

        Returns:
            One message per cut link
        """
        messages: List[str] = []
        for style in list(self._styles.values()):
            while True:
                try:
                    self.chain(style.id)
                    break
                except StyleError as e:
                    offender = self._cycle_link(style.id)
                    offender.based_on = None
                    messages.append(f"{e}; removed basedOn of {offender.id!r}")
        return messages

    def _cycle_link(self, style_id: str) -> StyleDefinition:
        """The style whose ``based_on`` closes the cycle reached from style_id."""
        visited: List[str] = []
        current = self._styles[style_id]
        while True:
            visited.append(current.id)
            parent = self._styles[current.based_on]
            if parent.id in visited:
                return current
            current = parent
