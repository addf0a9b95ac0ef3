"""Numbering catalog model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .elements import ParagraphProperties


@dataclass(eq=False)
class NumberingLevel:
    """
    Format of one list level.

    Attributes:
        level: Level index (0 based)
        start: First counter value
        format: Numeral style (``decimal``, ``lowerRoman``, ``bullet``, ...)
        level_text: Pattern such as ``%1.%2.``
        suffix: ``tab``, ``space`` or ``nothing``
        paragraph_css: Indentation and spacing applied to the numbered paragraph
        run_css: Formatting of the number itself
        paragraph_props: Non-CSS paragraph properties of the level
        paragraph_style: Paragraph style linked to the level
        picture_bullet_id: Picture bullet used instead of text
        restart: Level after which the counter restarts
        is_legal: Render all levels as decimal
    """

    level: int
    start: int = 1
    format: str = "decimal"
    level_text: str = ""
    suffix: str = "tab"
    paragraph_css: Dict[str, str] = field(default_factory=dict)
    run_css: Dict[str, str] = field(default_factory=dict)
    paragraph_props: ParagraphProperties = field(default_factory=ParagraphProperties)
    paragraph_style: Optional[str] = None
    picture_bullet_id: Optional[int] = None
    restart: Optional[int] = None
    is_legal: bool = False


@dataclass(eq=False)
class AbstractNumbering:
    id: str
    name: Optional[str] = None
    multi_level_type: Optional[str] = None
    num_style_link: Optional[str] = None
    style_link: Optional[str] = None
    levels: Dict[int, NumberingLevel] = field(default_factory=dict)


@dataclass(eq=False)
class LevelOverride:
    level: int
    start: Optional[int] = None
    definition: Optional[NumberingLevel] = None


@dataclass(eq=False)
class NumberingInstance:
    """A ``w:num`` entry pointing at an abstract numbering."""

    id: str
    abstract_id: str
    overrides: Dict[int, LevelOverride] = field(default_factory=dict)


@dataclass(eq=False)
class PictureBullet:
    id: int
    rel_id: Optional[str] = None
    css_style: Dict[str, str] = field(default_factory=dict)


class NumberingCatalog:
    """Abstract numberings, concrete numberings and picture bullets of a document."""

    def __init__(self):
        self.abstracts: Dict[str, AbstractNumbering] = {}
        self.instances: Dict[str, NumberingInstance] = {}
        self.bullets: Dict[int, PictureBullet] = {}

    def __len__(self) -> int:
        return len(self.instances)

    def abstract_for(self, num_id: Optional[str]) -> Optional[AbstractNumbering]:
        instance = self.instances.get(num_id) if num_id is not None else None
        if instance is None:
            return None
        return self.abstracts.get(instance.abstract_id)

    def levels(self, num_id: str) -> List[NumberingLevel]:
        """Effective levels of a concrete numbering, overrides applied, in level order."""
        instance = self.instances.get(num_id)
        abstract = self.abstract_for(num_id)
        if instance is None or abstract is None:
            return []
        result = []
        for index in sorted(set(abstract.levels) | set(instance.overrides)):
            level = self.get_level(num_id, index)
            if level is not None:
                result.append(level)
        return result

    def get_level(self, num_id: Optional[str], level: int) -> Optional[NumberingLevel]:
        """
        Effective format of one level.

        Out of range levels and unknown ids resolve to None.
        """
        instance = self.instances.get(num_id) if num_id is not None else None
        abstract = self.abstract_for(num_id)
        if instance is None or abstract is None:
            return None
        override = instance.overrides.get(level)
        if override is not None and override.definition is not None:
            return override.definition
        return abstract.levels.get(level)

    def start_value(self, num_id: str, level: int) -> int:
        """First counter value of a level, ``startOverride`` included."""
        instance = self.instances.get(num_id)
        if instance is not None:
            override = instance.overrides.get(level)
            if override is not None and override.start is not None:
                return override.start
        definition = self.get_level(num_id, level)
        return definition.start if definition is not None else 1
