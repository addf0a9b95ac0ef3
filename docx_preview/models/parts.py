"""Models of the auxiliary parts: settings, theme and core properties."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class NoteProperties:
    """``w:footnotePr`` / ``w:endnotePr``."""

    number_format: Optional[str] = None
    start: Optional[int] = None
    position: Optional[str] = None


@dataclass(eq=False)
class Settings:
    default_tab_stop: Optional[str] = None
    even_and_odd_headers: bool = False
    auto_hyphenation: bool = False
    footnote_props: NoteProperties = field(default_factory=NoteProperties)
    endnote_props: NoteProperties = field(default_factory=NoteProperties)


@dataclass(eq=False)
class Theme:
    """
    Theme color and font scheme.

    Attributes:
        colors: Scheme color name (``accent1``, ``dk1``, ...) -> hex value without ``#``
        major_font: Latin typeface of the major (headings) font
        minor_font: Latin typeface of the minor (body) font
    """

    name: Optional[str] = None
    colors: Dict[str, str] = field(default_factory=dict)
    major_font: Optional[str] = None
    minor_font: Optional[str] = None


@dataclass(eq=False)
class CoreProperties:
    title: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    keywords: Optional[str] = None
    description: Optional[str] = None
    last_modified_by: Optional[str] = None
    revision: Optional[int] = None
    created: Optional[str] = None
    modified: Optional[str] = None
