"""Section (page geometry) model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PageSize:
    width: Optional[str] = None
    height: Optional[str] = None
    orientation: Optional[str] = None


@dataclass(frozen=True)
class PageMargins:
    left: Optional[str] = None
    right: Optional[str] = None
    top: Optional[str] = None
    bottom: Optional[str] = None
    header: Optional[str] = None
    footer: Optional[str] = None
    gutter: Optional[str] = None


@dataclass(frozen=True)
class Column:
    width: Optional[str] = None
    space: Optional[str] = None


@dataclass(frozen=True)
class Columns:
    number_of_columns: Optional[int] = None
    space: Optional[str] = None
    separator: bool = False
    equal_width: bool = True
    columns: List[Column] = field(default_factory=list)


@dataclass(frozen=True)
class HeaderFooterReference:
    """Reference from a section to a header/footer part (``default``, ``first``, ``even``)."""

    id: str
    type: str = "default"


@dataclass(frozen=True)
class PageNumber:
    format: Optional[str] = None
    start: Optional[int] = None
    chapter_separator: Optional[str] = None
    chapter_style: Optional[str] = None


@dataclass(eq=False)
class SectionProperties:
    """
    Page geometry of one section.

    Attributes:
        type: Section break kind (``nextPage``, ``continuous``, ``evenPage``, ``oddPage``, ``nextColumn``)
        page_size: Page width/height as CSS lengths
        page_margins: Page margins as CSS lengths
        columns: Text column layout
        header_refs: Header references by kind
        footer_refs: Footer references by kind
        title_page: First page uses the ``first`` header/footer
        page_borders: CSS border properties for the page box
        page_number: Page numbering settings
    """

    type: Optional[str] = None
    page_size: Optional[PageSize] = None
    page_margins: Optional[PageMargins] = None
    columns: Optional[Columns] = None
    header_refs: List[HeaderFooterReference] = field(default_factory=list)
    footer_refs: List[HeaderFooterReference] = field(default_factory=list)
    title_page: bool = False
    page_borders: Dict[str, str] = field(default_factory=dict)
    page_number: Optional[PageNumber] = None

    def geometry_key(self) -> tuple:
        """Hashable description of the page box, used to share generated page classes."""
        return (self.page_size, self.page_margins, tuple(sorted(self.page_borders.items())))
