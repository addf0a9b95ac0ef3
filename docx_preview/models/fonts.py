"""Font table model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

# Reference kind -> (font-weight, font-style)
EMBED_KIND_STYLES = {
    "embedRegular": ("normal", "normal"),
    "embedBold": ("bold", "normal"),
    "embedItalic": ("normal", "italic"),
    "embedBoldItalic": ("bold", "italic"),
}


@dataclass(frozen=True)
class EmbeddedFontReference:
    """
    Reference from the font table to an embedded (usually obfuscated) font part.

    Attributes:
        kind: ``embedRegular``, ``embedBold``, ``embedItalic`` or ``embedBoldItalic``
        rel_id: Relationship id in the font table part
        key: Obfuscation GUID (``w:fontKey``)
        subsetted: Font contains only the used glyphs
    """

    kind: str
    rel_id: str
    key: Optional[str] = None
    subsetted: bool = False

    @property
    def weight(self) -> str:
        return EMBED_KIND_STYLES.get(self.kind, ("normal", "normal"))[0]

    @property
    def style(self) -> str:
        return EMBED_KIND_STYLES.get(self.kind, ("normal", "normal"))[1]


@dataclass(eq=False)
class FontDeclaration:
    name: str
    alt_name: Optional[str] = None
    family: Optional[str] = None
    pitch: Optional[str] = None
    charset: Optional[str] = None
    embed_refs: List[EmbeddedFontReference] = field(default_factory=list)


class FontCatalog:
    """Font family name -> declaration."""

    def __init__(self, fonts: Optional[List[FontDeclaration]] = None):
        self._fonts: Dict[str, FontDeclaration] = {}
        for font in fonts or []:
            self._fonts[font.name] = font

    def get(self, name: str) -> Optional[FontDeclaration]:
        return self._fonts.get(name)

    def __iter__(self) -> Iterator[FontDeclaration]:
        return iter(self._fonts.values())

    def __len__(self) -> int:
        return len(self._fonts)

    def embedded(self) -> Iterator[FontDeclaration]:
        """Declarations carrying at least one embedded font reference."""
        return (font for font in self._fonts.values() if font.embed_refs)
