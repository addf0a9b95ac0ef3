"""
Embedded font renderer.

Emits one ``@font-face`` rule per embedded font reference that loads and
deobfuscates to a valid font. Fonts that fail are left out.
"""

import logging
from typing import TYPE_CHECKING, Optional

from lxml import etree

from ..media.resources import PendingResource
from ..models.fonts import EmbeddedFontReference, FontDeclaration
from ..parser.properties_parser import enclose_font_family
from ..styles.style_sheet import style_to_string
from .dom import create_style_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)


def font_face_rule(font: FontDeclaration, ref: EmbeddedFontReference, url: str) -> str:
    values = {
        "font-family": enclose_font_family(font.name),
        "src": f"url({url})",
    }
    if ref.weight != "normal":
        values["font-weight"] = ref.weight
    if ref.style != "normal":
        values["font-style"] = ref.style
    return style_to_string("@font-face", values)


class FontRenderer:
    """Requests the embedded fonts of the font table."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options

    def render(self) -> Optional[etree._Element]:
        """
        Style element receiving the ``@font-face`` rules.

        Rules are appended once their fonts are loaded; None when fonts are
        ignored or none are embedded.
        """
        document = self.renderer.document
        if self.options.ignore_fonts:
            return None
        fonts = list(document.fonts.embedded())
        if not fonts:
            return None

        style = create_style_element("")
        part = document.parts.get("fontTable")
        for font in fonts:
            for ref in font.embed_refs:
                self.renderer.pending.append(PendingResource(
                    load=self.renderer.resources.font(ref.rel_id, ref.key, part),
                    apply=self._appender(style, font, ref),
                    label=f"font {font.name} ({ref.kind})",
                ))
        return style

    @staticmethod
    def _appender(style: etree._Element, font: FontDeclaration, ref: EmbeddedFontReference):
        def apply(url: str) -> None:
            style.text = (style.text or "") + font_face_rule(font, ref, url)
        return apply
