"""
Numbering renderer.

List numbering is emitted as CSS: every level of every concrete numbering
gets a paragraph class ``{prefix}-num-{id}-{level}`` whose ``::before``
content is built from the level text with CSS counters. Counters are reset
on the root selector and reset again for deeper levels whenever a
paragraph of a shallower level appears.
"""

import logging
import re
from typing import TYPE_CHECKING, Dict, List

from ..media.resources import PendingResource
from ..models.numbering import NumberingLevel
from ..styles.style_sheet import style_to_string
from .dom import create_style_element

if TYPE_CHECKING:
    from lxml import etree

    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

# w:numFmt -> CSS list-style-type
NUM_FORMATS: Dict[str, str] = {
    "none": "none",
    "bullet": "disc",
    "decimal": "decimal",
    "lowerLetter": "lower-alpha",
    "upperLetter": "upper-alpha",
    "lowerRoman": "lower-roman",
    "upperRoman": "upper-roman",
    "decimalZero": "decimal-leading-zero",
    "aiueo": "katakana",
    "aiueoFullWidth": "katakana",
    "chineseCounting": "simp-chinese-informal",
    "chineseCountingThousand": "simp-chinese-informal",
    "chineseLegalSimplified": "simp-chinese-formal",
    "chosung": "hangul-consonant",
    "ideographDigital": "cjk-ideographic",
    "ideographTraditional": "cjk-heavenly-stem",
    "ideographLegalTraditional": "trad-chinese-formal",
    "ideographZodiac": "cjk-earthly-branch",
    "iroha": "katakana-iroha",
    "irohaFullWidth": "katakana-iroha",
    "japaneseCounting": "japanese-informal",
    "japaneseDigitalTenThousand": "cjk-decimal",
    "japaneseLegal": "japanese-formal",
    "thaiNumbers": "thai",
    "koreanCounting": "korean-hangul-formal",
    "koreanDigital": "korean-hangul-formal",
    "koreanDigital2": "korean-hanja-informal",
    "hebrew1": "hebrew",
    "hebrew2": "hebrew",
    "hindiNumbers": "devanagari",
    "ganada": "hangul",
    "taiwaneseCounting": "cjk-ideographic",
    "taiwaneseCountingThousand": "cjk-ideographic",
    "taiwaneseDigital": "cjk-decimal",
}

SUFFIXES = {"tab": "\\9", "space": "\\a0"}

_PLACEHOLDER = re.compile(r"(%\d)")


def num_format_to_css(number_format: str) -> str:
    return NUM_FORMATS.get(number_format, number_format)


def _css_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class NumberingRenderer:
    """Builds the numbering stylesheet of a document."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options
        self.numbering = renderer.document.numbering

    def class_for(self, num_id: str, level: int) -> str:
        return f"{self.options.class_name}-num-{num_id}-{level}"

    counter_for = class_for

    def level_text_to_content(self, level: NumberingLevel, num_id: str) -> str:
        """
        CSS ``content`` value of a level's marker.

        ``%N`` placeholders become ``counter()`` calls of level N-1 in the
        level's numeral style (decimal for every level of a legal list).
        """
        parts: List[str] = []
        literal = ""
        for token in _PLACEHOLDER.split(level.level_text or ""):
            if not _PLACEHOLDER.fullmatch(token):
                literal += token
                continue
            if literal:
                parts.append(f'"{_css_string(literal)}"')
                literal = ""
            referenced = int(token[1:]) - 1
            referenced_level = self.numbering.get_level(num_id, referenced) or level
            style = "decimal" if level.is_legal else num_format_to_css(referenced_level.format)
            parts.append(f"counter({self.counter_for(num_id, referenced)}, {style})")
        tail = _css_string(literal) + SUFFIXES.get(level.suffix, "")
        if tail:
            parts.append(f'"{tail}"')
        return " ".join(parts) or '""'

    def render(self, root_selector: str) -> "etree._Element":
        """
        Numbering rules as a ``<style>`` element.

        Picture bullets are requested as pending resources; their URL
        variables are appended to the same element once loaded.
        """
        scope = f".{self.options.class_name}"
        rules: List[str] = []
        resets: List[str] = []
        style = create_style_element("")

        for num_id in self.numbering.instances:
            levels = self.numbering.levels(num_id)
            for level in levels:
                selector = f"{scope} p.{self.class_for(num_id, level.level)}"
                list_style = "none"
                bullet = (self.numbering.bullets.get(level.picture_bullet_id)
                          if level.picture_bullet_id is not None else None)
                if bullet is not None:
                    variable = f"--{self.options.class_name}-{bullet.rel_id or bullet.id}".lower()
                    rules.append(style_to_string(f"{selector}:before", {
                        "content": "' '",
                        "display": "inline-block",
                        "background": f"var({variable})",
                        **bullet.css_style,
                    }))
                    self._request_bullet(bullet.rel_id, variable, root_selector, style)
                elif level.level_text or level.format == "none":
                    start = self.numbering.start_value(num_id, level.level)
                    counter = self.counter_for(num_id, level.level)
                    resets.append(f"{counter} {start - 1}")
                    rules.append(style_to_string(f"{selector}:before", {
                        "content": self.level_text_to_content(level, num_id),
                        "counter-increment": counter,
                        **level.run_css,
                    }))
                else:
                    list_style = num_format_to_css(level.format)
                rules.append(style_to_string(selector, {
                    "display": "list-item",
                    "list-style-position": "inside",
                    "list-style-type": list_style,
                    **level.paragraph_css,
                }))
            rules.extend(self._deeper_level_resets(num_id, levels, scope))

        if resets:
            rules.append(style_to_string(root_selector, {"counter-reset": " ".join(resets)}))
        style.text = "".join(rules) or None
        return style

    def _deeper_level_resets(self, num_id: str, levels: List[NumberingLevel], scope: str) -> List[str]:
        """A paragraph of one level restarts the counters of every deeper level."""
        rules = []
        for level in levels:
            deeper = [f"{self.counter_for(num_id, item.level)} {self.numbering.start_value(num_id, item.level) - 1}"
                      for item in levels
                      if item.level > level.level and item.restart != 0
                      and (item.restart is None or item.restart > level.level)]
            if deeper:
                rules.append(style_to_string(f"{scope} p.{self.class_for(num_id, level.level)}",
                                             {"counter-set": " ".join(deeper)}))
        return rules

    def _request_bullet(self, rel_id: str, variable: str, root_selector: str,
                        style: "etree._Element") -> None:
        renderer = self.renderer
        part = renderer.document.parts.get("numbering")

        def apply(url: str) -> None:
            style.text = (style.text or "") + style_to_string(root_selector, {variable: f"url({url})"})

        renderer.pending.append(PendingResource(load=renderer.resources.image(rel_id, part), apply=apply,
                                                label=f"picture bullet {rel_id}"))
