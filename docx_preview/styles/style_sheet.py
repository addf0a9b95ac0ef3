"""
Stylesheet generation.

Named styles become class rules scoped under the page class. Rule order and
selector specificity carry the cascade:

    document defaults      .docx p / .docx span
    table styles           .docx :where(table.X) p
    paragraph styles       .docx p.X, .docx p.X span
    character styles       .docx p span.Y
    numbering levels       .docx p.docx-num-N-L   (emitted by the numbering renderer)
    direct formatting      inline style attribute
"""

import logging
import re
from typing import Dict, List, Optional

from ..models.parts import Theme
from ..models.styles import StyleCatalog, StyleDefinition
from ..options import DEFAULT_OPTIONS, Options
from .style_resolver import CONDITION_FLAGS, CONDITIONAL_PRECEDENCE, StyleResolver

logger = logging.getLogger(__name__)

_CLASS_SEPARATORS = re.compile(r"[ .]+")


def escape_class_name(name: str) -> str:
    """Turn a style id into a class name fragment."""
    return _CLASS_SEPARATORS.sub("-", name).replace("&", "and").lower()


def css_declarations(values: Dict[str, str]) -> str:
    """
    Serialize CSS values as ``prop: value;`` declarations.

    Keys starting with ``$`` carry element attributes, not CSS, and are skipped.
    """
    return " ".join(f"{key}: {value};" for key, value in values.items()
                    if value is not None and not key.startswith("$"))


def style_to_string(selector: str, values: Dict[str, str], css_text: Optional[str] = None) -> str:
    """One CSS rule, or an empty string when there is nothing to declare."""
    body = css_declarations(values)
    if css_text:
        body = f"{body} {css_text}".strip()
    if not body:
        return ""
    return f"{selector} {{\r\n{body}\r\n}}\r\n"


class StyleSheet:
    """Builds the CSS text of the named styles of a document."""

    def __init__(self, styles: StyleCatalog, resolver: StyleResolver, options: Options = DEFAULT_OPTIONS):
        self.styles = styles
        self.resolver = resolver
        self.options = options

    @property
    def scope(self) -> str:
        return f".{self.options.class_name}"

    def class_for(self, style_id: Optional[str]) -> Optional[str]:
        """Generated class name of a style, None for unknown ids."""
        if not style_id or style_id not in self.styles:
            return None
        return f"{self.options.class_name}_{escape_class_name(style_id)}"

    def render(self) -> str:
        """CSS text for defaults, table, paragraph and character styles, in cascade order."""
        parts: List[str] = [self._render_defaults()]
        for target, render in (("table", self._render_table_style),
                               ("p", self._render_paragraph_style),
                               ("span", self._render_character_style)):
            for style in self.styles:
                if style.target == target:
                    parts.append(render(style))
        return "".join(part for part in parts if part)

    def _render_defaults(self) -> str:
        scope = self.scope
        return (style_to_string(f"{scope} p", self.styles.defaults.get("p", {}))
                + style_to_string(f"{scope} span", self.styles.defaults.get("span", {})))

    def _render_paragraph_style(self, style: StyleDefinition) -> str:
        scope = self.scope
        class_name = self.class_for(style.id)
        selector = f"{scope} p.{class_name}"
        if style.is_default:
            selector = f"{scope} p, {selector}"
        span_selector = f"{scope} p.{class_name} span"
        if style.is_default:
            span_selector = f"{scope} p span, {span_selector}"
        return (style_to_string(selector, self.resolver.resolve_values(style.id, "p"))
                + style_to_string(span_selector, self.resolver.resolve_values(style.id, "span")))

    def _render_character_style(self, style: StyleDefinition) -> str:
        selector = f"{self.scope} p span.{self.class_for(style.id)}"
        return style_to_string(selector, self.resolver.resolve_values(style.id, "span"))

    def _render_table_style(self, style: StyleDefinition) -> str:
        """
        Table level values and the paragraph/run values of a table style.

        Cell values are resolved per cell and written inline.
        """
        scope = self.scope
        class_name = self.class_for(style.id)
        table_selector = f"table.{class_name}"
        rules = [
            style_to_string(f"{scope} {table_selector}", self.resolver.resolve_values(style.id, "table")),
            style_to_string(f"{scope} :where({table_selector}) p", self.resolver.resolve_values(style.id, "p")),
            style_to_string(f"{scope} :where({table_selector}) span", self.resolver.resolve_values(style.id, "span")),
        ]
        conditions = set()
        for item in self.resolver.chain(style.id):
            conditions.update(item.conditions())
        for condition in CONDITIONAL_PRECEDENCE:
            if condition not in conditions:
                continue
            scoped = f"{table_selector} {self._condition_selector(condition)}"
            rules.append(style_to_string(f"{scope} :where({scoped}) p",
                                         self.resolver.resolve_values(style.id, "p", condition)))
            rules.append(style_to_string(f"{scope} :where({scoped}) span",
                                         self.resolver.resolve_values(style.id, "span", condition)))
        return "".join(rules)

    @staticmethod
    def _condition_selector(condition: str) -> str:
        flag = CONDITION_FLAGS[condition]
        if flag is None:
            return "td"
        if flag.endswith("-row"):
            return f"tr.{flag} td"
        return f"td.{flag}"


def render_theme_styles(theme: Optional[Theme], options: Options = DEFAULT_OPTIONS) -> str:
    """CSS variables for the theme colors and major/minor fonts."""
    if theme is None:
        return ""
    variables: Dict[str, str] = {}
    if theme.major_font:
        variables["--docx-majorHAnsi-font"] = theme.major_font
    if theme.minor_font:
        variables["--docx-minorHAnsi-font"] = theme.minor_font
    for name, value in theme.colors.items():
        variables[f"--docx-{name}-color"] = f"#{value}"
    return style_to_string(f".{options.class_name}", variables)
