"""Style cascade resolution and stylesheet generation."""

from .style_resolver import CONDITIONAL_PRECEDENCE, StyleResolver
from .style_sheet import StyleSheet, css_declarations, escape_class_name, style_to_string

__all__ = [
    "CONDITIONAL_PRECEDENCE",
    "StyleResolver",
    "StyleSheet",
    "css_declarations",
    "escape_class_name",
    "style_to_string",
]
