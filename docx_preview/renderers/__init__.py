"""Rendering package turning the parsed document into HTML and CSS."""

from .dom import to_html
from .field_renderer import FieldInstruction, parse_instruction
from .html_renderer import HtmlRenderer, RenderResult
from .page_renderer import PageRenderer, SectionChunk

__all__ = [
    "HtmlRenderer",
    "RenderResult",
    "PageRenderer",
    "SectionChunk",
    "FieldInstruction",
    "parse_instruction",
    "to_html",
]
