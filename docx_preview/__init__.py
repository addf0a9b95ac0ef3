"""
docx-preview - DOCX to HTML/CSS conversion.

The package parses a WordprocessingML package into a typed element tree and
renders it to semantic HTML with a generated stylesheet:

- Parser: package container, relationships, document and catalog parsers
- Models: element tree, style, numbering and font catalogs
- Styles: style cascade resolution and stylesheet generation
- Renderers: pages, tables, fields, notes, revisions, comments, math, VML
- Media: images, embedded fonts and embedded HTML parts

Main entry points are ``render_async`` / ``render_document`` (render into
lxml containers) and ``render_to_string``.
"""

from .api import (
    HtmlOutput,
    convert_async,
    parse_async,
    parse_document,
    render_async,
    render_document,
    render_to_string,
)
from .exceptions import (
    DocxPreviewError,
    FontError,
    PackageError,
    ParsingError,
    RenderingError,
    ResourceError,
    StyleError,
)
from .models.document import WordDocument
from .options import DEFAULT_OPTIONS, Options

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_OPTIONS",
    "DocxPreviewError",
    "FontError",
    "HtmlOutput",
    "Options",
    "PackageError",
    "ParsingError",
    "RenderingError",
    "ResourceError",
    "StyleError",
    "WordDocument",
    "convert_async",
    "parse_async",
    "parse_document",
    "render_async",
    "render_document",
    "render_to_string",
]
