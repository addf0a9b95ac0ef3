"""
High-level API for docx-preview.

Example:
    >>> from lxml import etree
    >>> from docx_preview import render_document
    >>> body = etree.Element("div")
    >>> document = render_document("report.docx", body)
    >>> html = render_to_string("report.docx", title="Report")

Parsing is synchronous; rendering awaits the embedded resources (images,
fonts, embedded HTML) together. The ``*_document`` / ``render_to_string``
functions are synchronous wrappers around the async ones.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from lxml import etree

from .models.document import WordDocument
from .options import DEFAULT_OPTIONS, Options
from .parser.document_loader import load_document
from .parser.package_reader import OpenXmlPackage, PackageSource
from .renderers.dom import append_element, clear, extend, to_html
from .renderers.html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

PAGE_STYLE = "body { margin: 0; padding: 20px; background: #f0f0f0; }"


@dataclass(eq=False)
class HtmlOutput:
    """
    Serialized conversion result.

    Attributes:
        html: HTML document, or the style and body fragments when ``body_only``
        document: Parsed document
        assets: Image bytes keyed by package path (empty with data URIs)
        failed_resources: Number of resources left out
    """

    html: str
    document: WordDocument
    assets: Dict[str, bytes] = field(default_factory=dict)
    failed_resources: int = 0


async def parse_async(data: PackageSource, options: Optional[Options] = None) -> WordDocument:
    """
    Parse a package without rendering it.

    Args:
        data: Package bytes, path or binary stream
        options: Conversion options

    Returns:
        Parsed document

    Raises:
        PackageError: If the data is not a readable package
        ParsingError: If the main document part is missing or malformed
    """
    options = options or DEFAULT_OPTIONS
    package = OpenXmlPackage.load(data, options)
    try:
        document = load_document(package, options)
    except Exception:
        package.close()
        raise
    logger.debug(f"Parsed {document.main_part} with {len(document.warnings)} warning(s)")
    return document


def parse_document(data: PackageSource, options: Optional[Options] = None) -> WordDocument:
    return asyncio.run(parse_async(data, options))


async def render_async(data: PackageSource, body_container: etree._Element,
                       style_container: Optional[etree._Element] = None,
                       options: Optional[Options] = None) -> WordDocument:
    """
    Parse and render a package into caller-owned containers.

    The containers are cleared and filled only once the whole render,
    resources included, has succeeded.

    Args:
        data: Package bytes, path or binary stream
        body_container: Receives the rendered pages
        style_container: Receives the ``<style>`` elements; the body
            container when None
        options: Conversion options

    Returns:
        Parsed document
    """
    options = options or DEFAULT_OPTIONS
    document = await parse_async(data, options)
    try:
        result = await HtmlRenderer(document, options).render_async()
    finally:
        if document.package is not None:
            document.package.close()

    style_target = style_container if style_container is not None else body_container
    clear(body_container)
    if style_container is not None:
        clear(style_container)
    extend(style_target, result.styles)
    extend(body_container, result.body)
    return document


def render_document(data: PackageSource, body_container: etree._Element,
                    style_container: Optional[etree._Element] = None,
                    options: Optional[Options] = None) -> WordDocument:
    """Synchronous ``render_async``."""
    return asyncio.run(render_async(data, body_container, style_container, options))


async def convert_async(data: PackageSource, options: Optional[Options] = None,
                        body_only: bool = False, title: Optional[str] = None) -> HtmlOutput:
    """
    Render a package to an HTML string.

    Args:
        data: Package bytes, path or binary stream
        options: Conversion options
        body_only: Return only the style and body fragments
        title: Document title; the core properties title by default

    Returns:
        Serialized output with the parsed document and collected assets
    """
    options = options or DEFAULT_OPTIONS
    document = await parse_async(data, options)
    try:
        result = await HtmlRenderer(document, options).render_async()
    finally:
        if document.package is not None:
            document.package.close()

    if body_only:
        html = "\n".join(to_html(node) for node in result.styles + result.body)
    else:
        root = etree.Element("html", lang="en")
        head = append_element(root, "head")
        append_element(head, "meta", attrs={"charset": "UTF-8"})
        append_element(head, "meta", attrs={"name": "viewport",
                                            "content": "width=device-width, initial-scale=1.0"})
        append_element(head, "title", text=title or document.title or "Document")
        append_element(head, "style", text=PAGE_STYLE)
        extend(head, result.styles)
        body = append_element(root, "body")
        extend(body, result.body)
        html = "<!DOCTYPE html>\n" + to_html(root)

    return HtmlOutput(html=html, document=document, assets=result.assets,
                      failed_resources=result.failed_resources)


def render_to_string(data: PackageSource, options: Optional[Options] = None,
                     body_only: bool = False, title: Optional[str] = None) -> str:
    """
    Render a package to a complete HTML document string.

    Args:
        data: Package bytes, path or binary stream
        options: Conversion options
        body_only: Return only the style and body fragments
        title: Document title

    Returns:
        HTML text
    """
    return asyncio.run(convert_async(data, options, body_only, title)).html
