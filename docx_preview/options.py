"""
Conversion options.

A single immutable options value is threaded through the parser, the loader
and every renderer. There is no module level default object to mutate.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Options:
    """
    Options controlling parsing and rendering.

    Attributes:
        class_name: CSS class prefix used for every generated class.
        in_wrapper: Wrap the rendered pages in a ``{class_name}-wrapper`` div.
        hide_wrapper_on_print: Put the wrapper styling inside ``@media not print``.
        ignore_width: Do not set the page width on page sections.
        ignore_height: Do not set the page min-height on page sections.
        ignore_fonts: Skip ``@font-face`` rules for embedded fonts.
        break_pages: Split pages on explicit page breaks and insert break markers.
        respect_last_rendered_page_break: Also split on ``lastRenderedPageBreak`` hints.
        render_headers: Render page headers.
        render_footers: Render page footers.
        render_footnotes: Render footnotes after each page.
        render_endnotes: Render endnotes after the last page.
        render_changes: Show tracked insertions and deletions.
        render_comments: Render comment markers and the comment list.
        render_alt_chunks: Render embedded HTML parts as iframes.
        use_data_uris: Inline images as data URIs instead of package paths.
        trim_xml_declaration: Strip the XML declaration before parsing parts.
        live_fields: Render PAGE/NUMPAGES style fields as live placeholders.
        debug: Report absorbed failures through the ``docx_preview`` logger.
    """

    class_name: str = "docx"
    in_wrapper: bool = True
    hide_wrapper_on_print: bool = False
    ignore_width: bool = False
    ignore_height: bool = False
    ignore_fonts: bool = False
    break_pages: bool = True
    respect_last_rendered_page_break: bool = False
    render_headers: bool = True
    render_footers: bool = True
    render_footnotes: bool = True
    render_endnotes: bool = True
    render_changes: bool = False
    render_comments: bool = False
    render_alt_chunks: bool = True
    use_data_uris: bool = True
    trim_xml_declaration: bool = True
    live_fields: bool = False
    debug: bool = False

    def replace(self, **changes) -> "Options":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)


DEFAULT_OPTIONS = Options()
