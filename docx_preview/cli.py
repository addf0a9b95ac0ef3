"""
Command-line interface for docx-preview.

Usage:
    docx-preview input.docx [output.html] [options]
    python -m docx_preview input.docx --ignore-width --no-break-pages
    docx-preview input.docx --render-changes --body-only
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .api import convert_async
from .exceptions import DocxPreviewError
from .options import Options
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docx-preview",
        description="Convert a DOCX document to HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docx-preview document.docx
  docx-preview doc.docx out.html --ignore-width --no-break-pages
  docx-preview doc.docx --render-changes
  docx-preview doc.docx --no-headers --no-footers --body-only
        """,
    )
    parser.add_argument("input", help="Input DOCX file")
    parser.add_argument("output", nargs="?", help="Output HTML file (default: input with .html extension)")

    layout = parser.add_argument_group("layout options")
    layout.add_argument("--no-wrapper", action="store_true", help="Don't wrap content in container div")
    layout.add_argument("--hide-wrapper-print", action="store_true", help="Hide wrapper when printing")
    layout.add_argument("--ignore-width", action="store_true", help="Ignore page width (fluid layout)")
    layout.add_argument("--ignore-height", action="store_true", help="Ignore page height")
    layout.add_argument("--no-break-pages", action="store_true", help="Don't break on page breaks")
    layout.add_argument("--render-page-breaks", action="store_true",
                        help="Respect lastRenderedPageBreak elements")

    content = parser.add_argument_group("content options")
    content.add_argument("--no-headers", action="store_true", help="Don't render headers")
    content.add_argument("--no-footers", action="store_true", help="Don't render footers")
    content.add_argument("--no-footnotes", action="store_true", help="Don't render footnotes")
    content.add_argument("--no-endnotes", action="store_true", help="Don't render endnotes")
    content.add_argument("--no-alt-chunks", action="store_true", help="Don't render embedded HTML parts")
    content.add_argument("--render-changes", action="store_true",
                         help="Show tracked changes (insertions/deletions)")
    content.add_argument("--render-comments", action="store_true", help="Show comments")
    content.add_argument("--live-fields", action="store_true",
                         help="Render PAGE/NUMPAGES fields with computed values")

    style = parser.add_argument_group("style options")
    style.add_argument("--ignore-fonts", action="store_true", help="Don't render embedded fonts")
    style.add_argument("--class-name", default="docx", metavar="NAME",
                       help="CSS class prefix (default: docx)")

    output = parser.add_argument_group("output options")
    output.add_argument("--body-only", action="store_true",
                        help="Output only body content (no <html> wrapper)")
    output.add_argument("--no-base64", action="store_true",
                        help="Write images next to the output instead of inlining them")

    debug = parser.add_argument_group("debug options")
    debug.add_argument("--debug", action="store_true", help="Enable debug logging")
    debug.add_argument("--no-trim-xml", action="store_true",
                       help="Keep XML declarations when parsing parts")
    return parser


def options_from_args(args: argparse.Namespace) -> Options:
    """Build conversion options from parsed arguments."""
    return Options(
        class_name=args.class_name,
        in_wrapper=not args.no_wrapper,
        hide_wrapper_on_print=args.hide_wrapper_print,
        ignore_width=args.ignore_width,
        ignore_height=args.ignore_height,
        ignore_fonts=args.ignore_fonts,
        break_pages=not args.no_break_pages,
        respect_last_rendered_page_break=args.render_page_breaks,
        render_headers=not args.no_headers,
        render_footers=not args.no_footers,
        render_footnotes=not args.no_footnotes,
        render_endnotes=not args.no_endnotes,
        render_changes=args.render_changes,
        render_comments=args.render_comments,
        render_alt_chunks=not args.no_alt_chunks,
        use_data_uris=not args.no_base64,
        trim_xml_declaration=not args.no_trim_xml,
        live_fields=args.live_fields,
        debug=args.debug,
    )


def write_assets(assets: Dict[str, bytes], output_path: Path) -> List[Path]:
    """Write package images beside the output, keeping their package paths."""
    written = []
    root = output_path.parent.resolve()
    for name, data in assets.items():
        target = (root / name).resolve()
        if root not in target.parents:
            logger.warning(f"Skipping asset outside the output folder: {name}")
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        written.append(target)
    return written


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle a conversion."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1
    output_path = Path(args.output) if args.output else input_path.with_suffix(".html")
    options = options_from_args(args)
    logger.debug(f"Options: {options}")

    logger.info(f"Reading: {input_path}")
    try:
        result = asyncio.run(convert_async(input_path, options, body_only=args.body_only,
                                           title=input_path.stem))
    except DocxPreviewError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            logger.exception("Conversion failed")
        return 1

    output_path.write_text(result.html, encoding="utf-8")
    if result.assets:
        written = write_assets(result.assets, output_path)
        logger.info(f"Wrote {len(written)} asset(s)")
    if result.failed_resources:
        logger.warning(f"{result.failed_resources} resource(s) could not be loaded")
    for warning in result.document.warnings:
        logger.debug(warning)
    logger.info(f"Output: {output_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.debug else "WARNING")
    return cmd_convert(args)


if __name__ == "__main__":
    sys.exit(main())
