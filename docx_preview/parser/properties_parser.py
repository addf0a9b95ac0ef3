"""
Formatting property translation.

Turns the children of ``w:pPr``, ``w:rPr``, ``w:tblPr``, ``w:trPr`` and
``w:tcPr`` into CSS property assignments. Lengths are converted here, at
parse time; cascade resolution happens later in the renderer.
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from lxml import etree

from ..utils.units import LengthUsages, convert_boolean, convert_length, convert_percentage
from ..utils.xml_utils import attr, bool_attr, elements, int_attr, length_attr, local_name

logger = logging.getLogger(__name__)

CssValues = Dict[str, str]

# Values used when a color attribute says "auto"
AUTO_COLOR = "black"
AUTO_SHADING = "inherit"
AUTO_BORDER_COLOR = "black"
AUTO_HIGHLIGHT = "transparent"

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}$")
_NEEDS_QUOTES = re.compile(r"^[^\"'].*\s.*[^\"']$")

# Property elements consumed by the element parsers or deliberately without CSS
IGNORED_PROPERTIES = frozenset({
    "bCs", "iCs", "szCs", "kern", "w", "tabs", "outlineLvl", "contextualSpacing",
    "tblStyleColBandSize", "tblStyleRowBandSize", "webHidden", "pageBreakBefore",
    "suppressLineNumbers", "keepLines", "keepNext", "widowControl", "noProof",
    "snapToGrid", "adjustRightInd", "autoSpaceDE", "autoSpaceDN", "overflowPunct",
    "topLinePunct", "kinsoku", "wordWrap", "mirrorIndents", "suppressOverlap",
    "cs", "specVanish", "oMath", "eastAsianLayout", "fitText", "effect", "emboss",
    "imprint", "outline", "shadow", "em", "tblOverlap", "tblpPr", "framePr",
    "hideMark", "tcFitText", "cantSplit", "divId", "textboxTightWrap", "rsid",
})

_UNDERLINE_STYLES = {
    "dash": "underline dashed",
    "dashDotDotHeavy": "underline dashed",
    "dashDotHeavy": "underline dashed",
    "dashedHeavy": "underline dashed",
    "dashLong": "underline dashed",
    "dashLongHeavy": "underline dashed",
    "dotDash": "underline dashed",
    "dotDotDash": "underline dashed",
    "dotted": "underline dotted",
    "dottedHeavy": "underline dotted",
    "double": "underline double",
    "single": "underline",
    "thick": "underline",
    "words": "underline",
    "wave": "underline wavy",
    "wavyDouble": "underline wavy",
    "wavyHeavy": "underline wavy",
    "none": "none",
}

_WRITING_MODES = {
    "tbRl": "vertical-rl",
    "tbRlV": "vertical-rl",
    "tbLrV": "vertical-lr",
    "btLr": "vertical-lr",
    "lrTbV": "vertical-lr",
}

_SIDES = {
    "left": "left",
    "start": "left",
    "right": "right",
    "end": "right",
    "top": "top",
    "bottom": "bottom",
}


def color_attr(node: Optional[etree._Element], name: str, default: Optional[str] = None,
               auto_color: str = AUTO_COLOR) -> Optional[str]:
    """
    Read a color attribute.

    ``auto`` maps to auto_color, six hex digits get a ``#`` prefix, named
    colors pass through. A ``themeColor`` attribute maps to the theme CSS
    variable when no explicit value is present.
    """
    value = attr(node, name)
    if value:
        if value == "auto":
            return auto_color
        if _HEX_COLOR.match(value):
            return f"#{value}"
        return value
    theme_color = attr(node, "themeColor")
    if theme_color:
        return f"var(--docx-{theme_color}-color)"
    return default


def theme_font(node: Optional[etree._Element], name: str) -> Optional[str]:
    value = attr(node, name)
    return f"var(--docx-{value}-font)" if value else None


def enclose_font_family(family: str) -> str:
    """Quote a family name containing whitespace."""
    if _NEEDS_QUOTES.match(family):
        return f"'{family}'"
    return family


def value_of_border(node: etree._Element) -> str:
    """CSS ``border`` shorthand of a border element (``w:top``, ``w:bdr``, ...)."""
    border_type = attr(node, "val")
    if border_type in ("nil", "none"):
        return "none"
    color = color_attr(node, "color", auto_color=AUTO_BORDER_COLOR) or AUTO_BORDER_COLOR
    size = length_attr(node, "sz", LengthUsages.BORDER) or "0.25pt"
    style = {
        "double": "double",
        "dotted": "dotted",
        "dashed": "dashed",
        "dashSmallGap": "dashed",
        "dotDash": "dashed",
        "dotDotDash": "dotted",
        "inset": "inset",
        "outset": "outset",
        "threeDEmboss": "ridge",
        "threeDEngrave": "groove",
    }.get(border_type or "", "solid")
    return f"{size} {style} {color}"


def value_of_jc(value: Optional[str]) -> Optional[str]:
    return {
        "start": "left",
        "left": "left",
        "center": "center",
        "end": "right",
        "right": "right",
        "both": "justify",
        "distribute": "justify",
    }.get(value or "", value)


def value_of_vertical_alignment(value: Optional[str]) -> Optional[str]:
    return {
        "auto": "baseline",
        "baseline": "baseline",
        "top": "top",
        "center": "middle",
        "bottom": "bottom",
    }.get(value or "", value)


def value_of_size(node: etree._Element, name: str = "w") -> Optional[str]:
    """Width of ``w:tblW`` / ``w:tcW`` according to its ``type``."""
    size_type = attr(node, "type")
    value = attr(node, name)
    if size_type == "auto":
        return "auto"
    if size_type == "nil":
        return "0"
    if size_type == "pct":
        if value and value.endswith("%"):
            return value
        ratio = convert_percentage(value)
        return f"{ratio * 100:.2f}%" if ratio is not None else None
    return convert_length(value, LengthUsages.DXA)


def parse_underline(node: etree._Element, output: CssValues) -> None:
    value = attr(node, "val")
    if value is None:
        return
    decoration = _UNDERLINE_STYLES.get(value)
    if decoration:
        output["text-decoration"] = decoration
    color = color_attr(node, "color")
    if color and value != "none":
        output["text-decoration-color"] = color


def parse_font(node: etree._Element, output: CssValues) -> None:
    fonts: List[str] = []
    for family in (attr(node, "ascii"), theme_font(node, "asciiTheme"),
                   attr(node, "eastAsia"), attr(node, "hAnsi")):
        if not family:
            continue
        family = enclose_font_family(family)
        if family not in fonts:
            fonts.append(family)
    if fonts:
        output["font-family"] = ", ".join(fonts)


def parse_indentation(node: etree._Element, output: CssValues) -> None:
    first_line = length_attr(node, "firstLine")
    hanging = length_attr(node, "hanging")
    left = length_attr(node, "left") or length_attr(node, "start")
    right = length_attr(node, "right") or length_attr(node, "end")

    if first_line:
        output["text-indent"] = first_line
    if hanging:
        output["text-indent"] = f"-{hanging}"
    if left:
        output["margin-left"] = left
    if right:
        output["margin-right"] = right


def parse_spacing(node: etree._Element, output: CssValues) -> None:
    """Paragraph ``w:spacing``: margins and line height."""
    before = length_attr(node, "before")
    after = length_attr(node, "after")
    line = int_attr(node, "line")
    line_rule = attr(node, "lineRule")

    if before:
        output["margin-top"] = before
    if after:
        output["margin-bottom"] = after
    if line is not None:
        if line_rule in (None, "auto"):
            output["line-height"] = convert_length(line, LengthUsages.LINE_HEIGHT)
        elif line_rule == "atLeast":
            output["line-height"] = f"calc(100% + {line / 20:.2f}pt)"
        else:
            output["line-height"] = output["min-height"] = f"{line / 20:.2f}pt"


def parse_borders(node: etree._Element, output: CssValues,
                  inside_output: Optional[CssValues] = None) -> None:
    """
    Border container (``w:pBdr``, ``w:tblBorders``, ``w:tcBorders``, ``w:pgBorders``).

    ``insideH`` / ``insideV`` are written to inside_output when given.
    """
    for child in elements(node):
        name = local_name(child)
        side = _SIDES.get(name)
        if side:
            output[f"border-{side}"] = value_of_border(child)
        elif inside_output is not None and name == "insideH":
            inside_output["border-top"] = inside_output["border-bottom"] = value_of_border(child)
        elif inside_output is not None and name == "insideV":
            inside_output["border-left"] = inside_output["border-right"] = value_of_border(child)


def parse_margins(node: etree._Element, output: CssValues) -> None:
    """Cell margins (``w:tblCellMar``, ``w:tcMar``) as padding."""
    for child in elements(node):
        side = _SIDES.get(local_name(child))
        if side:
            value = length_attr(child, "w")
            if value:
                output[f"padding-{side}"] = value


def parse_row_height(node: etree._Element, output: CssValues) -> None:
    rule = attr(node, "hRule")
    value = length_attr(node, "val")
    if value and rule != "auto":
        output["height"] = value


class PropertiesParser:
    """
    Translates formatting property elements into CSS.

    Unknown property names are reported through ``on_unknown`` and skipped.
    """

    def __init__(self, ignore_width: bool = False,
                 on_unknown: Optional[Callable[[str], None]] = None):
        self.ignore_width = ignore_width
        self._on_unknown = on_unknown

    def parse(self, node: Optional[etree._Element], output: Optional[CssValues] = None,
              child_output: Optional[CssValues] = None,
              handler: Optional[Callable[[etree._Element], bool]] = None) -> CssValues:
        """
        Translate the children of a property container.

        Args:
            node: ``w:pPr``, ``w:rPr``, ``w:tblPr``, ``w:trPr`` or ``w:tcPr``
            output: Dict to write into (a new one by default)
            child_output: Dict receiving values meant for the children (table cells)
            handler: Called first for every child; returns True if it consumed it

        Returns:
            The output dict
        """
        if output is None:
            output = {}
        if node is None:
            return output
        container = local_name(node)

        for child in elements(node):
            if handler is not None and handler(child):
                continue
            self._parse_property(container, child, output, child_output)
        return output

    def _parse_property(self, container: str, child: etree._Element,
                        output: CssValues, child_output: Optional[CssValues]) -> None:
        name = local_name(child)

        if name == "jc":
            value = value_of_jc(attr(child, "val"))
            if container == "tblPr":
                if value == "center":
                    output["margin-left"] = output["margin-right"] = "auto"
                elif value == "right":
                    output["margin-left"] = "auto"
            elif value:
                output["text-align"] = value
        elif name == "textAlignment":
            value = value_of_vertical_alignment(attr(child, "val"))
            if value:
                output["vertical-align"] = value
        elif name == "color":
            value = color_attr(child, "val", auto_color=AUTO_COLOR)
            if value:
                output["color"] = value
        elif name == "sz":
            value = length_attr(child, "val", LengthUsages.FONT_SIZE)
            if value:
                output["font-size"] = value
        elif name == "shd":
            value = color_attr(child, "fill", auto_color=AUTO_SHADING)
            if value:
                output["background-color"] = value
        elif name == "highlight":
            value = color_attr(child, "val", auto_color=AUTO_HIGHLIGHT)
            if value and value != "none":
                output["background-color"] = value
        elif name == "position":
            value = length_attr(child, "val", LengthUsages.FONT_SIZE)
            if value:
                output["vertical-align"] = value
        elif name in ("tcW", "tblW"):
            if not self.ignore_width:
                value = value_of_size(child)
                if value:
                    output["width"] = value
        elif name == "trHeight":
            parse_row_height(child, output)
        elif name == "strike":
            output["text-decoration"] = "line-through" if bool_attr(child, "val", True) else "none"
        elif name == "dstrike":
            output["text-decoration"] = "line-through double" if bool_attr(child, "val", True) else "none"
        elif name == "b":
            output["font-weight"] = "bold" if bool_attr(child, "val", True) else "normal"
        elif name == "i":
            output["font-style"] = "italic" if bool_attr(child, "val", True) else "normal"
        elif name == "caps":
            output["text-transform"] = "uppercase" if bool_attr(child, "val", True) else "none"
        elif name == "smallCaps":
            output["font-variant"] = "small-caps" if bool_attr(child, "val", True) else "none"
        elif name == "u":
            parse_underline(child, output)
        elif name == "ind":
            parse_indentation(child, output)
        elif name == "tblInd":
            value = length_attr(child, "w")
            if value:
                output["margin-left"] = value
        elif name == "rFonts":
            parse_font(child, output)
        elif name == "tblBorders":
            parse_borders(child, output, child_output)
        elif name == "tblCellSpacing":
            value = length_attr(child, "w")
            if value:
                output["border-spacing"] = value
                output["border-collapse"] = "separate"
        elif name in ("pBdr", "tcBorders", "pgBorders"):
            parse_borders(child, output)
        elif name == "bdr":
            output["border"] = value_of_border(child)
        elif name == "vanish":
            if bool_attr(child, "val", True):
                output["display"] = "none"
        elif name == "noWrap":
            if bool_attr(child, "val", True):
                output["white-space"] = "nowrap"
        elif name in ("tblCellMar", "tcMar"):
            parse_margins(child, child_output if child_output is not None else output)
        elif name == "tblLayout":
            output["table-layout"] = "fixed" if attr(child, "type") == "fixed" else "auto"
        elif name == "vAlign":
            value = value_of_vertical_alignment(attr(child, "val"))
            if value:
                output["vertical-align"] = value
        elif name == "spacing":
            if container == "pPr":
                parse_spacing(child, output)
            else:
                value = length_attr(child, "val")
                if value:
                    output["letter-spacing"] = value
        elif name == "suppressAutoHyphens":
            output["hyphens"] = "none" if bool_attr(child, "val", True) else "auto"
        elif name == "lang":
            value = attr(child, "val")
            if value:
                output["$lang"] = value
        elif name in ("rtl", "bidi", "bidiVisual"):
            if bool_attr(child, "val", True):
                output["direction"] = "rtl"
        elif name == "textDirection":
            value = _WRITING_MODES.get(attr(child, "val") or "")
            if value:
                output["writing-mode"] = value
        elif name in IGNORED_PROPERTIES:
            pass
        else:
            self._unknown(f"{container}.{name}")

    def _unknown(self, name: str) -> None:
        logger.debug(f"Unknown property element: {name}")
        if self._on_unknown is not None:
            self._on_unknown(name)


def is_on(node: Optional[etree._Element], default: bool = True) -> bool:
    """Value of an on/off property element that may be present without ``w:val``."""
    if node is None:
        return False
    return convert_boolean(attr(node, "val"), default)
