"""
Office math renderer.

Translates the math element tree into presentation MathML, one construct
at a time. Constructs outside ``MATH_TAGS`` arrive as ``MML_TEXT`` and
render as ``<mtext>`` with their plain run text.
"""

import logging
import re
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from lxml import etree

from ..models.base import OpenXmlElement
from ..models.elements import MathElement
from ..utils.element_types import DomType
from .dom import append_element, create_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

# Runs are split into numbers, letters and single operator characters
_MATH_TOKENS = re.compile(r"(\d+(?:[.,]\d+)*)|([^\W\d_])|(\S)")

FUNCTION_APPLICATION = "\u2061"
DEFAULT_NARY_CHAR = "\u222b"
DEFAULT_GROUP_CHAR = "\u23df"
OVERBAR = "\u00af"


def _by_type(elem: OpenXmlElement) -> Dict[DomType, OpenXmlElement]:
    result: Dict[DomType, OpenXmlElement] = {}
    for child in elem.children:
        result.setdefault(child.type, child)
    return result


class MathRenderer:
    """Renders ``oMath`` / ``oMathPara`` trees as MathML."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options
        self._handlers: Dict[DomType, Callable[[MathElement, etree._Element], etree._Element]] = {
            DomType.MML_FRACTION: self._render_fraction,
            DomType.MML_RADICAL: self._render_radical,
            DomType.MML_SUPERSCRIPT: self._render_scripts,
            DomType.MML_SUBSCRIPT: self._render_scripts,
            DomType.MML_SUB_SUPERSCRIPT: self._render_scripts,
            DomType.MML_PRE_SUB_SUPER: self._render_pre_scripts,
            DomType.MML_DELIMITER: self._render_delimiter,
            DomType.MML_NARY: self._render_nary,
            DomType.MML_FUNCTION: self._render_function,
            DomType.MML_LIMIT_LOWER: self._render_limit,
            DomType.MML_LIMIT_UPPER: self._render_limit,
            DomType.MML_MATRIX: self._render_matrix,
            DomType.MML_EQUATION_ARRAY: self._render_equation_array,
            DomType.MML_BAR: self._render_bar,
            DomType.MML_GROUP_CHAR: self._render_group_char,
            DomType.MML_RUN: self._render_run,
            DomType.MML_TEXT: self._render_text,
        }

    def render(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        """Render a math zone (``oMath``) or math paragraph (``oMathPara``)."""
        if elem.type == DomType.MML_MATH_PARAGRAPH:
            container = append_element(parent, "span", f"{self.options.class_name}-math-paragraph")
            for child in elem.children:
                if child.type == DomType.MML_MATH:
                    self._render_math(child, container, display="block")
                else:
                    self.render_node(child, container)
            return container
        return self._render_math(elem, parent)

    def _render_math(self, elem: MathElement, parent: etree._Element,
                     display: Optional[str] = None) -> etree._Element:
        node = append_element(parent, "math", attrs={"display": display})
        self.render_children(elem, node)
        return node

    def render_node(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        handler = self._handlers.get(elem.type)
        if handler is not None:
            return handler(elem, parent)
        if elem.type == DomType.MML_MATH:
            return self._render_math(elem, parent)
        # Bases, arguments and other plain containers
        return self._render_row(elem, parent)

    def render_children(self, elem: OpenXmlElement, parent: etree._Element) -> None:
        for child in elem.children:
            self.render_node(child, parent)

    def _render_row(self, elem: Optional[OpenXmlElement], parent: etree._Element,
                    tag: str = "mrow") -> etree._Element:
        node = append_element(parent, tag)
        if elem is not None:
            if elem.type == DomType.MML_FUNCTION_NAME:
                self._render_run_tokens(elem.get_text(), node, join_letters=True)
            else:
                self.render_children(elem, node)
        return node

    # ------------------------------------------------------------------
    # Constructs
    # ------------------------------------------------------------------

    def _render_fraction(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        node = append_element(parent, "mfrac")
        self._render_row(parts.get(DomType.MML_NUMERATOR), node)
        self._render_row(parts.get(DomType.MML_DENOMINATOR), node)
        return node

    def _render_radical(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        degree = parts.get(DomType.MML_DEGREE)
        if elem.props.hide_degree or degree is None or not degree.children:
            node = append_element(parent, "msqrt")
            base = parts.get(DomType.MML_BASE)
            if base is not None:
                self.render_children(base, node)
            return node
        node = append_element(parent, "mroot")
        self._render_row(parts.get(DomType.MML_BASE), node)
        self._render_row(degree, node)
        return node

    def _render_scripts(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        tag = {DomType.MML_SUPERSCRIPT: "msup",
               DomType.MML_SUBSCRIPT: "msub",
               DomType.MML_SUB_SUPERSCRIPT: "msubsup"}[elem.type]
        node = append_element(parent, tag)
        self._render_row(parts.get(DomType.MML_BASE), node)
        if elem.type != DomType.MML_SUPERSCRIPT:
            self._render_row(parts.get(DomType.MML_SUB_ARGUMENT), node)
        if elem.type != DomType.MML_SUBSCRIPT:
            self._render_row(parts.get(DomType.MML_SUPER_ARGUMENT), node)
        return node

    def _render_pre_scripts(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        node = append_element(parent, "mmultiscripts")
        self._render_row(parts.get(DomType.MML_BASE), node)
        append_element(node, "mprescripts")
        self._render_row(parts.get(DomType.MML_SUB_ARGUMENT), node)
        self._render_row(parts.get(DomType.MML_SUPER_ARGUMENT), node)
        return node

    def _render_delimiter(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        props = elem.props
        node = append_element(parent, "mrow")
        append_element(node, "mo", attrs={"fence": "true"}, text=props.begin_char if props.begin_char is not None else "(")
        bases = [child for child in elem.children if child.type == DomType.MML_BASE]
        for index, base in enumerate(bases):
            if index:
                append_element(node, "mo", attrs={"separator": "true"}, text="|")
            self._render_row(base, node)
        append_element(node, "mo", attrs={"fence": "true"}, text=props.end_char if props.end_char is not None else ")")
        return node

    def _render_nary(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        node = append_element(parent, "mrow")
        operator = create_element("mo", text=elem.props.char or DEFAULT_NARY_CHAR)
        sub = parts.get(DomType.MML_SUB_ARGUMENT)
        sup = parts.get(DomType.MML_SUPER_ARGUMENT)
        has_sub = sub is not None and bool(sub.children)
        has_sup = sup is not None and bool(sup.children)
        if has_sub or has_sup:
            tag = "munderover" if has_sub and has_sup else ("munder" if has_sub else "mover")
            limits = append_element(node, tag)
            limits.append(operator)
            if has_sub:
                self._render_row(sub, limits)
            if has_sup:
                self._render_row(sup, limits)
        else:
            node.append(operator)
        self._render_row(parts.get(DomType.MML_BASE), node)
        return node

    def _render_function(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        node = append_element(parent, "mrow")
        self._render_row(parts.get(DomType.MML_FUNCTION_NAME), node)
        append_element(node, "mo", text=FUNCTION_APPLICATION)
        self._render_row(parts.get(DomType.MML_BASE), node)
        return node

    def _render_limit(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        parts = _by_type(elem)
        node = append_element(parent, "munder" if elem.type == DomType.MML_LIMIT_LOWER else "mover")
        self._render_row(parts.get(DomType.MML_BASE), node)
        self._render_row(parts.get(DomType.MML_LIMIT), node)
        return node

    def _render_matrix(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "mtable")
        for row in elem.children:
            if row.type != DomType.MML_MATRIX_ROW:
                continue
            tr = append_element(node, "mtr")
            for cell in row.children:
                self._render_row(cell, tr, tag="mtd")
        return node

    def _render_equation_array(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "mtable")
        for child in elem.children:
            tr = append_element(node, "mtr")
            self._render_row(child, tr, tag="mtd")
        return node

    def _render_bar(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        over = elem.props.position == "top"
        node = append_element(parent, "mover" if over else "munder")
        self._render_row(_by_type(elem).get(DomType.MML_BASE), node)
        append_element(node, "mo", attrs={"stretchy": "true"}, text=OVERBAR if over else "_")
        return node

    def _render_group_char(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        over = elem.props.position == "top"
        node = append_element(parent, "mover" if over else "munder")
        self._render_row(_by_type(elem).get(DomType.MML_BASE), node)
        append_element(node, "mo", attrs={"stretchy": "true"}, text=elem.props.char or DEFAULT_GROUP_CHAR)
        return node

    def _render_run(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        node = append_element(parent, "mrow")
        self._render_run_tokens(elem.text, node)
        return node

    def _render_text(self, elem: MathElement, parent: etree._Element) -> etree._Element:
        return append_element(parent, "mtext", text=elem.get_text())

    @staticmethod
    def _render_run_tokens(text: str, parent: etree._Element, join_letters: bool = False) -> List[etree._Element]:
        """Split run text into ``mn`` numbers, ``mi`` identifiers and ``mo`` operators."""
        result: List[etree._Element] = []
        for number, letter, other in _MATH_TOKENS.findall(text or ""):
            if number:
                tag, value = "mn", number
            elif letter:
                if join_letters and result and result[-1].tag == "mi":
                    result[-1].text += letter
                    continue
                tag, value = "mi", letter
            else:
                tag, value = "mo", other
            result.append(append_element(parent, tag, text=value))
        return result
