"""
Field renderer.

Complex fields are spread over sibling runs::

    begin -> instruction runs -> separate -> result runs -> end

``FieldRenderer`` follows that sequence as a stack of active fields (fields
nest). Instruction runs never render. Result runs render through the
container returned by ``container()``, which is the wrapper of the
innermost field that has one (a link for ``REF \\h``, a TOC span, ...).
Wrappers are created lazily, once per inline container, so a result
spanning several paragraphs gets one wrapper in each of them.
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from lxml import etree

from ..models.elements import ComplexField, SimpleField
from .dom import append_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

# Field codes with a rendering of their own; anything else shows its result unchanged
FIELD_CODES = ("PAGE", "NUMPAGES", "SECTIONPAGES", "REF", "PAGEREF", "NOTEREF", "HYPERLINK", "TOC")

LIVE_FIELD_CODES = ("PAGE", "NUMPAGES", "SECTIONPAGES")

# Switches followed by an argument
_ARGUMENT_SWITCHES = frozenset({"\\l", "\\o", "\\t", "\\b", "\\c", "\\f", "\\s",
                                "\\d", "\\*", "\\#", "\\@", "\\m", "\\n", "\\p"})

_TOKENS = re.compile(r'"([^"]*)"|(\S+)')

# Tags whose content is block level; field wrappers never go directly inside them
BLOCK_TAGS = frozenset({"article", "header", "footer", "section", "div", "li", "ol",
                        "td", "th", "tr", "table", "tbody", "thead", "aside",
                        "foreignObject", "ins", "del"})

_ROMAN = ((1000, "m"), (900, "cm"), (500, "d"), (400, "cd"), (100, "c"), (90, "xc"),
          (50, "l"), (40, "xl"), (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"))


@dataclass
class FieldInstruction:
    """
    Parsed field instruction.

    Attributes:
        code: Upper case field code (``PAGEREF``)
        arguments: Positional arguments, quotes removed
        switches: Switches (``\\h``) mapped to their argument, None for flags
    """

    code: str = ""
    arguments: List[str] = field(default_factory=list)
    switches: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def is_supported(self) -> bool:
        return self.code in FIELD_CODES

    def has_switch(self, name: str) -> bool:
        return name in self.switches


def parse_instruction(text: str) -> FieldInstruction:
    """
    Split a field instruction into code, arguments and switches.

    Args:
        text: Instruction text, e.g. ``PAGEREF _Toc123 \\h``

    Returns:
        Parsed instruction; an empty code for blank text
    """
    tokens: List[Tuple[str, bool]] = [(bare, False) if bare else (quoted, True)
                                      for quoted, bare in _TOKENS.findall(text or "")]
    result = FieldInstruction()
    if not tokens:
        return result
    result.code = tokens[0][0].upper()
    index = 1
    while index < len(tokens):
        value, quoted = tokens[index]
        if not quoted and value.startswith("\\"):
            name = value[:2]
            argument = value[2:] or None
            if argument is None and name in _ARGUMENT_SWITCHES and index + 1 < len(tokens):
                index += 1
                argument = tokens[index][0]
            result.switches[name] = argument
        else:
            result.arguments.append(value)
        index += 1
    return result


def format_page_number(number: int, number_format: Optional[str] = None) -> str:
    """Format a page number with a ``w:pgNumType`` numeral style."""
    if number_format in ("lowerRoman", "upperRoman") and number > 0:
        digits = []
        remainder = number
        for value, numeral in _ROMAN:
            while remainder >= value:
                digits.append(numeral)
                remainder -= value
        text = "".join(digits)
        return text.upper() if number_format == "upperRoman" else text
    if number_format in ("lowerLetter", "upperLetter") and number > 0:
        letter = chr(ord("a") + (number - 1) % 26) * ((number - 1) // 26 + 1)
        return letter.upper() if number_format == "upperLetter" else letter
    return str(number)


@dataclass(eq=False)
class _ActiveField:
    instruction_text: List[str] = field(default_factory=list)
    instruction: Optional[FieldInstruction] = None
    in_result: bool = False
    suppress_result: bool = False
    wrapper: Optional[Tuple[str, Dict[str, str]]] = None
    containers: List[Tuple[etree._Element, etree._Element]] = field(default_factory=list)

    def wrapper_in(self, parent: etree._Element) -> Optional[etree._Element]:
        for owner, wrapper in self.containers:
            if owner is parent:
                return wrapper
        return None


class FieldRenderer:
    """
    Renders simple and complex fields.

    Page values for live fields are set by the page renderer before each
    page is rendered.
    """

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options
        self.page_number = 1
        self.page_number_format: Optional[str] = None
        self.total_pages = 1
        self.section_pages = 1
        self._stack: List[_ActiveField] = []

    @contextmanager
    def isolated(self) -> Iterator[None]:
        """Render a separate part (header, note) with its own field state."""
        saved = self._stack
        self._stack = []
        try:
            yield
        finally:
            self._stack = saved

    # ------------------------------------------------------------------
    # Complex fields
    # ------------------------------------------------------------------

    def handle_char(self, char: ComplexField, parent: etree._Element) -> None:
        """
        Advance the state machine on a ``w:fldChar``.

        Args:
            char: The field character
            parent: Inline container the owning run is rendered into
        """
        if char.char_type == "begin":
            self._stack.append(_ActiveField())
        elif char.char_type == "separate":
            if not self._stack:
                return
            current = self._stack[-1]
            self._enter_result(current, parent)
        elif char.char_type == "end":
            if not self._stack:
                return
            current = self._stack[-1]
            if not current.in_result:
                # Fields without a result still show their live value
                self._enter_result(current, parent)
            self._stack.pop()

    def add_instruction(self, text: str) -> None:
        if self._stack and not self._stack[-1].in_result:
            self._stack[-1].instruction_text.append(text)

    def _enter_result(self, current: _ActiveField, parent: etree._Element) -> None:
        instruction = parse_instruction("".join(current.instruction_text))
        outer_hidden = self.suppressed(exclude_top=True)
        current.instruction = instruction
        current.in_result = True
        if outer_hidden:
            return
        if self.is_live(instruction):
            self._append_placeholder(self.container(parent, exclude_top=True), instruction)
            current.suppress_result = True
        else:
            current.wrapper = self._wrapper_for(instruction)
        logger.debug(f"Field {instruction.code or '<empty>'} {instruction.arguments}")

    def suppressed(self, exclude_top: bool = False) -> bool:
        """True while content belongs to an instruction or to a replaced result."""
        fields = self._stack[:-1] if exclude_top else self._stack
        return any(not item.in_result or item.suppress_result for item in fields)

    def container(self, parent: etree._Element, exclude_top: bool = False) -> etree._Element:
        """
        Inline container for content rendered at this point.

        Args:
            parent: Container the content would go to outside of any field
        """
        if parent.tag in BLOCK_TAGS:
            return parent
        target = parent
        fields = self._stack[:-1] if exclude_top else self._stack
        for item in fields:
            if not item.in_result or item.wrapper is None:
                continue
            wrapper = item.wrapper_in(target)
            if wrapper is None:
                tag, attrs = item.wrapper
                wrapper = append_element(target, tag, attrs=attrs)
                item.containers.append((target, wrapper))
            target = wrapper
        return target

    # ------------------------------------------------------------------
    # Simple fields
    # ------------------------------------------------------------------

    def render_simple(self, elem: SimpleField, parent: etree._Element) -> Optional[etree._Element]:
        """Render a ``w:fldSimple`` and its result runs."""
        instruction = parse_instruction(elem.instruction)
        if self.is_live(instruction):
            return self._append_placeholder(parent, instruction)
        wrapper = self._wrapper_for(instruction)
        target = parent
        if wrapper is not None:
            tag, attrs = wrapper
            target = append_element(parent, tag, attrs=attrs)
        self.renderer.render_children(elem, target)
        return target if wrapper is not None else None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def is_live(self, instruction: FieldInstruction) -> bool:
        return self.options.live_fields and instruction.code in LIVE_FIELD_CODES

    def live_value(self, instruction: FieldInstruction) -> str:
        if instruction.code == "PAGE":
            return format_page_number(self.page_number, self.page_number_format)
        if instruction.code == "NUMPAGES":
            return str(self.total_pages)
        return str(self.section_pages)

    def _append_placeholder(self, parent: etree._Element, instruction: FieldInstruction) -> etree._Element:
        class_name = f"{self.options.class_name}-field"
        return append_element(parent, "span", class_name, {"data-field": instruction.code},
                              text=self.live_value(instruction))

    def _wrapper_for(self, instruction: FieldInstruction) -> Optional[Tuple[str, Dict[str, str]]]:
        code = instruction.code
        if code in ("REF", "PAGEREF", "NOTEREF"):
            if instruction.has_switch("\\h") and instruction.arguments:
                return "a", {"href": f"#{instruction.arguments[0]}"}
            return None
        if code == "HYPERLINK":
            url = instruction.arguments[0] if instruction.arguments else ""
            anchor = instruction.switches.get("\\l")
            href = f"{url}#{anchor}" if anchor else url
            if not href:
                return None
            attrs = {"href": href}
            tooltip = instruction.switches.get("\\o")
            if tooltip:
                attrs["title"] = tooltip
            return "a", attrs
        if code == "TOC":
            return "span", {"class": f"{self.options.class_name}-toc"}
        return None
