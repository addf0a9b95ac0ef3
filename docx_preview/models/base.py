"""
Base model class for the document element tree.

Every node carries a ``DomType`` tag, an ordered list of owned children,
the CSS properties translated from its direct formatting and optional
style references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..utils.element_types import DomType


@dataclass(eq=False)
class OpenXmlElement:
    """A node of the element tree."""

    type: DomType = DomType.DOCUMENT
    children: List["OpenXmlElement"] = field(default_factory=list)
    css_style: Dict[str, str] = field(default_factory=dict)
    style_name: Optional[str] = None
    class_name: Optional[str] = None
    parent: Optional["OpenXmlElement"] = field(default=None, repr=False)

    def add_child(self, child: "OpenXmlElement") -> "OpenXmlElement":
        """Append a child and take ownership of it."""
        child.parent = self
        self.children.append(child)
        return child

    def extend(self, children: List["OpenXmlElement"]) -> None:
        for child in children:
            self.add_child(child)

    def iter_descendants(self) -> Iterator["OpenXmlElement"]:
        """Depth-first iteration over all descendants, in document order."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_parent(self, dom_type: DomType) -> Optional["OpenXmlElement"]:
        """Nearest ancestor with the given tag."""
        node = self.parent
        while node is not None:
            if node.type == dom_type:
                return node
            node = node.parent
        return None

    def get_text(self) -> str:
        """Plain text of the subtree."""
        return "".join(child.get_text() for child in self.children)
