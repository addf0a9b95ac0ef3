"""Document model: the element tree and the catalogs built by the parser."""

from .base import OpenXmlElement
from .document import WordDocument
from .section import SectionProperties

__all__ = ["OpenXmlElement", "SectionProperties", "WordDocument"]
