"""Utility helpers: element tags, unit conversion, XML access and logging."""

from .element_types import DomType
from .logger import get_logger, setup_logging

__all__ = ["DomType", "get_logger", "setup_logging"]
