"""
Parsing layer: package container, relationships and the part parsers.

Only the container types are exported here; parsers and the loader import
the models, which in turn import the relationship types from this package.
"""

from .package_reader import OpenXmlPackage
from .relationships import Relationship, Relationships

__all__ = ["OpenXmlPackage", "Relationship", "Relationships"]
