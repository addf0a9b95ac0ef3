"""Resource loading: images, embedded fonts and embedded HTML parts."""

from .font_obfuscation import deobfuscate, load_embedded_font, validate_font
from .resources import PendingResource, ResourceResolver, gather_resources

__all__ = [
    "PendingResource",
    "ResourceResolver",
    "deobfuscate",
    "gather_resources",
    "load_embedded_font",
    "validate_font",
]
