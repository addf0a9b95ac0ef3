"""
Embedded font deobfuscation.

Word obfuscates embedded fonts by XOR-ing their first 32 bytes with the
bytes of the font key GUID, taken in reverse order. The transform is its
own inverse.
"""

import logging
import re

from ..exceptions import FontError

logger = logging.getLogger(__name__)

OBFUSCATED_HEADER_SIZE = 32

# sfnt signatures of TrueType, OpenType (CFF), Apple TrueType and collections
FONT_SIGNATURES = (b"\x00\x01\x00\x00", b"OTTO", b"true", b"ttcf")

_GUID_NOISE = re.compile(r"[{}\-]")
_HEX = re.compile(r"^[0-9a-fA-F]{32}$")


def key_bytes(guid: str) -> bytes:
    """
    The 16 key bytes of a font key GUID.

    Args:
        guid: ``{XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX}``

    Returns:
        Key bytes, last GUID byte first

    Raises:
        FontError: If the key is not a GUID
    """
    digits = _GUID_NOISE.sub("", guid or "")
    if not _HEX.match(digits):
        raise FontError("Invalid font key", guid)
    numbers = bytearray(16)
    for i in range(16):
        numbers[15 - i] = int(digits[i * 2:i * 2 + 2], 16)
    return bytes(numbers)


def deobfuscate(data: bytes, guid: str) -> bytes:
    """
    Apply the GUID XOR transform to the font header.

    Args:
        data: Obfuscated font data
        guid: Font key from the font table

    Returns:
        Font data with the header restored

    Raises:
        FontError: If the key is invalid or the data is too short
    """
    key = key_bytes(guid)
    if len(data) < OBFUSCATED_HEADER_SIZE:
        raise FontError("Font data too short", f"{len(data)} bytes")
    result = bytearray(data)
    for i in range(OBFUSCATED_HEADER_SIZE):
        result[i] ^= key[i % 16]
    return bytes(result)


def validate_font(data: bytes) -> bool:
    """Check the data starts with a known font signature."""
    return bool(data) and data[:4] in FONT_SIGNATURES


def load_embedded_font(data: bytes, guid: str) -> bytes:
    """
    Deobfuscate an embedded font and check the result is a font.

    Raises:
        FontError: If deobfuscation fails or the result has no font signature
    """
    result = deobfuscate(data, guid)
    if not validate_font(result):
        raise FontError("Deobfuscated data is not a font", f"signature {result[:4]!r}")
    return result
