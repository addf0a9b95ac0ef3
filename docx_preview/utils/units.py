"""
Units converter for WordprocessingML lengths.

Handles conversion of native document units (twips, EMU, half-points,
eighths of a point, fiftieths of a percent) into CSS lengths, plus the
reverse mapping used when a CSS value has to be compared with a native one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

_CSS_VALUE = re.compile(r".+(p[xt]|%)$")
_CSS_NUMBER = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(pt|px|%|)\s*$")

POINTS_PER_INCH = 72.0
EMU_PER_POINT = 12700.0
TWIPS_PER_POINT = 20.0


@dataclass(frozen=True)
class LengthUsage:
    """Scale, CSS unit and optional clamp range for a native unit."""

    mul: float
    unit: str
    min: Optional[float] = None
    max: Optional[float] = None


class LengthUsages:
    """Native units found in WordprocessingML markup."""

    DXA = LengthUsage(0.05, "pt")                       # twentieths of a point
    EMU = LengthUsage(1 / EMU_PER_POINT, "pt")          # English Metric Units
    FONT_SIZE = LengthUsage(0.5, "pt")                  # half-points
    BORDER = LengthUsage(0.125, "pt", 0.25, 12)         # eighths of a point
    POINT = LengthUsage(1, "pt")
    PERCENT = LengthUsage(0.02, "%")                    # fiftieths of a percent
    LINE_HEIGHT = LengthUsage(1 / 240, "")
    VML_EMU = LengthUsage(1 / EMU_PER_POINT, "")


def _parse_number(value: str) -> Optional[float]:
    match = re.match(r"^\s*(-?\d+(?:\.\d+)?)", value)
    if not match:
        return None
    return float(match.group(1))


def convert_length(value: Optional[Union[str, int, float]],
                   usage: LengthUsage = LengthUsages.DXA) -> Optional[str]:
    """
    Convert a native length into a CSS length.

    Values that already carry a CSS unit (``pt``, ``px``, ``%``) pass through.

    Args:
        value: Native value as found in the markup
        usage: Unit description

    Returns:
        CSS length string rounded to two decimals, or None
    """
    if value is None:
        return None
    if isinstance(value, str):
        if _CSS_VALUE.match(value):
            return value
        number = _parse_number(value)
        if number is None:
            return None
        number = float(int(number))
    else:
        number = float(value)

    result = number * usage.mul
    if usage.min is not None and usage.max is not None:
        result = min(max(result, usage.min), usage.max)
    return f"{result:.2f}{usage.unit}"


def css_length_to_native(css_value: str, usage: LengthUsage = LengthUsages.DXA) -> Optional[float]:
    """
    Convert a CSS length produced by ``convert_length`` back into native units.

    Args:
        css_value: CSS length string
        usage: Unit description used for the forward conversion

    Returns:
        Native value, or None if the value cannot be mapped back
    """
    match = _CSS_NUMBER.match(css_value or "")
    if not match:
        return None
    number, unit = float(match.group(1)), match.group(2)
    if unit == "px" and usage.unit == "pt":
        number = number * 0.75
    elif unit != usage.unit:
        return None
    return number / usage.mul


def css_length_to_points(css_value: Optional[str]) -> Optional[float]:
    """Return the value of a ``pt``/``px`` CSS length in points."""
    match = _CSS_NUMBER.match(css_value or "")
    if not match:
        return None
    number, unit = float(match.group(1)), match.group(2)
    if unit == "pt":
        return number
    if unit == "px":
        return number * 0.75
    return None


def convert_boolean(value: Optional[str], default: bool = False) -> bool:
    """Interpret an ST_OnOff value."""
    if value is None:
        return default
    token = value.strip().lower()
    if token in ("1", "on", "true"):
        return True
    if token in ("0", "off", "false", "none"):
        return False
    return default


def convert_percentage(value: Optional[str]) -> Optional[float]:
    """Convert an ST_Percentage (``50%`` or fiftieths) into a ratio."""
    if not value:
        return None
    if value.endswith("%"):
        number = _parse_number(value[:-1])
        return number / 100 if number is not None else None
    number = _parse_number(value)
    return number / 5000 if number is not None else None
