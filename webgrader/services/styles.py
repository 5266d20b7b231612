"""
Computed Style Comparison
=========================
Tolerance-based comparison of computed CSS values against rubric
expectations, used by the parameterized CSS-Style template.

Features:
- Colors: rgb()/rgba()/#hex/named values compared per channel with a tolerance
- Lengths: "12px" style values compared against min/max thresholds
- Patterns: regex search against the raw computed value
"""

import re


COLOR_TOLERANCE = 40

NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "blue": (0, 0, 255),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "yellow": (255, 255, 0),
    "orange": (255, 165, 0),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "lightgray": (211, 211, 211),
    "lightblue": (173, 216, 230),
    "lightgreen": (144, 238, 144),
    "purple": (128, 0, 128),
    "pink": (255, 192, 203),
}

_RGB = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)", re.IGNORECASE)
_HEX = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_LENGTH = re.compile(r"(-?\d+(?:\.\d+)?)")


def parse_color(value):
    """
    Convert a computed color string to an (r, g, b) tuple.

    Fully transparent rgba() values and unparseable strings return None.
    """
    if not value:
        return None
    text = value.strip().lower()

    match = _RGB.search(text)
    if match:
        alpha = match.group(4)
        if alpha is not None and float(alpha) == 0:
            return None
        return tuple(int(match.group(i)) for i in (1, 2, 3))

    match = _HEX.match(text)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))

    return NAMED_COLORS.get(text)


def color_matches(value, expected, tolerance=COLOR_TOLERANCE) -> bool:
    """True if a computed color is within `tolerance` of a named/rgb color on every channel."""
    target = parse_color(expected)
    actual = parse_color(value)
    if target is None or actual is None:
        return False
    return all(abs(a - t) <= tolerance for a, t in zip(actual, target))


def parse_length(value):
    """Pixel value of a computed length ("12px" -> 12.0). Returns None if not numeric."""
    if value is None:
        return None
    match = _LENGTH.search(str(value))
    return float(match.group(1)) if match else None


def rule_matches(rule, value) -> bool:
    """Apply every constraint a StyleRule declares to one computed value."""
    if rule.color is not None and not color_matches(value, rule.color):
        return False
    if rule.pattern is not None and not re.search(rule.pattern, value or "", re.IGNORECASE):
        return False
    if rule.min is not None or rule.max is not None:
        number = parse_length(value)
        if number is None:
            return False
        if rule.min is not None and number < rule.min:
            return False
        if rule.max is not None and number > rule.max:
            return False
    return True
