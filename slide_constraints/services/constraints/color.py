"""
Color Science
=============

Hex <-> RGB <-> HSL <-> Lab conversions, CIE76 Delta-E, and WCAG relative
luminance / contrast ratio.

All functions accept ``#RRGGBB`` or ``#RGB`` (leading ``#`` optional, any
case). Anything else raises ``InvalidColorError``; callers in the validators
turn that into a violation.
"""

import math
import re
from typing import Any, Tuple

from slide_constraints.core.errors import InvalidColorError

_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]{6}$")
_SHORT_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]{3}$")

RGB = Tuple[int, int, int]
HSL = Tuple[float, float, float]
LAB = Tuple[float, float, float]


# =============================================================================
# Parsing
# =============================================================================

def normalize_hex(value: Any) -> str:
    """Normalize a hex color to uppercase ``#RRGGBB``.

    Args:
        value: Hex color string, with or without ``#``, 3 or 6 digits

    Returns:
        Normalized color string

    Raises:
        InvalidColorError: If the value is not a hex color
    """
    if not isinstance(value, str):
        raise InvalidColorError(value)
    cleaned = value.strip().lstrip("#")
    if _SHORT_HEX_PATTERN.match(cleaned):
        cleaned = "".join(ch * 2 for ch in cleaned)
    if not _HEX_PATTERN.match(cleaned):
        raise InvalidColorError(value)
    return f"#{cleaned.upper()}"


def is_valid_hex(value: Any) -> bool:
    """Check whether a value parses as a hex color."""
    try:
        normalize_hex(value)
    except InvalidColorError:
        return False
    return True


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert hex color string to an (r, g, b) tuple of 0-255 ints."""
    cleaned = normalize_hex(hex_color)[1:]
    return (int(cleaned[0:2], 16), int(cleaned[2:4], 16), int(cleaned[4:6], 16))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to uppercase ``#RRGGBB``; channels are rounded and clamped."""
    channels = [max(0, min(255, int(round(c)))) for c in (r, g, b)]
    return "#{:02X}{:02X}{:02X}".format(*channels)


# =============================================================================
# HSL
# =============================================================================

def hex_to_hsl(hex_color: str) -> HSL:
    """Convert hex to (hue 0-360, saturation 0-100, lightness 0-100).

    Values are rounded to one decimal place.
    """
    r, g, b = (c / 255.0 for c in hex_to_rgb(hex_color))
    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low

    h = 0.0
    s = 0.0
    lightness = (high + low) / 2

    if delta != 0:
        s = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            h = ((g - b) / delta + (6 if g < b else 0)) * 60
        elif high == g:
            h = ((b - r) / delta + 2) * 60
        else:
            h = ((r - g) / delta + 4) * 60

    return (round(h, 1), round(s * 100, 1), round(lightness * 100, 1))


def hsl_to_hex(h: float, s: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) back to hex."""
    h = h % 360
    s = max(0.0, min(100.0, s)) / 100
    lightness = max(0.0, min(100.0, lightness)) / 100

    c = (1 - abs(2 * lightness - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = lightness - c / 2

    if h < 60:
        r1, g1, b1 = c, x, 0.0
    elif h < 120:
        r1, g1, b1 = x, c, 0.0
    elif h < 180:
        r1, g1, b1 = 0.0, c, x
    elif h < 240:
        r1, g1, b1 = 0.0, x, c
    elif h < 300:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x

    return rgb_to_hex((r1 + m) * 255, (g1 + m) * 255, (b1 + m) * 255)


# =============================================================================
# Lab + Delta-E
# =============================================================================

def rgb_to_lab(rgb: RGB) -> LAB:
    """Convert sRGB to CIE Lab (D65). Used for perceptual distance only."""
    def linearize(channel: float) -> float:
        c = channel / 255.0
        return ((c + 0.055) / 1.055) ** 2.4 if c > 0.04045 else c / 12.92

    r, g, b = (linearize(c) for c in rgb)

    x = (r * 0.4124564 + g * 0.3575761 + b * 0.1804375) / 0.95047
    y = (r * 0.2126729 + g * 0.7151522 + b * 0.0721750) / 1.00000
    z = (r * 0.0193339 + g * 0.1191920 + b * 0.9503041) / 1.08883

    epsilon = 0.008856
    kappa = 903.3

    def f(t: float) -> float:
        return t ** (1 / 3) if t > epsilon else (kappa * t + 16) / 116

    fx, fy, fz = f(x), f(y), f(z)
    return (116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz))


def delta_e(hex1: str, hex2: str) -> float:
    """CIE76 Delta-E: Euclidean distance in Lab space."""
    l1, a1, b1 = rgb_to_lab(hex_to_rgb(hex1))
    l2, a2, b2 = rgb_to_lab(hex_to_rgb(hex2))
    return math.sqrt((l1 - l2) ** 2 + (a1 - a2) ** 2 + (b1 - b2) ** 2)


# =============================================================================
# Luminance + Contrast
# =============================================================================

def luminance(hex_color: str) -> float:
    """Calculate WCAG 2.x relative luminance (0-1)."""
    def gamma(channel: int) -> float:
        c = channel / 255.0
        if c <= 0.03928:
            return c / 12.92
        return ((c + 0.055) / 1.055) ** 2.4

    r, g, b = hex_to_rgb(hex_color)
    return 0.2126 * gamma(r) + 0.7152 * gamma(g) + 0.0722 * gamma(b)


def contrast_ratio(color1: str, color2: str) -> float:
    """Calculate WCAG contrast ratio between two colors (1:1 to 21:1)."""
    l1 = luminance(color1)
    l2 = luminance(color2)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def best_text_color(background: str) -> Tuple[str, float]:
    """Pick black or white text for a background, whichever contrasts more.

    Ties favor black.

    Returns:
        Tuple of (hex color, contrast ratio)
    """
    black_ratio = contrast_ratio("#000000", background)
    white_ratio = contrast_ratio("#FFFFFF", background)
    if black_ratio >= white_ratio:
        return "#000000", black_ratio
    return "#FFFFFF", white_ratio
