"""
Palette Validation

Rejects forbidden color combinations and checks text/background contrast.

Forbidden pairs are HSL regions rather than exact colors: a pair is flagged
when one color falls in the first region and the other in the second (either
order). Achromatic colors (grays, black, white) carry no usable hue and never
match a region.
"""

from itertools import combinations
from typing import List, Optional

import structlog

from slide_constraints.core.config import ConstraintPolicy, HslRange, get_policy
from slide_constraints.core.errors import InvalidColorError
from slide_constraints.services.constraints.color import (
    HSL,
    contrast_ratio,
    hex_to_hsl,
    normalize_hex,
)
from slide_constraints.services.constraints.models import (
    ColorValidationResult,
    ContrastResult,
    SlidePalette,
)

logger = structlog.get_logger(__name__)


def _matches_range(hsl: HSL, region: HslRange, achromatic_saturation: float) -> bool:
    h, s, lightness = hsl
    if s < achromatic_saturation:
        return False
    if not any(low <= h <= high for low, high in region.hue_ranges):
        return False
    if region.min_saturation is not None and s < region.min_saturation:
        return False
    if region.max_saturation is not None and s > region.max_saturation:
        return False
    if region.min_lightness is not None and lightness < region.min_lightness:
        return False
    if region.max_lightness is not None and lightness > region.max_lightness:
        return False
    return True


def validate_color_pair(
    color1: str,
    color2: str,
    policy: Optional[ConstraintPolicy] = None,
) -> ColorValidationResult:
    """Check a single color pair against all forbidden-pair rules.

    Both orderings are tested. A malformed color yields an
    "invalid color value" violation instead of raising.
    """
    color_policy = get_policy(policy).color
    violations: List[str] = []

    try:
        hex1 = normalize_hex(color1)
        hex2 = normalize_hex(color2)
    except InvalidColorError as e:
        logger.warning("Invalid color in pair check", value=e.value)
        return ColorValidationResult(valid=False, violations=[e.to_violation()])

    hsl1 = hex_to_hsl(hex1)
    hsl2 = hex_to_hsl(hex2)
    threshold = color_policy.achromatic_saturation

    for pair in color_policy.forbidden_pairs:
        forward = _matches_range(hsl1, pair.color1, threshold) and _matches_range(hsl2, pair.color2, threshold)
        reverse = _matches_range(hsl2, pair.color1, threshold) and _matches_range(hsl1, pair.color2, threshold)
        if forward or reverse:
            violations.append(f"Forbidden pair ({hex1}, {hex2}): {pair.reason}")

    return ColorValidationResult(valid=not violations, violations=violations)


def validate_palette(
    palette: SlidePalette,
    policy: Optional[ConstraintPolicy] = None,
) -> ColorValidationResult:
    """Validate every unordered pair of roles in a slide palette.

    Missing required roles and malformed values are reported first; pairs
    involving them are skipped.
    """
    violations: List[str] = []
    usable = {}

    for role, value in palette.roles().items():
        if not value:
            violations.append(f"Missing required palette color: {role}")
            continue
        try:
            usable[role] = normalize_hex(value)
        except InvalidColorError:
            violations.append(InvalidColorError(value, role=role).to_violation())

    for (role1, hex1), (role2, hex2) in combinations(usable.items(), 2):
        result = validate_color_pair(hex1, hex2, policy=policy)
        violations.extend(f"[{role1}/{role2}] {v}" for v in result.violations)

    if violations:
        logger.debug("Palette violations found", count=len(violations))
    return ColorValidationResult(valid=not violations, violations=violations)


def validate_text_contrast(
    text_color: Optional[str],
    background_color: Optional[str],
    large_text: bool = False,
    policy: Optional[ConstraintPolicy] = None,
) -> ContrastResult:
    """WCAG AA text contrast check.

    Normal text needs 4.5:1; large text (>=18pt, or >=14pt bold) needs 3:1.
    ``ratio`` is rounded to two decimals for display.
    """
    color_policy = get_policy(policy).color
    required = color_policy.min_contrast_large if large_text else color_policy.min_contrast_normal

    try:
        text_hex = normalize_hex(text_color)
    except InvalidColorError:
        error = InvalidColorError(text_color, role="text")
        return ContrastResult(valid=False, ratio=0.0, required=required, error=error.to_violation())
    try:
        background_hex = normalize_hex(background_color)
    except InvalidColorError:
        error = InvalidColorError(background_color, role="background")
        return ContrastResult(valid=False, ratio=0.0, required=required, error=error.to_violation())

    ratio = contrast_ratio(text_hex, background_hex)
    return ContrastResult(valid=ratio >= required, ratio=round(ratio, 2), required=required)
