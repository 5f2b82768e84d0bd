"""
Layout Validation

Enforces layout rules: column count, font size variety, color variety and
overlay requirements for text over full-bleed images.
"""

import math
from typing import List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from slide_constraints.core.config import ConstraintPolicy, LayoutLimits, get_policy
from slide_constraints.core.errors import InvalidColorError
from slide_constraints.services.constraints.color import hex_to_rgb, normalize_hex
from slide_constraints.services.constraints.models import LayoutConfig, LayoutValidationResult

logger = structlog.get_logger(__name__)


def is_neutral(hex_color: str, spread: float = 30) -> bool:
    """Grays, whites and blacks: all channels within ``spread`` of each other."""
    r, g, b = hex_to_rgb(hex_color)
    return max(abs(r - g), abs(g - b), abs(r - b)) <= spread


def _percent(value: float) -> str:
    return f"{round(value * 100)}%"


def _check_colors(colors: List[str], limits: LayoutLimits) -> List[str]:
    violations: List[str] = []
    non_neutral: List[str] = []

    for value in colors:
        try:
            hex_color = normalize_hex(value)
        except InvalidColorError:
            violations.append(InvalidColorError(value, role="layout").to_violation())
            continue
        if hex_color not in non_neutral and not is_neutral(hex_color, limits.neutral_channel_spread):
            non_neutral.append(hex_color)

    if len(non_neutral) > limits.max_distinct_colors:
        violations.append(
            f"Slide uses {len(non_neutral)} distinct colors "
            f"(max {limits.max_distinct_colors:g}, excluding neutrals)."
        )
    return violations


def _check_overlay(opacity: Optional[float], limits: LayoutLimits) -> List[str]:
    if opacity is not None and (math.isnan(opacity) or not 0 <= opacity <= 1):
        return [f"Overlay opacity {opacity!r} is not between 0 and 1."]
    if opacity is None or opacity < limits.min_overlay_opacity:
        current = _percent(opacity) if opacity is not None else "none"
        return [
            f"Full-bleed image with text requires at least "
            f"{_percent(limits.min_overlay_opacity)} overlay (current: {current})."
        ]
    return []


def validate_layout(
    layout: Optional[Union[LayoutConfig, Mapping]],
    policy: Optional[ConstraintPolicy] = None,
) -> LayoutValidationResult:
    """Validate the structural complexity of a rendered slide.

    A missing layout is trivially valid. Font sizes count once per distinct
    value; colors whose channels are within the neutral spread are excluded
    from the color count.
    """
    if layout is None:
        return LayoutValidationResult(valid=True)

    if not isinstance(layout, LayoutConfig):
        try:
            layout = LayoutConfig.model_validate(dict(layout))
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Malformed layout config", error=str(e))
            return LayoutValidationResult(valid=False, violations=[f"Invalid layout configuration: {e}"])

    limits, _ = get_policy(policy).layout.sanitized()
    violations: List[str] = []

    if layout.columns is not None:
        if layout.columns < 1:
            violations.append(f"Slide has an invalid column count ({layout.columns}).")
        elif layout.columns > limits.max_columns:
            violations.append(f"Slide has {layout.columns} columns (max {limits.max_columns:g}).")

    if layout.font_sizes:
        unique_sizes = set(layout.font_sizes)
        if len(unique_sizes) > limits.max_font_sizes:
            violations.append(
                f"Slide uses {len(unique_sizes)} font sizes (max {limits.max_font_sizes:g})."
            )

    if layout.distinct_colors:
        violations.extend(_check_colors(layout.distinct_colors, limits))

    if layout.has_full_bleed_image:
        violations.extend(_check_overlay(layout.overlay_opacity, limits))

    if violations:
        logger.debug("Layout violations found", count=len(violations))
    return LayoutValidationResult(valid=not violations, violations=violations)
