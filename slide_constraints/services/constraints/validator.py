"""
Design Validation Orchestrator

Runs every validator against one slide and its theme and concatenates the
violations in a fixed order:

    palette -> text contrast -> heading font -> body font -> pairing
    -> sizes -> density -> layout

The result is ``valid`` exactly when that list is empty.
"""

from typing import List, Optional

import structlog

from slide_constraints.core.config import ConstraintPolicy, get_policy
from slide_constraints.services.constraints.density import validate_slide_content
from slide_constraints.services.constraints.layout import validate_layout
from slide_constraints.services.constraints.models import (
    ContrastResult,
    DesignValidationResult,
    SlideContent,
    Theme,
    TypographyResult,
)
from slide_constraints.services.constraints.palette import validate_palette, validate_text_contrast
from slide_constraints.services.constraints.typography import (
    validate_font_choice,
    validate_font_pairing,
    validate_font_sizes,
)

logger = structlog.get_logger(__name__)


def contrast_violation(result: ContrastResult) -> str:
    """Human-readable message for a failed contrast check."""
    if result.error:
        return result.error
    return f"Text contrast ratio {result.ratio}:1 is below required {result.required}:1"


def validate_slide_design(
    slide: SlideContent,
    theme: Theme,
    policy: Optional[ConstraintPolicy] = None,
) -> DesignValidationResult:
    """Validate a slide against every design constraint.

    Density only sees the slide; palette and typography only see the theme;
    layout sees ``theme.layout`` and is trivially valid when it is absent.

    Args:
        slide: Slide content to check
        theme: Theme the slide is rendered with
        policy: Constraint policy (defaults to the configured one)

    Returns:
        DesignValidationResult with per-validator detail and the ordered
        ``all_violations`` list
    """
    policy = get_policy(policy)
    palette = theme.palette

    color = validate_palette(palette, policy=policy)
    text_contrast = validate_text_contrast(palette.text, palette.background, policy=policy)
    heading = validate_font_choice(theme.heading_font, policy=policy)
    body = validate_font_choice(theme.body_font, policy=policy)
    pairing = validate_font_pairing(theme.heading_font, theme.body_font, policy=policy)
    sizes = validate_font_sizes(theme.sizes, policy=policy)
    density = validate_slide_content(slide, policy=policy)
    layout = validate_layout(theme.layout, policy=policy)

    all_violations: List[str] = list(color.violations)
    if not text_contrast.valid:
        all_violations.append(contrast_violation(text_contrast))
    if not heading.valid:
        all_violations.append(f'Heading font "{theme.heading_font}" is not allowed. Try "{heading.suggestion}"')
    if not body.valid:
        all_violations.append(f'Body font "{theme.body_font}" is not allowed. Try "{body.suggestion}"')
    if not pairing.valid:
        all_violations.append(pairing.reason or "Font pairing issue")
    all_violations.extend(sizes.violations)
    all_violations.extend(density.violations)
    all_violations.extend(layout.violations)

    logger.debug(
        "Slide design validated",
        title=slide.title,
        valid=not all_violations,
        violations=len(all_violations),
    )

    return DesignValidationResult(
        valid=not all_violations,
        color=color,
        text_contrast=text_contrast,
        typography=TypographyResult(heading_font=heading, body_font=body, pairing=pairing, sizes=sizes),
        density=density,
        layout=layout,
        all_violations=all_violations,
    )
