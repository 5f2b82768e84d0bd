"""
Constraints Service
===================

Single entry point over the constraint validators for callers that render
results (API handlers, the slide generation pipeline).

Every method is synchronous and pure; one service instance can be shared.

Usage:
    from slide_constraints.services.constraints import get_constraints_service

    service = get_constraints_service()
    result = service.validate_slide(slide, theme)
    if not result.valid:
        fix = service.auto_fix_slide(slide, theme)
"""

from typing import Iterable, List, Mapping, Optional, Union

import structlog

from slide_constraints.core.config import ConstraintPolicy, TruncationLimits, get_policy
from slide_constraints.services.constraints.autofix import auto_fix_slide
from slide_constraints.services.constraints.density import suggest_split, validate_slide_content
from slide_constraints.services.constraints.layout import validate_layout
from slide_constraints.services.constraints.models import (
    AutoFixResult,
    ContrastResult,
    DensityValidationResult,
    DesignValidationResult,
    FontSizes,
    LayoutConfig,
    LayoutValidationResult,
    PaletteCheckResult,
    SlideContent,
    SlidePalette,
    SplitResult,
    Theme,
    ThemeValidationResult,
    TruncationResult,
    TypographyValidationResult,
)
from slide_constraints.services.constraints.palette import validate_palette, validate_text_contrast
from slide_constraints.services.constraints.truncation import passes_density_check, truncate_to_limits
from slide_constraints.services.constraints.typography import (
    validate_deck_fonts,
    validate_font_choice,
    validate_font_pairing,
    validate_font_sizes,
)
from slide_constraints.services.constraints.validator import validate_slide_design

logger = structlog.get_logger(__name__)


def _contrast_message(result: ContrastResult) -> str:
    if result.error:
        return result.error
    return f"Text/background contrast ratio {result.ratio}:1 is below WCAG AA minimum {result.required}:1"


def _font_message(role: str, font: str, suggestion: Optional[str]) -> str:
    message = f'{role} font "{font}" not allowed'
    if suggestion:
        message += f'. Suggested: "{suggestion}"'
    return message


class ConstraintsService:
    """Validation, splitting, truncation and auto-fix against one policy."""

    def __init__(self, policy: Optional[ConstraintPolicy] = None):
        self.policy = get_policy(policy)

    # -------------------------------------------------------------------------
    # Color
    # -------------------------------------------------------------------------

    def validate_palette(self, palette: SlidePalette) -> PaletteCheckResult:
        """Check forbidden pairs and text/background contrast."""
        pairs = validate_palette(palette, policy=self.policy)
        text_contrast = validate_text_contrast(palette.text, palette.background, policy=self.policy)

        violations = list(pairs.violations)
        if not text_contrast.valid:
            violations.append(_contrast_message(text_contrast))

        return PaletteCheckResult(
            valid=pairs.valid and text_contrast.valid,
            violations=violations,
            text_contrast=text_contrast,
        )

    # -------------------------------------------------------------------------
    # Typography
    # -------------------------------------------------------------------------

    def validate_typography(
        self,
        heading_font: str,
        body_font: str,
        all_fonts: Optional[Iterable[str]] = None,
        sizes: Optional[Union[FontSizes, Mapping[str, float]]] = None,
    ) -> TypographyValidationResult:
        """Validate font choices, pairing, sizes and the deck-wide font count."""
        heading = validate_font_choice(heading_font, policy=self.policy)
        body = validate_font_choice(body_font, policy=self.policy)
        pairing = validate_font_pairing(heading_font, body_font, policy=self.policy)
        size_result = validate_font_sizes(sizes, policy=self.policy)
        deck_fonts = validate_deck_fonts(all_fonts, policy=self.policy) if all_fonts is not None else None

        violations: List[str] = []
        if not heading.valid:
            violations.append(_font_message("Heading", heading_font, heading.suggestion))
        if not body.valid:
            violations.append(_font_message("Body", body_font, body.suggestion))
        if not pairing.valid and pairing.reason:
            violations.append(pairing.reason)
        violations.extend(size_result.violations)
        if deck_fonts and not deck_fonts.valid:
            violations.extend(deck_fonts.violations)

        return TypographyValidationResult(
            heading_font=heading,
            body_font=body,
            pairing=pairing,
            sizes=size_result,
            deck_fonts=deck_fonts,
            valid=not violations,
            violations=violations,
        )

    # -------------------------------------------------------------------------
    # Density
    # -------------------------------------------------------------------------

    def validate_density(self, slide: SlideContent) -> DensityValidationResult:
        return validate_slide_content(slide, policy=self.policy)

    def suggest_split(self, slide: SlideContent) -> SplitResult:
        return suggest_split(slide, policy=self.policy)

    def truncate(
        self,
        body: str,
        limits: Optional[Union[TruncationLimits, Mapping[str, float]]] = None,
    ) -> TruncationResult:
        return truncate_to_limits(body, limits, policy=self.policy)

    def passes_density_check(
        self,
        body: str,
        limits: Optional[Union[TruncationLimits, Mapping[str, float]]] = None,
    ) -> bool:
        return passes_density_check(body, limits, policy=self.policy)

    # -------------------------------------------------------------------------
    # Layout / Theme / Slide
    # -------------------------------------------------------------------------

    def validate_layout(self, layout: Optional[Union[LayoutConfig, Mapping]]) -> LayoutValidationResult:
        return validate_layout(layout, policy=self.policy)

    def validate_theme(self, theme: Theme) -> ThemeValidationResult:
        """Validate a theme definition on its own: fonts, pairing, sizes and palette."""
        violations: List[str] = []

        heading = validate_font_choice(theme.heading_font, policy=self.policy)
        if not heading.valid:
            violations.append(_font_message("Heading", theme.heading_font, heading.suggestion))

        body = validate_font_choice(theme.body_font, policy=self.policy)
        if not body.valid:
            violations.append(_font_message("Body", theme.body_font, body.suggestion))

        pairing = validate_font_pairing(theme.heading_font, theme.body_font, policy=self.policy)
        if not pairing.valid and pairing.reason:
            violations.append(pairing.reason)

        contrast = validate_text_contrast(theme.palette.text, theme.palette.background, policy=self.policy)
        if not contrast.valid:
            violations.append(_contrast_message(contrast))

        violations.extend(validate_palette(theme.palette, policy=self.policy).violations)
        violations.extend(validate_font_sizes(theme.sizes, policy=self.policy).violations)

        if violations:
            logger.debug("Theme violations found", count=len(violations))
        return ThemeValidationResult(valid=not violations, violations=violations)

    def validate_slide(self, slide: SlideContent, theme: Theme) -> DesignValidationResult:
        return validate_slide_design(slide, theme, policy=self.policy)

    def auto_fix_slide(self, slide: SlideContent, theme: Theme) -> AutoFixResult:
        return auto_fix_slide(slide, theme, policy=self.policy)


# =============================================================================
# Convenience Functions
# =============================================================================

_service_instance: Optional[ConstraintsService] = None


def get_constraints_service() -> ConstraintsService:
    """
    Get or create the constraints service singleton.

    Returns:
        ConstraintsService bound to the configured policy
    """
    global _service_instance

    if _service_instance is None:
        _service_instance = ConstraintsService()

    return _service_instance
