"""
Auto-Fix Engine

Deterministic, non-generative repair of the violations the engine is allowed
to fix on its own:

- Dense slides: split into multiple slides, or truncate into the speaker
  notes when the content cannot be divided
- Low text contrast: swap the text color to black or white, whichever
  contrasts more with the background

Forbidden color pairs are reported for a manual fix and never changed.
Inputs are never mutated; fixed artifacts are new objects.
"""

from typing import List, Optional

import structlog

from slide_constraints.core.config import ConstraintPolicy, get_policy
from slide_constraints.core.errors import InvalidColorError
from slide_constraints.services.constraints.color import best_text_color, normalize_hex
from slide_constraints.services.constraints.density import count_words, suggest_split, validate_slide_content
from slide_constraints.services.constraints.models import AutoFixResult, SlideContent, SlidePalette, Theme
from slide_constraints.services.constraints.palette import validate_palette, validate_text_contrast
from slide_constraints.services.constraints.truncation import truncate_to_limits

logger = structlog.get_logger(__name__)

MANUAL_FIX_PREFIX = "[Manual fix needed] "


def _truncate_slide(slide: SlideContent, policy: ConstraintPolicy) -> Optional[SlideContent]:
    """Truncate a body to the density limits, or None when nothing was cut."""
    limits, _ = policy.density.sanitized()
    truncated = truncate_to_limits(
        slide.body,
        {
            "max_bullets": limits.max_bullets,
            "max_words": max(0, limits.max_words - count_words(slide.title)),
            "max_table_rows": limits.max_table_rows,
        },
        policy=policy,
    )
    if not truncated.was_truncated:
        return None

    notes = "\n\n".join(part for part in (slide.speaker_notes, truncated.overflow) if part)
    return slide.model_copy(update={"body": truncated.body, "speaker_notes": notes})


def _fix_density(slide: SlideContent, policy: ConstraintPolicy, changes: List[str]) -> List[SlideContent]:
    density = validate_slide_content(slide, policy=policy)
    if density.valid:
        return [slide]

    split = suggest_split(slide, policy=policy)
    if split.should_split:
        changes.append(f"Split overcrowded slide into {len(split.new_slides)} slides")

        # A single table row or header can still exceed the limits on its own page
        slides: List[SlideContent] = []
        for index, page in enumerate(split.new_slides, start=1):
            fixed = None
            if not validate_slide_content(page, policy=policy).valid:
                fixed = _truncate_slide(page, policy)
            if fixed is not None:
                changes.append(f"Truncated split slide {index}; moved overflow to speaker notes")
            slides.append(fixed or page)
        return slides

    truncated = _truncate_slide(slide, policy)
    if truncated is None:
        return [slide]

    changes.append("Truncated overcrowded slide; moved overflow to speaker notes")
    return [truncated]


def _fix_contrast(palette: SlidePalette, policy: ConstraintPolicy, changes: List[str]) -> Optional[SlidePalette]:
    contrast = validate_text_contrast(palette.text, palette.background, policy=policy)
    if contrast.valid:
        return None

    try:
        background = normalize_hex(palette.background)
    except InvalidColorError:
        error = InvalidColorError(palette.background, role="background")
        changes.append(f"{MANUAL_FIX_PREFIX}Cannot fix text contrast: {error.to_violation()}")
        return None

    color, ratio = best_text_color(background)
    changes.append(f"Changed text color from {palette.text} to {color} (contrast {round(ratio, 2)}:1)")
    return palette.model_copy(update={"text": color})


def auto_fix_slide(
    slide: SlideContent,
    theme: Theme,
    policy: Optional[ConstraintPolicy] = None,
) -> AutoFixResult:
    """Attempt to auto-fix a slide's violations.

    Steps run in order: density, text contrast, then a forbidden-pair scan
    of the (possibly recolored) palette whose findings are logged as manual
    fixes.

    Returns:
        AutoFixResult; ``fixed`` is True when any change was logged
    """
    policy = get_policy(policy)
    changes: List[str] = []

    slides = _fix_density(slide, policy, changes)
    fixed_palette = _fix_contrast(theme.palette, policy, changes)

    palette_result = validate_palette(fixed_palette or theme.palette, policy=policy)
    for violation in palette_result.violations:
        changes.append(f"{MANUAL_FIX_PREFIX}{violation}")

    for change in changes:
        logger.info("Auto-fix change", title=slide.title, change=change)

    return AutoFixResult(
        fixed=len(changes) > 0,
        changes=changes,
        slides=slides,
        palette=fixed_palette,
    )
