"""
Typography Validation

Enforces the font allow-list, heading/body pairing rules, per-role size
minimums and the per-deck font budget.
"""

import math
import re
from typing import Dict, Iterable, List, Mapping, Optional, Union

import structlog

from slide_constraints.core.config import ConstraintPolicy, TypographyPolicy, get_policy
from slide_constraints.services.constraints.models import (
    DeckFontsResult,
    FontPairingResult,
    FontSizes,
    FontSizeValidationResult,
    FontValidationResult,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def _normalize_font(font: str) -> str:
    """Casefold and collapse whitespace so 'open  sans' == 'Open Sans'."""
    return re.sub(r"\s+", " ", (font or "").strip()).casefold()


def _lookup(font: str, names: Iterable[str]) -> Optional[str]:
    key = _normalize_font(font)
    for name in names:
        if _normalize_font(name) == key:
            return name
    return None


def levenshtein(a: str, b: str) -> int:
    """Case-insensitive edit distance."""
    a, b = a.lower(), b.lower()
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def _category_of(font: str, rules: TypographyPolicy) -> Optional[str]:
    known = _lookup(font, rules.font_categories)
    if known:
        return rules.font_categories[known]
    return None


def _guess_category(font: str) -> Optional[str]:
    name = _normalize_font(font)
    if any(word in name for word in ("mono", "code", "courier")):
        return "mono"
    if "sans" in name or "grotesk" in name or "gothic" in name:
        return "sans"
    if "serif" in name:
        return "serif"
    if "script" in name or "hand" in name:
        return "handwriting"
    if "display" in name:
        return "display"
    return None


def _first_allowed_in(category: Optional[str], rules: TypographyPolicy) -> Optional[str]:
    if not category:
        return None
    candidates = sorted(
        font for font in rules.allowed_fonts
        if rules.font_categories.get(font) == category
    )
    return candidates[0] if candidates else None


def _closest_by_spelling(font: str, rules: TypographyPolicy) -> Optional[str]:
    best = None
    best_distance = None
    for allowed in sorted(rules.allowed_fonts):
        distance = levenshtein(font, allowed)
        if best_distance is None or distance < best_distance:
            best, best_distance = allowed, distance
    # Only a plausible typo: less than half the name changed
    if best is not None and best_distance <= math.ceil(len(font) / 2):
        return best
    return None


def suggest_font(font: str, policy: Optional[ConstraintPolicy] = None) -> str:
    """Suggest the closest allowed font for a rejected one.

    Order: same category as a known family (first alphabetically), then a
    close spelling, then a category guessed from the name, then the fallback.
    """
    rules = get_policy(policy).typography
    return (
        _first_allowed_in(_category_of(font, rules), rules)
        or _closest_by_spelling(font, rules)
        or _first_allowed_in(_guess_category(font), rules)
        or rules.fallback_font
    )


# =============================================================================
# Validators
# =============================================================================

def validate_font_choice(font: str, policy: Optional[ConstraintPolicy] = None) -> FontValidationResult:
    """Check if a font is in the allow-list; suggest a replacement if not."""
    rules = get_policy(policy).typography

    if not _lookup(font, rules.banned_fonts) and _lookup(font, rules.allowed_fonts):
        return FontValidationResult(valid=True)

    return FontValidationResult(valid=False, suggestion=suggest_font(font, policy=policy))


def validate_font_pairing(
    heading_font: str,
    body_font: str,
    policy: Optional[ConstraintPolicy] = None,
) -> FontPairingResult:
    """Validate that a heading/body pairing has enough typographic contrast."""
    rules = get_policy(policy).typography

    if _normalize_font(heading_font) == _normalize_font(body_font):
        return FontPairingResult(
            valid=False,
            reason=f'Heading and body use the same font "{heading_font}". Use different fonts for visual hierarchy.',
        )

    heading_category = _category_of(heading_font, rules)
    body_category = _category_of(body_font, rules)

    if heading_category == "display" and body_category == "display":
        return FontPairingResult(
            valid=False,
            reason=f'"{heading_font}" and "{body_font}" are both display fonts. Pair a display heading with a readable body font.',
        )

    # Serif, display or system sans on either side gives enough contrast
    if "serif" in (heading_category, body_category) or "display" in (heading_category, body_category):
        return FontPairingResult(valid=True)
    if _lookup(heading_font, rules.system_sans) or _lookup(body_font, rules.system_sans):
        return FontPairingResult(valid=True)

    for group in (rules.geometric_sans, rules.humanist_sans):
        if _lookup(heading_font, group) and _lookup(body_font, group):
            return FontPairingResult(
                valid=False,
                reason=(
                    f'"{heading_font}" and "{body_font}" are both in the same typographic category '
                    "and look too similar. Pair a geometric sans with a humanist sans for better contrast."
                ),
            )

    return FontPairingResult(valid=True)


def validate_font_sizes(
    sizes: Optional[Union[FontSizes, Mapping[str, float]]],
    policy: Optional[ConstraintPolicy] = None,
) -> FontSizeValidationResult:
    """Validate font sizes against per-role minimums.

    Roles without a minimum are ignored; unset roles are skipped.
    """
    minimums = get_policy(policy).typography.font_size_minimums
    if sizes is None:
        values: Dict[str, float] = {}
    elif isinstance(sizes, FontSizes):
        values = sizes.model_dump(exclude_none=True)
    else:
        values = {role: size for role, size in dict(sizes).items() if size is not None}

    violations: List[str] = []
    for role, size in values.items():
        minimum = minimums.get(role)
        if minimum is None:
            continue
        if isinstance(size, bool) or not isinstance(size, (int, float)) or math.isnan(size) or size <= 0:
            violations.append(f"{role} font size {size!r} is not a valid size")
            continue
        if size < minimum:
            violations.append(f"{role} font size {size:g}pt is below minimum {minimum:g}pt")

    return FontSizeValidationResult(valid=not violations, violations=violations)


def validate_deck_fonts(fonts: Iterable[str], policy: Optional[ConstraintPolicy] = None) -> DeckFontsResult:
    """Enforce the per-deck font budget and the allow-list for every font used."""
    rules = get_policy(policy).typography

    distinct: List[str] = []
    seen = set()
    for font in fonts:
        key = _normalize_font(font)
        if key and key not in seen:
            seen.add(key)
            distinct.append(font.strip())

    violations: List[str] = []
    if len(distinct) > rules.max_fonts_per_deck:
        excess = distinct[rules.max_fonts_per_deck:]
        violations.append(
            f"Deck uses {len(distinct)} fonts ({', '.join(distinct)}). "
            f"Maximum allowed is {rules.max_fonts_per_deck}; remove {', '.join(excess)}."
        )

    for font in distinct:
        result = validate_font_choice(font, policy=policy)
        if not result.valid:
            violations.append(
                f'Font "{font}" is not in the allowed list. Suggested: "{result.suggestion}".'
            )

    if violations:
        logger.debug("Deck font violations", fonts=distinct, count=len(violations))
    return DeckFontsResult(valid=not violations, violations=violations, fonts=distinct)
