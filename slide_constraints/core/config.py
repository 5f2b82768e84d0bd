"""
Slide Constraints - Core Configuration
=======================================

Centralized configuration using Pydantic settings.

Every rule table the constraint engine enforces (density limits, font
allow-lists, forbidden color pairs, layout limits) lives in one
``ConstraintPolicy`` object. Validators take an optional ``policy`` argument;
when omitted they use ``get_settings().policy``.

Settings can be configured via:
1. Environment variables (.env file), prefixed with ``SLIDE_CONSTRAINTS_``
2. Defaults - the product-wide design policy

Nested policy values use ``__`` as delimiter:

    SLIDE_CONSTRAINTS_POLICY__DENSITY__MAX_BULLETS=6
    SLIDE_CONSTRAINTS_LOG_FORMAT=json

Usage:
    from slide_constraints.core.config import get_settings, ConstraintPolicy

    policy = get_settings().policy
    strict = ConstraintPolicy(density=DensityLimits(max_bullets=3))
"""

import math
from functools import lru_cache
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

import structlog

from slide_constraints.core.errors import InvalidPolicyError

logger = structlog.get_logger(__name__)


def _is_valid_limit(value: Any) -> bool:
    """Check that a numeric limit is a finite, non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if math.isnan(value) or math.isinf(value):
        return False
    return value >= 0


class _LimitsModel(BaseModel):
    """Base for numeric limit tables that must tolerate bad values."""

    _label: ClassVar[str] = "policy"

    def problems(self) -> List[str]:
        """Describe every field holding a negative, NaN or non-numeric limit."""
        issues = []
        for name in type(self).model_fields:
            value = getattr(self, name)
            if not _is_valid_limit(value):
                error = InvalidPolicyError(self._label, name, value)
                issues.append(f"{error.to_violation()}; using default")
        return issues

    def sanitized(self) -> Tuple["_LimitsModel", List[str]]:
        """Return a copy with invalid limits replaced by defaults, plus the problems found."""
        issues = self.problems()
        if not issues:
            return self, []
        defaults = type(self)()
        update = {
            name: getattr(defaults, name)
            for name in type(self).model_fields
            if not _is_valid_limit(getattr(self, name))
        }
        logger.warning("Invalid constraint limits replaced", table=self._label, fields=sorted(update))
        return self.model_copy(update=update), issues


# =============================================================================
# Density
# =============================================================================

class DensityLimits(_LimitsModel):
    """Per-slide content limits used by validation and splitting."""

    max_bullets: Union[int, float] = Field(default=4, description="Bullet and numbered items per slide")
    max_table_rows: Union[int, float] = Field(default=5, description="Table data rows per slide (header excluded)")
    max_words: Union[int, float] = Field(default=80, description="Words per slide, title + body")
    max_words_per_bullet: Union[int, float] = Field(default=15, description="Words per bullet before a warning")
    max_nesting_depth: Union[int, float] = Field(default=1, description="List nesting depth before a warning")

    _label: ClassVar[str] = "density"


class TruncationLimits(_LimitsModel):
    """Limits for the non-LLM truncation pass and the density pre-check."""

    max_bullets: Union[int, float] = Field(default=4, description="Bullets kept on the slide")
    max_words: Union[int, float] = Field(default=50, description="Words kept on the slide")
    max_table_rows: Union[int, float] = Field(default=4, description="Table data rows kept on the slide")

    _label: ClassVar[str] = "truncation"


# =============================================================================
# Color
# =============================================================================

class HslRange(BaseModel):
    """A region of HSL space (hue in degrees, saturation/lightness in percent)."""

    hue_ranges: List[Tuple[float, float]] = Field(default_factory=lambda: [(0.0, 360.0)])
    min_saturation: Optional[float] = None
    max_saturation: Optional[float] = None
    min_lightness: Optional[float] = None
    max_lightness: Optional[float] = None


class ForbiddenPair(BaseModel):
    """Two color regions that must not appear together in a palette."""

    name: str
    color1: HslRange
    color2: HslRange
    reason: str


DEFAULT_FORBIDDEN_PAIRS: List[ForbiddenPair] = [
    ForbiddenPair(
        name="red-green",
        color1=HslRange(hue_ranges=[(0, 30), (330, 360)]),
        color2=HslRange(hue_ranges=[(90, 150)]),
        reason="Color-blind inaccessible",
    ),
    ForbiddenPair(
        name="red-blue",
        color1=HslRange(hue_ranges=[(0, 30)], min_saturation=70),
        color2=HslRange(hue_ranges=[(210, 270)], min_saturation=70),
        reason="Vibration effect, low projected contrast",
    ),
    ForbiddenPair(
        name="orange-blue",
        color1=HslRange(hue_ranges=[(15, 45)], min_saturation=80),
        color2=HslRange(hue_ranges=[(210, 270)], min_saturation=80),
        reason="Eye fatigue from complementary high-saturation",
    ),
    ForbiddenPair(
        name="neon-neon",
        color1=HslRange(min_saturation=90, min_lightness=40, max_lightness=70),
        color2=HslRange(min_saturation=90, min_lightness=40, max_lightness=70),
        reason="Unprofessional, hurts readability",
    ),
]


class ColorPolicy(BaseModel):
    """Contrast thresholds and forbidden palette combinations."""

    min_contrast_normal: float = Field(default=4.5, description="WCAG AA, normal text")
    min_contrast_large: float = Field(default=3.0, description="WCAG AA, large text")
    achromatic_saturation: float = Field(
        default=10.0,
        description="Colors below this HSL saturation have no hue and match no forbidden pair",
    )
    forbidden_pairs: List[ForbiddenPair] = Field(default_factory=lambda: list(DEFAULT_FORBIDDEN_PAIRS))


# =============================================================================
# Typography
# =============================================================================

ALLOWED_FONTS: List[str] = [
    "Inter",
    "Roboto",
    "Open Sans",
    "Montserrat",
    "Poppins",
    "Lato",
    "Source Sans Pro",
    "Nunito Sans",
    "Work Sans",
    "DM Sans",
    "Georgia",
    "Arial",
    "Source Serif Pro",
    "Playfair Display",
    "Raleway",
    "Helvetica",
    "Garamond",
    "Libre Baskerville",
]

BANNED_FONTS: List[str] = [
    "Comic Sans MS",
    "Comic Sans",
    "Papyrus",
    "Bradley Hand",
    "Curlz MT",
    "Jokerman",
    "Impact",
    "Bleeding Cowboys",
    "Courier New",
]

# Known families by broad category; used to suggest a replacement
FONT_CATEGORIES: Dict[str, str] = {
    # serif
    "Georgia": "serif",
    "Source Serif Pro": "serif",
    "Playfair Display": "serif",
    "Garamond": "serif",
    "Libre Baskerville": "serif",
    "Times New Roman": "serif",
    "Times": "serif",
    "Cambria": "serif",
    "Merriweather": "serif",
    "Lora": "serif",
    "Baskerville": "serif",
    "Book Antiqua": "serif",
    "Palatino": "serif",
    "Palatino Linotype": "serif",
    # sans
    "Inter": "sans",
    "Roboto": "sans",
    "Open Sans": "sans",
    "Montserrat": "sans",
    "Poppins": "sans",
    "Lato": "sans",
    "Source Sans Pro": "sans",
    "Nunito Sans": "sans",
    "Nunito": "sans",
    "Work Sans": "sans",
    "DM Sans": "sans",
    "Arial": "sans",
    "Helvetica": "sans",
    "Helvetica Neue": "sans",
    "Calibri": "sans",
    "Segoe UI": "sans",
    "Verdana": "sans",
    "Tahoma": "sans",
    "Trebuchet MS": "sans",
    "Gill Sans": "sans",
    "Futura": "sans",
    "Noto Sans": "sans",
    "Ubuntu": "sans",
    # display
    "Raleway": "display",
    "Impact": "display",
    "Bebas Neue": "display",
    "Oswald": "display",
    "Lobster": "display",
    "Abril Fatface": "display",
    "Anton": "display",
    # mono
    "Courier New": "mono",
    "Courier": "mono",
    "Consolas": "mono",
    "Menlo": "mono",
    "Monaco": "mono",
    "Fira Code": "mono",
    "JetBrains Mono": "mono",
    "Source Code Pro": "mono",
    "Roboto Mono": "mono",
    # handwriting
    "Comic Sans MS": "handwriting",
    "Comic Sans": "handwriting",
    "Papyrus": "handwriting",
    "Bradley Hand": "handwriting",
    "Curlz MT": "handwriting",
    "Jokerman": "handwriting",
    "Bleeding Cowboys": "handwriting",
    "Brush Script MT": "handwriting",
    "Pacifico": "handwriting",
    "Dancing Script": "handwriting",
}

FONT_SIZE_MINIMUMS: Dict[str, float] = {
    "heading": 28,
    "subheading": 22,
    "body": 24,
    "caption": 14,
}

MAX_FONTS_PER_DECK = 2


class TypographyPolicy(BaseModel):
    """Font allow-list, size minimums and pairing groups."""

    allowed_fonts: List[str] = Field(default_factory=lambda: list(ALLOWED_FONTS))
    banned_fonts: List[str] = Field(default_factory=lambda: list(BANNED_FONTS))
    font_categories: Dict[str, str] = Field(default_factory=lambda: dict(FONT_CATEGORIES))
    fallback_font: str = Field(default="Inter", description="Suggested when no closer font exists")
    font_size_minimums: Dict[str, float] = Field(default_factory=lambda: dict(FONT_SIZE_MINIMUMS))
    max_fonts_per_deck: int = Field(default=MAX_FONTS_PER_DECK)

    # Pairing groups: two fonts from the same group look too similar
    geometric_sans: List[str] = Field(
        default_factory=lambda: ["Montserrat", "Poppins", "Nunito Sans", "DM Sans"]
    )
    humanist_sans: List[str] = Field(
        default_factory=lambda: ["Inter", "Roboto", "Open Sans", "Lato", "Source Sans Pro", "Work Sans"]
    )
    system_sans: List[str] = Field(default_factory=lambda: ["Arial", "Helvetica"])


# =============================================================================
# Layout
# =============================================================================

class LayoutLimits(_LimitsModel):
    """Structural complexity limits for a single slide."""

    max_columns: Union[int, float] = Field(default=2)
    max_font_sizes: Union[int, float] = Field(default=3)
    max_distinct_colors: Union[int, float] = Field(default=3, description="Non-neutral colors only")
    min_overlay_opacity: Union[int, float] = Field(default=0.3, description="For full-bleed images carrying text")
    neutral_channel_spread: Union[int, float] = Field(
        default=30, description="A color is neutral when all RGB channels are within this spread"
    )

    _label: ClassVar[str] = "layout"


# =============================================================================
# Policy + Settings
# =============================================================================

class ConstraintPolicy(BaseModel):
    """The complete design policy every slide is judged against."""

    density: DensityLimits = Field(default_factory=DensityLimits)
    truncation: TruncationLimits = Field(default_factory=TruncationLimits)
    color: ColorPolicy = Field(default_factory=ColorPolicy)
    typography: TypographyPolicy = Field(default_factory=TypographyPolicy)
    layout: LayoutLimits = Field(default_factory=LayoutLimits)


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    The policy is read once per process; pass an explicit ``policy=`` to any
    validator to judge against something else.
    """

    APP_NAME: str = Field(default="slide-constraints", description="Application name")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    LOG_FORMAT: str = Field(default="console", description="console or json")

    policy: ConstraintPolicy = Field(default_factory=ConstraintPolicy)

    class Config:
        env_prefix = "SLIDE_CONSTRAINTS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_policy(policy: Optional[ConstraintPolicy] = None) -> ConstraintPolicy:
    """Resolve an explicit policy or fall back to the configured one."""
    return policy if policy is not None else get_settings().policy
