"""
Constraint Engine Models

Input value objects (slide content, palette, theme) are Pydantic models so
that loosely-typed pipeline output is coerced rather than rejected. Results
are plain dataclasses; ``to_dict()`` gives the structural mapping callers use
for JSON responses.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class SlideType(str, Enum):
    """Named slide layouts produced by the generation pipeline."""
    TITLE = "TITLE"
    PROBLEM = "PROBLEM"
    SOLUTION = "SOLUTION"
    ARCHITECTURE = "ARCHITECTURE"
    PROCESS = "PROCESS"
    COMPARISON = "COMPARISON"
    DATA_METRICS = "DATA_METRICS"
    CTA = "CTA"
    CONTENT = "CONTENT"
    QUOTE = "QUOTE"
    VISUAL_HUMOR = "VISUAL_HUMOR"
    OUTLINE = "OUTLINE"
    TEAM = "TEAM"
    TIMELINE = "TIMELINE"
    SECTION_DIVIDER = "SECTION_DIVIDER"
    METRICS_HIGHLIGHT = "METRICS_HIGHLIGHT"
    FEATURE_GRID = "FEATURE_GRID"
    PRODUCT_SHOWCASE = "PRODUCT_SHOWCASE"
    LOGO_WALL = "LOGO_WALL"
    MARKET_SIZING = "MARKET_SIZING"
    SPLIT_STATEMENT = "SPLIT_STATEMENT"
    MATRIX_2X2 = "MATRIX_2X2"
    WATERFALL = "WATERFALL"
    FUNNEL = "FUNNEL"
    COMPETITIVE_MATRIX = "COMPETITIVE_MATRIX"
    ROADMAP = "ROADMAP"
    PRICING_TABLE = "PRICING_TABLE"
    UNIT_ECONOMICS = "UNIT_ECONOMICS"
    SWOT = "SWOT"
    THREE_PILLARS = "THREE_PILLARS"
    HOOK = "HOOK"
    BEFORE_AFTER = "BEFORE_AFTER"
    SOCIAL_PROOF = "SOCIAL_PROOF"
    OBJECTION_HANDLER = "OBJECTION_HANDLER"
    FAQ = "FAQ"
    VERDICT = "VERDICT"
    COHORT_TABLE = "COHORT_TABLE"
    PROGRESS_TRACKER = "PROGRESS_TRACKER"


# =============================================================================
# Input Models
# =============================================================================

class SlideContent(BaseModel):
    """Title and markdown-subset body of one generated slide."""

    title: str = Field(default="", description="Slide title")
    body: str = Field(default="", description="Bullets, numbered items, tables or prose")
    slide_type: SlideType = Field(default=SlideType.CONTENT)
    has_table: Optional[bool] = Field(default=None, description="Overrides table detection")
    table_rows: Optional[int] = Field(default=None, description="Overrides detected table data rows")
    speaker_notes: str = Field(default="", description="Receives overflow moved off the slide")

    @field_validator("title", "body", "speaker_notes", mode="before")
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class SlidePalette(BaseModel):
    """Named color roles of a theme.

    Roles are optional at the model level so a missing color is reported as a
    violation instead of failing construction.
    """

    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    background: Optional[str] = None
    text: Optional[str] = None
    surface: Optional[str] = None

    REQUIRED_ROLES: ClassVar[Tuple[str, ...]] = ("primary", "secondary", "accent", "background", "text")

    @field_validator("*", mode="before")
    @classmethod
    def validate_color(cls, v):
        if v is None:
            return None
        return v.strip() if isinstance(v, str) else str(v)

    def roles(self) -> Dict[str, Optional[str]]:
        """Role name to value, required roles first, ``surface`` only when set."""
        roles = {role: getattr(self, role) for role in self.REQUIRED_ROLES}
        if self.surface:
            roles["surface"] = self.surface
        return roles


class FontSizes(BaseModel):
    """Point size per text role."""

    heading: Optional[float] = None
    subheading: Optional[float] = None
    body: Optional[float] = None
    caption: Optional[float] = None


class LayoutConfig(BaseModel):
    """Structural description of a rendered slide."""

    columns: Optional[int] = None
    font_sizes: Optional[List[float]] = None
    distinct_colors: Optional[List[str]] = None
    has_full_bleed_image: bool = False
    overlay_opacity: Optional[float] = Field(default=None, description="0..1")


class Theme(BaseModel):
    """Palette, fonts and optional sizing/layout for a deck or slide."""

    palette: SlidePalette = Field(default_factory=SlidePalette)
    heading_font: str = Field(default="")
    body_font: str = Field(default="")
    sizes: Optional[FontSizes] = None
    layout: Optional[LayoutConfig] = None


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class ColorValidationResult:
    """Forbidden-pair scan of one pair or a whole palette."""
    valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ContrastResult:
    """WCAG contrast of a text/background pair."""
    valid: bool
    ratio: float
    required: float
    error: Optional[str] = None  # set when either color is malformed

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FontValidationResult:
    valid: bool
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FontPairingResult:
    valid: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FontSizeValidationResult:
    valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DeckFontsResult:
    valid: bool
    violations: List[str] = field(default_factory=list)
    fonts: List[str] = field(default_factory=list)  # distinct, first-seen order

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TypographyResult:
    """Typography breakdown inside a design validation result."""
    heading_font: FontValidationResult
    body_font: FontValidationResult
    pairing: FontPairingResult
    sizes: FontSizeValidationResult

    @property
    def valid(self) -> bool:
        return self.heading_font.valid and self.body_font.valid and self.pairing.valid and self.sizes.valid

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DensityCounts:
    """What the density scan found on one slide."""
    bullets: int = 0
    table_rows: int = 0
    words: int = 0
    has_table: bool = False
    max_nesting_depth: int = 0


@dataclass
class DensityValidationResult:
    valid: bool
    violations: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)  # never affect ``valid``
    counts: DensityCounts = field(default_factory=DensityCounts)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SplitResult:
    should_split: bool
    new_slides: List[SlideContent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "should_split": self.should_split,
            "new_slides": [slide.model_dump(mode="json") for slide in self.new_slides],
        }


@dataclass
class TruncationResult:
    body: str
    overflow: str = ""
    was_truncated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LayoutValidationResult:
    valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DesignValidationResult:
    """Aggregated judgment of one slide against one theme."""
    valid: bool
    color: ColorValidationResult
    text_contrast: ContrastResult
    typography: TypographyResult
    density: DensityValidationResult
    layout: LayoutValidationResult
    all_violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AutoFixResult:
    """Outcome of deterministic remediation.

    ``slides`` has one entry unless the slide was split; ``palette`` is only
    set when a color was changed.
    """
    fixed: bool
    changes: List[str] = field(default_factory=list)
    slides: List[SlideContent] = field(default_factory=list)
    palette: Optional[SlidePalette] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed": self.fixed,
            "changes": list(self.changes),
            "slides": [slide.model_dump(mode="json") for slide in self.slides],
            "palette": self.palette.model_dump(mode="json", exclude_none=True) if self.palette else None,
        }


@dataclass
class PaletteCheckResult:
    """Forbidden pairs plus text/background contrast for one palette."""
    valid: bool
    violations: List[str]
    text_contrast: ContrastResult

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TypographyValidationResult:
    """Font choices, pairing, sizes and (optionally) the deck font budget."""
    heading_font: FontValidationResult
    body_font: FontValidationResult
    pairing: FontPairingResult
    sizes: FontSizeValidationResult
    deck_fonts: Optional[DeckFontsResult]
    valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ThemeValidationResult:
    valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
