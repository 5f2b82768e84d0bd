"""
Design Constraint Engine

Independent validators composed by one orchestration function:

1. Color: forbidden HSL-region pairs and WCAG text contrast
2. Typography: allow-list, pairing, size minimums, deck font budget
3. Density: bullet / word / table-row limits, splitting and truncation
4. Layout: columns, font size variety, color variety, image overlays

Workflow:
1. validate_slide_design(slide, theme) -> ordered violations list
2. auto_fix_slide(slide, theme) -> split / recolor / manual-fix log
"""

# Models
from .models import (
    SlideType,
    SlideContent,
    SlidePalette,
    FontSizes,
    LayoutConfig,
    Theme,
    ColorValidationResult,
    ContrastResult,
    FontValidationResult,
    FontPairingResult,
    FontSizeValidationResult,
    DeckFontsResult,
    TypographyResult,
    DensityCounts,
    DensityValidationResult,
    SplitResult,
    TruncationResult,
    LayoutValidationResult,
    DesignValidationResult,
    AutoFixResult,
    PaletteCheckResult,
    TypographyValidationResult,
    ThemeValidationResult,
)

# Color science
from .color import (
    normalize_hex,
    is_valid_hex,
    hex_to_rgb,
    rgb_to_hex,
    hex_to_hsl,
    hsl_to_hex,
    rgb_to_lab,
    delta_e,
    luminance,
    contrast_ratio,
    best_text_color,
)

# Validators
from .palette import validate_color_pair, validate_palette, validate_text_contrast
from .typography import (
    suggest_font,
    validate_font_choice,
    validate_font_pairing,
    validate_font_sizes,
    validate_deck_fonts,
)
from .density import (
    LineKind,
    BlockKind,
    classify_line,
    parse_blocks,
    count_words,
    validate_slide_content,
    suggest_split,
)
from .truncation import truncate_to_limits, passes_density_check
from .layout import validate_layout
from .validator import validate_slide_design
from .autofix import auto_fix_slide

# Service
from .service import ConstraintsService, get_constraints_service

__all__ = [
    # Models
    "SlideType",
    "SlideContent",
    "SlidePalette",
    "FontSizes",
    "LayoutConfig",
    "Theme",
    "ColorValidationResult",
    "ContrastResult",
    "FontValidationResult",
    "FontPairingResult",
    "FontSizeValidationResult",
    "DeckFontsResult",
    "TypographyResult",
    "DensityCounts",
    "DensityValidationResult",
    "SplitResult",
    "TruncationResult",
    "LayoutValidationResult",
    "DesignValidationResult",
    "AutoFixResult",
    "PaletteCheckResult",
    "TypographyValidationResult",
    "ThemeValidationResult",
    # Color science
    "normalize_hex",
    "is_valid_hex",
    "hex_to_rgb",
    "rgb_to_hex",
    "hex_to_hsl",
    "hsl_to_hex",
    "rgb_to_lab",
    "delta_e",
    "luminance",
    "contrast_ratio",
    "best_text_color",
    # Validators
    "validate_color_pair",
    "validate_palette",
    "validate_text_contrast",
    "suggest_font",
    "validate_font_choice",
    "validate_font_pairing",
    "validate_font_sizes",
    "validate_deck_fonts",
    "LineKind",
    "BlockKind",
    "classify_line",
    "parse_blocks",
    "count_words",
    "validate_slide_content",
    "suggest_split",
    "truncate_to_limits",
    "passes_density_check",
    "validate_layout",
    "validate_slide_design",
    "auto_fix_slide",
    # Service
    "ConstraintsService",
    "get_constraints_service",
]
