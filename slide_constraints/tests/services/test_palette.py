"""
Slide Constraints - Palette Validation Tests
=============================================

Unit tests for forbidden color pairs and text contrast checks.
"""

import pytest

from slide_constraints.core.config import ColorPolicy, ConstraintPolicy, ForbiddenPair, HslRange
from slide_constraints.services.constraints.models import SlidePalette
from slide_constraints.services.constraints.palette import (
    validate_color_pair,
    validate_palette,
    validate_text_contrast,
)


# =============================================================================
# Color Pair Tests
# =============================================================================

class TestValidateColorPair:
    """Tests for single-pair forbidden region checks."""

    def test_red_green_is_forbidden(self):
        result = validate_color_pair("#FF0000", "#00FF00")
        assert not result.valid
        assert any("Color-blind inaccessible" in v for v in result.violations)

    def test_pair_check_is_symmetric(self):
        pairs = [("#FF0000", "#00FF00"), ("#E63946", "#1D3557"), ("#1E3A5F", "#2A9D8F")]
        for a, b in pairs:
            assert validate_color_pair(a, b).valid == validate_color_pair(b, a).valid

    def test_muted_red_and_blue_are_allowed(self):
        """Test that red-blue only applies at high saturation."""
        result = validate_color_pair("#B35959", "#5967B3")
        assert result.valid

    def test_saturated_red_and_blue_vibrate(self):
        result = validate_color_pair("#FF1A1A", "#1A3CFF")
        assert any("Vibration" in v for v in result.violations)

    def test_achromatic_colors_never_match(self):
        for gray in ("#000000", "#FFFFFF", "#808080"):
            assert validate_color_pair(gray, "#00FF00").valid
            assert validate_color_pair(gray, "#FF0000").valid

    def test_neon_pair(self):
        result = validate_color_pair("#FF00FF", "#00FFFF")
        assert any("Unprofessional" in v for v in result.violations)

    def test_violation_names_both_colors(self):
        result = validate_color_pair("ff0000", "#0F0")
        assert result.violations[0].startswith("Forbidden pair (#FF0000, #00FF00): ")

    def test_invalid_color_is_a_violation(self):
        result = validate_color_pair("#FF0000", "not-a-color")
        assert not result.valid
        assert result.violations == ["Invalid color value: 'not-a-color'"]

    def test_custom_forbidden_pair(self):
        policy = ConstraintPolicy(
            color=ColorPolicy(
                forbidden_pairs=[
                    ForbiddenPair(
                        name="teal-gold",
                        color1=HslRange(hue_ranges=[(160, 190)]),
                        color2=HslRange(hue_ranges=[(35, 50)]),
                        reason="House style",
                    )
                ]
            )
        )
        assert not validate_color_pair("#2A9D8F", "#E9C46A", policy=policy).valid
        assert validate_color_pair("#FF0000", "#00FF00", policy=policy).valid


# =============================================================================
# Palette Tests
# =============================================================================

class TestValidatePalette:
    """Tests for whole-palette validation."""

    def test_clean_palette_passes(self, clean_palette):
        result = validate_palette(clean_palette)
        assert result.valid
        assert result.violations == []

    def test_red_green_palette_reports_pair(self, traffic_light_palette):
        result = validate_palette(traffic_light_palette)

        assert not result.valid
        assert (
            "[primary/secondary] Forbidden pair (#FF0000, #00FF00): Color-blind inaccessible"
            in result.violations
        )

    def test_black_and_white_roles_add_nothing(self, traffic_light_palette):
        result = validate_palette(traffic_light_palette)
        role_tags = [v.split("]")[0] for v in result.violations]
        assert not any("background" in tag or "text" in tag for tag in role_tags)

    def test_missing_role_is_reported(self):
        palette = SlidePalette(primary="#1E3A5F", secondary="#2A9D8F", background="#FFFFFF", text="#222222")
        result = validate_palette(palette)
        assert result.violations == ["Missing required palette color: accent"]

    def test_invalid_role_value_is_reported(self, clean_palette):
        palette = clean_palette.model_copy(update={"accent": "#GG0000"})
        result = validate_palette(palette)
        assert result.violations == ["Invalid color value for accent: '#GG0000'"]

    def test_surface_is_checked_when_set(self, clean_palette):
        palette = clean_palette.model_copy(update={"primary": "#FF0000", "surface": "#00FF00"})
        result = validate_palette(palette)
        assert any(v.startswith("[primary/surface]") for v in result.violations)

    def test_palette_is_not_mutated(self, traffic_light_palette):
        before = traffic_light_palette.model_dump()
        validate_palette(traffic_light_palette)
        assert traffic_light_palette.model_dump() == before


# =============================================================================
# Text Contrast Tests
# =============================================================================

class TestValidateTextContrast:
    """Tests for WCAG AA text contrast."""

    def test_black_on_white(self):
        result = validate_text_contrast("#000000", "#FFFFFF")
        assert result.valid
        assert result.ratio == 21
        assert result.required == 4.5

    def test_gray_on_gray_fails(self):
        result = validate_text_contrast("#777777", "#999999")
        assert not result.valid
        assert result.ratio < 4.5

    def test_ratio_rounded_to_two_decimals(self):
        result = validate_text_contrast("#777777", "#FFFFFF")
        assert result.ratio == round(result.ratio, 2)

    def test_large_text_threshold(self):
        # ~4.48:1 fails normal text but passes large text
        assert not validate_text_contrast("#777777", "#FFFFFF").valid
        result = validate_text_contrast("#777777", "#FFFFFF", large_text=True)
        assert result.valid
        assert result.required == 3.0

    @pytest.mark.parametrize("text,background", [("oops", "#FFFFFF"), ("#000000", None)])
    def test_invalid_color_is_reported(self, text, background):
        result = validate_text_contrast(text, background)
        assert not result.valid
        assert result.ratio == 0.0
        assert result.error.startswith("Invalid color value for ")
