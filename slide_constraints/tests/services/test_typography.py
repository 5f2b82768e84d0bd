"""
Slide Constraints - Typography Tests
=====================================

Unit tests for font allow-list, pairing, size and deck font budget checks.
"""

import pytest

from slide_constraints.core.config import ConstraintPolicy, TypographyPolicy
from slide_constraints.services.constraints.models import FontSizes
from slide_constraints.services.constraints.typography import (
    levenshtein,
    suggest_font,
    validate_deck_fonts,
    validate_font_choice,
    validate_font_pairing,
    validate_font_sizes,
)


# =============================================================================
# Font Choice Tests
# =============================================================================

class TestValidateFontChoice:
    """Tests for the font allow-list."""

    def test_allowed_font(self):
        result = validate_font_choice("Inter")
        assert result.valid
        assert result.suggestion is None

    def test_case_and_spacing_insensitive(self):
        assert validate_font_choice("open  sans").valid
        assert validate_font_choice("PLAYFAIR DISPLAY").valid

    def test_banned_font_gets_suggestion(self):
        result = validate_font_choice("Comic Sans MS")
        assert not result.valid
        assert result.suggestion

    def test_known_serif_suggests_first_alphabetical_serif(self):
        result = validate_font_choice("Times New Roman")
        assert result.suggestion == "Garamond"

    def test_known_sans_suggests_first_alphabetical_sans(self):
        assert validate_font_choice("Calibri").suggestion == "Arial"

    def test_typo_suggests_closest_spelling(self):
        assert suggest_font("Robotto") == "Roboto"

    def test_name_heuristic(self):
        assert suggest_font("Acme Serif") == "Garamond"

    def test_unknown_font_falls_back(self):
        assert suggest_font("Qzx") == "Inter"

    def test_suggestion_is_always_allowed(self):
        for font in ("Comic Sans", "Papyrus", "Consolas", "Wingdings", "Times", "Oswald"):
            suggestion = validate_font_choice(font).suggestion
            assert validate_font_choice(suggestion).valid

    def test_custom_allow_list(self):
        policy = ConstraintPolicy(typography=TypographyPolicy(allowed_fonts=["Lora"], fallback_font="Lora"))
        assert validate_font_choice("Lora", policy=policy).valid
        assert not validate_font_choice("Inter", policy=policy).valid

    def test_levenshtein(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("Inter", "inter") == 0
        assert levenshtein("", "abc") == 3


# =============================================================================
# Pairing Tests
# =============================================================================

class TestValidateFontPairing:
    """Tests for heading/body pairing rules."""

    def test_serif_heading_sans_body(self):
        assert validate_font_pairing("Playfair Display", "Inter").valid

    def test_same_font_fails(self):
        result = validate_font_pairing("Inter", "inter")
        assert not result.valid
        assert "same font" in result.reason

    def test_two_display_fonts_fail(self):
        result = validate_font_pairing("Raleway", "Oswald")
        assert not result.valid
        assert "display" in result.reason

    def test_two_geometric_sans_fail(self):
        result = validate_font_pairing("Montserrat", "Poppins")
        assert not result.valid
        assert "too similar" in result.reason

    def test_two_humanist_sans_fail(self):
        assert not validate_font_pairing("Roboto", "Open Sans").valid

    def test_geometric_with_humanist_passes(self):
        assert validate_font_pairing("Montserrat", "Inter").valid

    def test_system_sans_pairs_with_anything(self):
        assert validate_font_pairing("Arial", "Roboto").valid

    def test_display_heading_with_sans_body(self):
        assert validate_font_pairing("Raleway", "Lato").valid


# =============================================================================
# Size Tests
# =============================================================================

class TestValidateFontSizes:
    """Tests for per-role size minimums."""

    def test_sizes_at_minimum_pass(self):
        sizes = FontSizes(heading=28, subheading=22, body=24, caption=14)
        assert validate_font_sizes(sizes).valid

    def test_one_violation_per_undersized_role(self):
        result = validate_font_sizes(FontSizes(heading=20, body=12, caption=14))
        assert not result.valid
        assert result.violations == [
            "heading font size 20pt is below minimum 28pt",
            "body font size 12pt is below minimum 24pt",
        ]

    def test_mapping_input(self):
        result = validate_font_sizes({"caption": 10.5, "footer": 6})
        assert result.violations == ["caption font size 10.5pt is below minimum 14pt"]

    def test_none_and_empty(self):
        assert validate_font_sizes(None).valid
        assert validate_font_sizes({}).valid

    @pytest.mark.parametrize("size", [0, -4, float("nan")])
    def test_invalid_size_is_reported(self, size):
        result = validate_font_sizes({"body": size})
        assert not result.valid
        assert "not a valid size" in result.violations[0]


# =============================================================================
# Deck Font Tests
# =============================================================================

class TestValidateDeckFonts:
    """Tests for the per-deck font budget."""

    def test_two_fonts_pass(self):
        result = validate_deck_fonts(["Playfair Display", "Inter", "Inter", "inter"])
        assert result.valid
        assert result.fonts == ["Playfair Display", "Inter"]

    def test_excess_fonts_are_listed(self):
        result = validate_deck_fonts(["Inter", "Georgia", "Lato", "Roboto"])
        assert not result.valid
        assert result.violations[0] == (
            "Deck uses 4 fonts (Inter, Georgia, Lato, Roboto). "
            "Maximum allowed is 2; remove Lato, Roboto."
        )

    def test_disallowed_font_in_deck(self):
        result = validate_deck_fonts(["Inter", "Papyrus"])
        assert not result.valid
        assert result.violations[0].startswith('Font "Papyrus" is not in the allowed list.')

    def test_empty_deck(self):
        assert validate_deck_fonts([]).valid
