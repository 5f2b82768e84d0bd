"""
Slide Constraints - Constraints Service Tests
==============================================

Unit tests for the ConstraintsService facade.
"""

from slide_constraints.core.config import ConstraintPolicy, DensityLimits
from slide_constraints.services.constraints.models import FontSizes, LayoutConfig, SlideContent, Theme
from slide_constraints.services.constraints.service import ConstraintsService, get_constraints_service


class TestConstraintsService:
    """Tests for ConstraintsService."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = ConstraintsService()

    def test_validate_palette_combines_pairs_and_contrast(self, traffic_light_palette):
        palette = traffic_light_palette.model_copy(update={"text": "#F0F0F0"})
        result = self.service.validate_palette(palette)

        assert not result.valid
        assert not result.text_contrast.valid
        assert result.violations[-1].startswith("Text/background contrast ratio ")
        assert result.violations[-1].endswith("is below WCAG AA minimum 4.5:1")

    def test_validate_palette_clean(self, clean_palette):
        result = self.service.validate_palette(clean_palette)
        assert result.valid
        assert result.violations == []

    def test_validate_typography(self):
        result = self.service.validate_typography(
            "Papyrus",
            "Inter",
            all_fonts=["Papyrus", "Inter", "Lato"],
            sizes=FontSizes(heading=20),
        )

        assert not result.valid
        assert result.violations[0].startswith('Heading font "Papyrus" not allowed. Suggested: "')
        assert "heading font size 20pt is below minimum 28pt" in result.violations
        assert result.deck_fonts is not None and not result.deck_fonts.valid

    def test_validate_typography_without_deck(self):
        result = self.service.validate_typography("Playfair Display", "Inter")
        assert result.valid
        assert result.deck_fonts is None

    def test_density_split_and_truncate(self, six_bullet_slide):
        assert not self.service.validate_density(six_bullet_slide).valid
        assert len(self.service.suggest_split(six_bullet_slide).new_slides) == 2
        assert self.service.truncate(six_bullet_slide.body).was_truncated
        assert not self.service.passes_density_check(six_bullet_slide.body)

    def test_validate_layout(self):
        assert self.service.validate_layout(None).valid
        assert not self.service.validate_layout(LayoutConfig(columns=5)).valid

    def test_validate_theme(self, clean_theme):
        assert self.service.validate_theme(clean_theme).valid

    def test_validate_theme_reports_everything(self, traffic_light_palette):
        theme = Theme(
            palette=traffic_light_palette.model_copy(update={"text": "#FAFAFA"}),
            heading_font="Inter",
            body_font="Inter",
        )
        result = self.service.validate_theme(theme)

        assert not result.valid
        assert result.violations[0].startswith('Heading and body use the same font "Inter"')
        assert result.violations[1].startswith("Text/background contrast ratio")
        assert any("Color-blind inaccessible" in v for v in result.violations)

    def test_validate_slide_and_auto_fix(self, six_bullet_slide, clean_theme):
        assert not self.service.validate_slide(six_bullet_slide, clean_theme).valid
        assert self.service.auto_fix_slide(six_bullet_slide, clean_theme).fixed

    def test_policy_is_applied(self, six_bullet_slide, clean_theme):
        service = ConstraintsService(policy=ConstraintPolicy(density=DensityLimits(max_bullets=8)))

        assert service.validate_density(six_bullet_slide).valid
        assert service.validate_slide(six_bullet_slide, clean_theme).valid
        assert not service.auto_fix_slide(six_bullet_slide, clean_theme).fixed

    def test_singleton(self):
        assert get_constraints_service() is get_constraints_service()

    def test_deck_workflow(self, clean_theme):
        """Test validating and fixing every slide of a small deck."""
        deck = [
            SlideContent(title="Intro", body="Welcome"),
            SlideContent(title="Plan", body="\n".join(f"- Step {n}" for n in range(7))),
            SlideContent(title="Numbers", body="| Q | Rev |\n|---|---|\n| Q1 | 10 |"),
        ]
        fixed_slides = []
        for slide in deck:
            fixed_slides.extend(self.service.auto_fix_slide(slide, clean_theme).slides)

        assert len(fixed_slides) == 4
        assert all(self.service.validate_slide(s, clean_theme).valid for s in fixed_slides)
