"""
Slide Constraints - Auto-Fix Tests
===================================

Unit tests for deterministic slide remediation.
"""

import pytest

from slide_constraints.services.constraints.autofix import auto_fix_slide
from slide_constraints.services.constraints.color import rgb_to_hex
from slide_constraints.services.constraints.density import validate_slide_content
from slide_constraints.services.constraints.models import SlideContent, SlidePalette, Theme
from slide_constraints.services.constraints.palette import validate_text_contrast


class TestAutoFixSlide:
    """Tests for auto_fix_slide."""

    def test_nothing_to_fix(self, simple_slide, clean_theme):
        result = auto_fix_slide(simple_slide, clean_theme)

        assert not result.fixed
        assert result.changes == []
        assert result.slides == [simple_slide]
        assert result.palette is None

    def test_low_contrast_recolors_text(self, simple_slide, gray_palette):
        theme = Theme(palette=gray_palette, heading_font="Georgia", body_font="Inter")
        result = auto_fix_slide(simple_slide, theme)

        assert result.fixed
        assert result.palette.text == "#000000"
        assert len(result.changes) == 1
        assert result.changes[0].startswith("Changed text color from #777777 to #000000 (contrast ")
        assert validate_text_contrast(result.palette.text, result.palette.background).valid

    def test_original_palette_untouched(self, simple_slide, gray_palette):
        theme = Theme(palette=gray_palette)
        result = auto_fix_slide(simple_slide, theme)

        assert gray_palette.text == "#777777"
        assert result.palette is not gray_palette
        assert result.palette.primary == gray_palette.primary

    def test_dark_background_gets_white_text(self, simple_slide, clean_palette):
        palette = clean_palette.model_copy(update={"background": "#1E3A5F", "text": "#2A4A6F"})
        result = auto_fix_slide(simple_slide, Theme(palette=palette))
        assert result.palette.text == "#FFFFFF"

    @pytest.mark.parametrize("background", ["#000000", "#FFFFFF", "#777777", "#808080", "#FF0000", "#0000FF"])
    def test_contrast_fix_always_passes(self, simple_slide, background):
        palette = SlidePalette(
            primary="#1E3A5F",
            secondary="#2A9D8F",
            accent="#E9C46A",
            background=background,
            text=background,
        )
        result = auto_fix_slide(simple_slide, Theme(palette=palette))
        assert validate_text_contrast(result.palette.text, result.palette.background).valid

    def test_contrast_fix_over_gray_ramp(self, simple_slide, clean_palette):
        for level in range(0, 256, 5):
            gray = rgb_to_hex(level, level, level)
            palette = clean_palette.model_copy(update={"background": gray, "text": gray})
            result = auto_fix_slide(simple_slide, Theme(palette=palette))
            assert validate_text_contrast(result.palette.text, gray).valid

    def test_invalid_background_needs_manual_fix(self, simple_slide, clean_palette):
        palette = clean_palette.model_copy(update={"background": "transparent"})
        result = auto_fix_slide(simple_slide, Theme(palette=palette))

        assert result.fixed
        assert result.palette is None
        assert result.changes[0].startswith("[Manual fix needed] Cannot fix text contrast")

    def test_dense_slide_is_split(self, six_bullet_slide, clean_theme):
        result = auto_fix_slide(six_bullet_slide, clean_theme)

        assert result.fixed
        assert result.changes == ["Split overcrowded slide into 2 slides"]
        assert len(result.slides) == 2
        assert result.palette is None

    def test_single_oversized_bullet_is_split(self, clean_theme):
        slide = SlideContent(title="Wall", body="- " + " ".join(["word"] * 120), speaker_notes="Intro")
        result = auto_fix_slide(slide, clean_theme)

        assert result.changes == ["Split overcrowded slide into 2 slides"]
        assert result.slides[0].body.startswith("- word")
        assert result.slides[0].speaker_notes == "Intro"
        assert slide.body.startswith("- word")

    def test_unsplittable_row_is_truncated(self, clean_theme):
        body = "| A | B |\n|---|---|\n| " + "word " * 90 + "| x |"
        slide = SlideContent(title="Wall", body=body, speaker_notes="Intro")
        result = auto_fix_slide(slide, clean_theme)

        assert result.changes == ["Truncated overcrowded slide; moved overflow to speaker notes"]
        fixed = result.slides[0]
        assert fixed.body == "| A | B |\n|---|---|"
        assert fixed.speaker_notes.startswith("Intro\n\nAdditional details: word word")
        assert fixed.speaker_notes.endswith("word | x")

    def test_split_slide_still_too_dense_is_truncated(self, clean_theme):
        body = "| A | B |\n|---|---|\n| " + "word " * 90 + "| x |\n| r2 | y |"
        result = auto_fix_slide(SlideContent(title="T", body=body), clean_theme)

        assert result.changes == [
            "Split overcrowded slide into 2 slides",
            "Truncated split slide 1; moved overflow to speaker notes",
        ]
        assert result.slides[0].body == "| A | B |\n|---|---|"
        assert result.slides[0].speaker_notes.startswith("Additional details: word")
        assert result.slides[1].body == "| A | B |\n|---|---|\n| r2 | y |"

    @pytest.mark.parametrize(
        "body",
        [
            "- a\n  - b\n  - c\n  - d\n  - e\n- f",
            "- " + "word " * 90 + "\n- short",
            "| A | B |\n|---|---|\n| " + "word " * 90 + "| x |\n| r2 | y |",
            "\n".join(f"- {' '.join(['word'] * 30)}" for _ in range(7)),
        ],
    )
    def test_every_fixed_slide_passes_density(self, body, clean_theme):
        result = auto_fix_slide(SlideContent(title="T", body=body), clean_theme)

        assert result.fixed
        for fixed in result.slides:
            assert validate_slide_content(fixed).valid, fixed.body

    def test_forbidden_pairs_are_reported_not_fixed(self, simple_slide, traffic_light_palette):
        result = auto_fix_slide(simple_slide, Theme(palette=traffic_light_palette))

        assert result.fixed
        assert result.palette is None
        assert all(change.startswith("[Manual fix needed] ") for change in result.changes)
        assert any("Color-blind inaccessible" in change for change in result.changes)

    def test_change_order(self, six_bullet_slide, gray_palette):
        palette = gray_palette.model_copy(update={"primary": "#FF0000", "secondary": "#00FF00"})
        result = auto_fix_slide(six_bullet_slide, Theme(palette=palette))

        assert result.changes[0].startswith("Split overcrowded slide")
        assert result.changes[1].startswith("Changed text color")
        assert result.changes[2].startswith("[Manual fix needed] ")

    def test_to_dict(self, six_bullet_slide, gray_palette):
        data = auto_fix_slide(six_bullet_slide, Theme(palette=gray_palette)).to_dict()

        assert data["fixed"] is True
        assert len(data["slides"]) == 2
        assert data["palette"]["text"] == "#000000"
