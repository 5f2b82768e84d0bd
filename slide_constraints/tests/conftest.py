"""
Slide Constraints - Pytest Configuration
=========================================

Shared fixtures and configuration for all tests.
"""

import os

import pytest

# Tests always run against the built-in policy, never a developer's .env
for _key in list(os.environ):
    if _key.startswith("SLIDE_CONSTRAINTS_"):
        del os.environ[_key]

from slide_constraints.core.config import get_settings
from slide_constraints.services.constraints.models import (
    FontSizes,
    SlideContent,
    SlidePalette,
    Theme,
)


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset the cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Palettes and Themes
# =============================================================================

@pytest.fixture
def clean_palette() -> SlidePalette:
    """Navy/teal palette with no forbidden pairs and AA contrast."""
    return SlidePalette(
        primary="#1E3A5F",
        secondary="#2A9D8F",
        accent="#E9C46A",
        background="#FFFFFF",
        text="#222222",
    )


@pytest.fixture
def traffic_light_palette() -> SlidePalette:
    return SlidePalette(
        text="#000000",
        background="#FFFFFF",
        primary="#FF0000",
        secondary="#00FF00",
        accent="#0000FF",
    )


@pytest.fixture
def gray_palette() -> SlidePalette:
    """Benign colors with unreadable gray-on-gray text."""
    return SlidePalette(
        primary="#1E3A5F",
        secondary="#2A9D8F",
        accent="#E9C46A",
        background="#999999",
        text="#777777",
    )


@pytest.fixture
def clean_theme(clean_palette: SlidePalette) -> Theme:
    return Theme(
        palette=clean_palette,
        heading_font="Playfair Display",
        body_font="Inter",
        sizes=FontSizes(heading=36, body=24, caption=14),
    )


# =============================================================================
# Slides
# =============================================================================

@pytest.fixture
def simple_slide() -> SlideContent:
    return SlideContent(
        title="Quarterly Results",
        body="- Revenue up 12%\n- Churn down to 3%\n- Two new regions",
    )


@pytest.fixture
def six_bullet_slide() -> SlideContent:
    return SlideContent(
        title="Roadmap",
        body="\n".join(f"- Item {n}" for n in range(1, 7)),
    )


def make_table(rows: int, header: str = "| Region | Revenue |") -> str:
    """Markdown table with ``rows`` data rows."""
    lines = [header, "|---|---|"]
    lines.extend(f"| R{n} | {n * 10} |" for n in range(1, rows + 1))
    return "\n".join(lines)


@pytest.fixture
def table_factory():
    return make_table
