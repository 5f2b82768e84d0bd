"""
Slide Constraints - Core Module
================================

Configuration, error types and logging setup for the constraint engine.
"""

from slide_constraints.core.config import (
    ConstraintPolicy,
    DensityLimits,
    TruncationLimits,
    ColorPolicy,
    TypographyPolicy,
    LayoutLimits,
    Settings,
    get_settings,
    get_policy,
)
from slide_constraints.core.errors import (
    ConstraintEngineError,
    InvalidColorError,
    InvalidPolicyError,
)
from slide_constraints.core.log_config import configure_logging

__all__ = [
    "ConstraintPolicy",
    "DensityLimits",
    "TruncationLimits",
    "ColorPolicy",
    "TypographyPolicy",
    "LayoutLimits",
    "Settings",
    "get_settings",
    "get_policy",
    "ConstraintEngineError",
    "InvalidColorError",
    "InvalidPolicyError",
    "configure_logging",
]
