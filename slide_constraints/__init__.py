"""
Slide Constraints
=================

Deterministic design constraint engine for generated slide decks: color
palette and contrast rules, typography rules, content density limits with
splitting and truncation, layout complexity limits, and auto-fix.
"""

__version__ = "0.1.0"
