"""
Slide Constraints - Error Types
================================

Exceptions raised by the leaf helpers of the constraint engine.

Validators never let these escape: malformed input is caught where it is
detected and reported as a violation string, so callers always receive a
complete result object they can render.
"""

from typing import Any, Dict, Optional


class ConstraintEngineError(Exception):
    """Base exception for constraint engine errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONSTRAINT_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_violation(self) -> str:
        """Render the error as a user-presentable violation string."""
        return self.message


class InvalidColorError(ConstraintEngineError):
    """A color value is not a parseable hex color."""

    def __init__(self, value: Any, role: Optional[str] = None):
        self.value = value
        self.role = role
        if role:
            message = f"Invalid color value for {role}: {value!r}"
        else:
            message = f"Invalid color value: {value!r}"
        super().__init__(
            message=message,
            error_code="INVALID_COLOR",
            details={"value": value, "role": role},
        )


class InvalidPolicyError(ConstraintEngineError):
    """A policy limit is negative, NaN or otherwise unusable."""

    def __init__(self, table: str, field: str, value: Any):
        super().__init__(
            message=f"Invalid {table} limit {field}={value!r}",
            error_code="INVALID_POLICY",
            details={"table": table, "field": field, "value": value},
        )
