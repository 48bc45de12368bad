"""Validation module for shift rows."""

from recruitcrm.validation.validator import (
    ShiftRejectedError,
    ShiftValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "ShiftRejectedError",
    "ShiftValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
