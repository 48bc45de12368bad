"""Validation of a day's shift rows before they are committed.

Every row saved into the shift history passes through ShiftValidator
first; a day with any error is rejected as a whole.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from recruitcrm.domain.models import ShiftRecord

logger = logging.getLogger(__name__)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    SCORE_EXCEEDED = "score_exceeded"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    DATE_MISMATCH = "date_mismatch"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    recruiter_id: Optional[str] = None
    row: Optional[int] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.recruiter_id:
            parts.append(f"Recruiter {self.recruiter_id}:")
        parts.append(self.message)
        if self.row is not None:
            parts.append(f"(row {self.row})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a day's rows."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type is error_type]


class ShiftRejectedError(Exception):
    """Raised when a day's rows fail validation; nothing is written."""

    def __init__(self, result: ValidationResult):
        self.result = result
        summary = "; ".join(str(e) for e in result.errors) or "invalid shift rows"
        super().__init__(summary)


class ShiftValidator:
    """Validates the shift rows of a single day.

    Example:
        >>> validator = ShiftValidator()
        >>> result = validator.validate_day("2025-08-29", rows)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate_day(self, date_iso: str, rows: Iterable[ShiftRecord]) -> ValidationResult:
        """Validate all rows for one day.

        Args:
            date_iso: The day being saved.
            rows: Shift rows for that day.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        seen: dict[str, int] = {}

        for index, row in enumerate(rows):
            if not row.recruiter_id:
                result.add_warning(f"Row {index} has no recruiter and was skipped")
                continue

            self._validate_date(date_iso, row, index, result)
            self._validate_score(row, index, result)

            if row.recruiter_id in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_ASSIGNMENT,
                        message=f"Already assigned on {date_iso}",
                        recruiter_id=row.recruiter_id,
                        row=index,
                        details={"first_row": seen[row.recruiter_id]},
                    )
                )
            else:
                seen[row.recruiter_id] = index

        if not result.is_valid:
            logger.info(
                "Rejected %s: %d error(s)", date_iso, len(result.errors)
            )
        return result

    def _validate_date(
        self,
        date_iso: str,
        row: ShiftRecord,
        index: int,
        result: ValidationResult,
    ) -> None:
        if row.date_iso != date_iso:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DATE_MISMATCH,
                    message=f"Row dated {row.date_iso or '(none)'}, expected {date_iso}",
                    recruiter_id=row.recruiter_id,
                    row=index,
                )
            )

    def _validate_score(
        self,
        row: ShiftRecord,
        index: int,
        result: ValidationResult,
    ) -> None:
        score = row.score or 0
        if row.counter_total > score:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SCORE_EXCEEDED,
                    message=(
                        f"Box counters total {row.counter_total} "
                        f"but score is {score}"
                    ),
                    recruiter_id=row.recruiter_id,
                    row=index,
                    details={"counters": row.counter_total, "score": score},
                )
            )
