"""Validation result containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from orderflow.core.errors import ErrorCategory, OrderFlowError, error_for_category
from orderflow_io import Workbook


@dataclass(slots=True)
class ValidationIssue:
    """A single error or warning about the input file."""

    field: str
    message: str
    value: Optional[str] = None
    category: ErrorCategory = ErrorCategory.FILE_FORMAT

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ValidationResult:
    """Outcome of one or more validation passes.

    ``workbook`` is set once the bytes have been parsed so the engine can
    reuse it instead of parsing again.
    """

    valid: bool = True
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    workbook: Optional[Workbook] = None

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold ``other`` into this result and return self."""

        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.valid = self.valid and other.valid and not self.errors
        if other.workbook is not None:
            self.workbook = other.workbook
        return self

    def to_error(self) -> OrderFlowError:
        """Summarize the errors as a categorized exception.

        The category is taken from the first error issue.
        """

        category = self.errors[0].category if self.errors else ErrorCategory.UNKNOWN
        details = "; ".join(issue.message for issue in self.errors) or "validation failed"
        return error_for_category(category, details)


def valid_result(warnings: Optional[List[ValidationIssue]] = None) -> ValidationResult:
    return ValidationResult(valid=True, warnings=list(warnings or []))


def invalid_result(
    errors: List[ValidationIssue],
    warnings: Optional[List[ValidationIssue]] = None,
) -> ValidationResult:
    return ValidationResult(valid=False, errors=list(errors), warnings=list(warnings or []))


__all__ = ["ValidationIssue", "ValidationResult", "invalid_result", "valid_result"]
