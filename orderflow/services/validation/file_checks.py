"""File-level checks run on raw bytes before any parsing."""

from __future__ import annotations

from pathlib import PurePath
from typing import List

from orderflow_io.workbook import OLE_SIGNATURE, ZIP_SIGNATURE

from .issues import ValidationIssue, ValidationResult, invalid_result, valid_result

VALID_EXTENSIONS = (".xls", ".xlsx", ".xlsm", ".xlsb")
MIN_FILE_SIZE = 512
LARGE_FILE_SIZE = 10 * 1024 * 1024


def validate_file_size(data: bytes, filename: str) -> ValidationResult:
    """Reject empty or tiny files; warn about very large ones."""

    size = len(data)
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    if size == 0:
        errors.append(ValidationIssue("file", "File is empty", filename))
    elif size < MIN_FILE_SIZE:
        errors.append(
            ValidationIssue(
                "file",
                f"File is too small ({size} bytes). This does not appear to be a valid Excel file.",
                filename,
            )
        )

    if size > LARGE_FILE_SIZE:
        warnings.append(
            ValidationIssue(
                "file",
                f"Large file ({size / 1024 / 1024:.1f} MB). Processing may take longer.",
                filename,
            )
        )

    return invalid_result(errors, warnings) if errors else valid_result(warnings)


def validate_file_extension(filename: str) -> ValidationResult:
    suffix = PurePath(filename).suffix.lower()
    if suffix not in VALID_EXTENSIONS:
        shown = suffix or "(none)"
        return invalid_result(
            [
                ValidationIssue(
                    "file",
                    f'Invalid file extension "{shown}". Expected: {", ".join(VALID_EXTENSIONS)}',
                    filename,
                )
            ]
        )
    return valid_result()


def validate_file_signature(data: bytes) -> ValidationResult:
    """Check the leading magic bytes for a ZIP or compound-binary container."""

    head = bytes(data[:4])
    if head not in (ZIP_SIGNATURE, OLE_SIGNATURE):
        return invalid_result(
            [
                ValidationIssue(
                    "file",
                    "File does not appear to be a valid Excel file. "
                    "The file format signature is not recognized.",
                )
            ]
        )
    return valid_result()


def validate_file(data: bytes, filename: str) -> ValidationResult:
    """Run every file-level check and collect all findings.

    The signature check is skipped for empty input since there is nothing to
    inspect.
    """

    result = valid_result()
    result.merge(validate_file_size(data, filename))
    result.merge(validate_file_extension(filename))
    if data:
        result.merge(validate_file_signature(data))
    return result


__all__ = [
    "LARGE_FILE_SIZE",
    "MIN_FILE_SIZE",
    "VALID_EXTENSIONS",
    "validate_file",
    "validate_file_extension",
    "validate_file_signature",
    "validate_file_size",
]
