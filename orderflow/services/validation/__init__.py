"""Pre-flight validation of spreadsheet files.

Two passes: cheap file-level checks on raw bytes, then structure checks on
the parsed workbook against the selected source.
"""

from .file_checks import (
    LARGE_FILE_SIZE,
    MIN_FILE_SIZE,
    VALID_EXTENSIONS,
    validate_file,
    validate_file_extension,
    validate_file_signature,
    validate_file_size,
)
from .issues import ValidationIssue, ValidationResult, invalid_result, valid_result
from .runner import validate_workbook_file
from .structure import (
    parse_workbook,
    validate_detail_table,
    validate_header_cells,
    validate_sheet_exists,
)

__all__ = [
    "LARGE_FILE_SIZE",
    "MIN_FILE_SIZE",
    "VALID_EXTENSIONS",
    "ValidationIssue",
    "ValidationResult",
    "invalid_result",
    "parse_workbook",
    "valid_result",
    "validate_detail_table",
    "validate_file",
    "validate_file_extension",
    "validate_file_signature",
    "validate_file_size",
    "validate_header_cells",
    "validate_sheet_exists",
    "validate_workbook_file",
]
