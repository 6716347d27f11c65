"""Structure-level checks that need a parsed workbook."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from orderflow.config import SourceConfig
from orderflow.core.errors import ErrorCategory
from orderflow_io import (
    CellAddressError,
    Sheet,
    Workbook,
    WorkbookFormatError,
    open_workbook,
    parse_cell_address,
)

from .issues import ValidationIssue, ValidationResult, invalid_result, valid_result

LOGGER = logging.getLogger(__name__)

_FRIENDLY_PARSE_ERRORS = {
    "encrypted": "Excel file is password-protected. Please remove the password and try again.",
    "corrupt": "File appears to be corrupted or in an unsupported format.",
}


def parse_workbook(data: bytes) -> Tuple[Optional[Workbook], Optional[ValidationIssue]]:
    """Parse bytes into a workbook, translating failures into an issue."""

    try:
        workbook = open_workbook(data)
    except WorkbookFormatError as exc:
        if exc.kind in _FRIENDLY_PARSE_ERRORS:
            message = _FRIENDLY_PARSE_ERRORS[exc.kind]
        elif exc.kind == "unsupported":
            message = f"Unsupported Excel format: {exc}"
        else:
            message = f"Failed to read Excel file: {exc}"
        LOGGER.warning("Workbook parse failed: %s", exc)
        return None, ValidationIssue("file", message)

    if not workbook.sheet_names:
        return None, ValidationIssue("file", "Excel file contains no sheets")
    return workbook, None


def validate_sheet_exists(workbook: Workbook, sheet_index: int, source_name: str) -> ValidationResult:
    names = workbook.sheet_names
    if 0 <= sheet_index < len(names):
        return valid_result()
    return invalid_result(
        [
            ValidationIssue(
                "sheetIndex",
                f"Sheet index {sheet_index} does not exist. "
                f"File has {len(names)} sheet(s): {', '.join(names)}",
                f"Source: {source_name}",
                ErrorCategory.EXTRACTION,
            )
        ],
        [
            ValidationIssue(
                "sheetIndex",
                "Verify the Excel file has the expected sheet structure",
                category=ErrorCategory.EXTRACTION,
            )
        ],
    )


def _locator_issue(field_name: str, locator: str, exc: CellAddressError) -> ValidationIssue:
    return ValidationIssue(
        field_name,
        f"Invalid cell locator {locator!r} in configuration: {exc}",
        locator,
        ErrorCategory.CONFIG,
    )


def validate_header_cells(sheet: Sheet, source: SourceConfig) -> ValidationResult:
    """Warn about empty header cells; they may still be defaulted later."""

    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    for prop in source.header:
        try:
            empty = sheet.is_blank(prop.locator)
        except CellAddressError as exc:
            errors.append(_locator_issue(prop.name, prop.locator, exc))
            continue
        if empty:
            warnings.append(
                ValidationIssue(
                    prop.name,
                    f"Cell {prop.locator} is empty (expected: {prop.name})",
                    prop.locator,
                    ErrorCategory.EXTRACTION,
                )
            )
    return invalid_result(errors, warnings) if errors else valid_result(warnings)


def validate_detail_table(sheet: Sheet, source: SourceConfig) -> ValidationResult:
    """Check the table anchor, the expected column labels and the first data row."""

    detail = source.detail
    try:
        anchor = parse_cell_address(detail.locator)
    except CellAddressError as exc:
        return invalid_result([_locator_issue("detail.locator", detail.locator, exc)])

    if sheet.read_cell_by_index(anchor.row, anchor.col) == "":
        return invalid_result(
            [
                ValidationIssue(
                    "detail.locator",
                    f"Table header cell {detail.locator} is empty. Expected table to start here.",
                    detail.locator,
                    ErrorCategory.EXTRACTION,
                )
            ]
        )

    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    found = sheet.read_header_labels(anchor)
    missing = [prop.locator for prop in detail.properties if prop.locator not in found]
    if missing:
        warnings.append(
            ValidationIssue(
                "columns",
                f"Expected column(s) not found: {', '.join(missing)}. Found: {', '.join(found)}",
                ", ".join(missing),
                ErrorCategory.EXTRACTION,
            )
        )

    first_data = sheet.read_cell_by_index(anchor.row + 1, anchor.col)
    if first_data.strip() == "" or (detail.end_value is not None and first_data == detail.end_value):
        errors.append(
            ValidationIssue(
                "detail",
                "Table appears to have no data rows",
                f"row {anchor.row + 2}",
                ErrorCategory.EXTRACTION,
            )
        )

    return invalid_result(errors, warnings) if errors else valid_result(warnings)


__all__ = [
    "parse_workbook",
    "validate_detail_table",
    "validate_header_cells",
    "validate_sheet_exists",
]
