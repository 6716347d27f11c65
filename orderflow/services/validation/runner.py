"""Compose file-level and structure-level validation passes."""

from __future__ import annotations

import logging

from orderflow.config import SourceConfig

from .file_checks import validate_file
from .issues import ValidationResult, valid_result
from .structure import (
    parse_workbook,
    validate_detail_table,
    validate_header_cells,
    validate_sheet_exists,
)

LOGGER = logging.getLogger(__name__)


def validate_workbook_file(data: bytes, filename: str, source: SourceConfig) -> ValidationResult:
    """Validate spreadsheet bytes against a source configuration.

    The file-level pass runs first and short-circuits the structure pass on
    failure. Within a pass, findings accumulate. On a successful parse the
    workbook is attached to the result for reuse.
    """

    result = valid_result()
    result.merge(validate_file(data, filename))
    if not result.valid:
        LOGGER.info("File checks rejected %s: %s", filename, [str(e) for e in result.errors])
        return result

    workbook, parse_issue = parse_workbook(data)
    if parse_issue is not None:
        result.errors.append(parse_issue)
        result.valid = False
        return result
    result.workbook = workbook

    sheet_result = validate_sheet_exists(workbook, source.sheet_index, source.name)
    result.merge(sheet_result)
    if not sheet_result.valid:
        return result

    sheet = workbook.sheet(source.sheet_index)
    result.merge(validate_header_cells(sheet, source))
    result.merge(validate_detail_table(sheet, source))

    for warning in result.warnings:
        LOGGER.warning("%s: %s", filename, warning.message)
    return result


__all__ = ["validate_workbook_file"]
