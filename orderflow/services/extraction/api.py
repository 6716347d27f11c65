"""Public API for the extraction engine."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from orderflow.config import ResultConfig, SourceConfig
from orderflow.core.errors import DataValidationError, OrderFlowError, wrap_error
from orderflow.services.validation import ValidationIssue, validate_workbook_file

from .extract import extract_from_workbook
from .models import ExtractedData, ProcessResult, Record
from .render import (
    archive_name,
    normalize_date_fields,
    pad_detail_records,
    render_file,
)
from .validate import missing_fields

LOGGER = logging.getLogger(__name__)


def merge_user_input(header: Mapping[str, str], user_input: Optional[Mapping[str, Optional[str]]]) -> Record:
    """Overlay user-supplied values on the header; user input wins."""

    merged: Record = dict(header)
    for name, value in (user_input or {}).items():
        if value is not None:
            merged[name] = str(value)
    return merged


def _failure(error: OrderFlowError, warnings: List[ValidationIssue]) -> ProcessResult:
    return ProcessResult(success=False, error=error, warnings=warnings)


def _missing_fields_error(missing: List[str]) -> DataValidationError:
    return DataValidationError(
        f"Missing header properties: {', '.join(missing)}",
        [
            f"Provide values for: {', '.join(missing)}",
            "Or add a defaultValue for these fields in the result configuration",
        ],
        missing_fields=missing,
    )


def process(
    data: bytes,
    source: SourceConfig,
    result: ResultConfig,
    user_input: Optional[Mapping[str, Optional[str]]],
    filename: str,
) -> ProcessResult:
    """Validate, extract, merge, check and render one spreadsheet.

    Args:
        data: Raw spreadsheet bytes.
        source: Source configuration describing where values live.
        result: Result configuration describing the output files.
        user_input: Values typed in by the user; they override extracted
            and default values.
        filename: Original file name, used for the extension check.

    Returns:
        A :class:`ProcessResult`. Failures never raise; they come back with
        ``success=False`` and a categorized ``error``. Validation warnings are
        returned in both cases.
    """

    warnings: List[ValidationIssue] = []
    try:
        report = validate_workbook_file(data, filename, source)
        warnings.extend(report.warnings)
        if not report.valid or report.workbook is None:
            error = report.to_error()
            LOGGER.info("Validation failed for %s: %s", filename, error.details)
            return _failure(error, warnings)

        extracted = extract_from_workbook(report.workbook, source)

        header = merge_user_input(extracted.header, user_input)
        normalize_date_fields(header, result.header.properties)

        missing = missing_fields(header, result.required_header_fields())
        if missing:
            LOGGER.info("Missing required header fields for %s: %s", source.name, missing)
            return _failure(_missing_fields_error(missing), warnings)

        header_text = render_file(result.separator, result.header, [header])
        detail_text = render_file(
            result.separator,
            result.detail,
            pad_detail_records(extracted.detail, result.detail),
        )
        name = archive_name(result.base_name, header, source.name)
    except Exception as exc:  # noqa: BLE001 - the engine boundary never leaks raw exceptions
        error = wrap_error(exc, "Processing failed")
        LOGGER.error("Processing %s failed: %s", filename, error.user_message, exc_info=exc)
        return _failure(error, warnings)

    LOGGER.info("Generated %s (%s detail rows)", name, len(extracted.detail))
    return ProcessResult(
        success=True,
        header_text=header_text,
        detail_text=detail_text,
        archive_name=name,
        extracted_data=ExtractedData(header=header, detail=extracted.detail),
        warnings=warnings,
    )


__all__ = ["merge_user_input", "process"]
