"""Extraction and generation engine."""

from .api import merge_user_input, process
from .extract import (
    apply_replacements,
    extract,
    extract_detail,
    extract_from_workbook,
    extract_header,
)
from .models import ExtractedData, ProcessResult
from .render import (
    archive_name,
    expand,
    normalize_date,
    normalize_date_fields,
    pad_detail_records,
    render_file,
)
from .validate import missing_fields

__all__ = [
    "ExtractedData",
    "ProcessResult",
    "apply_replacements",
    "archive_name",
    "expand",
    "extract",
    "extract_detail",
    "extract_from_workbook",
    "extract_header",
    "merge_user_input",
    "missing_fields",
    "normalize_date",
    "normalize_date_fields",
    "pad_detail_records",
    "process",
    "render_file",
]
