"""`orderflow_io` top-level package exports the spreadsheet and archive helpers."""

# Module responsibilities:
# - Re-export cell, workbook and archive interfaces so consumers have a stable API surface.
# - Provide package version placeholder for future packaging.

from __future__ import annotations

from .archive import ARCHIVE_EXTENSION, build_archive, write_archive
from .cells import (
    CellAddress,
    CellAddressError,
    col_to_letter,
    format_cell_value,
    format_date,
    format_number,
    is_date_format,
    parse_cell_address,
)
from .workbook import (
    Sheet,
    SheetIndexError,
    Workbook,
    WorkbookFormatError,
    open_workbook,
)

__all__ = [
    "ARCHIVE_EXTENSION",
    "build_archive",
    "write_archive",
    "CellAddress",
    "CellAddressError",
    "col_to_letter",
    "format_cell_value",
    "format_date",
    "format_number",
    "is_date_format",
    "parse_cell_address",
    "Sheet",
    "SheetIndexError",
    "Workbook",
    "WorkbookFormatError",
    "open_workbook",
]

__version__ = "0.1.0"
