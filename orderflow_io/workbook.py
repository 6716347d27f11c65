"""Workbook access layer over openpyxl and xlrd."""

# Module responsibilities:
# - Open raw spreadsheet bytes with the backend matching the container signature.
# - Expose sheet-level reads by A1 address and by anchored table.
# - Hide backend differences (date detection, empty cells, value types) behind one API.

from __future__ import annotations

import io
import zipfile
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import openpyxl
import xlrd
from openpyxl.utils.datetime import from_excel

from .cells import CellAddress, format_cell_value, is_date_format, parse_cell_address
from .utils.log import get_logger

logger = get_logger("workbook")

ZIP_SIGNATURE = b"PK\x03\x04"
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0"

# Directory entry name of an encrypted OOXML package inside an OLE container.
_ENCRYPTED_STREAM = "EncryptedPackage".encode("utf-16-le")

RawCell = Tuple[Any, Optional[str]]
TableRow = Dict[str, str]


class WorkbookFormatError(ValueError):
    """Raised when bytes cannot be opened as a workbook.

    ``kind`` is one of ``encrypted``, ``corrupt``, ``unsupported`` or
    ``unreadable``.
    """

    def __init__(self, message: str, kind: str = "unreadable") -> None:
        super().__init__(message)
        self.kind = kind


class SheetIndexError(IndexError):
    """Raised when a sheet index falls outside the workbook."""


class Sheet(ABC):
    """Backend-neutral worksheet with cell and table reads."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def _raw_cell(self, row: int, col: int) -> RawCell:
        """Return ``(value, number_format)`` for 0-based coordinates."""

    def _serial_converter(self, number_format: Optional[str]) -> Optional[Callable[[Any], Optional[date]]]:
        return None

    def read_cell_by_index(self, row: int, col: int) -> str:
        """Read a cell by 0-based coordinates as a canonical string."""

        if row < 0 or col < 0:
            return ""
        value, number_format = self._raw_cell(row, col)
        return format_cell_value(value, self._serial_converter(number_format))

    def read_cell(self, address: str) -> str:
        """Read a cell by A1 address (e.g. ``"B3"``)."""

        coords = parse_cell_address(address)
        return self.read_cell_by_index(coords.row, coords.col)

    def is_blank(self, address: str) -> bool:
        return self.read_cell(address) == ""

    def read_header_labels(self, anchor: CellAddress) -> List[str]:
        """Read labels rightwards from ``anchor`` until the first empty cell."""

        labels: List[str] = []
        col = anchor.col
        while True:
            label = self.read_cell_by_index(anchor.row, col)
            if label == "":
                break
            labels.append(label)
            col += 1
        return labels

    def read_table(self, locator: str, end_value: Optional[str] = None) -> List[TableRow]:
        """Read a table whose header row starts at ``locator``.

        Rows are read below the header until the first cell of a row is blank
        or, when ``end_value`` is given, equals ``end_value``. The blank-cell
        stop always applies, even when ``end_value`` never shows up.

        Returns:
            Row mappings keyed by header label, in sheet order.
        """

        anchor = parse_cell_address(locator)
        labels = self.read_header_labels(anchor)

        rows: List[TableRow] = []
        row_idx = anchor.row + 1
        while True:
            first = self.read_cell_by_index(row_idx, anchor.col)
            if end_value is not None and first == end_value:
                break
            if first.strip() == "":
                break
            rows.append(
                {
                    label: self.read_cell_by_index(row_idx, anchor.col + offset)
                    for offset, label in enumerate(labels)
                }
            )
            row_idx += 1

        logger.debug(
            "Table read",
            extra={"sheet": self.name, "locator": locator, "columns": labels, "rows": len(rows)},
        )
        return rows


class Workbook(ABC):
    """Parsed workbook handle; sheets are addressed by 0-based index."""

    backend: str = ""

    @property
    @abstractmethod
    def sheet_names(self) -> List[str]:
        """Names of all sheets in workbook order."""

    @abstractmethod
    def _load_sheet(self, index: int) -> Sheet:
        ...

    def sheet(self, index: int) -> Sheet:
        """Return the sheet at ``index``.

        Raises:
            SheetIndexError: When the index is outside the workbook.
        """

        names = self.sheet_names
        if index < 0 or index >= len(names):
            raise SheetIndexError(
                f"Sheet index {index} out of range (0-{len(names) - 1})"
            )
        return self._load_sheet(index)

    def sheet_by_name(self, name: str) -> Sheet:
        names = self.sheet_names
        if name not in names:
            raise SheetIndexError(f'Sheet "{name}" not found. Available: {", ".join(names)}')
        return self._load_sheet(names.index(name))


class _OpenpyxlSheet(Sheet):
    def __init__(self, worksheet: Any, epoch: datetime) -> None:
        super().__init__(worksheet.title)
        self._ws = worksheet
        self._epoch = epoch

    def _raw_cell(self, row: int, col: int) -> RawCell:
        if row + 1 > self._ws.max_row or col + 1 > self._ws.max_column:
            return None, None
        cell = self._ws.cell(row=row + 1, column=col + 1)
        return cell.value, cell.number_format

    def _serial_converter(self, number_format: Optional[str]) -> Optional[Callable[[Any], Optional[date]]]:
        if not is_date_format(number_format):
            return None

        def _convert(serial: Any) -> Optional[date]:
            try:
                converted = from_excel(serial, self._epoch)
            except (ValueError, OverflowError, TypeError):
                return None
            # Fractions below one day come back as a time of day.
            return converted if isinstance(converted, date) else None

        return _convert


class _OpenpyxlWorkbook(Workbook):
    backend = "openpyxl"

    def __init__(self, book: Any) -> None:
        self._book = book

    @property
    def sheet_names(self) -> List[str]:
        return list(self._book.sheetnames)

    def _load_sheet(self, index: int) -> Sheet:
        return _OpenpyxlSheet(self._book.worksheets[index], self._book.epoch)


class _XlrdSheet(Sheet):
    def __init__(self, sheet: Any, book: Any) -> None:
        super().__init__(sheet.name)
        self._sheet = sheet
        self._book = book

    def _number_format(self, xf_index: int) -> Optional[str]:
        try:
            xf = self._book.xf_list[xf_index]
            return self._book.format_map[xf.format_key].format_str
        except (IndexError, KeyError, AttributeError):
            return None

    def _raw_cell(self, row: int, col: int) -> RawCell:
        if row >= self._sheet.nrows or col >= self._sheet.ncols:
            return None, None
        cell = self._sheet.cell(row, col)
        ctype = cell.ctype
        if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
            return None, None
        if ctype == xlrd.XL_CELL_DATE:
            try:
                return xlrd.xldate.xldate_as_datetime(cell.value, self._book.datemode), None
            except (xlrd.xldate.XLDateError, ValueError, OverflowError):
                return cell.value, None
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value), None
        if ctype == xlrd.XL_CELL_NUMBER:
            return cell.value, self._number_format(cell.xf_index)
        return cell.value, None

    def _serial_converter(self, number_format: Optional[str]) -> Optional[Callable[[Any], Optional[date]]]:
        if not is_date_format(number_format):
            return None

        def _convert(serial: Any) -> Optional[date]:
            try:
                return xlrd.xldate.xldate_as_datetime(serial, self._book.datemode)
            except (xlrd.xldate.XLDateError, ValueError, OverflowError):
                return None

        return _convert


class _XlrdWorkbook(Workbook):
    backend = "xlrd"

    def __init__(self, book: Any) -> None:
        self._book = book

    @property
    def sheet_names(self) -> List[str]:
        return list(self._book.sheet_names())

    def _load_sheet(self, index: int) -> Sheet:
        return _XlrdSheet(self._book.sheet_by_index(index), self._book)


def _open_zip_workbook(data: bytes) -> Workbook:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = set(archive.namelist())
    except zipfile.BadZipFile as exc:
        raise WorkbookFormatError(f"Corrupted workbook container: {exc}", kind="corrupt") from exc

    if "xl/workbook.bin" in names:
        raise WorkbookFormatError(
            "Unsupported format: binary workbooks (.xlsb) cannot be read", kind="unsupported"
        )
    if "xl/workbook.xml" not in names:
        raise WorkbookFormatError(
            "Unsupported format: ZIP archive does not contain a spreadsheet", kind="unsupported"
        )

    try:
        book = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
    except (zipfile.BadZipFile, KeyError, OSError) as exc:
        raise WorkbookFormatError(f"Corrupted workbook: {exc}", kind="corrupt") from exc
    except Exception as exc:  # noqa: BLE001 - openpyxl surfaces parser errors of many types
        raise WorkbookFormatError(str(exc) or exc.__class__.__name__) from exc
    return _OpenpyxlWorkbook(book)


def _open_ole_workbook(data: bytes) -> Workbook:
    if _ENCRYPTED_STREAM in data:
        raise WorkbookFormatError("Workbook is password-protected", kind="encrypted")
    try:
        book = xlrd.open_workbook(file_contents=data, formatting_info=True, on_demand=False)
    except xlrd.XLRDError as exc:
        message = str(exc)
        if "encrypt" in message.lower() or "password" in message.lower():
            raise WorkbookFormatError("Workbook is password-protected", kind="encrypted") from exc
        if "OLE2" in message or "CompDoc" in message:
            raise WorkbookFormatError(f"Corrupted workbook: {message}", kind="corrupt") from exc
        raise WorkbookFormatError(message, kind="unsupported") from exc
    except Exception as exc:  # noqa: BLE001 - xlrd raises assorted low-level errors
        raise WorkbookFormatError(f"Corrupted workbook: {exc}", kind="corrupt") from exc
    return _XlrdWorkbook(book)


def open_workbook(data: bytes) -> Workbook:
    """Open spreadsheet bytes as a :class:`Workbook`.

    ZIP-based containers (``.xlsx``/``.xlsm``) go through openpyxl, compound
    binary containers (``.xls``) through xlrd.

    Raises:
        WorkbookFormatError: When the signature is unknown or the backend
            cannot parse the content.
    """

    header = bytes(data[:4])
    if header == ZIP_SIGNATURE:
        workbook = _open_zip_workbook(bytes(data))
    elif header == OLE_SIGNATURE:
        workbook = _open_ole_workbook(bytes(data))
    else:
        raise WorkbookFormatError("File format signature is not recognized", kind="unsupported")

    logger.info(
        "Workbook opened",
        extra={"backend": workbook.backend, "sheets": len(workbook.sheet_names)},
    )
    return workbook


__all__ = [
    "OLE_SIGNATURE",
    "ZIP_SIGNATURE",
    "Sheet",
    "SheetIndexError",
    "TableRow",
    "Workbook",
    "WorkbookFormatError",
    "open_workbook",
]
