"""Cell addressing and value formatting helpers."""

# Module responsibilities:
# - Translate A1-style addresses to 0-based row/column indices and back.
# - Render raw cell values (numbers, dates, booleans, text) as canonical strings.
# - Recognise date-like number formats so serial numbers print as YYYYMMDD.

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

_ADDRESS_RE = re.compile(r"^([A-Z]+)(\d+)$", re.IGNORECASE)

_DATE_FORMAT_PATTERNS = (
    re.compile(r"[dmy]", re.IGNORECASE),
    re.compile(r"\[.*\]"),
)
_NUMBER_FORMAT_PATTERNS = (
    re.compile(r"0\.0"),
    re.compile(r"#"),
    re.compile(r"\$"),
    re.compile(r"%"),
)

_TWO_PLACES = Decimal("0.01")


class CellAddressError(ValueError):
    """Raised when a cell locator is not in A1 notation."""


@dataclass(frozen=True)
class CellAddress:
    """Zero-based cell coordinates."""

    row: int
    col: int

    def to_a1(self) -> str:
        return f"{col_to_letter(self.col)}{self.row + 1}"


def parse_cell_address(address: str) -> CellAddress:
    """Parse an A1-style reference into 0-based coordinates.

    Letters are case-insensitive and use spreadsheet numbering (A=1 .. Z=26,
    AA=27, ...), so ``"AA10"`` becomes ``CellAddress(row=9, col=26)``.

    Raises:
        CellAddressError: When the address has no letter+digit shape or the
            row number is zero.
    """

    match = _ADDRESS_RE.match(address.strip()) if isinstance(address, str) else None
    if not match:
        raise CellAddressError(f"Invalid cell address: {address!r}")

    letters, digits = match.groups()
    col = 0
    for char in letters.upper():
        col = col * 26 + (ord(char) - ord("A") + 1)
    row = int(digits)
    if row < 1:
        raise CellAddressError(f"Invalid cell address: {address!r} (rows start at 1)")
    return CellAddress(row=row - 1, col=col - 1)


def col_to_letter(col: int) -> str:
    """Convert a 0-based column index to spreadsheet letters (0 -> ``A``)."""

    if col < 0:
        raise ValueError(f"column index must be non-negative, got {col}")
    letters = ""
    n = col + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def format_date(value: date) -> str:
    """Format a date or datetime as ``YYYYMMDD``."""

    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def format_number(value: float | int | Decimal) -> str:
    """Render a number with at most two decimals and no trailing zeros.

    Integer-valued numbers never carry a decimal point. Fractions are rounded
    half-up on their decimal representation, so ``2.995`` gives ``"3"`` and
    ``2.10`` gives ``"2.1"``.
    """

    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if not number.is_finite():
        return str(value)
    if number == number.to_integral_value():
        return str(int(number))

    rounded = number.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    text = format(rounded, "f").rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


def is_date_format(number_format: Optional[str]) -> bool:
    """Heuristic check for date-like display formats.

    A format counts as a date when it mentions d/m/y (or a bracketed locale
    marker) and does not look like a number, currency or percentage format.
    Ambiguous formats are resolved in favour of "not a date".
    """

    if not number_format or number_format == "General":
        return False
    looks_like_date = any(p.search(number_format) for p in _DATE_FORMAT_PATTERNS)
    looks_like_number = any(p.search(number_format) for p in _NUMBER_FORMAT_PATTERNS)
    return looks_like_date and not looks_like_number


def format_cell_value(value: Any, serial_to_date: Optional[Any] = None) -> str:
    """Convert a raw cell value to its canonical string form.

    Args:
        value: Raw value returned by the workbook backend.
        serial_to_date: Optional callable turning a numeric serial into a
            ``date``; supplied by the backend when the cell carries a date
            format.

    Returns:
        ``""`` for empty cells, ``YYYYMMDD`` for dates, ``true``/``false`` for
        booleans, formatted numbers, or the plain string form otherwise.
    """

    if value is None or value == "":
        return ""
    if isinstance(value, (datetime, date)):
        return format_date(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        if serial_to_date is not None:
            converted = serial_to_date(value)
            if converted is not None:
                return format_date(converted)
        return format_number(value)
    return str(value)


__all__ = [
    "CellAddress",
    "CellAddressError",
    "col_to_letter",
    "format_cell_value",
    "format_date",
    "format_number",
    "is_date_format",
    "parse_cell_address",
]
