"""Pull header cells and detail rows out of a sheet."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Sequence

from orderflow.config import DetailSpec, Replacement, SourceConfig, SourceProperty
from orderflow.core.errors import ConfigError, wrap_error
from orderflow_io import Sheet, Workbook, open_workbook

from .models import ExtractedData, Record

LOGGER = logging.getLogger(__name__)

_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|\d{1,2})")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(
            f"invalid replacement pattern {pattern!r}: {exc}",
            ["Check the regular expressions under 'replacements'"],
        ) from exc


def _group_text(match: re.Match[str], ref: str) -> str:
    # Two-digit references fall back to one digit plus a literal, and
    # references to groups the pattern does not define stay literal.
    groups = match.re.groups
    if len(ref) == 2 and 1 <= int(ref) <= groups:
        return match.group(int(ref)) or ""
    if 1 <= int(ref[0]) <= groups:
        return (match.group(int(ref[0])) or "") + ref[1:]
    return "$" + ref


def _substitute(template: str):
    """Build a ``re.sub`` callback for ``$1``/``$&``/``$$`` replacement text."""

    def _render(match: re.Match[str]) -> str:
        def _token(ref: re.Match[str]) -> str:
            token = ref.group(1)
            if token == "$":
                return "$"
            if token == "&":
                return match.group(0)
            return _group_text(match, token)

        return _REPLACEMENT_TOKEN.sub(_token, template)

    return _render


def apply_replacements(value: str, replacements: Iterable[Replacement]) -> str:
    """Apply each replacement, in order, to every match in ``value``."""

    result = value
    for item in replacements:
        result = _compile(item.pattern).sub(_substitute(item.replacement), result)
    return result


def extract_header(
    sheet: Sheet,
    properties: Sequence[SourceProperty],
    default_values: Mapping[str, str],
) -> Record:
    """Read one cell per property on top of the source defaults.

    Extracted values overwrite seeded defaults; a blank cell leaves the seed
    in place.
    """

    record: Record = dict(default_values)
    for prop in properties:
        value = apply_replacements(sheet.read_cell(prop.locator), prop.replacements)
        if value == "" and prop.name in record:
            continue
        record[prop.name] = value
    return record


def extract_detail(sheet: Sheet, detail: DetailSpec) -> List[Record]:
    """Read the anchored table and map column labels to property names.

    Columns without a matching property are dropped; properties whose column
    is missing simply do not appear in the rows.
    """

    by_label: Dict[str, SourceProperty] = {prop.locator: prop for prop in detail.properties}
    rows = sheet.read_table(detail.locator, detail.end_value)

    records: List[Record] = []
    for row in rows:
        record: Record = {}
        for label, value in row.items():
            prop = by_label.get(label)
            if prop is not None:
                record[prop.name] = apply_replacements(value, prop.replacements)
        records.append(record)
    return records


def extract_from_workbook(workbook: Workbook, source: SourceConfig) -> ExtractedData:
    """Extract header and detail data from an already parsed workbook."""

    sheet = workbook.sheet(source.sheet_index)
    header = extract_header(sheet, source.header, source.default_values)
    detail = extract_detail(sheet, source.detail)
    LOGGER.info(
        "Extracted %s header fields and %s detail rows for source %s",
        len(header),
        len(detail),
        source.name,
    )
    return ExtractedData(header=header, detail=detail)


def extract(data: bytes, source: SourceConfig) -> ExtractedData:
    """Parse spreadsheet bytes and extract data for ``source``.

    Raises:
        OrderFlowError: Any failure, categorized.
    """

    try:
        return extract_from_workbook(open_workbook(data), source)
    except Exception as exc:  # noqa: BLE001 - every failure leaves as a categorized error
        raise wrap_error(exc, "Extraction failed") from exc


__all__ = [
    "apply_replacements",
    "extract",
    "extract_detail",
    "extract_from_workbook",
    "extract_header",
]
