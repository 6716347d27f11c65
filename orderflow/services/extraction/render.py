"""Text rendering of header and detail files."""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from orderflow.config import FileSpec, ResultProperty
from orderflow_io import ARCHIVE_EXTENSION

from .models import Record

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}", re.ASCII)
_PATH_SEPARATORS = re.compile(r"[\\/]")
_NON_DIGITS = re.compile(r"\D+")


def expand(template: str, values: Mapping[str, Optional[object]]) -> str:
    """Replace ``${name}`` tokens with values; unknown names become empty.

    Single pass: substituted text is never scanned again.
    """

    def _lookup(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_lookup, template)


def normalize_date(value: str) -> str:
    """Keep only the digits, so ``2024-01-15`` becomes ``20240115``."""

    return _NON_DIGITS.sub("", value)


def normalize_date_fields(record: Record, properties: Iterable[ResultProperty]) -> Record:
    """Normalize, in place, every non-empty ``type: date`` field of ``record``."""

    for prop in properties:
        if prop.type == "date" and record.get(prop.name):
            record[prop.name] = normalize_date(record[prop.name])
    return record


def _resolve(prop: ResultProperty, record: Mapping[str, str], index: int) -> str:
    value = record.get(prop.name)
    if value is None or value == "":
        value = prop.default_value or ""
    if "${" in value:
        value = expand(value, {**record, "index": index})
    return value


def render_lines(separator: str, properties: Sequence[ResultProperty], records: Sequence[Mapping[str, str]]) -> List[str]:
    return [
        separator.join(_resolve(prop, record, index) for prop in properties)
        for index, record in enumerate(records)
    ]


def render_file(separator: str, spec: FileSpec, records: Sequence[Mapping[str, str]]) -> str:
    """Render ``records`` as delimited lines framed by the optional prolog/epilog.

    Lines are joined with ``\\n``; no trailing newline is added.
    """

    lines: List[str] = []
    if spec.prolog:
        lines.append(spec.prolog.rstrip())
    lines.extend(render_lines(separator, spec.properties, records))
    if spec.epilog:
        lines.append(spec.epilog.rstrip())
    return "\n".join(lines)


def pad_detail_records(rows: Iterable[Mapping[str, str]], spec: FileSpec) -> List[Record]:
    """Project detail rows onto the output columns, filling defaults."""

    padded: List[Record] = []
    for row in rows:
        padded.append(
            {
                prop.name: row[prop.name] if row.get(prop.name) is not None else (prop.default_value or "")
                for prop in spec.properties
            }
        )
    return padded


def archive_name(base_name: str, header: Mapping[str, str], source_name: str) -> str:
    """Expand the archive base name and append the archive extension.

    Path separators coming from extracted values become ``_`` so the name
    stays a single file name.
    """

    name = expand(base_name, {**header, "sourceName": source_name})
    return _PATH_SEPARATORS.sub("_", name) + ARCHIVE_EXTENSION


__all__ = [
    "archive_name",
    "expand",
    "normalize_date",
    "normalize_date_fields",
    "pad_detail_records",
    "render_file",
    "render_lines",
]
