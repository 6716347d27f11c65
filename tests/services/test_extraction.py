"""Extraction engine tests, from single cells to the full process() flow."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from orderflow.config import AppConfig, DetailSpec, Replacement, SourceProperty, parse_config
from orderflow.core.errors import (
    ConfigError,
    DataValidationError,
    ErrorCategory,
    ExtractionError,
    FileFormatError,
)
from orderflow.services.extraction import (
    ExtractedData,
    apply_replacements,
    extract,
    extract_detail,
    extract_header,
    merge_user_input,
    process,
)
from orderflow_io import open_workbook

HEADER_PROLOG = "DocNum\tDocType\tCardCode\tNumAtCard\tDocDate\tDocDueDate"
DETAIL_PROLOG = "ParentKey\tLineNum\tItemCode\tQuantity\tWhsCode"


def _run(config: AppConfig, data: bytes, source: str, user_input=None, filename: str = "pedido.xlsx"):
    return process(data, config.source(source), config.result, user_input, filename)


def test_apply_replacements_in_order() -> None:
    replacements = (
        Replacement(pattern="-", replacement=""),
        Replacement(pattern="^2024", replacement="24"),
    )
    assert apply_replacements("2024-01-15", replacements) == "240115"


def test_apply_replacements_supports_group_references() -> None:
    replacements = (Replacement(pattern=r"^OC-(\d+)$", replacement="PO$1"),)
    assert apply_replacements("OC-778899", replacements) == "PO778899"
    assert apply_replacements("778899", replacements) == "778899"


def test_apply_replacements_keeps_undefined_group_references_literal() -> None:
    assert apply_replacements("abc", (Replacement(pattern="b", replacement="$1"),)) == "a$1c"
    assert apply_replacements("abc", (Replacement(pattern="(b)", replacement="[$2]"),)) == "a[$2]c"
    assert apply_replacements("abc", (Replacement(pattern="(b)", replacement="$0"),)) == "a$0c"


def test_apply_replacements_dollar_escapes_and_whole_match() -> None:
    assert apply_replacements("5", (Replacement(pattern="5", replacement="$$5"),)) == "$5"
    assert apply_replacements("OC-7", (Replacement(pattern=r"\d+", replacement="<$&>"),)) == "OC-<7>"
    # A two-digit reference past the last group reads as one digit plus a literal.
    assert apply_replacements("ab", (Replacement(pattern="(a)", replacement="$10"),)) == "a0b"


def test_apply_replacements_rejects_bad_pattern() -> None:
    with pytest.raises(ConfigError, match="invalid replacement pattern"):
        apply_replacements("x", (Replacement(pattern="(", replacement=""),))


def test_extract_header_overwrites_defaults_but_blank_keeps_them(make_workbook) -> None:
    sheet = open_workbook(make_workbook({"B3": "12345", "B5": "C9999"})).sheet(0)
    properties = (
        SourceProperty(name="NumAtCard", locator="B3"),
        SourceProperty(name="CardCode", locator="B5"),
        SourceProperty(name="DocDate", locator="B4"),
        SourceProperty(name="Comments", locator="B6"),
    )

    record = extract_header(sheet, properties, {"CardCode": "C0001", "DocDate": "20240101"})

    assert record == {
        "CardCode": "C9999",
        "DocDate": "20240101",
        "NumAtCard": "12345",
        "Comments": "",
    }


def test_extract_detail_drops_unmapped_and_missing_columns(make_workbook) -> None:
    data = make_workbook(
        {
            "A1": "BARRA",
            "B1": "DESCRIPCION",
            "A2": 68077,
            "B2": "Queso",
            "A3": 68074,
            "B3": "Crema",
        }
    )
    sheet = open_workbook(data).sheet(0)
    detail = DetailSpec(
        locator="A1",
        properties=(
            SourceProperty(
                name="ItemCode",
                locator="BARRA",
                replacements=({"pattern": "68077", "replacement": "PTQCH068077"},),
            ),
            SourceProperty(name="Quantity", locator="CANTIDAD"),
        ),
    )

    rows = extract_detail(sheet, detail)

    assert rows == [{"ItemCode": "PTQCH068077"}, {"ItemCode": "68074"}]


def test_extract_wraps_failures(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    with pytest.raises(FileFormatError):
        extract(b"not a workbook at all", bundled_config.source("el-dorado"))
    with pytest.raises(ExtractionError, match="Sheet not found"):
        extract(el_dorado_bytes, bundled_config.source("uber-gross"))


def test_extract_returns_header_and_detail(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    data = extract(el_dorado_bytes, bundled_config.source("el-dorado"))

    assert data.header == {"CardCode": "C0001", "NumAtCard": "12345", "DocDate": "20240115"}
    assert data.detail == [
        {"ItemCode": "PTQCH068077", "Quantity": "12"},
        {"ItemCode": "7861234500012", "Quantity": "2.5"},
    ]


def test_process_el_dorado_end_to_end(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    outcome = _run(bundled_config, el_dorado_bytes, "el-dorado", {"DocDueDate": "2024-01-20"})

    assert outcome.success, outcome.error
    assert outcome.error is None
    assert outcome.archive_name == "erp-pedido-el-dorado-12345.zip"
    assert outcome.header_text == (
        f"{HEADER_PROLOG}\n" "1\tdDocument_Items\tC0001\t12345\t20240115\t20240120"
    )
    assert outcome.detail_text == (
        f"{DETAIL_PROLOG}\n"
        "1\t0\tPTQCH068077\t12\tBD-PTE\n"
        "1\t1\t7861234500012\t2.5\tBD-PTE"
    )
    assert outcome.extracted_data.header["DocDueDate"] == "20240120"
    assert outcome.warnings == []


def test_process_reports_missing_user_input(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    outcome = _run(bundled_config, el_dorado_bytes, "el-dorado", {})

    assert not outcome.success
    assert outcome.header_text is None and outcome.archive_name is None
    assert isinstance(outcome.error, DataValidationError)
    assert outcome.error.category is ErrorCategory.VALIDATION
    assert outcome.error.missing_fields == ["DocDueDate"]
    assert "Missing header properties: DocDueDate" in outcome.error.user_message
    with pytest.raises(DataValidationError):
        outcome.raise_for_error()


def test_whitespace_user_input_counts_as_missing(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    outcome = _run(bundled_config, el_dorado_bytes, "el-dorado", {"DocDueDate": "   "})

    assert outcome.error.missing_fields == ["DocDueDate"]


def test_user_input_overrides_extracted_values(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    outcome = _run(
        bundled_config,
        el_dorado_bytes,
        "el-dorado",
        {"DocDueDate": "20240120", "NumAtCard": "OC-1", "CardCode": None},
    )

    assert outcome.success
    assert outcome.archive_name == "erp-pedido-el-dorado-OC-1.zip"
    assert "\tC0001\tOC-1\t" in outcome.header_text


def test_process_uber_gross_reads_second_sheet(bundled_config: AppConfig, make_workbook) -> None:
    data = make_workbook(
        sheets=[
            ("Portada", {"A1": "Distribuidora"}),
            (
                "Pedido",
                {
                    "C2": "OC-778899",
                    "C3": datetime(2024, 2, 1),
                    "C4": datetime(2024, 2, 15),
                    "B8": "EAN",
                    "C8": "CANT.",
                    "B9": "7860000000011",
                    "C9": 24,
                    "B10": "7860000000028",
                    "C10": 3.75,
                    "B11": "TOTAL",
                    "C11": 27.75,
                    "B12": "7860000000035",
                },
            ),
        ]
    )

    outcome = _run(bundled_config, data, "uber-gross")

    assert outcome.success, outcome.error
    assert outcome.archive_name == "erp-pedido-uber-gross-778899.zip"
    assert outcome.header_text.splitlines()[1] == "1\tdDocument_Items\tC0003\t778899\t20240201\t20240215"
    assert outcome.detail_text.splitlines()[1:] == [
        "1\t0\t7860000000011\t24\tBD-PTE",
        "1\t1\t7860000000028\t3.75\tBD-PTE",
    ]


def test_process_la_nanita_with_all_fields_typed(bundled_config: AppConfig, make_workbook) -> None:
    data = make_workbook(
        {"A1": "CODIGO", "B1": "UNIDADES", "A2": "PTQ001", "B2": 6, "A3": "TOTAL", "B3": 6}
    )

    outcome = _run(
        bundled_config,
        data,
        "la-nanita",
        {"NumAtCard": "LN-7", "DocDate": "2024/03/01", "DocDueDate": "2024-03-05"},
    )

    assert outcome.success, outcome.error
    assert outcome.header_text.endswith("C0002\tLN-7\t20240301\t20240305")
    assert outcome.detail_text.splitlines()[1:] == ["1\t0\tPTQ001\t6\tBD-PTE"]


def test_process_keeps_validation_warnings(bundled_config: AppConfig, el_dorado_factory) -> None:
    outcome = _run(
        bundled_config,
        el_dorado_factory(B12="CANT"),
        "el-dorado",
        {"DocDueDate": "20240120"},
    )

    assert outcome.success
    assert [w.field for w in outcome.warnings] == ["columns"]
    # Quantity has no column, so the detail lines carry an empty value.
    assert outcome.detail_text.splitlines()[1] == "1\t0\tPTQCH068077\t\tBD-PTE"


def test_process_invalid_file_is_file_format_error(bundled_config: AppConfig) -> None:
    outcome = _run(bundled_config, b"plain text", "el-dorado", filename="pedido.txt")

    assert not outcome.success
    assert isinstance(outcome.error, FileFormatError)
    assert "File is too small" in outcome.error.details


def test_process_wrong_sheet_is_extraction_error(bundled_config: AppConfig, el_dorado_bytes: bytes) -> None:
    outcome = _run(bundled_config, el_dorado_bytes, "uber-gross")

    assert outcome.error.category is ErrorCategory.EXTRACTION


def test_process_bad_replacement_pattern_is_config_error(el_dorado_bytes: bytes) -> None:
    config = parse_config(
        json.dumps(
            {
                "sources": [
                    {
                        "name": "s",
                        "header": [
                            {"name": "NumAtCard", "locator": "B3", "replacements": {"[": ""}}
                        ],
                        "detail": {"locator": "A12"},
                    }
                ],
                "result": {
                    "separator": ",",
                    "baseName": "x",
                    "header": {"filename": "h.txt"},
                    "detail": {"filename": "d.txt"},
                },
            }
        )
    )

    outcome = process(el_dorado_bytes, config.source("s"), config.result, None, "p.xlsx")

    assert not outcome.success
    assert outcome.error.category is ErrorCategory.CONFIG


def test_merge_user_input_ignores_none() -> None:
    merged = merge_user_input({"A": "1", "B": "2"}, {"B": None, "C": 3})
    assert merged == {"A": "1", "B": "2", "C": "3"}


def test_detail_frame_for_preview() -> None:
    data = ExtractedData(
        header={"NumAtCard": "1"},
        detail=[{"ItemCode": "X1", "Quantity": "2"}, {"ItemCode": "X2", "Extra": "y"}],
    )

    frame = data.detail_frame()

    assert list(frame.columns) == ["ItemCode", "Quantity", "Extra"]
    assert frame.loc[1, "Quantity"] == ""
    assert ExtractedData().detail_frame().empty
