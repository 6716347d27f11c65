"""Text rendering tests."""

from __future__ import annotations

from orderflow.config import FileSpec, ResultProperty
from orderflow.services.extraction import (
    archive_name,
    expand,
    missing_fields,
    normalize_date,
    normalize_date_fields,
    pad_detail_records,
    render_file,
)


def _spec(**overrides) -> FileSpec:
    payload = {
        "filename": "detalle.txt",
        "prolog": "ParentKey;LineNum;ItemCode\n",
        "properties": [
            {"name": "ParentKey", "defaultValue": "1"},
            {"name": "LineNum", "defaultValue": "${index}"},
            {"name": "ItemCode"},
        ],
    }
    payload.update(overrides)
    return FileSpec.model_validate(payload)


def test_expand_is_single_pass_and_blanks_unknown_names() -> None:
    assert expand("pedido-${a}-${missing}", {"a": "${b}", "b": "x"}) == "pedido-${b}-"
    assert expand("${n}", {"n": 3}) == "3"
    assert expand("no placeholders", {}) == "no placeholders"


def test_normalize_date_keeps_digits() -> None:
    assert normalize_date("2024-01-15") == "20240115"
    assert normalize_date("15/01/2024") == "15012024"
    assert normalize_date("20240115") == "20240115"


def test_normalize_date_fields_only_touches_non_empty_dates() -> None:
    properties = [
        ResultProperty(name="DocDate", type="date"),
        ResultProperty(name="DocDueDate", type="date"),
        ResultProperty(name="NumAtCard"),
    ]
    record = {"DocDate": "2024-01-15", "DocDueDate": "", "NumAtCard": "OC-1"}

    normalize_date_fields(record, properties)

    assert record == {"DocDate": "20240115", "DocDueDate": "", "NumAtCard": "OC-1"}


def test_render_file_with_index_placeholder_and_prolog() -> None:
    text = render_file(";", _spec(), [{"ItemCode": "A"}, {"ItemCode": "B", "ParentKey": "7"}])

    assert text == "ParentKey;LineNum;ItemCode\n1;0;A\n7;1;B"


def test_render_file_placeholders_read_from_record() -> None:
    spec = _spec(
        prolog=None,
        epilog="FIN\n\n",
        properties=[{"name": "Label", "defaultValue": "${ItemCode}-${index}"}, {"name": "ItemCode"}],
    )

    assert render_file("\t", spec, [{"ItemCode": "A"}]) == "A-0\tA\nFIN"


def test_empty_value_falls_back_to_default() -> None:
    assert render_file(";", _spec(prolog=None), [{"ParentKey": "", "ItemCode": "A"}]) == "1;0;A"


def test_render_file_without_records_keeps_frame() -> None:
    assert render_file(";", _spec(), []) == "ParentKey;LineNum;ItemCode"
    assert render_file(";", _spec(prolog=None), []) == ""


def test_pad_detail_records_projects_onto_output_columns() -> None:
    padded = pad_detail_records([{"ItemCode": "A", "Unmapped": "x"}], _spec())

    assert padded == [{"ParentKey": "1", "LineNum": "${index}", "ItemCode": "A"}]


def test_missing_fields() -> None:
    record = {"A": "1", "B": "", "C": "  ", "D": None}
    assert missing_fields(record, ["A", "B", "C", "D", "E"]) == ["B", "C", "D", "E"]


def test_archive_name_uses_source_name() -> None:
    name = archive_name("erp-pedido-${sourceName}-${NumAtCard}", {"NumAtCard": "12345"}, "el-dorado")
    assert name == "erp-pedido-el-dorado-12345.zip"
    assert archive_name("pedido-${Missing}", {}, "x") == "pedido-.zip"


def test_archive_name_replaces_path_separators() -> None:
    base = "erp-pedido-${sourceName}-${NumAtCard}"

    assert archive_name(base, {"NumAtCard": "A/77"}, "el-dorado") == "erp-pedido-el-dorado-A_77.zip"
    assert archive_name(base, {"NumAtCard": "B\\77"}, "el-dorado") == "erp-pedido-el-dorado-B_77.zip"


def test_placeholders_use_ascii_word_characters() -> None:
    assert expand("${año}-${ano}", {"año": "x", "ano": "y"}) == "${año}-y"
