import base64

import pytest
from pydantic import ValidationError

from core.csv_flow.errors import InvalidBase64Error
from core.csv_flow.models import (
    CellEditRequest,
    CsvExport,
    ExportRequest,
    ParseRequest,
    SerializeRequest,
)
from core.csv_flow.service import (
    CSV_MEDIA_TYPE,
    build_export,
    decode_base64_to_text,
    export_filename,
    process_cell_edit,
    process_export,
    process_parse,
    process_serialize,
)


def _b64(s: str) -> str:
    """テスト用 Base64 ヘルパー"""
    return base64.b64encode(s.encode("utf-8")).decode("ascii")


def test_parse_from_base64_reports_structure_and_line_ending():
    """
    csv_b64 で渡した CSV が Grid に変換され、
    stats / meta に構造と改行コードが反映されることを確認する。
    """
    raw_csv = "col1,col2,col3\r\n1,2,3\r\n4,5\r\n"
    resp = process_parse(ParseRequest(csv_b64=_b64(raw_csv)))

    assert resp.result.grid == [["col1", "col2", "col3"], ["1", "2", "3"], ["4", "5"]]

    stats = resp.result.stats
    assert stats.rows == 3
    assert stats.columns_min == 2
    assert stats.columns_max == 3
    assert stats.columns_mode == 3
    assert stats.ragged is True

    assert resp.meta["line_ending_detected"] == "crlf"
    assert resp.meta["version"] == "0.1.0"


def test_parse_from_text():
    resp = process_parse(ParseRequest(csv_text='a,"b,c"'), version="9.9.9")
    assert resp.result.grid == [["a", "b,c"]]
    assert resp.meta == {"version": "9.9.9", "line_ending_detected": "none"}


def test_parse_request_requires_exactly_one_source():
    with pytest.raises(ValidationError):
        ParseRequest()
    with pytest.raises(ValidationError):
        ParseRequest(csv_text="a", csv_b64=_b64("a"))


def test_base64_decoding_ignores_whitespace_and_rejects_garbage():
    encoded = _b64("a,b\n")
    assert decode_base64_to_text(encoded[:4] + "\n " + encoded[4:]) == "a,b\n"

    with pytest.raises(InvalidBase64Error):
        decode_base64_to_text("@@not-base64@@")

    # 正しい Base64 でも UTF-8 でなければエラー
    with pytest.raises(InvalidBase64Error):
        decode_base64_to_text(base64.b64encode(b"\xff\xfe\xfa").decode("ascii"))


def test_serialize_treats_null_as_empty():
    resp = process_serialize(SerializeRequest(grid=[["a", None], ["line\nbreak"]]))

    assert resp.result.csv_text == 'a,\n"line\nbreak"'
    assert resp.result.stats.rows == 2
    assert resp.meta["line_ending"] == "lf"


def test_cell_edit_extends_grid():
    req = CellEditRequest(grid=[["a"]], row=1, column=2, value="x")
    resp = process_cell_edit(req)

    assert resp.result.grid == [["a"], ["", "", "x"]]
    assert resp.result.stats.columns_max == 3
    assert resp.meta["edited"] == {"row": 1, "column": 2}


def test_cell_edit_rejects_negative_index():
    with pytest.raises(ValidationError):
        CellEditRequest(grid=[], row=-1, column=0, value="x")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("data", "data.csv"),
        ("data.csv", "data.csv"),
        ("data.CSV", "data.CSV.csv"),
        ("", "export.csv"),
        ("   ", "export.csv"),
        (None, "export.csv"),
    ],
)
def test_export_filename(name, expected):
    assert export_filename(name) == expected


def test_build_export_encodes_utf8():
    export = build_export("名前,値", "データ", default_filename="unused")

    assert export.filename == "データ.csv"
    assert export.content == "名前,値".encode("utf-8")
    assert export.media_type == "text/csv; charset=utf-8"


def test_export_from_grid_and_from_text():
    from_grid = process_export(ExportRequest(grid=[["a", "b,c"]], filename="out"))
    assert from_grid.content == b'a,"b,c"'
    assert from_grid.filename == "out.csv"

    # Raw モードの内容は改行コードも含めてそのまま出力する
    from_text = process_export(ExportRequest(csv_text="x\r\ny"), default_filename="fallback")
    assert from_text.content == b"x\r\ny"
    assert from_text.filename == "fallback.csv"


def test_export_request_requires_exactly_one_source():
    with pytest.raises(ValidationError):
        ExportRequest(filename="x")


def test_cell_edit_accepts_null_cells():
    """serialize / export と同じく、cell 編集の grid も null セルを空文字として扱う"""
    req = CellEditRequest(grid=[["a", None]], row=0, column=0, value="A")
    resp = process_cell_edit(req)

    assert resp.result.grid == [["A", ""]]


def test_export_media_type_has_single_source():
    export = build_export("a", "x")
    assert export.media_type == CSV_MEDIA_TYPE

    with pytest.raises(ValidationError):
        CsvExport(filename="x.csv", content=b"a")
