from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, Optional, Sequence

from . import __version__
from .codec import detect_line_ending, parse_csv, serialize_csv
from .errors import InvalidBase64Error
from .grid import grid_stats, set_cell
from .models import (
    CellEditRequest,
    CsvExport,
    CsvTextResponse,
    CsvTextResult,
    ExportRequest,
    GridResponse,
    GridResult,
    ParseRequest,
    SerializeRequest,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

CSV_SUFFIX = ".csv"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
DEFAULT_FILENAME = "export"


# ---------------------------------------------------------------------------
# Base64 / テキストユーティリティ
# ---------------------------------------------------------------------------


def decode_base64_to_text(csv_b64: str) -> str:
    """Base64 -> UTF-8 テキストに変換

    - 先に空白類（スペース・改行・タブなど）をすべて削除
    - そのうえで validate=True で厳密に Base64 を検証
    """
    try:
        compact = "".join(csv_b64.split())
        raw = base64.b64decode(compact, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidBase64Error("csv_b64 is not valid Base64 UTF-8 text") from exc


# ---------------------------------------------------------------------------
# エクスポート
# ---------------------------------------------------------------------------


def export_filename(name: Optional[str], default: str = DEFAULT_FILENAME) -> str:
    """ダウンロード用ファイル名。.csv で終わっていなければ付与する"""
    if name is None or not name.strip():
        name = default
    if name.endswith(CSV_SUFFIX):
        return name
    return f"{name}{CSV_SUFFIX}"


def build_export(
    csv_text: str,
    filename: Optional[str],
    default_filename: str = DEFAULT_FILENAME,
) -> CsvExport:
    """CSV テキストから UTF-8 の text/csv ペイロードを作る"""
    return CsvExport(
        filename=export_filename(filename, default_filename),
        content=csv_text.encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
    )


# ---------------------------------------------------------------------------
# API エントリーポイント
# ---------------------------------------------------------------------------


def _meta(version: str, **extra: Any) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"version": version}
    meta.update(extra)
    return meta


def process_parse(request: ParseRequest, version: str = __version__) -> GridResponse:
    """CSV テキスト（または Base64）を Grid に変換する"""
    if request.csv_b64 is not None:
        text = decode_base64_to_text(request.csv_b64)
    else:
        text = request.csv_text or ""

    grid = parse_csv(text)
    stats = grid_stats(grid)
    logger.debug(
        "parsed csv: chars=%d rows=%d columns_max=%d", len(text), stats.rows, stats.columns_max
    )

    return GridResponse(
        result=GridResult(grid=grid, stats=stats),
        meta=_meta(version, line_ending_detected=detect_line_ending(text)),
    )


def _normalize_grid(grid: Sequence[Sequence[Optional[str]]]) -> list[list[str]]:
    return [["" if value is None else value for value in row] for row in grid]


def process_serialize(request: SerializeRequest, version: str = __version__) -> CsvTextResponse:
    """Grid を CSV テキストに変換する（改行は LF に統一）"""
    csv_text = serialize_csv(request.grid)
    return CsvTextResponse(
        result=CsvTextResult(csv_text=csv_text, stats=grid_stats(_normalize_grid(request.grid))),
        meta=_meta(version, line_ending="lf"),
    )


def process_cell_edit(request: CellEditRequest, version: str = __version__) -> GridResponse:
    """1 セル書き換え後の Grid を返す"""
    grid = set_cell(_normalize_grid(request.grid), request.row, request.column, request.value)
    return GridResponse(
        result=GridResult(grid=grid, stats=grid_stats(grid)),
        meta=_meta(version, edited={"row": request.row, "column": request.column}),
    )


def process_export(
    request: ExportRequest,
    default_filename: str = DEFAULT_FILENAME,
) -> CsvExport:
    """Raw テキストか Grid からダウンロード用 CSV を作る"""
    if request.grid is not None:
        csv_text = serialize_csv(request.grid)
    else:
        csv_text = request.csv_text or ""

    export = build_export(csv_text, request.filename, default_filename)
    logger.info("csv export prepared: filename=%s bytes=%d", export.filename, len(export.content))
    return export
