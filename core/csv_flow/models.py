from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


GridPayload = List[List[str]]


class GridStats(BaseModel):
    rows: int = 0
    columns_min: int = 0
    columns_max: int = 0
    columns_mode: int = 0
    ragged: bool = False


# ---------------------------------------------------------------------------
# リクエスト
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    """
    CSV-Flow パース API リクエストモデル

    csv_text（生テキスト）か csv_b64（Base64 エンコード済み UTF-8）の
    どちらか一方を指定する。
    """

    csv_text: Optional[str] = None
    csv_b64: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "csv_text": 'id,name\n1,"Item, A"\n',
            }
        }
    )

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "ParseRequest":
        if (self.csv_text is None) == (self.csv_b64 is None):
            raise ValueError("specify exactly one of csv_text / csv_b64")
        return self


class SerializeRequest(BaseModel):
    # null セルは空文字として出力される
    grid: List[List[Optional[str]]]


class CellEditRequest(BaseModel):
    """
    テーブルエディタからの 1 セル編集。
    範囲外の row / column は grid を拡張して書き込む。
    grid 内の null セルは空文字として扱う。
    """

    grid: List[List[Optional[str]]] = Field(default_factory=list)
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    value: str = ""


class ExportRequest(BaseModel):
    """
    ダウンロード用 CSV の生成リクエスト。
    csv_text（Raw モードの内容）か grid（Table モードの内容）のどちらか一方。
    filename が空なら設定のデフォルト名を使う。
    """

    csv_text: Optional[str] = None
    grid: Optional[List[List[Optional[str]]]] = None
    filename: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "ExportRequest":
        if (self.csv_text is None) == (self.grid is None):
            raise ValueError("specify exactly one of csv_text / grid")
        return self


# ---------------------------------------------------------------------------
# レスポンス（トップ構造は {result, meta}）
# ---------------------------------------------------------------------------


class GridResult(BaseModel):
    grid: GridPayload
    stats: GridStats


class GridResponse(BaseModel):
    result: GridResult
    meta: Dict[str, Any]


class CsvTextResult(BaseModel):
    csv_text: str
    stats: GridStats


class CsvTextResponse(BaseModel):
    result: CsvTextResult
    meta: Dict[str, Any]


class CsvExport(BaseModel):
    """ダウンロード用ペイロード（UTF-8 バイト列 + ファイル名 + MIME）"""

    filename: str
    content: bytes
    media_type: str
