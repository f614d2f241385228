# core/csv_flow/__init__.py

"""
CSV-Flow core package.

- codec.py  : CSV パーサ / シリアライザ（状態機械 + 最小クォート）
- grid.py   : Grid（行 x フィールド）の編集・集計ヘルパー
- models.py : Pydantic モデル定義
- service.py: API 処理（Base64 デコード + parse / serialize / cell / export）
- session.py: エディタ状態（Raw / Table モードと同期ルール）
"""

__version__ = "0.1.0"

from .codec import Grid, Row, parse_csv, serialize_csv  # noqa: E402
from .errors import InvalidBase64Error, InvalidInputTypeError  # noqa: E402
from .grid import cell_value, column_count, grid_stats, set_cell  # noqa: E402

__all__ = [
    "Grid",
    "Row",
    "InvalidBase64Error",
    "InvalidInputTypeError",
    "cell_value",
    "column_count",
    "grid_stats",
    "parse_csv",
    "serialize_csv",
    "set_cell",
]
