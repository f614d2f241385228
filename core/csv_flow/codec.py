from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .errors import InvalidInputTypeError

Row = List[str]
Grid = List[Row]

DELIMITER = ","
QUOTE_CHAR = '"'

# クォートが必要になる文字（区切り文字・クォート・改行）
_SPECIAL_CHARS = (DELIMITER, QUOTE_CHAR, "\n", "\r")


# ---------------------------------------------------------------------------
# パーサ
# ---------------------------------------------------------------------------


def parse_csv(text: str) -> Grid:
    """CSV テキストを 2 次元配列 (Grid) に変換する

    Unquoted / Quoted の 2 状態を持つ 1 パスの状態機械。
    壊れたクォートもエラーにはせず、決定的なルールで吸収する。

    - \\r\\n / \\n / 単独の \\r はすべて 1 つの行終端として扱う
    - 閉じられていないクォートは入力末尾までフィールド内容として読む
    - 空文字列は [] （0 行）
    """
    if not isinstance(text, str):
        raise InvalidInputTypeError(
            f"CSV input must be str, got {type(text).__name__}"
        )

    rows: Grid = []
    row: Row = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if in_quotes:
            if ch == QUOTE_CHAR:
                if nxt == QUOTE_CHAR:
                    # "" はリテラルの " 1 文字
                    field.append(QUOTE_CHAR)
                    i += 1
                else:
                    in_quotes = False
            else:
                field.append(ch)
        elif ch == QUOTE_CHAR:
            in_quotes = True
        elif ch == DELIMITER:
            row.append("".join(field))
            field = []
        elif ch == "\n" or ch == "\r":
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
            if ch == "\r" and nxt == "\n":
                i += 1
        else:
            field.append(ch)

        i += 1

    # 末尾に改行がなくても最後のフィールド / 行を確定させる
    if field or row:
        row.append("".join(field))
        rows.append(row)

    return rows


# ---------------------------------------------------------------------------
# シリアライザ
# ---------------------------------------------------------------------------


def _needs_quotes(value: str) -> bool:
    return any(c in value for c in _SPECIAL_CHARS)


def serialize_field(value: Optional[Any]) -> str:
    """1 フィールド分の CSV 表現を返す（None は空文字扱い）"""
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    if _needs_quotes(text):
        return QUOTE_CHAR + text.replace(QUOTE_CHAR, QUOTE_CHAR * 2) + QUOTE_CHAR
    return text


def serialize_csv(grid: Sequence[Sequence[Optional[Any]]]) -> str:
    """Grid を CSV テキストに再構成する

    改行は常に \\n に統一し、最終行の後ろには改行を付けない。
    """
    return "\n".join(
        DELIMITER.join(serialize_field(value) for value in row) for row in grid
    )


# ---------------------------------------------------------------------------
# 改行コード判定（情報表示用）
# ---------------------------------------------------------------------------


def detect_line_ending(text: str) -> str:
    """テキスト中の改行コード種別を返す

    Returns:
        'crlf' / 'lf' / 'cr' / 'mixed' / 'none'
    """
    crlf = text.count("\r\n")
    lf = text.count("\n") - crlf
    cr = text.count("\r") - crlf

    kinds = [name for name, count in (("crlf", crlf), ("lf", lf), ("cr", cr)) if count]
    if not kinds:
        return "none"
    if len(kinds) > 1:
        return "mixed"
    return kinds[0]
