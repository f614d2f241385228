from __future__ import annotations

import statistics
from typing import List, Sequence

from .codec import Grid
from .models import GridStats


def set_cell(grid: Sequence[Sequence[str]], row_index: int, col_index: int, value: str) -> Grid:
    """1 セルを書き換えた新しい Grid を返す（元の grid は変更しない）

    範囲外の行・列を指定した場合は空行 / 空フィールドで埋めて拡張する。
    途中に追加される行は [] のまま（その行の列は埋めない）。
    """
    if row_index < 0 or col_index < 0:
        raise ValueError(
            f"cell indices must be non-negative (row={row_index}, column={col_index})"
        )

    new_grid: Grid = [list(row) for row in grid]

    while len(new_grid) <= row_index:
        new_grid.append([])

    row = new_grid[row_index]
    if len(row) <= col_index:
        row.extend("" for _ in range(col_index + 1 - len(row)))

    row[col_index] = value
    return new_grid


def column_count(grid: Sequence[Sequence[str]]) -> int:
    """テーブル表示用の列数（全行の最大長）"""
    return max((len(row) for row in grid), default=0)


def cell_value(grid: Sequence[Sequence[str]], row_index: int, col_index: int) -> str:
    """ragged な grid からセル値を読む。範囲外は空文字"""
    if row_index < 0 or col_index < 0 or row_index >= len(grid):
        return ""
    row = grid[row_index]
    if col_index >= len(row):
        return ""
    return row[col_index]


def grid_stats(grid: Sequence[Sequence[str]]) -> GridStats:
    """Grid の形状（行数・列数の分布）を集計する"""
    if not grid:
        return GridStats()

    col_counts: List[int] = [len(row) for row in grid]
    columns_min = min(col_counts)
    columns_max = max(col_counts)

    # 同数の場合は先に現れた列数
    columns_mode = int(statistics.mode(col_counts))

    return GridStats(
        rows=len(grid),
        columns_min=columns_min,
        columns_max=columns_max,
        columns_mode=columns_mode,
        ragged=columns_min != columns_max,
    )
