from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .codec import Grid, parse_csv, serialize_csv
from .errors import InvalidInputTypeError
from .grid import column_count, set_cell
from .models import CsvExport
from .service import DEFAULT_FILENAME, build_export

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PARSE_FAILED_MESSAGE = "Failed to parse CSV format."


class ViewMode(str, Enum):
    """
    Editor view mode.
    - RAW   : raw text is the source of truth
    - TABLE : grid is the source of truth
    """

    raw = "RAW"
    table = "TABLE"


class EditorSession:
    """エディタ全体の状態（モード・生テキスト・Grid・ファイル名・エラー）

    生テキストと Grid を常時同期させるのではなく、最後に編集された側を正とし、
    もう一方は必要になった時点（モード切替 / エクスポート）で導出する。
    セル編集ごとの再シリアライズは行わない。

    排他制御は持たない。編集は呼び出し側で 1 件ずつ直列化すること。
    """

    def __init__(
        self,
        filename: str = DEFAULT_FILENAME,
        mode: ViewMode = ViewMode.raw,
        grid: Optional[Grid] = None,
        error: Optional[str] = None,
    ) -> None:
        self.filename = filename
        self.mode = ViewMode(mode)
        self.error = error
        self._raw_text = ""
        self._text_stale = False
        self._grid: Grid = []
        # 直接渡された Grid はテキスト未生成（stale）として扱う
        if grid:
            self.grid = grid

    def __repr__(self) -> str:
        return (
            f"EditorSession(filename={self.filename!r}, mode={self.mode.value}, "
            f"rows={len(self._grid)}, error={self.error!r})"
        )

    # -- 生テキスト側 -------------------------------------------------------

    @property
    def text(self) -> str:
        self._sync_text()
        return self._raw_text

    def _sync_text(self) -> None:
        if self._text_stale:
            self._raw_text = serialize_csv(self.grid)
            self._text_stale = False

    @property
    def text_stale(self) -> bool:
        return self._text_stale

    def set_raw_text(self, text: Any) -> None:
        try:
            grid = parse_csv(text)
        except InvalidInputTypeError:
            logger.warning("raw text rejected: %s", type(text).__name__)
            self.error = PARSE_FAILED_MESSAGE
            return

        self._grid = grid
        self._raw_text = text
        self._text_stale = False
        self.error = None

    # -- Grid 側 ------------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self._grid

    @grid.setter
    def grid(self, grid: Grid) -> None:
        # Grid を置き換えたらテキストは次回参照時に再生成する
        self._grid = [list(row) for row in grid]
        self._text_stale = True

    @property
    def column_count(self) -> int:
        return column_count(self._grid)

    def edit_cell(self, row_index: int, col_index: int, value: str) -> None:
        self.grid = set_cell(self._grid, row_index, col_index, value)

    # -- モード / エクスポート ----------------------------------------------

    def switch_mode(self, mode: ViewMode) -> None:
        mode = ViewMode(mode)
        if mode == self.mode:
            return
        if mode == ViewMode.raw:
            # テーブル編集の内容をテキストに反映
            self._sync_text()
        self.mode = mode
        logger.debug("editor mode -> %s", mode.value)

    def export(self, default_filename: str = DEFAULT_FILENAME) -> CsvExport:
        return build_export(self.text, self.filename, default_filename)

    def clear(self) -> None:
        self._raw_text = ""
        self._text_stale = False
        self._grid = []
        self.mode = ViewMode.raw
        self.error = None
