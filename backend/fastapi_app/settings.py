"""CSV-Flow API の設定

環境変数（接頭辞 ``CSV_FLOW_``）または ``.env`` から読み込む。
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.csv_flow import __version__
from core.csv_flow.service import DEFAULT_FILENAME


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CSV_FLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Gateway 側で /csv をプレフィックスとしてルーティングしている
    root_path: str = "/csv"
    api_version: str = __version__
    default_filename: str = DEFAULT_FILENAME
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """エントリーポイント（Lambda handler など）から呼ぶ。import 時には設定しない"""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
