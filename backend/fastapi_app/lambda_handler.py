from __future__ import annotations

import json
import logging
from typing import Optional

from mangum import Mangum

from backend.fastapi_app.main import app
from backend.fastapi_app.settings import configure_logging, get_settings

logger = logging.getLogger("csv_flow.lambda")


def _safe_get(d, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def api_gateway_base_path(event: dict) -> Optional[str]:
    """/dev や /prod のステージ接頭辞を返す（$default ステージなら None）"""
    stage = _safe_get(event, "requestContext", "stage", default=None)
    if stage and stage != "$default":
        return f"/{stage}"
    return None


def handler(event, context):
    configure_logging(get_settings())

    method = _safe_get(event, "requestContext", "http", "method", default=None)
    base_path = api_gateway_base_path(event)

    logger.info(
        json.dumps(
            {
                "diag": "incoming_request",
                "method": method,
                "rawPath": event.get("rawPath"),
                "basePath": base_path,
            },
            ensure_ascii=False,
        )
    )

    # ステージ接頭辞を Mangum 側で剥がして FastAPI に渡す
    asgi = Mangum(app, api_gateway_base_path=base_path or "/")
    return asgi(event, context)
