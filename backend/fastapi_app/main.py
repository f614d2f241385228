from __future__ import annotations

import logging
import sys
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

# ============================================================
# プロジェクトルートを sys.path に追加
# （Lambda / uvicorn どちらでも core パッケージを解決できるように）
# ============================================================
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from backend.fastapi_app.settings import get_settings  # noqa: E402
from core.csv_flow.errors import InvalidBase64Error, InvalidInputTypeError  # noqa: E402
from core.csv_flow.models import (  # noqa: E402
    CellEditRequest,
    ExportRequest,
    ParseRequest,
    SerializeRequest,
)
from core.csv_flow.service import (  # noqa: E402
    process_cell_edit,
    process_export,
    process_parse,
    process_serialize,
)

settings = get_settings()

logger = logging.getLogger("csv_flow.api")

# ============================================================
# API Gateway 側で /csv をプレフィックスとしてルーティングしているため、
# FastAPI には root_path="/csv" を指定し、ルート定義は /v0/... にする
# ============================================================
app = FastAPI(
    title="CSV-Flow API",
    version=settings.api_version,
    description="CSV-Flow: CSV parse / edit / export API (v0.1)",
    root_path=settings.root_path,
)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
            },
            "meta": {
                "version": settings.api_version,
            },
        },
    )


@app.exception_handler(InvalidBase64Error)
async def invalid_base64_handler(_: Request, exc: InvalidBase64Error) -> JSONResponse:
    return _error_response(400, "INVALID_BASE64", str(exc))


@app.exception_handler(InvalidInputTypeError)
async def invalid_input_type_handler(_: Request, exc: InvalidInputTypeError) -> JSONResponse:
    logger.warning("parse rejected: %s", exc)
    return _error_response(400, "PARSE_FAILED", "Failed to parse CSV format.")


@app.get("/v0/health")
async def health():
    return {"status": "ok", "version": settings.api_version}


@app.post("/v0/parse")
async def csv_parse_endpoint(payload: ParseRequest):
    response = process_parse(payload, version=settings.api_version)
    return response.model_dump()


@app.post("/v0/serialize")
async def csv_serialize_endpoint(payload: SerializeRequest):
    response = process_serialize(payload, version=settings.api_version)
    return response.model_dump()


@app.post("/v0/cell")
async def csv_cell_endpoint(payload: CellEditRequest):
    response = process_cell_edit(payload, version=settings.api_version)
    return response.model_dump()


@app.post("/v0/export")
async def csv_export_endpoint(payload: ExportRequest) -> Response:
    export = process_export(payload, default_filename=settings.default_filename)
    # 非 ASCII のファイル名もそのまま渡せるよう RFC 5987 形式にする
    disposition = f"attachment; filename*=UTF-8''{quote(export.filename)}"
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": disposition},
    )
