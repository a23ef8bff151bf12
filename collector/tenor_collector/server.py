"""ローカル API サーバー.

GET /api/channel と GET /api/gif-ranks を api.py のハンドラに委譲する。
ハンドラは同期 I/O なので、FastAPI のスレッドプールで実行される def で定義する。
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenor_collector.api import channel_endpoint, tag_ranks_endpoint
from tenor_collector.config import PORT

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Tenor Collector API")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"])

    @app.get("/api/channel")
    def channel(request: Request) -> JSONResponse:
        status, body = channel_endpoint(request.query_params)
        return JSONResponse(body, status_code=status)

    @app.get("/api/gif-ranks")
    def gif_ranks(request: Request) -> JSONResponse:
        status, body = tag_ranks_endpoint(request.query_params)
        return JSONResponse(body, status_code=status)

    return app


app = create_app()


def serve() -> None:
    """uvicorn でサーバーを起動する."""
    import uvicorn

    logger.info("API サーバー起動: http://localhost:%d", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
