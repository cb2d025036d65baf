"""
リクエストログミドルウェア

目的・理由:
- すべてのリクエストとレスポンスステータスをログに出力する
- 未処理例外で終わったリクエストも500として記録する

影響範囲:
- すべてのAPIエンドポイント
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger(__name__)


def _request_target(request: Request) -> str:
    # クエリ文字列を含めたパス（例: /tasks/sort?sortField=name）
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        target = _request_target(request)
        logger.info("Request: %s %s", request.method, target)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Response: 500 - %s %s", request.method, target)
            raise

        logger.info("Response: %d - %s %s", response.status_code, request.method, target)
        return response
