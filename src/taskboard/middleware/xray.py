"""
X-Rayミドルウェア

目的・理由:
- FastAPIリクエストをX-Rayでトレーシング
- ALBから送信されるX-Amzn-Trace-Idヘッダーを読み取り、トレースを継続
- カスタム属性（Annotations/Metadata）を追加

影響範囲:
- すべてのAPIエンドポイント
- X-Rayトレース送信

前提条件・制約:
- X-Ray Daemonが稼働していること（UDP 2000番ポート）
- XRAY_ENABLED=falseの場合、セグメントはダミーとなり送信されない
- セグメントはasyncioタスク単位で保持する（同時リクエスト間で共有しない）
"""

import asyncio
from typing import Callable, Optional

from aws_xray_sdk import global_sdk_config
from aws_xray_sdk.core import xray_recorder
from aws_xray_sdk.core.async_context import AsyncContext
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from taskboard.config import Settings


def configure_xray(settings: Settings) -> None:
    """
    X-Ray Recorderの設定

    前提条件・制約:
    - アプリケーション起動時に1回だけ呼ぶ
    """
    global_sdk_config.set_sdk_enabled(settings.xray_enabled)
    xray_recorder.configure(
        service=settings.xray_service_name,
        daemon_address=settings.xray_daemon_address,
        sampling=True,
        context_missing="LOG_ERROR",  # コンテキストがない場合はログ出力
    )


def bind_async_context(loop: asyncio.AbstractEventLoop) -> None:
    """
    X-Rayコンテキストをイベントループに紐づける

    目的・理由:
    - 既定のContextはスレッドローカルのため、同一ループ上の同時リクエストが
      1つのセグメントを奪い合う
    - AsyncContextはタスク単位で保持し、子タスクへ引き継ぐ

    前提条件・制約:
    - 実行中のループ上で呼ぶこと（タスクファクトリをそのループに設定する）
    """
    xray_recorder.configure(
        context=AsyncContext(loop=loop),
        context_missing="LOG_ERROR",
    )


def _trace_header_value(trace_header: Optional[str], key: str) -> Optional[str]:
    # 形式: Root=1-67890abc-def1234567890abc;Parent=1234567890abcdef;Sampled=1
    if not trace_header:
        return None

    for part in trace_header.split(";"):
        part = part.strip()
        if part.startswith(f"{key}="):
            return part[len(key) + 1:].strip()

    return None


class XRayMiddleware(BaseHTTPMiddleware):
    """
    X-Rayトレーシングミドルウェア

    目的・理由:
    - FastAPIリクエストごとにX-Rayセグメントを作成
    - ALBから送信されるトレースIDを継承

    影響範囲:
    - すべてのAPIエンドポイント
    """

    def __init__(self, app, environment: str = "development", version: str = "1.0.0"):
        super().__init__(app)
        self.environment = environment
        self.version = version
        self._bound_loop = None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if global_sdk_config.sdk_enabled():
            loop = asyncio.get_running_loop()
            if self._bound_loop is not loop:
                bind_async_context(loop)
                self._bound_loop = loop

        trace_header = request.headers.get("X-Amzn-Trace-Id")
        sampled = _trace_header_value(trace_header, "Sampled")

        # X-Rayセグメント開始
        segment = xray_recorder.begin_segment(
            name=f"{request.method} {request.url.path}",
            traceid=_trace_header_value(trace_header, "Root"),
            parent_id=_trace_header_value(trace_header, "Parent"),
            sampling=int(sampled) if sampled in ("0", "1") else 1,
        )

        try:
            segment.put_annotation("environment", self.environment)
            segment.put_annotation("version", self.version)
            segment.put_annotation("method", request.method)
            segment.put_annotation("path", request.url.path)
            segment.put_metadata(
                "request",
                {
                    "method": request.method,
                    "path": request.url.path,
                    "query_params": str(request.query_params),
                },
            )

            response = await call_next(request)

            segment.put_annotation("http_status", response.status_code)
            return response

        except Exception as e:
            # エラー情報をX-Rayに記録
            segment.put_metadata("error", {"message": str(e), "type": type(e).__name__})
            raise

        finally:
            xray_recorder.end_segment()
