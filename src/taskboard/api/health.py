"""
ヘルスチェックAPI

目的・理由:
- ALBヘルスチェック用エンドポイントを提供
- アプリケーションとDBの稼働状態を確認

影響範囲:
- ALBヘルスチェック（/health）
- 監視システム（CloudWatch等）

前提条件・制約:
- DB接続が必要（DB接続チェックのため）
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from taskboard.api.deps import get_database
from taskboard.db.gateway import Database


logger = logging.getLogger(__name__)

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health")
async def health_check(request: Request, db: Database = Depends(get_database)) -> JSONResponse:
    """
    ヘルスチェックエンドポイント

    目的・理由:
    - DB接続状態を確認し、異常時は503を返す
    """
    version = request.app.version

    try:
        await db.ping()
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "reason": f"Database connection failed: {e}",
                "timestamp": _timestamp(),
            },
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "timestamp": _timestamp(),
            "version": version,
        },
    )
