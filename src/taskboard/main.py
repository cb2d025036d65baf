"""
FastAPIエントリポイント

目的・理由:
- タスク・プロジェクト管理APIを提供する
- AWS X-Rayトレーシングを統合し、分散トレーシングを実現する

影響範囲:
- すべてのAPIエンドポイント（/, /health, /tasks, /projects）
- X-Rayトレース送信（X-Ray Daemon経由）

前提条件・制約:
- PostgreSQLが稼働していること
- 環境変数が設定されていること（DATABASE_URL等、config.py参照）
- 起動: uvicorn taskboard.main:app
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.api import health, projects, tasks
from taskboard.api.errors import register_exception_handlers
from taskboard.config import Settings
from taskboard.db.postgres import PostgresDatabase, connect, disconnect
from taskboard.log import configure_logging
from taskboard.middleware import RequestLoggingMiddleware, XRayMiddleware, configure_xray


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPIアプリケーション生成

    目的・理由:
    - 設定を受け取ってアプリケーションを組み立てる（テストで設定を差し替え可能）

    前提条件・制約:
    - settings省略時は環境変数から読み込む
    """
    settings = settings or Settings.from_env()
    logger = configure_logging(settings)
    configure_xray(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        アプリケーションのライフサイクル管理

        目的・理由:
        - アプリ起動時にDB接続プールを初期化し、Databaseとして注入可能にする
        - アプリ終了時にDB接続を適切にクローズ
        """
        # 起動時処理
        pool = await connect(settings)
        app.state.database = PostgresDatabase(pool)
        logger.info("Taskboard API started (environment=%s)", settings.environment)
        try:
            yield
        finally:
            # 終了時処理
            app.state.database = None
            await disconnect(pool)

    app = FastAPI(
        title="Taskboard API",
        description="タスク・プロジェクト管理API（AWS X-Rayトレーシング対応）",
        version=settings.version,
        lifespan=lifespan,
    )

    # CORSミドルウェア（本番では制限すべき）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(XRayMiddleware, environment=settings.environment, version=settings.version)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(tasks.router)
    app.include_router(projects.router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """ルートエンドポイント（APIの稼働確認）"""
        return {
            "message": "Taskboard API",
            "version": settings.version,
            "docs": "/docs",
        }

    return app


app = create_app()
