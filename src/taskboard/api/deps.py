"""
API依存関係

目的・理由:
- 起動時に作成したDatabaseをリクエストハンドラーへ注入する
- テストではget_databaseを差し替えてインメモリ実装を使う

前提条件・制約:
- lifespanでapp.state.databaseが設定されていること
"""

from fastapi import Depends, Request

from taskboard.db.gateway import Database
from taskboard.repositories import ProjectRepository, TaskRepository


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized. Application lifespan has not started.")
    return database


def get_task_repository(db: Database = Depends(get_database)) -> TaskRepository:
    return TaskRepository(db)


def get_project_repository(db: Database = Depends(get_database)) -> ProjectRepository:
    return ProjectRepository(db)
