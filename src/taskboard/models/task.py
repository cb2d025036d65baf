"""
タスクモデル定義

目的: タスクのエンティティと作成・更新リクエストモデルを定義
理由: Pydanticによるバリデーション、型安全性、OpenAPI自動生成
影響範囲: タスクリポジトリ、すべてのタスクAPI
前提条件: なし
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from taskboard.models.common import CamelModel, PatchModel, UtcDatetime


class TaskStatus(str, Enum):
    """
    タスクステータス列挙型

    目的: ステータスの型安全性確保
    理由: 不正な値の入力を防ぐ
    影響範囲: タスク作成・ステータス更新API
    前提条件: DB側でもCHECK制約が必要
    """
    TODO = "TODO"
    DONE = "DONE"


class Task(CamelModel):
    """
    タスクエンティティ

    目的: 保存済みタスクの形を表す
    理由: リポジトリの戻り値およびAPIレスポンスとして共用
    影響範囲: すべてのタスクAPI
    前提条件: created_at/updated_atはサーバー側で設定されること
    """
    id: UUID
    name: str
    status: TaskStatus
    start_date: UtcDatetime
    due_date: UtcDatetime
    created_at: UtcDatetime
    updated_at: UtcDatetime
    done_date: Optional[UtcDatetime] = None
    project_id: Optional[UUID] = None


class TaskCreate(CamelModel):
    """
    タスク作成リクエストモデル

    目的: POST /tasks のリクエストボディ
    理由: statusは受け付けるが、作成時は常にTODOとして保存される
    影響範囲: POST /tasks
    前提条件: nameは3〜50文字
    """
    name: str = Field(..., min_length=3, max_length=50)
    start_date: UtcDatetime
    due_date: UtcDatetime
    status: TaskStatus = TaskStatus.TODO


class TaskUpdate(PatchModel):
    """
    タスク更新リクエストモデル

    目的: PUT /tasks/{id} のリクエストボディ
    理由: すべてのフィールドが任意（部分更新）
    影響範囲: PUT /tasks/{id}
    前提条件: ステータスとプロジェクトは専用APIで更新する
    """
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    start_date: Optional[UtcDatetime] = None
    due_date: Optional[UtcDatetime] = None


class TaskStatusUpdate(CamelModel):
    """PATCH /tasks/{id}/status のリクエストボディ"""
    status: TaskStatus
