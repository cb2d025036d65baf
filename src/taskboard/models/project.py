"""
プロジェクトモデル定義

目的: プロジェクトのエンティティと作成・更新リクエストモデルを定義
理由: Pydanticによるバリデーション、型安全性、OpenAPI自動生成
影響範囲: プロジェクトリポジトリ、すべてのプロジェクトAPI
前提条件: なし
"""

from typing import Optional
from uuid import UUID

from pydantic import Field

from taskboard.models.common import CamelModel, PatchModel, UtcDatetime


class Project(CamelModel):
    """保存済みプロジェクト"""
    id: UUID
    name: str
    description: Optional[str] = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ProjectCreate(CamelModel):
    """
    プロジェクト作成リクエストモデル

    目的: POST /projects のリクエストボディ
    理由: name/startDate/endDateは必須、descriptionは任意
    影響範囲: POST /projects
    前提条件: nameは3〜50文字
    """
    name: str = Field(..., min_length=3, max_length=50)
    description: Optional[str] = None
    start_date: UtcDatetime
    end_date: UtcDatetime


class ProjectUpdate(PatchModel):
    """
    プロジェクト更新リクエストモデル

    目的: PUT /projects/{id} のリクエストボディ
    理由: すべてのフィールドが任意（部分更新）
    影響範囲: PUT /projects/{id}
    前提条件: なし
    """
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
