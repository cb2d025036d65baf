"""
プロジェクトリポジトリ

目的・理由:
- プロジェクト名の一意性を保証
- 削除時に参照しているタスクのprojectIdを解除（タスク自体は削除しない）

影響範囲:
- projectsコレクション、tasksコレクション（削除時のprojectId解除）

前提条件・制約:
- 削除と参照解除は1トランザクションで実行する
"""

import logging
from datetime import date
from typing import Union
from uuid import UUID

from taskboard.db.gateway import Between, Database, In
from taskboard.errors import ConflictError, NotFoundError
from taskboard.models.common import SortOrder, parse_id, utcnow
from taskboard.models.project import Project, ProjectCreate, ProjectUpdate
from taskboard.repositories.common import day_bounds, resolve_sort


logger = logging.getLogger(__name__)

PROJECT_SORT_FIELDS = {
    "name": "name",
    "startDate": "start_date",
    "endDate": "end_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _duplicate(name: str) -> ConflictError:
    return ConflictError(f'A project with the name "{name}" already exists.')


class ProjectRepository:
    """プロジェクト操作の窓口"""

    def __init__(self, db: Database):
        self._db = db

    async def list_projects(self) -> list[Project]:
        documents = await self._db.projects.find()
        return [Project.model_validate(doc) for doc in documents]

    async def list_projects_sorted(self, field: str, order: Union[SortOrder, str] = SortOrder.ASC) -> list[Project]:
        """
        ソート済みプロジェクト一覧取得

        前提条件・制約:
        - fieldはPROJECT_SORT_FIELDSのいずれか（それ以外はInvalidArgumentError）
        """
        column, descending = resolve_sort(field, order, PROJECT_SORT_FIELDS)
        documents = await self._db.projects.find(order_by=column, descending=descending)
        return [Project.model_validate(doc) for doc in documents]

    async def get_project(self, project_id: Union[UUID, str]) -> Project:
        document = await self._db.projects.find_one({"id": parse_id(project_id, "Project")})
        if document is None:
            raise NotFoundError(f"Project {project_id} not found")
        return Project.model_validate(document)

    async def create_project(self, draft: ProjectCreate) -> UUID:
        """
        プロジェクト作成

        目的・理由:
        - 同名プロジェクトが存在する場合はConflictError
        - createdAt/updatedAtは同じ現在時刻
        """
        if await self._db.projects.find_one({"name": draft.name}):
            raise _duplicate(draft.name)

        now = utcnow()
        project_id = await self._db.projects.insert_one({
            "name": draft.name,
            "description": draft.description,
            "start_date": draft.start_date,
            "end_date": draft.end_date,
            "created_at": now,
            "updated_at": now,
        })

        logger.info("Project created: %s (%s)", project_id, draft.name)
        return project_id

    async def update_project(self, project_id: Union[UUID, str], patch: ProjectUpdate) -> int:
        """
        プロジェクト部分更新

        前提条件・制約:
        - 名前の重複チェックはpatchに名前が含まれる場合のみ、他のプロジェクトに対して行う
        - updatedAtは常に現在時刻で上書き
        - 戻り値は更新件数（0または1）
        """
        oid = parse_id(project_id, "Project")
        changes = patch.to_patch()

        name = changes.get("name")
        if name is not None:
            existing = await self._db.projects.find_one({"name": name})
            if existing and existing["id"] != oid:
                raise _duplicate(name)

        changes["updated_at"] = utcnow()
        result = await self._db.projects.update_one({"id": oid}, changes)

        logger.info("Project updated: %s (modified=%d)", oid, result.modified_count)
        return result.modified_count

    async def delete_project(self, project_id: Union[UUID, str]) -> int:
        """
        プロジェクト削除

        目的・理由:
        - プロジェクトを削除し、実際に削除された場合のみ
          参照しているすべてのタスクのprojectIdを解除する
        - 削除と解除を1トランザクションで行い、参照の取り残しを防ぐ

        影響範囲:
        - projectsコレクション（DELETE）、tasksコレクション（UPDATE）

        前提条件・制約:
        - 戻り値は削除件数（0または1）
        """
        oid = parse_id(project_id, "Project")

        async with self._db.transaction() as tx:
            deleted = await tx.projects.delete_one({"id": oid})
            if deleted:
                result = await tx.tasks.update_many(
                    {"project_id": oid},
                    {"updated_at": utcnow()},
                    unset_fields=("project_id",),
                )
                logger.info("Project deleted: %s (%d task(s) unlinked)", oid, result.modified_count)

        return deleted

    async def list_projects_with_tasks_due_on(self, day: date) -> list[Project]:
        """指定日（UTC）が期限のタスクを持つプロジェクト一覧"""
        start, end = day_bounds(day)
        tasks = await self._db.tasks.find({"due_date": Between(start, end)})

        project_ids = {t["project_id"] for t in tasks if t.get("project_id") is not None}
        if not project_ids:
            return []

        documents = await self._db.projects.find({"id": In(tuple(project_ids))}, order_by="created_at")
        return [Project.model_validate(doc) for doc in documents]
