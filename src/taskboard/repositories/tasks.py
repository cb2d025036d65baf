"""
タスクリポジトリ

目的・理由:
- タスクに関するすべての整合性ルールをこの層で保証する
  - 名前の一意性（作成・名前変更時）
  - プロジェクト割り当て時の参照先存在チェック
  - createdAt/updatedAt/doneDate/startDateの自動設定
- 違反時は種類別のドメインエラー（errors.py）を送出する

影響範囲:
- tasksコレクション（参照・更新）、projectsコレクション（参照のみ）

前提条件・制約:
- 名前の一意性チェックと挿入の間はロックしない。
  同時作成の重複はDBの一意インデックスでConflictErrorになる
- projectIdは割り当て時点でのみ存在チェックする（外部キーではない）
"""

import logging
from datetime import date
from typing import Optional, Union
from uuid import UUID

from taskboard.db.gateway import Between, Contains, Database, In
from taskboard.errors import ConflictError, InvalidArgumentError, NotFoundError
from taskboard.models.common import SortOrder, parse_id, utcnow
from taskboard.models.task import Task, TaskCreate, TaskStatus, TaskUpdate
from taskboard.repositories.common import day_bounds, resolve_sort


logger = logging.getLogger(__name__)

TASK_SORT_FIELDS = {
    "name": "name",
    "status": "status",
    "startDate": "start_date",
    "dueDate": "due_date",
    "doneDate": "done_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _coerce_status(status: Union[TaskStatus, str]) -> TaskStatus:
    try:
        return TaskStatus(status)
    except ValueError:
        raise InvalidArgumentError('Status must be either "TODO" or "DONE"') from None


def _duplicate(name: str) -> ConflictError:
    return ConflictError(f'A task with the name "{name}" already exists.')


class TaskRepository:
    """
    タスクリポジトリ

    目的・理由:
    - API層から呼ばれるタスク操作の窓口
    - ストレージはDatabaseインターフェース経由で注入される

    前提条件・制約:
    - 1操作あたりのストレージ往復は最大でも数回（ロック・リトライなし）
    """

    def __init__(self, db: Database):
        self._db = db

    async def list_tasks(self, status: Optional[Union[TaskStatus, str]] = None) -> list[Task]:
        """タスク一覧取得（statusの完全一致で絞り込み可能）"""
        where = {"status": _coerce_status(status)} if status else None
        documents = await self._db.tasks.find(where)
        return [Task.model_validate(doc) for doc in documents]

    async def list_tasks_sorted(self, field: str, order: Union[SortOrder, str] = SortOrder.ASC) -> list[Task]:
        """
        ソート済みタスク一覧取得

        前提条件・制約:
        - fieldはTASK_SORT_FIELDSのいずれか（それ以外はInvalidArgumentError）
        """
        column, descending = resolve_sort(field, order, TASK_SORT_FIELDS)
        documents = await self._db.tasks.find(order_by=column, descending=descending)
        return [Task.model_validate(doc) for doc in documents]

    async def search_tasks_by_name(self, name: str) -> list[Task]:
        """名前の部分一致検索（大文字小文字を区別しない）"""
        documents = await self._db.tasks.find({"name": Contains(name)})
        return [Task.model_validate(doc) for doc in documents]

    async def list_tasks_by_project_name(self, project_name: str) -> list[Task]:
        """
        プロジェクト名でタスクを絞り込み

        目的・理由:
        - プロジェクト名の部分一致で1件のプロジェクトを特定し、そのタスクを返す

        前提条件・制約:
        - 複数のプロジェクトが一致した場合は、名前が完全一致（大文字小文字無視）する
          プロジェクトを優先し、なければ最も古く作成されたプロジェクトを使う
        - 一致するプロジェクトがなければNotFoundError
        """
        projects = await self._db.projects.find(
            {"name": Contains(project_name)}, order_by="created_at"
        )
        if not projects:
            raise NotFoundError("Project not found")

        lowered = project_name.lower()
        project = next((p for p in projects if p["name"].lower() == lowered), projects[0])

        documents = await self._db.tasks.find({"project_id": project["id"]})
        return [Task.model_validate(doc) for doc in documents]

    async def get_task(self, task_id: Union[UUID, str]) -> Task:
        """タスク詳細取得（存在しない場合はNotFoundError）"""
        document = await self._db.tasks.find_one({"id": parse_id(task_id, "Task")})
        if document is None:
            raise NotFoundError(f"Task {task_id} not found")
        return Task.model_validate(document)

    async def create_task(self, draft: TaskCreate) -> UUID:
        """
        タスク作成

        目的・理由:
        - 同名タスクが存在する場合はConflictError
        - statusは入力に関わらずTODO、createdAt/updatedAtは同じ現在時刻

        影響範囲:
        - tasksコレクション（INSERT）
        """
        if await self._db.tasks.find_one({"name": draft.name}):
            raise _duplicate(draft.name)

        now = utcnow()
        task_id = await self._db.tasks.insert_one({
            "name": draft.name,
            "status": TaskStatus.TODO,
            "start_date": draft.start_date,
            "due_date": draft.due_date,
            "created_at": now,
            "updated_at": now,
        })

        logger.info("Task created: %s (%s)", task_id, draft.name)
        return task_id

    async def update_task(self, task_id: Union[UUID, str], patch: TaskUpdate) -> int:
        """
        タスク部分更新

        目的・理由:
        - 指定されたフィールドのみ更新し、未指定のフィールドは保存値を維持
        - updatedAtは常に現在時刻で上書き

        前提条件・制約:
        - 名前の重複チェックはpatchに名前が含まれる場合のみ、他のタスクに対して行う
        - 戻り値は更新件数（0または1）
        """
        oid = parse_id(task_id, "Task")
        changes = patch.to_patch()

        name = changes.get("name")
        if name is not None:
            existing = await self._db.tasks.find_one({"name": name})
            if existing and existing["id"] != oid:
                raise _duplicate(name)

        changes["updated_at"] = utcnow()
        result = await self._db.tasks.update_one({"id": oid}, changes)

        logger.info("Task updated: %s (modified=%d)", oid, result.modified_count)
        return result.modified_count

    async def delete_task(self, task_id: Union[UUID, str]) -> int:
        """タスク削除（戻り値は削除件数）"""
        oid = parse_id(task_id, "Task")
        deleted = await self._db.tasks.delete_one({"id": oid})

        logger.info("Task deleted: %s (deleted=%d)", oid, deleted)
        return deleted

    async def set_task_status(self, task_id: Union[UUID, str], status: Union[TaskStatus, str]) -> int:
        """
        タスクステータス更新

        目的・理由:
        - DONEにした場合はdoneDateを現在時刻に設定
        - TODOに戻した場合はstartDateを現在時刻に設定（doneDateは維持）
        - 遷移の制限はない（DONE→TODO、TODO→DONEともに可能）

        影響範囲:
        - tasksコレクション（UPDATE）
        """
        oid = parse_id(task_id, "Task")
        status = _coerce_status(status)

        now = utcnow()
        changes = {"status": status, "updated_at": now}
        if status is TaskStatus.DONE:
            changes["done_date"] = now
        elif status is TaskStatus.TODO:
            changes["start_date"] = now

        result = await self._db.tasks.update_one({"id": oid}, changes)

        logger.info("Task status changed: %s -> %s", oid, status.value)
        return result.modified_count

    async def assign_task_to_project(self, task_id: Union[UUID, str], project_id: Union[UUID, str]) -> int:
        """
        タスクをプロジェクトに割り当て

        目的・理由:
        - 割り当て時点でプロジェクトが存在することを保証

        前提条件・制約:
        - プロジェクトが存在しない場合はNotFoundError（タスクは変更しない）
        - 戻り値は一致件数。割り当て済みでも1を返す
        """
        project_oid = parse_id(project_id, "Project")
        task_oid = parse_id(task_id, "Task")

        if await self._db.projects.find_one({"id": project_oid}) is None:
            raise NotFoundError("Project not found")

        result = await self._db.tasks.update_one(
            {"id": task_oid},
            {"project_id": project_oid, "updated_at": utcnow()},
        )

        logger.info("Task %s assigned to project %s (matched=%d)", task_oid, project_oid, result.matched_count)
        return result.matched_count

    async def list_tasks_with_projects_ending_on(self, day: date) -> list[Task]:
        """指定日（UTC）に終了するプロジェクトに属するタスク一覧"""
        start, end = day_bounds(day)
        projects = await self._db.projects.find({"end_date": Between(start, end)})
        if not projects:
            return []

        documents = await self._db.tasks.find({"project_id": In(tuple(p["id"] for p in projects))})
        return [Task.model_validate(doc) for doc in documents]
