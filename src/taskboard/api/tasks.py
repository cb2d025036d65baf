"""
タスク管理API

目的・理由:
- タスクの一覧・検索・CRUD・ステータス変更・プロジェクト割り当てを提供
- 整合性ルールはTaskRepositoryに任せ、ここではHTTPとの変換のみ行う

影響範囲:
- タスクデータ（PostgreSQL）

前提条件・制約:
- 固定パス（/sort, /search, /filter）は /{task_id} より先に登録すること
- エラーはapi.errorsの例外ハンドラーでHTTPステータスに変換される
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from taskboard.api.deps import get_task_repository
from taskboard.models import SortOrder, Task, TaskCreate, TaskStatus, TaskStatusUpdate, TaskUpdate
from taskboard.repositories import TaskRepository


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[Task])
async def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    repo: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    """
    タスク一覧取得

    目的・理由:
    - 全タスクを取得（ページネーションなし）
    - statusクエリで完全一致の絞り込み
    """
    return await repo.list_tasks(status_filter)


@router.get("/sort", response_model=list[Task])
async def list_sorted_tasks(
    sort_field: str = Query(..., alias="sortField"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
    repo: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    """
    ソート済みタスク一覧取得

    前提条件・制約:
    - sortFieldは name/status/startDate/dueDate/doneDate/createdAt/updatedAt
    - sortOrderは asc/desc（省略時はasc）
    """
    return await repo.list_tasks_sorted(sort_field, sort_order)


@router.get("/search", response_model=list[Task])
async def search_tasks(
    name: str = Query(...),
    repo: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    """タスク名の部分一致検索（大文字小文字を区別しない）"""
    return await repo.search_tasks_by_name(name)


@router.get("/filter", response_model=list[Task])
async def filter_tasks_by_project(
    project_name: str = Query(..., alias="projectName"),
    repo: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    """
    プロジェクト名でタスクを絞り込み

    前提条件・制約:
    - 一致するプロジェクトがない場合は404
    """
    return await repo.list_tasks_by_project_name(project_name)


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    return await repo.get_task(task_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    repo: TaskRepository = Depends(get_task_repository),
) -> dict:
    """
    タスク作成

    目的・理由:
    - 新規タスクを登録（statusは常にTODO）
    - 同名タスクが存在する場合は409
    """
    task_id = await repo.create_task(task)
    return {"message": "Task created successfully", "taskId": str(task_id)}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    task: TaskUpdate,
    repo: TaskRepository = Depends(get_task_repository),
) -> dict:
    """
    タスク更新

    目的・理由:
    - 指定されたフィールドのみ更新（部分更新）
    - 名前が他のタスクと重複する場合は409
    """
    modified_count = await repo.update_task(task_id, task)
    return {"message": "Task updated successfully", "modifiedCount": modified_count}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
) -> dict:
    deleted_count = await repo.delete_task(task_id)
    return {"message": "Task deleted successfully", "deletedCount": deleted_count}


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    body: TaskStatusUpdate,
    repo: TaskRepository = Depends(get_task_repository),
) -> dict:
    """
    タスクステータス更新

    目的・理由:
    - DONEでdoneDate、TODOでstartDateを自動設定
    """
    modified_count = await repo.set_task_status(task_id, body.status)
    return {"message": "Task status updated successfully", "modifiedCount": modified_count}


@router.patch("/{task_id}/project/{project_id}")
async def assign_task_to_project(
    task_id: str,
    project_id: str,
    repo: TaskRepository = Depends(get_task_repository),
):
    """
    タスクのプロジェクト割り当て

    前提条件・制約:
    - プロジェクトが存在しない場合は404（NotFoundError）
    - タスクが存在しない場合も404
    """
    matched_count = await repo.assign_task_to_project(task_id, project_id)
    if not matched_count:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Task not found"},
        )

    return {"message": "Task assigned to project successfully"}
