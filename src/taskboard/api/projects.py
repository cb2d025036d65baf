"""
プロジェクト管理API

目的・理由:
- プロジェクトの一覧・CRUDを提供
- 削除時はタスクのprojectId解除までProjectRepositoryが行う

影響範囲:
- プロジェクトデータ、タスクデータ（削除時）

前提条件・制約:
- /sort は /{project_id} より先に登録すること
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from taskboard.api.deps import get_project_repository
from taskboard.models import Project, ProjectCreate, ProjectUpdate, SortOrder
from taskboard.repositories import ProjectRepository


router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(
    repo: ProjectRepository = Depends(get_project_repository),
) -> list[Project]:
    return await repo.list_projects()


@router.get("/sort", response_model=list[Project])
async def list_sorted_projects(
    sort_field: str = Query(..., alias="sortField"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
    repo: ProjectRepository = Depends(get_project_repository),
) -> list[Project]:
    """
    ソート済みプロジェクト一覧取得

    前提条件・制約:
    - sortFieldは name/startDate/endDate/createdAt/updatedAt
    """
    return await repo.list_projects_sorted(sort_field, sort_order)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    repo: ProjectRepository = Depends(get_project_repository),
) -> Project:
    return await repo.get_project(project_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    repo: ProjectRepository = Depends(get_project_repository),
) -> dict:
    """
    プロジェクト作成

    目的・理由:
    - 新規プロジェクトを登録
    - 同名プロジェクトが存在する場合は409
    """
    project_id = await repo.create_project(project)
    return {"message": "Project created successfully", "projectId": str(project_id)}


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    project: ProjectUpdate,
    repo: ProjectRepository = Depends(get_project_repository),
):
    """
    プロジェクト更新

    前提条件・制約:
    - 送信されたフィールドのみ更新
    - プロジェクトが存在しない場合は404
    """
    modified_count = await repo.update_project(project_id, project)
    if not modified_count:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Project not found"},
        )

    return {"message": "Project updated successfully", "modifiedCount": modified_count}


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    repo: ProjectRepository = Depends(get_project_repository),
):
    """
    プロジェクト削除

    目的・理由:
    - プロジェクトを削除し、紐づくタスクのprojectIdを解除（タスクは残す）

    前提条件・制約:
    - プロジェクトが存在しない場合は404（タスクには触れない）
    """
    deleted_count = await repo.delete_project(project_id)
    if not deleted_count:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Project not found"},
        )

    return {"message": "Project deleted successfully", "deletedCount": deleted_count}
